"""
Narration stage - voice-over for the script.
"""

from content_studio.config import DEFAULT_VOICE
from content_studio.core import AudioDecodeError, get_logger
from content_studio.services.gemini import AudioPayload, ModelServiceClient

logger = get_logger(__name__, component="narration_stage")


class NarrationGenerator:
    """Synthesizes the script with a fixed prebuilt voice."""

    def __init__(self, service: ModelServiceClient, voice: str = DEFAULT_VOICE):
        self.service = service
        self.voice = voice

    async def generate(self, script: str) -> AudioPayload:
        payload = await self.service.synthesize_speech(script, self.voice)
        if payload is None or not payload.data:
            raise AudioDecodeError("No audio data received from TTS API.")
        logger.info(
            "Narration synthesized",
            extra={"voice": self.voice, "bytes": len(payload.data), "mime_type": payload.mime_type},
        )
        return payload
