"""
Base classes for the model service

Defines the abstract interface the pipeline and the transcriber depend on,
and the small value types that cross it. The concrete Gemini implementation
lives in client.py; tests substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional


@dataclass
class AudioPayload:
    """Synthesized speech as returned by the service"""
    data: bytes
    mime_type: Optional[str] = None


@dataclass
class VideoOperation:
    """Handle of a long-running video synthesis job"""
    name: str
    done: bool = False
    error_message: Optional[str] = None
    uri: Optional[str] = None
    raw: Any = None  # SDK operation object, needed to re-poll


@dataclass
class RealtimeAudioChunk:
    """One realtime input message: base64 PCM plus its mime type"""
    data: str
    mime_type: str


@dataclass
class LiveMessage:
    """The parts of a realtime server message the studio reacts to"""
    input_transcription: Optional[str] = None
    turn_complete: bool = False


@dataclass
class LiveSessionConfig:
    """Session options: response modalities and input transcription"""
    response_modalities: List[str] = field(default_factory=lambda: ["AUDIO"])
    input_audio_transcription: bool = True


@dataclass
class LiveCallbacks:
    """Callbacks invoked on the event loop that opened the session"""
    on_open: Callable[[], None]
    on_message: Callable[[LiveMessage], None]
    on_error: Callable[[BaseException], None]
    on_close: Callable[[], None]


class RealtimeSession(ABC):
    """A live duplex audio/text channel."""

    @abstractmethod
    async def send_audio_chunk(self, chunk: RealtimeAudioChunk) -> None:
        """Send one realtime audio message."""

    @abstractmethod
    async def close(self) -> None:
        """Close the channel. Safe to call more than once."""


class ModelServiceClient(ABC):
    """Everything the studio asks of the generative-AI service."""

    @abstractmethod
    async def generate_structured_text(
        self,
        prompt: str,
        system_instruction: str,
        json_schema: Dict[str, Any],
    ) -> str:
        """Return the raw JSON text the model produced for the schema."""

    @abstractmethod
    async def synthesize_speech(self, text: str, voice_id: str) -> Optional[AudioPayload]:
        """Return the audio payload, or None when the response carries none."""

    @abstractmethod
    async def synthesize_image(self, prompt: str, aspect_ratio: str) -> Optional[bytes]:
        """Return image bytes, or None when the response carries none."""

    @abstractmethod
    async def submit_video_job(self, prompt: str, seed_image: bytes, aspect_ratio: str) -> VideoOperation:
        """Start a video job seeded with an image."""

    @abstractmethod
    async def poll_video_job(self, operation: VideoOperation) -> VideoOperation:
        """Fetch the latest state of a video job."""

    @abstractmethod
    async def download_video(self, uri: str) -> bytes:
        """Download a finished video; the URI requires the credential."""

    @abstractmethod
    async def open_realtime_audio_session(
        self,
        config: LiveSessionConfig,
        callbacks: LiveCallbacks,
    ) -> RealtimeSession:
        """Open a realtime session; callbacks fire as the channel progresses."""
