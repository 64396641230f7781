"""
Realtime transcription session

Streams microphone audio to the live model and accumulates the input
transcription it sends back.

State machine:
    IDLE -> STARTING -> STREAMING -> STOPPED -> IDLE
                  \\           \\
                   +-> ERRORED -+-> IDLE

All capture resources for one session live in a single SessionResources
bundle whose release() tears every piece down exactly once.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Set

import numpy as np

from content_studio.config import (
    TRANSCRIPTION_BLOCK_SIZE,
    TRANSCRIPTION_ERROR_MESSAGE,
    TRANSCRIPTION_SAMPLE_RATE,
)
from content_studio.core import (
    CredentialProvider,
    InvalidCredentialError,
    MicrophoneUnavailableError,
    SessionAlreadyActiveError,
    StudioError,
    TranscriptionError,
    get_credential_provider,
    get_logger,
)
from content_studio.core.media import encode_base64, float_to_pcm16
from content_studio.models import TranscriptionState
from content_studio.services.gemini import (
    LiveCallbacks,
    LiveMessage,
    LiveSessionConfig,
    ModelServiceClient,
    RealtimeAudioChunk,
    RealtimeSession,
)

from .capture import AudioCaptureBackend, AudioContext, AudioNode, MicrophoneStream

logger = get_logger(__name__, component="transcription")

TranscriptListener = Callable[[str], None]


def pcm_mime_type(sample_rate: int) -> str:
    return f"audio/pcm;rate={sample_rate}"


def _best_effort(step: str, action: Callable[[], None]) -> None:
    """Run one teardown step; a failure is logged and does not stop the others."""
    try:
        action()
    except Exception as exc:
        logger.warning(f"Teardown step failed: {step}", extra={"error": str(exc)})


@dataclass
class SessionResources:
    """Everything one transcription session holds open."""

    stream: Optional[MicrophoneStream] = None
    context: Optional[AudioContext] = None
    source: Optional[AudioNode] = None
    processor: Optional[AudioNode] = None
    session: Optional[RealtimeSession] = None

    def release(self) -> Optional[RealtimeSession]:
        """Stop tracks, disconnect nodes and close the context.

        Returns the realtime session, detached from the bundle, so the caller
        can close it asynchronously. A second call is a no-op returning None.
        """
        stream, self.stream = self.stream, None
        if stream is not None:
            for track in stream.get_tracks():
                _best_effort("stop microphone track", track.stop)

        processor, self.processor = self.processor, None
        if processor is not None:
            _best_effort("disconnect processor", processor.disconnect)

        source, self.source = self.source, None
        if source is not None:
            _best_effort("disconnect source", source.disconnect)

        context, self.context = self.context, None
        if context is not None and not context.closed:
            _best_effort("close audio context", context.close)

        session, self.session = self.session, None
        return session


class RealtimeTranscriber:
    """One microphone, one live session, one accumulated transcript."""

    def __init__(
        self,
        service: ModelServiceClient,
        capture: AudioCaptureBackend,
        sample_rate: int = TRANSCRIPTION_SAMPLE_RATE,
        block_size: int = TRANSCRIPTION_BLOCK_SIZE,
        on_transcript: Optional[TranscriptListener] = None,
        credentials: Optional[CredentialProvider] = None,
    ):
        self.service = service
        self.credentials = credentials
        self.capture = capture
        self.sample_rate = sample_rate
        self.block_size = block_size
        self.on_transcript = on_transcript

        self.state = TranscriptionState.IDLE
        self.transcript = ""
        self.error: Optional[str] = None

        self._resources: Optional[SessionResources] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._pending_closes: Set[asyncio.Task] = set()

    @property
    def is_active(self) -> bool:
        return self._resources is not None

    async def start(self) -> None:
        """Acquire the microphone and open the live session.

        Raises:
            SessionAlreadyActiveError: a session is already starting or streaming
            MicrophoneUnavailableError: no capture capability or access denied
            TranscriptionError: the session could not be opened
        """
        if self._resources is not None or self.state is not TranscriptionState.IDLE:
            raise SessionAlreadyActiveError("A transcription session is already active.")

        self.state = TranscriptionState.STARTING
        self.transcript = ""
        self.error = None
        self._loop = asyncio.get_running_loop()

        resources = SessionResources()
        self._resources = resources

        try:
            if not self.capture.is_available():
                raise MicrophoneUnavailableError("Your platform does not support audio recording.")

            resources.stream = self.capture.open_microphone()
            resources.context = self.capture.create_context(self.sample_rate)

            session = await self.service.open_realtime_audio_session(
                LiveSessionConfig(),
                LiveCallbacks(
                    on_open=lambda: self._handle_open(resources),
                    on_message=lambda message: self._handle_message(resources, message),
                    on_error=lambda exc: self._handle_error(resources, exc),
                    on_close=lambda: self._handle_close(resources),
                ),
            )
        except Exception as exc:
            self.error = f"Failed to start recording: {exc}"
            logger.error("Failed to start transcription", extra={"error": str(exc)})
            self._forget_rejected_credential(exc)
            self.stop()
            if isinstance(exc, StudioError):
                raise
            raise TranscriptionError(self.error) from exc

        if self._resources is not resources:
            # stopped while the session was connecting
            self._spawn_close(session)
            return
        resources.session = session
        logger.info("Transcription session opened")

    def _handle_open(self, resources: SessionResources) -> None:
        if self._resources is not resources or resources.context is None or resources.stream is None:
            return
        try:
            resources.source = resources.context.create_source(resources.stream)
            resources.processor = resources.context.create_processor(
                self.block_size,
                lambda samples: self._handle_block(resources, samples),
            )
            resources.source.connect(resources.processor)
            resources.processor.connect()
        except Exception as exc:
            self._handle_error(resources, exc)
            return
        self.state = TranscriptionState.STREAMING
        logger.info("Microphone streaming started", extra={"sample_rate": self.sample_rate})

    def _handle_block(self, resources: SessionResources, samples: np.ndarray) -> None:
        """Capture callback; may run on the audio thread."""
        session = resources.session
        loop = self._loop
        if self._resources is not resources or session is None or loop is None:
            return

        chunk = RealtimeAudioChunk(
            data=encode_base64(float_to_pcm16(samples)),
            mime_type=pcm_mime_type(self.sample_rate),
        )
        try:
            future = asyncio.run_coroutine_threadsafe(session.send_audio_chunk(chunk), loop)
        except RuntimeError:
            logger.debug("Event loop closed; audio block dropped")
            return
        future.add_done_callback(self._log_send_failure)

    @staticmethod
    def _log_send_failure(future) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("Failed to send audio chunk", extra={"error": str(exc)})

    def _handle_message(self, resources: SessionResources, message: LiveMessage) -> None:
        if self._resources is not resources:
            return
        if message.input_transcription:
            self.transcript += message.input_transcription
            if self.on_transcript:
                self.on_transcript(self.transcript)
        if message.turn_complete:
            logger.debug("Turn complete", extra={"transcript_chars": len(self.transcript)})

    def _handle_error(self, resources: SessionResources, exc: BaseException) -> None:
        if self._resources is not resources:
            return
        logger.error("Transcription session error", extra={"error": str(exc)})
        self._forget_rejected_credential(exc)
        self.error = TRANSCRIPTION_ERROR_MESSAGE
        self.state = TranscriptionState.ERRORED
        self.stop()

    def _forget_rejected_credential(self, exc: BaseException) -> None:
        if isinstance(exc, InvalidCredentialError) and self.credentials is not None:
            logger.warning("Credential rejected by the live service; clearing it")
            self.credentials.clear()

    def _handle_close(self, resources: SessionResources) -> None:
        logger.info("Transcription session closed")
        if self._resources is resources:
            self.stop()

    def stop(self) -> None:
        """Release every resource of the current session. Idempotent."""
        resources, self._resources = self._resources, None
        if resources is None:
            self.state = TranscriptionState.IDLE
            return

        if self.state is not TranscriptionState.ERRORED:
            self.state = TranscriptionState.STOPPED

        session = resources.release()
        if session is not None:
            self._spawn_close(session)

        logger.info("Transcription stopped", extra={"outcome": self.state.value})
        self.state = TranscriptionState.IDLE

    def _spawn_close(self, session: RealtimeSession) -> None:
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.warning("No event loop available to close the realtime session")
            return
        task = loop.create_task(self._close_session(session))
        self._pending_closes.add(task)
        task.add_done_callback(self._pending_closes.discard)

    @staticmethod
    async def _close_session(session: RealtimeSession) -> None:
        try:
            await session.close()
        except Exception as exc:
            logger.warning("Failed to close realtime session", extra={"error": str(exc)})

    async def wait_closed(self) -> None:
        """Wait for detached session closes to finish."""
        if self._pending_closes:
            await asyncio.gather(*list(self._pending_closes), return_exceptions=True)

    async def aclose(self) -> None:
        self.stop()
        await self.wait_closed()


_transcriber: Optional[RealtimeTranscriber] = None


def get_transcriber() -> RealtimeTranscriber:
    """Get the process-wide transcriber"""
    global _transcriber
    if _transcriber is None:
        from content_studio.services.gemini import GeminiModelService

        from .capture import SoundDeviceCapture

        credentials = get_credential_provider()
        _transcriber = RealtimeTranscriber(
            GeminiModelService(credentials=credentials),
            SoundDeviceCapture(),
            credentials=credentials,
        )
    return _transcriber
