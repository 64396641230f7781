"""
Microphone capture

A small audio-graph interface (microphone stream with tracks, a context
that creates a source node and a block processor node) so the transcriber
can tear every piece down independently. `SoundDeviceCapture` implements it
with PortAudio through `sounddevice`.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

import numpy as np

from content_studio.core import MicrophoneUnavailableError, get_logger

logger = get_logger(__name__, component="capture")

BlockHandler = Callable[[np.ndarray], None]


class AudioTrack(ABC):
    @abstractmethod
    def stop(self) -> None:
        """Release the capture device for this track."""


class MicrophoneStream:
    """An acquired microphone: one or more live tracks."""

    def __init__(self, tracks: List[AudioTrack]):
        self._tracks = list(tracks)

    def get_tracks(self) -> List[AudioTrack]:
        return list(self._tracks)


class AudioNode(ABC):
    @abstractmethod
    def connect(self, target: Optional["AudioNode"] = None) -> None:
        """Connect to `target`, or to the context output when None."""

    @abstractmethod
    def disconnect(self) -> None:
        pass


class AudioContext(ABC):
    """Processing graph running at a fixed sample rate."""

    def __init__(self, sample_rate: int):
        self.sample_rate = sample_rate

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass

    @abstractmethod
    def create_source(self, stream: MicrophoneStream) -> AudioNode:
        pass

    @abstractmethod
    def create_processor(self, block_size: int, on_block: BlockHandler) -> AudioNode:
        """Node that hands every `block_size` mono float32 samples to `on_block`."""

    @abstractmethod
    def close(self) -> None:
        pass


class AudioCaptureBackend(ABC):
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the platform can capture audio at all."""

    @abstractmethod
    def open_microphone(self) -> MicrophoneStream:
        """Acquire the microphone.

        Raises:
            MicrophoneUnavailableError: no input device or access denied
        """

    @abstractmethod
    def create_context(self, sample_rate: int) -> AudioContext:
        pass


# === sounddevice implementation ===

def _import_sounddevice() -> Any:
    try:
        import sounddevice
    except OSError as exc:  # PortAudio shared library missing
        raise MicrophoneUnavailableError("Audio capture is not supported on this platform.") from exc
    return sounddevice


class _SoundDeviceTrack(AudioTrack):
    def __init__(self, device: Optional[int], name: str):
        self.device = device
        self.name = name
        self.stopped = False
        self._on_stop: List[Callable[[], None]] = []

    def add_stop_listener(self, listener: Callable[[], None]) -> None:
        self._on_stop.append(listener)

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        for listener in self._on_stop:
            listener()


class _SourceNode(AudioNode):
    def __init__(self, track: _SoundDeviceTrack):
        self.track = track
        self.connected_to: Optional[AudioNode] = None

    def connect(self, target: Optional[AudioNode] = None) -> None:
        if isinstance(target, _ProcessorNode):
            target.bind_track(self.track)
        self.connected_to = target

    def disconnect(self) -> None:
        if isinstance(self.connected_to, _ProcessorNode):
            self.connected_to.unbind_track()
        self.connected_to = None


class _ProcessorNode(AudioNode):
    def __init__(self, context: "SoundDeviceContext", block_size: int, on_block: BlockHandler):
        self._context = context
        self._block_size = block_size
        self._on_block = on_block
        self._track: Optional[_SoundDeviceTrack] = None
        self._stream: Any = None

    def bind_track(self, track: _SoundDeviceTrack) -> None:
        self._track = track
        track.add_stop_listener(self._close_stream)

    def unbind_track(self) -> None:
        self._track = None

    def _callback(self, indata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Capture status", extra={"status": str(status)})
        self._on_block(indata[:, 0].copy())

    def connect(self, target: Optional[AudioNode] = None) -> None:
        if self._stream is not None:
            return
        if self._track is None or self._track.stopped:
            raise MicrophoneUnavailableError("No live microphone track is connected.")
        sd = _import_sounddevice()
        try:
            self._stream = sd.InputStream(
                device=self._track.device,
                samplerate=self._context.sample_rate,
                blocksize=self._block_size,
                channels=1,
                dtype="float32",
                callback=self._callback,
            )
            self._stream.start()
        except sd.PortAudioError as exc:
            self._stream = None
            raise MicrophoneUnavailableError(f"Could not open the microphone: {exc}") from exc

    def _close_stream(self) -> None:
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.stop()
            stream.close()

    def disconnect(self) -> None:
        self._close_stream()


class SoundDeviceContext(AudioContext):
    def __init__(self, sample_rate: int):
        super().__init__(sample_rate)
        self._closed = False
        self._processors: List[_ProcessorNode] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def create_source(self, stream: MicrophoneStream) -> AudioNode:
        tracks = stream.get_tracks()
        if not tracks or not isinstance(tracks[0], _SoundDeviceTrack):
            raise MicrophoneUnavailableError("Microphone stream has no capture track.")
        return _SourceNode(tracks[0])

    def create_processor(self, block_size: int, on_block: BlockHandler) -> AudioNode:
        processor = _ProcessorNode(self, block_size, on_block)
        self._processors.append(processor)
        return processor

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for processor in self._processors:
            processor.disconnect()
        self._processors.clear()


class SoundDeviceCapture(AudioCaptureBackend):
    """Default input device via PortAudio."""

    def __init__(self, device: Optional[int] = None):
        self.device = device

    def is_available(self) -> bool:
        try:
            sd = _import_sounddevice()
            sd.query_devices(self.device, kind="input")
        except (MicrophoneUnavailableError, ValueError) as exc:
            logger.warning("No audio input available", extra={"error": str(exc)})
            return False
        return True

    def open_microphone(self) -> MicrophoneStream:
        sd = _import_sounddevice()
        try:
            info = sd.query_devices(self.device, kind="input")
        except ValueError as exc:
            raise MicrophoneUnavailableError("No microphone was found.") from exc
        logger.info("Microphone acquired", extra={"device": info.get("name")})
        return MicrophoneStream([_SoundDeviceTrack(self.device, str(info.get("name", "default")))])

    def create_context(self, sample_rate: int) -> AudioContext:
        return SoundDeviceContext(sample_rate)
