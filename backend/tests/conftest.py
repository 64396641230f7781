"""
Shared fakes for the model service and the audio capture backend.
"""

import asyncio
import json
from typing import Callable, Dict, List, Optional

import numpy as np
import pytest

from content_studio.services.gemini import (
    AudioPayload,
    LiveCallbacks,
    LiveSessionConfig,
    ModelServiceClient,
    RealtimeAudioChunk,
    RealtimeSession,
    VideoOperation,
)
from content_studio.services.transcription import (
    AudioCaptureBackend,
    AudioContext,
    AudioNode,
    AudioTrack,
    MicrophoneStream,
)

SCRIPT_JSON = json.dumps({
    "script": "Deep inside Roblox lies a badge almost nobody has earned.",
    "keywords": ["badge", "obby", "secret room", "developer", "glitch", "lobby"],
})


class FakeRealtimeSession(RealtimeSession):
    def __init__(self, callbacks: LiveCallbacks):
        self.callbacks = callbacks
        self.sent: List[RealtimeAudioChunk] = []
        self.close_calls = 0

    async def send_audio_chunk(self, chunk: RealtimeAudioChunk) -> None:
        self.sent.append(chunk)

    async def close(self) -> None:
        self.close_calls += 1


class FakeModelService(ModelServiceClient):
    """Scriptable in-memory model service that records every call."""

    def __init__(self):
        self.calls: List[tuple] = []
        self.script_text = SCRIPT_JSON
        self.audio: Optional[AudioPayload] = AudioPayload(b"\x01\x00" * 240, "audio/L16;codec=pcm;rate=24000")
        self.image_for: Callable[[str], Optional[bytes]] = lambda prompt: b"\xff\xd8" + prompt.encode()[:16]
        self.image_delays: Dict[str, float] = {}
        self.image_errors: Dict[str, BaseException] = {}
        self.cancelled_images: List[str] = []
        self.poll_results: List[VideoOperation] = [
            VideoOperation(name="operations/1", done=True, uri="https://files.example/video.mp4"),
        ]
        self.video_bytes = b"\x00\x00\x00\x18ftypmp42"
        self.errors: Dict[str, BaseException] = {}
        self.live_error: Optional[BaseException] = None
        self.sessions: List[FakeRealtimeSession] = []
        self.fire_open = True

    def _maybe_fail(self, method: str) -> None:
        if method in self.errors:
            raise self.errors[method]

    async def generate_structured_text(self, prompt, system_instruction, json_schema) -> str:
        self.calls.append(("generate_structured_text", prompt))
        self._maybe_fail("generate_structured_text")
        return self.script_text

    async def synthesize_speech(self, text, voice_id) -> Optional[AudioPayload]:
        self.calls.append(("synthesize_speech", text, voice_id))
        self._maybe_fail("synthesize_speech")
        return self.audio

    async def synthesize_image(self, prompt, aspect_ratio) -> Optional[bytes]:
        self.calls.append(("synthesize_image", prompt, aspect_ratio))
        keyword = next((k for k in list(self.image_delays) + list(self.image_errors) if k in prompt), None)
        try:
            if keyword in self.image_delays:
                await asyncio.sleep(self.image_delays[keyword])
        except asyncio.CancelledError:
            self.cancelled_images.append(keyword)
            raise
        if keyword in self.image_errors:
            raise self.image_errors[keyword]
        self._maybe_fail("synthesize_image")
        return self.image_for(prompt)

    async def submit_video_job(self, prompt, seed_image, aspect_ratio) -> VideoOperation:
        self.calls.append(("submit_video_job", prompt, seed_image, aspect_ratio))
        self._maybe_fail("submit_video_job")
        return VideoOperation(name="operations/1", done=False)

    async def poll_video_job(self, operation) -> VideoOperation:
        self.calls.append(("poll_video_job", operation.name))
        self._maybe_fail("poll_video_job")
        if len(self.poll_results) > 1:
            return self.poll_results.pop(0)
        return self.poll_results[0]

    async def download_video(self, uri) -> bytes:
        self.calls.append(("download_video", uri))
        self._maybe_fail("download_video")
        return self.video_bytes

    async def open_realtime_audio_session(self, config: LiveSessionConfig, callbacks: LiveCallbacks) -> RealtimeSession:
        self.calls.append(("open_realtime_audio_session", config))
        if self.live_error is not None:
            raise self.live_error
        session = FakeRealtimeSession(callbacks)
        self.sessions.append(session)
        if self.fire_open:
            asyncio.get_running_loop().call_soon(callbacks.on_open)
        return session

    def called(self, method: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == method]


class FakeTrack(AudioTrack):
    def __init__(self):
        self.stop_calls = 0

    def stop(self) -> None:
        self.stop_calls += 1


class FakeNode(AudioNode):
    def __init__(self, on_block=None):
        self.on_block = on_block
        self.connected = False
        self.connect_calls = 0
        self.disconnect_calls = 0

    def connect(self, target=None) -> None:
        self.connected = True
        self.connect_calls += 1

    def disconnect(self) -> None:
        self.connected = False
        self.disconnect_calls += 1

    def push(self, samples) -> None:
        self.on_block(np.asarray(samples, dtype=np.float32))


class FakeContext(AudioContext):
    def __init__(self, sample_rate: int):
        super().__init__(sample_rate)
        self.close_calls = 0
        self.source: Optional[FakeNode] = None
        self.processor: Optional[FakeNode] = None
        self.block_size: Optional[int] = None

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def create_source(self, stream: MicrophoneStream) -> AudioNode:
        self.source = FakeNode()
        return self.source

    def create_processor(self, block_size, on_block) -> AudioNode:
        self.block_size = block_size
        self.processor = FakeNode(on_block)
        return self.processor

    def close(self) -> None:
        self.close_calls += 1


class FakeCapture(AudioCaptureBackend):
    def __init__(self, available: bool = True, tracks: int = 1):
        self.available = available
        self.track_count = tracks
        self.tracks: List[FakeTrack] = []
        self.contexts: List[FakeContext] = []
        self.open_error: Optional[BaseException] = None

    def is_available(self) -> bool:
        return self.available

    def open_microphone(self) -> MicrophoneStream:
        if self.open_error is not None:
            raise self.open_error
        tracks = [FakeTrack() for _ in range(self.track_count)]
        self.tracks.extend(tracks)
        return MicrophoneStream(tracks)

    def create_context(self, sample_rate: int) -> AudioContext:
        context = FakeContext(sample_rate)
        self.contexts.append(context)
        return context


@pytest.fixture
def fake_service() -> FakeModelService:
    return FakeModelService()


@pytest.fixture
def fake_capture() -> FakeCapture:
    return FakeCapture()


@pytest.fixture
def memory_credentials():
    from content_studio.core import CredentialProvider

    class MemoryCredentials(CredentialProvider):
        def __init__(self, value: Optional[str] = "test-key"):
            self.value = value
            self.clear_calls = 0

        def get(self) -> Optional[str]:
            return self.value

        def set(self, value: str) -> None:
            self.value = value

        def clear(self) -> None:
            self.clear_calls += 1
            self.value = None

    return MemoryCredentials()
