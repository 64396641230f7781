"""
Tests for content_studio.services.gemini.client

The genai SDK client is replaced with mocks; HTTP downloads go through an
httpx MockTransport.
"""

import asyncio
import base64
from types import SimpleNamespace as NS
from unittest.mock import MagicMock, patch

import httpx
import pytest

from content_studio.config import PipelineModels
from content_studio.core import InvalidCredentialError, ValidationError, VideoDownloadError
from content_studio.services.gemini import (
    GeminiModelService,
    LiveCallbacks,
    LiveSessionConfig,
    RealtimeAudioChunk,
    VideoOperation,
)


@pytest.fixture
def sdk_client():
    with patch("content_studio.services.gemini.client.genai.Client") as client_cls:
        yield client_cls


def _service(credentials, transport=None):
    factory = None
    if transport is not None:
        factory = lambda: httpx.AsyncClient(transport=transport)  # noqa: E731
    return GeminiModelService(credentials=credentials, models=PipelineModels(), http_client_factory=factory)


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_missing_key_is_a_validation_error(self, memory_credentials, sdk_client):
        memory_credentials.value = None
        with pytest.raises(ValidationError) as exc_info:
            await _service(memory_credentials).generate_structured_text("p", "s", {})
        assert exc_info.value.credential_required is True
        sdk_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_client_rebuilt_when_key_changes(self, memory_credentials, sdk_client):
        sdk_client.return_value.models.generate_content.return_value = NS(text="{}")
        service = _service(memory_credentials)

        await service.generate_structured_text("p", "s", {})
        await service.generate_structured_text("p", "s", {})
        memory_credentials.value = "second-key"
        await service.generate_structured_text("p", "s", {})

        assert [c.kwargs["api_key"] for c in sdk_client.call_args_list] == ["test-key", "second-key"]


class TestGeneration:
    @pytest.mark.asyncio
    async def test_structured_text_config(self, memory_credentials, sdk_client):
        generate = sdk_client.return_value.models.generate_content
        generate.return_value = NS(text='{"script": "s"}')
        schema = {"type": "OBJECT"}

        text = await _service(memory_credentials).generate_structured_text("prompt", "persona", schema)

        assert text == '{"script": "s"}'
        kwargs = generate.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["contents"] == "prompt"
        assert kwargs["config"].system_instruction == "persona"
        assert kwargs["config"].response_mime_type == "application/json"

    @pytest.mark.asyncio
    async def test_speech_returns_inline_audio(self, memory_credentials, sdk_client):
        part = NS(inline_data=NS(data=b"pcm", mime_type="audio/L16;rate=24000"))
        sdk_client.return_value.models.generate_content.return_value = NS(
            candidates=[NS(content=NS(parts=[part]))]
        )

        payload = await _service(memory_credentials).synthesize_speech("hello", "Kore")

        assert payload.data == b"pcm"
        config = sdk_client.return_value.models.generate_content.call_args.kwargs["config"]
        assert config.speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"

    @pytest.mark.asyncio
    async def test_image_request(self, memory_credentials, sdk_client):
        generate = sdk_client.return_value.models.generate_images
        generate.return_value = NS(generated_images=[NS(image=NS(image_bytes=b"jpg"))])

        data = await _service(memory_credentials).synthesize_image("a prompt", "9:16")

        assert data == b"jpg"
        config = generate.call_args.kwargs["config"]
        assert config.number_of_images == 1
        assert config.aspect_ratio == "9:16"
        assert config.output_mime_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_video_submit_and_poll(self, memory_credentials, sdk_client):
        raw_pending = NS(name="operations/1", done=False, error=None, response=None)
        raw_done = NS(
            name="operations/1",
            done=True,
            error=None,
            response=NS(generated_videos=[NS(video=NS(uri="https://files/v.mp4"))]),
        )
        sdk = sdk_client.return_value
        sdk.models.generate_videos.return_value = raw_pending
        sdk.operations.get.return_value = raw_done
        service = _service(memory_credentials)

        op = await service.submit_video_job("prompt", b"seed", "16:9")
        assert op == VideoOperation(name="operations/1", done=False, raw=raw_pending)

        kwargs = sdk.models.generate_videos.call_args.kwargs
        assert kwargs["image"].image_bytes == b"seed"
        assert kwargs["config"].resolution == "720p"
        assert kwargs["config"].aspect_ratio == "16:9"

        refreshed = await service.poll_video_job(op)
        sdk.operations.get.assert_called_once_with(raw_pending)
        assert refreshed.uri == "https://files/v.mp4"

    @pytest.mark.asyncio
    async def test_credential_failure_classified(self, memory_credentials, sdk_client):
        sdk_client.return_value.models.generate_content.side_effect = RuntimeError(
            "400 INVALID_ARGUMENT: API key not valid"
        )
        with pytest.raises(InvalidCredentialError) as exc_info:
            await _service(memory_credentials).generate_structured_text("p", "s", {})
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_other_failure_unchanged(self, memory_credentials, sdk_client):
        sdk_client.return_value.models.generate_content.side_effect = RuntimeError("503 overloaded")
        with pytest.raises(RuntimeError, match="503 overloaded"):
            await _service(memory_credentials).generate_structured_text("p", "s", {})


class TestDownload:
    @pytest.mark.asyncio
    async def test_appends_key(self, memory_credentials):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, content=b"mp4-bytes")

        data = await _service(memory_credentials, httpx.MockTransport(handler)).download_video("https://files/v.mp4")

        assert data == b"mp4-bytes"
        assert seen[0].params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_keeps_existing_query(self, memory_credentials):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, content=b"mp4-bytes")

        service = _service(memory_credentials, httpx.MockTransport(handler))
        await service.download_video("https://files/a:download?alt=media")

        assert seen[0].path == "/a:download"
        assert seen[0].params["alt"] == "media"
        assert seen[0].params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_error_status(self, memory_credentials):
        transport = httpx.MockTransport(lambda request: httpx.Response(500))
        with pytest.raises(VideoDownloadError, match="Failed to download the generated video."):
            await _service(memory_credentials, transport).download_video("https://files/v.mp4")


class _FakeLiveSession:
    def __init__(self, turns):
        self._turns = list(turns)
        self.sent = []
        self.idle = asyncio.Event()

    async def send_realtime_input(self, audio):
        self.sent.append(audio)

    async def receive(self):
        if not self._turns:
            self.idle.set()
            await asyncio.Event().wait()
        for message in self._turns.pop(0):
            yield message


class _Connect:
    def __init__(self, session=None, error=None):
        self.session = session
        self.error = error

    async def __aenter__(self):
        if self.error:
            raise self.error
        return self.session

    async def __aexit__(self, *exc):
        return False


def _callbacks():
    events = []
    callbacks = LiveCallbacks(
        on_open=lambda: events.append(("open",)),
        on_message=lambda message: events.append(("message", message)),
        on_error=lambda exc: events.append(("error", exc)),
        on_close=lambda: events.append(("close",)),
    )
    return callbacks, events


def _transcript(text, turn_complete=False):
    return NS(server_content=NS(input_transcription=NS(text=text), turn_complete=turn_complete))


class TestRealtimeSession:
    @pytest.mark.asyncio
    async def test_streams_messages_and_sends_decoded_audio(self, memory_credentials, sdk_client):
        live = _FakeLiveSession([[_transcript("hello "), _transcript("world", turn_complete=True)]])
        sdk_client.return_value.aio.live.connect = MagicMock(return_value=_Connect(live))
        callbacks, events = _callbacks()

        session = await _service(memory_credentials).open_realtime_audio_session(LiveSessionConfig(), callbacks)
        await asyncio.wait_for(live.idle.wait(), timeout=1)

        chunk = RealtimeAudioChunk(data=base64.b64encode(b"\x01\x00").decode(), mime_type="audio/pcm;rate=16000")
        await session.send_audio_chunk(chunk)
        await session.close()
        await session.close()

        assert events[0] == ("open",)
        texts = [e[1].input_transcription for e in events if e[0] == "message"]
        assert texts == ["hello ", "world"]
        assert events[-1] == ("close",)
        assert live.sent[0].data == b"\x01\x00"
        assert live.sent[0].mime_type == "audio/pcm;rate=16000"

        config = sdk_client.return_value.aio.live.connect.call_args.kwargs["config"]
        assert config.input_audio_transcription is not None

    @pytest.mark.asyncio
    async def test_connection_error_reported(self, memory_credentials, sdk_client):
        sdk_client.return_value.aio.live.connect = MagicMock(
            return_value=_Connect(error=RuntimeError("API key not valid"))
        )
        callbacks, events = _callbacks()

        session = await _service(memory_credentials).open_realtime_audio_session(LiveSessionConfig(), callbacks)
        for _ in range(5):
            await asyncio.sleep(0)

        kinds = [e[0] for e in events]
        assert kinds == ["error", "close"]
        assert isinstance(events[0][1], InvalidCredentialError)
        await session.close()

    @pytest.mark.asyncio
    async def test_send_before_open_is_dropped(self, memory_credentials, sdk_client):
        sdk_client.return_value.aio.live.connect = MagicMock(return_value=_Connect(_FakeLiveSession([])))
        callbacks, _events = _callbacks()

        session = await _service(memory_credentials).open_realtime_audio_session(LiveSessionConfig(), callbacks)
        await session.send_audio_chunk(RealtimeAudioChunk(data="AAA=", mime_type="audio/pcm;rate=16000"))
        await session.close()
