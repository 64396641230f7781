"""
Gemini model service

Implements ModelServiceClient on top of the `google-genai` SDK. Blocking SDK
calls run in a worker thread; the realtime session uses the SDK's asyncio
`live` API. Every call resolves the API key from the credential provider at
call time so a key entered (or cleared) mid-run is honoured.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import httpx
from google import genai
from google.genai import types

from content_studio.config import (
    DEFAULT_VOICE,
    IMAGE_MIME_TYPE,
    MISSING_CREDENTIAL_MESSAGE,
    VIDEO_COUNT,
    VIDEO_RESOLUTION,
    PipelineModels,
    get_pipeline_models,
)
from content_studio.core import (
    CredentialProvider,
    ValidationError,
    VideoDownloadError,
    classify_service_error,
    get_credential_provider,
    get_logger,
)
from content_studio.core.media import decode_base64

from .base import (
    AudioPayload,
    LiveCallbacks,
    LiveSessionConfig,
    ModelServiceClient,
    RealtimeAudioChunk,
    RealtimeSession,
    VideoOperation,
)
from .payloads import (
    extract_image_bytes,
    extract_inline_audio_payload,
    to_live_message,
    to_video_operation,
)

logger = get_logger(__name__, component="gemini_client")

T = TypeVar("T")

DOWNLOAD_TIMEOUT_SECONDS = 300.0


class GeminiModelService(ModelServiceClient):
    """Model service backed by the Gemini API."""

    def __init__(
        self,
        credentials: Optional[CredentialProvider] = None,
        models: Optional[PipelineModels] = None,
        http_client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ):
        self._credentials = credentials or get_credential_provider()
        self._models = models or get_pipeline_models()
        self._http_client_factory = http_client_factory or (
            lambda: httpx.AsyncClient(timeout=DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True)
        )
        self._client: Optional[genai.Client] = None
        self._client_key: Optional[str] = None

    def _api_key(self) -> str:
        api_key = self._credentials.get()
        if not api_key:
            raise ValidationError(MISSING_CREDENTIAL_MESSAGE, credential_required=True)
        return api_key

    def _get_client(self) -> genai.Client:
        api_key = self._api_key()
        if self._client is None or self._client_key != api_key:
            self._client = genai.Client(api_key=api_key)
            self._client_key = api_key
        return self._client

    @staticmethod
    async def _guard(call: Callable[[], Awaitable[T]]) -> T:
        """Run a service call, turning credential failures into InvalidCredentialError."""
        try:
            return await call()
        except ValidationError:
            raise
        except Exception as exc:
            classified = classify_service_error(exc)
            if classified is exc:
                raise
            raise classified from exc

    async def generate_structured_text(
        self,
        prompt: str,
        system_instruction: str,
        json_schema: Dict[str, Any],
    ) -> str:
        model = self._models.script
        config_kwargs: Dict[str, Any] = {
            "system_instruction": system_instruction,
            "response_mime_type": "application/json",
            "response_schema": json_schema,
        }
        if model.thinking_budget:
            config_kwargs["thinking_config"] = types.ThinkingConfig(thinking_budget=model.thinking_budget)

        client = self._get_client()
        response = await self._guard(lambda: asyncio.to_thread(
            client.models.generate_content,
            model=model.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        ))
        return response.text or ""

    async def synthesize_speech(self, text: str, voice_id: str = DEFAULT_VOICE) -> Optional[AudioPayload]:
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_id),
                )
            ),
        )
        client = self._get_client()
        response = await self._guard(lambda: asyncio.to_thread(
            client.models.generate_content,
            model=self._models.tts.model_name,
            contents=text,
            config=config,
        ))
        return extract_inline_audio_payload(response)

    async def synthesize_image(self, prompt: str, aspect_ratio: str) -> Optional[bytes]:
        config = types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type=IMAGE_MIME_TYPE,
            aspect_ratio=aspect_ratio,
        )
        client = self._get_client()
        response = await self._guard(lambda: asyncio.to_thread(
            client.models.generate_images,
            model=self._models.image.model_name,
            prompt=prompt,
            config=config,
        ))
        return extract_image_bytes(response)

    async def submit_video_job(self, prompt: str, seed_image: bytes, aspect_ratio: str) -> VideoOperation:
        config = types.GenerateVideosConfig(
            number_of_videos=VIDEO_COUNT,
            resolution=VIDEO_RESOLUTION,
            aspect_ratio=aspect_ratio,
        )
        client = self._get_client()
        operation = await self._guard(lambda: asyncio.to_thread(
            client.models.generate_videos,
            model=self._models.video.model_name,
            prompt=prompt,
            image=types.Image(image_bytes=seed_image, mime_type=IMAGE_MIME_TYPE),
            config=config,
        ))
        handle = to_video_operation(operation)
        logger.info("Video job submitted", extra={"operation": handle.name})
        return handle

    async def poll_video_job(self, operation: VideoOperation) -> VideoOperation:
        client = self._get_client()
        refreshed = await self._guard(lambda: asyncio.to_thread(client.operations.get, operation.raw))
        return to_video_operation(refreshed)

    async def download_video(self, uri: str) -> bytes:
        api_key = self._api_key()

        async def _fetch() -> bytes:
            async with self._http_client_factory() as http:
                response = await http.get(httpx.URL(uri).copy_merge_params({"key": api_key}))
            if response.is_error:
                logger.error("Video download failed", extra={"status_code": response.status_code})
                raise VideoDownloadError("Failed to download the generated video.")
            return response.content

        return await self._guard(_fetch)

    async def open_realtime_audio_session(
        self,
        config: LiveSessionConfig,
        callbacks: LiveCallbacks,
    ) -> RealtimeSession:
        live_config = types.LiveConnectConfig(
            response_modalities=[types.Modality(m) for m in config.response_modalities],
            input_audio_transcription=types.AudioTranscriptionConfig() if config.input_audio_transcription else None,
        )
        session = GeminiRealtimeSession(self._get_client(), self._models.live.model_name, live_config, callbacks)
        await session.start()
        return session


class GeminiRealtimeSession(RealtimeSession):
    """Callback-driven wrapper around `client.aio.live.connect`.

    A background task owns the connection: it fires on_open once connected,
    forwards every server message to on_message, reports failures through
    on_error and always ends with on_close.
    """

    def __init__(self, client: genai.Client, model: str, config: types.LiveConnectConfig, callbacks: LiveCallbacks):
        self._client = client
        self._model = model
        self._config = config
        self._callbacks = callbacks
        self._session: Any = None
        self._task: Optional[asyncio.Task] = None
        self._closing = False

    async def start(self) -> None:
        self._task = asyncio.create_task(self._run(), name="gemini-live-session")

    async def _run(self) -> None:
        try:
            async with self._client.aio.live.connect(model=self._model, config=self._config) as session:
                self._session = session
                logger.info("Realtime session opened", extra={"model": self._model})
                self._callbacks.on_open()
                # receive() ends after each completed turn; keep listening until closed
                while not self._closing:
                    async for message in session.receive():
                        self._callbacks.on_message(to_live_message(message))
                    await asyncio.sleep(0)
        except asyncio.CancelledError:
            if not self._closing:
                raise
        except Exception as exc:
            if not self._closing:
                logger.error("Realtime session failed", extra={"error": str(exc)}, exc_info=True)
                self._callbacks.on_error(classify_service_error(exc))
        finally:
            self._session = None
            logger.info("Realtime session closed")
            self._callbacks.on_close()

    async def send_audio_chunk(self, chunk: RealtimeAudioChunk) -> None:
        session = self._session
        if session is None or self._closing:
            return
        await session.send_realtime_input(
            audio=types.Blob(data=decode_base64(chunk.data), mime_type=chunk.mime_type)
        )

    async def close(self) -> None:
        if self._closing:
            return
        self._closing = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
