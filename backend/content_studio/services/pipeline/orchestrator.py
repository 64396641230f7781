"""
Video generation pipeline

Title -> script -> narration -> images -> video -> result. Stages run
strictly in order; any failure aborts the run, and model-service failures
that look like a bad or under-privileged key surface as
InvalidCredentialError so the caller can clear the key.
"""

from typing import Optional

from content_studio.config import (
    EMPTY_TITLE_MESSAGE,
    MISSING_CREDENTIAL_MESSAGE,
    STATUS_IMAGES,
    STATUS_NARRATION,
    STATUS_SCRIPT,
    STATUS_VIDEO,
)
from content_studio.core import (
    CredentialProvider,
    InvalidCredentialError,
    LogTimer,
    PipelineCancelledError,
    ValidationError,
    classify_service_error,
    get_logger,
)
from content_studio.models import STAGE_PROGRESS, JobStatus
from content_studio.services.gemini import ModelServiceClient

from .images import ImageGenerator
from .narration import NarrationGenerator
from .polling import CancellationToken
from .script import ScriptGenerator
from .types import PipelineRequest, PipelineResult, ProgressCallback
from .video import VideoSynthesizer

logger = get_logger(__name__, component="pipeline")


class VideoPipeline:
    """Runs one GenerationRequest through every stage."""

    def __init__(
        self,
        service: ModelServiceClient,
        credentials: Optional[CredentialProvider] = None,
        script_generator: Optional[ScriptGenerator] = None,
        narration_generator: Optional[NarrationGenerator] = None,
        image_generator: Optional[ImageGenerator] = None,
        video_synthesizer: Optional[VideoSynthesizer] = None,
    ):
        self.credentials = credentials
        self.script_generator = script_generator or ScriptGenerator(service)
        self.narration_generator = narration_generator or NarrationGenerator(service)
        self.image_generator = image_generator or ImageGenerator(service)
        self.video_synthesizer = video_synthesizer or VideoSynthesizer(service)

    def validate(self, request: PipelineRequest) -> None:
        """Reject a request before any network call is made."""
        if not request.title or not request.title.strip():
            raise ValidationError(EMPTY_TITLE_MESSAGE)
        if self.credentials is not None and not self.credentials.has_credential():
            raise ValidationError(MISSING_CREDENTIAL_MESSAGE, credential_required=True)

    async def run(
        self,
        request: PipelineRequest,
        progress: Optional[ProgressCallback] = None,
        token: Optional[CancellationToken] = None,
    ) -> PipelineResult:
        self.validate(request)
        token = token or CancellationToken()

        def report(status: JobStatus, message: str) -> None:
            token.raise_if_cancelled()
            if progress:
                progress(status, STAGE_PROGRESS[status], message)

        title = request.title.strip()
        try:
            report(JobStatus.GENERATING_SCRIPT, STATUS_SCRIPT)
            with LogTimer(logger, "script stage"):
                script_result = await self.script_generator.generate(title)

            report(JobStatus.SYNTHESIZING_AUDIO, STATUS_NARRATION)
            with LogTimer(logger, "narration stage"):
                audio = await self.narration_generator.generate(script_result.script)

            report(JobStatus.CREATING_IMAGES, STATUS_IMAGES)
            with LogTimer(logger, "image stage"):
                images = await self.image_generator.generate(script_result.keywords, request.aspect_ratio)

            report(JobStatus.COMPOSING_VIDEO, STATUS_VIDEO)
            with LogTimer(logger, "video stage"):
                video = await self.video_synthesizer.generate(
                    script_result.script,
                    images[0],
                    request.aspect_ratio,
                    token=token,
                )
            token.raise_if_cancelled()
        except (ValidationError, PipelineCancelledError, InvalidCredentialError):
            raise
        except Exception as exc:
            classified = classify_service_error(exc)
            if classified is exc:
                raise
            raise classified from exc

        return PipelineResult(
            video_bytes=video,
            audio_bytes=audio.data,
            audio_mime_type=audio.mime_type,
            script=script_result.script,
            images=images,
            keywords=script_result.keywords,
        )
