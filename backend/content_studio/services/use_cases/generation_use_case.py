"""
GenerationUseCase - job lifecycle around the video pipeline.

Keeps HTTP routes thin: validates the request, creates the job, runs the
pipeline in the background, mirrors its progress into the job record and
writes the finished artifacts under OUTPUT_DIR/<job_id>/.
"""

import asyncio
import shutil
import uuid
from pathlib import Path
from typing import Callable, Dict, List, Optional

from fastapi import BackgroundTasks

from content_studio.config import OUTPUT_DIR
from content_studio.core import (
    CredentialProvider,
    InvalidCredentialError,
    PipelineCancelledError,
    ValidationError,
    get_credential_provider,
    get_logger,
    set_job_id,
)
from content_studio.core.media import from_data_uri, pcm16_to_wav
from content_studio.models import GeneratedVideo, GenerationRequest, JobResponse
from content_studio.services.gemini import GeminiModelService
from content_studio.services.gemini.payloads import parse_mime
from content_studio.services.orchestration import Job, JobManager, JobStatus, get_job_manager
from content_studio.services.pipeline import CancellationToken, PipelineRequest, PipelineResult, VideoPipeline

from .base import UseCase

logger = get_logger(__name__, component="generation")

COMPLETED_MESSAGE = "Video generated successfully!"
CANCELLED_MESSAGE = "Generation was cancelled."
DEFAULT_TTS_SAMPLE_RATE = 24000

PipelineFactory = Callable[[CredentialProvider], VideoPipeline]


def _default_pipeline_factory(credentials: CredentialProvider) -> VideoPipeline:
    return VideoPipeline(GeminiModelService(credentials=credentials), credentials=credentials)


def job_to_response(job: Job) -> JobResponse:
    return JobResponse(
        job_id=job.id,
        status=job.status.value,
        progress=job.progress,
        message=job.message,
        error=job.error,
        credential_invalid=job.credential_invalid,
        result=GeneratedVideo(**job.result) if job.result else None,
    )


def narration_to_wav(audio: bytes, mime_type: Optional[str]) -> bytes:
    """Wrap raw TTS PCM in a WAV container; WAV input is returned as is."""
    base, params = parse_mime(mime_type)
    if base and ("wav" in base or "wave" in base):
        return audio
    try:
        sample_rate = int(params.get("rate", DEFAULT_TTS_SAMPLE_RATE))
    except ValueError:
        sample_rate = DEFAULT_TTS_SAMPLE_RATE
    return pcm16_to_wav(audio, sample_rate=sample_rate)


class GenerationUseCase(UseCase[GenerationRequest, JobResponse]):
    """Handle generation job lifecycle and background execution."""

    def __init__(
        self,
        job_manager: Optional[JobManager] = None,
        credentials: Optional[CredentialProvider] = None,
        pipeline_factory: Optional[PipelineFactory] = None,
        output_dir: Optional[Path] = None,
    ):
        self.job_manager = job_manager or get_job_manager()
        self.credentials = credentials or get_credential_provider()
        self.pipeline_factory = pipeline_factory or _default_pipeline_factory
        self.output_dir = Path(output_dir) if output_dir else OUTPUT_DIR
        self._tokens: Dict[str, CancellationToken] = {}

    def _prepare(self, request: GenerationRequest) -> tuple[Job, PipelineRequest, VideoPipeline, CancellationToken]:
        pipeline_request = PipelineRequest(title=request.title, aspect_ratio=request.aspect_ratio)
        pipeline = self.pipeline_factory(self.credentials)
        pipeline.validate(pipeline_request)

        job = self.job_manager.create_job(str(uuid.uuid4()), title=request.title.strip())
        token = CancellationToken()
        self._tokens[job.id] = token
        logger.info("Generation job created", extra={"job_id": job.id, "aspect_ratio": request.aspect_ratio.value})
        return job, pipeline_request, pipeline, token

    def start_generation(self, request: GenerationRequest, background_tasks: BackgroundTasks) -> JobResponse:
        """Validate input, enqueue the pipeline run and return the pending job.

        Raises:
            ValidationError: empty title or no credential; no job is created
        """
        job, pipeline_request, pipeline, token = self._prepare(request)
        background_tasks.add_task(self.run_job, job.id, pipeline_request, pipeline, token)
        return job_to_response(job)

    async def execute(self, request: GenerationRequest) -> JobResponse:
        """Run a generation to completion in the caller's task."""
        job, pipeline_request, pipeline, token = self._prepare(request)
        await self.run_job(job.id, pipeline_request, pipeline, token)
        return self.get_job(job.id)

    async def run_job(
        self,
        job_id: str,
        request: PipelineRequest,
        pipeline: VideoPipeline,
        token: CancellationToken,
    ) -> None:
        set_job_id(job_id)

        def on_progress(status: JobStatus, progress: float, message: str) -> None:
            self.job_manager.update_job(job_id, status, progress, message)

        try:
            result = await pipeline.run(request, progress=on_progress, token=token)
            token.raise_if_cancelled()
            video = await asyncio.to_thread(self._write_artifacts, job_id, result)
            self.job_manager.update_job(
                job_id,
                JobStatus.COMPLETED,
                100.0,
                COMPLETED_MESSAGE,
                result=video.model_dump(),
            )
            logger.info("Generation job completed", extra={"job_id": job_id})
        except PipelineCancelledError:
            logger.info("Generation job cancelled", extra={"job_id": job_id})
            self.job_manager.update_job(job_id, JobStatus.CANCELLED, message=CANCELLED_MESSAGE)
        except InvalidCredentialError as exc:
            logger.warning("Credential rejected by the model service; clearing it", extra={"job_id": job_id})
            self.credentials.clear()
            self.job_manager.update_job(
                job_id,
                JobStatus.FAILED,
                message=str(exc),
                error=str(exc),
                credential_invalid=True,
            )
        except ValidationError as exc:
            self.job_manager.update_job(job_id, JobStatus.FAILED, message=str(exc), error=str(exc))
        except Exception as exc:  # noqa: BLE001
            logger.error("Generation job failed", extra={"job_id": job_id, "error": str(exc)}, exc_info=True)
            self.job_manager.update_job(job_id, JobStatus.FAILED, message=f"An error occurred: {exc}", error=str(exc))
        finally:
            self._tokens.pop(job_id, None)
            set_job_id(None)

    def _write_artifacts(self, job_id: str, result: PipelineResult) -> GeneratedVideo:
        job_dir = self.output_dir / job_id
        job_dir.mkdir(parents=True, exist_ok=True)
        url_prefix = f"/outputs/{job_id}"

        (job_dir / "video.mp4").write_bytes(result.video_bytes)
        (job_dir / "narration.wav").write_bytes(narration_to_wav(result.audio_bytes, result.audio_mime_type))
        (job_dir / "script.txt").write_text(result.script, encoding="utf-8")

        image_urls: List[str] = []
        for index, data_uri in enumerate(result.images, start=1):
            data, _mime_type = from_data_uri(data_uri)
            name = f"image_{index}.jpg"
            (job_dir / name).write_bytes(data)
            image_urls.append(f"{url_prefix}/{name}")

        return GeneratedVideo(
            video_url=f"{url_prefix}/video.mp4",
            audio_url=f"{url_prefix}/narration.wav",
            script=result.script,
            image_urls=image_urls,
            keywords=result.keywords,
        )

    def get_job(self, job_id: str) -> Optional[JobResponse]:
        job = self.job_manager.get_job(job_id)
        return job_to_response(job) if job else None

    def list_jobs(self) -> List[JobResponse]:
        return [job_to_response(job) for job in self.job_manager.get_all_jobs()]

    def is_running(self, job_id: str) -> bool:
        return job_id in self._tokens

    def cancel_job(self, job_id: str) -> Optional[JobResponse]:
        """Cancel a running job; a finished job is deleted with its artifacts."""
        job = self.job_manager.get_job(job_id)
        if not job:
            return None

        token = self._tokens.get(job_id)
        if token is not None and not job.status.is_terminal():
            token.cancel()
            updated = self.job_manager.update_job(job_id, JobStatus.CANCELLED, message=CANCELLED_MESSAGE)
            logger.info("Cancellation requested", extra={"job_id": job_id})
            return job_to_response(updated or job)

        response = job_to_response(job)
        self.job_manager.delete_job(job_id)
        shutil.rmtree(self.output_dir / job_id, ignore_errors=True)
        logger.info("Job deleted", extra={"job_id": job_id})
        return response


_generation_use_case: Optional[GenerationUseCase] = None


def get_generation_use_case() -> GenerationUseCase:
    """Shared instance; it owns the cancellation tokens of running jobs."""
    global _generation_use_case
    if _generation_use_case is None:
        _generation_use_case = GenerationUseCase()
    return _generation_use_case
