"""
Video stage - image-seeded clip from the long-running video operation.
"""

from typing import Optional

from content_studio.config import VIDEO_POLL_INTERVAL_SECONDS, VIDEO_POLL_MAX_WAIT_SECONDS
from content_studio.core import NoDownloadLinkError, VideoGenerationError, get_logger
from content_studio.core.media import from_data_uri
from content_studio.models import AspectRatio
from content_studio.services.gemini import ModelServiceClient

from .polling import CancellationToken, poll_until_done

logger = get_logger(__name__, component="video_stage")


def build_video_prompt(script: str) -> str:
    return f'A short, cinematic video about Roblox, based on this script: "{script}"'


class VideoSynthesizer:
    """Submits the video job, waits for it, and downloads the result."""

    def __init__(
        self,
        service: ModelServiceClient,
        poll_interval: float = VIDEO_POLL_INTERVAL_SECONDS,
        max_wait: Optional[float] = VIDEO_POLL_MAX_WAIT_SECONDS,
    ):
        self.service = service
        self.poll_interval = poll_interval
        self.max_wait = max_wait

    async def generate(
        self,
        script: str,
        start_image: str,
        aspect_ratio: AspectRatio,
        token: Optional[CancellationToken] = None,
    ) -> bytes:
        """
        Args:
            script: Narration script used in the prompt
            start_image: Data URI of the seed image
            aspect_ratio: Output frame shape
            token: Aborts the wait between polls when cancelled

        Raises:
            VideoGenerationError: the job finished with an error
            NoDownloadLinkError: the job finished without a video URI
        """
        seed_image, _mime_type = from_data_uri(start_image)

        operation = await self.service.submit_video_job(build_video_prompt(script), seed_image, aspect_ratio.value)
        operation = await poll_until_done(
            operation,
            self.service.poll_video_job,
            interval=self.poll_interval,
            max_wait=self.max_wait,
            token=token,
        )

        if operation.error_message:
            raise VideoGenerationError(f"Video generation failed: {operation.error_message}")

        if not operation.uri:
            raise NoDownloadLinkError("Video generation finished but no download link was provided.")

        video = await self.service.download_video(operation.uri)
        logger.info("Video downloaded", extra={"operation": operation.name, "bytes": len(video)})
        return video
