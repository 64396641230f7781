"""
Tests for the video stage
"""

import pytest

from content_studio.core import NoDownloadLinkError, VideoGenerationError
from content_studio.core.media import to_data_uri
from content_studio.models import AspectRatio
from content_studio.services.gemini import VideoOperation
from content_studio.services.pipeline import VideoSynthesizer, build_video_prompt

SEED = to_data_uri(b"\xff\xd8seed", "image/jpeg")


@pytest.mark.asyncio
async def test_submits_seed_image_and_downloads(fake_service):
    fake_service.poll_results = [
        VideoOperation(name="operations/1", done=False),
        VideoOperation(name="operations/1", done=True, uri="https://files.example/v.mp4"),
    ]

    video = await VideoSynthesizer(fake_service, poll_interval=0).generate("the script", SEED, AspectRatio.LANDSCAPE)

    assert video == fake_service.video_bytes
    (_, prompt, seed, ratio), = fake_service.called("submit_video_job")
    assert prompt == build_video_prompt("the script")
    assert seed == b"\xff\xd8seed"
    assert ratio == "16:9"
    assert len(fake_service.called("poll_video_job")) == 2
    assert fake_service.called("download_video") == [("download_video", "https://files.example/v.mp4")]


@pytest.mark.asyncio
async def test_operation_error(fake_service):
    fake_service.poll_results = [VideoOperation(name="op", done=True, error_message="safety filter")]

    with pytest.raises(VideoGenerationError, match="Video generation failed: safety filter"):
        await VideoSynthesizer(fake_service, poll_interval=0).generate("s", SEED, AspectRatio.PORTRAIT)
    assert fake_service.called("download_video") == []


@pytest.mark.asyncio
async def test_missing_uri(fake_service):
    fake_service.poll_results = [VideoOperation(name="op", done=True)]

    with pytest.raises(NoDownloadLinkError, match="no download link"):
        await VideoSynthesizer(fake_service, poll_interval=0).generate("s", SEED, AspectRatio.PORTRAIT)


def test_prompt_mentions_script():
    assert '"hello"' in build_video_prompt("hello")
