"""
Image stage - one still per keyword, requested concurrently.
"""

import asyncio
from typing import List, Sequence

from content_studio.config import IMAGE_MIME_TYPE, MAX_IMAGES
from content_studio.core import ImageGenerationError, get_logger
from content_studio.core.media import to_data_uri
from content_studio.models import AspectRatio
from content_studio.services.gemini import ModelServiceClient

logger = get_logger(__name__, component="image_stage")


def build_image_prompt(keyword: str) -> str:
    return (
        f'High-quality, vertical Roblox in-game screenshot or gameplay footage related to: "{keyword}". '
        "Cinematic, detailed."
    )


class ImageGenerator:
    """Illustrates the first few keywords of a script."""

    def __init__(self, service: ModelServiceClient, max_images: int = MAX_IMAGES):
        self.service = service
        self.max_images = max_images

    async def _generate_one(self, keyword: str, aspect_ratio: AspectRatio) -> str:
        data = await self.service.synthesize_image(build_image_prompt(keyword), aspect_ratio.value)
        if not data:
            raise ImageGenerationError(f"No image was returned for keyword '{keyword}'.")
        return to_data_uri(data, IMAGE_MIME_TYPE)

    async def generate(self, keywords: Sequence[str], aspect_ratio: AspectRatio) -> List[str]:
        """Return data URIs in keyword order.

        All requests run at once; the first failure cancels the rest and
        propagates, so no partial image list is ever returned.
        """
        selected = list(keywords)[: self.max_images]
        tasks = [
            asyncio.create_task(self._generate_one(keyword, aspect_ratio), name=f"image-{index}")
            for index, keyword in enumerate(selected)
        ]
        try:
            images = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.info("Images generated", extra={"count": len(images), "aspect_ratio": aspect_ratio.value})
        return list(images)
