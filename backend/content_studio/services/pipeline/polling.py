"""
Cancellable timed polling for long-running service operations.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from content_studio.core import PipelineCancelledError, VideoGenerationTimeoutError, get_logger
from content_studio.services.gemini import VideoOperation

logger = get_logger(__name__, component="polling")


class CancellationToken:
    """Shared flag that aborts a waiting pipeline.

    Must be cancelled from the event loop the pipeline runs on.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise PipelineCancelledError("Generation was cancelled.")

    async def sleep(self, seconds: float) -> None:
        """Sleep for `seconds`, waking early (and raising) if cancelled."""
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()


async def poll_until_done(
    operation: VideoOperation,
    poll: Callable[[VideoOperation], Awaitable[VideoOperation]],
    *,
    interval: float,
    max_wait: Optional[float] = None,
    token: Optional[CancellationToken] = None,
    clock: Callable[[], float] = time.monotonic,
) -> VideoOperation:
    """Re-fetch `operation` every `interval` seconds until it reports done.

    Args:
        operation: Handle returned when the job was submitted
        poll: Coroutine function fetching the latest state of the handle
        interval: Delay between polls, in seconds
        max_wait: Give up after this many seconds (None or 0 waits forever)
        token: Cancellation token checked before every wait

    Raises:
        PipelineCancelledError: the token was cancelled
        VideoGenerationTimeoutError: max_wait elapsed before completion
    """
    token = token or CancellationToken()
    started = clock()
    attempts = 0

    while not operation.done:
        elapsed = clock() - started
        if max_wait and elapsed >= max_wait:
            raise VideoGenerationTimeoutError(
                f"Video generation did not finish within {int(max_wait)} seconds."
            )
        await token.sleep(interval)
        token.raise_if_cancelled()
        operation = await poll(operation)
        attempts += 1
        logger.info(
            "Polled video job",
            extra={"operation": operation.name, "attempt": attempts, "done": operation.done},
        )

    return operation
