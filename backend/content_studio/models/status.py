"""
Job status constants and enumerations.
"""

from enum import Enum


class JobStatus(Enum):
    """Enumeration of all possible generation job statuses."""

    PENDING = "pending"
    GENERATING_SCRIPT = "generating_script"
    SYNTHESIZING_AUDIO = "synthesizing_audio"
    CREATING_IMAGES = "creating_images"
    COMPOSING_VIDEO = "composing_video"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def is_terminal(self) -> bool:
        """Check if this status is a terminal state (no further progress)."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)

    def is_in_progress(self) -> bool:
        """Check if this status indicates active processing."""
        return not self.is_terminal() and self is not JobStatus.PENDING


# Coarse progress (percent) reported when each stage starts
STAGE_PROGRESS = {
    JobStatus.PENDING: 0.0,
    JobStatus.GENERATING_SCRIPT: 5.0,
    JobStatus.SYNTHESIZING_AUDIO: 25.0,
    JobStatus.CREATING_IMAGES: 40.0,
    JobStatus.COMPOSING_VIDEO: 60.0,
    JobStatus.COMPLETED: 100.0,
}


class TranscriptionState(Enum):
    """Realtime transcription session states."""

    IDLE = "idle"
    STARTING = "starting"
    STREAMING = "streaming"
    STOPPED = "stopped"
    ERRORED = "errored"


__all__ = [
    "JobStatus",
    "STAGE_PROGRESS",
    "TranscriptionState",
]
