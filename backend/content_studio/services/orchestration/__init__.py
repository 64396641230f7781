"""
Job orchestration: persistence and lifecycle of generation jobs.
"""

from content_studio.models.status import JobStatus

from .job_manager import (
    ACTIVE_STATUSES,
    INTERRUPTED_MESSAGE,
    Job,
    JobManager,
    get_job_manager,
)

__all__ = [
    "ACTIVE_STATUSES",
    "INTERRUPTED_MESSAGE",
    "Job",
    "JobManager",
    "JobStatus",
    "get_job_manager",
]
