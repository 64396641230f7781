"""
API schemas and status enumerations
"""

from .status import JobStatus, STAGE_PROGRESS, TranscriptionState
from .generation import (
    AspectRatio,
    GenerationRequest,
    CredentialUpdate,
    GeneratedVideo,
    JobResponse,
    CredentialStatus,
    TranscriptionStatus,
)

__all__ = [
    "JobStatus",
    "STAGE_PROGRESS",
    "TranscriptionState",
    "AspectRatio",
    "GenerationRequest",
    "CredentialUpdate",
    "GeneratedVideo",
    "JobResponse",
    "CredentialStatus",
    "TranscriptionStatus",
]
