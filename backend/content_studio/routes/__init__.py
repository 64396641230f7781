"""
Routes module - contains all API route handlers
"""

from .credential import router as credential_router
from .generation import router as generation_router
from .jobs import router as jobs_router
from .transcription import router as transcription_router

__all__ = [
    "credential_router",
    "generation_router",
    "jobs_router",
    "transcription_router",
]
