"""
Use cases: business operations independent of HTTP.
"""

from .base import UseCase
from .generation_use_case import (
    GenerationUseCase,
    get_generation_use_case,
    job_to_response,
    narration_to_wav,
)

__all__ = [
    "UseCase",
    "GenerationUseCase",
    "get_generation_use_case",
    "job_to_response",
    "narration_to_wav",
]
