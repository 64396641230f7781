"""
Pydantic models for API request/response schemas
"""

from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints


class AspectRatio(str, Enum):
    """Output frame shape, in the model service's notation."""
    PORTRAIT = "9:16"
    LANDSCAPE = "16:9"


# === Request Models ===

class GenerationRequest(BaseModel):
    """Request to generate a video for a title"""
    title: str = Field(..., max_length=300)
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT


class CredentialUpdate(BaseModel):
    """User-supplied API key"""
    api_key: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


# === Response Models ===

class GeneratedVideo(BaseModel):
    """Artifacts of one completed pipeline run"""
    video_url: str
    audio_url: str
    script: str
    image_urls: List[str]
    keywords: List[str] = []


class JobResponse(BaseModel):
    """Response with job status and results"""
    job_id: str
    status: str
    progress: float
    message: str
    error: Optional[str] = None
    credential_invalid: bool = False
    result: Optional[GeneratedVideo] = None


class CredentialStatus(BaseModel):
    has_credential: bool
    credential_required: bool = False


class TranscriptionStatus(BaseModel):
    state: str
    transcript: str
    error: Optional[str] = None
