"""Value objects flowing through the generation pipeline."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from content_studio.models import AspectRatio, JobStatus


@dataclass(frozen=True)
class PipelineRequest:
    """One generation run's input; frozen once the run starts"""
    title: str
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT


@dataclass
class ScriptResult:
    script: str
    keywords: List[str] = field(default_factory=list)


@dataclass
class PipelineResult:
    """Everything a finished run produced, ready for presentation"""
    video_bytes: bytes
    audio_bytes: bytes
    script: str
    images: List[str]  # data URIs, keyword order
    keywords: List[str] = field(default_factory=list)
    audio_mime_type: Optional[str] = None


# (status, overall progress percent, human-readable message)
ProgressCallback = Callable[[JobStatus, float, str], None]
