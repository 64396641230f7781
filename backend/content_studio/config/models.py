"""
Model Configuration for Pipeline Steps

Every call the studio makes to Gemini goes through one of the steps below.
Each step has its own model so it can be tuned independently.

=== OVERRIDES ===

Set STUDIO_MODEL_<STEP> to swap the model for one step, e.g.
    STUDIO_MODEL_SCRIPT=gemini-2.5-flash
    STUDIO_MODEL_VIDEO=veo-3.1-generate-preview

Thinking budget (script step only):
    STUDIO_SCRIPT_THINKING_BUDGET=0 disables thinking for faster drafts.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Dict, Optional


@dataclass
class ModelConfig:
    """Configuration for a single model"""
    model_name: str
    thinking_budget: Optional[int] = None
    description: str = ""


def _env_model(step: str, default: str) -> str:
    return os.getenv(f"STUDIO_MODEL_{step.upper()}", default).strip() or default


def _env_thinking_budget(default: int) -> int:
    raw = os.getenv("STUDIO_SCRIPT_THINKING_BUDGET")
    if raw is None:
        return default
    try:
        return max(int(raw), 0)
    except ValueError:
        return default


@dataclass
class PipelineModels:
    """
    Model configuration for each step of the studio.

    Steps:
    1. Script - structured script + keywords for a title
    2. TTS - narration voice-over
    3. Image - one illustrative still per keyword
    4. Video - image-seeded clip (long-running operation)
    5. Live - realtime audio session used for transcription
    """

    script: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name=_env_model("script", "gemini-2.5-pro"),
        thinking_budget=_env_thinking_budget(32768),
        description="Viral trivia script with keywords (JSON)"
    ))

    tts: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name=_env_model("tts", "gemini-2.5-flash-preview-tts"),
        description="Narration voice-over"
    ))

    image: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name=_env_model("image", "imagen-4.0-generate-001"),
        description="Keyword stills"
    ))

    video: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name=_env_model("video", "veo-3.1-fast-generate-preview"),
        description="Image-seeded short clip"
    ))

    live: ModelConfig = field(default_factory=lambda: ModelConfig(
        model_name=_env_model("live", "gemini-2.5-flash-native-audio-preview-09-2025"),
        description="Realtime input transcription"
    ))

    def as_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name).model_name for f in fields(self)}


# Narration voice (prebuilt Gemini voice)
DEFAULT_VOICE = os.getenv("STUDIO_TTS_VOICE", "Kore")

# Video output
VIDEO_RESOLUTION = "720p"
VIDEO_COUNT = 1

# Image output
IMAGE_MIME_TYPE = "image/jpeg"
MAX_IMAGES = 4


_active_models: Optional[PipelineModels] = None


def get_pipeline_models() -> PipelineModels:
    """Get the shared model configuration (built lazily so env overrides apply)."""
    global _active_models
    if _active_models is None:
        _active_models = PipelineModels()
    return _active_models


def reset_pipeline_models() -> None:
    """Drop the cached configuration; the next call re-reads the environment."""
    global _active_models
    _active_models = None


__all__ = [
    "ModelConfig",
    "PipelineModels",
    "DEFAULT_VOICE",
    "VIDEO_RESOLUTION",
    "VIDEO_COUNT",
    "IMAGE_MIME_TYPE",
    "MAX_IMAGES",
    "get_pipeline_models",
    "reset_pipeline_models",
]
