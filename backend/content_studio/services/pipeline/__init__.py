"""
Video generation pipeline: stages, polling and the orchestrator.
"""

from .types import PipelineRequest, PipelineResult, ProgressCallback, ScriptResult
from .polling import CancellationToken, poll_until_done
from .script import SCRIPT_SCHEMA, SYSTEM_INSTRUCTION, ScriptGenerator, parse_script_response
from .narration import NarrationGenerator
from .images import ImageGenerator, build_image_prompt
from .video import VideoSynthesizer, build_video_prompt
from .orchestrator import VideoPipeline

__all__ = [
    "PipelineRequest",
    "PipelineResult",
    "ProgressCallback",
    "ScriptResult",
    "CancellationToken",
    "poll_until_done",
    "SCRIPT_SCHEMA",
    "SYSTEM_INSTRUCTION",
    "ScriptGenerator",
    "parse_script_response",
    "NarrationGenerator",
    "ImageGenerator",
    "build_image_prompt",
    "VideoSynthesizer",
    "build_video_prompt",
    "VideoPipeline",
]
