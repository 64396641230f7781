"""
Model service client: interface, value types and the Gemini implementation.
"""

from .base import (
    AudioPayload,
    LiveCallbacks,
    LiveMessage,
    LiveSessionConfig,
    ModelServiceClient,
    RealtimeAudioChunk,
    RealtimeSession,
    VideoOperation,
)
from .client import GeminiModelService, GeminiRealtimeSession

__all__ = [
    "AudioPayload",
    "LiveCallbacks",
    "LiveMessage",
    "LiveSessionConfig",
    "ModelServiceClient",
    "RealtimeAudioChunk",
    "RealtimeSession",
    "VideoOperation",
    "GeminiModelService",
    "GeminiRealtimeSession",
]
