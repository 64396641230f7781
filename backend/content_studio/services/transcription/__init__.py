"""
Realtime microphone transcription.
"""

from .capture import (
    AudioCaptureBackend,
    AudioContext,
    AudioNode,
    AudioTrack,
    MicrophoneStream,
    SoundDeviceCapture,
)
from .session import (
    RealtimeTranscriber,
    SessionResources,
    get_transcriber,
    pcm_mime_type,
)

__all__ = [
    "AudioCaptureBackend",
    "AudioContext",
    "AudioNode",
    "AudioTrack",
    "MicrophoneStream",
    "SoundDeviceCapture",
    "RealtimeTranscriber",
    "SessionResources",
    "get_transcriber",
    "pcm_mime_type",
]
