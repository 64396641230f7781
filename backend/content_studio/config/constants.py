"""
Constants configuration

API settings, CORS configuration, pipeline timings and user-facing messages.
"""

import os

from ..core.runtime import parse_float_env

# API settings
API_TITLE = "AI Content Studio API"
API_DESCRIPTION = "Generate short Roblox trivia videos and transcribe live audio with Gemini"
API_VERSION = "1.0.0"

# CORS origins (comma separated override)
_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
]
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", ",".join(_DEFAULT_CORS_ORIGINS)).split(",")
    if origin.strip()
]

# Video job polling
VIDEO_POLL_INTERVAL_SECONDS = parse_float_env(os.getenv("VIDEO_POLL_INTERVAL_SECONDS"), 10.0, minimum=0.0)
# 0 disables the cap
VIDEO_POLL_MAX_WAIT_SECONDS = parse_float_env(os.getenv("VIDEO_POLL_MAX_WAIT_SECONDS"), 1800.0, minimum=0.0)

# Realtime capture
TRANSCRIPTION_SAMPLE_RATE = 16000
TRANSCRIPTION_BLOCK_SIZE = 4096

# Pipeline status messages
STATUS_SCRIPT = "Crafting a viral script..."
STATUS_NARRATION = "Recording the voice-over..."
STATUS_IMAGES = "Creating visual assets..."
STATUS_VIDEO = "Editing the final video... This may take a few minutes."

# User-facing errors
EMPTY_TITLE_MESSAGE = "Please enter a title for the video."
MISSING_CREDENTIAL_MESSAGE = "An API Key is required. Please set one in the section above."
TRANSCRIPTION_ERROR_MESSAGE = "An error occurred during transcription. Please try again."

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "VIDEO_POLL_INTERVAL_SECONDS",
    "VIDEO_POLL_MAX_WAIT_SECONDS",
    "TRANSCRIPTION_SAMPLE_RATE",
    "TRANSCRIPTION_BLOCK_SIZE",
    "STATUS_SCRIPT",
    "STATUS_NARRATION",
    "STATUS_IMAGES",
    "STATUS_VIDEO",
    "EMPTY_TITLE_MESSAGE",
    "MISSING_CREDENTIAL_MESSAGE",
    "TRANSCRIPTION_ERROR_MESSAGE",
]
