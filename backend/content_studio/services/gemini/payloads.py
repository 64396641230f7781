"""Response payload extraction helpers.

The SDK hands back nested, mostly-optional objects; these helpers walk them
defensively and return plain values.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from .base import AudioPayload, LiveMessage, VideoOperation


def extract_inline_audio_payload(response: Any) -> AudioPayload | None:
    """Return the first inline audio part of a generate_content response."""
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return None

    for candidate in candidates:
        content = getattr(candidate, "content", None)
        parts = getattr(content, "parts", None) if content else None
        if not parts:
            continue
        for part in parts:
            inline_data = getattr(part, "inline_data", None)
            if not inline_data:
                continue
            mime_type = getattr(inline_data, "mime_type", None)
            data = getattr(inline_data, "data", None)
            if isinstance(data, bytes) and data:
                return AudioPayload(data=data, mime_type=mime_type)
            if isinstance(data, str) and data:
                try:
                    return AudioPayload(data=base64.b64decode(data, validate=True), mime_type=mime_type)
                except (binascii.Error, ValueError):
                    return None

    return None


def parse_mime(mime_type: str | None) -> tuple[str | None, dict[str, str]]:
    """Split `audio/L16;codec=pcm;rate=24000` into base type and parameters."""
    if not mime_type:
        return None, {}
    parts = [part.strip() for part in mime_type.split(";") if part.strip()]
    mime_base = parts[0].lower() if parts else None
    params: dict[str, str] = {}
    for part in parts[1:]:
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        params[key.strip().lower()] = value.strip()
    return mime_base, params


def extract_image_bytes(response: Any) -> bytes | None:
    generated = getattr(response, "generated_images", None)
    if not generated:
        return None
    image = getattr(generated[0], "image", None)
    data = getattr(image, "image_bytes", None) if image else None
    return data or None


def to_video_operation(operation: Any) -> VideoOperation:
    """Flatten an SDK video operation into a VideoOperation."""
    error = getattr(operation, "error", None)
    error_message = None
    if error:
        if isinstance(error, dict):
            error_message = str(error.get("message") or error)
        else:
            error_message = str(getattr(error, "message", None) or error)

    uri = None
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) if response else None
    if videos:
        video = getattr(videos[0], "video", None)
        uri = getattr(video, "uri", None) if video else None

    return VideoOperation(
        name=str(getattr(operation, "name", "") or ""),
        done=bool(getattr(operation, "done", False)),
        error_message=error_message,
        uri=uri or None,
        raw=operation,
    )


def to_live_message(message: Any) -> LiveMessage:
    server_content = getattr(message, "server_content", None)
    if not server_content:
        return LiveMessage()
    transcription = getattr(server_content, "input_transcription", None)
    text = getattr(transcription, "text", None) if transcription else None
    return LiveMessage(
        input_transcription=text or None,
        turn_complete=bool(getattr(server_content, "turn_complete", False)),
    )
