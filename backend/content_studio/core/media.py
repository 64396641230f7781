"""
Media utilities - base64 transport encoding, data URIs, PCM conversion and WAV output
"""

import base64
import binascii
import io
import wave
from typing import Tuple

import numpy as np

# Multiple of 3 so every chunk encodes without padding and chunks concatenate cleanly
BASE64_CHUNK_BYTES = 3 * 8192

PCM16_SCALE = 32768


def encode_base64(data: bytes, chunk_size: int = BASE64_CHUNK_BYTES) -> str:
    """Base64-encode a buffer of any size, one bounded chunk at a time.

    Args:
        data: Raw bytes (bytes, bytearray or memoryview)
        chunk_size: Bytes per chunk; rounded down to a multiple of 3

    Returns:
        The standard (padded) base64 text of the whole buffer
    """
    chunk_size = max(3, chunk_size - chunk_size % 3)
    view = memoryview(data).cast("B")
    return "".join(
        base64.b64encode(view[offset:offset + chunk_size]).decode("ascii")
        for offset in range(0, len(view), chunk_size)
    )


def decode_base64(text: str) -> bytes:
    """Decode standard base64, rejecting non-alphabet characters."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Invalid base64 payload") from exc


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{encode_base64(data)}"


def from_data_uri(uri: str) -> Tuple[bytes, str]:
    """Split a `data:<mime>;base64,<payload>` URI into (bytes, mime type)."""
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("Not a data URI")
    header, payload = uri[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    return decode_base64(payload), header[: -len(";base64")]


def float_to_pcm16(samples: np.ndarray) -> bytes:
    """Convert float samples in [-1, 1] to little-endian 16-bit signed PCM.

    Samples are scaled linearly by 32768 and clipped to the int16 range, so a
    full-scale positive sample maps to 32767 instead of wrapping.
    """
    scaled = np.asarray(samples, dtype=np.float32).reshape(-1) * PCM16_SCALE
    return np.clip(scaled, -PCM16_SCALE, PCM16_SCALE - 1).astype("<i2").tobytes()


def pcm16_to_wav(pcm: bytes, sample_rate: int = 24000, channels: int = 1) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container (drops any trailing partial frame)."""
    frame_size = 2 * max(1, channels)
    usable = len(pcm) - (len(pcm) % frame_size)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wavf:
        wavf.setnchannels(max(1, channels))
        wavf.setsampwidth(2)
        wavf.setframerate(sample_rate)
        wavf.writeframes(pcm[:usable])
    return buffer.getvalue()
