"""
Tests for SDK response flattening helpers
"""

import base64
from types import SimpleNamespace as NS

from content_studio.services.gemini.payloads import (
    extract_image_bytes,
    extract_inline_audio_payload,
    parse_mime,
    to_live_message,
    to_video_operation,
)


def _audio_response(data, mime_type="audio/L16;codec=pcm;rate=24000"):
    part = NS(inline_data=NS(data=data, mime_type=mime_type))
    return NS(candidates=[NS(content=NS(parts=[NS(inline_data=None), part]))])


class TestInlineAudio:
    def test_bytes(self):
        payload = extract_inline_audio_payload(_audio_response(b"\x01\x02"))
        assert payload.data == b"\x01\x02"
        assert payload.mime_type.startswith("audio/L16")

    def test_base64_text(self):
        payload = extract_inline_audio_payload(_audio_response(base64.b64encode(b"pcm").decode()))
        assert payload.data == b"pcm"

    def test_missing(self):
        assert extract_inline_audio_payload(NS(candidates=[])) is None
        assert extract_inline_audio_payload(NS(candidates=[NS(content=None)])) is None

    def test_invalid_base64(self):
        assert extract_inline_audio_payload(_audio_response("***")) is None


def test_parse_mime():
    assert parse_mime("audio/L16;codec=pcm;rate=24000") == ("audio/l16", {"codec": "pcm", "rate": "24000"})
    assert parse_mime(None) == (None, {})


def test_extract_image_bytes():
    response = NS(generated_images=[NS(image=NS(image_bytes=b"jpg"))])
    assert extract_image_bytes(response) == b"jpg"
    assert extract_image_bytes(NS(generated_images=[])) is None


class TestVideoOperation:
    def test_pending(self):
        op = to_video_operation(NS(name="operations/9", done=False, error=None, response=None))
        assert op.name == "operations/9"
        assert op.done is False
        assert op.uri is None

    def test_done_with_uri(self):
        raw = NS(
            name="operations/9",
            done=True,
            error=None,
            response=NS(generated_videos=[NS(video=NS(uri="https://x/v.mp4"))]),
        )
        op = to_video_operation(raw)
        assert op.uri == "https://x/v.mp4"
        assert op.raw is raw

    def test_error_dict_and_object(self):
        assert to_video_operation(NS(name="a", done=True, error={"message": "blocked"})).error_message == "blocked"
        assert to_video_operation(NS(name="a", done=True, error=NS(message="quota"))).error_message == "quota"


def test_live_message():
    message = NS(server_content=NS(input_transcription=NS(text="hello"), turn_complete=True))
    parsed = to_live_message(message)
    assert parsed.input_transcription == "hello"
    assert parsed.turn_complete is True

    assert to_live_message(NS(server_content=None)).input_transcription is None
