"""
JSON parsing for structured model responses.

Structured-output responses should already be bare JSON; the only leniency
allowed is stripping a markdown fence some models wrap around it.
"""

import json
from typing import Any, Dict, Optional


def strip_markdown_fences(text: str) -> str:
    normalized = (text or "").strip()
    if normalized.startswith("```"):
        lines = normalized.split("\n")
        lines = [line for line in lines if not line.strip().startswith("```")]
        normalized = "\n".join(lines).strip()
    return normalized


def parse_json_object(text: Optional[str]) -> Dict[str, Any]:
    """Parse a JSON object from a model response.

    Raises:
        ValueError: the text is empty, not JSON, or not a JSON object
    """
    normalized = strip_markdown_fences(text or "")
    if not normalized:
        raise ValueError("Empty response")
    payload = json.loads(normalized)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload
