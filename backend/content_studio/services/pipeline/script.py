"""
Script stage - turns a title into a narration script and visual keywords.
"""

from typing import List

from pydantic import BaseModel, Field
from pydantic import ValidationError as SchemaValidationError

from content_studio.core import ScriptParseError, get_logger
from content_studio.services.gemini import ModelServiceClient
from content_studio.services.parsing import parse_json_object

from .types import ScriptResult

logger = get_logger(__name__, component="script_stage")

SCRIPT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "script": {
            "type": "STRING",
            "description": "The script text, between 100 and 150 words.",
        },
        "keywords": {
            "type": "ARRAY",
            "description": "An array of 5 to 7 main keywords from the script.",
            "items": {"type": "STRING"},
        },
    },
    "required": ["script", "keywords"],
}

SYSTEM_INSTRUCTION = """You are an expert in 'Roblox' and a viral video scriptwriter for TikTok and Reels. Your task is to create a trivia script about Roblox based on the user's title.
- The tone must be mysterious, intriguing, and direct.
- The script must be between 100 and 150 words.
- Do not include greetings (like 'Hello everyone') or farewells/CTAs (like 'like and follow'). Get straight to the point.
- Use short, impactful sentences.
- You must return the response in the specified JSON format."""

SCRIPT_PARSE_MESSAGE = "Could not understand the model's response for the script."


class _ScriptPayload(BaseModel):
    script: str = Field(..., min_length=1)
    keywords: List[str] = Field(..., min_length=1)


def build_script_prompt(title: str) -> str:
    return f'Generate a script for a short video about: "{title}"'


def parse_script_response(text: str) -> ScriptResult:
    """Validate a structured script response against SCRIPT_SCHEMA.

    Raises:
        ScriptParseError: not JSON, not an object, or fields missing/mistyped
    """
    try:
        payload = _ScriptPayload.model_validate(parse_json_object(text), strict=True)
    except (ValueError, SchemaValidationError) as exc:
        logger.error("Failed to parse script JSON", extra={"response_preview": (text or "")[:500]})
        raise ScriptParseError(SCRIPT_PARSE_MESSAGE) from exc

    keywords = [keyword.strip() for keyword in payload.keywords if keyword.strip()]
    if not keywords:
        raise ScriptParseError(SCRIPT_PARSE_MESSAGE)
    return ScriptResult(script=payload.script.strip(), keywords=keywords)


class ScriptGenerator:
    """Writes the narration script for a title."""

    def __init__(self, service: ModelServiceClient):
        self.service = service

    async def generate(self, title: str) -> ScriptResult:
        text = await self.service.generate_structured_text(
            build_script_prompt(title),
            SYSTEM_INSTRUCTION,
            SCRIPT_SCHEMA,
        )
        result = parse_script_response(text)
        logger.info(
            "Script generated",
            extra={"words": len(result.script.split()), "keywords": len(result.keywords)},
        )
        return result
