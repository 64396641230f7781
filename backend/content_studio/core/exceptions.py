"""
Core Exceptions

Error taxonomy for the generation pipeline and the transcription session,
plus the single place where model-service failures are classified.
"""

from typing import Optional


class StudioError(Exception):
    """Base exception for all application errors."""
    pass


class ValidationError(StudioError):
    """Input rejected before any network call (empty title, missing credential)."""

    def __init__(self, message: str, *, credential_required: bool = False):
        super().__init__(message)
        self.credential_required = credential_required


class InvalidCredentialError(StudioError):
    """The model service rejected the credential or its permissions."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


# === Pipeline ===

class PipelineError(StudioError):
    """Base exception for video generation pipeline failures."""
    pass


class ScriptParseError(PipelineError):
    pass


class AudioDecodeError(PipelineError):
    pass


class ImageGenerationError(PipelineError):
    pass


class VideoGenerationError(PipelineError):
    pass


class VideoGenerationTimeoutError(VideoGenerationError):
    pass


class VideoDownloadError(VideoGenerationError):
    pass


class NoDownloadLinkError(PipelineError):
    pass


class PipelineCancelledError(PipelineError):
    pass


# === Transcription ===

class TranscriptionError(StudioError):
    """Base exception for realtime transcription failures."""
    pass


class MicrophoneUnavailableError(TranscriptionError):
    pass


class SessionAlreadyActiveError(TranscriptionError):
    pass


# === Classification ===

# Substrings the service uses for key/permission failures, matched
# case-sensitively. Matching is best-effort: swap for structured error codes
# if the SDK ever exposes them.
CREDENTIAL_ERROR_MARKERS = (
    "API key not valid",
    "permission",
    "entity was not found",
)

INVALID_CREDENTIAL_MESSAGE = (
    "The provided API Key is invalid or does not have the required permissions. "
    "The key has been cleared."
)


def is_credential_error(message: Optional[str]) -> bool:
    """Return True when a failure message signals a credential/permission problem."""
    if not message:
        return False
    return any(marker in message for marker in CREDENTIAL_ERROR_MARKERS)


def classify_service_error(exc: BaseException) -> BaseException:
    """Map a raw model-service failure onto the taxonomy.

    Credential failures become InvalidCredentialError; everything else is
    returned unchanged.
    """
    if isinstance(exc, InvalidCredentialError):
        return exc
    if is_credential_error(str(exc)):
        return InvalidCredentialError(INVALID_CREDENTIAL_MESSAGE, cause=exc)
    return exc
