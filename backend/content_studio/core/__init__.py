"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Error taxonomy and model-service error classification
    - credentials.py: API key capability gate
    - runtime.py: Environment parsing and startup directory checks

Usage:
    from content_studio.core import get_logger, ScriptParseError
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_job_id,
    clear_context,
    sanitize_for_logging,
    LogTimer,
)

from .exceptions import (
    StudioError,
    ValidationError,
    InvalidCredentialError,
    PipelineError,
    ScriptParseError,
    AudioDecodeError,
    ImageGenerationError,
    VideoGenerationError,
    VideoGenerationTimeoutError,
    VideoDownloadError,
    NoDownloadLinkError,
    PipelineCancelledError,
    TranscriptionError,
    MicrophoneUnavailableError,
    SessionAlreadyActiveError,
    CREDENTIAL_ERROR_MARKERS,
    INVALID_CREDENTIAL_MESSAGE,
    is_credential_error,
    classify_service_error,
)

from .credentials import (
    CredentialProvider,
    LocalCredentialStore,
    get_credential_provider,
)

from .runtime import (
    parse_bool_env,
    parse_float_env,
    parse_int_env,
    assert_directory_writable,
    run_startup_runtime_checks,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_job_id",
    "clear_context",
    "sanitize_for_logging",
    "LogTimer",
    # Exceptions
    "StudioError",
    "ValidationError",
    "InvalidCredentialError",
    "PipelineError",
    "ScriptParseError",
    "AudioDecodeError",
    "ImageGenerationError",
    "VideoGenerationError",
    "VideoGenerationTimeoutError",
    "VideoDownloadError",
    "NoDownloadLinkError",
    "PipelineCancelledError",
    "TranscriptionError",
    "MicrophoneUnavailableError",
    "SessionAlreadyActiveError",
    "CREDENTIAL_ERROR_MARKERS",
    "INVALID_CREDENTIAL_MESSAGE",
    "is_credential_error",
    "classify_service_error",
    # Credentials
    "CredentialProvider",
    "LocalCredentialStore",
    "get_credential_provider",
    # Runtime
    "parse_bool_env",
    "parse_float_env",
    "parse_int_env",
    "assert_directory_writable",
    "run_startup_runtime_checks",
]
