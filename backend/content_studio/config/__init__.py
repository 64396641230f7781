"""
Application configuration and settings
"""

# Load environment variables from .env file before anything reads os.environ
from dotenv import load_dotenv
load_dotenv()

from .paths import (
    PACKAGE_DIR,
    BACKEND_DIR,
    OUTPUT_DIR,
    JOB_DATA_DIR,
    CREDENTIAL_FILE,
)
from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    VIDEO_POLL_INTERVAL_SECONDS,
    VIDEO_POLL_MAX_WAIT_SECONDS,
    TRANSCRIPTION_SAMPLE_RATE,
    TRANSCRIPTION_BLOCK_SIZE,
    STATUS_SCRIPT,
    STATUS_NARRATION,
    STATUS_IMAGES,
    STATUS_VIDEO,
    EMPTY_TITLE_MESSAGE,
    MISSING_CREDENTIAL_MESSAGE,
    TRANSCRIPTION_ERROR_MESSAGE,
)
from .models import (
    ModelConfig,
    PipelineModels,
    DEFAULT_VOICE,
    VIDEO_RESOLUTION,
    VIDEO_COUNT,
    IMAGE_MIME_TYPE,
    MAX_IMAGES,
    get_pipeline_models,
    reset_pipeline_models,
)
