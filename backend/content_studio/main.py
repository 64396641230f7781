"""
AI Content Studio Backend API
FastAPI application for generating short trivia videos and transcribing
live microphone audio with Gemini.

This is the main entry point that wires together all routes and services.
"""

import logging
import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import (
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    CORS_ORIGINS,
    JOB_DATA_DIR,
    OUTPUT_DIR,
)
from .core import (
    clear_context,
    get_credential_provider,
    get_logger,
    parse_bool_env,
    run_startup_runtime_checks,
    set_request_id,
    setup_logging,
)
from .routes import (
    credential_router,
    generation_router,
    jobs_router,
    transcription_router,
)


def _configure_logging() -> None:
    """LOG_LEVEL, LOG_FILE and JSON_LOGS select level, file sink and format."""
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=Path(log_file) if log_file else None,
        use_json=parse_bool_env(os.getenv("JSON_LOGS"), default=False),
    )


_configure_logging()
logger = get_logger(__name__, service="api")


async def _run_startup() -> None:
    """Check writable directories and fail jobs a previous process left running."""
    from .services.orchestration import get_job_manager

    logger.info("Starting AI Content Studio API", extra={"version": API_VERSION})

    runtime_report = run_startup_runtime_checks(
        output_dir=OUTPUT_DIR,
        job_data_dir=JOB_DATA_DIR,
        strict_dirs=True,
    )
    app.state.runtime_report = runtime_report
    logger.info("Startup runtime checks complete", extra={"runtime_report": runtime_report})

    get_job_manager().mark_interrupted_jobs_failed()


async def _run_shutdown() -> None:
    """Release the microphone and close any live session."""
    from .services.transcription import session as transcription_session

    transcriber = transcription_session._transcriber
    if transcriber is not None:
        await transcriber.aclose()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    await _run_startup()
    try:
        yield
    finally:
        await _run_shutdown()


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    """Add a correlation ID to every request and its log lines."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    set_request_id(request_id)
    path = request.url.path

    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        # status polling is frequent; keep it out of INFO
        level = logging.DEBUG if request.method == "GET" and path.startswith(("/jobs/", "/transcription")) else logging.INFO
        logger.log(level, f"{request.method} {path} -> {response.status_code}", extra={
            "status_code": response.status_code,
            "client": request.client.host if request.client else "unknown",
        })
        return response
    finally:
        clear_context()


# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Generated artifacts
app.mount("/outputs", StaticFiles(directory=str(OUTPUT_DIR)), name="outputs")

# Include routers
app.include_router(credential_router)
app.include_router(generation_router)
app.include_router(jobs_router)
app.include_router(transcription_router)


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "message": "AI Content Studio API - Generate short videos and live transcripts",
        "version": API_VERSION,
    }


@app.get("/health")
async def health_check():
    """Liveness plus whether an API key is configured."""
    checks = {
        "status": "healthy",
        "checks": {
            "credential": {"configured": get_credential_provider().has_credential()},
        },
    }
    runtime_report = getattr(app.state, "runtime_report", None)
    if runtime_report is not None:
        checks["checks"]["runtime_startup"] = runtime_report
    return checks


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "content_studio.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=parse_bool_env(os.getenv("RELOAD"), default=False),
        reload_excludes=["outputs/*", "job_data/*", "*.pyc", "__pycache__/*"],
    )


if __name__ == "__main__":
    run()
