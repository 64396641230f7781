"""
Realtime transcription routes
"""

from fastapi import APIRouter, Depends, HTTPException

from ..core import (
    MicrophoneUnavailableError,
    SessionAlreadyActiveError,
    StudioError,
    ValidationError,
)
from ..models import TranscriptionStatus
from ..services.transcription import RealtimeTranscriber, get_transcriber
from .generation import validation_http_error

router = APIRouter(prefix="/transcription", tags=["transcription"])


def _status(transcriber: RealtimeTranscriber) -> TranscriptionStatus:
    return TranscriptionStatus(
        state=transcriber.state.value,
        transcript=transcriber.transcript,
        error=transcriber.error,
    )


@router.get("", response_model=TranscriptionStatus)
async def transcription_status(transcriber: RealtimeTranscriber = Depends(get_transcriber)):
    """Current state and the transcript accumulated so far"""
    return _status(transcriber)


@router.post("/start", response_model=TranscriptionStatus)
async def start_transcription(transcriber: RealtimeTranscriber = Depends(get_transcriber)):
    """Acquire the microphone and start streaming to the live model"""
    try:
        await transcriber.start()
    except SessionAlreadyActiveError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except ValidationError as exc:
        raise validation_http_error(exc) from exc
    except MicrophoneUnavailableError as exc:
        raise HTTPException(status_code=503, detail=transcriber.error or str(exc)) from exc
    except StudioError as exc:
        raise HTTPException(status_code=502, detail=transcriber.error or str(exc)) from exc
    return _status(transcriber)


@router.post("/stop", response_model=TranscriptionStatus)
async def stop_transcription(transcriber: RealtimeTranscriber = Depends(get_transcriber)):
    """Stop streaming and release the microphone; safe when idle"""
    transcriber.stop()
    return _status(transcriber)
