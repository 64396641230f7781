"""
Video generation routes
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from ..core import ValidationError
from ..models import GenerationRequest, JobResponse
from ..services.use_cases import GenerationUseCase, get_generation_use_case

router = APIRouter(tags=["generation"])


def validation_http_error(exc: ValidationError) -> HTTPException:
    """400 for bad input, 401 when the caller must supply an API key first."""
    if exc.credential_required:
        return HTTPException(
            status_code=401,
            detail={"message": str(exc), "credential_required": True},
        )
    return HTTPException(status_code=400, detail=str(exc))


@router.post("/generate", response_model=JobResponse)
async def generate_video(
    request: GenerationRequest,
    background_tasks: BackgroundTasks,
    use_case: GenerationUseCase = Depends(get_generation_use_case),
):
    """Start a video generation job"""
    try:
        return use_case.start_generation(request, background_tasks)
    except ValidationError as exc:
        raise validation_http_error(exc) from exc
