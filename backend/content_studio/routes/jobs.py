"""
Job management routes.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..models import JobResponse
from ..services.use_cases import GenerationUseCase, get_generation_use_case

router = APIRouter(tags=["jobs"])


@router.get("/jobs", response_model=List[JobResponse])
async def list_jobs(use_case: GenerationUseCase = Depends(get_generation_use_case)):
    """List all jobs, newest first"""
    return use_case.list_jobs()


@router.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job_status(job_id: str, use_case: GenerationUseCase = Depends(get_generation_use_case)):
    """Get the status of a generation job"""
    job = use_case.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.delete("/jobs/{job_id}", response_model=JobResponse)
async def cancel_job(job_id: str, use_case: GenerationUseCase = Depends(get_generation_use_case)):
    """Cancel a running job, or delete a finished one with its outputs"""
    job = use_case.cancel_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job
