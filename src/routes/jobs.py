"""Asynchronous batch enrichment jobs with status polling."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field

from common.errors import InputError
from common.logging import get_logger
from pipeline.jobs import JobRunner
from routes.dependencies import get_job_runner

logger = get_logger(__name__)
router = APIRouter(prefix="/api/enrichment/jobs", tags=["jobs"])


class SubmitJobRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lead_ids: list[str | int] = Field(default_factory=list, alias="leadIds")
    strict: bool | None = None


@router.post("", status_code=status.HTTP_202_ACCEPTED)
async def submit_job(request: SubmitJobRequest, runner: JobRunner = Depends(get_job_runner)):
    """Queue a batch enrichment and return its job id for polling."""
    try:
        job = await runner.submit_batch(request.lead_ids, strict=request.strict)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return {"jobId": job.id, "status": job.status.value, "progress": job.progress}


@router.get("/{job_id}")
async def get_job(job_id: str, runner: JobRunner = Depends(get_job_runner)):
    """Current status, progress and (once finished) result of a job."""
    job = await runner.store.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found or expired")
    return job.to_wire()
