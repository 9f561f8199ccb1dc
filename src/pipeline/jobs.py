"""
Job-status store for asynchronous batch enrichment.

Jobs are created on submit, updated on every stage transition and retained
for ``ttl_seconds`` after reaching a terminal state.
"""

import asyncio
from collections.abc import Iterable
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, Field

from common.config import config
from common.errors import InputError
from common.logging import get_logger
from pipeline.orchestrator import BatchCoordinator, unique_ids
from pipeline.schemas import BatchStage

logger = get_logger(__name__)


class JobStatus(str, Enum):
    QUEUED = "queued"
    FETCHING = "fetching"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    COMPLETE = "complete"
    ERROR = "error"


JOB_PROGRESS: dict[JobStatus, int] = {
    JobStatus.QUEUED: 5,
    JobStatus.FETCHING: 20,
    JobStatus.ENRICHING: 50,
    JobStatus.PERSISTING: 80,
    JobStatus.COMPLETE: 100,
    JobStatus.ERROR: 0,
}

TERMINAL_STATUSES = {JobStatus.COMPLETE, JobStatus.ERROR}

STAGE_MESSAGES: dict[BatchStage, str] = {
    BatchStage.FETCHING: "Fetching leads",
    BatchStage.ENRICHING: "Enriching leads",
    BatchStage.PERSISTING: "Saving enrichment results",
}


def _now() -> datetime:
    return datetime.now(UTC)


class Job(BaseModel):
    id: str
    kind: str
    status: JobStatus = JobStatus.QUEUED
    payload: dict = Field(default_factory=dict)
    result: dict | None = None
    error: str | None = None
    message: str | None = None
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)
    finished_at: datetime | None = None
    polled_at: datetime | None = Field(None, description="First read after reaching a terminal status")

    @property
    def progress(self) -> int:
        return JOB_PROGRESS[self.status]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def elapsed_seconds(self, now: datetime | None = None) -> float:
        end = self.finished_at or now or _now()
        return round((end - self.created_at).total_seconds(), 3)

    def to_wire(self) -> dict:
        data = {
            "jobId": self.id,
            "kind": self.kind,
            "status": self.status.value,
            "progress": self.progress,
            "message": self.message,
            "elapsedSeconds": self.elapsed_seconds(),
        }
        if self.result is not None:
            data["result"] = self.result
        if self.error is not None:
            data["error"] = self.error
        return data


class JobStore(Protocol):
    async def create(self, kind: str, payload: dict) -> Job: ...

    async def get(self, job_id: str) -> Job | None: ...

    async def update(self, job_id: str, **changes: Any) -> Job: ...


class InMemoryJobStore:
    """Process-local job store.

    A finished job is kept until its result has been read, then for
    ``ttl_seconds`` more. Finished jobs nobody reads are dropped
    ``unpolled_ttl_seconds`` after finishing.
    """

    def __init__(
        self,
        ttl_seconds: int = config.job_ttl_seconds,
        unpolled_ttl_seconds: int = config.job_unpolled_ttl_seconds,
    ):
        self.ttl_seconds = ttl_seconds
        self.unpolled_ttl_seconds = unpolled_ttl_seconds
        self._jobs: dict[str, Job] = {}
        self._lock = asyncio.Lock()

    def _is_expired(self, job: Job, now: datetime) -> bool:
        if job.polled_at:
            return (now - job.polled_at).total_seconds() > self.ttl_seconds
        if job.finished_at:
            return (now - job.finished_at).total_seconds() > self.unpolled_ttl_seconds
        return False

    def _evict_expired(self, now: datetime) -> None:
        expired = [job_id for job_id, job in self._jobs.items() if self._is_expired(job, now)]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.debug(f"[Jobs] Evicted {len(expired)} expired jobs")

    async def create(self, kind: str, payload: dict) -> Job:
        async with self._lock:
            self._evict_expired(_now())
            job = Job(id=uuid4().hex, kind=kind, payload=payload)
            self._jobs[job.id] = job
        logger.info(f"[Jobs] Created {kind} job {job.id}")
        return job.model_copy()

    async def get(self, job_id: str) -> Job | None:
        """Read a job; the first read of a finished job starts its retention TTL."""
        async with self._lock:
            now = _now()
            self._evict_expired(now)
            job = self._jobs.get(job_id)
            if job is None:
                return None
            if job.is_terminal and job.polled_at is None:
                job = job.model_copy(update={"polled_at": now})
                self._jobs[job_id] = job
            return job.model_copy()

    async def update(self, job_id: str, **changes: Any) -> Job:
        """Apply changes to a job.

        Raises:
            KeyError: Unknown or expired job id.
        """
        async with self._lock:
            now = _now()
            self._evict_expired(now)
            job = self._jobs.get(job_id)
            if job is None:
                raise KeyError(job_id)

            if "status" in changes:
                changes["status"] = JobStatus(changes["status"])
                if changes["status"] in TERMINAL_STATUSES:
                    changes.setdefault("finished_at", now)
            changes["updated_at"] = now

            job = job.model_copy(update=changes)
            self._jobs[job_id] = job
        logger.debug(f"[Jobs] Job {job_id} -> {job.status.value}")
        return job.model_copy()

    def __len__(self) -> int:
        return len(self._jobs)


class JobRunner:
    """Runs batch enrichment in the background and records its progress in a job store."""

    BATCH_KIND = "batch_enrichment"

    def __init__(self, store: JobStore, coordinator: BatchCoordinator):
        self.store = store
        self.coordinator = coordinator
        self._tasks: set[asyncio.Task] = set()

    async def submit_batch(self, lead_ids: Iterable, *, strict: bool | None = None) -> Job:
        """Create a job and schedule the batch.

        Raises:
            InputError: No lead ids given.
        """
        ids = unique_ids(lead_ids)
        if not ids:
            raise InputError("No leads to enrich")

        job = await self.store.create(self.BATCH_KIND, {"leadIds": ids, "strict": strict})
        job = await self.store.update(job.id, message=f"Queued {len(ids)} leads")

        task = asyncio.create_task(self._run_batch(job.id, ids, strict), name=f"job-{job.id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return job

    async def _run_batch(self, job_id: str, lead_ids: list[str], strict: bool | None) -> None:
        async def on_stage(stage: BatchStage) -> None:
            await self.store.update(job_id, status=JobStatus(stage.value), message=STAGE_MESSAGES[stage])

        try:
            result = await self.coordinator.enrich_many(lead_ids, strict=strict, on_stage=on_stage)
        except Exception as e:
            logger.error(f"[Jobs] Job {job_id} failed: {type(e).__name__}: {e}")
            await self.store.update(job_id, status=JobStatus.ERROR, error=str(e), message="Enrichment failed")
            return

        await self.store.update(job_id, status=JobStatus.COMPLETE, result=result.to_response(), message=result.message)
        logger.info(f"[Jobs] Job {job_id} complete")

    async def wait(self) -> None:
        """Wait for all scheduled jobs to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
