"""Tests for the job-status store and background batch runner."""

from datetime import UTC, datetime, timedelta

import pytest
from conftest import FakeAI, FakeFetcher, FakeLeadStore

from common.errors import InputError
from enrichments.venue.enricher import VenueEnricher
from models.lead import Lead
from pipeline.jobs import InMemoryJobStore, Job, JobRunner, JobStatus
from pipeline.orchestrator import BatchCoordinator


def make_runner(leads: list[Lead], **coordinator_kwargs) -> JobRunner:
    enricher = VenueEnricher(FakeFetcher(content="Venue page"), FakeAI({"eventManagerEmail": "events@venue.com"}))
    coordinator = BatchCoordinator(FakeLeadStore(leads), enricher, **coordinator_kwargs)
    return JobRunner(InMemoryJobStore(), coordinator)


# --- Job model ---


@pytest.mark.parametrize(
    "status,progress",
    [
        (JobStatus.QUEUED, 5),
        (JobStatus.FETCHING, 20),
        (JobStatus.ENRICHING, 50),
        (JobStatus.PERSISTING, 80),
        (JobStatus.COMPLETE, 100),
        (JobStatus.ERROR, 0),
    ],
)
def test_progress_follows_status(status, progress):
    assert Job(id="j", kind="test", status=status).progress == progress


def test_job_to_wire():
    job = Job(id="j1", kind="batch_enrichment", message="Queued 2 leads")
    wire = job.to_wire()

    assert wire["jobId"] == "j1"
    assert wire["status"] == "queued"
    assert wire["progress"] == 5
    assert "result" not in wire


# --- Store ---


@pytest.mark.asyncio
async def test_create_get_update():
    store = InMemoryJobStore()

    job = await store.create("batch_enrichment", {"leadIds": ["1"]})
    fetched = await store.get(job.id)
    assert fetched.status == JobStatus.QUEUED
    assert fetched.payload == {"leadIds": ["1"]}

    updated = await store.update(job.id, status="enriching", message="Enriching leads")
    assert updated.status == JobStatus.ENRICHING
    assert updated.finished_at is None
    assert updated.updated_at >= job.updated_at


@pytest.mark.asyncio
async def test_terminal_status_sets_finished_at():
    store = InMemoryJobStore()
    job = await store.create("batch_enrichment", {})

    done = await store.update(job.id, status=JobStatus.COMPLETE, result={"success": True})

    assert done.finished_at is not None
    assert done.is_terminal


@pytest.mark.asyncio
async def test_update_unknown_job_raises():
    with pytest.raises(KeyError):
        await InMemoryJobStore().update("nope", status=JobStatus.ERROR)


@pytest.mark.asyncio
async def test_get_returns_copy():
    store = InMemoryJobStore()
    job = await store.create("batch_enrichment", {})

    fetched = await store.get(job.id)
    fetched.status = JobStatus.ERROR

    assert (await store.get(job.id)).status == JobStatus.QUEUED


@pytest.mark.asyncio
async def test_finished_job_is_kept_until_polled():
    store = InMemoryJobStore(ttl_seconds=60, unpolled_ttl_seconds=3600)
    job = await store.create("batch_enrichment", {})
    await store.update(job.id, status=JobStatus.COMPLETE, finished_at=datetime.now(UTC) - timedelta(seconds=120))

    polled = await store.get(job.id)

    assert polled is not None
    assert polled.polled_at is not None
    assert (await store.get(job.id)).polled_at == polled.polled_at


@pytest.mark.asyncio
async def test_running_job_read_does_not_start_ttl():
    store = InMemoryJobStore()
    job = await store.create("batch_enrichment", {})
    await store.update(job.id, status=JobStatus.ENRICHING)

    assert (await store.get(job.id)).polled_at is None


@pytest.mark.asyncio
async def test_polled_jobs_expire_after_ttl():
    store = InMemoryJobStore(ttl_seconds=60)
    old = await store.create("batch_enrichment", {})
    running = await store.create("batch_enrichment", {})
    await store.update(old.id, status=JobStatus.COMPLETE, polled_at=datetime.now(UTC) - timedelta(seconds=120))
    await store.update(running.id, status=JobStatus.ENRICHING)

    assert await store.get(old.id) is None
    assert (await store.get(running.id)).status == JobStatus.ENRICHING
    assert len(store) == 1


@pytest.mark.asyncio
async def test_unpolled_jobs_expire_after_longer_ttl():
    store = InMemoryJobStore(ttl_seconds=60, unpolled_ttl_seconds=300)
    job = await store.create("batch_enrichment", {})
    await store.update(job.id, status=JobStatus.ERROR, finished_at=datetime.now(UTC) - timedelta(seconds=600))

    assert await store.get(job.id) is None
    assert len(store) == 0


# --- Runner ---


@pytest.mark.asyncio
async def test_submit_batch_runs_to_completion():
    runner = make_runner([Lead(id="1", name="Oak Hall", website_url="oakhall.com")])

    job = await runner.submit_batch(["1"])
    assert job.status == JobStatus.QUEUED
    assert job.message == "Queued 1 leads"

    await runner.wait()
    finished = await runner.store.get(job.id)

    assert finished.status == JobStatus.COMPLETE
    assert finished.progress == 100
    assert finished.result["results"]["succeeded"] == 1
    assert finished.result["enrichedBusinesses"][0]["id"] == "1"


@pytest.mark.asyncio
async def test_submit_batch_records_rejection_as_error():
    runner = make_runner([Lead(id="1", name="No Site")])

    job = await runner.submit_batch(["1"], strict=True)
    await runner.wait()
    finished = await runner.store.get(job.id)

    assert finished.status == JobStatus.ERROR
    assert finished.progress == 0
    assert "missing website" in finished.error


@pytest.mark.asyncio
async def test_submit_empty_batch_rejected_immediately():
    runner = make_runner([])

    with pytest.raises(InputError):
        await runner.submit_batch([])

    assert len(runner.store) == 0
