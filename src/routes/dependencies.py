"""Process-wide service instances, overridable through FastAPI dependency overrides."""

from functools import lru_cache

from enrichments.venue.enricher import VenueEnricher
from pipeline.jobs import InMemoryJobStore, JobRunner
from pipeline.orchestrator import BatchCoordinator


@lru_cache
def get_enricher() -> VenueEnricher:
    return VenueEnricher()


@lru_cache
def get_coordinator() -> BatchCoordinator:
    return BatchCoordinator(enricher=get_enricher())


@lru_cache
def get_job_runner() -> JobRunner:
    return JobRunner(InMemoryJobStore(), get_coordinator())
