"""Tests for batch enrichment orchestration."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from conftest import FakeAI, FakeFetcher, FakeLeadStore

from common.errors import InputError, PersistenceError
from enrichments.venue.enricher import VenueEnricher
from enrichments.venue.schemas import EnrichmentResult
from enrichments.venue.scoring import ScoringProfile
from models.enrichment import EnrichmentRecord
from models.lead import Lead, LeadStatus
from pipeline.orchestrator import BatchCoordinator, unique_ids
from pipeline.schemas import BatchResult, BatchStage, OutcomeStatus

AI_RESPONSE = {"eventManagerEmail": "events@venue.com", "inHouseCatering": False}


def make_leads() -> list[Lead]:
    return [
        Lead(id="1", name="Oak Hall", website_url="oakhall.com"),
        Lead(id="2", name="Pine Barn", website_url="pinebarn.com"),
        Lead(id="3", name="Elm Loft", website_url="elmloft.com"),
    ]


def make_coordinator(store: FakeLeadStore, **kwargs) -> BatchCoordinator:
    enricher = VenueEnricher(FakeFetcher(content="Venue page"), FakeAI(AI_RESPONSE))
    return BatchCoordinator(store, enricher, **kwargs)


class ExplodingEnricher:
    """Enricher whose pipeline throws for selected leads."""

    def __init__(self, explode_for: set[str]):
        self.explode_for = explode_for

    async def enrich_one(self, lead, extracted_data=None, *, overwrite=False, scoring_profile=None):
        if lead.id in self.explode_for:
            raise RuntimeError(f"pipeline exploded for {lead.id}")
        record = EnrichmentRecord(venue_name=lead.name, event_manager_email=f"events@{lead.id}.com")
        return EnrichmentResult(lead_id=lead.id, success=True, enrichment_data=record)


@pytest.mark.asyncio
async def test_one_lead_failure_does_not_abort_batch():
    store = FakeLeadStore(make_leads())
    coordinator = BatchCoordinator(store, ExplodingEnricher({"2"}))

    result = await coordinator.enrich_many(["1", "2", "3"])

    assert result.processed == 3
    assert result.succeeded == 2
    assert result.failed == 1
    assert result.errors == ["Lead 2: pipeline exploded for 2"]
    by_id = {o.lead_id: o for o in result.enriched_leads}
    assert by_id["1"].enrichment_data.event_manager_email == "events@1.com"
    assert by_id["3"].enrichment_data.event_manager_email == "events@3.com"
    assert set(store.updates) == {"1", "3"}


@pytest.mark.asyncio
async def test_successful_batch_persists_enriched_rows():
    store = FakeLeadStore(make_leads())

    result = await make_coordinator(store).enrich_many(["1", "2", "3"])

    assert result.succeeded == 3
    assert result.emails_found == 3
    assert store.fetched == [["1", "2", "3"]]
    update = store.updates["1"]
    assert update.status == LeadStatus.ENRICHED
    assert update.lead_score == 55
    assert update.lead_score_label == "medium"
    assert update.contact_email == "events@venue.com"
    assert update.enrichment_data["eventManagerEmail"] == "events@venue.com"
    assert all(o.saved for o in result.enriched_leads)


@pytest.mark.asyncio
async def test_empty_batch_is_rejected():
    store = FakeLeadStore(make_leads())

    with pytest.raises(InputError):
        await make_coordinator(store).enrich_many([])

    with pytest.raises(InputError):
        await make_coordinator(store).enrich_many(["", "  "])

    assert store.fetched == []


@pytest.mark.asyncio
async def test_lead_without_website_is_skipped_not_failed():
    leads = make_leads() + [Lead(id="4", name="No Site")]
    store = FakeLeadStore(leads)

    result = await make_coordinator(store).enrich_many(["1", "4"])

    assert result.processed == 2
    assert result.succeeded == 1
    assert result.skipped == 1
    assert result.failed == 0
    assert result.errors == []
    assert "4" not in store.updates
    by_id = {o.lead_id: o for o in result.enriched_leads}
    assert by_id["4"].status == OutcomeStatus.SKIPPED


@pytest.mark.asyncio
async def test_strict_mode_rejects_batch_with_missing_websites():
    leads = make_leads() + [Lead(id="4", name="No Site"), Lead(id="5", name="Also No Site")]
    store = FakeLeadStore(leads)
    coordinator = make_coordinator(store)
    coordinator.enricher.enrich_one = AsyncMock()

    with pytest.raises(InputError, match="4, 5"):
        await coordinator.enrich_many(["1", "4", "5"], strict=True)

    coordinator.enricher.enrich_one.assert_not_called()
    assert store.updates == {}


@pytest.mark.asyncio
async def test_strict_default_comes_from_coordinator():
    store = FakeLeadStore(make_leads() + [Lead(id="4", name="No Site")])

    with pytest.raises(InputError):
        await make_coordinator(store, strict=True).enrich_many(["1", "4"])

    result = await make_coordinator(store, strict=True).enrich_many(["1", "4"], strict=False)
    assert result.skipped == 1


@pytest.mark.asyncio
async def test_unknown_lead_ids_are_failed():
    store = FakeLeadStore(make_leads())

    result = await make_coordinator(store).enrich_many(["1", "missing"])

    assert result.processed == 2
    assert result.failed == 1
    assert "Lead missing: Lead not found" in result.errors


@pytest.mark.asyncio
async def test_duplicate_ids_processed_once():
    store = FakeLeadStore(make_leads())

    result = await make_coordinator(store).enrich_many(["1", "1", 1, "2"])

    assert result.processed == 2
    assert store.fetched == [["1", "2"]]


@pytest.mark.asyncio
async def test_persistence_failure_is_reported_separately():
    store = FakeLeadStore(make_leads(), fail_updates_for={"2"})

    result = await make_coordinator(store).enrich_many(["1", "2"])

    assert result.succeeded == 2
    assert result.failed == 0
    assert result.not_saved == 1
    by_id = {o.lead_id: o for o in result.enriched_leads}
    assert by_id["1"].saved is True
    assert by_id["2"].saved is False
    assert by_id["2"].enrichment_data is not None
    assert "HTTP 500" in by_id["2"].persistence_error
    assert any("enriched but not saved" in e for e in result.errors)


@pytest.mark.asyncio
async def test_store_fetch_failure_still_returns_result():
    store = FakeLeadStore(make_leads(), fetch_error=PersistenceError("HTTP 503 fetching leads"))

    result = await make_coordinator(store).enrich_many(["1", "2"])

    assert result.processed == 2
    assert result.failed == 2
    assert result.success is False


@pytest.mark.asyncio
async def test_batch_time_limit_fails_unfinished_leads():
    class StuckEnricher(ExplodingEnricher):
        async def enrich_one(self, lead, extracted_data=None, *, overwrite=False, scoring_profile=None):
            if lead.id == "2":
                await asyncio.sleep(10)
            return await super().enrich_one(lead)

    store = FakeLeadStore(make_leads())
    coordinator = BatchCoordinator(store, StuckEnricher(set()), batch_timeout=0.05)

    result = await coordinator.enrich_many(["1", "2", "3"])

    assert result.succeeded == 2
    assert result.failed == 1
    assert "Lead 2: Timed out before completing" in result.errors


@pytest.mark.asyncio
async def test_stage_callback_reports_each_stage():
    stages = []

    async def on_stage(stage):
        stages.append(stage)

    await make_coordinator(FakeLeadStore(make_leads())).enrich_many(["1"], on_stage=on_stage)

    assert stages == [BatchStage.FETCHING, BatchStage.ENRICHING, BatchStage.PERSISTING]


@pytest.mark.asyncio
async def test_concurrency_is_bounded():
    running = 0
    peak = 0

    class CountingEnricher(ExplodingEnricher):
        async def enrich_one(self, lead, extracted_data=None, *, overwrite=False, scoring_profile=None):
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return await super().enrich_one(lead)

    leads = [Lead(id=str(i), name=f"Venue {i}", website_url=f"venue{i}.com") for i in range(10)]
    coordinator = BatchCoordinator(FakeLeadStore(leads), CountingEnricher(set()), max_concurrent=3)

    result = await coordinator.enrich_many([lead.id for lead in leads])

    assert result.succeeded == 10
    assert peak <= 3


def test_response_matches_public_contract():
    response = BatchResult().to_response()

    assert set(response) >= {"success", "message", "results", "enrichedBusinesses"}
    assert set(response["results"]) == {"processed", "succeeded", "failed", "skipped", "errors"}


def test_unique_ids():
    assert unique_ids(["a", " a", 3, "3", None, "", "b"]) == ["a", "3", "b"]


@pytest.mark.asyncio
async def test_scoring_profile_applies_to_whole_batch():
    store = FakeLeadStore(make_leads())

    await make_coordinator(store).enrich_many(["1", "2"], scoring_profile=ScoringProfile.COARSE)

    # base 20 + website 15 + email 35
    assert {u.lead_score for u in store.updates.values()} == {70}
    assert {u.lead_score_label for u in store.updates.values()} == {"high"}
