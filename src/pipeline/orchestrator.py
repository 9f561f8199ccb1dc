# src/pipeline/orchestrator.py
"""
Batch orchestrator that enriches many saved leads concurrently
and writes each successful result back to the lead store.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable

from common.config import config
from common.errors import InputError
from common.logging import get_logger
from enrichments.venue.enricher import VenueEnricher
from enrichments.venue.schemas import EnrichmentResult, LeadInfo
from enrichments.venue.scoring import ScoringProfile
from models.lead import Lead
from pipeline.schemas import BatchResult, BatchStage, LeadOutcome, OutcomeStatus
from services.protocols import LeadStore
from services.supabase.client import SupabaseClient
from services.supabase.schemas import LeadUpdate

logger = get_logger(__name__)

StageCallback = Callable[[BatchStage], Awaitable[None]]


def unique_ids(lead_ids: Iterable) -> list[str]:
    """Stringify, drop blanks and collapse duplicates, keeping first-seen order."""
    seen: list[str] = []
    for lead_id in lead_ids:
        text = str(lead_id).strip() if lead_id is not None else ""
        if text and text not in seen:
            seen.append(text)
    return seen


class BatchCoordinator:
    """Runs the venue pipeline over many leads; one lead's failure never aborts the batch."""

    def __init__(
        self,
        store: LeadStore | None = None,
        enricher: VenueEnricher | None = None,
        *,
        max_concurrent: int = config.batch_max_concurrent,
        batch_timeout: float = config.batch_timeout,
        strict: bool = config.batch_strict_validation,
    ):
        self._store = store
        self._enricher = enricher
        self.max_concurrent = max(1, max_concurrent)
        self.batch_timeout = batch_timeout
        self.strict = strict

    @property
    def store(self) -> LeadStore:
        if self._store is None:
            self._store = SupabaseClient()
        return self._store

    @property
    def enricher(self) -> VenueEnricher:
        if self._enricher is None:
            self._enricher = VenueEnricher()
        return self._enricher

    async def _notify(self, on_stage: StageCallback | None, stage: BatchStage):
        """Report stage if a callback is configured."""
        if on_stage:
            await on_stage(stage)

    # Enrichment

    async def _enrich(
        self,
        lead: Lead,
        semaphore: asyncio.Semaphore,
        overwrite: bool,
        scoring_profile: ScoringProfile | None,
    ) -> EnrichmentResult:
        async with semaphore:
            try:
                return await self.enricher.enrich_one(lead, overwrite=overwrite, scoring_profile=scoring_profile)
            except Exception as e:
                logger.error(f"[Batch] Lead {lead.id} failed: {type(e).__name__}: {e}", exc_info=True)
                return EnrichmentResult.failure(lead.id, str(e) or type(e).__name__)

    async def _enrich_all(
        self,
        leads: list[Lead],
        overwrite: bool,
        scoring_profile: ScoringProfile | None,
    ) -> dict[str, EnrichmentResult]:
        """Enrich leads concurrently under the batch wall-clock cap.

        Leads still running when the cap expires are cancelled and reported as failed.
        """
        semaphore = asyncio.Semaphore(self.max_concurrent)
        tasks = {
            lead.id: asyncio.create_task(
                self._enrich(lead, semaphore, overwrite, scoring_profile),
                name=f"enrich-{lead.id}",
            )
            for lead in leads
        }
        if not tasks:
            return {}

        _, pending = await asyncio.wait(tasks.values(), timeout=self.batch_timeout)
        for task in pending:
            task.cancel()
        if pending:
            logger.warning(f"[Batch] Time limit of {self.batch_timeout:.0f}s reached, cancelled {len(pending)} leads")
            await asyncio.gather(*pending, return_exceptions=True)

        results = {}
        for lead_id, task in tasks.items():
            if task in pending:
                results[lead_id] = EnrichmentResult.failure(lead_id, "Timed out before completing")
            else:
                results[lead_id] = task.result()
        return results

    # Persistence

    async def _persist(self, lead: Lead, outcome: LeadOutcome, semaphore: asyncio.Semaphore) -> None:
        """Save one enriched lead; a failure downgrades it to enriched-but-not-saved."""
        async with semaphore:
            try:
                await self.store.update_lead(lead.id, LeadUpdate.from_enrichment(lead, outcome.enrichment_data))
                outcome.saved = True
            except Exception as e:
                logger.error(f"[Persist] Could not save lead {lead.id}: {type(e).__name__}: {e}")
                outcome.persistence_error = str(e) or type(e).__name__

    # Batch

    async def enrich_many(
        self,
        lead_ids: Iterable,
        *,
        strict: bool | None = None,
        overwrite: bool = False,
        scoring_profile: ScoringProfile | None = None,
        on_stage: StageCallback | None = None,
    ) -> BatchResult:
        """Enrich and persist a batch of saved leads.

        ``scoring_profile`` picks the scoring strategy for every lead in the
        batch; the enricher's default applies when it is not given.

        Raises:
            InputError: No lead ids given, or (strict mode) any lead lacks a website.
        """
        ids = unique_ids(lead_ids)
        if not ids:
            raise InputError("No leads to enrich")
        strict = self.strict if strict is None else strict

        logger.info(f"[Batch] Processing {len(ids)} leads (strict={strict})")
        result = BatchResult()

        # Fetch stage
        await self._notify(on_stage, BatchStage.FETCHING)
        try:
            leads = await self.store.get_leads_by_ids(ids)
        except Exception as e:
            logger.error(f"[Batch] Could not fetch leads: {type(e).__name__}: {e}")
            for lead_id in ids:
                result.add(LeadOutcome(lead_id=lead_id, status=OutcomeStatus.FAILED, error=f"Failed to fetch leads: {e}"))
            return result

        by_id = {lead.id: lead for lead in leads if lead.id in ids}

        if strict:
            missing = [lead_id for lead_id in ids if lead_id in by_id and not LeadInfo.from_lead(by_id[lead_id]).website]
            if missing:
                raise InputError(f"Leads missing website URL: {', '.join(missing)}")

        # Enrich stage
        await self._notify(on_stage, BatchStage.ENRICHING)
        results = await self._enrich_all(list(by_id.values()), overwrite, scoring_profile)

        outcomes: dict[str, LeadOutcome] = {}
        for lead_id in ids:
            lead = by_id.get(lead_id)
            if lead is None:
                outcomes[lead_id] = LeadOutcome(lead_id=lead_id, status=OutcomeStatus.FAILED, error="Lead not found")
                continue

            enrichment = results[lead_id]
            if enrichment.skipped:
                status = OutcomeStatus.SKIPPED
            elif enrichment.success and enrichment.enrichment_data is not None:
                status = OutcomeStatus.SUCCEEDED
            else:
                status = OutcomeStatus.FAILED
            outcomes[lead_id] = LeadOutcome(
                lead_id=lead_id,
                name=lead.name or None,
                status=status,
                enrichment_data=enrichment.enrichment_data,
                error=enrichment.error,
            )

        # Persist stage
        to_save = [o for o in outcomes.values() if o.status == OutcomeStatus.SUCCEEDED]
        if to_save:
            await self._notify(on_stage, BatchStage.PERSISTING)
            semaphore = asyncio.Semaphore(self.max_concurrent)
            await asyncio.gather(*(self._persist(by_id[o.lead_id], o, semaphore) for o in to_save))

        for lead_id in ids:
            outcome = outcomes[lead_id]
            result.add(outcome)
            if outcome.persistence_error:
                result.not_saved += 1
                result.errors.append(f"Lead {lead_id}: enriched but not saved: {outcome.persistence_error}")

        logger.info(f"[Batch] {result.message}")
        return result
