"""Batch enrichment schemas."""

from enum import Enum

from pydantic import BaseModel, Field

from models.enrichment import EnrichmentRecord


class BatchStage(str, Enum):
    """Stages a batch moves through, reported to progress callbacks."""

    FETCHING = "fetching"
    ENRICHING = "enriching"
    PERSISTING = "persisting"


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class LeadOutcome(BaseModel):
    """Per-lead result of a batch run."""

    lead_id: str
    name: str | None = None
    status: OutcomeStatus
    enrichment_data: EnrichmentRecord | None = Field(None, description="Set for succeeded leads")
    error: str | None = Field(None, description="Failure or skip reason")
    saved: bool = Field(False, description="Whether the record was persisted")
    persistence_error: str | None = Field(None, description="Why a succeeded lead was not saved")

    def to_wire(self) -> dict:
        data = {
            "id": self.lead_id,
            "name": self.name,
            "status": self.status.value,
            "saved": self.saved,
        }
        if self.enrichment_data is not None:
            data["enrichmentData"] = self.enrichment_data.to_wire()
        if self.error:
            data["error"] = self.error
        if self.persistence_error:
            data["persistenceError"] = self.persistence_error
        return data


class BatchResult(BaseModel):
    """Aggregate of one batch enrichment run."""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    not_saved: int = Field(0, description="Succeeded leads whose persistence failed")
    emails_found: int = Field(0, description="Succeeded leads carrying an event manager email")
    errors: list[str] = Field(default_factory=list)
    enriched_leads: list[LeadOutcome] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.succeeded > 0 or self.failed == 0

    @property
    def message(self) -> str:
        return (
            f"Batch processing complete. Processed: {self.processed}, Succeeded: {self.succeeded}, "
            f"Failed: {self.failed}, Skipped: {self.skipped}, Emails found: {self.emails_found}"
        )

    def add(self, outcome: LeadOutcome) -> None:
        """Count one lead outcome."""
        self.processed += 1
        self.enriched_leads.append(outcome)
        if outcome.status == OutcomeStatus.SUCCEEDED:
            self.succeeded += 1
            if outcome.enrichment_data and outcome.enrichment_data.event_manager_email:
                self.emails_found += 1
        elif outcome.status == OutcomeStatus.FAILED:
            self.failed += 1
            self.errors.append(f"Lead {outcome.lead_id}: {outcome.error}")
        else:
            self.skipped += 1

    def to_response(self) -> dict:
        """Public HTTP contract for batch enrichment."""
        return {
            "success": self.success,
            "message": self.message,
            "results": {
                "processed": self.processed,
                "succeeded": self.succeeded,
                "failed": self.failed,
                "skipped": self.skipped,
                "errors": self.errors,
            },
            "emailsFound": self.emails_found,
            "enrichedBusinesses": [outcome.to_wire() for outcome in self.enriched_leads],
        }
