from datetime import UTC, datetime

from pydantic import BaseModel, Field

from models.enrichment import EnrichmentRecord
from models.lead import Lead, LeadStatus


class LeadUpdate(BaseModel):
    """Columns written back to the leads table after enrichment."""

    enrichment_data: dict = Field(description="Serialized EnrichmentRecord (camelCase)")
    status: LeadStatus = LeadStatus.ENRICHED
    lead_score: int | None = None
    lead_score_label: str | None = None
    contact_email: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None
    website_url: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_enrichment(cls, lead: Lead, record: EnrichmentRecord) -> "LeadUpdate":
        """Build the row update; contacts take the enriched value, else the lead's own."""
        score = record.lead_score
        return cls(
            enrichment_data=record.to_wire(),
            lead_score=score.score if score else None,
            lead_score_label=score.potential.value if score else None,
            contact_email=record.event_manager_email or lead.contact_email,
            contact_name=record.event_manager_name or lead.contact_name,
            contact_phone=record.event_manager_phone or lead.contact_phone,
            website_url=lead.website_url or record.website,
        )

    def to_row(self) -> dict:
        return self.model_dump(mode="json")
