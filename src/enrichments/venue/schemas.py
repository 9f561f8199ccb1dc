"""Venue enrichment schemas."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.enrichment import EnrichmentRecord
from models.lead import Lead


def _first(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class LeadInfo(BaseModel):
    """Lead identity used for prompting and fallback records."""

    id: str
    name: str
    type: str = "venue"
    address: str | None = None
    website: str | None = None
    phone: str | None = None
    email: str | None = None

    @classmethod
    def from_lead(cls, lead: Lead, extracted_data: Mapping | None = None) -> "LeadInfo":
        """Resolve lead identity, lead fields first, then caller-extracted data."""
        extracted = extracted_data if isinstance(extracted_data, Mapping) else {}
        return cls(
            id=lead.id,
            name=lead.name or _first(extracted.get("name"), extracted.get("venueName")) or "Unknown venue",
            type=_first(lead.type) or "venue",
            address=_first(lead.address, extracted.get("physicalAddress"), extracted.get("physical_address")),
            website=_first(lead.website_url, extracted.get("website")),
            phone=_first(lead.contact_phone, extracted.get("phone")),
            email=_first(lead.contact_email, extracted.get("email")),
        )


class EnrichmentResult(BaseModel):
    """Outcome of enriching one lead.

    ``success`` with ``enrichment_data`` may still carry degraded (fallback)
    data. ``skipped`` leads had nothing to enrich and are not failures.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    lead_id: str = Field(description="Lead the result belongs to")
    success: bool = Field(description="True when enrichment data was produced")
    skipped: bool = Field(False, description="True when the lead had no website to enrich")
    enrichment_data: EnrichmentRecord | None = Field(None, description="Normalized, scored record")
    error: str | None = Field(None, description="Failure or skip reason")

    @classmethod
    def skip(cls, lead_id: str, reason: str) -> "EnrichmentResult":
        return cls(lead_id=lead_id, success=False, skipped=True, error=reason)

    @classmethod
    def failure(cls, lead_id: str, error: str) -> "EnrichmentResult":
        return cls(lead_id=lead_id, success=False, error=error)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
