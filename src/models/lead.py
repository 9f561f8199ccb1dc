import json
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class LeadStatus(str, Enum):
    """Lifecycle status of a saved lead."""

    NEW = "new"
    SAVED = "saved"
    ENRICHED = "enriched"


class Lead(BaseModel):
    """A saved venue lead as stored in the leads table.

    ``enrichment_data`` is kept as the raw stored blob; the pipeline normalizes
    it before using it as the previous side of a merge.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    website_url: str | None = None
    address: str | None = None
    type: str | None = None
    city: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    contact_name: str | None = None
    enrichment_data: dict | None = Field(None, description="Previously stored enrichment blob")
    status: LeadStatus = LeadStatus.SAVED
    lead_score: int | None = None
    lead_score_label: str | None = None

    @classmethod
    def from_record(cls, record: dict) -> "Lead":
        """Build a Lead from a leads-table row."""
        enrichment_data = record.get("enrichment_data")
        if isinstance(enrichment_data, str):
            # Some rows hold the blob as serialized JSON
            try:
                enrichment_data = json.loads(enrichment_data)
            except (json.JSONDecodeError, ValueError):
                enrichment_data = None
        if not isinstance(enrichment_data, dict):
            enrichment_data = None

        status = record.get("status")
        if status not in {s.value for s in LeadStatus}:
            status = LeadStatus.SAVED

        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            website_url=record.get("website_url"),
            address=record.get("address"),
            type=record.get("type"),
            city=record.get("city"),
            contact_email=record.get("contact_email"),
            contact_phone=record.get("contact_phone"),
            contact_name=record.get("contact_name"),
            enrichment_data=enrichment_data,
            status=status,
            lead_score=record.get("lead_score"),
            lead_score_label=record.get("lead_score_label"),
        )
