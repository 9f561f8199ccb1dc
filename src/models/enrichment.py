"""Canonical venue enrichment models.

Field names are snake_case in Python and camelCase on the wire (JSON blobs
stored in ``enrichment_data`` and returned by the API).
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LeadPotential(str, Enum):
    """Three-tier lead classification derived from the score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LeadScore(BaseModel):
    """Numeric lead score with its tier and the reasons that produced it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    score: int = Field(ge=0, le=100, description="Lead score, 0-100")
    potential: LeadPotential = Field(description="Tier derived from score")
    reasons: list[str] = Field(default_factory=list, description="Justifications in evaluation order")
    last_calculated: datetime = Field(description="When the score was computed")


class EnrichmentRecord(BaseModel):
    """Canonical enriched-lead payload.

    Scalars left as ``None`` mean "unknown", which is distinct from empty or
    false. Collections are always lists once a record has been normalized.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    venue_name: str | None = Field(None, description="Venue name")
    ai_overview: str | None = Field(None, description="Free-text venue description")
    event_manager_name: str | None = Field(None, description="Event manager / coordinator name")
    event_manager_email: str | None = Field(None, description="Event manager / coordinator email")
    event_manager_phone: str | None = Field(None, description="Event manager / coordinator phone")
    common_event_types: list[str] = Field(default_factory=list, description="Event types hosted, de-duplicated")
    in_house_catering: bool | None = Field(None, description="True, False or unknown (None)")
    venue_capacity: int | None = Field(None, description="Guest capacity, plausible range only")
    amenities: list[str] = Field(default_factory=list, description="Amenities offered")
    pricing_information: str | None = Field(None, description="Pricing details")
    preferred_caterers: list[str] = Field(default_factory=list, description="Preferred caterer list")
    website: str | None = Field(None, description="Website origin, scheme://host")
    lead_score: LeadScore | None = Field(None, description="Score computed from this record")
    last_updated: datetime | None = Field(None, description="When this record was last produced")

    def to_wire(self) -> dict:
        """JSON-ready camelCase dict, unknown fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def __str__(self) -> str:
        score = self.lead_score.score if self.lead_score else None
        return f"EnrichmentRecord(venue_name='{self.venue_name}', website='{self.website}', score={score})"
