"""Records built from the lead's own fields when the AI stage yields nothing usable."""

from enrichments.venue.normalization import normalize
from enrichments.venue.schemas import LeadInfo
from models.enrichment import EnrichmentRecord

# Fields the AI record inherits from the lead when the model leaves them out
LEAD_DEFAULT_FIELDS = ("venue_name", "website", "event_manager_email", "event_manager_phone")


def build_fallback_record(lead_info: LeadInfo) -> EnrichmentRecord:
    """Minimal heuristic record.

    Draws only on the lead itself; scraped content is never mined here.
    """
    location = lead_info.address or "an unknown location"
    raw = {
        "venueName": lead_info.name,
        "website": lead_info.website,
        "eventManagerPhone": lead_info.phone,
        "eventManagerEmail": lead_info.email,
        "aiOverview": f"{lead_info.name} is a {lead_info.type or 'venue'} located at {location}.",
    }
    return normalize(raw)


def lead_defaults(lead_info: LeadInfo) -> EnrichmentRecord:
    return normalize(
        {
            "venueName": lead_info.name,
            "website": lead_info.website,
            "eventManagerEmail": lead_info.email,
            "eventManagerPhone": lead_info.phone,
        }
    )
