"""Lead scoring.

Two independent point systems:
- detailed: weighted signals from a fully split enrichment record
- coarse: base score plus website/email/phone/description signals, for callers
  that only hold basic data

Both clamp to 0-100 and share the same tier thresholds.
"""

from datetime import UTC, datetime
from enum import Enum

from models.enrichment import EnrichmentRecord, LeadPotential, LeadScore

HIGH_THRESHOLD = 70
MEDIUM_THRESHOLD = 40

# Overview length above which a description counts as detailed
DETAILED_DESCRIPTION_LENGTH = 100


class ScoringProfile(str, Enum):
    DETAILED = "detailed"
    COARSE = "coarse"


def potential_for_score(score: int) -> LeadPotential:
    """Map a score to its tier: >=70 high, >=40 medium, else low."""
    if score >= HIGH_THRESHOLD:
        return LeadPotential.HIGH
    if score >= MEDIUM_THRESHOLD:
        return LeadPotential.MEDIUM
    return LeadPotential.LOW


def _clamp(score: int) -> int:
    return max(0, min(score, 100))


def _has_detailed_description(record: EnrichmentRecord) -> bool:
    return bool(record.ai_overview) and len(record.ai_overview) > DETAILED_DESCRIPTION_LENGTH


def _build_score(points: int, reasons: list[str]) -> LeadScore:
    score = _clamp(points)
    return LeadScore(
        score=score,
        potential=potential_for_score(score),
        reasons=reasons,
        last_calculated=datetime.now(UTC),
    )


def detailed_score(record: EnrichmentRecord) -> LeadScore:
    """Score a record with the weighted signal table.

    Reasons are appended in evaluation order, for triggered rules only.
    """
    points = 0
    reasons: list[str] = []

    # Contact information
    if record.event_manager_email:
        points += 25
        reasons.append("Has contact email")
    if record.event_manager_phone:
        points += 10
        reasons.append("Has contact phone")
    if record.event_manager_name:
        points += 5
        reasons.append("Has contact name")

    # Event hosting
    if record.venue_capacity is not None and record.venue_capacity > 50:
        points += 15
        reasons.append(f"Venue capacity: {record.venue_capacity}")
    if record.common_event_types:
        points += 10
        reasons.append(f"Hosts events: {', '.join(record.common_event_types)}")
    if record.pricing_information:
        points += 5
        reasons.append("Pricing information available")

    # Catering relationship, unknown scores nothing
    if record.in_house_catering is False:
        points += 25
        reasons.append("No in-house catering (potential for partnership)")
    elif record.in_house_catering is True:
        points += 5
        reasons.append("Has in-house catering")

    # Data quality
    if record.website:
        points += 5
        reasons.append("Has functional website")
    if _has_detailed_description(record):
        points += 5
        reasons.append("Has detailed venue description")

    return _build_score(points, reasons)


def coarse_score(record: EnrichmentRecord) -> LeadScore:
    """Score a record from basic signals only.

    Every signal reports a reason, positive or negative.
    """
    points = 20
    reasons: list[str] = []

    if record.website:
        points += 15
        reasons.append("Has website")
    else:
        reasons.append("No website")

    if record.event_manager_email:
        points += 35
        reasons.append("Has email contact")
    else:
        reasons.append("No email contact")

    if record.event_manager_phone:
        points += 15
        reasons.append("Has phone contact")
    else:
        reasons.append("No phone contact")

    if _has_detailed_description(record):
        points += 10
        reasons.append("Has detailed description")
    else:
        reasons.append("Missing detailed description")

    return _build_score(points, reasons)


SCORERS = {
    ScoringProfile.DETAILED: detailed_score,
    ScoringProfile.COARSE: coarse_score,
}


def score(record: EnrichmentRecord, profile: ScoringProfile = ScoringProfile.DETAILED) -> LeadScore:
    """Score a record with the named profile."""
    return SCORERS[ScoringProfile(profile)](record)
