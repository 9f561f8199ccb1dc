"""Merge policy for re-enriching an already enriched lead.

Existing non-empty values win unless an overwrite is requested; gaps are
filled from the other side. Lists are never unioned, so a curated list is not
diluted by a fresh run. The score is always recomputed from the merged fields.
"""

from collections.abc import Iterable
from datetime import UTC, datetime

from enrichments.venue.scoring import ScoringProfile, score
from models.enrichment import EnrichmentRecord

# Fields owned by the merge itself
DERIVED_FIELDS = {"lead_score", "last_updated"}


def _is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list)):
        return len(value) == 0
    return False


def fill_gaps(record: EnrichmentRecord, source: EnrichmentRecord, fields: Iterable[str]) -> EnrichmentRecord:
    """Copy ``fields`` from ``source`` only where ``record`` has no value."""
    updates = {}
    for field in fields:
        if _is_empty(getattr(record, field)) and not _is_empty(getattr(source, field)):
            updates[field] = getattr(source, field)
    return record.model_copy(update=updates) if updates else record


def merge(
    existing: EnrichmentRecord | None,
    incoming: EnrichmentRecord,
    *,
    overwrite: bool = False,
    profile: ScoringProfile = ScoringProfile.DETAILED,
) -> EnrichmentRecord:
    """Field-level merge of a prior record with a fresh one.

    With ``overwrite`` the incoming side is preferred and the existing record
    only fills its gaps.
    """
    if existing is None:
        return incoming

    preferred, fallback = (incoming, existing) if overwrite else (existing, incoming)

    merged = {}
    for field in EnrichmentRecord.model_fields:
        if field in DERIVED_FIELDS:
            continue
        value = getattr(preferred, field)
        merged[field] = getattr(fallback, field) if _is_empty(value) else value

    record = EnrichmentRecord(**merged)
    record.lead_score = score(record, profile)
    record.last_updated = datetime.now(UTC)
    return record
