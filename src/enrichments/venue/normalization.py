"""Normalization of heterogeneous venue records.

Maps camelCase AI output, snake_case structured extraction and previously
stored records onto ``EnrichmentRecord``. Unresolvable fields are left unknown;
``normalize`` never raises on malformed input.
"""

import json
import re
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit

from pydantic import TypeAdapter, ValidationError

from common.logging import get_logger
from models.enrichment import EnrichmentRecord, LeadScore

logger = get_logger(__name__)

# Plausible guest capacity, exclusive bounds
MIN_CAPACITY = 20
MAX_CAPACITY = 2000

TRUE_VALUES = {"true", "yes", "y"}
FALSE_VALUES = {"false", "no", "n"}

DEFAULT_PORTS = {"http": 80, "https": 443}

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_NUMBER_RE = re.compile(r"\d[\d,]*")
_datetime_adapter = TypeAdapter(datetime)


# Candidate source paths per field, most specific first.
# Management/event contacts beat generic business contacts.
FIELD_SOURCES: dict[str, list[tuple[str, ...]]] = {
    "venue_name": [("venueName",), ("venue_name",), ("name",)],
    "ai_overview": [
        ("aiOverview",),
        ("ai_overview",),
        ("venueDescription",),
        ("venue_description",),
        ("description",),
    ],
    "event_manager_name": [
        ("managementContact", "managementContactName"),
        ("managementContact", "name"),
        ("management_contact", "managementContactName"),
        ("management_contact", "name"),
        ("eventManagerName",),
        ("event_manager_name",),
        ("contactInformation", "contactPersonName"),
        ("contactInformation", "name"),
        ("contact_information", "contact_person"),
        ("contact_information", "contactPersonName"),
        ("contact_person",),
        ("contactPersonName",),
        ("contact_name",),
    ],
    "event_manager_email": [
        ("managementContact", "managementContactEmail"),
        ("managementContact", "email"),
        ("management_contact", "managementContactEmail"),
        ("management_contact", "email"),
        ("eventManagerEmail",),
        ("event_manager_email",),
        ("contactInformation", "email"),
        ("contact_information", "email"),
        ("email",),
        ("contact_email",),
    ],
    "event_manager_phone": [
        ("managementContact", "managementContactPhone"),
        ("managementContact", "phone"),
        ("management_contact", "managementContactPhone"),
        ("management_contact", "phone"),
        ("eventManagerPhone",),
        ("event_manager_phone",),
        ("contactInformation", "phone"),
        ("contact_information", "phone"),
        ("phone",),
        ("contact_phone",),
    ],
    "common_event_types": [
        ("commonEventTypes",),
        ("common_event_types",),
        ("eventTypes",),
        ("event_types_hosted",),
        ("event_types",),
    ],
    "in_house_catering": [
        ("inHouseCatering",),
        ("in_house_catering",),
        ("in_house_catering_availability",),
    ],
    "venue_capacity": [("venueCapacity",), ("venue_capacity",), ("capacity",)],
    "amenities": [("amenities",), ("amenities_offered",)],
    "pricing_information": [
        ("pricingInformation",),
        ("pricing_information",),
        ("pricing_info",),
    ],
    "preferred_caterers": [("preferredCaterers",), ("preferred_caterers",)],
    "website": [("website",), ("website_url",), ("websiteUrl",), ("url",)],
    "lead_score": [("leadScore",)],
    "last_updated": [("lastUpdated",), ("last_updated",)],
}


# Value parsers


def clean_string(value: Any) -> str | None:
    """Strip strings; stringify plain numbers; anything else is unknown."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def normalize_url(url: str) -> str:
    """Reduce a URL to its ``scheme://host[:port]`` origin.

    A missing scheme defaults to https. Input that cannot be parsed into a
    host is returned unchanged.
    """
    value = url.strip()
    if not value:
        return url

    candidate = value if _SCHEME_RE.match(value) else f"https://{value}"
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return url

    if not parts.scheme or not hostname or any(ch.isspace() for ch in hostname):
        return url

    scheme = parts.scheme.lower()
    if ":" in hostname:
        hostname = f"[{hostname}]"
    origin = f"{scheme}://{hostname}"
    if port is not None and DEFAULT_PORTS.get(scheme) != port:
        origin = f"{origin}:{port}"
    return origin


def parse_website(value: Any) -> str | None:
    text = clean_string(value)
    return normalize_url(text) if text else None


def parse_capacity(value: Any) -> int | None:
    """Parse a guest capacity from a number or text like "up to 1,200 guests"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if not match:
            return None
        value = match.group().replace(",", "")
    elif not isinstance(value, (int, float)):
        return None

    try:
        number = int(value)
    except (ValueError, OverflowError):
        return None

    # Out-of-range values are noise, not clamped
    if MIN_CAPACITY < number < MAX_CAPACITY:
        return number
    return None


def parse_bool(value: Any) -> bool | None:
    """Tri-state boolean: accepts booleans and yes/no/true/false strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
    return None


def _dedupe(items) -> list[str]:
    result: list[str] = []
    for item in items:
        text = clean_string(item)
        if text and text not in result:
            result.append(text)
    return result


def parse_string_list(value: Any) -> list[str]:
    """Coerce a value into a de-duplicated list of strings.

    A single string is wrapped, unless it holds a JSON-encoded array.
    """
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                parsed = json.loads(text)
            except ValueError:
                parsed = None
            if isinstance(parsed, list):
                return _dedupe(parsed)
        return [text]
    if isinstance(value, (list, tuple, set, frozenset)):
        return _dedupe(value)
    return []


def parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return _datetime_adapter.validate_python(value.strip())
        except ValidationError:
            return None
    return None


def parse_lead_score(value: Any) -> LeadScore | None:
    if isinstance(value, LeadScore):
        return value
    if isinstance(value, Mapping):
        try:
            return LeadScore.model_validate(dict(value))
        except ValidationError:
            return None
    return None


FIELD_PARSERS: dict[str, Callable[[Any], Any]] = {
    "venue_name": clean_string,
    "ai_overview": clean_string,
    "event_manager_name": clean_string,
    "event_manager_email": clean_string,
    "event_manager_phone": clean_string,
    "common_event_types": parse_string_list,
    "in_house_catering": parse_bool,
    "venue_capacity": parse_capacity,
    "amenities": parse_string_list,
    "pricing_information": clean_string,
    "preferred_caterers": parse_string_list,
    "website": parse_website,
    "lead_score": parse_lead_score,
    "last_updated": parse_datetime,
}


# Field resolution


def _lookup(raw: Mapping, path: tuple[str, ...]) -> Any:
    value: Any = raw
    for key in path:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _resolve(raw: Mapping, field: str) -> Any:
    """First candidate source that parses to a known value wins."""
    parser = FIELD_PARSERS[field]
    for path in FIELD_SOURCES[field]:
        candidate = _lookup(raw, path)
        if candidate is None:
            continue
        try:
            parsed = parser(candidate)
        except (TypeError, ValueError) as e:
            logger.debug(f"Ignoring {'.'.join(path)}: {e}")
            continue
        if parsed is not None and parsed != []:
            return parsed
    return None


def normalize(raw: Any) -> EnrichmentRecord:
    """Map an arbitrarily-shaped record onto the canonical EnrichmentRecord.

    Accepts camelCase AI JSON, snake_case structured extraction, a stored
    blob, a JSON string of any of those, or an existing EnrichmentRecord.
    Anything that is not an object yields an empty record.
    """
    if isinstance(raw, EnrichmentRecord):
        raw = raw.model_dump(by_alias=True)
    elif isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raw = None

    if not isinstance(raw, Mapping):
        return EnrichmentRecord()

    values = {}
    for field in FIELD_SOURCES:
        value = _resolve(raw, field)
        if value is not None:
            values[field] = value
    return EnrichmentRecord(**values)
