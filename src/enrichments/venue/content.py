"""Heuristic venue details read straight from website text.

Used to fill fields the AI analysis left empty. Extractors are pure and
return an empty value when the text says nothing about their field.

Example:
    raw = extract_from_content("We host weddings for up to 300 guests.")
    # {"commonEventTypes": ["Wedding"], "venueCapacity": 300}
"""

import re

# Label -> pattern; labels are reported in this order
EVENT_TYPE_PATTERNS: dict[str, re.Pattern] = {
    label: re.compile(pattern, re.IGNORECASE)
    for label, pattern in (
        ("Wedding", r"\bweddings?\b"),
        ("Corporate", r"\bcorporate\b"),
        ("Meeting", r"\bmeetings?\b"),
        ("Social", r"\bsocials?\b"),
        ("Party", r"\bpart(?:y|ies)\b"),
        ("Conference", r"\bconferences?\b"),
        ("Celebration", r"\bcelebrations?\b"),
        ("Ceremony", r"\bceremon(?:y|ies)\b"),
        ("Reception", r"\breceptions?\b"),
        ("Seminar", r"\bseminars?\b"),
        ("Retreat", r"\bretreats?\b"),
        ("Gala", r"\bgalas?\b"),
    )
}

CAPACITY_RE = re.compile(
    r"(?:capacity|accommodate|up to|maximum)\D*?(\d[\d,]*)\D*?(?:guest|people|person|attendee|seat)",
    re.IGNORECASE,
)

IN_HOUSE_CATERING_RE = re.compile(
    r"\b(?:in[-\s]house|on[-\s]site|our own|provided by us|exclusive)\s+(?:catering|caterer|food|menu)",
    re.IGNORECASE,
)
EXTERNAL_CATERING_RE = re.compile(
    r"\b(?:outside|external|bring your own|your choice of|preferred)\s+(?:catering|caterer|food|vendor)",
    re.IGNORECASE,
)
PREFERRED_CATERERS_RE = re.compile(
    r"\b(?:preferred|approved|recommended)\s+caterers?(?:\s+include)?\s*:?\s*([^.]*)",
    re.IGNORECASE,
)

AMENITIES_RE = re.compile(
    r"\b(?:amenities|features|facilities|services|included)(?:\s+include)?\s*:?\s*([^.]*)",
    re.IGNORECASE,
)
PRICING_RE = re.compile(
    r"\b(?:pricing|packages|rates|fees|cost)(?:\s+information)?\s*:?\s*([^.]{5,200})",
    re.IGNORECASE,
)

LIST_SEPARATOR_RE = re.compile(r",|;|\band\b|\n", re.IGNORECASE)

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Template and no-reply addresses found on many sites
EMAIL_PLACEHOLDERS = (
    "example.com",
    "yourdomain.com",
    "domain.com",
    "@email",
    "your@",
    "user@",
    "name@",
    "email@",
    "test@",
    "username@",
    "no-reply@",
    "noreply@",
)
EVENT_EMAIL_HINTS = ("event", "catering", "booking", "book", "sales", "venue", "reservation", "inquiry")
GENERIC_EMAIL_PREFIXES = ("info@", "contact@", "hello@")


def _split_items(text: str, max_length: int | None = None) -> list[str]:
    items = []
    for item in LIST_SEPARATOR_RE.split(text):
        item = item.strip(" \t:-*")
        if len(item) > 2 and (max_length is None or len(item) < max_length):
            items.append(item)
    return items


def extract_event_types(text: str) -> list[str]:
    return [label for label, pattern in EVENT_TYPE_PATTERNS.items() if pattern.search(text)]


def extract_capacity(text: str) -> int | None:
    """First capacity stated next to a guest/people/seat noun; range checks happen in normalization."""
    match = CAPACITY_RE.search(text)
    if not match:
        return None
    return int(match.group(1).replace(",", ""))


def extract_catering(text: str) -> tuple[bool | None, list[str]]:
    """In-house catering flag and any named preferred caterers.

    The flag stays unknown when the text mentions both in-house and outside
    catering, or neither.
    """
    in_house = bool(IN_HOUSE_CATERING_RE.search(text))
    external = bool(EXTERNAL_CATERING_RE.search(text))

    flag = None
    if in_house and not external:
        flag = True
    elif external and not in_house:
        flag = False

    caterers: list[str] = []
    if external:
        match = PREFERRED_CATERERS_RE.search(text)
        if match:
            caterers = _split_items(match.group(1))
    return flag, caterers


def extract_amenities(text: str) -> list[str]:
    match = AMENITIES_RE.search(text)
    return _split_items(match.group(1), max_length=50) if match else []


def extract_pricing(text: str) -> str | None:
    match = PRICING_RE.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def extract_emails(text: str) -> list[str]:
    """Plausible contact emails, event-related addresses first.

    Without an event-related address, personal-looking addresses rank ahead
    of info@/contact@/hello@, then shorter domains and addresses.
    """
    found = dict.fromkeys(EMAIL_RE.findall(text))
    emails = [e for e in found if not any(p in e.lower() for p in EMAIL_PLACEHOLDERS)]

    event_emails = [e for e in emails if any(hint in e.lower() for hint in EVENT_EMAIL_HINTS)]
    if event_emails:
        return event_emails

    return sorted(
        emails,
        key=lambda e: (e.lower().startswith(GENERIC_EMAIL_PREFIXES), len(e.split("@")[1]), len(e)),
    )


def extract_from_content(content: str | None) -> dict:
    """Raw camelCase record of everything the text reveals, ready for ``normalize``."""
    if not content or not content.strip():
        return {}

    raw: dict = {}
    event_types = extract_event_types(content)
    if event_types:
        raw["commonEventTypes"] = event_types
    capacity = extract_capacity(content)
    if capacity is not None:
        raw["venueCapacity"] = capacity

    in_house, caterers = extract_catering(content)
    if in_house is not None:
        raw["inHouseCatering"] = in_house
    if caterers:
        raw["preferredCaterers"] = caterers

    amenities = extract_amenities(content)
    if amenities:
        raw["amenities"] = amenities
    pricing = extract_pricing(content)
    if pricing:
        raw["pricingInformation"] = pricing
    emails = extract_emails(content)
    if emails:
        raw["eventManagerEmail"] = emails[0]
    return raw
