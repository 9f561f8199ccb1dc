"""Tests for heuristic extraction from website text."""

import pytest

from enrichments.venue.content import (
    extract_amenities,
    extract_capacity,
    extract_catering,
    extract_emails,
    extract_event_types,
    extract_from_content,
    extract_pricing,
)
from enrichments.venue.normalization import normalize


def test_extract_event_types_in_label_order():
    text = "Perfect for galas, weddings, corporate parties and seminars."

    assert extract_event_types(text) == ["Wedding", "Corporate", "Party", "Seminar", "Gala"]


def test_extract_event_types_needs_whole_words():
    assert extract_event_types("Our galaxy-themed socialite lounge") == []


@pytest.mark.parametrize(
    "text,expected",
    [
        ("The ballroom can accommodate 250 guests.", 250),
        ("Seating for up to 1,200 people", 1200),
        ("Maximum capacity: 80 seated guests", 80),
        ("Open 7 days a week", None),
        ("Up to 30% off", None),
    ],
)
def test_extract_capacity(text, expected):
    assert extract_capacity(text) == expected


def test_out_of_range_capacity_is_dropped_by_normalization():
    raw = extract_from_content("Our lawn can accommodate 5000 guests.")

    assert raw["venueCapacity"] == 5000
    assert normalize(raw).venue_capacity is None


@pytest.mark.parametrize(
    "text,expected",
    [
        ("All events use our in-house catering team.", True),
        ("Bring your own caterer or choose an external vendor.", False),
        ("In-house catering or outside catering, your call.", None),
        ("A lovely garden venue.", None),
    ],
)
def test_extract_catering_flag(text, expected):
    flag, _ = extract_catering(text)
    assert flag is expected


def test_extract_preferred_caterers():
    text = "Outside catering welcome. Preferred caterers include: Bella Catering, Green Table and Fig & Olive."

    flag, caterers = extract_catering(text)

    assert flag is False
    assert caterers == ["Bella Catering", "Green Table", "Fig & Olive"]


def test_preferred_caterers_need_outside_catering():
    _, caterers = extract_catering("Our own catering by approved caterers Bella Catering.")

    assert caterers == []


def test_extract_amenities():
    text = "Amenities include: free parking, bridal suite, AV equipment and a dance floor. Book now."

    assert extract_amenities(text) == ["free parking", "bridal suite", "AV equipment", "a dance floor"]


def test_extract_amenities_drops_long_fragments():
    text = "Facilities: " + "x" * 60 + ", terrace"

    assert extract_amenities(text) == ["terrace"]


def test_extract_pricing():
    assert extract_pricing("Rates: from $1,500 for a Saturday evening. Call us.") == "from $1,500 for a Saturday evening"
    assert extract_pricing("Ask us anything.") is None


def test_extract_emails_prefers_event_addresses():
    text = "Write to info@oakhall.com or events@oakhall.com, or bookings@oakhall.com."

    assert extract_emails(text) == ["events@oakhall.com", "bookings@oakhall.com"]


def test_extract_emails_ranks_personal_before_generic_and_skips_placeholders():
    text = "Contact info@oakhall.com, jane@oakhall.com or you@example.com. Template: name@yourdomain.com"

    assert extract_emails(text) == ["jane@oakhall.com", "info@oakhall.com"]


def test_extract_from_content_builds_raw_record():
    text = (
        "Weddings for up to 300 guests. Outside catering only. "
        "Pricing: packages from $2,000. Email events@oakhall.com."
    )

    raw = extract_from_content(text)

    assert raw == {
        "commonEventTypes": ["Wedding"],
        "venueCapacity": 300,
        "inHouseCatering": False,
        "pricingInformation": "packages from $2,000",
        "eventManagerEmail": "events@oakhall.com",
    }


def test_extract_from_empty_content():
    assert extract_from_content(None) == {}
    assert extract_from_content("   ") == {}
