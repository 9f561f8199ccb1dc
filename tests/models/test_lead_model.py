from models.enrichment import EnrichmentRecord
from models.lead import Lead, LeadStatus
from services.supabase.schemas import LeadUpdate


def test_from_record_parses_serialized_enrichment_blob():
    lead = Lead.from_record({"id": 7, "name": "Oak Hall", "enrichment_data": '{"venueName": "Oak Hall"}'})

    assert lead.id == "7"
    assert lead.enrichment_data == {"venueName": "Oak Hall"}
    assert lead.status == LeadStatus.SAVED


def test_from_record_drops_unparseable_blob_and_unknown_status():
    lead = Lead.from_record({"id": "7", "name": None, "enrichment_data": "{not json", "status": "archived"})

    assert lead.name == ""
    assert lead.enrichment_data is None
    assert lead.status == LeadStatus.SAVED


def test_lead_update_keeps_existing_contacts_when_enrichment_has_none():
    lead = Lead(id="1", name="Oak Hall", contact_email="owner@oakhall.com", contact_name="Sam")
    record = EnrichmentRecord(event_manager_name="Jordan Lee", website="https://oakhall.com")

    update = LeadUpdate.from_enrichment(lead, record)

    assert update.contact_email == "owner@oakhall.com"
    assert update.contact_name == "Jordan Lee"
    assert update.website_url == "https://oakhall.com"
    assert update.lead_score is None
    assert update.to_row()["status"] == "enriched"
