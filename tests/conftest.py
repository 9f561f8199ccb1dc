"""Shared fakes for the external collaborators."""

import json

import pytest

from common.errors import PersistenceError
from models.lead import Lead
from services.firecrawl.schemas import FetchResult


class FakeFetcher:
    """ContentFetcher returning a canned result (or raising)."""

    def __init__(self, content: str | None = None, structured_data: dict | None = None, error: Exception | None = None):
        self.content = content
        self.structured_data = structured_data
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, url, *, timeout=None, formats=("markdown",)):
        self.calls.append(url)
        if self.error:
            raise self.error
        return FetchResult(
            url=url,
            success=self.content is not None or self.structured_data is not None,
            content=self.content,
            structured_data=self.structured_data,
            error=None if self.content else "No content",
        )


class FakeAI:
    """CompletionService returning canned text (or raising)."""

    def __init__(self, response: str | dict | None = None, error: Exception | None = None):
        self.response = json.dumps(response) if isinstance(response, dict) else response
        self.error = error
        self.prompts: list[str] = []
        self.schemas: list[str | None] = []

    async def complete(self, prompt, *, schema=None):
        self.prompts.append(prompt)
        self.schemas.append(schema)
        if self.error:
            raise self.error
        return self.response


class FakeLeadStore:
    """LeadStore over a dict of leads, recording updates."""

    def __init__(self, leads: list[Lead] | None = None, fail_updates_for: set[str] | None = None, fetch_error: Exception | None = None):
        self.leads = {lead.id: lead for lead in leads or []}
        self.fail_updates_for = fail_updates_for or set()
        self.fetch_error = fetch_error
        self.updates: dict = {}
        self.fetched: list[list[str]] = []

    async def get_leads_by_ids(self, ids):
        self.fetched.append(list(ids))
        if self.fetch_error:
            raise self.fetch_error
        return [self.leads[i] for i in ids if i in self.leads]

    async def update_lead(self, lead_id, update):
        if lead_id in self.fail_updates_for:
            raise PersistenceError(f"HTTP 500 updating lead {lead_id}")
        self.updates[lead_id] = update


@pytest.fixture
def oak_hall() -> Lead:
    return Lead(id="1", name="Oak Hall", website_url="oakhall.com")
