"""Interfaces of the external collaborators the enrichment core depends on."""

from typing import Protocol

from models.lead import Lead
from services.firecrawl.schemas import FetchResult
from services.supabase.schemas import LeadUpdate


class ContentFetcher(Protocol):
    async def fetch(
        self,
        url: str,
        *,
        timeout: float = ...,
        formats: list[str] | tuple[str, ...] = ...,
    ) -> FetchResult: ...


class CompletionService(Protocol):
    async def complete(self, prompt: str, *, schema: str | None = None) -> str: ...


class LeadStore(Protocol):
    async def get_leads_by_ids(self, ids: list[str]) -> list[Lead]: ...

    async def update_lead(self, lead_id: str, update: LeadUpdate) -> None: ...
