"""Supabase (PostgREST) access to the saved leads table."""

import httpx
from pydantic import ValidationError

from common.config import config
from common.errors import PersistenceError
from common.logging import get_logger
from models.lead import Lead
from services.supabase.schemas import LeadUpdate

logger = get_logger(__name__)


class SupabaseClient:
    """
    Reads and updates saved leads over the PostgREST API.

    Example:
        store = SupabaseClient()
        leads = await store.get_leads_by_ids(["1", "2"])
        await store.update_lead("1", LeadUpdate.from_enrichment(lead, record))
    """

    def __init__(
        self,
        base_url: str = config.supabase_url,
        api_key: str | None = None,
        table: str = config.supabase_leads_table,
        timeout: float = config.persistence_timeout,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key if api_key is not None else config.supabase_key.get_secret_value()
        self.table = table
        self.timeout = timeout
        self._transport = transport

    @property
    def table_url(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def _client(self) -> httpx.AsyncClient:
        if not self.base_url or not self.api_key:
            raise PersistenceError("SUPABASE_URL and SUPABASE_KEY are required")
        return httpx.AsyncClient(
            headers={
                "apikey": self.api_key,
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _quote(value: str) -> str:
        # PostgREST list values with reserved characters must be double-quoted
        if any(ch in value for ch in ',()"'):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            return f'"{escaped}"'
        return value

    async def get_leads_by_ids(self, ids: list[str]) -> list[Lead]:
        """Fetch all requested leads in one query. Unknown ids are simply absent."""
        if not ids:
            return []

        id_filter = ",".join(self._quote(str(i)) for i in ids)
        params = {"select": "*", "id": f"in.({id_filter})"}

        logger.info(f"[Persist] Fetching {len(ids)} leads from '{self.table}'")
        async with self._client() as client:
            try:
                resp = await client.get(self.table_url, params=params)
                resp.raise_for_status()
                rows = resp.json()
            except httpx.HTTPStatusError as e:
                raise PersistenceError(f"HTTP {e.response.status_code} fetching leads") from e
            except httpx.RequestError as e:
                raise PersistenceError(f"Request failed fetching leads: {e}") from e
            except ValueError as e:
                raise PersistenceError("Invalid JSON in leads response") from e

        if not isinstance(rows, list):
            raise PersistenceError("Unexpected leads response shape")

        leads = []
        for row in rows:
            if not isinstance(row, dict) or row.get("id") is None:
                continue
            try:
                leads.append(Lead.from_record(row))
            except ValidationError as e:
                logger.warning(f"[Persist] Skipping malformed lead row {row.get('id')}: {e.error_count()} errors")
        return leads

    async def update_lead(self, lead_id: str, update: LeadUpdate) -> None:
        """Write enrichment results to one lead row."""
        logger.info(f"[Persist] Updating lead {lead_id}")
        async with self._client() as client:
            try:
                resp = await client.patch(
                    self.table_url,
                    params={"id": f"eq.{lead_id}"},
                    json=update.to_row(),
                    headers={"Prefer": "return=minimal"},
                )
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise PersistenceError(f"HTTP {e.response.status_code} updating lead {lead_id}") from e
            except httpx.RequestError as e:
                raise PersistenceError(f"Request failed updating lead {lead_id}: {e}") from e
