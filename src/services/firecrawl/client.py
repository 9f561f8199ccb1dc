from typing import Any

import httpx

from common.config import config
from common.logging import get_logger
from services.firecrawl.schemas import FetchResult

logger = get_logger(__name__)

DEFAULT_FORMATS = ("markdown",)

# Response keys holding page content, in order of preference
CONTENT_KEYS = ("markdown", "content", "text", "html")
STRUCTURED_KEYS = ("json", "extract", "structuredData")


class FirecrawlClient:
    """
    Fetches website content through the Firecrawl scrape API.

    Never raises: HTTP, transport, timeout and decoding failures are returned
    as ``FetchResult(success=False, error=...)``.

    Example:
        fc = FirecrawlClient()
        result = await fc.fetch("https://oakhall.com")
    """

    def __init__(
        self,
        base_url: str = config.firecrawl_base_url,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key if api_key is not None else config.firecrawl_api_key.get_secret_value()
        self._transport = transport

    @staticmethod
    def _resolve_content(data: dict[str, Any]) -> str | None:
        for key in CONTENT_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value
        return None

    @staticmethod
    def _resolve_structured(data: dict[str, Any]) -> dict | None:
        for key in STRUCTURED_KEYS:
            value = data.get(key)
            if isinstance(value, dict) and value:
                return value
        return None

    async def fetch(
        self,
        url: str,
        *,
        timeout: float = config.scrape_timeout,
        formats: list[str] | tuple[str, ...] = DEFAULT_FORMATS,
    ) -> FetchResult:
        if not self.api_key:
            return FetchResult(url=url, error="Missing FIRECRAWL_API_KEY")

        payload = {
            "url": url,
            "formats": list(formats),
            "waitFor": config.scrape_wait_ms,
            "timeout": int(timeout * 1000),
        }

        logger.info(f"[Scrape] Fetching {url}")
        async with httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=self._transport,
        ) as client:
            try:
                resp = await client.post(f"{self.base_url}/scrape", json=payload)
                resp.raise_for_status()
                body = resp.json()
            except httpx.HTTPStatusError as e:
                logger.warning(f"[Scrape] HTTP {e.response.status_code} for {url}")
                return FetchResult(url=url, error=f"HTTP {e.response.status_code}")
            except httpx.TimeoutException:
                logger.warning(f"[Scrape] Timed out after {timeout:.0f}s for {url}")
                return FetchResult(url=url, error="Timed out")
            except httpx.RequestError as e:
                logger.warning(f"[Scrape] Request failed for {url}: {e}")
                return FetchResult(url=url, error=str(e) or type(e).__name__)
            except ValueError:
                logger.warning(f"[Scrape] Invalid JSON in response for {url}")
                return FetchResult(url=url, error="Invalid JSON in response")

        if not isinstance(body, dict) or body.get("success") is False:
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning(f"[Scrape] Firecrawl reported failure for {url}: {error}")
            return FetchResult(url=url, error=error or "Scrape failed")

        data = body.get("data")
        if not isinstance(data, dict):
            # Older API versions return the page at the top level
            data = body

        content = self._resolve_content(data)
        structured = self._resolve_structured(data)
        metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}

        logger.info(f"[Scrape] Got {len(content or '')} chars from {url}")
        return FetchResult(
            url=url,
            success=content is not None or structured is not None,
            content=content,
            structured_data=structured,
            title=metadata.get("title") if isinstance(metadata.get("title"), str) else None,
            error=None if content is not None or structured is not None else "No content in response",
        )
