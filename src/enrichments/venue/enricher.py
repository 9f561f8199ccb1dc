"""
Venue enrichment pipeline for a single lead.

Stages, each degrading instead of aborting:
1. Website - resolve the lead's website, skip the lead without one
2. Content - caller-extracted content, else fetch the site (empty on failure)
3. Analysis - AI venue analysis, heuristic fallback record on any failure
4. Record - normalize, fill AI gaps from structured data and page text,
   merge with the stored record, score
"""

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from common.config import config
from common.logging import get_logger
from enrichments.venue.content import extract_from_content
from enrichments.venue.fallback import LEAD_DEFAULT_FIELDS, build_fallback_record, lead_defaults
from enrichments.venue.merge import fill_gaps, merge
from enrichments.venue.normalization import normalize, normalize_url
from enrichments.venue.parser import AIJsonParseError, parse_ai_json
from enrichments.venue.prompts import VENUE_SCHEMA, build_venue_prompt
from enrichments.venue.schemas import EnrichmentResult, LeadInfo
from enrichments.venue.scoring import ScoringProfile, score
from models.enrichment import EnrichmentRecord
from models.lead import Lead
from services.firecrawl.client import FirecrawlClient
from services.openai_service import OpenAIService
from services.protocols import CompletionService, ContentFetcher

logger = get_logger(__name__)

CONTACT_FIELDS = ("event_manager_name", "event_manager_email", "event_manager_phone")

# Fields the page text can supply when the AI leaves them empty
CONTENT_FIELDS = (
    "common_event_types",
    "venue_capacity",
    "in_house_catering",
    "preferred_caterers",
    "amenities",
    "pricing_information",
    "event_manager_email",
)


def resolve_extracted_content(extracted_data: Any) -> str | None:
    """Website text supplied by the caller: ``content``, ``text`` or a bare string."""
    if isinstance(extracted_data, str):
        return extracted_data.strip() or None
    if isinstance(extracted_data, Mapping):
        for key in ("content", "text"):
            value = extracted_data.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return None


class VenueEnricher:
    """Single-lead venue enrichment with lazy-loaded collaborators."""

    def __init__(
        self,
        fetcher: ContentFetcher | None = None,
        ai: CompletionService | None = None,
        *,
        scoring_profile: ScoringProfile | str = config.scoring_profile,
        scrape_timeout: float = config.scrape_timeout,
        ai_timeout: float = config.ai_timeout,
    ):
        self._fetcher = fetcher
        self._ai = ai
        self.scoring_profile = ScoringProfile(scoring_profile)
        self.scrape_timeout = scrape_timeout
        self.ai_timeout = ai_timeout

    # Lazy-load collaborators

    @property
    def fetcher(self) -> ContentFetcher:
        if self._fetcher is None:
            self._fetcher = FirecrawlClient()
        return self._fetcher

    @property
    def ai(self) -> CompletionService:
        if self._ai is None:
            self._ai = OpenAIService()
        return self._ai

    # Content stage

    async def _fetch_content(self, website: str) -> tuple[str | None, dict | None]:
        """Fetch site content; any failure yields empty content."""
        try:
            async with asyncio.timeout(self.scrape_timeout):
                result = await self.fetcher.fetch(website, timeout=self.scrape_timeout)
        except TimeoutError:
            logger.warning(f"[Scrape] Timed out after {self.scrape_timeout:.0f}s for {website}, continuing without content")
            return None, None
        except Exception as e:
            logger.warning(f"[Scrape] Failed for {website}: {type(e).__name__}: {e}, continuing without content")
            return None, None

        if not result.success:
            logger.warning(f"[Scrape] No content for {website}: {result.error}")
        return result.content, result.structured_data

    # Analysis stage

    async def _analyze(self, lead_info: LeadInfo, content: str | None) -> EnrichmentRecord | None:
        """AI venue analysis. Returns None when the fallback record should be used."""
        prompt = build_venue_prompt(lead_info, content)
        try:
            async with asyncio.timeout(self.ai_timeout):
                text = await self.ai.complete(prompt, schema=VENUE_SCHEMA)
            parsed = parse_ai_json(text)
        except TimeoutError:
            logger.warning(f"[AI] Timed out after {self.ai_timeout:.0f}s for lead {lead_info.id}")
            return None
        except AIJsonParseError as e:
            logger.warning(f"[AI] Unparsable response for lead {lead_info.id}: {e}")
            return None
        except Exception as e:
            logger.warning(f"[AI] Failed for lead {lead_info.id}: {type(e).__name__}: {e}")
            return None

        record = normalize(parsed)
        return fill_gaps(record, lead_defaults(lead_info), LEAD_DEFAULT_FIELDS)

    # Pipeline

    async def enrich_one(
        self,
        lead: Lead,
        extracted_data: Any = None,
        *,
        overwrite: bool = False,
        scoring_profile: ScoringProfile | None = None,
    ) -> EnrichmentResult:
        """Enrich one lead.

        Returns a skipped result when no website can be resolved. AI and
        network failures degrade to the fallback record and still succeed.
        ``scoring_profile`` overrides the enricher's default for this call.
        """
        lead_info = LeadInfo.from_lead(lead, extracted_data if isinstance(extracted_data, Mapping) else None)
        if not lead_info.website:
            logger.info(f"[Enrichment] Skipping lead {lead.id}: no website URL")
            return EnrichmentResult.skip(lead.id, "No website URL")

        try:
            website = normalize_url(lead_info.website)
            logger.info(f"[Enrichment] Starting for lead {lead.id} ({website})")

            content = resolve_extracted_content(extracted_data)
            structured = extracted_data.get("structuredData") if isinstance(extracted_data, Mapping) else None
            if content is None:
                content, fetched_structured = await self._fetch_content(website)
                structured = structured or fetched_structured

            record = await self._analyze(lead_info, content)
            if record is None:
                # Lead fields only; scraped data never reaches the fallback
                logger.info(f"[Enrichment] Using fallback record for lead {lead.id}")
                record = build_fallback_record(lead_info)
            else:
                record = self._fill_from_site(record, content, structured)

            record = self._finalize(lead, record, overwrite=overwrite, profile=scoring_profile or self.scoring_profile)
        except Exception as e:
            logger.error(f"[Enrichment] Failed for lead {lead.id}: {type(e).__name__}: {e}", exc_info=True)
            return EnrichmentResult.failure(lead.id, str(e) or type(e).__name__)

        logger.info(
            f"[Enrichment] Lead {lead.id} scored {record.lead_score.score} ({record.lead_score.potential.value})"
        )
        return EnrichmentResult(lead_id=lead.id, success=True, enrichment_data=record)

    @staticmethod
    def _fill_from_site(record: EnrichmentRecord, content: str | None, structured: Any) -> EnrichmentRecord:
        """Fill what the AI left empty: contacts from structured data, then details from the page text."""
        if isinstance(structured, Mapping) and structured:
            record = fill_gaps(record, normalize(structured), CONTACT_FIELDS)
        if content:
            record = fill_gaps(record, normalize(extract_from_content(content)), CONTENT_FIELDS)
        return record

    def _finalize(
        self,
        lead: Lead,
        record: EnrichmentRecord,
        *,
        overwrite: bool,
        profile: ScoringProfile,
    ) -> EnrichmentRecord:
        """Merge with the stored record when present, then score and timestamp."""
        if lead.enrichment_data:
            previous = normalize(lead.enrichment_data)
            return merge(previous, record, overwrite=overwrite, profile=profile)

        return record.model_copy(
            update={
                "lead_score": score(record, profile),
                "last_updated": datetime.now(UTC),
            }
        )
