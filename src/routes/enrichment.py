"""Venue lead enrichment endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from common.errors import InputError
from common.logging import get_logger
from enrichments.venue.enricher import VenueEnricher
from enrichments.venue.schemas import EnrichmentResult
from enrichments.venue.scoring import ScoringProfile
from models.lead import Lead
from pipeline.orchestrator import BatchCoordinator
from routes.dependencies import get_coordinator, get_enricher

logger = get_logger(__name__)
router = APIRouter(prefix="/api/leads", tags=["enrichment"])


class EnrichLeadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lead: Lead
    extracted_data: Any = Field(None, alias="extractedData", description="Content or fields already extracted from the website")
    overwrite: bool = Field(False, description="Prefer fresh values over the stored enrichment")
    scoring_profile: ScoringProfile | None = Field(
        None,
        alias="scoringProfile",
        description='"detailed" for full venue signals, "coarse" when only basic contact data is expected',
    )


class BatchEnrichRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lead_ids: list[str | int] = Field(default_factory=list, alias="leadIds")
    strict: bool | None = Field(None, description="Reject the batch if any lead lacks a website")
    overwrite: bool = False
    scoring_profile: ScoringProfile | None = Field(None, alias="scoringProfile")


@router.post("/enrich", response_model=EnrichmentResult, response_model_exclude_none=True)
async def enrich_lead_endpoint(request: EnrichLeadRequest, enricher: VenueEnricher = Depends(get_enricher)):
    """
    Enrich a single venue lead without saving it.

    Example request:
        ```json
        {
            "lead": {"id": "1", "name": "Oak Hall", "website_url": "oakhall.com"},
            "extractedData": {"content": "Contact: events@oakhall.com"}
        }
        ```
    """
    try:
        result = await enricher.enrich_one(
            request.lead,
            request.extracted_data,
            overwrite=request.overwrite,
            scoring_profile=request.scoring_profile,
        )
    except Exception as e:
        logger.error(f"Enrichment request failed for lead {request.lead.id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Enrichment failed: {str(e)}") from e

    logger.debug(f"Enrichment completed\n: {result.model_dump_json(indent=2, by_alias=True, exclude_none=True)}")
    return result


@router.post("/enrich/batch")
async def enrich_batch_endpoint(
    request: BatchEnrichRequest,
    coordinator: BatchCoordinator = Depends(get_coordinator),
):
    """
    Enrich and save a batch of saved leads.

    Returns counts, per-lead errors and the enriched businesses. One lead's
    failure never fails the request.

    Example request:
        ```json
        {"leadIds": ["1", "2", "3"], "strict": false}
        ```
    """
    try:
        result = await coordinator.enrich_many(
            request.lead_ids,
            strict=request.strict,
            overwrite=request.overwrite,
            scoring_profile=request.scoring_profile,
        )
    except InputError as e:
        logger.warning(f"Batch enrichment rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Batch enrichment failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Batch enrichment failed: {str(e)}") from e

    return result.to_response()
