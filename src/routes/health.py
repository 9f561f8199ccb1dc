"""Health check and service info endpoints."""

from fastapi import APIRouter

from common.config import config
from common.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    """Root endpoint with basic info."""
    return {
        "service": "Venue Lead Enrichment API",
        "version": "0.1.0",
        "status": "running",
        "description": "Venue lead enrichment with website scraping, AI analysis and lead scoring",
        "endpoints": {
            "health": "/health",
            "docs": "/docs",
            "enrich_lead": "/api/leads/enrich",
            "enrich_batch": "/api/leads/enrich/batch",
            "enrichment_jobs": "/api/enrichment/jobs",
        },
        "example_request": {
            "lead": {"id": "1", "name": "Oak Hall", "website_url": "oakhall.com"},
        },
    }


@router.get("/health")
async def health_check():
    """Liveness check."""
    return {"status": "healthy", "service": "lead-enrichment"}


@router.get("/health/debug")
async def debug_check():
    """Report which collaborators are configured (presence only, never values)."""
    checks = {
        "openai_key": bool(config.openai_key.get_secret_value()),
        "firecrawl_api_key": bool(config.firecrawl_api_key.get_secret_value()),
        "supabase_url": bool(config.supabase_url),
        "supabase_key": bool(config.supabase_key.get_secret_value()),
    }
    result = {
        "status": "healthy" if all(checks.values()) else "unhealthy",
        "config": {
            "openai_model": config.openai_model,
            "leads_table": config.supabase_leads_table,
            "batch_max_concurrent": config.batch_max_concurrent,
            "batch_strict_validation": config.batch_strict_validation,
        },
        "env_vars": {name.upper(): "set" if ok else "MISSING" for name, ok in checks.items()},
    }
    logger.info(f"Debug check result: {result}")
    return result
