#!/usr/bin/env python3
"""
FastAPI server for venue lead enrichment.
"""

# Load environment variables first
import os

from dotenv import load_dotenv
from fastapi import FastAPI

from routes import enrichment, health, jobs

load_dotenv()

# Initialize
app = FastAPI(
    title="Venue Lead Enrichment API",
    description="Venue lead enrichment with website scraping, AI analysis and lead scoring",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include routers
app.include_router(health.router)
app.include_router(enrichment.router)
app.include_router(jobs.router)


if __name__ == "__main__":
    import uvicorn

    port = int(os.environ.get("PORT", 8080))

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=False,
        log_level="info",
    )
