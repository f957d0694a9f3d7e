"""
Health Check and Utility Endpoints
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from cache import selection_cache
from sources import source_manager
from registry import registry
from config import config

VERSION = "1.0.0"

health_router = APIRouter()


@health_router.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return JSONResponse({
        "status": "healthy",
        "version": VERSION
    })


@health_router.get("/api/status")
async def api_status():
    """Detailed API status with catalog, sources and selection state."""
    return JSONResponse({
        "status": "healthy" if registry.available else "degraded",
        "version": VERSION,
        "config": {
            "api_key_configured": bool(config.resas_api_key),
            "population_api_url": config.population_api_url,
            "catalog_api_url": config.catalog_api_url,
            "http_timeout": config.http_timeout,
        },
        "catalog": registry.stats(),
        "data_sources": source_manager.available_sources(),
        "selection": selection_cache.stats(),
    })


@health_router.get("/api/sources")
async def list_sources():
    """List the configured data sources."""
    return JSONResponse({
        "sources": source_manager.available_sources()
    })
