"""
PrefStats - Prefecture Population Explorer

Pick prefectures from a list and compare how the population of their
Densely Inhabited Districts changed across census years.

Features:
- Prefecture catalog from RESAS, loaded once at startup
- Population-concentration data from the MLIT DATA PLATFORM, aggregated per year
- Optimistic selection with per-prefecture fetch deduplication and rollback
- Line-chart options and year x prefecture tables for the selected set
- Upstream API key kept server side
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

# Import modules
from config import config
from registry import registry
from cache import selection_cache
from sources import source_manager
from api import selection_router, health_router


logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# APP INITIALIZATION
# =============================================================================

app = FastAPI(
    title="PrefStats",
    description="Population of Densely Inhabited Districts by prefecture",
    version="1.0.0"
)

# CORS for development (frontend runs on a different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(selection_router)
app.include_router(health_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


# =============================================================================
# STARTUP / SHUTDOWN
# =============================================================================

@app.on_event("startup")
async def startup():
    """Load the catalog and wire it into the selection cache."""
    print("=" * 60)
    print("PrefStats Starting Up")
    print("=" * 60)

    await registry.load()
    selection_cache.set_catalog(registry.entities)

    print("-" * 60)
    print("API Keys:")
    print(f"  RESAS/MLIT: {'SET' if config.resas_api_key else 'NOT SET'}")

    print("-" * 60)
    print("Catalog:")
    if registry.available:
        print(f"  Prefectures: {len(registry)}")
    else:
        print(f"  UNAVAILABLE: {registry.error}")

    print("=" * 60)
    print("Ready to serve requests")
    print("=" * 60)


@app.on_event("shutdown")
async def shutdown():
    """Let outstanding fetches settle, then release HTTP connections."""
    await selection_cache.wait_idle()
    await source_manager.close()


# =============================================================================
# RUN
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
