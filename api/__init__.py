"""API module - FastAPI routers and endpoints."""

from .selection import selection_router
from .health import health_router

__all__ = ['selection_router', 'health_router']
