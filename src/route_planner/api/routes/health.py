"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...services.routing.store import route_store

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store() -> dict:
    """Report how many routes the in-memory store currently holds."""
    return {"service": "route_store", "healthy": True, "routes": len(route_store.list_routes())}
