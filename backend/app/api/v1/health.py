# File: backend/app/api/v1/health.py
# Version: v1.0.0
"""
Healthcheck and version router.
"""
from __future__ import annotations
from fastapi import APIRouter

from backend.app.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health() -> dict[str, str]:
    """Return a minimal health payload."""
    return {"status": "ok"}


@router.get("/version")
def version() -> dict[str, str]:
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION}
