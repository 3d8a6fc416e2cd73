# File: backend/app/api/v1/api.py
# Version: v1.0.0
"""
v1 API aggregator.

Routers included under /api:
- health
- repair (status + one-time notice)
"""
from __future__ import annotations

from fastapi import APIRouter

from . import health as health_router
from . import repair as repair_router

api_router = APIRouter()
api_router.include_router(health_router.router)
api_router.include_router(repair_router.router)
