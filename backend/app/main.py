# File: backend/app/main.py
# Version: v1.1.0
"""
FastAPI app entry.

- Keeps all route assembly in backend/app/api/v1/api.py.
- Mounts /api/* via `api_router`.
- Optional repair on startup is guarded by REPAIR_ON_STARTUP; the operator
  notice is then picked up through POST /api/repair/notices.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI

from backend.app.api.v1.api import api_router
from backend.app.core.config import settings
from backend.app.db.maintenance import ensure_option_table
from backend.app.db.session import engine
from backend.app.repair.errors import RepairFailedError
from backend.app.repair.orchestrator import RepairState
from backend.app.services.repair_runner import build_orchestrator, get_option_store

log = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION,
              openapi_url="/api/openapi.json", docs_url="/api/docs")


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


# APIs under /api
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
def _startup_repair() -> None:
    if not settings.REPAIR_ON_STARTUP:
        return
    ensure_option_table(engine)
    orch = build_orchestrator(get_option_store())
    if orch.current_state() is not RepairState.NOT_STARTED:
        return
    try:
        result = orch.repair()
    except RepairFailedError:
        # already recorded; the notice endpoint reports it
        log.error("[repair] startup repair failed")
        return
    log.info("[repair] %s", "; ".join(result.audit_entries))
