# File: backend/app/api/v1/repair.py
# Version: v1.0.0
"""
Repair status and notice API.

Endpoints
---------
GET  /repair/status    Current state and the stored record (if any)
POST /repair/notices   Show the pending audit trail once, then disable the tool
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from backend.app.db.schemas.repair import NoticeResponse, RepairStatus
from backend.app.services.notices import BufferNotifier
from backend.app.services.option_store import OptionStore
from backend.app.services.repair_runner import build_orchestrator, get_option_store

router = APIRouter(prefix="/repair", tags=["repair"])


@router.get("/status", response_model=RepairStatus)
def repair_status(response: Response, store: OptionStore = Depends(get_option_store)):
    response.headers["Cache-Control"] = "no-store"
    orch = build_orchestrator(store)
    return RepairStatus(state=orch.current_state().value, record=orch.load_record())


@router.post("/notices", response_model=NoticeResponse)
def show_notices(store: OptionStore = Depends(get_option_store)):
    """Return the pending notice lines; an empty list when nothing is pending."""
    buf = BufferNotifier()
    orch = build_orchestrator(store, notifier=buf)
    orch.show_pending_notice()
    return NoticeResponse(state=orch.current_state().value, messages=buf.lines)
