# File: backend/app/db/schemas/repair.py
# Version: v1.0.0
"""
Pydantic schemas for the persisted repair record and the API payloads.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field

Outcome = Literal["repaired", "obsolete", "failed"]


class RepairRecord(BaseModel):
    """Stored once per run under the record key; its presence blocks another run."""
    run_completed: bool
    outcome: Outcome = "repaired"
    audit_entries: List[str] = Field(default_factory=list)
    suffix: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_stored(cls, raw: Any) -> "RepairRecord":
        """Accept the stored dict, or a bare list of messages as older versions wrote."""
        if isinstance(raw, list):
            return cls(run_completed=True, audit_entries=[str(m) for m in raw])
        return cls.model_validate(raw)


class RepairStatus(BaseModel):
    state: str
    record: Optional[RepairRecord] = None


class NoticeResponse(BaseModel):
    state: str
    messages: List[str]
