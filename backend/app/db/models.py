# File: backend/app/db/models.py
# Version: v1.0.0
"""
ORM models for the repair tool.

Tables:
- Option: key/value settings row (JSON-encoded value). Holds the repair record,
          the self-disable flag, and is read for the Action Scheduler schema
          version keys.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Option(Base):
    """A single named option."""
    __tablename__ = "repair_options"

    option_name: Mapped[str] = mapped_column(String(191), primary_key=True)
    option_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # JSON string
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)

    def touch(self) -> None:
        """Update `updated_at` timestamp."""
        self.updated_at = _utcnow()
