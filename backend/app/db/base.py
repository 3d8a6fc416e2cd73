# File: backend/app/db/base.py
# Version: v1.0.0
"""
Declarative Base for the repair tool's own tables.

Model modules import Base from here:

    from backend.app.db.base import Base

Only the option store lives on this metadata. The Action Scheduler tables are
never mapped; they are managed through raw DDL in backend.app.repair.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
