# File: backend/app/db/maintenance.py
# Version: v1.1.0
"""
Schema maintenance for the tool's own option table (non-destructive).

- ensure_option_table(engine): creates `repair_options` when it is missing.
- option_table_exists(engine): lets read-only commands skip the table check.
- Imports `backend.app.db.models` for side effects so Option is registered on
  Base.metadata before it is inspected.

Notes:
  * Safe to run multiple times; it never drops or alters existing tables.
  * The Action Scheduler tables are not handled here (see backend.app.repair).
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

import backend.app.db.models as models

log = logging.getLogger(__name__)


def ensure_option_table(engine: Engine) -> List[str]:
    """
    Create any missing tables declared on Base.metadata.

    Returns a list of human-readable action strings (e.g., "created table repair_options").
    """
    metadata = models.Base.metadata

    inspector = inspect(engine)
    existing = set(inspector.get_table_names())
    missing = sorted(set(metadata.tables.keys()) - existing)
    actions: List[str] = []

    for name in missing:
        # checkfirst guards against races / repeated calls
        metadata.tables[name].create(bind=engine, checkfirst=True)
        actions.append(f"created table {name}")
        log.info("created option table %s", name)

    return actions


def option_table_exists(engine: Engine) -> bool:
    return inspect(engine).has_table(models.Option.__tablename__)
