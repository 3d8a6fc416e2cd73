# File: backend/app/services/repair_runner.py
# Version: v1.1.0
"""
Wiring helpers shared by the API, the startup hook and the CLI.

These functions build the orchestrator from application settings so callers
don't need to know about engines, prefixes or charset details.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Engine

from backend.app.core.config import settings
from backend.app.db.session import SessionLocal, engine as default_engine
from backend.app.repair.orchestrator import RepairOrchestrator
from backend.app.services.notices import Notifier
from backend.app.services.option_store import OptionStore, SiteOptionReader, SqlOptionStore


def get_option_store() -> OptionStore:
    """Option store backed by the application database (FastAPI dependency)."""
    return SqlOptionStore(SessionLocal)


def build_orchestrator(
    store: OptionStore,
    *,
    engine: Optional[Engine] = None,
    prefix: Optional[str] = None,
    notifier: Optional[Notifier] = None,
) -> RepairOrchestrator:
    engine = engine if engine is not None else default_engine
    prefix = settings.TABLE_PREFIX if prefix is None else prefix
    return RepairOrchestrator(
        store,
        engine,
        prefix=prefix,
        charset_collate=settings.charset_collate,
        notifier=notifier,
        site_options=SiteOptionReader(engine, prefix),
    )
