# File: backend/app/db/session.py
# Version: v1.0.0
"""
SQLAlchemy engine and session factory.

- Uses the MySQL URL from settings.DB_URL (PyMySQL driver by default).
- `make_engine(url)` lets the CLI point at another database.
- `SessionLocal` backs the SQL option store.

No connection is opened at import time; the engine connects lazily.
"""
from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from backend.app.core.config import settings


def make_engine(url: str) -> Engine:
    return create_engine(url, future=True, pool_pre_ping=True)


engine = make_engine(settings.DB_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
