# File: backend/app/services/option_store.py
# Version: v1.1.0
"""
Key/value option store used by the repair orchestrator.

The orchestrator only depends on the OptionStore protocol (get/set/delete), so
tests and dry runs use MemoryOptionStore while deployments use SqlOptionStore,
which persists JSON-encoded values in the `repair_options` table.

The Action Scheduler schema versions are not ours: the library writes them as
plain strings into the site's `<prefix>options` table. SiteOptionReader reads
them from there and never writes.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, Protocol

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.db.models import Option
from backend.app.repair.catalog import prefixed
from backend.app.repair.errors import DatabaseOperationError

# Keys
RECORD_KEY = "ras_notices"
DISABLED_KEY = "ras_disabled"
# Owned by the Action Scheduler library; read only.
STORE_SCHEMA_KEY = "schema-ActionScheduler_StoreSchema"
LOGGER_SCHEMA_KEY = "schema-ActionScheduler_LoggerSchema"


class OptionReader(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...


class OptionStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryOptionStore:
    def __init__(self, initial: Dict[str, Any] | None = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlOptionStore:
    """Options persisted through SQLAlchemy; one short session per call."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def get(self, key: str, default: Any = None) -> Any:
        with self._session_factory() as db:
            row = db.get(Option, key)
            if row is None or row.option_value is None:
                return default
            try:
                return json.loads(row.option_value)
            except ValueError:
                # value written by hand, not by set()
                return row.option_value

    def set(self, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with self._session_factory() as db:
            row = db.get(Option, key)
            if row is None:
                row = Option(option_name=key)
                db.add(row)
            row.option_value = payload
            row.touch()
            db.commit()

    def delete(self, key: str) -> None:
        with self._session_factory() as db:
            row = db.get(Option, key)
            if row is not None:
                db.delete(row)
                db.commit()


SITE_OPTION_SQL = "SELECT option_value FROM {table} WHERE option_name = :name LIMIT 1"


class SiteOptionReader:
    """Read-only view of the site's `<prefix>options` table; values come back as raw strings."""

    def __init__(self, engine: Engine, prefix: str = "") -> None:
        self.engine = engine
        self.table = prefixed(prefix, "options")

    def get(self, key: str, default: Any = None) -> Any:
        sql = text(SITE_OPTION_SQL.format(table=self.table))
        try:
            with self.engine.connect() as conn:
                value = conn.execute(sql, {"name": key}).scalar()
        except SQLAlchemyError as exc:
            raise DatabaseOperationError("read option", self.table, exc) from exc
        return default if value is None else value
