# File: backend/app/repair/inspector.py
# Version: v1.0.0
"""
Read-only structural checks against MySQL metadata.

- table_exists:        SHOW TABLES LIKE '<prefix><table>'
- has_primary_key:     INFORMATION_SCHEMA.COLUMNS with COLUMN_KEY = 'PRI'
- has_auto_increment:  INFORMATION_SCHEMA.COLUMNS with EXTRA like auto_increment

A missing table or column simply yields False. A failing query does not: it is
raised as DatabaseOperationError so a broken connection is never mistaken for a
missing primary key.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from backend.app.repair.catalog import get_table_spec, prefixed
from backend.app.repair.errors import DatabaseOperationError

log = logging.getLogger(__name__)

SHOW_TABLES_SQL = text("SHOW TABLES LIKE :pattern")

PRIMARY_KEY_SQL = text(
    """
    SELECT COUNT(*) FROM INFORMATION_SCHEMA.COLUMNS
    WHERE TABLE_SCHEMA = DATABASE()
      AND TABLE_NAME = :table_name
      AND COLUMN_NAME = :column_name
      AND COLUMN_KEY = 'PRI'
    """
)

AUTO_INCREMENT_SQL = text(
    """
    SELECT COUNT(*) FROM INFORMATION_SCHEMA.COLUMNS
    WHERE TABLE_SCHEMA = DATABASE()
      AND TABLE_NAME = :table_name
      AND COLUMN_NAME = :column_name
      AND EXTRA LIKE '%auto_increment%'
    """
)


def like_literal(value: str) -> str:
    """Escape LIKE wildcards so the pattern only matches `value` itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class InspectionResult:
    exists: bool
    has_primary_key: bool = False
    has_auto_increment: bool = False

    @property
    def is_sound(self) -> bool:
        return self.exists and self.has_primary_key and self.has_auto_increment


class TableInspector:
    def __init__(self, conn: Connection, prefix: str = "") -> None:
        self.conn = conn
        self.prefix = prefix

    def table_exists(self, table: str) -> bool:
        name = prefixed(self.prefix, table)
        try:
            row = self.conn.execute(SHOW_TABLES_SQL, {"pattern": like_literal(name)}).first()
        except SQLAlchemyError as exc:
            raise DatabaseOperationError("table_exists", name, exc) from exc
        return row is not None

    def has_primary_key(self, table: str) -> bool:
        return self._count_columns(PRIMARY_KEY_SQL, "has_primary_key", table) > 0

    def has_auto_increment(self, table: str) -> bool:
        return self._count_columns(AUTO_INCREMENT_SQL, "has_auto_increment", table) > 0

    def inspect(self, table: str) -> InspectionResult:
        if not self.table_exists(table):
            return InspectionResult(exists=False)
        result = InspectionResult(
            exists=True,
            has_primary_key=self.has_primary_key(table),
            has_auto_increment=self.has_auto_increment(table),
        )
        log.debug("inspected %s: %s", table, result)
        return result

    def _count_columns(self, stmt, operation: str, table: str) -> int:
        spec = get_table_spec(table)
        name = prefixed(self.prefix, table)
        params = {"table_name": name, "column_name": spec.primary_column}
        try:
            count = self.conn.execute(stmt, params).scalar()
        except SQLAlchemyError as exc:
            raise DatabaseOperationError(operation, name, exc) from exc
        return int(count or 0)
