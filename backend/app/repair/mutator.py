# File: backend/app/repair/mutator.py
# Version: v1.0.0
"""
Physical DDL against the live database.

- create_table: runs the catalog CREATE TABLE. A table that already exists (for
  example created concurrently) makes the statement fail and the error propagates.
- rename_table: ALTER TABLE ... RENAME TO <table><suffix>, keeping the corrupted
  rows for inspection instead of dropping them.

Both append one entry to the run's AuditLog.
"""
from __future__ import annotations

import logging
import uuid

from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

from backend.app.repair.audit import AuditLog
from backend.app.repair.catalog import get_schema, prefixed
from backend.app.repair.errors import DatabaseOperationError
from backend.app.repair.planner import CREATE, RENAME, RepairStep

log = logging.getLogger(__name__)


def new_suffix() -> str:
    """Short random token shared by every table renamed in one run."""
    return "_" + uuid.uuid4().hex[:4]


class TableMutator:
    def __init__(self, conn: Connection, audit: AuditLog, *, prefix: str = "", charset_collate: str = "") -> None:
        self.conn = conn
        self.audit = audit
        self.prefix = prefix
        self.charset_collate = charset_collate

    def create_table(self, table: str) -> None:
        ddl = get_schema(table, prefix=self.prefix, charset_collate=self.charset_collate)
        name = prefixed(self.prefix, table)
        try:
            self.conn.exec_driver_sql(ddl)
        except SQLAlchemyError as exc:
            raise DatabaseOperationError("create_table", name, exc) from exc
        self.audit.created(table)

    def rename_table(self, table: str, suffix: str) -> str:
        src = prefixed(self.prefix, table)
        dst = prefixed(self.prefix, f"{table}{suffix}")
        try:
            self.conn.exec_driver_sql(f"ALTER TABLE {src} RENAME TO {dst}")
        except SQLAlchemyError as exc:
            raise DatabaseOperationError("rename_table", src, exc) from exc
        self.audit.renamed(table, f"{table}{suffix}")
        return dst

    def apply(self, step: RepairStep, suffix: str) -> None:
        if step.action == RENAME:
            self.rename_table(step.table, suffix)
        elif step.action == CREATE:
            self.create_table(step.table)
        else:
            raise ValueError(f"unknown repair action: {step.action!r}")
