# File: backend/tests/conftest.py
# Version: v1.1.0
"""
Test bootstrap: ensure project root is on sys.path so 'backend.*' imports work.

Also provides a small in-memory stand-in for the MySQL server. It understands
exactly the statements the inspector and mutator send (SHOW TABLES LIKE, the
two INFORMATION_SCHEMA.COLUMNS counts, CREATE TABLE, ALTER TABLE ... RENAME TO)
and records every statement it sees.
"""
import re
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import pytest
from sqlalchemy.exc import OperationalError

ROOT = Path(__file__).resolve().parents[2]  # repo root (../.. from this file)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.app.services.option_store import MemoryOptionStore  # noqa: E402

_CREATE_RE = re.compile(r"^CREATE TABLE (\S+) \(")
_RENAME_RE = re.compile(r"^ALTER TABLE (\S+) RENAME TO (\S+)$")


@dataclass
class FakeTable:
    primary_key: bool = True
    auto_increment: bool = True


class _Result:
    def __init__(self, rows):
        self._rows = rows

    def first(self):
        return self._rows[0] if self._rows else None

    def scalar(self):
        return self._rows[0][0] if self._rows else None


class FakeMySQL:
    """Tables keyed by physical (prefixed) name."""

    def __init__(self, tables=None):
        self.tables = dict(tables or {})
        self.statements = []
        self.fail_on = None  # substring; matching statements raise OperationalError
        self.begin_count = 0

    # --- Engine / Connection surface ---

    @contextmanager
    def begin(self):
        self.begin_count += 1
        yield self

    connect = begin

    def dispose(self):
        pass

    def execute(self, clause, params=None):
        sql = " ".join(str(clause).split())
        params = params or {}
        self._record(sql)
        if sql.startswith("SHOW TABLES LIKE"):
            name = params["pattern"].replace("\\_", "_").replace("\\%", "%").replace("\\\\", "\\")
            return _Result([(name,)] if name in self.tables else [])
        table = self.tables.get(params.get("table_name"))
        if "COLUMN_KEY = 'PRI'" in sql:
            return _Result([(int(table is not None and table.primary_key),)])
        if "auto_increment" in sql:
            return _Result([(int(table is not None and table.auto_increment),)])
        raise AssertionError(f"unexpected query: {sql}")

    def exec_driver_sql(self, sql, params=None):
        self._record(sql)
        m = _CREATE_RE.match(sql)
        if m:
            name = m.group(1)
            if name in self.tables:
                raise OperationalError(sql, {}, Exception(f"Table '{name}' already exists"))
            self.tables[name] = FakeTable()
            return _Result([])
        m = _RENAME_RE.match(sql)
        if m:
            src, dst = m.groups()
            if src not in self.tables:
                raise OperationalError(sql, {}, Exception(f"Table '{src}' doesn't exist"))
            self.tables[dst] = self.tables.pop(src)
            return _Result([])
        raise AssertionError(f"unexpected DDL: {sql}")

    # --- helpers ---

    def _record(self, sql):
        self.statements.append(sql)
        if self.fail_on and self.fail_on in sql:
            raise OperationalError(sql, {}, Exception("Lost connection to MySQL server"))

    def ddl(self):
        return [s for s in self.statements if s.startswith(("CREATE", "ALTER"))]


ALL_TABLES = (
    "actionscheduler_actions",
    "actionscheduler_claims",
    "actionscheduler_groups",
    "actionscheduler_logs",
)


@pytest.fixture
def store():
    return MemoryOptionStore()


@pytest.fixture
def sound_db():
    """All four tables present with primary key + auto_increment."""
    return FakeMySQL({f"wp_{t}": FakeTable() for t in ALL_TABLES})


@pytest.fixture
def empty_db():
    return FakeMySQL()
