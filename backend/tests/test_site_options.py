# File: backend/tests/test_site_options.py
# Version: v1.1.0
"""
Schema versions come from the site's `<prefix>options` table as raw strings,
while the tool's own record stays in `repair_options`.
"""
import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

from conftest import ALL_TABLES, FakeMySQL, FakeTable

from backend.app.db.maintenance import ensure_option_table
from backend.app.repair.errors import DatabaseOperationError, RepairFailedError
from backend.app.repair.orchestrator import OBSOLETE_MESSAGE, RepairOrchestrator
from backend.app.services.notices import BufferNotifier
from backend.app.services.option_store import (
    RECORD_KEY,
    STORE_SCHEMA_KEY,
    SiteOptionReader,
    SqlOptionStore,
)


def _site(tmp_path, options=None):
    """SQLite stand-in for the site database: wp_options plus repair_options."""
    engine = create_engine(f"sqlite:///{tmp_path / 'site.db'}", future=True)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE wp_options (option_name VARCHAR(191) PRIMARY KEY, option_value TEXT)"))
        for name, value in (options or {}).items():
            conn.execute(text("INSERT INTO wp_options (option_name, option_value) VALUES (:n, :v)"),
                         {"n": name, "v": value})
    ensure_option_table(engine)
    return engine, SqlOptionStore(sessionmaker(bind=engine, autoflush=False, future=True))


def _broken_actions_table():
    tables = {f"wp_{t}": FakeTable() for t in ALL_TABLES}
    tables["wp_actionscheduler_actions"] = FakeTable(auto_increment=False)
    return FakeMySQL(tables)


def test_reader_returns_raw_strings(tmp_path):
    engine, _ = _site(tmp_path, {STORE_SCHEMA_KEY: "3.0.1591981234"})
    reader = SiteOptionReader(engine, "wp_")
    assert reader.get(STORE_SCHEMA_KEY) == "3.0.1591981234"
    assert reader.get("missing") is None
    assert reader.get("missing", "") == ""


def test_reader_rejects_bad_prefix(tmp_path):
    engine, _ = _site(tmp_path)
    with pytest.raises(ValueError):
        SiteOptionReader(engine, "wp; DROP")


def test_reader_wraps_query_errors(tmp_path):
    engine, _ = _site(tmp_path)
    reader = SiteOptionReader(engine, "other_")
    with pytest.raises(DatabaseOperationError) as ei:
        reader.get(STORE_SCHEMA_KEY)
    assert ei.value.table == "other_options"


def test_newer_site_schema_skips_repair(tmp_path):
    engine, store = _site(tmp_path, {STORE_SCHEMA_KEY: "7.0.1700000000"})
    db = _broken_actions_table()
    orch = RepairOrchestrator(store, db, prefix="wp_", notifier=BufferNotifier(),
                              site_options=SiteOptionReader(engine, "wp_"))

    record = orch.run()

    assert record.outcome == "obsolete"
    assert record.audit_entries == [OBSOLETE_MESSAGE]
    assert db.ddl() == []
    assert store.get(RECORD_KEY)["outcome"] == "obsolete"


def test_current_site_schema_still_repairs(tmp_path):
    engine, store = _site(tmp_path, {STORE_SCHEMA_KEY: "3.0.1591981234"})
    db = _broken_actions_table()
    orch = RepairOrchestrator(store, db, prefix="wp_", notifier=BufferNotifier(),
                              site_options=SiteOptionReader(engine, "wp_"), suffix_factory=lambda: "_beef")

    record = orch.run()

    assert record.outcome == "repaired"
    assert record.suffix == "_beef"
    assert len(db.ddl()) == 8


def test_unreadable_site_options_are_recorded_as_failed(tmp_path):
    engine, store = _site(tmp_path)
    db = FakeMySQL()
    orch = RepairOrchestrator(store, db, prefix="xx_", notifier=BufferNotifier(),
                              site_options=SiteOptionReader(engine, "xx_"))

    with pytest.raises(RepairFailedError):
        orch.run()

    stored = store.get(RECORD_KEY)
    assert stored["run_completed"] is False
    assert stored["outcome"] == "failed"
    assert db.statements == []
