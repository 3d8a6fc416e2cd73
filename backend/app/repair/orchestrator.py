# File: backend/app/repair/orchestrator.py
# Version: v1.1.0
"""
One-shot repair run for the Action Scheduler tables.

States
------
NOT_STARTED               no repair record stored
RUNNING                   repair in progress (this process only)
COMPLETED_PENDING_NOTICE  record stored, operator not told yet
DONE                      notice shown, tool disabled

`run()` is called on every load of the tool:

- no record      -> repair now, store the record, return it
- record present -> show the audit trail once, clear it, disable the tool
- disabled       -> nothing

Repair sequence
---------------
1. Skip everything when the Action Scheduler store-schema version (read from the
   site options, where the library keeps it) starts with a character greater
   than "3" (single-character string compare).
2. Create every missing table, in catalog order.
3. Inspect all four tables; if any lacks its primary key or auto_increment,
   rename all four with one shared random suffix and recreate each from the
   catalog DDL.

The multi-statement reset is not transactional (MySQL DDL commits implicitly).
A database error aborts the run: the partial trail is stored with
run_completed=False and RepairFailedError is raised. The stored record still
blocks automatic retries.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, NoReturn, Optional

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from backend.app.db.schemas.repair import RepairRecord
from backend.app.repair.audit import NO_ACTIONS, AuditLog
from backend.app.repair.catalog import table_names
from backend.app.repair.errors import DatabaseOperationError, RepairFailedError
from backend.app.repair.inspector import TableInspector
from backend.app.repair.mutator import TableMutator, new_suffix
from backend.app.repair.planner import needs_reset, plan_missing, reset_steps
from backend.app.services.notices import (
    Disabler,
    LogNotifier,
    Notifier,
    OptionFlagDisabler,
    render_notice,
)
from backend.app.services.option_store import (
    DISABLED_KEY,
    LOGGER_SCHEMA_KEY,
    RECORD_KEY,
    STORE_SCHEMA_KEY,
    OptionReader,
    OptionStore,
)

log = logging.getLogger(__name__)

OBSOLETE_MESSAGE = "The Repair Action Scheduler could not run because the repair database schema is obsolete."
SUPPORTED_SCHEMA_GENERATION = "3"


class RepairState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED_PENDING_NOTICE = "completed_pending_notice"
    DONE = "done"


def is_obsolete_schema(version: Any) -> bool:
    # NOTE: first character only, so "10.0" compares lower than "3"
    return str(version or "")[:1] > SUPPORTED_SCHEMA_GENERATION


class RepairOrchestrator:
    def __init__(
        self,
        store: OptionStore,
        engine: Optional[Engine] = None,
        *,
        prefix: str = "",
        charset_collate: str = "",
        notifier: Optional[Notifier] = None,
        disabler: Optional[Disabler] = None,
        site_options: Optional[OptionReader] = None,
        suffix_factory: Callable[[], str] = new_suffix,
    ) -> None:
        self.store = store
        self.engine = engine
        self.prefix = prefix
        self.charset_collate = charset_collate
        self.notifier = notifier or LogNotifier()
        self.disabler = disabler or OptionFlagDisabler(store)
        # schema versions live with the site, not in the tool's own store
        self.site_options = site_options if site_options is not None else store
        self.suffix_factory = suffix_factory
        self._running = False

    # ---------- State ----------

    def load_record(self) -> Optional[RepairRecord]:
        raw = self.store.get(RECORD_KEY)
        if raw is None:
            return None
        return RepairRecord.from_stored(raw)

    def current_state(self) -> RepairState:
        if self._running:
            return RepairState.RUNNING
        if self.disabler.is_disabled():
            return RepairState.DONE
        if self.store.get(RECORD_KEY) is not None:
            return RepairState.COMPLETED_PENDING_NOTICE
        return RepairState.NOT_STARTED

    def run(self) -> RepairRecord | List[str] | None:
        state = self.current_state()
        if state is RepairState.DONE:
            log.debug("repair tool is disabled; nothing to do")
            return None
        if state is RepairState.COMPLETED_PENDING_NOTICE:
            return self.show_pending_notice()
        if state is RepairState.RUNNING:
            raise RuntimeError("repair already running in this process")
        return self.repair()

    # ---------- Phase 1: repair ----------

    def repair(self) -> RepairRecord:
        existing = self.load_record()
        if existing is not None:
            log.info("repair already attempted at %s; not running again", existing.created_at)
            return existing

        try:
            store_version = self.site_options.get(STORE_SCHEMA_KEY, "")
            logger_version = self.site_options.get(LOGGER_SCHEMA_KEY, "")
        except DatabaseOperationError as exc:
            self._fail(AuditLog(), exc, None)
        log.debug("action scheduler schema versions: store=%r logger=%r", store_version, logger_version)
        if is_obsolete_schema(store_version):
            log.warning("store schema version %r is newer than supported; skipping repair", store_version)
            audit = AuditLog()
            audit.add(OBSOLETE_MESSAGE)
            return self._save(RepairRecord(run_completed=True, outcome="obsolete", audit_entries=audit.entries))

        if self.engine is None:
            raise RuntimeError("RepairOrchestrator needs a database engine to repair tables")

        audit = AuditLog()
        suffix = self.suffix_factory()
        self._running = True
        try:
            with self.engine.begin() as conn:
                did_reset = self._repair_tables(conn, audit, suffix)
        except (DatabaseOperationError, SQLAlchemyError) as exc:
            self._fail(audit, exc, suffix)
        finally:
            self._running = False

        if not len(audit):
            audit.add(NO_ACTIONS)
        record = RepairRecord(
            run_completed=True,
            outcome="repaired",
            audit_entries=audit.entries,
            suffix=suffix if did_reset else None,
        )
        return self._save(record)

    def _repair_tables(self, conn: Connection, audit: AuditLog, suffix: str) -> bool:
        inspector = TableInspector(conn, self.prefix)
        mutator = TableMutator(conn, audit, prefix=self.prefix, charset_collate=self.charset_collate)

        exists = {table: inspector.table_exists(table) for table in table_names()}
        for step in plan_missing(exists):
            mutator.apply(step, suffix)

        inspections = {table: inspector.inspect(table) for table in table_names()}
        if not needs_reset(inspections):
            return False

        corrupt = [t for t, r in inspections.items() if not r.is_sound]
        log.warning("corrupt tables %s; resetting all tables with suffix %s", corrupt, suffix)
        for step in reset_steps():
            mutator.apply(step, suffix)
        return True

    def _fail(self, audit: AuditLog, exc: Exception, suffix: Optional[str]) -> NoReturn:
        log.exception("repair aborted")
        audit.add(f"Repair aborted: {exc}")
        self._save(RepairRecord(run_completed=False, outcome="failed", audit_entries=audit.entries, suffix=suffix))
        raise RepairFailedError(str(exc)) from exc

    def _save(self, record: RepairRecord) -> RepairRecord:
        self.store.set(RECORD_KEY, record.model_dump(mode="json"))
        return record

    # ---------- Phase 2: notice ----------

    def show_pending_notice(self) -> List[str]:
        record = self.load_record()
        if record is None:
            return []
        lines = render_notice(record) if record.audit_entries else []
        if lines:
            self.notifier.show(lines)
        self.store.delete(RECORD_KEY)
        self.disabler.disable()
        return lines

    # ---------- Deactivation ----------

    def clean(self) -> None:
        """Forget the stored run so a re-enabled tool repairs again."""
        self.store.delete(RECORD_KEY)
        self.store.delete(DISABLED_KEY)
        log.info("repair record cleared")
