# File: backend/app/services/notices.py
# Version: v1.1.0
"""
Notification surface and self-disable hook for the repair tool.

- render_notice(record): the lines shown to the operator, once.
- Notifier implementations: LogNotifier (logging), ConsoleNotifier (CLI) and
  BufferNotifier (collects lines for the HTTP response).
- OptionFlagDisabler: persists the "disabled" flag; calling it twice is harmless.
"""
from __future__ import annotations

import logging
import sys
from typing import List, Protocol, Sequence, TextIO

from backend.app.db.schemas.repair import RepairRecord
from backend.app.repair.audit import NO_ACTIONS
from backend.app.services.option_store import DISABLED_KEY, OptionStore

log = logging.getLogger(__name__)

HEADLINE = {
    "repaired": "The Repair Action Scheduler process is complete. The following actions have been performed:",
    "failed": "The Repair Action Scheduler process failed. The following actions were performed before the error:",
}
DEACTIVATED_MESSAGE = "The Repair Action Scheduler plugin has been automatically deactivated."


def render_notice(record: RepairRecord) -> List[str]:
    lines: List[str] = []
    headline = HEADLINE.get(record.outcome)
    if headline:
        lines.append(headline)
    lines.extend(record.audit_entries)
    if record.outcome == "obsolete":
        lines.append(NO_ACTIONS)
    lines.append(DEACTIVATED_MESSAGE)
    return lines


class Notifier(Protocol):
    def show(self, lines: Sequence[str]) -> None: ...


class Disabler(Protocol):
    def disable(self) -> None: ...

    def is_disabled(self) -> bool: ...

class LogNotifier:
    def show(self, lines: Sequence[str]) -> None:
        for line in lines:
            log.warning("%s", line)


class ConsoleNotifier:
    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def show(self, lines: Sequence[str]) -> None:
        for line in lines:
            print(line, file=self.stream)


class BufferNotifier:
    def __init__(self) -> None:
        self.lines: List[str] = []

    def show(self, lines: Sequence[str]) -> None:
        self.lines.extend(lines)


class OptionFlagDisabler:
    def __init__(self, store: OptionStore) -> None:
        self.store = store

    def disable(self) -> None:
        if self.store.get(DISABLED_KEY):
            return
        self.store.set(DISABLED_KEY, True)
        log.info("repair tool disabled")

    def is_disabled(self) -> bool:
        return bool(self.store.get(DISABLED_KEY))
