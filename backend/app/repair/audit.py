# File: backend/app/repair/audit.py
# Version: v1.0.0
"""
Human-readable audit trail of one repair run.

An AuditLog is created per run and passed to whatever performs actions, so the
trail is returned by the run instead of living in module state.
"""
from __future__ import annotations

import logging
from typing import Iterator, List, Optional

log = logging.getLogger(__name__)

NO_ACTIONS = "No actions performed."


class AuditLog:
    def __init__(self, entries: Optional[List[str]] = None) -> None:
        self._entries: List[str] = list(entries or [])

    def add(self, message: str) -> None:
        log.info("audit: %s", message)
        self._entries.append(message)

    def created(self, table: str) -> None:
        self.add(f"Created table: {table}")

    def renamed(self, table: str, new_name: str) -> None:
        self.add(f"Renamed table: {table} to {new_name}")

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
