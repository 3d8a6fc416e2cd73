# File: backend/app/repair/errors.py
# Version: v1.0.0
"""
Exception hierarchy for the table repair.

- UnknownTableError: a table name outside the catalog was requested (a bug).
- DatabaseOperationError: a metadata query or DDL statement failed.
- RepairFailedError: the repair run was aborted; the failure is recorded.
"""
from __future__ import annotations


class RepairError(Exception):
    """Base class for all repair errors."""


class UnknownTableError(RepairError, KeyError):
    def __init__(self, table: str) -> None:
        super().__init__(table)
        self.table = table

    def __str__(self) -> str:
        return f"unknown table: {self.table!r}"


class DatabaseOperationError(RepairError):
    def __init__(self, operation: str, table: str, cause: BaseException | None = None) -> None:
        msg = f"{operation} failed for {table}"
        if cause is not None:
            msg = f"{msg}: {cause}"
        super().__init__(msg)
        self.operation = operation
        self.table = table


class RepairFailedError(RepairError):
    """Raised after a failed run has been recorded in the option store."""
