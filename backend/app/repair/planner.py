# File: backend/app/repair/planner.py
# Version: v1.0.0
"""
Repair decisions over the four Action Scheduler tables.

Two decisions are made, always in catalog order (actions, claims, groups, logs):

1. Which tables are missing and must be created.
2. Whether a reset is required. One table without a primary key or without
   auto_increment on its primary column is enough: action_id, claim_id and
   group_id reference each other across tables, so all four are renamed and
   recreated together or none are.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Mapping

from backend.app.repair.catalog import table_names
from backend.app.repair.inspector import InspectionResult

CREATE = "create"
RENAME = "rename"


@dataclass(frozen=True)
class RepairStep:
    action: Literal["create", "rename"]
    table: str


@dataclass
class RepairPlan:
    create_missing: List[str] = field(default_factory=list)
    reset_required: bool = False

    @property
    def steps(self) -> List[RepairStep]:
        out = [RepairStep(CREATE, t) for t in self.create_missing]
        if self.reset_required:
            out.extend(reset_steps())
        return out

    @property
    def is_noop(self) -> bool:
        return not self.create_missing and not self.reset_required


def plan_missing(exists: Mapping[str, bool]) -> List[RepairStep]:
    """Create steps for every catalog table reported as absent."""
    return [RepairStep(CREATE, t) for t in table_names() if not exists.get(t, False)]


def needs_reset(inspections: Mapping[str, InspectionResult]) -> bool:
    """True when any table lacks its primary key or auto_increment.

    Every table is evaluated; the flag never goes back to False once set.
    Expects existence to be guaranteed already (missing tables count as corrupt).
    """
    reset = False
    for table in table_names():
        result = inspections.get(table)
        corrupt = result is None or not (result.has_primary_key and result.has_auto_increment)
        reset = reset or corrupt
    return reset


def reset_steps() -> List[RepairStep]:
    """Rename then recreate, table by table, for all four tables."""
    steps: List[RepairStep] = []
    for table in table_names():
        steps.append(RepairStep(RENAME, table))
        steps.append(RepairStep(CREATE, table))
    return steps


def plan_repair(inspections: Mapping[str, InspectionResult]) -> RepairPlan:
    """Preview plan from a single inspection pass.

    Missing tables are assumed sound once created from the catalog DDL, so only
    tables that already exist can trigger the reset.
    """
    create = [s.table for s in plan_missing({t: r.exists for t, r in inspections.items()})]
    existing = {
        t: (r if r.exists else InspectionResult(exists=True, has_primary_key=True, has_auto_increment=True))
        for t, r in inspections.items()
    }
    return RepairPlan(create_missing=create, reset_required=needs_reset(existing))
