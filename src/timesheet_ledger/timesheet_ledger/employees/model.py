from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UnitRef:
    unit_id: str
    name: str


@dataclass(frozen=True)
class GroupRef:
    group_id: str
    name: str


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Read-only copy of an employee directory entry.

    Note: the directory is owned by another service; the ledger only embeds it.
    """

    employee_id: str
    name: str
    document_id: Optional[str]
    unit: Optional[UnitRef] = None
    group: Optional[GroupRef] = None
    day_off: Optional[int] = None

    @property
    def unit_id(self) -> Optional[str]:
        return self.unit.unit_id if self.unit else None
