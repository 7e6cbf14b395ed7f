from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import PunchEvent


class PunchEventRepository(Protocol):
    """Query interface of the punch-event store (read-only from the ledger)."""

    def list_for_employee(
        self,
        *,
        employee_id: str,
        start: datetime,
        end: datetime,
        unit_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[PunchEvent]:
        """Events with ``start <= timestamp < end`` in arrival order."""

        raise NotImplementedError

    def employees_with_events(
        self,
        *,
        employee_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> set[str]:
        raise NotImplementedError

    def units_for_employees(
        self,
        *,
        employee_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> set[tuple[str, Optional[str]]]:
        """Distinct ``(employee_id, unit_id)`` pairs punched within ``[start, end)``."""

        raise NotImplementedError
