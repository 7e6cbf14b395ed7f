from __future__ import annotations

from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import Period, recent_periods
from ..common.logging_config import get_logger
from ..core.constants import PROTOCOL_LOOKBACK_MONTHS
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError
from ..employees.model import EmployeeSnapshot
from ..employees.repository import EmployeeDirectory
from ..punches.model import PunchEvent
from ..punches.repository import PunchEventRepository
from .aggregator import MonthlyAggregator
from .model import MonthlyLedger
from .protocol import resolve_protocol, stamp_protocol

logger = get_logger(__name__)


class LedgerService:
    """Assembles monthly ledgers.

    ``assemble`` is the pure pipeline (normalize, reconcile, aggregate, stamp).
    The ``build_*`` methods only add the collaborator lookups around it.
    """

    def __init__(
        self,
        tz: ZoneInfo,
        *,
        punches: Optional[PunchEventRepository] = None,
        employees: Optional[EmployeeDirectory] = None,
        aggregator: Optional[MonthlyAggregator] = None,
    ):
        self._tz = tz
        self._punches = punches
        self._employees = employees
        self._aggregator = aggregator or MonthlyAggregator(tz)

    @property
    def tz(self) -> ZoneInfo:
        return self._tz

    def assemble(
        self,
        employee: EmployeeSnapshot,
        period: Period,
        events: Iterable[PunchEvent],
        *,
        unit_id: Optional[str] = None,
    ) -> MonthlyLedger:
        summary = self._aggregator.aggregate(period, events)
        stamp_unit = employee.unit_id or unit_id
        return MonthlyLedger(
            employee=employee,
            period=period,
            rows=summary.rows,
            total_minutes=summary.total_minutes,
            total_hours=summary.total_hours,
            protocol=stamp_protocol(employee.employee_id, stamp_unit, period),
            unit_id=stamp_unit,
        )

    def build_for_employee(
        self,
        employee_id: str,
        period: Period,
        *,
        unit_id: Optional[str] = None,
        allowed_unit_ids: Optional[Sequence[str]] = None,
    ) -> MonthlyLedger:
        employee = self._require_employees().get_by_id(employee_id)
        if not employee:
            raise NotFoundError("funcionario nao encontrado")

        if allowed_unit_ids is not None:
            if not employee.unit_id or employee.unit_id not in allowed_unit_ids:
                raise AuthorizationError("Sem permissão para este funcionário")
            if unit_id and unit_id not in allowed_unit_ids:
                raise AuthorizationError("Sem permissão para esta unidade")

        events = self._fetch_events(employee.employee_id, period, unit_id=unit_id, allowed_unit_ids=allowed_unit_ids)
        ledger = self.assemble(employee, period, events, unit_id=unit_id)
        logger.info(
            "ledger assembled",
            extra={
                "employee_id": employee.employee_id,
                "period": period.label,
                "protocol": ledger.protocol,
                "events": len(events),
                "total_minutes": ledger.total_minutes,
            },
        )
        return ledger

    def build_for_group(
        self,
        group_id: str,
        period: Period,
        *,
        unit_ids: Optional[Sequence[str]] = None,
        only_with_events: bool = False,
    ) -> list[MonthlyLedger]:
        employees = list(self._require_employees().list_by_group(group_id, unit_ids=unit_ids))
        if only_with_events and employees:
            start, end = period.civil_bounds(self._tz)
            active = self._require_punches().employees_with_events(
                employee_ids=[e.employee_id for e in employees], start=start, end=end
            )
            employees = [e for e in employees if e.employee_id in active]
        if not employees:
            raise NotFoundError("Nenhum funcionário encontrado para os filtros selecionados")

        ledgers: list[MonthlyLedger] = []
        for employee in employees:
            try:
                events = self._fetch_events(employee.employee_id, period, allowed_unit_ids=unit_ids)
            except DomainError:
                logger.warning(
                    "group export skipped employee",
                    extra={"group_id": group_id, "employee_id": employee.employee_id, "period": period.label},
                    exc_info=True,
                )
                continue
            ledgers.append(self.assemble(employee, period, events))
        return ledgers

    def resolve_protocol_in_group(
        self,
        protocol: str,
        group_id: str,
        *,
        anchor: Period,
        months: int = PROTOCOL_LOOKBACK_MONTHS,
        unit_ids: Optional[Sequence[str]] = None,
    ) -> Optional[tuple[EmployeeSnapshot, Optional[str], Period]]:
        """Reverse lookup of a printed protocol among a group's employees.

        A ledger may have been stamped with the employee's current unit, with
        no unit, or with a unit the employee punched at during the window
        (query unit or a later transfer), so all of those are tried.
        Returns ``(employee, stamped unit, period)``.
        """

        employees = {e.employee_id: e for e in self._require_employees().list_by_group(group_id, unit_ids=unit_ids)}
        periods = list(recent_periods(anchor, months))
        if not employees or not periods:
            return None

        candidates: list[tuple[str, Optional[str]]] = []
        for employee in employees.values():
            candidates.append((employee.employee_id, employee.unit_id))
            candidates.append((employee.employee_id, None))

        start, _ = periods[-1].civil_bounds(self._tz)
        _, end = periods[0].civil_bounds(self._tz)
        punched = self._require_punches().units_for_employees(employee_ids=list(employees), start=start, end=end)
        candidates.extend(sorted(punched, key=lambda pair: (pair[0], pair[1] or "")))

        found = resolve_protocol(protocol, candidates, periods)
        if not found:
            return None
        employee_id, unit_id, period = found
        return employees[employee_id], unit_id, period

    def _fetch_events(
        self,
        employee_id: str,
        period: Period,
        *,
        unit_id: Optional[str] = None,
        allowed_unit_ids: Optional[Sequence[str]] = None,
    ) -> list[PunchEvent]:
        start, end = period.civil_bounds(self._tz)
        unit_filter: Optional[list[str]] = None
        if unit_id:
            unit_filter = [unit_id]
        elif allowed_unit_ids is not None:
            unit_filter = list(allowed_unit_ids)
        return list(
            self._require_punches().list_for_employee(
                employee_id=employee_id, start=start, end=end, unit_ids=unit_filter
            )
        )

    def _require_punches(self) -> PunchEventRepository:
        if self._punches is None:
            raise RuntimeError("LedgerService was built without a punch repository")
        return self._punches

    def _require_employees(self) -> EmployeeDirectory:
        if self._employees is None:
            raise RuntimeError("LedgerService was built without an employee directory")
        return self._employees
