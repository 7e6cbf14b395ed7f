from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import Period, format_minutes
from ..core.enums import PunchType, WarningCode
from ..employees.model import EmployeeSnapshot
from ..punches.model import PunchEvent


@dataclass(frozen=True)
class TimeMark:
    """A civil ``HH:MM`` value and the punch it was read from."""

    label: str
    source: PunchEvent

    @property
    def is_manual(self) -> bool:
        return self.source.is_manual

    @property
    def is_edited(self) -> bool:
        return self.source.is_edited


@dataclass(frozen=True)
class DayWarning:
    """Anomaly shown to the supervisor. Never persisted, never used in arithmetic."""

    code: WarningCode
    message: str
    at: Optional[datetime] = None
    punch_type: Optional[PunchType] = None


@dataclass(frozen=True)
class DailyLedgerRow:
    day: int
    weekday_label: str
    normal_start: Optional[TimeMark] = None
    normal_end: Optional[TimeMark] = None
    break_start: Optional[TimeMark] = None
    break_end: Optional[TimeMark] = None
    overtime_start: Optional[TimeMark] = None
    overtime_end: Optional[TimeMark] = None
    total_minutes: int = 0
    warnings: tuple[DayWarning, ...] = ()
    source_events: tuple[PunchEvent, ...] = ()

    @property
    def total_hours_label(self) -> str:
        return format_minutes(self.total_minutes)

    @property
    def observations(self) -> tuple[str, ...]:
        return tuple(e.observation for e in self.source_events if e.observation)


@dataclass(frozen=True)
class MonthSummary:
    """Aggregator output: the complete calendar grid plus running totals."""

    period: Period
    rows: tuple[DailyLedgerRow, ...]
    total_minutes: int
    total_hours: int


@dataclass(frozen=True)
class MonthlyLedger:
    employee: EmployeeSnapshot
    period: Period
    rows: tuple[DailyLedgerRow, ...]
    total_minutes: int
    total_hours: int
    protocol: str
    unit_id: Optional[str] = None

    @property
    def total_label(self) -> str:
        return f"{format_minutes(self.total_minutes)} ({self.total_minutes} minutos)"

    @property
    def has_warnings(self) -> bool:
        return any(r.warnings for r in self.rows)
