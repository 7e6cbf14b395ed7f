from __future__ import annotations

from typing import Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import duration_ms, format_civil_time
from ..core.enums import PunchType, WarningCode
from ..punches.model import PunchEvent
from .calculator.base import MinutesCalculator
from .calculator.standard_calculator import StandardMinutesCalculator
from .model import DailyLedgerRow, DayWarning, TimeMark
from .normalizer import dedupe_by_type, duplicated_types, order_events

MESSAGES = {
    WarningCode.MISSING_BREAK_START: "Insira o horário de início do intervalo",
    WarningCode.OUT_OF_ORDER: "Saída anterior à entrada",
    WarningCode.INVERTED_BREAK: "Fim do intervalo anterior ao início",
    WarningCode.INVERTED_OVERTIME: "Fim da hora extra anterior ao início",
    WarningCode.DUPLICATE_PUNCH: "Batida duplicada desconsiderada no cálculo",
    WarningCode.RECONCILIATION_FAILED: "Não foi possível calcular o dia; revise as batidas",
}


def _warning(code: WarningCode, *, at=None, punch_type: Optional[PunchType] = None) -> DayWarning:
    return DayWarning(code=code, message=MESSAGES[code], at=at, punch_type=punch_type)


def _inverted(start: Optional[PunchEvent], end: Optional[PunchEvent]) -> bool:
    return start is not None and end is not None and duration_ms(start.timestamp, end.timestamp) < 0


class DailyReconciler:
    """Turns one civil day's punches into a ledger row.

    The numeric result comes only from the calculator; warnings and provenance
    are display metadata and never feed back into the minutes.
    """

    def __init__(self, tz: ZoneInfo, *, calculator: Optional[MinutesCalculator] = None):
        self._tz = tz
        self._calculator = calculator or StandardMinutesCalculator()

    def reconcile(self, day: int, weekday_label: str, events: Sequence[PunchEvent]) -> DailyLedgerRow:
        ordered = order_events(events)
        punches = dedupe_by_type(ordered)

        return DailyLedgerRow(
            day=day,
            weekday_label=weekday_label,
            normal_start=self._mark(punches, PunchType.CLOCK_IN),
            normal_end=self._mark(punches, PunchType.CLOCK_OUT),
            break_start=self._mark(punches, PunchType.BREAK_START),
            break_end=self._mark(punches, PunchType.BREAK_END),
            overtime_start=self._mark(punches, PunchType.OVERTIME_START),
            overtime_end=self._mark(punches, PunchType.OVERTIME_END),
            total_minutes=self._calculator.worked_minutes(punches),
            warnings=tuple(self._warnings(punches, ordered)),
            source_events=tuple(ordered),
        )

    def failed_row(self, day: int, weekday_label: str, events: Sequence[PunchEvent]) -> DailyLedgerRow:
        """All-zero row for a day that could not be reconciled; punches stay visible."""
        return DailyLedgerRow(
            day=day,
            weekday_label=weekday_label,
            warnings=(_warning(WarningCode.RECONCILIATION_FAILED),),
            source_events=tuple(events),
        )

    def _mark(self, punches: Mapping[PunchType, PunchEvent], punch_type: PunchType) -> Optional[TimeMark]:
        ev = punches.get(punch_type)
        if ev is None:
            return None
        return TimeMark(label=format_civil_time(ev.timestamp, self._tz), source=ev)

    def _warnings(self, punches: Mapping[PunchType, PunchEvent], ordered: Sequence[PunchEvent]) -> list[DayWarning]:
        out: list[DayWarning] = []
        clock_in = punches.get(PunchType.CLOCK_IN)
        clock_out = punches.get(PunchType.CLOCK_OUT)
        break_start = punches.get(PunchType.BREAK_START)
        break_end = punches.get(PunchType.BREAK_END)

        if break_end is not None and break_start is None:
            out.append(
                _warning(WarningCode.MISSING_BREAK_START, at=break_end.timestamp, punch_type=PunchType.BREAK_START)
            )

        # Span warnings only apply to days that have minutes to compute.
        if clock_in is not None and clock_out is not None:
            if _inverted(clock_in, clock_out):
                out.append(_warning(WarningCode.OUT_OF_ORDER, at=clock_out.timestamp))
            if _inverted(break_start, break_end):
                out.append(_warning(WarningCode.INVERTED_BREAK, at=break_end.timestamp))
            if _inverted(punches.get(PunchType.OVERTIME_START), punches.get(PunchType.OVERTIME_END)):
                out.append(_warning(WarningCode.INVERTED_OVERTIME, at=punches[PunchType.OVERTIME_END].timestamp))

        for punch_type in duplicated_types(ordered):
            out.append(_warning(WarningCode.DUPLICATE_PUNCH, punch_type=punch_type))
        return out
