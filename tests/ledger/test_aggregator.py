from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from src.timesheet_ledger.timesheet_ledger.common.datetime_utils import Period
from src.timesheet_ledger.timesheet_ledger.core.enums import PunchType, WarningCode
from src.timesheet_ledger.timesheet_ledger.ledger.aggregator import MonthlyAggregator
from src.timesheet_ledger.timesheet_ledger.ledger.calculator.base import MinutesCalculator
from src.timesheet_ledger.timesheet_ledger.ledger.calculator.standard_calculator import StandardMinutesCalculator
from src.timesheet_ledger.timesheet_ledger.ledger.reconciler import DailyReconciler
from src.timesheet_ledger.timesheet_ledger.punches.model import PunchEvent

SP = ZoneInfo("America/Sao_Paulo")


def _ev(punch_type: PunchType, day: int, h: int, m: int = 0) -> PunchEvent:
    return PunchEvent(
        employee_id="E1",
        unit_id="U1",
        punch_type=punch_type,
        timestamp=datetime(2025, 3, day, h, m, tzinfo=SP),
    )


def _workday(day: int) -> list[PunchEvent]:
    return [
        _ev(PunchType.CLOCK_IN, day, 8),
        _ev(PunchType.BREAK_START, day, 12),
        _ev(PunchType.BREAK_END, day, 13),
        _ev(PunchType.CLOCK_OUT, day, 17),
    ]


class ExplodingOnDayCalculator(MinutesCalculator):
    """Fails for punches on one specific day; defers to the standard rules otherwise."""

    def __init__(self, bad_day: int):
        self._bad_day = bad_day
        self._inner = StandardMinutesCalculator()

    def worked_minutes(self, punches):
        for ev in punches.values():
            if ev.timestamp.astimezone(SP).day == self._bad_day:
                raise RuntimeError("boom")
        return self._inner.worked_minutes(punches)


def test_grid_has_every_day_of_month():
    agg = MonthlyAggregator(SP)

    feb_leap = agg.aggregate(Period(2024, 2), [])
    march = agg.aggregate(Period(2025, 3), [])

    assert [r.day for r in feb_leap.rows] == list(range(1, 30))
    assert [r.day for r in march.rows] == list(range(1, 32))
    assert march.total_minutes == 0
    assert march.total_hours == 0


def test_weekday_labels_follow_calendar():
    summary = MonthlyAggregator(SP).aggregate(Period(2025, 3), [])

    # 2025-03-01 was a Saturday.
    assert [r.weekday_label for r in summary.rows[:8]] == ["Sáb", "Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb"]


def test_totals_are_sum_of_rows():
    events = _workday(3) + _workday(4) + [
        _ev(PunchType.CLOCK_IN, 5, 8),
        _ev(PunchType.CLOCK_OUT, 5, 12, 30),
    ]

    summary = MonthlyAggregator(SP).aggregate(Period(2025, 3), events)

    assert summary.rows[2].total_minutes == 480
    assert summary.rows[3].total_minutes == 480
    assert summary.rows[4].total_minutes == 270
    assert summary.total_minutes == 1230
    assert summary.total_minutes == sum(r.total_minutes for r in summary.rows)
    assert summary.total_hours == 20


def test_failing_day_does_not_abort_month():
    events = _workday(3) + _workday(4)
    agg = MonthlyAggregator(SP, reconciler=DailyReconciler(SP, calculator=ExplodingOnDayCalculator(3)))

    summary = agg.aggregate(Period(2025, 3), events)

    failed = summary.rows[2]
    assert failed.total_minutes == 0
    assert [w.code for w in failed.warnings] == [WarningCode.RECONCILIATION_FAILED]
    assert len(failed.source_events) == 4
    assert summary.rows[3].total_minutes == 480
    assert summary.total_minutes == 480
    assert len(summary.rows) == 31


def test_aggregate_is_idempotent():
    events = _workday(3) + _workday(10)
    agg = MonthlyAggregator(SP)

    assert agg.aggregate(Period(2025, 3), events) == agg.aggregate(Period(2025, 3), list(reversed(events)))
