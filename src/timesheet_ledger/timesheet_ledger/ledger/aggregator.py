from __future__ import annotations

from datetime import date
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import Period, weekday_label
from ..common.logging_config import get_logger
from ..punches.model import PunchEvent
from .model import DailyLedgerRow, MonthSummary
from .normalizer import bucket_by_day
from .reconciler import DailyReconciler

logger = get_logger(__name__)


class MonthlyAggregator:
    """Builds the complete calendar grid for one month.

    Every day of the month gets a row, with or without punches. A day that fails
    to reconcile becomes a zero row with a warning; the month is never aborted.
    """

    def __init__(self, tz: ZoneInfo, *, reconciler: Optional[DailyReconciler] = None):
        self._tz = tz
        self._reconciler = reconciler or DailyReconciler(tz)

    def aggregate(self, period: Period, events: Iterable[PunchEvent]) -> MonthSummary:
        by_day = bucket_by_day(events, period, self._tz)

        rows: list[DailyLedgerRow] = []
        total_minutes = 0
        for day in range(1, period.days_in_month + 1):
            label = weekday_label(date(period.year, period.month, day))
            row = self._reconcile_day(period, day, label, by_day.get(day, []))
            total_minutes += row.total_minutes
            rows.append(row)

        return MonthSummary(
            period=period,
            rows=tuple(rows),
            total_minutes=total_minutes,
            total_hours=total_minutes // 60,
        )

    def _reconcile_day(self, period: Period, day: int, label: str, events: list[PunchEvent]) -> DailyLedgerRow:
        try:
            return self._reconciler.reconcile(day, label, events)
        except Exception:
            logger.exception(
                "day reconciliation failed",
                extra={"period": period.label, "day": day, "events": len(events)},
            )
            return self._reconciler.failed_row(day, label, events)
