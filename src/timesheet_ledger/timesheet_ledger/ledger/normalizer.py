from __future__ import annotations

from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import Period, to_civil
from ..common.logging_config import get_logger
from ..core.enums import PunchType
from ..punches.model import PunchEvent

logger = get_logger(__name__)


def bucket_by_day(events: Iterable[PunchEvent], period: Period, tz: ZoneInfo) -> dict[int, list[PunchEvent]]:
    """Group events by civil day-of-month.

    Events whose civil (year, month) is not ``period`` are dropped without error:
    the store query runs on UTC bounds, so near-midnight punches at the month
    edges can land outside the civil month.
    """

    by_day: dict[int, list[PunchEvent]] = {}
    for ev in events:
        local = to_civil(ev.timestamp, tz)
        if (local.year, local.month) != (period.year, period.month):
            logger.debug(
                "punch outside period skipped",
                extra={"event_id": ev.event_id, "period": period.label, "local_ts": local.isoformat()},
            )
            continue
        by_day.setdefault(local.day, []).append(ev)
    return by_day


def order_events(events: Sequence[PunchEvent]) -> list[PunchEvent]:
    """Chronological order; ``sorted`` is stable so equal instants keep arrival order."""
    return sorted(events, key=lambda e: e.timestamp)


def dedupe_by_type(events: Sequence[PunchEvent]) -> dict[PunchType, PunchEvent]:
    """First punch of each type (earliest instant, then arrival) wins."""
    chosen: dict[PunchType, PunchEvent] = {}
    for ev in order_events(events):
        chosen.setdefault(ev.punch_type, ev)
    return chosen


def duplicated_types(events: Sequence[PunchEvent]) -> list[PunchType]:
    seen: set[PunchType] = set()
    dupes: list[PunchType] = []
    for ev in order_events(events):
        if ev.punch_type in seen and ev.punch_type not in dupes:
            dupes.append(ev.punch_type)
        seen.add(ev.punch_type)
    return dupes
