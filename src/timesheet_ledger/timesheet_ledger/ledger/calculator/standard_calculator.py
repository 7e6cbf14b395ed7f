from __future__ import annotations

from typing import Mapping, Optional

from ...common.datetime_utils import duration_ms
from ...core.enums import PunchType
from ...punches.model import PunchEvent
from .base import MinutesCalculator

_MS_PER_MINUTE = 60_000


def _round_minutes(ms: int) -> int:
    """Nearest minute, halves rounded up."""
    return (ms + _MS_PER_MINUTE // 2) // _MS_PER_MINUTE


def _positive_span(start: Optional[PunchEvent], end: Optional[PunchEvent]) -> int:
    if start is None or end is None:
        return 0
    ms = duration_ms(start.timestamp, end.timestamp)
    return ms if ms > 0 else 0


class StandardMinutesCalculator(MinutesCalculator):
    """Standard rule: (out - in) - break, plus overtime, not below 0.

    The break is only deducted when both of its ends exist; a lone break end
    leaves the gross time untouched until a supervisor inserts the start.
    """

    def worked_minutes(self, punches: Mapping[PunchType, PunchEvent]) -> int:
        clock_in = punches.get(PunchType.CLOCK_IN)
        clock_out = punches.get(PunchType.CLOCK_OUT)
        if clock_in is None or clock_out is None:
            return 0

        worked = max(duration_ms(clock_in.timestamp, clock_out.timestamp), 0)
        worked -= _positive_span(punches.get(PunchType.BREAK_START), punches.get(PunchType.BREAK_END))
        minutes = max(_round_minutes(worked), 0)

        overtime = _positive_span(punches.get(PunchType.OVERTIME_START), punches.get(PunchType.OVERTIME_END))
        minutes += _round_minutes(overtime)
        return max(minutes, 0)
