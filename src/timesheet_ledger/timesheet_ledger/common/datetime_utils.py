from __future__ import annotations

import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import (
    DEFAULT_CIVIL_TIMEZONE,
    MAX_PERIOD_YEAR,
    MIN_PERIOD_YEAR,
    PERIOD_FORMAT,
    TIME_FORMAT,
    WEEKDAY_LABELS,
)
from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class Period:
    """A civil calendar month (year, month)."""

    year: int
    month: int

    def __post_init__(self):
        if not 1 <= int(self.month) <= 12:
            raise ValidationError("Mês inválido (YYYY-MM)")
        # civil_bounds needs the following month to be representable.
        if not MIN_PERIOD_YEAR <= int(self.year) <= MAX_PERIOD_YEAR:
            raise ValidationError(f"Ano fora do intervalo ({MIN_PERIOD_YEAR}-{MAX_PERIOD_YEAR})")

    @classmethod
    def parse(cls, value: str) -> "Period":
        m = _PERIOD_RE.match((value or "").strip())
        if not m:
            raise ValidationError("month inválido (YYYY-MM)")
        return cls(year=int(m.group(1)), month=int(m.group(2)))

    @property
    def label(self) -> str:
        return PERIOD_FORMAT.format(year=self.year, month=self.month)

    @property
    def days_in_month(self) -> int:
        return monthrange(self.year, self.month)[1]

    def previous(self) -> "Period":
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    def next(self) -> "Period":
        if self.month == 12:
            return Period(self.year + 1, 1)
        return Period(self.year, self.month + 1)

    def civil_bounds(self, tz: ZoneInfo) -> tuple[datetime, datetime]:
        """Half-open UTC range covering the month in the civil timezone."""
        nxt = self.next()
        start = datetime(self.year, self.month, 1, tzinfo=tz)
        end = datetime(nxt.year, nxt.month, 1, tzinfo=tz)
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)

    def __str__(self) -> str:
        return self.label


def recent_periods(anchor: Period, count: int) -> Iterator[Period]:
    """Yield ``count`` periods walking backwards from ``anchor`` (inclusive).

    Stops early at the first supported month.
    """
    current = anchor
    for _ in range(max(int(count), 0)):
        yield current
        if (current.year, current.month) == (MIN_PERIOD_YEAR, 1):
            return
        current = current.previous()


@lru_cache(maxsize=None)
def civil_zone(name: str = DEFAULT_CIVIL_TIMEZONE) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Fuso horário inválido: {name}") from exc


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValidationError("timestamp sem fuso horário")
    return value


def to_civil(value: datetime, tz: ZoneInfo) -> datetime:
    return ensure_aware(value).astimezone(tz)


def format_civil_time(value: datetime, tz: ZoneInfo) -> str:
    return to_civil(value, tz).strftime(TIME_FORMAT)


def weekday_label(day: date) -> str:
    """Short pt-BR weekday label; ``date.weekday()`` is Monday-based."""
    return WEEKDAY_LABELS[(day.weekday() + 1) % 7]


def format_minutes(minutes: int) -> str:
    """Render minutes as ``H:MM`` (hours are not zero-padded)."""
    minutes = max(int(minutes), 0)
    return f"{minutes // 60}:{minutes % 60:02d}"


def duration_ms(start: datetime, end: datetime) -> int:
    delta: timedelta = ensure_aware(end) - ensure_aware(start)
    return delta // timedelta(milliseconds=1)


def now_utc() -> datetime:
    """Current UTC time; patched in tests that depend on "now"."""
    return datetime.now(timezone.utc)
