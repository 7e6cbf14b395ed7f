from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
        finally:
            cur.close()
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Placeholder list for ``IN (...)``; callers must not pass an empty sequence."""
    if not values:
        raise ValueError("in_clause requires at least one value")
    return ",".join(["%s"] * len(values)), tuple(values)


def utc_from_db(value: Any) -> datetime:
    """Attach UTC to naive DATETIME values (sessions run with time_zone=+00:00)."""

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
        return utc_from_db(parsed)

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")


def utc_to_db(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)
