"""Ledger protocol numbers.

A protocol is ``KL-`` followed by the first 12 hex digits (upper case) of
``sha256("<employee>.<unit>.<YYYY-MM>")``. It is printed on every issued
timesheet so a paper copy can be matched to the system of record. The value is
deterministic on purpose: anyone holding the three inputs can recompute it, so
it proves which employee/unit/month a document refers to, not that the
document's contents are untouched.

The format is public and must never change, or previously issued documents
stop verifying.
"""

from __future__ import annotations

import hashlib
import hmac
import re
from typing import Iterable, Optional

from ..common.datetime_utils import Period
from ..core.constants import PROTOCOL_HASH_LENGTH, PROTOCOL_PREFIX

_PROTOCOL_RE = re.compile(r"^KL-[0-9A-F]{%d}$" % PROTOCOL_HASH_LENGTH)


def protocol_payload(employee_id: str, unit_id: Optional[str], period: Period) -> str:
    return f"{employee_id}.{unit_id or ''}.{period.label}"


def stamp_protocol(employee_id: str, unit_id: Optional[str], period: Period) -> str:
    digest = hashlib.sha256(protocol_payload(employee_id, unit_id, period).encode("utf-8")).hexdigest()
    return f"{PROTOCOL_PREFIX}{digest[:PROTOCOL_HASH_LENGTH].upper()}"


def normalize_protocol(value: str) -> Optional[str]:
    """Upper-cased protocol, or ``None`` when ``value`` is not shaped like one."""
    candidate = (value or "").strip().upper()
    if not _PROTOCOL_RE.match(candidate):
        return None
    return candidate


def is_protocol(value: str) -> bool:
    return normalize_protocol(value) is not None


def verify_protocol(protocol: str, employee_id: str, unit_id: Optional[str], period: Period) -> bool:
    candidate = normalize_protocol(protocol)
    if candidate is None:
        return False
    return hmac.compare_digest(candidate, stamp_protocol(employee_id, unit_id, period))


def resolve_protocol(
    protocol: str,
    candidates: Iterable[tuple[str, Optional[str]]],
    periods: Iterable[Period],
) -> Optional[tuple[str, Optional[str], Period]]:
    """Find which (employee, unit, period) produced ``protocol``.

    There is no lookup table: stamps are recomputed for every candidate pair and
    period until one matches.
    """

    candidate = normalize_protocol(protocol)
    if candidate is None:
        return None

    pairs = list(dict.fromkeys(candidates))
    for period in periods:
        for employee_id, unit_id in pairs:
            if stamp_protocol(employee_id, unit_id, period) == candidate:
                return employee_id, unit_id, period
    return None
