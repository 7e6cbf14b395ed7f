from datetime import datetime, timezone

import pytest

from src.timesheet_ledger.timesheet_ledger.core.enums import PunchType
from src.timesheet_ledger.timesheet_ledger.core.exceptions import ValidationError
from src.timesheet_ledger.timesheet_ledger.punches.model import PunchEvent


def test_punch_type_is_coerced_from_stored_value():
    ev = PunchEvent(employee_id="E1", unit_id=None, punch_type="INTERVALO_FIM", timestamp=datetime(2025, 3, 10, tzinfo=timezone.utc))

    assert ev.punch_type is PunchType.BREAK_END
    assert ev.is_manual is False
    assert ev.is_edited is False


def test_naive_timestamp_is_rejected():
    with pytest.raises(ValidationError):
        PunchEvent(employee_id="E1", unit_id="U1", punch_type=PunchType.CLOCK_IN, timestamp=datetime(2025, 3, 10, 8, 0))


def test_unknown_punch_type_is_rejected():
    with pytest.raises(ValidationError):
        PunchEvent(employee_id="E1", unit_id="U1", punch_type="ALMOCO", timestamp=datetime(2025, 3, 10, tzinfo=timezone.utc))


def test_manual_and_edited_flags():
    ts = datetime(2025, 3, 10, 11, 0, tzinfo=timezone.utc)

    manual = PunchEvent(employee_id="E1", unit_id="U1", punch_type=PunchType.CLOCK_IN, timestamp=ts, created_by="sup-1")
    edited = PunchEvent(employee_id="E1", unit_id="U1", punch_type=PunchType.CLOCK_IN, timestamp=ts, edited_by="sup-1")

    assert manual.is_manual and not manual.is_edited
    assert edited.is_edited and not edited.is_manual
