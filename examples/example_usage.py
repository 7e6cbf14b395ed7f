"""Example: build a monthly ledger through the service layer (no Flask).

The HTTP controller is only a thin adapter; the same ledger can be produced and
exported from a script.
"""

import importlib
import sys

from config import get_settings_module

from src.timesheet_ledger.timesheet_ledger.common.datetime_utils import Period
from src.timesheet_ledger.timesheet_ledger.container import build_mysql_container
from src.timesheet_ledger.timesheet_ledger.ledger.presenters import to_json_payload


def main(employee_id: str, month: str):
    settings = importlib.import_module(get_settings_module())
    container = build_mysql_container(db_config=settings.DB_CONFIG, civil_timezone=settings.CIVIL_TIMEZONE)

    ledger = container.ledger_service.build_for_employee(employee_id, Period.parse(month))
    payload = to_json_payload(ledger)
    for row in payload["table"]:
        if row["totalMinutos"] or row["avisos"]:
            print(row["dia"], row["semana"], row["normalInicio"], row["normalTermino"], row["totalHoras"])
    print(ledger.protocol, ledger.total_label)


if __name__ == "__main__":
    main(sys.argv[1], sys.argv[2])
