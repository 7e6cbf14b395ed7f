from __future__ import annotations

import csv
import io
from datetime import datetime
from zoneinfo import ZoneInfo

from src.timesheet_ledger.timesheet_ledger.common.datetime_utils import Period
from src.timesheet_ledger.timesheet_ledger.core.enums import PunchType
from src.timesheet_ledger.timesheet_ledger.employees.model import EmployeeSnapshot, GroupRef, UnitRef
from src.timesheet_ledger.timesheet_ledger.ledger.presenters import (
    GROUP_EXPORT_COLUMNS,
    ledger_rows_dataframe,
    protocol_qr_png,
    protocol_verification_url,
    to_json_payload,
    write_group_csv,
    write_group_xlsx,
)
from src.timesheet_ledger.timesheet_ledger.ledger.service import LedgerService
from src.timesheet_ledger.timesheet_ledger.punches.model import PunchEvent

SP = ZoneInfo("America/Sao_Paulo")

EMPLOYEE = EmployeeSnapshot(
    employee_id="E1",
    name="José da Silva",
    document_id="123.456.789-00",
    unit=UnitRef(unit_id="U1", name="Matriz"),
    group=GroupRef(group_id="G1", name="Limpeza"),
)


def _ledger():
    def ev(punch_type, h, **kwargs):
        return PunchEvent(
            employee_id="E1",
            unit_id="U1",
            punch_type=punch_type,
            timestamp=datetime(2025, 3, 10, h, 0, tzinfo=SP),
            **kwargs,
        )

    events = [
        ev(PunchType.CLOCK_IN, 8, created_by="sup-1", observation="Ajuste manual"),
        ev(PunchType.BREAK_END, 13),
        ev(PunchType.CLOCK_OUT, 17),
    ]
    return LedgerService(SP).assemble(EMPLOYEE, Period(2025, 3), events)


def test_json_payload_contract():
    payload = to_json_payload(_ledger())

    assert list(payload) == ["table", "protocolo", "funcionario", "mes", "totalHorasMes", "totalMinutosMes"]
    assert payload["protocolo"] == "KL-7ADA3AFBD84D"
    assert payload["totalMinutosMes"] == 540
    assert payload["totalHorasMes"] == 9
    assert payload["funcionario"]["nome"] == "José da Silva"
    assert payload["funcionario"]["unidade"] == {"id": "U1", "nome": "Matriz"}
    assert len(payload["table"]) == 31

    row = payload["table"][9]
    assert row["dia"] == 10
    assert row["semana"] == "Seg"
    assert row["normalInicio"] == "08:00"
    assert row["normalIntervalo"] is None
    assert row["normalVoltaIntervalo"] == "13:00"
    assert row["normalTermino"] == "17:00"
    assert row["extraInicio"] is None
    assert row["totalHoras"] == "9:00"
    assert row["totalMinutos"] == 540
    assert row["manuais"] == ["normalInicio"]
    assert row["obs"] == "Ajuste manual"
    assert row["avisos"][0]["codigo"] == "MISSING_BREAK_START"
    assert row["avisos"][0]["mensagem"] == "Insira o horário de início do intervalo"
    assert [p["tipo"] for p in row["pontos"]] == ["ENTRADA", "INTERVALO_FIM", "SAIDA"]

    empty = payload["table"][0]
    assert empty["totalHoras"] == "0:00"
    assert empty["pontos"] == []
    assert empty["avisos"] == []


def test_group_csv_has_bom_and_header():
    body = write_group_csv([_ledger()])

    assert body.startswith(b"\xef\xbb\xbf")
    rows = list(csv.DictReader(io.StringIO(body.decode("utf-8-sig"))))
    assert list(rows[0]) == GROUP_EXPORT_COLUMNS
    assert len(rows) == 31
    assert rows[9]["entrada"] == "08:00"
    assert rows[9]["total_minutos"] == "540"
    assert rows[9]["protocolo"] == "KL-7ADA3AFBD84D"
    assert rows[0]["semana"] == "Sáb"


def test_group_dataframe_and_xlsx():
    ledgers = [_ledger(), _ledger()]

    df = ledger_rows_dataframe(ledgers)
    xlsx = write_group_xlsx(ledgers)

    assert list(df.columns) == GROUP_EXPORT_COLUMNS
    assert len(df) == 62
    assert int(df["total_minutos"].sum()) == 1080
    assert xlsx[:2] == b"PK"


def test_protocol_qr():
    url = protocol_verification_url("https://ponto.example.com/protocolo/", "KL-7ADA3AFBD84D")
    png = protocol_qr_png("KL-7ADA3AFBD84D", "https://ponto.example.com/protocolo")

    assert url == "https://ponto.example.com/protocolo?proto=KL-7ADA3AFBD84D"
    assert png[:8] == b"\x89PNG\r\n\x1a\n"
