"""Presentation adapters for monthly ledgers.

The JSON keys are a public contract shared with the web and mobile clients
(``table``, ``protocolo``, ``funcionario``, ``totalHorasMes``,
``totalMinutosMes``); rename nothing here.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Iterable, Optional
from urllib.parse import urlencode

import pandas as pd
import qrcode

from ..employees.model import EmployeeSnapshot
from ..punches.model import PunchEvent
from .model import DailyLedgerRow, DayWarning, MonthlyLedger, TimeMark

GROUP_EXPORT_COLUMNS = [
    "funcionario_id",
    "funcionario",
    "cpf",
    "unidade",
    "grupo",
    "mes",
    "dia",
    "semana",
    "entrada",
    "intervalo_inicio",
    "intervalo_fim",
    "saida",
    "extra_inicio",
    "extra_fim",
    "total_horas",
    "total_minutos",
    "avisos",
    "protocolo",
]


def _mark(mark: Optional[TimeMark]) -> Optional[str]:
    return mark.label if mark else None


def _event_json(ev: PunchEvent) -> dict[str, Any]:
    return {
        "id": ev.event_id,
        "tipo": ev.punch_type.value,
        "timestamp": ev.timestamp.isoformat(),
        "unidadeId": ev.unit_id,
        "criadoPorId": ev.created_by,
        "editadoPorId": ev.edited_by,
        "observacao": ev.observation,
    }


def _warning_json(w: DayWarning) -> dict[str, Any]:
    return {
        "codigo": w.code.value,
        "mensagem": w.message,
        "timestamp": w.at.isoformat() if w.at else None,
        "tipo": w.punch_type.value if w.punch_type else None,
    }


def _manual_fields(row: DailyLedgerRow) -> list[str]:
    marks = {
        "normalInicio": row.normal_start,
        "normalIntervalo": row.break_start,
        "normalVoltaIntervalo": row.break_end,
        "normalTermino": row.normal_end,
        "extraInicio": row.overtime_start,
        "extraTermino": row.overtime_end,
    }
    return [key for key, mark in marks.items() if mark is not None and mark.is_manual]


def row_to_json(row: DailyLedgerRow) -> dict[str, Any]:
    return {
        "dia": row.day,
        "semana": row.weekday_label,
        "normalInicio": _mark(row.normal_start),
        "normalIntervalo": _mark(row.break_start),
        "normalVoltaIntervalo": _mark(row.break_end),
        "normalTermino": _mark(row.normal_end),
        "extraInicio": _mark(row.overtime_start),
        "extraTermino": _mark(row.overtime_end),
        "totalHoras": row.total_hours_label,
        "totalMinutos": row.total_minutes,
        "manuais": _manual_fields(row),
        "avisos": [_warning_json(w) for w in row.warnings],
        "obs": "; ".join(row.observations) or None,
        "pontos": [_event_json(ev) for ev in row.source_events],
    }


def employee_to_json(employee: EmployeeSnapshot) -> dict[str, Any]:
    return {
        "id": employee.employee_id,
        "nome": employee.name,
        "cpf": employee.document_id,
        "diaFolga": employee.day_off,
        "grupo": {"id": employee.group.group_id, "nome": employee.group.name} if employee.group else None,
        "unidade": {"id": employee.unit.unit_id, "nome": employee.unit.name} if employee.unit else None,
    }


def to_json_payload(ledger: MonthlyLedger) -> dict[str, Any]:
    return {
        "table": [row_to_json(r) for r in ledger.rows],
        "protocolo": ledger.protocol,
        "funcionario": employee_to_json(ledger.employee),
        "mes": ledger.period.label,
        "totalHorasMes": ledger.total_hours,
        "totalMinutosMes": ledger.total_minutes,
    }


def _flat_rows(ledgers: Iterable[MonthlyLedger]) -> Iterable[dict[str, Any]]:
    for ledger in ledgers:
        emp = ledger.employee
        for row in ledger.rows:
            yield {
                "funcionario_id": emp.employee_id,
                "funcionario": emp.name,
                "cpf": emp.document_id or "",
                "unidade": emp.unit.name if emp.unit else "",
                "grupo": emp.group.name if emp.group else "",
                "mes": ledger.period.label,
                "dia": row.day,
                "semana": row.weekday_label,
                "entrada": _mark(row.normal_start) or "",
                "intervalo_inicio": _mark(row.break_start) or "",
                "intervalo_fim": _mark(row.break_end) or "",
                "saida": _mark(row.normal_end) or "",
                "extra_inicio": _mark(row.overtime_start) or "",
                "extra_fim": _mark(row.overtime_end) or "",
                "total_horas": row.total_hours_label,
                "total_minutos": row.total_minutes,
                "avisos": " | ".join(w.message for w in row.warnings),
                "protocolo": ledger.protocol,
            }


def ledger_rows_dataframe(ledgers: Iterable[MonthlyLedger]) -> pd.DataFrame:
    return pd.DataFrame(list(_flat_rows(ledgers)), columns=GROUP_EXPORT_COLUMNS)


def write_group_csv(ledgers: Iterable[MonthlyLedger]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=GROUP_EXPORT_COLUMNS)
    writer.writeheader()
    for row in _flat_rows(ledgers):
        writer.writerow(row)
    # BOM so spreadsheet tools detect UTF-8 (accents in names and weekdays).
    return out.getvalue().encode("utf-8-sig")


def write_group_xlsx(ledgers: Iterable[MonthlyLedger]) -> bytes:
    ledgers = list(ledgers)
    df = ledger_rows_dataframe(ledgers)
    totals = pd.DataFrame(
        [
            {
                "funcionario_id": lg.employee.employee_id,
                "funcionario": lg.employee.name,
                "mes": lg.period.label,
                "total_horas": lg.total_label,
                "total_minutos": lg.total_minutes,
                "protocolo": lg.protocol,
            }
            for lg in ledgers
        ],
        columns=["funcionario_id", "funcionario", "mes", "total_horas", "total_minutos", "protocolo"],
    )

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Folhas", index=False)
        totals.to_excel(writer, sheet_name="Totais", index=False)
    return out.getvalue()


def protocol_verification_url(base_url: str, protocol: str) -> str:
    return f"{base_url.rstrip('/')}?{urlencode({'proto': protocol})}"


def protocol_qr_png(protocol: str, base_url: str) -> bytes:
    """PNG QR code pointing at the protocol verification page."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=8,
        border=2,
    )
    qr.add_data(protocol_verification_url(base_url, protocol))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
