from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Punch kinds as stored by the time-clock (values are the stored codes)."""

    CLOCK_IN = "ENTRADA"
    BREAK_START = "INTERVALO_INICIO"
    BREAK_END = "INTERVALO_FIM"
    CLOCK_OUT = "SAIDA"
    OVERTIME_START = "HORA_EXTRA_INICIO"
    OVERTIME_END = "HORA_EXTRA_FIM"


class WarningCode(str, Enum):
    """Day-level anomalies surfaced on the ledger for supervisor review."""

    MISSING_BREAK_START = "MISSING_BREAK_START"
    OUT_OF_ORDER = "OUT_OF_ORDER"
    INVERTED_BREAK = "INVERTED_BREAK"
    INVERTED_OVERTIME = "INVERTED_OVERTIME"
    DUPLICATE_PUNCH = "DUPLICATE_PUNCH"
    RECONCILIATION_FAILED = "RECONCILIATION_FAILED"


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
