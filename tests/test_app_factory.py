from __future__ import annotations

import json
import logging

from src.timesheet_ledger.timesheet_ledger.common.logging_config import JSONFormatter, get_logger
from src.timesheet_ledger.timesheet_ledger.main import create_app


def test_create_app_uses_testing_settings(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    app = create_app()

    assert app.config["CIVIL_TIMEZONE"] == "America/Sao_Paulo"
    assert app.config["PROTOCOL_BASE_URL"] == "http://testserver/ponto/protocolo"
    rules = {r.rule for r in app.url_map.iter_rules()}
    assert {
        "/api/ponto/folha",
        "/api/ponto/folhas-grupo/export",
        "/api/ponto/protocolo",
        "/api/ponto/protocolo/qr",
    } <= rules


def test_get_logger_namespaces_under_package():
    assert get_logger("ledger.service").name == "timesheet_ledger.ledger.service"
    assert get_logger("timesheet_ledger.x").name == "timesheet_ledger.x"


def test_json_formatter_merges_extra_fields():
    record = logging.LogRecord("timesheet_ledger.test", logging.INFO, __file__, 1, "ledger assembled", (), None)
    record.protocol = "KL-7ADA3AFBD84D"

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "ledger assembled"
    assert payload["level"] == "INFO"
    assert payload["protocol"] == "KL-7ADA3AFBD84D"
