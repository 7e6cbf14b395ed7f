from __future__ import annotations

import importlib

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import configure_logging, get_logger
from .container import build_mysql_container
from .ledger.controller import register as register_ledger


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["CIVIL_TIMEZONE"] = getattr(settings, "CIVIL_TIMEZONE")
    app.config["PROTOCOL_BASE_URL"] = getattr(settings, "PROTOCOL_BASE_URL")
    app.json.sort_keys = False

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), json_output=bool(getattr(settings, "LOG_JSON", False)))
    get_logger(__name__).info(
        "app starting",
        extra={
            "settings": settings_module,
            "db": f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
            "civil_timezone": app.config["CIVIL_TIMEZONE"],
        },
    )

    container = build_mysql_container(db_config=db_config, civil_timezone=app.config["CIVIL_TIMEZONE"])
    register_ledger(app, container)

    return app
