from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import Period, now_utc
from ..common.logging_config import get_logger
from ..common.validators import optional_str, parse_bool_flag, require_non_empty
from ..core.enums import ExportFormat
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container
from .presenters import protocol_qr_png, to_json_payload, write_group_csv, write_group_xlsx
from .protocol import normalize_protocol, verify_protocol

logger = get_logger(__name__)

_XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def caller_required(view):
        """Resolve the caller's unit scope; identity comes from the auth gateway."""

        @wraps(view)
        def wrapper(*args, **kwargs):
            user_id = optional_str(request.headers.get("X-User-Id"))
            if not user_id:
                return jsonify({"error": "Não autorizado"}), 401

            allowed = container.scope_provider.allowed_unit_ids(user_id)
            if allowed is not None and not allowed:
                return jsonify({"error": "Sem permissão"}), 403

            g.user_id = user_id
            g.allowed_unit_ids = allowed
            return view(*args, **kwargs)

        return wrapper

    def _scoped_units(unit_id: Optional[str]) -> Optional[list[str]]:
        allowed = g.allowed_unit_ids
        if unit_id:
            if allowed is not None and unit_id not in allowed:
                raise AuthorizationError("Sem permissão para esta unidade")
            return [unit_id]
        return allowed

    @app.errorhandler(ValidationError)
    def _validation_error(e: ValidationError):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(AuthorizationError)
    def _authorization_error(e: AuthorizationError):
        return jsonify({"error": str(e)}), 403

    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.route("/api/ponto/folha", methods=["GET"], endpoint="ponto_folha")
    @caller_required
    def ponto_folha():
        employee_id = require_non_empty(request.args.get("funcionarioId"), "funcionarioId")
        period = Period.parse(request.args.get("month", ""))
        unit_id = optional_str(request.args.get("unidadeId"))

        ledger = container.ledger_service.build_for_employee(
            employee_id,
            period,
            unit_id=unit_id,
            allowed_unit_ids=g.allowed_unit_ids,
        )
        return jsonify(to_json_payload(ledger))

    @app.route("/api/ponto/folhas-grupo/export", methods=["GET"], endpoint="ponto_folhas_grupo_export")
    @caller_required
    def ponto_folhas_grupo_export():
        group_id = require_non_empty(request.args.get("grupoId"), "grupoId")
        period = Period.parse(request.args.get("month", ""))
        try:
            fmt = ExportFormat((request.args.get("formato") or ExportFormat.CSV.value).lower())
        except ValueError:
            raise ValidationError("formato inválido (csv ou xlsx)")

        ledgers = container.ledger_service.build_for_group(
            group_id,
            period,
            unit_ids=_scoped_units(optional_str(request.args.get("unidadeId"))),
            only_with_events=parse_bool_flag(request.args.get("apenasComRegistros")),
        )
        logger.info(
            "group export",
            extra={"group_id": group_id, "period": period.label, "ledgers": len(ledgers), "format": fmt.value},
        )

        filename = f"folhas_{group_id}_{period.label}.{fmt.value}"
        if fmt is ExportFormat.XLSX:
            body, mimetype = write_group_xlsx(ledgers), _XLSX_MIMETYPE
        else:
            body, mimetype = write_group_csv(ledgers), "text/csv"
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/ponto/protocolo", methods=["GET"], endpoint="ponto_protocolo")
    def ponto_protocolo():
        """Public check of a printed protocol.

        With ``funcionarioId`` + ``month`` the stamp is recomputed and compared;
        with ``grupoId`` the protocol is searched among the group's recent months.
        """

        proto = normalize_protocol(request.args.get("proto", ""))
        if proto is None:
            raise ValidationError("Protocolo inválido: formato incorreto")

        employee_id = optional_str(request.args.get("funcionarioId"))
        if employee_id:
            period = Period.parse(request.args.get("month", ""))
            unit_id = optional_str(request.args.get("unidadeId"))
            return jsonify({"protocolo": proto, "valido": verify_protocol(proto, employee_id, unit_id, period)})

        group_id = require_non_empty(request.args.get("grupoId"), "funcionarioId ou grupoId")
        now = now_utc().astimezone(container.ledger_service.tz)
        found = container.ledger_service.resolve_protocol_in_group(
            proto, group_id, anchor=Period(now.year, now.month)
        )
        if not found:
            return jsonify({"protocolo": proto, "valido": False})
        employee, unit_id, period = found
        return jsonify(
            {
                "protocolo": proto,
                "valido": True,
                "funcionarioId": employee.employee_id,
                "unidadeId": unit_id,
                "mes": period.label,
            }
        )

    @app.route("/api/ponto/protocolo/qr", methods=["GET"], endpoint="ponto_protocolo_qr")
    def ponto_protocolo_qr():
        proto = normalize_protocol(request.args.get("proto", ""))
        if proto is None:
            raise ValidationError("Protocolo inválido: formato incorreto")
        png = protocol_qr_png(proto, app.config["PROTOCOL_BASE_URL"])
        return app.response_class(png, mimetype="image/png")
