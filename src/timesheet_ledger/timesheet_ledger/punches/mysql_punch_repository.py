from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, in_clause, utc_from_db, utc_to_db
from .model import PunchEvent
from .repository import PunchEventRepository

_SELECT_COLUMNS = """
    id, funcionario_id, unidade_id, tipo, `timestamp`, criado_por_id, editado_por_id, observacao
"""


def _to_event(r: Dict[str, Any]) -> PunchEvent:
    return PunchEvent(
        event_id=str(r["id"]),
        employee_id=str(r["funcionario_id"]),
        unit_id=str(r["unidade_id"]) if r.get("unidade_id") is not None else None,
        punch_type=r["tipo"],
        timestamp=utc_from_db(r["timestamp"]),
        created_by=str(r["criado_por_id"]) if r.get("criado_por_id") is not None else None,
        edited_by=str(r["editado_por_id"]) if r.get("editado_por_id") is not None else None,
        observation=r.get("observacao"),
    )


class MySQLPunchEventRepository(PunchEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_employee(
        self,
        *,
        employee_id: str,
        start: datetime,
        end: datetime,
        unit_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[PunchEvent]:
        sql = f"""
            SELECT {_SELECT_COLUMNS}
            FROM registros_ponto
            WHERE funcionario_id=%s AND `timestamp` >= %s AND `timestamp` < %s
        """
        params: tuple = (employee_id, utc_to_db(start), utc_to_db(end))
        if unit_ids is not None:
            if not unit_ids:
                return []
            placeholders, unit_params = in_clause(list(unit_ids))
            sql += f" AND unidade_id IN ({placeholders})"
            params += unit_params
        # Insertion order is the arrival order used to break timestamp ties.
        sql += " ORDER BY id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_event(r) for r in fetchall(cur)]

    def employees_with_events(
        self,
        *,
        employee_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> set[str]:
        if not employee_ids:
            return set()
        placeholders, id_params = in_clause(list(employee_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT funcionario_id
                FROM registros_ponto
                WHERE `timestamp` >= %s AND `timestamp` < %s AND funcionario_id IN ({placeholders})
                """,
                (utc_to_db(start), utc_to_db(end)) + id_params,
            )
            return {str(r["funcionario_id"]) for r in fetchall(cur)}

    def units_for_employees(
        self,
        *,
        employee_ids: Sequence[str],
        start: datetime,
        end: datetime,
    ) -> set[tuple[str, Optional[str]]]:
        if not employee_ids:
            return set()
        placeholders, id_params = in_clause(list(employee_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DISTINCT funcionario_id, unidade_id
                FROM registros_ponto
                WHERE `timestamp` >= %s AND `timestamp` < %s AND funcionario_id IN ({placeholders})
                """,
                (utc_to_db(start), utc_to_db(end)) + id_params,
            )
            return {
                (str(r["funcionario_id"]), str(r["unidade_id"]) if r.get("unidade_id") is not None else None)
                for r in fetchall(cur)
            }
