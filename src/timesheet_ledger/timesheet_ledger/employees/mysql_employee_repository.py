from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import EmployeeSnapshot, GroupRef, UnitRef
from .repository import EmployeeDirectory, ScopeProvider

_EMPLOYEE_SELECT = """
    SELECT f.id, f.nome, f.cpf, f.dia_folga,
           u.id AS unidade_id, u.nome AS unidade_nome,
           g.id AS grupo_id, g.nome AS grupo_nome
    FROM funcionarios f
    LEFT JOIN unidades u ON u.id = f.unidade_id
    LEFT JOIN grupos g ON g.id = f.grupo_id
"""


def _to_snapshot(row: Dict[str, Any]) -> EmployeeSnapshot:
    unit = None
    if row.get("unidade_id") is not None:
        unit = UnitRef(unit_id=str(row["unidade_id"]), name=row.get("unidade_nome") or "")
    group = None
    if row.get("grupo_id") is not None:
        group = GroupRef(group_id=str(row["grupo_id"]), name=row.get("grupo_nome") or "")
    day_off = row.get("dia_folga")
    return EmployeeSnapshot(
        employee_id=str(row["id"]),
        name=row["nome"],
        document_id=row.get("cpf"),
        unit=unit,
        group=group,
        day_off=int(day_off) if day_off is not None else None,
    )


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[EmployeeSnapshot]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_EMPLOYEE_SELECT + " WHERE f.id=%s", (employee_id,))
            row = fetchone(cur)
            if not row:
                return None
            return _to_snapshot(row)

    def list_by_group(
        self,
        group_id: str,
        *,
        unit_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[EmployeeSnapshot]:
        sql = _EMPLOYEE_SELECT + " WHERE f.grupo_id=%s"
        params: tuple = (group_id,)
        if unit_ids is not None:
            if not unit_ids:
                return []
            placeholders, unit_params = in_clause(list(unit_ids))
            sql += f" AND f.unidade_id IN ({placeholders})"
            params += unit_params
        sql += " ORDER BY f.nome ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_snapshot(r) for r in fetchall(cur)]


class MySQLScopeProvider(ScopeProvider):
    """Supervisors see the units of their scope rows; other roles are unrestricted."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def allowed_unit_ids(self, user_id: str) -> Optional[list[str]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role FROM usuarios WHERE id=%s", (user_id,))
            user = fetchone(cur)
            if not user:
                return []
            if user.get("role") != "SUPERVISOR":
                return None

            cur.execute(
                """
                SELECT DISTINCT unidade_id
                FROM supervisor_scopes
                WHERE supervisor_id=%s AND unidade_id IS NOT NULL
                """,
                (user_id,),
            )
            return sorted(str(r["unidade_id"]) for r in fetchall(cur))
