from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .common.datetime_utils import civil_zone
from .core.constants import DEFAULT_CIVIL_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory, MySQLScopeProvider
from .employees.repository import EmployeeDirectory, ScopeProvider
from .ledger.service import LedgerService
from .punches.mysql_punch_repository import MySQLPunchEventRepository
from .punches.repository import PunchEventRepository


@dataclass(frozen=True)
class Container:
    punches_repo: PunchEventRepository
    employees_repo: EmployeeDirectory
    scope_provider: ScopeProvider

    ledger_service: LedgerService


def build_container(
    *,
    punches_repo: PunchEventRepository,
    employees_repo: EmployeeDirectory,
    scope_provider: ScopeProvider,
    civil_timezone: str = DEFAULT_CIVIL_TIMEZONE,
) -> Container:
    ledger_service = LedgerService(
        civil_zone(civil_timezone),
        punches=punches_repo,
        employees=employees_repo,
    )
    return Container(
        punches_repo=punches_repo,
        employees_repo=employees_repo,
        scope_provider=scope_provider,
        ledger_service=ledger_service,
    )


def build_mysql_container(*, db_config: Mapping[str, Any], civil_timezone: str = DEFAULT_CIVIL_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_container(
        punches_repo=MySQLPunchEventRepository(conn),
        employees_repo=MySQLEmployeeDirectory(conn),
        scope_provider=MySQLScopeProvider(conn),
        civil_timezone=civil_timezone,
    )
