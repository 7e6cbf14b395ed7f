from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import EmployeeSnapshot


class EmployeeDirectory(Protocol):
    """Lookup interface of the external employee directory."""

    def get_by_id(self, employee_id: str) -> Optional[EmployeeSnapshot]:
        raise NotImplementedError

    def list_by_group(
        self,
        group_id: str,
        *,
        unit_ids: Optional[Sequence[str]] = None,
    ) -> Sequence[EmployeeSnapshot]:
        raise NotImplementedError


class ScopeProvider(Protocol):
    """Supervisor scope service.

    Returns the unit ids a caller may see, or ``None`` for unrestricted callers.
    """

    def allowed_unit_ids(self, user_id: str) -> Optional[list[str]]:
        raise NotImplementedError
