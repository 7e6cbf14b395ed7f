from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ensure_aware
from ..core.enums import PunchType
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class PunchEvent:
    """Domain entity: one clock action (captured on device or entered manually).

    ``timestamp`` must be timezone-aware. ``created_by`` marks an event inserted
    by an administrator; ``edited_by`` marks a captured event corrected later.
    """

    employee_id: str
    unit_id: Optional[str]
    punch_type: PunchType
    timestamp: datetime
    event_id: Optional[str] = None
    created_by: Optional[str] = None
    edited_by: Optional[str] = None
    observation: Optional[str] = None

    def __post_init__(self):
        ensure_aware(self.timestamp)
        if not isinstance(self.punch_type, PunchType):
            try:
                punch_type = PunchType(self.punch_type)
            except ValueError as exc:
                raise ValidationError(f"tipo de ponto desconhecido: {self.punch_type!r}") from exc
            object.__setattr__(self, "punch_type", punch_type)

    @property
    def is_manual(self) -> bool:
        return self.created_by is not None

    @property
    def is_edited(self) -> bool:
        return self.edited_by is not None
