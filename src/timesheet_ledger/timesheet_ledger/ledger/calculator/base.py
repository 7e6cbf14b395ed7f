from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping

from ...core.enums import PunchType
from ...punches.model import PunchEvent


class MinutesCalculator(ABC):
    """Calculator interface (Strategy Pattern for worked minutes)."""

    @abstractmethod
    def worked_minutes(self, punches: Mapping[PunchType, PunchEvent]) -> int:
        """Worked minutes for one day from its deduplicated punches (always >= 0)."""

        raise NotImplementedError
