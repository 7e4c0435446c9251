from __future__ import annotations

from enum import Enum


class PlanStatus(str, Enum):
    PLANNING = "PLANNING"
    COMMITTED = "COMMITTED"
    BRED = "BRED"
    BIRTHED = "BIRTHED"
    WEANED = "WEANED"
    PLACEMENT = "PLACEMENT"
    COMPLETE = "COMPLETE"
    CANCELED = "CANCELED"

    @property
    def rank(self) -> int:
        """Position along the forward lifecycle; CANCELED sits outside it."""
        if self is PlanStatus.CANCELED:
            return -1
        return _LIFECYCLE.index(self)

    def is_terminal(self) -> bool:
        return self is PlanStatus.CANCELED

    def at_least(self, other: PlanStatus) -> bool:
        return self.rank >= other.rank

    def can_move_to(self, target: PlanStatus) -> bool:
        if self is PlanStatus.CANCELED:
            return False
        if target is PlanStatus.CANCELED:
            return True
        return target.rank >= self.rank


_LIFECYCLE = [
    PlanStatus.PLANNING,
    PlanStatus.COMMITTED,
    PlanStatus.BRED,
    PlanStatus.BIRTHED,
    PlanStatus.WEANED,
    PlanStatus.PLACEMENT,
    PlanStatus.COMPLETE,
]
