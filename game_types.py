from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

Color = Tuple[int, int, int]


class TraversalMode(Enum):
    GROUNDED = "grounded"
    CLIMBING = "climbing"


class FallState(Enum):
    IDLE = "idle"
    FALLING = "falling"
    LANDED = "landed"
    DELIVERED = "delivered"
    MISSED = "missed"


class EnemyState(Enum):
    PATROLLING = "patrolling"
    CHASING = "chasing"
    STUNNED = "stunned"


@dataclass(frozen=True)
class InputState:
    """Held direction signals plus the spray action, sampled once per tick."""

    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    spray: bool = False

    @property
    def horizontal(self) -> bool:
        return self.left or self.right

    @property
    def vertical(self) -> bool:
        return self.up or self.down


NO_INPUT = InputState()
