from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Optional, Tuple

from events import LevelCompleted
from models import SpawnConfig

if TYPE_CHECKING:
    from session import GameSession

logger = logging.getLogger(__name__)

REBUILD_EVENT = "rebuild_level"


def enemy_cap_for_level(cfg: SpawnConfig, level: int) -> int:
    return min(cfg.base_cap + level // 2, cfg.max_cap)


def spawn_delay_for_level(cfg: SpawnConfig, level: int) -> int:
    return max(cfg.base_delay - (level - 1) * cfg.delay_step, cfg.min_delay)


def spawn_band_for_level(cfg: SpawnConfig, level: int, bottom_index: int) -> Tuple[int, int]:
    """Inclusive platform index band enemies appear on; deeper as levels rise."""
    lo = min(level, cfg.band_floor, bottom_index)
    hi = min(level + 2, cfg.band_ceiling, bottom_index)
    return lo, max(lo, hi)


class EnemySpawner:
    """Tick counter that releases enemies at a level-scaled cadence."""

    def __init__(self, cfg: SpawnConfig) -> None:
        self.cfg = cfg
        self.timer = 0

    def update(self, level: int, live_count: int, bottom_index: int, rng: random.Random) -> Optional[int]:
        """Advance the timer. Returns the platform index to spawn on, or None."""
        self.timer += 1
        if self.timer <= spawn_delay_for_level(self.cfg, level):
            return None
        if live_count >= enemy_cap_for_level(self.cfg, level):
            return None
        self.timer = 0
        lo, hi = spawn_band_for_level(self.cfg, level, bottom_index)
        return rng.randint(lo, hi)


def check_level_complete(session: "GameSession") -> bool:
    """Award the level bonus and queue the rebuild once every plate is full."""
    if not session.plates or not all(p.complete for p in session.plates):
        return False
    if session.scheduler.pending(REBUILD_EVENT) is not None:
        return False

    bonus = session.cfg.scoring.level_complete * session.level_number
    session.award(bonus)
    session.events.emit(LevelCompleted(level=session.level_number, bonus=bonus))
    logger.info("level %d complete, bonus %d", session.level_number, bonus)
    session.level_number += 1
    session.scheduler.schedule(
        REBUILD_EVENT,
        session.tick_count + session.cfg.rebuild_delay_ticks,
        session.rebuild_level,
    )
    return True
