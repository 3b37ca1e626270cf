from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, List, Optional

import pygame

from game_types import EnemyState
from models import EnemyConfig, Ladder, Platform

if TYPE_CHECKING:
    from level_loader import Level

logger = logging.getLogger(__name__)


def enemy_speed_for_level(cfg: EnemyConfig, level: int) -> float:
    """Patrol speed for enemies spawned during `level` (1-based)."""
    return cfg.base_speed + (max(1, level) - 1) * cfg.speed_per_level


class Enemy:
    """Patrolling hazard.

    States: PATROLLING/CHASING move along the platform, STUNNED counts down
    in place. Being carried is separate from the state: while carrier_id
    holds a falling panel's id the panel drives the position and the
    enemy does not update, so a running stun stays frozen until release. The panel
    owns that relationship; the enemy only records it.
    """

    def __init__(
        self,
        enemy_id: int,
        platform: Platform,
        cfg: EnemyConfig,
        level: int,
        rng: random.Random,
    ) -> None:
        self.id = enemy_id
        self.cfg = cfg
        self.platform_index = platform.index
        self.size = pygame.Vector2(cfg.width, cfg.height)
        self.pos = pygame.Vector2(
            platform.x + rng.random() * (platform.width - cfg.width),
            platform.y - cfg.height,
        )
        self.speed = enemy_speed_for_level(cfg, level)
        self.direction = 1 if rng.random() > 0.5 else -1
        self.state = EnemyState.PATROLLING
        self.chase_timer = 0
        self.stun_timer = 0
        self.carrier_id: Optional[int] = None

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    @property
    def center(self) -> pygame.Vector2:
        return self.pos + self.size / 2

    @property
    def stunned(self) -> bool:
        return self.state is EnemyState.STUNNED

    @property
    def carried(self) -> bool:
        return self.carrier_id is not None

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.pos.x), int(self.pos.y), int(self.size.x), int(self.size.y))

    # ---------
    # Carry relationship
    # ---------

    def attach_to(self, panel_id: int) -> None:
        self.carrier_id = panel_id

    def detach(self) -> None:
        self.carrier_id = None

    # ---------
    # Stun
    # ---------

    def stun(self) -> None:
        self.state = EnemyState.STUNNED
        self.stun_timer = self.cfg.stun_ticks
        logger.debug("enemy %d stunned for %d ticks", self.id, self.stun_timer)

    # ---------
    # Update
    # ---------

    def update(
        self,
        level: "Level",
        player_x: float,
        player_platform: int,
        rng: random.Random,
    ) -> None:
        """Advance one tick of patrol, chase bias, ladder use or stun countdown."""
        if self.carried:
            return

        if self.stunned:
            self.stun_timer -= 1
            if self.stun_timer <= 0:
                self.stun_timer = 0
                self.state = EnemyState.PATROLLING
            return

        self._refresh_chase_bias(player_x, player_platform, rng)
        self._patrol(level.platform_at(self.platform_index))

        if rng.random() < self.cfg.ladder_probability:
            self.try_use_ladder(level.ladders, rng)

        self.pos.y = level.platform_at(self.platform_index).y - self.height

    def _refresh_chase_bias(
        self, player_x: float, player_platform: int, rng: random.Random
    ) -> None:
        self.chase_timer += 1
        if self.chase_timer <= self.cfg.chase_interval:
            return
        self.chase_timer = 0
        # one draw per interval, whatever the platform
        roll = rng.random()
        if roll < self.cfg.chase_probability and self.platform_index == player_platform:
            self.direction = 1 if player_x > self.pos.x else -1
            self.state = EnemyState.CHASING
        else:
            self.state = EnemyState.PATROLLING

    def _patrol(self, platform: Platform) -> None:
        self.pos.x += self.speed * self.direction
        if self.pos.x < platform.x:
            self.pos.x = platform.x
            self.direction = 1
        if self.pos.x + self.width > platform.right:
            self.pos.x = platform.right - self.width
            self.direction = -1

    def try_use_ladder(self, ladders: List[Ladder], rng: random.Random) -> bool:
        """Hop to the other end of a ladder under the enemy, if the dice allow.

        Going down is a coin flip weighted by descend_probability; going up is
        taken whenever the enemy is at a ladder's lower end.
        """
        cx = self.pos.x + self.width / 2
        for ladder in ladders:
            if abs(cx - ladder.center_x) >= self.cfg.ladder_proximity:
                continue
            if ladder.from_platform == self.platform_index and rng.random() < self.cfg.descend_probability:
                self.platform_index = ladder.to_platform
                logger.debug("enemy %d climbs down to %d", self.id, self.platform_index)
                return True
            if ladder.to_platform == self.platform_index:
                self.platform_index = ladder.from_platform
                logger.debug("enemy %d climbs up to %d", self.id, self.platform_index)
                return True
        return False
