from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

import pygame

from game_types import InputState, TraversalMode
from models import Ladder, PlayerConfig

if TYPE_CHECKING:
    from enemy import Enemy
    from level_loader import Level

logger = logging.getLogger(__name__)


class Player:
    """Walk/climb controller with lives, invincibility and a limited spray."""

    def __init__(self, cfg: PlayerConfig, level: "Level") -> None:
        self.cfg = cfg
        self.size = pygame.Vector2(cfg.width, cfg.height)
        self.pos = pygame.Vector2(0, 0)
        self.platform_index = level.bottom_index
        self.mode = TraversalMode.GROUNDED
        self.ladder: Optional[Ladder] = None
        self.facing = 1
        self.invincible = False
        self.invincible_timer = 0
        self.lives = cfg.lives
        self.spray_count = cfg.spray_count
        self.spray_cooldown = 0
        self._rect = pygame.Rect(0, 0, int(self.size.x), int(self.size.y))
        self.place_at_start(level)

    @property
    def rect(self) -> pygame.Rect:
        """Current player AABB in world coordinates."""
        self._rect.x = int(self.pos.x)
        self._rect.y = int(self.pos.y)
        return self._rect

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
    def climbing(self) -> bool:
        return self.mode is TraversalMode.CLIMBING

    @property
    def standing_platform(self) -> Optional[int]:
        """Platform under the player's feet, or None while on a ladder."""
        return None if self.climbing else self.platform_index

    # ---------
    # Lifecycle
    # ---------

    def place_at_start(self, level: "Level") -> None:
        self.platform_index = level.bottom_index
        self.pos.update(self.cfg.start_x, level.platform_at(self.platform_index).y - self.height)
        self._release_ladder()
        self.facing = 1

    def lose_life(self) -> int:
        self.lives = max(0, self.lives - 1)
        return self.lives

    def respawn(self, level: "Level") -> None:
        """Return to the start spot with a window of invincibility."""
        self.place_at_start(level)
        self.invincible = True
        self.invincible_timer = self.cfg.invincible_ticks
        logger.debug("respawned with %d ticks of invincibility", self.invincible_timer)

    def tick_timers(self) -> None:
        if self.invincible:
            self.invincible_timer -= 1
            if self.invincible_timer <= 0:
                self.invincible_timer = 0
                self.invincible = False
        if self.spray_cooldown > 0:
            self.spray_cooldown -= 1

    # ---------
    # Spray
    # ---------

    def can_spray(self) -> bool:
        return self.spray_count > 0 and self.spray_cooldown == 0

    def consume_spray(self) -> None:
        self.spray_count -= 1
        self.spray_cooldown = self.cfg.spray_cooldown

    def spray_origin(self) -> pygame.Vector2:
        x = self.pos.x + (self.width if self.facing > 0 else 0)
        return pygame.Vector2(x, self.pos.y + self.height / 2)

    def in_spray_window(self, enemy: "Enemy") -> bool:
        """Enemy is ahead of the player within range and inside the vertical band."""
        dx = enemy.center.x - self.center.x
        dy = abs(enemy.pos.y - self.pos.y)
        if self.facing > 0:
            ahead = 0 < dx < self.cfg.spray_range
        else:
            ahead = -self.cfg.spray_range < dx < 0
        return ahead and dy < self.cfg.spray_band

    # ---------
    # Motion
    # ---------

    def move(self, level: "Level", inputs: InputState) -> bool:
        """Advance one tick of walking/climbing.

        Returns:
            True if the player moved (walked or climbed) this tick.
        """
        moving = False

        ladder = self.select_ladder(level, inputs)
        if ladder is not None:
            moving = self._climb(level, ladder, inputs)

        if inputs.horizontal:
            if self.climbing:
                self._leave_ladder(level)
            platform = level.platform_at(self.platform_index)
            if inputs.left:
                self.pos.x -= self.cfg.speed
                self.facing = -1
                moving = True
            if inputs.right:
                self.pos.x += self.cfg.speed
                self.facing = 1
                moving = True
            self.pos.x = platform.clamp_x(self.pos.x, self.width)
        elif not self.climbing:
            self.pos.y = level.platform_at(self.platform_index).y - self.height

        return moving

    def select_ladder(self, level: "Level", inputs: InputState) -> Optional[Ladder]:
        """Pick the ladder this tick's input applies to.

        A locked ladder always wins. Otherwise the nearest candidate whose
        endpoint matches the held direction is chosen; with no vertical input
        the nearest ladder touching the current platform is the default.
        """
        if self.climbing:
            return self.ladder

        cx = self.pos.x + self.width / 2
        for ladder in level.ladder_candidates_near(cx, self.cfg.ladder_proximity):
            can_go_down = self.platform_index == ladder.from_platform
            can_go_up = self.platform_index == ladder.to_platform
            if inputs.down and can_go_down:
                return ladder
            if inputs.up and can_go_up:
                return ladder
            if not inputs.vertical and (can_go_down or can_go_up):
                return ladder
        return None

    def _climb(self, level: "Level", ladder: Ladder, inputs: InputState) -> bool:
        on_top = self.platform_index == ladder.from_platform
        on_bottom = self.platform_index == ladder.to_platform

        if inputs.up and (on_bottom or (self.climbing and self.pos.y > ladder.y)):
            self._lock_ladder(ladder)
            self._ease_to_ladder(ladder)
            self.pos.y -= self.cfg.climb_speed
            if self.pos.y <= ladder.y:
                self._arrive(level, ladder.from_platform)
            return True

        if inputs.down and (on_top or (self.climbing and self.pos.y < ladder.bottom)):
            self._lock_ladder(ladder)
            self._ease_to_ladder(ladder)
            self.pos.y += self.cfg.climb_speed
            if self.pos.y + self.height >= ladder.bottom:
                self._arrive(level, ladder.to_platform)
            return True

        return False

    def _ease_to_ladder(self, ladder: Ladder) -> None:
        target_x = ladder.center_x - self.width / 2
        self.pos.x += (target_x - self.pos.x) * self.cfg.climb_easing

    def _lock_ladder(self, ladder: Ladder) -> None:
        if self.ladder is not ladder:
            logger.debug("lock ladder %d->%d at x=%.1f", ladder.from_platform, ladder.to_platform, ladder.x)
        self.mode = TraversalMode.CLIMBING
        self.ladder = ladder

    def _release_ladder(self) -> None:
        self.mode = TraversalMode.GROUNDED
        self.ladder = None

    def _arrive(self, level: "Level", platform_index: int) -> None:
        self.platform_index = platform_index
        self.pos.y = level.platform_at(platform_index).y - self.height
        self._release_ladder()
        logger.debug("reached platform %d", platform_index)

    def _leave_ladder(self, level: "Level") -> None:
        """Drop off a ladder mid-climb onto the vertically closest surface."""
        platform = level.nearest_platform(self.pos.y + self.height)
        self.platform_index = platform.index
        self.pos.y = platform.y - self.height
        self._release_ladder()
        logger.debug("left ladder onto platform %d", platform.index)
