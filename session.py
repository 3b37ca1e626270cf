from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional

from collision import resolve_player_hazards
from enemy import Enemy
from events import (
    Event,
    EventLog,
    GameOver,
    HarmonyBurst,
    HarmonyCue,
    LevelRebuilt,
    PlateCompleted,
    PlayerDied,
    SprayCone,
)
from game_types import NO_INPUT, InputState
from level_loader import Level, build_level, build_note_panels, build_plates, id_counter
from models import EngineConfig, Plate
from panels import NotePanel, update_falling_panels, walk_panels
from player import Player
from progression import (
    REBUILD_EVENT,
    EnemySpawner,
    check_level_complete,
    enemy_cap_for_level,
    spawn_band_for_level,
)
from scale import HARMONY_COLOR, SPRAY_COLOR
from scheduler import TickScheduler

logger = logging.getLogger(__name__)

HARMONY_POINTS = 30
HARMONY_RADIUS = 20.0
HARMONY_LIFT = 40.0


@dataclass(frozen=True)
class HudState:
    score: int
    lives: int
    level: int
    spray_count: int
    plates_filled: int
    game_over: bool


class GameSession:
    """Owns every piece of mutable simulation state and runs the tick loop.

    Tick order: player motion, enemy motion, hazard collision, falling
    panels, then progression (spawning). Deferred work queued on the
    scheduler runs before the next tick starts, never inside one.
    """

    def __init__(self, cfg: EngineConfig, rng: Optional[random.Random] = None) -> None:
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.events = EventLog()
        self.scheduler = TickScheduler()
        self.spawner = EnemySpawner(cfg.spawn)
        self.score = 0
        self.level_number = 1
        self.tick_count = 0
        self.game_over = False
        self._panel_ids = id_counter()
        self._enemy_ids = id_counter()

        self.level: Level = build_level(cfg.layout)
        self.plates: List[Plate] = []
        self.panels: List[NotePanel] = []
        self.enemies: List[Enemy] = []
        self.player = Player(cfg.player, self.level)
        self._populate()

    # ----------------------------
    # Level construction
    # ----------------------------

    def _populate(self) -> None:
        """Create plates, panels and the opening enemies for the current graph."""
        self.plates = build_plates(self.cfg.layout, self.cfg.panel.plate_capacity)
        self.panels = build_note_panels(
            self.level.platforms,
            self.plates,
            self.cfg.layout,
            self.cfg.panel,
            self.rng,
            self._panel_ids,
        )
        self.enemies = []
        lo, hi = spawn_band_for_level(self.cfg.spawn, self.level_number, self.level.bottom_index)
        band = hi - lo + 1
        for i in range(enemy_cap_for_level(self.cfg.spawn, self.level_number)):
            self.spawn_enemy(lo + i % band)
        logger.info(
            "level %d built: %d panels, %d plates, %d enemies",
            self.level_number,
            len(self.panels),
            len(self.plates),
            len(self.enemies),
        )

    def rebuild_level(self) -> None:
        """Replace the graph and every mutable entity; the player keeps lives and spray."""
        for enemy in self.enemies:
            enemy.detach()
        self.level = build_level(self.cfg.layout)
        self._populate()
        self.player.place_at_start(self.level)
        self.player.invincible = False
        self.player.invincible_timer = 0
        self.events.emit(LevelRebuilt(level=self.level_number))

    # ----------------------------
    # Registry helpers
    # ----------------------------

    def panel_by_id(self, panel_id: int) -> Optional[NotePanel]:
        for panel in self.panels:
            if panel.id == panel_id:
                return panel
        return None

    def enemy_by_id(self, enemy_id: int) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.id == enemy_id:
                return enemy
        return None

    def spawn_enemy(self, platform_index: int) -> Enemy:
        enemy = Enemy(
            enemy_id=next(self._enemy_ids),
            platform=self.level.platform_at(platform_index),
            cfg=self.cfg.enemy,
            level=self.level_number,
            rng=self.rng,
        )
        self.enemies.append(enemy)
        logger.debug("enemy %d spawned on platform %d", enemy.id, platform_index)
        return enemy

    def remove_enemy(self, enemy: Enemy) -> None:
        """Despawn an enemy and scrub it from any panel still carrying it."""
        if enemy.carrier_id is not None:
            panel = self.panel_by_id(enemy.carrier_id)
            if panel is not None and enemy.id in panel.carried:
                panel.carried.remove(enemy.id)
        enemy.detach()
        if enemy in self.enemies:
            self.enemies.remove(enemy)

    # ----------------------------
    # Transition points
    # ----------------------------

    def award(self, points: int) -> None:
        if points > 0:
            self.score += points

    def use_spray(self) -> bool:
        """Fire the spray forward. No-op without charges or during cooldown."""
        player = self.player
        if not player.can_spray():
            return False
        player.consume_spray()
        origin = player.spray_origin()
        self.events.emit(
            SprayCone(
                x=origin.x,
                y=origin.y,
                direction=player.facing,
                count=self.cfg.player.spray_particles,
                color=SPRAY_COLOR,
            )
        )
        for enemy in self.enemies:
            if enemy.stunned:
                continue
            if player.in_spray_window(enemy):
                enemy.stun()
                self.award(self.cfg.scoring.spray_stun)
        return True

    def kill_player(self) -> None:
        lives = self.player.lose_life()
        self.events.emit(PlayerDied(lives_left=lives))
        if lives <= 0:
            self.game_over = True
            self.scheduler.cancel(REBUILD_EVENT)
            self.events.emit(GameOver(score=self.score, level=self.level_number))
            logger.info("game over: score=%d level=%d", self.score, self.level_number)
            return

        logger.info("player died, %d lives left", lives)
        self.player.respawn(self.level)
        clear = self.cfg.player.respawn_clear_distance
        for enemy in [e for e in self.enemies if abs(e.pos.x - self.player.pos.x) <= clear]:
            self.remove_enemy(enemy)

    def on_plate_complete(self, plate: Plate) -> None:
        self.award(self.cfg.scoring.plate_complete)
        self.events.emit(PlateCompleted(plate_index=plate.index))
        self.events.emit(HarmonyCue(plate_index=plate.index, chord=self.cfg.audio.harmony_chord))
        cx = plate.center_x
        cy = plate.y - HARMONY_LIFT
        points = tuple(
            (
                cx + math.cos(2 * math.pi * i / HARMONY_POINTS) * HARMONY_RADIUS,
                cy + math.sin(2 * math.pi * i / HARMONY_POINTS) * HARMONY_RADIUS,
            )
            for i in range(HARMONY_POINTS)
        )
        self.events.emit(HarmonyBurst(plate_index=plate.index, points=points, color=HARMONY_COLOR))
        logger.info("plate %d complete", plate.index)
        check_level_complete(self)

    # ----------------------------
    # Tick
    # ----------------------------

    def tick(self, inputs: InputState = NO_INPUT) -> List[Event]:
        """Advance the simulation one step and return the events it produced."""
        if self.game_over:
            return []

        self.scheduler.run_due(self.tick_count)
        self.tick_count += 1

        # player
        player = self.player
        player.tick_timers()
        if inputs.spray:
            self.use_spray()
        moving = player.move(self.level, inputs)
        if moving and not player.climbing:
            walk_panels(self, player.center.x, player.platform_index)

        # enemies
        for enemy in self.enemies:
            enemy.update(self.level, player.pos.x, player.platform_index, self.rng)

        # hazards
        resolve_player_hazards(self)
        if self.game_over:
            return self.events.drain()

        update_falling_panels(self)

        platform_index = self.spawner.update(
            self.level_number, len(self.enemies), self.level.bottom_index, self.rng
        )
        if platform_index is not None:
            self.spawn_enemy(platform_index)

        return self.events.drain()

    def drain_events(self) -> List[Event]:
        return self.events.drain()

    def hud(self) -> HudState:
        return HudState(
            score=self.score,
            lives=self.player.lives,
            level=self.level_number,
            spray_count=self.player.spray_count,
            plates_filled=sum(1 for p in self.plates if p.complete),
            game_over=self.game_over,
        )
