"""Note panels: section walking, falling, chained landings and plate delivery.

A panel is walkable while IDLE or LANDED. Walking every section starts a
fall; a falling panel carries the enemies standing on it, lands on the
first platform or resting panel below, or reaches the plate line where it
is either delivered into its plate or parked as a miss.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

import pygame

from collision import spans_intersect
from events import NoteWalked, ParticleBurst
from game_types import FallState
from models import PanelConfig, Platform
from scale import color_for, pitch_for

if TYPE_CHECKING:
    from enemy import Enemy
    from session import GameSession

logger = logging.getLogger(__name__)

SECTION_PARTICLES = 8


class NotePanel:
    """One collectible note, permanently owned by one plate."""

    def __init__(
        self,
        panel_id: int,
        note: str,
        note_index: int,
        plate_index: int,
        platform: Platform,
        x: float,
        cfg: PanelConfig,
    ) -> None:
        self.id = panel_id
        self.note = note
        self.note_index = note_index
        self._plate_index = plate_index
        self.platform_index = platform.index
        self.size = pygame.Vector2(cfg.width, cfg.height)
        self.pos = pygame.Vector2(
            platform.clamp_x(x, cfg.width, cfg.platform_margin),
            platform.y - cfg.height - cfg.rest_gap,
        )
        self.sections: List[bool] = [False] * cfg.sections
        self.state = FallState.IDLE
        self.carried: List[int] = []  # enemy ids, owned here
        self.resting_on: Optional[int] = None  # id of the panel underneath

    @property
    def plate_index(self) -> int:
        return self._plate_index

    @property
    def width(self) -> float:
        return self.size.x

    @property
    def height(self) -> float:
        return self.size.y

    @property
    def right(self) -> float:
        return self.pos.x + self.size.x

    @property
    def bottom(self) -> float:
        return self.pos.y + self.size.y

    @property
    def center_x(self) -> float:
        return self.pos.x + self.size.x / 2

    @property
    def section_width(self) -> float:
        return self.size.x / len(self.sections)

    @property
    def walkable(self) -> bool:
        return self.state in (FallState.IDLE, FallState.LANDED)

    @property
    def fully_walked(self) -> bool:
        return all(self.sections)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.pos.x), int(self.pos.y), int(self.size.x), int(self.size.y))

    def section_at(self, x: float) -> Optional[int]:
        idx = int((x - self.pos.x) // self.section_width)
        if 0 <= idx < len(self.sections):
            return idx
        return None

    def reset_sections(self) -> None:
        self.sections = [False] * len(self.sections)


# ----------------------------
# Walking
# ----------------------------


def walk_panels(session: "GameSession", center_x: float, platform_index: int) -> None:
    """Mark sections under the player's horizontal center on its platform."""
    for panel in session.panels:
        if not panel.walkable or panel.platform_index != platform_index:
            continue
        if panel.pos.x <= center_x <= panel.right:
            walk_over(session, panel, center_x)


def walk_over(session: "GameSession", panel: NotePanel, x: float) -> bool:
    """Mark the section at x. Returns True if a new section was walked."""
    if not panel.walkable:
        return False
    idx = panel.section_at(x)
    if idx is None or panel.sections[idx]:
        return False

    panel.sections[idx] = True
    session.award(session.cfg.scoring.section)
    y = panel.pos.y + panel.height / 2
    color = color_for(panel.note)
    session.events.emit(
        NoteWalked(
            note=panel.note,
            pitch=pitch_for(panel.note),
            volume=session.cfg.audio.note_volume,
            x=x,
            y=y,
            color=color,
        )
    )
    session.events.emit(ParticleBurst(x=x, y=y, color=color, count=SECTION_PARTICLES))

    if panel.fully_walked:
        start_falling(session, panel)
    return True


# ----------------------------
# Falling
# ----------------------------


def start_falling(session: "GameSession", panel: NotePanel) -> None:
    """Release a panel and pick up the enemies standing on it."""
    if not panel.walkable:
        return
    panel.state = FallState.FALLING
    panel.resting_on = None
    session.award(session.cfg.scoring.fall)
    settle_dependents(session, panel)

    for enemy in session.enemies:
        if enemy.carried or enemy.platform_index != panel.platform_index:
            continue
        if spans_intersect(enemy.pos.x, enemy.pos.x + enemy.width, panel.pos.x, panel.right):
            enemy.attach_to(panel.id)
            panel.carried.append(enemy.id)

    logger.debug(
        "panel %d (%s) falling from platform %d carrying %s",
        panel.id,
        panel.note,
        panel.platform_index,
        panel.carried,
    )


def settle_dependents(session: "GameSession", support: NotePanel) -> None:
    """Drop panels that were resting on `support` back to their platform's rest line."""
    for panel in session.panels:
        if panel.resting_on != support.id:
            continue
        platform = session.level.platform_at(panel.platform_index)
        panel.pos.y = platform.y - panel.height - session.cfg.panel.rest_gap
        panel.resting_on = None
        logger.debug("panel %d lost its support, back on platform %d", panel.id, platform.index)


def carried_enemies(session: "GameSession", panel: NotePanel) -> List["Enemy"]:
    found = []
    for enemy_id in panel.carried:
        enemy = session.enemy_by_id(enemy_id)
        if enemy is not None:
            found.append(enemy)
    return found


def update_falling_panels(session: "GameSession") -> None:
    """Advance every panel that was falling when the phase began.

    Panels pushed into falling during this pass start moving next tick, so a
    chain descends one level per tick.
    """
    for panel in [p for p in session.panels if p.state is FallState.FALLING]:
        step_falling(session, panel)


def step_falling(session: "GameSession", panel: NotePanel) -> None:
    if panel.state is not FallState.FALLING:
        return
    layout = session.cfg.layout

    panel.pos.y += session.cfg.panel.fall_speed
    for enemy in carried_enemies(session, panel):
        enemy.pos.y = panel.pos.y - enemy.height

    if panel.bottom >= layout.floor_line:
        resolve_plate(session, panel)
        return

    platforms = session.level.platforms
    for i in range(panel.platform_index + 1, len(platforms)):
        platform = platforms[i]
        if panel.bottom >= platform.y:
            land(session, panel, i, platform.y - panel.height - session.cfg.panel.rest_gap)
            return

    for other in session.panels:
        if other is panel or not other.walkable:
            continue
        if (
            other.platform_index > panel.platform_index
            and panel.bottom >= other.pos.y
            and abs(panel.pos.x - other.pos.x) < panel.width / 2
        ):
            land(session, panel, other.platform_index, other.pos.y - panel.height)
            panel.resting_on = other.id
            if other.fully_walked:
                logger.debug("panel %d pushes panel %d", panel.id, other.id)
                start_falling(session, other)
            return


def land(session: "GameSession", panel: NotePanel, platform_index: int, y: float) -> None:
    """Stop a falling panel at y on platform_index and drop its passengers there."""
    cfg = session.cfg
    platform = session.level.platform_at(platform_index)
    panel.platform_index = platform_index
    panel.pos.y = y
    panel.pos.x = platform.clamp_x(panel.pos.x, panel.width, cfg.panel.platform_margin)
    panel.state = FallState.LANDED
    panel.resting_on = None
    panel.reset_sections()

    for enemy in carried_enemies(session, panel):
        enemy.detach()
        enemy.platform_index = platform_index
        enemy.pos.y = platform.y - enemy.height
        session.award(cfg.scoring.enemy_drop)
    panel.carried = []
    logger.debug("panel %d landed on platform %d", panel.id, platform_index)


def resolve_plate(session: "GameSession", panel: NotePanel) -> None:
    """Deliver the panel into its plate, or park it at the plate line on a miss."""
    layout = session.cfg.layout
    if panel.bottom < layout.plate_y - layout.plate_contact_margin:
        return

    plate = session.plates[panel.plate_index]
    for enemy in carried_enemies(session, panel):
        # passengers fall off the bottom of the structure
        session.award(session.cfg.scoring.enemy_drop)
        session.remove_enemy(enemy)
    panel.carried = []

    if abs(plate.center_x - panel.center_x) < plate.width / 2 + panel.width / 2:
        spacing = panel.height + session.cfg.panel.stack_spacing
        panel.pos.x = plate.center_x - panel.width / 2
        panel.pos.y = layout.plate_y - (len(plate.notes) + 1) * spacing
        panel.state = FallState.DELIVERED
        session.award(session.cfg.scoring.delivery)
        logger.debug("panel %d delivered to plate %d", panel.id, plate.index)
        if plate.add_note(panel.id):
            session.on_plate_complete(plate)
    else:
        panel.state = FallState.MISSED
        panel.pos.y = layout.plate_y
        logger.debug("panel %d missed plate %d", panel.id, plate.index)
