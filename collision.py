from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

import pygame

if TYPE_CHECKING:
    from enemy import Enemy
    from player import Player
    from session import GameSession


def boxes_overlap(
    a_pos: pygame.Vector2,
    a_size: pygame.Vector2,
    b_pos: pygame.Vector2,
    b_size: pygame.Vector2,
) -> bool:
    """Strict AABB overlap measured between centers with half extents."""
    dx = abs((a_pos.x + a_size.x / 2) - (b_pos.x + b_size.x / 2))
    dy = abs((a_pos.y + a_size.y / 2) - (b_pos.y + b_size.y / 2))
    return dx < (a_size.x + b_size.x) / 2 and dy < (a_size.y + b_size.y) / 2


def spans_intersect(a_left: float, a_right: float, b_left: float, b_right: float) -> bool:
    return a_right > b_left and a_left < b_right


def first_hazard(player: "Player", enemies: Iterable["Enemy"]) -> Optional["Enemy"]:
    """First non-stunned enemy touching the player, in list order."""
    for enemy in enemies:
        if enemy.stunned:
            continue
        if boxes_overlap(player.pos, player.size, enemy.pos, enemy.size):
            return enemy
    return None


def resolve_player_hazards(session: "GameSession") -> bool:
    """Kill the player on enemy contact. Returns True if a death happened."""
    player = session.player
    if player.invincible or session.game_over:
        return False
    if first_hazard(player, session.enemies) is None:
        return False
    session.kill_player()
    return True
