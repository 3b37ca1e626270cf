from __future__ import annotations

import random
from typing import Any, Dict, Optional

import pytest

from config_io import load_engine_config
from enemy import Enemy
from models import EngineConfig
from panels import NotePanel
from session import GameSession

# cap 0 keeps the board free of enemies unless a test places one
QUIET = {"seed": 7, "spawn": {"base_cap": 0, "max_cap": 0}}


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self.value = value

    def random(self) -> float:
        return self.value


@pytest.fixture
def cfg() -> EngineConfig:
    return load_engine_config(None, {"seed": 7})


@pytest.fixture
def quiet_cfg() -> EngineConfig:
    return load_engine_config(None, QUIET)


@pytest.fixture
def session(quiet_cfg: EngineConfig) -> GameSession:
    s = GameSession(quiet_cfg)
    s.panels = []
    return s


def add_panel(
    s: GameSession,
    platform_index: int,
    x: float,
    plate_index: int = 0,
    note: str = "Do",
    sections: Optional[list] = None,
) -> NotePanel:
    panel = NotePanel(
        panel_id=next(s._panel_ids),
        note=note,
        note_index=0,
        plate_index=plate_index,
        platform=s.level.platform_at(platform_index),
        x=x,
        cfg=s.cfg.panel,
    )
    if sections is not None:
        panel.sections = list(sections)
    s.panels.append(panel)
    return panel


def add_enemy(s: GameSession, platform_index: int, x: float, **attrs: Any) -> Enemy:
    enemy = s.spawn_enemy(platform_index)
    enemy.pos.x = x
    for key, value in attrs.items():
        setattr(enemy, key, value)
    return enemy


def place_player(s: GameSession, platform_index: int, x: float) -> None:
    s.player.platform_index = platform_index
    s.player.pos.x = x
    s.player.pos.y = s.level.platform_at(platform_index).y - s.player.height


def overrides(**sections: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = dict(QUIET)
    out.update(sections)
    return out
