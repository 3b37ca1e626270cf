from __future__ import annotations

import random

from progression import (
    EnemySpawner,
    enemy_cap_for_level,
    spawn_band_for_level,
    spawn_delay_for_level,
)
from session import GameSession


def test_cap_grows_and_saturates(cfg):
    caps = [enemy_cap_for_level(cfg.spawn, lvl) for lvl in range(1, 10)]
    assert caps == [2, 3, 3, 4, 4, 5, 5, 5, 5]


def test_delay_shrinks_to_floor(cfg):
    assert spawn_delay_for_level(cfg.spawn, 1) == 180
    assert spawn_delay_for_level(cfg.spawn, 5) == 100
    assert spawn_delay_for_level(cfg.spawn, 7) == 60
    assert spawn_delay_for_level(cfg.spawn, 20) == 60


def test_band_moves_down(cfg):
    assert spawn_band_for_level(cfg.spawn, 1, 6) == (1, 3)
    assert spawn_band_for_level(cfg.spawn, 2, 6) == (2, 4)
    assert spawn_band_for_level(cfg.spawn, 3, 6) == (3, 5)
    assert spawn_band_for_level(cfg.spawn, 9, 6) == (3, 5)
    assert spawn_band_for_level(cfg.spawn, 9, 2) == (2, 2)


def test_spawner_cadence(cfg):
    spawner = EnemySpawner(cfg.spawn)
    rng = random.Random(1)
    for _ in range(180):
        assert spawner.update(1, 0, 6, rng) is None
    platform = spawner.update(1, 0, 6, rng)
    assert platform is not None and 1 <= platform <= 3
    assert spawner.timer == 0


def test_spawner_waits_below_cap(cfg):
    spawner = EnemySpawner(cfg.spawn)
    rng = random.Random(1)
    for _ in range(300):
        assert spawner.update(1, 2, 6, rng) is None
    assert spawner.timer == 300
    assert spawner.update(1, 1, 6, rng) is not None


def test_session_spawns_over_time(cfg):
    s = GameSession(cfg)
    s.enemies = []
    for _ in range(181):
        s.tick()
    assert len(s.enemies) == 1
    assert 1 <= s.enemies[0].platform_index <= 3
