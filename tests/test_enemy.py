from __future__ import annotations

import random

import pytest

from conftest import FixedRandom
from enemy import Enemy, enemy_speed_for_level
from game_types import EnemyState
from level_loader import build_level

CALM = FixedRandom(0.5)


@pytest.fixture
def level(quiet_cfg):
    return build_level(quiet_cfg.layout)


@pytest.fixture
def make_enemy(quiet_cfg, level):
    def make(platform_index, x, direction=1, game_level=1):
        enemy = Enemy(
            enemy_id=1,
            platform=level.platform_at(platform_index),
            cfg=quiet_cfg.enemy,
            level=game_level,
            rng=random.Random(0),
        )
        enemy.pos.x = x
        enemy.direction = direction
        return enemy

    return make


def test_spawns_on_its_platform(quiet_cfg, level):
    platform = level.platform_at(3)
    for seed in range(20):
        enemy = Enemy(1, platform, quiet_cfg.enemy, 1, random.Random(seed))
        assert enemy.pos.y == platform.y - enemy.height
        assert platform.x <= enemy.pos.x <= platform.right - enemy.width
        assert enemy.direction in (-1, 1)
        assert enemy.state is EnemyState.PATROLLING


def test_speed_scales_with_level(quiet_cfg, make_enemy):
    assert enemy_speed_for_level(quiet_cfg.enemy, 1) == pytest.approx(1.2)
    assert enemy_speed_for_level(quiet_cfg.enemy, 3) == pytest.approx(1.5)
    assert make_enemy(3, 400, game_level=5).speed == pytest.approx(1.8)


def test_patrol_bounces_off_edges(level, make_enemy):
    enemy = make_enemy(3, 674, direction=1)
    enemy.update(level, 0, 6, CALM)
    assert enemy.pos.x == 675
    assert enemy.direction == -1

    enemy = make_enemy(3, 200.5, direction=-1)
    enemy.update(level, 0, 6, CALM)
    assert enemy.pos.x == 200
    assert enemy.direction == 1


def test_patrol_keeps_enemy_pinned(level, make_enemy):
    enemy = make_enemy(3, 400)
    enemy.pos.y = 0
    enemy.update(level, 0, 6, CALM)
    assert enemy.pos.y == 230
    assert enemy.pos.x == pytest.approx(401.2)


def test_chase_bias_turns_toward_player(level, make_enemy):
    enemy = make_enemy(3, 250, direction=-1)
    enemy.chase_timer = 60
    enemy.update(level, 600, 3, FixedRandom(0.0))
    assert enemy.state is EnemyState.CHASING
    assert enemy.direction == 1
    assert enemy.chase_timer == 0
    assert enemy.pos.x == pytest.approx(251.2)


def test_chase_bias_needs_same_platform(level, make_enemy):
    enemy = make_enemy(3, 250, direction=-1)
    enemy.chase_timer = 60
    enemy.update(level, 600, 6, FixedRandom(0.0))
    assert enemy.state is EnemyState.PATROLLING
    assert enemy.direction == -1


def test_chase_bias_waits_for_interval(level, make_enemy):
    enemy = make_enemy(3, 250, direction=-1)
    enemy.chase_timer = 59
    enemy.update(level, 600, 3, FixedRandom(0.3))
    assert enemy.state is EnemyState.PATROLLING
    assert enemy.chase_timer == 60


def test_stun_freezes_then_expires(level, make_enemy):
    enemy = make_enemy(3, 400)
    enemy.stun()
    x, y = enemy.pos.x, enemy.pos.y
    for _ in range(89):
        enemy.update(level, 0, 3, CALM)
        assert enemy.stunned
        assert (enemy.pos.x, enemy.pos.y) == (x, y)

    enemy.update(level, 0, 3, CALM)
    assert enemy.state is EnemyState.PATROLLING
    assert enemy.pos.x == x

    enemy.update(level, 0, 3, CALM)
    assert enemy.pos.x != x


def test_descends_ladder_on_low_roll(level, make_enemy):
    ladder = level.ladder_between(0, 1)
    enemy = make_enemy(0, ladder.center_x - 12.5)
    assert enemy.try_use_ladder(level.ladders, FixedRandom(0.1))
    assert enemy.platform_index == 1


def test_stays_put_on_high_roll_at_top(level, make_enemy):
    ladder = level.ladder_between(0, 1)
    enemy = make_enemy(0, ladder.center_x - 12.5)
    assert not enemy.try_use_ladder(level.ladders, FixedRandom(0.9))
    assert enemy.platform_index == 0


def test_climbs_up_from_lower_end(level, make_enemy):
    ladder = level.ladder_between(5, 6)
    enemy = make_enemy(6, ladder.center_x - 12.5)
    assert enemy.try_use_ladder(level.ladders, FixedRandom(0.9))
    assert enemy.platform_index == 5


def test_ladder_must_be_close(level, make_enemy):
    ladder = level.ladder_between(5, 6)
    enemy = make_enemy(6, ladder.center_x - 12.5 - 20)
    assert not enemy.try_use_ladder(level.ladders, FixedRandom(0.0))
    assert enemy.platform_index == 6


def test_ladder_hop_repins_to_new_platform(level, make_enemy):
    ladder = level.ladder_between(5, 6)
    enemy = make_enemy(6, ladder.center_x - 12.5 - 1.2)
    enemy.update(level, 0, 0, FixedRandom(0.0))
    assert enemy.platform_index == 5
    assert enemy.pos.y == 400 - 30
