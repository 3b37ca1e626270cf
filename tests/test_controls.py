from __future__ import annotations

from collections import defaultdict

import pygame

from controls import input_state_from_keys
from game_types import InputState


def pressed(*codes):
    keys = defaultdict(bool)
    for code in codes:
        keys[code] = True
    return keys


def test_arrows_and_space():
    state = input_state_from_keys(pressed(pygame.K_LEFT, pygame.K_UP, pygame.K_SPACE))
    assert state == InputState(left=True, up=True, spray=True)


def test_wasd():
    state = input_state_from_keys(pressed(pygame.K_d, pygame.K_s))
    assert state == InputState(right=True, down=True)
    assert state.horizontal and state.vertical


def test_nothing_held():
    state = input_state_from_keys(pressed())
    assert state == InputState()
    assert not state.horizontal and not state.vertical
