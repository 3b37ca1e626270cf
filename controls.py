from __future__ import annotations

import pygame

from game_types import InputState


def input_state_from_keys(keys: pygame.key.ScancodeWrapper) -> InputState:
    """Sample a pygame.key.get_pressed() snapshot into engine input.

    Arrows or WASD steer; space sprays.
    """
    return InputState(
        left=bool(keys[pygame.K_LEFT] or keys[pygame.K_a]),
        right=bool(keys[pygame.K_RIGHT] or keys[pygame.K_d]),
        up=bool(keys[pygame.K_UP] or keys[pygame.K_w]),
        down=bool(keys[pygame.K_DOWN] or keys[pygame.K_s]),
        spray=bool(keys[pygame.K_SPACE]),
    )
