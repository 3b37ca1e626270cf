from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from game_types import InputState

logger = logging.getLogger("note_time")


def random_policy_init(seed: int, hold_ticks: int = 20) -> Callable[[], InputState]:
    """Autopilot that holds a random direction for a while, spraying rarely."""
    rng = random.Random(seed)
    state = {"left": 0, "current": InputState()}

    def act() -> InputState:
        if state["left"] <= 0:
            choice = rng.choice(("left", "right", "up", "down", "none"))
            state["current"] = InputState(**({choice: True} if choice != "none" else {}))
            state["left"] = hold_ticks
        state["left"] -= 1
        current = state["current"]
        if rng.random() < 0.01:
            return InputState(
                left=current.left, right=current.right, up=current.up, down=current.down, spray=True
            )
        return current

    return act


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Run a headless Note Time session.")
    p.add_argument("--config", type=Path, default=None, help="JSON config file (defaults built in)")
    p.add_argument("--seed", type=int, default=None, help="Seed for the session and autopilot")
    p.add_argument("--ticks", type=int, default=3600, help="Maximum ticks to simulate")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return p.parse_args()


def main() -> None:
    """Entrypoint for running the simulation from the command line."""
    args = parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from config_io import load_engine_config
    from session import GameSession

    overrides: Optional[Dict[str, Any]] = {"seed": args.seed} if args.seed is not None else None
    cfg = load_engine_config(args.config, overrides)
    session = GameSession(cfg)
    policy = random_policy_init(cfg.seed if cfg.seed is not None else 0)

    for _ in range(max(0, args.ticks)):
        session.tick(policy())
        if session.game_over:
            break

    hud = session.hud()
    logger.info(
        "finished after %d ticks: score=%d lives=%d level=%d spray=%d plates=%d game_over=%s",
        session.tick_count,
        hud.score,
        hud.lives,
        hud.level,
        hud.spray_count,
        hud.plates_filled,
        hud.game_over,
    )


if __name__ == "__main__":
    main()
