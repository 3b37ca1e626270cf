from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional

from models import LayoutConfig, Ladder, PanelConfig, Plate, Platform
from panels import NotePanel
from scale import NOTES

logger = logging.getLogger(__name__)


@dataclass
class Level:
    """Platform and ladder graph; read-only once built."""

    platforms: List[Platform]
    ladders: List[Ladder]

    def __post_init__(self) -> None:
        if not self.platforms:
            raise ValueError("A level needs at least one platform.")
        for i, p in enumerate(self.platforms):
            if p.index != i:
                raise ValueError(f"Platform at position {i} has index {p.index}.")
            if i and p.y <= self.platforms[i - 1].y:
                raise ValueError(f"Platform {i} is not below platform {i - 1}.")
        for ladder in self.ladders:
            if ladder.to_platform != ladder.from_platform + 1:
                raise ValueError(
                    f"Ladder at x={ladder.x} connects {ladder.from_platform} -> "
                    f"{ladder.to_platform}; only adjacent platforms may be linked."
                )
            if not 0 <= ladder.from_platform < len(self.platforms) - 1:
                raise ValueError(f"Ladder at x={ladder.x} references a missing platform.")

    @property
    def bottom_index(self) -> int:
        return len(self.platforms) - 1

    def platform_at(self, index: int) -> Platform:
        return self.platforms[index]

    def ladder_between(self, from_idx: int, to_idx: int) -> Optional[Ladder]:
        for ladder in self.ladders:
            if ladder.from_platform == from_idx and ladder.to_platform == to_idx:
                return ladder
        return None

    def ladder_candidates_near(self, x: float, threshold: float) -> List[Ladder]:
        """Ladders whose centerline is strictly within threshold of x, nearest first."""
        near = [l for l in self.ladders if abs(x - l.center_x) < threshold]
        return sorted(near, key=lambda l: abs(x - l.center_x))

    def nearest_platform(self, feet_y: float) -> Platform:
        """Platform whose surface is vertically closest; ties go to the lower index."""
        best = self.platforms[0]
        best_dist = abs(feet_y - best.y)
        for p in self.platforms[1:]:
            dist = abs(feet_y - p.y)
            if dist < best_dist:
                best, best_dist = p, dist
        return best


def build_platforms(layout: LayoutConfig) -> List[Platform]:
    return [
        Platform(
            index=i,
            x=span.x,
            width=span.width,
            y=layout.platform_y_start + i * layout.platform_spacing,
        )
        for i, span in enumerate(layout.platforms)
    ]


def build_ladders(platforms: List[Platform], layout: LayoutConfig) -> List[Ladder]:
    """Spread ladders evenly inside the overlap of each adjacent platform pair."""
    ladders: List[Ladder] = []
    count = layout.ladders_per_gap
    for upper, lower in zip(platforms, platforms[1:]):
        min_x = max(upper.x, lower.x) + layout.ladder_edge_inset
        max_x = min(upper.right, lower.right) - layout.ladder_edge_reserve
        if max_x <= min_x:
            continue
        step = (max_x - min_x) / (count + 1)
        for j in range(count):
            ladders.append(
                Ladder(
                    x=min_x + step * (j + 1),
                    width=layout.ladder_width,
                    from_platform=upper.index,
                    to_platform=lower.index,
                    y=upper.y,
                    height=lower.y - upper.y,
                )
            )
    return ladders


def build_plates(layout: LayoutConfig, capacity: int) -> List[Plate]:
    if not layout.plate_x:
        raise ValueError("A level needs at least one plate.")
    return [
        Plate(
            index=i,
            x=x,
            y=layout.plate_y,
            width=layout.plate_width,
            height=layout.plate_height,
            capacity=capacity,
        )
        for i, x in enumerate(layout.plate_x)
    ]


def build_note_panels(
    platforms: List[Platform],
    plates: List[Plate],
    layout: LayoutConfig,
    cfg: PanelConfig,
    rng: random.Random,
    ids: Iterator[int],
) -> List[NotePanel]:
    """Scatter one full scale per plate across the platforms.

    Each panel starts roughly above its plate so a straight drop can reach it.
    """
    if cfg.plate_capacity != len(NOTES):
        raise ValueError(
            f"Plate capacity {cfg.plate_capacity} does not match the "
            f"{len(NOTES)}-note scale."
        )
    lo = min(layout.panel_platform_min, len(platforms) - 1)
    panels: List[NotePanel] = []
    for plate in plates:
        for note_index, note in enumerate(NOTES):
            platform = platforms[rng.randint(lo, len(platforms) - 1)]
            jitter = (rng.random() - 0.5) * cfg.placement_jitter
            x = plate.center_x - cfg.width / 2 + jitter
            x = platform.clamp_x(x, cfg.width, cfg.placement_margin)
            panels.append(
                NotePanel(
                    panel_id=next(ids),
                    note=note,
                    note_index=note_index,
                    plate_index=plate.index,
                    platform=platform,
                    x=x,
                    cfg=cfg,
                )
            )
    return panels


def build_level(layout: LayoutConfig) -> Level:
    platforms = build_platforms(layout)
    level = Level(platforms=platforms, ladders=build_ladders(platforms, layout))
    logger.debug(
        "built graph: %d platforms, %d ladders", len(level.platforms), len(level.ladders)
    )
    return level


def id_counter(start: int = 1) -> Iterator[int]:
    return itertools.count(start)
