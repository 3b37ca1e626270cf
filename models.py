from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from utils import clamp_float


@dataclass(frozen=True)
class Platform:
    index: int  # 0 = top
    x: float
    width: float
    y: float

    @property
    def right(self) -> float:
        return self.x + self.width

    def clamp_x(self, x: float, width: float, margin: float = 0.0) -> float:
        """Clamp the left edge of a box of `width` inside this span."""
        lo = self.x + margin
        hi = self.x + self.width - width - margin
        return max(lo, min(x, hi))


@dataclass(frozen=True)
class Ladder:
    x: float
    width: float
    from_platform: int  # upper
    to_platform: int  # lower, always from_platform + 1
    y: float  # upper platform surface
    height: float

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Plate:
    index: int
    x: float
    y: float
    width: float
    height: float
    capacity: int
    notes: List[int] = field(default_factory=list)  # delivered panel ids, stacking order
    complete: bool = False

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    def add_note(self, panel_id: int) -> bool:
        """Append a delivered panel; return True only on the completing delivery."""
        if panel_id in self.notes or self.complete:
            return False
        self.notes.append(panel_id)
        if len(self.notes) == self.capacity:
            self.complete = True
            return True
        return False


# ----------------------------
# Configuration
# ----------------------------


@dataclass(frozen=True)
class PlatformSpan:
    x: float
    width: float


@dataclass(frozen=True)
class LayoutConfig:
    canvas_width: int
    canvas_height: int
    platform_y_start: float
    platform_spacing: float
    platforms: Tuple[PlatformSpan, ...]
    plate_x: Tuple[float, ...]
    plate_width: float
    plate_height: float
    plate_y: float
    floor_line: float
    plate_contact_margin: float
    ladders_per_gap: int
    ladder_width: float
    ladder_edge_inset: float
    ladder_edge_reserve: float
    panel_platform_min: int


@dataclass
class PlayerConfig:
    width: float
    height: float
    start_x: float
    speed: float
    climb_speed: float
    climb_easing: float
    ladder_proximity: float
    lives: int
    invincible_ticks: int
    respawn_clear_distance: float
    spray_count: int
    spray_cooldown: int
    spray_range: float
    spray_band: float
    spray_particles: int


@dataclass(frozen=True)
class EnemyConfig:
    width: float
    height: float
    base_speed: float
    speed_per_level: float
    chase_interval: int
    chase_probability: float
    ladder_probability: float
    ladder_proximity: float
    descend_probability: float
    stun_ticks: int


@dataclass(frozen=True)
class PanelConfig:
    width: float
    height: float
    sections: int
    fall_speed: float
    rest_gap: float
    platform_margin: float
    placement_margin: float
    placement_jitter: float
    stack_spacing: float
    plate_capacity: int


@dataclass(frozen=True)
class ScoringConfig:
    section: int
    fall: int
    enemy_drop: int
    spray_stun: int
    plate_complete: int
    level_complete: int
    delivery: int

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "ScoringConfig":
        # awards are never negative
        def pts(key: str, default: int) -> int:
            try:
                return max(0, int(raw.get(key, default)))
            except (TypeError, ValueError):
                return default

        return ScoringConfig(
            section=pts("section", 10),
            fall=pts("fall", 50),
            enemy_drop=pts("enemy_drop", 100),
            spray_stun=pts("spray_stun", 50),
            plate_complete=pts("plate_complete", 500),
            level_complete=pts("level_complete", 1000),
            delivery=pts("delivery", 0),
        )


@dataclass(frozen=True)
class SpawnConfig:
    base_delay: int
    delay_step: int
    min_delay: int
    base_cap: int
    max_cap: int
    band_floor: int
    band_ceiling: int

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "SpawnConfig":
        min_delay = max(1, int(raw.get("min_delay", 60)))
        base_cap = max(0, int(raw.get("base_cap", 2)))
        band_floor = max(0, int(raw.get("band_floor", 3)))
        return SpawnConfig(
            base_delay=max(min_delay, int(raw.get("base_delay", 180))),
            delay_step=max(0, int(raw.get("delay_step", 20))),
            min_delay=min_delay,
            base_cap=base_cap,
            max_cap=max(base_cap, int(raw.get("max_cap", 5))),
            band_floor=band_floor,
            band_ceiling=max(band_floor, int(raw.get("band_ceiling", 5))),
        )


@dataclass(frozen=True)
class AudioConfig:
    note_volume: float
    harmony_chord: Tuple[str, ...]

    @classmethod
    def from_raw(cls, raw: Optional[Dict[str, Any]]) -> "AudioConfig":
        if not isinstance(raw, dict):
            raw = {}
        chord_raw = raw.get("harmony_chord", ["C4", "E4", "G4", "C5"])
        if not isinstance(chord_raw, list) or not chord_raw:
            chord_raw = ["C4", "E4", "G4", "C5"]
        return cls(
            note_volume=clamp_float(float(raw.get("note_volume", 0.5)), 0.0, 1.0),
            harmony_chord=tuple(str(p) for p in chord_raw),
        )


@dataclass(frozen=True)
class EngineConfig:
    layout: LayoutConfig
    player: PlayerConfig
    enemy: EnemyConfig
    panel: PanelConfig
    scoring: ScoringConfig
    spawn: SpawnConfig
    audio: AudioConfig
    rebuild_delay_ticks: int
    seed: Optional[int]
