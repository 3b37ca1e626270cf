from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from models import (
    AudioConfig,
    EngineConfig,
    EnemyConfig,
    LayoutConfig,
    PanelConfig,
    PlatformSpan,
    PlayerConfig,
    ScoringConfig,
    SpawnConfig,
)
from utils import clamp_float, clamp_int, deep_get

DEFAULT_PLATFORMS: List[Tuple[float, float]] = [
    (50, 800),  # top
    (150, 600),
    (100, 700),
    (200, 500),
    (125, 650),
    (175, 550),
    (50, 800),  # bottom
]
DEFAULT_PLATE_X: List[float] = [150, 380, 610]
PANEL_SECTIONS = 4


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name, {})
    return value if isinstance(value, dict) else {}


def _parse_platforms(raw: Any) -> Tuple[PlatformSpan, ...]:
    """Parse platform spans from a list of {x, width} objects or [x, width] pairs."""
    spans: List[PlatformSpan] = []
    if isinstance(raw, list):
        for item in raw:
            if isinstance(item, dict) and "x" in item and "width" in item:
                spans.append(PlatformSpan(float(item["x"]), float(item["width"])))
            elif isinstance(item, (list, tuple)) and len(item) >= 2:
                spans.append(PlatformSpan(float(item[0]), float(item[1])))
    if not spans:
        spans = [PlatformSpan(float(x), float(w)) for x, w in DEFAULT_PLATFORMS]
    return tuple(spans)


def _parse_floats(raw: Any, default: List[float]) -> Tuple[float, ...]:
    if isinstance(raw, list) and raw:
        try:
            return tuple(float(v) for v in raw)
        except (TypeError, ValueError):
            pass
    return tuple(default)


def parse_layout_config(raw: Dict[str, Any]) -> LayoutConfig:
    """Parse level geometry.

    Args:
        raw: Dict containing the "layout" section.

    Returns:
        LayoutConfig with defaults applied. Plate and floor lines default
        to offsets from the canvas height.
    """
    width = clamp_int(int(raw.get("canvas_width", 900)), 100, 10000)
    height = clamp_int(int(raw.get("canvas_height", 700)), 100, 10000)
    platforms = _parse_platforms(raw.get("platforms"))
    return LayoutConfig(
        canvas_width=width,
        canvas_height=height,
        platform_y_start=float(raw.get("platform_y_start", 50)),
        platform_spacing=max(1.0, float(raw.get("platform_spacing", 70))),
        platforms=platforms,
        plate_x=_parse_floats(raw.get("plate_x"), DEFAULT_PLATE_X),
        plate_width=float(raw.get("plate_width", 140)),
        plate_height=float(raw.get("plate_height", 20)),
        plate_y=float(raw.get("plate_y", height - 30)),
        floor_line=float(raw.get("floor_line", height - 60)),
        plate_contact_margin=float(raw.get("plate_contact_margin", 10)),
        ladders_per_gap=clamp_int(int(raw.get("ladders_per_gap", 2)), 0, 16),
        ladder_width=float(raw.get("ladder_width", 30)),
        ladder_edge_inset=float(raw.get("ladder_edge_inset", 40)),
        ladder_edge_reserve=float(raw.get("ladder_edge_reserve", 70)),
        panel_platform_min=clamp_int(
            int(raw.get("panel_platform_min", 1)), 0, len(platforms) - 1
        ),
    )


def parse_player_config(raw: Dict[str, Any]) -> PlayerConfig:
    """Parse player settings from config data."""
    return PlayerConfig(
        width=float(raw.get("width", 30)),
        height=float(raw.get("height", 40)),
        start_x=float(raw.get("start_x", 100)),
        speed=float(raw.get("speed", 2.5)),
        climb_speed=float(raw.get("climb_speed", 2)),
        climb_easing=clamp_float(float(raw.get("climb_easing", 0.2)), 0.0, 1.0),
        ladder_proximity=float(raw.get("ladder_proximity", 100)),
        lives=max(1, int(raw.get("lives", 3))),
        invincible_ticks=max(0, int(raw.get("invincible_ticks", 120))),
        respawn_clear_distance=float(raw.get("respawn_clear_distance", 200)),
        spray_count=max(0, int(raw.get("spray_count", 5))),
        spray_cooldown=max(0, int(raw.get("spray_cooldown", 30))),
        spray_range=float(raw.get("spray_range", 100)),
        spray_band=float(raw.get("spray_band", 30)),
        spray_particles=max(0, int(raw.get("spray_particles", 15))),
    )


def parse_enemy_config(raw: Dict[str, Any]) -> EnemyConfig:
    return EnemyConfig(
        width=float(raw.get("width", 25)),
        height=float(raw.get("height", 30)),
        base_speed=float(raw.get("base_speed", 1.2)),
        speed_per_level=max(0.0, float(raw.get("speed_per_level", 0.15))),
        chase_interval=max(1, int(raw.get("chase_interval", 60))),
        chase_probability=clamp_float(float(raw.get("chase_probability", 0.7)), 0.0, 1.0),
        ladder_probability=clamp_float(float(raw.get("ladder_probability", 0.01)), 0.0, 1.0),
        ladder_proximity=float(raw.get("ladder_proximity", 20)),
        descend_probability=clamp_float(float(raw.get("descend_probability", 0.5)), 0.0, 1.0),
        stun_ticks=max(1, int(raw.get("stun_ticks", 90))),
    )


def parse_panel_config(raw: Dict[str, Any]) -> PanelConfig:
    """Parse note panel settings.

    Raises:
        ValueError: If a section count other than PANEL_SECTIONS is given.
    """
    sections = int(raw.get("sections", PANEL_SECTIONS))
    if sections != PANEL_SECTIONS:
        raise ValueError(f"Note panels have exactly {PANEL_SECTIONS} sections, got {sections}.")
    return PanelConfig(
        width=float(raw.get("width", 120)),
        height=float(raw.get("height", 16)),
        sections=sections,
        fall_speed=max(0.1, float(raw.get("fall_speed", 4))),
        rest_gap=float(raw.get("rest_gap", 5)),
        platform_margin=float(raw.get("platform_margin", 10)),
        placement_margin=float(raw.get("placement_margin", 20)),
        placement_jitter=max(0.0, float(raw.get("placement_jitter", 40))),
        stack_spacing=float(raw.get("stack_spacing", 1)),
        plate_capacity=max(1, int(raw.get("plate_capacity", 8))),
    )


def _parse_seed(raw: Any) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def parse_engine_config(cfg: Dict[str, Any]) -> EngineConfig:
    """Parse a full (already merged) config document.

    Args:
        cfg: Dict with optional sections layout, player, enemy, panel,
            scoring, spawn, audio, timing and a top-level seed.

    Returns:
        EngineConfig with defaults applied for everything missing.
    """
    return EngineConfig(
        layout=parse_layout_config(_section(cfg, "layout")),
        player=parse_player_config(_section(cfg, "player")),
        enemy=parse_enemy_config(_section(cfg, "enemy")),
        panel=parse_panel_config(_section(cfg, "panel")),
        scoring=ScoringConfig.from_dict(_section(cfg, "scoring")),
        spawn=SpawnConfig.from_dict(_section(cfg, "spawn")),
        audio=AudioConfig.from_raw(cfg.get("audio")),
        rebuild_delay_ticks=max(0, int(deep_get(cfg, "timing.rebuild_delay_ticks", 120))),
        seed=_parse_seed(cfg.get("seed")),
    )
