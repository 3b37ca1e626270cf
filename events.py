"""Event records produced by the simulation for out-of-engine collaborators.

Audio, particle rendering and end screens subscribe by draining the
session's EventLog once per frame. Each record describes one occurrence.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple, Union

from game_types import Color


@dataclass(frozen=True)
class NoteWalked:
    note: str
    pitch: str
    volume: float
    x: float
    y: float
    color: Color


@dataclass(frozen=True)
class ParticleBurst:
    x: float
    y: float
    color: Color
    count: int


@dataclass(frozen=True)
class HarmonyCue:
    plate_index: int
    chord: Tuple[str, ...]


@dataclass(frozen=True)
class HarmonyBurst:
    plate_index: int
    points: Tuple[Tuple[float, float], ...]
    color: Color


@dataclass(frozen=True)
class SprayCone:
    x: float
    y: float
    direction: int
    count: int
    color: Color


@dataclass(frozen=True)
class PlateCompleted:
    plate_index: int


@dataclass(frozen=True)
class LevelCompleted:
    level: int
    bonus: int


@dataclass(frozen=True)
class LevelRebuilt:
    level: int


@dataclass(frozen=True)
class PlayerDied:
    lives_left: int


@dataclass(frozen=True)
class GameOver:
    score: int
    level: int


Event = Union[
    NoteWalked,
    ParticleBurst,
    HarmonyCue,
    HarmonyBurst,
    SprayCone,
    PlateCompleted,
    LevelCompleted,
    LevelRebuilt,
    PlayerDied,
    GameOver,
]


class EventLog:
    """Append-only buffer of events, emptied by drain()."""

    def __init__(self) -> None:
        self._pending: List[Event] = []

    def emit(self, event: Event) -> None:
        self._pending.append(event)

    def drain(self) -> List[Event]:
        out = self._pending
        self._pending = []
        return out

    def peek(self) -> List[Event]:
        return list(self._pending)

    def __len__(self) -> int:
        return len(self._pending)
