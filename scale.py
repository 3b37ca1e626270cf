from __future__ import annotations

from typing import Dict, Tuple

from game_types import Color

# One octave of solfege; each plate collects the whole scale.
NOTES: Tuple[str, ...] = ("Do", "Re", "Mi", "Fa", "So", "La", "Ti", "Do'")

NOTE_PITCHES: Dict[str, str] = {
    "Do": "C4",
    "Re": "D4",
    "Mi": "E4",
    "Fa": "F4",
    "So": "G4",
    "La": "A4",
    "Ti": "B4",
    "Do'": "C5",
}

NOTE_COLORS: Dict[str, Color] = {
    "Do": (255, 68, 68),
    "Re": (255, 136, 68),
    "Mi": (255, 221, 68),
    "Fa": (68, 255, 68),
    "So": (68, 68, 255),
    "La": (136, 68, 255),
    "Ti": (255, 68, 255),
    "Do'": (255, 0, 0),
}

HARMONY_COLOR: Color = (255, 215, 0)
SPRAY_COLOR: Color = (255, 100, 0)


def pitch_for(note: str) -> str:
    return NOTE_PITCHES.get(note, "C4")


def color_for(note: str) -> Color:
    return NOTE_COLORS.get(note, (255, 255, 255))
