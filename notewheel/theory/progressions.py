from __future__ import annotations

"""Chord progressions as scale-degree sequences, with a stepping cursor."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..errors import UnknownProgression
from .chord import roman_numeral
from .chords import build_triad
from .scale import Scale


PROGRESSIONS: Dict[str, List[int]] = {
    "1-4-5-1": [1, 4, 5, 1],
    "1-5-6-4": [1, 5, 6, 4],
    "2-5-1": [2, 5, 1],
    "1-6-4-5": [1, 6, 4, 5],
    "6-4-1-5": [6, 4, 1, 5],
    "1-4-6-5": [1, 4, 6, 5],
    "12-bar-blues": [1, 1, 1, 1, 4, 4, 1, 1, 5, 4, 1, 5],
}

PROGRESSION_LABELS: Dict[str, str] = {
    "1-4-5-1": "I-IV-V-I",
    "1-5-6-4": "I-V-vi-IV (Pop)",
    "2-5-1": "ii-V-I (Jazz)",
    "1-6-4-5": "I-vi-IV-V (50s)",
    "6-4-1-5": "vi-IV-I-V",
    "1-4-6-5": "I-IV-vi-V",
    "12-bar-blues": "12-Bar Blues",
}


def get_progression_names() -> List[str]:
    return list(PROGRESSIONS.keys())


@dataclass(frozen=True)
class ProgressionChord:
    """The chord under the cursor, resolved against the live scale."""

    degree: int
    root: str
    quality: str
    numeral: str
    step: int        # 1-based position
    total: int

    @property
    def name(self) -> str:
        return f"{self.root}{self.quality}"

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.numeral})"

    @property
    def label(self) -> str:
        return f"{self.step}/{self.total}: {self.display_name}"


class Progression:
    """Progression cursor bound to a session's Scale.

    Idle while no progression is selected; otherwise tracks a zero-based step
    index that wraps in both directions. Chords are resolved lazily so a scale
    change is reflected on the next read.
    """

    def __init__(self, scale: Scale) -> None:
        self.scale = scale
        self.name: Optional[str] = None
        self.step_index = 0

    @property
    def is_active(self) -> bool:
        return self.name is not None

    @property
    def steps(self) -> List[int]:
        if self.name is None:
            return []
        return list(PROGRESSIONS[self.name])

    def set_progression(self, name: Optional[str]) -> Optional[ProgressionChord]:
        """Select a progression by name; None or "" returns to idle.

        Raises:
            UnknownProgression: if the name is not registered.
        """
        if not name:
            self.name = None
            self.step_index = 0
            return None
        if name not in PROGRESSIONS:
            raise UnknownProgression(f"Unknown progression: {name!r}")
        self.name = name
        self.step_index = 0
        return self.current_chord()

    def next(self) -> Optional[ProgressionChord]:
        if self.name is None:
            return None
        self.step_index = (self.step_index + 1) % len(PROGRESSIONS[self.name])
        return self.current_chord()

    def previous(self) -> Optional[ProgressionChord]:
        if self.name is None:
            return None
        count = len(PROGRESSIONS[self.name])
        self.step_index = (self.step_index - 1 + count) % count
        return self.current_chord()

    def current_chord(self) -> Optional[ProgressionChord]:
        if self.name is None:
            return None
        steps = PROGRESSIONS[self.name]
        degree = steps[self.step_index]
        quality = self.scale.chord_quality_for_degree(degree)
        return ProgressionChord(
            degree=degree,
            root=self.scale.note_for_degree(degree),
            quality=quality,
            numeral=roman_numeral(degree, quality),
            step=self.step_index + 1,
            total=len(steps),
        )

    def current_chord_notes(self) -> List[str]:
        chord = self.current_chord()
        if chord is None:
            return []
        return build_triad(chord.root, chord.quality)
