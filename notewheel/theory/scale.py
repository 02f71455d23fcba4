from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from .chord import Chord
from .note_utils import NOTES_PER_OCTAVE, NUM_TO_NOTE, note_to_index, transpose
from .scales import canonical_scale_name, is_major_family, parent_major_of, pattern_for


DIATONIC_DEGREE_NAMES = ["Tonic", "Supertonic", "Mediant", "Subdominant", "Dominant", "Submediant"]


@dataclass(frozen=True)
class NoteInfo:
    """What the wheel shows when hovering over a note."""

    name: str
    index: int
    in_scale: bool
    degree: Optional[int]
    degree_name: Optional[str]


class Scale:
    """The live key of a session: root + scale type and everything derived.

    ``set_scale`` recomputes the derived tables in full; nothing else mutates
    them.
    """

    def __init__(self, root_name: str = "C", scale_type: str = "Major") -> None:
        self.root_name = "C"
        self.scale_type = "Major"
        self._pattern: List[int] = []
        self._degree_to_note: Dict[int, str] = {}
        self._note_to_degree: Dict[str, int] = {}
        self.set_scale(root_name, scale_type)

    def set_scale(self, root_name: str, scale_type: str) -> None:
        """Set root and scale type.

        Raises:
            InvalidNote: unknown root.
            UnknownScaleType: unknown scale type.
        """
        root_num = note_to_index(root_name)
        scale_type = canonical_scale_name(scale_type)
        pattern = pattern_for(scale_type)

        degree_to_note: Dict[int, str] = {}
        for d in range(1, len(pattern) + 1):
            degree_to_note[d] = NUM_TO_NOTE[(root_num + pattern[d - 1]) % NOTES_PER_OCTAVE]

        self.root_name = root_name
        self.scale_type = scale_type
        self._pattern = pattern
        self._degree_to_note = degree_to_note
        self._note_to_degree = {n: d for d, n in degree_to_note.items()}

    @property
    def pattern(self) -> List[int]:
        return list(self._pattern)

    @property
    def size(self) -> int:
        return len(self._pattern)

    @property
    def display_name(self) -> str:
        return f"{self.root_name} {self.scale_type}"

    def notes(self) -> List[str]:
        """In-scale note names ordered by degree."""
        return [self._degree_to_note[d] for d in range(1, self.size + 1)]

    def _wrap_degree(self, degree: int) -> int:
        return ((degree - 1) % self.size) + 1

    def note_for_degree(self, degree: int) -> str:
        """Note at a 1-based scale degree; degrees past the end wrap around."""
        return self._degree_to_note[self._wrap_degree(degree)]

    def note_for_chromatic_offset(self, semitones: int) -> str:
        return transpose(self.root_name, semitones)

    def degree_of(self, note: str) -> Optional[int]:
        note_to_index(note)
        return self._note_to_degree.get(note)

    def is_in_scale(self, note: str) -> bool:
        return self.degree_of(note) is not None

    def relative_key(self) -> str:
        if is_major_family(self.scale_type):
            return transpose(self.root_name, -3)
        return transpose(self.root_name, 3)

    def parent_major(self) -> Optional[str]:
        return parent_major_of(self.root_name, self.scale_type)

    def chord_quality_for_degree(self, degree: int) -> str:
        """Triad quality ("", "m", "dim" or "aug") stacked on a degree.

        Thirds and fifths are taken two and four pattern steps up, wrapping
        around the pattern. Interval combinations other than the four triads
        fall back to major.
        """
        size = self.size
        if size < 5:
            return ""
        d = self._wrap_degree(degree)
        root_off = self._pattern[d - 1]
        third_off = self._pattern[(d + 1) % size]
        fifth_off = self._pattern[(d + 3) % size]

        third = third_off - root_off
        if third < 0:
            third += NOTES_PER_OCTAVE
        fifth = fifth_off - root_off
        if fifth < 0:
            fifth += NOTES_PER_OCTAVE

        if third == 3 and fifth == 6:
            return "dim"
        if third == 4 and fifth == 8:
            return "aug"
        if third == 3:
            return "m"
        return ""

    def chord_for_degree(self, degree: int) -> Chord:
        d = self._wrap_degree(degree)
        return Chord(
            root_name=self.note_for_degree(d),
            quality=self.chord_quality_for_degree(d),
            degree=d,
        )

    def diatonic_chords(self) -> List[Chord]:
        return [self.chord_for_degree(d) for d in range(1, self.size + 1)]

    def degree_name(self, degree: int) -> str:
        """Functional name of a degree for 7-note scales, else the number."""
        if self.size != 7:
            return str(degree)
        if degree == 7:
            return "Leading Tone" if self._pattern[6] == 11 else "Subtonic"
        return DIATONIC_DEGREE_NAMES[degree - 1]

    def note_info(self, note: str) -> NoteInfo:
        degree = self.degree_of(note)
        return NoteInfo(
            name=note,
            index=note_to_index(note),
            in_scale=degree is not None,
            degree=degree,
            degree_name=self.degree_name(degree) if degree is not None else None,
        )

    def __repr__(self) -> str:
        return f"Scale({self.root_name!r}, {self.scale_type!r})"
