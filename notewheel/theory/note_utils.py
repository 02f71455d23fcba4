# notewheel/theory/note_utils.py
from __future__ import annotations

"""Pitch space: the fixed 12-tone chromatic universe.

Pitch classes are numbered from A (A=0 ... G#=11). Names are sharp-based; flats
are accepted only through ``normalize_note_name`` for user input.
"""

from typing import Dict, List

from ..errors import InvalidNote

NOTES_PER_OCTAVE = 12

NOTE_NAMES: List[str] = ["A", "A#", "B", "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#"]
NOTE_TO_NUM: Dict[str, int] = {name: i for i, name in enumerate(NOTE_NAMES)}
NUM_TO_NOTE: Dict[int, str] = {i: name for i, name in enumerate(NOTE_NAMES)}

# Perfect fifth above each note. Kept as a table rather than computed.
FIFTHS: Dict[str, str] = {
    "A": "E", "E": "B", "B": "F#", "F#": "C#", "C#": "G#", "G#": "D#",
    "D#": "A#", "A#": "F", "F": "C", "C": "G", "G": "D", "D": "A",
}

_ENHARMONIC: Dict[str, str] = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "B#": "C",
    "E#": "F",
    "Cb": "B",
    "Fb": "E",
}


def is_note_name(name: object) -> bool:
    return isinstance(name, str) and name in NOTE_TO_NUM


def note_to_index(name: str) -> int:
    """Return the pitch-class index (0..11) of a note name.

    Raises:
        InvalidNote: if the name is not one of the 12 sharp-based names.
    """
    try:
        return NOTE_TO_NUM[name]
    except (KeyError, TypeError):
        raise InvalidNote(f"Unknown note name: {name!r}") from None


def index_to_name(index: int) -> str:
    """Return the note name for a pitch-class index 0..11."""
    if isinstance(index, bool) or not isinstance(index, int) or index not in NUM_TO_NOTE:
        raise InvalidNote(f"Pitch index out of range: {index!r}")
    return NUM_TO_NOTE[index]


def transpose(name: str, semitones: int) -> str:
    """Move a note by a number of semitones, wrapping mod 12."""
    return NUM_TO_NOTE[(note_to_index(name) + semitones) % NOTES_PER_OCTAVE]


def fifth_of(name: str) -> str:
    note_to_index(name)
    return FIFTHS[name]


def fifths_from(root: str) -> List[str]:
    """Walk the circle of fifths from ``root``, visiting all 12 notes once."""
    note_to_index(root)
    result = [root]
    last = root
    for _ in range(1, NOTES_PER_OCTAVE):
        last = fifth_of(last)
        result.append(last)
    return result


def normalize_note_name(name: str) -> str:
    """Map loose user input ("db", "Bb", " f# ") onto a canonical name."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidNote(f"Unknown note name: {name!r}")
    s = name.strip()
    s = s[0].upper() + s[1:]
    s = _ENHARMONIC.get(s, s)
    note_to_index(s)
    return s
