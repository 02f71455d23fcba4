from __future__ import annotations

"""Chord catalog: chord suffix symbols and their interval sets."""

from typing import Dict, List

from ..errors import UnknownChordType
from .note_utils import NOTES_PER_OCTAVE, NUM_TO_NOTE, note_to_index


CHORD_PATTERNS: Dict[str, List[int]] = {
    "": [0, 4, 7],
    "7": [0, 4, 7, 10],
    "M7": [0, 4, 7, 11],
    "m": [0, 3, 7],
    "m7": [0, 3, 7, 10],
    "f": [0, 7],
    "dim": [0, 3, 6],
    "ø7": [0, 3, 6, 10],
    "dim7": [0, 3, 6, 9],
    "aug": [0, 4, 8],
}

CHORD_NAMES: Dict[str, str] = {
    "": "major",
    "7": "dominant 7th",
    "M7": "major 7th",
    "m": "minor",
    "m7": "minor 7th",
    "f": "fifth",
    "dim": "diminished",
    "ø7": "half-diminished 7th",
    "dim7": "diminished 7th",
    "aug": "augmented",
}

FIFTH_SUFFIX = "f"

# Triads used when a progression step is expanded into notes.
TRIAD_INTERVALS: Dict[str, List[int]] = {
    "": [0, 4, 7],
    "m": [0, 3, 7],
    "dim": [0, 3, 6],
    "aug": [0, 4, 8],
}


def chord_pattern(suffix: str) -> List[int]:
    try:
        return list(CHORD_PATTERNS[suffix])
    except KeyError:
        raise UnknownChordType(f"Unsupported chord type: {suffix!r}") from None


def build_chord(root: str, suffix: str) -> List[str]:
    """Return the note names of a chord, root first, in pattern order."""
    root_num = note_to_index(root)
    return [NUM_TO_NOTE[(root_num + i) % NOTES_PER_OCTAVE] for i in chord_pattern(suffix)]


def build_triad(root: str, quality: str) -> List[str]:
    root_num = note_to_index(root)
    try:
        intervals = TRIAD_INTERVALS[quality]
    except KeyError:
        raise UnknownChordType(f"Unsupported triad quality: {quality!r}") from None
    return [NUM_TO_NOTE[(root_num + i) % NOTES_PER_OCTAVE] for i in intervals]
