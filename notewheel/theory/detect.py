from __future__ import annotations

"""Chord detection over the set of currently sounding notes."""

from typing import Dict, Iterable, List

from .chords import CHORD_PATTERNS, FIFTH_SUFFIX
from .note_utils import NOTES_PER_OCTAVE, NUM_TO_NOTE, note_to_index


def detect_chords(sounding: Iterable[str]) -> Dict[str, List[str]]:
    """Find every (root, chord type) whose notes are all sounding.

    Each sounding note is tried as a root against every catalog entry. A match
    is keyed ``root + suffix`` and maps to the chord's notes in pattern order.
    Overlapping matches are all reported; no ranking is applied here.

    Args:
        sounding: Note names; duplicates are ignored.

    Returns:
        Ordered mapping of chord symbol to note list.
    """
    notes = list(dict.fromkeys(sounding))
    present = {note_to_index(n) for n in notes}

    found: Dict[str, List[str]] = {}
    for root in notes:
        root_num = note_to_index(root)
        for suffix, pattern in CHORD_PATTERNS.items():
            needed = [(root_num + i) % NOTES_PER_OCTAVE for i in pattern]
            if all(n in present for n in needed):
                found[root + suffix] = [NUM_TO_NOTE[n] for n in needed]
    return found


def describe_chords(detected: Dict[str, List[str]]) -> List[str]:
    """Chord symbols worth displaying: bare fifths are dropped when anything
    richer matched."""
    names = list(detected.keys())
    richer = [n for n in names if not n.endswith(FIFTH_SUFFIX)]
    return richer if richer else names
