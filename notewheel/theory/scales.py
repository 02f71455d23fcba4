from __future__ import annotations

"""Scale catalog: named interval patterns and mode relations.

Patterns are ascending semitone offsets from the root, starting at 0.
"""

from typing import Dict, List, Optional

from ..errors import UnknownScaleType
from .note_utils import NOTES_PER_OCTAVE, NUM_TO_NOTE, note_to_index


SCALE_PATTERNS: Dict[str, List[int]] = {
    "Major": [0, 2, 4, 5, 7, 9, 11],
    "Minor": [0, 2, 3, 5, 7, 8, 10],
    "Minor Pentatonic": [0, 3, 5, 7, 10],
    "Major Pentatonic": [0, 2, 4, 7, 9],
    "Blues": [0, 3, 5, 6, 7, 10],
    "Ionian": [0, 2, 4, 5, 7, 9, 11],
    "Dorian": [0, 2, 3, 5, 7, 9, 10],
    "Phrygian": [0, 1, 3, 5, 7, 8, 10],
    "Lydian": [0, 2, 4, 6, 7, 9, 11],
    "Mixolydian": [0, 2, 4, 5, 7, 9, 10],
    "Aeolian": [0, 2, 3, 5, 7, 8, 10],
    "Locrian": [0, 1, 3, 5, 6, 8, 10],
}

# Semitone offset from a mode's root to its parent major root.
MODE_OFFSETS: Dict[str, int] = {
    "Ionian": 0,
    "Dorian": -2,
    "Phrygian": -4,
    "Lydian": -5,
    "Mixolydian": -7,
    "Aeolian": -9,
    "Locrian": -11,
}

# Relative key lies 3 semitones below the root for these, above for the rest.
MAJOR_FAMILY = {"Major", "Ionian", "Lydian", "Mixolydian", "Major Pentatonic"}

SCALE_ALIASES: Dict[str, str] = {
    "Minor Pent.": "Minor Pentatonic",
    "Major Pent.": "Major Pentatonic",
}


def get_scale_names() -> List[str]:
    return list(SCALE_PATTERNS.keys())


def canonical_scale_name(scale_type: str) -> str:
    """Resolve aliases and validate a scale type name."""
    name = SCALE_ALIASES.get(scale_type, scale_type)
    if name not in SCALE_PATTERNS:
        raise UnknownScaleType(f"Unsupported scale_type: {scale_type!r}")
    return name


def pattern_for(scale_type: str) -> List[int]:
    """Return a copy of the interval pattern for a scale type.

    Raises:
        UnknownScaleType: if the name is neither a scale type nor an alias.
    """
    return list(SCALE_PATTERNS[canonical_scale_name(scale_type)])


def is_major_family(scale_type: str) -> bool:
    return canonical_scale_name(scale_type) in MAJOR_FAMILY


def parent_major_of(root: str, scale_type: str) -> Optional[str]:
    """Return the parent major key of a mode, or None.

    None is returned when the scale type has no registered mode relation or
    when the parent is the root itself (the scale is a tonic form).
    """
    root_num = note_to_index(root)
    offset = MODE_OFFSETS.get(canonical_scale_name(scale_type))
    if offset is None:
        return None
    parent = NUM_TO_NOTE[(root_num + offset) % NOTES_PER_OCTAVE]
    if parent == root:
        return None
    return parent
