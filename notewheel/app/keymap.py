from __future__ import annotations

"""Computer-keyboard layout: top letter row plays scale degrees, number row
plays chromatic offsets from the root."""

from typing import Dict, Optional

from ..theory.scale import Scale

SCALE_KEYS: Dict[str, int] = {k: i + 1 for i, k in enumerate("qwertyuiop[]\\")}
CHROMATIC_KEYS: Dict[str, int] = {k: i for i, k in enumerate("1234567890-=")}


def note_for_key(key: str, scale: Scale) -> Optional[str]:
    """Note a key plays in the current scale, or None for unmapped keys."""
    if key in SCALE_KEYS:
        return scale.note_for_degree(SCALE_KEYS[key])
    if key in CHROMATIC_KEYS:
        return scale.note_for_chromatic_offset(CHROMATIC_KEYS[key])
    return None
