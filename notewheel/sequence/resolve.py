from __future__ import annotations

"""Resolve symbolic note specifications against the live scale.

Three forms are recognised:
    "C", "F#"   absolute note name
    3, "3"      1-based scale degree (wraps past the end of the scale)
    "s4"        semitone offset from the current root
Anything else is passed through untouched.
"""

import re
from typing import Iterable, List

from ..theory.scale import Scale
from .models import NoteSpec

_NOTE_NAME = re.compile(r"^[A-G]#?$")
_DEGREE = re.compile(r"^\d+$")
_OFFSET = re.compile(r"^s(\d+)$")


def resolve_note(spec: NoteSpec, scale: Scale) -> NoteSpec:
    if isinstance(spec, bool):
        return spec
    if isinstance(spec, int):
        return scale.note_for_degree(spec)
    if isinstance(spec, str):
        if _NOTE_NAME.match(spec):
            return spec
        if _DEGREE.match(spec):
            return scale.note_for_degree(int(spec))
        m = _OFFSET.match(spec)
        if m:
            return scale.note_for_chromatic_offset(int(m.group(1)))
    return spec


def resolve_notes(specs: Iterable[NoteSpec], scale: Scale) -> List[NoteSpec]:
    return [resolve_note(s, scale) for s in specs]
