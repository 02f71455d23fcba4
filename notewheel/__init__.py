"""NoteWheel package initialization.

An interactive music-theory explorer engine: a rotating note wheel driven by
scales, chord detection, progressions and scripted demo sequences.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
