from __future__ import annotations
from dataclasses import dataclass


@dataclass
class DisplayState:
    """Wheel display flags read by the visualization each frame."""

    fifths: bool = False            # order notes by fifths instead of chromatically
    chromatic_colors: bool = True   # color notes by chromatic position
