from __future__ import annotations
from dataclasses import dataclass
from typing import List

from .chords import build_triad

ROMAN_NUMERALS = ["I", "II", "III", "IV", "V", "VI", "VII"]


def roman_numeral(degree: int, quality: str) -> str:
    """Roman numeral for a degree: upper case for major/augmented, lower for
    minor/diminished, with a "°" or "+" suffix for diminished/augmented."""
    numeral = ROMAN_NUMERALS[(degree - 1) % len(ROMAN_NUMERALS)]
    if quality in ("m", "dim"):
        numeral = numeral.lower()
    if quality == "dim":
        numeral += "°"
    elif quality == "aug":
        numeral += "+"
    return numeral


@dataclass(frozen=True)
class Chord:
    """A diatonic triad built on one scale degree."""

    root_name: str
    quality: str     # "" | "m" | "dim" | "aug"
    degree: int      # 1-based scale degree

    @property
    def name(self) -> str:
        """Chord symbol such as 'Dm' or 'Bdim'."""
        return f"{self.root_name}{self.quality}"

    def to_symbol(self) -> str:
        """Return the Roman numeral, e.g. 'ii' or 'vii°'."""
        return roman_numeral(self.degree, self.quality)

    def notes(self) -> List[str]:
        return build_triad(self.root_name, self.quality)
