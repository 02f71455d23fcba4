"""Music-theory engine: pitch space, scale/chord catalogs, the live scale,
chord detection and progressions."""

from .scale import Scale  # noqa: F401
from .chord import Chord  # noqa: F401
from .detect import detect_chords, describe_chords  # noqa: F401
from .progressions import Progression, ProgressionChord  # noqa: F401
