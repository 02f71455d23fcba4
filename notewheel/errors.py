from __future__ import annotations

"""Exception taxonomy for NoteWheel.

Theory errors signal caller bugs and propagate. Sequence errors come from
user-supplied strings and are recovered at the session boundary. Sample load
failures never leave the audio layer.
"""


class NoteWheelError(Exception):
    """Base class for all NoteWheel errors."""


class InvalidNote(NoteWheelError, ValueError):
    """A note name or pitch index outside the 12-entry table."""


class UnknownScaleType(NoteWheelError, ValueError):
    pass


class UnknownChordType(NoteWheelError, ValueError):
    pass


class UnknownProgression(NoteWheelError, ValueError):
    pass


class MalformedSequence(NoteWheelError, ValueError):
    """A compact or structured sequence that violates the grammar."""


class SampleLoadFailure(NoteWheelError):
    """Raised by audio backends when a sample file cannot be decoded."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        msg = f"Failed to load sample: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
