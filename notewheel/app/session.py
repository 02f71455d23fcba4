from __future__ import annotations

"""ExplorerSession: one interactive note-wheel session.

Owns every piece of mutable per-session state (scale, progression cursor,
sounding notes, display flags, players) so independent sessions can coexist.
Front ends call the input handlers here and read state back for drawing.
"""

import functools
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ..audio.playback import make_backend_from_config
from ..audio.samples import SampleBank
from ..config.config import load_config, validate_config
from ..errors import MalformedSequence
from ..sequence.compact import from_url
from ..theory.chords import FIFTH_SUFFIX
from ..theory.detect import detect_chords
from ..theory.progressions import Progression, ProgressionChord
from ..theory.scale import NoteInfo, Scale
from .display import DisplayState
from .events import Event, EventBus
from .explain import trace as xtrace
from .keymap import note_for_key
from .progression_player import ProgressionPlayer
from .scheduler import Scheduler, ThreadingScheduler
from .sequence_player import PlaybackHandle, SequenceInput, SequencePlayer
from .sounding import KEYBOARD, MOUSE, SoundingNoteSet

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _serialized(method: F) -> F:
    """Run a session entry point under the scheduler lock, so input handlers
    never interleave with timer callbacks."""

    @functools.wraps(method)
    def wrapper(self: "ExplorerSession", *args: Any, **kwargs: Any) -> Any:
        with self.scheduler.lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class ExplorerSession:
    def __init__(
        self,
        cfg: Optional[Dict[str, Any]] = None,
        bank: Optional[SampleBank] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.cfg = validate_config(cfg if cfg is not None else load_config())
        audio = self.cfg["audio"]
        context = self.cfg["context"]
        display = self.cfg["display"]
        playback = self.cfg["playback"]

        self.events = EventBus()
        self.scale = Scale(context["root"], context["scale"])
        self.progression = Progression(self.scale)
        self.sounding = SoundingNoteSet()
        self.display = DisplayState(
            fifths=display["fifths"],
            chromatic_colors=display["chromatic_colors"],
        )
        self.scheduler = scheduler if scheduler is not None else ThreadingScheduler()
        if bank is None:
            bank = SampleBank(
                make_backend_from_config(self.cfg),
                samples_path=audio["samples_path"],
                instrument=audio["instrument"],
                sample_ext=audio["sample_ext"],
                release_fade_ms=audio["release_fade_ms"],
                instruments=audio["instruments"],
            )
        self.bank = bank

        self.sequence_player = SequencePlayer(
            self.scale, self.sounding, self.bank, self.scheduler,
            display=self.display, events=self.events,
        )
        self.progression_player = ProgressionPlayer(
            self.progression, self.sounding, self.bank, self.scheduler,
            speed_ms=playback["progression_speed_ms"],
            release_fraction=playback["progression_release_fraction"],
            events=self.events,
        )

    @_serialized
    def load_samples(self) -> int:
        return self.bank.load_instrument(self.bank.name)

    # Scale
    @_serialized
    def set_scale(self, root: str, scale_type: str) -> None:
        self.scale.set_scale(root, scale_type)
        xtrace("scale_changed", {"root": self.scale.root_name, "scale": self.scale.scale_type})
        self.events.emit(Event.SCALE_CHANGED, {
            "root": self.scale.root_name,
            "scale": self.scale.scale_type,
            "info": self.scale_info(),
        })
        if self.progression.is_active:
            chord = self.progression.current_chord()
            self.events.emit(Event.PROGRESSION_CHANGED, {"label": chord.label if chord else None})

    def scale_info(self) -> str:
        parent = self.scale.parent_major()
        if parent:
            return f"Mode of {parent} Major"
        return ""

    @_serialized
    def set_instrument(self, name: str) -> None:
        self.bank.set_instrument(name)
        self.events.emit(Event.INSTRUMENT_CHANGED, {"instrument": name})

    def note_info(self, note: str) -> NoteInfo:
        return self.scale.note_info(note)

    # Keyboard / mouse
    @_serialized
    def key_pressed(self, key: str) -> Optional[str]:
        note = note_for_key(key, self.scale)
        if note is None:
            return None
        if not self.sounding.is_playing(note):
            self.bank.play_note(note)
            self.events.emit(Event.NOTE_ON, {"note": note, "source": KEYBOARD})
        self.sounding.add(note, KEYBOARD)
        return note

    @_serialized
    def key_released(self, key: str) -> Optional[str]:
        note = note_for_key(key, self.scale)
        if note is None:
            return None
        if self.sounding.release(note, KEYBOARD):
            self.bank.stop_note(note)
            self.events.emit(Event.NOTE_OFF, {"note": note, "source": KEYBOARD})
        return note

    @_serialized
    def toggle_note(self, note: str) -> bool:
        """Mouse click on a wheel note. Returns True if the mouse now holds it."""
        if MOUSE in self.sounding.owners(note):
            if self.sounding.release(note, MOUSE):
                self.bank.stop_note(note)
                self.events.emit(Event.NOTE_OFF, {"note": note, "source": MOUSE})
            return False
        if self.sounding.add(note, MOUSE):
            self.bank.play_note(note)
            self.events.emit(Event.NOTE_ON, {"note": note, "source": MOUSE})
        return True

    # Progressions
    @_serialized
    def set_progression(self, name: Optional[str]) -> Optional[ProgressionChord]:
        self.progression_player.stop()
        chord = self.progression.set_progression(name)
        self.events.emit(Event.PROGRESSION_CHANGED, {"label": chord.label if chord else None})
        return chord

    @_serialized
    def next_chord(self) -> Optional[ProgressionChord]:
        chord = self.progression.next()
        if self.progression_player.is_playing:
            self.progression_player.play_current_chord()
        return chord

    @_serialized
    def previous_chord(self) -> Optional[ProgressionChord]:
        chord = self.progression.previous()
        if self.progression_player.is_playing:
            self.progression_player.play_current_chord()
        return chord

    @_serialized
    def start_progression_playback(self, speed_ms: Optional[int] = None) -> bool:
        # Auto-play and sequence playback share the sounding set; run one at a time
        self.sequence_player.stop()
        return self.progression_player.start(speed_ms)

    @_serialized
    def stop_progression_playback(self) -> None:
        self.progression_player.stop()

    # Sequences
    @_serialized
    def play_sequence(self, sequence: SequenceInput, save_config: bool = False) -> PlaybackHandle:
        """Play a sequence; raises MalformedSequence for bad input."""
        seq = self.sequence_player.prepare(sequence)
        self.progression_player.stop()
        return self.sequence_player.play(seq, save_config=save_config)

    def play_demo(self, sequence: SequenceInput, save_config: bool = False) -> Optional[PlaybackHandle]:
        """Play a user-supplied demo; a malformed one is logged and ignored."""
        try:
            return self.play_sequence(sequence, save_config=save_config)
        except MalformedSequence as e:
            logger.warning("Ignoring malformed demo: %s", e)
            return None

    def play_url_demo(self, query_string: str) -> Optional[PlaybackHandle]:
        try:
            seq = from_url(query_string)
        except MalformedSequence as e:
            logger.warning("Ignoring malformed demo in URL: %s", e)
            return None
        if seq is None:
            return None
        return self.play_demo(seq)

    # Read-side helpers for the view
    def detected_chords(self) -> Dict[str, List[str]]:
        return detect_chords(self.sounding)

    @_serialized
    def status_line(self) -> str:
        config_text = f"{self.bank.name} | {self.scale.display_name}"
        parent = self.scale.parent_major()
        if parent:
            config_text += f" (Mode of {parent} Major)"

        notes = self.sounding.notes()
        if not notes:
            return f"{config_text} | No notes playing"
        chords = [c for c in self.detected_chords() if not c.endswith(FIFTH_SUFFIX)]
        if chords:
            return f"{config_text} | {chords[0]} ({', '.join(notes)})"
        return f"{config_text} | {', '.join(notes)}"

    @_serialized
    def snapshot(self) -> Dict[str, Any]:
        """Everything the wheel needs to draw one frame."""
        return {
            "root": self.scale.root_name,
            "scale": self.scale.scale_type,
            "in_scale": self.scale.notes(),
            "sounding": self.sounding.notes(),
            "chords": self.detected_chords(),
            "fifths": self.display.fifths,
            "chromatic_colors": self.display.chromatic_colors,
            "progression": (self.progression.current_chord().label if self.progression.is_active else None),
        }

    # Lifecycle
    @_serialized
    def stop_all(self) -> None:
        self.sequence_player.stop()
        self.progression_player.stop()
        for note in self.sounding.release_all():
            self.bank.stop_note(note)
            self.events.emit(Event.NOTE_OFF, {"note": note, "source": None})

    @_serialized
    def reset(self) -> None:
        self.stop_all()
        self.set_progression(None)
        self.set_scale("C", "Major")
        self.display.fifths = False
        self.display.chromatic_colors = True
        self.events.emit(Event.DISPLAY_CHANGED, {"fifths": False, "chromatic_colors": True})

    def close(self) -> None:
        self.stop_all()
        self.scheduler.shutdown()
        self.bank.close()
