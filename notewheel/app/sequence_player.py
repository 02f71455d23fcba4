from __future__ import annotations

"""SequencePlayer: plays scripted demo sequences against a session.

Playing a sequence first applies its configuration patch (which may reload
instrument samples and only then continues), then walks the events: each
event turns its notes on, schedules their release after ``sustain`` and the
next event after ``duration``. Every deferred step is a cancellable timer
handle; ``stop`` cancels them all and retracts only the notes this player
added.
"""

import logging
import threading
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence as Seq, Union

from ..audio.samples import SampleBank
from ..errors import InvalidNote, MalformedSequence, UnknownScaleType
from ..sequence.compact import from_compact
from ..sequence.models import (
    DEFAULT_DURATION_MS,
    DEFAULT_SUSTAIN_FRACTION,
    NoteSpec,
    Sequence,
    SequenceConfig,
    SequenceEvent,
    parse_sequence,
)
from ..sequence.resolve import resolve_notes
from ..theory.note_utils import is_note_name, note_to_index
from ..theory.scale import Scale
from ..theory.scales import canonical_scale_name
from .display import DisplayState
from .events import Event, EventBus
from .explain import trace as xtrace
from .scheduler import Scheduler, TimerHandle
from .sounding import SEQUENCE, SoundingNoteSet

logger = logging.getLogger(__name__)

SequenceInput = Union[str, Sequence, Dict[str, Any]]


class PlaybackHandle:
    """Awaitable result of ``SequencePlayer.play``."""

    def __init__(self, sequence: Sequence) -> None:
        self.sequence = sequence
        self.cancelled = False
        self._done = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until playback finishes or is stopped (real-time schedulers)."""
        return self._done.wait(timeout)

    def _finish(self, cancelled: bool = False) -> None:
        self.cancelled = cancelled
        self._done.set()


class SequencePlayer:
    def __init__(
        self,
        scale: Scale,
        sounding: SoundingNoteSet,
        bank: SampleBank,
        scheduler: Scheduler,
        display: Optional[DisplayState] = None,
        events: Optional[EventBus] = None,
    ) -> None:
        self.scale = scale
        self.sounding = sounding
        self.bank = bank
        self.scheduler = scheduler
        self.display = display if display is not None else DisplayState()
        self.events = events if events is not None else EventBus()

        self._handle: Optional[PlaybackHandle] = None
        self._sequence: Optional[Sequence] = None
        self._index = 0
        self._advance_timer: Optional[TimerHandle] = None
        self._release_timers: List[TimerHandle] = []
        self._held: Counter = Counter()
        self._saved_config: Optional[SequenceConfig] = None

    @property
    def is_playing(self) -> bool:
        return self._handle is not None

    @property
    def event_index(self) -> int:
        return self._index

    # Configuration
    def save_current_config(self) -> None:
        self._saved_config = SequenceConfig(
            temperament=self.bank.name,
            root=self.scale.root_name,
            scale=self.scale.scale_type,
            fifths=self.display.fifths,
            chromatic_colors=self.display.chromatic_colors,
        )

    def restore_config(self) -> None:
        if self._saved_config is None:
            return
        cfg = self._saved_config
        self._saved_config = None
        self.apply_config(cfg)

    @staticmethod
    def check_config(config: SequenceConfig) -> None:
        """Reject patches naming an unknown root or scale type.

        Raises:
            MalformedSequence
        """
        try:
            if config.root is not None:
                note_to_index(config.root)
            if config.scale is not None:
                canonical_scale_name(config.scale)
        except (InvalidNote, UnknownScaleType) as e:
            raise MalformedSequence(str(e)) from e

    @classmethod
    def prepare(cls, sequence: SequenceInput) -> Sequence:
        """Parse and check a sequence without touching playback state.

        Raises:
            MalformedSequence
        """
        if isinstance(sequence, str):
            seq = from_compact(sequence)
        else:
            seq = parse_sequence(sequence)
        cls.check_config(seq.config)
        return seq

    def apply_config(self, config: Optional[SequenceConfig]) -> None:
        if config is None:
            return
        if config.temperament and config.temperament != self.bank.name:
            # Blocks until the new samples are loaded
            self.bank.set_instrument(config.temperament)
            self.events.emit(Event.INSTRUMENT_CHANGED, {"instrument": config.temperament})

        root = config.root or self.scale.root_name
        scale_type = canonical_scale_name(config.scale) if config.scale else self.scale.scale_type
        if root != self.scale.root_name or scale_type != self.scale.scale_type:
            self.scale.set_scale(root, scale_type)
            self.events.emit(Event.SCALE_CHANGED, {"root": root, "scale": scale_type})

        display_changed = False
        if config.fifths is not None:
            self.display.fifths = config.fifths
            display_changed = True
        if config.chromatic_colors is not None:
            self.display.chromatic_colors = config.chromatic_colors
            display_changed = True
        if display_changed:
            self.events.emit(Event.DISPLAY_CHANGED, {
                "fifths": self.display.fifths,
                "chromatic_colors": self.display.chromatic_colors,
            })

    # Playback
    def play(self, sequence: SequenceInput, save_config: bool = False) -> PlaybackHandle:
        """Start a sequence, cancelling whatever was playing.

        Args:
            sequence: Compact string, Sequence, or structured dict.
            save_config: Snapshot the current configuration and restore it
                when playback ends.

        Raises:
            MalformedSequence: if the sequence cannot be parsed or its patch
                names an unknown root/scale.
        """
        seq = self.prepare(sequence)
        # Rejected input leaves the running sequence alone
        self.stop()

        handle = PlaybackHandle(seq)
        self._handle = handle
        self._sequence = seq
        self._index = 0
        if save_config:
            self.save_current_config()

        xtrace("sequence_started", {"config": seq.config.patch(), "events": len(seq.events)})
        self.apply_config(seq.config)
        self.events.emit(Event.SEQUENCE_STARTED, {"events": len(seq.events)})

        if not seq.events:
            self._finish(cancelled=False)
            return handle
        self._play_next_event()
        return handle

    def play_chord(self, notes: Seq[NoteSpec], duration: int = DEFAULT_DURATION_MS, sustain: Optional[int] = None) -> PlaybackHandle:
        event = SequenceEvent(notes=list(notes), duration=duration, sustain=sustain)
        return self.play(Sequence(events=[event]))

    def demo(self, config: Dict[str, Any], notes: Seq[NoteSpec], duration: int = 2000) -> PlaybackHandle:
        return self.play({
            "config": config,
            "events": [{
                "notes": list(notes),
                "duration": duration,
                "sustain": int(duration * DEFAULT_SUSTAIN_FRACTION),
            }],
        })

    def _resolve(self, event: SequenceEvent) -> List[str]:
        notes: List[str] = []
        for spec, note in zip(event.notes, resolve_notes(event.notes, self.scale)):
            if is_note_name(note):
                notes.append(note)  # type: ignore[arg-type]
            else:
                logger.warning("Skipping unresolved note %r", spec)
        return notes

    def _play_next_event(self) -> None:
        self._advance_timer = None
        if self._handle is None or self._sequence is None:
            return
        events = self._sequence.events
        if self._index >= len(events):
            self._finish(cancelled=False)
            return

        event = events[self._index]
        notes = self._resolve(event)
        for note in notes:
            self.sounding.add(note, SEQUENCE)
            self._held[note] += 1
            self.bank.play_note(note)
            self.events.emit(Event.NOTE_ON, {"note": note, "source": SEQUENCE})
        xtrace("sequence_event", {"index": self._index, "notes": notes})

        self._release_timers = [t for t in self._release_timers if t.pending]
        self._release_timers.append(
            self.scheduler.call_later(event.effective_sustain, lambda: self._release(notes))
        )
        self._index += 1
        self._advance_timer = self.scheduler.call_later(event.duration, self._play_next_event)

    def _release(self, notes: List[str]) -> None:
        for note in notes:
            if self._held[note] <= 0:
                continue
            self._held[note] -= 1
            if self._held[note] == 0:
                del self._held[note]
                if self.sounding.release(note, SEQUENCE):
                    self.bank.stop_note(note)
                    self.events.emit(Event.NOTE_OFF, {"note": note, "source": SEQUENCE})

    def _finish(self, cancelled: bool) -> None:
        handle = self._handle
        self._handle = None
        self._sequence = None
        self._index = 0
        if self._saved_config is not None:
            self.restore_config()
        if handle is not None:
            handle._finish(cancelled=cancelled)
            xtrace("sequence_finished", {"cancelled": cancelled})
            self.events.emit(Event.SEQUENCE_FINISHED, {"cancelled": cancelled})

    def stop(self) -> None:
        """Cancel pending steps and retract every note this player added."""
        if self._advance_timer is not None:
            self._advance_timer.cancel()
            self._advance_timer = None
        for t in self._release_timers:
            t.cancel()
        self._release_timers = []
        self._held.clear()
        for note in self.sounding.release_all(SEQUENCE):
            self.bank.stop_note(note)
            self.events.emit(Event.NOTE_OFF, {"note": note, "source": SEQUENCE})
        if self._handle is not None:
            self._finish(cancelled=True)
