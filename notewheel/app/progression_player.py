from __future__ import annotations

"""Timer-driven progression auto-play."""

import logging
from typing import List, Optional

from ..audio.samples import SampleBank
from ..theory.progressions import Progression
from .events import Event, EventBus
from .explain import trace as xtrace
from .scheduler import Scheduler, TimerHandle
from .sounding import PROGRESSION, SoundingNoteSet

logger = logging.getLogger(__name__)


class ProgressionPlayer:
    """Plays the current progression chord, then steps every ``speed_ms``.

    Each chord is released after ``speed_ms * release_fraction`` so chords do
    not overlap.
    """

    def __init__(
        self,
        progression: Progression,
        sounding: SoundingNoteSet,
        bank: SampleBank,
        scheduler: Scheduler,
        speed_ms: int = 1000,
        release_fraction: float = 0.7,
        events: Optional[EventBus] = None,
    ) -> None:
        self.progression = progression
        self.sounding = sounding
        self.bank = bank
        self.scheduler = scheduler
        self.speed_ms = int(speed_ms)
        self.release_fraction = float(release_fraction)
        self.events = events if events is not None else EventBus()
        self.is_playing = False
        self._tick_timer: Optional[TimerHandle] = None
        self._release_timer: Optional[TimerHandle] = None
        self._chord_notes: List[str] = []

    def start(self, speed_ms: Optional[int] = None) -> bool:
        """Begin auto-play from the current step.

        Returns:
            False when no progression is selected.
        """
        if not self.progression.is_active:
            return False
        self.stop()
        if speed_ms is not None:
            self.speed_ms = int(speed_ms)
        self.is_playing = True
        self.play_current_chord()
        self._tick_timer = self.scheduler.call_later(self.speed_ms, self._tick)
        return True

    def _tick(self) -> None:
        self._tick_timer = None
        if not self.is_playing:
            return
        chord = self.progression.next()
        if chord is None:
            self.stop()
            return
        self.events.emit(Event.PROGRESSION_CHANGED, {"label": chord.label})
        self.play_current_chord()
        self._tick_timer = self.scheduler.call_later(self.speed_ms, self._tick)

    def play_current_chord(self) -> List[str]:
        """Replace the previously played chord with the current one."""
        self._release_chord()
        chord = self.progression.current_chord()
        notes = self.progression.current_chord_notes()
        for note in notes:
            self.sounding.add(note, PROGRESSION)
            self.bank.play_note(note)
            self.events.emit(Event.NOTE_ON, {"note": note, "source": PROGRESSION})
        self._chord_notes = notes
        if chord is not None:
            xtrace("progression_step", {"label": chord.label, "notes": notes})
        self._release_timer = self.scheduler.call_later(
            self.speed_ms * self.release_fraction, self._release_chord
        )
        return notes

    def _release_chord(self) -> None:
        if self._release_timer is not None:
            self._release_timer.cancel()
            self._release_timer = None
        for note in self._chord_notes:
            if self.sounding.release(note, PROGRESSION):
                self.bank.stop_note(note)
                self.events.emit(Event.NOTE_OFF, {"note": note, "source": PROGRESSION})
        self._chord_notes = []

    def stop(self) -> None:
        self.is_playing = False
        if self._tick_timer is not None:
            self._tick_timer.cancel()
            self._tick_timer = None
        self._release_chord()
        for note in self.sounding.release_all(PROGRESSION):
            self.bank.stop_note(note)
            self.events.emit(Event.NOTE_OFF, {"note": note, "source": PROGRESSION})
