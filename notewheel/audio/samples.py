from __future__ import annotations

"""SampleBank: per-instrument note samples on top of a SampleBackend.

Handles are looked up by ``instrument name + note name`` (e.g.
"PythagoreanG#"). A sample that fails to load is stored as None and playing
it is a silent no-op, so theory state changes never wait on audio assets.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..errors import SampleLoadFailure
from ..theory.note_utils import NOTE_NAMES
from .synthesis import SampleBackend

logger = logging.getLogger(__name__)

DEFAULT_INSTRUMENTS = [
    "Equal Tempered",
    "Well Tempered",
    "Carlos Super Just",
    "Pythagorean",
]

ProgressCallback = Callable[[float, int, int], None]


class SampleBank:
    def __init__(
        self,
        backend: SampleBackend,
        samples_path: str = "./assets/sounds",
        instrument: str = "Equal Tempered",
        sample_ext: str = "mp3",
        release_fade_ms: int = 100,
        instruments: Optional[List[str]] = None,
    ) -> None:
        self.backend = backend
        self.samples_path = Path(samples_path)
        self.sample_ext = sample_ext
        self.release_fade_ms = int(release_fade_ms)
        self.available_instruments = list(instruments or DEFAULT_INSTRUMENTS)
        self.instrument_name = instrument
        self.on_load_progress: Optional[ProgressCallback] = None
        self.on_load_complete: Optional[Callable[[], None]] = None

        self._sounds: Dict[str, Any] = {}
        self._playing: set[str] = set()
        self._loaded_instrument: Optional[str] = None
        self.is_loading = False
        self.loaded = 0
        self.total = 0

    @property
    def name(self) -> str:
        return self.instrument_name

    def sample_path(self, instrument: str, note: str) -> Path:
        return self.samples_path / f"{instrument}{note}.{self.sample_ext}"

    def load_instrument(self, instrument: Optional[str] = None) -> int:
        """Load all 12 note samples for an instrument, replacing the old set.

        Returns:
            Number of samples that loaded successfully.
        """
        self.stop_all()
        self.instrument_name = instrument or self.instrument_name
        self._sounds = {}
        self.is_loading = True
        self.loaded = 0
        self.total = len(NOTE_NAMES)

        ok = 0
        for note in NOTE_NAMES:
            basename = f"{self.instrument_name}{note}"
            path = self.sample_path(self.instrument_name, note)
            handle = None
            try:
                handle = self.backend.load_sample(str(path))
                ok += 1
            except SampleLoadFailure as e:
                logger.warning("%s", e)
            self._sounds[basename] = handle
            self.loaded += 1
            if self.on_load_progress:
                self.on_load_progress(self.progress, self.loaded, self.total)

        self.is_loading = False
        self._loaded_instrument = self.instrument_name
        if self.on_load_complete:
            self.on_load_complete()
        logger.info("Loaded %d/%d samples for %s", ok, self.total, self.instrument_name)
        return ok

    def set_instrument(self, instrument: str) -> None:
        """Switch instrument; samples are reloaded only when the name changes."""
        if instrument != self._loaded_instrument:
            self.load_instrument(instrument)
        self.instrument_name = instrument

    @property
    def progress(self) -> float:
        return (self.loaded / self.total) if self.total else 0.0

    def loading_status(self) -> Dict[str, Any]:
        return {
            "is_loading": self.is_loading,
            "progress": self.progress,
            "loaded": self.loaded,
            "total": self.total,
        }

    def get_sample(self, note: str) -> Any:
        return self._sounds.get(f"{self.instrument_name}{note}")

    def play_note(self, note: str) -> None:
        handle = self.get_sample(note)
        if handle is None:
            return
        self.backend.trigger(handle)
        self._playing.add(note)

    def stop_note(self, note: str) -> None:
        handle = self.get_sample(note)
        self._playing.discard(note)
        if handle is None:
            return
        self.backend.release(handle, self.release_fade_ms)

    def is_note_playing(self, note: str) -> bool:
        return note in self._playing

    def stop_all(self) -> None:
        for note in list(self._playing):
            handle = self.get_sample(note)
            if handle is not None:
                self.backend.stop(handle)
        self._playing.clear()

    def close(self) -> None:
        self.stop_all()
        self.backend.close()
