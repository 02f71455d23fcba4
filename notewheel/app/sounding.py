from __future__ import annotations

"""The set of currently sounding notes, with per-source ownership.

Keyboard, mouse and the two playback drivers all add and remove notes. Each
note remembers which sources hold it and keeps sounding until the last of
them lets go, so one writer can never silence another writer's notes.
"""

from typing import Dict, Iterator, List, Optional, Set

from ..theory.note_utils import note_to_index

KEYBOARD = "keyboard"
MOUSE = "mouse"
PROGRESSION = "progression"
SEQUENCE = "sequence"


class SoundingNoteSet:
    def __init__(self) -> None:
        self._owners: Dict[str, Set[str]] = {}

    def add(self, note: str, source: str = KEYBOARD) -> bool:
        """Mark ``note`` as held by ``source``. Idempotent.

        Returns:
            True if the note was silent before this call.

        Raises:
            InvalidNote: for names outside the 12-note table.
        """
        note_to_index(note)
        owners = self._owners.get(note)
        if owners is None:
            self._owners[note] = {source}
            return True
        owners.add(source)
        return False

    def release(self, note: str, source: str = KEYBOARD) -> bool:
        """Drop ``source``'s hold on ``note``. Idempotent.

        Returns:
            True if the note stopped sounding because of this call.
        """
        owners = self._owners.get(note)
        if owners is None or source not in owners:
            return False
        owners.discard(source)
        if not owners:
            del self._owners[note]
            return True
        return False

    def release_all(self, source: Optional[str] = None) -> List[str]:
        """Drop every hold of ``source`` (or of everyone when None).

        Returns:
            Notes that stopped sounding.
        """
        silenced: List[str] = []
        for note in list(self._owners):
            if source is None:
                del self._owners[note]
                silenced.append(note)
            elif self.release(note, source):
                silenced.append(note)
        return silenced

    def is_playing(self, note: str) -> bool:
        return note in self._owners

    def held_by(self, source: str) -> List[str]:
        return [n for n, owners in self._owners.items() if source in owners]

    def owners(self, note: str) -> Set[str]:
        return set(self._owners.get(note, ()))

    def notes(self) -> List[str]:
        return list(self._owners)

    def __contains__(self, note: object) -> bool:
        return note in self._owners

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._owners))

    def __len__(self) -> int:
        return len(self._owners)
