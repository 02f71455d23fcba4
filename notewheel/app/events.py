from __future__ import annotations

"""Tiny pub/sub event bus between the session and its front end."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class Event:
    """Event type constants."""

    SCALE_CHANGED = "scale_changed"
    INSTRUMENT_CHANGED = "instrument_changed"
    DISPLAY_CHANGED = "display_changed"
    NOTE_ON = "note_on"
    NOTE_OFF = "note_off"
    PROGRESSION_CHANGED = "progression_changed"
    SEQUENCE_STARTED = "sequence_started"
    SEQUENCE_FINISHED = "sequence_finished"


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def emit(self, event: str, payload: Any = None) -> None:
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception:
                # A broken view must not stop playback
                logger.exception("Handler for %s failed", event)
