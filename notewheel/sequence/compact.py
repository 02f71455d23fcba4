from __future__ import annotations

"""Compact textual notation for demo sequences.

    sequence := config? "|" events? ("|" timing)?
    config   := temperament ("," root ("," scale ("," fifths ("," chromaticColors)?)?)?)?
    events   := event (";" event)*
    event    := note ("+" note)*
    timing   := duration ("," sustain)?

Examples:
    "Pythagorean|G#+D#|2000"
    "Well Tempered,C,Major|C+E+G|1500"
    "Equal Tempered|C+E+G;E+G+B|1000,800"
    "Pythagorean,G#,Major|"          (configure only)

One timing section applies to every event. Note tokens are kept verbatim;
they are resolved against the live scale at play time.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, unquote

from ..errors import MalformedSequence
from .models import DEFAULT_DURATION_MS, Sequence, SequenceConfig, SequenceEvent

_CONFIG_KEYS = ["temperament", "root", "scale", "fifths", "chromatic_colors"]
_FLAG_KEYS = {"fifths", "chromatic_colors"}


def _parse_flag(key: str, raw: str) -> bool:
    value = raw.lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise MalformedSequence(f"{key} must be 'true' or 'false', got {raw!r}")


def _parse_config(part: str) -> SequenceConfig:
    if not part:
        return SequenceConfig()
    items = [s.strip() for s in part.split(",")]
    if len(items) > len(_CONFIG_KEYS):
        raise MalformedSequence(f"Too many config fields ({len(items)}): {part!r}")
    fields: Dict[str, Any] = {}
    for key, raw in zip(_CONFIG_KEYS, items):
        if not raw:
            continue
        fields[key] = _parse_flag(key, raw) if key in _FLAG_KEYS else raw
    return SequenceConfig(**fields)


def _parse_int(label: str, raw: str, minimum: int) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise MalformedSequence(f"{label} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise MalformedSequence(f"{label} must be >= {minimum}, got {value}")
    return value


def _parse_timing(part: str) -> Tuple[int, Optional[int]]:
    if not part:
        return DEFAULT_DURATION_MS, None
    items = [s.strip() for s in part.split(",")]
    if len(items) > 2:
        raise MalformedSequence(f"Timing takes duration[,sustain], got {part!r}")
    duration = _parse_int("duration", items[0], 1) if items[0] else DEFAULT_DURATION_MS
    sustain = None
    if len(items) == 2 and items[1]:
        sustain = _parse_int("sustain", items[1], 0)
    return duration, sustain


def _parse_events(part: str, duration: int, sustain: Optional[int]) -> List[SequenceEvent]:
    if not part:
        return []
    events: List[SequenceEvent] = []
    for i, event_str in enumerate(part.split(";")):
        notes = [n.strip() for n in event_str.split("+")]
        if any(not n for n in notes):
            raise MalformedSequence(f"Empty note in event {i + 1}: {event_str.strip()!r}")
        events.append(SequenceEvent(notes=notes, duration=duration, sustain=sustain))
    return events


def from_compact(text: str) -> Sequence:
    """Parse compact notation into a Sequence.

    Raises:
        MalformedSequence: on any grammar violation.
    """
    if not isinstance(text, str):
        raise MalformedSequence(f"Compact sequence must be a string, got {type(text).__name__}")
    parts = text.split("|")
    if len(parts) < 2:
        raise MalformedSequence(f"Missing '|' between config and events: {text!r}")
    if len(parts) > 3:
        raise MalformedSequence(f"Expected at most 3 '|' sections, got {len(parts)}")

    config = _parse_config(parts[0].strip())
    events_part = parts[1].strip()
    timing_part = parts[2].strip() if len(parts) >= 3 else ""
    duration, sustain = _parse_timing(timing_part)
    events = _parse_events(events_part, duration, sustain)
    return Sequence(config=config, events=events)


def from_url(query_string: str) -> Optional[Sequence]:
    """Extract and parse the ``demo`` query parameter.

    Returns None when the query has no (or an empty) demo parameter.
    """
    params = dict(parse_qsl(query_string.lstrip("?"), keep_blank_values=True))
    demo = params.get("demo")
    if not demo:
        return None
    return from_compact(unquote(demo))
