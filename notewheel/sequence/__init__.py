"""Scripted demo sequences: models, compact notation and note resolution."""

from .models import Sequence, SequenceConfig, SequenceEvent, parse_sequence  # noqa: F401
from .compact import from_compact, from_url  # noqa: F401
from .resolve import resolve_note, resolve_notes  # noqa: F401
