from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with the CLI ``--explain`` flag to get one terse JSON line per
milestone (scale changes, sequence events, progression steps).
"""

import json
import logging
from typing import Any, Dict

logger = logging.getLogger("notewheel.explain")

_ENABLED = False


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    try:
        data = json.dumps(payload or {}, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        data = repr(payload)
    logger.info("[EXPLAIN] %s :: %s", event, data)
