from __future__ import annotations

"""Configuration loading and validation for NoteWheel.

This module loads YAML configuration, applies defaults, and validates
enumerations, replacing bad values with defaults and logging a warning.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..theory.note_utils import NOTE_TO_NUM
from ..theory.scales import SCALE_ALIASES, SCALE_PATTERNS

logger = logging.getLogger(__name__)

ALLOWED_BACKENDS = {"pygame", "silent"}
DEFAULTS_PATH = Path(__file__).with_name("defaults.yml")


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML on top of the package defaults.

    Args:
        path: Optional path to a YAML config. If None, only the defaults.

    Returns:
        A dictionary with configuration values.

    Raises:
        FileNotFoundError: if ``path`` does not exist.
    """
    cfg = _load_yaml(DEFAULTS_PATH)
    if path:
        cfg = _merge(cfg, _load_yaml(Path(path)))
    return cfg


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("audio", {})
    cfg.setdefault("context", {})
    cfg.setdefault("display", {})
    cfg.setdefault("playback", {})

    audio = cfg["audio"]
    context = cfg["context"]
    display = cfg["display"]
    playback = cfg["playback"]

    audio.setdefault("backend", "pygame")
    audio.setdefault("samples_path", "./assets/sounds")
    audio.setdefault("sample_ext", "mp3")
    audio.setdefault("instrument", "Equal Tempered")
    audio.setdefault(
        "instruments",
        ["Equal Tempered", "Well Tempered", "Carlos Super Just", "Pythagorean"],
    )
    audio.setdefault("release_fade_ms", 100)
    audio.setdefault("frequency", 44100)
    audio.setdefault("channels", 32)

    context.setdefault("root", "C")
    context.setdefault("scale", "Major")

    display.setdefault("fifths", False)
    display.setdefault("chromatic_colors", True)

    playback.setdefault("progression_speed_ms", 1000)
    playback.setdefault("progression_release_fraction", 0.7)

    # Enum validations
    backend = audio.get("backend")
    if backend not in ALLOWED_BACKENDS:
        logger.warning("Unsupported audio backend '%s', falling back to 'pygame'.", backend)
        audio["backend"] = "pygame"

    if not isinstance(audio["instruments"], list) or not audio["instruments"]:
        logger.warning("audio.instruments must be a non-empty list, using defaults.")
        audio["instruments"] = ["Equal Tempered", "Well Tempered", "Carlos Super Just", "Pythagorean"]

    if audio.get("instrument") not in audio["instruments"]:
        logger.warning(
            "Unknown instrument '%s', using '%s'.", audio.get("instrument"), audio["instruments"][0]
        )
        audio["instrument"] = audio["instruments"][0]

    root = context.get("root")
    if root not in NOTE_TO_NUM:
        logger.warning("Unsupported root '%s', using 'C'.", root)
        context["root"] = "C"

    scale = context.get("scale")
    if scale not in SCALE_PATTERNS and scale not in SCALE_ALIASES:
        logger.warning("Unsupported scale '%s', using 'Major'.", scale)
        context["scale"] = "Major"

    display["fifths"] = bool(display["fifths"])
    display["chromatic_colors"] = bool(display["chromatic_colors"])

    try:
        speed = int(playback["progression_speed_ms"])
    except (TypeError, ValueError):
        speed = 0
    if speed <= 0:
        logger.warning("progression_speed_ms must be a positive integer, using 1000.")
        speed = 1000
    playback["progression_speed_ms"] = speed

    try:
        frac = float(playback["progression_release_fraction"])
    except (TypeError, ValueError):
        frac = -1.0
    if not 0.0 < frac <= 1.0:
        logger.warning("progression_release_fraction must be in (0, 1], using 0.7.")
        frac = 0.7
    playback["progression_release_fraction"] = frac

    return cfg
