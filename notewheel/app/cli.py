from __future__ import annotations

"""Command-line front end for the NoteWheel engine."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .. import __version__
from ..config.config import load_config, validate_config
from ..errors import NoteWheelError
from ..sequence.compact import from_compact, from_url
from ..sequence.resolve import resolve_notes
from ..theory.chords import CHORD_NAMES
from ..theory.detect import describe_chords, detect_chords
from ..theory.note_utils import fifths_from, normalize_note_name
from ..theory.progressions import PROGRESSION_LABELS, Progression, get_progression_names
from ..theory.scale import Scale
from ..theory.scales import get_scale_names
from . import explain
from .scheduler import ThreadingScheduler
from .session import ExplorerSession


def _cmd_list(args: argparse.Namespace) -> int:
    print("Scales:")
    for name in get_scale_names():
        print(f"  {name}")
    print("Chords:")
    for suffix, name in CHORD_NAMES.items():
        print(f"  {suffix or '(none)':<6} {name}")
    print("Progressions:")
    for name in get_progression_names():
        print(f"  {name:<14} {PROGRESSION_LABELS[name]}")
    return 0


def _cmd_scale(args: argparse.Namespace) -> int:
    scale = Scale(normalize_note_name(args.root), args.scale)
    print(scale.display_name)
    parent = scale.parent_major()
    if parent:
        print(f"Mode of {parent} Major")
    print(f"Relative key: {scale.relative_key()}")
    for d, note in enumerate(scale.notes(), start=1):
        chord = scale.chord_for_degree(d)
        print(f"  {d}  {note:<2}  {scale.degree_name(d):<13} {chord.to_symbol():<5} {chord.name}")
    return 0


def _cmd_fifths(args: argparse.Namespace) -> int:
    print(" -> ".join(fifths_from(normalize_note_name(args.root))))
    return 0


def _cmd_detect(args: argparse.Namespace) -> int:
    notes = [normalize_note_name(n) for n in args.notes]
    found = detect_chords(notes)
    if not found:
        print("No chords found")
        return 0
    shown = found if args.all else {k: found[k] for k in describe_chords(found)}
    for name, chord_notes in shown.items():
        print(f"{name:<8} {' '.join(chord_notes)}")
    return 0


def _cmd_progression(args: argparse.Namespace) -> int:
    scale = Scale(normalize_note_name(args.root), args.scale)
    prog = Progression(scale)
    prog.set_progression(args.name)
    for _ in prog.steps:
        chord = prog.current_chord()
        print(f"{chord.label:<22} {' '.join(prog.current_chord_notes())}")
        prog.next()
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    seq = from_url(args.text) if args.url else from_compact(args.text)
    if seq is None:
        print("No demo parameter found", file=sys.stderr)
        return 1
    data = seq.to_json()
    scale = Scale(
        seq.config.root or normalize_note_name(args.root),
        seq.config.scale or args.scale,
    )
    for event, raw in zip(data.get("events", []), seq.events):
        event["resolved"] = resolve_notes(raw.notes, scale)
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def _cmd_play(args: argparse.Namespace) -> int:
    cfg = validate_config(load_config(args.config))
    if args.silent:
        cfg["audio"]["backend"] = "silent"
    session = ExplorerSession(cfg, scheduler=ThreadingScheduler())
    try:
        session.load_samples()
        handle = session.play_demo(args.sequence)
        if handle is None:
            return 1
        handle.wait(timeout=args.timeout)
        print(session.status_line())
    finally:
        session.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="notewheel", description="Music-theory note wheel engine")
    p.add_argument("--version", action="version", version=f"notewheel {__version__}")
    p.add_argument("-v", "--verbose", action="count", default=0)
    p.add_argument("--explain", action="store_true", help="Trace engine milestones")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List scales, chords and progressions")

    sp = sub.add_parser("scale", help="Show a scale with its diatonic chords")
    sp.add_argument("root")
    sp.add_argument("scale", nargs="?", default="Major")

    fp = sub.add_parser("fifths", help="Circle of fifths from a root")
    fp.add_argument("root")

    dp = sub.add_parser("detect", help="Detect chords in a set of notes")
    dp.add_argument("notes", nargs="+")
    dp.add_argument("--all", action="store_true", help="Include bare fifths")

    pp = sub.add_parser("progression", help="Walk a progression in a key")
    pp.add_argument("name", choices=get_progression_names())
    pp.add_argument("--root", default="C")
    pp.add_argument("--scale", default="Major")

    xp = sub.add_parser("parse", help="Parse compact sequence notation")
    xp.add_argument("text")
    xp.add_argument("--url", action="store_true", help="Treat text as a URL query string")
    xp.add_argument("--root", default="C")
    xp.add_argument("--scale", default="Major")

    yp = sub.add_parser("play", help="Play a compact sequence")
    yp.add_argument("sequence")
    yp.add_argument("--config", default=None)
    yp.add_argument("--silent", action="store_true", help="Do not open an audio device")
    yp.add_argument("--timeout", type=float, default=60.0)
    return p


_COMMANDS = {
    "list": _cmd_list,
    "scale": _cmd_scale,
    "fifths": _cmd_fifths,
    "detect": _cmd_detect,
    "progression": _cmd_progression,
    "parse": _cmd_parse,
    "play": _cmd_play,
}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=logging.INFO if args.explain else level, format="%(levelname)s %(name)s: %(message)s")
    explain.enable(args.explain)
    try:
        return _COMMANDS[args.cmd](args)
    except NoteWheelError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
