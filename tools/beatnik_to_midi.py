#!/usr/bin/env python3
"""Compile a drum notation text file into a .mid file.

Examples
--------
    python tools/beatnik_to_midi.py grooves/rock.txt
    python tools/beatnik_to_midi.py grooves/rock.txt -o out/rock.mid --bpm 96
    cat rock.txt | python tools/beatnik_to_midi.py - -o rock.mid
    python tools/beatnik_to_midi.py rock.txt --dry-run --expect golden/rock.mid
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from beatnik.build_spec import compile_text
from beatnik.track import DEFAULT_BPM

from _expect import report_expect


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compile drum notation text into a MIDI file",
    )
    parser.add_argument(
        "input",
        help="Notation file, or - to read stdin",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output .mid path (default: input path with .mid suffix)",
    )
    parser.add_argument(
        "--bpm",
        type=int,
        default=DEFAULT_BPM,
        help=f"Tempo used when the notation has no bpm: directive (default {DEFAULT_BPM})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse and encode without writing output",
    )
    parser.add_argument(
        "--expect",
        type=Path,
        default=None,
        help="Expected .mid file path for byte-match verification",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser and encoder details",
    )
    return parser


def main() -> int:
    parser = _build_arg_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    from_stdin = args.input == "-"
    out_path = args.output
    if out_path is None and not from_stdin:
        out_path = Path(args.input).with_suffix(".mid")
    if not args.dry_run and out_path is None:
        parser.error("output path required when reading stdin: pass --output")

    try:
        text = sys.stdin.read() if from_stdin else Path(args.input).read_text(encoding="utf-8")
        midi_bytes = compile_text(text, default_bpm=args.bpm)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    match_ok = True
    if args.expect is not None:
        match_ok = report_expect(midi_bytes, args.expect.expanduser().resolve())

    if args.dry_run:
        print(f"dry-run OK: size={len(midi_bytes)}B")
        return 0 if match_ok else 2

    out_path = out_path.expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(midi_bytes)
    print(f"Wrote {len(midi_bytes)} bytes -> {out_path}")

    return 0 if match_ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
