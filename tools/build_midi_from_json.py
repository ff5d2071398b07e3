#!/usr/bin/env python3
"""Compile a JSON build spec into a .mid file.

Spec format::

    {"version": 1, "source": "rock.txt", "output": "rock.mid", "default_bpm": 120}

``text`` may replace ``source`` to inline the notation.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from beatnik.build_spec import build_midi_bytes, load_build_spec

from _expect import report_expect


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build a .mid file from a JSON spec",
    )
    parser.add_argument(
        "spec",
        type=Path,
        help="Path to JSON build spec",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Output .mid path (overrides spec.output)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and compile without writing output",
    )
    parser.add_argument(
        "--expect",
        type=Path,
        default=None,
        help="Expected .mid file path for byte-match verification",
    )
    return parser


def main() -> int:
    parser = _build_arg_parser()
    args = parser.parse_args()

    try:
        spec = load_build_spec(args.spec)
        out_path = args.output if args.output is not None else spec.output
        if not args.dry_run and out_path is None:
            parser.error("output path required: set spec.output or pass --output")
        midi_bytes = build_midi_bytes(spec)
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    match_ok = True
    if args.expect is not None:
        match_ok = report_expect(midi_bytes, args.expect.expanduser().resolve())

    source = spec.source if spec.source is not None else "<inline text>"
    if args.dry_run:
        print(f"dry-run OK: size={len(midi_bytes)}B source={source}")
        return 0 if match_ok else 2

    assert out_path is not None  # checked above
    out_path = out_path.expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(midi_bytes)

    print(f"Wrote {len(midi_bytes)} bytes -> {out_path}")
    print(f"  source={source} default_bpm={spec.default_bpm}")
    return 0 if match_ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
