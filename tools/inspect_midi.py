#!/usr/bin/env python3
"""Dump the tracks and events of a MIDI file.

Meant for checking compiler output by eye: absolute tick, beat position,
and drum names for channel-10 notes.

Usage:
    python tools/inspect_midi.py out/rock.mid
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Dict, Iterator, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import mido

from beatnik.tables import DRUM_ALIASES

DRUM_CHANNEL = 9


def _drum_names() -> Dict[int, str]:
    # Longest alias wins ("BD" over "K").
    names: Dict[int, str] = {}
    for alias, note in DRUM_ALIASES.items():
        if len(alias) > len(names.get(note, "")):
            names[note] = alias
    return names


def describe_track(track: mido.MidiTrack, ticks_per_beat: int) -> Iterator[str]:
    names = _drum_names()
    tick = 0
    for msg in track:
        tick += msg.time
        beat = tick / ticks_per_beat
        if msg.type in ("note_on", "note_off"):
            name = names.get(msg.note, "") if msg.channel == DRUM_CHANNEL else ""
            label = f"{msg.note:3d} {name:<4}"
            yield f"  {tick:7d}  {beat:8.3f}  {msg.type:<8} {label} vel={msg.velocity}"
        elif msg.type == "set_tempo":
            bpm = mido.tempo2bpm(msg.tempo)
            yield f"  {tick:7d}  {beat:8.3f}  tempo    {msg.tempo}us/beat ({bpm:.2f} bpm)"
        elif msg.type == "time_signature":
            yield f"  {tick:7d}  {beat:8.3f}  timesig  {msg.numerator}/{msg.denominator}"
        else:
            yield f"  {tick:7d}  {beat:8.3f}  {msg.type}"


def describe_file(mid: mido.MidiFile) -> List[str]:
    lines = [
        f"format={mid.type} tracks={len(mid.tracks)} ticks_per_beat={mid.ticks_per_beat}",
    ]
    for idx, track in enumerate(mid.tracks):
        lines.append(f"track {idx}: {len(track)} events")
        lines.extend(describe_track(track, mid.ticks_per_beat))
    return lines


def main() -> int:
    parser = argparse.ArgumentParser(description="Dump MIDI file events")
    parser.add_argument("midi", type=Path, help="Path to .mid file")
    args = parser.parse_args()

    try:
        mid = mido.MidiFile(str(args.midi))
    except (OSError, EOFError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for line in describe_file(mid):
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
