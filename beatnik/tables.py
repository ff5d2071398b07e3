"""Lookup tables for the text notation.

Built once at import time and exposed as read-only mappings, so any number
of parses can share them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from .track import TICKS_PER_QUARTER, Velocity

MAX_DRUM_NUMBER = 255

# General MIDI percussion key map (channel 10).
DRUM_ALIASES: Mapping[str, int] = MappingProxyType({
    "BD": 36,  # bass drum 1
    "K": 36,
    "RS": 37,  # side stick / rim shot
    "SD": 38,  # acoustic snare
    "S": 38,
    "CP": 39,  # hand clap
    "ES": 40,  # electric snare
    "LFT": 41,  # low floor tom
    "CH": 42,  # closed hi-hat
    "H": 42,
    "HFT": 43,  # high floor tom
    "PH": 44,  # pedal hi-hat
    "LT": 45,  # low tom
    "OH": 46,  # open hi-hat
    "LMT": 47,  # low-mid tom
    "MT": 48,  # hi-mid tom
    "CC": 49,  # crash cymbal 1
    "C": 49,
    "HT": 50,  # high tom
    "RC": 51,  # ride cymbal 1
    "R": 51,
    "CN": 52,  # chinese cymbal
    "RB": 53,  # ride bell
    "TB": 54,  # tambourine
    "SP": 55,  # splash cymbal
    "CB": 56,  # cowbell
    "CC2": 57,  # crash cymbal 2
    "RC2": 59,  # ride cymbal 2
})


def _build_drum_notes() -> Dict[str, int]:
    notes = {str(i): i for i in range(1, MAX_DRUM_NUMBER + 1)}
    notes.update(DRUM_ALIASES)
    return notes


def _build_durations() -> Dict[str, int]:
    q = TICKS_PER_QUARTER
    durations = {
        "~~": q * 4,
        "~": q * 2,
        "": q,
        ".": q // 2,
        "..": q // 4,
        "...": q // 8,
        "....": q // 16,
        ".....": q // 32,
    }
    # Triplets take two thirds of the plain value.
    for mark, ticks in list(durations.items()):
        durations[mark + ">"] = ticks * 2 // 3
    return durations


DRUM_NOTES: Mapping[str, int] = MappingProxyType(_build_drum_notes())

VELOCITIES: Mapping[str, Velocity] = MappingProxyType({
    "-----": Velocity.PPP,
    "----": Velocity.PP,
    "---": Velocity.P,
    "--": Velocity.MP,
    "-": Velocity.MF,
    "": Velocity.F,
    "+": Velocity.FF,
    "++": Velocity.FFF,
})

DURATIONS: Mapping[str, int] = MappingProxyType(_build_durations())


def lookup_drum(name: str) -> int:
    note = DRUM_NOTES.get(name, 0)
    if note == 0:
        raise ValueError(f"bad drum number: {name!r}")
    return note


def lookup_velocity(suffix: str) -> Velocity:
    velocity = VELOCITIES.get(suffix)
    if velocity is None:
        raise ValueError(f"bad velocity: {suffix!r}")
    return velocity


def lookup_duration(suffix: str) -> int:
    ticks = DURATIONS.get(suffix, 0)
    if ticks == 0:
        raise ValueError(f"bad duration: {suffix!r}")
    return ticks
