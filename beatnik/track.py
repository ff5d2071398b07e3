"""Track model: an ordered list of drum hits plus track tempo.

Timing is expressed in ticks at a fixed resolution of 96 ticks per quarter
note, which is also the division written to the MIDI header.

Velocities are limited to eight dynamic levels (ppp..fff).  A hit maps each
struck instrument to its velocity; all notes in a hit share one duration.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, List

TICKS_PER_QUARTER = 96
DEFAULT_BPM = 120
MIN_BPM = 1
MAX_BPM = 500


class Velocity(IntEnum):
    """A drum hit's volume."""

    PPP = 16  # pianississimo
    PP = 32  # pianissimo
    P = 48  # piano
    MP = 64  # mezzo-piano
    MF = 80  # mezzo-forte
    F = 96  # forte
    FF = 112  # fortissimo
    FFF = 127  # fortississimo


@dataclass
class Hit:
    """A set of drums struck at the same time."""

    notes: Dict[int, Velocity]  # instrument code -> velocity, in strike order
    ticks: int  # length of the hit (96 = quarter note)

    def __post_init__(self) -> None:
        if not self.notes:
            raise ValueError("need at least one note")
        if self.ticks <= 0:
            raise ValueError(f"hit length must be positive, got {self.ticks} ticks")

    @classmethod
    def from_notes(cls, ticks: int, velocity: Velocity, *notes: int) -> "Hit":
        return cls(notes={n: velocity for n in notes}, ticks=ticks)


@dataclass
class Track:
    """An entire drum track: hits in playback order and tempo.

    ``bpm == 0`` means no tempo was set; see :meth:`with_default_tempo`.
    """

    hits: List[Hit] = field(default_factory=list)
    bpm: int = 0

    @property
    def total_ticks(self) -> int:
        return sum(h.ticks for h in self.hits)

    def with_default_tempo(self, bpm: int = DEFAULT_BPM) -> "Track":
        """Return this track, or a copy with ``bpm`` filled in when unset."""
        if self.bpm:
            return self
        if not (MIN_BPM <= bpm <= MAX_BPM):
            raise ValueError(f"default bpm must be in [{MIN_BPM}, {MAX_BPM}], got {bpm}")
        return replace(self, bpm=bpm)
