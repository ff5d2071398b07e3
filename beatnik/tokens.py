"""Tokenizer and token scanner for the drum notation.

Token shapes (checked in this order):

  hit        ``[(]note[,note...]<duration>[)]``  e.g. ``36``, ``K+,CH.``, ``(38..)``
  wait       ``<duration>``                      e.g. ``.``, ``~>``
  directive  ``name:value``                      e.g. ``bpm:120``

where ``note`` is an instrument id (``[0-9A-Z]+``) followed by a run of
``+`` or a run of ``-`` (never both), and ``duration`` is a run of ``.`` or
a run of ``~`` (never both) optionally followed by ``>``.

The scanners below only check shape.  Whether a velocity or duration mark
actually exists is decided by the lookup tables, so ``36+++`` is a hit with
a bad velocity rather than an unrecognized token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .tables import lookup_drum, lookup_duration, lookup_velocity
from .track import Hit, Velocity

ID_CHARS = frozenset("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")
TRIPLET_MARK = ">"
# Comments run to the next newline only; separators are ASCII whitespace only.
COMMENT = re.compile(r"#[^\n]*")
SEPARATORS = re.compile(r"[ \t\n\f\r]+")


class TokenKind(Enum):
    HIT = "hit"
    WAIT = "wait"
    DIRECTIVE = "directive"


@dataclass(frozen=True)
class HitShape:
    """Structural split of a hit token."""

    open_paren: bool
    close_paren: bool
    notes: str  # comma-separated note specs
    duration: str  # trailing duration marks, may be empty

    @property
    def parenthesized(self) -> bool:
        return self.open_paren and self.close_paren

    @property
    def half_parenthesized(self) -> bool:
        return self.open_paren != self.close_paren


def tokenize(text: str) -> List[str]:
    """Strip ``#`` comments and split ``text`` on runs of ASCII whitespace."""
    return [token for token in SEPARATORS.split(COMMENT.sub("", text)) if token]


# ── low-level scanners ───────────────────────────────────────────────
# Each takes a string and start position and returns the end position of
# the longest match (== start when nothing matched).


def _scan_run(s: str, pos: int, char: str) -> int:
    while pos < len(s) and s[pos] == char:
        pos += 1
    return pos


def _scan_id(s: str, pos: int) -> int:
    while pos < len(s) and s[pos] in ID_CHARS:
        pos += 1
    return pos


def _scan_velocity(s: str, pos: int) -> int:
    if pos < len(s) and s[pos] in "+-":
        return _scan_run(s, pos, s[pos])
    return pos


def _scan_duration(s: str, pos: int) -> int:
    if pos < len(s) and s[pos] in ".~":
        pos = _scan_run(s, pos, s[pos])
    if pos < len(s) and s[pos] == TRIPLET_MARK:
        pos += 1
    return pos


def _scan_note_spec(s: str, pos: int) -> Optional[Tuple[str, str, int]]:
    """Match ``id velocity`` at ``pos``; return (id, velocity, end) or None."""
    id_end = _scan_id(s, pos)
    if id_end == pos:
        return None
    end = _scan_velocity(s, id_end)
    return s[pos:id_end], s[id_end:end], end


# ── token shapes ─────────────────────────────────────────────────────


def scan_hit(token: str) -> Optional[HitShape]:
    pos = 0
    open_paren = token.startswith("(")
    if open_paren:
        pos = 1

    notes_start = pos
    while True:
        spec = _scan_note_spec(token, pos)
        if spec is None:
            return None
        pos = spec[2]
        if pos < len(token) and token[pos] == ",":
            pos += 1
            continue
        break
    notes_end = pos

    pos = _scan_duration(token, pos)
    duration = token[notes_end:pos]

    close_paren = pos < len(token) and token[pos] == ")"
    if close_paren:
        pos += 1
    if pos != len(token):
        return None

    return HitShape(
        open_paren=open_paren,
        close_paren=close_paren,
        notes=token[notes_start:notes_end],
        duration=duration,
    )


def is_wait(token: str) -> bool:
    return _scan_duration(token, 0) == len(token)


def split_directive(token: str) -> Optional[Tuple[str, str]]:
    """Split ``name:value`` at the first colon; the name must be non-empty."""
    idx = token.find(":")
    if idx <= 0:
        return None
    return token[:idx], token[idx + 1:]


def classify_token(token: str) -> Optional[TokenKind]:
    """Return the kind of ``token``, or None if it has no known shape."""
    if scan_hit(token) is not None:
        return TokenKind.HIT
    if is_wait(token):
        return TokenKind.WAIT
    if split_directive(token) is not None:
        return TokenKind.DIRECTIVE
    return None


# ── hit parsing ──────────────────────────────────────────────────────


def parse_notes(s: str) -> dict[int, Velocity]:
    """Parse the comma-separated notes section of a hit token."""
    notes: dict[int, Velocity] = {}
    for part in s.split(","):
        spec = _scan_note_spec(part, 0)
        if spec is None or spec[2] != len(part):
            raise ValueError(f"bad note token: {part!r}")
        name, marks, _ = spec
        note = lookup_drum(name)
        notes[note] = lookup_velocity(marks)
    return notes


def parse_hit(s: str) -> Hit:
    """Parse a single hit token (without grace parentheses)."""
    shape = scan_hit(s)
    if shape is None or shape.open_paren or shape.close_paren:
        raise ValueError(f"bad hit: {s!r}")
    notes = parse_notes(shape.notes)
    return Hit(notes=notes, ticks=lookup_duration(shape.duration))
