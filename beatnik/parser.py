"""Parse drum notation text into a :class:`~beatnik.track.Track`.

Example::

    bpm:100
    K,CH CH S,CH CH      # one bar of rock beat
    K,CH CH (S..) S,CH ~ # grace note borrows from the preceding hit

Parsing stops at the first bad token and raises :class:`ParseError`.
"""

from __future__ import annotations

import logging

from .directives import run_directive
from .tables import lookup_duration
from .tokens import TokenKind, classify_token, parse_hit, scan_hit, split_directive, tokenize
from .track import Hit, Track

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """A token could not be parsed.  ``token_index`` is 1-based."""

    def __init__(self, token_index: int, token: str, reason: str) -> None:
        super().__init__(f"token #{token_index}: {reason}")
        self.token_index = token_index
        self.token = token
        self.reason = reason


def parse_track(text: str) -> Track:
    """Parse whitespace-separated notation tokens into a new track."""
    track = Track()
    for index, token in enumerate(tokenize(text), start=1):
        try:
            _apply_token(track, token)
        except ValueError as exc:
            raise ParseError(index, token, str(exc)) from None
    logger.debug(
        "parsed %d hits (%d ticks, bpm=%d)", len(track.hits), track.total_ticks, track.bpm
    )
    return track


def _apply_token(track: Track, token: str) -> None:
    kind = classify_token(token)
    if kind is TokenKind.HIT:
        _apply_hit(track, token)
    elif kind is TokenKind.WAIT:
        apply_wait(track, token)
    elif kind is TokenKind.DIRECTIVE:
        name, value = split_directive(token)
        run_directive(track, name, value)
        logger.debug("directive %s=%r applied", name, value)
    else:
        raise ValueError(f"unrecognized token: {token!r}")


def _apply_hit(track: Track, token: str) -> None:
    shape = scan_hit(token)
    if shape.half_parenthesized:
        raise ValueError("grace notes should have parenthesis on both sides")

    if shape.parenthesized:
        hit = parse_hit(token[1:-1])
        apply_grace(track, hit)
    else:
        hit = parse_hit(token)
    track.hits.append(hit)


def apply_grace(track: Track, grace: Hit) -> None:
    """Shorten the last hit of ``track`` by the length of ``grace``.

    The caller appends the grace hit after this adjustment.  With no
    preceding hit there is nothing to borrow from and the track is left
    unchanged.
    """
    if not track.hits:
        return
    last = track.hits[-1]
    if last.ticks <= grace.ticks:
        raise ValueError(
            f"grace note is too long: {grace.ticks} ticks, "
            f"should be less than {last.ticks}"
        )
    last.ticks -= grace.ticks
    logger.debug("grace note took %d ticks from preceding hit", grace.ticks)


def apply_wait(track: Track, token: str) -> None:
    """Extend the last hit of ``track`` by the duration ``token`` denotes."""
    ticks = lookup_duration(token)
    if not track.hits:
        raise ValueError("duration with no preceding note")
    track.hits[-1].ticks += ticks
