"""Directive tokens (``name:value``) that change track metadata.

Handlers are registered by name with :func:`directive`.  A handler receives
the track and the raw value string, validates the value and only then
mutates the track.  Invalid values raise ``ValueError``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Mapping

from .track import MAX_BPM, MIN_BPM, Track

DirectiveHandler = Callable[[Track, str], None]

_HANDLERS: Dict[str, DirectiveHandler] = {}

# Read-only view of the registered handlers.
DIRECTIVES: Mapping[str, DirectiveHandler] = MappingProxyType(_HANDLERS)


def directive(name: str) -> Callable[[DirectiveHandler], DirectiveHandler]:
    """Register the decorated function as the handler for ``name:``."""
    if not name or ":" in name:
        raise ValueError(f"invalid directive name: {name!r}")

    def register(handler: DirectiveHandler) -> DirectiveHandler:
        if name in _HANDLERS:
            raise ValueError(f"directive {name!r} is already registered")
        _HANDLERS[name] = handler
        return handler

    return register


def run_directive(track: Track, name: str, value: str) -> None:
    handler = DIRECTIVES.get(name)
    if handler is None:
        raise ValueError(f"unknown directive: {name!r}")
    handler(track, value)


def _parse_decimal(value: str) -> int:
    # int() alone would also accept whitespace, underscores and non-ASCII digits.
    digits = value[1:] if value[:1] in ("+", "-") else value
    if not (digits.isascii() and digits.isdigit()):
        raise ValueError(f"invalid decimal integer {value!r}")
    return int(value)


@directive("bpm")
def bpm_directive(track: Track, value: str) -> None:
    """Set the track tempo in beats per minute."""
    try:
        bpm = _parse_decimal(value)
    except ValueError as exc:
        raise ValueError(f"bad input to BPM: {exc}") from None
    if not (MIN_BPM <= bpm <= MAX_BPM):
        raise ValueError(f"bad BPM: {bpm}, must be between {MIN_BPM} and {MAX_BPM}")
    track.bpm = bpm
