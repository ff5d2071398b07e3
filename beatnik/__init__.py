"""Compile a plain-text drum notation into Standard MIDI Files."""

from .build_spec import (  # noqa: F401
    BuildSpec,
    build_midi_bytes,
    compile_text,
    load_build_spec,
    parse_build_spec,
)
from .directives import DIRECTIVES, directive, run_directive  # noqa: F401
from .parser import ParseError, parse_track  # noqa: F401
from .smf import encode_track  # noqa: F401
from .tables import DRUM_ALIASES, DRUM_NOTES, DURATIONS, VELOCITIES  # noqa: F401
from .tokens import TokenKind, classify_token, parse_hit, parse_notes, tokenize  # noqa: F401
from .track import (  # noqa: F401
    DEFAULT_BPM,
    MAX_BPM,
    MIN_BPM,
    TICKS_PER_QUARTER,
    Hit,
    Track,
    Velocity,
)
from .vlq import decode_vlq, encode_vlq  # noqa: F401
