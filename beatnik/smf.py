"""Encode a drum track as a Standard MIDI File.

File layout (format 1, two tracks, 96 ticks per quarter note):

  MThd  len=6  format=1 ntrks=2 division=96
  MTrk  meta track
        00 FF 58 04 04 02 18 08   time signature 4/4
        00 FF 51 03 tt tt tt      tempo, microseconds per beat
        00 FF 2F 00               end of track
  MTrk  drum track (channel 10)
        per hit:
          00 99 nn vv             note on, one per note
          dt 89 nn 40             note off, one per note; the first carries
                                  the hit length as delta, the rest 00
        00 FF 2F 00               end of track

Chunk lengths are 4-byte big-endian; delta times are variable-length
quantities (see :mod:`beatnik.vlq`).
"""

from __future__ import annotations

import logging
import struct
from typing import Iterable

from .track import TICKS_PER_QUARTER, Hit, Track
from .vlq import encode_vlq

logger = logging.getLogger(__name__)

HEADER_TAG = b"MThd"
TRACK_TAG = b"MTrk"
HEADER_LENGTH = 6
SMF_FORMAT = 1  # synchronous multi-track
TRACK_COUNT = 2

NOTE_ON = 0x99  # channel 10
NOTE_OFF = 0x89
RELEASE_VELOCITY = 64

# Data bytes must be < 0x80.  Instrument codes 128-255 are written unchanged
# and will be read back as status bytes by other MIDI readers.
MAX_DATA_BYTE = 0x7F

US_PER_MINUTE = 60_000_000
MAX_TEMPO = 0xFFFFFF  # 3-byte tempo field

TIME_SIGNATURE_4_4 = b"\x00\xFF\x58\x04\x04\x02\x18\x08"
TEMPO_PREFIX = b"\x00\xFF\x51\x03"
END_OF_TRACK = b"\x00\xFF\x2F\x00"


def encode_chunk(tag: bytes, body: bytes) -> bytes:
    return tag + struct.pack(">I", len(body)) + body


def encode_header_chunk() -> bytes:
    return HEADER_TAG + struct.pack(
        ">IHHH", HEADER_LENGTH, SMF_FORMAT, TRACK_COUNT, TICKS_PER_QUARTER
    )


def tempo_for_bpm(bpm: int) -> int:
    """Microseconds per beat for ``bpm``, clamped to the 3-byte field."""
    if bpm <= 0:
        raise ValueError(f"tempo must be set before encoding (bpm={bpm})")
    return min(round(US_PER_MINUTE / bpm), MAX_TEMPO)


def encode_meta_chunk(bpm: int) -> bytes:
    tempo = tempo_for_bpm(bpm)
    body = b"".join([
        TIME_SIGNATURE_4_4,
        TEMPO_PREFIX + tempo.to_bytes(3, "big"),
        END_OF_TRACK,
    ])
    return encode_chunk(TRACK_TAG, body)


def encode_hit(hit: Hit) -> bytes:
    """Note-on for every note, then note-off for every note ``hit.ticks`` later."""
    buf = bytearray()
    for note in hit.notes:
        if note > MAX_DATA_BYTE:
            logger.warning("instrument %d does not fit a MIDI data byte", note)
    for note, velocity in hit.notes.items():
        buf.extend((0x00, NOTE_ON, note, int(velocity)))
    for i, note in enumerate(hit.notes):
        buf.extend(encode_vlq(hit.ticks if i == 0 else 0))
        buf.extend((NOTE_OFF, note, RELEASE_VELOCITY))
    return bytes(buf)


def encode_note_chunk(hits: Iterable[Hit]) -> bytes:
    body = b"".join(encode_hit(h) for h in hits) + END_OF_TRACK
    return encode_chunk(TRACK_TAG, body)


def encode_track(track: Track) -> bytes:
    """Return the complete MIDI file for ``track``.

    ``track.bpm`` must be set; use :meth:`Track.with_default_tempo` first
    when the notation may omit a ``bpm:`` directive.
    """
    meta = encode_meta_chunk(track.bpm)
    notes = encode_note_chunk(track.hits)
    logger.debug(
        "encoded %d hits: meta chunk %d bytes, note chunk %d bytes",
        len(track.hits),
        len(meta),
        len(notes),
    )
    return encode_header_chunk() + meta + notes
