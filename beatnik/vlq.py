"""MIDI variable-length quantities.

7 value bits per byte, most significant group first.  Every byte except the
last has bit 7 set.  SMF limits quantities to 4 bytes (0x0FFFFFFF).
"""

from __future__ import annotations

from typing import Tuple

MAX_VLQ_BYTES = 4
MAX_VLQ_VALUE = (1 << (7 * MAX_VLQ_BYTES)) - 1


def encode_vlq(value: int) -> bytes:
    if value < 0:
        raise ValueError(f"cannot encode negative quantity {value}")
    out = bytearray([value & 0x7F])
    value >>= 7
    while value:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.reverse()
    return bytes(out)


def decode_vlq(data: bytes, pos: int = 0) -> Tuple[int, int]:
    """Decode one quantity starting at ``data[pos]``.

    Returns ``(value, next_pos)``.
    """
    value = 0
    for i in range(MAX_VLQ_BYTES):
        if pos + i >= len(data):
            raise ValueError(f"truncated variable-length quantity at pos {pos}")
        byte = data[pos + i]
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            return value, pos + i + 1
    raise ValueError(
        f"variable-length quantity at pos {pos} exceeds {MAX_VLQ_BYTES} bytes"
    )
