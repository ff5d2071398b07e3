"""Byte-match reporting shared by the compile scripts (``--expect``)."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional, Tuple


def _sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


def first_mismatch(
    built: bytes, expected: bytes
) -> Optional[Tuple[int, Optional[int], Optional[int]]]:
    """Return ``(offset, built_byte, expected_byte)`` of the first difference.

    A byte is None where that side has already ended.
    """
    offset = next(
        (i for i, (a, b) in enumerate(zip(built, expected)) if a != b),
        min(len(built), len(expected)),
    )
    if offset == len(built) == len(expected):
        return None

    def byte_at(data: bytes) -> Optional[int]:
        return data[offset] if offset < len(data) else None

    return offset, byte_at(built), byte_at(expected)


def _hex(byte: Optional[int]) -> str:
    return "EOF" if byte is None else f"0x{byte:02X}"


def report_expect(built: bytes, expect_path: Path) -> bool:
    """Print the comparison against ``expect_path``; True when identical."""
    expected = expect_path.read_bytes()
    mismatch = first_mismatch(built, expected)
    if mismatch is None:
        print(f"expect match: yes  sha1={_sha1(built)} file={expect_path}")
        return True

    offset, built_byte, expected_byte = mismatch
    print("expect match: no")
    print(f"  built:    size={len(built)} sha1={_sha1(built)}")
    print(f"  expected: size={len(expected)} sha1={_sha1(expected)} file={expect_path}")
    print(
        f"  first diff @ 0x{offset:06X}: "
        f"built={_hex(built_byte)} expected={_hex(expected_byte)}"
    )
    return False
