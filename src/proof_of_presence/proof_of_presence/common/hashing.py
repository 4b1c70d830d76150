"""Non-cryptographic 32-bit fingerprints.

Used to tag attendance photos and ledger records for dedup/debugging. They are
not a security mechanism.
"""

from __future__ import annotations

from typing import Iterable

_MASK_32 = 0xFFFFFFFF


def _rolling_hash(units: Iterable[int]) -> int:
    h = 0
    for unit in units:
        # h * 31 + unit, wrapped to a signed 32-bit integer
        h = (h * 31 + unit) & _MASK_32
    if h & 0x80000000:
        h -= 1 << 32
    return abs(h)


def photo_fingerprint(data: bytes) -> str:
    return format(_rolling_hash(data), "x")


def string_fingerprint(value: str) -> str:
    if not value:
        return "0"
    raw = value.encode("utf-16-be")
    units = (int.from_bytes(raw[i : i + 2], "big") for i in range(0, len(raw), 2))
    return format(_rolling_hash(units), "x")
