"""Unit systems used to display sizes."""

from __future__ import annotations

import enum
import math

_BINARY_PREFIXES = "KMGTP"
_SI_PREFIXES = "KMGTPE"


def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def fit_4(size: int) -> str:
    """Format a size with SI prefixes in at most 4 characters."""
    if size < 10_000:
        return str(size)
    exp = (len(str(size)) - 1) // 3
    while True:
        v = size / 1000**exp
        prefix = _SI_PREFIXES[exp - 1]
        if v >= 10:
            rounded = _round_half_up(v)
            if rounded < 1000:
                return f"{rounded}{prefix}"
            exp += 1
            continue
        text = f"{v:.1f}"
        if text == "10.0":
            return f"10{prefix}"
        return f"{text}{prefix}"


class Units(enum.Enum):
    """The units system used for sizes."""

    SI = "si"
    BINARY = "binary"
    BYTES = "bytes"

    def fmt(self, size: int) -> str:
        """Format a byte count in this unit system."""
        if self is Units.SI:
            return fit_4(size)
        if self is Units.BINARY:
            if size < 10_000:
                return str(size)
            i = (size.bit_length() - 1) // 10
            idx = i - 1
            if idx >= len(_BINARY_PREFIXES):
                return "huge"
            v = size / 1024**i
            if v >= 10:
                return f"{_round_half_up(v)}{_BINARY_PREFIXES[idx]}i"
            return f"{v:.1f}{_BINARY_PREFIXES[idx]}i"
        return f"{size:,}"


def parse_units(value: str) -> Units:
    """Parse 'SI', 'binary' or 'bytes' (case insensitive)."""
    try:
        return Units(value.lower())
    except ValueError:
        raise ValueError(
            f"Illegal value: {value!r} - valid values are 'SI', 'binary', and 'bytes'"
        ) from None