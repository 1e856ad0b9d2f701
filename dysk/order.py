"""Sort directions."""

from __future__ import annotations

import enum
import json


class Order(enum.Enum):
    """One of the two sorting directions."""

    ASC = "asc"
    DESC = "desc"


class ParseOrderError(ValueError):
    """Raised when a string isn't a known sort order."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(
            f"{json.dumps(raw, ensure_ascii=False)} can't be parsed as a sort order. "
            "Use 'asc' or 'desc' (or nothing)"
        )


def parse_order(s: str) -> Order:
    """Parse 'a', 'asc', 'd' or 'desc' (case insensitive)."""
    lowered = s.lower()
    if lowered in ("a", "asc"):
        return Order.ASC
    if lowered in ("d", "desc"):
        return Order.DESC
    raise ParseOrderError(lowered)