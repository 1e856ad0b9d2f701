"""Sorting directives: a column and a direction."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import cmp_to_key

from .col import Col, ParseColError, default_sort_col, parse_col
from .mount import Mount
from .order import Order, ParseOrderError, parse_order


@dataclass(frozen=True)
class Sorting:
    """The column to sort on and the order; the order defaults to the column's."""

    col: Col = field(default_factory=default_sort_col)
    order: Order | None = None

    def __post_init__(self) -> None:
        if self.order is None:
            object.__setattr__(self, "order", self.col.default_sort_order())

    def sort(self, mounts: list[Mount]) -> None:
        """Sort the mounts in place."""
        mounts.sort(key=cmp_to_key(self.col.compare))
        if self.order is Order.DESC:
            mounts.reverse()


class ParseSortingError(ValueError):
    """Raised when a string can't be parsed as a sort expression."""

    def __init__(self, raw: str, reason: object) -> None:
        self.raw = raw
        self.reason = str(reason)
        super().__init__(
            f"{json.dumps(raw, ensure_ascii=False)} can't be parsed as a sort "
            f"expression because {self.reason}"
        )


def parse_sorting(s: str) -> Sorting:
    """Parse "size", "type-desc" or "free asc"."""
    cut = next((i for i, c in enumerate(s) if c.isspace() or c == "-"), None)
    if cut is None:
        s_col, s_order = s, None
    else:
        s_col, s_order = s[:cut], s[cut + 1 :]
    try:
        col = parse_col(s_col)
    except ParseColError as e:
        raise ParseSortingError(s, e) from None
    if s_order is None:
        return Sorting(col)
    try:
        order = parse_order(s_order)
    except ParseOrderError as e:
        raise ParseSortingError(s, e) from None
    return Sorting(col, order)