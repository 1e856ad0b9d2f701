"""Ordered sequences of columns and the --cols syntax."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .col import ALL_COLS, DEFAULT_COLS, Col, parse_col


@dataclass
class Cols:
    """An ordered sequence of columns, without duplicates."""

    cols: list[Col] = field(default_factory=list)

    def __iter__(self) -> Iterator[Col]:
        return iter(self.cols)

    def __len__(self) -> int:
        return len(self.cols)

    def __contains__(self, col: object) -> bool:
        return col in self.cols

    def remove(self, removed: Col) -> None:
        self.cols = [c for c in self.cols if c is not removed]

    def add(self, added: Col) -> None:
        """Add a column at the end, moving it there if already present."""
        self.remove(added)
        self.cols.append(added)

    def add_set(self, col_set: Iterable[Col]) -> None:
        """Add the columns of the set which aren't already present.

        When all columns are present, the set is moved to the end.
        """
        if tuple(self.cols) == ALL_COLS:
            for col in col_set:
                self.add(col)
        else:
            for col in col_set:
                if col not in self:
                    self.add(col)

    def remove_set(self, col_set: Iterable[Col]) -> None:
        for col in col_set:
            self.remove(col)


def default_cols() -> Cols:
    return Cols(list(DEFAULT_COLS))


def _tokenize(value: str) -> list[str]:
    tokens: list[str] = []
    in_word = False
    for c in value:
        if c.isalpha() or c == "_":
            if in_word:
                tokens[-1] += c
            else:
                tokens.append(c)
                in_word = True
        else:
            tokens.append(c)
            in_word = False
    return tokens


def parse_cols(value: str) -> Cols:
    """Parse a --cols definition, eg "id+dev+default" or "+inodes".

    Raises ParseColError on an unknown column name.
    """
    tokens = _tokenize(value.strip())
    if not tokens:
        return default_cols()
    # starting with an addition or removal implies the default set
    cols = default_cols() if tokens[0] in ("+", "-") else Cols()
    negative = False
    for token in tokens:
        if token == "-":
            negative = True
        elif token in ("+", ",", " "):
            continue
        elif token == "all":
            if negative:
                cols = Cols()
                negative = False
            else:
                # the already present columns stay first
                for col in ALL_COLS:
                    if col not in cols:
                        cols.add(col)
        elif token == "default":
            if negative:
                cols.remove_set(DEFAULT_COLS)
                negative = False
            else:
                cols.add_set(DEFAULT_COLS)
        else:
            col = parse_col(token)
            if negative:
                cols.remove(col)
                negative = False
            else:
                cols.add(col)
    if tokens[-1] == "-":
        cols.remove_set(DEFAULT_COLS)
    elif tokens[-1] == "+":
        cols.add_set(DEFAULT_COLS)
    return cols