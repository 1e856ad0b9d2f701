"""Boolean filter expressions over column expressions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterable, Union

from .col_expr import ColExpr, ParseExprError, parse_col_expr
from .mount import Mount

_STRUCTURAL = frozenset("&|!()")


class BoolOperator(enum.Enum):
    AND = "&"
    OR = "|"
    NOT = "!"


@dataclass(frozen=True)
class _Not:
    operand: _Node


@dataclass(frozen=True)
class _Binary:
    operator: BoolOperator
    left: _Node
    right: _Node


_Node = Union[ColExpr, _Not, _Binary]


def _tokenize(text: str) -> list[str]:
    """Split into operators, parentheses and atoms; spaces are dropped."""
    tokens: list[str] = []
    in_atom = False
    for c in text:
        if c == " ":
            continue
        if c in _STRUCTURAL:
            tokens.append(c)
            in_atom = False
        elif in_atom:
            tokens[-1] += c
        else:
            tokens.append(c)
            in_atom = True
    return tokens


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _error(self, message: str) -> ParseExprError:
        return ParseExprError(self.text, message)

    def parse(self) -> _Node | None:
        if not self.tokens:
            return None
        node = self._expression()
        if self._peek() is not None:
            raise self._error(f"unexpected {self._peek()!r}")
        return node

    def _expression(self) -> _Node:
        # operators apply from left to right, without precedence
        left = self._unary()
        while (tok := self._peek()) in ("&", "|"):
            self.pos += 1
            right = self._unary()
            left = _Binary(BoolOperator(tok), left, right)
        return left

    def _unary(self) -> _Node:
        tok = self._peek()
        if tok is None or tok in ("&", "|", ")"):
            raise self._error("missing operand")
        self.pos += 1
        if tok == "!":
            return _Not(self._unary())
        if tok == "(":
            node = self._expression()
            if self._peek() != ")":
                raise self._error("unclosed parenthesis")
            self.pos += 1
            return node
        return parse_col_expr(tok)


def _eval(node: _Node, mount: Mount) -> bool:
    if isinstance(node, ColExpr):
        return node.eval(mount)
    if isinstance(node, _Not):
        return not _eval(node.operand, mount)
    left = _eval(node.left, mount)
    if node.operator is BoolOperator.AND and not left:
        return False
    if node.operator is BoolOperator.OR and left:
        return True
    return _eval(node.right, mount)


@dataclass(frozen=True)
class Filter:
    """A boolean expression of column expressions; empty means everything."""

    expr: _Node | None = None

    def eval(self, mount: Mount) -> bool:
        """Tell whether the mount passes; raises EvalExprError on a bad value."""
        if self.expr is None:
            return True
        return _eval(self.expr, mount)

    def filter(self, mounts: Iterable[Mount]) -> list[Mount]:
        return [mount for mount in mounts if self.eval(mount)]


def parse_filter(text: str) -> Filter:
    """Parse an expression like "(size<35G | remote=false) & type=xfs"."""
    return Filter(_Parser(text).parse())