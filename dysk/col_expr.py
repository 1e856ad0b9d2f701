"""Leaf expressions of filters: a column, an operator and a value."""

from __future__ import annotations

import enum
import json
import math
import re
from dataclasses import dataclass
from typing import Any

from .col import Col, ParseColError, parse_col
from .mount import DeviceId, Mount

_OPERATOR_CHARS = "<>="
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _quote(s: str) -> str:
    return json.dumps(s, ensure_ascii=False)


class ColOperator(enum.Enum):
    """A comparison operator between a column value and a given value."""

    LOWER = "<"
    LOWER_OR_EQUAL = "<="
    LIKE = "="
    EQUAL = "=="
    NOT_EQUAL = "<>"
    GREATER_OR_EQUAL = ">="
    GREATER = ">"

    def eval(self, a: Any, b: Any) -> bool:
        if self is ColOperator.LOWER:
            return a < b
        if self is ColOperator.LOWER_OR_EQUAL:
            return a <= b
        if self in (ColOperator.EQUAL, ColOperator.LIKE):
            return a == b
        if self is ColOperator.NOT_EQUAL:
            return a != b
        if self is ColOperator.GREATER_OR_EQUAL:
            return a >= b
        return a > b

    def eval_option(self, a: Any | None, b: Any) -> bool:
        """Compare, a missing value never matching."""
        if a is None:
            return False
        return self.eval(a, b)

    def eval_str(self, a: str, b: str) -> bool:
        """Compare strings, LIKE meaning a case insensitive containment."""
        if self is ColOperator.LIKE:
            return b.lower() in a.lower()
        return self.eval(a, b)

    def eval_option_str(self, a: str | None, b: str) -> bool:
        if a is not None and self is ColOperator.LIKE:
            return b.lower() in a.lower()
        return self.eval_option(a, b)


class EvalExprError(ValueError):
    """Raised when the value of an expression can't be used for its column."""

    def __init__(self, raw: str, expected: str) -> None:
        self.raw = raw
        self.expected = expected
        super().__init__(f"{_quote(raw)} can't be evaluated as {expected}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EvalExprError):
            return NotImplemented
        return (self.raw, self.expected) == (other.raw, other.expected)

    def __hash__(self) -> int:
        return hash((self.raw, self.expected))


def _not_a_number(raw: str) -> EvalExprError:
    return EvalExprError(raw, "a number")


class ParseExprError(ValueError):
    """Raised when a string can't be parsed as a column expression."""

    def __init__(self, raw: str, message: str) -> None:
        self.raw = raw
        self.message = message
        super().__init__(f"{_quote(raw)} can't be parsed as an expression: {message}")


def parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in ("x", "t", "true", "1", "y", "yes"):
        return True
    if lowered in ("f", "false", "0", "n", "no"):
        return False
    raise EvalExprError(text, "a boolean")


_FACTORS = {
    ("k", False): 1000,
    ("k", True): 1024,
    ("m", False): 1000**2,
    ("m", True): 1024**2,
    ("g", False): 1000**3,
    ("g", True): 1024**3,
    ("t", False): 1000**4,
    ("t", True): 1024**4,
}


def parse_integer(text: str) -> int:
    """Parse numbers like "1234", "32G", "4kB", "54Gib", "1.2M"."""
    s = text.lower().rstrip("b")
    binary = s.endswith("i")
    if binary:
        s = s[:-1]
    cut = next(
        (idx for idx, c in enumerate(s) if not (c.isascii() and c.isdigit() or c == ".")),
        None,
    )
    if cut is None:
        digits, factor = s, 1
    else:
        digits = s[:cut]
        factor = _FACTORS.get((s[cut:], binary))
        if factor is None:
            raise _not_a_number(text)
    try:
        n = float(digits)
    except ValueError:
        raise _not_a_number(text) from None
    return max(0, math.ceil(n * factor))


def parse_float(text: str) -> float:
    """Parse numbers like "0.25" or "50%"."""
    s = text.lower()
    percent = s.endswith("%")
    if percent:
        s = s[:-1]
    if not s or s != s.strip() or "_" in s:
        raise _not_a_number(text)
    try:
        n = float(s)
    except ValueError:
        raise _not_a_number(text) from None
    if percent:
        n /= 100.0
    return n


def _parse_id(text: str) -> int:
    if not _UNSIGNED.fullmatch(text):
        raise EvalExprError(text, "an id")
    return int(text)


def _parse_device_id(text: str) -> DeviceId:
    parts = text.split(":")
    if len(parts) != 2 or not all(_UNSIGNED.fullmatch(p) for p in parts):
        raise EvalExprError(text, "a device id")
    return DeviceId(int(parts[0]), int(parts[1]))


def _stats_value(mount: Mount, getter: Any) -> Any:
    return getter(mount.stats) if mount.stats is not None else None


def _inodes_value(mount: Mount, getter: Any) -> Any:
    inodes = mount.inodes()
    return getter(inodes) if inodes is not None else None


@dataclass(frozen=True)
class ColExpr:
    """A leaf of the filter tree, true or false for any filesystem."""

    col: Col
    operator: ColOperator
    value: str

    def eval(self, mount: Mount) -> bool:
        """Evaluate on a mount; raises EvalExprError on an unusable value."""
        col, op, value = self.col, self.operator, self.value
        if col is Col.ID:
            return op.eval(mount.info.id, _parse_id(value))
        if col is Col.DEV:
            return op.eval(mount.info.dev, _parse_device_id(value))
        if col is Col.FILESYSTEM:
            return op.eval_str(mount.info.fs, value)
        if col is Col.LABEL:
            return op.eval_option_str(mount.fs_label, value)
        if col is Col.TYPE:
            return op.eval_str(mount.info.fs_type, value)
        if col is Col.REMOTE:
            return op.eval(mount.info.is_remote(), parse_bool(value))
        if col is Col.DISK:
            disk_type = mount.disk.disk_type() if mount.disk is not None else None
            return op.eval_option_str(disk_type, value)
        if col is Col.USED:
            return op.eval_option(
                _stats_value(mount, lambda s: s.used()), parse_integer(value)
            )
        if col in (Col.USE, Col.USE_PERCENT):
            return op.eval_option(
                _stats_value(mount, lambda s: s.use_share()), parse_float(value)
            )
        if col in (Col.FREE, Col.FREE_PERCENT):
            return op.eval_option(
                _stats_value(mount, lambda s: s.available()), parse_integer(value)
            )
        if col is Col.SIZE:
            return op.eval_option(
                _stats_value(mount, lambda s: s.size()), parse_integer(value)
            )
        if col is Col.INODES_USED:
            return op.eval_option(
                _inodes_value(mount, lambda i: i.used()), parse_integer(value)
            )
        if col in (Col.INODES_USE, Col.INODES_USE_PERCENT):
            return op.eval_option(
                _inodes_value(mount, lambda i: i.use_share()), parse_float(value)
            )
        if col is Col.INODES_FREE:
            return op.eval_option(
                _inodes_value(mount, lambda i: i.favail), parse_integer(value)
            )
        if col is Col.INODES_COUNT:
            return op.eval_option(
                _inodes_value(mount, lambda i: i.files), parse_integer(value)
            )
        if col is Col.MOUNT_POINT:
            return op.eval_str(str(mount.info.mount_point), value)
        if col is Col.UUID:
            return op.eval_option_str(mount.uuid, value)
        return op.eval_option_str(mount.part_uuid, value)


def parse_col_expr(text: str) -> ColExpr:
    """Parse "<column><operator><value>", eg "size<32G" or "type=xfs"."""
    op_idx = next((i for i, c in enumerate(text) if c in _OPERATOR_CHARS), 0)
    if op_idx == 0:
        raise ParseExprError(
            text, "Invalid expression; expected <column><operator><value>"
        )
    val_idx = next(
        (
            i
            for i in range(op_idx + 1, len(text))
            if text[i] not in _OPERATOR_CHARS
        ),
        op_idx + 1,
    )
    if val_idx == len(text):
        raise ParseExprError(text, "no value")
    try:
        col = parse_col(text[:op_idx])
    except ParseColError as e:
        raise ParseExprError(text, str(e)) from None
    op_text = text[op_idx:val_idx]
    try:
        operator = ColOperator(op_text)
    except ValueError:
        raise ParseExprError(text, f"unknown operator: {_quote(op_text)}") from None
    return ColExpr(col, operator, text[val_idx:])