"""Columns of the filesystem table."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Callable

from .mount import Mount
from .order import Order


class Alignment(enum.Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Col(enum.Enum):
    """A column of the table, valued by its name in --cols."""

    ID = "id"
    DEV = "dev"
    FILESYSTEM = "fs"
    LABEL = "label"
    TYPE = "type"
    REMOTE = "remote"
    DISK = "disk"
    USED = "used"
    USE = "use"
    USE_PERCENT = "use_percent"
    FREE = "free"
    FREE_PERCENT = "free_percent"
    SIZE = "size"
    INODES_USED = "inodes_used"
    INODES_USE = "inodes"
    INODES_USE_PERCENT = "inodes_use_percent"
    INODES_FREE = "inodes_free"
    INODES_COUNT = "inodes_total"
    MOUNT_POINT = "mount"
    UUID = "uuid"
    PART_UUID = "partuuid"

    def __str__(self) -> str:
        return self.title(False)

    def key(self) -> str:
        """The name of the column in --cols, --sort and --filter."""
        return self.value

    def title(self, inodes_mode: bool) -> str:
        spec = _SPECS[self]
        return spec.inode_title if inodes_mode else spec.title

    def aliases(self) -> tuple[str, ...]:
        return _SPECS[self].aliases

    def is_default(self) -> bool:
        return self in DEFAULT_COLS

    def header_align(self) -> Alignment:
        if self in (Col.LABEL, Col.MOUNT_POINT):
            return Alignment.LEFT
        return Alignment.CENTER

    def content_align(self) -> Alignment:
        return _SPECS[self].content_align

    def description(self) -> str:
        return _SPECS[self].description

    def compare(self, a: Mount, b: Mount) -> int:
        """Compare two mounts on this column: negative, zero or positive."""
        key, missing_first = _SORT_KEYS[self]
        return _compare_optional(key(a), key(b), missing_first)

    def default_sort_order(self) -> Order:
        return _SPECS[self].sort_order


@dataclass(frozen=True)
class _ColSpec:
    aliases: tuple[str, ...]
    title: str
    inode_title: str
    default: bool
    description: str
    content_align: Alignment = Alignment.CENTER
    sort_order: Order = Order.ASC


_L = Alignment.LEFT
_DESC = Order.DESC

_SPECS: dict[Col, _ColSpec] = {
    Col.ID: _ColSpec((), "id", "id", False, "mount point id"),
    Col.DEV: _ColSpec(("device", "device_id"), "dev", "dev", False, "device id"),
    Col.FILESYSTEM: _ColSpec(
        ("filesystem",), "filesystem", "filesystem", True, "filesystem", _L
    ),
    Col.LABEL: _ColSpec((), "label", "label", False, "volume label", _L),
    Col.TYPE: _ColSpec((), "type", "type", True, "filesystem type"),
    Col.REMOTE: _ColSpec(
        ("rem",), "remote", "remote", False, "whether it's a remote filesystem",
        sort_order=_DESC,
    ),
    Col.DISK: _ColSpec(("dsk",), "disk", "disk", True, "storage type"),
    Col.USED: _ColSpec(
        (), "bytes used", "inodes used", True, "bytes used (or inodes used with -i)"
    ),
    Col.USE: _ColSpec(
        (), "use %", "use %", True, "usage graphical view (bytes or inodes with -i)",
        sort_order=_DESC,
    ),
    Col.USE_PERCENT: _ColSpec(
        (), "bytes %", "inodes %", False, "percentage used (bytes or inodes with -i)"
    ),
    Col.FREE: _ColSpec(
        (), "bytes free", "inodes free", True, "free bytes (or free inodes with -i)"
    ),
    Col.FREE_PERCENT: _ColSpec(
        (), "bytes free %", "inodes free %", False,
        "percentage free (bytes or inodes with -i)", sort_order=_DESC,
    ),
    Col.SIZE: _ColSpec(
        (), "bytes total", "inodes total", True,
        "total size (bytes or inodes with -i)", sort_order=_DESC,
    ),
    Col.INODES_USED: _ColSpec(
        ("iused",), "used inodes", "used inodes", False, "number of inodes used"
    ),
    Col.INODES_USE: _ColSpec(
        ("ino", "inodes_use", "iuse"), "inodes", "inodes", False,
        "graphical view of inodes usage",
    ),
    Col.INODES_USE_PERCENT: _ColSpec(
        ("iuse_percent",), "inodes%", "inodes%", False, "percentage of inodes used"
    ),
    Col.INODES_FREE: _ColSpec(
        ("ifree",), "free inodes", "free inodes", False, "number of free inodes"
    ),
    Col.INODES_COUNT: _ColSpec(
        ("inodes_count", "itotal"), "inodes total", "inodes total", False,
        "total count of inodes",
    ),
    Col.MOUNT_POINT: _ColSpec(
        ("mount_point", "mp"), "mount point", "mount point", True, "mount point", _L
    ),
    Col.UUID: _ColSpec((), "UUID", "UUID", False, "filesystem UUID", _L),
    Col.PART_UUID: _ColSpec(
        ("part_uuid",), "PARTUUID", "PARTUUID", False, "partition UUID", _L
    ),
}

ALL_COLS: tuple[Col, ...] = tuple(Col)
DEFAULT_COLS: tuple[Col, ...] = tuple(col for col in Col if _SPECS[col].default)

_BY_NAME: dict[str, Col] = {}
for _col in Col:
    _BY_NAME[_col.value] = _col
    for _alias in _SPECS[_col].aliases:
        _BY_NAME[_alias] = _col


def _compare_optional(x: Any, y: Any, missing_first: bool) -> int:
    if x is None and y is None:
        return 0
    if x is None:
        return -1 if missing_first else 1
    if y is None:
        return 1 if missing_first else -1
    return (x > y) - (x < y)


def _on_stats(getter: Callable[[Any], Any]) -> Callable[[Mount], Any]:
    return lambda m: getter(m.stats) if m.stats is not None else None


def _on_inodes(getter: Callable[[Any], Any]) -> Callable[[Mount], Any]:
    def key(m: Mount) -> Any:
        inodes = m.inodes()
        return getter(inodes) if inodes is not None else None

    return key


_SORT_KEYS: dict[Col, tuple[Callable[[Mount], Any], bool]] = {
    Col.ID: (lambda m: m.info.id, True),
    Col.DEV: (lambda m: m.info.dev, True),
    Col.FILESYSTEM: (lambda m: m.info.fs, True),
    Col.LABEL: (lambda m: m.fs_label, False),
    Col.TYPE: (lambda m: m.info.fs_type, True),
    Col.REMOTE: (lambda m: m.info.is_remote(), True),
    Col.DISK: (
        lambda m: m.disk.disk_type().lower() if m.disk is not None else None,
        True,
    ),
    Col.USED: (_on_stats(lambda s: s.used()), True),
    Col.USE: (_on_stats(lambda s: s.use_share()), True),
    Col.USE_PERCENT: (_on_stats(lambda s: s.use_share()), True),
    Col.FREE: (_on_stats(lambda s: s.available()), True),
    Col.FREE_PERCENT: (_on_stats(lambda s: -s.use_share()), True),
    Col.SIZE: (_on_stats(lambda s: s.size()), True),
    Col.INODES_USED: (_on_inodes(lambda i: i.used()), True),
    Col.INODES_USE: (_on_inodes(lambda i: i.use_share()), True),
    Col.INODES_USE_PERCENT: (_on_inodes(lambda i: i.use_share()), True),
    Col.INODES_FREE: (_on_inodes(lambda i: i.favail), True),
    Col.INODES_COUNT: (_on_inodes(lambda i: i.files), True),
    Col.MOUNT_POINT: (lambda m: PurePosixPath(m.info.mount_point).parts, True),
    Col.UUID: (lambda m: m.uuid, False),
    Col.PART_UUID: (lambda m: m.part_uuid, False),
}


class ParseColError(ValueError):
    """Raised when a string isn't a column name or alias."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(
            f"{json.dumps(raw, ensure_ascii=False)} can't be parsed as a column; "
            "use 'dysk --list-cols' to see all column names"
        )


def parse_col(s: str) -> Col:
    """Find the column with this name or alias."""
    try:
        return _BY_NAME[s]
    except KeyError:
        raise ParseColError(s) from None


def default_sort_col() -> Col:
    return Col.SIZE