"""CSV output of the mount list."""

from __future__ import annotations

import math
import sys
from decimal import Decimal
from typing import Any, Iterable, TextIO

from .col import Col
from .mount import Inodes, Mount, Stats
from .units import Units

_BYTE_COLS = frozenset(
    {Col.USED, Col.USE, Col.USE_PERCENT, Col.FREE, Col.FREE_PERCENT, Col.SIZE}
)


def _display(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        text = repr(value)
        if "e" in text:
            return format(Decimal(text), "f")
        return text
    return str(value)


def _percent(share: float) -> str:
    return f"{100.0 * share:.0f}%"


class CsvWriter:
    """Writes cells, each followed by the separator, quoting when needed."""

    def __init__(self, separator: str, out: TextIO) -> None:
        self.separator = separator
        self.out = out

    def cell(self, content: Any) -> None:
        s = _display(content)
        if self.separator in s or '"' in s or "\n" in s:
            s = '"' + s.replace('"', '""') + '"'
        self.out.write(s + self.separator)

    def cell_opt(self, content: Any | None) -> None:
        if content is None:
            self.out.write(self.separator)
        else:
            self.cell(content)

    def end_line(self) -> None:
        self.out.write("\n")


def _inodes_value(col: Col, inodes: Inodes) -> Any:
    if col in (Col.USED, Col.INODES_USED):
        return inodes.used()
    if col in (Col.USE, Col.INODES_USE):
        return inodes.use_share()
    if col in (Col.USE_PERCENT, Col.INODES_USE_PERCENT):
        return _percent(inodes.use_share())
    if col in (Col.FREE, Col.INODES_FREE):
        return inodes.favail
    if col is Col.FREE_PERCENT:
        return _percent(1.0 - inodes.use_share())
    return inodes.files


def _stats_value(col: Col, stats: Stats, units: Units) -> Any:
    if col is Col.USED:
        return units.fmt(stats.used())
    if col is Col.USE:
        return stats.use_share()
    if col is Col.USE_PERCENT:
        return _percent(stats.use_share())
    if col is Col.FREE:
        return units.fmt(stats.available())
    if col is Col.FREE_PERCENT:
        return _percent(1.0 - stats.use_share())
    return units.fmt(stats.size())


def _csv_value(col: Col, mount: Mount, units: Units, inodes_mode: bool) -> Any:
    info = mount.info
    if col is Col.ID:
        return info.id
    if col is Col.DEV:
        return f"{info.dev.major}:{info.dev.minor}"
    if col is Col.FILESYSTEM:
        return info.fs
    if col is Col.LABEL:
        return mount.fs_label
    if col is Col.TYPE:
        return info.fs_type
    if col is Col.REMOTE:
        return "yes" if info.is_remote() else "no"
    if col is Col.DISK:
        return mount.disk.disk_type() if mount.disk is not None else None
    if col is Col.MOUNT_POINT:
        return str(info.mount_point)
    if col is Col.UUID:
        return mount.uuid or ""
    if col is Col.PART_UUID:
        return mount.part_uuid or ""
    if col in _BYTE_COLS and not inodes_mode:
        return None if mount.stats is None else _stats_value(col, mount.stats, units)
    inodes = mount.inodes()
    return None if inodes is None else _inodes_value(col, inodes)


def print_csv(mounts: Iterable[Mount], args: Any, out: TextIO | None = None) -> None:
    """Write the mounts as CSV, with the columns and options of args."""
    writer = CsvWriter(args.csv_separator, out if out is not None else sys.stdout)
    for col in args.cols:
        writer.cell(col.title(args.inodes))
    writer.end_line()
    for mount in mounts:
        for col in args.cols:
            writer.cell_opt(_csv_value(col, mount, args.units, args.inodes))
        writer.end_line()