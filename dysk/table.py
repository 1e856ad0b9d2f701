"""Rendering of the mount list as a text table."""

from __future__ import annotations

import math
import re
import sys
import unicodedata
from typing import Any, Iterable, Optional, Sequence, TextIO

from .col import Alignment, Col
from .mount import Mount

# "redish" for used, "greenish" for available, readable on dark and light backgrounds
USED_COLOR = 209
AVAI_COLOR = 65
SIZE_COLOR = 172

BAR_WIDTH = 5
INODES_BAR_WIDTH = 5

_RESET = "\x1b[0m"

_Segment = tuple[str, Optional[str]]
_Cell = list[_Segment]


def _fg(n: int) -> str:
    return f"\x1b[38;5;{n}m"


def _bg(n: int) -> str:
    return f"\x1b[48;5;{n}m"


_TABLE_STYLES = {
    "used": _fg(USED_COLOR),
    "avail": _fg(AVAI_COLOR),
    "size": _fg(SIZE_COLOR),
    "bar": _fg(USED_COLOR) + _bg(AVAI_COLOR),
}

_MARKDOWN_STYLES = {
    "bold": "\x1b[1m",
    "code": _fg(249) + _bg(235),
    "strike": "\x1b[9m",
    "italic": "\x1b[3m",
}

_INLINE = re.compile(r"\*\*(.+?)\*\*|`([^`]*)`|~~(.+?)~~|\*([^*]+)\*")
_INLINE_STYLES = ("bold", "code", "strike", "italic")

_UNICODE_BORDERS = ("│", "─", "┌┬┐", "├┼┤", "└┴┘")
_ASCII_BORDERS = ("|", "-", "+++", "+++", "+++")

_PARTIAL_BLOCKS = " ▏▎▍▌▋▊▉"


def _round_half_up(v: float) -> int:
    return math.floor(v + 0.5)


def _text_width(text: str) -> int:
    return sum(2 if unicodedata.east_asian_width(c) in "WF" else 1 for c in text)


def _parse_inline(text: str) -> list[_Segment]:
    """Split a line of inline markdown into styled segments."""
    segments: list[_Segment] = []
    pos = 0
    for mo in _INLINE.finditer(text):
        if mo.start() > pos:
            segments.append((text[pos : mo.start()], None))
        index = mo.lastindex or 1
        segments.append((mo.group(index), _INLINE_STYLES[index - 1]))
        pos = mo.end()
    if pos < len(text):
        segments.append((text[pos:], None))
    return segments


def _paint(text: str, style: str | None, styles: dict[str, str] | None) -> str:
    if not text or style is None or styles is None:
        return text
    return styles[style] + text + _RESET


def _paint_segments(segments: Iterable[_Segment], styles: dict[str, str] | None) -> str:
    return "".join(_paint(text, style, styles) for text, style in segments)


def _cell_width(cell: _Cell) -> int:
    return _text_width("".join(text for text, _ in cell))


def _render_cell(
    cell: _Cell, width: int, align: Alignment, styles: dict[str, str] | None
) -> str:
    pad = width - _cell_width(cell)
    if align is Alignment.LEFT:
        left = 0
    elif align is Alignment.RIGHT:
        left = pad
    else:
        left = pad // 2
    return " " * left + _paint_segments(cell, styles) + " " * (pad - left)


def _render_grid(
    header: Sequence[_Cell],
    rows: Sequence[Sequence[_Cell]],
    header_aligns: Sequence[Alignment],
    content_aligns: Sequence[Alignment],
    styles: dict[str, str] | None,
    ascii: bool,
) -> list[str]:
    """Lay out cells in a bordered table, returning its lines."""
    vertical, horizontal, top, middle, bottom = (
        _ASCII_BORDERS if ascii else _UNICODE_BORDERS
    )
    widths = [max(_cell_width(c) for c in column) for column in zip(header, *rows)]

    def rule(chars: str) -> str:
        return chars[0] + chars[1].join(horizontal * w for w in widths) + chars[2]

    def line(cells: Sequence[_Cell], aligns: Sequence[Alignment]) -> str:
        rendered = (
            _render_cell(cell, width, align, styles)
            for cell, width, align in zip(cells, widths, aligns)
        )
        return vertical + vertical.join(rendered) + vertical

    return [
        rule(top),
        line(header, header_aligns),
        rule(middle),
        *(line(row, content_aligns) for row in rows),
        rule(bottom),
    ]


def progress_bar(share: float, bar_width: int, ascii: bool) -> str:
    """A bar of bar_width characters filled in proportion to share."""
    share = min(max(share, 0.0), 1.0)
    if ascii:
        count = min(_round_half_up(share * bar_width), bar_width)
        return "■" * count + "-" * (bar_width - count)
    eighths = _round_half_up(share * bar_width * 8)
    full, rest = divmod(eighths, 8)
    bar = "█" * full + (_PARTIAL_BLOCKS[rest] if rest else "")
    return bar.ljust(bar_width)


def _bar_segments(share: float, bar_width: int, ascii: bool) -> list[_Segment]:
    bar = progress_bar(share, bar_width, ascii)
    if ascii:
        filled = bar.count("■")
        return [(bar[:filled], "used"), (bar[filled:], "avail")]
    return [(bar, "bar")]


def _percents(share: float) -> str:
    return f"{100.0 * share:>3.0f}%"


def _set_usage(
    values: dict[str, Any],
    size: str,
    used: str,
    free: str,
    use_share: float,
    ascii: bool,
) -> None:
    values.update(
        {
            "size": size,
            "used": used,
            "use-percents": _percents(use_share),
            "bar": _bar_segments(use_share, BAR_WIDTH, ascii),
            "free": free,
            "free-percents": _percents(1.0 - use_share),
        }
    )


def _row_values(mount: Mount, args: Any) -> dict[str, Any]:
    info = mount.info
    values: dict[str, Any] = {
        "id": str(info.id),
        "dev": f"{info.dev.major}:{info.dev.minor}",
        "filesystem": info.fs,
        "disk": mount.disk.disk_type() if mount.disk is not None else "",
        "type": info.fs_type,
        "mount-point": str(info.mount_point),
        "uuid": mount.uuid or "",
        "part_uuid": mount.part_uuid or "",
        "label": mount.fs_label or "",
        "remote": "x" if info.is_remote() else "",
    }
    stats = mount.stats
    if stats is not None:
        inodes = stats.inodes
        if args.inodes:
            if inodes is not None:
                _set_usage(
                    values,
                    str(inodes.files),
                    str(inodes.used()),
                    str(inodes.favail),
                    inodes.use_share(),
                    args.ascii,
                )
            else:
                values["use-error"] = "no inodes data"
        else:
            units = args.units
            _set_usage(
                values,
                units.fmt(stats.size()),
                units.fmt(stats.used()),
                units.fmt(stats.available()),
                stats.use_share(),
                args.ascii,
            )
        if inodes is not None:
            share = inodes.use_share()
            values.update(
                {
                    "inodes": str(inodes.files),
                    "iused": str(inodes.used()),
                    "iuse-percents": _percents(share),
                    "ibar": _bar_segments(share, INODES_BAR_WIDTH, args.ascii),
                    "ifree": str(inodes.favail),
                }
            )
    elif mount.is_unreachable():
        values["use-error"] = "unreachable"
    return values


_SIMPLE_CELLS: dict[Col, tuple[str, str | None]] = {
    Col.ID: ("id", None),
    Col.DEV: ("dev", None),
    Col.FILESYSTEM: ("filesystem", None),
    Col.LABEL: ("label", None),
    Col.DISK: ("disk", None),
    Col.TYPE: ("type", None),
    Col.REMOTE: ("remote", None),
    Col.USED: ("used", "used"),
    Col.USE_PERCENT: ("use-percents", "used"),
    Col.FREE: ("free", "avail"),
    Col.FREE_PERCENT: ("free-percents", "avail"),
    Col.SIZE: ("size", "size"),
    Col.INODES_FREE: ("ifree", "avail"),
    Col.INODES_USED: ("iused", "used"),
    Col.INODES_USE_PERCENT: ("iuse-percents", "used"),
    Col.INODES_COUNT: ("inodes", "size"),
    Col.MOUNT_POINT: ("mount-point", None),
    Col.UUID: ("uuid", None),
    Col.PART_UUID: ("part_uuid", None),
}


def _cell(col: Col, values: dict[str, Any]) -> _Cell:
    if col is Col.USE:
        segments: _Cell = []
        if "use-percents" in values:
            segments += [(values["use-percents"], "used"), (" ", None), *values["bar"]]
        if "use-error" in values:
            segments.append((values["use-error"], "used"))
        return segments
    if col is Col.INODES_USE:
        if "iuse-percents" not in values:
            return []
        return [(values["iuse-percents"], "used"), (" ", None), *values["ibar"]]
    key, style = _SIMPLE_CELLS[col]
    return [(values.get(key, ""), style)]


def render_table(mounts: Iterable[Mount], color: bool, args: Any) -> str:
    """Render the mounts as a table with the columns of args."""
    cols = list(args.cols)
    if not cols:
        return ""
    mounts = list(mounts)
    is_lustre_display = len(mounts) > 1 and all(
        m.info.fs_type == "lustre" for m in mounts
    )
    rows: list[dict[str, Any]] = []
    added_separator = False
    for mount in mounts:
        if (
            is_lustre_display
            and not added_separator
            and mount.info.fs == "filesystem_summary"
        ):
            rows.append({})
            added_separator = True
        rows.append(_row_values(mount, args))
    header = [[(col.title(args.inodes), None)] for col in cols]
    body = [[_cell(col, values) for col in cols] for values in rows]
    lines = _render_grid(
        header,
        body,
        [col.header_align() for col in cols],
        [col.content_align() for col in cols],
        _TABLE_STYLES if color else None,
        args.ascii,
    )
    return "\n".join(lines) + "\n"


def print_table(
    mounts: Iterable[Mount], color: bool, args: Any, out: TextIO | None = None
) -> None:
    """Write the table of the mounts to out (stdout by default)."""
    (out if out is not None else sys.stdout).write(render_table(mounts, color, args))