"""The help text of the dysk command."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from .args import build_parser
from .col import Alignment
from .table import _paint_segments, _parse_inline, _render_grid

_INTRO = "**dysk** displays filesystem information in a pretty table."
_USAGE = "**Usage:** `dysk [options] [path]`"


@dataclass(frozen=True)
class Example:
    title: str
    cmd: str
    comments: str = ""


EXAMPLES: tuple[Example, ...] = (
    Example("Standard overview of your usual disks", "dysk"),
    Example("List all filesystems", "dysk -a"),
    Example(
        "Display inodes information instead of bytes",
        "dysk -i",
        "Shows inode counts in used/free/size columns instead of byte counts",
    ),
    Example(
        "Display inodes information with custom columns",
        "dysk -c +inodes",
        "Add dedicated inode columns alongside byte columns",
    ),
    Example(
        "Add columns of your choice",
        "dysk -c label+dev+",
        "You may add columns before, after, or at any other place. "
        "You can change the column order too.",
    ),
    Example("See the disk of the current directory", "dysk ."),
    Example("Filter for low space", "dysk -f 'use > 65% | free < 50G'"),
    Example("Filter to exclude SSD disks", "dysk -f 'disk <> SSD'"),
    Example("Complex filter", "dysk -f '(type=xfs & remote=no) | size > 5T'"),
    Example("Export as JSON", "dysk -j"),
    Example(
        "Sort by free size",
        "dysk -s free",
        "Add `-desc` to the column name to sort in reverse.",
    ),
)

_OPTION_HEADERS = ("short", "long", "value", "default", "description")
_OPTION_ALIGNS = (
    Alignment.CENTER,
    Alignment.LEFT,
    Alignment.CENTER,
    Alignment.CENTER,
    Alignment.LEFT,
)


def _option_rows() -> list[tuple[str, ...]]:
    rows = []
    for action in build_parser()._actions:
        shorts = [o for o in action.option_strings if not o.startswith("--")]
        longs = [o for o in action.option_strings if o.startswith("--")]
        takes_value = action.nargs != 0
        name = action.metavar or action.dest
        value = f"<{name}>" if takes_value else ""
        default = action.default if takes_value and isinstance(action.default, str) else ""
        rows.append(
            (", ".join(shorts), ", ".join(longs), value, default, action.help or "")
        )
    return rows


def _plain(markdown: str) -> str:
    return _paint_segments(_parse_inline(markdown), None)


def render_help(ascii: bool) -> str:
    """The complete help: introduction, options and examples."""
    lines = ["", _plain(_INTRO), "", _plain(_USAGE), "", "Options:"]
    header = [[(title, None)] for title in _OPTION_HEADERS]
    rows = [[[(text, None)] for text in row] for row in _option_rows()]
    lines += _render_grid(header, rows, _OPTION_ALIGNS, _OPTION_ALIGNS, None, ascii)
    lines += ["", "Examples:", ""]
    for number, example in enumerate(EXAMPLES, start=1):
        lines.append(_plain(f"**{number})** {example.title}: `{example.cmd}`"))
        if example.comments:
            lines.append(_plain(example.comments))
    return "\n".join(lines) + "\n"


def print_help(ascii: bool) -> None:
    sys.stdout.write(render_help(ascii))