"""Description of the available columns."""

from __future__ import annotations

import sys

from .col import ALL_COLS, Alignment
from .table import _MARKDOWN_STYLES, _paint_segments, _parse_inline, _render_grid

_INTRO = (
    "The `--cols` launch argument lets you specify the columns of the **dysk** table.",
    "",
    "You can give the explicit list of all columns: `dysk -c dev+fs`",
    "",
    "You can add columns to the default ones: `dysk -c +dev+size`",
)

_HEADERS = ("column", "aliases", "default", "content")
_ALIGNS = (Alignment.CENTER, Alignment.CENTER, Alignment.CENTER, Alignment.LEFT)


def render_list_cols(color: bool, ascii: bool) -> str:
    """A text describing the columns usable in --cols, --sort and --filter."""
    styles = _MARKDOWN_STYLES if color else None
    lines = ["", *(_paint_segments(_parse_inline(line), styles) for line in _INTRO), ""]
    header = [[(title, None)] for title in _HEADERS]
    rows = [
        [
            [(col.key(), None)],
            [(", ".join(col.aliases()), None)],
            [("x" if col.is_default() else "", None)],
            [(col.description(), None)],
        ]
        for col in ALL_COLS
    ]
    lines += _render_grid(header, rows, _ALIGNS, _ALIGNS, styles, ascii)
    return "\n".join(lines) + "\n"


def print_list_cols(color: bool, ascii: bool) -> None:
    sys.stdout.write(render_list_cols(color, ascii))