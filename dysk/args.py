"""Command line arguments."""

from __future__ import annotations

import argparse
import enum
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Sequence

from .cols import Cols, default_cols, parse_cols
from .filter import Filter, parse_filter
from .sorting import Sorting, parse_sorting
from .units import Units, parse_units


class TriBool(enum.Enum):
    """A yes/no choice which may be left to be decided automatically."""

    AUTO = "auto"
    YES = "yes"
    NO = "no"

    def resolve(self, default: Callable[[], bool]) -> bool:
        """The choice, calling default when it's automatic."""
        if self is TriBool.YES:
            return True
        if self is TriBool.NO:
            return False
        return default()


@dataclass
class Args:
    """The options of a dysk run."""

    help: bool = False
    version: bool = False
    all: bool = False
    color: TriBool = TriBool.AUTO
    ascii: bool = False
    remote_stats: TriBool = TriBool.AUTO
    list_cols: bool = False
    inodes: bool = False
    cols: Cols = field(default_factory=default_cols)
    filter: Filter | None = None
    sort: Sorting = field(default_factory=Sorting)
    units: Units = Units.SI
    json: bool = False
    csv: bool = False
    csv_separator: str = ","
    path: Path | None = None

    def use_color(self) -> bool:
        """Whether to style the output; by default when stdout is a terminal."""
        return self.color.resolve(sys.stdout.isatty)


def _parse_tribool(text: str) -> TriBool:
    try:
        return TriBool(text)
    except ValueError:
        raise ValueError(
            f"invalid value {text!r} - possible values are 'auto', 'yes', and 'no'"
        ) from None


def _parse_char(text: str) -> str:
    if len(text) != 1:
        raise ValueError(f"{text!r} is not a single character")
    return text


def _converter(parse: Callable[[str], Any]) -> Callable[[str], Any]:
    def convert(text: str) -> Any:
        try:
            return parse(text)
        except ValueError as e:
            raise argparse.ArgumentTypeError(str(e)) from None

    convert.__name__ = parse.__name__
    return convert


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dysk",
        description="List your filesystems.",
        add_help=False,
    )
    add = parser.add_argument
    add("--help", action="store_true", help="print help information")
    add("--version", action="store_true", help="print the version")
    add("-a", "--all", action="store_true", help="show all mount points")
    add(
        "--color", type=_converter(_parse_tribool), default="auto", metavar="color",
        help="whether to have styles and colors",
    )
    add("--ascii", action="store_true", help="use only ASCII characters for table rendering")
    add(
        "--remote-stats", type=_converter(_parse_tribool), default="auto", metavar="choice",
        help="fetch stats of remote volumes",
    )
    add(
        "--list-cols", action="store_true",
        help="list the column names which can be used in -s, -f, or -c",
    )
    add(
        "-i", "--inodes", action="store_true",
        help="show inodes information instead of byte counts",
    )
    add(
        "-c", "--cols", type=_converter(parse_cols),
        default="fs+type+disk+used+use+free+size+mp", metavar="columns",
        help="columns, eg `-c +inodes` or `-c id+dev+default`",
    )
    add(
        "-f", "--filter", type=_converter(parse_filter), default=None, metavar="expr",
        help="filter, eg `-f '(size<35G | remote=false) & type=xfs'`",
    )
    add(
        "-s", "--sort", type=_converter(parse_sorting), default="size", metavar="sort",
        help="sort, eg `inodes`, `type-desc`, or `size-asc`",
    )
    add(
        "-u", "--units", type=_converter(parse_units), default="SI", metavar="unit",
        help="units: `SI` (SI norm), `binary` (1024 based), or `bytes` (raw number)",
    )
    add("-j", "--json", action="store_true", help="output as JSON")
    add("--csv", action="store_true", help="output as CSV")
    add(
        "--csv-separator", type=_converter(_parse_char), default=",", metavar="sep",
        help="CSV separator",
    )
    add(
        "path", nargs="?", type=Path, default=None,
        help="if provided, only the device holding this path will be shown",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Args:
    """Parse the command line; exits with status 2 on invalid arguments."""
    namespace = build_parser().parse_args(argv)
    return Args(**vars(namespace))