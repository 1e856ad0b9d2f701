"""The dysk command: read, select, sort and display the mounted filesystems."""

from __future__ import annotations

import dataclasses
import json
import os
import re
import sys
from functools import cmp_to_key
from typing import Sequence

from .args import Args, parse_args
from .col_expr import EvalExprError
from .cols import default_cols, parse_cols
from .csv_out import print_csv
from .filter import Filter
from .help_text import print_help
from .json_out import output_value
from .list_cols import print_list_cols
from .mount import DeviceId, Mount, is_normal, read_mounts
from .table import print_table

_VERSION = "2.10.1"
_SUMMARY_FS = "filesystem_summary"
_LUSTRE_COLS = "fs+used+use+free+size+mp"
_U32 = re.compile(r"\+?[0-9]+")


def parse_lustre_component(name: str) -> tuple[str, int] | None:
    """Split names like "lustre-MDT0000_UUID" into ("MDT", 0)."""
    dash = name.find("-")
    if dash < 0:
        return None
    after_dash = name[dash + 1 :]
    underscore = after_dash.find("_")
    if underscore < 0:
        return None
    part = after_dash[:underscore]
    if len(part.encode("utf-8")) < 7:
        return None
    comp_type, num_str = part[:3], part[3:]
    if not _U32.fullmatch(num_str):
        return None
    num = int(num_str)
    if num >= 2**32:
        return None
    return comp_type, num


def is_lustre_server_component(mount_point: object) -> bool:
    """Whether a mount point looks like one of a Lustre server."""
    path = str(mount_point)
    return (
        "-ost" in path
        or "-mdt" in path
        or "-mds" in path
        or ("ost" in path and ("lustre" in path or "scratch" in path))
        or ("mdt" in path and ("lustre" in path or "scratch" in path))
    )


def is_lustre_component_mount(mount: Mount) -> bool:
    """Whether the mount stands for a single MDT or OST."""
    path = str(mount.info.mount_point)
    return "[MDT:" in path or "[OST:" in path


def replace_lustre_client_mounts(mounts: list[Mount], lustre_mounts: Sequence[Mount]) -> None:
    """Put the Lustre client mounts in place of their plain counterparts."""
    for lustre_mount in lustre_mounts:
        if is_lustre_component_mount(lustre_mount):
            continue
        pos = next(
            (
                i
                for i, m in enumerate(mounts)
                if m.info.fs_type == "lustre"
                and m.info.mount_point == lustre_mount.info.mount_point
            ),
            None,
        )
        if pos is None:
            mounts.append(lustre_mount)
        else:
            mounts[pos] = lustre_mount


def _compare_lustre(a: Mount, b: Mount) -> int:
    a_name, b_name = a.info.fs, b.info.fs
    by_name = (a_name > b_name) - (a_name < b_name)
    a_client, b_client = a_name == _SUMMARY_FS, b_name == _SUMMARY_FS
    if a_client != b_client:
        return 1 if a_client else -1
    if a_client:
        return by_name
    a_parts, b_parts = parse_lustre_component(a_name), parse_lustre_component(b_name)
    if a_parts is None or b_parts is None:
        return by_name
    (a_type, a_idx), (b_type, b_idx) = a_parts, b_parts
    if (a_type, b_type) == ("MDT", "OST"):
        return -1
    if (a_type, b_type) == ("OST", "MDT"):
        return 1
    return (a_idx > b_idx) - (a_idx < b_idx)


def order_lustre_mounts(mounts: list[Mount]) -> None:
    """Sort in place: MDTs, then OSTs, then the filesystem summary."""
    mounts.sort(key=cmp_to_key(_compare_lustre))


def _is_lustre(mount: Mount) -> bool:
    return mount.info.fs_type == "lustre"


def _prepare(
    mounts: list[Mount], lustre_mounts: Sequence[Mount], args: Args
) -> tuple[list[Mount], Args]:
    """Select and order the mounts to show, and settle the display options.

    Raises OSError when the path of args can't be read.
    """
    mounts = [
        m
        for m in mounts
        if not (_is_lustre(m) and is_lustre_server_component(m.info.mount_point))
    ]
    replace_lustre_client_mounts(mounts, lustre_mounts)
    components = [m for m in lustre_mounts if is_lustre_component_mount(m)]
    mounts.extend(components)
    has_lustre = bool(components) or any(_is_lustre(m) for m in mounts)

    if args.all:
        args.sort.sort(mounts)
    elif has_lustre:
        mounts = [m for m in mounts if _is_lustre(m)]
        order_lustre_mounts(mounts)
    else:
        mounts = [m for m in mounts if is_normal(m)]
        args.sort.sort(mounts)

    final_args = args
    if (
        has_lustre
        and not args.all
        and all(_is_lustre(m) for m in mounts)
        and args.cols == default_cols()
    ):
        final_args = dataclasses.replace(args, cols=parse_cols(_LUSTRE_COLS))

    if args.path is not None:
        st = os.stat(args.path)
        dev = DeviceId(os.major(st.st_dev), os.minor(st.st_dev))
        mounts = [m for m in mounts if m.info.dev == dev]

    lustre_only_view = has_lustre and not args.all and all(_is_lustre(m) for m in mounts)
    if not lustre_only_view:
        final_args.sort.sort(mounts)
    return mounts, final_args


def _csi_reset() -> None:
    sys.stdout.write("\x1b[0m")


def run(argv: Sequence[str] | None = None) -> None:
    """Run dysk with the given command line arguments."""
    args = parse_args(argv)
    if args.version:
        print(f"dysk {_VERSION}")
        return
    if args.help:
        print_help(args.ascii)
        _csi_reset()
        return
    if args.list_cols:
        print_list_cols(args.use_color(), args.ascii)
        _csi_reset()
        return

    try:
        mounts = read_mounts(args.remote_stats.resolve(lambda: True))
    except OSError as e:
        print(f"Error reading mounts: {e}", file=sys.stderr)
        return

    try:
        mounts, final_args = _prepare(mounts, [], args)
    except OSError as e:
        print(f"Can't read {json.dumps(str(args.path))} : {e}", file=sys.stderr)
        return

    try:
        mounts = (final_args.filter or Filter()).filter(mounts)
    except EvalExprError as e:
        print(f"Error in filter evaluation: {e}", file=sys.stderr)
        return

    if final_args.csv:
        print_csv(mounts, final_args)
        return
    if final_args.json:
        print(json.dumps(output_value(mounts, final_args.units), indent=2, ensure_ascii=False))
        return
    if not mounts:
        print("no mount to display - try\n    dysk -a")
        return
    print_table(mounts, final_args.use_color(), final_args)
    _csi_reset()


def main(argv: Sequence[str] | None = None) -> None:
    run(argv)