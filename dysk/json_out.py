"""JSON-ready description of mounts."""

from __future__ import annotations

from typing import Any, Iterable

from .mount import Disk, Inodes, Mount, Stats
from .units import Units


def _as_percent(share: float) -> str:
    return f"{100.0 * share:.0f}%"


def _sorted(fields: dict[str, Any]) -> dict[str, Any]:
    return dict(sorted(fields.items()))


def _describe_inodes(inodes: Inodes | None) -> dict[str, Any] | None:
    if inodes is None:
        return None
    return _sorted(
        {
            "files": inodes.files,
            "free": inodes.ffree,
            "avail": inodes.favail,
            "used-percent": _as_percent(inodes.use_share()),
        }
    )


def _describe_stats(stats: Stats | None, units: Units) -> dict[str, Any] | None:
    if stats is None:
        return None
    raw = {name: getattr(stats, name) for name in ("bsize", "blocks", "bfree", "bavail")}
    formatted = {
        "size": units.fmt(stats.size()),
        "used": units.fmt(stats.used()),
        "available": units.fmt(stats.available()),
    }
    return _sorted(
        {
            **raw,
            **formatted,
            "used-percent": _as_percent(stats.use_share()),
            "inodes": _describe_inodes(stats.inodes),
        }
    )


def _describe_disk(disk: Disk | None) -> dict[str, Any] | None:
    if disk is None:
        return None
    flags = {name: getattr(disk, name) for name in ("rotational", "removable", "crypted", "ram")}
    return _sorted({**flags, "type": disk.disk_type()})


def _describe_mount(mount: Mount, units: Units) -> dict[str, Any]:
    info = mount.info
    return _sorted(
        {
            "id": info.id,
            "dev": {"major": info.dev.major, "minor": info.dev.minor},
            "fs": info.fs,
            "fs-label": mount.fs_label,
            "fs-type": info.fs_type,
            "mount-point": str(info.mount_point),
            "disk": _describe_disk(mount.disk),
            "stats": _describe_stats(mount.stats, units),
            "bound": info.bound,
            "remote": info.is_remote(),
            "unreachable": mount.is_unreachable(),
        }
    )


def output_value(mounts: Iterable[Mount], units: Units) -> list[dict[str, Any]]:
    """Describe the mounts as JSON-serializable values, keys in sorted order."""
    return [_describe_mount(mount, units) for mount in mounts]