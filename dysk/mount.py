"""Mounted filesystems: their description, statistics and discovery."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

_MOUNTINFO_PATH = Path("/proc/self/mountinfo")
_SYS_DEV_BLOCK = Path("/sys/dev/block")
_BY_LABEL = Path("/dev/disk/by-label")
_BY_UUID = Path("/dev/disk/by-uuid")
_BY_PARTUUID = Path("/dev/disk/by-partuuid")

_REMOTE_ONLY_FS_TYPES = frozenset(
    {"afs", "coda", "auristorfs", "fhgfs", "gpfs", "ibrix", "ocfs2", "vxfs"}
)
_SMB_FS_TYPES = frozenset({"cifs", "smb3", "smbfs"})


@dataclass(frozen=True, order=True)
class DeviceId:
    """A block device id, as major and minor numbers."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}:{self.minor}"


@dataclass
class Inodes:
    """Inode counts of a filesystem."""

    files: int
    ffree: int
    favail: int

    def used(self) -> int:
        return self.files - self.ffree

    def use_share(self) -> float:
        if self.files == 0:
            return 0.0
        return self.used() / self.files


@dataclass
class Stats:
    """Block statistics of a filesystem."""

    bsize: int
    blocks: int
    bfree: int
    bavail: int
    inodes: Inodes | None = None

    def size(self) -> int:
        return self.bsize * self.blocks

    def available(self) -> int:
        return self.bsize * self.bavail

    def used(self) -> int:
        return self.size() - self.available()

    def use_share(self) -> float:
        size = self.size()
        if size == 0:
            return 0.0
        return self.used() / size


@dataclass
class Disk:
    """The block device holding a filesystem."""

    name: str
    rotational: bool | None = None
    removable: bool | None = None
    ram: bool = False
    image: bool = False
    lvm: bool = False
    crypted: bool = False

    def disk_type(self) -> str:
        """A short name of the kind of storage."""
        if self.ram:
            return "RAM"
        if self.image:
            return "imag"
        if self.crypted:
            return "crypt"
        if self.lvm:
            return "LVM"
        if self.removable:
            return "remov"
        if self.removable is False and self.rotational is True:
            return "HDD"
        if self.removable is False and self.rotational is False:
            return "SSD"
        return "???"


@dataclass
class MountInfo:
    """What the mount table says about a mount point."""

    id: int
    parent: int
    dev: DeviceId
    root: str
    mount_point: str
    fs: str
    fs_type: str
    bound: bool = False

    def is_remote(self) -> bool:
        if self.fs_type in _REMOTE_ONLY_FS_TYPES:
            return True
        if self.fs.startswith("//") and self.fs_type in _SMB_FS_TYPES:
            return True
        return ":" in self.fs


@dataclass
class Mount:
    """A mounted filesystem with everything known about it."""

    info: MountInfo
    fs_label: str | None = None
    disk: Disk | None = None
    stats: Stats | None = None
    unreachable: bool = False
    uuid: str | None = None
    part_uuid: str | None = None

    def inodes(self) -> Inodes | None:
        return self.stats.inodes if self.stats is not None else None

    def is_unreachable(self) -> bool:
        return self.unreachable


def is_normal(m: Mount) -> bool:
    """Whether the filesystem should be listed in standard mode (not --all)."""
    if m.info.fs_type == "lustre":
        return True
    return (
        (m.stats is not None or m.is_unreachable())
        and (
            m.disk is not None
            or m.info.fs_type == "zfs"
            or m.info.is_remote()
            or m.info.fs_type == "lustre"
        )
        and not m.info.bound
        and m.info.fs_type != "squashfs"
    )


def _unescape_octal(field: str) -> str:
    return re.sub(r"\\([0-7]{3})", lambda mo: chr(int(mo.group(1), 8)), field)


def _decode_udev_name(name: str) -> str:
    return re.sub(r"\\x([0-9a-fA-F]{2})", lambda mo: chr(int(mo.group(1), 16)), name)


def _parse_mountinfo_line(line: str) -> MountInfo | None:
    fields = line.split()
    try:
        sep = fields.index("-", 6)
    except ValueError:
        return None
    if len(fields) < sep + 3:
        return None
    try:
        major, minor = (int(part) for part in fields[2].split(":"))
        return MountInfo(
            id=int(fields[0]),
            parent=int(fields[1]),
            dev=DeviceId(major, minor),
            root=_unescape_octal(fields[3]),
            mount_point=_unescape_octal(fields[4]),
            fs=_unescape_octal(fields[sep + 2]),
            fs_type=_unescape_octal(fields[sep + 1]),
        )
    except ValueError:
        return None


def _is_within(root: str, base: str) -> bool:
    return PurePosixPath(root).is_relative_to(PurePosixPath(base))


def _parse_mountinfo(text: str) -> list[MountInfo]:
    infos: list[MountInfo] = []
    for line in text.splitlines():
        info = _parse_mountinfo_line(line)
        if info is None:
            continue
        info.bound = any(
            prev.dev == info.dev and _is_within(info.root, prev.root) for prev in infos
        )
        infos.append(info)
    return infos


def _read_by_links(directory: Path) -> dict[str, str]:
    try:
        entries = list(directory.iterdir())
    except OSError:
        return {}
    links = {}
    for entry in entries:
        links[os.path.realpath(entry)] = _decode_udev_name(entry.name)
    return links


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError:
        return None


def _read_flag(path: Path) -> bool | None:
    text = _read_text(path)
    if text == "1":
        return True
    if text == "0":
        return False
    return None


def _read_disk(dev: DeviceId) -> Disk | None:
    try:
        path = (_SYS_DEV_BLOCK / str(dev)).resolve(strict=True)
    except OSError:
        return None
    if (path / "partition").exists():
        path = path.parent
    name = path.name
    dm_uuid = _read_text(path / "dm" / "uuid") or ""
    return Disk(
        name=name,
        rotational=_read_flag(path / "queue" / "rotational"),
        removable=_read_flag(path / "removable"),
        ram=name.startswith(("ram", "zram")),
        image=name.startswith("loop"),
        lvm=dm_uuid.startswith("LVM-"),
        crypted=dm_uuid.startswith("CRYPT-"),
    )


def _read_stats(mount_point: str) -> Stats | None:
    st = os.statvfs(mount_point)
    if st.f_blocks == 0:
        return None
    inodes = Inodes(st.f_files, st.f_ffree, st.f_favail) if st.f_files > 0 else None
    return Stats(
        bsize=st.f_frsize or st.f_bsize,
        blocks=st.f_blocks,
        bfree=st.f_bfree,
        bavail=st.f_bavail,
        inodes=inodes,
    )


def read_mounts(remote_stats: bool = True) -> list[Mount]:
    """Read the mount table of the current process, with stats and disk info.

    Raises OSError when the mount table can't be read.
    """
    text = _MOUNTINFO_PATH.read_text(encoding="utf-8", errors="surrogateescape")
    labels = _read_by_links(_BY_LABEL)
    uuids = _read_by_links(_BY_UUID)
    part_uuids = _read_by_links(_BY_PARTUUID)
    disks: dict[DeviceId, Disk | None] = {}
    mounts = []
    for info in _parse_mountinfo(text):
        remote = info.is_remote()
        stats = None
        unreachable = False
        if remote_stats or not remote:
            try:
                stats = _read_stats(info.mount_point)
            except OSError:
                unreachable = remote
        if info.dev not in disks:
            disks[info.dev] = _read_disk(info.dev)
        device = os.path.realpath(info.fs) if info.fs.startswith("/") else info.fs
        mounts.append(
            Mount(
                info=info,
                fs_label=labels.get(device),
                disk=disks[info.dev],
                stats=stats,
                unreachable=unreachable,
                uuid=uuids.get(device),
                part_uuid=part_uuids.get(device),
            )
        )
    return mounts