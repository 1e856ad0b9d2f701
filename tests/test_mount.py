import pytest

from dysk import mount as mount_module
from dysk.mount import (
    DeviceId,
    Disk,
    Inodes,
    Mount,
    MountInfo,
    Stats,
    is_normal,
    read_mounts,
)


def make_info(fs="/dev/sda1", fs_type="ext4", bound=False, mount_point="/data"):
    return MountInfo(
        id=30, parent=1, dev=DeviceId(8, 1), root="/",
        mount_point=mount_point, fs=fs, fs_type=fs_type, bound=bound,
    )


def make_stats(inodes=None):
    return Stats(bsize=4096, blocks=1000, bfree=400, bavail=300, inodes=inodes)


def ssd():
    return Disk(name="sda", rotational=False, removable=False)


def test_inodes_used_and_share():
    inodes = Inodes(files=100, ffree=40, favail=35)
    assert inodes.used() + inodes.ffree == inodes.files
    assert 0.0 <= inodes.use_share() <= 1.0
    assert inodes.use_share() == inodes.used() / inodes.files


def test_inodes_share_of_empty_is_zero():
    assert Inodes(files=0, ffree=0, favail=0).use_share() == 0.0


def test_stats_invariants():
    stats = make_stats()
    assert stats.used() + stats.available() == stats.size()
    assert stats.size() == stats.bsize * stats.blocks
    assert 0.0 <= stats.use_share() <= 1.0


def test_stats_share_of_empty():
    assert Stats(bsize=4096, blocks=0, bfree=0, bavail=0).use_share() == 0.0


def test_disk_types():
    assert ssd().disk_type() == "SSD"
    assert Disk(name="sdb", rotational=True, removable=False).disk_type() == "HDD"
    crypted = Disk(name="dm-0", rotational=False, removable=False, crypted=True)
    assert crypted.disk_type() != ssd().disk_type()


@pytest.mark.parametrize(
    "fs, fs_type, remote",
    [
        ("/dev/sda1", "ext4", False),
        ("server:/export", "nfs4", True),
        ("//host/share", "cifs", True),
        ("gpfs0", "gpfs", True),
        ("tmpfs", "tmpfs", False),
    ],
)
def test_is_remote(fs, fs_type, remote):
    assert make_info(fs=fs, fs_type=fs_type).is_remote() is remote


def test_mount_inodes_follow_stats():
    inodes = Inodes(files=10, ffree=5, favail=5)
    assert Mount(info=make_info(), stats=make_stats(inodes)).inodes() is inodes
    assert Mount(info=make_info()).inodes() is None


def test_unreachable_flag():
    assert Mount(info=make_info(), unreachable=True).is_unreachable() is True
    assert Mount(info=make_info()).is_unreachable() is False


def test_normal_disk_mount():
    assert is_normal(Mount(info=make_info(), disk=ssd(), stats=make_stats())) is True


def test_bound_mount_is_not_normal():
    m = Mount(info=make_info(bound=True), disk=ssd(), stats=make_stats())
    assert is_normal(m) is False


def test_squashfs_is_not_normal():
    m = Mount(info=make_info(fs_type="squashfs"), disk=ssd(), stats=make_stats())
    assert is_normal(m) is False


def test_without_disk_is_not_normal():
    m = Mount(info=make_info(fs="tmpfs", fs_type="tmpfs"), stats=make_stats())
    assert is_normal(m) is False


def test_without_stats_is_not_normal():
    assert is_normal(Mount(info=make_info(), disk=ssd())) is False


def test_zfs_without_disk_is_normal():
    m = Mount(info=make_info(fs="pool/data", fs_type="zfs"), stats=make_stats())
    assert is_normal(m) is True


def test_unreachable_remote_is_normal():
    m = Mount(info=make_info(fs="server:/x", fs_type="nfs"), unreachable=True)
    assert is_normal(m) is True


def test_lustre_is_always_normal():
    m = Mount(info=make_info(fs="filesystem_summary", fs_type="lustre", bound=True))
    assert is_normal(m) is True


def write_mountinfo(tmp_path, monkeypatch, lines):
    path = tmp_path / "mountinfo"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    monkeypatch.setattr(mount_module, "_MOUNTINFO_PATH", path)


def test_read_mounts_parses_mountinfo(tmp_path, monkeypatch):
    target = tmp_path / "mnt"
    target.mkdir()
    write_mountinfo(tmp_path, monkeypatch, [
        f"36 35 98:0 / {target} rw,noatime master:1 - ext3 /dev/testdev rw,errors=continue",
    ])
    mounts = read_mounts(remote_stats=True)
    assert len(mounts) == 1
    m = mounts[0]
    assert m.info.id == 36
    assert m.info.parent == 35
    assert m.info.dev == DeviceId(98, 0)
    assert m.info.mount_point == str(target)
    assert m.info.fs == "/dev/testdev"
    assert m.info.fs_type == "ext3"
    assert m.info.bound is False
    assert m.stats is not None and m.stats.used() <= m.stats.size()


def test_read_mounts_unescapes_spaces(tmp_path, monkeypatch):
    target = tmp_path / "with space"
    target.mkdir()
    escaped = str(target).replace(" ", "\\040")
    write_mountinfo(tmp_path, monkeypatch, [
        f"40 1 98:1 / {escaped} rw - ext4 /dev/testdev rw",
    ])
    assert read_mounts(remote_stats=True)[0].info.mount_point == str(target)


def test_read_mounts_marks_bound(tmp_path, monkeypatch):
    write_mountinfo(tmp_path, monkeypatch, [
        f"41 1 98:2 / {tmp_path} rw - ext4 /dev/testdev rw",
        f"42 1 98:2 /sub {tmp_path} rw - ext4 /dev/testdev rw",
    ])
    mounts = read_mounts(remote_stats=True)
    assert [m.info.bound for m in mounts] == [False, True]


def test_read_mounts_skips_remote_stats(tmp_path, monkeypatch):
    write_mountinfo(tmp_path, monkeypatch, [
        f"43 1 0:50 / {tmp_path} rw - nfs4 server:/export rw",
    ])
    m = read_mounts(remote_stats=False)[0]
    assert m.info.is_remote() is True
    assert m.stats is None
    assert m.is_unreachable() is False