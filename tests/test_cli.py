import pytest

from dysk.args import Args
from dysk.col import ALL_COLS
from dysk.cli import (
    _prepare,
    is_lustre_component_mount,
    is_lustre_server_component,
    main,
    order_lustre_mounts,
    parse_lustre_component,
    replace_lustre_client_mounts,
    run,
)
from dysk.cols import default_cols, parse_cols
from dysk.mount import DeviceId, Disk, Mount, MountInfo, Stats


def make_mount(fs, fs_type="ext4", mp="/", blocks=1000, disk=True, dev=DeviceId(8, 1)):
    info = MountInfo(id=1, parent=0, dev=dev, root="/", mount_point=mp, fs=fs,
                     fs_type=fs_type)
    return Mount(
        info=info,
        disk=Disk("sda", rotational=False, removable=False) if disk else None,
        stats=Stats(bsize=4096, blocks=blocks, bfree=blocks // 2, bavail=blocks // 2),
    )


@pytest.mark.parametrize(
    "name, expected",
    [
        ("lustre-MDT0000_UUID", ("MDT", 0)),
        ("lustre-OST0001_UUID", ("OST", 1)),
        ("nodash", None),
        ("lustre-MDT0000", None),
        ("a-MDT1_UUID", None),
        ("lustre-OST00x1_UUID", None),
    ],
)
def test_parse_lustre_component(name, expected):
    assert parse_lustre_component(name) == expected


@pytest.mark.parametrize(
    "path, expected",
    [
        ("/mnt/lustre-ost0", True),
        ("/srv/fs-mdt1", True),
        ("/scratch/ost2", True),
        ("/lustre/mdt", True),
        ("/data/ost", False),
        ("/home", False),
    ],
)
def test_is_lustre_server_component(path, expected):
    assert is_lustre_server_component(path) is expected


def test_is_lustre_component_mount():
    assert is_lustre_component_mount(make_mount("x", "lustre", "/mnt/l[MDT:0]"))
    assert is_lustre_component_mount(make_mount("x", "lustre", "/mnt/l[OST:3]"))
    assert not is_lustre_component_mount(make_mount("x", "lustre", "/mnt/l"))


def test_replace_lustre_client_mounts():
    plain = make_mount("srv@tcp:/fs", "lustre", "/mnt/l")
    other = make_mount("/dev/sda1", "ext4", "/")
    client = make_mount("filesystem_summary", "lustre", "/mnt/l")
    extra = make_mount("filesystem_summary", "lustre", "/mnt/k")
    component = make_mount("fs-OST0000_UUID", "lustre", "/mnt/l[OST:0]")
    mounts = [other, plain]
    replace_lustre_client_mounts(mounts, [component, client, extra])
    assert mounts == [other, client, extra]


def test_order_lustre_mounts():
    summary = make_mount("filesystem_summary", "lustre", "/mnt/l")
    ost1 = make_mount("fs-OST0001_UUID", "lustre", "/mnt/l[OST:1]")
    ost0 = make_mount("fs-OST0000_UUID", "lustre", "/mnt/l[OST:0]")
    mdt0 = make_mount("fs-MDT0000_UUID", "lustre", "/mnt/l[MDT:0]")
    mounts = [summary, ost1, mdt0, ost0]
    order_lustre_mounts(mounts)
    assert mounts == [mdt0, ost0, ost1, summary]


def test_prepare_keeps_normal_mounts_sorted_by_size():
    small = make_mount("/dev/sda1", mp="/", blocks=100)
    big = make_mount("/dev/sdb1", mp="/data", blocks=5000)
    no_disk = make_mount("tmpfs", "tmpfs", "/tmp", disk=False)
    mounts, final_args = _prepare([small, no_disk, big], [], Args())
    assert mounts == [big, small]
    assert final_args.cols == default_cols()


def test_prepare_all_keeps_everything():
    no_disk = make_mount("tmpfs", "tmpfs", "/tmp", disk=False)
    disk = make_mount("/dev/sda1")
    mounts, _ = _prepare([disk, no_disk], [], Args(all=True))
    assert sorted(m.info.fs for m in mounts) == ["/dev/sda1", "tmpfs"]


def test_prepare_lustre_view():
    ext4 = make_mount("/dev/sda1")
    components = [
        make_mount("fs-OST0000_UUID", "lustre", "/mnt/l[OST:0]"),
        make_mount("fs-MDT0000_UUID", "lustre", "/mnt/l[MDT:0]"),
    ]
    client = make_mount("filesystem_summary", "lustre", "/mnt/l")
    mounts, final_args = _prepare([ext4], [*components, client], Args())
    assert [m.info.fs for m in mounts] == [
        "fs-MDT0000_UUID", "fs-OST0000_UUID", "filesystem_summary"
    ]
    assert final_args.cols == parse_cols("fs+used+use+free+size+mp")


def test_prepare_lustre_keeps_explicit_cols():
    client = make_mount("filesystem_summary", "lustre", "/mnt/l")
    args = Args(cols=parse_cols("fs+type"))
    _, final_args = _prepare([], [client], args)
    assert final_args.cols == parse_cols("fs+type")


def test_prepare_path_filters_on_device(tmp_path):
    import os

    st = os.stat(tmp_path)
    here = DeviceId(os.major(st.st_dev), os.minor(st.st_dev))
    elsewhere = DeviceId(here.major + 1, here.minor)
    mine = make_mount("/dev/here", mp="/h", dev=here)
    other = make_mount("/dev/other", mp="/o", dev=elsewhere)
    mounts, _ = _prepare([mine, other], [], Args(all=True, path=tmp_path))
    assert mounts == [mine]


def test_prepare_missing_path(tmp_path):
    with pytest.raises(OSError):
        _prepare([], [], Args(path=tmp_path / "missing"))


def test_version(capsys):
    run(["--version"])
    assert capsys.readouterr().out == "dysk 2.10.1\n"


def test_main_version(capsys):
    main(["--version"])
    assert capsys.readouterr().out.startswith("dysk ")


def test_list_cols(capsys):
    run(["--list-cols", "--color", "no"])
    out = capsys.readouterr().out
    for col in ALL_COLS:
        assert col.key() in out
    assert out.endswith("\x1b[0m")


def test_help(capsys):
    run(["--help"])
    out = capsys.readouterr().out
    assert "Examples:" in out
    assert "dysk -f 'disk <> SSD'" in out


def test_bad_sort_exits():
    with pytest.raises(SystemExit) as excinfo:
        run(["--sort", "nothing"])
    assert excinfo.value.code == 2