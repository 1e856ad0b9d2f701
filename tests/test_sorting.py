import pytest

from dysk.col import Col
from dysk.mount import DeviceId, Mount, MountInfo, Stats
from dysk.order import Order
from dysk.sorting import ParseSortingError, Sorting, parse_sorting


def make_mount(fs, blocks):
    info = MountInfo(
        id=1, parent=0, dev=DeviceId(8, 1), root="/", mount_point="/", fs=fs, fs_type="ext4"
    )
    stats = None if blocks is None else Stats(bsize=1000, blocks=blocks, bfree=0, bavail=0)
    return Mount(info=info, stats=stats)


def sizes(mounts):
    return [m.stats.size() if m.stats else None for m in mounts]


def test_default_sorting():
    assert Sorting() == Sorting(Col.SIZE, Order.DESC)


@pytest.mark.parametrize(
    "text, col, order",
    [
        ("size", Col.SIZE, Order.DESC),
        ("type-desc", Col.TYPE, Order.DESC),
        ("size-asc", Col.SIZE, Order.ASC),
        ("free asc", Col.FREE, Order.ASC),
        ("inodes", Col.INODES_USE, Order.ASC),
        ("remote", Col.REMOTE, Order.DESC),
        ("mp-D", Col.MOUNT_POINT, Order.DESC),
    ],
)
def test_parse(text, col, order):
    assert parse_sorting(text) == Sorting(col, order)


def test_parse_bad_column():
    with pytest.raises(ParseSortingError) as info:
        parse_sorting("nothing")
    assert str(info.value).startswith(
        "\"nothing\" can't be parsed as a sort expression because "
        "\"nothing\" can't be parsed as a column"
    )


def test_parse_bad_order():
    with pytest.raises(ParseSortingError) as info:
        parse_sorting("size-up")
    assert "can't be parsed as a sort order" in str(info.value)
    assert info.value.raw == "size-up"


def test_sort_default_is_descending_size():
    mounts = [make_mount("a", 5), make_mount("b", None), make_mount("c", 50), make_mount("d", 1)]
    Sorting().sort(mounts)
    assert [m.info.fs for m in mounts] == ["c", "a", "d", "b"]


def test_sort_ascending_puts_missing_first():
    mounts = [make_mount("a", 5), make_mount("b", None), make_mount("c", 50)]
    parse_sorting("size-asc").sort(mounts)
    assert [m.info.fs for m in mounts] == ["b", "a", "c"]


def test_sort_by_filesystem_is_stable():
    mounts = [make_mount("b", 1), make_mount("a", 2), make_mount("b", 3)]
    parse_sorting("fs").sort(mounts)
    assert [m.info.fs for m in mounts] == ["a", "b", "b"]
    assert sizes(mounts)[1:] == [1000, 3000]