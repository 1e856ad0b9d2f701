import io

from dysk.args import Args
from dysk.cols import parse_cols
from dysk.csv_out import CsvWriter, print_csv
from dysk.mount import DeviceId, Inodes, Mount, MountInfo, Stats
from dysk.units import Units


def make_mount(stats=None, uuid=None):
    info = MountInfo(
        id=7, parent=1, dev=DeviceId(8, 1), root="/", mount_point="/home",
        fs="/dev/sda1", fs_type="ext4",
    )
    return Mount(info=info, stats=stats, uuid=uuid)


def test_csv_writer_quoting():
    out = io.StringIO()
    csv = CsvWriter(";", out)
    csv.cell("1;2;3")
    csv.cell('"')
    csv.cell("")
    csv.end_line()
    csv.cell(3)
    assert out.getvalue() == '"1;2;3";"""";;\n3;'


def test_cell_opt_none_writes_only_separator():
    out = io.StringIO()
    csv = CsvWriter(",", out)
    csv.cell_opt(None)
    csv.cell_opt("a")
    assert out.getvalue() == ",a,"


def test_cell_newline_is_quoted():
    out = io.StringIO()
    CsvWriter(",", out).cell("a\nb")
    assert out.getvalue() == '"a\nb",'


def test_float_cells():
    out = io.StringIO()
    csv = CsvWriter(",", out)
    csv.cell(0.5)
    csv.cell(1.0)
    assert out.getvalue() == "0.5,1,"


def test_print_csv_rows():
    stats = Stats(bsize=1000, blocks=100, bfree=50, bavail=50)
    args = Args(cols=parse_cols("fs+dev+use_percent+remote+uuid"))
    out = io.StringIO()
    print_csv([make_mount(stats)], args, out)
    assert out.getvalue() == "filesystem,dev,bytes %,remote,UUID,\n/dev/sda1,8:1,50%,no,,\n"


def test_print_csv_missing_stats():
    args = Args(cols=parse_cols("id+size"), csv_separator=";")
    out = io.StringIO()
    print_csv([make_mount(uuid="abc")], args, out)
    assert out.getvalue() == "id;bytes total;\n7;;\n"


def test_print_csv_bytes_units_are_quoted():
    stats = Stats(bsize=1, blocks=1234567, bfree=0, bavail=0)
    args = Args(cols=parse_cols("size"), units=Units.BYTES)
    out = io.StringIO()
    print_csv([make_mount(stats)], args, out)
    assert out.getvalue().splitlines() == ["bytes total,", '"1,234,567",']


def test_print_csv_inodes_mode():
    stats = Stats(bsize=1000, blocks=100, bfree=50, bavail=50, inodes=Inodes(10, 5, 5))
    args = Args(cols=parse_cols("use_percent+size"), inodes=True)
    out = io.StringIO()
    print_csv([make_mount(stats)], args, out)
    assert out.getvalue().splitlines() == ["inodes %,inodes total,", "50%,10,"]