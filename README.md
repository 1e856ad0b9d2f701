# dysk

`dysk` lists your mounted filesystems in a readable table: filesystem, type,
disk kind, used and free space, size and mount point. It can also show inode
usage, filter and sort filesystems, and export the list as JSON or CSV.

It works on Linux: the mount table is read from `/proc/self/mountinfo`, disk
kinds from `/sys/dev/block`, and labels and UUIDs from `/dev/disk/by-label`,
`/dev/disk/by-uuid` and `/dev/disk/by-partuuid`. Space figures come from
`os.statvfs`. There are no dependencies beyond the standard library.

## Installation

```
pip install .
```

This installs the `dysk` command.

## Usage

Standard overview of your usual disks (filesystems backed by a disk, ZFS or
remote filesystems; bound mounts and squashfs are left out):

```
dysk
```

List all filesystems, including pseudo and bound ones:

```
dysk -a
```

Show inode counts instead of byte counts in the used, free and size columns:

```
dysk -i
```

Show only the filesystem holding a given path:

```
dysk .
```

### Columns

Choose the columns with `-c`. You can give a list, or add to and remove from
the default set (`fs+type+disk+used+use+free+size+mp`). A definition starting
with `+` or `-` starts from the defaults; `all` and `default` name sets of
columns; a trailing `+` adds the defaults after your columns.

```
dysk -c dev+fs
dysk -c +dev+size
dysk -c label+dev+
dysk -c all-default+use
```

See every column, its aliases and whether it is shown by default:

```
dysk --list-cols
```

### Filtering

Filter with `-f` and an expression made of `column<op>value` terms combined
with `&`, `|`, `!` and parentheses; `&` and `|` apply from left to right.
Operators are `<`, `<=`, `=`, `==`, `<>`, `>=` and `>`. On text columns `=`
is a case-insensitive "contains"; elsewhere it is equality. Sizes accept
suffixes such as `32G`, `4kB` or `4KiB`; shares accept `0.5` or `50%`;
booleans accept `yes`/`no`, `true`/`false`, `1`/`0` and the like.

```
dysk -f 'use > 65% | free < 50G'
dysk -f 'disk <> SSD'
dysk -f '(type=xfs & remote=no) | size > 5T'
```

### Sorting

Sort with `-s` and a column name, optionally followed by `-asc` or `-desc`
(or `-a` / `-d`). Without a direction, each column has its own default; the
default sort is by size, largest first.

```
dysk -s free
dysk -s type-desc
```

### Units and output formats

```
dysk -u SI          # 1000 based units, the default
dysk -u binary      # 1024 based units, like 9.8Ki
dysk -u bytes       # raw byte counts with thousands separators
dysk -j             # JSON
dysk --csv --csv-separator ';'
```

Other options: `--color yes|no|auto` (auto styles the output when stdout is a
terminal), `--ascii` for plain ASCII tables, `--remote-stats yes|no|auto`
(`no` skips reading space figures of remote filesystems), `--help` and
`--version`.

### Lustre filesystems

When Lustre mounts are in the mount table and `-a` isn't given, only the
Lustre mounts are listed; mounts that look like Lustre server targets are
dropped, and with the default columns the table shows
`fs+used+use+free+size+mp`.

## Using it as a library

The pieces of the command can be used on their own, for example:

```python
from dysk.mount import read_mounts, is_normal
from dysk.filter import parse_filter
from dysk.sorting import parse_sorting
from dysk.units import Units

mounts = [m for m in read_mounts() if is_normal(m)]
mounts = parse_filter("type=ext4 & use > 50%").filter(mounts)
parse_sorting("free-desc").sort(mounts)
for m in mounts:
    print(m.info.mount_point, Units.BINARY.fmt(m.stats.available()))
```

`dysk.json_out.output_value` gives the JSON-ready description of mounts,
`dysk.csv_out.print_csv` and `dysk.table.render_table` the other outputs.

## What it does not do

- It doesn't query the Lustre API: Lustre MDT and OST components are not
  discovered and listed on their own, and a path given on the command line is
  matched by device id only.
- It doesn't generate shell completion scripts or a man page.

## Running the tests

```
pip install .[test]
pytest
```