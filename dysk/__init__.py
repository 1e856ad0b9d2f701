"""List mounted filesystems with their usage, as a table, JSON or CSV."""

__version__ = "2.10.1"