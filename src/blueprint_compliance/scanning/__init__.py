"""File-system scanning into immutable inventories."""

from blueprint_compliance.scanning.inventory import (
    ContentSource,
    DiskContentSource,
    FileInventory,
    MemoryContentSource,
    count_lines,
)
from blueprint_compliance.scanning.scanner import FileSystemScanner, scan_tree

__all__ = [
    "ContentSource",
    "DiskContentSource",
    "FileInventory",
    "FileSystemScanner",
    "MemoryContentSource",
    "count_lines",
    "scan_tree",
]
