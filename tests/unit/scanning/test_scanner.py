"""
blueprint-compliance — unit tests for the file-system scanner

File: tests/unit/scanning/test_scanner.py

Purpose
- Validate recursive scanning, skip rules, line counting, and failure tolerance.

What this test file should cover
- Files and folders reported with posix paths relative to the root.
- Skipped directory names never appear, at any depth.
- Empty files count zero lines; trailing newlines count a segment.
- Missing roots yield an empty scan; symlinks are ignored unless followed, and
  followed links terminate on cycles and never leave the root.
- Bounded concurrency never exceeds its limit.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from blueprint_compliance.domain.models import EntryKind
from blueprint_compliance.scanning.inventory import (
    DiskContentSource,
    FileInventory,
    count_lines,
    path_key,
)
from blueprint_compliance.scanning.scanner import FileSystemScanner, scan_tree


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


async def test_scan_reports_files_and_folders(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "index.ts", "a\nb\nc")
    _write(tmp_path / "src" / "ui" / "button.ts", "x")
    _write(tmp_path / "README.md", "")

    entries = await FileSystemScanner().scan(tmp_path)

    by_path = {entry.path: entry for entry in entries}
    assert set(by_path) == {"src", "src/ui", "src/index.ts", "src/ui/button.ts", "README.md"}
    assert by_path["src"].kind is EntryKind.FOLDER
    assert by_path["src"].line_count is None
    assert by_path["src/index.ts"].line_count == 3
    assert by_path["src/ui/button.ts"].name == "button.ts"
    assert by_path["README.md"].line_count == 0


async def test_skip_directories_are_ignored_at_any_depth(tmp_path: Path) -> None:
    _write(tmp_path / "node_modules" / "pkg" / "index.js", "x")
    _write(tmp_path / "src" / "dist" / "out.js", "x")
    _write(tmp_path / "src" / ".git" / "HEAD", "x")
    _write(tmp_path / "src" / "main.ts", "x")

    entries = await FileSystemScanner().scan(tmp_path)

    assert sorted(entry.path for entry in entries) == ["src", "src/main.ts"]


async def test_custom_skip_directories(tmp_path: Path) -> None:
    _write(tmp_path / "vendor" / "lib.ts", "x")
    _write(tmp_path / "node_modules" / "pkg.js", "x")

    entries = await FileSystemScanner(skip_directories=("vendor",)).scan(tmp_path)

    assert sorted(entry.path for entry in entries) == ["node_modules", "node_modules/pkg.js"]


async def test_missing_root_yields_empty_scan(tmp_path: Path) -> None:
    assert await FileSystemScanner().scan(tmp_path / "absent") == []


async def test_file_root_yields_empty_scan(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    _write(target, "x")

    assert await FileSystemScanner().scan(target) == []


@pytest.mark.skipif(sys.platform == "win32", reason="symlink creation needs privileges on Windows")
async def test_symlink_cycle_terminates(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "a.ts", "x")
    os.symlink(tmp_path / "src", tmp_path / "src" / "loop", target_is_directory=True)

    entries = await FileSystemScanner(follow_symlinks=True).scan(tmp_path)

    assert sorted(entry.path for entry in entries) == ["src", "src/a.ts"]


@pytest.mark.skipif(sys.platform == "win32", reason="symlink creation needs privileges on Windows")
async def test_symlinks_are_ignored_by_default(tmp_path: Path) -> None:
    _write(tmp_path / "real" / "a.ts", "x")
    os.symlink(tmp_path / "real", tmp_path / "alias", target_is_directory=True)
    os.symlink(tmp_path / "real" / "a.ts", tmp_path / "b.ts")

    entries = await FileSystemScanner().scan(tmp_path)

    assert sorted(entry.path for entry in entries) == ["real", "real/a.ts"]


@pytest.mark.skipif(sys.platform == "win32", reason="symlink creation needs privileges on Windows")
async def test_followed_symlinks_stay_inside_root(tmp_path: Path) -> None:
    project = tmp_path / "project"
    _write(project / "real" / "a.ts", "x")
    _write(tmp_path / "outside" / "secret.txt", "one\ntwo\nthree\nfour")
    os.symlink(project / "real", project / "alias", target_is_directory=True)
    os.symlink(tmp_path / "outside", project / "escape", target_is_directory=True)
    os.symlink(tmp_path / "outside" / "secret.txt", project / "leak.txt")

    entries = await FileSystemScanner(follow_symlinks=True).scan(project)

    assert sorted(entry.path for entry in entries) == ["alias", "alias/a.ts", "real", "real/a.ts"]


async def test_inventory_reads_content_from_disk(tmp_path: Path) -> None:
    _write(tmp_path / "src" / "index.ts", "import x from './x'")

    inventory = await FileSystemScanner(max_concurrency=1).inventory(tmp_path)

    assert inventory.root == tmp_path
    assert inventory.read_text("src/index.ts") == "import x from './x'"
    assert inventory.read_text("src/missing.ts") is None
    assert inventory.contains("SRC/Index.ts", kind=EntryKind.FILE)
    assert not inventory.contains("src", kind=EntryKind.FILE)


def test_disk_source_refuses_paths_outside_root(tmp_path: Path) -> None:
    _write(tmp_path / "outside.txt", "secret")
    _write(tmp_path / "project" / "inside.txt", "ok")

    source = DiskContentSource(tmp_path / "project")

    assert source.read_text("inside.txt") == "ok"
    assert source.read_text("../outside.txt") is None


def test_scan_tree_sync_wrapper(tmp_path: Path) -> None:
    _write(tmp_path / "a.ts", "1\n2")

    entries = scan_tree(tmp_path, max_concurrency=2)

    assert [(entry.path, entry.line_count) for entry in entries] == [("a.ts", 2)]


def test_scanner_rejects_invalid_concurrency() -> None:
    with pytest.raises(ValueError, match="max_concurrency"):
        FileSystemScanner(max_concurrency=0)


def test_count_lines() -> None:
    assert count_lines("") == 0
    assert count_lines("one") == 1
    assert count_lines("one\ntwo\n") == 3


def test_inventory_from_mapping_derives_folders() -> None:
    inventory = FileInventory.from_mapping({"src/ui/button.ts": "a\nb", "/README.md": "x"})

    assert sorted(entry.path for entry in inventory.folders) == ["src", "src/ui"]
    assert sorted(entry.path for entry in inventory.files) == ["README.md", "src/ui/button.ts"]
    assert inventory.read_text("src/ui/button.ts") == "a\nb"
    assert inventory.contains("")
    assert path_key("\\Src\\UI\\") == "src/ui"
