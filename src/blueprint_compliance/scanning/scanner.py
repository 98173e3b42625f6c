"""
blueprint-compliance — file-system scanner

File: src/blueprint_compliance/scanning/scanner.py

Purpose
- Walk a project root into a flat ``FileEntry`` inventory with line counts.

Functional requirements
- Skip build/version-control/output directories by name.
- Missing paths and permission errors are skipped, never fatal.
- Symlinks are ignored unless ``follow_symlinks`` is set; followed links never
  leave the scanned root and never revisit an ancestor.
- Empty or unreadable files count as zero lines.

Non-functional requirements
- Blocking I/O runs in worker threads; a semaphore bounds how many run at once
  so large trees cannot exhaust file descriptors.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

import structlog

from blueprint_compliance.constants import SKIP_DIRECTORIES
from blueprint_compliance.domain.models import EntryKind, FileEntry
from blueprint_compliance.scanning.inventory import DiskContentSource, FileInventory, count_lines
from blueprint_compliance.utils.concurrency import BoundedSemaphore
from blueprint_compliance.utils.fs import read_text_lenient

DEFAULT_SCAN_CONCURRENCY = 16


@dataclass(frozen=True, slots=True)
class _Listing:
    name: str
    kind: EntryKind
    path: Path
    symlink: bool = False


class FileSystemScanner:
    """Caller-constructed, stateless scanner; every ``scan`` starts fresh."""

    def __init__(
        self,
        *,
        max_concurrency: int = DEFAULT_SCAN_CONCURRENCY,
        skip_directories: Iterable[str] = SKIP_DIRECTORIES,
        follow_symlinks: bool = False,
        logger: Any | None = None,
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        self._max_concurrency = max_concurrency
        self._skip = frozenset(skip_directories)
        self._follow_symlinks = follow_symlinks
        self._logger = logger if logger is not None else structlog.get_logger(__name__)

    def should_skip(self, name: str) -> bool:
        return name in self._skip

    async def scan(self, root: str | Path) -> list[FileEntry]:
        root_path = Path(root)
        real_root = await asyncio.to_thread(_real_directory, root_path)
        if real_root is None:
            self._logger.warning("scan_root_unavailable", root=str(root_path))
            return []

        semaphore = BoundedSemaphore(self._max_concurrency)
        entries: list[FileEntry] = []

        async def count(path: Path, relative: PurePosixPath) -> None:
            async with semaphore.permit():
                lines = await asyncio.to_thread(_count_file_lines, path)
            entries.append(
                FileEntry(
                    path=relative.as_posix(),
                    name=relative.name,
                    kind=EntryKind.FILE,
                    line_count=lines,
                )
            )

        async def walk(
            directory: Path,
            relative: PurePosixPath | None,
            ancestors: frozenset[str],
        ) -> None:
            async with semaphore.permit():
                listing = await asyncio.to_thread(_list_directory, directory, self._follow_symlinks)
            pending: list[asyncio.Future[None]] = []
            for item in listing:
                if self.should_skip(item.name):
                    continue
                child = PurePosixPath(item.name) if relative is None else relative / item.name
                if item.kind is EntryKind.FILE:
                    if item.symlink:
                        target = await asyncio.to_thread(os.path.realpath, item.path)
                        if not _within(target, real_root):
                            self._logger.debug(
                                "scan_symlink_outside_root_skipped", path=child.as_posix()
                            )
                            continue
                    pending.append(asyncio.ensure_future(count(item.path, child)))
                    continue

                async with semaphore.permit():
                    real = await asyncio.to_thread(_real_directory, item.path)
                if real is None:
                    continue
                if not _within(real, real_root):
                    self._logger.debug("scan_symlink_outside_root_skipped", path=child.as_posix())
                    continue
                if real in ancestors:
                    self._logger.debug("scan_symlink_cycle_skipped", path=child.as_posix())
                    continue
                entries.append(FileEntry(path=child.as_posix(), name=item.name, kind=EntryKind.FOLDER))
                pending.append(asyncio.ensure_future(walk(item.path, child, ancestors | {real})))
            if pending:
                await asyncio.gather(*pending)

        await walk(root_path, None, frozenset({real_root}))
        self._logger.debug(
            "scan_completed",
            root=str(root_path),
            files=sum(1 for entry in entries if entry.kind is EntryKind.FILE),
            folders=sum(1 for entry in entries if entry.kind is EntryKind.FOLDER),
            peak_concurrency=semaphore.peak,
        )
        return entries

    async def inventory(self, root: str | Path) -> FileInventory:
        root_path = Path(root)
        entries = await self.scan(root_path)
        return FileInventory.from_entries(entries, DiskContentSource(root_path), root=root_path)


def scan_tree(root: str | Path, **scanner_options: Any) -> list[FileEntry]:
    """Synchronous convenience wrapper around ``FileSystemScanner.scan``."""

    return asyncio.run(FileSystemScanner(**scanner_options).scan(root))


def _real_directory(path: Path) -> str | None:
    try:
        if not path.is_dir():
            return None
        return os.path.realpath(path)
    except OSError:
        return None


def _within(real: str, real_root: str) -> bool:
    return real == real_root or real.startswith(real_root.rstrip(os.sep) + os.sep)


def _list_directory(directory: Path, follow_symlinks: bool) -> list[_Listing]:
    items: list[_Listing] = []
    try:
        with os.scandir(directory) as iterator:
            for entry in iterator:
                try:
                    symlink = entry.is_symlink()
                    if symlink and not follow_symlinks:
                        continue
                    if entry.is_dir():
                        items.append(_Listing(entry.name, EntryKind.FOLDER, Path(entry.path), symlink))
                    elif entry.is_file():
                        items.append(_Listing(entry.name, EntryKind.FILE, Path(entry.path), symlink))
                except OSError:
                    continue
    except OSError:
        return []
    items.sort(key=lambda item: item.name)
    return items


def _count_file_lines(path: Path) -> int:
    try:
        return count_lines(read_text_lenient(path))
    except OSError:
        return 0


__all__ = [
    "DEFAULT_SCAN_CONCURRENCY",
    "FileSystemScanner",
    "scan_tree",
]
