"""Immutable file inventory handed to validators, plus its content sources."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from blueprint_compliance.domain.models import EntryKind, FileEntry
from blueprint_compliance.utils.fs import is_within, read_text_lenient


@runtime_checkable
class ContentSource(Protocol):
    """Reads file text by inventory-relative posix path; ``None`` when unreadable."""

    def read_text(self, path: str) -> str | None: ...


@dataclass(frozen=True, slots=True)
class DiskContentSource:
    root: Path

    def read_text(self, path: str) -> str | None:
        target = self.root / path
        try:
            if not is_within(target, self.root):
                return None
            return read_text_lenient(target)
        except OSError:
            return None


@dataclass(frozen=True, slots=True)
class MemoryContentSource:
    files: Mapping[str, str]

    def read_text(self, path: str) -> str | None:
        return self.files.get(normalize_path(path))


def count_lines(text: str) -> int:
    """Number of ``\\n``-separated segments; empty text counts as zero."""

    if not text:
        return 0
    return len(text.split("\n"))


def normalize_path(raw: str) -> str:
    """Posix path relative to the project root without leading/trailing separators."""

    return raw.replace("\\", "/").strip("/")


def path_key(raw: str) -> str:
    """Case-insensitive comparison key for blueprint/actual path matching."""

    return normalize_path(raw).lower()


@dataclass(frozen=True, slots=True)
class FileInventory:
    """Snapshot of a project tree. Entry order carries no meaning."""

    entries: tuple[FileEntry, ...]
    source: ContentSource = field(compare=False)
    root: Path | None = field(default=None, compare=False)

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[FileEntry],
        source: ContentSource,
        *,
        root: Path | None = None,
    ) -> FileInventory:
        return cls(entries=tuple(entries), source=source, root=root)

    @classmethod
    def from_mapping(cls, files: Mapping[str, str]) -> FileInventory:
        """Build an inventory for candidate content that is not on disk yet."""

        normalized = {normalize_path(path): text for path, text in files.items()}
        folders: dict[str, None] = {}
        entries: list[FileEntry] = []
        for path in sorted(normalized):
            parents = PurePosixPath(path).parents
            for parent in reversed(parents):
                text = parent.as_posix()
                if text != ".":
                    folders.setdefault(text, None)
            entries.append(
                FileEntry(
                    path=path,
                    name=PurePosixPath(path).name,
                    kind=EntryKind.FILE,
                    line_count=count_lines(normalized[path]),
                )
            )
        folder_entries = [
            FileEntry(path=folder, name=PurePosixPath(folder).name, kind=EntryKind.FOLDER)
            for folder in folders
        ]
        return cls(entries=tuple(folder_entries + entries), source=MemoryContentSource(normalized))

    @property
    def files(self) -> tuple[FileEntry, ...]:
        return tuple(entry for entry in self.entries if entry.kind is EntryKind.FILE)

    @property
    def folders(self) -> tuple[FileEntry, ...]:
        return tuple(entry for entry in self.entries if entry.kind is EntryKind.FOLDER)

    def contains(self, path: str, *, kind: EntryKind | None = None) -> bool:
        key = path_key(path)
        if not key:
            return True
        return any(
            path_key(entry.path) == key and (kind is None or entry.kind is kind)
            for entry in self.entries
        )

    def read_text(self, path: str) -> str | None:
        return self.source.read_text(path)


__all__ = [
    "ContentSource",
    "DiskContentSource",
    "FileInventory",
    "MemoryContentSource",
    "count_lines",
    "normalize_path",
    "path_key",
]
