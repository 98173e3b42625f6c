"""Incremental construction of the declared folder tree."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from blueprint_compliance.domain.models import EntryKind, FolderNode


@dataclass(slots=True)
class _DraftNode:
    name: str
    kind: EntryKind
    path: str
    children: list[_DraftNode] = field(default_factory=list)
    file_type: str | None = None

    def child(self, name: str) -> _DraftNode | None:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def freeze(self) -> FolderNode:
        return FolderNode(
            name=self.name,
            kind=self.kind,
            path=self.path,
            required=True,
            children=tuple(node.freeze() for node in self.children),
            file_type=self.file_type,
        )


class FolderTreeBuilder:
    """Build a ``FolderNode`` tree rooted at ``/``.

    Folder insertion is idempotent: inserting ``src/core`` twice reuses the
    existing ``src`` and ``core`` nodes. Newly created nodes are marked required.
    """

    def __init__(self, project_name: str) -> None:
        self._root = _DraftNode(name=project_name, kind=EntryKind.FOLDER, path="/")

    def add_folder(self, folder_path: str) -> FolderTreeBuilder:
        self._ensure_folder(_split(folder_path))
        return self

    def add_file(self, file_path: str) -> FolderTreeBuilder:
        parts = _split(file_path)
        if not parts:
            return self
        *folders, file_name = parts
        parent = self._ensure_folder(folders)
        if parent.child(file_name) is None:
            parent.children.append(
                _DraftNode(
                    name=file_name,
                    kind=EntryKind.FILE,
                    path=f"{parent.path}{file_name}",
                    file_type=file_type_for(file_name),
                )
            )
        return self

    def build(self) -> FolderNode:
        return self._root.freeze()

    def _ensure_folder(self, parts: Iterable[str]) -> _DraftNode:
        current = self._root
        for part in parts:
            existing = current.child(part)
            if existing is None:
                existing = _DraftNode(
                    name=part,
                    kind=EntryKind.FOLDER,
                    path=f"{current.path}{part}/",
                )
                current.children.append(existing)
            current = existing
        return current


def build_folder_tree(
    project_name: str,
    folders: Iterable[str],
    files: Iterable[str],
) -> FolderNode:
    builder = FolderTreeBuilder(project_name)
    for folder in folders:
        builder.add_folder(folder)
    for file_path in files:
        builder.add_file(file_path)
    return builder.build()


def file_type_for(file_name: str) -> str:
    """Extension without the dot, or ``unknown``."""

    suffix = PurePosixPath(file_name).suffix
    return suffix[1:] if suffix else "unknown"


def extract_folders(node: FolderNode) -> list[FolderNode]:
    """All folder nodes in pre-order, including ``node`` itself when it is a folder."""

    found: list[FolderNode] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind is EntryKind.FOLDER:
            found.append(current)
        stack.extend(reversed(current.children))
    return found


def extract_files(node: FolderNode) -> list[FolderNode]:
    found: list[FolderNode] = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.kind is EntryKind.FILE:
            found.append(current)
        stack.extend(reversed(current.children))
    return found


def relative_tree_path(node: FolderNode) -> str:
    """Tree path without the leading/trailing separators (``/src/app/`` -> ``src/app``)."""

    return node.path.strip("/")


def _split(raw_path: str) -> list[str]:
    return [part for part in raw_path.replace("\\", "/").split("/") if part]


__all__ = [
    "FolderTreeBuilder",
    "build_folder_tree",
    "extract_files",
    "extract_folders",
    "file_type_for",
    "relative_tree_path",
]
