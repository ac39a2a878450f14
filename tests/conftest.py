from __future__ import annotations

import posixpath
from dataclasses import dataclass, field

import pytest

from code2context.config import FileEntry, FileTreeNode

ROOT = "/project"


def build_tree(paths: list[str], root_name: str = "project") -> FileTreeNode:
    """Build a directory snapshot holding the given root-relative file paths."""
    nested: dict = {}
    for rel in paths:
        cur = nested
        parts = rel.split("/")
        for part in parts[:-1]:
            cur = cur.setdefault(part, {})
        cur[parts[-1]] = None

    def to_nodes(node: dict, prefix: str) -> list[FileTreeNode]:
        out: list[FileTreeNode] = []
        for name, child in node.items():
            path = f"{prefix}/{name}" if prefix else name
            if child is None:
                out.append(FileTreeNode.file(path))
            else:
                out.append(FileTreeNode.directory(path, to_nodes(child, path)))
        return out

    return FileTreeNode.directory("", to_nodes(nested, ""), name=root_name)


@dataclass
class InMemoryFileSystem:
    """File-system provider over a dict of root-relative paths to contents."""

    files: dict[str, str]
    root: str = ROOT
    unreadable: set[str] = field(default_factory=set)
    writable: bool = True
    written: dict[str, str] = field(default_factory=dict)
    reads: list[str] = field(default_factory=list)
    listing_matchers: list[object] = field(default_factory=list)

    def _rel(self, path: str) -> str:
        return posixpath.relpath(path.replace("\\", "/"), self.root)

    def read_file(self, path: str) -> str | None:
        self.reads.append(path)
        rel = self._rel(path)
        if rel in self.unreadable:
            return None
        return self.files.get(rel)

    def write_file(self, path: str, content: str) -> bool:
        if not self.writable:
            return False
        self.written[path] = content
        return True

    def get_directory_tree(self, root_path: str, matcher: object = None) -> FileTreeNode:
        return build_tree(list(self.files), root_name=posixpath.basename(root_path))

    def get_files(self, root_path: str, matcher: object = None) -> list[FileEntry]:
        self.listing_matchers.append(matcher)
        return [FileEntry(path=p, content=c) for p, c in self.files.items()]

    def exists(self, path: str) -> bool:
        return path == self.root


@dataclass
class StaticIgnoreProvider:
    patterns: list[str] = field(default_factory=list)
    calls: int = 0

    def get_ignore_patterns(self, root_path: str) -> list[str]:
        self.calls += 1
        return list(self.patterns)

    def is_git_repository(self, root_path: str) -> bool:
        return bool(self.patterns)


@dataclass
class RecordingReporter:
    events: list[tuple[str, str]] = field(default_factory=list)

    def start(self, label: str) -> None:
        self.events.append(("start", label))

    def end(self, label: str) -> None:
        self.events.append(("end", label))

    def log(self, message: str) -> None:
        self.events.append(("log", message))

    def warn(self, message: str) -> None:
        self.events.append(("warn", message))

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.events.append(("error", message))

    def messages(self, kind: str) -> list[str]:
        return [m for k, m in self.events if k == kind]


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def ignore_provider() -> StaticIgnoreProvider:
    return StaticIgnoreProvider()
