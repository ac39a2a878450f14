"""Interfaces the compaction engine consumes.

The engine never touches the disk or git itself: everything goes through a
file-system provider and an ignore provider, and diagnostics go to a progress
reporter supplied by the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from code2context.config import FileEntry, FileTreeNode
    from code2context.matching import PatternMatcher


@runtime_checkable
class FileSystemProvider(Protocol):
    """Access to the project files."""

    def read_file(self, path: str) -> str | None:
        """Return the text of ``path``, or None when it cannot be read."""
        ...

    def write_file(self, path: str, content: str) -> bool:
        """Persist ``content`` at ``path``; return False on failure."""
        ...

    def get_directory_tree(self, root_path: str, matcher: PatternMatcher | None = None) -> FileTreeNode:
        """Return a snapshot of the hierarchy under ``root_path``, optionally pruned by ``matcher``."""
        ...

    def get_files(self, root_path: str, matcher: PatternMatcher | None = None) -> Sequence[FileEntry]:
        """Enumerate the files under ``root_path`` with slash-normalized relative paths.

        A provider may use ``matcher`` to avoid reading excluded files; callers still filter.
        """
        ...

    def exists(self, path: str) -> bool:
        """Whether ``path`` exists."""
        ...


@runtime_checkable
class IgnoreProvider(Protocol):
    """Source of source-control derived ignore patterns."""

    def get_ignore_patterns(self, root_path: str) -> list[str]:
        """Return the patterns of the recognised ignore files, [] on failure."""
        ...

    def is_git_repository(self, root_path: str) -> bool:
        """Whether ``root_path`` lies inside a git work tree."""
        ...


@runtime_checkable
class ProgressReporter(Protocol):
    """Diagnostics sink for one compaction run."""

    def start(self, label: str) -> None: ...

    def end(self, label: str) -> None: ...

    def log(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...
