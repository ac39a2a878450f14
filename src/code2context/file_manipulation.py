from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from code2context.config import FileEntry, FileTreeNode
from code2context.logging import logger

if TYPE_CHECKING:
    from code2context.matching import PatternMatcher


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def is_regular_file(path: Path) -> bool:
    """Check if a file is regular.

    Args:
        path (Path): path to test.

    Returns:
        bool: True if the file is regular, False otherwise.
    """
    try:
        st = path.stat()
        return stat.S_ISREG(st.st_mode)
    except OSError:
        return False


def read_text(path: Path) -> str:
    """Read a file as UTF-8, dropping undecodable bytes."""
    return path.read_text(encoding="utf-8", errors="ignore")


def _sorted_entries(directory: Path) -> tuple[list[os.DirEntry[str]], list[os.DirEntry[str]]]:
    """Split a directory listing into (sub-directories, files), each sorted by name.

    Symbolic links to directories are listed as files so traversal never follows them.
    """
    with os.scandir(directory) as it:
        entries = list(it)
    dirs = [e for e in entries if e.is_dir(follow_symlinks=False)]
    files = [e for e in entries if not e.is_dir(follow_symlinks=False)]

    def key(e: os.DirEntry[str]) -> tuple[str, str]:
        return (e.name.lower(), e.name)

    return sorted(dirs, key=key), sorted(files, key=key)


class LocalFileSystem:
    """File-system provider backed by the local disk."""

    def read_file(self, path: str) -> str | None:
        p = Path(path)
        if not is_regular_file(p):
            logger.warning("Cannot read %s: not a regular file", path)
            return None
        try:
            return read_text(p)
        except OSError as e:
            logger.warning("Cannot read %s: %s", path, e)
            return None

    def write_file(self, path: str, content: str) -> bool:
        p = Path(path)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.warning("Cannot write %s: %s", path, e)
            return False
        return True

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def get_directory_tree(self, root_path: str, matcher: PatternMatcher | None = None) -> FileTreeNode:
        """Snapshot the hierarchy under ``root_path`` (the root node has path "").

        Directories that ``matcher`` rules out entirely are not descended into.
        """
        root = Path(root_path)
        name = root.resolve().name or str(root)
        return FileTreeNode.directory("", self._tree_children(root, "", matcher), name=name)

    def _tree_children(self, directory: Path, rel: str, matcher: PatternMatcher | None) -> list[FileTreeNode]:
        try:
            dirs, files = _sorted_entries(directory)
        except OSError as e:
            logger.warning("Cannot list %s: %s", directory, e)
            return []
        children: list[FileTreeNode] = []
        for d in dirs:
            child_rel = f"{rel}/{d.name}" if rel else d.name
            if matcher is not None and matcher.can_skip_directory(child_rel):
                continue
            children.append(FileTreeNode.directory(child_rel, self._tree_children(Path(d.path), child_rel, matcher)))
        for f in files:
            children.append(FileTreeNode.file(f"{rel}/{f.name}" if rel else f.name))
        return children

    def get_files(self, root_path: str, matcher: PatternMatcher | None = None) -> list[FileEntry]:
        """Enumerate every regular file under ``root_path``.

        Order is deterministic: the files of a directory by name, then each
        sub-directory by name, recursively. Unreadable files are skipped. With a
        ``matcher``, excluded files are never read and directories it rules out
        are never walked.
        """
        root = Path(root_path)
        results: list[FileEntry] = []
        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                dirs, files = _sorted_entries(directory)
            except OSError as e:
                logger.warning("Cannot list %s: %s", directory, e)
                continue
            for f in files:
                p = Path(f.path)
                rel = relpath(p, root)
                if matcher is not None and matcher.matches(rel):
                    continue
                if not is_regular_file(p):
                    continue
                try:
                    results.append(FileEntry(path=rel, content=read_text(p)))
                except OSError as e:
                    logger.warning("Skipping %s: %s", p, e)
            for d in reversed(dirs):
                if matcher is not None and matcher.can_skip_directory(relpath(Path(d.path), root)):
                    continue
                pending.append(Path(d.path))
        return results
