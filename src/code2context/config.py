from __future__ import annotations

from enum import StrEnum, auto
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TREE_MARKER = "@Tree:"
INDEX_MARKER = "@Index:"
FILE_MARKER = "@F:"

IGNORE_FILE_NAMES: tuple[str, ...] = (
    ".gitignore",
    ".llmignore",
    ".npmignore",
)

DEFAULT_CONFIG_FILE = ".code2context.yaml"

# Lowest-priority patterns: source-control and custom patterns are appended after
# these, so a later negation such as "!*.png" re-includes a file.
DEFAULT_IGNORE_PATTERNS: list[str] = [
    # version control and OS metadata
    ".git/**",
    ".hg/**",
    ".svn/**",
    ".DS_Store",
    "Thumbs.db",
    # logs and temporary files
    "*.log",
    "*.tmp",
    "*.bak",
    "*.swp",
    # archives
    "*.zip",
    "*.tar",
    "*.gz",
    "*.tgz",
    "*.bz2",
    "*.rar",
    "*.7z",
    # images
    "*.png",
    "*.jpg",
    "*.jpeg",
    "*.gif",
    "*.bmp",
    "*.ico",
    "*.svg",
    "*.webp",
    # binaries and compiled artifacts
    "*.exe",
    "*.dll",
    "*.so",
    "*.dylib",
    "*.bin",
    "*.o",
    "*.a",
    "*.class",
    "*.jar",
    "*.py[cod]",
    "*.whl",
    # documents
    "*.pdf",
    "*.doc",
    "*.docx",
    "*.xls",
    "*.xlsx",
    "*.ppt",
    "*.pptx",
    # media and fonts
    "*.mp3",
    "*.wav",
    "*.mp4",
    "*.mov",
    "*.avi",
    "*.ttf",
    "*.woff",
    "*.woff2",
    # dependency and build directories
    "node_modules/**",
    "dist/**",
    "build/**",
    "coverage/**",
    "target/**",
    "__pycache__/**",
    ".venv/**",
    "venv/**",
    ".pytest_cache/**",
    ".mypy_cache/**",
    ".idea/**",
    ".vscode/**",
    # lock files and bundles
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "composer.lock",
    "Cargo.lock",
    "*.min.*",
    "*.map",
]


class SelectionMode(StrEnum):
    """How the compaction engine decides which files are in scope.

    ``DIRECTORY`` enumerates the whole root and subtracts ignored paths,
    ``FILES`` starts from an explicit list of relative paths.
    """

    DIRECTORY = auto()
    FILES = auto()


def to_posix(path: str) -> str:
    """Replace backslash separators with forward slashes."""
    return path.replace("\\", "/")


class FileEntry(BaseModel):
    """One in-scope file: its root-relative POSIX path and its text content."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the root, '/' separated")
    content: str = Field(default="", description="Text content of the file")


class FileTreeNode(BaseModel):
    """A node of a materialized directory snapshot.

    The root node has an empty ``path``. Children of a directory are kept sorted
    directories-first, then alphabetically by name, whatever order they were given in.

    Attributes:
        path: Root-relative POSIX path ("" for the root).
        name: Last path component (the root's name is the root directory basename).
        is_directory: Whether the node is a directory.
        children: Child nodes, directories only; None for files.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="", description="Root-relative POSIX path")
    name: str = Field(..., description="Node name")
    is_directory: bool = Field(default=False, description="Whether the node is a directory")
    children: tuple[FileTreeNode, ...] | None = Field(
        default=None,
        description="Child nodes, sorted directories-first then by name",
    )

    @field_validator("children")
    @classmethod
    def _sort_children(
        cls,
        value: tuple[FileTreeNode, ...] | None,
    ) -> tuple[FileTreeNode, ...] | None:
        if value is None:
            return None
        return tuple(sorted(value, key=tree_sort_key))

    @classmethod
    def file(cls, path: str) -> FileTreeNode:
        """Build a file node from its root-relative path."""
        path = to_posix(path)
        return cls(path=path, name=path.rsplit("/", 1)[-1], is_directory=False)

    @classmethod
    def directory(
        cls,
        path: str,
        children: list[FileTreeNode] | tuple[FileTreeNode, ...] = (),
        name: str | None = None,
    ) -> FileTreeNode:
        """Build a directory node; ``name`` defaults to the last component of ``path``."""
        path = to_posix(path)
        return cls(
            path=path,
            name=name if name is not None else path.rsplit("/", 1)[-1],
            is_directory=True,
            children=tuple(children),
        )


def tree_sort_key(node: FileTreeNode) -> tuple[int, str, str]:
    """Sort key placing directories before files, then names case-insensitively."""
    return (0 if node.is_directory else 1, node.name.lower(), node.name)


class CompactionSuccess(BaseModel):
    """Successful compaction carrying the assembled document."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    content: str
    file_count: int = Field(default=0, ge=0, description="Number of file records")


class CompactionFailure(BaseModel):
    """Failed compaction carrying one human-readable reason."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    error: str


CompactionResult = CompactionSuccess | CompactionFailure
