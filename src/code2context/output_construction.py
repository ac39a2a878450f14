from __future__ import annotations

import io
import re
from typing import TYPE_CHECKING

from code2context.config import FILE_MARKER, INDEX_MARKER, TREE_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

_WHITESPACE_RUN = re.compile(r"\s+")
_LINE_BREAK = re.compile(r"\r?\n")
_SIZE_UNITS = ("B", "KB", "MB", "GB")


def minify(text: str) -> str:
    """Collapse a file's text into a single whitespace-normalized line.

    Lines that are blank after trimming are dropped, the survivors are joined
    with a space and every whitespace run becomes one space. Applying it twice
    gives the same result as applying it once.

    Args:
        text (str): the file content, with "\\n" or "\\r\\n" line endings

    Returns:
        str: the single-line form of ``text``
    """
    lines = [ln for ln in _LINE_BREAK.split(text) if ln.strip()]
    return _WHITESPACE_RUN.sub(" ", " ".join(lines))


def build_header(*, minified: bool) -> str:
    """Build the comment block explaining the three section markers.

    Args:
        minified (bool): whether file records carry minified content

    Returns:
        str: the header, ending with a blank line
    """
    content_kind = "minified" if minified else "original"
    return (
        "// Conventions used in this document:\n"
        f"// {TREE_MARKER} project directory structure.\n"
        f"// {INDEX_MARKER} table of contents with all the files included.\n"
        f"// {FILE_MARKER} file index | path | {content_kind} content.\n\n"
    )


def build_index(paths: Sequence[str]) -> str:
    """Number ``paths`` from 1 as ``<n>|<path>`` lines."""
    return "\n".join(f"{i}|{path}" for i, path in enumerate(paths, start=1))


def format_file_record(index: int, path: str, content: str) -> str:
    """Format one file record as ``@F:|<index>|<path>|<content>``."""
    return f"{FILE_MARKER}|{index}|{path}|{content}"


def compose_document(
    *,
    paths: Sequence[str],
    records: Iterable[str],
    tree_text: str,
    minified: bool,
    prompt: str = "",
) -> str:
    """Assemble the optional prompt, header, optional tree, index and file records.

    Args:
        paths (Sequence[str]): the resolved file paths, in record order
        records (Iterable[str]): the formatted file records, same order as ``paths``
        tree_text (str): the rendered tree; the section is omitted when empty
        minified (bool): whether the records carry minified content
        prompt (str): instruction block placed first, followed by a blank line; none when empty

    Returns:
        str: the full compaction document
    """
    out = io.StringIO()
    if prompt:
        out.write(f"{prompt.rstrip()}\n\n")
    out.write(build_header(minified=minified))
    if tree_text:
        out.write(f"{TREE_MARKER}\n{tree_text}\n\n")
    out.write(f"{INDEX_MARKER}\n{build_index(paths)}\n\n")
    out.write("\n".join(records))
    return out.getvalue()


def format_file_size(size: int | float) -> str:
    """Render a byte count with two decimals in the largest fitting unit (B to GB)."""
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:  # noqa: PLR2004
        value /= 1024
        unit += 1
    return f"{value:.2f} {_SIZE_UNITS[unit]}"
