from __future__ import annotations

from typing import TYPE_CHECKING

from code2context.config import FileTreeNode, tree_sort_key
from code2context.matching import PatternMatcher

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Sequence

    RelevanceFn = Callable[[FileTreeNode], bool]

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


def build_tree_lines(node: FileTreeNode, is_relevant: RelevanceFn) -> list[str]:
    """Render the descendants of ``node`` as box-drawing lines.

    The node itself is never printed. A child is emitted when ``is_relevant``
    accepts it and, for a directory, when at least one of its descendants is
    emitted too, so directories without relevant content vanish entirely.

    Args:
        node (FileTreeNode): the directory whose descendants are rendered
        is_relevant (RelevanceFn): decides whether a child is in scope

    Returns:
        list[str]: the rendered lines, empty when nothing is in scope
    """
    if not node.is_directory or not node.children:
        return []

    entries: list[tuple[str, list[str]]] = []
    for child in sorted(node.children, key=tree_sort_key):
        if not is_relevant(child):
            continue
        if child.is_directory:
            sub_lines = build_tree_lines(child, is_relevant)
            if not sub_lines:
                continue
            entries.append((child.name, sub_lines))
        else:
            entries.append((child.name, []))

    lines: list[str] = []
    for idx, (name, sub_lines) in enumerate(entries):
        last = idx == len(entries) - 1
        lines.append((LAST_BRANCH if last else BRANCH) + name)
        ext = SPACE_PREFIX if last else PIPE_PREFIX
        lines.extend(ext + line for line in sub_lines)
    return lines


def render_tree(root: FileTreeNode, patterns: Sequence[str] | PatternMatcher) -> str:
    """Render the tree, leaving out every node excluded by ``patterns``.

    Directories are tested with a trailing "/" so directory-only rules apply.

    Args:
        root (FileTreeNode): the snapshot to render
        patterns (Sequence[str] | PatternMatcher): ordered gitignore-style rules

    Returns:
        str: the rendering, or "" when nothing remains
    """
    matcher = patterns if isinstance(patterns, PatternMatcher) else PatternMatcher(patterns)

    def is_relevant(child: FileTreeNode) -> bool:
        if child.is_directory:
            return not matcher.matches_directory(child.path)
        return not matcher.matches(child.path)

    return "\n".join(build_tree_lines(root, is_relevant))


def render_selected_tree(root: FileTreeNode, selected_paths: Collection[str]) -> str:
    """Render only the selected files and the directories leading to them.

    Args:
        root (FileTreeNode): the snapshot to render
        selected_paths (Collection[str]): root-relative paths of the selected files

    Returns:
        str: the rendering, or "" when no selected file is in the snapshot
    """
    selected = set(selected_paths)

    def is_relevant(child: FileTreeNode) -> bool:
        if not child.is_directory:
            return child.path in selected
        slash = child.path + "/"
        backslash = child.path + "\\"
        return any(p == child.path or p.startswith((slash, backslash)) for p in selected)

    return "\n".join(build_tree_lines(root, is_relevant))

