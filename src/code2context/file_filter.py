from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

from code2context.matching import PatternMatcher

if TYPE_CHECKING:
    from collections.abc import Sequence


class _HasPath(Protocol):
    @property
    def path(self) -> str: ...


T = TypeVar("T", bound=_HasPath)


def filter_files(files: Sequence[T], patterns: Sequence[str] | PatternMatcher) -> list[T]:
    """Drop the items whose ``path`` is excluded by ``patterns``, keeping order."""
    matcher = patterns if isinstance(patterns, PatternMatcher) else PatternMatcher(patterns)
    return [f for f in files if not matcher.matches(f.path)]


def filter_paths(paths: Sequence[str], patterns: Sequence[str] | PatternMatcher) -> list[str]:
    """Same as :func:`filter_files` for bare relative paths."""
    matcher = patterns if isinstance(patterns, PatternMatcher) else PatternMatcher(patterns)
    return [p for p in paths if not matcher.matches(p)]
