from __future__ import annotations

from fnmatch import fnmatchcase
from typing import TYPE_CHECKING

from pathspec import PathSpec

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

PATTERN_STYLE = "gitwildmatch"


def _negated_body(pattern: str) -> str:
    return pattern[1:] if pattern.startswith("!") else pattern


def is_contents_pattern(pattern: str) -> bool:
    """Tell whether ``pattern`` targets what is inside a directory (``dir/**``), not the directory."""
    return _negated_body(pattern).rstrip().endswith("/**")


class PatternMatcher:
    """Gitignore-style matcher over an ordered list of patterns.

    Later patterns override earlier ones, a leading ``!`` negates, a trailing
    ``/`` restricts a pattern to directories and ``**`` spans path segments.
    As in git, a path inside an excluded directory stays excluded whatever
    later negations say, and ``dir/**`` excludes the contents of ``dir`` but
    not ``dir`` itself. Candidate paths must already be root-relative and "/"
    separated; a directory is tested by passing its path with a trailing "/".
    """

    def __init__(self, patterns: Iterable[str]) -> None:
        self.patterns: tuple[str, ...] = tuple(p for p in patterns if p and p.strip())
        self._spec = PathSpec.from_lines(PATTERN_STYLE, self.patterns)
        self._dir_spec = PathSpec.from_lines(
            PATTERN_STYLE,
            [p for p in self.patterns if not is_contents_pattern(p)],
        )
        self._negations = tuple(_negated_body(p).strip().strip("/") for p in self.patterns if p.startswith("!"))
        self._dir_cache: dict[str, bool] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self.patterns)} patterns)"

    def _directory_rule(self, directory_path: str) -> bool:
        cached = self._dir_cache.get(directory_path)
        if cached is None:
            cached = self._dir_spec.match_file(directory_path + "/")
            self._dir_cache[directory_path] = cached
        return cached

    def matches(self, candidate_path: str) -> bool:
        """Tell whether the path is excluded by its own rules or by an excluded parent directory."""
        if not self.patterns or not candidate_path:
            return False
        is_dir = candidate_path.endswith("/")
        parts = candidate_path.rstrip("/").split("/")
        for i in range(1, len(parts)):
            if self._directory_rule("/".join(parts[:i])):
                return True
        if is_dir:
            return self._directory_rule("/".join(parts))
        return self._spec.match_file(candidate_path)

    def matches_directory(self, directory_path: str) -> bool:
        """Match a directory, so that directory-only patterns apply."""
        if not directory_path:
            return False
        return self.matches(directory_path.rstrip("/") + "/")

    def can_skip_directory(self, directory_path: str) -> bool:
        """Tell whether nothing under ``directory_path`` can be in scope.

        True for an excluded directory, and for a directory whose contents are
        all excluded (``node_modules/**``) when no negation could re-include
        one of them.
        """
        if self.matches_directory(directory_path):
            return True
        d = directory_path.rstrip("/")
        return bool(d) and self._spec.match_file(d + "/") and not self._may_reinclude_below(d)

    def _may_reinclude_below(self, directory_path: str) -> bool:
        dir_parts = directory_path.split("/")
        for body in self._negations:
            if "/" not in body:
                return True
            parts = body.split("/")
            for i, name in enumerate(dir_parts):
                if i >= len(parts) or parts[i] == "**":
                    return True
                if not fnmatchcase(name, parts[i]):
                    break
            else:
                return True
        return False


def matches(patterns: Sequence[str] | PatternMatcher, candidate_path: str) -> bool:
    """Tell whether ``candidate_path`` is excluded by ``patterns``.

    Args:
        patterns (Sequence[str] | PatternMatcher): ordered gitignore-style rules, or
            a matcher already compiled from them
        candidate_path (str): root-relative, "/" separated path

    Returns:
        bool: True when the last matching rule excludes the path or one of its
            parent directories; an empty pattern list matches nothing
    """
    matcher = patterns if isinstance(patterns, PatternMatcher) else PatternMatcher(patterns)
    return matcher.matches(candidate_path)
