from __future__ import annotations

from typing import TYPE_CHECKING

from code2context.config import DEFAULT_IGNORE_PATTERNS
from code2context.logging import logger

if TYPE_CHECKING:
    from code2context.ports import IgnoreProvider, ProgressReporter
    from code2context.settings import CompactionOptions


def default_ignore_patterns() -> list[str]:
    """Return a copy of the built-in binary, VCS and artifact patterns."""
    return list(DEFAULT_IGNORE_PATTERNS)


def source_control_patterns(
    root_path: str,
    ignore_provider: IgnoreProvider,
    reporter: ProgressReporter | None = None,
) -> list[str]:
    """Fetch the provider's patterns, treating any failure as "no patterns".

    Args:
        root_path (str): the project root
        ignore_provider (IgnoreProvider): the source of ignore-file patterns
        reporter (ProgressReporter | None): sink for the failure warning

    Returns:
        list[str]: the provider patterns, or an empty list if it failed
    """
    try:
        patterns = ignore_provider.get_ignore_patterns(root_path)
    except Exception as e:
        message = f"Ignoring source-control patterns for {root_path}: {e}"
        if reporter is not None:
            reporter.warn(message)
        else:
            logger.warning(message)
        return []
    return [p for p in patterns or [] if p and p.strip()]


def resolve_ignore_patterns(
    options: CompactionOptions,
    ignore_provider: IgnoreProvider,
    reporter: ProgressReporter | None = None,
) -> list[str]:
    """Merge every ignore source into one ordered pattern list.

    The order is by increasing priority: built-in patterns, then source-control
    patterns (only when ``options.include_gitignore``), then the user's custom
    patterns. Later rules win, so a custom ``!*.png`` re-includes images.

    Args:
        options (CompactionOptions): the run configuration
        ignore_provider (IgnoreProvider): the source of ignore-file patterns
        reporter (ProgressReporter | None): diagnostics sink

    Returns:
        list[str]: the merged patterns
    """
    git_patterns = (
        source_control_patterns(options.root_path, ignore_provider, reporter)
        if options.include_gitignore
        else []
    )
    if reporter is not None:
        reporter.log(
            f"Ignore patterns: {len(DEFAULT_IGNORE_PATTERNS)} built-in, "
            f"{len(git_patterns)} source-control, {len(options.custom_ignore_patterns)} custom",
        )
    return [
        *default_ignore_patterns(),
        *git_patterns,
        *options.custom_ignore_patterns,
    ]
