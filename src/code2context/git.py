from __future__ import annotations

import subprocess  # noqa: S404
from pathlib import Path

from code2context.config import IGNORE_FILE_NAMES
from code2context.exceptions import GitCommandError
from code2context.logging import logger

GIT_TIMEOUT_SECONDS = 5.0


def run_git(repo: Path, *args: str, timeout: float = GIT_TIMEOUT_SECONDS) -> str:
    """Run a git command inside ``repo`` and return its stdout.

    Args:
        repo (Path): the working directory for the command
        *args (str): git arguments, e.g. ``"rev-parse", "--is-inside-work-tree"``
        timeout (float): seconds before the process is abandoned

    Raises:
        GitCommandError: if git is missing, times out or exits with a non-zero code

    Returns:
        str: the captured standard output
    """
    command = ["git", *args]
    try:
        out = subprocess.run(  # noqa: S603
            command,
            cwd=str(repo),
            text=True,
            capture_output=True,
            check=False,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitCommandError(command=" ".join(command), returncode=-1, stdout="", stderr=str(e)) from e
    if out.returncode != 0:
        raise GitCommandError(
            command=" ".join(command),
            returncode=out.returncode,
            stdout=out.stdout,
            stderr=out.stderr,
        )
    return out.stdout


def parse_ignore_lines(text: str) -> list[str]:
    """Keep the pattern lines of an ignore file, skipping blanks and ``#`` comments."""
    patterns: list[str] = []
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        patterns.append(s)
    return patterns


class GitIgnoreProvider:
    """Ignore provider reading `.gitignore` and the project-specific ignore files.

    Args:
        ignore_file_names: file names looked up at the root, in priority order
            (later files win on conflicting rules)
    """

    def __init__(self, ignore_file_names: tuple[str, ...] = IGNORE_FILE_NAMES) -> None:
        self.ignore_file_names = ignore_file_names

    def get_ignore_patterns(self, root_path: str) -> list[str]:
        root = Path(root_path)
        patterns: list[str] = []
        for name in self.ignore_file_names:
            path = root / name
            if not path.is_file():
                continue
            try:
                found = parse_ignore_lines(path.read_text(encoding="utf-8", errors="ignore"))
            except OSError as e:
                logger.warning("Cannot read ignore file %s: %s", path, e)
                continue
            logger.debug("Read ignore file", file=name, patterns=len(found))
            patterns.extend(found)
        return patterns

    def is_git_repository(self, root_path: str) -> bool:
        root = Path(root_path)
        if (root / ".git").is_dir():
            return True
        if not root.is_dir():
            return False
        try:
            return run_git(root, "rev-parse", "--is-inside-work-tree").strip() == "true"
        except GitCommandError as e:
            logger.debug("Not a git work tree", root=str(root), reason=str(e))
            return False
