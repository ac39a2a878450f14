"""
code2context: compact a project directory into one LLM context document.

Overview
--------
The document starts with a header explaining three section markers, then:

- ``@Tree:`` an ASCII tree of the in-scope files (optional, ``--no-tree``),
- ``@Index:`` the numbered list of included files,
- ``@F:|<n>|<path>|<content>`` one record per file, in index order.

Files are selected either by enumerating the root and dropping everything
matched by the ignore rules (built-in binary/VCS patterns, then `.gitignore`,
`.llmignore`, `.npmignore`, then ``--ignore`` patterns), or from an explicit
list given with ``--file`` (the same ignore rules still apply).

Defaults can be stored in ``.code2context.yaml`` at the project root (or a
file passed with ``--config``); flags override it.

Usage
-----
    - Whole project to stdout:
        uv run code2context .

    - Minified, without the tree, into a file:
        uv run code2context . --minify --no-tree --output context.txt

    - Two chosen files, re-including images:
        uv run code2context . --file src/app.py --file docs/logo.png --ignore '!*.png'

    - Prefixed with a review prompt for the model:
        uv run code2context . --prompt-preset architect-review -o context.txt
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from code2context import __version__
from code2context.config import SelectionMode
from code2context.engine import compact_project
from code2context.file_manipulation import LocalFileSystem
from code2context.git import GitIgnoreProvider
from code2context.logging import setup_logging
from code2context.prompts import PromptPreset
from code2context.reporting import StructlogProgressReporter
from code2context.settings import (
    CliSettings,
    CompactionOptions,
    find_config_file,
    load_config_file,
    load_env_defaults,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = setup_logging()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="code2context",
        description="Compact a project into a single LLM context document.",
    )
    p.add_argument("root", nargs="?", default=".", help="Project root (default: current directory).")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("-o", "--output", type=str, default=None, help="Write the document to this file.")
    p.add_argument(
        "-i",
        "--ignore",
        action="append",
        default=None,
        help="Extra gitignore-style pattern (repeatable, '!' re-includes).",
    )
    p.add_argument(
        "-f",
        "--file",
        action="append",
        default=None,
        help="Compact only this root-relative file (repeatable).",
    )
    p.add_argument(
        "--no-gitignore",
        dest="include_gitignore",
        action="store_false",
        default=None,
        help="Do not merge .gitignore/.llmignore/.npmignore patterns.",
    )
    p.add_argument(
        "--no-tree",
        dest="include_tree",
        action="store_false",
        default=None,
        help="Omit the directory tree section.",
    )
    p.add_argument(
        "--minify",
        dest="minify_content",
        action="store_true",
        default=None,
        help="Collapse each file onto a single line.",
    )
    p.add_argument(
        "--prompt-preset",
        choices=[preset.value for preset in PromptPreset],
        default=None,
        help="Instruction block placed before the document (default: none).",
    )
    p.add_argument("--config", type=Path, default=None, help="YAML file with option defaults.")
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO...).")
    p.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Report detailed progress.",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> tuple[CompactionOptions, CliSettings]:
    """Parse the command line, merging the configuration file and environment.

    Precedence is: command-line flags, then the YAML configuration file, then
    ``CODE2CONTEXT_*`` environment values (logging only), then built-in defaults.

    Args:
        argv (Sequence[str] | None): the arguments, ``sys.argv[1:]`` when None

    Returns:
        tuple[CompactionOptions, CliSettings]: the run options and the front-end settings
    """
    args = build_parser().parse_args(argv)
    env = load_env_defaults()
    root = Path(args.root)

    config_path = find_config_file(root, args.config)
    values: dict[str, Any] = CompactionOptions.canonical_keys(load_config_file(config_path)) if config_path else {}

    flags = {
        "output_path": args.output,
        "custom_ignore_patterns": args.ignore,
        "include_gitignore": args.include_gitignore,
        "include_tree": args.include_tree,
        "minify_content": args.minify_content,
        "verbose": args.verbose,
        "prompt_preset": args.prompt_preset,
    }
    values.update({k: v for k, v in flags.items() if v is not None})
    if args.file:
        values["specific_files"] = args.file
        values["selection_mode"] = SelectionMode.FILES
    values["root_path"] = str(root)

    options = CompactionOptions.model_validate(values)
    cli_settings = CliSettings(
        config=config_path,
        log_file=args.log_file or env.get("log_file", ""),
        log_level=args.log_level or env.get("log_level", "INFO"),
    )
    return options, cli_settings


def main(argv: Sequence[str] | None = None) -> int:
    options, cli_settings = parse_args(argv)
    log = setup_logging(cli_settings.log_file or None, level=cli_settings.log_level)

    ignore_provider = GitIgnoreProvider()
    if options.include_gitignore and not ignore_provider.is_git_repository(options.root_path):
        log.info("Not a git repository, ignore files are still honoured", root=options.root_path)

    reporter = StructlogProgressReporter(log, verbose=options.verbose)
    result = compact_project(options, LocalFileSystem(), ignore_provider, reporter)

    if not result.ok:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    if options.output_path:
        print(f"Wrote {options.output_path} files={result.file_count}")
    else:
        sys.stdout.write(result.content)
        if not result.content.endswith("\n"):
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
