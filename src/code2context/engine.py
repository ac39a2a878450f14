"""Compaction engine: resolve the in-scope files and assemble the document.

The pipeline is linear for each call to :meth:`CompactionEngine.execute`:

1) check that the root exists,
2) resolve the ignore patterns once (built-in, source-control, custom),
3) resolve the file set, either from an explicit selection (files mode) or by
   enumerating the root with the compiled matcher and filtering it (directory mode),
4) render the optional tree, build the index and one record per file,
5) optionally persist the document.

Reads and per-file formatting run on a thread pool; results are reassembled in
resolution order, so concurrency never changes the document.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from code2context.config import CompactionFailure, CompactionSuccess, FileEntry
from code2context.exceptions import (
    Code2ContextError,
    NoFilesToProcessError,
    OutputWriteError,
    RootPathNotFoundError,
)
from code2context.file_filter import filter_files, filter_paths
from code2context.ignore_resolver import resolve_ignore_patterns
from code2context.matching import PatternMatcher
from code2context.output_construction import compose_document, format_file_record, format_file_size, minify
from code2context.prompts import get_prompt
from code2context.reporting import StructlogProgressReporter
from code2context.settings import CompactionOptions
from code2context.tree import render_selected_tree, render_tree

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from concurrent.futures import Executor

    from code2context.config import CompactionResult
    from code2context.ports import FileSystemProvider, IgnoreProvider, ProgressReporter

DEFAULT_MAX_WORKERS = 16
RUN_LABEL = "compact_project"


@contextmanager
def _stage(reporter: ProgressReporter, label: str) -> Iterator[None]:
    reporter.start(label)
    try:
        yield
    finally:
        reporter.end(label)


class CompactionEngine:
    """Turn a project root into one compaction document.

    Args:
        fs (FileSystemProvider): file access for reading, listing and writing
        ignore_provider (IgnoreProvider): source of source-control ignore patterns
        reporter (ProgressReporter | None): diagnostics sink; a structlog reporter
            honouring ``options.verbose`` is used when omitted
        max_workers (int): size of the thread pool used for reads and formatting
    """

    def __init__(
        self,
        fs: FileSystemProvider,
        ignore_provider: IgnoreProvider,
        reporter: ProgressReporter | None = None,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.fs = fs
        self.ignore_provider = ignore_provider
        self.reporter = reporter
        self.max_workers = max(1, max_workers)

    def execute(self, options: CompactionOptions | Mapping[str, Any]) -> CompactionResult:
        """Run the pipeline; never raises, every failure becomes a result value."""
        if isinstance(options, Mapping):
            verbose = bool(options.get("verbose"))
        else:
            verbose = bool(getattr(options, "verbose", False))
        reporter = self.reporter or StructlogProgressReporter(verbose=verbose)
        reporter.start(RUN_LABEL)
        try:
            opts = options if isinstance(options, CompactionOptions) else CompactionOptions.model_validate(options)
            reporter.log(f"Compacting project: {opts.root_path}")
            content, file_count = self._run(opts, reporter)
        except Code2ContextError as e:
            reporter.error(f"Compaction failed: {e}")
            return CompactionFailure(error=str(e))
        except Exception as e:
            message = str(e) or "Unknown error"
            reporter.error(f"Compaction failed: {message}", e)
            return CompactionFailure(error=message)
        finally:
            reporter.end(RUN_LABEL)
        reporter.log("Compaction completed")
        return CompactionSuccess(content=content, file_count=file_count)

    def _run(self, options: CompactionOptions, reporter: ProgressReporter) -> tuple[str, int]:
        root = options.root_path
        if not self.fs.exists(root):
            raise RootPathNotFoundError(root_path=root)

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            with _stage(reporter, "resolve_patterns"):
                matcher = PatternMatcher(resolve_ignore_patterns(options, self.ignore_provider, reporter))

            with _stage(reporter, "resolve_files"):
                if options.uses_files_mode:
                    files = self._load_selected_files(options, matcher, pool, reporter)
                else:
                    files = filter_files(list(self.fs.get_files(root, matcher)), matcher)
            if not files:
                raise NoFilesToProcessError
            reporter.log(f"Files to process: {len(files)}")

            tree_text = ""
            if options.include_tree:
                with _stage(reporter, "build_tree"):
                    tree_text = self._render_tree(options, matcher, files, reporter)

            with _stage(reporter, "compose_output"):
                records = self._build_records(files, pool, minify_content=options.minify_content, reporter=reporter)
                document = compose_document(
                    paths=[f.path for f in files],
                    records=records,
                    tree_text=tree_text,
                    minified=options.minify_content,
                    prompt=get_prompt(options.prompt_preset),
                )
            reporter.log(f"Output size: {format_file_size(len(document))}")

        if options.output_path:
            with _stage(reporter, "write_output"):
                written = self.fs.write_file(options.output_path, document)
            if not written:
                raise OutputWriteError(output_path=options.output_path)
            reporter.log(f"Written to: {options.output_path}")

        return document, len(files)

    def _load_selected_files(
        self,
        options: CompactionOptions,
        matcher: PatternMatcher,
        pool: Executor,
        reporter: ProgressReporter,
    ) -> list[FileEntry]:
        requested = options.specific_files
        kept = filter_paths(requested, matcher)
        if len(kept) != len(requested):
            reporter.log(f"{len(requested) - len(kept)} selected files excluded by ignore patterns")

        contents = pool.map(lambda rel: self._read_selected(options.root_path, rel, reporter), kept)
        files = [
            FileEntry(path=rel, content=text) for rel, text in zip(kept, contents, strict=True) if text is not None
        ]
        reporter.log(f"Loaded {len(files)}/{len(kept)} selected files")
        return files

    def _read_selected(self, root: str, rel: str, reporter: ProgressReporter) -> str | None:
        try:
            content = self.fs.read_file(os.path.join(root, rel))
        except Exception as e:
            reporter.warn(f"Skipping {rel}: {e}")
            return None
        if content is None:
            reporter.warn(f"Skipping unreadable file: {rel}")
        return content

    def _render_tree(
        self,
        options: CompactionOptions,
        matcher: PatternMatcher,
        files: Sequence[FileEntry],
        reporter: ProgressReporter,
    ) -> str:
        tree = self.fs.get_directory_tree(options.root_path, matcher)
        if options.uses_files_mode:
            tree_text = render_selected_tree(tree, [f.path for f in files])
        else:
            tree_text = render_tree(tree, matcher)
        if not tree_text:
            reporter.warn("Tree rendering produced no output; the tree section is omitted")
        return tree_text

    def _build_records(
        self,
        files: Sequence[FileEntry],
        pool: Executor,
        *,
        minify_content: bool,
        reporter: ProgressReporter,
    ) -> list[str]:
        def to_content(entry: FileEntry) -> str:
            return minify(entry.content) if minify_content else entry.content

        contents = list(pool.map(to_content, files))
        if minify_content:
            original = sum(len(f.content) for f in files)
            processed = sum(len(c) for c in contents)
            if original:
                saved = (1 - processed / original) * 100
                reporter.log(
                    f"Minified: {format_file_size(original)} -> {format_file_size(processed)} ({saved:.1f}% saved)",
                )
        return [
            format_file_record(i, entry.path, content)
            for i, (entry, content) in enumerate(zip(files, contents, strict=True), start=1)
        ]


def compact_project(
    options: CompactionOptions | Mapping[str, Any],
    fs: FileSystemProvider,
    ignore_provider: IgnoreProvider,
    reporter: ProgressReporter | None = None,
) -> CompactionResult:
    """Run one compaction with the given collaborators.

    Args:
        options (CompactionOptions | Mapping[str, Any]): the run configuration;
            a mapping is validated (and defaulted) first
        fs (FileSystemProvider): file access
        ignore_provider (IgnoreProvider): source of source-control ignore patterns
        reporter (ProgressReporter | None): diagnostics sink

    Returns:
        CompactionResult: success with the document, or failure with the reason
    """
    return CompactionEngine(fs, ignore_provider, reporter).execute(options)
