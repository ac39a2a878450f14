"""Instruction blocks that can be placed before the compaction document."""

from __future__ import annotations

from enum import StrEnum


class PromptPreset(StrEnum):
    """Name of an instruction block; ``NONE`` leaves the document untouched."""

    NONE = "none"
    DEEP_CONTEXT = "deep-context"
    ARCHITECT_REVIEW = "architect-review"
    BUG_HUNTER = "bug-hunter"
    DOC_GENERATOR = "doc-generator"
    REFACTOR_GUIDE = "refactor-guide"


PROMPT_PRESETS: dict[PromptPreset, str] = {
    PromptPreset.DEEP_CONTEXT: """\
You are a senior full-stack engineer and technical writer.
Your task: give clear, self-contained answers to upcoming questions about this project.
The project follows:
  - a directory tree marked "@Tree:"
  - a table of contents marked "@Index:"
  - one record per source file, formatted as @F:|index|path|content
Instructions:
  1. Read everything before answering.
  2. Build a model of the architecture, the main modules and the data flow.
  3. Cite file paths (not line numbers) for every claim.
Answer style:
  - Start with a one-line answer, then elaborate.
  - Use fenced code blocks for examples.
  - Prefer short bullet lists.""",
    PromptPreset.ARCHITECT_REVIEW: """\
Act as an experienced software architecture reviewer.
Analyse the project that follows:
  - directory tree (@Tree:): identify layers and boundaries
  - file list (@Index:): find the entry points
  - source files (@F:): inspect the implementation
Write a review report with these sections:
  A) High-level overview
  B) Architecture diagram, in ASCII if useful
  C) Strong points (at most 5)
  D) Risks and smells (at most 5, each with a file path)
  E) Concrete refactorings (patch sketches or commands)
Cite paths and stay under 500 words.""",
    PromptPreset.BUG_HUNTER: """\
You are a reviewer specialised in finding defects quickly.
The project is given in the @Tree:, @Index: and @F: sections that follow.
Procedure:
  1. List the TODO and FIXME comments.
  2. Flag probable runtime errors, race conditions and null dereferences.
  3. For each finding give a short title, the suspect files with the reason,
     and a minimal patch in a code block.
Keep it under 300 words.""",
    PromptPreset.DOC_GENERATOR: """\
Write developer documentation for the codebase given in the @Tree:, @Index: and @F: sections that follow.
Tasks:
  - Extract public interfaces, exported functions, CLI commands and environment variables.
  - Group them by module, keeping the original order.
  - For each item give its signature, its purpose in one sentence and a usage example.
Output Markdown with exactly these headings:
  1. Overview
  2. Quick start
  3. Detailed API
  4. Environment configuration
  5. Glossary
Keep lines under 80 characters and reference files inline, like `src/app.py`.""",
    PromptPreset.REFACTOR_GUIDE: """\
You are a refactoring coach.
Propose an incremental three-week roadmap to modernise the project that follows
(see @Tree:, @Index: and @F:).
For each week give: goal, key tasks, success metric, blocking dependencies.
Rules:
  - At most 7 tasks per week.
  - Link every task to a concrete file or folder.
  - Deliver the roadmap as a Markdown table.""",
}


def get_prompt(preset: PromptPreset | str) -> str:
    """Return the instruction block for ``preset``, "" for ``none``."""
    return PROMPT_PRESETS.get(PromptPreset(preset), "")
