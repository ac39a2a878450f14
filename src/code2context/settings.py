from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from code2context.config import DEFAULT_CONFIG_FILE, SelectionMode, to_posix
from code2context.prompts import PromptPreset

ENV_FILE = find_dotenv(usecwd=True)
ENV_PREFIX = "CODE2CONTEXT_"


def normalize_relative_path(path: str) -> str:
    """Normalize a user supplied relative path to the root-relative POSIX form.

    Args:
        path (str): the path as given by the caller, possibly with backslashes
            or a leading "./" or "/"

    Returns:
        str: the path with "/" separators and no leading "./" or "/"
    """
    p = to_posix(path.strip())
    while p.startswith("./"):
        p = p[2:]
    return p.lstrip("/")


class CompactionOptions(BaseModel):
    """Configuration of one compaction run, with every default resolved here.

    Camel-case aliases (``rootPath``, ``customIgnorePatterns``...) are accepted so
    that option payloads produced by other front ends validate unchanged.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    root_path: str = Field(..., description="Project root; must exist.")
    output_path: str | None = Field(default=None, description="Persist the document here.")
    custom_ignore_patterns: list[str] = Field(
        default_factory=list,
        description="User patterns, highest priority.",
    )
    include_gitignore: bool = Field(
        default=True,
        description="Merge source-control ignore patterns.",
        alias="includeGitIgnore",
    )
    include_tree: bool = Field(default=True, description="Emit the tree section.")
    minify_content: bool = Field(default=False, description="Collapse each file to one line.")
    specific_files: list[str] = Field(
        default_factory=list,
        description="Relative paths used in files mode.",
    )
    selection_mode: SelectionMode = Field(
        default=SelectionMode.DIRECTORY,
        description="directory or files.",
    )
    prompt_preset: PromptPreset = Field(
        default=PromptPreset.NONE,
        description="Instruction block placed before the document.",
    )
    verbose: bool = Field(default=False, description="Report detailed progress.")

    @field_validator("root_path", "output_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Any:  # noqa: ANN401
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        if value == "":
            return None
        return value

    @field_validator("custom_ignore_patterns")
    @classmethod
    def _drop_blank_patterns(cls, value: list[str]) -> list[str]:
        return [p.strip() for p in value if p and p.strip()]

    @field_validator("specific_files")
    @classmethod
    def _normalize_specific_files(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        out: list[str] = []
        for raw in value:
            p = normalize_relative_path(raw)
            if not p or p in seen:
                continue
            seen.add(p)
            out.append(p)
        return out

    @property
    def uses_files_mode(self) -> bool:
        """Whether the explicit selection strategy applies to this run."""
        return self.selection_mode is SelectionMode.FILES and bool(self.specific_files)

    @classmethod
    def canonical_keys(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Rename camel-case aliases in ``values`` to field names so sources can be merged."""
        aliases = {field.alias: name for name, field in cls.model_fields.items() if field.alias}
        return {aliases.get(key, key): value for key, value in values.items()}


class CliSettings(BaseModel):
    """Front-end settings that are not part of a compaction run."""

    model_config = ConfigDict(frozen=True)

    config: Path | None = Field(default=None, description="YAML configuration file.")
    log_file: str = Field(default="", description="Log file path.")
    log_level: str = Field(default="INFO", description="Minimum log level.")


def load_env_defaults(env_file: str = ENV_FILE) -> dict[str, str]:
    """Load a `.env` file (without overriding the environment) and read prefixed keys.

    Args:
        env_file (str): the `.env` path found by ``find_dotenv``; may be empty

    Returns:
        dict[str, str]: lower-cased keys stripped of the ``CODE2CONTEXT_`` prefix
    """
    if env_file:
        load_dotenv(env_file, override=False)
    return {
        key.removeprefix(ENV_PREFIX).lower(): value
        for key, value in os.environ.items()
        if key.startswith(ENV_PREFIX) and value
    }


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML mapping of option names to values.

    Args:
        path (Path): the configuration file to read

    Raises:
        ValueError: if the document is not a mapping

    Returns:
        dict[str, Any]: the parsed mapping, empty for an empty document
    """
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping of option names, got {type(data).__name__}"
        raise ValueError(msg)
    return {str(k).replace("-", "_"): v for k, v in data.items()}


def find_config_file(root: Path, explicit: Path | None = None) -> Path | None:
    """Return the configuration file to use, if any.

    An explicit path always wins; otherwise ``.code2context.yaml`` in ``root``
    is used when present.
    """
    if explicit is not None:
        return explicit
    candidate = root / DEFAULT_CONFIG_FILE
    return candidate if candidate.is_file() else None
