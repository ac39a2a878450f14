from pathlib import Path

import pytest
from pydantic import ValidationError

from code2context.config import SelectionMode
from code2context.prompts import PromptPreset
from code2context.settings import (
    CompactionOptions,
    find_config_file,
    load_config_file,
    load_env_defaults,
    normalize_relative_path,
)


@pytest.mark.unit
def test_options_defaults() -> None:
    options = CompactionOptions(root_path="/project")

    assert options.output_path is None
    assert options.custom_ignore_patterns == []
    assert options.include_gitignore is True
    assert options.include_tree is True
    assert options.minify_content is False
    assert options.specific_files == []
    assert options.selection_mode is SelectionMode.DIRECTORY
    assert options.verbose is False
    assert options.uses_files_mode is False


@pytest.mark.unit
def test_options_accept_camel_case_payload() -> None:
    options = CompactionOptions.model_validate(
        {
            "rootPath": "/project",
            "outputPath": "ctx.txt",
            "customIgnorePatterns": ["*.md", "  "],
            "includeGitIgnore": False,
            "minifyContent": True,
            "specificFiles": ["src\\app.ts"],
            "selectionMode": "files",
        },
    )

    assert options.output_path == "ctx.txt"
    assert options.custom_ignore_patterns == ["*.md"]
    assert options.include_gitignore is False
    assert options.minify_content is True
    assert options.specific_files == ["src/app.ts"]
    assert options.uses_files_mode is True


@pytest.mark.unit
def test_options_reject_unknown_keys() -> None:
    with pytest.raises(ValidationError):
        CompactionOptions.model_validate({"rootPath": "/project", "colour": "blue"})


@pytest.mark.unit
def test_options_normalize_paths(tmp_path: Path) -> None:
    options = CompactionOptions(
        root_path=tmp_path,
        output_path="",
        specific_files=["./a.txt", "/a.txt", "b\\c.txt", "", "b/c.txt"],
    )

    assert options.root_path == str(tmp_path)
    assert options.output_path is None
    assert options.specific_files == ["a.txt", "b/c.txt"]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [("a.txt", "a.txt"), ("./././src/a.txt", "src/a.txt"), ("\\src\\a.txt", "src/a.txt"), (" ./x ", "x")],
)
def test_normalize_relative_path(raw: str, expected: str) -> None:
    assert normalize_relative_path(raw) == expected


@pytest.mark.unit
def test_load_config_file_reads_mapping(tmp_path: Path) -> None:
    path = tmp_path / ".code2context.yaml"
    path.write_text("minify-content: true\ncustom_ignore_patterns:\n  - '*.md'\n", encoding="utf-8")

    assert load_config_file(path) == {"minify_content": True, "custom_ignore_patterns": ["*.md"]}


@pytest.mark.unit
def test_load_config_file_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="expected a mapping"):
        load_config_file(path)


@pytest.mark.unit
def test_load_config_file_empty_document(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config_file(path) == {}


@pytest.mark.unit
def test_find_config_file(tmp_path: Path) -> None:
    explicit = tmp_path / "other.yaml"

    assert find_config_file(tmp_path) is None
    assert find_config_file(tmp_path, explicit) == explicit

    (tmp_path / ".code2context.yaml").write_text("{}", encoding="utf-8")
    assert find_config_file(tmp_path) == tmp_path / ".code2context.yaml"


@pytest.mark.unit
def test_load_env_defaults_reads_prefixed_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("CODE2CONTEXT_LOG_FILE=run.log\n", encoding="utf-8")
    monkeypatch.delenv("CODE2CONTEXT_LOG_FILE", raising=False)
    monkeypatch.setenv("CODE2CONTEXT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("UNRELATED", "x")

    env = load_env_defaults(str(env_file))

    assert env["log_level"] == "DEBUG"
    assert env["log_file"] == "run.log"
    assert "unrelated" not in env
    monkeypatch.delenv("CODE2CONTEXT_LOG_FILE", raising=False)


@pytest.mark.unit
def test_canonical_keys_maps_aliases_to_field_names() -> None:
    values = {"includeGitIgnore": False, "outputPath": "ctx.txt", "minify_content": True}

    assert CompactionOptions.canonical_keys(values) == {
        "include_gitignore": False,
        "output_path": "ctx.txt",
        "minify_content": True,
    }


@pytest.mark.unit
def test_prompt_preset_option() -> None:
    assert CompactionOptions(root_path="/project").prompt_preset is PromptPreset.NONE
    options = CompactionOptions.model_validate({"rootPath": "/project", "promptPreset": "doc-generator"})

    assert options.prompt_preset is PromptPreset.DOC_GENERATOR
