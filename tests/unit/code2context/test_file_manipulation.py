import os
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from code2context import file_manipulation
from code2context.file_manipulation import LocalFileSystem, is_regular_file, relpath
from code2context.matching import PatternMatcher


def _write(root: Path, rel: str, content: str = "x") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.unit
def test_relpath_uses_posix_separators(tmp_path: Path) -> None:
    assert relpath(tmp_path / "a" / "b.txt", tmp_path) == "a/b.txt"
    assert relpath(Path("/elsewhere/c.txt"), tmp_path) == str(Path("/elsewhere/c.txt"))


@pytest.mark.unit
def test_is_regular_file(tmp_path: Path) -> None:
    f = _write(tmp_path, "a.txt")

    assert is_regular_file(f)
    assert not is_regular_file(tmp_path)
    assert not is_regular_file(tmp_path / "missing")


@pytest.mark.unit
def test_read_file(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    f = tmp_path / "bytes.txt"
    f.write_bytes(b"caf\xc3\xa9 \xff!")

    assert fs.read_file(str(f)) == "café !"
    assert fs.read_file(str(tmp_path / "missing.txt")) is None
    assert fs.read_file(str(tmp_path)) is None


@pytest.mark.unit
def test_write_file_creates_parents(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    target = tmp_path / "out" / "nested" / "ctx.txt"

    assert fs.write_file(str(target), "hello") is True
    assert target.read_text(encoding="utf-8") == "hello"


@pytest.mark.unit
def test_write_file_reports_failure(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    blocker = _write(tmp_path, "blocker")

    assert fs.write_file(str(blocker / "ctx.txt"), "hello") is False


@pytest.mark.unit
def test_exists(tmp_path: Path) -> None:
    fs = LocalFileSystem()

    assert fs.exists(str(tmp_path))
    assert not fs.exists(str(tmp_path / "nope"))


@pytest.mark.unit
def test_get_files_is_deterministic(tmp_path: Path) -> None:
    for rel in ["b.txt", "A.txt", "src/z.py", "src/lib/u.py", "docs/readme.md"]:
        _write(tmp_path, rel, rel)

    files = LocalFileSystem().get_files(str(tmp_path))

    assert [f.path for f in files] == ["A.txt", "b.txt", "docs/readme.md", "src/z.py", "src/lib/u.py"]
    assert all(f.content == f.path for f in files)


@pytest.mark.unit
def test_get_directory_tree(tmp_path: Path) -> None:
    for rel in ["b.txt", "src/app.py", "src/lib/u.py"]:
        _write(tmp_path, rel)
    (tmp_path / "empty").mkdir()

    tree = LocalFileSystem().get_directory_tree(str(tmp_path))

    assert tree.path == ""
    assert tree.name == tmp_path.name
    assert tree.is_directory
    assert [c.name for c in tree.children] == ["empty", "src", "b.txt"]
    src = tree.children[1]
    assert [c.path for c in src.children] == ["src/lib", "src/app.py"]
    assert src.children[0].children[0].path == "src/lib/u.py"
    assert src.children[1].children is None


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_directory_symlinks_are_not_followed(tmp_path: Path) -> None:
    _write(tmp_path, "real/a.txt")
    try:
        (tmp_path / "loop").symlink_to(tmp_path, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks here")

    files = LocalFileSystem().get_files(str(tmp_path))

    assert [f.path for f in files] == ["real/a.txt"]


@pytest.mark.unit
def test_get_files_does_not_read_excluded_content(tmp_path: Path, mocker: MockerFixture) -> None:
    for rel in ["app.py", "logo.png", "node_modules/big.js", "logs/keep.txt", "vendor/keep.js", "vendor/x.js"]:
        _write(tmp_path, rel)
    matcher = PatternMatcher(["node_modules/**", "*.png", "logs/", "!logs/keep.txt", "vendor/**", "!vendor/keep.js"])
    spy = mocker.spy(file_manipulation, "read_text")

    files = LocalFileSystem().get_files(str(tmp_path), matcher)

    assert [f.path for f in files] == ["app.py", "vendor/keep.js"]
    read = sorted(Path(call.args[0]).relative_to(tmp_path).as_posix() for call in spy.call_args_list)
    assert read == ["app.py", "vendor/keep.js"]


@pytest.mark.unit
def test_get_directory_tree_skips_excluded_directories(tmp_path: Path) -> None:
    for rel in ["app.py", "node_modules/dep/index.js", "build/out.js"]:
        _write(tmp_path, rel)

    tree = LocalFileSystem().get_directory_tree(str(tmp_path), PatternMatcher(["node_modules/**", "build/"]))

    assert [c.name for c in tree.children] == ["app.py"]
