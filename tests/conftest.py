"""
Shared pytest fixtures for skillset tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing
import unittest.mock as _mock

import click.testing as _click_testing
import pytest as _pytest

import skillset.config as config
import skillset.skills.fs as fs_module

SkillFactory = _typing.Callable[..., _pathlib.Path]


@_pytest.fixture
def clean_env(tmp_path: _pathlib.Path) -> dict[str, str]:
    """
    Return environment dict without SKILLSET_* keys.

    SKILLSET_CONFIG_DIR points at an empty directory under tmp_path so the
    user's real config and global skills never leak into tests.
    """
    env = {k: v for k, v in _os.environ.items() if not k.startswith("SKILLSET_")}
    env["SKILLSET_CONFIG_DIR"] = str(tmp_path / "config")
    return env


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def clean_settings(isolated_env) -> config.Settings:
    """Settings instance isolated from environment and .env file."""
    with isolated_env:
        return config.Settings.construct_without_dotenv()


@_pytest.fixture
def make_skill() -> SkillFactory:
    """
    Return a helper that creates a skill directory with a SKILL.md.

    The declared name defaults to the directory name; pass declared_name
    to create a mismatching skill.
    """

    def _make(
        parent: _pathlib.Path,
        name: str,
        description: str = "Test skill",
        *,
        declared_name: str | None = None,
        body: str | None = None,
        extra: str = "",
    ) -> _pathlib.Path:
        skill_dir = parent / name
        skill_dir.mkdir(parents=True, exist_ok=True)
        if body is None:
            body = f"# {name}\n\nInstructions for {name}.\n"
        (skill_dir / "SKILL.md").write_text(
            "---\n"
            f"name: {declared_name if declared_name is not None else name}\n"
            f"description: {description}\n"
            f"{extra}"
            "---\n"
            f"{body}",
            encoding="utf-8",
        )
        return skill_dir

    return _make


@_pytest.fixture
def cli_runner(clean_env: dict[str, str]) -> _click_testing.CliRunner:
    """CLI runner with an isolated environment."""
    return _click_testing.CliRunner(env=clean_env)


class _FakeListing:
    """Directory listing whose entries may fail one at a time."""

    def __init__(
        self,
        children: _typing.Iterable[_pathlib.Path],
        failing: set[_pathlib.Path],
    ) -> None:
        self._children = iter(children)
        self._failing = failing

    def __iter__(self) -> "_FakeListing":
        return self

    def __next__(self) -> _pathlib.Path:
        child = next(self._children)
        if child in self._failing:
            raise PermissionError(f"cannot stat {child}")
        return child


class FakeFilesystem(fs_module.Filesystem):
    """
    Filesystem backed by a dict of file contents.

    Directories are implied by the file paths. Paths in `unreadable` raise
    on load; paths in `unlistable` raise on read_dir; paths in
    `failing_entries` raise when the listing reaches them.
    """

    def __init__(
        self,
        files: dict[str, str],
        *,
        extra_dirs: _typing.Iterable[str] = (),
        unreadable: _typing.Iterable[str] = (),
        unlistable: _typing.Iterable[str] = (),
        failing_entries: _typing.Iterable[str] = (),
    ) -> None:
        self.files = {_pathlib.Path(p): content for p, content in files.items()}
        self.dirs: set[_pathlib.Path] = {_pathlib.Path(d) for d in extra_dirs}
        for path in list(self.files) + list(self.dirs):
            self.dirs.update(path.parents)
        self.unreadable = {_pathlib.Path(p) for p in unreadable}
        self.unlistable = {_pathlib.Path(p) for p in unlistable}
        self.failing_entries = {_pathlib.Path(p) for p in failing_entries}
        self.loads: list[_pathlib.Path] = []

    def is_dir(self, path: _pathlib.Path) -> bool:
        return path in self.dirs

    def is_file(self, path: _pathlib.Path) -> bool:
        return path in self.files

    def read_dir(self, path: _pathlib.Path) -> _typing.Iterator[_pathlib.Path]:
        if path in self.unlistable or path not in self.dirs:
            raise PermissionError(f"cannot list {path}")
        children = {p for p in self.files if p.parent == path}
        children |= {p for p in self.dirs if p.parent == path and p != path}
        return _FakeListing(sorted(children), self.failing_entries)

    def load(self, path: _pathlib.Path) -> str:
        self.loads.append(path)
        if path in self.unreadable:
            raise OSError(f"I/O error reading {path}")
        return self.files[path]


def skill_md(name: str, description: str = "Test skill", body: str = "Body") -> str:
    """Build a minimal SKILL.md document."""
    return f"---\nname: {name}\ndescription: {description}\n---\n{body}\n"


@_pytest.fixture
def fake_fs() -> type[FakeFilesystem]:
    """The in-memory FakeFilesystem class."""
    return FakeFilesystem


@_pytest.fixture
def skill_doc() -> _typing.Callable[..., str]:
    """Helper building minimal SKILL.md documents."""
    return skill_md
