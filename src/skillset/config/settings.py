"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with SKILLSET_ prefix
3. .env file (only if SKILLSET_ENV_FILE points to one)
4. User config file: <config_dir>/config.yaml
5. Field defaults (lowest)

List values from the environment use JSON:
  SKILLSET_WORKTREE_ROOTS='["/src/project-a", "/src/project-b"]'
"""

import logging as _logging
import os as _os
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import skillset.config.sources as sources
import skillset.skills.discovery as discovery


def _get_env_file() -> str | None:
    """Determine which .env file to load.

    Only SKILLSET_ENV_FILE is honoured; without it no .env is loaded and
    configuration comes from the environment and config.yaml.
    """
    if env_file := _os.environ.get("SKILLSET_ENV_FILE"):
        if _pathlib.Path(env_file).exists():
            return env_file
    return None


def find_git_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path | None:
    """Find the git repository root from the given path or current directory."""
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    try:
        result = _subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            cwd=start_path,
            timeout=5,
        )
        if result.returncode == 0:
            return _pathlib.Path(result.stdout.strip())
    except (_subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Find the project root directory.

    Tries (in order):
    1. Git repository root
    2. Nearest ancestor containing an .agents directory or .git
    3. The start path itself
    """
    if start_path is None:
        start_path = _pathlib.Path.cwd()

    git_root = find_git_root(start_path)
    if git_root:
        return git_root

    current = start_path.resolve()
    markers = [".agents", ".git"]
    while current != current.parent:
        if any((current / marker).exists() for marker in markers):
            return current
        current = current.parent

    return start_path.resolve()


class Settings(_pydantic_settings.BaseSettings):
    """
    skillset configuration settings.

    All settings can be overridden via environment variables with SKILLSET_ prefix.

    Config precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables (SKILLSET_*)
    3. .env file
    4. User config (<config_dir>/config.yaml)
    5. Defaults
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SKILLSET_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """
        Configure settings sources with precedence:
        1. init_settings (constructor args) - highest
        2. env_settings (SKILLSET_* env vars)
        3. dotenv_settings (.env file)
        4. yaml config file
        5. (defaults via Field definitions) - lowest

        The yaml file is read from the config_dir passed to the
        constructor, if any, so skills and config come from one place.
        """
        config_path = None
        if isinstance(init_settings, _pydantic_settings.InitSettingsSource):
            config_dir = init_settings.init_kwargs.get("config_dir")
            if config_dir is not None:
                config_path = _pathlib.Path(config_dir).expanduser() / sources.CONFIG_FILE_NAME
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlConfigSettingsSource(settings_cls, config_path),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings from environment variables only, without loading .env file.

        Useful for test isolation and for reproducing issues without
        .env interference.
        """
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    config_dir: _pathlib.Path = _pydantic.Field(
        default_factory=sources.get_default_config_dir,
        description="Directory holding config.yaml and the global skills/ directory",
    )

    worktree_roots: list[_pathlib.Path] = _pydantic.Field(
        default_factory=list,
        description="Worktree roots whose .agents/skills directories are scanned, "
        "lowest priority first",
    )

    include_global: bool = _pydantic.Field(
        default=True,
        description="Include skills from the global skills directory",
    )

    log_level: str = _pydantic.Field(
        default="WARNING",
        description="Log level for skillset loggers",
    )

    @_pydantic.field_validator("config_dir")
    @classmethod
    def _expand_config_dir(cls, value: _pathlib.Path) -> _pathlib.Path:
        return value.expanduser()

    @_pydantic.field_validator("worktree_roots")
    @classmethod
    def _expand_worktree_roots(cls, value: list[_pathlib.Path]) -> list[_pathlib.Path]:
        return [p.expanduser().resolve() for p in value]

    @_pydantic.field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(_logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level

    @property
    def global_skills_dir(self) -> _pathlib.Path:
        """Global skills directory (<config_dir>/skills)."""
        return discovery.global_skills_dir(self.config_dir)

    def worktree_skills_dirs(self) -> list[_pathlib.Path]:
        """Skills directories of the configured worktrees, lowest priority first."""
        return [discovery.worktree_skills_dir(root) for root in self.worktree_roots]

    def skill_search_paths(self) -> list[_pathlib.Path]:
        """All skills directories to scan, lowest priority first."""
        paths = [self.global_skills_dir] if self.include_global else []
        return paths + self.worktree_skills_dirs()
