"""Custom pydantic-settings sources for skillset configuration.

This module provides:

- YamlConfigSettingsSource: A pydantic-settings source that loads
  configuration from the user's YAML config file.

The config file lives at <config_dir>/config.yaml. config_dir is the one
passed to Settings, else SKILLSET_CONFIG_DIR, else ~/.config/skillset.
Environment variables and constructor arguments take precedence over the
file.

Example config.yaml:

    include_global: true
    log_level: INFO
    worktree_roots:
      - ~/src/project-a
"""

import collections.abc as _abc
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding the config directory
ENV_CONFIG_DIR = "SKILLSET_CONFIG_DIR"

CONFIG_FILE_NAME = "config.yaml"


def get_default_config_dir() -> _pathlib.Path:
    """Get the config directory (SKILLSET_CONFIG_DIR or ~/.config/skillset)."""
    if config_dir_env := _os.environ.get(ENV_CONFIG_DIR):
        return _pathlib.Path(config_dir_env).expanduser()
    return _pathlib.Path.home() / ".config" / "skillset"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


class YamlConfigSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that loads the user's config.yaml.

    A missing file contributes nothing. A file that exists but can't be
    read or parsed raises ConfigFileError rather than being ignored.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            config_path: Override path for the config file (for testing).
                If not provided, uses <config_dir>/config.yaml.
        """
        super().__init__(settings_cls)
        self._config_path = config_path or get_default_config_dir() / CONFIG_FILE_NAME
        self._data = self._load_yaml_file(self._config_path) or {}

    @property
    def config_path(self) -> _pathlib.Path:
        """Path of the config file this source reads."""
        return self._config_path

    def _load_yaml_file(
        self,
        path: _pathlib.Path,
    ) -> dict[str, _typing.Any] | None:
        """
        Load a YAML file and return its contents as a dict.

        Returns:
            Parsed YAML contents, or None if the file is missing or empty.

        Raises:
            ConfigFileError: If the file cannot be read, is malformed YAML,
                or contains non-dict content at the top level.
        """
        if not path.exists():
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except PermissionError as e:
            raise ConfigFileError(path, f"permission denied: {e}") from e
        except OSError as e:
            raise ConfigFileError(path, f"cannot read file: {e}") from e

        try:
            parsed = _yaml.safe_load(content)
        except _yaml.YAMLError as e:
            raise ConfigFileError(path, f"invalid YAML: {e}") from e

        if parsed is None:
            return None

        if not isinstance(parsed, dict):
            raise ConfigFileError(
                path,
                f"expected a mapping at top level, got {type(parsed).__name__}",
            )

        return parsed

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Get value for a field from the config file.

        Returns:
            Tuple of (value, field_name, is_complex).
            is_complex is True if the value is a dict or list.
        """
        value = self._data.get(field_name)
        if value is None:
            return None, field_name, False
        return value, field_name, isinstance(value, (_abc.Mapping, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """Return the config file contents for Pydantic validation."""
        return dict(self._data)
