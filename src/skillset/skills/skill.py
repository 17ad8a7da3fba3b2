"""
Skill definition and path resolution.

A skill is a directory containing a SKILL.md file (YAML frontmatter plus
a markdown body) and optional scripts/, references/ and assets/
directories. SkillMetadata holds the decoded frontmatter; Skill is the
validated, located unit produced by discovery.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import types as _types
import typing as _typing

import pydantic as _pydantic

import skillset.constants as constants
import skillset.skills.errors as errors

_logger = _logging.getLogger(__name__)


class SkillMetadata(_pydantic.BaseModel):
    """
    Metadata parsed from the frontmatter of a SKILL.md file.

    Required fields:
    - name: Skill identifier (must match the directory name)
    - description: What the skill does and when to use it

    Naming and length rules are not enforced here; see
    skillset.skills.validation. Unknown keys are ignored.
    The metadata bag is a read-only mapping.
    """

    model_config = _pydantic.ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    name: str = _pydantic.Field(
        ...,
        description="Skill name (lowercase, digits, hyphens)",
    )

    description: str = _pydantic.Field(
        ...,
        description="What the skill does and when to use it",
    )

    license: str | None = _pydantic.Field(
        default=None,
        description="License for the skill",
    )

    compatibility: str | None = _pydantic.Field(
        default=None,
        description="Environment requirements",
    )

    metadata: _typing.Mapping[str, str] = _pydantic.Field(
        default_factory=dict,
        validate_default=True,
        description="Custom key-value metadata for client-specific data",
    )

    allowed_tools: str | None = _pydantic.Field(
        default=None,
        validation_alias=_pydantic.AliasChoices("allowed-tools", "allowed_tools"),
        description="Space-delimited list of pre-approved tools",
    )

    @_pydantic.field_validator("metadata")
    @classmethod
    def _freeze_metadata(cls, value: _typing.Mapping[str, str]) -> _typing.Mapping[str, str]:
        return _types.MappingProxyType(dict(value))

    def __hash__(self) -> int:
        return hash(
            (
                self.name,
                self.description,
                self.license,
                self.compatibility,
                self.allowed_tools,
                tuple(sorted(self.metadata.items())),
            )
        )

    def tool_names(self) -> list[str]:
        """Split allowed_tools on whitespace."""
        if not self.allowed_tools:
            return []
        return self.allowed_tools.split()


def _canonicalize(path: _pathlib.Path) -> _pathlib.Path:
    """Resolve symlinks and normalize, tolerating paths that don't exist yet."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        pass
    try:
        return path.resolve()
    except (OSError, RuntimeError, ValueError):
        return path


@_dataclasses.dataclass(frozen=True)
class Skill:
    """
    A discovered skill with its metadata and content.

    Instances are built by discovery after the frontmatter has been parsed,
    validated, and checked against the directory name. They are never
    mutated and can be shared freely between collections.
    """

    metadata: SkillMetadata
    """Parsed frontmatter metadata."""

    body: str
    """Markdown body after the frontmatter, leading whitespace trimmed."""

    path: _pathlib.Path
    """Absolute path to the skill directory."""

    @property
    def name(self) -> str:
        """Skill name from metadata."""
        return self.metadata.name

    @property
    def description(self) -> str:
        """Skill description from metadata."""
        return self.metadata.description

    @property
    def license(self) -> str | None:
        """Skill license from metadata."""
        return self.metadata.license

    @property
    def compatibility(self) -> str | None:
        """Environment requirements from metadata."""
        return self.metadata.compatibility

    @property
    def skill_file(self) -> _pathlib.Path:
        """Path to the SKILL.md file."""
        return self.path / constants.SKILL_FILE_NAME

    def resolve_path(self, relative_path: str) -> _pathlib.Path:
        """
        Resolve a path relative to the skill directory.

        This is the only supported way to turn a skill-relative reference
        into a filesystem path. The target does not have to exist.

        Args:
            relative_path: Path relative to the skill directory
                (e.g., "scripts/run.sh").

        Returns:
            Canonical absolute path inside the skill directory.

        Raises:
            PathTraversalError: If the path contains ".." or resolves
                outside the skill directory.
        """
        if ".." in relative_path:
            raise errors.PathTraversalError(
                relative_path,
                f"path traversal not allowed: {relative_path}",
            )

        resolved = _canonicalize(self.path / relative_path)
        root = _canonicalize(self.path)

        if not resolved.is_relative_to(root):
            raise errors.PathTraversalError(
                relative_path,
                f"path escapes skill directory: {relative_path}",
            )

        return resolved

    def _list_files(self, subdir: str) -> list[_pathlib.Path]:
        """List visible files in one of the skill's auxiliary directories."""
        try:
            directory = self.resolve_path(subdir)
        except errors.PathTraversalError as e:
            _logger.warning("Skill %s: ignoring %s/: %s", self.name, subdir, e)
            return []
        if not directory.is_dir():
            return []

        files: list[_pathlib.Path] = []
        for entry in sorted(directory.iterdir()):
            if entry.name.startswith("."):
                continue
            try:
                target = self.resolve_path(f"{subdir}/{entry.name}")
            except errors.PathTraversalError as e:
                _logger.warning("Skill %s: ignoring %s: %s", self.name, entry, e)
                continue
            if target.is_file():
                files.append(target)
        return files

    def list_scripts(self) -> list[_pathlib.Path]:
        """List files in the skill's scripts/ directory."""
        return self._list_files(constants.SCRIPTS_DIR_NAME)

    def list_references(self) -> list[_pathlib.Path]:
        """List files in the skill's references/ directory."""
        return self._list_files(constants.REFERENCES_DIR_NAME)

    def list_assets(self) -> list[_pathlib.Path]:
        """List files in the skill's assets/ directory."""
        return self._list_files(constants.ASSETS_DIR_NAME)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "path": str(self.path),
            "license": self.license,
            "compatibility": self.compatibility,
            "metadata": dict(self.metadata.metadata),
            "allowed_tools": self.metadata.tool_names(),
            "scripts": [str(p) for p in self.list_scripts()],
            "references": [str(p) for p in self.list_references()],
            "assets": [str(p) for p in self.list_assets()],
        }
