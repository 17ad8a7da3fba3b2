"""
SKILL.md frontmatter parsing.

A SKILL.md document starts with a YAML block delimited by "---" lines;
everything after the closing delimiter is the markdown body.

    ---
    name: pdf-processing
    description: Extract text and tables from PDF files
    ---
    # PDF Processing
    ...

Parsing and validation are separate steps so callers can tell a
malformed document apart from a well-formed one with invalid metadata.
"""

from __future__ import annotations

import typing as _typing

import pydantic as _pydantic
import yaml as _yaml

import skillset.constants as constants
import skillset.skills.errors as errors
import skillset.skills.skill as skill_module
import skillset.skills.validation as validation

_DELIMITER = constants.FRONTMATTER_DELIMITER


class _UniqueKeyLoader(_yaml.SafeLoader):
    """SafeLoader that rejects mappings with a repeated key."""

    def construct_mapping(
        self,
        node: _yaml.MappingNode,
        deep: bool = False,
    ) -> dict[_typing.Any, _typing.Any]:
        seen: set[_typing.Any] = set()
        for key_node, _ in node.value:
            key = self.construct_object(key_node, deep=deep)
            try:
                duplicate = key in seen
            except TypeError:
                # Unhashable keys are reported by the base constructor
                continue
            if duplicate:
                raise _yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def split_frontmatter(content: str) -> tuple[str, str]:
    """
    Split a document into its frontmatter block and body.

    Args:
        content: Raw SKILL.md content.

    Returns:
        Tuple of (frontmatter text, body). The frontmatter is trimmed and
        the body has leading whitespace removed.

    Raises:
        MalformedDocumentError: If the opening or closing delimiter is missing.
    """
    content = content.lstrip()

    if not content.startswith(_DELIMITER):
        raise errors.MalformedDocumentError(
            f"SKILL.md must start with YAML frontmatter ({_DELIMITER})"
        )

    rest = content[len(_DELIMITER):]
    end = rest.find(_DELIMITER)
    if end == -1:
        raise errors.MalformedDocumentError(
            f"YAML frontmatter not properly closed with {_DELIMITER}"
        )

    frontmatter = rest[:end].strip()
    body = rest[end + len(_DELIMITER):].lstrip()
    return frontmatter, body


def parse_skill_markdown(content: str) -> tuple[skill_module.SkillMetadata, str]:
    """
    Parse a SKILL.md document into metadata and body.

    The metadata is decoded but not validated; see load_skill_document.

    Args:
        content: Raw markdown content.

    Returns:
        Tuple of (metadata, body).

    Raises:
        MalformedDocumentError: If the frontmatter delimiters are missing.
        MetadataParseError: If the YAML is invalid or required fields are missing.
    """
    frontmatter, body = split_frontmatter(content)

    try:
        data = _yaml.load(frontmatter, Loader=_UniqueKeyLoader)  # noqa: S506
    except _yaml.YAMLError as e:
        raise errors.MetadataParseError(f"failed to parse YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise errors.MetadataParseError(
            f"YAML frontmatter must be a mapping, got {type(data).__name__}"
        )

    try:
        metadata = skill_module.SkillMetadata.model_validate(data)
    except _pydantic.ValidationError as e:
        raise errors.MetadataParseError(f"invalid skill frontmatter: {e}") from e

    return metadata, body


def load_skill_document(content: str) -> tuple[skill_module.SkillMetadata, str]:
    """
    Parse and validate a SKILL.md document.

    Raises:
        MalformedDocumentError, MetadataParseError: See parse_skill_markdown.
        ValidationError: If the metadata breaks a naming or length rule.
    """
    metadata, body = parse_skill_markdown(content)
    validation.validate_metadata(metadata)
    return metadata, body
