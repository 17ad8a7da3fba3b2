"""
Naming and length rules for skill metadata.

Rules are checked in a fixed order and the first failure is reported:
1. name is not empty
2. name is at most 64 characters
3. name uses only lowercase ASCII letters, digits, and hyphens
4. description is at most 1024 characters
"""

from __future__ import annotations

import string as _string

import skillset.constants as constants
import skillset.skills.errors as errors
import skillset.skills.skill as skill_module

_NAME_CHARS = frozenset(_string.ascii_lowercase + _string.digits + "-")


def validate_metadata(metadata: skill_module.SkillMetadata) -> None:
    """
    Validate skill metadata.

    Args:
        metadata: Decoded frontmatter.

    Raises:
        ValidationError: For the first rule the metadata violates.
    """
    name = metadata.name
    if not name:
        raise errors.ValidationError("name-empty", "skill name cannot be empty")

    if len(name) > constants.MAX_NAME_LENGTH:
        raise errors.ValidationError(
            "name-too-long",
            f"skill name exceeds {constants.MAX_NAME_LENGTH} characters: {len(name)}",
        )

    if not all(c in _NAME_CHARS for c in name):
        raise errors.ValidationError(
            "name-charset",
            f"skill name must be lowercase alphanumeric + hyphens only: {name}",
        )

    if len(metadata.description) > constants.MAX_DESCRIPTION_LENGTH:
        raise errors.ValidationError(
            "description-too-long",
            f"skill description exceeds {constants.MAX_DESCRIPTION_LENGTH} "
            f"characters: {len(metadata.description)}",
        )
