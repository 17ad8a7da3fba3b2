"""
Exceptions raised by the skills pipeline.

These are the hard failures: they propagate to the caller when the parser,
validator, or resolver is used directly. Discovery catches the first three
and turns them into skipped entries.
"""

from __future__ import annotations


class SkillError(Exception):
    """Base class for all skill errors."""

    pass


class MalformedDocumentError(SkillError):
    """SKILL.md does not have a properly delimited frontmatter block."""

    pass


class MetadataParseError(SkillError):
    """The frontmatter block could not be decoded into skill metadata."""

    pass


class ValidationError(SkillError):
    """Decoded metadata violates a naming or length rule."""

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__(message)


class PathTraversalError(SkillError):
    """A skill-relative path resolves outside the skill directory."""

    def __init__(self, relative_path: str, message: str) -> None:
        self.relative_path = relative_path
        super().__init__(message)
