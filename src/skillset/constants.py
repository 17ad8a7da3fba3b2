"""
Shared constants for skillset.

This module provides a single source of truth for file names, layout
conventions, and limits that are used across multiple modules.
"""

# Skill layout
SKILL_FILE_NAME = "SKILL.md"
"""Name of the required definition file inside every skill directory (case-sensitive)."""

SKILLS_DIR_NAME = "skills"
"""Subdirectory of the config directory holding global skills."""

WORKTREE_SKILLS_SUBDIR = (".agents", "skills")
"""Path components of the skills directory relative to a worktree root."""

SCRIPTS_DIR_NAME = "scripts"
REFERENCES_DIR_NAME = "references"
ASSETS_DIR_NAME = "assets"

# Frontmatter
FRONTMATTER_DELIMITER = "---"
"""Marker opening and closing the YAML block at the top of SKILL.md."""

# Metadata limits
MAX_NAME_LENGTH = 64
"""Maximum length of a skill name."""

MAX_DESCRIPTION_LENGTH = 1024
"""Maximum length of a skill description, in characters."""

# Prompt summaries
PROMPT_DESCRIPTION_MAX_CHARS = 80
"""Descriptions longer than this are truncated in prompt summaries."""

PROMPT_ELLIPSIS = "..."
"""Marker appended to truncated descriptions."""
