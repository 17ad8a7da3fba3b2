"""
Agent Skills discovery for skillset.

Skills are directories with a SKILL.md file (YAML frontmatter plus
markdown instructions) and optional scripts/, references/ and assets/
directories. This package finds them, validates them, and merges them
across locations.

Skill discovery locations (in priority order):
1. <config_dir>/skills/ - Global skills (~/.config/skillset/skills/)
2. <worktree>/.agents/skills/ - Worktree-local skills

Based on the Agent Skills format.
"""

from skillset.skills.discovery import (
    DiscoveryResult,
    SkillDiscovery,
    SkipKind,
    SkippedSkill,
    discover_all_skills,
    discover_all_skills_async,
    discover_skills,
    discover_skills_async,
    global_skills_dir,
    scan_skills_dir,
    scan_skills_dir_async,
    worktree_skills_dir,
)
from skillset.skills.errors import (
    MalformedDocumentError,
    MetadataParseError,
    PathTraversalError,
    SkillError,
    ValidationError,
)
from skillset.skills.frontmatter import (
    load_skill_document,
    parse_skill_markdown,
    split_frontmatter,
)
from skillset.skills.fs import (
    AsyncFilesystem,
    AsyncLocalFilesystem,
    Filesystem,
    LocalFilesystem,
)
from skillset.skills.merge import merge_skill_collections
from skillset.skills.prompt import (
    MarkdownPromptRenderer,
    PromptRenderer,
    SkillSummary,
    format_skills_for_prompt,
    summarize_skills,
    truncate_description,
)
from skillset.skills.registry import SkillRegistry
from skillset.skills.skill import Skill, SkillMetadata
from skillset.skills.validation import validate_metadata

__all__ = [
    # Core
    "Skill",
    "SkillMetadata",
    # Errors
    "SkillError",
    "MalformedDocumentError",
    "MetadataParseError",
    "ValidationError",
    "PathTraversalError",
    # Parsing and validation
    "split_frontmatter",
    "parse_skill_markdown",
    "load_skill_document",
    "validate_metadata",
    # Filesystem
    "Filesystem",
    "AsyncFilesystem",
    "LocalFilesystem",
    "AsyncLocalFilesystem",
    # Discovery
    "DiscoveryResult",
    "SkippedSkill",
    "SkipKind",
    "SkillDiscovery",
    "scan_skills_dir",
    "scan_skills_dir_async",
    "discover_skills",
    "discover_skills_async",
    "discover_all_skills",
    "discover_all_skills_async",
    "global_skills_dir",
    "worktree_skills_dir",
    # Merging
    "merge_skill_collections",
    # Prompt
    "SkillSummary",
    "PromptRenderer",
    "MarkdownPromptRenderer",
    "truncate_description",
    "summarize_skills",
    "format_skills_for_prompt",
    # Registry
    "SkillRegistry",
]
