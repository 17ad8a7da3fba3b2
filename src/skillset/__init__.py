"""
skillset - Agent Skills discovery

Finds, validates, and merges Agent Skills (SKILL.md directories) from a
global config directory and project worktrees, for injection into an AI
agent's prompt.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("skillset")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "skillset Contributors"

from skillset.config import Settings  # noqa: E402
from skillset.skills import Skill, SkillRegistry  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings", "Skill", "SkillRegistry"]
