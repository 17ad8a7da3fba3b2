"""
Skill summaries for the system prompt.

Only the name and a short description of each skill go into the prompt;
the full body is loaded when a skill is used. Turning the summaries into
text is delegated to a PromptRenderer so callers can plug in their own
template.
"""

from __future__ import annotations

import abc as _abc
import logging as _logging
import typing as _typing

import skillset.constants as constants
import skillset.skills.skill as skill_module

_logger = _logging.getLogger(__name__)


class SkillSummary(_typing.NamedTuple):
    """Name and (possibly truncated) description of one skill."""

    name: str
    description: str


class PromptRenderer(_abc.ABC):
    """Renders skill summaries into prompt text."""

    @_abc.abstractmethod
    def render(self, *, has_skills: bool, skills: list[SkillSummary]) -> str:
        """
        Render the skills section.

        Args:
            has_skills: False when there are no skills to list.
            skills: Summaries sorted by name.
        """
        ...


class MarkdownPromptRenderer(PromptRenderer):
    """Renders summaries as a markdown section."""

    def render(self, *, has_skills: bool, skills: list[SkillSummary]) -> str:
        if not has_skills:
            return "## Available Skills\n\nNo skills are available."

        lines = ["## Available Skills", ""]
        for summary in skills:
            lines.append(f"- **{summary.name}**: {summary.description}")
        lines.append("")
        lines.append(
            "To use a skill, read its SKILL.md file and follow the instructions. "
            "Paths mentioned in a skill are relative to the skill's directory."
        )
        return "\n".join(lines)


def truncate_description(description: str) -> str:
    """Shorten a description to at most 80 characters, marking the cut with '...'."""
    limit = constants.PROMPT_DESCRIPTION_MAX_CHARS
    if len(description) <= limit:
        return description
    keep = limit - len(constants.PROMPT_ELLIPSIS)
    return description[:keep] + constants.PROMPT_ELLIPSIS


def summarize_skills(
    skills: _typing.Mapping[str, skill_module.Skill],
) -> list[SkillSummary]:
    """Build prompt summaries sorted by skill name."""
    return [
        SkillSummary(skill.name, truncate_description(skill.description))
        for skill in sorted(skills.values(), key=lambda s: s.name)
    ]


def format_skills_for_prompt(
    skills: _typing.Mapping[str, skill_module.Skill],
    renderer: PromptRenderer | None = None,
) -> str:
    """
    Format skills for the system prompt.

    Args:
        skills: Name-keyed skill collection.
        renderer: Renderer to use. Defaults to MarkdownPromptRenderer.

    Returns:
        Rendered text, or an empty string if rendering fails.
    """
    if renderer is None:
        renderer = MarkdownPromptRenderer()

    summaries = summarize_skills(skills)
    try:
        return renderer.render(has_skills=bool(summaries), skills=summaries)
    except Exception as e:
        _logger.warning("failed to render skills prompt: %s", e)
        return ""
