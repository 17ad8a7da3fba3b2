"""
Skill registry for managing available skills.

The registry runs discovery once, keeps the merged snapshot, and serves
lookups, prompt summaries, and reads of files inside a skill. Call
discover() (or discover_async()) to take a fresh snapshot.
"""

from __future__ import annotations

import pathlib as _pathlib
import types as _types
import typing as _typing

import skillset.skills.discovery as discovery
import skillset.skills.fs as fs_module
import skillset.skills.prompt as prompt
import skillset.skills.skill as skill_module

if _typing.TYPE_CHECKING:
    import skillset.config as _config


class SkillRegistry:
    """
    Registry for managing skills.

    Handles:
    - Skill discovery from the global and worktree skills directories
    - Prompt summaries (name + description)
    - Full body and skill-relative file access
    """

    def __init__(
        self,
        global_dir: _pathlib.Path | None = None,
        worktree_roots: _typing.Sequence[_pathlib.Path] = (),
        *,
        fs: fs_module.Filesystem | None = None,
        async_fs: fs_module.AsyncFilesystem | None = None,
    ) -> None:
        """
        Initialize the skill registry.

        Args:
            global_dir: Global skills directory, or None to skip it.
            worktree_roots: Worktree roots in ascending precedence.
            fs: Filesystem for blocking discovery.
            async_fs: Filesystem for async discovery.
        """
        self._discovery = discovery.SkillDiscovery(
            global_dir, worktree_roots, fs=fs, async_fs=async_fs
        )
        self._skills: dict[str, skill_module.Skill] | None = None
        self._skipped: list[discovery.SkippedSkill] = []

    @classmethod
    def from_settings(
        cls,
        settings: _config.Settings,
        **kwargs: _typing.Any,
    ) -> SkillRegistry:
        """Create a registry for the directories named in settings."""
        return cls(
            settings.global_skills_dir if settings.include_global else None,
            settings.worktree_roots,
            **kwargs,
        )

    def _store(self, results: list[tuple[_pathlib.Path, discovery.DiscoveryResult]]) -> None:
        self._skills = discovery.merge_results(results)
        self._skipped = [s for _, result in results for s in result.skipped]

    def _ensure_discovered(self) -> dict[str, skill_module.Skill]:
        """Ensure skills have been discovered."""
        if self._skills is None:
            self._store(self._discovery.scan())
        assert self._skills is not None
        return self._skills

    def discover(self) -> None:
        """Force re-discovery of skills."""
        self._skills = None
        self._ensure_discovered()

    async def discover_async(self) -> None:
        """Re-discover skills without blocking the event loop."""
        self._store(await self._discovery.scan_async())

    def get_search_paths(self) -> list[_pathlib.Path]:
        """Get the skills directories in use, lowest priority first."""
        return self._discovery.get_search_paths()

    # Skill listing
    def list_skills(self) -> list[skill_module.Skill]:
        """List all discovered skills, sorted by name."""
        return sorted(self._ensure_discovered().values(), key=lambda s: s.name)

    def list_skipped(self) -> list[discovery.SkippedSkill]:
        """List directory entries skipped during the last discovery."""
        self._ensure_discovered()
        return list(self._skipped)

    def get_skill(self, name: str) -> skill_module.Skill | None:
        """Get a skill by name."""
        return self._ensure_discovered().get(name)

    def has_skill(self, name: str) -> bool:
        """Check if a skill exists."""
        return self.get_skill(name) is not None

    @property
    def skills(self) -> _typing.Mapping[str, skill_module.Skill]:
        """Read-only view of the current snapshot."""
        return _types.MappingProxyType(self._ensure_discovered())

    # Prompt and content access
    def get_metadata_for_prompt(
        self,
        renderer: prompt.PromptRenderer | None = None,
    ) -> str:
        """Get skill summaries rendered for the system prompt."""
        return prompt.format_skills_for_prompt(self._ensure_discovered(), renderer)

    def trigger_skill(self, name: str) -> str | None:
        """
        Get a skill's body wrapped for injection into the conversation.

        Args:
            name: Skill name.

        Returns:
            Skill content for injection, or None if not found.
        """
        skill = self.get_skill(name)
        if skill is None:
            return None
        return f'<skill name="{name}" path="{skill.path}">\n{skill.body}\n</skill>'

    def read_skill_file(self, skill_name: str, relative_path: str) -> str | None:
        """
        Read a file inside a skill's directory.

        Args:
            skill_name: Skill name.
            relative_path: Path relative to the skill directory
                (e.g., "references/forms.md").

        Returns:
            File content, or None if the skill or file doesn't exist.

        Raises:
            PathTraversalError: If the path escapes the skill directory.
        """
        skill = self.get_skill(skill_name)
        if skill is None:
            return None

        path = skill.resolve_path(relative_path)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    # Serialization
    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        skills = self.list_skills()
        return {
            "search_paths": [str(p) for p in self.get_search_paths()],
            "skill_count": len(skills),
            "skills": [s.to_dict() for s in skills],
            "skipped": [
                {"path": str(s.path), "kind": s.kind.value, "reason": s.reason}
                for s in self._skipped
            ],
        }
