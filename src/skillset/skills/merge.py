"""
Layered merging of skill collections.

Skills are discovered separately per location (global, then one
collection per worktree) and combined here. Later layers win by name.
"""

from __future__ import annotations

import typing as _typing

import skillset.skills.skill as skill_module

SkillCollection = dict[str, skill_module.Skill]


def merge_skill_collections(
    base: _typing.Mapping[str, skill_module.Skill],
    overrides: _typing.Iterable[_typing.Mapping[str, skill_module.Skill]] = (),
) -> SkillCollection:
    """
    Merge override collections on top of a base collection.

    Neither the base nor any override is modified.

    Args:
        base: Lowest-precedence collection (e.g. global skills).
        overrides: Collections in ascending precedence; a skill in a later
            collection replaces any earlier skill with the same name.

    Returns:
        New name-keyed collection.
    """
    merged: SkillCollection = dict(base)
    for layer in overrides:
        merged.update(layer)
    return merged
