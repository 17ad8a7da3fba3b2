"""
Skill discovery from skills directories.

Skills are discovered from (in priority order):
1. <config_dir>/skills/ - Global skills
2. <worktree>/.agents/skills/ - Worktree-local skills, one root per worktree

Later sources have higher priority (worktree overrides global, later
worktrees override earlier ones).

A skills directory holds one subdirectory per skill. Each subdirectory is
scanned independently: a missing, unreadable, or invalid SKILL.md skips
that entry only. A listing error on a single entry skips that entry and
keeps the rest; a missing skills directory, or one that can't be opened,
yields no skills at all. Discovery never raises for bad skills.

The scan itself is a generator that yields filesystem requests, so the
same code runs over a blocking Filesystem (discover_skills) and an
AsyncFilesystem (discover_skills_async).
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import skillset.constants as constants
import skillset.skills.errors as errors
import skillset.skills.frontmatter as frontmatter
import skillset.skills.fs as fs_module
import skillset.skills.merge as merge
import skillset.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

# Errors a filesystem may raise for a single entry
_IO_ERRORS = (OSError, ValueError)


def global_skills_dir(config_dir: _pathlib.Path) -> _pathlib.Path:
    """Get the global skills directory under a config directory."""
    return config_dir / constants.SKILLS_DIR_NAME


def worktree_skills_dir(worktree_root: _pathlib.Path) -> _pathlib.Path:
    """Get the skills directory of a worktree (.agents/skills)."""
    return worktree_root.joinpath(*constants.WORKTREE_SKILLS_SUBDIR)


class SkipKind(str, _enum.Enum):
    """Why a directory entry did not produce a skill."""

    MISSING_SKILL_FILE = "missing-skill-file"
    UNREADABLE = "unreadable"
    MALFORMED = "malformed"
    INVALID = "invalid"
    NAME_MISMATCH = "name-mismatch"


@_dataclasses.dataclass(frozen=True)
class SkippedSkill:
    """A skill directory that was skipped during discovery."""

    path: _pathlib.Path
    kind: SkipKind
    reason: str


@_dataclasses.dataclass
class DiscoveryResult:
    """Skills found in one skills directory plus the entries that were skipped."""

    skills: dict[str, skill_module.Skill] = _dataclasses.field(default_factory=dict)
    skipped: list[SkippedSkill] = _dataclasses.field(default_factory=list)


class _Request(_typing.NamedTuple):
    """
    A filesystem call requested by the scan.

    For "next_entry" the argument is the listing returned by "read_dir";
    the response is the next path, or _END once the listing is exhausted.
    """

    op: _typing.Literal["is_dir", "is_file", "read_dir", "next_entry", "load"]
    arg: _typing.Any


_Scan = _typing.Generator[_Request, _typing.Any, _typing.Any]

_END = object()


def _skip(path: _pathlib.Path, kind: SkipKind, reason: str) -> SkippedSkill:
    if kind is SkipKind.MISSING_SKILL_FILE:
        _logger.debug("skipping %s: %s", path, reason)
    else:
        _logger.warning("skipping %s: %s", path, reason)
    return SkippedSkill(path=path, kind=kind, reason=reason)


def _check(op: _typing.Literal["is_dir", "is_file"], path: _pathlib.Path) -> _Scan:
    try:
        return bool((yield _Request(op, path)))
    except _IO_ERRORS:
        return False


def _scan_entry(path: _pathlib.Path) -> _Scan:
    """Turn one directory entry into a Skill, a SkippedSkill, or None."""
    if not (yield from _check("is_dir", path)):
        return None

    skill_file = path / constants.SKILL_FILE_NAME
    if not (yield from _check("is_file", skill_file)):
        return _skip(
            path,
            SkipKind.MISSING_SKILL_FILE,
            f"directory without {constants.SKILL_FILE_NAME}",
        )

    try:
        content = yield _Request("load", skill_file)
    except _IO_ERRORS as e:
        return _skip(path, SkipKind.UNREADABLE, f"failed to read {skill_file}: {e}")

    try:
        metadata, body = frontmatter.load_skill_document(content)
    except errors.ValidationError as e:
        return _skip(path, SkipKind.INVALID, f"invalid {skill_file}: {e}")
    except errors.SkillError as e:
        return _skip(path, SkipKind.MALFORMED, f"failed to parse {skill_file}: {e}")

    if metadata.name != path.name:
        return _skip(
            path,
            SkipKind.NAME_MISMATCH,
            f"skill name '{metadata.name}' doesn't match directory name "
            f"'{path.name}'",
        )

    return skill_module.Skill(metadata=metadata, body=body, path=path)


def _scan_skills_dir(root: _pathlib.Path) -> _Scan:
    """Scan a skills directory, returning a DiscoveryResult."""
    result = DiscoveryResult()

    # A missing skills directory is the common case, not an error
    if not (yield from _check("is_dir", root)):
        return result

    try:
        listing = yield _Request("read_dir", root)
    except _IO_ERRORS as e:
        _logger.warning("failed to read skills directory %s: %s", root, e)
        return result

    failed = False
    while True:
        try:
            entry = yield _Request("next_entry", listing)
        except _IO_ERRORS as e:
            _logger.warning("failed to read an entry of %s: %s", root, e)
            # Two failures in a row: the listing is not making progress
            if failed:
                break
            failed = True
            continue
        if entry is _END:
            break
        failed = False

        outcome = yield from _scan_entry(entry)
        if isinstance(outcome, skill_module.Skill):
            # Duplicate names within one directory: last listed wins
            result.skills[outcome.name] = outcome
        elif outcome is not None:
            result.skipped.append(outcome)

    return result


def _run(fs: fs_module.Filesystem, scan: _Scan) -> _typing.Any:
    """Drive a scan with blocking filesystem calls."""
    try:
        request = next(scan)
        while True:
            try:
                if request.op == "read_dir":
                    response: _typing.Any = iter(fs.read_dir(request.arg))
                elif request.op == "next_entry":
                    response = next(request.arg, _END)
                elif request.op == "load":
                    response = fs.load(request.arg)
                elif request.op == "is_dir":
                    response = fs.is_dir(request.arg)
                else:
                    response = fs.is_file(request.arg)
            except _IO_ERRORS as e:
                request = scan.throw(e)
            else:
                request = scan.send(response)
    except StopIteration as stop:
        return stop.value


async def _run_async(fs: fs_module.AsyncFilesystem, scan: _Scan) -> _typing.Any:
    """Drive a scan with awaitable filesystem calls."""
    try:
        request = next(scan)
        while True:
            try:
                if request.op == "read_dir":
                    response: _typing.Any = aiter(await fs.read_dir(request.arg))
                elif request.op == "next_entry":
                    try:
                        response = await anext(request.arg)
                    except StopAsyncIteration:
                        response = _END
                elif request.op == "load":
                    response = await fs.load(request.arg)
                elif request.op == "is_dir":
                    response = await fs.is_dir(request.arg)
                else:
                    response = await fs.is_file(request.arg)
            except _IO_ERRORS as e:
                request = scan.throw(e)
            else:
                request = scan.send(response)
    except StopIteration as stop:
        return stop.value


def scan_skills_dir(
    root: _pathlib.Path,
    fs: fs_module.Filesystem | None = None,
) -> DiscoveryResult:
    """
    Scan a skills directory, keeping diagnostics for skipped entries.

    Args:
        root: Directory containing one subdirectory per skill.
        fs: Filesystem to use. Defaults to the local disk.

    Returns:
        DiscoveryResult with the skills found and the entries skipped.
    """
    if fs is None:
        fs = fs_module.LocalFilesystem()
    result: DiscoveryResult = _run(fs, _scan_skills_dir(_pathlib.Path(root).absolute()))
    return result


async def scan_skills_dir_async(
    root: _pathlib.Path,
    fs: fs_module.AsyncFilesystem | None = None,
) -> DiscoveryResult:
    """Async version of scan_skills_dir."""
    if fs is None:
        fs = fs_module.AsyncLocalFilesystem()
    result: DiscoveryResult = await _run_async(
        fs, _scan_skills_dir(_pathlib.Path(root).absolute())
    )
    return result


def discover_skills(
    root: _pathlib.Path,
    fs: fs_module.Filesystem | None = None,
) -> dict[str, skill_module.Skill]:
    """
    Discover all skills in a skills directory.

    Returns:
        Dict mapping skill name to Skill. Empty if the directory is
        missing or can't be listed.
    """
    return scan_skills_dir(root, fs).skills


async def discover_skills_async(
    root: _pathlib.Path,
    fs: fs_module.AsyncFilesystem | None = None,
) -> dict[str, skill_module.Skill]:
    """Async version of discover_skills."""
    return (await scan_skills_dir_async(root, fs)).skills


def merge_results(
    results: _typing.Sequence[tuple[_pathlib.Path, DiscoveryResult]],
) -> dict[str, skill_module.Skill]:
    """Merge per-directory results, later directories winning by name."""
    layers = [result.skills for _, result in results]
    if not layers:
        return {}
    return merge.merge_skill_collections(layers[0], layers[1:])


class SkillDiscovery:
    """
    Discovers skills from the global directory and worktree directories.

    Each search path is scanned independently and the results are merged
    with later paths taking precedence over earlier ones by skill name.
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
        Initialize skill discovery.

        Args:
            global_dir: Global skills directory, or None to skip it.
            worktree_roots: Worktree roots in ascending precedence; each
                contributes its .agents/skills directory.
            fs: Filesystem for discover(). Defaults to the local disk.
            async_fs: Filesystem for discover_async(). Defaults to the local disk.
        """
        self._global_dir = global_dir
        self._worktree_roots = list(worktree_roots)
        self._fs = fs
        self._async_fs = async_fs

    def get_search_paths(self) -> list[_pathlib.Path]:
        """Get the skills directories to scan, lowest priority first."""
        paths: list[_pathlib.Path] = []
        if self._global_dir is not None:
            paths.append(self._global_dir)
        paths.extend(worktree_skills_dir(root) for root in self._worktree_roots)
        return paths

    def scan(self) -> list[tuple[_pathlib.Path, DiscoveryResult]]:
        """Scan every search path, returning each path with its result."""
        return [(path, scan_skills_dir(path, self._fs)) for path in self.get_search_paths()]

    async def scan_async(self) -> list[tuple[_pathlib.Path, DiscoveryResult]]:
        """Async version of scan."""
        results: list[tuple[_pathlib.Path, DiscoveryResult]] = []
        for path in self.get_search_paths():
            results.append((path, await scan_skills_dir_async(path, self._async_fs)))
        return results

    def discover(self) -> dict[str, skill_module.Skill]:
        """
        Discover skills from all search paths.

        Returns:
            Dict mapping skill name to Skill, later paths winning.
        """
        return merge_results(self.scan())

    async def discover_async(self) -> dict[str, skill_module.Skill]:
        """Async version of discover."""
        return merge_results(await self.scan_async())


def discover_all_skills(
    global_dir: _pathlib.Path | None,
    worktree_roots: _typing.Sequence[_pathlib.Path] = (),
    fs: fs_module.Filesystem | None = None,
) -> dict[str, skill_module.Skill]:
    """
    Discover skills from the global directory and all worktrees.

    Worktree skills take precedence over global skills with the same
    name; later worktrees take precedence over earlier ones.
    """
    return SkillDiscovery(global_dir, worktree_roots, fs=fs).discover()


async def discover_all_skills_async(
    global_dir: _pathlib.Path | None,
    worktree_roots: _typing.Sequence[_pathlib.Path] = (),
    fs: fs_module.AsyncFilesystem | None = None,
) -> dict[str, skill_module.Skill]:
    """Async version of discover_all_skills."""
    return await SkillDiscovery(global_dir, worktree_roots, async_fs=fs).discover_async()
