"""
Main CLI entry point for skillset.

Provides the command-line interface using Click.
"""

import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import click as _click

import skillset
import skillset.config as config
import skillset.constants as constants
import skillset.skills as skills

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _configure_logging(level: str) -> None:
    """Send skillset log records to stderr at the given level."""
    _logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _get_registry(ctx: _click.Context) -> skills.SkillRegistry:
    """Build a registry from the settings stored on the context."""
    settings: config.Settings = ctx.obj["settings"]
    return skills.SkillRegistry.from_settings(settings)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(skillset.__version__, "-v", "--version", prog_name="skillset")
@_click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@_click.option(
    "--project-root",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Worktree root to scan (default: detected from the current directory)",
)
@_click.option(
    "--worktree",
    "worktrees",
    multiple=True,
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    help="Additional worktree root; later ones take precedence. Repeatable.",
)
@_click.option(
    "--no-global",
    is_flag=True,
    help="Skip the global skills directory",
)
@_click.pass_context
def cli(
    ctx: _click.Context,
    verbose: bool,
    project_root: _pathlib.Path | None,
    worktrees: tuple[_pathlib.Path, ...],
    no_global: bool,
) -> None:
    """skillset - discover and inspect Agent Skills."""
    try:
        settings = config.Settings()
    except config.ConfigFileError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    _configure_logging("DEBUG" if verbose else settings.log_level)

    roots = list(settings.worktree_roots)
    if project_root is None and not roots and not worktrees:
        project_root = config.find_project_root()
    if project_root is not None:
        roots.append(project_root.expanduser().resolve())
    roots.extend(w.expanduser().resolve() for w in worktrees)

    update: dict[str, _typing.Any] = {"worktree_roots": roots}
    if no_global:
        update["include_global"] = False

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings.model_copy(update=update)


@cli.command(name="list")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.option("--skipped", "show_skipped", is_flag=True, help="Also list skipped directories")
@_click.pass_context
def skill_list(ctx: _click.Context, json_output: bool, show_skipped: bool) -> None:
    """List all discovered skills."""
    registry = _get_registry(ctx)
    skill_list = registry.list_skills()

    if json_output:
        _click.echo(_json.dumps(registry.to_dict(), indent=2))
        return

    _click.echo("Skill Discovery Paths:")
    for path in registry.get_search_paths():
        exists = "✓" if path.is_dir() else "(not found)"
        _click.echo(f"  {path} {exists}")
    _click.echo()

    if not skill_list:
        _click.echo("No skills found.")
    else:
        _click.echo(f"Discovered Skills ({len(skill_list)}):")
        _click.echo(f"{'Name':<30} {'Description'}")
        _click.echo("-" * 70)
        for s in skill_list:
            _click.echo(f"{s.name:<30} {skills.truncate_description(s.description)}")

    if show_skipped:
        skipped = registry.list_skipped()
        if skipped:
            _click.echo()
            _click.echo(f"Skipped ({len(skipped)}):")
            for entry in skipped:
                _click.echo(f"  {entry.path} [{entry.kind.value}] {entry.reason}")


@cli.command(name="show")
@_click.argument("name")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.option("--body", is_flag=True, help="Show full skill body")
@_click.pass_context
def skill_show(ctx: _click.Context, name: str, json_output: bool, body: bool) -> None:
    """Show details for a specific skill."""
    registry = _get_registry(ctx)
    skill = registry.get_skill(name)

    if skill is None:
        if json_output:
            _click.echo(_json.dumps({"error": f"Skill not found: {name}"}))
        else:
            _click.echo(f"Error: Skill '{name}' not found", err=True)
        raise SystemExit(1)

    if json_output:
        data = skill.to_dict()
        if body:
            data["body"] = skill.body
        _click.echo(_json.dumps(data, indent=2))
        return

    _click.echo(f"Skill: {skill.name}")
    _click.echo(f"  Description: {skill.description}")
    _click.echo(f"  Path: {skill.path}")
    if skill.license:
        _click.echo(f"  License: {skill.license}")
    if skill.compatibility:
        _click.echo(f"  Compatibility: {skill.compatibility}")
    tool_names = skill.metadata.tool_names()
    if tool_names:
        _click.echo(f"  Allowed tools: {', '.join(tool_names)}")
    for key, value in sorted(skill.metadata.metadata.items()):
        _click.echo(f"  {key}: {value}")

    for title, files in (
        ("Scripts", skill.list_scripts()),
        ("References", skill.list_references()),
        ("Assets", skill.list_assets()),
    ):
        if files:
            _click.echo()
            _click.echo(f"{title}:")
            for path in files:
                _click.echo(f"  - {path.relative_to(skill.resolve_path(''))}")

    if body:
        _click.echo()
        _click.echo("--- Body ---")
        _click.echo(skill.body)


@cli.command(name="validate")
@_click.argument(
    "path",
    type=_click.Path(exists=True, file_okay=False, path_type=_pathlib.Path),
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def skill_validate(path: _pathlib.Path, json_output: bool) -> None:
    """Validate a skill directory."""
    skill_file = path / constants.SKILL_FILE_NAME

    result: dict[str, _typing.Any] = {
        "path": str(path),
        "valid": False,
        "error": None,
    }

    try:
        content = skill_file.read_text(encoding="utf-8")
        metadata, _ = skills.load_skill_document(content)
        if metadata.name != path.resolve().name:
            raise skills.ValidationError(
                "name-mismatch",
                f"skill name '{metadata.name}' doesn't match directory name "
                f"'{path.resolve().name}'",
            )
        result["valid"] = True
        result["name"] = metadata.name
        result["description"] = metadata.description
    except (OSError, ValueError) as e:
        result["error"] = f"cannot read {skill_file}: {e}"
    except skills.SkillError as e:
        result["error"] = str(e)

    if json_output:
        _click.echo(_json.dumps(result, indent=2))
    else:
        _click.echo(f"Skill: {path}")
        if result["error"]:
            _click.echo("  Status: ✗ invalid")
            _click.echo(f"  Error: {result['error']}")
        else:
            _click.echo("  Status: ✓ valid")
            _click.echo(f"  Name: {result['name']}")

    if not result["valid"]:
        raise SystemExit(1)


@cli.command(name="prompt")
@_click.pass_context
def skill_prompt(ctx: _click.Context) -> None:
    """Print the skills section of the system prompt."""
    registry = _get_registry(ctx)
    _click.echo(registry.get_metadata_for_prompt())


@cli.command(name="resolve")
@_click.argument("name")
@_click.argument("relative_path")
@_click.pass_context
def skill_resolve(ctx: _click.Context, name: str, relative_path: str) -> None:
    """Resolve a path inside a skill's directory."""
    registry = _get_registry(ctx)
    skill = registry.get_skill(name)
    if skill is None:
        _click.echo(f"Error: Skill '{name}' not found", err=True)
        raise SystemExit(1)

    try:
        resolved = skill.resolve_path(relative_path)
    except skills.PathTraversalError as e:
        _click.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None

    _click.echo(str(resolved))


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="skillset")


if __name__ == "__main__":
    main()
