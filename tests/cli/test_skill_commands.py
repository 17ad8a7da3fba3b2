"""Tests for the skillset CLI commands."""

import json as _json
import pathlib as _pathlib

import click.testing as _click_testing
import pytest as _pytest

import skillset.cli as cli
import skillset.skills.discovery as discovery


@_pytest.fixture
def workspace(
    tmp_path: _pathlib.Path,
    clean_env: dict[str, str],
    make_skill,
) -> _pathlib.Path:
    """A project with one local skill plus two global skills."""
    global_dir = discovery.global_skills_dir(_pathlib.Path(clean_env["SKILLSET_CONFIG_DIR"]))
    make_skill(global_dir, "shared", "Global version")
    make_skill(global_dir, "global-only", "Only in the config dir")

    project = tmp_path / "project"
    local_dir = discovery.worktree_skills_dir(project)
    skill_dir = make_skill(local_dir, "shared", "Project version", extra="license: MIT\n")
    (skill_dir / "scripts").mkdir()
    (skill_dir / "scripts" / "run.sh").write_text("echo hi")
    make_skill(local_dir, "dir-name", declared_name="wrong-name")
    return project


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_help_shows_all_commands(self, cli_runner: _click_testing.CliRunner) -> None:
        """Help output should list all available commands."""
        result = cli_runner.invoke(cli.cli, ["--help"])
        assert result.exit_code == 0
        for cmd in ["list", "show", "validate", "prompt", "resolve"]:
            assert cmd in result.output, f"Command '{cmd}' missing from help"

    def test_version_shows_current_version(self, cli_runner: _click_testing.CliRunner) -> None:
        """Version flag should show the package version."""
        result = cli_runner.invoke(cli.cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestListCommand:
    """Tests for `skillset list`."""

    def test_lists_merged_skills(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """Global and project skills are listed, project winning."""
        result = cli_runner.invoke(cli.cli, ["--worktree", str(workspace), "list"])

        assert result.exit_code == 0
        assert "Discovered Skills (2):" in result.output
        assert "global-only" in result.output
        assert "Project version" in result.output
        assert "Global version" not in result.output

    def test_json_output(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """--json prints the registry as JSON."""
        result = cli_runner.invoke(cli.cli, ["--worktree", str(workspace), "list", "--json"])

        assert result.exit_code == 0
        data = _json.loads(result.output)
        assert data["skill_count"] == 2
        assert [s["name"] for s in data["skills"]] == ["global-only", "shared"]
        assert data["skipped"][0]["kind"] == "name-mismatch"

    def test_skipped_entries(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """--skipped shows directories that didn't load."""
        result = cli_runner.invoke(
            cli.cli, ["--worktree", str(workspace), "list", "--skipped"]
        )

        assert result.exit_code == 0
        assert "Skipped (1):" in result.output
        assert "name-mismatch" in result.output

    def test_no_global(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """--no-global leaves out the config dir skills."""
        result = cli_runner.invoke(
            cli.cli, ["--no-global", "--worktree", str(workspace), "list"]
        )

        assert result.exit_code == 0
        assert "global-only" not in result.output
        assert "Discovered Skills (1):" in result.output

    def test_no_skills(
        self, cli_runner: _click_testing.CliRunner, tmp_path: _pathlib.Path
    ) -> None:
        """An empty setup says so."""
        result = cli_runner.invoke(cli.cli, ["--project-root", str(tmp_path), "list"])

        assert result.exit_code == 0
        assert "No skills found." in result.output


class TestShowCommand:
    """Tests for `skillset show`."""

    def test_shows_details(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """Details include license and scripts."""
        result = cli_runner.invoke(cli.cli, ["--worktree", str(workspace), "show", "shared"])

        assert result.exit_code == 0
        assert "Skill: shared" in result.output
        assert "License: MIT" in result.output
        assert "scripts/run.sh" in result.output

    def test_json_with_body(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """--json --body includes the markdown body."""
        result = cli_runner.invoke(
            cli.cli, ["--worktree", str(workspace), "show", "shared", "--json", "--body"]
        )

        assert result.exit_code == 0
        data = _json.loads(result.output)
        assert data["name"] == "shared"
        assert data["body"].startswith("# shared")

    def test_unknown_skill(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """Unknown names exit with an error."""
        result = cli_runner.invoke(cli.cli, ["--worktree", str(workspace), "show", "nope"])

        assert result.exit_code == 1
        assert "not found" in result.output


class TestValidateCommand:
    """Tests for `skillset validate`."""

    def test_valid_skill(
        self, cli_runner: _click_testing.CliRunner, tmp_path: _pathlib.Path, make_skill
    ) -> None:
        """A valid skill directory passes."""
        skill_dir = make_skill(tmp_path, "good-skill")

        result = cli_runner.invoke(
            cli.cli, ["--no-global", "--project-root", str(tmp_path), "validate", str(skill_dir)]
        )

        assert result.exit_code == 0
        assert "✓ valid" in result.output

    def test_name_mismatch(
        self, cli_runner: _click_testing.CliRunner, tmp_path: _pathlib.Path, make_skill
    ) -> None:
        """The directory name must match the declared name."""
        skill_dir = make_skill(tmp_path, "dir-name", declared_name="other-name")

        result = cli_runner.invoke(
            cli.cli,
            ["--no-global", "--project-root", str(tmp_path), "validate", str(skill_dir), "--json"],
        )

        assert result.exit_code == 1
        data = _json.loads(result.output)
        assert data["valid"] is False
        assert "doesn't match directory name" in data["error"]

    def test_missing_skill_file(
        self, cli_runner: _click_testing.CliRunner, tmp_path: _pathlib.Path
    ) -> None:
        """A directory without SKILL.md is invalid."""
        empty = tmp_path / "empty"
        empty.mkdir()

        result = cli_runner.invoke(
            cli.cli, ["--no-global", "--project-root", str(tmp_path), "validate", str(empty)]
        )

        assert result.exit_code == 1
        assert "✗ invalid" in result.output
        assert "cannot read" in result.output

    def test_invalid_frontmatter(
        self, cli_runner: _click_testing.CliRunner, tmp_path: _pathlib.Path
    ) -> None:
        """Frontmatter problems are reported."""
        bad = tmp_path / "bad"
        bad.mkdir()
        (bad / "SKILL.md").write_text("no frontmatter")

        result = cli_runner.invoke(
            cli.cli, ["--no-global", "--project-root", str(tmp_path), "validate", str(bad)]
        )

        assert result.exit_code == 1
        assert "must start with YAML frontmatter" in result.output


class TestPromptAndResolveCommands:
    """Tests for `skillset prompt` and `skillset resolve`."""

    def test_prompt(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """The prompt section lists skills in name order."""
        result = cli_runner.invoke(cli.cli, ["--worktree", str(workspace), "prompt"])

        assert result.exit_code == 0
        assert "## Available Skills" in result.output
        assert result.output.index("global-only") < result.output.index("**shared**")

    def test_resolve(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """resolve prints the absolute path inside the skill."""
        result = cli_runner.invoke(
            cli.cli, ["--worktree", str(workspace), "resolve", "shared", "scripts/run.sh"]
        )

        assert result.exit_code == 0
        skill_dir = discovery.worktree_skills_dir(workspace) / "shared"
        expected = (skill_dir / "scripts" / "run.sh").resolve()
        assert result.output.strip() == str(expected)

    def test_resolve_traversal(
        self, cli_runner: _click_testing.CliRunner, workspace: _pathlib.Path
    ) -> None:
        """Traversal attempts fail."""
        result = cli_runner.invoke(
            cli.cli, ["--worktree", str(workspace), "resolve", "shared", "../global-only"]
        )

        assert result.exit_code == 1
        assert "path traversal not allowed" in result.output
