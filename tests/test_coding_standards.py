"""
Tests that enforce skillset's coding conventions.

- Modules are imported whole (`import x as _x` for external code,
  `import skillset.x as x` internally); `from X import Y` is allowed only
  in __init__.py re-exports, for __future__, and under TYPE_CHECKING.
- Modules that log use `_logger = _logging.getLogger(__name__)`.
- Source code reports through logging or click.echo, never print().
- Every skill exception derives from SkillError.
"""

import ast as _ast
import inspect as _inspect
import pathlib as _pathlib

import skillset.skills.errors as errors

SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "skillset"
TESTS_DIR = _pathlib.Path(__file__).parent

_LOGGER_LINE = "_logger = _logging.getLogger(__name__)"


def _parse(path: _pathlib.Path) -> _ast.Module:
    return _ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _is_type_checking_block(node: _ast.AST) -> bool:
    if not isinstance(node, _ast.If):
        return False
    test = node.test
    if isinstance(test, _ast.Name):
        return test.id == "TYPE_CHECKING"
    return isinstance(test, _ast.Attribute) and test.attr == "TYPE_CHECKING"


def _from_imports(tree: _ast.AST) -> list[_ast.ImportFrom]:
    """Collect `from X import Y` nodes outside TYPE_CHECKING blocks."""
    found: list[_ast.ImportFrom] = []

    def visit(node: _ast.AST) -> None:
        if _is_type_checking_block(node):
            return
        if isinstance(node, _ast.ImportFrom) and node.module != "__future__":
            found.append(node)
        for child in _ast.iter_child_nodes(node):
            visit(child)

    visit(tree)
    return found


def _import_violations(directory: _pathlib.Path) -> list[str]:
    violations: list[str] = []
    for path in sorted(directory.rglob("*.py")):
        if path.name == "__init__.py":
            continue
        for node in _from_imports(_parse(path)):
            violations.append(f"{path}:{node.lineno}: from {node.module} import ...")
    return violations


class TestImportStyle:
    """Module-qualified imports everywhere outside re-exports."""

    def test_src_no_from_imports(self) -> None:
        """Source files import modules, not names."""
        violations = _import_violations(SRC_DIR)
        assert not violations, "Forbidden 'from X import Y':\n" + "\n".join(violations)

    def test_tests_no_from_imports(self) -> None:
        """Test files follow the same import style."""
        violations = _import_violations(TESTS_DIR)
        assert not violations, "Forbidden 'from X import Y':\n" + "\n".join(violations)


class TestLoggingStyle:
    """Tests for logging and output conventions in source files."""

    def test_module_loggers_use_standard_name(self) -> None:
        """Module loggers should be `_logger = _logging.getLogger(__name__)`."""
        violations: list[str] = []

        for path in SRC_DIR.rglob("*.py"):
            for line_num, line in enumerate(path.read_text().split("\n"), start=1):
                if "getLogger(" in line and line.strip() != _LOGGER_LINE:
                    violations.append(f"{path}:{line_num}: {line.strip()}")

        assert not violations, "Non-standard loggers:\n" + "\n".join(violations)

    def test_src_does_not_print(self) -> None:
        """Source files should log or use click.echo rather than print()."""
        violations: list[str] = []

        for path in SRC_DIR.rglob("*.py"):
            for node in _ast.walk(_parse(path)):
                if (
                    isinstance(node, _ast.Call)
                    and isinstance(node.func, _ast.Name)
                    and node.func.id == "print"
                ):
                    violations.append(f"{path}:{node.lineno}")

        assert not violations, "print() calls in source:\n" + "\n".join(violations)


class TestErrorHierarchy:
    """Skill exceptions share one base class."""

    def test_all_skill_errors_derive_from_skill_error(self) -> None:
        """Callers can catch every hard failure with SkillError."""
        classes = [
            obj
            for _, obj in _inspect.getmembers(errors, _inspect.isclass)
            if issubclass(obj, Exception) and obj.__module__ == errors.__name__
        ]

        assert errors.SkillError in classes
        assert len(classes) > 1
        for cls in classes:
            assert issubclass(cls, errors.SkillError), f"{cls.__name__} is not a SkillError"

    def test_skills_package_raises_only_skill_errors(self) -> None:
        """The skills package raises its own exceptions, not bare builtins."""
        violations: list[str] = []
        skills_dir = SRC_DIR / "skills"

        for path in skills_dir.rglob("*.py"):
            for node in _ast.walk(_parse(path)):
                if not isinstance(node, _ast.Raise) or node.exc is None:
                    continue
                exc = node.exc.func if isinstance(node.exc, _ast.Call) else node.exc
                # _yaml errors stay inside the YAML loader and surface as MetadataParseError
                if _ast.unparse(exc).startswith(("errors.", "_yaml.")):
                    continue
                violations.append(f"{path}:{node.lineno}: {_ast.unparse(node.exc)}")

        assert not violations, "Unexpected exception types:\n" + "\n".join(violations)
