"""Tests enforcing dependency pinning policy for the distribution."""

from __future__ import annotations

import re
from pathlib import Path

import tomllib

ROOT = Path(__file__).resolve().parents[1]

# Import name -> distribution name for every third-party library used in src/.
RUNTIME_IMPORTS = {
    "httpx": "httpx",
    "pydantic": "pydantic",
    "pydantic_settings": "pydantic-settings",
    "yaml": "PyYAML",
}


def _project() -> dict[str, object]:
    data = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))
    return data["project"]


def _names(requirements: list[str]) -> set[str]:
    return {re.split(r"[=<>!~\[ ]", requirement, maxsplit=1)[0] for requirement in requirements}


def test_all_dependencies_are_pinned() -> None:
    """Project dependencies must be pinned to exact versions."""

    project = _project()
    dependencies = project["dependencies"]
    optional = project.get("optional-dependencies", {})

    for requirement in dependencies:
        assert "==" in requirement, f"Core dependency not pinned: {requirement}"

    for group, requirements in optional.items():
        for requirement in requirements:
            assert "==" in requirement, (
                f"Optional dependency '{group}' not pinned: {requirement}"
            )


def test_runtime_imports_are_declared() -> None:
    """Every third-party package imported by the library is a core dependency."""

    declared = _names(_project()["dependencies"])
    sources = "\n".join(
        path.read_text(encoding="utf-8")
        for path in (ROOT / "src" / "carbon_footprint").rglob("*.py")
    )
    for module, distribution in RUNTIME_IMPORTS.items():
        if re.search(rf"^\s*(import|from) {module}\b", sources, re.MULTILINE):
            assert distribution in declared, f"{module} imported but not declared"


def test_test_tooling_lives_in_extra() -> None:
    project = _project()
    assert {"pytest", "hypothesis"} <= _names(project["optional-dependencies"]["test"])
    assert not {"pytest", "hypothesis"} & _names(project["dependencies"])
