"""Layering checks driven by the directory mapping in docs/trust_zone.md."""

from __future__ import annotations

import ast
import importlib.util
import re
from pathlib import Path

import pytest

_PACKAGE_ROOT = Path(__file__).resolve().parents[1]
_ZONE_DOC = _PACKAGE_ROOT / "docs" / "trust_zone.md"

_MAY_IMPORT = {
    "Pure": {"Pure"},
    "Privileged": {"Pure", "Privileged"},
    "Orchestrator": {"Pure", "Privileged", "Orchestrator"},
}

# Libraries that read files, talk to the network or touch the process.
_IO_MODULES = {
    "fastapi",
    "httpx",
    "openpyxl",
    "os",
    "pandas",
    "pathlib",
    "shutil",
    "socket",
    "starlette",
    "subprocess",
    "tomllib",
    "uvicorn",
}

# Directories that hold no importable zone code.
_UNZONED = {"tests", "docs", "__pycache__"}


def _zone_directories() -> dict[str, str]:
    """Map each top-level directory (``catalog``) to its zone name."""
    text = _ZONE_DOC.read_text(encoding="utf-8")
    mapping_section = text.split("Current Directory Mapping", 1)[1].split("Dependency Rules", 1)[0]

    directories: dict[str, str] = {}
    zone: str | None = None
    for line in mapping_section.splitlines():
        match = re.match(r"^(\s*)-\s+`([^`]+)`", line)
        if not match:
            continue
        indent, token = match.groups()
        if not indent:
            zone = token
            continue
        assert zone in _MAY_IMPORT, f"directory {token} listed outside a known zone"
        directories[token.strip("/")] = zone
    return directories


def _zone_of_module(module: str, directories: dict[str, str]) -> str | None:
    parts = module.split(".")
    if parts[0] != "tindahan" or len(parts) < 2:
        return None
    return directories.get(parts[1])


def _source_files(directory: str) -> list[Path]:
    return sorted(p for p in (_PACKAGE_ROOT / directory).rglob("*.py") if "__pycache__" not in p.parts)


def _imports_of(path: Path) -> list[str]:
    rel = path.relative_to(_PACKAGE_ROOT).with_suffix("")
    module = ".".join(["tindahan", *rel.parts])
    package = module.removesuffix(".__init__") if path.name == "__init__.py" else module.rsplit(".", 1)[0]

    names: list[str] = []
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"), filename=str(path))):
        if isinstance(node, ast.Import):
            names.extend(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level:
                names.append(importlib.util.resolve_name("." * node.level + (node.module or ""), package))
            elif node.module:
                names.append(node.module)
    return names


def test_every_package_directory_has_exactly_one_zone() -> None:
    directories = _zone_directories()
    on_disk = {
        child.name
        for child in _PACKAGE_ROOT.iterdir()
        if child.is_dir() and child.name not in _UNZONED
    }

    assert set(directories) == on_disk
    assert set(directories.values()) == set(_MAY_IMPORT)


@pytest.mark.parametrize("directory", sorted(_zone_directories()))
def test_imports_only_reach_allowed_zones(directory: str) -> None:
    directories = _zone_directories()
    source_zone = directories[directory]
    crossings = [
        f"{path.relative_to(_PACKAGE_ROOT)} imports {name}"
        for path in _source_files(directory)
        for name in _imports_of(path)
        if (target := _zone_of_module(name, directories)) is not None and target not in _MAY_IMPORT[source_zone]
    ]

    assert crossings == []


@pytest.mark.parametrize("directory", ["catalog", "domain"])
def test_pure_code_never_imports_io_libraries(directory: str) -> None:
    assert _zone_directories()[directory] == "Pure"
    offenders = [
        f"{path.relative_to(_PACKAGE_ROOT)} imports {name}"
        for path in _source_files(directory)
        for name in _imports_of(path)
        if name.split(".")[0] in _IO_MODULES
    ]

    assert offenders == []
