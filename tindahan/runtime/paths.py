"""Centralized path management for tindahan.

This module provides a single source of truth for the catalog data file,
project configuration and packaged default rules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root directory (TINDAHAN_HOME, else the working directory)."""
    configured = os.environ.get("TINDAHAN_HOME", "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    Everything except the packaged defaults is relative to ``root`` so a
    shop's catalog and overrides can live in any directory.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Source code paths ---
    @property
    def src(self) -> Path:
        """Installed tindahan package directory."""
        return Path(__file__).resolve().parents[1]

    @property
    def default_catalog_rules(self) -> Path:
        """Packaged default catalog rules TOML file."""
        return self.src / "catalog" / "rules" / "default_catalog_rules.toml"

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def catalog_rules(self) -> Path:
        """Project-level catalog rules TOML file (overrides packaged defaults)."""
        return self.config / "catalog_rules.toml"

    # --- Data paths ---
    @property
    def data(self) -> Path:
        """Data directory holding the catalog document."""
        return self.root / "data"

    @property
    def catalog_file(self) -> Path:
        """JSON catalog document (inventory, categories, activity log)."""
        return self.data / "catalog.json"

    @property
    def exports(self) -> Path:
        """Default directory for spreadsheet exports."""
        return self.root / "exports"

    def ensure_data_directories(self) -> None:
        """Create the data and export directories if they don't exist."""
        self.data.mkdir(parents=True, exist_ok=True)
        self.exports.mkdir(parents=True, exist_ok=True)


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def set_project_root(root: Path | str) -> ProjectPaths:
    """Point the singleton at another project root (used by the CLI ``--home`` flag)."""
    global _paths
    _paths = ProjectPaths(root=Path(root))
    return _paths
