"""Runtime infrastructure for tindahan.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Catalog rule loading via load_catalog_rules()

Storage, spreadsheet I/O and sessions live in their own modules
(catalog_store, spreadsheet_io, sessions) and are imported directly.

Usage:
    from tindahan.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.catalog_file)
"""

from tindahan.runtime.catalog_rules import load_catalog_rules
from tindahan.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from tindahan.runtime.paths import ProjectPaths, get_paths, set_project_root

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_catalog_rules",
    # Paths
    "get_paths",
    "set_project_root",
    "ProjectPaths",
]
