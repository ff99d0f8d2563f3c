"""Runtime loader for catalog rules (packaged defaults plus project overrides)."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from tindahan.catalog.config import CatalogRules, build_catalog_rules
from tindahan.runtime.logging import get_logger
from tindahan.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    logger.debug("Loaded catalog rules from %s", path)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_catalog_rules(rule_paths: tuple[str, ...] | None = None) -> CatalogRules:
    """Load catalog rules from runtime-configured files into pure in-memory rules.

    With no explicit paths, the packaged defaults are layered under the
    project's ``config/catalog_rules.toml``.
    """
    if rule_paths is None:
        p = get_paths()
        files = [p.default_catalog_rules, p.catalog_rules]
    else:
        files = [Path(path) for path in rule_paths]

    return build_catalog_rules(tuple(_load_toml(path) for path in files))
