# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Configuration and data root resolution for Termfolio.

Handles:
- Data root resolution (TERMFOLIO_DATA_HOME, ~/.local/share)
- DB and log path helpers
- Packaged YAML defaults loading (termfolio/defaults/*.yaml)
- Portfolio YAML files for `termfolio import`
- ANSI coloring constants for the plain UI
"""

from __future__ import annotations

import os
import re
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

# -----------------------
# ANSI constants (plain UI)
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "green": "\033[38;5;40;1m",
    "cyan": "\033[38;5;69;1m",
    "pink": "\033[38;5;169;1m",
    "red": "\033[31m",
    "dim": "\033[2m",
    "reset": "\033[0m",
}

# Line kind -> ANSI color name
KIND_COLORS: dict[str, str] = {
    "input": "pink",
    "output": "reset",
    "error": "red",
    "system": "cyan",
}


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Simple config wrapper that implements ConfigModel protocol."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def system(self) -> dict[str, Any]:
        return self._config.get("system", {})

    @property
    def source(self) -> dict[str, Any]:
        return self._config.get("source", {})

    @property
    def themes(self) -> dict[str, Any]:
        return self._config.get("themes", {})

    @property
    def ui(self) -> dict[str, Any]:
        ui_cfg = self._config.get("ui", {})
        return ui_cfg if isinstance(ui_cfg, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("source.api_url", "") -> configured API base URL
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root + path helpers
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for Termfolio.

    Resolution order:
    1. TERMFOLIO_DATA_HOME environment variable (if set)
    2. ~/.local/share (default, XDG_DATA_HOME is ignored)
    """
    data_home = os.getenv("TERMFOLIO_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def default_db_path(data_root: Path) -> Path:
    """<data_root>/termfolio/portfolio.db"""
    return data_root / "termfolio" / "portfolio.db"


def logs_dir(data_root: Path) -> Path:
    """<data_root>/termfolio/logs"""
    return data_root / "termfolio" / "logs"


def slugify(text: str) -> str:
    """Convert a project name to a URL-safe slug.

    Rules:
    - lowercase
    - replace any non [a-z0-9] with '-'
    - collapse multiple '-'
    - trim leading/trailing '-'
    - if empty after slugify, use "project"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or "project"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to the packaged defaults directory."""
    return Path(
        importlib_resources.files("termfolio.defaults")
    )  # type: ignore[arg-type]


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"YAML file {path.name} must load to a mapping/dict.")
    return data


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from termfolio/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )
    return _load_yaml_mapping(path)


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))


def load_portfolio_defaults() -> dict[str, Any]:
    """Load the packaged seed portfolio (projects + about)."""
    return load_defaults_yaml("portfolio.yaml")


def load_portfolio_file(path: Path) -> dict[str, Any]:
    """Load a user-supplied portfolio YAML file.

    The file must hold a mapping with a ``projects`` list and/or an
    ``about`` mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Portfolio file not found: {path}")

    data = _load_yaml_mapping(path)
    projects = data.get("projects", [])
    about = data.get("about")
    if not isinstance(projects, list):
        raise ValueError(f"{path.name}: 'projects' must be a list.")
    if about is not None and not isinstance(about, dict):
        raise ValueError(f"{path.name}: 'about' must be a mapping.")
    return data
