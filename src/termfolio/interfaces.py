# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces enable clean separation between the terminal session,
persistence, and the data sources it reads from.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import About, Project


class SettingsStore(Protocol):
    """Key-value persistence for history, theme and custom themes."""

    def get_setting(self, key: str, default: str) -> str:
        """Get a setting from persistent storage."""
        ...

    def set_setting(self, key: str, value: str) -> None:
        """Set a setting in persistent storage."""
        ...

    def delete_setting(self, key: str) -> None:
        """Remove a setting from persistent storage."""
        ...


class PortfolioStore(SettingsStore, Protocol):
    """Protocol for the persistent portfolio database."""

    def list_projects(self) -> list[dict[str, Any]]:
        """List all projects ordered by display order, then name."""
        ...

    def get_project(self, slug: str) -> dict[str, Any] | None:
        """Get a project row by slug, or None if not found."""
        ...

    def get_about(self) -> dict[str, Any] | None:
        """Get the profile row, or None if none was seeded."""
        ...


class PortfolioSource(Protocol):
    """Read-only facade the commands fetch portfolio data through."""

    async def list_projects(self) -> list[Project]:
        """Return every project. Raises DataFetchError."""
        ...

    async def get_project(self, slug: str) -> Project:
        """Return one project. Raises ProjectNotFound or DataFetchError."""
        ...

    async def get_about(self) -> About:
        """Return the profile. Raises DataFetchError."""
        ...


class ConfigModel(Protocol):
    """Protocol for configuration access."""

    @property
    def system(self) -> dict[str, Any]:
        """System configuration."""
        ...

    @property
    def source(self) -> dict[str, Any]:
        """Data source configuration."""
        ...

    @property
    def themes(self) -> dict[str, Any]:
        """Theme palettes."""
        ...

    def get_path(self, path: str, default: Any = None) -> Any:
        """Nested dotted lookup."""
        ...
