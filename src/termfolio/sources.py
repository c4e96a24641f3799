# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Portfolio data sources.

Commands never talk to SQLite or HTTP directly; they await one of these:

- HttpPortfolioSource   REST backend (requests, run off the event loop)
- StorePortfolioSource  local SQLite database via SQLiteStore
- StaticPortfolioSource in-memory fixture with optional simulated latency

Failures surface as DataFetchError with a user-safe message. The
underlying cause is only logged.
"""

from __future__ import annotations

import asyncio
import os
import sqlite3
from collections.abc import Iterable
from typing import Any
from urllib.parse import quote

import requests
from loguru import logger

from .config import load_portfolio_defaults
from .errors import DataFetchError, ProjectNotFound
from .interfaces import ConfigModel, PortfolioSource, PortfolioStore
from .models import About, Project

SOURCE_MODES = ("local", "http", "static")


def _ordered(projects: Iterable[Project]) -> list[Project]:
    return sorted(projects, key=lambda p: (p.display_order, p.name))


# -----------------------
# REST backend
# -----------------------


class HttpPortfolioSource:
    """Reads the portfolio from the REST backend."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        http: Any = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # Anything with a requests-compatible get(url, timeout=...)
        self._http = http if http is not None else requests.Session()

    async def _get(self, path: str, failure: str) -> Any:
        url = f"{self.base_url}{path}"
        try:
            return await asyncio.to_thread(
                self._http.get, url, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.warning("GET {} failed: {}", url, e)
            raise DataFetchError(failure) from e

    @staticmethod
    def _json(response: Any, failure: str) -> Any:
        if not response.ok:
            logger.warning(
                "GET {} returned HTTP {}", response.url, response.status_code
            )
            raise DataFetchError(failure)
        try:
            return response.json()
        except ValueError as e:
            logger.warning("GET {} returned invalid JSON", response.url)
            raise DataFetchError(failure) from e

    async def list_projects(self) -> list[Project]:
        failure = "failed to load projects"
        response = await self._get("/api/projects", failure)
        payload = self._json(response, failure)
        try:
            return _ordered(
                Project.from_dict(p) for p in payload["projects"]
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed projects payload: {}", e)
            raise DataFetchError(failure) from e

    async def get_project(self, slug: str) -> Project:
        failure = "failed to load project"
        response = await self._get(
            f"/api/projects/{quote(slug, safe='')}", failure
        )
        if response.status_code == 404:
            raise ProjectNotFound(slug)
        payload = self._json(response, failure)
        try:
            return Project.from_dict(payload["project"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed project payload for {}: {}", slug, e)
            raise DataFetchError(failure) from e

    async def get_about(self) -> About:
        failure = "failed to load profile"
        response = await self._get("/api/about", failure)
        payload = self._json(response, failure)
        try:
            return About.from_dict(payload)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed about payload: {}", e)
            raise DataFetchError(failure) from e

    async def health(self) -> dict[str, Any]:
        failure = "backend unavailable"
        response = await self._get("/health", failure)
        payload = self._json(response, failure)
        return payload if isinstance(payload, dict) else {"status": payload}


# -----------------------
# Local SQLite database
# -----------------------


class StorePortfolioSource:
    """Reads the portfolio from the local SQLite store."""

    def __init__(self, store: PortfolioStore) -> None:
        self.store = store

    async def _call(self, fn: Any, *args: Any, failure: str) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except sqlite3.Error as e:
            logger.warning("Portfolio store read failed: {}", e)
            raise DataFetchError(failure) from e

    @staticmethod
    def _convert(build: Any, failure: str) -> Any:
        try:
            return build()
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Malformed portfolio row: {}", e)
            raise DataFetchError(failure) from e

    async def list_projects(self) -> list[Project]:
        failure = "failed to load projects"
        rows = await self._call(self.store.list_projects, failure=failure)
        return self._convert(
            lambda: _ordered(Project.from_dict(r) for r in rows), failure
        )

    async def get_project(self, slug: str) -> Project:
        failure = "failed to load project"
        row = await self._call(self.store.get_project, slug, failure=failure)
        if row is None:
            raise ProjectNotFound(slug)
        return self._convert(lambda: Project.from_dict(row), failure)

    async def get_about(self) -> About:
        failure = "failed to load profile"
        row = await self._call(self.store.get_about, failure=failure)
        if row is None:
            raise DataFetchError(failure)
        return self._convert(lambda: About.from_dict(row), failure)


# -----------------------
# In-memory fixture
# -----------------------


class StaticPortfolioSource:
    """Serves a fixed portfolio, optionally after a simulated delay."""

    def __init__(
        self,
        projects: Iterable[Project],
        about: About | None,
        delay: float = 0.0,
    ) -> None:
        self._projects = _ordered(projects)
        self._about = about
        self.delay = delay

    @classmethod
    def from_mapping(
        cls, data: dict[str, Any], delay: float = 0.0
    ) -> StaticPortfolioSource:
        projects = [Project.from_dict(p) for p in data.get("projects") or []]
        about_data = data.get("about")
        about = About.from_dict(about_data) if about_data else None
        return cls(projects, about, delay)

    async def _pause(self) -> None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)

    async def list_projects(self) -> list[Project]:
        await self._pause()
        return list(self._projects)

    async def get_project(self, slug: str) -> Project:
        await self._pause()
        for project in self._projects:
            if project.slug == slug:
                return project
        raise ProjectNotFound(slug)

    async def get_about(self) -> About:
        await self._pause()
        if self._about is None:
            raise DataFetchError("failed to load profile")
        return self._about


# -----------------------
# Factory
# -----------------------


def build_source(
    config: ConfigModel, store: PortfolioStore | None = None
) -> PortfolioSource:
    """Pick a data source from config.

    TERMFOLIO_SOURCE overrides source.mode and TERMFOLIO_API_URL overrides
    source.api_url.
    """
    mode = (
        os.getenv("TERMFOLIO_SOURCE")
        or config.get_path("source.mode", "local")
        or "local"
    ).lower()

    if mode == "http":
        api_url = os.getenv("TERMFOLIO_API_URL") or config.get_path(
            "source.api_url", "http://localhost:3001"
        )
        timeout = float(config.get_path("source.timeout", 10))
        logger.info("Using HTTP portfolio source at {}", api_url)
        return HttpPortfolioSource(api_url, timeout=timeout)

    if mode == "static":
        delay_ms = config.get_path("source.static_delay_ms", 0) or 0
        logger.info("Using static portfolio source")
        return StaticPortfolioSource.from_mapping(
            load_portfolio_defaults(), delay=float(delay_ms) / 1000
        )

    if mode == "local":
        if store is None:
            raise ValueError("source mode 'local' needs a portfolio store")
        return StorePortfolioSource(store)

    raise ValueError(
        f"Unknown source mode {mode!r} "
        f"(expected one of {', '.join(SOURCE_MODES)})"
    )
