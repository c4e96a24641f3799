# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
SQLite-backed storage implementation for Termfolio.

Handles all read/write operations: settings, projects, and the profile.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

_PROJECT_COLUMNS = (
    "name",
    "slug",
    "description",
    "long_description",
    "url",
    "github_url",
    "tech_stack",
    "status",
    "featured",
    "display_order",
    "created_at",
    "updated_at",
)

_ABOUT_COLUMNS = (
    "name",
    "title",
    "bio",
    "email",
    "github",
    "linkedin",
    "twitter",
    "website",
    "ascii_art",
)


def _project_row(row: tuple) -> dict[str, Any]:
    project = dict(zip(_PROJECT_COLUMNS, row))
    try:
        project["tech_stack"] = json.loads(project["tech_stack"] or "[]")
    except ValueError:
        project["tech_stack"] = []
    project["featured"] = bool(project["featured"])
    return project


class SQLiteStore:
    """SQLite implementation of the PortfolioStore protocol."""

    def __init__(self, db_path: Path):
        """Initialize store with database path.

        Args:
            db_path: Path to SQLite database file (must have schema)

        Note:
            Store does NOT create schema. Schema must be created by
            db.ensure_schema() before constructing SQLiteStore.
        """
        self.db_path = db_path

        # Ensure parent directory exists
        db_path.parent.mkdir(parents=True, exist_ok=True)

    # ----------------------------------------------------------------
    # Settings operations
    # ----------------------------------------------------------------

    def get_setting(self, key: str, default: str) -> str:
        """Get a setting from persistent storage."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            cur = conn.execute(
                "SELECT value FROM settings WHERE key = ?",
                (key,),
            )
            row = cur.fetchone()
            return row[0] if row else default
        finally:
            conn.close()

    def set_setting(self, key: str, value: str) -> None:
        """Set a setting in persistent storage."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            now = datetime.now().isoformat()
            conn.execute(
                """
                INSERT OR REPLACE INTO settings (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                (key, value, now),
            )
            conn.commit()
        finally:
            conn.close()

    def delete_setting(self, key: str) -> None:
        """Remove a setting from persistent storage."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    # ----------------------------------------------------------------
    # Portfolio reads
    # ----------------------------------------------------------------

    def list_projects(self) -> list[dict[str, Any]]:
        """List all projects ordered by display order, then name."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            cur = conn.execute(
                f"""
                SELECT {', '.join(_PROJECT_COLUMNS)} FROM projects
                ORDER BY display_order ASC, name ASC
                """
            )
            return [_project_row(row) for row in cur.fetchall()]
        finally:
            conn.close()

    def get_project(self, slug: str) -> dict[str, Any] | None:
        """Get a project by slug, or None if not found."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            cur = conn.execute(
                f"""
                SELECT {', '.join(_PROJECT_COLUMNS)} FROM projects
                WHERE slug = ?
                """,
                (slug,),
            )
            row = cur.fetchone()
            return _project_row(row) if row else None
        finally:
            conn.close()

    def get_about(self) -> dict[str, Any] | None:
        """Get the profile, or None if none was seeded."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            cur = conn.execute(
                f"SELECT {', '.join(_ABOUT_COLUMNS)} FROM about WHERE id = 1"
            )
            row = cur.fetchone()
            return dict(zip(_ABOUT_COLUMNS, row)) if row else None
        finally:
            conn.close()
