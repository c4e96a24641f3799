# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Low-level database schema and seeding helpers for Termfolio.

Handles:
- Schema creation and migration
- Seeding projects and the profile from a portfolio mapping
"""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any

from .config import slugify
from .models import PROJECT_STATUSES


def ensure_schema(db_path: Path) -> None:
    """Create or migrate database schema.

    Creates required tables if they don't exist:
    - settings: persistent key-value state (history, theme, custom themes)
    - projects: portfolio projects
    - about: the single profile row

    Handles migration from the first projects schema by adding missing
    columns.

    Args:
        db_path: Path to SQLite database file

    This function is idempotent - safe to call multiple times.
    """
    # Ensure parent directory exists
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )

        statuses = ", ".join(f"'{s}'" for s in PROJECT_STATUSES)
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS projects (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                slug TEXT UNIQUE NOT NULL,
                name TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                long_description TEXT,
                url TEXT NOT NULL DEFAULT '',
                github_url TEXT,
                tech_stack TEXT NOT NULL DEFAULT '[]',
                status TEXT NOT NULL DEFAULT 'active'
                    CHECK (status IN ({statuses})),
                featured INTEGER NOT NULL DEFAULT 0,
                display_order INTEGER NOT NULL DEFAULT 0,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS about (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                name TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                bio TEXT NOT NULL DEFAULT '',
                email TEXT NOT NULL DEFAULT '',
                github TEXT,
                linkedin TEXT,
                twitter TEXT,
                website TEXT,
                ascii_art TEXT,
                updated_at TEXT NOT NULL
            )
            """
        )

        # Migration: first projects schema had no featured/display_order
        cur = conn.execute("PRAGMA table_info(projects)")
        cols = {row[1] for row in cur.fetchall()}
        if "featured" not in cols:
            conn.execute(
                "ALTER TABLE projects "
                "ADD COLUMN featured INTEGER NOT NULL DEFAULT 0"
            )
        if "display_order" not in cols:
            conn.execute(
                "ALTER TABLE projects "
                "ADD COLUMN display_order INTEGER NOT NULL DEFAULT 0"
            )

        conn.commit()
    finally:
        conn.close()


def portfolio_is_empty(db_path: Path) -> bool:
    """True when neither projects nor a profile have been stored."""
    conn = sqlite3.connect(str(db_path))
    try:
        projects = conn.execute("SELECT COUNT(*) FROM projects").fetchone()[0]
        about = conn.execute("SELECT COUNT(*) FROM about").fetchone()[0]
        return projects == 0 and about == 0
    finally:
        conn.close()


def _project_params(project: dict[str, Any], now: str) -> tuple:
    name = project.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("Every project needs a non-empty 'name'.")

    slug = project.get("slug") or slugify(name)
    status = project.get("status", "active")
    if status not in PROJECT_STATUSES:
        raise ValueError(f"Project {slug}: invalid status {status!r}")

    tech = project.get("tech_stack", project.get("techStack", [])) or []
    return (
        slug,
        name,
        project.get("description", "") or "",
        project.get("long_description", project.get("longDescription")),
        project.get("url", "") or "",
        project.get("github_url", project.get("githubUrl")),
        json.dumps([str(t) for t in tech]),
        status,
        1 if project.get("featured") else 0,
        int(project.get("display_order", project.get("displayOrder", 0))),
        str(project.get("created_at") or now),
        str(project.get("updated_at") or now),
    )


def seed_portfolio(
    db_path: Path, data: dict[str, Any], replace: bool = False
) -> int:
    """Insert projects and the profile from a portfolio mapping.

    Projects are upserted by slug. With ``replace=True`` existing projects
    and the profile are removed first.

    Returns:
        Number of projects written
    """
    projects = data.get("projects", []) or []
    about = data.get("about")

    conn = sqlite3.connect(str(db_path))
    try:
        now = datetime.now().isoformat()
        if replace:
            conn.execute("DELETE FROM projects")
            conn.execute("DELETE FROM about")

        for project in projects:
            conn.execute(
                """
                INSERT INTO projects (
                    slug, name, description, long_description, url,
                    github_url, tech_stack, status, featured,
                    display_order, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(slug) DO UPDATE SET
                    name = excluded.name,
                    description = excluded.description,
                    long_description = excluded.long_description,
                    url = excluded.url,
                    github_url = excluded.github_url,
                    tech_stack = excluded.tech_stack,
                    status = excluded.status,
                    featured = excluded.featured,
                    display_order = excluded.display_order,
                    updated_at = excluded.updated_at
                """,
                _project_params(project, now),
            )

        if isinstance(about, dict):
            conn.execute(
                """
                INSERT OR REPLACE INTO about (
                    id, name, title, bio, email, github, linkedin,
                    twitter, website, ascii_art, updated_at
                )
                VALUES (1, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    about.get("name", ""),
                    about.get("title", "") or "",
                    about.get("bio", "") or "",
                    about.get("email", "") or "",
                    about.get("github"),
                    about.get("linkedin"),
                    about.get("twitter"),
                    about.get("website"),
                    about.get("ascii_art", about.get("asciiArt")),
                    now,
                ),
            )

        conn.commit()
    finally:
        conn.close()

    return len(projects)
