# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Initialization and database resolution for Termfolio.

Responsibilities:
- Active DB resolution (TERMFOLIO_DB or the data root)
- Schema creation
- Seeding the packaged portfolio into an empty database
- `termfolio init` / `termfolio import <file>`

Important boundary:
- This module must NOT parse YAML directly.
- YAML/defaults are owned by termfolio.config.
"""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from . import config, db


def resolve_db_path() -> Path:
    """TERMFOLIO_DB if set, else <data_root>/termfolio/portfolio.db."""
    override = os.getenv("TERMFOLIO_DB")
    if override:
        return Path(override).expanduser()
    return config.default_db_path(config.get_data_root())


def ensure_active_db() -> Path:
    """Resolve the database, ensure its schema, and seed it when empty."""
    db_path = resolve_db_path()
    db.ensure_schema(db_path)

    if db.portfolio_is_empty(db_path):
        count = db.seed_portfolio(db_path, config.load_portfolio_defaults())
        logger.info("Seeded {} packaged projects into {}", count, db_path)

    return db_path


def reset_portfolio() -> tuple[Path, int]:
    """Replace the stored portfolio with the packaged one (`termfolio init`).

    Settings (history, theme, custom themes) are left alone.
    """
    db_path = resolve_db_path()
    db.ensure_schema(db_path)
    count = db.seed_portfolio(
        db_path, config.load_portfolio_defaults(), replace=True
    )
    logger.info("Reset portfolio in {} ({} projects)", db_path, count)
    return db_path, count


def import_portfolio(path: Path, replace: bool = False) -> tuple[Path, int]:
    """Load a portfolio YAML file into the active database.

    Raises:
        FileNotFoundError: the file does not exist
        ValueError: the file is not a valid portfolio
    """
    data = config.load_portfolio_file(path)
    db_path = resolve_db_path()
    db.ensure_schema(db_path)
    count = db.seed_portfolio(db_path, data, replace=replace)
    logger.info("Imported {} projects from {} into {}", count, path, db_path)
    return db_path, count
