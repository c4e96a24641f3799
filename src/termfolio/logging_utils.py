# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Runtime logging helpers."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger

from . import config

_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | "
    "{name}:{function}:{line} | {message}"
)
_CONFIGURED_PATH: Path | None = None


def configure_logging(data_root: Path | None = None) -> Path:
    """Send logs to <data_root>/termfolio/logs/termfolio.log, once.

    The terminal itself stays clean: the interactive prompt owns stdout, so
    the default stderr sink is removed.
    """
    global _CONFIGURED_PATH

    root = data_root if data_root is not None else config.get_data_root()
    log_path = config.logs_dir(root) / "termfolio.log"
    if log_path == _CONFIGURED_PATH:
        return log_path

    level = os.getenv("TERMFOLIO_LOG_LEVEL", "INFO").upper()
    logger.remove()
    logger.add(
        log_path,
        level=level,
        format=_FORMAT,
        rotation="1 MB",
        retention=3,
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_PATH = log_path
    return log_path
