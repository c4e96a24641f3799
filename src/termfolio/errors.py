# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Exception types raised by the registry, commands and data sources.

Every one of these is caught at the session boundary and rendered as a
single error line; none of them ends a session.
"""

from __future__ import annotations


class TerminalError(Exception):
    """Base exception for Termfolio."""


class DuplicateCommand(TerminalError):
    """Raised when a command name is registered twice."""

    def __init__(self, name: str) -> None:
        super().__init__(f"command already registered: {name}")
        self.name = name


class CommandNotFound(TerminalError):
    """Raised when a command name is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"command not found: {name}")
        self.name = name


class UsageError(TerminalError):
    """Raised by a handler when its arguments are missing or malformed."""


class ProjectNotFound(TerminalError):
    """Raised when a project slug does not exist."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"project not found: {slug}")
        self.slug = slug


class DataFetchError(TerminalError):
    """Raised when a data source cannot answer.

    The message is user-safe; transport details belong in the log.
    """


class InternalError(TerminalError):
    """Wraps an unexpected exception raised inside a command handler."""

    def __init__(self, command: str, cause: BaseException) -> None:
        super().__init__(f"Error executing '{command}': {cause}")
        self.command = command
        self.cause = cause
