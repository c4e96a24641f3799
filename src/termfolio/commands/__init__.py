# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Built-in command set."""

from __future__ import annotations

from ..registry import CommandRegistry
from . import portfolio, terminal, utilities


def build_registry() -> CommandRegistry:
    """Return a registry holding every built-in command."""
    registry = CommandRegistry()
    for module in (portfolio, terminal, utilities):
        for descriptor in module.COMMANDS:
            registry.register(descriptor)
    return registry


__all__ = ["build_registry"]
