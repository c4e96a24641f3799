# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Termfolio core package.

A terminal-themed portfolio shell: a command registry, an async terminal
session, history recall, themes, and portfolio data sources.
"""
from .session import TerminalSession as TerminalSession  # noqa: F401 (re-export)
