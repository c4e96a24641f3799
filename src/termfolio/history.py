# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Bounded command history with up/down recall.

The cursor is an offset from the end of the history: 0 means the user is
on a fresh input line, len(history) means the oldest entry is shown.
History is read from the injected settings store when constructed and
written back after every mutation.
"""

from __future__ import annotations

import json

from loguru import logger

from .interfaces import SettingsStore

MAX_HISTORY_SIZE = 100
HISTORY_KEY = "history"

UP = "up"
DOWN = "down"


class CommandHistory:
    def __init__(
        self,
        settings: SettingsStore | None = None,
        max_size: int = MAX_HISTORY_SIZE,
    ) -> None:
        self._settings = settings
        self.max_size = max_size
        self._entries: list[str] = self._load()
        self.cursor = 0
        # Input line that was being typed when navigation started
        self._pending = ""

    # -----------------------
    # Persistence
    # -----------------------

    def _load(self) -> list[str]:
        if self._settings is None:
            return []

        raw = self._settings.get_setting(HISTORY_KEY, "[]")
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed stored history")
            return []

        if not isinstance(parsed, list):
            return []
        entries = [e for e in parsed if isinstance(e, str)]
        return entries[-self.max_size:]

    def _save(self) -> None:
        if self._settings is None:
            return
        try:
            self._settings.set_setting(
                HISTORY_KEY, json.dumps(self._entries)
            )
        except Exception as e:
            # History stays usable in memory for the rest of the session
            logger.warning("Failed to persist command history: {}", e)

    # -----------------------
    # Public API
    # -----------------------

    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, command: str) -> None:
        """Append a command (no dedup), evicting the oldest past the cap."""
        self._entries.append(command)
        if len(self._entries) > self.max_size:
            del self._entries[: len(self._entries) - self.max_size]
        self.reset_cursor()
        self._save()

    def navigate(self, direction: str, pending: str = "") -> str:
        """Move the cursor one step and return the text to show.

        ``up`` walks into the past and sticks at the oldest entry.
        ``down`` walks back toward the present; reaching cursor 0 returns
        the input that was pending when navigation started.
        """
        if direction not in (UP, DOWN):
            raise ValueError(f"Unknown history direction: {direction!r}")

        if direction == UP:
            if self.cursor == 0:
                self._pending = pending
            if not self._entries:
                return self._pending
            self.cursor = min(self.cursor + 1, len(self._entries))
            return self._entries[len(self._entries) - self.cursor]

        if self.cursor == 0:
            return pending

        self.cursor -= 1
        if self.cursor == 0:
            return self._pending
        return self._entries[len(self._entries) - self.cursor]

    def reset_cursor(self) -> None:
        self.cursor = 0
        self._pending = ""

    def clear(self) -> None:
        self._entries = []
        self.reset_cursor()
        self._save()
