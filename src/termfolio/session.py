# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Termfolio terminal session.

Owns the line buffer and dispatches one input line at a time:
- echo the input, record it in history
- resolve the command through the registry
- run the handler (sync or async) and apply its CommandOutput
- turn every failure into a single error line

Important boundary:
- Session does not load YAML, open databases or make HTTP calls.
- Everything it needs (registry, source, history, themes, config) is
  injected.

Concurrency:
- execute_command is a coroutine on a single event loop. Commands that
  overlap interleave, and each one appends its output when it finishes.
- The UI can follow along through output_fn / clear_fn / redirect_fn.
"""

from __future__ import annotations

import inspect
import traceback
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger

from . import config as cfg_module
from .errors import CommandNotFound, InternalError, TerminalError
from .history import CommandHistory
from .interfaces import ConfigModel, PortfolioSource
from .models import (
    CommandOutput,
    OutputLine,
    SessionState,
    error_line,
    input_line,
    stamped,
    system_line,
)
from .registry import CommandRegistry
from .themes import ThemeStore


def write_crash_log(
    error: BaseException,
    command: str = "",
    raw_input: str = "",
) -> None:
    """Write an entry to the crash log.

    Logs unhandled exceptions raised by command handlers.
    Only creates the log directory when actually needed.
    Appends to crash.log (never overwrites).
    """
    try:
        logs_dir = cfg_module.logs_dir(cfg_module.get_data_root())
        logs_dir.mkdir(parents=True, exist_ok=True)

        crash_log_path = logs_dir / "crash.log"

        lines = [f"{datetime.now().isoformat()}"]
        if command:
            lines.append(f"command={command}")
        if raw_input:
            lines.append(f"raw={raw_input}")

        lines.append(f"error={type(error).__name__}: {error}")
        lines.append("traceback:")
        lines.append(
            "".join(
                traceback.format_exception(
                    type(error), error, error.__traceback__
                )
            )
        )
        lines.append("----")

        with crash_log_path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    except Exception:
        # Already handling a failure; the crash log is best effort
        pass


def tokenize(text: str) -> list[str]:
    """Split on runs of whitespace. No quoting or escaping."""
    return text.split()


@dataclass
class CommandContext:
    """What a handler may touch while it runs."""

    source: PortfolioSource
    history: CommandHistory
    themes: ThemeStore
    registry: CommandRegistry
    config: ConfigModel
    started_at: datetime
    end_session: Callable[[], None]

    def set_theme(self, name: str) -> bool:
        return self.themes.set_theme(name)


@dataclass
class TerminalSession:
    """Termfolio session engine."""

    registry: CommandRegistry
    source: PortfolioSource
    config: ConfigModel

    history: CommandHistory = field(default_factory=CommandHistory)
    themes: ThemeStore | None = None

    lines: list[OutputLine] = field(default_factory=list)
    pending_input: str = ""
    is_processing: bool = False
    running: bool = False
    last_redirect: str | None = None
    started_at: datetime = field(default_factory=datetime.now)

    # ---- Streaming hooks (wired by UI/CLI) ----
    output_fn: Callable[[list[OutputLine]], None] | None = None
    clear_fn: Callable[[], None] | None = None
    redirect_fn: Callable[[str], None] | None = None

    def __post_init__(self) -> None:
        if self.themes is None:
            self.themes = ThemeStore(self.config)

    # -----------------------
    # Lifecycle
    # -----------------------

    def start(self) -> list[OutputLine]:
        """Start a session and emit the welcome banner (if enabled)."""
        self.running = True

        sys_cfg = getattr(self.config, "system", {}) or {}
        welcome = sys_cfg.get("welcome") or {}
        if not isinstance(welcome, dict) or not welcome.get("enabled", True):
            return []

        message = welcome.get("message")
        if not isinstance(message, str) or not message.strip():
            return []

        banner = [system_line(s) for s in message.rstrip().split("\n")]
        self._append(banner)
        return banner

    def end(self) -> None:
        self.running = False

    @property
    def prompt(self) -> str:
        sys_cfg = getattr(self.config, "system", {}) or {}
        return str(sys_cfg.get("prompt") or "$")

    # -----------------------
    # Input line state
    # -----------------------

    def set_input(self, text: str) -> None:
        """Typing ends any history navigation."""
        self.pending_input = text
        self.history.reset_cursor()

    def navigate_history(
        self, direction: str, current_input: str | None = None
    ) -> str:
        pending = (
            self.pending_input if current_input is None else current_input
        )
        self.pending_input = self.history.navigate(direction, pending)
        return self.pending_input

    def set_theme(self, name: str) -> bool:
        assert self.themes is not None
        return self.themes.set_theme(name)

    def snapshot(self) -> SessionState:
        return SessionState(
            lines=tuple(self.lines),
            pending_input=self.pending_input,
            is_processing=self.is_processing,
            history_cursor=self.history.cursor,
        )

    # -----------------------
    # Command handling
    # -----------------------

    async def execute_command(self, raw: str) -> CommandOutput | None:
        """Run one input line.

        Returns the handler's CommandOutput, or None when the input was
        blank, unknown, or the handler failed. Never raises for handler
        failures.
        """
        text = raw.strip()
        if not text:
            return None

        # Echo before anything can suspend
        self._append([input_line(text)])
        self.history.push(text)
        self.pending_input = ""

        tokens = tokenize(text)
        typed_name, args = tokens[0], tokens[1:]
        name = typed_name.lower()

        descriptor = self.registry.get(name)
        if descriptor is None:
            self._append([error_line(str(CommandNotFound(typed_name)))])
            return None

        self.is_processing = True
        try:
            result = descriptor.handler(args, self._context())
            if inspect.isawaitable(result):
                result = await result
            self._apply(result)
            return result
        except TerminalError as e:
            self._append([error_line(str(e))])
        except Exception as e:
            err = InternalError(name, e)
            write_crash_log(e, command=name, raw_input=text)
            logger.opt(exception=e).error("Command {} failed", name)
            self._append([error_line(str(err))])
        finally:
            self.is_processing = False
        return None

    def _context(self) -> CommandContext:
        assert self.themes is not None
        return CommandContext(
            source=self.source,
            history=self.history,
            themes=self.themes,
            registry=self.registry,
            config=self.config,
            started_at=self.started_at,
            end_session=self.end,
        )

    def _apply(self, result: CommandOutput) -> None:
        if not isinstance(result, CommandOutput):
            raise TypeError(
                f"handler returned {type(result).__name__}, "
                "expected CommandOutput"
            )

        if result.clear_requested:
            self.lines.clear()
            if self.clear_fn is not None:
                self.clear_fn()
        else:
            self._append(list(result.lines))

        if result.redirect:
            self.last_redirect = result.redirect
            self._append(
                [system_line(f"Redirecting to {result.redirect}...")]
            )
            if self.redirect_fn is not None:
                self.redirect_fn(result.redirect)

    def _append(self, new_lines: list[OutputLine]) -> None:
        if not new_lines:
            return
        # lines are timed when they land, not when a handler built them
        new_lines = [stamped(line) for line in new_lines]
        self.lines.extend(new_lines)
        if self.output_fn is not None:
            self.output_fn(new_lines)
