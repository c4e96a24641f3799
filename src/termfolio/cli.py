# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Termfolio CLI entry point and REPL loop.

Design:
- CLI owns process startup, logging and DB resolution.
- TerminalSession is the session engine (registry+source+stores injected).
- UI is terminal-friendly PromptSession (keeps scrollback + copy/select).
- Every input line runs as its own task, so a slow command never blocks
  the prompt.
"""

from __future__ import annotations

import asyncio
import os
import sys
import threading
import webbrowser
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from loguru import logger

from . import config
from .commands import build_registry
from .history import CommandHistory
from .init import ensure_active_db, import_portfolio, reset_portfolio
from .interfaces import ConfigModel, PortfolioStore
from .logging_utils import configure_logging
from .models import LineKind, OutputLine, system_line
from .session import TerminalSession
from .sources import build_source
from .store import SQLiteStore
from .themes import ThemeStore
from .ui import PromptToolkitUI


class TerminalUI(Protocol):
    async def read(self, prompt: str) -> str: ...

    def render(self, lines: list[OutputLine]) -> None: ...

    def clear(self) -> None: ...


class PlainUI:
    """input()/print() fallback with ANSI colours (TERMFOLIO_PLAIN_UI=1)."""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ) -> None:
        self.input_fn = input_fn
        self.output_fn = output_fn

    async def read(self, prompt: str) -> str:
        colored = (
            config.ANSI_COLORS["green"] + prompt + config.ANSI_COLORS["reset"]
        )
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def _settle(value: str, error: BaseException | None) -> None:
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(value)

        def _reader() -> None:
            value, error = "", None
            try:
                value = self.input_fn(colored + " ")
            except (Exception, KeyboardInterrupt) as e:
                error = e
            try:
                loop.call_soon_threadsafe(_settle, value, error)
            except RuntimeError:
                # Loop already closed: the session ended while blocked in input()
                pass

        # daemon: a blocked input() must not hold up interpreter exit
        threading.Thread(
            target=_reader, name="termfolio-input", daemon=True
        ).start()
        return await future

    def render(self, lines: list[OutputLine]) -> None:
        reset = config.ANSI_COLORS["reset"]
        for line in lines:
            # The terminal already echoed what was typed
            if line.kind == LineKind.INPUT:
                continue
            color = config.ANSI_COLORS[config.KIND_COLORS[line.kind.value]]
            self.output_fn(f"{color}{line.content}{reset}")

    def clear(self) -> None:
        self.output_fn("\033[2J\033[H")


def open_in_browser(url: str) -> None:
    try:
        webbrowser.open(url, new=2)
    except webbrowser.Error as e:
        logger.warning("Could not open {}: {}", url, e)


def build_session(cfg: ConfigModel, store: PortfolioStore) -> TerminalSession:
    """Explicit wiring: registry + source + stores injected into session."""
    return TerminalSession(
        registry=build_registry(),
        source=build_source(cfg, store),
        config=cfg,
        history=CommandHistory(store),
        themes=ThemeStore(cfg, store),
    )


def _exit_message(cfg: ConfigModel) -> str:
    return str(cfg.get_path("system.exit.message", "Bye!"))


async def run_repl(
    session: TerminalSession,
    ui: TerminalUI,
    open_url: Callable[[str], Any] = open_in_browser,
) -> None:
    """Run the Termfolio REPL loop until exit, Ctrl-C or Ctrl-D."""
    session.output_fn = ui.render
    session.clear_fn = ui.clear
    session.redirect_fn = open_url

    refresh = getattr(ui, "refresh_slugs", None)
    if refresh is not None:
        await refresh()

    session.start()

    pending: set[asyncio.Task] = set()
    while session.running:
        try:
            line = await ui.read(session.prompt)
        except (KeyboardInterrupt, EOFError):
            exit_msg = _exit_message(session.config)
            ui.render([system_line(exit_msg)])
            session.end()
            break

        if not (line or "").strip():
            continue

        task = asyncio.create_task(session.execute_command(line))
        pending.add(task)
        task.add_done_callback(pending.discard)

        # Let synchronous commands (exit, clear, ...) finish before the next
        # prompt is drawn
        await asyncio.sleep(0)

    if pending:
        await asyncio.gather(*pending)


def _usage() -> str:
    return (
        "usage: termfolio            start the terminal\n"
        "       termfolio init       reset the portfolio to the packaged one\n"
        "       termfolio import F   load projects/about from a YAML file"
    )


def main() -> None:
    """Main entry point for Termfolio CLI."""
    args = sys.argv[1:]
    configure_logging()

    if args and args[0] == "init":
        db_path, count = reset_portfolio()
        print(f"Portfolio reset: {count} projects in {db_path}")
        return

    if args and args[0] == "import":
        if len(args) < 2:
            print(_usage(), file=sys.stderr)
            sys.exit(2)
        try:
            db_path, count = import_portfolio(Path(args[1]))
        except (FileNotFoundError, ValueError) as e:
            print(f"Import failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"Imported {count} projects into {db_path}")
        return

    if args:
        print(_usage(), file=sys.stderr)
        sys.exit(2)

    # Determine DB path to boot against
    db_path = ensure_active_db()
    store = SQLiteStore(db_path)
    cfg = config.load_system_config()
    session = build_session(cfg, store)

    # If user explicitly disables prompt_toolkit UI:
    if os.environ.get("TERMFOLIO_PLAIN_UI") == "1":
        ui: TerminalUI = PlainUI()
    else:
        ui = PromptToolkitUI(session)

    try:
        asyncio.run(run_repl(session, ui))
    except KeyboardInterrupt:
        pass
