# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.patch_stdout import patch_stdout
from prompt_toolkit.shortcuts import clear as pt_clear
from prompt_toolkit.shortcuts import print_formatted_text
from prompt_toolkit.styles import Style

from .errors import DataFetchError
from .history import DOWN, UP
from .models import LineKind, OutputLine, Theme

if TYPE_CHECKING:
    from .session import TerminalSession  # pragma: no cover


# ----------------------------
# Config helpers (read through session.config.get_path)
# ----------------------------


def _cfg_get_path(session: TerminalSession | None, path: str, default):
    if session is None:
        return default
    cfg = getattr(session, "config", None)
    if cfg is None or not hasattr(cfg, "get_path"):
        return default
    return cfg.get_path(path, default)


def _cfg_dict(session: TerminalSession | None, path: str, default: dict) -> dict:
    val = _cfg_get_path(session, path, default)
    return val if isinstance(val, dict) else default


# ----------------------------
# Theme / Style
# ----------------------------


def _default_style_dict() -> dict[str, str]:
    return {
        "completion-menu": "bg:#111111 #d0d0d0",
        "completion-menu.completion": "bg:#111111 #d0d0d0",
        "completion-menu.completion.current": "bg:#303030 #ffffff bold",
        "completion-menu.meta.completion": "bg:#111111 #808080",
        "completion-menu.meta.completion.current": "bg:#303030 #a0a0a0",
        "bottom-toolbar": "bg:#0b0b0b #d0d0d0",
    }


def _theme_style_dict(theme: Theme | None) -> dict[str, str]:
    """Map the active palette onto the classes output lines use."""
    if theme is None:
        return {}
    c = theme.colors
    return {
        "prompt": f"{c['prompt']} bold",
        "line.input": c["prompt"],
        "line.output": c["text"],
        "line.error": c["error"],
        "line.system": c["link"],
    }


def _build_style(session: TerminalSession | None) -> Style:
    base = _default_style_dict()
    overrides = _cfg_dict(session, "ui.style", {})
    # only keep string->string
    for k, v in list(overrides.items()):
        if isinstance(k, str) and isinstance(v, str):
            base[k] = v
    themes = getattr(session, "themes", None)
    if themes is not None:
        base.update(_theme_style_dict(themes.current()))
    return Style.from_dict(base)


# ----------------------------
# Completer (commands + arguments)
# ----------------------------


class TerminalCompleter(Completer):
    """Completes command names, then the first argument of known commands.

    - cat / cd: project slugs (loaded by refresh_slugs)
    - theme:    theme names and flags
    - help:     command names and -secret
    """

    def __init__(self, session: TerminalSession | None) -> None:
        self.session = session
        self.slugs: list[str] = []

    def _command_items(self) -> list[tuple[str, str]]:
        if self.session is None:
            return []
        return [
            (d.name, d.description)
            for d in self.session.registry.descriptors()
        ]

    def _argument_items(self, command: str) -> list[tuple[str, str]]:
        s = self.session
        if s is None:
            return []
        if command in ("cat", "cd"):
            return [(slug, "project") for slug in self.slugs]
        if command == "theme" and s.themes is not None:
            items = [(name, "theme") for name in s.themes.names()]
            return items + [("-custom", "create"), ("-delete", "remove")]
        if command == "help":
            items = [(name, "command") for name in s.registry.names()]
            return items + [("-secret", "hidden commands")]
        if command == "ls":
            return [("-l", "long listing")]
        if command == "history":
            return [("-c", "clear history")]
        return []

    def get_completions(
        self, document, complete_event
    ) -> Iterable[Completion]:
        before = (document.text_before_cursor or "").lstrip()

        # Still on the first token: complete command names
        if " " not in before:
            for name, meta in self._command_items():
                if name.startswith(before.lower()):
                    yield Completion(
                        name, start_position=-len(before), display_meta=meta
                    )
            return

        parts = before.split()
        command = parts[0].lower()
        if before.endswith(" "):
            token = ""
            arg_index = len(parts) - 1
        else:
            token = parts[-1]
            arg_index = len(parts) - 2

        # Only the first argument is completed
        if arg_index != 0:
            return

        for value, meta in self._argument_items(command):
            if value.startswith(token.lower()):
                yield Completion(
                    value, start_position=-len(token), display_meta=meta
                )


# ----------------------------
# PromptSession UI
# ----------------------------


class PromptToolkitUI:
    """
    Terminal-friendly UI:
      - Keeps normal terminal scrollback + drag-select copy.
      - Uses PromptSession so completion menus work as expected.
      - Output lines are coloured from the active theme.
      - Up / Down walk the session history.
    """

    def __init__(self, session: TerminalSession | None = None) -> None:
        self.session = session
        self.prompt_session: PromptSession[str] | None = None
        self._completer = TerminalCompleter(session)
        self._style = _build_style(session)
        self._theme_name = self._current_theme_name()
        # Set while history navigation rewrites the buffer
        self._navigating = False

    def _current_theme_name(self) -> str:
        themes = getattr(self.session, "themes", None)
        return themes.current().name if themes is not None else ""

    def _refresh_style(self) -> None:
        name = self._current_theme_name()
        if name != self._theme_name:
            self._style = _build_style(self.session)
            self._theme_name = name
            if self.prompt_session is not None:
                self.prompt_session.style = self._style

    # ---------- session ----------

    def _ensure_session(self) -> None:
        if self.prompt_session is not None:
            return

        key_bindings = (
            self.build_key_bindings(self.session)
            if self.session else None
        )
        complete_while_typing = bool(
            _cfg_get_path(self.session, "ui.complete_while_typing", True)
        )

        self.prompt_session = PromptSession(
            key_bindings=key_bindings,
            completer=self._completer,
            complete_while_typing=complete_while_typing,
            style=self._style,
        )
        self.prompt_session.default_buffer.on_text_changed += (
            self._on_text_changed
        )

    def _on_text_changed(self, buffer) -> None:
        if self._navigating or self.session is None:
            return
        self.session.set_input(buffer.text)

    # ---------- public API ----------

    async def refresh_slugs(self) -> None:
        """Load project slugs for cat/cd completion."""
        if self.session is None:
            return
        try:
            projects = await self.session.source.list_projects()
        except DataFetchError:
            return
        self._completer.slugs = [p.slug for p in projects]

    async def read(self, prompt: str) -> str:
        self._ensure_session()
        assert self.prompt_session is not None
        self._refresh_style()

        with patch_stdout():
            return await self.prompt_session.prompt_async(
                FormattedText([("class:prompt", prompt + " ")])
            )

    def render(self, lines: list[OutputLine]) -> None:
        self._refresh_style()
        for line in lines:
            # The prompt already left the typed command on screen
            if line.kind == LineKind.INPUT:
                continue
            print_formatted_text(
                FormattedText([(f"class:line.{line.kind.value}", line.content)]),
                style=self._style,
            )

    def clear(self) -> None:
        pt_clear()

    # ---------- keybindings ----------

    def _show_history(self, buffer, direction: str) -> None:
        assert self.session is not None
        text = self.session.navigate_history(direction, buffer.text)
        self._navigating = True
        try:
            buffer.text = text
            buffer.cursor_position = len(text)
        finally:
            self._navigating = False

    def build_key_bindings(self, session: TerminalSession) -> KeyBindings:
        kb = KeyBindings()

        @kb.add("up")
        def _(event):
            buf = event.current_buffer
            if buf.complete_state:
                buf.complete_previous()
                return
            self._show_history(buf, UP)

        @kb.add("down")
        def _(event):
            buf = event.current_buffer
            if buf.complete_state:
                buf.complete_next()
                return
            self._show_history(buf, DOWN)

        @kb.add("c-l")
        def _(event):
            event.app.renderer.clear()
            event.app.invalidate()

        return kb
