# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Theme store.

Built-in palettes come from config (themes.palettes / themes.secret).
Custom palettes and the active theme name live in the settings store.
"""

from __future__ import annotations

import json
import re
from typing import Any

from loguru import logger

from .interfaces import ConfigModel, SettingsStore
from .models import Theme

THEME_KEY = "theme"
CUSTOM_THEMES_KEY = "custom_themes"

COLOR_KEYS = ("background", "text", "prompt", "error", "link")

THEME_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")
HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

_FALLBACK_COLORS = {
    "background": "#000000",
    "text": "#ffffff",
    "prompt": "#00ff00",
    "error": "#ff0000",
    "link": "#00ffff",
}


def _palette_from_config(
    name: str, cfg: Any, secret: bool = False
) -> Theme:
    cfg = cfg if isinstance(cfg, dict) else {}
    colors = dict(_FALLBACK_COLORS)
    raw_colors = cfg.get("colors") or {}
    if isinstance(raw_colors, dict):
        colors.update({k: str(v) for k, v in raw_colors.items()})
    return Theme(
        name=name.lower(),
        display_name=str(cfg.get("display_name") or name),
        colors=colors,
        secret=secret,
    )


class ThemeStore:
    def __init__(
        self, config: ConfigModel, settings: SettingsStore | None = None
    ) -> None:
        self._settings = settings
        themes_cfg = config.themes or {}

        self._builtin: dict[str, Theme] = {}
        for name, cfg in (themes_cfg.get("palettes") or {}).items():
            theme = _palette_from_config(name, cfg)
            self._builtin[theme.name] = theme
        for name, cfg in (themes_cfg.get("secret") or {}).items():
            theme = _palette_from_config(name, cfg, secret=True)
            self._builtin[theme.name] = theme

        if not self._builtin:
            self._builtin["default"] = Theme(
                "default", "Default", dict(_FALLBACK_COLORS)
            )

        default = str(themes_cfg.get("default") or "").lower()
        if default not in self._builtin:
            default = next(iter(self._builtin))
        self.default_name = default

        self._custom: dict[str, Theme] = self._load_custom()

        stored = default
        if self._settings is not None:
            stored = self._settings.get_setting(THEME_KEY, default).lower()
        self._current = stored if self.resolve(stored) else default

    # -----------------------
    # Persistence
    # -----------------------

    def _load_custom(self) -> dict[str, Theme]:
        if self._settings is None:
            return {}
        raw = self._settings.get_setting(CUSTOM_THEMES_KEY, "{}")
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring malformed stored custom themes")
            return {}
        if not isinstance(data, dict):
            return {}

        custom: dict[str, Theme] = {}
        for name, colors in data.items():
            if not isinstance(colors, dict):
                continue
            key = str(name).lower()
            custom[key] = Theme(
                name=key,
                display_name=str(name),
                colors={**_FALLBACK_COLORS, **colors},
                custom=True,
            )
        return custom

    def _save_custom(self) -> None:
        if self._settings is None:
            return
        payload = {t.display_name: t.colors for t in self._custom.values()}
        self._settings.set_setting(CUSTOM_THEMES_KEY, json.dumps(payload))

    # -----------------------
    # Lookup
    # -----------------------

    def resolve(self, name: str) -> Theme | None:
        key = name.lower()
        return self._builtin.get(key) or self._custom.get(key)

    def names(self, include_secret: bool = False) -> list[str]:
        """Selectable theme names: built-ins first, then custom ones."""
        builtin = [
            t.name
            for t in self._builtin.values()
            if include_secret or not t.secret
        ]
        return builtin + sorted(self._custom)

    def listed(self) -> list[Theme]:
        return [self.resolve(n) for n in self.names()]  # type: ignore[misc]

    def current(self) -> Theme:
        theme = self.resolve(self._current)
        return theme if theme is not None else self._builtin[self.default_name]

    # -----------------------
    # Mutation
    # -----------------------

    def set_theme(self, name: str) -> bool:
        theme = self.resolve(name)
        if theme is None:
            return False
        self._current = theme.name
        if self._settings is not None:
            self._settings.set_setting(THEME_KEY, theme.name)
        return True

    def create_custom(
        self,
        name: str,
        background: str,
        text: str,
        prompt: str,
        error: str,
        link: str,
    ) -> Theme:
        """Validate and store a custom palette.

        Raises:
            ValueError: name or colours are invalid, or the name is taken
                by a built-in theme
        """
        if not THEME_NAME_RE.match(name):
            raise ValueError(
                "Theme name must start with a letter and contain only "
                "letters, numbers, hyphens, and underscores"
            )
        if name.lower() in self._builtin:
            raise ValueError(f"Cannot overwrite built-in theme '{name}'")

        colors = dict(zip(COLOR_KEYS, (background, text, prompt, error, link)))
        for key, value in colors.items():
            if not HEX_COLOR_RE.match(value):
                raise ValueError(
                    f"Invalid {key} color '{value}' (expected #rgb or #rrggbb)"
                )

        theme = Theme(
            name=name.lower(), display_name=name, colors=colors, custom=True
        )
        self._custom[theme.name] = theme
        self._save_custom()
        logger.info("Saved custom theme {}", theme.name)
        return theme

    def delete_custom(self, name: str) -> bool:
        key = name.lower()
        if key not in self._custom:
            return False
        del self._custom[key]
        self._save_custom()
        if self._current == key:
            self.set_theme(self.default_name)
        return True
