# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Value types shared by the session, the commands and the data sources.

Output lines are immutable once created. Their timestamps come from a
process-wide clock that never moves backwards, so lines appended to a
session are always in non-decreasing timestamp order.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class LineKind(str, Enum):
    INPUT = "input"
    OUTPUT = "output"
    ERROR = "error"
    SYSTEM = "system"


PROJECT_STATUSES = ("active", "archived", "wip")


class _MonotonicClock:
    """Wall-clock milliseconds, clamped so they never decrease."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now_ms(self) -> int:
        with self._lock:
            now = time.time_ns() // 1_000_000
            if now < self._last:
                now = self._last
            self._last = now
            return now


_clock = _MonotonicClock()


def _new_line_id(timestamp: int) -> str:
    return f"{timestamp}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class OutputLine:
    """One rendered terminal line."""

    kind: LineKind
    content: str
    id: str = ""
    timestamp: int = 0

    def __post_init__(self) -> None:
        if not self.timestamp:
            object.__setattr__(self, "timestamp", _clock.now_ms())
        if not self.id:
            object.__setattr__(self, "id", _new_line_id(self.timestamp))


def stamped(line: OutputLine) -> OutputLine:
    """Copy of line carrying the current time, keeping its id."""
    return replace(line, timestamp=_clock.now_ms())


def output_line(content: str = "") -> OutputLine:
    return OutputLine(LineKind.OUTPUT, content)


def error_line(content: str) -> OutputLine:
    return OutputLine(LineKind.ERROR, content)


def system_line(content: str) -> OutputLine:
    return OutputLine(LineKind.SYSTEM, content)


def input_line(content: str) -> OutputLine:
    return OutputLine(LineKind.INPUT, content)


@dataclass(frozen=True)
class CommandOutput:
    """Result of one command invocation."""

    lines: tuple[OutputLine, ...] = ()
    redirect: str | None = None
    clear_requested: bool = False

    @classmethod
    def of(cls, lines: list[OutputLine], **kwargs: Any) -> CommandOutput:
        return cls(lines=tuple(lines), **kwargs)


@dataclass(frozen=True)
class SessionState:
    """Read-only snapshot of a terminal session."""

    lines: tuple[OutputLine, ...]
    pending_input: str
    is_processing: bool
    history_cursor: int


# ----------------------------------------------------------------
# Portfolio records
# ----------------------------------------------------------------


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (wire JSON is camelCase, rows are not)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Project:
    name: str
    slug: str
    description: str
    url: str
    tech_stack: tuple[str, ...] = ()
    status: str = "active"
    long_description: str | None = None
    github_url: str | None = None
    featured: bool = False
    display_order: int = 0
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self) -> None:
        if self.status not in PROJECT_STATUSES:
            raise ValueError(
                f"Invalid project status {self.status!r} "
                f"(expected one of {', '.join(PROJECT_STATUSES)})"
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Project:
        """Build a project from REST JSON or a store row mapping."""
        tech = _pick(data, "techStack", "tech_stack", default=[]) or []
        return cls(
            name=str(data["name"]),
            slug=str(data["slug"]),
            description=str(data.get("description") or ""),
            url=str(data.get("url") or ""),
            tech_stack=tuple(str(t) for t in tech),
            status=str(data.get("status") or "active"),
            long_description=_pick(
                data, "longDescription", "long_description"
            ),
            github_url=_pick(data, "githubUrl", "github_url"),
            featured=bool(_pick(data, "featured", default=False)),
            display_order=int(
                _pick(data, "displayOrder", "display_order", default=0)
            ),
            created_at=str(_pick(data, "createdAt", "created_at", default="")),
            updated_at=str(_pick(data, "updatedAt", "updated_at", default="")),
        )


@dataclass(frozen=True)
class About:
    name: str
    title: str
    bio: str
    email: str
    github: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    website: str | None = None
    ascii_art: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> About:
        return cls(
            name=str(data["name"]),
            title=str(data.get("title") or ""),
            bio=str(data.get("bio") or ""),
            email=str(data.get("email") or ""),
            github=data.get("github"),
            linkedin=data.get("linkedin"),
            twitter=data.get("twitter"),
            website=data.get("website"),
            ascii_art=_pick(data, "asciiArt", "ascii_art"),
        )

    def social_links(self) -> list[tuple[str, str]]:
        links = [
            ("GitHub", self.github),
            ("LinkedIn", self.linkedin),
            ("Twitter", self.twitter),
            ("Website", self.website),
        ]
        return [(label, url) for label, url in links if url]


@dataclass(frozen=True)
class Theme:
    name: str
    display_name: str
    colors: dict[str, str] = field(default_factory=dict)
    custom: bool = False
    secret: bool = False
