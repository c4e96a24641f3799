# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Command descriptors and the name -> descriptor registry."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

from .errors import CommandNotFound, DuplicateCommand
from .models import CommandOutput

if TYPE_CHECKING:
    from .session import CommandContext

Handler = Callable[
    [list[str], "CommandContext"],
    Union[CommandOutput, Awaitable[CommandOutput]],
]


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    description: str
    usage: str
    handler: Handler
    category: str = "general"
    hidden: bool = False


class CommandRegistry:
    """Case-insensitive command table, filled once at startup."""

    def __init__(self) -> None:
        self._commands: dict[str, CommandDescriptor] = {}

    def register(self, descriptor: CommandDescriptor) -> None:
        key = descriptor.name.lower()
        if key in self._commands:
            raise DuplicateCommand(key)
        self._commands[key] = descriptor

    def lookup(self, name: str) -> CommandDescriptor:
        descriptor = self._commands.get(name.lower())
        if descriptor is None:
            raise CommandNotFound(name)
        return descriptor

    def get(self, name: str) -> CommandDescriptor | None:
        return self._commands.get(name.lower())

    def __contains__(self, name: Any) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def names(self, include_hidden: bool = False) -> list[str]:
        return [d.name for d in self.descriptors(include_hidden)]

    def descriptors(
        self, include_hidden: bool = False
    ) -> list[CommandDescriptor]:
        return [
            self._commands[k]
            for k in sorted(self._commands)
            if include_hidden or not self._commands[k].hidden
        ]
