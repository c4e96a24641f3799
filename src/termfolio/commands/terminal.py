# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Terminal commands: help, clear, history, theme, echo, exit."""

from __future__ import annotations

from ..errors import CommandNotFound, UsageError
from ..models import CommandOutput, OutputLine, output_line, system_line
from ..registry import CommandDescriptor
from ..session import CommandContext
from ..utils import format_table, rule

CATEGORY = "Terminal"

# help lists categories in this order; unknown ones go last
CATEGORY_ORDER = ("Portfolio", "Terminal", "Utilities")

THEME_USAGE = (
    "usage: theme [name] | theme -custom <name> <bg> <text> <prompt> "
    "<error> <link> | theme -delete <name>"
)


def _grouped(descriptors: list[CommandDescriptor]) -> list[tuple[str, list]]:
    groups: dict[str, list[CommandDescriptor]] = {}
    for d in descriptors:
        groups.setdefault(d.category, []).append(d)

    def rank(category: str) -> tuple[int, str]:
        if category in CATEGORY_ORDER:
            return (CATEGORY_ORDER.index(category), category)
        return (len(CATEGORY_ORDER), category)

    return [(c, groups[c]) for c in sorted(groups, key=rank)]


def _category_block(
    category: str, descriptors: list[CommandDescriptor], sep: str = ""
) -> list[OutputLine]:
    rows = [[d.name, f"{sep}{d.description}"] for d in descriptors]
    lines: list[OutputLine] = [system_line(f"  [{category}]")]
    lines.extend(output_line(s) for s in format_table(rows, indent="    "))
    lines.append(output_line())
    return lines


def help_command(args: list[str], ctx: CommandContext) -> CommandOutput:
    if args and args[0].lower() == "-secret":
        hidden = [d for d in ctx.registry.descriptors(True) if d.hidden]
        lines = [
            output_line(),
            output_line("  Secret Commands:"),
            output_line(rule(width=40)),
            output_line(),
        ]
        for category, group in _grouped(hidden):
            lines += _category_block(category, group, sep="- ")
        lines += [output_line("  Shh... keep these secret!"), output_line()]
        return CommandOutput.of(lines)

    if args:
        descriptor = ctx.registry.get(args[0])
        if descriptor is None:
            raise CommandNotFound(args[0])
        return CommandOutput.of(
            [
                output_line(),
                output_line(f"  {descriptor.name} - {descriptor.description}"),
                output_line(),
                output_line(f"  Usage: {descriptor.usage}"),
                output_line(),
            ]
        )

    lines = [
        output_line(),
        output_line("  Available Commands"),
        output_line(rule(width=60)),
        output_line(),
    ]
    for category, group in _grouped(ctx.registry.descriptors()):
        lines += _category_block(category, group)
    lines += [
        output_line(rule("-", width=60)),
        output_line(
            "  Type 'help <command>' for details, 'help -secret' for more"
        ),
        output_line(),
    ]
    return CommandOutput.of(lines)


def clear(args: list[str], ctx: CommandContext) -> CommandOutput:
    return CommandOutput(clear_requested=True)


def history(args: list[str], ctx: CommandContext) -> CommandOutput:
    if "-c" in args or "--clear" in args:
        ctx.history.clear()
        return CommandOutput.of([system_line("History cleared.")])

    entries = ctx.history.entries()
    if not entries:
        return CommandOutput.of([output_line("No commands in history.")])

    width = len(str(len(entries)))
    lines = [output_line()]
    lines.extend(
        output_line(f"  {str(i).rjust(width)}  {cmd}")
        for i, cmd in enumerate(entries, start=1)
    )
    lines.append(output_line())
    return CommandOutput.of(lines)


def _list_themes(ctx: CommandContext) -> list[OutputLine]:
    current = ctx.themes.current().name
    builtin = [t for t in ctx.themes.listed() if not t.custom]
    custom = [t for t in ctx.themes.listed() if t.custom]

    def row(theme) -> str:
        marker = " (current)" if theme.name == current else ""
        return f"  {theme.name.ljust(12)} - {theme.display_name}{marker}"

    lines = [
        output_line(),
        output_line("  Available Themes:"),
        output_line(rule(width=30)),
        output_line(),
    ]
    lines.extend(output_line(row(t)) for t in builtin)

    if custom:
        lines += [
            output_line(),
            output_line("  Custom Themes:"),
            output_line(rule("-", width=30)),
        ]
        lines.extend(output_line(row(t)) for t in custom)

    lines += [
        output_line(),
        output_line("  Usage:"),
        output_line("    theme <name>            - Switch to a theme"),
        output_line(
            "    theme -custom <name> <bg> <text> <prompt> <error> <link>"
        ),
        output_line("                            - Create custom theme"),
        output_line("    theme -delete <name>    - Delete custom theme"),
        output_line(),
    ]
    return lines


def _create_theme(args: list[str], ctx: CommandContext) -> CommandOutput:
    if len(args) < 6:
        raise UsageError(THEME_USAGE)

    try:
        theme = ctx.themes.create_custom(*args[:6])
    except ValueError as e:
        raise UsageError(str(e)) from e

    ctx.set_theme(theme.name)
    lines = [
        system_line(f'Custom theme "{theme.display_name}" created and applied!'),
        output_line(),
        output_line("  Theme Colors:"),
    ]
    rows = [[f"{k.capitalize()}:", v] for k, v in theme.colors.items()]
    lines.extend(output_line(s) for s in format_table(rows, indent="    "))
    lines.append(output_line())
    return CommandOutput.of(lines)


def theme(args: list[str], ctx: CommandContext) -> CommandOutput:
    if not args:
        return CommandOutput.of(_list_themes(ctx))

    flag = args[0].lower()

    if flag == "-custom":
        return _create_theme(args[1:], ctx)

    if flag == "-delete":
        if len(args) < 2:
            raise UsageError("usage: theme -delete <name>")
        name = args[1]
        if not ctx.themes.delete_custom(name):
            raise UsageError(
                f'Theme "{name}" is not a custom theme or does not exist.'
            )
        return CommandOutput.of(
            [system_line(f'Custom theme "{name}" deleted.')]
        )

    if not ctx.set_theme(args[0]):
        raise UsageError(
            f"Unknown theme: {args[0]} "
            f"(available: {', '.join(ctx.themes.names())})"
        )

    current = ctx.themes.current()
    lines: list[OutputLine] = []
    if current.secret:
        lines += [
            output_line(),
            system_line(f"  {current.display_name.upper()} INITIALIZED"),
            output_line(),
        ]
    suffix = "custom theme: " if current.custom else ""
    lines.append(
        system_line(f"Theme changed to {suffix}{current.display_name}.")
    )
    return CommandOutput.of(lines)


def echo(args: list[str], ctx: CommandContext) -> CommandOutput:
    text = " ".join(args)
    lowered = text.lower()
    if lowered == "hello":
        return CommandOutput.of([output_line("Hello, world!")])
    if lowered == "the cake is a lie":
        return CommandOutput.of([system_line("This was a triumph.")])
    return CommandOutput.of([output_line(text)])


def exit_command(args: list[str], ctx: CommandContext) -> CommandOutput:
    ctx.end_session()
    message = ctx.config.get_path("system.exit.message", "Bye!")
    return CommandOutput.of([system_line(str(message))])


COMMANDS = [
    CommandDescriptor(
        "help",
        "Show available commands",
        "help [command | -secret]",
        help_command,
        CATEGORY,
    ),
    CommandDescriptor(
        "clear", "Clear the terminal screen", "clear", clear, CATEGORY
    ),
    CommandDescriptor(
        "history", "Show command history", "history [-c]", history, CATEGORY
    ),
    CommandDescriptor(
        "theme",
        "Change or list terminal themes",
        THEME_USAGE.removeprefix("usage: "),
        theme,
        CATEGORY,
    ),
    CommandDescriptor("echo", "Print text", "echo <text>", echo, CATEGORY),
    CommandDescriptor(
        "exit", "End the session", "exit", exit_command, CATEGORY
    ),
]
