# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Hidden utility commands: time, uptime, calc, tree, sudo, rm, status."""

from __future__ import annotations

import random
from datetime import datetime

from ..errors import DataFetchError, UsageError
from ..models import (
    CommandOutput,
    OutputLine,
    error_line,
    output_line,
    system_line,
)
from ..registry import CommandDescriptor
from ..session import CommandContext
from ..utils import format_number, format_uptime, safe_eval

CATEGORY = "Utilities"


def time_command(args: list[str], ctx: CommandContext) -> CommandOutput:
    now = datetime.now().astimezone()
    return CommandOutput.of(
        [
            output_line(),
            output_line(f"  {now.strftime('%A, %B')} {now.day}, {now.year}"),
            system_line(f"  {now.strftime('%H:%M:%S')}"),
            output_line(),
            output_line(f"  Timezone: {now.tzname()}"),
            output_line(),
        ]
    )


def uptime(args: list[str], ctx: CommandContext) -> CommandOutput:
    elapsed = (datetime.now() - ctx.started_at).total_seconds()
    return CommandOutput.of(
        [
            output_line(),
            output_line("  Terminal Session Statistics"),
            output_line("  " + "-" * 30),
            output_line(
                f"  Session started: "
                f"{ctx.started_at.strftime('%Y-%m-%d %H:%M:%S')}"
            ),
            system_line(f"  Uptime: {format_uptime(elapsed)}"),
            output_line(),
        ]
    )


def calc(args: list[str], ctx: CommandContext) -> CommandOutput:
    expression = " ".join(args)
    if not expression:
        return CommandOutput.of(
            [
                output_line(),
                output_line("  Calculator - Supported operations:"),
                output_line("  + - * / % ^ ()"),
                output_line(),
                output_line("  Examples:"),
                output_line("    calc 2 + 2"),
                output_line("    calc (10 + 5) * 3"),
                output_line("    calc 2 ^ 8"),
                output_line(),
            ]
        )

    try:
        result = format_number(safe_eval(expression))
    except ValueError as e:
        raise UsageError(
            f"Invalid expression '{expression}' "
            "(use only numbers and + - * / % ^ ())"
        ) from e

    return CommandOutput.of(
        [output_line(f"  {expression} = "), system_line(f"  {result}")]
    )


TREE = """\
~/portfolio
├── about/
│   ├── bio.txt
│   ├── skills.json
│   └── contact.md
├── projects/
│   ├── rapidphotoflow/
│   │   ├── README.md
│   │   ├── src/
│   │   └── docs/
│   └── basedsecurity/
│       ├── README.md
│       ├── api/
│       └── frontend/
├── themes/
│   ├── matrix.css
│   ├── dracula.css
│   ├── monokai.css
│   ├── light.css
│   └── .secret/
│       └── the-grid.css
└── .config/
    ├── terminal.json
    └── secrets.enc

11 directories, 12 files"""


def tree(args: list[str], ctx: CommandContext) -> CommandOutput:
    lines: list[OutputLine] = []
    for s in TREE.split("\n"):
        make = system_line if ".secret" in s or "the-grid" in s else output_line
        lines.append(make(f"  {s}".rstrip()))
    return CommandOutput.of(lines)


SUDO_RESPONSES = (
    "Nice try, but you're not root here.",
    "Permission denied. This incident will be reported.",
    "sudo: unable to resolve host your-imagination",
    "We trust you have received the usual lecture from the local System "
    "Administrator.",
    "Error: User 'visitor' is not in the sudoers file.",
    "Access denied. Did you really think that would work?",
)


def sudo(args: list[str], ctx: CommandContext) -> CommandOutput:
    if not args:
        raise UsageError("usage: sudo <command>")
    if " ".join(args).lower() == "make me a sandwich":
        return CommandOutput.of([system_line("Okay."), output_line("  🥪")])
    return CommandOutput.of([error_line(random.choice(SUDO_RESPONSES))])


DOOMED_FILES = (
    "/bin/bash",
    "/etc/passwd",
    "/home/visitor/.bashrc",
    "/usr/lib/libc.so.6",
    "/var/log/syslog",
    "/boot/vmlinuz",
)


def rm(args: list[str], ctx: CommandContext) -> CommandOutput:
    if not args:
        raise UsageError("rm: missing operand")

    joined = " ".join(args)
    if "-rf" in joined and ("/" in joined or "*" in joined):
        lines = [error_line("rm: WARNING: Recursive deletion detected!")]
        lines.extend(error_line(f"rm: deleting '{f}'...") for f in DOOMED_FILES)
        lines.extend(
            [
                system_line(""),
                system_line("Just kidding! Nothing was actually deleted."),
                system_line(
                    "This is just a portfolio website. Your files are safe."
                ),
            ]
        )
        return CommandOutput.of(lines)

    return CommandOutput.of(
        [
            output_line(
                f"rm: cannot remove '{args[0]}': This is a simulated filesystem"
            )
        ]
    )


async def status(args: list[str], ctx: CommandContext) -> CommandOutput:
    lines = [output_line(), system_line("  Running health checks..."), output_line()]

    check = getattr(ctx.source, "health", None)
    if check is None:
        lines.append(output_line(f"  {'Portfolio data':<20} ● LOCAL"))
    else:
        try:
            payload = await check()
        except DataFetchError as e:
            lines.append(error_line(f"  {'Portfolio API':<20} ○ OFFLINE ({e})"))
        else:
            state = payload.get("status", "ok")
            lines.append(output_line(f"  {'Portfolio API':<20} ● ONLINE ({state})"))

    lines.extend(
        [
            output_line(),
            system_line(
                f"  Health check completed at {datetime.now().strftime('%H:%M:%S')}"
            ),
            output_line(),
        ]
    )
    return CommandOutput.of(lines)


COMMANDS = [
    CommandDescriptor(
        "time",
        "Show current date and time",
        "time",
        time_command,
        CATEGORY,
        hidden=True,
    ),
    CommandDescriptor(
        "uptime", "Show session uptime", "uptime", uptime, CATEGORY,
        hidden=True,
    ),
    CommandDescriptor(
        "calc", "Calculator", "calc <expression>", calc, CATEGORY,
        hidden=True,
    ),
    CommandDescriptor(
        "tree", "Show directory tree", "tree", tree, CATEGORY, hidden=True
    ),
    CommandDescriptor(
        "sudo", "Try to run as superuser", "sudo <command>", sudo, CATEGORY,
        hidden=True,
    ),
    CommandDescriptor(
        "rm", "Remove files (simulated)", "rm <file>", rm, CATEGORY,
        hidden=True,
    ),
    CommandDescriptor(
        "status",
        "Check the portfolio backend",
        "status",
        status,
        CATEGORY,
        hidden=True,
    ),
]
