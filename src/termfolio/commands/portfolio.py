# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Portfolio commands: whoami, ls, cat, cd, contact."""

from __future__ import annotations

from ..errors import UsageError
from ..models import CommandOutput, Project, output_line
from ..registry import CommandDescriptor
from ..session import CommandContext
from ..utils import format_columns, format_date, format_table, rule

CATEGORY = "Portfolio"

HOME_ALIASES = ("~", "..", "-")

_STATUS_TAGS = {
    "active": "[active]",
    "wip": "[wip]   ",
    "archived": "[arch]  ",
}


async def whoami(args: list[str], ctx: CommandContext) -> CommandOutput:
    about = await ctx.source.get_about()

    lines = [output_line()]
    if about.ascii_art:
        lines.extend(output_line(s) for s in about.ascii_art.split("\n"))
        lines.append(output_line())

    lines += [
        output_line(rule()),
        output_line(f"  {about.name}"),
        output_line(f"  {about.title}"),
        output_line(rule()),
        output_line(),
        output_line("  About:"),
    ]
    lines.extend(output_line(f"  {s}") for s in about.bio.split("\n"))
    lines += [
        output_line(),
        output_line(rule("-")),
        output_line("  Type 'contact' to see how to reach me."),
        output_line("  Type 'ls' to see my projects."),
        output_line(),
    ]
    return CommandOutput.of(lines)


def _long_listing(projects: list[Project]) -> list:
    lines = [
        output_line("  Projects:"),
        output_line(rule(width=60)),
        output_line(),
    ]
    for p in projects:
        star = "*" if p.featured else " "
        tag = _STATUS_TAGS.get(p.status, " " * 8)
        lines += [
            output_line(f"  {star} {p.slug}"),
            output_line(f"      {tag} {p.description}"),
            output_line(f"      Tech: {', '.join(p.tech_stack)}"),
            output_line(),
        ]
    lines += [
        output_line("  * = featured project"),
        output_line(),
        output_line(f"  Total: {len(projects)} items"),
    ]
    return lines


async def ls(args: list[str], ctx: CommandContext) -> CommandOutput:
    long_format = "-l" in args or "--long" in args
    projects = await ctx.source.list_projects()

    if not projects:
        return CommandOutput.of([output_line("No projects found.")])

    lines = [output_line()]
    if long_format:
        lines += _long_listing(projects)
    else:
        slugs = [p.slug for p in projects]
        lines.extend(output_line(s) for s in format_columns(slugs))

    lines += [
        output_line(),
        output_line("  Use 'cat <project>' to view details."),
        output_line(),
    ]
    return CommandOutput.of(lines)


async def cat(args: list[str], ctx: CommandContext) -> CommandOutput:
    if not args:
        raise UsageError("usage: cat <project-slug>")

    project = await ctx.source.get_project(args[0].lower())

    status = f"[{project.status.upper()}]"
    if project.featured:
        status += " *FEATURED*"

    lines = [
        output_line(),
        output_line(rule(width=60)),
        output_line(f"  {project.name}"),
        output_line(rule(width=60)),
        output_line(),
        output_line(f"  Status: {status}"),
        output_line(),
        output_line("  Description:"),
        output_line(f"  {project.description}"),
        output_line(),
    ]

    if project.long_description:
        lines.append(output_line("  Details:"))
        lines.extend(
            output_line(f"  {s}") for s in project.long_description.split("\n")
        )
        lines.append(output_line())

    links = [["URL:", project.url]]
    if project.github_url:
        links.append(["GitHub:", project.github_url])

    lines += [
        output_line("  Tech Stack:"),
        output_line(f"  {' | '.join(project.tech_stack)}"),
        output_line(),
        output_line("  Links:"),
        *(output_line(s) for s in format_table(links, gap=1)),
        output_line(),
    ]

    if project.created_at or project.updated_at:
        lines += [
            output_line("  Timeline:"),
            output_line(f"  Created:  {format_date(project.created_at)}"),
            output_line(f"  Updated:  {format_date(project.updated_at)}"),
            output_line(),
        ]

    lines += [
        output_line(rule("-", width=60)),
        output_line(f"  Use 'cd {project.slug}' to visit this project."),
        output_line(),
    ]
    return CommandOutput.of(lines)


async def cd(args: list[str], ctx: CommandContext) -> CommandOutput:
    if not args:
        raise UsageError("usage: cd <project-slug>")

    target = args[0].lower()
    if target in HOME_ALIASES:
        return CommandOutput.of([output_line("You're already home!")])

    project = await ctx.source.get_project(target)
    if not project.url:
        return CommandOutput.of(
            [output_line(f"  {project.name} has no public URL.")]
        )

    lines = [
        output_line(),
        output_line(f"  Navigating to: {project.name}"),
        output_line(f"  URL: {project.url}"),
        output_line(),
    ]
    return CommandOutput.of(lines, redirect=project.url)


async def contact(args: list[str], ctx: CommandContext) -> CommandOutput:
    about = await ctx.source.get_about()

    rows = [["Email:", about.email]]
    rows += [[f"{label}:", url] for label, url in about.social_links()]

    lines = [
        output_line(),
        output_line("  Contact Information"),
        output_line(rule(width=40)),
        output_line(),
        *(output_line(s) for s in format_table(rows, gap=1)),
        output_line(),
        output_line(rule("-", width=40)),
        output_line("  Feel free to reach out!"),
        output_line(),
    ]
    return CommandOutput.of(lines)


COMMANDS = [
    CommandDescriptor(
        "whoami", "Display information about me", "whoami", whoami, CATEGORY
    ),
    CommandDescriptor("ls", "List all projects", "ls [-l]", ls, CATEGORY),
    CommandDescriptor(
        "cat", "View project details", "cat <project-slug>", cat, CATEGORY
    ),
    CommandDescriptor(
        "cd", "Open a project's URL", "cd <project-slug>", cd, CATEGORY
    ),
    CommandDescriptor(
        "contact", "Show contact information", "contact", contact, CATEGORY
    ),
]
