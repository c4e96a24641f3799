# tests/test_session.py
"""
TerminalSession tests with dependency injection.
The session only dispatches and applies results; commands do the work.
"""
from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

import termfolio.session as session_mod
from termfolio.config import YAMLConfig
from termfolio.errors import DataFetchError, ProjectNotFound, UsageError
from termfolio.history import CommandHistory
from termfolio.models import (
    CommandOutput,
    LineKind,
    output_line,
    system_line,
)
from termfolio.registry import CommandDescriptor, CommandRegistry
from termfolio.session import TerminalSession, tokenize

# ----------------------------------------------------------------
# Boundary tests (hard gates)
# ----------------------------------------------------------------


def test_session_module_does_not_touch_storage_or_network() -> None:
    """
    HARD BOUNDARY:
    - Session must not open databases, create schema or make HTTP calls.
    - All of that arrives through injected collaborators.
    """
    text = Path(session_mod.__file__).read_text(encoding="utf-8")

    forbidden_substrings = [
        "import sqlite3",
        "sqlite3.connect",
        "from .db import",
        "from . import db",
        "CREATE TABLE",
        "import requests",
        "import yaml",
    ]

    hits = [s for s in forbidden_substrings if s in text]
    assert not hits, f"Session must stay storage/network free. Found: {hits}"


# ----------------------------------------------------------------
# Fakes
# ----------------------------------------------------------------


class FakeSource:
    async def list_projects(self):
        return []

    async def get_project(self, slug):
        raise ProjectNotFound(slug)

    async def get_about(self):
        raise DataFetchError("failed to load profile")


CONFIG = YAMLConfig(
    {
        "system": {
            "prompt": "visitor@portfolio:~$",
            "welcome": {"enabled": True, "message": "\nHello there\nType help\n"},
        },
        "themes": {
            "default": "matrix",
            "palettes": {"matrix": {"display_name": "Matrix"}},
        },
    }
)


def _descriptor(name, handler, hidden=False) -> CommandDescriptor:
    return CommandDescriptor(name, name, name, handler, hidden=hidden)


def _ok(args, ctx) -> CommandOutput:
    return CommandOutput.of([output_line(f"ok {' '.join(args)}".strip())])


async def _aok(args, ctx) -> CommandOutput:
    await asyncio.sleep(0)
    return CommandOutput.of([output_line("async ok"), output_line("second")])


def _clear(args, ctx) -> CommandOutput:
    return CommandOutput(clear_requested=True)


def _redirect(args, ctx) -> CommandOutput:
    return CommandOutput.of(
        [output_line("Navigating")], redirect="https://example.com"
    )


def _usage(args, ctx) -> CommandOutput:
    raise UsageError("usage: needs <arg>")


async def _missing(args, ctx) -> CommandOutput:
    project = await ctx.source.get_project(args[0])
    return CommandOutput.of([output_line(project.name)])


def _boom(args, ctx) -> CommandOutput:
    raise RuntimeError("kaboom")


def _wrong_type(args, ctx):
    return ["not", "a", "CommandOutput"]


def _echo_args(args, ctx) -> CommandOutput:
    return CommandOutput.of([output_line("|".join(args))])


def _registry() -> CommandRegistry:
    registry = CommandRegistry()
    for name, handler in [
        ("ok", _ok),
        ("aok", _aok),
        ("clear", _clear),
        ("go", _redirect),
        ("usage", _usage),
        ("cat", _missing),
        ("boom", _boom),
        ("wrong", _wrong_type),
        ("args", _echo_args),
    ]:
        registry.register(_descriptor(name, handler))
    return registry


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    data = tmp_path / "data"
    monkeypatch.setenv("TERMFOLIO_DATA_HOME", str(data))
    return data


@pytest.fixture
def session(data_home: Path) -> TerminalSession:
    return TerminalSession(
        registry=_registry(), source=FakeSource(), config=CONFIG
    )


def _contents(s: TerminalSession) -> list[tuple[LineKind, str]]:
    return [(line.kind, line.content) for line in s.lines]


# ----------------------------------------------------------------
# execute_command
# ----------------------------------------------------------------


def test_tokenize_splits_on_whitespace_without_quoting() -> None:
    assert tokenize('  cat  "my project"\tnow ') == ["cat", '"my', 'project"', "now"]


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
async def test_blank_input_is_a_no_op(session: TerminalSession, raw: str) -> None:
    before = session.snapshot()

    assert await session.execute_command(raw) is None

    assert session.snapshot() == before
    assert session.history.entries() == []


@pytest.mark.asyncio
async def test_input_is_echoed_then_output_appended(session: TerminalSession) -> None:
    await session.execute_command("  ok a b  ")

    assert _contents(session) == [
        (LineKind.INPUT, "ok a b"),
        (LineKind.OUTPUT, "ok a b"),
    ]
    assert session.history.entries() == ["ok a b"]
    assert session.is_processing is False


@pytest.mark.asyncio
async def test_command_name_is_case_insensitive_args_are_not(
    session: TerminalSession,
) -> None:
    await session.execute_command("ARGS Foo BAR 42")
    assert session.lines[-1].content == "Foo|BAR|42"


@pytest.mark.asyncio
async def test_async_handler_output_is_appended_in_order(
    session: TerminalSession,
) -> None:
    result = await session.execute_command("aok")

    assert isinstance(result, CommandOutput)
    assert [line.content for line in session.lines] == ["aok", "async ok", "second"]


@pytest.mark.asyncio
async def test_unknown_command_appends_single_error(session: TerminalSession) -> None:
    await session.execute_command("Frobnicate now")

    assert _contents(session) == [
        (LineKind.INPUT, "Frobnicate now"),
        (LineKind.ERROR, "command not found: Frobnicate"),
    ]
    # still recorded in history
    assert session.history.entries() == ["Frobnicate now"]
    assert session.is_processing is False


@pytest.mark.asyncio
async def test_clear_empties_lines_including_echo(session: TerminalSession) -> None:
    cleared = []
    session.clear_fn = lambda: cleared.append(True)
    await session.execute_command("ok")
    await session.execute_command("clear")

    assert session.lines == []
    assert cleared == [True]
    assert session.history.entries() == ["ok", "clear"]


@pytest.mark.asyncio
async def test_redirect_appends_lines_and_surfaces_url(
    session: TerminalSession,
) -> None:
    opened: list[str] = []
    session.redirect_fn = opened.append

    await session.execute_command("go")

    assert _contents(session)[1:] == [
        (LineKind.OUTPUT, "Navigating"),
        (LineKind.SYSTEM, "Redirecting to https://example.com..."),
    ]
    assert session.last_redirect == "https://example.com"
    assert opened == ["https://example.com"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw, message",
    [
        ("usage", "usage: needs <arg>"),
        ("cat nope", "project not found: nope"),
    ],
)
async def test_expected_errors_become_one_error_line(
    session: TerminalSession, raw: str, message: str
) -> None:
    assert await session.execute_command(raw) is None

    errors = [line for line in session.lines if line.kind == LineKind.ERROR]
    assert [e.content for e in errors] == [message]
    assert len(session.lines) == 2
    assert session.is_processing is False


@pytest.mark.asyncio
async def test_unexpected_error_is_wrapped_and_crash_logged(
    session: TerminalSession, data_home: Path
) -> None:
    await session.execute_command("boom")

    assert _contents(session)[-1] == (
        LineKind.ERROR,
        "Error executing 'boom': kaboom",
    )
    assert session.is_processing is False

    crash_log = data_home / "termfolio" / "logs" / "crash.log"
    text = crash_log.read_text(encoding="utf-8")
    assert "command=boom" in text
    assert "RuntimeError: kaboom" in text


@pytest.mark.asyncio
async def test_handler_returning_wrong_type_is_an_internal_error(
    session: TerminalSession,
) -> None:
    await session.execute_command("wrong")
    assert session.lines[-1].content.startswith("Error executing 'wrong':")


@pytest.mark.asyncio
async def test_session_survives_failures(session: TerminalSession) -> None:
    await session.execute_command("boom")
    await session.execute_command("ok")
    assert session.lines[-1].content == "ok"


@pytest.mark.asyncio
async def test_input_echo_is_appended_before_handler_suspends(
    session: TerminalSession,
) -> None:
    gate = asyncio.Event()

    async def _wait(args, ctx) -> CommandOutput:
        await gate.wait()
        return CommandOutput.of([output_line("done")])

    session.registry.register(_descriptor("wait", _wait))

    task = asyncio.create_task(session.execute_command("wait"))
    await asyncio.sleep(0)

    assert _contents(session) == [(LineKind.INPUT, "wait")]
    assert session.is_processing is True

    gate.set()
    await task
    assert session.lines[-1].content == "done"
    assert session.is_processing is False


@pytest.mark.asyncio
async def test_overlapping_commands_append_in_completion_order(
    session: TerminalSession,
) -> None:
    slow_gate = asyncio.Event()

    async def _slow(args, ctx) -> CommandOutput:
        await slow_gate.wait()
        return CommandOutput.of([output_line("slow done")])

    async def _fast(args, ctx) -> CommandOutput:
        await asyncio.sleep(0)
        slow_gate.set()
        return CommandOutput.of([output_line("fast done")])

    session.registry.register(_descriptor("slow", _slow))
    session.registry.register(_descriptor("fast", _fast))

    await asyncio.gather(
        session.execute_command("slow"), session.execute_command("fast")
    )

    assert [line.content for line in session.lines] == [
        "slow",
        "fast",
        "fast done",
        "slow done",
    ]
    assert session.is_processing is False


@pytest.mark.asyncio
async def test_lines_built_early_are_timed_when_appended(
    session: TerminalSession,
) -> None:
    slow_gate = asyncio.Event()

    async def _slow(args, ctx) -> CommandOutput:
        header = output_line("built before waiting")
        await slow_gate.wait()
        return CommandOutput.of([header])

    async def _fast(args, ctx) -> CommandOutput:
        await asyncio.sleep(0.01)
        slow_gate.set()
        return CommandOutput.of([output_line("fast done")])

    session.registry.register(_descriptor("slow", _slow))
    session.registry.register(_descriptor("fast", _fast))

    await asyncio.gather(
        session.execute_command("slow"), session.execute_command("fast")
    )

    assert [line.content for line in session.lines][-2:] == [
        "fast done",
        "built before waiting",
    ]
    stamps = [line.timestamp for line in session.lines]
    assert stamps == sorted(stamps)
    assert session.lines[-1].timestamp >= session.lines[-2].timestamp


@pytest.mark.asyncio
async def test_timestamps_are_non_decreasing_and_ids_unique(
    session: TerminalSession,
) -> None:
    for raw in ["ok", "aok", "nope", "go", "usage"]:
        await session.execute_command(raw)

    stamps = [line.timestamp for line in session.lines]
    assert stamps == sorted(stamps)
    ids = [line.id for line in session.lines]
    assert len(ids) == len(set(ids))


@pytest.mark.asyncio
async def test_output_fn_streams_every_append(session: TerminalSession) -> None:
    streamed = []
    session.output_fn = lambda lines: streamed.extend(lines)

    await session.execute_command("ok")
    await session.execute_command("nope")

    assert streamed == session.lines


@pytest.mark.asyncio
async def test_history_is_shared_with_injected_store(data_home: Path) -> None:
    history = CommandHistory()
    s = TerminalSession(
        registry=_registry(), source=FakeSource(), config=CONFIG, history=history
    )

    await s.execute_command("ok")
    await s.execute_command("nope")

    assert history.entries() == ["ok", "nope"]


# ----------------------------------------------------------------
# Lifecycle + input state
# ----------------------------------------------------------------


def test_start_emits_welcome_banner(session: TerminalSession) -> None:
    banner = session.start()

    assert session.running is True
    assert [line.content for line in banner] == ["", "Hello there", "Type help"]
    assert all(line.kind == LineKind.SYSTEM for line in banner)
    assert session.lines == banner


def test_start_respects_disabled_welcome(data_home: Path) -> None:
    cfg = YAMLConfig({"system": {"welcome": {"enabled": False, "message": "hi"}}})
    s = TerminalSession(registry=_registry(), source=FakeSource(), config=cfg)

    assert s.start() == []
    assert s.lines == []
    assert s.running is True


def test_prompt_comes_from_config(session: TerminalSession) -> None:
    assert session.prompt == "visitor@portfolio:~$"


@pytest.mark.asyncio
async def test_navigate_history_updates_pending_input(
    session: TerminalSession,
) -> None:
    await session.execute_command("ok one")
    await session.execute_command("ok two")

    session.set_input("draft")
    assert session.navigate_history("up") == "ok two"
    assert session.navigate_history("up") == "ok one"
    assert session.snapshot().history_cursor == 2
    assert session.navigate_history("down") == "ok two"
    assert session.navigate_history("down") == "draft"
    assert session.pending_input == "draft"
    assert session.snapshot().history_cursor == 0


@pytest.mark.asyncio
async def test_execute_clears_pending_input_and_cursor(
    session: TerminalSession,
) -> None:
    await session.execute_command("ok")
    session.navigate_history("up")

    await session.execute_command(session.pending_input)

    state = session.snapshot()
    assert state.pending_input == ""
    assert state.history_cursor == 0


@pytest.mark.asyncio
async def test_typing_ends_history_navigation(session: TerminalSession) -> None:
    await session.execute_command("ok")
    session.navigate_history("up")
    session.set_input("ok!")
    assert session.snapshot().history_cursor == 0


def test_snapshot_is_immutable(session: TerminalSession) -> None:
    session.start()
    state = session.snapshot()

    session.lines.append(system_line("later"))

    assert len(state.lines) == len(session.lines) - 1
    with pytest.raises(AttributeError):
        state.pending_input = "x"  # type: ignore[misc]


def test_set_theme_delegates_to_theme_store(session: TerminalSession) -> None:
    assert session.set_theme("MATRIX") is True
    assert session.set_theme("unknown") is False


def test_end_stops_the_session(session: TerminalSession) -> None:
    session.start()
    session.end()
    assert session.running is False


def test_write_crash_log_never_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_root():
        raise OSError("no data root")

    monkeypatch.setattr(session_mod.cfg_module, "get_data_root", broken_root)
    session_mod.write_crash_log(RuntimeError("x"), command="boom")
