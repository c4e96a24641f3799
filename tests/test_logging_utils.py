# tests/test_logging_utils.py
from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

import termfolio.logging_utils as logging_utils


@pytest.fixture(autouse=True)
def _reset_logging(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(logging_utils, "_CONFIGURED_PATH", None)
    yield
    logger.remove()


def test_configure_logging_writes_to_data_root(tmp_path: Path) -> None:
    log_path = logging_utils.configure_logging(tmp_path)

    assert log_path == tmp_path / "termfolio" / "logs" / "termfolio.log"

    logger.info("hello from termfolio")
    logger.complete()

    text = log_path.read_text(encoding="utf-8")
    assert "hello from termfolio" in text
    assert "| INFO" in text


def test_configure_logging_respects_level(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TERMFOLIO_LOG_LEVEL", "warning")
    log_path = logging_utils.configure_logging(tmp_path)

    logger.info("quiet")
    logger.warning("loud")

    text = log_path.read_text(encoding="utf-8")
    assert "loud" in text
    assert "quiet" not in text


def test_configure_logging_is_idempotent(tmp_path: Path) -> None:
    first = logging_utils.configure_logging(tmp_path)
    second = logging_utils.configure_logging(tmp_path)
    assert first == second

    logger.info("once")
    text = first.read_text(encoding="utf-8")
    assert text.count("once") == 1


def test_configure_logging_uses_env_data_root(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("TERMFOLIO_DATA_HOME", str(tmp_path))
    assert logging_utils.configure_logging() == (
        tmp_path / "termfolio" / "logs" / "termfolio.log"
    )
