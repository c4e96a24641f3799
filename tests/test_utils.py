"""
Tests for termfolio.utils module.
"""

import pytest

from termfolio.utils import (
    format_columns,
    format_date,
    format_number,
    format_table,
    format_uptime,
    rule,
    safe_eval,
)


def test_format_table_empty_rows():
    """Test format_table with no rows returns no lines."""
    assert format_table([]) == []


def test_format_table_aligns_columns():
    result = format_table([["Email:", "a@b.c"], ["GitHub:", "gh"]])
    assert result == [
        "  Email:   a@b.c",
        "  GitHub:  gh",
    ]


def test_format_table_custom_indent_and_gap():
    result = format_table([["a", "x"], ["bbb", "y"]], indent="", gap=1)
    assert result == ["a   x", "bbb y"]


def test_format_table_converts_values_and_strips_trailing_space():
    """Non-string cells are stringified; short last cells leave no padding."""
    result = format_table([[1, ""], [22, "z"]])
    assert result == ["  1", "  22  z"]


def test_format_columns_wraps_to_width():
    items = ["engine", "notes", "ember", "loom"]
    assert format_columns(items, width=16) == ["  engine  notes", "  ember   loom"]
    assert format_columns(items, width=80) == ["  engine  notes   ember   loom"]
    assert format_columns([]) == []


def test_format_columns_always_one_column():
    assert format_columns(["a-very-long-slug"], width=4) == ["  a-very-long-slug"]


def test_rule():
    assert rule() == "  " + "=" * 50
    assert rule("-", width=3, indent="") == "---"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2025-01-05T10:00:00Z", "Jan 5, 2025"),
        ("2024-12-20", "Dec 20, 2024"),
        ("not a date", "not a date"),
        ("", ""),
    ],
)
def test_format_date(value, expected):
    assert format_date(value) == expected


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (0, "0 seconds"),
        (1, "1 second"),
        (65, "1 minute, 5 seconds"),
        (3600, "1 hour, 0 minutes, 0 seconds"),
        (90061, "1 day, 1 hour, 1 minute, 1 second"),
        (-5, "0 seconds"),
    ],
)
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("2 + 2", 4),
        ("2 ^ 10", 1024),
        ("(1 + 2) * 3 - 4 / 2", 7.0),
        ("10 % 3", 1),
        ("-(3)", -3),
        ("1.5 * 2", 3.0),
    ],
)
def test_safe_eval(expression, expected):
    assert safe_eval(expression) == expected


@pytest.mark.parametrize(
    "expression",
    [
        "",
        "   ",
        "__import__('os').system('echo hi')",
        "open('x')",
        "2 +",
        "1 / 0",
        "2 ^ 100000",
        "(9 ^ 9999) ^ 9999",
        "(2 ^ 9999) * (2 ^ 9999)",
        "9 ^ 9999",
        "(-8) ^ 0.5",
        "1e400",
    ],
)
def test_safe_eval_rejects(expression):
    with pytest.raises(ValueError):
        safe_eval(expression)


def test_format_number():
    assert format_number(4.0) == "4"
    assert format_number(7) == "7"
    assert format_number(3.5) == "3.5"


def test_safe_eval_large_results_stay_printable():
    """Big but bounded integers are computed and can be rendered."""
    result = safe_eval("2 ^ 10000")
    assert result == 2**10000
    assert format_number(result).startswith("1995063116880758")
