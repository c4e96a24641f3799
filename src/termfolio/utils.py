# Termfolio™ — Terminal-Themed Portfolio Shell
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Utility functions for Termfolio.

Text layout helpers used by the commands, plus the calculator evaluator.
"""

from __future__ import annotations

import ast
import math
import operator
import re
from datetime import datetime
from typing import Any


def format_table(
    rows: list[list[Any]],
    indent: str = "  ",
    gap: int = 2,
) -> list[str]:
    """
    Format rows as left-aligned text columns without external dependencies.

    Args:
        rows: List of rows, where each row is a list of values
        indent: Prefix for every output line
        gap: Spaces between columns

    Returns:
        One string per row (trailing whitespace stripped)
    """
    if not rows:
        return []

    str_rows = [[str(val) for val in row] for row in rows]

    # Column width = longest value in that column
    ncols = max(len(row) for row in str_rows)
    col_widths = [0] * ncols
    for row in str_rows:
        for i, val in enumerate(row):
            col_widths[i] = max(col_widths[i], len(val))

    sep = " " * gap
    lines = []
    for row in str_rows:
        parts = [val.ljust(col_widths[i]) for i, val in enumerate(row)]
        lines.append((indent + sep.join(parts)).rstrip())
    return lines


def format_columns(
    items: list[str], width: int = 80, indent: str = "  "
) -> list[str]:
    """Lay out short names in as many fixed-width columns as fit."""
    if not items:
        return []

    cell = max(len(s) for s in items) + 2
    columns = max(width // cell, 1)

    lines = []
    for i in range(0, len(items), columns):
        row = items[i:i + columns]
        lines.append((indent + "".join(s.ljust(cell) for s in row)).rstrip())
    return lines


def rule(char: str = "=", width: int = 50, indent: str = "  ") -> str:
    return indent + char * width


def format_date(value: str) -> str:
    """ISO timestamp -> 'Jan 5, 2025'. Unparseable input is returned as-is."""
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return value
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'}"


def format_uptime(seconds: float) -> str:
    """Human uptime, e.g. '1 hour, 0 minutes, 5 seconds'.

    Larger units only appear once they (or a larger one) are non-zero.
    """
    total = max(int(seconds), 0)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)

    parts = []
    if days:
        parts.append(_plural(days, "day"))
    if hours or days:
        parts.append(_plural(hours, "hour"))
    if minutes or hours or days:
        parts.append(_plural(minutes, "minute"))
    parts.append(_plural(secs, "second"))
    return ", ".join(parts)


# -----------------------
# Calculator
# -----------------------

_CALC_CHARS = re.compile(r"^[0-9+\-*/().%^\s]+$")
_MAX_EXPONENT = 10_000
# integer results stay printable under the interpreter's digit limit
_MAX_BITS = 14_000

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


def _eval_node(node: ast.AST) -> float | int:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(
            node.value, (int, float)
        ):
            raise ValueError("only numbers are allowed")
        return node.value

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))

    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        if isinstance(node.op, ast.Pow):
            if abs(right) > _MAX_EXPONENT:
                raise ValueError("exponent too large")
            if (
                isinstance(left, int)
                and abs(left) > 1
                and right > 0
                and right * math.log2(abs(left)) > _MAX_BITS
            ):
                raise ValueError("result too large")
        elif (
            isinstance(node.op, ast.Mult)
            and isinstance(left, int)
            and isinstance(right, int)
            and left.bit_length() + right.bit_length() > _MAX_BITS + 1
        ):
            raise ValueError("result too large")
        result = _BIN_OPS[type(node.op)](left, right)
        if isinstance(result, int) and result.bit_length() > _MAX_BITS:
            raise ValueError("result too large")
        return result

    raise ValueError(f"unsupported syntax: {type(node).__name__}")


def safe_eval(expression: str) -> float | int:
    """Evaluate an arithmetic expression.

    Supports numbers, + - * / % ^ (power) and parentheses. Anything else
    (names, calls, attribute access) is rejected without being executed.

    Raises:
        ValueError: invalid expression or non-finite result
    """
    if not expression.strip() or not _CALC_CHARS.match(expression):
        raise ValueError("invalid characters")

    try:
        tree = ast.parse(expression.replace("^", "**"), mode="eval")
    except SyntaxError as e:
        raise ValueError("syntax error") from e

    try:
        result = _eval_node(tree)
    except (ZeroDivisionError, OverflowError) as e:
        raise ValueError(str(e)) from e

    if isinstance(result, complex) or (
        isinstance(result, float) and not math.isfinite(result)
    ):
        raise ValueError("result is not a finite number")
    return result


def format_number(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value)
