"""Evaluator for ``visible:`` conditions.

The grammar is deliberately small::

    condition  := operand OP operand | "!" condition | operand
    OP         := "==" | "!=" | "<=" | ">=" | "<" | ">"
    operand    := null | integer | true | false | 'text' | "text" | field

A field is any tag the data lookup understands. Fields that are absent from
the data evaluate to ``null`` rather than failing, so a template can test for
optional values (``visible: middleName != null``).

Evaluation never raises: every entry point returns ``(result, error)`` and
``error`` is ``None`` on success.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Union

from json2docx.data import MISSING, resolve, stringify
from json2docx.exceptions import DataLookupError

Operand = Union[None, bool, int, str]
Evaluation = tuple[bool, Optional[str]]

_OPERATOR_RE = re.compile(r"(==|!=|<=|>=|<|>)")
_INT_RE = re.compile(r"^[+-]?\d+$")

_ORDERING = {
    "<": lambda a, b: a < b,
    "<=": lambda a, b: a <= b,
    ">": lambda a, b: a > b,
    ">=": lambda a, b: a >= b,
}


def evaluate(expr: str, data: Any) -> Evaluation:
    """Evaluate the condition *expr* against *data*."""
    parts = _OPERATOR_RE.split(expr, maxsplit=1)
    if len(parts) == 3:
        left, op, right = parts
        return _compare(left.strip(), op, right.strip(), data)

    stripped = expr.strip()
    if stripped.startswith("!"):
        result, error = _truthiness(stripped[1:], data)
        if error is not None:
            return False, error
        return not result, None

    return _truthiness(stripped, data)


def evaluate_operand(expr: str, data: Any) -> Operand:
    """Turn a single operand into ``None``, ``bool``, ``int`` or ``str``."""
    if expr == "" or expr.lower() == "null":
        return None

    try:
        value = resolve(data, expr)
    except DataLookupError:
        value = MISSING
    if value is not MISSING:
        if value is None or isinstance(value, (bool, int)):
            return value
        return stringify(value)

    if _INT_RE.match(expr):
        return int(expr)
    if expr.lower() in ("true", "false"):
        return expr.lower() == "true"
    if len(expr) >= 2 and expr[0] == expr[-1] and expr[0] in "'\"":
        return expr[1:-1]

    return None


# ---------------------------------------------------------------------------
# Internals
# ---------------------------------------------------------------------------

def _truthiness(expr: str, data: Any) -> Evaluation:
    expr = expr.strip()
    if not expr:
        return False, "Operand is null or empty"

    value = evaluate_operand(expr, data)
    if isinstance(value, bool):
        return value, None
    if value is None or value == "" or value == 0:
        return False, None
    return True, None


def _compare(left: str, op: str, right: str, data: Any) -> Evaluation:
    if not left:
        return False, "Left operand is null or empty"
    if not right:
        return False, "Right operand is null or empty"

    left_value = evaluate_operand(left, data)
    right_value = evaluate_operand(right, data)

    if op == "==":
        return _equals(left_value, right_value), None
    if op == "!=":
        return not _equals(left_value, right_value), None

    if not (_is_int(left_value) and _is_int(right_value)):
        return False, (
            f"Operator '{op}' is allowed only for ints, but operands have types "
            f"'{type(left_value).__name__}' and '{type(right_value).__name__}'"
        )
    return _ORDERING[op](left_value, right_value), None


def _is_int(value: Operand) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _equals(left: Operand, right: Operand) -> bool:
    # Python treats 1 == True; conditions do not.
    return type(left) is type(right) and left == right
