"""Data loading and tag resolution against a binding scope.

Tags are resolved as an exact key of the current scope first and as a
JMESPath expression otherwise. Projections (``items[*].name``) already
collect every match into a list, which is how multi-valued paths reach the
document.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

import jmespath
from jmespath.exceptions import JMESPathError

from json2docx.exceptions import DataError, DataLookupError


class _Missing:
    """Marker for "no data matched"; distinct from a JSON ``null``."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()

DataSource = Union[dict, str, bytes, Path]


# Root node types whose result is a list of every match.
_MULTI_MATCH_NODES = frozenset({"projection", "value_projection", "filter_projection", "flatten"})


def resolve(scope: Any, tag: str) -> Any:
    """Return the value *tag* selects in *scope*, or :data:`MISSING`.

    A leading ``$`` (``$.client.name``) is accepted and refers to *scope*.
    A multi-match expression that finds a single value yields that value;
    several matches are returned as a list.

    Raises:
        DataLookupError: *tag* is not a valid path expression.
    """
    if isinstance(scope, dict) and tag in scope:
        return scope[tag]

    expression = tag.strip()
    if expression.startswith("$"):
        expression = expression[1:].lstrip(".")
        if not expression:
            return scope

    try:
        parsed = jmespath.compile(expression)
        value = parsed.search(scope)
    except JMESPathError as exc:
        raise DataLookupError(str(exc)) from exc

    # jmespath cannot tell a missing field from a null one.
    if value is None:
        return MISSING
    if (
        parsed.parsed.get("type") in _MULTI_MATCH_NODES
        and isinstance(value, list)
        and len(value) == 1
    ):
        return value[0]
    return value


def stringify(value: Any) -> str:
    """Render a data value the way it is written into the document."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, indent=2)
    return str(value)


def load_data(source: DataSource) -> dict:
    """Load the root data object from a dict, JSON text / bytes or a file.

    Raises:
        DataError: the source is not valid JSON or its root is not an object.
    """
    if isinstance(source, Path):
        try:
            source = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataError(f"cannot read data file: {exc}") from exc

    if isinstance(source, (str, bytes)):
        try:
            source = json.loads(source)
        except ValueError as exc:
            raise DataError(f"invalid JSON data: {exc}") from exc

    if not isinstance(source, dict):
        raise DataError(
            f"data root must be a JSON object, got {type(source).__name__}"
        )
    return source
