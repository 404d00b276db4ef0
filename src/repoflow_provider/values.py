"""Conversions from API values into state values."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .diagnostics import Diagnostics
from .errors import ValueConversionError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

COMPOSITE_ID_SEPARATOR = "/"


def optional_int64(value: int | None) -> int | None:
    """Widen an optional integer into an optional 64-bit state integer.

    None stays None. Integers in the signed 64-bit range come back unchanged.

    Raises:
        ValueConversionError: If the value is not an integer or does not fit.
    """
    if value is None:
        return None
    # bool is an int subclass but never a valid millisecond count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueConversionError(f"expected an integer, got {type(value).__name__}")
    if value < INT64_MIN or value > INT64_MAX:
        raise ValueConversionError(f"{value} does not fit in a 64-bit integer")
    return value


def list_value_from(items: Sequence[Any]) -> tuple[list[str] | None, Diagnostics]:
    """Build a list of string state values.

    Each element that is not a string adds one error diagnostic. When any
    element fails, no list is returned.

    Returns:
        Tuple of (list or None, diagnostics).
    """
    diagnostics = Diagnostics()
    values: list[str] = []

    for index, item in enumerate(items):
        if not isinstance(item, str):
            diagnostics.add_error(
                "Value Conversion Error",
                f"List element {index}: expected a string, got {type(item).__name__}",
            )
            continue
        values.append(item)

    if diagnostics.has_error():
        return None, diagnostics
    return values, diagnostics


def composite_id(workspace_id: str, repository_id: str) -> str:
    """Build the state id of a repository: ``workspace_id/repository_id``."""
    return COMPOSITE_ID_SEPARATOR.join([workspace_id, repository_id])


def split_composite_id(value: str) -> tuple[str, str]:
    """Split a repository state id on its first separator.

    Raises:
        ValueConversionError: If the value has no separator.
    """
    if COMPOSITE_ID_SEPARATOR not in value:
        raise ValueConversionError(
            f"Expected an id of the form workspace_id/repository_id, got {value!r}"
        )
    workspace_id, repository_id = value.split(COMPOSITE_ID_SEPARATOR, 1)
    return workspace_id, repository_id
