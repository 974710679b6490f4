"""Type coercion — turns raw request values into the declared type.

Request values mostly arrive as strings (path params, query string), so
numeric types parse the leading numeric characters and ignore the rest,
e.g. ``"12abc"`` -> ``12``. Lookups go through ``COERCERS``; a type tag
that is not in the table is a definition error.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from request_model.errors import DefinitionError

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

_TRUE_VALUES = (True, "true", 1, "1")


def _is_number(value: Any) -> bool:
    # bool is a subclass of int in Python, so it never counts as a number here
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_string(value: Any) -> Any:
    return value


def as_int(value: Any) -> int | float:
    """Numbers pass through; anything else is parsed from its leading digits.

    Raises ValueError when there are no leading digits to parse.
    """
    if _is_number(value):
        return value
    match = _INT_PREFIX.match(str(value))
    if not match:
        raise ValueError(f"must be an integer, got {value!r}")
    return int(match.group(1))


def as_float(value: Any) -> int | float:
    """Same as ``as_int`` with decimal parsing (``"3.5kg"`` -> ``3.5``)."""
    if _is_number(value):
        return value
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        raise ValueError(f"must be a number, got {value!r}")
    return float(match.group(1))


def as_bool(value: Any) -> bool:
    """True only for ``True``, ``"true"``, ``1`` and ``"1"``."""
    return value in _TRUE_VALUES


def as_object(value: Any) -> Any:
    return value


COERCERS: dict[str, Callable[[Any], Any]] = {
    "string": as_string,
    "int": as_int,
    "integer": as_int,
    "float": as_float,
    "decimal": as_float,
    "bool": as_bool,
    "boolean": as_bool,
    "object": as_object,
}


def get_coercer(type_name: str, field: str) -> Callable[[Any], Any]:
    """Return the coercer for a type tag. Raises DefinitionError if unknown."""
    try:
        return COERCERS[type_name]
    except KeyError:
        raise DefinitionError(field, f"Invalid type in definition, {type_name}") from None
