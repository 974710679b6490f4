"""Runtime — resolves, coerces and validates each field of a definition.

Fields are processed in declaration order and the first failure stops the
pass. Nothing here touches the request; callers get an ``Extraction`` back
and decide what to do with it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from request_model.coercion import get_coercer
from request_model.definitions import FieldDefinition, compile_definition
from request_model.errors import (
    CoercionError,
    EnumError,
    MissingParameterError,
    ModelError,
    ValidationFailedError,
)
from request_model.schemas import Extraction

logger = logging.getLogger(__name__)


def get_source(request: Any, source: str) -> Mapping[str, Any]:
    """Return one of params/query/body from a mapping or attribute request.

    Missing or non-mapping sources read as empty.
    """
    if isinstance(request, Mapping):
        found = request.get(source)
    else:
        found = getattr(request, source, None)
    if not isinstance(found, Mapping):
        return {}
    return found


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def resolve_value(request: Any, field: FieldDefinition) -> Any:
    """Find the raw value for a field: first non-empty source, else the default."""
    name = field.lookup_name
    for source in field.lookup_sources:
        value = get_source(request, source).get(name)
        if not _is_empty(value):
            logger.debug(f"Field '{field.key}' read from {source}.{name}")
            return value

    value = field.resolve_default()
    if value is not None:
        logger.debug(f"Field '{field.key}' using default")
    return value


def extract_field(request: Any, field: FieldDefinition) -> Any:
    """Resolve and coerce one field. Returns None when the field is absent."""
    coerce = get_coercer(field.type, field.key)
    raw = resolve_value(request, field)
    if raw is None:
        return None
    try:
        return coerce(raw)
    except ValueError as e:
        raise CoercionError(field.key, f"{field.lookup_name} {e}") from e


def format_value(value: Any) -> str:
    """Render a value the way it reads on the wire (true, false, null)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def validate_field(field: FieldDefinition, value: Any) -> None:
    """Run the required, enum and custom checks for one field.

    Raises the matching ModelError subclass on the first failed check.
    """
    name = field.lookup_name

    if value is None:
        if field.is_required:
            raise MissingParameterError(field.key, f"{name} is a required parameter")
        return

    if field.enum is not None and value not in field.enum:
        allowed = ", ".join(format_value(member) for member in field.enum)
        raise EnumError(
            field.key, f"{name} was {format_value(value)}. Must be one of: {allowed}"
        )

    if field.validation is not None and not field.validation.check(value):
        raise ValidationFailedError(field.key, field.validation.describe(name, value))


def extract(request: Any, definition: Mapping[str, Any]) -> Extraction:
    """Build the output model for a request.

    ``definition`` may be raw (type names / records) or already compiled.
    Failures are returned inside the Extraction, including exceptions raised
    by a predicate or default producer. A malformed definition raises
    ``pydantic.ValidationError``.
    """
    fields = compile_definition(definition)

    values: dict[str, Any] = {}
    for key, field in fields.items():
        try:
            value = extract_field(request, field)
            validate_field(field, value)
        except ModelError as e:
            logger.debug(f"Extraction failed on '{e.field}': {e.message}")
            return Extraction.failure(e)
        except Exception as e:
            # a predicate or default producer blew up on this request's value
            logger.warning(f"Field '{key}' raised {type(e).__name__}: {e}", exc_info=True)
            return Extraction.failure(ValidationFailedError(key, str(e)))
        values[key] = value

    return Extraction.success(values)
