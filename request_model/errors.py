"""Errors for every way a request can fail extraction.

All of them end up as a 400 with ``str(error)`` as the plain-text body.
"""

from __future__ import annotations


class ModelError(ValueError):
    """Base class for request model failures."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class DefinitionError(ModelError):
    """The definition declares a type that has no coercer."""


class MissingParameterError(ModelError):
    """A required field was not found in any source and has no default."""


class EnumError(ModelError):
    """The value is not one of the declared enum members."""


class ValidationFailedError(ModelError):
    """A custom validation rule rejected the value."""


class CoercionError(ModelError):
    """A numeric field held a value with no leading digits."""
