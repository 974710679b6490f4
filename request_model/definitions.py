"""Field definitions — the declarative description of a request model.

A definition maps each output key to either a bare type name::

    {"customer": "string"}

or a record::

    {"points": {"type": "int", "default": 10, "sources": ["query"]}}

Records are validated with Pydantic once, when a handler is built, so a
malformed definition fails at import time rather than per request. The type
tag itself is only looked up per request (see ``coercion.get_coercer``).
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

SourceName = Literal["params", "query", "body"]

DEFAULT_SOURCES: tuple[SourceName, ...] = ("params", "query", "body")
DEFAULT_OUTPUT = "model"

# object fields can only come from the body
OBJECT_SOURCES: tuple[SourceName, ...] = ("body",)


def _pattern_check(pattern: str) -> Callable[[Any], bool]:
    compiled = re.compile(pattern)

    def check(value: Any) -> bool:
        return compiled.fullmatch(str(value)) is not None

    return check


class Validation(BaseModel):
    """A custom validation rule in its normalized form.

    ``check`` receives the coerced value and returns something truthy when
    the value is acceptable. ``message`` is a literal string, a callable that
    builds the message from the value, or None for the generic message.
    """

    model_config = ConfigDict(frozen=True)

    check: Callable[[Any], Any]
    message: str | Callable[[Any], Any] | None = None

    def describe(self, name: str, value: Any) -> str:
        if self.message is None:
            return f"{name} failed validation"
        if callable(self.message):
            return str(self.message(value))
        return self.message

    @classmethod
    def from_rule(cls, rule: Any) -> Validation:
        """Normalize any accepted rule shape.

        Accepted shapes:
            predicate                      — ``lambda s: len(s) == 2``
            {"isValid": f, "message": m}   — predicate with a message
            {"pattern": r, "message": m}   — regex that must match fully
        """
        if isinstance(rule, Validation):
            return rule
        if callable(rule):
            return cls(check=rule)
        if isinstance(rule, Mapping):
            message = rule.get("message")
            if "pattern" in rule:
                return cls(check=_pattern_check(rule["pattern"]), message=message)
            check = rule.get("isValid", rule.get("is_valid"))
            if check is None:
                raise ValueError(
                    "validation mapping needs an 'isValid' predicate or a 'pattern'"
                )
            return cls(check=check, message=message)
        raise ValueError(
            f"validation must be a callable or a mapping, got {type(rule).__name__}"
        )


class FieldDefinition(BaseModel):
    """One expected request parameter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str
    type: str = "string"
    name: str | None = None          # lookup key when it differs from `key`
    default: Any = None              # value, or zero-argument producer
    required: bool | None = None     # unset: required unless a default exists
    enum: list[Any] | None = None
    sources: list[SourceName] | None = None
    validation: Validation | None = None

    @field_validator("validation", mode="before")
    @classmethod
    def normalize_validation(cls, v: Any) -> Validation | None:
        if v is None:
            return None
        return Validation.from_rule(v)

    @property
    def lookup_name(self) -> str:
        return self.name or self.key

    @property
    def is_required(self) -> bool:
        if self.required is not None:
            return self.required
        return self.default is None

    @property
    def lookup_sources(self) -> tuple[SourceName, ...]:
        if self.type == "object":
            return OBJECT_SOURCES
        if self.sources:
            return tuple(self.sources)
        return DEFAULT_SOURCES

    def resolve_default(self) -> Any:
        """Return the default, calling it first if it is a producer.

        Literal defaults are copied so requests never share a mutable value.
        """
        if callable(self.default):
            return self.default()
        return copy.deepcopy(self.default)


CompiledDefinition = dict[str, FieldDefinition]


def compile_field(key: str, raw: Any) -> FieldDefinition:
    """Build a FieldDefinition from a type name, a record, or an existing one."""
    if isinstance(raw, FieldDefinition):
        if raw.key == key:
            return raw
        return raw.model_copy(update={"key": key})
    if isinstance(raw, str):
        return FieldDefinition(key=key, type=raw, required=True)
    if not isinstance(raw, Mapping):
        raise ValueError(
            f"Definition for '{key}' must be a type name or a mapping, "
            f"got {type(raw).__name__}"
        )
    return FieldDefinition.model_validate({**raw, "key": key})


def compile_definition(definition: Mapping[str, Any]) -> CompiledDefinition:
    """Normalize every entry of a definition, keeping declaration order."""
    return {key: compile_field(key, raw) for key, raw in definition.items()}


def merge_definitions(*definitions: Mapping[str, Any]) -> dict[str, Any]:
    """Combine several definitions into one. Later keys win."""
    merged: dict[str, Any] = {}
    for definition in definitions:
        merged.update(definition)
    return merged


def load_definition(path: str | Path) -> CompiledDefinition:
    """Read a YAML definition file and compile it."""
    definition_file = Path(path)
    if not definition_file.exists():
        raise FileNotFoundError(f"Definition file not found: {definition_file.resolve()}")

    raw = yaml.safe_load(definition_file.read_text())
    if not isinstance(raw, dict):
        raise ValueError(
            f"Definition file {definition_file} must contain a mapping of fields, "
            f"got {type(raw).__name__}"
        )

    compiled = compile_definition(raw)
    logger.info(f"Loaded definition: file={definition_file.name}, fields={len(compiled)}")
    return compiled
