"""Extraction outcome — what one pass over a request produces."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from request_model.errors import ModelError


@dataclass(frozen=True)
class Extraction:
    """Result of extracting a model from a request.

    values — read-only mapping of definition key to coerced value; empty
             when the extraction failed.
    error  — the first failure, or None on success.
    """

    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    error: ModelError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, values: dict[str, Any]) -> Extraction:
        return cls(values=MappingProxyType(dict(values)))

    @classmethod
    def failure(cls, error: ModelError) -> Extraction:
        return cls(error=error)
