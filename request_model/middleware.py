"""Handler factory for ``(request, response, next)`` style middleware chains."""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping
from typing import Any

from request_model.definitions import DEFAULT_OUTPUT, compile_definition
from request_model.runtime import extract

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Any, Callable[[], Any]], None]


def attach(request: Any, output: str, values: dict[str, Any]) -> None:
    """Store the model on the request, as a key or as an attribute."""
    if isinstance(request, MutableMapping):
        request[output] = values
    else:
        setattr(request, output, values)


def model(definition: dict[str, Any], output: str = DEFAULT_OUTPUT) -> Handler:
    """Build a middleware that fills ``request.<output>`` from a definition.

    ``{"x": {"type": "int", "default": 0}}`` gives ``request.model["x"] == 123``
    when 123 is found in the params, query or body, and 0 otherwise.

    On success the model is attached and ``next()`` is called once. On any
    failure ``next`` is not called and the response gets a 400 with the
    failure message.
    """
    fields = compile_definition(definition)

    def handler(request: Any, response: Any, next: Callable[[], Any]) -> None:
        result = extract(request, fields)
        if not result.ok:
            logger.info(f"Rejected request: {result.error}")
            response.status(400).send(str(result.error))
            return

        attach(request, output, dict(result.values))
        next()

    return handler
