"""FastAPI integration — request models as route dependencies.

Usage::

    app = FastAPI()
    add_exception_handler(app)

    @app.get("/customers/{customer}")
    async def show(model: dict = Depends(request_model_dependency(CUSTOMER))):
        ...

Any ModelError raised by the dependency becomes a 400 whose plain-text
body is the failure message.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from request_model.definitions import DEFAULT_OUTPUT, compile_definition
from request_model.errors import ModelError
from request_model.runtime import extract

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> dict[str, Any]:
    """Return the JSON object body, or {} if there is none or it isn't one."""
    if not await request.body():
        return {}
    try:
        parsed = await request.json()
    except ValueError:
        logger.warning(f"Ignoring non-JSON body on {request.method} {request.url.path}")
        return {}
    if not isinstance(parsed, dict):
        logger.warning(
            f"Ignoring JSON body of type {type(parsed).__name__} "
            f"on {request.method} {request.url.path}"
        )
        return {}
    return parsed


def request_model_dependency(
    definition: dict[str, Any],
    output: str = DEFAULT_OUTPUT,
) -> Callable[[Request], Awaitable[dict[str, Any]]]:
    """Build a dependency returning the extracted model for each request.

    The model is also stored on ``request.state.<output>``.
    """
    fields = compile_definition(definition)

    async def dependency(request: Request) -> dict[str, Any]:
        sources = {
            "params": dict(request.path_params),
            "query": dict(request.query_params),
            "body": await read_json_body(request),
        }
        result = extract(sources, fields)
        if not result.ok:
            logger.info(f"Rejected {request.method} {request.url.path}: {result.error}")
            raise result.error

        values = dict(result.values)
        setattr(request.state, output, values)
        return values

    return dependency


async def model_error_handler(request: Request, exc: ModelError) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=400)


def add_exception_handler(app: FastAPI) -> None:
    """Register the 400 handler for ModelError on an app."""
    app.add_exception_handler(ModelError, model_error_handler)
