"""
Exception handlers.

Every application error reaches the client as a JSON object with an
``error`` string. Internal details stay in the server log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import SaaSKitError

logger = logging.getLogger(__name__)


async def saaskit_error_handler(request: Request, exc: SaaSKitError) -> JSONResponse:
    """Render an application error with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.code}")

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_response(),
        headers=headers,
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Malformed bodies are client errors like any missing field."""
    logger.info(f"{request.method} {request.url.path} invalid body: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SaaSKitError, saaskit_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
