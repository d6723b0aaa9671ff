"""
Application exception handlers.

Malformed request bodies get the same ``{statusCode, error, message}``
shape as pipeline rejections instead of FastAPI's default 422 body.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.presenters import validation_rejection_response

logger = logging.getLogger(__name__)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = validation_rejection_response(exc.errors())
    logger.info("Request body rejected on %s: %d error(s)", request.url.path, len(body.message))
    return JSONResponse(status_code=body.status_code, content=body.model_dump(by_alias=True))


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
