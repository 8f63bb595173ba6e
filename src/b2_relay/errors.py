"""Exception types and app-level error handlers for the relay."""
import logging
from typing import Any, Union

import requests
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class B2RelayError(Exception):
    """Base class for errors raised by the relay itself."""


class B2ConfigurationError(B2RelayError):
    """Raised when the B2 credentials needed for authorization are missing."""


def describe_upstream_error(exc: BaseException) -> Union[str, Any]:
    """
    Best description of a failed upstream call.

    B2 answers errors with a JSON body like
    ``{"status": 404, "code": "not_found", "message": "..."}``; return that body
    when the exception carries a response, otherwise the exception text.
    """
    response = getattr(exc, "response", None)
    if isinstance(exc, requests.RequestException) and response is not None:
        try:
            return response.json()
        except ValueError:
            return response.text or str(exc)
    return str(exc)


def is_not_found(exc: BaseException) -> bool:
    """True when ``exc`` is an upstream HTTP 404."""
    response = getattr(exc, "response", None)
    return (
        isinstance(exc, requests.HTTPError)
        and response is not None
        and response.status_code == status.HTTP_404_NOT_FOUND
    )


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Malformed requests are client errors.

    The body carries both ``message`` and ``error`` so it fits the upload
    envelope as well as the copy-contract one.
    """
    errors = exc.errors()
    logger.warning(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid request",
            "error": "; ".join(str(error.get("msg", "")) for error in errors) or "Invalid request",
        },
    )


async def handle_broad_exceptions(request: Request, call_next):
    """Turn anything a route did not handle into a logged 500."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal server error"},
        )
