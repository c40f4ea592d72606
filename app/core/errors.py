"""Error taxonomy and normalization for the recipe and image handlers.

Every failure a handler can meet is a ``RecipeProxyError`` subclass with a
stable ``kind`` and the status code it maps to under the strict policy.
``normalize_error`` turns any exception into the ``{"error": ...}`` body.
"""

import logging
from typing import Optional, Tuple

from app.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"


class RecipeProxyError(Exception):
    """Base exception for all handler failures."""

    kind = "InternalError"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(RecipeProxyError):
    """A required query parameter is missing or empty."""
    kind = "InvalidRequest"
    http_status = 400

    def __init__(self, field: str):
        super().__init__(f"{field} parameter is required")
        self.field = field


class UpstreamError(RecipeProxyError):
    """An external service failed or answered with a non-success status."""
    kind = "UpstreamError"
    http_status = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class NoResultsError(RecipeProxyError):
    """The external service succeeded but returned nothing usable."""
    kind = "NoResults"
    http_status = 404


class IncompleteGenerationError(RecipeProxyError):
    """Generation stopped at the output length cap."""
    kind = "IncompleteGeneration"
    http_status = 502

    def __init__(self, message: str = "Incomplete response"):
        super().__init__(message)


class RefusedError(RecipeProxyError):
    """The completion service declined to answer."""
    kind = "Refused"
    http_status = 422

    def __init__(self, message: str = "Model refused to provide a recipe"):
        super().__init__(message)


class EmptyResponseError(RecipeProxyError):
    """Neither content, refusal nor truncation came back."""
    kind = "EmptyResponse"
    http_status = 502

    def __init__(self, message: str = "No response content"):
        super().__init__(message)


class ParseError(RecipeProxyError):
    """Structured content did not match the expected shape."""
    kind = "ParseError"
    http_status = 502


def normalize_error(exc: BaseException, strict: bool = False) -> Tuple[ErrorResponse, int]:
    """
    Convert any exception into an error body and status code.

    With ``strict`` off only invalid requests get a non-200 status; callers
    have to look at the body to detect failures. With ``strict`` on each kind
    uses its own status and the body carries ``kind``.
    """
    if isinstance(exc, RecipeProxyError):
        message = exc.message or UNKNOWN_ERROR_MESSAGE
        kind = exc.kind
        strict_status = exc.http_status
        logger.warning(f"{kind}: {message}")
    else:
        message = str(exc) or UNKNOWN_ERROR_MESSAGE
        kind = "InternalError"
        strict_status = 500
        logger.error(f"Unexpected handler failure: {message}", exc_info=exc)

    if strict:
        return ErrorResponse(error=message, kind=kind), strict_status

    status = 400 if isinstance(exc, InvalidRequestError) else 200
    return ErrorResponse(error=message), status
