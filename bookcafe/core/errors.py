import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookcafe.core.exceptions import StorageError
from bookcafe.utils.flash import flash

logger = logging.getLogger(__name__)

RANGE_ERRORS = {"greater_than_equal", "less_than_equal"}


def validation_message(request: Request, errors: list[dict]) -> str:
    """Human readable message for the first recognisable validation error"""
    for error in errors:
        loc = error.get("loc", ())
        if loc[:1] == ("path",) and loc[-1] == "book_id":
            return "Invalid book id"
    for error in errors:
        field = error.get("loc", ())[-1:]
        if field == ("rating",):
            if error.get("type") in RANGE_ERRORS:
                return "Rating must be between 1 and 5"
            return "Invalid id or rating"
        if field in (("title",), ("author",)):
            return "Title and author are required"

    if request.url.path.endswith("/rating"):
        return "Invalid id or rating"
    if request.method == "POST":
        return "Title and author are required"
    return "Invalid request"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = validation_message(request, list(exc.errors()))
    logger.debug(f"⚠️ Rejected {request.method} {request.url.path}: {message}")
    if not request.url.path.startswith("/api/"):
        # form posts from the page go back to it
        flash(request, message, "error")
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"message": message}
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": exc.message},
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    # plain function, SlowAPIMiddleware calls it without awaiting
    logger.warning(f"🚦 Rate limit hit by {request.client.host if request.client else '?'}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": f"Rate limit exceeded: {exc.detail}"},
    )


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )
