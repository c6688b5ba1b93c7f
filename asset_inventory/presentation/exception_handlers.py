"""Exception handlers: every failure leaves a handler as a JSON error body"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from asset_inventory.domain.errors import AssetError, InvalidArgument, NotFound, ServiceError

logger = logging.getLogger(__name__)


def error_body(kind: str, message: str) -> dict:
    return {"error": kind, "message": message}


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item not in ("body", "query"))
        message = error.get("msg", "invalid")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(AssetError)
    async def asset_error_handler(request: Request, exc: AssetError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(content=error_body(exc.kind, exc.message), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            content=error_body(InvalidArgument.kind, _validation_message(exc)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        kind = NotFound.kind if exc.status_code == status.HTTP_404_NOT_FOUND else ServiceError.kind
        if exc.status_code == status.HTTP_400_BAD_REQUEST:
            kind = InvalidArgument.kind
        return JSONResponse(content=error_body(kind, str(exc.detail)), status_code=exc.status_code)

    # Catch all unhandled exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            content=error_body(ServiceError.kind, "Internal server error"),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
