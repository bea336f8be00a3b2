from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from messagely.core.exceptions import MessagelyError, ValidationError


def error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}}
    )


def register_exception_handlers(app: FastAPI, logger: logging.Logger) -> None:
    """
    Map domain errors, request validation failures and unexpected exceptions
    onto the {"error": {"message", "status"}} envelope.
    """
    @app.exception_handler(MessagelyError)
    async def messagely_error_handler(request: Request, exc: MessagelyError):
        if exc.status >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"] if part != "body")
            for error in exc.errors()
        )
        if fields:
            error = ValidationError(f"Invalid or missing fields: {fields}")
        else:
            error = ValidationError("Invalid request body")
        return JSONResponse(status_code=error.status, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.critical("Unhandled error on %s %s: %s", request.method, request.url.path, str(exc), exc_info=True)
        return error_response("Internal server error", status.HTTP_500_INTERNAL_SERVER_ERROR)
