from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal Server Error"

    def __init__(self, message: str = GENERIC_ERROR_MESSAGE):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"error": self.error, "message": self.message}


class ExpenseValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation failed"

    def __init__(self, errors: Dict[str, List[str]]):
        super().__init__("Validation failed")
        self.errors = errors

    def to_body(self) -> dict:
        return {"error": self.error, "messages": self.errors}


class InvalidArgument(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"

    def to_body(self) -> dict:
        return {"error": self.message}


class InternalError(AppError):
    pass


def _field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        # loc is ("body", "expenseType") or ("path", "id"); drop the source prefix
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(err.get("msg", "Invalid value"))
    return errors


async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Basic"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = _field_errors(exc)
    logger.debug(f"Rejected request to {request.url.path}: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "messages": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
