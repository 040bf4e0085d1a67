import logging
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class MybError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthorized(MybError):
    status_code = 401
    message = "Unauthorized"


class MalformedCredential(MybError):
    status_code = 401
    message = "Invalid auth header"


class InvalidCredential(MybError):
    status_code = 401
    message = "Invalid token"


class InvalidLogin(MybError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(MybError):
    status_code = 403
    message = "Forbidden"


class NotFound(MybError):
    status_code = 404
    message = "Not found"


class Conflict(MybError):
    status_code = 409
    message = "Conflict"


class MissingField(MybError):
    status_code = 400
    message = "Missing required field"


class InvalidPayload(MybError):
    status_code = 400
    message = "Invalid data"


class UnsupportedType(MybError):
    status_code = 400
    message = "Unsupported mime type"


class InvalidReference(MybError):
    status_code = 422
    message = "Unknown reference"


class PayloadTooLarge(MybError):
    status_code = 413
    message = "Payload too large"


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


async def myb_error_handler(request: Request, exc: MybError) -> JSONResponse:
    if exc.status_code in (401, 403):
        logger.info("Request rejected", extra={"path": request.url.path, "reason": exc.message})
    return error_response(exc.status_code, exc.message)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(422, "Invalid payload", detail=jsonable_encoder(exc.errors()))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MybError, myb_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
