"""
Error types and the global error responder.

Every failure leaves the service as `{"errors": [{type, msg, path, location}]}`.
Server-side faults are logged in full and answered with a generic message.
"""
from http import HTTPStatus
from typing import List, Optional
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class AuthServiceError(Exception):
    status_code = 500
    error_type = "InternalServerError"
    message = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_errors(self) -> List[dict]:
        return [error_item(self.error_type, self.message)]


class RequestValidationFailed(AuthServiceError):
    status_code = 400
    error_type = "ValidationError"
    message = "Request validation failed"

    def __init__(self, errors: List[dict]):
        super().__init__()
        self.errors = errors

    def to_errors(self) -> List[dict]:
        return self.errors


class InvalidCredentials(AuthServiceError):
    # Same text whether the email is unknown or the password is wrong
    status_code = 400
    error_type = "BadRequestError"
    message = "Email or password does not match."


class EmailAlreadyRegistered(AuthServiceError):
    status_code = 400
    error_type = "BadRequestError"
    message = "Email is already exists!"


class UserNotFound(AuthServiceError):
    status_code = 400
    error_type = "BadRequestError"
    message = "User with the token could not be found"


class InvalidToken(AuthServiceError):
    status_code = 401
    error_type = "UnauthorizedError"
    message = "Invalid or missing token"


class SigningKeyError(AuthServiceError):
    """The signing key material could not be read. Fatal configuration fault."""
    status_code = 500
    error_type = "InternalServerError"
    message = "Error while reading signing key"


def error_item(error_type: str, msg: str, path: str = "", location: str = "") -> dict:
    return {"type": error_type, "msg": msg, "path": path, "location": location}


def error_response(status_code: int, errors: List[dict]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": errors})


def _http_error_type(status_code: int) -> str:
    try:
        phrase = HTTPStatus(status_code).phrase
    except ValueError:
        return "HttpError"
    name = "".join(word.capitalize() for word in phrase.replace("-", " ").split())
    return name if name.endswith("Error") else f"{name}Error"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthServiceError)
    def handle_auth_service_error(request: Request, exc: AuthServiceError):
        if exc.status_code >= 500:
            logger.error(
                "%s on %s %s: %s",
                exc.__class__.__name__, request.method, request.url.path, exc,
                exc_info=exc.__cause__ or exc
            )
            return error_response(exc.status_code, [error_item(exc.error_type, INTERNAL_ERROR_MESSAGE)])
        logger.info(
            "%s on %s %s: %s", exc.__class__.__name__, request.method, request.url.path, exc.message
        )
        return error_response(exc.status_code, exc.to_errors())

    @app.exception_handler(RequestValidationError)
    def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = tuple(err.get("loc") or ("body",))
            errors.append(
                error_item("field", err.get("msg", "Invalid value"), ".".join(str(p) for p in loc[1:]), str(loc[0]))
            )
        return error_response(400, errors)

    @app.exception_handler(StarletteHTTPException)
    def handle_http_exception(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else HTTPStatus(exc.status_code).phrase
        return error_response(exc.status_code, [error_item(_http_error_type(exc.status_code), message)])

    @app.exception_handler(SQLAlchemyError)
    def handle_store_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(500, [error_item("InternalServerError", INTERNAL_ERROR_MESSAGE)])

    @app.exception_handler(Exception)
    def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        return error_response(500, [error_item("InternalServerError", INTERNAL_ERROR_MESSAGE)])
