from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from tiri.core.logger import logger


# =====================================================
# ERROR TAXONOMY
# =====================================================

class StudioError(Exception):
    """Base for every error that is rendered as ``{"error": message}``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoSession(StudioError):
    # missing cookie, malformed/forged/expired token: never tell which
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    def __init__(self, message: str = None):
        super().__init__(self.default_message)


class InvalidCredentials(StudioError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class Forbidden(StudioError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(StudioError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ValidationError(StudioError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request payload"


class StoreError(StudioError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


# =====================================================
# HTTP MAPPING
# =====================================================

PAYLOAD_MESSAGES = {
    "/api/auth/login": "Invalid login payload",
    "/api/studio/templates": "Invalid template payload",
    "/api/studio/events": "Invalid event payload",
    "/api/studio/guests": "Invalid guest payload",
    "/api/studio/guests/bulk": "Invalid bulk guest payload",
    "/api/studio/media": "Invalid media payload",
    "/api/studio/settings/account": "Invalid account settings payload",
    "/api/studio/settings/notifications": "Invalid notification payload",
    "/api/studio/settings/team": "Invalid team member payload",
}


def error_response(error: StudioError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    return error_response(exc)


def payload_error_message(path: str) -> str:
    # longest matching route prefix wins, so /guests/bulk beats /guests
    best = None
    for prefix in PAYLOAD_MESSAGES:
        if path == prefix or path.startswith(prefix + "/"):
            if best is None or len(prefix) > len(best):
                best = prefix
    return PAYLOAD_MESSAGES[best] if best else ValidationError.default_message


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # the body is parsed before any dependency runs; auth failures still win
    from tiri.dependencies.auth import session_failure

    auth_error = session_failure(request)
    if auth_error is not None:
        return error_response(auth_error)

    logger.info(f"PAYLOAD REJECTED | path={request.url.path} | errors={len(exc.errors())}")
    return error_response(ValidationError(payload_error_message(request.url.path)))


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"STORE FAILURE | path={request.url.path} | error={exc.__class__.__name__}", exc_info=exc)
    return error_response(StoreError())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudioError, studio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
