# student_hub/core/exceptions.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StudentHubError(Exception):
    """Base class for errors surfaced to API callers"""

    status_code = 500
    code = "internal_error"

    def __init__(self, detail: str, code: Optional[str] = None, redirect: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if code:
            self.code = code
        self.redirect = redirect


class AuthFailure(StudentHubError):
    """Bad credentials, unknown account or missing identity. Retry allowed."""

    status_code = 401
    code = "auth_failure"


class Forbidden(StudentHubError):
    status_code = 403
    code = "forbidden"


class NotFound(StudentHubError):
    status_code = 404
    code = "not_found"


class ValidationError(StudentHubError):
    """Required field empty or malformed input, raised before any network call"""

    status_code = 422
    code = "validation_error"


class PreconditionFailed(StudentHubError):
    """
    A state transition was attempted from the wrong source state, or the
    backend refused a query because a required index is missing.
    """

    status_code = 409
    code = "failed_precondition"


class ExternalServiceError(StudentHubError):
    """AI call failure, malformed AI response or upload failure"""

    status_code = 502
    code = "external_service_error"


class MalformedAIResponse(ExternalServiceError):
    code = "malformed_ai_response"


async def student_hub_error_handler(request: Request, exc: StudentHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    content = {"detail": exc.detail, "code": exc.code}
    if exc.redirect:
        content["redirect"] = exc.redirect
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and query strings use the same error shape"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={
            "detail": f"{field}: {message}" if field else message,
            "code": ValidationError.code,
            "errors": jsonable_encoder(errors),
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudentHubError, student_hub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
