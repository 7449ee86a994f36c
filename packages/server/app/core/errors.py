"""
Typed membership errors.

Every expected outcome of the membership workflow that is not a success
is raised as one of these and rendered by the API as
``{"error": {"code": ..., "message": ...}}``.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nested_shared.schemas.common import APIError, ErrorBody


class MembershipError(Exception):
    """Base class for expected, user-facing membership outcomes."""

    code = "membership_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(MembershipError):
    code = "not_found"
    status_code = 404


class Forbidden(MembershipError):
    code = "forbidden"
    status_code = 403


class InvalidState(MembershipError):
    code = "invalid_state"
    status_code = 409


class ResourceFull(MembershipError):
    code = "resource_full"
    status_code = 409


class ValidationError(MembershipError):
    code = "validation_error"
    status_code = 422


class Unauthenticated(MembershipError):
    code = "unauthenticated"
    status_code = 401


def _envelope(code: str, message: str, detail: object = None) -> dict:
    body = APIError(error=ErrorBody(code=code, message=message), detail=detail)
    return body.model_dump(exclude_none=True)


# OpenAPI declarations for the envelope, shared by the routers
ERROR_RESPONSES: dict = {
    status: {"model": APIError}
    for status in (401, 403, 404, 409, 422)
}


async def membership_error_handler(request: Request, exc: MembershipError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(exc.code, exc.message),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render body/query validation failures in the membership error envelope."""
    errors = exc.errors()
    first = errors[0]["msg"] if errors else "Invalid request"
    detail = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in errors
    ]
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=_envelope(ValidationError.code, first, detail),
    )
