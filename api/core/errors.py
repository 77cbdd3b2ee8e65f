"""
API error taxonomy.

Every error is an `HTTPException`, so services raise them the same way they
would raise a plain one. `main.py` renders them into the response envelope.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, detail: str | None = None, *, errors: list[Any] | None = None):
        super().__init__(status_code=self.status_code_default, detail=detail or self.message)
        self.errors = errors


class ValidationFailed(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message = "Validation errors"


class Unauthenticated(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message = "Access token required"


class InvalidCredential(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message = "Invalid token"


class ExpiredCredential(ApiError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    message = "Token expired"


class Forbidden(ApiError):
    status_code_default = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class NotFound(ApiError):
    status_code_default = status.HTTP_404_NOT_FOUND
    message = "Not found"


class Conflict(ApiError):
    status_code_default = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class InvalidRequest(ApiError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ServerError(ApiError):
    pass
