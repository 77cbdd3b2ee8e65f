"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from core.schemas import ApiModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Role = Literal["ADMIN", "CONTRIBUTOR"]

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=200)]
Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=320, pattern=EMAIL_PATTERN)]
Password = Annotated[str, Field(min_length=6, max_length=128)]


class RegisterRequest(ApiModel):
    name: Name
    email: Email
    password: Password


class LoginRequest(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class AccountResponse(ApiModel):
    id: int
    email: str
    name: str
    role: Role
    approved: bool
    enabled: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TokenResponse(ApiModel):
    token: str
    token_type: str = "bearer"
    user: AccountResponse
