"""
Account directory schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from auth.schemas import AccountResponse, Email, Name, Password, Role
from core.schemas import ApiModel


class CreateUserRequest(ApiModel):
    name: Name
    email: Email
    password: Password
    role: Role


class UpdateUserRequest(ApiModel):
    name: Name | None = None
    email: Email | None = None
    role: Role | None = None
    approved: bool | None = None
    enabled: bool | None = None

    @field_validator("name", "email", "role", "approved", "enabled")
    @classmethod
    def _reject_null(cls, value):
        # Only runs for values actually sent; omitted fields keep their default.
        if value is None:
            raise ValueError("may not be null")
        return value


class ApproveRequest(ApiModel):
    approved: bool


class ResetPasswordRequest(ApiModel):
    new_password: Password


class UserListItem(AccountResponse):
    article_count: int = 0


class ArticleSummary(ApiModel):
    id: int
    title: str
    published: bool
    views: int
    created_at: datetime


class UserDetail(UserListItem):
    articles: list[ArticleSummary] = Field(default_factory=list)
