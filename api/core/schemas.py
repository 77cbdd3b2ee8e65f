"""
Shared pydantic building blocks and the response envelope.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Path
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# SERIAL columns are int4.
MAX_ROW_ID = 2**31 - 1

RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]


class ApiModel(BaseModel):
    # camelCase on the wire, snake_case in Python; both accepted on input.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationBlock(ApiModel):
    current: int
    pages: int
    total: int
    has_next: bool
    has_prev: bool


def envelope(data: Any = None, *, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body


def error_envelope(message: str, *, errors: list[Any] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
