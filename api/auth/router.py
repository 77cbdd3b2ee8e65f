"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.schemas import envelope

from . import dependencies, schemas, service
from .repository import AuthRepository, get_repository

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: schemas.RegisterRequest,
    repo: AuthRepository = Depends(get_repository),
) -> dict:
    user = await service.register(repo, payload)
    return envelope(
        {"user": user},
        message="Registration successful. Your account is awaiting admin approval.",
    )


@router.post("/login")
async def login(
    payload: schemas.LoginRequest,
    repo: AuthRepository = Depends(get_repository),
) -> dict:
    result = await service.login(repo, payload)
    return envelope(result, message="Login successful")


@router.get("/me")
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> dict:
    return envelope({"user": schemas.AccountResponse(**current_user)})
