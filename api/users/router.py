"""
Account directory API endpoints (admin only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from auth import repository as auth_repository
from auth.schemas import Role
from auth.service import to_account_response
from core.pagination import PageParams, page_params
from core.schemas import RowId, envelope

from . import schemas, service
from .repository import UserRepository, get_repository

router = APIRouter(prefix="/users")


@router.get("")
async def list_users(
    role: Role | None = Query(default=None),
    approved: bool | None = Query(default=None),
    params: PageParams = Depends(page_params),
    _: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    result = await service.list_users(repo, role=role, approved=approved, params=params)
    return envelope(result)


@router.get("/stats")
async def user_stats(
    _: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    return envelope(await service.stats(repo))


@router.get("/{user_id}")
async def get_user(
    user_id: RowId,
    _: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    user = await service.get_user(repo, user_id)
    return envelope({"user": user})


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: schemas.CreateUserRequest,
    _: dict = Depends(auth_dependencies.require_admin),
    auth_repo: auth_repository.AuthRepository = Depends(auth_repository.get_repository),
) -> dict:
    row = await service.create_user(auth_repo, payload)
    return envelope({"user": to_account_response(row)}, message="User created successfully")


@router.put("/{user_id}")
async def update_user(
    user_id: RowId,
    payload: schemas.UpdateUserRequest,
    current_user: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    row = await service.update_user(repo, user_id, payload, current_user=current_user)
    return envelope({"user": to_account_response(row)}, message="User updated successfully")


@router.patch("/{user_id}/approve")
async def approve_user(
    user_id: RowId,
    payload: schemas.ApproveRequest,
    _: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    row = await service.set_approval(repo, user_id, payload.approved)
    verb = "approved" if payload.approved else "rejected"
    return envelope({"user": to_account_response(row)}, message=f"User {verb} successfully")


@router.patch("/{user_id}/reset-password")
async def reset_password(
    user_id: RowId,
    payload: schemas.ResetPasswordRequest,
    _: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    await service.reset_password(repo, user_id, payload.new_password)
    return envelope(message="Password reset successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: RowId,
    current_user: dict = Depends(auth_dependencies.require_admin),
    repo: UserRepository = Depends(get_repository),
) -> dict:
    await service.delete_user(repo, user_id, current_user=current_user)
    return envelope(message="User deleted successfully")
