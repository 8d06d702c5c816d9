"""User account endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import Paging, SubjectId, get_user_service
from taskboard.core.user_service import UserService
from taskboard.models import (
    DeleteUserRequest,
    DeleteUserResponse,
    UpdateUserRequest,
    UpdateUserResponse,
    UserDto,
)

router = APIRouter(prefix="/users", tags=["users"])

Users = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=list[UserDto])
async def list_users(subject_id: SubjectId, users: Users, paging: Paging) -> list[UserDto]:
    records = await users.get_user_page(paging.page, paging.size)
    return [UserDto.from_record(user) for user in records]


@router.get("/{user_id}", response_model=UserDto)
async def get_user(user_id: UUID, subject_id: SubjectId, users: Users) -> UserDto:
    return UserDto.from_record(await users.get_user(user_id))


@router.patch("", response_model=UpdateUserResponse)
async def update_user(body: UpdateUserRequest, subject_id: SubjectId, users: Users) -> UpdateUserResponse:
    """Update the caller's own account. Omitted fields are left unchanged."""
    user = await users.update_user(subject_id, body)
    return UpdateUserResponse.from_record(user)


@router.delete("", response_model=DeleteUserResponse)
async def delete_user(body: DeleteUserRequest, subject_id: SubjectId, users: Users) -> DeleteUserResponse:
    """Delete the caller's own account. The current password must be supplied."""
    return DeleteUserResponse(deleted_user_id=await users.delete_user(subject_id, body))
