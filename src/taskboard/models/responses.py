"""Response bodies returned by the HTTP API."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from taskboard.models.base import TaskPriority, TaskStatus, UserRole
from taskboard.models.records import CommentRecord, TaskRecord, UserRecord
from taskboard.utils.timestamps import format_response_timestamp, utc_now

PROTECTED = "[PROTECTED]"

Timestamp = Annotated[
    datetime | None,
    PlainSerializer(format_response_timestamp, return_type=str | None, when_used="json"),
]


class ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class StampedResponse(ResponseModel):
    """Response carrying the time it was produced."""

    timestamp: Timestamp = Field(default_factory=utc_now)


# =============================================================================
# Errors
# =============================================================================


class ApiError(ResponseModel):
    """Structured error body shared by every failure response."""

    status: int
    error: str = Field(..., description="Exception class name")
    message: str
    path: str
    timestamp: Timestamp = Field(default_factory=utc_now)


# =============================================================================
# Users
# =============================================================================


class UserDto(ResponseModel):
    id: UUID
    username: str
    name: str
    email: str
    created_at: Timestamp

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserDto":
        return cls.model_validate(user)


class UserAccountResponse(StampedResponse):
    """Full account view returned after sign-up and profile updates.

    The password is never echoed back.
    """

    id: UUID
    username: str
    password: str = PROTECTED
    name: str
    email: str
    role: UserRole
    created_at: Timestamp
    updated_at: Timestamp
    expired: bool
    locked: bool
    credentials_expired: bool
    enabled: bool

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserAccountResponse":
        return cls.model_validate(user.model_dump(exclude={"password_hash"}))


class RegistrationResponse(UserAccountResponse):
    pass


class UpdateUserResponse(UserAccountResponse):
    pass


class DeleteUserResponse(StampedResponse):
    deleted_user_id: UUID


class AuthenticationResponse(StampedResponse):
    jwt: str = Field(..., description="Bearer token for the Authorization header")


# =============================================================================
# Tasks
# =============================================================================


class TaskDto(ResponseModel):
    id: UUID
    name: str
    description: str
    status: TaskStatus
    priority: TaskPriority
    creator_id: UUID
    executor_id: UUID | None
    created_at: Timestamp
    expires_on: Timestamp
    updated_at: Timestamp

    @classmethod
    def from_record(cls, task: TaskRecord) -> "TaskDto":
        return cls.model_validate(task)


class CreateTaskResponse(TaskDto, StampedResponse):
    pass


class UpdateTaskResponse(TaskDto, StampedResponse):
    pass


class DeleteTaskResponse(StampedResponse):
    deleted_task_id: UUID


# =============================================================================
# Comments
# =============================================================================


class CommentDto(ResponseModel):
    id: UUID
    task_id: UUID
    user: UserDto
    content: str
    created_at: Timestamp

    @classmethod
    def from_record(cls, comment: CommentRecord, author: UserRecord) -> "CommentDto":
        return cls(
            id=comment.id,
            task_id=comment.task_id,
            user=UserDto.from_record(author),
            content=comment.content,
            created_at=comment.created_at,
        )


class CreateCommentResponse(CommentDto, StampedResponse):
    pass


class DeleteCommentResponse(StampedResponse):
    deleted_comment_id: UUID
