"""Data models for the task service."""

from taskboard.models.base import BaseRecord, TaskPriority, TaskStatus, UserRole
from taskboard.models.records import CommentRecord, TaskRecord, UserRecord
from taskboard.models.requests import (
    AuthenticationRequest,
    CreateCommentRequest,
    CreateTaskRequest,
    DeleteCommentRequest,
    DeleteTaskRequest,
    DeleteUserRequest,
    RegistrationRequest,
    TaskSearchFilter,
    UpdateTaskRequest,
    UpdateUserRequest,
)
from taskboard.models.responses import (
    ApiError,
    AuthenticationResponse,
    CommentDto,
    CreateCommentResponse,
    CreateTaskResponse,
    DeleteCommentResponse,
    DeleteTaskResponse,
    DeleteUserResponse,
    RegistrationResponse,
    TaskDto,
    UpdateTaskResponse,
    UpdateUserResponse,
    UserDto,
)

__all__ = [
    # Base
    "BaseRecord",
    "TaskPriority",
    "TaskStatus",
    "UserRole",
    # Records
    "CommentRecord",
    "TaskRecord",
    "UserRecord",
    # Requests
    "AuthenticationRequest",
    "CreateCommentRequest",
    "CreateTaskRequest",
    "DeleteCommentRequest",
    "DeleteTaskRequest",
    "DeleteUserRequest",
    "RegistrationRequest",
    "TaskSearchFilter",
    "UpdateTaskRequest",
    "UpdateUserRequest",
    # Responses
    "ApiError",
    "AuthenticationResponse",
    "CommentDto",
    "CreateCommentResponse",
    "CreateTaskResponse",
    "DeleteCommentResponse",
    "DeleteTaskResponse",
    "DeleteUserResponse",
    "RegistrationResponse",
    "TaskDto",
    "UpdateTaskResponse",
    "UpdateUserResponse",
    "UserDto",
]
