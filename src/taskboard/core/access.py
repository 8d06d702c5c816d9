"""Access decisions for users, tasks and comments.

Every check takes the authenticated subject's id explicitly and either
returns normally or raises a :class:`~taskboard.core.errors.TaskboardError`.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TypeVar
from uuid import UUID

from taskboard.core.errors import InvalidValueSelectionError, NotFoundError, PermissionDeniedError
from taskboard.models import (
    CommentRecord,
    CreateTaskRequest,
    TaskPriority,
    TaskRecord,
    TaskStatus,
    UpdateTaskRequest,
)

RequestT = TypeVar("RequestT", CreateTaskRequest, UpdateTaskRequest)

NOT_SELF = "Current user id and request user id are not equals"
NOT_CREATOR = "User is not task creator"
NOT_RELATED = "User is not related to the task"
NOT_AUTHOR = "User is not comment author"


@dataclass(frozen=True)
class CreatorTaskUpdate:
    """Update issued by the task's creator; every field may change."""

    request: UpdateTaskRequest


@dataclass(frozen=True)
class ExecutorTaskUpdate:
    """Update issued by the task's executor; only ``status`` survives."""

    request: UpdateTaskRequest


TaskUpdate = CreatorTaskUpdate | ExecutorTaskUpdate

EXECUTOR_FIELDS = ("status",)


def check_self(subject_id: UUID, target_user_id: UUID) -> None:
    if subject_id != target_user_id:
        raise PermissionDeniedError(NOT_SELF)


def check_task_creator(subject_id: UUID, task: TaskRecord) -> None:
    if task.creator_id != subject_id:
        raise PermissionDeniedError(NOT_CREATOR)


def check_task_related(subject_id: UUID, task: TaskRecord | None, task_id: UUID) -> TaskRecord:
    """Require the task to exist and the subject to be its creator or executor.

    Args:
        subject_id: Authenticated user
        task: Loaded task, or None if it does not exist
        task_id: Requested task id (used in the not-found message)

    Returns:
        The task, for chaining

    Raises:
        NotFoundError: If the task does not exist
        PermissionDeniedError: If the subject is unrelated to the task
    """
    if task is None:
        raise NotFoundError("Task", "id", task_id)
    if not task.is_related(subject_id):
        raise PermissionDeniedError(NOT_RELATED)
    return task


def authorize_task_update(subject_id: UUID, task: TaskRecord, request: UpdateTaskRequest) -> TaskUpdate:
    """Decide which parts of an update the subject may apply.

    The creator may change anything. The executor's request is reduced to
    its status; other fields are dropped without error.

    Raises:
        PermissionDeniedError: If the subject is neither creator nor executor
    """
    if task.creator_id == subject_id:
        return CreatorTaskUpdate(request)
    if task.executor_id is not None and task.executor_id == subject_id:
        redacted = UpdateTaskRequest(id=request.id, status=request.status)
        return ExecutorTaskUpdate(redacted)
    raise PermissionDeniedError(NOT_RELATED)


def coerce_enum(value: str | None, enum_cls: type[Enum]) -> str | None:
    """Normalize a case-insensitive enum name.

    Blank values are returned unchanged so partial updates can omit them.

    Raises:
        InvalidValueSelectionError: If ``value`` names no member of ``enum_cls``
    """
    if value is None or not value.strip():
        return value
    candidate = value.strip().upper()
    try:
        return enum_cls(candidate).value
    except ValueError:
        allowed = [member.value.lower() for member in enum_cls]
        raise InvalidValueSelectionError(value, allowed) from None


def coerce_task_enums(request: RequestT) -> RequestT:
    """Return a copy of a task request with canonical status and priority."""
    return request.model_copy(
        update={
            "status": coerce_enum(request.status, TaskStatus),
            "priority": coerce_enum(request.priority, TaskPriority),
        }
    )


def check_comment_author(subject_id: UUID, comment: CommentRecord | None, task_id: UUID, comment_id: UUID) -> CommentRecord:
    """Require the comment to exist on ``task_id`` and be written by the subject.

    Raises:
        NotFoundError: If no such comment exists on the task
        PermissionDeniedError: If the subject is not the comment's author
    """
    if comment is None or comment.task_id != task_id:
        raise NotFoundError("Task comment", "id", comment_id)
    if comment.user_id != subject_id:
        raise PermissionDeniedError(NOT_AUTHOR)
    return comment
