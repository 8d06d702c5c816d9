"""Task and task-comment endpoints."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from taskboard.api.dependencies import Paging, SubjectId, get_comment_service, get_task_service
from taskboard.core.comment_service import CommentService
from taskboard.core.task_service import TaskService
from taskboard.models import (
    CommentDto,
    CreateCommentRequest,
    CreateCommentResponse,
    CreateTaskRequest,
    CreateTaskResponse,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteTaskRequest,
    DeleteTaskResponse,
    TaskDto,
    TaskSearchFilter,
    UpdateTaskRequest,
    UpdateTaskResponse,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])

Tasks = Annotated[TaskService, Depends(get_task_service)]
Comments = Annotated[CommentService, Depends(get_comment_service)]


def task_search_filter(
    id: UUID | None = None,
    name: Annotated[str | None, Query(description="Exact or partial name")] = None,
    description: str | None = None,
    status: Annotated[str | None, Query(description="pending, in_progress or done")] = None,
    priority: Annotated[str | None, Query(description="high, medium or low")] = None,
    creator_id: UUID | None = None,
    executor_id: UUID | None = None,
    created_at: datetime | None = None,
    created_at_after: datetime | None = None,
    created_at_before: datetime | None = None,
    expires_on: datetime | None = None,
    expires_on_after: datetime | None = None,
    expires_on_before: datetime | None = None,
    updated_at: datetime | None = None,
    updated_at_after: datetime | None = None,
    updated_at_before: datetime | None = None,
) -> TaskSearchFilter:
    try:
        return TaskSearchFilter(
            id=id,
            name=name,
            description=description,
            status=status,
            priority=priority,
            creator_id=creator_id,
            executor_id=executor_id,
            created_at=created_at,
            created_at_after=created_at_after,
            created_at_before=created_at_before,
            expires_on=expires_on,
            expires_on_after=expires_on_after,
            expires_on_before=expires_on_before,
            updated_at=updated_at,
            updated_at_after=updated_at_after,
            updated_at_before=updated_at_before,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors()) from e


@router.get("", response_model=list[TaskDto])
async def list_tasks(
    subject_id: SubjectId,
    tasks: Tasks,
    paging: Paging,
    search: Annotated[TaskSearchFilter, Depends(task_search_filter)],
) -> list[TaskDto]:
    """Search tasks. Unset filter fields match everything."""
    records = await tasks.get_task_page(search, paging.page, paging.size)
    return [TaskDto.from_record(task) for task in records]


@router.get("/{task_id}", response_model=TaskDto)
async def get_task(task_id: UUID, subject_id: SubjectId, tasks: Tasks) -> TaskDto:
    return TaskDto.from_record(await tasks.inspect_task(subject_id, task_id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateTaskResponse)
async def create_task(body: CreateTaskRequest, subject_id: SubjectId, tasks: Tasks) -> CreateTaskResponse:
    task = await tasks.create_task(subject_id, body)
    return CreateTaskResponse.model_validate(task)


@router.patch("", response_model=UpdateTaskResponse)
async def update_task(body: UpdateTaskRequest, subject_id: SubjectId, tasks: Tasks) -> UpdateTaskResponse:
    """Partially update a task.

    The creator may change any field; the executor may only change the status.
    """
    task = await tasks.update_task(subject_id, body)
    return UpdateTaskResponse.model_validate(task)


@router.delete("", response_model=DeleteTaskResponse)
async def delete_task(body: DeleteTaskRequest, subject_id: SubjectId, tasks: Tasks) -> DeleteTaskResponse:
    return DeleteTaskResponse(deleted_task_id=await tasks.delete_task(subject_id, body))


# =============================================================================
# Comments
# =============================================================================


@router.get("/{task_id}/comments", response_model=list[CommentDto])
async def list_comments(
    task_id: UUID,
    subject_id: SubjectId,
    comments: Comments,
    paging: Paging,
) -> list[CommentDto]:
    page = await comments.get_comment_page(subject_id, task_id, paging.page, paging.size)
    return [CommentDto.from_record(comment, author) for comment, author in page]


@router.post("/{task_id}/comments", status_code=status.HTTP_201_CREATED, response_model=CreateCommentResponse)
async def create_comment(
    task_id: UUID,
    body: CreateCommentRequest,
    subject_id: SubjectId,
    comments: Comments,
) -> CreateCommentResponse:
    comment, author = await comments.create_comment(subject_id, task_id, body)
    return CreateCommentResponse.from_record(comment, author)


@router.delete("/{task_id}/comments", response_model=DeleteCommentResponse)
async def delete_comment(
    task_id: UUID,
    body: DeleteCommentRequest,
    subject_id: SubjectId,
    comments: Comments,
) -> DeleteCommentResponse:
    deleted_id = await comments.delete_comment(subject_id, task_id, body)
    return DeleteCommentResponse(deleted_comment_id=deleted_id)
