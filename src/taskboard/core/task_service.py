"""Task lifecycle management."""

from uuid import UUID

from taskboard.core.access import (
    EXECUTOR_FIELDS,
    CreatorTaskUpdate,
    ExecutorTaskUpdate,
    authorize_task_update,
    check_task_creator,
    check_task_related,
    coerce_task_enums,
)
from taskboard.core.errors import AlreadyExistsError, NotFoundError
from taskboard.core.reconciler import reconcile
from taskboard.models import (
    CreateTaskRequest,
    DeleteTaskRequest,
    TaskRecord,
    TaskSearchFilter,
    UpdateTaskRequest,
)
from taskboard.storage import TaskRepository, UserRepository
from taskboard.utils.logging import get_logger
from taskboard.utils.metrics import get_metrics
from taskboard.utils.timestamps import ensure_utc, utc_now

logger = get_logger(__name__)
metrics = get_metrics()

CREATOR_FIELDS = ("name", "description", "status", "priority", "executor_id", "expires_on")


class TaskService:
    """Creates, updates, deletes and searches tasks.

    Every mutating call takes the authenticated subject's id explicitly.
    """

    def __init__(self, tasks: TaskRepository, users: UserRepository) -> None:
        self.tasks = tasks
        self.users = users

    async def get_task(self, task_id: UUID) -> TaskRecord:
        """Load a task by id.

        Raises:
            NotFoundError: If the task does not exist
        """
        task = await self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task", "id", task_id)
        return task

    async def inspect_task(self, subject_id: UUID, task_id: UUID) -> TaskRecord:
        """Load a task the subject created or is assigned to.

        Raises:
            NotFoundError: If the task does not exist
            PermissionDeniedError: If the subject is unrelated to the task
        """
        return check_task_related(subject_id, await self.tasks.get(task_id), task_id)

    async def get_task_page(self, search: TaskSearchFilter | None, page: int, size: int) -> list[TaskRecord]:
        return await self.tasks.find_page(search, page, size)

    async def create_task(self, subject_id: UUID, request: CreateTaskRequest) -> TaskRecord:
        """Create a task owned by ``subject_id``.

        Args:
            subject_id: Authenticated user, recorded as the creator
            request: Validated create payload

        Returns:
            The stored task

        Raises:
            InvalidValueSelectionError: If status or priority is not recognized
            NotFoundError: If the named executor does not exist
            AlreadyExistsError: If the creator already has a task with this name
        """
        request = coerce_task_enums(request)
        await self._require_executor(request.executor_id)

        if await self.tasks.exists_by_creator_and_name(subject_id, request.name):
            metrics.record_entity_operation("task", "create", "conflict")
            raise AlreadyExistsError("Task", [("name", request.name), ("creator id", subject_id)])

        task = TaskRecord(
            name=request.name,
            description=request.description,
            status=request.status,
            priority=request.priority,
            creator_id=subject_id,
            executor_id=request.executor_id,
            expires_on=ensure_utc(request.expires_on),
            created_at=utc_now(),
        )
        await self.tasks.insert(task)

        metrics.record_entity_operation("task", "create")
        logger.info("task_created", task_id=str(task.id), creator_id=str(subject_id))
        return task

    async def update_task(self, subject_id: UUID, request: UpdateTaskRequest) -> TaskRecord:
        """Apply a partial update on behalf of the creator or the executor.

        The executor may only change the status; anything else in an
        executor's request is dropped. Nothing is written when no field
        actually changes.

        Raises:
            NotFoundError: If the task or the new executor does not exist
            PermissionDeniedError: If the subject is unrelated to the task
            InvalidValueSelectionError: If status or priority is not recognized
            AlreadyExistsError: If the new name is taken by another of the creator's tasks
        """
        task = await self.get_task(request.id)
        request = coerce_task_enums(request)

        match authorize_task_update(subject_id, task, request):
            case CreatorTaskUpdate(request=allowed):
                await self._require_executor(allowed.executor_id)
                await self._require_unique_name(task, allowed.name)
                fields = CREATOR_FIELDS
            case ExecutorTaskUpdate(request=allowed):
                fields = EXECUTOR_FIELDS

        updated, changed = reconcile(allowed, task, fields)
        if not changed:
            logger.debug("task_update_noop", task_id=str(task.id))
            return task

        await self.tasks.update(updated)
        metrics.record_entity_operation("task", "update")
        logger.info("task_updated", task_id=str(task.id), changed=changed)
        return updated

    async def delete_task(self, subject_id: UUID, request: DeleteTaskRequest) -> UUID:
        """Delete a task owned by ``subject_id``.

        Returns:
            The deleted task's id

        Raises:
            NotFoundError: If the task does not exist
            PermissionDeniedError: If the subject is not the creator
        """
        task = await self.get_task(request.id)
        check_task_creator(subject_id, task)

        deleted_id = await self.tasks.delete(task.id)
        if deleted_id is None:
            raise NotFoundError("Task", "id", request.id)

        metrics.record_entity_operation("task", "delete")
        logger.info("task_deleted", task_id=str(deleted_id))
        return deleted_id

    async def _require_executor(self, executor_id: UUID | None) -> None:
        if executor_id is not None and not await self.users.exists(executor_id):
            raise NotFoundError("User(executor)", "id", executor_id)

    async def _require_unique_name(self, task: TaskRecord, name: str | None) -> None:
        if name is None or not name.strip() or name == task.name:
            return
        if await self.tasks.exists_by_creator_and_name(task.creator_id, name, exclude_id=task.id):
            metrics.record_entity_operation("task", "update", "conflict")
            raise AlreadyExistsError("Task", [("name", name), ("creator id", task.creator_id)])
