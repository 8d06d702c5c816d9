"""Task comments."""

from uuid import UUID

from taskboard.core.access import check_comment_author, check_task_related
from taskboard.core.errors import NotFoundError
from taskboard.models import CommentRecord, CreateCommentRequest, DeleteCommentRequest, UserRecord
from taskboard.storage import CommentRepository, TaskRepository, UserRepository
from taskboard.utils.logging import get_logger
from taskboard.utils.metrics import get_metrics
from taskboard.utils.timestamps import utc_now

logger = get_logger(__name__)
metrics = get_metrics()


class CommentService:
    """Lists, adds and removes comments on tasks the subject is related to."""

    def __init__(self, comments: CommentRepository, tasks: TaskRepository, users: UserRepository) -> None:
        self.comments = comments
        self.tasks = tasks
        self.users = users

    async def _related_task(self, subject_id: UUID, task_id: UUID) -> None:
        task = await self.tasks.get(task_id)
        check_task_related(subject_id, task, task_id)

    async def get_comment_page(
        self,
        subject_id: UUID,
        task_id: UUID,
        page: int,
        size: int,
    ) -> list[tuple[CommentRecord, UserRecord]]:
        """Page through a task's comments together with their authors.

        Raises:
            NotFoundError: If the task does not exist
            PermissionDeniedError: If the subject is unrelated to the task
        """
        await self._related_task(subject_id, task_id)
        return await self.comments.list_page_with_authors(task_id, page, size)

    async def create_comment(
        self,
        subject_id: UUID,
        task_id: UUID,
        request: CreateCommentRequest,
    ) -> tuple[CommentRecord, UserRecord]:
        """Add a comment authored by the subject.

        Returns:
            Tuple of (comment, author)

        Raises:
            NotFoundError: If the task or the subject's account does not exist
            PermissionDeniedError: If the subject is unrelated to the task
        """
        await self._related_task(subject_id, task_id)

        author = await self.users.get(subject_id)
        if author is None:
            raise NotFoundError("User", "id", subject_id)

        comment = CommentRecord(
            task_id=task_id,
            user_id=subject_id,
            content=request.content,
            created_at=utc_now(),
        )
        await self.comments.insert(comment)

        metrics.record_entity_operation("comment", "create")
        logger.info("comment_created", comment_id=str(comment.id), task_id=str(task_id))
        return comment, author

    async def delete_comment(self, subject_id: UUID, task_id: UUID, request: DeleteCommentRequest) -> UUID:
        """Remove one of the subject's own comments from a task.

        Raises:
            NotFoundError: If the task or the comment on it does not exist
            PermissionDeniedError: If the subject is unrelated to the task or not the author
        """
        await self._related_task(subject_id, task_id)

        comment = await self.comments.get(request.id)
        check_comment_author(subject_id, comment, task_id, request.id)

        deleted_id = await self.comments.delete(request.id)
        if deleted_id is None:
            raise NotFoundError("Task comment", "id", request.id)

        metrics.record_entity_operation("comment", "delete")
        logger.info("comment_deleted", comment_id=str(deleted_id), task_id=str(task_id))
        return deleted_id
