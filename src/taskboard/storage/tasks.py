"""Task persistence and filtered paging."""

from uuid import UUID

import aiosqlite

from taskboard.core.errors import AlreadyExistsError
from taskboard.models import TaskRecord, TaskSearchFilter
from taskboard.storage.database import Database
from taskboard.storage.filters import build_task_predicate
from taskboard.utils.timestamps import from_db, to_db

_COLUMNS = "id, name, description, status, priority, creator_id, executor_id, expires_on, created_at, updated_at"


def _to_record(row: aiosqlite.Row) -> TaskRecord:
    return TaskRecord(
        id=UUID(row["id"]),
        name=row["name"],
        description=row["description"],
        status=row["status"],
        priority=row["priority"],
        creator_id=UUID(row["creator_id"]),
        executor_id=UUID(row["executor_id"]) if row["executor_id"] else None,
        expires_on=from_db(row["expires_on"]),
        created_at=from_db(row["created_at"]),
        updated_at=from_db(row["updated_at"]),
    )


def _params(task: TaskRecord) -> tuple:
    return (
        task.name,
        task.description,
        task.status,
        task.priority,
        str(task.creator_id),
        str(task.executor_id) if task.executor_id else None,
        to_db(task.expires_on),
    )


class TaskRepository:
    """Reads and writes ``tasks`` rows."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get(self, task_id: UUID) -> TaskRecord | None:
        row = await self.db.fetch_one(f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (str(task_id),))
        return _to_record(row) if row else None

    async def exists_by_creator_and_name(
        self,
        creator_id: UUID,
        name: str,
        exclude_id: UUID | None = None,
    ) -> bool:
        """Whether ``creator_id`` already owns a task called ``name``.

        Args:
            creator_id: Owner to scope the check to
            name: Task name
            exclude_id: Task to ignore (the one being renamed)
        """
        sql = "SELECT 1 FROM tasks WHERE creator_id = ? AND name = ?"
        params: list[str] = [str(creator_id), name]
        if exclude_id is not None:
            sql += " AND id != ?"
            params.append(str(exclude_id))
        return await self.db.fetch_value(sql, params) is not None

    async def find_page(self, search: TaskSearchFilter | None, page: int, size: int) -> list[TaskRecord]:
        predicate = build_task_predicate(search)
        rows = await self.db.fetch_all(
            f"SELECT {_COLUMNS} FROM tasks WHERE {predicate.sql} ORDER BY created_at, id LIMIT ? OFFSET ?",
            predicate.params + (size, page * size),
        )
        return [_to_record(row) for row in rows]

    async def insert(self, task: TaskRecord) -> TaskRecord:
        """Insert a new task.

        Raises:
            AlreadyExistsError: If the creator already has a task with this name
        """
        try:
            await self.db.execute(
                f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (str(task.id), *_params(task), to_db(task.created_at), to_db(task.updated_at)),
            )
        except aiosqlite.IntegrityError as e:
            raise AlreadyExistsError("Task", [("name", task.name), ("creator id", task.creator_id)]) from e
        return task

    async def update(self, task: TaskRecord) -> TaskRecord:
        try:
            await self.db.execute(
                """
                UPDATE tasks
                SET name = ?, description = ?, status = ?, priority = ?, creator_id = ?,
                    executor_id = ?, expires_on = ?, updated_at = ?
                WHERE id = ?
                """,
                (*_params(task), to_db(task.updated_at), str(task.id)),
            )
        except aiosqlite.IntegrityError as e:
            raise AlreadyExistsError("Task", [("name", task.name), ("creator id", task.creator_id)]) from e
        return task

    async def delete(self, task_id: UUID) -> UUID | None:
        count = await self.db.execute("DELETE FROM tasks WHERE id = ?", (str(task_id),))
        return task_id if count else None
