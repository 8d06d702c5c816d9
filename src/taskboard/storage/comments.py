"""Task comment persistence."""

from uuid import UUID

import aiosqlite

from taskboard.core.errors import NotFoundError
from taskboard.models import CommentRecord, UserRecord
from taskboard.storage.database import Database
from taskboard.storage.users import USER_COLUMNS, user_from_row
from taskboard.utils.timestamps import from_db, to_db

_COLUMNS = "id, task_id, user_id, content, created_at"


def _to_record(row: aiosqlite.Row) -> CommentRecord:
    return CommentRecord(
        id=UUID(row["id"]),
        task_id=UUID(row["task_id"]),
        user_id=UUID(row["user_id"]),
        content=row["content"],
        created_at=from_db(row["created_at"]),
    )


class CommentRepository:
    """Reads and writes ``comments`` rows."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get(self, comment_id: UUID) -> CommentRecord | None:
        row = await self.db.fetch_one(f"SELECT {_COLUMNS} FROM comments WHERE id = ?", (str(comment_id),))
        return _to_record(row) if row else None

    async def list_page_with_authors(
        self,
        task_id: UUID,
        page: int,
        size: int,
    ) -> list[tuple[CommentRecord, UserRecord]]:
        """Page through a task's comments, oldest first, with each author.

        Comments whose author no longer exists are skipped.
        """
        user_columns = ", ".join(f"u.{name.strip()} AS u_{name.strip()}" for name in USER_COLUMNS.split(","))
        rows = await self.db.fetch_all(
            f"""
            SELECT c.id, c.task_id, c.user_id, c.content, c.created_at, {user_columns}
            FROM comments c
            JOIN users u ON u.id = c.user_id
            WHERE c.task_id = ?
            ORDER BY c.created_at, c.id
            LIMIT ? OFFSET ?
            """,
            (str(task_id), size, page * size),
        )
        return [(_to_record(row), user_from_row(row, prefix="u_")) for row in rows]

    async def insert(self, comment: CommentRecord) -> CommentRecord:
        """Store a comment.

        Raises:
            NotFoundError: If the task was removed before the comment landed
        """
        try:
            await self.db.execute(
                f"INSERT INTO comments ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                (
                    str(comment.id),
                    str(comment.task_id),
                    str(comment.user_id),
                    comment.content,
                    to_db(comment.created_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise NotFoundError("Task", "id", comment.task_id) from e
        return comment

    async def delete(self, comment_id: UUID) -> UUID | None:
        count = await self.db.execute("DELETE FROM comments WHERE id = ?", (str(comment_id),))
        return comment_id if count else None

