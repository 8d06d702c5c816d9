"""User persistence."""

from uuid import UUID

import aiosqlite

from taskboard.core.errors import AlreadyExistsError
from taskboard.models import UserRecord
from taskboard.storage.database import Database
from taskboard.utils.timestamps import from_db, to_db

USER_COLUMNS = (
    "id, username, password_hash, name, email, role, expired, locked, "
    "credentials_expired, enabled, created_at, updated_at"
)


def user_from_row(row: aiosqlite.Row, prefix: str = "") -> UserRecord:
    """Build a user from a row whose columns may carry a join prefix."""
    return UserRecord(
        id=UUID(row[f"{prefix}id"]),
        username=row[f"{prefix}username"],
        password_hash=row[f"{prefix}password_hash"],
        name=row[f"{prefix}name"],
        email=row[f"{prefix}email"],
        role=row[f"{prefix}role"],
        expired=bool(row[f"{prefix}expired"]),
        locked=bool(row[f"{prefix}locked"]),
        credentials_expired=bool(row[f"{prefix}credentials_expired"]),
        enabled=bool(row[f"{prefix}enabled"]),
        created_at=from_db(row[f"{prefix}created_at"]),
        updated_at=from_db(row[f"{prefix}updated_at"]),
    )


def _unique_violation(user: UserRecord, error: aiosqlite.IntegrityError) -> AlreadyExistsError:
    if "email" in str(error):
        return AlreadyExistsError("User", [("email", user.email)])
    return AlreadyExistsError("User", [("username", user.username)])


class UserRepository:
    """Reads and writes ``users`` rows."""

    def __init__(self, database: Database) -> None:
        self.db = database

    async def get(self, user_id: UUID) -> UserRecord | None:
        row = await self.db.fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (str(user_id),))
        return user_from_row(row) if row else None

    async def get_by_username(self, username: str) -> UserRecord | None:
        row = await self.db.fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE username = ?", (username,))
        return user_from_row(row) if row else None

    async def exists(self, user_id: UUID) -> bool:
        value = await self.db.fetch_value("SELECT 1 FROM users WHERE id = ?", (str(user_id),))
        return value is not None

    async def exists_by_username(self, username: str, exclude_id: UUID | None = None) -> bool:
        """Whether a user holds ``username``, optionally ignoring one user."""
        sql = "SELECT 1 FROM users WHERE username = ?"
        params: list[str] = [username]
        if exclude_id is not None:
            sql += " AND id != ?"
            params.append(str(exclude_id))
        return await self.db.fetch_value(sql, params) is not None

    async def exists_by_email(self, email: str, exclude_id: UUID | None = None) -> bool:
        sql = "SELECT 1 FROM users WHERE email = ?"
        params: list[str] = [email]
        if exclude_id is not None:
            sql += " AND id != ?"
            params.append(str(exclude_id))
        return await self.db.fetch_value(sql, params) is not None

    async def list_page(self, page: int, size: int) -> list[UserRecord]:
        rows = await self.db.fetch_all(
            f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at, id LIMIT ? OFFSET ?",
            (size, page * size),
        )
        return [user_from_row(row) for row in rows]

    async def insert(self, user: UserRecord) -> UserRecord:
        """Insert a new user.

        Raises:
            AlreadyExistsError: If the username or email is already taken
        """
        try:
            await self.db.execute(
                f"INSERT INTO users ({USER_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    str(user.id),
                    user.username,
                    user.password_hash,
                    user.name,
                    user.email,
                    user.role,
                    int(user.expired),
                    int(user.locked),
                    int(user.credentials_expired),
                    int(user.enabled),
                    to_db(user.created_at),
                    to_db(user.updated_at),
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise _unique_violation(user, e) from e
        return user

    async def update(self, user: UserRecord) -> UserRecord:
        try:
            await self.db.execute(
                """
                UPDATE users
                SET username = ?, password_hash = ?, name = ?, email = ?, role = ?,
                    expired = ?, locked = ?, credentials_expired = ?, enabled = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    user.username,
                    user.password_hash,
                    user.name,
                    user.email,
                    user.role,
                    int(user.expired),
                    int(user.locked),
                    int(user.credentials_expired),
                    int(user.enabled),
                    to_db(user.updated_at),
                    str(user.id),
                ),
            )
        except aiosqlite.IntegrityError as e:
            raise _unique_violation(user, e) from e
        return user

    async def delete(self, user_id: UUID) -> UUID | None:
        """Delete a user, returning its id if a row was removed."""
        count = await self.db.execute("DELETE FROM users WHERE id = ?", (str(user_id),))
        return user_id if count else None
