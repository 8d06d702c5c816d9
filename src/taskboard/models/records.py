"""Stored record types: users, tasks and task comments."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from taskboard.models.base import BaseRecord, TaskPriority, TaskStatus, UserRole
from taskboard.utils.timestamps import utc_now


class UserRecord(BaseRecord):
    """A registered account.

    The account-state flags mirror the checks performed at sign-in:
    a locked, disabled or expired account cannot obtain a token.
    """

    username: str = Field(..., min_length=1, description="Unique sign-in name")
    password_hash: str = Field(..., description="bcrypt hash of the password")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Unique e-mail address")
    role: UserRole = Field(default=UserRole.USER, description="Account role")

    expired: bool = Field(default=False, description="Account has expired")
    locked: bool = Field(default=False, description="Account is locked")
    credentials_expired: bool = Field(default=False, description="Password must be changed")
    enabled: bool = Field(default=True, description="Account is active")


class TaskRecord(BaseRecord):
    """A unit of work owned by its creator and optionally assigned to an executor.

    Creator and executor are weak references to users (by id); deleting a
    user does not cascade to tasks.
    """

    name: str = Field(..., min_length=1, description="Task name, unique per creator")
    description: str = Field(..., description="Task description")
    status: TaskStatus = Field(..., description="Progress status")
    priority: TaskPriority = Field(..., description="Priority level")
    creator_id: UUID = Field(..., description="User who created the task")
    executor_id: UUID | None = Field(default=None, description="User assigned to perform the task")
    expires_on: datetime = Field(..., description="Due date (UTC)")

    def is_related(self, user_id: UUID) -> bool:
        """Whether ``user_id`` is the creator or the executor of this task."""
        return user_id == self.creator_id or (self.executor_id is not None and user_id == self.executor_id)


class CommentRecord(BaseModel):
    """A comment on a task, referencing the task and its author by id."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    task_id: UUID
    user_id: UUID
    content: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utc_now)
