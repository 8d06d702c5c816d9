"""Base record model and common types."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from taskboard.utils.timestamps import utc_now


class TaskStatus(str, Enum):
    """Task progress status."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    """Task priority levels."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class UserRole(str, Enum):
    """Account role."""

    USER = "USER"
    ADMIN = "ADMIN"


class BaseRecord(BaseModel):
    """Base model shared by all stored records.

    Provides:
    - Unique identification
    - Creation and modification timestamps
    """

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
    )

    id: UUID = Field(default_factory=uuid4, description="Globally unique identifier (UUID v4)")
    created_at: datetime = Field(default_factory=utc_now, description="Creation timestamp (UTC)")
    updated_at: datetime | None = Field(default=None, description="Last modification timestamp (UTC)")
