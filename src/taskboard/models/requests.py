"""Request payloads accepted by the HTTP API.

Field patterns follow the account and task naming rules; validators only
inspect values that are present so partial-update payloads can omit
anything they do not change.
"""

import re
from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from taskboard.utils.timestamps import ensure_utc

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]([._-](?![._-])|[a-zA-Z0-9]){3,18}[a-zA-Z0-9]$")
PASSWORD_PATTERN = re.compile(r"^(?=.*\d)(?=.*[A-Z])(?=.*[a-z])(?=.*[^\w\d\s:])([^\s]){8,16}$")
PERSON_NAME_PATTERN = re.compile(r"[a-zA-Z\s].{2,50}")
EMAIL_PATTERN = re.compile(
    r"^(?=.{1,64}@)[A-Za-z0-9_-]+(\.[A-Za-z0-9_-]+)*@[^-][A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*(\.[A-Za-z]{2,})$"
)
TASK_NAME_PATTERN = re.compile(r"[a-zA-Z\s].{2,100}")

USERNAME_RULES = (
    "Username can contain only alphanumeric characters (a-zA-Z0-9), dots(.), underscores(_) and hyphen (-). "
    "The dot, underscore or hyphen must not be the first or last character and must not appear consecutively. "
    "Username length must be between 5 to 20."
)
PASSWORD_RULES = (
    "Password must contain 1 number (0-9), 1 uppercase letter, 1 lowercase letter "
    "and 1 non-alpha numeric character. Password is 8-16 characters with no space."
)
PERSON_NAME_RULES = "Name can contain only letters a-z,A-Z. Name length must be between 2 to 50."
EMAIL_RULES = (
    "Email may contain digits, letters, underscore, hyphen and dot. "
    "Email may not contain dots at the start and end of local part or consecutive dots. "
    "Email may contain max 64 characters before @."
)
TASK_NAME_RULES = "Name can contain only letters a-z,A-Z. Name length must be between 2 to 100."


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _require_match(pattern: re.Pattern[str], value: str, rules: str) -> str:
    matched = pattern.fullmatch(value)
    if not matched:
        raise ValueError(rules)
    return value


def _as_utc(value: datetime) -> datetime:
    try:
        return ensure_utc(value)
    except OverflowError as e:
        raise ValueError("Date is out of range") from e


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class RequestModel(BaseModel):
    """Base for request payloads: unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# Authentication
# =============================================================================


class AuthenticationRequest(RequestModel):
    username: str = Field(..., min_length=1, description="Sign-in name", examples=["myusername"])
    password: str = Field(..., min_length=1, description="Password", examples=["Mypass123!"])

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if _is_blank(v):
            raise ValueError("cannot be blank")
        return v


class RegistrationRequest(RequestModel):
    """Sign-up payload for a new account."""

    username: str = Field(..., description="Sign-in name", examples=["myusername"])
    password: str = Field(..., description="Password", examples=["Mypass123!"])
    name: str = Field(..., description="Display name", examples=["Myname"])
    email: str = Field(..., description="E-mail address", examples=["myemail@domain.com"])

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return _require_match(USERNAME_PATTERN, v, USERNAME_RULES)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return _require_match(PASSWORD_PATTERN, v, PASSWORD_RULES)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_match(PERSON_NAME_PATTERN, v, PERSON_NAME_RULES)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _require_match(EMAIL_PATTERN, v, EMAIL_RULES)


# =============================================================================
# Users
# =============================================================================


class UpdateUserRequest(RequestModel):
    """Partial update of the caller's own account.

    Omitted or blank fields are left unchanged.
    """

    id: UUID = Field(..., description="Id of the account to update")
    username: str | None = None
    password: str | None = None
    name: str | None = None
    email: str | None = None

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        return v if _is_blank(v) else _require_match(USERNAME_PATTERN, v, USERNAME_RULES)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str | None) -> str | None:
        return v if _is_blank(v) else _require_match(PASSWORD_PATTERN, v, PASSWORD_RULES)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return v if _is_blank(v) else _require_match(PERSON_NAME_PATTERN, v, PERSON_NAME_RULES)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return v if _is_blank(v) else _require_match(EMAIL_PATTERN, v, EMAIL_RULES)


class DeleteUserRequest(RequestModel):
    """Self-delete; the password is re-verified before anything is removed."""

    id: UUID
    password: str = Field(..., min_length=1)


# =============================================================================
# Tasks
# =============================================================================


class CreateTaskRequest(RequestModel):
    """New task payload. ``status`` and ``priority`` are matched case-insensitively."""

    name: str = Field(..., description="Task name", examples=["Task name"])
    description: str = Field(..., min_length=1, description="Task description")
    status: str = Field(..., description="PENDING, IN_PROGRESS or DONE", examples=["PENDING"])
    priority: str = Field(..., description="HIGH, MEDIUM or LOW", examples=["MEDIUM"])
    executor_id: UUID | None = Field(default=None, description="Assigned user")
    expires_on: UtcDatetime = Field(..., description="Due date", examples=["2030-12-05T12:40:00"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _require_match(TASK_NAME_PATTERN, v, TASK_NAME_RULES)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if _is_blank(v):
            raise ValueError("Description cannot be blank")
        return v


class UpdateTaskRequest(RequestModel):
    """Partial task update. Omitted or blank fields are left unchanged."""

    id: UUID = Field(..., description="Id of the task to update")
    name: str | None = None
    description: str | None = None
    status: str | None = None
    priority: str | None = None
    executor_id: UUID | None = None
    expires_on: UtcDatetime | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return v if _is_blank(v) else _require_match(TASK_NAME_PATTERN, v, TASK_NAME_RULES)


class DeleteTaskRequest(RequestModel):
    id: UUID


# =============================================================================
# Comments
# =============================================================================


class CreateCommentRequest(RequestModel):
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if _is_blank(v):
            raise ValueError("Content cannot be blank")
        return v


class DeleteCommentRequest(RequestModel):
    id: UUID


# =============================================================================
# Search
# =============================================================================


class TaskSearchFilter(BaseModel):
    """Optional criteria for listing tasks; unset criteria match everything."""

    id: UUID | None = None
    name: str | None = Field(default=None, description="Exact or partial name")
    description: str | None = None
    status: str | None = Field(default=None, description="Case-insensitive; unknown values are ignored")
    priority: str | None = Field(default=None, description="Case-insensitive; unknown values are ignored")
    creator_id: UUID | None = None
    executor_id: UUID | None = None
    created_at: UtcDatetime | None = None
    created_at_after: UtcDatetime | None = None
    created_at_before: UtcDatetime | None = None
    expires_on: UtcDatetime | None = None
    expires_on_after: UtcDatetime | None = None
    expires_on_before: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None
    updated_at_after: UtcDatetime | None = None
    updated_at_before: UtcDatetime | None = None
