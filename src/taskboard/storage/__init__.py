"""SQLite storage layer."""

from taskboard.storage.comments import CommentRepository
from taskboard.storage.database import Database
from taskboard.storage.filters import Predicate, build_task_predicate
from taskboard.storage.tasks import TaskRepository
from taskboard.storage.users import UserRepository

__all__ = [
    "CommentRepository",
    "Database",
    "Predicate",
    "TaskRepository",
    "UserRepository",
    "build_task_predicate",
]
