"""Unit tests for partial-update reconciliation."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from taskboard.core.reconciler import is_present, reconcile
from taskboard.models import TaskRecord, UpdateTaskRequest
from tests.fixtures import TaskFactory

TASK_FIELDS = ("name", "description", "status", "priority", "executor_id", "expires_on")


class TestIsPresent:
    """Tests for request value presence."""

    def test_none_is_absent(self) -> None:
        assert not is_present(None)

    def test_blank_string_is_absent(self) -> None:
        assert not is_present("")
        assert not is_present("   ")

    def test_values_are_present(self) -> None:
        assert is_present("x")
        assert is_present(0)
        assert is_present(False)


class TestReconcile:
    """Tests for reconcile()."""

    def test_empty_request_changes_nothing(self) -> None:
        """Omitted fields keep their stored values and no timestamp is set."""
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id)

        result, changed = reconcile(request, task, TASK_FIELDS)

        assert changed == []
        assert result is task
        assert result.updated_at is None

    def test_blank_values_are_ignored(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id, name="   ", description="")

        result, changed = reconcile(request, task, TASK_FIELDS)

        assert changed == []
        assert result.name == task.name
        assert result.description == task.description

    def test_equal_values_are_not_changes(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id, name=task.name, status=task.status)

        _, changed = reconcile(request, task, TASK_FIELDS)

        assert changed == []

    def test_naive_datetime_equal_to_stored_value_is_not_a_change(self) -> None:
        expires = datetime(2030, 12, 5, 12, 40, tzinfo=timezone.utc)
        task = TaskFactory.create(creator_id=uuid4(), expires_on=expires)
        request = UpdateTaskRequest(id=task.id, expires_on=datetime(2030, 12, 5, 12, 40))

        _, changed = reconcile(request, task, TASK_FIELDS)

        assert changed == []

    def test_changed_fields_overwrite(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id, name="Renamed task", status="DONE")

        result, changed = reconcile(request, task, TASK_FIELDS)

        assert sorted(changed) == ["name", "status"]
        assert result.name == "Renamed task"
        assert result.status == "DONE"
        assert result.description == task.description
        assert result.updated_at is not None

    def test_input_record_is_not_mutated(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        original_name = task.name
        request = UpdateTaskRequest(id=task.id, name="Another name")

        result, _ = reconcile(request, task, TASK_FIELDS)

        assert task.name == original_name
        assert task.updated_at is None
        assert result is not task

    def test_updated_at_is_strictly_increasing(self) -> None:
        """A clock behind the previous stamp still yields a later timestamp."""
        previous = datetime(2031, 1, 1, tzinfo=timezone.utc)
        task = TaskFactory.create(creator_id=uuid4(), updated_at=previous)
        request = UpdateTaskRequest(id=task.id, description="New description")

        result, _ = reconcile(request, task, TASK_FIELDS, now=previous - timedelta(hours=1))

        assert result.updated_at > previous

    def test_only_listed_fields_are_considered(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id, name="Ignored name", status="DONE")

        result, changed = reconcile(request, task, ("status",))

        assert changed == ["status"]
        assert result.name == task.name

    def test_result_keeps_record_type(self) -> None:
        task = TaskFactory.create(creator_id=uuid4())
        request = UpdateTaskRequest(id=task.id, priority="HIGH")

        result, _ = reconcile(request, task, TASK_FIELDS)

        assert isinstance(result, TaskRecord)
        assert result.id == task.id
        assert result.created_at == task.created_at
