"""End-to-end tests of the REST API over a real database."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
from fastapi.testclient import TestClient

from taskboard.api.dependencies import MAX_PAGE
from taskboard.security.tokens import ALGORITHM
from tests.fixtures import API, DEFAULT_PASSWORD, TEST_SECRET, TaskFactory, UserFactory


def new_task(**overrides) -> dict:
    return TaskFactory.request(**overrides).model_dump(mode="json")


class TestAuthApi:
    """Tests for /auth endpoints."""

    def test_sign_up_response(self, client: TestClient) -> None:
        registration = UserFactory.registration().model_dump()

        response = client.post(f"{API}/auth/sign-up", json=registration)

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == registration["username"]
        assert body["password"] == "[PROTECTED]"
        assert body["role"] == "USER"
        assert body["enabled"] is True
        assert body["updated_at"] is None
        assert DEFAULT_PASSWORD not in response.text

    def test_duplicate_sign_up(self, client: TestClient) -> None:
        registration = UserFactory.registration().model_dump()
        client.post(f"{API}/auth/sign-up", json=registration)

        response = client.post(f"{API}/auth/sign-up", json=registration)

        assert response.status_code == 409
        assert response.json()["error"] == "AlreadyExistsError"
        assert response.json()["message"] == f"User with username {registration['username']} already exists"

    def test_sign_up_validation(self, client: TestClient) -> None:
        registration = UserFactory.registration().model_dump() | {"password": "weak"}

        response = client.post(f"{API}/auth/sign-up", json=registration)

        assert response.status_code == 400
        assert response.json()["message"].startswith("[password:Password must contain")

    def test_sign_in_wrong_password(self, client: TestClient, api_users) -> None:
        (user,) = api_users(1)

        response = client.post(
            f"{API}/auth/sign-in",
            json={"username": user.account["username"], "password": "Wrongpass1!"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "BadCredentialsError"

    def test_expired_token(self, client: TestClient, api_users) -> None:
        (user,) = api_users(1)
        past = datetime.now(timezone.utc) - timedelta(days=2)
        token = jwt.encode(
            {"sub": user.account["username"], "userId": str(user.id), "iat": past, "exp": past + timedelta(hours=1)},
            TEST_SECRET,
            algorithm=ALGORITHM,
        )

        response = client.get(f"{API}/users", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["error"] == "TokenExpiredError"


class TestTaskApi:
    """Tests for /tasks endpoints."""

    def test_create_and_inspect(self, api_users) -> None:
        creator, executor, stranger = api_users(3)

        created = creator.post("/tasks", new_task(status="pending", priority="high", executor_id=str(executor.id)))

        assert created.status_code == 201
        task = created.json()
        assert task["status"] == "PENDING"
        assert task["priority"] == "HIGH"
        assert task["creator_id"] == str(creator.id)
        assert task["expires_on"] == "2030/12/05 12:40:00"
        assert "timestamp" in task

        assert creator.get(f"/tasks/{task['id']}").status_code == 200
        assert executor.get(f"/tasks/{task['id']}").json()["name"] == task["name"]
        assert stranger.get(f"/tasks/{task['id']}").status_code == 403
        assert creator.get(f"/tasks/{uuid4()}").status_code == 404

    def test_invalid_status_value(self, api_users) -> None:
        (creator,) = api_users(1)

        response = creator.post("/tasks", new_task(status="someday"))

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidValueSelectionError"

    def test_unknown_executor(self, api_users) -> None:
        (creator,) = api_users(1)

        response = creator.post("/tasks", new_task(executor_id=str(uuid4())))

        assert response.status_code == 404

    def test_duplicate_name_for_same_creator(self, api_users) -> None:
        first, second = api_users(2)
        first.post("/tasks", new_task(name="Release notes"))

        assert first.post("/tasks", new_task(name="Release notes")).status_code == 409
        assert second.post("/tasks", new_task(name="Release notes")).status_code == 201

    def test_search(self, api_users) -> None:
        creator, executor = api_users(2)
        creator.post("/tasks", new_task(name="Fix login bug", priority="high", executor_id=str(executor.id)))
        creator.post("/tasks", new_task(name="Write changelog", priority="low"))

        by_name = creator.get("/tasks", params={"name": "login"}).json()
        by_priority = creator.get("/tasks", params={"priority": "LOW", "creator_id": str(creator.id)}).json()
        by_executor = creator.get("/tasks", params={"executor_id": str(executor.id)}).json()
        ignored = creator.get("/tasks", params={"status": "nonsense"}).json()

        assert [t["name"] for t in by_name] == ["Fix login bug"]
        assert [t["name"] for t in by_priority] == ["Write changelog"]
        assert [t["name"] for t in by_executor] == ["Fix login bug"]
        assert len(ignored) == 2

    def test_paging(self, api_users) -> None:
        (creator,) = api_users(1)
        for _ in range(7):
            creator.post("/tasks", new_task())

        assert len(creator.get("/tasks").json()) == 5
        assert len(creator.get("/tasks", params={"page": 1}).json()) == 2
        assert len(creator.get("/tasks", params={"size": 3, "page": 2}).json()) == 1
        assert len(creator.get("/tasks", params={"size": 1000}).json()) == 7
        assert creator.get("/tasks", params={"page": -1}).status_code == 400
        assert creator.get("/tasks", params={"size": 0}).status_code == 400

    def test_page_index_is_bounded(self, api_users) -> None:
        (creator,) = api_users(1)
        creator.post("/tasks", new_task())

        last = creator.get("/tasks", params={"page": MAX_PAGE, "size": 1000})
        too_far = creator.get("/tasks", params={"page": 10**19})

        assert last.status_code == 200
        assert last.json() == []
        assert too_far.status_code == 400
        assert too_far.json()["message"].startswith("[page:")
        assert creator.get(f"/tasks/{uuid4()}/comments", params={"page": MAX_PAGE + 1}).status_code == 400

    def test_early_due_date_keeps_listing_working(self, api_users) -> None:
        creator, other = api_users(2)

        created = creator.post("/tasks", new_task() | {"expires_on": "0999-01-01T00:00:00"})

        assert created.status_code == 201
        assert created.json()["expires_on"] == "0999/01/01 00:00:00"
        for user in (creator, other):
            listed = user.get("/tasks")
            assert listed.status_code == 200
            assert [t["id"] for t in listed.json()] == [created.json()["id"]]

    def test_due_date_outside_utc_range(self, api_users) -> None:
        (creator,) = api_users(1)
        too_early = "0001-01-01T00:00:00+01:00"

        created = creator.post("/tasks", new_task() | {"expires_on": too_early})
        searched = creator.get("/tasks", params={"expires_on_after": too_early})

        assert created.status_code == 400
        assert created.json()["message"] == "[expires_on:Date is out of range]"
        assert searched.status_code == 400
        assert searched.json()["message"] == "[expires_on_after:Date is out of range]"

    def test_executor_update_is_limited_to_status(self, api_users) -> None:
        creator, executor = api_users(2)
        task = creator.post("/tasks", new_task(executor_id=str(executor.id))).json()

        response = executor.patch("/tasks", {"id": task["id"], "name": "Taken over", "status": "in_progress"})

        assert response.status_code == 200
        assert response.json()["status"] == "IN_PROGRESS"
        assert response.json()["name"] == task["name"]
        assert response.json()["updated_at"] is not None

    def test_creator_update(self, api_users) -> None:
        (creator,) = api_users(1)
        task = creator.post("/tasks", new_task()).json()

        response = creator.patch("/tasks", {"id": task["id"], "description": "More detail", "priority": "low"})

        assert response.status_code == 200
        assert response.json()["description"] == "More detail"
        assert response.json()["priority"] == "LOW"

    def test_delete(self, api_users) -> None:
        creator, executor = api_users(2)
        task = creator.post("/tasks", new_task(executor_id=str(executor.id))).json()

        denied = executor.delete("/tasks", {"id": task["id"]})
        deleted = creator.delete("/tasks", {"id": task["id"]})

        assert denied.status_code == 403
        assert denied.json()["message"] == "User is not task creator"
        assert deleted.status_code == 200
        assert deleted.json()["deleted_task_id"] == task["id"]
        assert creator.get(f"/tasks/{task['id']}").status_code == 404


class TestCommentApi:
    """Tests for /tasks/{id}/comments endpoints."""

    def test_comment_round(self, api_users) -> None:
        creator, executor, stranger = api_users(3)
        task = creator.post("/tasks", new_task(executor_id=str(executor.id))).json()
        path = f"/tasks/{task['id']}/comments"

        posted = executor.post(path, {"content": "On it"})

        assert posted.status_code == 201
        comment = posted.json()
        assert comment["user"]["id"] == str(executor.id)
        assert comment["task_id"] == task["id"]

        listed = creator.get(path)
        assert listed.status_code == 200
        assert [c["content"] for c in listed.json()] == ["On it"]

        assert stranger.get(path).status_code == 403
        assert stranger.post(path, {"content": "Hi"}).status_code == 403
        assert creator.delete(path, {"id": comment["id"]}).status_code == 403

        removed = executor.delete(path, {"id": comment["id"]})
        assert removed.status_code == 200
        assert removed.json()["deleted_comment_id"] == comment["id"]
        assert creator.get(path).json() == []

    def test_blank_comment_rejected(self, api_users) -> None:
        (creator,) = api_users(1)
        task = creator.post("/tasks", new_task()).json()

        response = creator.post(f"/tasks/{task['id']}/comments", {"content": "  "})

        assert response.status_code == 400

    def test_comments_on_missing_task(self, api_users) -> None:
        (user,) = api_users(1)

        assert user.get(f"/tasks/{uuid4()}/comments").status_code == 404


class TestUserApi:
    """Tests for /users endpoints."""

    def test_list_and_get(self, api_users) -> None:
        first, second = api_users(2)

        listed = first.get("/users").json()
        fetched = first.get(f"/users/{second.id}")

        assert {u["id"] for u in listed} == {str(first.id), str(second.id)}
        assert all("password" not in u for u in listed)
        assert fetched.status_code == 200
        assert fetched.json()["username"] == second.account["username"]
        assert first.get(f"/users/{uuid4()}").status_code == 404

    def test_update_self_only(self, api_users) -> None:
        first, second = api_users(2)

        own = first.patch("/users", {"id": str(first.id), "name": "Renamed Person"})
        other = first.patch("/users", {"id": str(second.id), "name": "Renamed Person"})

        assert own.status_code == 200
        assert own.json()["name"] == "Renamed Person"
        assert own.json()["password"] == "[PROTECTED]"
        assert other.status_code == 403

    def test_delete_account(self, client: TestClient, api_users) -> None:
        (user,) = api_users(1)

        wrong = user.delete("/users", {"id": str(user.id), "password": "Wrongpass1!"})
        deleted = user.delete("/users", {"id": str(user.id), "password": DEFAULT_PASSWORD})
        again = user.delete("/users", {"id": str(user.id), "password": DEFAULT_PASSWORD})

        assert wrong.status_code == 403
        assert deleted.status_code == 200
        assert deleted.json()["deleted_user_id"] == str(user.id)
        assert again.status_code == 404
        signed_in = client.post(
            f"{API}/auth/sign-in",
            json={"username": user.account["username"], "password": DEFAULT_PASSWORD},
        )
        assert signed_in.status_code == 403
