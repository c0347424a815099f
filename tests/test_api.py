"""HTTP-level tests for the Taskboard API."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from taskboard.main import create_app
from taskboard.services import TaskService

from .helpers import bearer, register


@pytest.fixture
def alice_headers(client):
    return bearer(register(client, "Alice", "alice@example.com")["token"])


@pytest.fixture
def bob_headers(client):
    return bearer(register(client, "Bob", "bob@example.com")["token"])


def _create(client, headers, **fields):
    response = client.post("/api/tasks", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthentication:
    """Every task route requires a bearer credential."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/api/tasks"),
            ("post", "/api/tasks"),
            ("get", "/api/tasks/dashboard"),
            ("get", "/api/tasks/some-id"),
            ("put", "/api/tasks/some-id"),
            ("delete", "/api/tasks/some-id"),
            ("get", "/api/auth/me"),
        ],
    )
    def test_missing_credential(self, client, method, path):
        response = client.request(method, path)
        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized"}

    def test_invalid_credential(self, client):
        response = client.get("/api/tasks", headers=bearer("garbage"))
        assert response.status_code == 401
        assert response.json() == {"message": "Not authorized"}

    def test_credential_checked_before_body(self, client):
        response = client.post(
            "/api/tasks",
            content=b"{not json",
            headers={"Content-Type": "application/json", **bearer("garbage")},
        )
        assert response.status_code == 401

    def test_credential_checked_before_validation(self, client):
        response = client.post("/api/tasks", json={"title": ""})
        assert response.status_code == 401

    def test_register_login_me(self, client):
        registered = register(client, "Alice", "Alice@Example.com")
        assert set(registered) == {"id", "name", "email", "role", "token"}
        assert registered["email"] == "alice@example.com"

        login = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "secret123"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        me = client.get("/api/auth/me", headers=bearer(token))
        assert me.status_code == 200
        assert me.json() == {
            "id": registered["id"],
            "name": "Alice",
            "email": "alice@example.com",
            "role": "user",
        }

    def test_bad_login(self, client):
        register(client, "Alice", "alice@example.com")
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "nope-nope"}
        )
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid email or password"}

    def test_register_validation(self, client):
        response = client.post(
            "/api/auth/register", json={"name": "", "email": "not-an-email", "password": "123"}
        )
        assert response.status_code == 400
        assert {e["field"] for e in response.json()["errors"]} == {"name", "email", "password"}

    def test_duplicate_registration(self, client):
        register(client, "Alice", "alice@example.com")
        response = client.post(
            "/api/auth/register",
            json={"name": "Again", "email": "alice@example.com", "password": "secret123"},
        )
        assert response.status_code == 400
        assert response.json() == {"message": "User already exists"}


class TestTaskRoutes:
    """Status codes and wire shapes."""

    def test_create_returns_camel_case_task(self, client, alice_headers):
        task = _create(client, alice_headers, title="Write report", dueDate="2024-12-31")
        assert task["title"] == "Write report"
        assert task["status"] == "pending"
        assert task["priority"] == "medium"
        assert task["dueDate"] == "2024-12-31"
        assert task["description"] is None
        assert {"id", "owner", "createdAt", "updatedAt"} <= set(task)

    def test_create_validation_error(self, client, alice_headers):
        response = client.post("/api/tasks", json={"status": "bogus"}, headers=alice_headers)
        assert response.status_code == 400
        body = response.json()
        assert body["errors"] == [
            {"field": "title", "msg": "Title is required"},
            {"field": "status", "msg": "Invalid status"},
        ]
        assert body["message"] == "Title is required, Invalid status"

    def test_malformed_json(self, client, alice_headers):
        response = client.post(
            "/api/tasks",
            content=b"{not json",
            headers={"Content-Type": "application/json", **alice_headers},
        )
        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "body", "msg": "Malformed JSON body"}]

    def test_get_update_delete(self, client, alice_headers):
        task = _create(client, alice_headers, title="Write report", description="Q3")

        response = client.get(f"/api/tasks/{task['id']}", headers=alice_headers)
        assert response.status_code == 200
        assert response.json() == task

        response = client.put(
            f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=alice_headers
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["status"] == "completed"
        assert updated["title"] == "Write report"
        assert updated["description"] == "Q3"

        response = client.delete(f"/api/tasks/{task['id']}", headers=alice_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Task removed"}

        response = client.delete(f"/api/tasks/{task['id']}", headers=alice_headers)
        assert response.status_code == 404
        assert response.json() == {"message": "Task not found"}

    def test_update_validation_error(self, client, alice_headers):
        task = _create(client, alice_headers, title="Keep me")
        response = client.put(
            f"/api/tasks/{task['id']}", json={"title": ""}, headers=alice_headers
        )
        assert response.status_code == 400
        assert response.json()["errors"] == [{"field": "title", "msg": "Title cannot be empty"}]

    def test_clear_due_date(self, client, alice_headers):
        task = _create(client, alice_headers, title="Dated", dueDate="2024-12-31")
        response = client.put(
            f"/api/tasks/{task['id']}", json={"dueDate": None}, headers=alice_headers
        )
        assert response.status_code == 200
        assert response.json()["dueDate"] is None
        assert response.json()["title"] == "Dated"

    def test_other_users_task_is_not_found(self, client, alice_headers, bob_headers):
        task = _create(client, alice_headers, title="Private")
        for method, kwargs in (("get", {}), ("put", {"json": {"title": "x"}}), ("delete", {})):
            foreign = client.request(
                method, f"/api/tasks/{task['id']}", headers=bob_headers, **kwargs
            )
            missing = client.request(
                method, "/api/tasks/does-not-exist", headers=bob_headers, **kwargs
            )
            assert foreign.status_code == missing.status_code == 404
            assert foreign.json() == missing.json() == {"message": "Task not found"}

        assert client.get(f"/api/tasks/{task['id']}", headers=alice_headers).status_code == 200

    def test_list_with_query_parameters(self, client, alice_headers, bob_headers):
        _create(client, alice_headers, title="Buy Milk")
        _create(client, alice_headers, title="Milk the cow", status="in_progress")
        _create(client, alice_headers, title="Walk dog")
        _create(client, bob_headers, title="Bob's milk")

        response = client.get(
            "/api/tasks",
            params={"search": "MILK", "status": "pending", "page": "1", "limit": "8"},
            headers=alice_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert [t["title"] for t in body["tasks"]] == ["Buy Milk"]
        assert body["pagination"] == {"page": 1, "limit": 8, "total": 1, "pages": 1}

    def test_list_sorted(self, client, alice_headers):
        for title in ("b", "c", "a"):
            _create(client, alice_headers, title=title)
        response = client.get("/api/tasks", params={"sort": "-title"}, headers=alice_headers)
        assert [t["title"] for t in response.json()["tasks"]] == ["c", "b", "a"]

    def test_list_empty(self, client, alice_headers):
        response = client.get("/api/tasks?page=abc&limit=0", headers=alice_headers)
        assert response.status_code == 200
        assert response.json() == {
            "tasks": [],
            "pagination": {"page": 1, "limit": 10, "total": 0, "pages": 1},
        }

    def test_list_page_beyond_sql_integer_range(self, client, alice_headers):
        _create(client, alice_headers, title="only")
        response = client.get(
            "/api/tasks", params={"page": "99999999999999999999"}, headers=alice_headers
        )
        assert response.status_code == 200
        body = response.json()
        assert body["tasks"] == []
        assert body["pagination"]["total"] == 1

    def test_dashboard(self, client, alice_headers):
        for i in range(3):
            _create(client, alice_headers, title=f"p{i}")
        for i in range(2):
            _create(client, alice_headers, title=f"c{i}", status="completed")

        response = client.get("/api/tasks/dashboard", headers=alice_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["summary"] == {"total": 5, "completed": 2, "pending": 3, "inProgress": 0}
        assert [t["title"] for t in body["recentActivity"]] == ["c1", "c0", "p2", "p1", "p0"]


class TestInfrastructure:
    """Health, correlation ids and unexpected failures."""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/api/health").headers["X-Request-ID"]

    @pytest.mark.parametrize("env, detailed", [("development", True), ("production", False)])
    def test_store_failure(self, settings, monkeypatch, env, detailed):
        def broken(self, identity, **params):
            raise sqlite3.OperationalError("database is locked")

        monkeypatch.setattr(TaskService, "list_tasks", broken)
        app = create_app(settings.model_copy(update={"env": env}))
        with TestClient(app) as client:
            headers = bearer(register(client, "Alice", "alice@example.com")["token"])
            response = client.get("/api/tasks", headers=headers)

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Server error"
        assert ("detail" in body) is detailed
        if detailed:
            assert "database is locked" in body["detail"]

    def test_unhandled_error_keeps_request_id(self, settings, monkeypatch):
        def broken(self, identity):
            raise RuntimeError("boom")

        monkeypatch.setattr(TaskService, "dashboard", broken)
        app = create_app(settings.model_copy(update={"env": "production"}))
        with TestClient(app) as client:
            headers = bearer(register(client, "Alice", "alice@example.com")["token"])
            response = client.get(
                "/api/tasks/dashboard", headers={"X-Request-ID": "req-42", **headers}
            )

        assert response.status_code == 500
        assert response.json() == {"message": "Server error"}
        assert response.headers["X-Request-ID"] == "req-42"
