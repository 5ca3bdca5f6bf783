from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from tasktracker.main import app
from tasktracker.services import tasks as task_service


def _create(client, headers, title, **extra):
    r = client.post("/api/tasks", json={"title": title, **extra}, headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_create_defaults(client, signup):
    _, user, headers = signup("alice")

    task = _create(client, headers, "  water plants  ")
    assert task["title"] == "water plants"
    assert task["status"] == "pending"
    assert task["priority"] == "medium"
    assert task["dueDate"] is None
    assert task["completedAt"] is None
    assert task["userId"] == user["id"]
    assert task["id"]
    assert task["createdAt"]


def test_create_with_priority_and_due_date(client, signup):
    _, _, headers = signup("alice")

    task = _create(client, headers, "file taxes", priority="high", dueDate="2025-04-15")
    assert task["priority"] == "high"
    assert task["dueDate"] == "2025-04-15"

    # browsers serialise dates as full timestamps
    task = _create(client, headers, "call mom", dueDate="2025-05-01T10:30:00.000Z")
    assert task["dueDate"] == "2025-05-01"

    task = _create(client, headers, "snake case", due_date="2025-06-01")
    assert task["dueDate"] == "2025-06-01"


def test_create_validation(client, signup):
    _, _, headers = signup("alice")

    r = client.post("/api/tasks", json={}, headers=headers)
    assert r.status_code == 400
    assert "title" in r.json()["error"]

    r = client.post("/api/tasks", json={"title": "   "}, headers=headers)
    assert r.status_code == 400

    r = client.post("/api/tasks", json={"title": "x", "priority": "urgent"}, headers=headers)
    assert r.status_code == 400

    r = client.post("/api/tasks", json={"title": "x", "dueDate": "tomorrow"}, headers=headers)
    assert r.status_code == 400


def test_create_for_other_user_forbidden(client, signup):
    _, _, headers = signup("alice")
    _, bob, _ = signup("bob")

    r = client.post("/api/tasks", json={"title": "sneaky", "userId": bob["id"]}, headers=headers)
    assert r.status_code == 403


def test_create_with_own_user_id(client, signup):
    _, alice, headers = signup("alice")
    task = _create(client, headers, "mine", userId=alice["id"])
    assert task["userId"] == alice["id"]


def test_list_newest_first(client, signup):
    _, _, headers = signup("alice")
    first = _create(client, headers, "first")
    second = _create(client, headers, "second")

    r = client.get("/api/tasks", headers=headers)
    assert r.status_code == 200
    ids = [t["id"] for t in r.json()]
    assert ids == [second["id"], first["id"]]


def test_list_is_scoped_to_user(client, signup):
    _, alice, alice_headers = signup("alice")
    _, bob, bob_headers = signup("bob")
    _create(client, alice_headers, "alice task")
    _create(client, bob_headers, "bob task 1")
    _create(client, bob_headers, "bob task 2")

    r = client.get("/api/tasks", headers=alice_headers)
    assert [t["title"] for t in r.json()] == ["alice task"]
    assert all(t["userId"] == alice["id"] for t in r.json())

    r = client.get("/api/tasks", params={"userId": bob["id"]}, headers=bob_headers)
    assert len(r.json()) == 2
    assert all(t["userId"] == bob["id"] for t in r.json())

    # asking for someone else's list is refused rather than silently answered
    r = client.get("/api/tasks", params={"userId": bob["id"]}, headers=alice_headers)
    assert r.status_code == 403


def test_complete_and_reopen(client, signup):
    _, _, headers = signup("alice")
    task = _create(client, headers, "buy milk")

    r = client.put("/api/tasks", json={"id": task["id"], "status": "completed"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "completed"
    assert r.json()["completedAt"] is not None

    listed = client.get("/api/tasks", headers=headers).json()[0]
    assert listed["status"] == "completed"
    assert listed["completedAt"] is not None

    r = client.put("/api/tasks", json={"id": task["id"], "status": "pending"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["status"] == "pending"
    assert r.json()["completedAt"] is None


def test_complete_with_explicit_timestamp(client, signup):
    _, _, headers = signup("alice")
    task = _create(client, headers, "buy milk")

    r = client.put(
        "/api/tasks",
        json={"id": task["id"], "status": "completed", "completedAt": "2024-01-02T03:04:05"},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["completedAt"].startswith("2024-01-02T03:04:05")


def test_update_unknown_task(client, signup):
    _, _, headers = signup("alice")
    r = client.put("/api/tasks", json={"id": "does-not-exist", "status": "completed"}, headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "Task not found"


def test_update_invalid_status(client, signup):
    _, _, headers = signup("alice")
    task = _create(client, headers, "buy milk")
    r = client.put("/api/tasks", json={"id": task["id"], "status": "archived"}, headers=headers)
    assert r.status_code == 400


def test_update_other_users_task_forbidden(client, signup):
    _, _, alice_headers = signup("alice")
    _, _, bob_headers = signup("bob")
    task = _create(client, alice_headers, "alice task")

    r = client.put("/api/tasks", json={"id": task["id"], "status": "completed"}, headers=bob_headers)
    assert r.status_code == 403

    listed = client.get("/api/tasks", headers=alice_headers).json()[0]
    assert listed["status"] == "pending"


def test_delete(client, signup):
    _, _, headers = signup("alice")
    keep = _create(client, headers, "keep")
    drop = _create(client, headers, "drop")

    r = client.delete("/api/tasks", params={"id": drop["id"]}, headers=headers)
    assert r.status_code == 200
    assert r.json() == {"success": True}

    ids = [t["id"] for t in client.get("/api/tasks", headers=headers).json()]
    assert ids == [keep["id"]]


def test_delete_requires_id(client, signup):
    _, _, headers = signup("alice")
    r = client.delete("/api/tasks", headers=headers)
    assert r.status_code == 400
    assert r.json()["error"] == "Task ID is required"


def test_delete_unknown_task(client, signup):
    _, _, headers = signup("alice")
    r = client.delete("/api/tasks", params={"id": "missing"}, headers=headers)
    assert r.status_code == 404

    task = _create(client, headers, "once")
    assert client.delete("/api/tasks", params={"id": task["id"]}, headers=headers).status_code == 200
    assert client.delete("/api/tasks", params={"id": task["id"]}, headers=headers).status_code == 404


def test_delete_other_users_task_forbidden(client, signup):
    _, _, alice_headers = signup("alice")
    _, _, bob_headers = signup("bob")
    task = _create(client, alice_headers, "alice task")

    r = client.delete("/api/tasks", params={"id": task["id"]}, headers=bob_headers)
    assert r.status_code == 403
    assert len(client.get("/api/tasks", headers=alice_headers).json()) == 1


def test_store_failure_maps_to_internal_error(client, signup, monkeypatch):
    _, _, headers = signup("alice")

    def broken_commit(self):
        raise OperationalError("INSERT INTO tasks", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", broken_commit)
    r = client.post("/api/tasks", json={"title": "doomed"}, headers=headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create task"}
    assert "disk" not in r.text


def test_unexpected_error_is_hidden(signup, monkeypatch):
    _, _, headers = signup("alice")

    def boom(*args, **kwargs):
        raise RuntimeError("secret internals")

    monkeypatch.setattr(task_service, "list_tasks", boom)
    client = TestClient(app, raise_server_exceptions=False)
    r = client.get("/api/tasks", headers=headers)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}


def test_completed_at_offset_is_stored_as_utc(client, signup):
    _, _, headers = signup("alice")
    task = _create(client, headers, "buy milk")

    r = client.put(
        "/api/tasks",
        json={"id": task["id"], "status": "completed", "completedAt": "2024-01-02T03:04:05+05:00"},
        headers=headers,
    )
    assert r.status_code == 200
    assert r.json()["completedAt"].startswith("2024-01-01T22:04:05")

    listed = client.get("/api/tasks", headers=headers).json()[0]
    assert listed["completedAt"].startswith("2024-01-01T22:04:05")


def test_recompleting_keeps_original_completion_time(client, signup):
    _, _, headers = signup("alice")
    task = _create(client, headers, "buy milk")

    client.put(
        "/api/tasks",
        json={"id": task["id"], "status": "completed", "completedAt": "2024-01-02T03:04:05"},
        headers=headers,
    )
    r = client.put("/api/tasks", json={"id": task["id"], "status": "completed"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["completedAt"].startswith("2024-01-02T03:04:05")

    # an explicit timestamp still replaces it
    r = client.put(
        "/api/tasks",
        json={"id": task["id"], "status": "completed", "completedAt": "2024-03-04T05:06:07"},
        headers=headers,
    )
    assert r.json()["completedAt"].startswith("2024-03-04T05:06:07")
