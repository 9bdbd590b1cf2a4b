from __future__ import annotations

from uuid import uuid4

from app.db.models import Notification


def _headers(user_id) -> dict:
    return {"X-User-Id": str(user_id)}


def test_list_notifications_returns_inbox_with_unread_count(client, workspace) -> None:
    response = client.get("/notifications", headers=_headers(workspace.ada_id))

    assert response.status_code == 200
    body = response.json()
    assert body["unread_count"] == 2
    assert [item["title"] for item in body["notifications"]] == ["Invoice paid", "New task"]
    assert body["notifications"][0]["type"] == "invoice_paid"


def test_list_notifications_requires_identity(client, workspace) -> None:
    missing = client.get("/notifications")
    unknown = client.get("/notifications", headers=_headers(uuid4()))

    assert missing.status_code == 401
    assert unknown.status_code == 401


def test_mark_notification_read_sets_read_at(client, workspace, session_factory) -> None:
    target = workspace.ada_notification_ids[0]

    response = client.post(f"/notifications/{target}/read", headers=_headers(workspace.ada_id))

    assert response.status_code == 200
    assert response.json()["status"] == "updated"
    with session_factory() as session:
        stored = session.get(Notification, target)
        other = session.get(Notification, workspace.ada_notification_ids[1])
        assert stored.read is True
        assert stored.read_at is not None
        assert other.read is False


def test_mark_other_users_notification_is_not_found(client, workspace, session_factory) -> None:
    response = client.post(
        f"/notifications/{workspace.bob_notification_id}/read",
        headers=_headers(workspace.ada_id),
    )
    missing = client.post(f"/notifications/{uuid4()}/read", headers=_headers(workspace.ada_id))

    assert response.status_code == 404
    assert missing.status_code == 404
    with session_factory() as session:
        assert session.get(Notification, workspace.bob_notification_id).read is False


def test_mark_all_read_only_touches_caller(client, workspace, session_factory) -> None:
    response = client.post("/notifications/read-all", headers=_headers(workspace.ada_id))

    assert response.status_code == 200
    assert response.json()["affected"] == 2
    inbox = client.get("/notifications", headers=_headers(workspace.ada_id)).json()
    assert inbox["unread_count"] == 0
    with session_factory() as session:
        assert session.get(Notification, workspace.bob_notification_id).read is False


def test_delete_and_clear_notifications(client, workspace) -> None:
    first, second = workspace.ada_notification_ids

    deleted = client.delete(f"/notifications/{first}", headers=_headers(workspace.ada_id))
    again = client.delete(f"/notifications/{first}", headers=_headers(workspace.ada_id))
    foreign = client.delete(f"/notifications/{workspace.bob_notification_id}", headers=_headers(workspace.ada_id))
    cleared = client.delete("/notifications", headers=_headers(workspace.ada_id))

    assert deleted.status_code == 200
    assert again.status_code == 404
    assert foreign.status_code == 404
    assert cleared.json()["affected"] == 1
    assert client.get("/notifications", headers=_headers(workspace.ada_id)).json()["notifications"] == []
    assert len(client.get("/notifications", headers=_headers(workspace.bob_id)).json()["notifications"]) == 1


def test_create_notification_for_recipient(client, workspace) -> None:
    response = client.post(
        "/notifications",
        json={
            "user_id": str(workspace.bob_id),
            "type": "task_assigned",
            "title": "New task",
            "message": "Store listing",
            "data": {"task_id": str(workspace.task_ids[3])},
        },
        headers=_headers(workspace.ada_id),
    )

    assert response.status_code == 201
    created = response.json()
    assert created["user_id"] == str(workspace.bob_id)
    assert created["read"] is False
    assert created["data"] == {"task_id": str(workspace.task_ids[3]), "sender_id": str(workspace.ada_id)}
    inbox = client.get("/notifications", headers=_headers(workspace.bob_id)).json()
    assert inbox["unread_count"] == 2


def test_create_notification_rejects_unknown_type(client, workspace) -> None:
    response = client.post(
        "/notifications",
        json={"user_id": str(workspace.bob_id), "type": "birthday", "title": "Hi", "message": "Cake"},
        headers=_headers(workspace.ada_id),
    )

    assert response.status_code == 422


def test_create_notification_stamps_real_sender(client, workspace) -> None:
    response = client.post(
        "/notifications",
        json={
            "user_id": str(workspace.ada_id),
            "type": "general",
            "title": "Hi",
            "message": "From Bob",
            "data": {"sender_id": str(workspace.ada_id)},
        },
        headers=_headers(workspace.bob_id),
    )

    assert response.status_code == 201
    assert response.json()["data"]["sender_id"] == str(workspace.bob_id)
