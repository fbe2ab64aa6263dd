"""Tests for moderation endpoints."""

from fastapi import status

from tests.conftest import auth_headers


def test_queue_requires_moderator(client, user) -> None:
    response = client.get("/api/v1/moderation/queue", headers=auth_headers(user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_queue_lists_pending_posts(client, post, moderator) -> None:
    response = client.get("/api/v1/moderation/queue", headers=auth_headers(moderator))

    assert response.status_code == status.HTTP_200_OK
    assert [item["id"] for item in response.json()] == [post["id"]]


def test_approve_then_visible_in_feed(client, post, moderator, user) -> None:
    response = client.post(
        f"/api/v1/moderation/posts/{post['id']}",
        json={"decision": "approved"},
        headers=auth_headers(moderator),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "approved"

    feed = client.get("/api/v1/posts/").json()
    assert [item["id"] for item in feed["items"]] == [post["id"]]

    notifications = client.get("/api/v1/notifications/", headers=auth_headers(user)).json()
    assert any(n["type"] == "moderation" for n in notifications)


def test_second_decision_conflicts(client, post, moderator) -> None:
    url = f"/api/v1/moderation/posts/{post['id']}"
    headers = auth_headers(moderator)
    client.post(url, json={"decision": "rejected", "note": "Blurry"}, headers=headers)

    response = client.post(url, json={"decision": "approved"}, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["code"] == "not_pending"


def test_invalid_decision_payload(client, post, moderator) -> None:
    response = client.post(
        f"/api/v1/moderation/posts/{post['id']}",
        json={"decision": "maybe"},
        headers=auth_headers(moderator),
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_store_outage_maps_to_503(client, post, moderator, mocker) -> None:
    from habersin.core.errors import TerminalStoreError
    from habersin.services.moderation import ModerationService

    mocker.patch.object(
        ModerationService,
        "moderate",
        side_effect=TerminalStoreError("down", code="retry_exhausted", retryable=True),
    )

    response = client.post(
        f"/api/v1/moderation/posts/{post['id']}",
        json={"decision": "approved"},
        headers=auth_headers(moderator),
    )

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json()["retryable"] is True
