"""Tests for moderation decisions and the pending queue."""

import pytest

from habersin.core.errors import (
    AuthorizationError,
    InvalidTransitionError,
    NotFoundError,
    StoreError,
    TransientStoreError,
)
from habersin.services.moderation import (
    APPROVED_MESSAGE,
    DEFAULT_NOTES,
    ModerationService,
    notification_message,
)
from habersin.store import SqlDocumentStore


def _notifications(store, user_id: str) -> list[dict]:
    return store.query("notifications", filters={"user_id": user_id})


def test_notification_messages() -> None:
    assert notification_message("approved", "ignored") == APPROVED_MESSAGE
    assert notification_message("rejected", "Blurry photo") == (
        "Your post has been rejected. Reason: Blurry photo"
    )
    assert notification_message("rejected", None).endswith("Does not comply with content policies.")


@pytest.mark.asyncio
async def test_approve_publishes_and_notifies(store, post, moderator, user) -> None:
    updated = await ModerationService(store).moderate(post["id"], "approved", moderator["id"])

    assert updated["status"] == "approved"
    assert updated["moderated_by"] == moderator["id"]
    assert updated["moderated_at"] is not None
    assert updated["moderation_note"] == DEFAULT_NOTES["approved"]

    notifications = _notifications(store, user["id"])
    assert len(notifications) == 1
    assert notifications[0]["type"] == "moderation"
    assert notifications[0]["message"] == APPROVED_MESSAGE
    assert notifications[0]["post_id"] == post["id"]
    assert notifications[0]["read"] is False


@pytest.mark.asyncio
async def test_reject_with_note(store, post, moderator, user) -> None:
    updated = await ModerationService(store).moderate(
        post["id"], "rejected", moderator["id"], note="Duplicate report"
    )

    assert updated["status"] == "rejected"
    assert updated["moderation_note"] == "Duplicate report"
    notifications = _notifications(store, user["id"])
    assert len(notifications) == 1
    assert "Duplicate report" in notifications[0]["message"]


@pytest.mark.asyncio
async def test_non_moderator_is_refused(store, post, other_user) -> None:
    with pytest.raises(AuthorizationError):
        await ModerationService(store).moderate(post["id"], "approved", other_user["id"])

    assert store.get("posts", post["id"])["status"] == "pending"
    assert store.query("notifications") == []


@pytest.mark.asyncio
async def test_unknown_moderator_is_refused(store, post) -> None:
    with pytest.raises(AuthorizationError):
        await ModerationService(store).moderate(post["id"], "approved", "nobody")


@pytest.mark.asyncio
async def test_missing_post(store, moderator) -> None:
    with pytest.raises(NotFoundError):
        await ModerationService(store).moderate("missing", "approved", moderator["id"])


@pytest.mark.asyncio
async def test_unknown_decision(store, post, moderator) -> None:
    with pytest.raises(InvalidTransitionError) as excinfo:
        await ModerationService(store).moderate(post["id"], "pending", moderator["id"])
    assert excinfo.value.code == "invalid_decision"


@pytest.mark.asyncio
async def test_decided_post_cannot_be_moderated_again(store, post, moderator, user) -> None:
    service = ModerationService(store)
    await service.moderate(post["id"], "approved", moderator["id"])

    with pytest.raises(InvalidTransitionError) as excinfo:
        await service.moderate(post["id"], "rejected", moderator["id"])

    assert excinfo.value.code == "not_pending"
    assert store.get("posts", post["id"])["status"] == "approved"
    assert len(_notifications(store, user["id"])) == 1


def test_failed_notification_rolls_back_status(store, post, moderator, mocker) -> None:
    original_create = store.create

    def failing_create(collection, data):
        if collection == "notifications":
            raise TransientStoreError("connection reset")
        return original_create(collection, data)

    mocker.patch.object(store, "create", side_effect=failing_create)
    service = ModerationService(store)

    with pytest.raises(TransientStoreError):
        service.apply_decision(post["id"], "approved", moderator["id"])

    assert store.get("posts", post["id"])["status"] == "pending"


def test_decision_racing_another_moderator_is_refused(
    store, post, moderator, user, mocker
) -> None:
    rival = ModerationService(SqlDocumentStore(store.session))
    original_get = store.get
    raced: list[bool] = []

    def get_then_rival_decides(collection, doc_id):
        document = original_get(collection, doc_id)
        if collection == "posts" and not raced:
            raced.append(True)
            rival.apply_decision(post["id"], "rejected", moderator["id"], note="spam")
        return document

    mocker.patch.object(store, "get", side_effect=get_then_rival_decides)

    with pytest.raises(InvalidTransitionError) as excinfo:
        ModerationService(store).apply_decision(post["id"], "approved", moderator["id"])

    assert excinfo.value.code == "not_pending"
    final = original_get("posts", post["id"])
    assert final["status"] == "rejected"
    assert final["moderation_note"] == "spam"
    messages = [n["message"] for n in _notifications(store, user["id"])]
    assert messages == ["Your post has been rejected. Reason: spam"]


@pytest.mark.asyncio
async def test_transient_failures_are_retried(
    store, post, moderator, fast_settings, mocker
) -> None:
    service = ModerationService(store, fast_settings)
    original = service.apply_decision
    calls = {"count": 0}

    def flaky(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] < 3:
            raise TransientStoreError("timeout")
        return original(*args, **kwargs)

    mocker.patch.object(service, "apply_decision", side_effect=flaky)

    updated = await service.moderate(post["id"], "approved", moderator["id"])

    assert calls["count"] == 3
    assert updated["status"] == "approved"


@pytest.mark.asyncio
async def test_retry_budget_exhausted(store, post, moderator, fast_settings, mocker) -> None:
    service = ModerationService(store, fast_settings)
    mocker.patch.object(service, "apply_decision", side_effect=TransientStoreError("down"))

    with pytest.raises(StoreError) as excinfo:
        await service.moderate(post["id"], "approved", moderator["id"])

    assert excinfo.value.code == "retry_exhausted"
    assert excinfo.value.retryable is True
    assert service.apply_decision.call_count == fast_settings.moderation_max_attempts


@pytest.mark.asyncio
async def test_pending_queue_is_newest_first(store, make_post, moderator) -> None:
    older = make_post()
    make_post(status="approved")
    newer = make_post()

    queue = await ModerationService(store).pending_queue(moderator["id"])

    assert [item["id"] for item in queue] == [newer["id"], older["id"]]


@pytest.mark.asyncio
async def test_pending_queue_requires_moderator(store, user) -> None:
    with pytest.raises(AuthorizationError):
        await ModerationService(store).pending_queue(user["id"])
    with pytest.raises(AuthorizationError):
        await ModerationService(store).pending_queue(None)
