"""Tests for the public feed."""

import pytest

from habersin.core.errors import NotFoundError
from habersin.services.feed import FeedService, matches_search


def test_only_visible_posts_newest_first(store, make_post) -> None:
    approved = make_post(status="approved")
    make_post(status="pending")
    make_post(status="rejected")
    legacy = make_post(status="active")

    items, cursor = FeedService(store).list_posts()

    assert [item["id"] for item in items] == [legacy["id"], approved["id"]]
    assert cursor is None


def test_pagination_with_cursor(store, make_post, fast_settings) -> None:
    config = fast_settings.model_copy(update={"page_size": 2})
    posts = [make_post(status="approved") for _ in range(5)]
    newest_first = [post["id"] for post in reversed(posts)]
    feed = FeedService(store, config)

    seen: list[str] = []
    cursor = None
    while True:
        items, cursor = feed.list_posts(cursor=cursor)
        seen.extend(item["id"] for item in items)
        if cursor is None:
            break

    assert seen == newest_first


def test_category_filter(store, make_post) -> None:
    water = make_post(status="approved", category="Water")
    make_post(status="approved", category="Sports")

    items, _ = FeedService(store).list_posts(category="Water")

    assert [item["id"] for item in items] == [water["id"]]


def test_search_matches_every_term(store, make_post) -> None:
    match = make_post(status="approved", title="BROKEN PIPE ON ELM STREET")
    make_post(status="approved", title="NEW PARK OPENED")

    items, _ = FeedService(store).search("pipe elm")

    assert [item["id"] for item in items] == [match["id"]]


def test_matches_search_checks_author_and_category() -> None:
    post = {"title": "T", "content": "", "category": "Water", "author_name": "Ayse Yilmaz"}
    assert matches_search(post, "ayse water")
    assert not matches_search(post, "ayse sports")


def test_unpublished_post_visible_to_author_only(store, make_post, user, other_user) -> None:
    pending = make_post(status="pending")
    feed = FeedService(store)

    assert feed.get_post(pending["id"], viewer_id=user["id"])["id"] == pending["id"]
    with pytest.raises(NotFoundError):
        feed.get_post(pending["id"], viewer_id=other_user["id"])
    with pytest.raises(NotFoundError):
        feed.get_post("missing")


def test_record_view(store, make_post) -> None:
    post = make_post(status="approved")
    FeedService(store).record_view(post["id"])
    assert store.get("posts", post["id"])["views"] == 1


def test_posts_by_author_include_every_status(store, make_post, user) -> None:
    make_post(status="pending")
    make_post(status="rejected")

    assert len(FeedService(store).posts_by_author(user["id"])) == 2
