# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import timedelta
from io import BytesIO
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_BACKEND", "local")

from habersin.api.v1.dependencies import create_access_token, get_blob_store_dep
from habersin.core.errors import TransientStoreError
from habersin.core.settings import Settings, settings
from habersin.db.session import Base, build_engine, create_tables, drop_tables
from habersin.db.session import get_db as app_get_session
from habersin.db.time import utcnow
from habersin.main import app as fastapi_app
from habersin.services.image_validator import ImageUpload
from habersin.store import BlobHandle, Document, SqlDocumentStore

TEST_DB_URL = "sqlite://"

VALID_TITLE = "Water outage downtown"
VALID_CONTENT = "The water supply in our street has been cut since Monday morning."

_EMAIL_COUNTER = count(1)
_CLOCK = count(1)

SEED_IMAGE_KEY = "posts/seed/0-photo.png"
SEED_IMAGE_URL = f"https://blobs.test/{SEED_IMAGE_KEY}"

BLUE = (20, 40, 200)
SKIN = (200, 150, 120)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = build_engine(TEST_DB_URL, poolclass=StaticPool)

    # pysqlite defers BEGIN; emit it ourselves so SAVEPOINTs nest properly.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn) -> None:
        conn.exec_driver_sql("BEGIN")

    create_tables(engine)
    try:
        yield engine
    finally:
        drop_tables(engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    try:
        yield session
    finally:
        session.close()
        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture()
def store(db_session: Session) -> SqlDocumentStore:
    return SqlDocumentStore(db_session, poll_interval=0.01)


class InMemoryBlobStore:
    """Blob store double that keeps uploads in a dict.

    ``fail_on_upload`` makes the n-th upload call (1-based) raise.
    """

    def __init__(self, fail_on_upload: int | None = None) -> None:
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.upload_calls = 0
        self.fail_on_upload = fail_on_upload

    async def upload(self, path: str, data: bytes, content_type: str) -> BlobHandle:
        self.upload_calls += 1
        if self.upload_calls == self.fail_on_upload:
            raise TransientStoreError("blob backend unavailable")
        self.objects[path] = data
        return BlobHandle(key=path, url=f"https://blobs.test/{path}")

    async def public_url(self, handle: BlobHandle) -> str:
        return handle.url

    async def delete(self, handle: BlobHandle) -> None:
        self.deleted.append(handle.key)
        self.objects.pop(handle.key, None)


@pytest.fixture()
def blobs() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture()
def fast_settings() -> Settings:
    """Runtime settings without retry back-off."""
    return settings.model_copy(update={"moderation_retry_delay_seconds": 0.0})


def image_bytes(
    color: tuple[int, int, int] = BLUE,
    size: tuple[int, int] = (32, 32),
    fmt: str = "PNG",
) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_upload(
    color: tuple[int, int, int] = BLUE,
    *,
    size: tuple[int, int] = (32, 32),
    filename: str = "photo.png",
) -> ImageUpload:
    return ImageUpload(filename=filename, content_type="image/png", data=image_bytes(color, size))


@pytest.fixture()
def make_user(store: SqlDocumentStore) -> Callable[..., Document]:
    def _make_user(
        first_name: str = "Ayse",
        last_name: str = "Yilmaz",
        *,
        is_moderator: bool = False,
    ) -> Document:
        user_id = store.create(
            "users",
            {
                "first_name": first_name,
                "last_name": last_name,
                "email": f"user{next(_EMAIL_COUNTER)}@example.com",
                "is_moderator": is_moderator,
            },
        )
        user = store.get("users", user_id)
        assert user is not None
        return user

    return _make_user


@pytest.fixture()
def user(make_user: Callable[..., Document]) -> Document:
    return make_user()


@pytest.fixture()
def other_user(make_user: Callable[..., Document]) -> Document:
    return make_user("Mehmet", "Demir")


@pytest.fixture()
def moderator(make_user: Callable[..., Document]) -> Document:
    return make_user("Zeynep", "Kaya", is_moderator=True)


@pytest.fixture()
def make_post(store: SqlDocumentStore, user: Document) -> Callable[..., Document]:
    """Insert a post directly, bypassing admission, with strictly increasing timestamps."""

    def _make_post(**overrides: Any) -> Document:
        data: dict[str, Any] = {
            "title": VALID_TITLE.upper(),
            "content": VALID_CONTENT,
            "category": "Water",
            "images": [SEED_IMAGE_URL],
            "image_refs": [{"key": SEED_IMAGE_KEY, "url": SEED_IMAGE_URL}],
            "author_id": user["id"],
            "author_name": "Ayse Yilmaz",
            "is_anonymous": False,
            "consent_accepted": True,
            "status": "pending",
            "search_tokens": [],
            "created_at": utcnow() + timedelta(seconds=next(_CLOCK)),
        }
        data.update(overrides)
        post_id = store.create("posts", data)
        post = store.get("posts", post_id)
        assert post is not None
        return post

    return _make_post


@pytest.fixture()
def post(make_post: Callable[..., Document]) -> Document:
    return make_post()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def client(
    app: FastAPI, db_session: Session, blobs: InMemoryBlobStore
) -> Iterator[TestClient]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_blob_store_dep] = lambda: blobs
    try:
        with TestClient(app, base_url="http://test") as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_blob_store_dep, None)


def auth_headers(user: Document) -> dict[str, str]:
    token = create_access_token(user["id"])
    return {"Authorization": f"Bearer {token}"}
