"""SQLAlchemy-backed implementation of the document store.

Each collection maps onto one ORM model; documents are plain dictionaries of
column values so services stay independent of the ORM.
"""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import and_, exc, or_, select, update
from sqlalchemy.orm import Session

from habersin.core.errors import NotFoundError, TerminalStoreError, TransientStoreError
from habersin.core.settings import settings
from habersin.db.session import Base
from habersin.db.time import as_utc
from habersin.models import Comment, Notification, Post, Reaction, Report, User
from habersin.store.base import Document
from habersin.store.subscription import Subscription

logger = logging.getLogger(__name__)

COLLECTIONS: dict[str, type[Base]] = {
    "posts": Post,
    "reactions": Reaction,
    "comments": Comment,
    "reports": Report,
    "notifications": Notification,
    "users": User,
}

_TRANSIENT_ERRORS = (exc.OperationalError, exc.InterfaceError, exc.TimeoutError)


def _to_document(row: Base) -> Document:
    document: Document = {}
    for attr in row.__mapper__.column_attrs:
        value = getattr(row, attr.key)
        if isinstance(value, list):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        elif isinstance(value, datetime):
            value = as_utc(value)
        document[attr.key] = value
    return document


class SqlDocumentStore:
    """Document store over a SQLAlchemy session.

    Writes commit immediately unless they run inside :meth:`batch`, in which
    case the outermost batch commits (or rolls back) everything at once.
    """

    def __init__(self, session: Session, *, poll_interval: float | None = None) -> None:
        self.session = session
        self.poll_interval = (
            settings.subscription_poll_interval_seconds if poll_interval is None else poll_interval
        )
        self._batch_depth = 0

    # -- helpers -----------------------------------------------------------------

    @staticmethod
    def _model(collection: str) -> type[Base]:
        try:
            return COLLECTIONS[collection]
        except KeyError as err:
            raise ValueError(f"Unknown collection: {collection}") from err

    @staticmethod
    def _column(model: type[Base], field: str) -> Any:
        if field not in model.__mapper__.column_attrs:
            raise ValueError(f"{model.__tablename__} has no field {field!r}")
        return getattr(model, field)

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except _TRANSIENT_ERRORS as err:
            if self._batch_depth == 0:
                self.session.rollback()
            logger.warning("Transient document store failure: %s", err)
            raise TransientStoreError("Document store is temporarily unavailable") from err
        except exc.SQLAlchemyError as err:
            if self._batch_depth == 0:
                self.session.rollback()
            logger.error("Document store failure: %s", err, exc_info=True)
            raise TerminalStoreError("Document store rejected the operation") from err

    def _commit(self) -> None:
        if self._batch_depth == 0:
            self.session.commit()
        else:
            self.session.flush()

    def _load(self, collection: str, doc_id: str) -> Base | None:
        return self.session.get(self._model(collection), doc_id, populate_existing=True)

    # -- DocumentStore -----------------------------------------------------------

    @contextmanager
    def batch(self) -> Generator[None, None, None]:
        """Run the enclosed operations as a single transaction."""
        self._batch_depth += 1
        try:
            yield
        except BaseException:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self.session.rollback()
            raise
        self._batch_depth -= 1
        if self._batch_depth == 0:
            with self._translate_errors():
                self.session.commit()

    def create(self, collection: str, data: Mapping[str, Any]) -> str:
        model = self._model(collection)
        with self._translate_errors():
            row = model(**data)
            self.session.add(row)
            self.session.flush()
            doc_id = row.id
            self._commit()
        return doc_id

    def set(self, collection: str, doc_id: str, data: Mapping[str, Any]) -> None:
        model = self._model(collection)
        with self._translate_errors():
            row = self._load(collection, doc_id)
            if row is None:
                self.session.add(model(id=doc_id, **data))
            else:
                for key, value in data.items():
                    self._column(model, key)
                    setattr(row, key, value)
            self._commit()

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._translate_errors():
            row = self._load(collection, doc_id)
        return _to_document(row) if row is not None else None

    def exists(self, collection: str, doc_id: str) -> bool:
        model = self._model(collection)
        with self._translate_errors():
            found = self.session.execute(
                select(model.id).where(model.id == doc_id)
            ).first()
        return found is not None

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> None:
        model = self._model(collection)
        with self._translate_errors():
            row = self._load(collection, doc_id)
            if row is None:
                raise NotFoundError(f"{collection}/{doc_id} not found")
            for key, value in fields.items():
                self._column(model, key)
                setattr(row, key, value)
            self._commit()

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._translate_errors():
            row = self._load(collection, doc_id)
            if row is None:
                return False
            self.session.delete(row)
            self._commit()
        return True

    def increment(self, collection: str, doc_id: str, field: str, delta: int) -> None:
        """Add ``delta`` in a single UPDATE so concurrent writers never lose counts."""
        model = self._model(collection)
        column = self._column(model, field)
        with self._translate_errors():
            result = self.session.execute(
                update(model)
                .where(model.id == doc_id)
                .values({field: column + delta})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError(f"{collection}/{doc_id} not found")
            self._commit()

    def update_where(
        self,
        collection: str,
        doc_id: str,
        expected: Mapping[str, Any],
        fields: Mapping[str, Any],
    ) -> bool:
        """Conditional single-statement UPDATE; the check and the write cannot interleave."""
        model = self._model(collection)
        stmt = update(model).where(model.id == doc_id)
        for field, value in expected.items():
            stmt = stmt.where(self._column(model, field) == value)
        for key in fields:
            self._column(model, key)
        with self._translate_errors():
            result = self.session.execute(
                stmt.values(dict(fields)).execution_options(synchronize_session=False)
            )
            self._commit()
        return result.rowcount > 0

    def query(
        self,
        collection: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
        start_after: str | None = None,
    ) -> list[Document]:
        model = self._model(collection)
        stmt = select(model)

        for field, value in (filters or {}).items():
            column = self._column(model, field)
            if isinstance(value, list | tuple | set | frozenset):
                stmt = stmt.where(column.in_(list(value)))
            elif value is None:
                stmt = stmt.where(column.is_(None))
            else:
                stmt = stmt.where(column == value)

        with self._translate_errors():
            if order_by is not None:
                column = self._column(model, order_by)
                if start_after is not None:
                    cursor = self._load(collection, start_after)
                    if cursor is None:
                        raise NotFoundError(f"Cursor {collection}/{start_after} not found")
                    cursor_value = getattr(cursor, order_by)
                    if descending:
                        stmt = stmt.where(
                            or_(
                                column < cursor_value,
                                and_(column == cursor_value, model.id < start_after),
                            )
                        )
                    else:
                        stmt = stmt.where(
                            or_(
                                column > cursor_value,
                                and_(column == cursor_value, model.id > start_after),
                            )
                        )
                if descending:
                    stmt = stmt.order_by(column.desc(), model.id.desc())
                else:
                    stmt = stmt.order_by(column.asc(), model.id.asc())

            if limit is not None:
                stmt = stmt.limit(limit)

            rows = self.session.execute(
                stmt.execution_options(populate_existing=True)
            ).scalars().all()
        return [_to_document(row) for row in rows]

    def subscribe(
        self,
        collection: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> Subscription:
        def fetch() -> list[Document]:
            return self.query(
                collection,
                filters=filters,
                order_by=order_by,
                descending=descending,
                limit=limit,
            )

        return Subscription(fetch, interval=self.poll_interval)
