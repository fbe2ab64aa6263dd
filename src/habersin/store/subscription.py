"""Polling realtime subscriptions over a document query."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType

from habersin.store.base import Document

logger = logging.getLogger(__name__)


class Subscription:
    """Lazy, unbounded, cancellable stream of query snapshots.

    The first snapshot is produced immediately; later snapshots only when the
    query result differs from the previous one. Use it as an async context
    manager so the subscription is released when the consumer is done::

        async with store.subscribe("comments", filters={"post_id": pid}) as sub:
            async for snapshot in sub:
                ...
    """

    def __init__(
        self,
        fetch: Callable[[], list[Document]],
        *,
        interval: float,
    ) -> None:
        self._fetch = fetch
        self._interval = max(0.0, interval)
        self._closed = asyncio.Event()
        self._last: list[Document] | None = None

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        """Unsubscribe; pending and future iterations stop."""
        self._closed.set()

    async def __aenter__(self) -> Subscription:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> list[Document]:
        while not self._closed.is_set():
            if self._last is not None:
                try:
                    await asyncio.wait_for(self._closed.wait(), timeout=self._interval)
                except TimeoutError:
                    pass
                if self._closed.is_set():
                    break

            snapshot = self._fetch()
            if snapshot != self._last:
                self._last = snapshot
                logger.debug("Subscription produced snapshot with %d documents", len(snapshot))
                return snapshot
        raise StopAsyncIteration
