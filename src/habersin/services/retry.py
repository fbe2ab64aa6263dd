"""Bounded retry for calls against the external stores."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TypeVar

from habersin.core.errors import TerminalStoreError, TransientStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_transient(
    operation: Callable[[], T],
    *,
    attempts: int,
    delay: float,
    description: str,
) -> T:
    """Run ``operation``, retrying TransientStoreError with a fixed delay.

    Any other exception propagates immediately. Once ``attempts`` calls have
    failed transiently a retryable TerminalStoreError is raised so the client
    can offer a manual retry.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except TransientStoreError as err:
            if attempt == attempts:
                logger.error(
                    "%s failed after %d attempts: %s", description, attempts, err, exc_info=True
                )
                raise TerminalStoreError(
                    f"{description} failed. Please try again.",
                    code="retry_exhausted",
                    retryable=True,
                ) from err
            logger.warning(
                "%s failed (attempt %d/%d): %s; retrying in %.1fs",
                description,
                attempt,
                attempts,
                err,
                delay,
            )
            await asyncio.sleep(delay)
    raise AssertionError("unreachable")  # pragma: no cover
