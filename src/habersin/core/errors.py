"""Exception hierarchy shared by the admission and moderation services."""

from __future__ import annotations


class HabersinError(Exception):
    """Base class for all domain errors raised by Habersin services."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        # Stable machine-readable reason, e.g. "too_large".
        self.code = code


class ValidationError(HabersinError):
    """User-correctable input problem (format, size, length, consent, profanity...).

    Surfaced directly to the initiating user and never retried.
    """


class InvalidTransitionError(ValidationError):
    """Raised when a moderation decision targets a post that is not pending."""


class AuthorizationError(HabersinError):
    """Caller is not signed in or lacks the required role."""


class NotFoundError(HabersinError):
    """Referenced post, user, reaction or notification does not exist."""


class StoreError(HabersinError):
    """Base class for failures talking to the document or blob store."""

    retryable: bool = False


class TransientStoreError(StoreError):
    """Network or backend hiccup; callers may retry within their budget."""

    retryable = True


class TerminalStoreError(StoreError):
    """Unrecoverable backend failure or exhausted retry budget.

    ``retryable`` tells the client whether offering a manual retry makes sense.
    """

    def __init__(
        self, message: str, *, code: str | None = None, retryable: bool = False
    ) -> None:
        super().__init__(message, code=code)
        self.retryable = retryable
