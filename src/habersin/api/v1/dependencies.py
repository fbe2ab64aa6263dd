"""Shared API dependencies for authentication and service wiring."""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from habersin.core.settings import settings
from habersin.db.session import get_db
from habersin.store import BlobStore, Document, SqlDocumentStore, get_blob_store

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
    """Issue a bearer token whose subject is ``user_id``."""
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    payload: dict[str, Any] = {"sub": user_id, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def get_document_store(db: SessionDep) -> SqlDocumentStore:
    """Return a document store bound to the request's session."""
    return SqlDocumentStore(db)


def get_blob_store_dep() -> BlobStore:
    """Return the configured blob store."""
    return get_blob_store()


StoreDep = Annotated[SqlDocumentStore, Depends(get_document_store)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store_dep)]


def _user_from_token(token: str, store: SqlDocumentStore) -> Document:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from err

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )

    user = store.get("users", subject)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    return user


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
    store: StoreDep,
) -> Document:
    """Get the current authenticated user document from the JWT token.

    Raises:
        HTTPException: If the token is invalid or the user does not exist.
    """
    return _user_from_token(credentials.credentials, store)


def get_optional_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(optional_bearer_scheme)
    ],
    store: StoreDep,
) -> Document | None:
    """Like :func:`get_current_user` but anonymous requests yield ``None``."""
    if credentials is None:
        return None
    return _user_from_token(credentials.credentials, store)


# Type aliases for current user dependencies
CurrentUserDep = Annotated[Document, Depends(get_current_user)]
OptionalUserDep = Annotated[Document | None, Depends(get_optional_user)]
