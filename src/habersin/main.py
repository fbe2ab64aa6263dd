"""Main entry point for the Habersin application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from habersin.api.v1 import (
    comments_router,
    moderation_router,
    notifications_router,
    posts_router,
    reactions_router,
    reports_router,
    users_router,
)
from habersin.core.errors import (
    AuthorizationError,
    HabersinError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from habersin.core.settings import settings
from habersin.db.session import create_tables
from habersin.store import ImageHostBlobStore, get_blob_store

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Habersin API",
    description="Community news with admission checks and moderation",
    version=settings.app_version,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(GZipMiddleware)

app.include_router(posts_router, prefix="/api/v1")
app.include_router(reactions_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(notifications_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")

if settings.blob_backend == "local":
    app.mount(
        "/media",
        StaticFiles(directory=settings.blob_local_dir, check_dir=False),
        name="media",
    )


def _error_body(err: HabersinError) -> dict[str, object]:
    return {"detail": err.message, "code": err.code}


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, err: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(err))


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, err: AuthorizationError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=_error_body(err))


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, err: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error_body(err))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, err: StoreError) -> JSONResponse:
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, err)
    body = _error_body(err)
    body["retryable"] = err.retryable
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body)


@app.on_event("startup")
async def on_startup() -> None:
    create_tables()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if settings.blob_backend == "image_host":
        blobs = get_blob_store()
        if isinstance(blobs, ImageHostBlobStore):
            await blobs.close()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("habersin.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
