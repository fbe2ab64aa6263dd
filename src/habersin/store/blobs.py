"""Blob store implementations for uploaded images.

- ``LocalBlobStore`` keeps files in a directory served under a public base URL.
- ``ImageHostBlobStore`` posts multipart uploads to an anonymous image host.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath

import httpx

from habersin.core.errors import TerminalStoreError, TransientStoreError
from habersin.core.settings import settings
from habersin.store.base import BlobHandle, BlobStore

logger = logging.getLogger(__name__)

# HTTP status codes
HTTP_INTERNAL_SERVER_ERROR = 500


def _safe_relative_path(path: str) -> PurePosixPath:
    relative = PurePosixPath(path)
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise ValueError(f"Invalid blob path: {path!r}")
    return relative


class LocalBlobStore:
    """Filesystem-backed object storage."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    def _write(self, target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, path: str, data: bytes, content_type: str) -> BlobHandle:
        relative = _safe_relative_path(path)
        target = self.root.joinpath(*relative.parts)
        try:
            await asyncio.to_thread(self._write, target, data)
        except OSError as err:
            logger.error("Failed to store blob %s: %s", relative, err)
            raise TerminalStoreError(f"Could not store {relative}") from err
        return BlobHandle(key=str(relative), url=f"{self.base_url}/{relative}")

    async def public_url(self, handle: BlobHandle) -> str:
        return handle.url

    async def delete(self, handle: BlobHandle) -> None:
        relative = _safe_relative_path(handle.key)
        target = self.root.joinpath(*relative.parts)
        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as err:
            logger.error("Failed to delete blob %s: %s", relative, err)
            raise TerminalStoreError(f"Could not delete {relative}") from err


class ImageHostBlobStore:
    """Client for an anonymous image host (Imgur-compatible API).

    Uploads are multipart ``POST`` requests authenticated with a client id; the
    host answers with a public link and a delete hash.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        client_id: str | None = None,
        *,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = (endpoint or settings.image_host_endpoint).rstrip("/")
        self.client_id = client_id or settings.image_host_client_id
        self.timeout_seconds = (
            settings.image_host_timeout_seconds if timeout_seconds is None else timeout_seconds
        )
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.client_id:
            raise TerminalStoreError("Image host client id is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_seconds),
                    transport=self._transport,
                    headers={"Authorization": f"Client-ID {self.client_id}"},
                )
        return self._client

    async def _request(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        client = await self._ensure_client()
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("Image host request %s %s failed: %s", method, url, exc)
            raise TransientStoreError("Image host is unreachable") from exc

        if response.status_code >= HTTP_INTERNAL_SERVER_ERROR:
            raise TransientStoreError(f"Image host responded with {response.status_code}")
        if response.is_error:
            raise TerminalStoreError(f"Image host rejected the request ({response.status_code})")
        return response

    async def upload(self, path: str, data: bytes, content_type: str) -> BlobHandle:
        filename = PurePosixPath(path).name or "image"
        response = await self._request(
            "POST",
            self.endpoint,
            files={"image": (filename, data, content_type)},
        )
        try:
            payload = response.json()["data"]
            return BlobHandle(
                key=str(payload["id"]),
                url=str(payload["link"]),
                delete_token=payload.get("deletehash"),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise TerminalStoreError("Image host returned an unexpected response") from exc

    async def public_url(self, handle: BlobHandle) -> str:
        return handle.url

    async def delete(self, handle: BlobHandle) -> None:
        if not handle.delete_token:
            logger.warning("Cannot delete hosted image %s without a delete hash", handle.key)
            return
        await self._request("DELETE", f"{self.endpoint}/{handle.delete_token}")

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _BlobStoreSingleton:
    """Singleton wrapper for the configured blob store."""

    _instance: BlobStore | None = None

    @classmethod
    def get_instance(cls) -> BlobStore:
        if cls._instance is None:
            if settings.blob_backend == "image_host":
                cls._instance = ImageHostBlobStore()
            else:
                cls._instance = LocalBlobStore(
                    settings.blob_local_dir, settings.blob_public_base_url
                )
        return cls._instance


def get_blob_store() -> BlobStore:
    """Return the blob store selected by configuration."""
    return _BlobStoreSingleton.get_instance()
