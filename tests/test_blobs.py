"""Tests for blob store implementations."""

import httpx
import pytest

from habersin.core.errors import TerminalStoreError, TransientStoreError
from habersin.store import BlobHandle, ImageHostBlobStore, LocalBlobStore


@pytest.mark.asyncio
async def test_local_upload_and_delete(tmp_path) -> None:
    blobs = LocalBlobStore(tmp_path, "http://localhost:8000/media/")

    handle = await blobs.upload("posts/abc/0-photo.png", b"data", "image/png")

    assert handle.url == "http://localhost:8000/media/posts/abc/0-photo.png"
    assert await blobs.public_url(handle) == handle.url
    assert (tmp_path / "posts" / "abc" / "0-photo.png").read_bytes() == b"data"

    await blobs.delete(handle)
    assert not (tmp_path / "posts" / "abc" / "0-photo.png").exists()
    # Deleting twice is harmless.
    await blobs.delete(handle)


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/etc/passwd", "../outside.png", ""])
async def test_local_rejects_unsafe_paths(tmp_path, path: str) -> None:
    with pytest.raises(ValueError):
        await LocalBlobStore(tmp_path, "http://x").upload(path, b"data", "image/png")


def _host(handler) -> ImageHostBlobStore:
    return ImageHostBlobStore(
        "https://images.test/3/image",
        "client-123",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_image_host_upload() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"data": {"id": "abc", "link": "https://i.test/abc.png", "deletehash": "del1"}},
        )

    blobs = _host(handler)
    handle = await blobs.upload("posts/x/0-photo.png", b"data", "image/png")
    await blobs.close()

    assert handle == BlobHandle(key="abc", url="https://i.test/abc.png", delete_token="del1")
    assert seen[0].method == "POST"
    assert seen[0].headers["Authorization"] == "Client-ID client-123"
    assert b'name="image"' in seen[0].content


@pytest.mark.asyncio
async def test_image_host_delete_uses_delete_hash() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    blobs = _host(handler)
    await blobs.delete(BlobHandle(key="abc", url="u", delete_token="del1"))
    await blobs.delete(BlobHandle(key="abc", url="u"))
    await blobs.close()

    assert [(r.method, r.url.path) for r in seen] == [("DELETE", "/3/image/del1")]


@pytest.mark.asyncio
async def test_image_host_server_errors_are_transient() -> None:
    blobs = _host(lambda request: httpx.Response(503))
    with pytest.raises(TransientStoreError):
        await blobs.upload("a.png", b"data", "image/png")
    await blobs.close()


@pytest.mark.asyncio
async def test_image_host_network_errors_are_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    blobs = _host(handler)
    with pytest.raises(TransientStoreError):
        await blobs.upload("a.png", b"data", "image/png")
    await blobs.close()


@pytest.mark.asyncio
async def test_image_host_client_errors_are_terminal() -> None:
    blobs = _host(lambda request: httpx.Response(400, json={"data": {"error": "bad"}}))
    with pytest.raises(TerminalStoreError):
        await blobs.upload("a.png", b"data", "image/png")
    await blobs.close()


@pytest.mark.asyncio
async def test_image_host_malformed_response() -> None:
    blobs = _host(lambda request: httpx.Response(200, json={"unexpected": True}))
    with pytest.raises(TerminalStoreError):
        await blobs.upload("a.png", b"data", "image/png")
    await blobs.close()


@pytest.mark.asyncio
async def test_image_host_requires_client_id() -> None:
    blobs = _host(lambda request: httpx.Response(200))
    blobs.client_id = None
    with pytest.raises(TerminalStoreError):
        await blobs.upload("a.png", b"data", "image/png")
