import asyncio
from collections.abc import Callable

import httpx
import pytest

from src.core.errors import MirrorFailure
from src.services.asset_mirror import AssetMirror, MirroredAsset
from support.fakes import FakeS3Client

IMAGE_URL = "https://image.mux.com/pb_1/thumbnail.jpg"


def _mirror(
    handler: Callable[[httpx.Request], httpx.Response],
    s3: FakeS3Client,
    **kwargs: object,
) -> AssetMirror:
    return AssetMirror(s3, bucket="media-bucket", transport=httpx.MockTransport(handler), **kwargs)


def test_copy_stores_object_and_returns_public_url() -> None:
    s3 = FakeS3Client()
    mirror = _mirror(
        lambda request: httpx.Response(200, content=b"jpeg-bytes", headers={"content-type": "image/jpeg"}),
        s3,
        public_base_url="https://cdn.example.com/",
    )

    asset = asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))

    assert asset == MirroredAsset(
        key="videos/pb_1/thumbnail.jpg",
        url="https://cdn.example.com/videos/pb_1/thumbnail.jpg",
    )
    stored = s3.objects["videos/pb_1/thumbnail.jpg"]
    assert stored["Body"] == b"jpeg-bytes"
    assert stored["ContentType"] == "image/jpeg"
    assert stored["Bucket"] == "media-bucket"


def test_default_public_url_is_bucket_host() -> None:
    mirror = _mirror(lambda request: httpx.Response(200, content=b"gif"), FakeS3Client())

    asset = asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/preview.gif"))

    assert asset.url == "https://media-bucket.s3.amazonaws.com/videos/pb_1/preview.gif"


def test_http_error_becomes_mirror_failure() -> None:
    s3 = FakeS3Client()
    mirror = _mirror(lambda request: httpx.Response(404), s3)

    with pytest.raises(MirrorFailure):
        asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))
    assert s3.objects == {}


def test_storage_error_becomes_mirror_failure() -> None:
    mirror = _mirror(lambda request: httpx.Response(200, content=b"x"), FakeS3Client(fail=True))

    with pytest.raises(MirrorFailure):
        asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))


def test_empty_body_is_a_failure() -> None:
    mirror = _mirror(lambda request: httpx.Response(200, content=b""), FakeS3Client())

    with pytest.raises(MirrorFailure, match="Empty"):
        asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))


def test_slow_fetch_times_out() -> None:
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, content=b"late")

    mirror = AssetMirror(FakeS3Client(), bucket="media-bucket", timeout=0.05, transport=httpx.MockTransport(slow))

    with pytest.raises(MirrorFailure, match="Timed out"):
        asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))


def test_missing_bucket_is_a_failure() -> None:
    mirror = AssetMirror(FakeS3Client(), bucket=None)

    with pytest.raises(MirrorFailure):
        asyncio.run(mirror.copy_from_url(IMAGE_URL, "videos/pb_1/thumbnail.jpg"))


def test_delete_by_key_removes_object() -> None:
    s3 = FakeS3Client()
    s3.objects["videos/pb_1/thumbnail.jpg"] = {}
    mirror = AssetMirror(s3, bucket="media-bucket")

    asyncio.run(mirror.delete_by_key("videos/pb_1/thumbnail.jpg"))

    assert s3.objects == {}
