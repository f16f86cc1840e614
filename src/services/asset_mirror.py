import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

import boto3
import httpx

from src.core.config import Settings, settings
from src.core.errors import MirrorFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MirroredAsset:
    key: str
    url: str


class AssetMirror:
    """
    Copies externally hosted derived assets (thumbnails, animated previews)
    into the owned S3 bucket.
    """

    def __init__(
        self,
        s3_client,
        bucket: str,
        public_base_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.s3_client = s3_client
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "AssetMirror":
        s3_client = boto3.client(
            "s3",
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_REGION,
        )
        return cls(
            s3_client,
            bucket=settings.AWS_S3_BUCKET,
            public_base_url=settings.ASSET_PUBLIC_BASE_URL,
            timeout=settings.ASSET_MIRROR_TIMEOUT_SECONDS,
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    async def copy_from_url(self, url: str, key: str) -> MirroredAsset:
        """
        Downloads ``url`` and stores it under ``key``.

        The whole copy is bounded by ``timeout``; any failure, including the
        timeout, raises MirrorFailure.
        """
        if not self.bucket:
            raise MirrorFailure("AWS_S3_BUCKET is not set")
        try:
            return await asyncio.wait_for(self._copy(url, key), timeout=self.timeout)
        except MirrorFailure:
            raise
        except asyncio.TimeoutError as exc:
            raise MirrorFailure(f"Timed out mirroring {url}") from exc
        except Exception as exc:
            raise MirrorFailure(f"Failed to mirror {url}: {exc}") from exc

    async def _copy(self, url: str, key: str) -> MirroredAsset:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()

        if not response.content:
            raise MirrorFailure(f"Empty response body from {url}")

        content_type = response.headers.get("content-type", "application/octet-stream")
        await asyncio.to_thread(
            self.s3_client.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=response.content,
            ContentType=content_type,
        )
        logger.info("Mirrored %s to s3://%s/%s", url, self.bucket, key)
        return MirroredAsset(key=key, url=self.public_url(key))

    async def delete_by_key(self, key: str) -> None:
        await asyncio.to_thread(self.s3_client.delete_object, Bucket=self.bucket, Key=key)
        logger.info("Deleted s3://%s/%s", self.bucket, key)


def get_asset_mirror() -> AssetMirror:
    return AssetMirror.from_settings(settings)
