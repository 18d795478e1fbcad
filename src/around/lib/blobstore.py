"""Blob storage for post media.

:class:`S3BlobStore` talks to any S3-compatible endpoint (AWS S3, MinIO)
through boto3.  Objects are private by default, so every upload is followed
by an explicit ``public-read`` ACL and a metadata read-back before its URL is
handed out.
"""

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO
from urllib.parse import quote

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ..config import Settings
from .errors import BlobStoreError

logger = logging.getLogger(__name__)


class BlobStore(ABC):
    """Durable object storage with public-read URLs."""

    @abstractmethod
    async def put(
        self,
        key: str,
        stream: BinaryIO,
        content_type: str | None = None,
    ) -> str:
        """Store *stream* under *key*, make it public and return its URL.

        Raises :class:`BlobStoreError` on any failure.
        """
        ...


class S3BlobStore(BlobStore):
    """Thin boto3 wrapper implementing :class:`BlobStore`."""

    def __init__(self, client, bucket: str, public_base_url: str | None = None) -> None:
        self._client = client
        self.bucket = bucket
        self._public_base_url = public_base_url

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3BlobStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            config=BotoConfig(signature_version="s3v4"),
            region_name=settings.s3_region,
        )
        return cls(client, settings.blob_bucket, settings.blob_public_base_url)

    def public_url(self, key: str) -> str:
        """Return the path-style public URL for *key*."""
        base = self._public_base_url or self._client.meta.endpoint_url
        return f"{base.rstrip('/')}/{self.bucket}/{quote(key)}"

    def _put_sync(self, key: str, stream: BinaryIO, content_type: str | None) -> str:
        # The bucket must already exist.
        self._client.head_bucket(Bucket=self.bucket)

        extra = {"ContentType": content_type} if content_type else {}
        self._client.put_object(Bucket=self.bucket, Key=key, Body=stream, **extra)
        self._client.put_object_acl(Bucket=self.bucket, Key=key, ACL="public-read")

        # Only hand out a URL for an object that can be read back.
        self._client.head_object(Bucket=self.bucket, Key=key)
        return self.public_url(key)

    async def put(
        self,
        key: str,
        stream: BinaryIO,
        content_type: str | None = None,
    ) -> str:
        try:
            url = await run_in_threadpool(self._put_sync, key, stream, content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Blob write failed for %s/%s", self.bucket, key)
            raise BlobStoreError() from exc

        logger.info("Post media is saved to blob store: %s", url)
        return url
