"""
Blob storage for post media.

``BlobStore`` is the contract the post coordinator depends on.  The
production implementation, ``S3BlobStore``, talks to any S3-compatible
endpoint (AWS S3, Cloudflare R2, MinIO) through boto3.  boto3 is
blocking, so each call is handed to the thread pool to keep the event
loop free.

Every backend failure is raised as ``BlobStoreError`` so callers only
need to handle one exception type.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from socialmedia.config import settings

logger = logging.getLogger(__name__)

_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})
_CHUNK_SIZE = 64 * 1024


class BlobStoreError(Exception):
    """Raised when the blob backend cannot complete an operation."""


@dataclass
class BlobContent:
    name: str
    content_type: str
    chunks: Iterator[bytes]


class BlobStore(ABC):
    """Name-addressed binary storage, independent of the database."""

    @abstractmethod
    async def upload(
        self, data: bytes, content_type: str | None = None, extension: str = ""
    ) -> str:
        """Store *data* under a freshly generated name and return the name."""

    @abstractmethod
    async def download(self, name: str) -> BlobContent | None:
        """Return the stored object, or None when *name* does not exist."""

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Remove *name*.  Deleting an absent name is not an error."""

    @staticmethod
    def new_name(prefix: str, extension: str = "") -> str:
        extension = extension.lower()
        if extension and not extension.startswith("."):
            extension = f".{extension}"
        return f"{prefix}/{uuid.uuid4().hex}{extension}"


class S3BlobStore(BlobStore):
    def __init__(self, client, bucket: str, prefix: str) -> None:
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    @classmethod
    def from_settings(cls) -> "S3BlobStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.BLOB_ENDPOINT_URL,
            aws_access_key_id=settings.BLOB_ACCESS_KEY_ID,
            aws_secret_access_key=settings.BLOB_SECRET_ACCESS_KEY,
            region_name=settings.BLOB_REGION,
        )
        logger.info(
            "Blob store configured: bucket=%s endpoint=%s",
            settings.BLOB_BUCKET,
            settings.BLOB_ENDPOINT_URL or "aws-default",
        )
        return cls(client, settings.BLOB_BUCKET, settings.BLOB_KEY_PREFIX)

    async def upload(
        self, data: bytes, content_type: str | None = None, extension: str = ""
    ) -> str:
        name = self.new_name(self.prefix, extension)
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=self.bucket,
                Key=name,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s to bucket %s failed: %s", name, self.bucket, exc)
            raise BlobStoreError(f"upload failed for {name}") from exc
        logger.info("Uploaded %d bytes as %s", len(data), name)
        return name

    async def download(self, name: str) -> BlobContent | None:
        try:
            response = await run_in_threadpool(
                self.client.get_object, Bucket=self.bucket, Key=name
            )
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                logger.debug("Blob %s not found", name)
                return None
            logger.error("Download of %s failed: %s", name, exc)
            raise BlobStoreError(f"download failed for {name}") from exc
        except BotoCoreError as exc:
            logger.error("Download of %s failed: %s", name, exc)
            raise BlobStoreError(f"download failed for {name}") from exc

        return BlobContent(
            name=name,
            content_type=response.get("ContentType") or "application/octet-stream",
            chunks=response["Body"].iter_chunks(chunk_size=_CHUNK_SIZE),
        )

    async def delete(self, name: str) -> None:
        try:
            await run_in_threadpool(
                self.client.delete_object, Bucket=self.bucket, Key=name
            )
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                logger.info("Blob %s already absent; treating delete as done", name)
                return
            logger.error("Delete of %s failed: %s", name, exc)
            raise BlobStoreError(f"delete failed for {name}") from exc
        except BotoCoreError as exc:
            logger.error("Delete of %s failed: %s", name, exc)
            raise BlobStoreError(f"delete failed for {name}") from exc
        logger.info("Deleted blob %s", name)


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """FastAPI dependency returning the process-wide blob store."""
    return S3BlobStore.from_settings()
