"""
Blob storage for uploaded work files.

``BlobStore`` is the capability the upload dispatcher depends on. Two
providers implement it:

- ``S3BlobStore``: puts the buffer into an S3 bucket with boto3 and returns a
  public object URL.
- ``LocalBlobStore``: writes under ``settings.upload_dir``; the app serves
  that directory at ``/uploads``.

Each upload is a single attempt. Provider errors are raised as
``UpstreamError`` with the provider's message and are never retried.
"""
import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("image", "video", "raw", "auto")


@dataclass(frozen=True)
class BlobUploadResult:
    url: str
    public_id: str
    resource_type: str
    format: str
    bytes: int


def resolve_resource_type(mimetype: Optional[str]) -> str:
    """Map a MIME type onto the coarse resource kind used for storage."""
    mimetype = (mimetype or "").lower()
    if mimetype.startswith("image/"):
        return "image"
    if mimetype.startswith("video/"):
        return "video"
    return "raw"


def guess_format(filename: Optional[str], content_type: Optional[str]) -> str:
    """Return a short format tag such as ``jpg`` or ``pdf`` (may be empty)."""
    if filename:
        ext = os.path.splitext(filename)[1].lstrip(".").lower()
        if ext:
            return ext
    if content_type:
        ext = mimetypes.guess_extension(content_type.split(";")[0].strip())
        if ext:
            return ext.lstrip(".").lower()
    return ""


def build_key(folder: str, resource_type: str, fmt: str) -> str:
    key = f"{folder.strip('/')}/{resource_type}/{uuid.uuid4().hex}"
    if fmt:
        key = f"{key}.{fmt}"
    return key


class BlobStore(Protocol):
    def upload(
        self,
        data: bytes,
        resource_type: str = "auto",
        folder: str = "student-works",
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobUploadResult: ...

    def delete(self, public_id: str, resource_type: str = "raw") -> None: ...


def _resolve(resource_type: str, content_type: Optional[str]) -> str:
    if resource_type not in RESOURCE_TYPES:
        raise ValueError(f"Unknown resource type: {resource_type}")
    if resource_type == "auto":
        return resolve_resource_type(content_type)
    return resource_type


class S3BlobStore:
    """Blob store backed by an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        client: Any = None,
        region: str = "us-east-1",
        public_base_url: Optional[str] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.client = client or boto3.client("s3", region_name=region)
        self.public_base_url = public_base_url

    def object_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(
        self,
        data: bytes,
        resource_type: str = "auto",
        folder: str = "student-works",
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobUploadResult:
        resource_type = _resolve(resource_type, content_type)
        fmt = guess_format(filename, content_type)
        key = build_key(folder, resource_type, fmt)

        logger.info(
            "Uploading %s (%d bytes) to s3://%s/%s",
            filename or "buffer",
            len(data),
            self.bucket,
            key,
        )
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("S3 upload error: %s", e)
            raise UpstreamError(str(e)) from e

        return BlobUploadResult(
            url=self.object_url(key),
            public_id=key,
            resource_type=resource_type,
            format=fmt,
            bytes=len(data),
        )

    def delete(self, public_id: str, resource_type: str = "raw") -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=public_id)
        except (ClientError, BotoCoreError) as e:
            raise UpstreamError(str(e)) from e


class LocalBlobStore:
    """Blob store writing to the local filesystem."""

    def __init__(self, upload_dir: str, base_url: str = "/uploads"):
        self.upload_dir = upload_dir
        self.base_url = base_url.rstrip("/")

    def upload(
        self,
        data: bytes,
        resource_type: str = "auto",
        folder: str = "student-works",
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> BlobUploadResult:
        resource_type = _resolve(resource_type, content_type)
        fmt = guess_format(filename, content_type)
        key = build_key(folder, resource_type, fmt)
        file_path = os.path.join(self.upload_dir, *key.split("/"))

        try:
            # Create upload directory if it doesn't exist
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise UpstreamError(f"Failed to save file: {e}") from e

        return BlobUploadResult(
            url=f"{self.base_url}/{key}",
            public_id=key,
            resource_type=resource_type,
            format=fmt,
            bytes=len(data),
        )

    def delete(self, public_id: str, resource_type: str = "raw") -> None:
        """Delete a file from filesystem"""
        file_path = os.path.join(self.upload_dir, *public_id.split("/"))
        if os.path.exists(file_path):
            os.remove(file_path)


def create_blob_store() -> BlobStore:
    """Build the blob store selected by ``settings.storage_backend``."""
    if settings.storage_backend == "local":
        base_url = settings.storage_public_base_url or "/uploads"
        return LocalBlobStore(settings.upload_dir, base_url=base_url)
    if settings.storage_backend != "s3":
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    client = boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )
    return S3BlobStore(
        settings.s3_bucket,
        client=client,
        region=settings.aws_region,
        public_base_url=settings.storage_public_base_url,
    )
