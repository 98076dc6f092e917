"""
Remote media host client (S3-compatible object storage).

Complaint images are not stored by Django; they are pushed to a bucket and
only the public URL and object key (``public_id``) are persisted on the
complaint.  The client receives its whole configuration through the
constructor; ``get_media_storage()`` builds the process-wide instance from
``settings.MEDIA_STORAGE`` on first use.

Upload failures raise ``MediaStorageError`` so the caller can abort the
surrounding operation.  Deletion is reported as a boolean because callers
treat it as best-effort.
"""

from __future__ import annotations

import logging
import mimetypes
import threading
import uuid
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import BinaryIO, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings

logger = logging.getLogger(__name__)


class MediaStorageError(Exception):
    """Raised when the media host rejects or fails an upload."""


@dataclass(frozen=True)
class StoredMedia:
    """Location of an uploaded object."""

    url: str
    public_id: str


class MediaStorage:
    """S3/MinIO-compatible storage for complaint attachments."""

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        folder: str = "",
        endpoint_url: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        public_base_url: Optional[str] = None,
        client=None,
    ):
        self.bucket = bucket
        self.region = region
        self.folder = folder.strip("/")
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

    @classmethod
    def from_settings(cls, config: dict) -> "MediaStorage":
        return cls(
            bucket=config["BUCKET"],
            region=config["REGION"],
            folder=config.get("FOLDER", ""),
            endpoint_url=config.get("ENDPOINT_URL"),
            access_key_id=config.get("ACCESS_KEY_ID"),
            secret_access_key=config.get("SECRET_ACCESS_KEY"),
            public_base_url=config.get("PUBLIC_BASE_URL"),
        )

    def generate_key(self, filename: str) -> str:
        """Unique object key under the configured folder, keeping the extension."""
        suffix = PurePosixPath(filename or "").suffix.lower()
        name = f"{uuid.uuid4().hex}{suffix}"
        return f"{self.folder}/{name}" if self.folder else name

    def get_file_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload_fileobj(
        self,
        file_obj: BinaryIO,
        filename: str,
        content_type: Optional[str] = None,
    ) -> StoredMedia:
        """
        Upload a file-like object.

        Returns:
            ``StoredMedia`` with the public URL and the object key.

        Raises:
            MediaStorageError: If the media host rejects the upload.
        """
        key = self.generate_key(filename)
        content_type = content_type or mimetypes.guess_type(filename or "")[0]
        extra_args = {"ContentType": content_type} if content_type else {}

        try:
            self.client.upload_fileobj(
                file_obj,
                self.bucket,
                key,
                ExtraArgs=extra_args,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Error uploading %s to media host: %s", key, e)
            raise MediaStorageError(str(e)) from e

        logger.info("Uploaded media object: %s", key)
        return StoredMedia(url=self.get_file_url(key), public_id=key)

    def delete(self, public_id: str) -> bool:
        """Delete an object.  Returns ``False`` instead of raising."""
        try:
            self.client.delete_object(Bucket=self.bucket, Key=public_id)
        except (BotoCoreError, ClientError) as e:
            logger.error("Error deleting %s from media host: %s", public_id, e)
            return False

        logger.info("Deleted media object: %s", public_id)
        return True


_storage: Optional[MediaStorage] = None
_storage_lock = threading.Lock()


def get_media_storage() -> MediaStorage:
    """Return the process-wide ``MediaStorage`` built from settings."""
    global _storage
    if _storage is None:
        with _storage_lock:
            if _storage is None:
                _storage = MediaStorage.from_settings(settings.MEDIA_STORAGE)
    return _storage


def reset_media_storage() -> None:
    """Drop the cached client (settings changed, or process shutdown)."""
    global _storage
    with _storage_lock:
        _storage = None
