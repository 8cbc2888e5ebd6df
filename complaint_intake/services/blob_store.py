"""
Photo storage for complaint attachments.

Blobs are written once under a generated identifier and referenced from the
complaint record by that identifier. Two backends are available: a local
directory (development and tests) and an S3 bucket.
"""

import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import settings

logger = logging.getLogger(__name__)

# mimetypes maps image/jpeg to ".jpe" on some platforms
_EXTENSIONS = {"image/png": ".png", "image/jpeg": ".jpg"}


class BlobStoreError(Exception):
    """The underlying storage could not be read or written"""


class BlobNotFound(BlobStoreError):
    pass


@dataclass
class Blob:
    blob_id: str
    content: bytes
    content_type: str


def _new_blob_id() -> str:
    return uuid.uuid4().hex


class BlobStore:
    def store(self, content: bytes, filename: str, content_type: str) -> str:
        raise NotImplementedError

    def open(self, blob_id: str) -> Blob:
        raise NotImplementedError

    def delete(self, blob_id: str) -> None:
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    def __init__(self, root: str):
        self.root = root

    def _find(self, blob_id: str) -> Optional[str]:
        # Identifiers are generated hex strings; refuse anything that could
        # escape the upload directory
        if not blob_id or os.sep in blob_id or "." in blob_id:
            return None
        for extension in (*_EXTENSIONS.values(), ""):
            file_path = os.path.join(self.root, f"{blob_id}{extension}")
            if os.path.isfile(file_path):
                return file_path
        return None

    def store(self, content: bytes, filename: str, content_type: str) -> str:
        blob_id = _new_blob_id()
        extension = _EXTENSIONS.get(content_type, "")
        file_path = os.path.join(self.root, f"{blob_id}{extension}")
        try:
            os.makedirs(self.root, exist_ok=True)
            with open(file_path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise BlobStoreError(f"Failed to save {filename}: {e}") from e
        logger.info("Stored photo %s (%d bytes)", blob_id, len(content))
        return blob_id

    def open(self, blob_id: str) -> Blob:
        file_path = self._find(blob_id)
        if file_path is None:
            raise BlobNotFound(blob_id)
        content_type, _ = mimetypes.guess_type(file_path)
        try:
            with open(file_path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise BlobStoreError(f"Failed to read {blob_id}: {e}") from e
        return Blob(blob_id, content, content_type or "application/octet-stream")

    def delete(self, blob_id: str) -> None:
        file_path = self._find(blob_id)
        if file_path is None:
            return
        try:
            os.remove(file_path)
        except OSError as e:
            raise BlobStoreError(f"Failed to delete {blob_id}: {e}") from e
        logger.info("Deleted photo %s", blob_id)


class S3BlobStore(BlobStore):
    def __init__(self, bucket: str, prefix: str = "", client=None):
        self.bucket = bucket
        self.prefix = prefix
        self.client = client or boto3.client("s3")

    def _key(self, blob_id: str) -> str:
        return f"{self.prefix}{blob_id}"

    def store(self, content: bytes, filename: str, content_type: str) -> str:
        blob_id = _new_blob_id()
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=self._key(blob_id),
                Body=content,
                ContentType=content_type,
                Metadata={"filename": filename},
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError(f"Failed to upload {filename}: {e}") from e
        logger.info("Stored photo %s in s3://%s", blob_id, self.bucket)
        return blob_id

    def open(self, blob_id: str) -> Blob:
        try:
            response = self.client.get_object(
                Bucket=self.bucket, Key=self._key(blob_id)
            )
            content = response["Body"].read()
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                raise BlobNotFound(blob_id) from e
            raise BlobStoreError(f"Failed to read {blob_id}: {e}") from e
        except BotoCoreError as e:
            raise BlobStoreError(f"Failed to read {blob_id}: {e}") from e
        content_type = response.get("ContentType") or "application/octet-stream"
        return Blob(blob_id, content, content_type)

    def delete(self, blob_id: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=self._key(blob_id))
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError(f"Failed to delete {blob_id}: {e}") from e
        logger.info("Deleted photo %s from s3://%s", blob_id, self.bucket)


def create_blob_store() -> BlobStore:
    """Build the backend selected by BLOB_BACKEND"""
    if settings.blob_backend == "s3":
        if not settings.s3_bucket:
            raise ValueError("S3_BUCKET must be set when BLOB_BACKEND is s3")
        return S3BlobStore(settings.s3_bucket, settings.s3_prefix)
    if settings.blob_backend == "local":
        return LocalBlobStore(settings.upload_dir)
    raise ValueError(f"Unknown blob backend: {settings.blob_backend}")
