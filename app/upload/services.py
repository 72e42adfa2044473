"""
Upload Service

Stores editor-uploaded images in the S3-compatible object store.
"""

import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError
from werkzeug.utils import secure_filename

from analytics_core.errors import RequestValidationError, StoreError

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ("image/jpeg", "image/png", "image/gif")
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")


def create_object_storage(storage_config):
    """Create a boto3 S3 client for the configured endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=storage_config.endpoint_url or None,
        aws_access_key_id=storage_config.access_key or None,
        aws_secret_access_key=storage_config.secret_key or None,
        region_name=storage_config.region or None,
    )


def object_key(filename: str, now: Optional[datetime] = None) -> str:
    """Build ``YYYY/MM/<epoch-ms>-<filename>`` for an upload."""
    now = now or datetime.now(timezone.utc)
    millis = int(now.timestamp() * 1000)
    safe_name = secure_filename(filename or "") or "upload"
    return f"{now.year}/{now.month:02d}/{millis}-{safe_name}"


class UploadService:
    """Service for image uploads."""

    def __init__(self, s3_client, storage_config):
        self.s3 = s3_client
        self.bucket = storage_config.bucket
        self.public_base_url = storage_config.public_base_url or storage_config.endpoint_url or ""
        self.max_bytes = storage_config.max_upload_mb * 1024 * 1024
        self._bucket_ready = False
        self._bucket_lock = threading.Lock()

    def _ensure_bucket(self) -> None:
        with self._bucket_lock:
            if self._bucket_ready:
                return
            try:
                self.s3.head_bucket(Bucket=self.bucket)
            except ClientError as e:
                code = str(e.response.get("Error", {}).get("Code", ""))
                if code not in ("404", "NoSuchBucket", "NotFound"):
                    raise
                self.s3.create_bucket(Bucket=self.bucket)
                logger.info(f"Bucket {self.bucket} created")
            self._bucket_ready = True

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url.rstrip('/')}/{self.bucket}/{key}"

    def upload(self, file_storage, now: Optional[datetime] = None) -> str:
        """Validate and store an uploaded file, returning its public URL.

        Args:
            file_storage: werkzeug FileStorage from the multipart form
            now: Upload time (defaults to the current UTC time)
        """
        if file_storage is None or not file_storage.filename:
            raise RequestValidationError("No file uploaded")
        if file_storage.mimetype not in ALLOWED_TYPES:
            raise RequestValidationError(
                "Invalid file type", f"Supported types: {', '.join(ALLOWED_TYPES)}"
            )

        body = file_storage.read(self.max_bytes + 1)
        if len(body) > self.max_bytes:
            raise RequestValidationError(
                "File too large", f"Maximum size is {self.max_bytes // (1024 * 1024)} MB"
            )

        key = object_key(file_storage.filename, now)
        start = time.time()
        try:
            self._ensure_bucket()
            self.s3.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=file_storage.mimetype)
        except ClientError as e:
            logger.error(f"Upload of {key} failed: {e}")
            raise StoreError("Upload failed", {"message": str(e)}) from e

        logger.info(f"Uploaded {key} ({len(body)} bytes) in {time.time() - start:.2f}s")
        return self.public_url(key)

    def list_objects(self) -> List[Dict[str, Any]]:
        """List stored images, newest first.

        Returns:
            ``{name, url, lastModified}`` per image object; an absent bucket
            yields an empty gallery.
        """
        images = []
        try:
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket):
                for obj in page.get("Contents", []):
                    name = obj.get("Key", "")
                    if not name.lower().endswith(IMAGE_EXTENSIONS):
                        continue
                    images.append({
                        "name": name,
                        "url": self.public_url(name),
                        "lastModified": obj["LastModified"],
                    })
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchBucket", "NotFound"):
                return []
            logger.error(f"Listing bucket {self.bucket} failed: {e}")
            raise StoreError("Failed to fetch gallery", {"message": str(e)}) from e

        images.sort(key=lambda image: (image["lastModified"], image["name"]), reverse=True)
        for image in images:
            image["lastModified"] = image["lastModified"].isoformat()
        logger.debug(f"Gallery listed {len(images)} images from {self.bucket}")
        return images
