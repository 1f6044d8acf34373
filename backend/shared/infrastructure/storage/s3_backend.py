"""S3-compatible image storage (AWS S3, DigitalOcean Spaces, MinIO)."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from shared.config.settings import Settings
from shared.config.logging import get_logger
from . import ImageStorageError, StoredImage, generate_key

logger = get_logger(__name__)


class S3ImageStorage:
    """Upload public-read objects and address them through a public base URL."""

    def __init__(self, bucket: str, public_base_url: str = "", client: Any = None) -> None:
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.client = client or boto3.client("s3")

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ImageStorage":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint or None,
            region_name=settings.s3_region or None,
            aws_access_key_id=settings.s3_access_key or None,
            aws_secret_access_key=settings.s3_secret_key or None,
        )
        return cls(settings.s3_bucket, settings.s3_public_base_url, client=client)

    def save(self, filename: str, content_type: str, data: bytes) -> StoredImage:
        key = generate_key(filename)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type or "application/octet-stream",
                CacheControl="public, max-age=86400",
                ACL="public-read",
            )
        except (BotoCoreError, ClientError) as e:
            raise ImageStorageError(f"Upload of {key} to {self.bucket} failed: {e}") from e
        logger.debug("Image uploaded", bucket=self.bucket, key=key, size=len(data))
        return StoredImage(key=key, url=self.url(key))

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise ImageStorageError(f"Removal of {key} from {self.bucket} failed: {e}") from e

    def url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key.lstrip('/')}"
        # Bucket without a CDN in front: hand out a long-lived presigned URL
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=7 * 24 * 3600,
        )
