import asyncio
import logging
import mimetypes
import threading
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.errors import StoreError

logger = logging.getLogger(__name__)


class S3BlobStore:
    """Client for storing resized images in S3 and returning their public URL."""

    def __init__(
        self,
        bucket: str | None = None,
        key_prefix: str | None = None,
        public_domain: str | None = None,
        s3_client: Any = None,
    ) -> None:
        self.bucket = bucket or settings.s3_bucket_name
        self.key_prefix = settings.s3_key_prefix if key_prefix is None else key_prefix
        self.public_domain = public_domain or settings.public_domain
        self._s3 = s3_client
        self._lock = threading.Lock()

    @property
    def s3(self) -> Any:
        with self._lock:
            if self._s3 is None:
                self._s3 = boto3.client(
                    "s3",
                    region_name=settings.aws_region,
                    endpoint_url=settings.s3_endpoint_url,
                )
            return self._s3

    def object_key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    def object_url(self, key: str) -> str:
        if self.public_domain:
            return f"https://{self.public_domain}/{key}"
        return f"https://{self.bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"

    async def store(self, data: bytes, name: str, length: int) -> str:
        return await asyncio.to_thread(self._put, data, name, length)

    def _put(self, data: bytes, name: str, length: int) -> str:
        key = self.object_key(name)
        content_type = mimetypes.guess_type(name)[0] or "application/octet-stream"
        try:
            self.s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentLength=length,
                ContentType=content_type,
            )
        except ClientError as exc:
            message = exc.response.get("Error", {}).get("Message", str(exc))
            logger.error(f"S3 error storing {key} in {self.bucket}: {message}")
            raise StoreError(f"Failed to store image in S3: {message}") from exc
        except BotoCoreError as exc:
            logger.error(f"AWS SDK error storing {key} in {self.bucket}: {exc}")
            raise StoreError(f"AWS SDK error during image storage: {exc}") from exc
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Unexpected error storing {key} in {self.bucket}: {exc}", exc_info=True)
            raise StoreError(f"Unexpected error during image storage: {exc}") from exc
        logger.info(f"Stored {length} bytes at s3://{self.bucket}/{key}")
        return self.object_url(key)


# Global instance
client = S3BlobStore()
