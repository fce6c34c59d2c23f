"""S3-backed blob store for user and activity photos."""

import asyncio
import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from triptribe.errors import BackendError, ErrorCode
from triptribe.storage.interface import BlobStore

logger = logging.getLogger(__name__)


class S3BlobStore(BlobStore):
    def __init__(self, client: Any, bucket: str, base_url: str) -> None:
        self._client = client
        self._bucket = bucket
        self._base_url = base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self._base_url}/{key}"

    def owns(self, url: str) -> bool:
        return url.startswith(self._base_url + "/")

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            raise BackendError(f"Upload of {key} failed: {e}", code=ErrorCode.STORAGE_ERROR) from e

        logger.info("Uploaded %d bytes to %s", len(data), key)
        return self.url_for(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._client.delete_object, Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise BackendError(f"Delete of {key} failed: {e}", code=ErrorCode.STORAGE_ERROR) from e
