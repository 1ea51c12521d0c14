"""
Storage Service - Single Responsibility: talk to the S3-compatible store.

Wraps a boto3 S3 client. Blocking calls run on a worker thread.
"""
import asyncio
import logging
from typing import Any, BinaryIO, Optional

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import ConfigError, StoreError
from ..models import ObjectState, StoreConfig

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def build_s3_client(config: StoreConfig):
    """Create a boto3 S3 client for the account endpoint."""
    return boto3.client(
        "s3",
        endpoint_url=config.endpoint_url,
        aws_access_key_id=config.access_key_id,
        aws_secret_access_key=config.secret_access_key,
        region_name="auto",
        config=BotoConfig(
            signature_version="s3v4",
            # No retries: a failed request aborts the run
            retries={"total_max_attempts": 1, "mode": "standard"},
            # Body stream is read once, while sending
            request_checksum_calculation="when_required",
            response_checksum_validation="when_required",
            s3={"payload_signing_enabled": False},
        ),
    )


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", "Unknown"))


def _is_not_found(exc: ClientError) -> bool:
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return status == 404 or _error_code(exc) in NOT_FOUND_CODES


class S3StorageService:
    """
    Service for existence checks and writes against one bucket.

    Usage:
        storage = S3StorageService.from_config(store_config)
        if await storage.head("docs/a.txt") is ObjectState.NOT_FOUND:
            await storage.put("docs/a.txt", fh, "text/plain", size)
    """

    def __init__(self, client: Any, bucket: str):
        """
        Initialize storage service.

        Args:
            client: boto3 S3 client
            bucket: Bucket every key lives in
        """
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_config(cls, config: StoreConfig) -> "S3StorageService":
        try:
            client = build_s3_client(config)
        except (BotoCoreError, ValueError) as exc:
            raise ConfigError(f"cannot create S3 client for {config.endpoint_url}: {exc}") from exc
        return cls(client, config.bucket)

    @property
    def bucket(self) -> str:
        return self._bucket

    async def head(self, key: str) -> ObjectState:
        """
        Check whether key exists.

        Returns:
            ObjectState.EXISTS or ObjectState.NOT_FOUND

        Raises:
            StoreError: for any failure other than not-found
        """
        try:
            await asyncio.to_thread(self._client.head_object, Bucket=self._bucket, Key=key)
        except ClientError as exc:
            if _is_not_found(exc):
                logger.debug("head %s: not found", key)
                return ObjectState.NOT_FOUND
            raise StoreError("head", key, str(exc), code=_error_code(exc)) from exc
        except BotoCoreError as exc:
            raise StoreError("head", key, str(exc)) from exc

        logger.debug("head %s: exists", key)
        return ObjectState.EXISTS

    async def put(
        self,
        key: str,
        body: BinaryIO,
        content_type: Optional[str],
        content_length: int,
    ) -> None:
        """
        Upload body under key.

        Args:
            key: Remote key
            body: Readable binary stream
            content_type: MIME type, omitted when None so the store picks a default
            content_length: Exact number of bytes body yields

        Raises:
            StoreError: on any failure
        """
        params = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentLength": content_length,
        }
        if content_type:
            params["ContentType"] = content_type

        try:
            await asyncio.to_thread(self._client.put_object, **params)
        except ClientError as exc:
            raise StoreError("put", key, str(exc), code=_error_code(exc)) from exc
        except BotoCoreError as exc:
            raise StoreError("put", key, str(exc)) from exc
