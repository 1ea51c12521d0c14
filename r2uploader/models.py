"""
Models for r2uploader.

Immutable dataclasses built once at startup and passed down explicitly.
"""
from dataclasses import dataclass
from enum import Enum


R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"
DEFAULT_TIMEOUT = 3600.0  # whole run, not per file


class ObjectState(Enum):
    """Result of an existence check against the store."""
    EXISTS = "exists"
    NOT_FOUND = "not_found"


class HeadErrorPolicy(Enum):
    """What to do when an existence check fails with something other than not-found."""
    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class StoreConfig:
    """Immutable connection settings for the object store."""
    bucket: str
    account_id: str
    access_key_id: str
    secret_access_key: str

    @property
    def endpoint_url(self) -> str:
        return R2_ENDPOINT_TEMPLATE.format(account_id=self.account_id)

    def __repr__(self) -> str:
        return (
            f"StoreConfig(bucket={self.bucket!r}, account_id={self.account_id!r}, "
            f"access_key_id={self.access_key_id!r}, secret_access_key='***')"
        )


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload runs."""
    force: bool = True
    timeout: float = DEFAULT_TIMEOUT
    head_error_policy: HeadErrorPolicy = HeadErrorPolicy.SKIP
