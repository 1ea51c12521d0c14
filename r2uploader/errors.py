"""Exception hierarchy for r2uploader."""
from typing import Optional


class UploaderError(Exception):
    """Base class for every fatal uploader error."""


class ConfigError(UploaderError):
    """Required configuration is missing or invalid."""


class LocalFileError(UploaderError):
    """Local filesystem access failed (stat, walk, open or read)."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class StoreError(UploaderError):
    """The object store rejected or failed an operation."""

    def __init__(self, operation: str, key: str, message: str, code: Optional[str] = None):
        super().__init__(f"{operation} {key!r} failed: {message}")
        self.operation = operation
        self.key = key
        self.code = code


class InvalidKeyError(UploaderError):
    """A computed remote key cannot be used."""


class UploadTimeoutError(UploaderError):
    """The run exceeded its wall-clock budget."""
