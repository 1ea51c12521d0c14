"""
Services module - Single Responsibility Principle.

Each service handles one specific concern.
"""
from .storage import S3StorageService, build_s3_client

__all__ = [
    "S3StorageService",
    "build_s3_client",
]
