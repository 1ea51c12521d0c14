"""
r2uploader - upload a file or directory tree to an S3-compatible store.

Usage:
    from r2uploader import UploadOrchestrator, UploadConfig, S3StorageService
    from r2uploader.config import load_store_config

    storage = S3StorageService.from_config(load_store_config())
    orchestrator = UploadOrchestrator(storage, UploadConfig(force=False))
    run = await orchestrator.run("./public", "/site")
    print(run.summary)  # uploaded 12 files, skipped 3 files
"""
from .orchestrator import UploadOrchestrator, UploadRun, UploadTask
from .models import HeadErrorPolicy, ObjectState, StoreConfig, UploadConfig
from .errors import (
    ConfigError,
    InvalidKeyError,
    LocalFileError,
    StoreError,
    UploaderError,
    UploadTimeoutError,
)
from .services import S3StorageService

__version__ = "0.1.0"
__all__ = [
    # Main
    "UploadOrchestrator",
    "UploadRun",
    "UploadTask",
    # Models
    "HeadErrorPolicy",
    "ObjectState",
    "StoreConfig",
    "UploadConfig",
    # Errors
    "ConfigError",
    "InvalidKeyError",
    "LocalFileError",
    "StoreError",
    "UploaderError",
    "UploadTimeoutError",
    # Services
    "S3StorageService",
]
