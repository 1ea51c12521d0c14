"""Orchestrator package - walks local paths and syncs them to the store."""
from .core import UploadOrchestrator
from .models import UploadRun, UploadTask

__all__ = ["UploadOrchestrator", "UploadRun", "UploadTask"]
