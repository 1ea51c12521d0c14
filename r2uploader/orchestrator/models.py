"""Orchestrator data models."""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class UploadTask:
    """One file about to be written to the store."""
    local_path: Path
    remote_key: str
    size_bytes: int
    content_type: Optional[str] = None


@dataclass
class UploadRun:
    """State of one invocation; its counts are the final report."""
    root_local_path: Path
    root_remote_prefix: str
    force: bool
    uploaded_count: int = 0
    skipped_count: int = 0
    is_directory: bool = False

    @property
    def total_files(self) -> int:
        return self.uploaded_count + self.skipped_count

    @property
    def summary(self) -> str:
        return f"uploaded {self.uploaded_count} files, skipped {self.skipped_count} files"
