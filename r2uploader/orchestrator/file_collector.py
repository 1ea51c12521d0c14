"""File collection utilities for directory uploads."""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..errors import LocalFileError


@dataclass(frozen=True)
class FileEntry:
    """A file discovered by the walk."""
    path: Path
    size: int


class FileCollector:
    """Walks a directory tree lazily."""

    @staticmethod
    def iter_files(folder: Path) -> Iterator[FileEntry]:
        """
        Yield every non-directory entry under folder, recursively.

        Entries are visited in lexical order within each directory, and
        subdirectories are descended into at their sorted position, so the
        order is deterministic. Directories are identified without following
        symlinks; everything else is reported as a file.

        Raises:
            LocalFileError: when a directory cannot be listed or an entry
                cannot be stat'ed; raised mid-iteration
        """
        try:
            with os.scandir(folder) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as exc:
            raise LocalFileError(f"cannot list {folder}: {exc}", str(folder)) from exc

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                size = 0 if is_dir else entry.stat().st_size
            except OSError as exc:
                raise LocalFileError(f"cannot stat {entry.path}: {exc}", entry.path) from exc

            if is_dir:
                yield from FileCollector.iter_files(Path(entry.path))
            else:
                yield FileEntry(Path(entry.path), size)
