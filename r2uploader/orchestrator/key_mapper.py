"""Remote key computation."""
import os
import posixpath
from pathlib import Path
from typing import Union

PathLike = Union[str, os.PathLike]


def normalize_remote_path(remote_path: str) -> str:
    """Strip leading slashes from a user supplied remote path."""
    return remote_path.lstrip("/")


def map_key(root: PathLike, file_path: PathLike, prefix: str) -> str:
    """
    Build the store key for file_path uploaded from root under prefix.

    Example:
        map_key("/a/b", "/a/b/c/d.txt", "/x/y/") -> "x/y/c/d.txt"
    """
    rel = Path(file_path).relative_to(Path(root)).as_posix()
    joined = posixpath.join(prefix, rel) if prefix else rel
    return posixpath.normpath(joined).lstrip("/")
