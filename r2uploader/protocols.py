"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator only talks to the store through these.
"""
from typing import BinaryIO, Optional, Protocol, runtime_checkable

from .models import ObjectState


@runtime_checkable
class IObjectStore(Protocol):
    """Interface for object store operations."""

    async def head(self, key: str) -> ObjectState:
        """Report whether key exists. Raises StoreError on other failures."""
        ...

    async def put(
        self,
        key: str,
        body: BinaryIO,
        content_type: Optional[str],
        content_length: int,
    ) -> None:
        """Write body under key. Raises StoreError on failure."""
        ...
