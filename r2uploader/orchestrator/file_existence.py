"""Skip-or-upload decision for a single key."""
import logging

from ..errors import StoreError
from ..models import HeadErrorPolicy, ObjectState
from ..protocols import IObjectStore

logger = logging.getLogger(__name__)


class ExistencePolicy:
    """Decides whether a key already present in the store should be skipped."""

    def __init__(self, storage: IObjectStore, on_head_error: HeadErrorPolicy = HeadErrorPolicy.SKIP):
        self._storage = storage
        self._on_head_error = on_head_error

    async def should_skip(self, key: str, force: bool) -> bool:
        """
        Return True when the upload of key should be skipped.

        Forced uploads never consult the store. Otherwise one existence check
        is issued: exists -> skip, not found -> upload. Other check failures
        follow the configured HeadErrorPolicy (SKIP treats them as existing,
        FAIL re-raises the StoreError).
        """
        if force:
            return False

        try:
            state = await self._storage.head(key)
        except StoreError as exc:
            if self._on_head_error is HeadErrorPolicy.FAIL:
                raise
            logger.warning("existence check for %s failed, treating as existing: %s", key, exc)
            return True

        return state is ObjectState.EXISTS
