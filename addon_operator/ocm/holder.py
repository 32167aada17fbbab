import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from addon_operator.utils.locks import ReadWriteLock
from .client import OCMClient

logger = logging.getLogger(__name__)


class OCMClientHolder:
    """Process-wide handle to the upgrade-tracking client.

    Reconciling workers borrow the current client under a shared lock; the
    AddonOperator handler swaps it under the exclusive lock whenever the
    operator-wide configuration changes.
    """

    def __init__(self, client: Optional[OCMClient] = None) -> None:
        self._client = client
        self._lock = ReadWriteLock()

    @property
    def configured(self) -> bool:
        return self._client is not None

    @asynccontextmanager
    async def borrow(self) -> AsyncIterator[Optional[OCMClient]]:
        """Yield the current client (or None) while holding a shared lock."""
        async with self._lock.read():
            yield self._client

    async def replace(self, client: Optional[OCMClient]) -> Optional[OCMClient]:
        """Install a new client and return the one it replaced.

        The replaced client is not closed here; callers close it once the
        exclusive lock has been released.
        """
        async with self._lock.write():
            previous, self._client = self._client, client
        logger.info(f"OCM client replaced: {previous!r} -> {client!r}")
        return previous

    async def close(self) -> None:
        previous = await self.replace(None)
        if previous is not None:
            await previous.close()
