"""
Snapshot storage and timer-driven polling shared by the feed managers.
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")


class SnapshotStore(Generic[S]):
    """
    Single-writer cell holding the latest snapshot of a feed.

    The update cycle is the only writer and replaces the whole snapshot;
    readers always see either the previous or the next snapshot, never a
    half-written one.
    """

    def __init__(self, initial: S):
        self._snapshot = initial

    def get(self) -> S:
        """Return the current snapshot."""
        return self._snapshot

    def publish(self, snapshot: S) -> None:
        """Replace the current snapshot."""
        self._snapshot = snapshot


class PollingManager(Generic[S]):
    """
    Runs a feed's update cycle once on ``initialize()`` and then on a fixed
    interval until ``destroy()``.

    Subclasses implement ``update()``, which must publish a new snapshot to
    ``self.store`` and handle its own feed errors. Cycles never overlap: a
    cycle requested while another is in flight is skipped.

    Examples:
        >>> manager = HurricaneDataManager(client)
        >>> await manager.initialize()
        >>> snapshot = manager.get_data()
        >>> manager.destroy()
    """

    def __init__(self, store: SnapshotStore[S], update_interval_seconds: float):
        self.store = store
        self.update_interval_seconds = update_interval_seconds
        self._task: Optional["asyncio.Task[None]"] = None
        self._initialized = False
        self._in_flight = False
        self._last_fetch_time: Optional[datetime] = None

    async def update(self) -> None:
        """Run one fetch-and-process cycle and publish the result."""
        raise NotImplementedError

    async def _run_cycle(self) -> bool:
        if self._in_flight:
            logger.warning(
                f"{type(self).__name__}: previous update still running, skipping cycle"
            )
            return False

        self._in_flight = True
        try:
            await self.update()
            self._last_fetch_time = datetime.now(timezone.utc)
            return True
        finally:
            self._in_flight = False

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.update_interval_seconds)
            try:
                await self._run_cycle()
            except Exception as e:
                # update() records feed errors in the snapshot; anything that
                # escapes is logged and retried on the next tick
                logger.error(f"{type(self).__name__} update failed: {e}", exc_info=True)

    async def initialize(self) -> None:
        """Fetch once, then start the background polling task."""
        if self._initialized:
            return

        await self._run_cycle()
        self._task = asyncio.get_running_loop().create_task(self._poll())
        self._initialized = True
        logger.info(
            f"{type(self).__name__} initialized "
            f"(interval {self.update_interval_seconds:g}s)"
        )

    def destroy(self) -> None:
        """Stop polling. In-flight requests are not aborted."""
        if self._task is not None:
            self._task.cancel()
            self._task = None
        self._initialized = False
        self._last_fetch_time = None

    async def refresh(self) -> bool:
        """
        Trigger an immediate update outside the polling schedule.

        Returns:
            False if the update was skipped because one is already running
        """
        return await self._run_cycle()

    def get_data(self) -> S:
        """Return the latest published snapshot."""
        return self.store.get()

    def get_last_fetch_time(self) -> Optional[datetime]:
        return self._last_fetch_time

    def get_next_update_time(self) -> Optional[datetime]:
        if self._last_fetch_time is None:
            return None
        return self._last_fetch_time + timedelta(seconds=self.update_interval_seconds)

    @property
    def is_initialized(self) -> bool:
        return self._initialized
