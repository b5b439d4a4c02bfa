"""
ISS update cycle.
"""

import asyncio
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from ..config import IssConfig
from ..exceptions import GeoFeedsError
from ..manager import PollingManager, SnapshotStore
from ..paths import split_on_dateline
from .client import IssClient
from .models import IssSnapshot

logger = logging.getLogger(__name__)


class IssDataManager(PollingManager[IssSnapshot]):
    """Keeps the ISS position and trajectory snapshot current."""

    def __init__(
        self,
        client: IssClient,
        config: Optional[IssConfig] = None,
        store: Optional[SnapshotStore[IssSnapshot]] = None,
    ):
        self.client = client
        self.config = config or client.config
        super().__init__(
            store or SnapshotStore(IssSnapshot()), self.config.update_interval_seconds
        )

    async def update(self) -> None:
        previous = self.store.get()

        try:
            position, trajectory = await asyncio.gather(
                self.client.fetch_position(), self.client.fetch_trajectory()
            )
        except GeoFeedsError as e:
            logger.error(f"Failed to fetch ISS data: {e}")
            self.store.publish(
                replace(previous, error=str(e), last_update=datetime.now(timezone.utc))
            )
            return

        segments = split_on_dateline([p.coordinates for p in trajectory])
        self.store.publish(
            IssSnapshot(
                current_position=position,
                trajectory=tuple(trajectory),
                trajectory_segments=tuple(tuple(s) for s in segments),
                last_update=datetime.now(timezone.utc),
                error=None,
            )
        )
        logger.info(
            f"ISS data updated: position ({position.latitude:.2f}, "
            f"{position.longitude:.2f}), {len(trajectory)} trajectory points"
        )
