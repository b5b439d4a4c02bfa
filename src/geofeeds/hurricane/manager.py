"""
Hurricane update cycle: fetch, process and publish snapshots.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from ..config import HurricaneConfig
from ..exceptions import GeoFeedsError
from ..manager import PollingManager, SnapshotStore
from .client import HurricaneClient
from .models import HurricaneSnapshot
from .processor import assemble_cones, build_secondary_segments, process_storms

logger = logging.getLogger(__name__)


class HurricaneDataManager(PollingManager[HurricaneSnapshot]):
    """
    Owns the hurricane snapshot and refreshes it on a fixed interval.

    Each cycle fetches the three feeds in parallel, rebuilds every storm from
    scratch and publishes a new snapshot. When the positions feed fails or
    processing raises, the previous snapshot's data is kept and only
    ``error`` and ``last_update`` change; the next successful cycle clears
    the error.
    """

    def __init__(
        self,
        client: HurricaneClient,
        config: Optional[HurricaneConfig] = None,
        store: Optional[SnapshotStore[HurricaneSnapshot]] = None,
    ):
        self.client = client
        self.config = config or client.config
        super().__init__(
            store or SnapshotStore(HurricaneSnapshot()),
            self.config.refresh_interval_seconds,
        )

    async def update(self) -> None:
        previous = self.store.get()

        try:
            feeds = await self.client.fetch_all()

            if "positions" in feeds.errors:
                raise GeoFeedsError(
                    f"positions feed unavailable: {feeds.errors['positions']}"
                )

            processed = process_storms(feeds.positions, self.config)
            cones = assemble_cones(feeds.cones)
            secondary = build_secondary_segments(feeds.secondary_forecast, self.config)

            self.store.publish(
                HurricaneSnapshot(
                    positions=tuple(feeds.positions),
                    cones=tuple(cones),
                    processed_storms=tuple(processed),
                    secondary_segments=tuple(secondary),
                    last_update=datetime.now(timezone.utc),
                    error=None,
                )
            )
            logger.info(
                f"Hurricane data updated: {len(feeds.positions)} positions, "
                f"{len(processed)} storms, {len(cones)} cones"
            )

        except Exception as e:
            logger.error(f"Failed to update hurricane data: {e}", exc_info=True)
            # Timestamp still advances so callers can see the attempt
            self.store.publish(
                replace(
                    previous,
                    error=f"Failed to update hurricane data: {e}",
                    last_update=datetime.now(timezone.utc),
                )
            )
