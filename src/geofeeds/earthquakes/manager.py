"""
Earthquake update cycle.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from ..config import EarthquakeConfig
from ..exceptions import GeoFeedsError
from ..manager import PollingManager, SnapshotStore
from .client import EarthquakeClient
from .models import EarthquakeSnapshot

logger = logging.getLogger(__name__)


class EarthquakeDataManager(PollingManager[EarthquakeSnapshot]):
    """Keeps the recent-earthquake snapshot current."""

    def __init__(
        self,
        client: EarthquakeClient,
        config: Optional[EarthquakeConfig] = None,
        store: Optional[SnapshotStore[EarthquakeSnapshot]] = None,
    ):
        self.client = client
        self.config = config or client.config
        super().__init__(
            store or SnapshotStore(EarthquakeSnapshot()),
            self.config.update_interval_seconds,
        )

    async def update(self) -> None:
        previous = self.store.get()

        try:
            earthquakes = await self.client.fetch_earthquakes()
        except GeoFeedsError as e:
            logger.error(f"Failed to fetch earthquake data: {e}")
            self.store.publish(
                replace(previous, error=str(e), last_update=datetime.now(timezone.utc))
            )
            return

        significant = sum(
            1 for q in earthquakes if q.magnitude >= self.config.significant_threshold
        )
        self.store.publish(
            EarthquakeSnapshot(
                earthquakes=tuple(earthquakes),
                total_count=len(earthquakes),
                significant_count=significant,
                last_update=datetime.now(timezone.utc),
                error=None,
            )
        )
        logger.info(
            f"Earthquake data updated: {len(earthquakes)} events, {significant} significant"
        )
