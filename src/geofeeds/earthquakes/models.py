"""
Data models for USGS earthquake events.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class Earthquake:
    """A single event from the USGS summary GeoJSON feed."""

    id: str
    magnitude: float
    place: str
    time: datetime
    longitude: float
    latitude: float
    depth_km: Optional[float]
    url: Optional[str] = None
    tsunami: bool = False
    significance: int = 0  # USGS "sig", 0-1000+
    alert: Optional[str] = None  # green, yellow, orange, red
    title: Optional[str] = None

    @property
    def coordinates(self) -> Tuple[float, float]:
        return (self.longitude, self.latitude)


@dataclass(frozen=True)
class EarthquakeSnapshot:
    """Earthquake data for one update cycle."""

    earthquakes: Tuple[Earthquake, ...] = ()
    total_count: int = 0
    significant_count: int = 0
    last_update: Optional[datetime] = None
    error: Optional[str] = None
