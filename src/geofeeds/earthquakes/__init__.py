"""
Recent earthquakes from the USGS summary GeoJSON feed.
"""

from .client import EarthquakeClient, parse_earthquake
from .manager import EarthquakeDataManager
from .models import Earthquake, EarthquakeSnapshot

__all__ = [
    "EarthquakeClient",
    "EarthquakeDataManager",
    "Earthquake",
    "EarthquakeSnapshot",
    "parse_earthquake",
]
