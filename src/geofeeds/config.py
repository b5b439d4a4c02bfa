"""
Configuration objects for the feed clients, processors and layer builders.

All configuration is plain frozen dataclasses so a composition root can build
one instance per feed and inject it; nothing reads process-wide state.
"""

from dataclasses import dataclass, field
from typing import Dict, Tuple

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ClientConfig:
    """HTTP settings shared by every feed client."""

    timeout: float = 30.0
    user_agent: str = "geofeeds/0.1.0"


def _default_category_colors() -> Dict[int, RGBA]:
    return {
        5: (139, 0, 139, 255),  # Cat 5
        4: (255, 0, 0, 255),  # Cat 4
        3: (255, 69, 0, 255),  # Cat 3
        2: (255, 140, 0, 255),  # Cat 2
        1: (255, 215, 0, 255),  # Cat 1
        0: (65, 105, 225, 255),  # Tropical storm
    }


def _default_category_sizes() -> Dict[int, float]:
    return {5: 30.0, 4: 26.0, 3: 23.0, 2: 21.0, 1: 19.0, 0: 20.0}


@dataclass(frozen=True)
class HurricaneConfig:
    """Settings for the active-hurricane feature service and its layers."""

    service_url: str = (
        "https://services9.arcgis.com/RHVPKKiFTONKtxq3/arcgis/rest/services/"
        "Active_Hurricanes_v1/FeatureServer"
    )
    positions_layer: int = 1
    secondary_forecast_layer: int = 0
    # Deployments expose the cone polygons under different layer numbers
    cone_layers: Tuple[int, ...] = (4, 5, 6)
    refresh_interval_minutes: float = 60.0

    category_colors: Dict[int, RGBA] = field(default_factory=_default_category_colors)
    category_sizes: Dict[int, float] = field(default_factory=_default_category_sizes)
    current_size_multiplier: float = 1.5

    historical_alpha: int = 220
    forecast_alpha: int = 180
    secondary_alpha: int = 200
    historical_track_width: float = 3.0
    forecast_track_width: float = 2.0
    historical_dot_radius: float = 4.0
    forecast_dot_radius: float = 5.0
    dot_stroke_color: RGBA = (255, 255, 255, 200)
    cone_fill_color: RGBA = (204, 0, 204, 40)
    cone_stroke_color: RGBA = (204, 0, 204, 160)
    cone_stroke_width: float = 1.0
    error_text_color: RGBA = (255, 107, 53, 255)

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_minutes * 60


@dataclass(frozen=True)
class IssConfig:
    """Settings for the wheretheiss.at orbital position API."""

    api_base_url: str = "https://api.wheretheiss.at/v1/satellites"
    satellite_id: int = 25544  # ISS NORAD id
    trajectory_duration_minutes: int = 60
    trajectory_point_interval_seconds: int = 120
    # The positions endpoint rejects long timestamp lists
    max_timestamps_per_request: int = 10
    update_interval_seconds: float = 10.0

    icon_size: float = 32.0
    icon_color: RGBA = (255, 245, 140, 255)
    trajectory_color: RGBA = (255, 245, 140, 200)
    trajectory_width: float = 1.0
    error_text_color: RGBA = (255, 107, 53, 255)


def _default_magnitude_sizes() -> Dict[int, float]:
    # Keyed by floor(magnitude), capped at 9
    return {9: 20, 8: 18, 7: 16, 6: 14, 5: 12, 4: 10, 3: 8, 2: 6, 1: 5, 0: 4}


@dataclass(frozen=True)
class EarthquakeConfig:
    """Settings for the USGS earthquake summary feed."""

    api_base_url: str = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary"
    endpoint: str = "all_day.geojson"
    update_interval_seconds: float = 3600.0
    min_magnitude: float = 0.0
    max_earthquakes: int = 1000
    significant_threshold: float = 4.5

    magnitude_sizes: Dict[int, float] = field(default_factory=_default_magnitude_sizes)
    size_multiplier: float = 0.5
    magnitude_base: float = 1.0
    magnitude_weight: float = 2.0
    icon_color: RGBA = (255, 0, 0, 255)
    error_text_color: RGBA = (255, 107, 53, 255)

    @property
    def url(self) -> str:
        return f"{self.api_base_url}/{self.endpoint}"
