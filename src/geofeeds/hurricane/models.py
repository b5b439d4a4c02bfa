"""
Data models for active hurricane positions, cones and processed storms.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

Coordinate = Tuple[float, float]
RGBA = Tuple[int, int, int, int]
SegmentType = Literal["historical", "forecast"]


@dataclass(frozen=True)
class RawPosition:
    """One observed or forecast storm position from the feature service."""

    storm_id: str
    storm_name: str
    basin: str
    longitude: float
    latitude: float
    category: float  # Saffir-Simpson, usually 0 on forecast records
    intensity: float  # Sustained wind (kt)
    pressure: Optional[float]  # Central pressure (mb)
    forecast_hour: int  # 0 = observed/current, >0 = forecast offset (h)
    timestamp: datetime
    storm_type: Optional[str] = None

    @property
    def coordinates(self) -> Coordinate:
        return (self.longitude, self.latitude)

    @property
    def is_forecast(self) -> bool:
        return self.forecast_hour > 0


@dataclass(frozen=True)
class TrajectoryCone:
    """Forecast uncertainty cone polygon for a storm."""

    storm_id: str
    storm_name: str
    forecast_hour: int
    category: float
    basin: str
    rings: Tuple[Tuple[Coordinate, ...], ...]


@dataclass(frozen=True)
class RenderableCone:
    """Cone reduced to its outer ring, ready for a polygon layer."""

    storm_id: str
    storm_name: str
    forecast_hour: int
    category: float
    polygon: Tuple[Coordinate, ...]


@dataclass(frozen=True)
class ClassifiedPositions:
    """A storm timeline split into historical, current and forecast points."""

    historical: Tuple[RawPosition, ...]
    current: Optional[RawPosition]
    forecast: Tuple[RawPosition, ...]


@dataclass(frozen=True)
class ColoredTrackSegment:
    """Two-point track segment colored by the category at its start."""

    path: Tuple[Coordinate, ...]
    color: RGBA
    category: int
    storm_name: str
    storm_id: str
    segment_type: SegmentType


@dataclass(frozen=True)
class ProcessedStorm:
    """Everything the layer builders need to draw one storm."""

    storm_id: str
    storm_name: str
    basin: str
    current_category: int
    historical: Tuple[RawPosition, ...]
    current: Optional[RawPosition]
    forecast: Tuple[RawPosition, ...]
    historical_track_path: Tuple[Coordinate, ...]
    forecast_track_path: Tuple[Coordinate, ...]
    colored_track_segments: Tuple[ColoredTrackSegment, ...]


@dataclass(frozen=True)
class HurricaneFeeds:
    """Raw result of one fetch fan-out; ``errors`` maps feed name to message."""

    positions: List[RawPosition] = field(default_factory=list)
    cones: List[TrajectoryCone] = field(default_factory=list)
    secondary_forecast: List[RawPosition] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HurricaneSnapshot:
    """
    Complete hurricane data bundle for one update cycle.

    Snapshots are never mutated; each cycle publishes a new one.
    """

    positions: Tuple[RawPosition, ...] = ()
    cones: Tuple[RenderableCone, ...] = ()
    processed_storms: Tuple[ProcessedStorm, ...] = ()
    secondary_segments: Tuple[ColoredTrackSegment, ...] = ()
    last_update: Optional[datetime] = None
    error: Optional[str] = None

    @property
    def has_error(self) -> bool:
        return self.error is not None

    def to_pandas(self) -> Any:
        """
        Flatten the processed storm positions into a pandas DataFrame.

        One row per position with its role (historical, current, forecast)
        and the category the track builder resolved for it.
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError(
                "pandas is required for DataFrame conversion. Install with: pip install pandas"
            ) from None

        from .processor import resolve_category

        columns = [
            "storm_id",
            "storm_name",
            "basin",
            "role",
            "longitude",
            "latitude",
            "category",
            "intensity",
            "pressure",
            "forecast_hour",
            "timestamp",
        ]
        rows: List[Dict[str, Any]] = []
        for storm in self.processed_storms:
            roles = [("historical", p) for p in storm.historical]
            if storm.current is not None:
                roles.append(("current", storm.current))
            roles.extend(("forecast", p) for p in storm.forecast)

            for role, position in roles:
                source = "derived" if role == "forecast" else "direct"
                rows.append(
                    {
                        "storm_id": storm.storm_id,
                        "storm_name": storm.storm_name,
                        "basin": storm.basin,
                        "role": role,
                        "longitude": position.longitude,
                        "latitude": position.latitude,
                        "category": resolve_category(position, source),
                        "intensity": position.intensity,
                        "pressure": position.pressure,
                        "forecast_hour": position.forecast_hour,
                        "timestamp": position.timestamp,
                    }
                )

        return pd.DataFrame(rows, columns=columns)
