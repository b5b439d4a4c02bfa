"""
Hurricane data processing: grouping, classification, category resolution and
category-colored track segments.

Pipeline for one update cycle:

    RawPosition list
        -> group_by_storm()        one ordered timeline per storm
        -> classify()              historical / current / forecast
        -> build_segments()        two-point colored segments
        -> ProcessedStorm

Category resolution has two sources and the choice matters:

* Observed records (forecast hour 0) carry a reliable Saffir-Simpson field
  (``SS``), so their category is read directly.
* Forecast records carry wind speed but their ``SS`` field is usually zero,
  so their category is derived from wind speed, falling back to ``SS`` only
  when no wind speed is reported.

Every caller that needs a category goes through resolve_category() so the
two rules cannot drift apart.
"""

import logging
import math
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from ..config import HurricaneConfig
from ..paths import unwrap_segment
from .models import (
    RGBA,
    ClassifiedPositions,
    ColoredTrackSegment,
    Coordinate,
    ProcessedStorm,
    RawPosition,
    RenderableCone,
    SegmentType,
    TrajectoryCone,
)

logger = logging.getLogger(__name__)

CategorySource = Literal["direct", "derived"]

_DEFAULT_CONFIG = HurricaneConfig()

# Minimum sustained wind (kt) for each Saffir-Simpson category, highest first
WIND_THRESHOLDS: Tuple[Tuple[float, int], ...] = (
    (137, 5),
    (113, 4),
    (96, 3),
    (83, 2),
    (64, 1),
)


def wind_speed_to_category(wind_speed_knots: float) -> int:
    """
    Convert sustained wind speed in knots to a Saffir-Simpson category.

    Anything below hurricane strength (64 kt), tropical storms and
    depressions included, maps to category 0.

    Examples:
        >>> wind_speed_to_category(137)
        5
        >>> wind_speed_to_category(63.9)
        0
    """
    for threshold, category in WIND_THRESHOLDS:
        if wind_speed_knots >= threshold:
            return category
    return 0


def normalize_category(value: Optional[float]) -> int:
    """Clamp a raw category value to an integer in [0, 5]."""
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, min(5, math.floor(number)))


def resolve_category(position: RawPosition, source: CategorySource = "direct") -> int:
    """
    Resolve the intensity category of a position.

    Args:
        position: The position to classify
        source: ``"direct"`` for observed/current positions (uses the
            category field), ``"derived"`` for forecast positions (uses wind
            speed when it is reported, else the category field)

    Returns:
        Category in [0, 5]; 0 means tropical storm, not "no storm"

    Raises:
        ValueError: If ``source`` is not a known category source
    """
    if source == "direct":
        return normalize_category(position.category)
    if source == "derived":
        wind_speed = position.intensity or 0
        if wind_speed > 0:
            return wind_speed_to_category(wind_speed)
        return normalize_category(position.category)
    raise ValueError(f"Unknown category source: {source!r}")


def category_color(category: float, config: Optional[HurricaneConfig] = None) -> RGBA:
    """Look up the RGBA color for a category (normalized to 0..5)."""
    colors = (config or _DEFAULT_CONFIG).category_colors
    return colors.get(normalize_category(category), colors[0])


def category_size(
    category: float, current: bool = False, config: Optional[HurricaneConfig] = None
) -> float:
    """Look up the icon size for a category; current positions are enlarged."""
    config = config or _DEFAULT_CONFIG
    size = config.category_sizes.get(normalize_category(category), config.category_sizes[0])
    if current:
        size *= config.current_size_multiplier
    return size


def category_text(category: float) -> str:
    """Human-readable label for a category."""
    normalized = normalize_category(category)
    if normalized == 0:
        return "Tropical Storm"
    return f"Cat {normalized} Hurricane"


def group_by_storm(positions: Sequence[RawPosition]) -> Dict[str, List[RawPosition]]:
    """
    Group positions by storm id, each group sorted ascending by timestamp.

    Positions without a storm id are discarded. The sort is stable, so
    positions sharing a timestamp keep their feed order.
    """
    if not isinstance(positions, (list, tuple)):
        logger.warning(
            f"Expected a list of positions, got {type(positions).__name__}; ignoring"
        )
        return {}

    groups: Dict[str, List[RawPosition]] = {}
    for position in positions:
        storm_id = getattr(position, "storm_id", None)
        if not storm_id:
            continue
        groups.setdefault(storm_id, []).append(position)

    return {
        storm_id: sorted(group, key=lambda p: p.timestamp)
        for storm_id, group in groups.items()
    }


def classify(ordered: Sequence[RawPosition]) -> ClassifiedPositions:
    """
    Split a storm timeline into historical, current and forecast positions.

    The last observed (forecast hour 0) position becomes ``current`` and is
    removed from ``historical``. Storms with no observed position get
    ``current=None``.
    """
    historical = [p for p in ordered if p.forecast_hour == 0]
    forecast = sorted(
        (p for p in ordered if p.forecast_hour > 0), key=lambda p: p.forecast_hour
    )

    current = historical.pop() if historical else None

    return ClassifiedPositions(
        historical=tuple(historical), current=current, forecast=tuple(forecast)
    )


def build_track_paths(
    classified: ClassifiedPositions,
) -> Tuple[Tuple[Coordinate, ...], Tuple[Coordinate, ...]]:
    """
    Build the historical and forecast centerlines for a classified storm.

    The forecast centerline starts at the current position so the two lines
    join up; it is empty when there is no current position or no forecast.
    """
    historical_path = tuple(p.coordinates for p in classified.historical)

    forecast_path: Tuple[Coordinate, ...] = ()
    if classified.current is not None and classified.forecast:
        forecast_path = (classified.current.coordinates,) + tuple(
            p.coordinates for p in classified.forecast
        )

    return historical_path, forecast_path


def _make_segment(
    start: RawPosition,
    end: RawPosition,
    category: int,
    alpha: int,
    segment_type: SegmentType,
    storm_name: str,
    storm_id: str,
    config: HurricaneConfig,
) -> ColoredTrackSegment:
    red, green, blue, _ = category_color(category, config)
    return ColoredTrackSegment(
        path=tuple(unwrap_segment(start.coordinates, end.coordinates)),
        color=(red, green, blue, alpha),
        category=category,
        storm_name=storm_name,
        storm_id=storm_id,
        segment_type=segment_type,
    )


def build_segments(
    ordered: Sequence[RawPosition],
    storm_name: str,
    storm_id: str,
    config: Optional[HurricaneConfig] = None,
) -> List[ColoredTrackSegment]:
    """
    Create category-colored two-point track segments for one storm.

    Historical pass: consecutive pairs of the timestamp-ordered timeline where
    both points are observed (forecast hour 0), each segment colored by the
    direct category of its first point. A pair with a forecast point on
    either end is skipped, not bridged.

    Forecast pass: a bridge from the current position to the first forecast
    point (current's direct category), then consecutive forecast positions,
    each colored by the derived category of its first point.

    Args:
        ordered: Timeline for a single storm, sorted by timestamp
        storm_name: Display name attached to every segment
        storm_id: Storm identifier attached to every segment
        config: Colors and alpha values (defaults to HurricaneConfig())

    Returns:
        Historical segments followed by forecast segments
    """
    config = config or _DEFAULT_CONFIG
    classified = classify(ordered)
    segments: List[ColoredTrackSegment] = []

    for start, end in zip(ordered, ordered[1:]):
        if start.forecast_hour > 0 or end.forecast_hour > 0:
            continue
        segments.append(
            _make_segment(
                start,
                end,
                resolve_category(start, "direct"),
                config.historical_alpha,
                "historical",
                storm_name,
                storm_id,
                config,
            )
        )

    if classified.current is None or not classified.forecast:
        return segments

    segments.append(
        _make_segment(
            classified.current,
            classified.forecast[0],
            resolve_category(classified.current, "direct"),
            config.forecast_alpha,
            "forecast",
            storm_name,
            storm_id,
            config,
        )
    )

    forecast = classified.forecast
    for start, end in zip(forecast, forecast[1:]):
        segments.append(
            _make_segment(
                start,
                end,
                resolve_category(start, "derived"),
                config.forecast_alpha,
                "forecast",
                storm_name,
                storm_id,
                config,
            )
        )

    return segments


def build_secondary_segments(
    positions: Sequence[RawPosition], config: Optional[HurricaneConfig] = None
) -> List[ColoredTrackSegment]:
    """
    Build forecast segments from the secondary per-storm forecast feed.

    That feed carries its own category field, so segments are colored by the
    direct category of each pair's first point, with no wind speed
    conversion. An empty feed yields no segments.
    """
    config = config or _DEFAULT_CONFIG
    segments: List[ColoredTrackSegment] = []

    for storm_id, timeline in group_by_storm(positions).items():
        ordered = sorted(timeline, key=lambda p: p.forecast_hour)
        storm_name = ordered[0].storm_name or "Unknown Storm"
        for start, end in zip(ordered, ordered[1:]):
            segments.append(
                _make_segment(
                    start,
                    end,
                    resolve_category(start, "direct"),
                    config.secondary_alpha,
                    "forecast",
                    storm_name,
                    storm_id,
                    config,
                )
            )

    return segments


def assemble_cones(cones: Sequence[TrajectoryCone]) -> List[RenderableCone]:
    """Reduce each cone to its outer ring; cones without ring data are skipped."""
    renderable: List[RenderableCone] = []
    for cone in cones:
        if not cone.rings or not cone.rings[0]:
            continue
        renderable.append(
            RenderableCone(
                storm_id=cone.storm_id,
                storm_name=cone.storm_name,
                forecast_hour=cone.forecast_hour,
                category=cone.category,
                polygon=tuple((float(x), float(y)) for x, y in cone.rings[0]),
            )
        )
    return renderable


def _process_storm_group(
    storm_id: str, timeline: List[RawPosition], config: HurricaneConfig
) -> Optional[ProcessedStorm]:
    classified = classify(timeline)

    # Storms need at least one observed position to be displayed
    if classified.current is None:
        logger.debug(f"Skipping storm {storm_id}: no observed positions")
        return None

    storm_name = classified.current.storm_name or "Unknown Storm"
    historical_path, forecast_path = build_track_paths(classified)

    return ProcessedStorm(
        storm_id=storm_id,
        storm_name=storm_name,
        basin=classified.current.basin or "Unknown",
        current_category=resolve_category(classified.current, "direct"),
        historical=classified.historical,
        current=classified.current,
        forecast=classified.forecast,
        historical_track_path=historical_path,
        forecast_track_path=forecast_path,
        colored_track_segments=tuple(
            build_segments(timeline, storm_name, storm_id, config)
        ),
    )


def process_storms(
    positions: Sequence[RawPosition], config: Optional[HurricaneConfig] = None
) -> List[ProcessedStorm]:
    """
    Turn a flat position list into processed storms ready for rendering.

    Storms without any observed position are left out. Errors other than
    malformed input propagate to the caller, which owns the update cycle.
    """
    config = config or _DEFAULT_CONFIG
    storms: List[ProcessedStorm] = []

    groups = group_by_storm(positions)
    if not groups:
        return storms

    for storm_id, timeline in groups.items():
        storm = _process_storm_group(storm_id, timeline, config)
        if storm is not None:
            storms.append(storm)

    logger.debug(f"Processed {len(storms)} storms from {len(positions)} positions")
    return storms
