"""
Drawable layer descriptors for the map compositor.

Each feed snapshot is turned into an ordered list of LayerDescriptor objects.
The compositor is external: it receives plain data tuples plus accessor
functions and draws them. Layer ids are stable across rebuilds because the
tooltip dispatcher is keyed on them.

Stacking order, bottom to top:

    earthquakes -> extra (caller-supplied) -> hurricanes -> ISS
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence, Tuple

from .config import EarthquakeConfig, HurricaneConfig, IssConfig
from .earthquakes.models import Earthquake, EarthquakeSnapshot
from .hurricane.models import ColoredTrackSegment, HurricaneSnapshot, RawPosition
from .hurricane.processor import category_color, category_size, resolve_category
from .iss.models import IssSnapshot

LayerKind = Literal["path", "polygon", "scatterplot", "icon", "text"]
Accessor = Callable[[Any], Any]

# Stable layer ids
HURRICANE_CONES = "hurricane-uncertainty-cones"
HURRICANE_TRACKS = "hurricane-colored-track-segments"
HURRICANE_CENTERLINES = "hurricane-forecast-centerlines"
HURRICANE_HISTORICAL = "hurricane-historical-positions"
HURRICANE_CURRENT = "hurricane-current-positions"
HURRICANE_FORECAST = "hurricane-forecast-positions"
HURRICANE_ERROR = "hurricane-error"
ISS_POSITION = "iss-position"
ISS_TRAJECTORY_PREFIX = "iss-trajectory"
ISS_ERROR = "iss-error"
EARTHQUAKE_POSITIONS = "earthquake-positions"
EARTHQUAKE_ERROR = "earthquake-error"


@dataclass(frozen=True)
class LayerDescriptor:
    """One drawable layer: fully materialized data plus accessors."""

    id: str
    kind: LayerKind
    data: Tuple[Any, ...]
    get_position: Optional[Accessor] = None
    get_path: Optional[Accessor] = None
    get_polygon: Optional[Accessor] = None
    get_color: Optional[Accessor] = None
    get_size: Optional[Accessor] = None
    pickable: bool = True
    props: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StormPoint:
    """A storm position tagged with its storm and resolved category."""

    storm_id: str
    storm_name: str
    position: RawPosition
    category: int


def _error_layer(layer_id: str, message: str, color: Sequence[int]) -> LayerDescriptor:
    return LayerDescriptor(
        id=layer_id,
        kind="text",
        data=({"position": (0.0, 0.0), "text": message},),
        get_position=lambda d: d["position"],
        get_color=lambda d: tuple(color),
        pickable=False,
        props={"get_text": lambda d: d["text"], "background": True},
    )


def _with_alpha(color: Sequence[int], alpha: int) -> Tuple[int, int, int, int]:
    return (color[0], color[1], color[2], alpha)


def create_hurricane_layers(
    snapshot: HurricaneSnapshot, config: Optional[HurricaneConfig] = None
) -> List[LayerDescriptor]:
    """
    Build hurricane layers from a snapshot.

    Layers with no data are omitted. When the snapshot carries an error, the
    stale data layers are still drawn with an error label on top.
    """
    config = config or HurricaneConfig()
    layers: List[LayerDescriptor] = []
    storms = snapshot.processed_storms

    if snapshot.cones:
        layers.append(
            LayerDescriptor(
                id=HURRICANE_CONES,
                kind="polygon",
                data=tuple(snapshot.cones),
                get_polygon=lambda c: c.polygon,
                get_color=lambda c: config.cone_fill_color,
                props={
                    "line_color": config.cone_stroke_color,
                    "line_width": config.cone_stroke_width,
                    "filled": True,
                    "stroked": True,
                },
            )
        )

    segments = tuple(s for storm in storms for s in storm.colored_track_segments)
    if segments:

        def segment_width(s: ColoredTrackSegment) -> float:
            if s.segment_type == "historical":
                return config.historical_track_width
            return config.forecast_track_width

        layers.append(
            LayerDescriptor(
                id=HURRICANE_TRACKS,
                kind="path",
                data=segments,
                get_path=lambda s: s.path,
                get_color=lambda s: s.color,
                get_size=segment_width,
                props={"cap_rounded": True, "joint_rounded": True},
            )
        )

    if snapshot.secondary_segments:
        layers.append(
            LayerDescriptor(
                id=HURRICANE_CENTERLINES,
                kind="path",
                data=tuple(snapshot.secondary_segments),
                get_path=lambda s: s.path,
                get_color=lambda s: s.color,
                get_size=lambda s: config.forecast_track_width,
                props={"cap_rounded": True, "joint_rounded": True},
            )
        )

    historical = tuple(
        StormPoint(storm.storm_id, storm.storm_name, p, resolve_category(p, "direct"))
        for storm in storms
        for p in storm.historical
    )
    if historical:
        layers.append(
            LayerDescriptor(
                id=HURRICANE_HISTORICAL,
                kind="scatterplot",
                data=historical,
                get_position=lambda d: d.position.coordinates,
                get_color=lambda d: _with_alpha(category_color(d.category, config), 255),
                get_size=lambda d: config.historical_dot_radius,
                props={"line_color": config.dot_stroke_color},
            )
        )

    current = tuple(
        StormPoint(
            storm.storm_id,
            storm.storm_name,
            storm.current,
            resolve_category(storm.current, "direct"),
        )
        for storm in storms
        if storm.current is not None
    )
    if current:
        layers.append(
            LayerDescriptor(
                id=HURRICANE_CURRENT,
                kind="icon",
                data=current,
                get_position=lambda d: d.position.coordinates,
                get_color=lambda d: category_color(d.category, config),
                get_size=lambda d: category_size(d.category, current=True, config=config),
            )
        )

    # Forecast dots are colored by predicted intensity, not the storm's current category
    forecast = tuple(
        StormPoint(storm.storm_id, storm.storm_name, p, resolve_category(p, "derived"))
        for storm in storms
        for p in storm.forecast
    )
    if forecast:
        layers.append(
            LayerDescriptor(
                id=HURRICANE_FORECAST,
                kind="scatterplot",
                data=forecast,
                get_position=lambda d: d.position.coordinates,
                get_color=lambda d: _with_alpha(category_color(d.category, config), 220),
                get_size=lambda d: config.forecast_dot_radius,
                props={"line_color": config.dot_stroke_color},
            )
        )

    if snapshot.error:
        layers.append(
            _error_layer(
                HURRICANE_ERROR,
                f"Hurricane Error: {snapshot.error}",
                config.error_text_color,
            )
        )

    return layers


def create_iss_layers(
    snapshot: IssSnapshot, config: Optional[IssConfig] = None
) -> List[LayerDescriptor]:
    """Build the ISS trajectory segments and position icon."""
    config = config or IssConfig()
    layers: List[LayerDescriptor] = []

    drawable = [s for s in snapshot.trajectory_segments if len(s) >= 2]
    for index, segment in enumerate(drawable):
        layers.append(
            LayerDescriptor(
                id=f"{ISS_TRAJECTORY_PREFIX}-{index}",
                kind="path",
                data=({"path": tuple(segment)},),
                get_path=lambda d: d["path"],
                get_color=lambda d: config.trajectory_color,
                get_size=lambda d: config.trajectory_width,
                pickable=False,
            )
        )

    if snapshot.current_position is not None:
        layers.append(
            LayerDescriptor(
                id=ISS_POSITION,
                kind="icon",
                data=(snapshot.current_position,),
                get_position=lambda p: p.coordinates,
                get_color=lambda p: config.icon_color,
                get_size=lambda p: config.icon_size,
            )
        )

    if snapshot.error:
        layers.append(
            _error_layer(ISS_ERROR, f"ISS Error: {snapshot.error}", config.error_text_color)
        )

    return layers


def earthquake_size(magnitude: float, config: Optional[EarthquakeConfig] = None) -> float:
    """Icon size in pixels for a magnitude."""
    config = config or EarthquakeConfig()
    level = min(math.floor(max(0.0, magnitude)), 9)
    base = config.magnitude_sizes.get(level, config.magnitude_sizes[0])
    return (
        base
        * (config.magnitude_base + magnitude * config.magnitude_weight)
        * config.size_multiplier
    )


def create_earthquake_layers(
    snapshot: EarthquakeSnapshot, config: Optional[EarthquakeConfig] = None
) -> List[LayerDescriptor]:
    """Build the earthquake epicenter layer."""
    config = config or EarthquakeConfig()
    layers: List[LayerDescriptor] = []

    if snapshot.earthquakes:

        def size(q: Earthquake) -> float:
            return earthquake_size(q.magnitude, config)

        layers.append(
            LayerDescriptor(
                id=EARTHQUAKE_POSITIONS,
                kind="icon",
                data=tuple(snapshot.earthquakes),
                get_position=lambda q: q.coordinates,
                get_color=lambda q: config.icon_color,
                get_size=size,
            )
        )

    if snapshot.error:
        layers.append(
            _error_layer(
                EARTHQUAKE_ERROR,
                f"Earthquake Error: {snapshot.error}",
                config.error_text_color,
            )
        )

    return layers


def assemble_layers(
    hurricanes: Optional[HurricaneSnapshot] = None,
    iss: Optional[IssSnapshot] = None,
    earthquakes: Optional[EarthquakeSnapshot] = None,
    extra: Sequence[LayerDescriptor] = (),
    hurricane_config: Optional[HurricaneConfig] = None,
    iss_config: Optional[IssConfig] = None,
    earthquake_config: Optional[EarthquakeConfig] = None,
) -> List[LayerDescriptor]:
    """
    Combine feed layers into one list in fixed stacking order.

    A feed passed as None is hidden. ``extra`` holds layers built outside
    this package (timezones, terminator, points of interest) and sits between
    earthquakes and hurricanes.
    """
    layers: List[LayerDescriptor] = []
    if earthquakes is not None:
        layers.extend(create_earthquake_layers(earthquakes, earthquake_config))
    layers.extend(extra)
    if hurricanes is not None:
        layers.extend(create_hurricane_layers(hurricanes, hurricane_config))
    if iss is not None:
        layers.extend(create_iss_layers(iss, iss_config))
    return layers
