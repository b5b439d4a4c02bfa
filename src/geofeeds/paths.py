"""
Antimeridian handling for moving-point trajectories.

A longitude jump of more than 180 degrees between consecutive points means the
track wrapped around the dateline, not that the object crossed the globe.
"""

from typing import List, Sequence, Tuple

Coordinate = Tuple[float, float]


def split_on_dateline(points: Sequence[Sequence[float]]) -> List[List[Coordinate]]:
    """
    Split a chronological (lon, lat) sequence into contiguous path segments.

    Whenever ``abs(lon[i] - lon[i - 1]) > 180`` the current segment is closed
    and a new one starts at point ``i``. The jump point is not duplicated into
    the previous segment.

    Args:
        points: Ordered (longitude, latitude) pairs

    Returns:
        List of segments; empty when fewer than two points are given, since a
        path needs at least two points to be drawn.

    Examples:
        >>> split_on_dateline([(179.0, 10.0), (179.9, 10.5), (-179.9, 11.0)])
        [[(179.0, 10.0), (179.9, 10.5)], [(-179.9, 11.0)]]
    """
    if len(points) <= 1:
        return []

    segments: List[List[Coordinate]] = []
    current: List[Coordinate] = []
    previous_lon = None

    for point in points:
        coord = (float(point[0]), float(point[1]))
        if previous_lon is not None and abs(coord[0] - previous_lon) > 180:
            if current:
                segments.append(current)
            current = [coord]
        else:
            current.append(coord)
        previous_lon = coord[0]

    if current:
        segments.append(current)

    return segments


def unwrap_segment(start: Sequence[float], end: Sequence[float]) -> List[Coordinate]:
    """
    Return a two-point path whose end longitude is shifted by 360 degrees
    when the pair straddles the antimeridian.

    The shifted longitude may fall outside [-180, 180]; compositors that wrap
    longitudes draw the short way across the dateline instead of around the
    globe.
    """
    start_lon, start_lat = float(start[0]), float(start[1])
    end_lon, end_lat = float(end[0]), float(end[1])

    delta = end_lon - start_lon
    if delta > 180:
        end_lon -= 360
    elif delta < -180:
        end_lon += 360

    return [(start_lon, start_lat), (end_lon, end_lat)]
