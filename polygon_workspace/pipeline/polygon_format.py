"""Text renderings of a point sequence for scannable payloads and display."""

from __future__ import annotations

from typing import Sequence

from polygon_workspace.common.constants import COORDINATE_DECIMALS, EMPTY_POLYGON_TEXT
from polygon_workspace.common.models import CoordinatePoint


def _pair(point: CoordinatePoint) -> str:
    return f"{point.easting:.{COORDINATE_DECIMALS}f} {point.northing:.{COORDINATE_DECIMALS}f}"


def format_polygon(points: Sequence[CoordinatePoint]) -> str:
    if not points:
        return EMPTY_POLYGON_TEXT
    pairs = [_pair(point) for point in points]
    # Always close the ring, even when the input already repeats its first point.
    pairs.append(_pair(points[0]))
    return f"POLYGON(({', '.join(pairs)}))"


def format_points_for_display(points: Sequence[CoordinatePoint]) -> str:
    if not points:
        return EMPTY_POLYGON_TEXT
    return "\n".join(
        f"Point {index}: E {point.easting:.{COORDINATE_DECIMALS}f}, N {point.northing:.{COORDINATE_DECIMALS}f}"
        for index, point in enumerate(points, start=1)
    )
