"""Mean coordinate, identifier code and job code derivation."""

from __future__ import annotations

import random
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from polygon_workspace.common.constants import (
    CODE_PREFIX,
    COORDINATE_DECIMALS,
    EMPTY_MEAN_CODE,
    EMPTY_MEAN_FORMATTED,
    JOB_CODE_PREFIX,
    JOB_SUFFIX_RANGE,
)
from polygon_workspace.common.models import CoordinatePoint, MeanResult
from polygon_workspace.common.time_utils import epoch_millis

EMPTY_MEAN = MeanResult(
    easting=0.0,
    northing=0.0,
    formatted=EMPTY_MEAN_FORMATTED,
    code=EMPTY_MEAN_CODE,
)


def round_half_away_from_zero(value: float) -> int:
    # Exact decimal expansion; ROUND_HALF_UP rounds halves away from zero.
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def identifier_code(easting: float, northing: float) -> str:
    return f"{CODE_PREFIX}{round_half_away_from_zero(easting)}-{round_half_away_from_zero(northing)}"


def format_mean(easting: float, northing: float) -> str:
    return f"E: {easting:.{COORDINATE_DECIMALS}f}, N: {northing:.{COORDINATE_DECIMALS}f}"


def mean(points: Sequence[CoordinatePoint]) -> MeanResult:
    if not points:
        return EMPTY_MEAN

    n = len(points)
    mean_easting = sum(point.easting for point in points) / n
    mean_northing = sum(point.northing for point in points) / n

    return MeanResult(
        easting=mean_easting,
        northing=mean_northing,
        formatted=format_mean(mean_easting, mean_northing),
        code=identifier_code(mean_easting, mean_northing),
    )


def generate_job_code(external_ref: str | None) -> str:
    """Label a single generation event.

    Embeds the current time and a random three-digit suffix, so two calls with
    the same reference almost never collide. Not reproducible.
    """
    if not external_ref or not external_ref.strip():
        return ""
    suffix = random.randrange(JOB_SUFFIX_RANGE)
    return f"{JOB_CODE_PREFIX}-{external_ref}-{epoch_millis()}-{suffix:03d}"
