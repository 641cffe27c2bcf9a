import pytest

from polygon_workspace.common.models import CoordinatePoint
from polygon_workspace.pipeline.parser import parse
from polygon_workspace.pipeline.polygon_format import format_points_for_display, format_polygon


def test_format_polygon_closes_ring():
    points = [CoordinatePoint(1.5, 2.25), CoordinatePoint(3.0, 4.0)]
    assert format_polygon(points) == "POLYGON((1.500000 2.250000, 3.000000 4.000000, 1.500000 2.250000))"


def test_format_polygon_closes_already_closed_ring_again():
    points = parse("1 2\n3 4\n1 2")
    assert format_polygon(points) == (
        "POLYGON((1.000000 2.000000, 3.000000 4.000000, 1.000000 2.000000, 1.000000 2.000000))"
    )


def test_format_polygon_empty():
    assert format_polygon([]) == "No coordinates"


def test_parse_recovers_formatted_polygon_plus_closing_point():
    points = [
        CoordinatePoint(123456.7891234, 234567.8901234),
        CoordinatePoint(123567.8901, 234678.9012),
        CoordinatePoint(-10.5, 0.000001),
    ]

    recovered = parse(format_polygon(points))

    expected = points + [points[0]]
    assert len(recovered) == len(expected)
    for got, want in zip(recovered, expected):
        assert got.easting == pytest.approx(want.easting, abs=1e-6)
        assert got.northing == pytest.approx(want.northing, abs=1e-6)


def test_format_points_for_display():
    points = [CoordinatePoint(1.0, 2.0), CoordinatePoint(3.5, 4.25)]
    assert format_points_for_display(points) == (
        "Point 1: E 1.000000, N 2.000000\nPoint 2: E 3.500000, N 4.250000"
    )
    assert format_points_for_display([]) == "No coordinates"
