"""Coordinate text parsing for pasted parcel polygons.

Two grammars are recognised, in priority order:

* ``ring``: a WKT-style ``POLYGON((e n, e n, ...))`` wrapper.
* ``lines``: one ``easting northing`` pair per line, comma or whitespace
  separated.

Malformed pairs and lines are dropped without failing the whole parse, so a
partly broken paste still yields its usable points.
"""

from __future__ import annotations

import math
import re
from typing import Any

from polygon_workspace.common.models import CoordinatePoint, PointSequence

GRAMMAR_RING = "ring"
GRAMMAR_LINES = "lines"

RING_RE = re.compile(r"POLYGON\s*\(\s*\((.*?)\)\s*\)", re.IGNORECASE | re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s+")


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _point_from_fields(fields: list[str]) -> CoordinatePoint | None:
    if len(fields) < 2:
        return None
    easting = _safe_float(fields[0])
    northing = _safe_float(fields[1])
    if easting is None or northing is None:
        return None
    return CoordinatePoint(easting=easting, northing=northing)


def select_grammar(text: str) -> tuple[str, str]:
    """Return the grammar name and the body that grammar should tokenize."""
    match = RING_RE.search(text)
    if match:
        return GRAMMAR_RING, match.group(1)
    return GRAMMAR_LINES, text


def parse_ring(body: str) -> PointSequence:
    points: list[CoordinatePoint] = []
    for pair in body.split(","):
        pair = pair.strip()
        if not pair:
            continue
        point = _point_from_fields(_WHITESPACE_RE.split(pair))
        if point is not None:
            points.append(point)
    return tuple(points)


def parse_lines(body: str) -> PointSequence:
    points: list[CoordinatePoint] = []
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        fields = [field.strip() for field in line.split(",")]
        if len(fields) < 2:
            fields = _WHITESPACE_RE.split(line)
        point = _point_from_fields(fields)
        if point is not None:
            points.append(point)
    return tuple(points)


_TOKENIZERS = {
    GRAMMAR_RING: parse_ring,
    GRAMMAR_LINES: parse_lines,
}


def parse(text: Any) -> PointSequence:
    if not isinstance(text, str):
        return ()
    trimmed = text.strip()
    if not trimmed:
        return ()
    grammar, body = select_grammar(trimmed)
    return _TOKENIZERS[grammar](body)
