"""Data models shared by the parser, aggregator and store."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Sequence

from polygon_workspace.common.time_utils import millis_to_iso


@dataclass(frozen=True)
class CoordinatePoint:
    easting: float
    northing: float

    def to_dict(self) -> dict[str, float]:
        return {"easting": self.easting, "northing": self.northing}

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "CoordinatePoint":
        return cls(easting=float(payload["easting"]), northing=float(payload["northing"]))


PointSequence = tuple[CoordinatePoint, ...]


@dataclass(frozen=True)
class MeanResult:
    easting: float
    northing: float
    formatted: str
    code: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "MeanResult":
        return cls(
            easting=float(payload["easting"]),
            northing=float(payload["northing"]),
            formatted=str(payload["formatted"]),
            code=str(payload["code"]),
        )


def points_to_payload(points: Sequence[CoordinatePoint]) -> list[dict[str, float]]:
    return [point.to_dict() for point in points]


def points_from_payload(payload: Sequence[dict[str, Any]] | None) -> PointSequence:
    return tuple(CoordinatePoint.from_dict(item) for item in payload or ())


@dataclass(frozen=True)
class GenerationRecordInput:
    """A generation assembled by the caller, not yet persisted.

    ``timestamp`` is accepted for symmetry with stored records but the store
    always replaces it with the time of the save.
    """

    external_ref: str
    job_code: str
    mean: MeanResult
    points: PointSequence
    editable_code: str
    attachment: bytes | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class GenerationRecord:
    id: int
    external_ref: str
    job_code: str
    mean: MeanResult
    points: PointSequence
    editable_code: str
    timestamp: int
    attachment: bytes | None = None

    def to_dict(self, *, include_attachment: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "external_ref": self.external_ref,
            "job_code": self.job_code,
            "mean": self.mean.to_dict(),
            "points": points_to_payload(self.points),
            "editable_code": self.editable_code,
            "timestamp": self.timestamp,
            "created_at": millis_to_iso(self.timestamp),
            "attachment_size": len(self.attachment) if self.attachment is not None else None,
        }
        if include_attachment:
            payload["attachment"] = self.attachment
        return payload
