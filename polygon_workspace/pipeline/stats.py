"""Generation statistics derived from stored records."""

from __future__ import annotations

from typing import Sequence

from polygon_workspace.common.models import GenerationRecord


def summarize_generations(records: Sequence[GenerationRecord]) -> dict:
    timestamps = [record.timestamp for record in records]
    return {
        "total_generations": len(records),
        "unique_external_refs": len({record.external_ref for record in records}),
        "total_points": sum(len(record.points) for record in records),
        "first_timestamp": min(timestamps) if timestamps else None,
        "last_timestamp": max(timestamps) if timestamps else None,
    }
