"""In-memory working state for a single parcel generation."""

from __future__ import annotations

from dataclasses import dataclass, field

from polygon_workspace.common.errors import GenerationError
from polygon_workspace.common.models import GenerationRecordInput, MeanResult, PointSequence
from polygon_workspace.common.time_utils import epoch_millis
from polygon_workspace.pipeline import aggregate
from polygon_workspace.pipeline.parser import parse
from polygon_workspace.pipeline.polygon_format import format_polygon


@dataclass
class GenerationWorkspace:
    """Parse, aggregate and label one parcel before it is saved.

    Loading new text or recalculating the mean drops any generated job code,
    so a saved record always matches the points it was generated from.
    """

    text: str = ""
    points: PointSequence = field(default_factory=tuple)
    external_ref: str = ""
    mean: MeanResult | None = None
    editable_code: str = ""
    job_code: str = ""

    @property
    def is_generated(self) -> bool:
        return bool(self.job_code)

    def load_text(self, text: str) -> PointSequence:
        self.text = text
        self.points = parse(text)
        self.mean = None
        self.editable_code = ""
        self.job_code = ""
        return self.points

    def calculate_mean(self) -> MeanResult | None:
        if not self.points:
            return None
        self.mean = aggregate.mean(self.points)
        self.editable_code = self.mean.code
        self.job_code = ""
        return self.mean

    def set_editable_code(self, code: str) -> None:
        self.editable_code = code

    def generate(self) -> str:
        if not self.external_ref.strip():
            raise GenerationError("An external reference is required before generating codes")
        if self.mean is None:
            raise GenerationError("Mean coordinates must be calculated before generating codes")
        self.job_code = aggregate.generate_job_code(self.external_ref)
        return self.job_code

    def qr_payload(self) -> str:
        return format_polygon(self.points)

    def build_record(self, attachment: bytes | None = None) -> GenerationRecordInput:
        if not self.is_generated or self.mean is None:
            raise GenerationError("Codes must be generated before a record can be built")
        return GenerationRecordInput(
            external_ref=self.external_ref,
            job_code=self.job_code,
            mean=self.mean,
            points=tuple(self.points),
            editable_code=self.editable_code,
            attachment=attachment,
        )

    def export_filename(self, prefix: str, now_ms: int | None = None) -> str:
        stamp = now_ms if now_ms is not None else epoch_millis()
        return f"{prefix}-{self.external_ref}-{stamp}.pdf"

    def reset(self) -> None:
        self.text = ""
        self.points = ()
        self.external_ref = ""
        self.mean = None
        self.editable_code = ""
        self.job_code = ""
