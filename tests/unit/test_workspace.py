import pytest

from polygon_workspace.common.errors import GenerationError
from polygon_workspace.common.models import CoordinatePoint
from polygon_workspace.pipeline import aggregate
from polygon_workspace.pipeline.workspace import GenerationWorkspace

PARCEL_TEXT = "100.0 200.0\n150.0 250.0\n100.0 200.0"


def _generated_workspace(monkeypatch) -> GenerationWorkspace:
    monkeypatch.setattr(aggregate, "epoch_millis", lambda: 1760000000000)
    monkeypatch.setattr(aggregate.random, "randrange", lambda _stop: 42)
    workspace = GenerationWorkspace(external_ref="GAPA-1")
    workspace.load_text(PARCEL_TEXT)
    workspace.calculate_mean()
    workspace.generate()
    return workspace


def test_load_text_parses_and_clears_previous_state(monkeypatch):
    workspace = _generated_workspace(monkeypatch)

    points = workspace.load_text("1 2\n3 4")

    assert points == (CoordinatePoint(1.0, 2.0), CoordinatePoint(3.0, 4.0))
    assert workspace.mean is None
    assert workspace.editable_code == ""
    assert workspace.is_generated is False


def test_calculate_mean_without_points_returns_none():
    workspace = GenerationWorkspace()
    workspace.load_text("garbage")
    assert workspace.calculate_mean() is None
    assert workspace.mean is None


def test_calculate_mean_seeds_editable_code():
    workspace = GenerationWorkspace()
    workspace.load_text(PARCEL_TEXT)

    result = workspace.calculate_mean()

    assert result is not None
    assert workspace.editable_code == "GA117-217"


def test_generate_requires_reference_and_mean():
    workspace = GenerationWorkspace()
    workspace.load_text(PARCEL_TEXT)
    workspace.calculate_mean()
    with pytest.raises(GenerationError):
        workspace.generate()

    workspace = GenerationWorkspace(external_ref="GAPA-1")
    workspace.load_text(PARCEL_TEXT)
    with pytest.raises(GenerationError):
        workspace.generate()


def test_generate_sets_job_code(monkeypatch):
    workspace = _generated_workspace(monkeypatch)
    assert workspace.job_code == "JOB-GAPA-1-1760000000000-042"
    assert workspace.is_generated is True


def test_build_record_keeps_edited_code_and_snapshots_points(monkeypatch):
    workspace = _generated_workspace(monkeypatch)
    workspace.set_editable_code("GA117-217-B")

    record = workspace.build_record(attachment=b"%PDF-1.4")
    workspace.load_text("9 9")

    assert record.editable_code == "GA117-217-B"
    assert record.mean.code == "GA117-217"
    assert record.external_ref == "GAPA-1"
    assert record.attachment == b"%PDF-1.4"
    assert len(record.points) == 3
    assert record.points[0] == CoordinatePoint(100.0, 200.0)


def test_build_record_before_generation_fails():
    workspace = GenerationWorkspace(external_ref="GAPA-1")
    workspace.load_text(PARCEL_TEXT)
    workspace.calculate_mean()
    with pytest.raises(GenerationError):
        workspace.build_record()


def test_qr_payload_and_export_filename(monkeypatch):
    workspace = _generated_workspace(monkeypatch)

    assert workspace.qr_payload().startswith("POLYGON((100.000000 200.000000, 150.000000 250.000000")
    assert workspace.export_filename("lands-commission", now_ms=1760000000999) == (
        "lands-commission-GAPA-1-1760000000999.pdf"
    )


def test_reset_clears_everything(monkeypatch):
    workspace = _generated_workspace(monkeypatch)
    workspace.reset()
    assert workspace == GenerationWorkspace()
