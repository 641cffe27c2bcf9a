import json
import logging
from pathlib import Path

from polygon_workspace.common.logging import JsonLineFormatter, build_logger, close_logger, log_event
from polygon_workspace.common.time_utils import epoch_millis, millis_to_iso


def test_epoch_millis_and_iso_conversion():
    assert epoch_millis() > 1_600_000_000_000
    assert millis_to_iso(0) == "1970-01-01T00:00:00.000+00:00"
    assert millis_to_iso(None) is None


def test_json_line_formatter_emits_stable_schema():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "saved %s", ("one",), None)
    record.record_id = 3
    record.event = "RECORD_SAVED"

    payload = json.loads(JsonLineFormatter().format(record))

    assert payload["message"] == "saved one"
    assert payload["record_id"] == 3
    assert payload["event"] == "RECORD_SAVED"
    assert payload["error_code"] is None
    assert "session_id" in payload


def test_build_logger_writes_jsonl_file(tmp_path: Path):
    logger = build_logger("session-test", log_dir=tmp_path, level="info")
    log_event(logger, "hello", operation="parse", points_out=2)
    close_logger(logger)

    lines = (tmp_path / "session-test.log.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[-1])["points_out"] == 2
