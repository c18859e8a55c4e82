"""Tests for structured logging."""
import json
import logging

from core.logging_config import JSONFormatter, setup_logging


def test_json_formatter_includes_scheduling_context():
    record = logging.LogRecord("services.scheduling", logging.INFO, __file__, 10, "Appointment canceled", None, None)
    record.appointment_id = 7
    record.customer_id = 1

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Appointment canceled"
    assert data["level"] == "INFO"
    assert data["appointment_id"] == 7
    assert data["customer_id"] == 1
    assert "provider_id" not in data


def test_setup_logging_writes_json_file(tmp_path):
    root = logging.getLogger()
    previous = root.handlers[:]
    previous_level = root.level
    try:
        setup_logging(tmp_path)
        logging.getLogger("slotbook.test").error("ledger unavailable", extra={"provider_id": 3})
        for handler in root.handlers:
            handler.flush()

        lines = (tmp_path / "errors.log").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["provider_id"] == 3
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(previous_level)
        for handler in previous:
            root.addHandler(handler)
