"""Unit tests for logging setup and URL redaction."""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest
from pythonjsonlogger.json import JsonFormatter

from now_playing_card.logging_config import get_logger, log_with_context, setup_logging
from now_playing_card.middleware.logging_middleware import redact_sensitive_data


@pytest.mark.parametrize(
    "url,expected",
    [
        ("http://x/status", "http://x/status"),
        ("http://x/?token=abc&a=1", "http://x/?token=***REDACTED***&a=1"),
        ("http://x/?api_key=abc", "http://x/?api_key=***REDACTED***"),
        ("http://x/?KEY=abc", "http://x/?key=***REDACTED***"),
        ("http://x/?monkey=abc", "http://x/?monkey=abc"),
    ],
)
def test_redact_sensitive_data(url, expected):
    assert redact_sensitive_data(url) == expected


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_writes_json_lines(tmp_path, restore_root_logger):
    setup_logging("DEBUG", log_name="poller", log_dir=tmp_path)
    logger = get_logger("now_playing_card.test")

    log_with_context(logger, "info", "Snapshot updated", track_id=5, event_type="snapshot_updated")
    for handler in logging.getLogger().handlers:
        handler.flush()

    record = json.loads((tmp_path / "poller.log").read_text().splitlines()[-1])
    assert record["message"] == "Snapshot updated"
    assert record["track_id"] == 5
    assert record["event_type"] == "snapshot_updated"
    assert record["levelname"] == "INFO"
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_uses_current_json_formatter(tmp_path, restore_root_logger):
    setup_logging("INFO", log_name="server", log_dir=tmp_path)

    file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert isinstance(file_handlers[0].formatter, JsonFormatter)
    # The deprecated module warns on import
    assert "pythonjsonlogger.jsonlogger" not in sys.modules
