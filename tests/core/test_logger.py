"""Tests for logger setup."""

import json

import pytest
from loguru import logger

from session_timeline.core.logger import setup_logger


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


def test_file_sink_receives_engine_records(tmp_path):
    log_file = tmp_path / "logs" / "timeline.log"
    setup_logger(level="DEBUG", log_file=str(log_file), compression=None)

    logger.bind(session_id="s1").warning("[CLASSIFIER] Excluding session")
    logger.remove()

    content = log_file.read_text()
    assert "Timeline logger initialized" in content
    assert "[CLASSIFIER] Excluding session" in content
    assert "s1" in content


def test_json_file_sink(tmp_path):
    log_file = tmp_path / "timeline.jsonl"
    setup_logger(level="INFO", log_file=str(log_file), compression=None, json_file=True)

    logger.info("[CLOCK] Started", interval=60)
    logger.remove()

    lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert any(entry["record"]["message"] == "[CLOCK] Started" for entry in lines)


def test_level_filters_lower_records(tmp_path):
    log_file = tmp_path / "timeline.log"
    setup_logger(level="WARNING", log_file=str(log_file), compression=None)

    logger.info("hidden message")
    logger.warning("visible message")
    logger.remove()

    content = log_file.read_text()
    assert "hidden message" not in content
    assert "visible message" in content
