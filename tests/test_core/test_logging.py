"""Tests for logging setup."""

import json
import logging

import pytest

from gradlebox.core.logging import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_setup_logging_sets_level(restore_root_logger):
    setup_logging(level=logging.INFO)

    assert restore_root_logger.level == logging.INFO
    assert len(restore_root_logger.handlers) == 1


def test_log_file_receives_json_lines(restore_root_logger, tmp_path):
    log_file = tmp_path / "logs" / "gradlebox.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))

    logging.getLogger("gradlebox.test").info("Resolved %d of %d variants", 2, 3)
    for handler in restore_root_logger.handlers:
        handler.flush()

    record = json.loads(log_file.read_text().splitlines()[-1])
    assert record["event"] == "Resolved 2 of 3 variants"
    assert record["level"] == "info"
    assert record["logger"] == "gradlebox.test"
