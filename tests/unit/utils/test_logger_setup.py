"""
Unit tests for neatdrive.utils.logger_setup module.
"""

import sys

import pytest
from loguru import logger

from neatdrive.utils import setup_logger


@pytest.fixture(autouse=True)
def restore_default_sink():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestSetupLogger:
    """Test setup_logger."""

    def test_log_file_receives_messages(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logger(level="INFO", log_file=str(log_file), enable_colors=False)

        logger.info("generation {} done", 3)
        logger.complete()

        assert "generation 3 done" in log_file.read_text(encoding="utf-8")

    def test_level_filters_messages(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logger(level="WARNING", log_file=str(log_file), enable_colors=False)

        logger.info("not written")
        logger.warning("written")
        logger.complete()

        content = log_file.read_text(encoding="utf-8")
        assert "written" in content
        assert "not written" not in content

    def test_repeated_setup_does_not_duplicate(self, tmp_path):
        log_file = tmp_path / "run.log"
        setup_logger(log_file=str(log_file), enable_colors=False)
        setup_logger(log_file=str(log_file), enable_colors=False)

        logger.info("once")
        logger.complete()

        assert log_file.read_text(encoding="utf-8").count("once") == 1
