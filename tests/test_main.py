"""
Unit tests for the command logging setup.
"""

import logging
import os

import pytest

from dbh_height.__main__ import setup_logging


@pytest.fixture
def clean_root_logger():
    """Run with no root handlers so basicConfig applies, then restore."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers = []
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestSetupLogging:
    """Test setup_logging function."""

    def test_file_and_console_handlers(self, clean_root_logger, tmp_path):
        log_file = setup_logging(str(tmp_path / "logs"))

        file_handlers = [h for h in clean_root_logger.handlers if isinstance(h, logging.FileHandler)]
        console_handlers = [
            h for h in clean_root_logger.handlers
            if type(h) is logging.StreamHandler
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == os.path.abspath(log_file)
        assert len(console_handlers) == 1
        assert console_handlers[0].level == logging.WARNING

    def test_warning_reaches_console(self, clean_root_logger, tmp_path, capsys):
        setup_logging(str(tmp_path / "logs"))
        logging.getLogger("dbh_height.nls.processor").warning("Model model4 does not exist, skipped")
        logging.getLogger("dbh_height.nls.processor").info("fitting details")

        err = capsys.readouterr().err
        assert "WARNING - Model model4 does not exist, skipped" in err
        assert "fitting details" not in err
