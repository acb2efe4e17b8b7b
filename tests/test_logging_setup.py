"""
Tests for logging setup
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from logging_setup import LOGGER_NAME, init_logger, parse_level


def _reset():
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestParseLevel:

    def test_names_are_case_insensitive(self):
        assert parse_level("debug") == logging.DEBUG
        assert parse_level("ERROR") == logging.ERROR

    def test_unknown_or_missing_falls_back_to_warning(self):
        assert parse_level("LOUD") == logging.WARNING
        assert parse_level(None) == logging.WARNING


class TestInitLogger:

    def teardown_method(self):
        _reset()

    def test_console_handler_on_stderr(self, capsys):
        logger = init_logger("INFO")
        logging.getLogger(f"{LOGGER_NAME}.command_store").info("loaded store")

        captured = capsys.readouterr()
        assert "[INFO] loaded store" in captured.err
        assert captured.out == ""
        assert logger.name == LOGGER_NAME

    def test_level_filters_console(self, capsys):
        init_logger("WARNING")
        logging.getLogger(f"{LOGGER_NAME}.runner").debug("hidden")

        assert "hidden" not in capsys.readouterr().err

    def test_repeated_init_keeps_one_console_handler(self):
        init_logger("INFO")
        logger = init_logger("DEBUG")

        stream_handlers = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert len(stream_handlers) == 1
        assert stream_handlers[0].level == logging.DEBUG

    def test_file_handler_records_debug(self, tmp_path):
        log_file = tmp_path / "butiki.log"
        logger = init_logger("ERROR", str(log_file))
        logging.getLogger(f"{LOGGER_NAME}.cli").debug("written to file")

        for handler in logger.handlers:
            handler.flush()

        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        assert "written to file" in log_file.read_text(encoding="utf-8")
