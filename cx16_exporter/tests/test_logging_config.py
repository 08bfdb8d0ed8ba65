"""
Tests for logging_config.py
"""

import logging

import pytest

from cx16_exporter.logging_config import (
    DEBUG_ENV_VAR,
    LOG_FORMAT,
    LOGGER_NAME,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)


@pytest.mark.unit
class TestSetupLogging:
    """Package logger configuration"""

    def test_level_and_handler(self):
        logger = setup_logging("WARNING")

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()

        assert len(logger.handlers) == 1

    def test_handlers_share_format(self, tmp_path):
        logger = setup_logging("INFO", str(tmp_path / "export.log"))

        assert len(logger.handlers) == 2
        for handler in logger.handlers:
            assert handler.formatter._fmt == LOG_FORMAT
            assert handler.level == logging.INFO

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging("CHATTY").level == logging.INFO

    def test_debug_env_var(self, monkeypatch):
        monkeypatch.setenv(DEBUG_ENV_VAR, "1")

        assert setup_logging("ERROR").level == logging.DEBUG

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "export.log"
        logger = setup_logging("INFO", str(log_file))

        get_logger("tile_utils").info("hello from the exporter")
        for handler in logger.handlers:
            handler.flush()

        assert "hello from the exporter" in log_file.read_text()

    def test_unwritable_log_file(self, tmp_path, capsys):
        logger = setup_logging("INFO", str(tmp_path / "missing" / "export.log"))

        assert len(logger.handlers) == 1
        assert "Could not create log file" in capsys.readouterr().out


@pytest.mark.unit
class TestGetLogger:
    """Child loggers share the package prefix"""

    def test_short_name(self):
        assert get_logger("cli").name == "cx16_exporter.cli"

    def test_module_name(self):
        assert get_logger("cx16_exporter.tile_utils").name == "cx16_exporter.tile_utils"

    def test_package_name(self):
        assert get_logger(LOGGER_NAME) is logging.getLogger(LOGGER_NAME)
