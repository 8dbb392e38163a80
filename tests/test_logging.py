"""Tests for logging setup."""

import logging

import pytest

from chatbridge.core.logging_config import LoggerMixin, setup_logging
from chatbridge.core import logging_config


def _installed_handlers():
    root = logging.getLogger()
    return [h for h in root.handlers if getattr(h, logging_config._HANDLER_TAG, False)]


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Drop handlers installed by a test and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in _installed_handlers():
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


class TestSetupLogging:

    def test_console_handler_is_installed(self):
        setup_logging("WARNING")

        handlers = _installed_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].level == logging.WARNING
        assert logging.getLogger().level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("INFO")
        setup_logging("DEBUG")

        handlers = _installed_handlers()
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("chatty")
        assert _installed_handlers()[0].level == logging.INFO

    def test_no_log_file_without_directory(self, tmp_path):
        setup_logging("INFO")

        assert not any(isinstance(h, logging.FileHandler) for h in _installed_handlers())
        assert list(tmp_path.iterdir()) == []

    def test_log_directory_adds_dated_file(self, tmp_path):
        log_dir = tmp_path / "logs"
        setup_logging("WARNING", log_dir)

        logging.getLogger("chatbridge.tests").debug("written to file only")
        for handler in _installed_handlers():
            handler.flush()

        files = list(log_dir.glob("chatbridge_*.log"))
        assert len(files) == 1
        assert "written to file only" in files[0].read_text(encoding="utf-8")
        assert logging.getLogger().level == logging.DEBUG

    def test_http_libraries_are_quieted(self):
        setup_logging("DEBUG")
        for name in logging_config.QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING


class Widget(LoggerMixin):
    pass


class TestLoggerMixin:

    def test_logger_named_after_module_and_class(self):
        assert Widget().logger.name == f"{__name__}.Widget"
