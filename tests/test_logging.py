"""
Tests for logging configuration module.
"""

import logging

import pytest

from dotnet_audit.logging_config import (
    ColoredFormatter,
    get_logger,
    setup_logging,
    setup_logging_from_env,
)


class TestSetupLogging:
    """Test logging setup and configuration."""

    def test_setup_logging_default(self):
        """Test default level keeps the menu readable."""
        logger = setup_logging()
        assert logger.name == "dotnet_audit"
        assert logger.level == logging.WARNING

    def test_setup_logging_verbose(self):
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG

    def test_setup_logging_quiet(self):
        """Test quiet mode has no console handler."""
        logger = setup_logging(quiet=True)
        console_handlers = [
            h for h in logger.handlers
            if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        ]
        assert len(console_handlers) == 0

    def test_setup_logging_with_file(self, tmp_path):
        """Test the file handler records debug messages."""
        log_file = tmp_path / "logs" / "audit.log"
        logger = setup_logging(log_file=str(log_file))

        logger.debug("Scanning registry")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "Scanning registry" in log_file.read_text(encoding="utf-8")

    def test_setup_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DOTNET_AUDIT_DEBUG", "1")
        monkeypatch.setenv("DOTNET_AUDIT_LOG_FILE", str(tmp_path / "env.log"))
        logger = setup_logging_from_env()
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

    def test_child_loggers_reach_handlers(self, caplog):
        """Test module loggers propagate into the package logger."""
        setup_logging(level="INFO", propagate=True)
        with caplog.at_level(logging.INFO, logger="dotnet_audit"):
            logging.getLogger("dotnet_audit.report").info("Wrote 3 version(s)")
        assert "Wrote 3 version(s)" in caplog.text


class TestGetLogger:
    def test_get_logger_singleton(self):
        assert get_logger() is get_logger()


class TestColoredFormatter:
    """Test colored log formatter."""

    @pytest.mark.parametrize("use_colors,has_ansi", [(True, True), (False, False)])
    def test_formatter(self, use_colors, has_ansi):
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s", use_colors=use_colors)
        record = logging.LogRecord(
            name="test",
            level=logging.ERROR,
            pathname="",
            lineno=0,
            msg="Ticket creation failed",
            args=(),
            exc_info=None,
        )
        formatted = formatter.format(record)
        assert "Ticket creation failed" in formatted
        assert ("\033[" in formatted) is has_ansi

    def test_colored_level_name(self):
        formatter = ColoredFormatter("%(levelname_colored)s %(message)s")
        record = logging.LogRecord("test", logging.WARNING, "", 0, "Nothing to log", (), None)
        assert formatter.format(record) == "\033[33mWARNING\033[0m Nothing to log"


class TestVlog:
    def test_vlog_verbose(self, caplog):
        from dotnet_audit.common import vlog

        setup_logging(level="INFO", propagate=True)
        with caplog.at_level(logging.INFO, logger="dotnet_audit"):
            vlog("Loaded config", verbose=True)
        assert "Loaded config" in caplog.text

    def test_vlog_silent(self, caplog, monkeypatch):
        from dotnet_audit.common import vlog

        monkeypatch.delenv("DOTNET_AUDIT_DEBUG", raising=False)
        setup_logging(level="INFO", propagate=True)
        with caplog.at_level(logging.INFO, logger="dotnet_audit"):
            vlog("Should not appear", verbose=False)
        assert "Should not appear" not in caplog.text
