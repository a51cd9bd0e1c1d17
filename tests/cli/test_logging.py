import logging
import sys

import pytest

from team_stats_viewer.cli._logging import configure_logging, log_level


class TestConfigureLogging:
    def setup_method(self) -> None:
        root = logging.getLogger()
        root.handlers.clear()
        root.setLevel(logging.WARNING)

    def test_default_sets_info_level(self) -> None:
        configure_logging()
        assert logging.getLogger().level == logging.INFO

    def test_verbose_sets_debug_level(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_sets_error_level(self) -> None:
        configure_logging(quiet=True)
        assert logging.getLogger().level == logging.ERROR

    def test_http_loggers_suppressed_to_warning(self) -> None:
        configure_logging()
        for name in ("httpx", "httpcore"):
            assert logging.getLogger(name).level == logging.WARNING

    def test_http_loggers_not_suppressed_when_verbose(self) -> None:
        configure_logging(verbose=True)
        for name in ("httpx", "httpcore"):
            assert logging.getLogger(name).level == logging.NOTSET

    def test_handler_writes_to_stderr(self) -> None:
        configure_logging()
        root = logging.getLogger()
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_brief_format_by_default(self) -> None:
        configure_logging()
        record = logging.LogRecord("team_stats_viewer.x", logging.WARNING, __file__, 1, "careful", None, None)
        assert logging.getLogger().handlers[0].format(record) == "WARNING: careful"

    def test_verbose_format_names_logger(self) -> None:
        configure_logging(verbose=True)
        record = logging.LogRecord("team_stats_viewer.x", logging.DEBUG, __file__, 1, "detail", None, None)
        assert "team_stats_viewer.x: detail" in logging.getLogger().handlers[0].format(record)

    def test_idempotent(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestLogLevel:
    def test_verbose_and_quiet_conflict(self) -> None:
        with pytest.raises(ValueError, match="mutually exclusive"):
            log_level(verbose=True, quiet=True)
