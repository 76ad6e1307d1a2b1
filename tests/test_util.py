"""Tests for logging setup."""

import io
import logging
from logging.handlers import RotatingFileHandler

from relaychat.util import LOG, configure_logging


class TestConfigureLogging:
    def test_console_handler_and_level(self):
        stream = io.StringIO()
        configure_logging(logging.DEBUG, stream=stream)
        assert LOG.level == logging.DEBUG
        assert [type(h) for h in LOG.handlers] == [logging.StreamHandler]

        LOG.debug("relay ready")
        assert "DEBUG" in stream.getvalue()
        assert "relay ready" in stream.getvalue()

    def test_repeated_calls_do_not_duplicate_handlers(self, tmp_path):
        log_file = tmp_path / "relay.log"
        configure_logging(log_file=str(log_file), stream=io.StringIO())
        configure_logging(log_file=str(log_file), stream=io.StringIO())
        assert [type(h).__name__ for h in LOG.handlers] == ["StreamHandler", "RotatingFileHandler"]

    def test_log_file_rotates(self, tmp_path):
        log_file = tmp_path / "relay.log"
        configure_logging(log_file=str(log_file), stream=io.StringIO())
        handler = next(h for h in LOG.handlers if isinstance(h, RotatingFileHandler))
        assert handler.maxBytes == 1_048_576
        assert handler.backupCount == 3
        assert handler.encoding == "utf-8"

        LOG.info("alice joined the chat")
        handler.flush()
        assert "alice joined the chat" in log_file.read_text(encoding="utf-8")
        handler.close()

    def test_no_file_without_log_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        configure_logging(stream=io.StringIO())
        assert not any(isinstance(h, RotatingFileHandler) for h in LOG.handlers)
        assert list(tmp_path.iterdir()) == []
