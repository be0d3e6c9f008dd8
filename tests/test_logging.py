"""Tests for logging helpers."""

import logging
import subprocess
import sys
from pathlib import Path

import structlog

import whatschanging
from whatschanging.diff import compare
from whatschanging.logging import LogContext, PerformanceLogger, get_logger, setup_logging
from whatschanging.logging import logger as logger_module
from whatschanging.model import Image


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "run.log"

    setup_logging(level="INFO", log_file=log_file, structured=True, console=False)
    get_logger("whatschanging.test").info("file_event", answer=42)
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = log_file.read_text()
    assert "file_event" in content
    assert '"answer": 42' in content


def test_disabled_console_uses_null_handler(monkeypatch):
    monkeypatch.setenv("WHATSCHANGING_DISABLE_CONSOLE_LOGGING", "1")

    setup_logging(level="DEBUG")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.NullHandler)


def test_log_context_binds_values():
    logger = structlog.get_logger("whatschanging.test")

    with LogContext(logger, pair="a.png") as bound:
        assert bound is not None


class TestPerformanceLogger:
    """Test timing statistics."""

    def setup_method(self):
        """Set up a performance logger."""
        self.perf = PerformanceLogger()

    def test_stats_for_operation(self):
        self.perf.log_timing("pixel_diff", 0.5)
        self.perf.log_timing("pixel_diff", 1.5)

        stats = self.perf.get_stats("pixel_diff")

        assert stats["count"] == 2
        assert stats["mean"] == 1.0
        assert stats["min"] == 0.5
        assert stats["max"] == 1.5
        assert stats["total"] == 2.0

    def test_unknown_operation(self):
        assert self.perf.get_stats("missing") == {}

    def test_all_stats(self):
        self.perf.log_timing("load", 0.1)
        self.perf.log_timing("pixel_diff", 0.2)

        assert set(self.perf.get_stats()) == {"load", "pixel_diff"}

    def test_keeps_only_recent_samples(self):
        perf = PerformanceLogger(max_samples=3)

        for duration in range(10):
            perf.log_timing("pixel_diff", float(duration))

        assert list(perf.metrics["pixel_diff"]) == [7.0, 8.0, 9.0]
        assert perf.get_stats("pixel_diff")["count"] == 3


class TestHostLogging:
    """Test that the package leaves an embedding program's logging alone."""

    def setup_method(self):
        """Install a handler the way a host program would."""
        self.root = logging.getLogger()
        self.saved = (self.root.handlers[:], self.root.level)
        self.handler = logging.StreamHandler(sys.stdout)
        self.root.handlers = [self.handler]
        self.root.setLevel(logging.INFO)

    def teardown_method(self):
        """Restore the root logger."""
        self.root.handlers, level = self.saved
        self.root.setLevel(level)

    def test_import_does_not_touch_root_logger(self):
        src = Path(whatschanging.__file__).resolve().parents[1]
        code = (
            "import logging, sys\n"
            "handler = logging.StreamHandler(sys.stdout)\n"
            "root = logging.getLogger()\n"
            "root.addHandler(handler)\n"
            "root.setLevel(logging.INFO)\n"
            "import whatschanging, whatschanging.cli.main\n"
            "assert root.handlers == [handler], root.handlers\n"
            "assert root.level == logging.INFO, root.level\n"
        )

        completed = subprocess.run(
            [sys.executable, "-c", code],
            cwd=src,
            capture_output=True,
            text=True,
        )

        assert completed.returncode == 0, completed.stderr

    def test_first_log_call_keeps_existing_handlers(self, monkeypatch, random_rgb):
        monkeypatch.setattr(logger_module, "_logging_initialized", False)
        image = Image.from_array(random_rgb(3, 3))

        compare(image, image)

        assert logger_module._logging_initialized
        assert self.root.handlers == [self.handler]
        assert self.root.level == logging.INFO

    def test_get_logger_does_not_configure(self, monkeypatch):
        monkeypatch.setattr(logger_module, "_logging_initialized", False)

        get_logger("whatschanging.test")

        assert not logger_module._logging_initialized
