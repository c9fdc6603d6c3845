"""Test logging setup"""

import logging

from streamgrab.core.exceptions import MalformedAlbumError
from streamgrab.core.logger import (
    ColoredConsoleFormatter,
    get_logger,
    log_resource_failure,
    setup_logging,
    shutdown_logging,
)


class TestSetupLogging:
    """Test handlers and log files"""

    def test_console_only(self):
        assert setup_logging() is None
        assert len(logging.getLogger().handlers) == 1

    def test_verbose_console(self):
        setup_logging(verbose=True)

        assert logging.getLogger().handlers[0].level == logging.DEBUG

    def test_log_files(self, temp_dir):
        logs_dir = setup_logging(temp_dir)

        assert logs_dir == temp_dir / "logs"
        names = [p.name for p in logs_dir.iterdir()]
        assert any(n.startswith("log_full_") for n in names)
        assert any(n.startswith("log_errors_") for n in names)
        assert any(n.startswith("failures_") for n in names)

    def test_failure_report(self, temp_dir):
        """Test fan-out failures land in the failures report only once each"""
        logs_dir = setup_logging(temp_dir)
        logger = get_logger("streamgrab.test")

        logger.error("Something unrelated")
        log_resource_failure(
            logger,
            "https://label.bandcamp.com/album/broken",
            MalformedAlbumError("Track field count mismatch")
        )
        shutdown_logging()

        report = next(logs_dir.glob("failures_*.log")).read_text(encoding="utf-8")
        assert report == "https://label.bandcamp.com/album/broken\nTrack field count mismatch\n\n"

        errors = next(logs_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")
        assert "Skipping https://label.bandcamp.com/album/broken" in errors
        assert "Something unrelated" in errors

    def test_shutdown_removes_handlers(self, temp_dir):
        setup_logging(temp_dir)
        shutdown_logging()

        assert logging.getLogger().handlers == []


class TestConsoleFormatter:
    """Test console line format"""

    def make_record(self):
        return logging.LogRecord(
            "streamgrab.bandcamp.fetcher", logging.INFO, __file__, 1, "Found %d albums", (2,), None
        )

    def test_plain(self):
        line = ColoredConsoleFormatter().format(self.make_record())

        assert line.endswith(": Found 2 albums")
        assert "[fetcher]" not in line

    def test_show_source(self):
        line = ColoredConsoleFormatter(show_source=True).format(self.make_record())

        assert "INFO" in line
        assert line.endswith(" [fetcher]: Found 2 albums")
