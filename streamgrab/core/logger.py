"""
Logging configuration for streamgrab.

Log outputs:
    - Console: Colored, tqdm-compatible messages
    - log_full_<ts>.log: Complete log of all events (DEBUG and above)
    - log_errors_<ts>.log: Only ERROR and CRITICAL level messages
    - failures_<ts>.log: Every album/set that could not be turned into a
      playlist during a fan-out, with its URL and the reason

Log File Locations:
    Log files are created in a 'logs' subdirectory of the output directory,
    unless output.write_logs is false in config.yaml.

Usage:
    from streamgrab.core.logger import setup_logging, get_logger

    setup_logging(output_dir)
    logger = get_logger(__name__)

    logger.info("Resolving URL")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOGS_DIRNAME = "logs"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Console formatter: "LEVEL: message", level colored.

    With show_source (verbose mode) the last part of the logger name is
    added, e.g. "DEBUG [fetcher]: GET https://...", so it is clear which
    site integration a debug line comes from.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(self, show_source: bool = False) -> None:
        super().__init__()
        self.show_source = show_source

    def format(self, record: logging.LogRecord) -> str:
        level = f"{self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)}{record.levelname}{Colors.RESET}"
        if self.show_source:
            level = f"{level} [{record.name.rsplit('.', 1)[-1]}]"
        return f"{level}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Console handler that prints through tqdm.write().

    Log lines written while the catalog progress bar is active appear
    above the bar instead of breaking it. The stream defaults to whatever
    sys.stderr is at emit time, so redirected stderr is honoured.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class ResourceFailureHandler(logging.Handler):
    """
    Handler that captures fan-out failures for the failures report file.

    Writes one entry per failed sub-resource in a simple format:

        https://label.bandcamp.com/album/broken
        Track field count mismatch (streams=3, titles=2, durations=3)

    Records are picked up by their failed_resource_url extra (set by
    log_resource_failure); every other record is ignored.

    Usage:
        log_resource_failure(logger, url, error)
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        source = getattr(record, "failed_resource_url", None)
        if source is None or self.report_file is None:
            return

        try:
            reason = getattr(record, "failed_resource_reason", "Unknown error")
            self.report_file.write(f"{source}\n{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _file_handler(path: Path, *filters: logging.Filter) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    for log_filter in filters:
        handler.addFilter(log_filter)
    return handler


def setup_logging(
    output_dir: Path | None = None,
    verbose: bool = False
) -> Path | None:
    """
    Route all log records to the console and, optionally, to log files.

    Called once by the CLI after the configuration is loaded. Calling it
    again replaces every root handler.

    Args:
        output_dir: Directory under which a 'logs' subdirectory is created
                    for the log files. None disables file logging.
        verbose: If True, the console shows DEBUG messages too.

    Returns:
        The logs directory, or None if file logging is disabled.

    The root logger is set to DEBUG; each handler filters on its own.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = TqdmLoggingHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(ColoredConsoleFormatter(show_source=verbose))
    root.addHandler(console)

    # urllib3 logs every connection at DEBUG; keep it out of verbose output
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if output_dir is None:
        return None

    logs_dir = output_dir / LOGS_DIRNAME
    logs_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root.addHandler(_file_handler(logs_dir / f"log_full_{stamp}.log"))
    root.addHandler(_file_handler(logs_dir / f"log_errors_{stamp}.log", ErrorOnlyFilter()))

    failures = ResourceFailureHandler(logs_dir / f"failures_{stamp}.log")
    failures.open()
    root.addHandler(failures)

    return logs_dir


def get_logger(name: str) -> logging.Logger:
    """Module logger; records reach the handlers installed by setup_logging()."""
    return logging.getLogger(name)


def format_saved_message(label: str, path: Path, track_count: int) -> str:
    return (
        f"{Colors.GREEN}Playlist saved{Colors.RESET}: "
        f"{label} ({track_count} tracks) -> "
        f"{Colors.CYAN}{path}{Colors.RESET}"
    )


def log_resource_failure(
    logger: logging.Logger,
    source: str,
    error: Exception
) -> None:
    """
    Log a sub-resource that failed during a fan-out.

    Logs an ERROR level message and attaches the extra fields that
    ResourceFailureHandler writes to failures_<ts>.log.

    Args:
        logger: The logger to use for the message.
        source: URL or id of the failed album/set.
        error: The exception that stopped it.

    Example:
        log_resource_failure(
            logger,
            "https://label.bandcamp.com/album/broken",
            MalformedAlbumError("Track field count mismatch")
        )
    """
    logger.error(
        f"Skipping {source}: {error}",
        extra={
            "failed_resource_url": source,
            "failed_resource_reason": str(error),
        }
    )


def shutdown_logging() -> None:
    """Flush, close and detach every root handler (the CLI's finally block)."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
