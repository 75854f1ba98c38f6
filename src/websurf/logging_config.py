"""
Structured logging for websurf.

JSON lines to a rotating file under ~/.websurf/logs, plus an optional
stderr handler for --verbose. Library code only ever calls
logging.getLogger("websurf.<module>"); handlers are installed by the CLI.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path

LOG_DIR = Path.home() / ".websurf" / "logs"
LOG_FILE_NAME = "websurf.log"

# Extra record attributes copied into the JSON line when present
_EXTRA_FIELDS = ("url", "method", "status", "bytes", "command")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for machine parsing."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        return json.dumps(log_data, default=str)


def setup_logging(verbose: bool = False, log_dir: Path | None = None) -> logging.Logger:
    """
    Set up websurf logging.

    Args:
        verbose: Also log INFO and above to stderr.
        log_dir: Directory for websurf.log (default ~/.websurf/logs).

    Returns:
        The "websurf" logger.
    """
    log_dir = log_dir or LOG_DIR
    root_logger = logging.getLogger("websurf")
    root_logger.handlers.clear()

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        # No log directory: stderr only
        root_logger.setLevel(logging.INFO if verbose else logging.WARNING)
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        root_logger.addHandler(console_handler)
        if verbose:
            root_logger.warning(f"Could not create log directory: {e}")
        return root_logger

    root_logger.setLevel(logging.DEBUG)

    # 10MB per file, keep the last 5
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)
    except (OSError, PermissionError) as e:
        if verbose:
            print(f"Warning: Could not create log file: {e}", file=sys.stderr)

    if verbose:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        root_logger.addHandler(console_handler)

    root_logger.info("websurf logging initialized")
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module."""
    return logging.getLogger(f"websurf.{name}")
