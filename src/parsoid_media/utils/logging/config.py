# ABOUTME: Logging configuration using loguru sinks with structlog front-end loggers
# ABOUTME: Dual-mode operation: interactive CLI (log files) vs production JSON logging

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger

from parsoid_media.config import get_config

LOG_DIR = Path("logs")
QUIET_LOGGERS = ["httpx", "httpcore", "urllib3", "asyncio", "bs4"]

# Mode applied by the last configure_logging call
_active_mode: str | None = None


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records (and therefore structlog events) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=6, exception=record.exc_info).bind(logger_name=record.name).log(
            level, record.getMessage()
        )


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("PARSOID_MEDIA_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep HTTP and parser libraries at warning level so they don't drown our events."""
    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def setup_structlog() -> None:
    """Route structlog through the stdlib so loguru sinks receive every event."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(key_order=["event"], sort_keys=True),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging using loguru.

    Args:
        mode: Logging mode (interactive/production), auto-detected if None
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Custom log file path, uses default if None
    """
    global _active_mode
    if mode is None:
        mode = detect_logging_mode()

    setup_third_party_logging()

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(handlers=[InterceptHandler()], level=numeric_level, force=True)
    setup_structlog()

    # Remove default loguru handler
    logger.remove()
    logger.configure(extra={"logger_name": "parsoid_media"})

    if mode == LoggingMode.INTERACTIVE:
        try:
            LOG_DIR.mkdir(exist_ok=True)
        except OSError:
            # No writable log directory: behave like production
            mode = LoggingMode.PRODUCTION

    _active_mode = mode

    if mode == LoggingMode.PRODUCTION:
        # JSON logs go to stderr so stdout stays reserved for command output
        logger.add(sys.stderr, level=log_level, format="{time} | {level} | {message}", serialize=True)
        return

    log_file_path = log_file or str(LOG_DIR / "parsoid-media.log")

    # Human-readable logs
    logger.add(
        log_file_path,
        level=log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[logger_name]} - {message}",
        rotation="10 MB",
        retention="7 days",
    )

    # JSON logs for machine processing
    logger.add(
        LOG_DIR / "parsoid-media.json",
        level=log_level,
        format="{time} | {level} | {message}",
        serialize=True,
        rotation="10 MB",
        retention="7 days",
    )

    # Errors only
    logger.add(
        LOG_DIR / "errors.log",
        level="ERROR",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[logger_name]} - {message}",
        backtrace=True,
        diagnose=True,
    )


def get_logging_status() -> dict[str, Any]:
    """Get current logging configuration status.

    Reports the mode logging was configured with, or the configured mode if
    logging has not been set up yet.
    """
    mode = _active_mode or get_config().log_mode
    interactive = mode == LoggingMode.INTERACTIVE

    return {
        "mode": mode,
        "log_directory": str(LOG_DIR.absolute()) if LOG_DIR.exists() else None,
        "log_files": {
            "main": str(LOG_DIR / "parsoid-media.log") if interactive else None,
            "json": str(LOG_DIR / "parsoid-media.json") if interactive else None,
            "errors": str(LOG_DIR / "errors.log") if interactive else None,
        },
        "third_party_suppressed": list(QUIET_LOGGERS),
    }
