# ABOUTME: Logging configuration and structured logger helpers
# ABOUTME: Provides loguru sinks with structlog loggers for the extraction pipeline

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .utils import (
    LogContext,
    generate_operation_id,
    get_logger,
    log_api_call,
    with_operation_context,
    with_page_context,
)

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Utilities
    "LogContext",
    "generate_operation_id",
    "get_logger",
    "log_api_call",
    "with_operation_context",
    "with_page_context",
]
