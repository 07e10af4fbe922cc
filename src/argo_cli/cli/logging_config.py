"""Centralized logging configuration for CLI commands.

Called once per invocation from the root command's pre-run hook, after the
persistent flags have been parsed.
"""

import logging
import os

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# HTTP libraries whose verbosity follows --gloglevel rather than --loglevel
TRANSPORT_LOGGERS = ["urllib3", "urllib3.connectionpool", "requests"]


def transport_log_level(glog_level: int) -> int:
    """Map a glog verbosity to a stdlib level for the HTTP libraries."""
    if glog_level >= 6:
        return logging.DEBUG
    if glog_level >= 4:
        return logging.INFO
    return logging.WARNING


def configure_logging(log_level: str = "info", glog_level: int = 0) -> None:
    """Configure logging levels from the global options.

    Args:
        log_level: One of debug|info|warn|warning|error
        glog_level: Verbosity of the HTTP transport libraries; 6 and above shows requests

    Examples:
        >>> configure_logging("debug", 6)   # Everything, including HTTP requests
        >>> configure_logging("warn")       # Only warnings and errors
    """
    # Skip configuration if running in test environment
    # Tests manage their own logging to avoid interference
    if os.getenv("PYTEST_CURRENT_TEST"):
        return

    level = LOG_LEVELS[log_level.lower()]

    # Only configure if not already configured
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    else:
        logging.getLogger().setLevel(level)

    for logger_name in TRANSPORT_LOGGERS:
        logging.getLogger(logger_name).setLevel(transport_log_level(glog_level))
