"""
Centralized logging configuration for the print shop order desk.

This module provides thread-aware logging with automatic thread context
in all log messages. Print dispatches run in their own threads, so every
line says which thread produced it.

Features:
    - Automatic thread name and ID in all log messages
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - Helper functions for getting loggers with consistent naming

Log Format:
    2025-12-03 10:15:30 [INFO    ] [MainThread] print_shop.app - Starting application
    2025-12-03 10:15:31 [INFO    ] [MainThread] print_shop.services.order_service - Order 12 created
    2025-12-03 10:15:32 [INFO    ] [Print-a1b2c3d4] print_shop.dispatch.a1b2c3d4 - Print job sent

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)
    logger.info("This message includes thread context automatically")

    # For dispatch threads
    dispatch_logger = get_dispatch_logger("a1b2c3d4")
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "print_shop"


# =============================================================================
# THREAD CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """
    Logging filter that adds thread context to all log records.

    This filter adds two attributes to each log record:
        - thread_name: Name of the current thread (e.g., "MainThread", "Print-a1b2c3d4")
        - thread_id: Numeric ID of the current thread
    """

    def filter(self, record: logging.LogRecord) -> bool:
        current_thread = threading.current_thread()
        record.thread_name = current_thread.name
        record.thread_id = threading.get_ident()

        # Adds context only, never drops a record
        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging with thread context.

    This sets up:
    1. Console handler (always enabled) - for immediate feedback
    2. Rotating file handler (optional) - for persistent logs
    3. Error file handler (optional) - for ERROR/CRITICAL only
    4. Thread context filter - adds thread name to all messages

    Args:
        app_name: Name of the root logger (default: "print_shop")
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs relative to this file)
        enable_file_logging: Whether to write to log files (default: True)

    Returns:
        Configured root logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration (the test suite builds many apps)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    thread_filter = ThreadContextFilter()

    # ---------------------------------------------------------------------
    # Console Handler (always enabled)
    # ---------------------------------------------------------------------
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    # ---------------------------------------------------------------------
    # File Handlers (optional)
    # ---------------------------------------------------------------------
    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"

        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB per file
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_log_file = log_dir / f"{app_name}_error.log"
        error_handler = RotatingFileHandler(
            filename=error_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger with the application namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance, e.g. "print_shop.services.order_service"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"

    return logging.getLogger(name)


def get_dispatch_logger(dispatch_id: str) -> logging.Logger:
    """
    Get a logger for a specific print dispatch.

    Only the first 8 characters of the dispatch ID are used, which keeps
    lines short while still letting you grep a single dispatch.
    """
    short_id = dispatch_id[:8]
    return logging.getLogger(f"{APP_LOGGER_NAME}.dispatch.{short_id}")


def set_thread_name(name: str) -> None:
    """Set the name of the current thread (shown in the [thread_name] field)."""
    threading.current_thread().name = name
