"""
Logging configuration.

Loguru is the application logger. Records emitted through the standard
``logging`` module (uvicorn, SQLAlchemy) are intercepted and re-emitted
through loguru so everything ends up in the same sinks.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from book_api.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


class InterceptHandler(logging.Handler):
    """Routes standard logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller so file and line point at the original call site
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Configure loguru sinks and intercept standard logging."""
    level = (level or settings.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else settings.LOG_FILE

    logger.remove()
    logger.add(sys.stdout, level=level, colorize=True, format=CONSOLE_FORMAT)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            enqueue=True,
            backtrace=True,
            diagnose=False,
            format=FILE_FORMAT,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "sqlalchemy.engine"):
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False


def log_info(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    logger.bind(**(context or {})).info(message)


def log_db_error(error: Exception, operation: Optional[str] = None, context: Optional[Dict[str, Any]] = None) -> None:
    """Log a database error with the failing operation."""
    message = f"Database error: {error}"
    if operation:
        message += f" Operation: {operation}"

    logger.bind(
        **{
            "error_type": "database",
            "error_class": error.__class__.__name__,
            "operation": operation,
            **(context or {}),
        }
    ).opt(exception=error).error(message)


def log_auth_info(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    logger.bind(**(context or {})).info(f"Authentication info: {message}")


def log_auth_warning(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    logger.bind(**(context or {})).warning(f"Authentication warning: {message}")


def log_validation_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
    logger.bind(**{"error_type": "validation", "error_class": error.__class__.__name__, **(context or {})}).warning(
        f"Validation error: {error}"
    )


def log_business_error(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    """Log an expected application-level error (not found, conflict...)."""
    logger.bind(**(context or {})).warning(f"Business error: {message}")


def log_performance(operation: str, duration: float, context: Optional[Dict[str, Any]] = None) -> None:
    logger.bind(**{"operation": operation, "duration": duration, **(context or {})}).debug(
        f"Performance: {operation} took {duration:.4f} seconds"
    )


__all__ = [
    "logger",
    "setup_logger",
    "InterceptHandler",
    "log_info",
    "log_db_error",
    "log_auth_info",
    "log_auth_warning",
    "log_validation_error",
    "log_business_error",
    "log_performance",
]
