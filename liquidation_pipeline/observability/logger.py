"""
JSON logging for ingestion runs.

Modules log through get_logger(__name__). Lines are JSON objects
(python-json-logger) so a run can be followed by file name or file run
id; LOG_FORMAT=text switches to plain lines for local work and LOG_LEVEL
sets the threshold.
"""
import logging
import os
import sys
import time
from contextlib import contextmanager

from pythonjsonlogger import jsonlogger

DEFAULT_LOGGER_NAME = "liquidation-pipeline"

JSON_FORMAT = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s"


class IngestJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level, logger name and call site to every line."""

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def _level(name: str | None) -> int:
    level = logging.getLevelName((name or os.getenv("LOG_LEVEL", "INFO")).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    (Re)configure a logger with a single stdout handler.

    Args:
        name: Logger name
        level: Threshold name; LOG_LEVEL, then INFO, when omitted or unknown
        format_type: "json" or "text"; LOG_FORMAT, then "json", when omitted

    Returns:
        The configured logger
    """
    log_level = _level(level)
    format_type = (format_type or os.getenv("LOG_FORMAT", "json")).lower()

    if format_type == "json":
        formatter: logging.Formatter = IngestJsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Logger by name, set up with defaults the first time it is asked for."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    return setup_logger(name)


@contextmanager
def log_operation(operation_name: str, logger: logging.Logger | None = None, **extra_fields):
    """
    Log the start and the outcome of a run stage with its duration.

    Exceptions are logged and re-raised.

    Usage:
        with log_operation("parsing", logger=logger, file_name="Sales 02.01.25.csv"):
            ...
    """
    logger = logger or get_logger()
    logger.info(f"Starting: {operation_name}", extra={"operation": operation_name, **extra_fields})
    started = time.monotonic()
    try:
        yield
    except Exception as e:
        logger.error(
            f"Failed: {operation_name}",
            extra={
                "operation": operation_name,
                "duration_seconds": round(time.monotonic() - started, 3),
                "status": "error",
                "error_type": type(e).__name__,
                "error_message": str(e),
                **extra_fields,
            },
        )
        raise
    logger.info(
        f"Completed: {operation_name}",
        extra={
            "operation": operation_name,
            "duration_seconds": round(time.monotonic() - started, 3),
            "status": "success",
            **extra_fields,
        },
    )
