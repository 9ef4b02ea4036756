"""Loguru configuration for a stdio MCP server.

stdout belongs to the MCP protocol, so every sink writes to stderr: either
human-readable colored lines or one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from typing import Any

from loguru import logger

# Standard-library loggers routed through loguru
INTERCEPTED_LOGGERS = ("httpx", "httpcore", "mcp", "google.auth", "keyring")


def _json_serializer(record: dict[str, Any]) -> str:
    """Serialize a log record to a single JSON line.

    Fields: ``level``, ``message``, ``time``, ``logger`` and, for errors,
    ``exception``. Extra fields bound with ``logger.bind`` appear at the top
    level.
    """
    log_entry: dict[str, Any] = {
        "level": record["level"].name,
        "message": record["message"],
        "time": record["time"].isoformat(),
        "logger": record["name"],
    }

    if record["exception"] is not None:
        exc_info = record["exception"]
        tb_str = None
        if exc_info.traceback:
            tb_str = "".join(
                traceback.format_exception(
                    exc_info.type, exc_info.value, exc_info.traceback
                )
            )
        log_entry["exception"] = {
            "type": exc_info.type.__name__ if exc_info.type else None,
            "value": str(exc_info.value) if exc_info.value else None,
            "traceback": tb_str,
        }

    for key, value in record.get("extra", {}).items():
        if not key.startswith("_"):
            log_entry[key] = value

    return json.dumps(log_entry, default=str)


def _json_sink(message: Any) -> None:
    """Sink that writes serialized JSON to stderr."""
    sys.stderr.write(_json_serializer(message.record) + "\n")
    sys.stderr.flush()


def configure_logging(*, json_logs: bool = False, log_level: str = "INFO") -> None:
    """Configure loguru for the process.

    Args:
        json_logs: If True, write JSON lines. If False, use human-readable
            colored output.
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    logger.remove()

    if json_logs:
        logger.add(
            _json_sink,
            level=log_level,
            format="{message}",
            backtrace=False,
            diagnose=False,
        )
    else:
        logger.add(
            sys.stderr,
            level=log_level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level>"
                "{exception}"
            ),
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    _intercept_standard_logging(log_level)


class InterceptHandler(logging.Handler):
    """Forward standard-library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where the logged message originated
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _intercept_standard_logging(log_level: str) -> None:
    """Route httpx, mcp and the Google auth libraries through loguru."""
    # TRACE exists only in loguru
    std_level = "DEBUG" if log_level == "TRACE" else log_level
    logging.basicConfig(handlers=[InterceptHandler()], level=std_level, force=True)

    for name in INTERCEPTED_LOGGERS:
        logging.getLogger(name).setLevel(std_level)
        logging.getLogger(name).handlers = [InterceptHandler()]
