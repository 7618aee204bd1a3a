# src/caserunner/telemetry/logger/base.py

import logging
import sys

import structlog
from structlog.typing import FilteringBoundLogger, Processor

from caserunner.telemetry.logger.processors import (
    LOG_EMOJIS,
    add_emoji_processor,
    remove_extra_keys_processor,
)

BASE_LOGGER_NAME = "caserunner"

_JSON_RENDERER_OPTIONS = {"sort_keys": True}


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_emoji_processor,
        remove_extra_keys_processor,
    ]


def _console_handler(json_logs: bool) -> logging.Handler:
    # stdout is reserved for case output such as method listings.
    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer(**_JSON_RENDERER_OPTIONS)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    return handler


def _file_handler(log_file: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(**_JSON_RENDERER_OPTIONS)
        )
    )
    handler.setLevel(level)
    return handler


def setup_logging(
    level: int = logging.INFO,
    json_logs: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Route structlog through the standard library root logger.

    Console output goes to stderr, as JSON when ``json_logs`` is set. A
    ``log_file`` additionally receives JSON lines. Calling this again
    replaces the previous handlers.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers must follow a later reconfiguration.
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    handlers: list[logging.Handler] = [_console_handler(json_logs)]

    slog = structlog.get_logger(BASE_LOGGER_NAME)
    file_error: OSError | None = None
    if log_file:
        try:
            handlers.append(_file_handler(log_file, level))
        except OSError as e:
            file_error = e

    for handler in handlers:
        root_logger.addHandler(handler)

    if file_error is not None:
        slog.error("Cannot open log file, logging to the console only", log_file=log_file, error=str(file_error))
    slog.debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        json_console=json_logs,
        log_file=log_file,
        handlers=len(handlers),
    )


StructLogger = FilteringBoundLogger

__all__ = ["BASE_LOGGER_NAME", "LOG_EMOJIS", "StructLogger", "setup_logging"]

# 🔼⚙️
