"""Structured logging configuration using structlog with async context propagation.

Every bot event carries a ``category`` field (System, Price, Trade, Signal,
Analysis, Error) so console output and the daily log file can be filtered
the same way.
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

import structlog


class LogCategory(str, Enum):
    """Category attached to every bot log event."""

    SYSTEM = "System"
    PRICE = "Price"
    TRADE = "Trade"
    SIGNAL = "Signal"
    ANALYSIS = "Analysis"
    ERROR = "Error"


def _render_category(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Replace a LogCategory member with its plain string value."""
    category = event_dict.get("category")
    if isinstance(category, LogCategory):
        event_dict["category"] = category.value
    return event_dict


def daily_log_path(log_dir: str | Path, now: datetime | None = None) -> Path:
    """Return the path of the plain-text log file for the given (UTC) day."""
    now = now or datetime.now(timezone.utc)
    return Path(log_dir) / f"bot_{now.strftime('%Y-%m-%d')}.log"


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure structlog with JSON or console rendering.

    Uses structlog.contextvars for async context propagation (NOT threadlocal).
    Rendering format is controlled by the LOG_FORMAT environment variable:
    - "json" for production (machine-readable)
    - "console" for development (human-readable, default)

    When ``log_dir`` is given, events are also appended without colours to
    ``<log_dir>/bot_YYYY-MM-DD.log``.
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _render_category,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure stdlib logging to use structlog's ProcessorFormatter
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(daily_log_path(log_dir), encoding="utf-8")
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(colors=False),
                ],
            )
        )
        root_logger.addHandler(file_handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
