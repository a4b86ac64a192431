"""
Structured logging configuration.
"""
import logging
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional, TextIO

import structlog
from structlog.types import Processor

from doubledash.core.config import settings


def setup_logging(stream: Optional[TextIO] = None) -> None:
    """
    Configure structured logging for the application.

    Args:
        stream: Where log lines go (defaults to stdout)
    """

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Aggregation timing
# ========================================

@dataclass
class AggregationLog:
    """Log entry for a single report build."""
    operation: str
    context: Dict[str, Any] = field(default_factory=dict)

    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    activity_count: int = 0

    success: bool = True
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class AggregationTracker:
    """Tracker for a single aggregation run."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **context: Any,
    ):
        self.logger = logger
        self.log = AggregationLog(operation=operation, context=context)

    def start(self) -> None:
        """Mark the start of the run."""
        self.log.start_time = time.perf_counter()
        self.logger.debug(
            "Aggregation started",
            operation=self.log.operation,
            **self.log.context,
        )

    def set_activity_count(self, count: int) -> None:
        """Record how many activities went into the run."""
        self.log.activity_count = count

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the run and log summary."""
        self.log.end_time = time.perf_counter()
        self.log.duration_ms = (self.log.end_time - self.log.start_time) * 1000

        if self.log.success:
            self.logger.info(
                "Aggregation completed",
                operation=self.log.operation,
                activity_count=self.log.activity_count,
                duration_ms=round(self.log.duration_ms, 2),
                **self.log.context,
            )
        else:
            self.logger.error(
                "Aggregation failed",
                operation=self.log.operation,
                activity_count=self.log.activity_count,
                duration_ms=round(self.log.duration_ms, 2),
                error_type=self.log.error_type,
                error_message=self.log.error_message,
                **self.log.context,
            )


@contextmanager
def track_aggregation(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    **context: Any,
) -> Generator[AggregationTracker, None, None]:
    """
    Context manager for timing an aggregation run.

    Usage:
        with track_aggregation(logger, "build_report", user_id=user_id) as run:
            run.set_activity_count(len(activities))
            ...
    """
    tracker = AggregationTracker(logger, operation, **context)
    tracker.start()
    try:
        yield tracker
    except Exception as e:
        tracker.set_error(type(e).__name__, str(e))
        raise
    finally:
        tracker.finish()
