"""
Logging — structlog JSON output.

    from storefront.log import configure_logging, get_logger

    configure_logging("debug")
    log = get_logger(component="checkout").bind(order_id=order.id)
    log.info("order_created", total_int=order.total_int)

Events are snake_case verbs; context travels as bound key/values.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog


def configure_logging(level: str | int = "info") -> None:
    """Configure structlog with JSON rendering and ISO timestamps."""
    if isinstance(level, str):
        level = logging.getLevelNamesMapping()[level.upper()]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def get_logger(**context: Any) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger().bind(**context)


__all__ = ("configure_logging", "get_logger")
