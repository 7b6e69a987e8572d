"""
Lift — turn raising collaborator calls into lazy Results.

Gateways raise; checkout and polling work with values. Everything crossing
that boundary goes through `attempt`, which is combinators' catching_async
plus a log line for the exception it absorbs. Cancellation is not an
Exception and always propagates.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog
from combinators import lift as L
from kungfu import LazyCoroResult

from storefront._types import Call


# ═══════════════════════════════════════════════════════════════════════════════
# attempt() — catching_async with a trace
# ═══════════════════════════════════════════════════════════════════════════════


def attempt[T, E](
    call: Call[T],
    on_error: Callable[[Exception], E],
    *,
    log: structlog.typing.FilteringBoundLogger | None = None,
    event: str = "call_failed",
) -> LazyCoroResult[T, E]:
    """
    Lift a gateway call.

    Example:
        lookup = attempt(
            lambda: payments.get_by_order(order_id),
            on_error=classify_lookup_error,
            log=log,
            event="payment_lookup_failed",
        )
        match await lookup:
            case Ok(payment): ...
            case Error(failure): ...
    """
    def handle(exc: Exception) -> E:
        if log is not None:
            log.warning(event, error=message_of(exc), error_type=type(exc).__name__)
        return on_error(exc)

    return L.catching_async(call, on_error=handle)


def message_of(exc: BaseException) -> str:
    """User-facing text of an exception; falls back to the type name."""
    return str(exc) or type(exc).__name__


__all__ = ("attempt", "message_of")
