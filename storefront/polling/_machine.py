"""
Polling state machine — pure transitions over PollingSession.

No I/O, no clock. The engine feeds it ticks and lookup outcomes:

    session = start(idle(order_id))
    session, action = begin_tick(session, policy)
    if action is TickAction.LOOKUP:
        session = lookup_succeeded(session, payment)        # or
        session = lookup_failed(session, failure, policy)

Every transition out of a terminal phase raises InvalidTransition.
"""

from __future__ import annotations

from dataclasses import replace

from storefront._types import OrderId
from storefront.config import PollingPolicy
from storefront.domain import Payment
from storefront.errors import InvalidTransition, NotFoundError
from storefront.lift import message_of
from storefront.polling._types import (
    TIMEOUT_MESSAGE,
    LookupFailure,
    LookupFailureKind,
    PollingPhase,
    PollingSession,
    TickAction,
)


def _require(session: PollingSession, phase: PollingPhase, operation: str) -> None:
    if session.phase is not phase:
        raise InvalidTransition(
            f"cannot {operation} session for order {session.order_id} "
            f"in phase {session.phase.value}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


def idle(order_id: OrderId) -> PollingSession:
    return PollingSession(order_id=order_id)


def start(session: PollingSession) -> PollingSession:
    """IDLE → POLLING with all counters at zero."""
    _require(session, PollingPhase.IDLE, "start")
    return PollingSession(order_id=session.order_id, phase=PollingPhase.POLLING)


# ═══════════════════════════════════════════════════════════════════════════════
# Tick
# ═══════════════════════════════════════════════════════════════════════════════


def begin_tick(
    session: PollingSession,
    policy: PollingPolicy,
) -> tuple[PollingSession, TickAction]:
    """
    Count a tick, then decide whether to look the payment up.

    The tick reaching `max_attempts` times out instead of looking up.
    """
    _require(session, PollingPhase.POLLING, "tick")
    attempts = session.attempt_count + 1
    if attempts >= policy.max_attempts:
        return replace(
            session,
            attempt_count=attempts,
            phase=PollingPhase.TIMED_OUT,
            last_error=TIMEOUT_MESSAGE,
        ), TickAction.STOP
    return replace(session, attempt_count=attempts), TickAction.LOOKUP


def lookup_succeeded(session: PollingSession, payment: Payment) -> PollingSession:
    """A read went through. PAID ends the session; UNPAID keeps polling."""
    _require(session, PollingPhase.POLLING, "record lookup of")
    return replace(
        session,
        phase=PollingPhase.SUCCEEDED if payment.is_paid else PollingPhase.POLLING,
        consecutive_failure_count=0,
        last_error=None,
        payment=payment,
    )


def lookup_failed(
    session: PollingSession,
    failure: LookupFailure,
    policy: PollingPolicy,
) -> PollingSession:
    """
    A read failed.

    Transport failures are retried by the following ticks until more than
    `max_retries` happen in a row. Not-found fails immediately.
    """
    _require(session, PollingPhase.POLLING, "record failure of")
    failures = session.consecutive_failure_count + 1
    exhausted = not failure.retryable or failures > policy.max_retries
    return replace(
        session,
        phase=PollingPhase.FAILED if exhausted else PollingPhase.POLLING,
        consecutive_failure_count=failures,
        last_error=failure.message,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════════════════


def classify_lookup_error(exc: Exception) -> LookupFailure:
    """NotFoundError is final; anything else a lookup raises is transient."""
    if isinstance(exc, NotFoundError):
        return LookupFailure(LookupFailureKind.NOT_FOUND, message_of(exc))
    return LookupFailure(LookupFailureKind.TRANSPORT, message_of(exc))


__all__ = (
    "idle",
    "start",
    "begin_tick",
    "lookup_succeeded",
    "lookup_failed",
    "classify_lookup_error",
)
