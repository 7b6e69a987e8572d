"""
Polling types — session record, phases, lookup failures, listener.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from storefront._types import OrderId
from storefront.domain import Payment

TIMEOUT_MESSAGE = "Payment timed out. Please try again."


# ═══════════════════════════════════════════════════════════════════════════════
# Phase — Session Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class PollingPhase(Enum):
    """
    Lifecycle:
        IDLE → POLLING → SUCCEEDED  (payment PAID)
                       → TIMED_OUT  (attempt budget spent)
                       → FAILED     (not found, or retries exhausted)

    The three outcomes are terminal.
    """

    IDLE = "idle"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed_out"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (PollingPhase.SUCCEEDED, PollingPhase.TIMED_OUT, PollingPhase.FAILED)


class TickAction(Enum):
    """What the driver does after a tick was counted."""

    LOOKUP = auto()
    STOP = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PollingSession:
    """
    One wait for one order's payment.

    attempt_count: Ticks counted so far, whatever their outcome.
    consecutive_failure_count: Transport failures since the last good read.
    payment: Last payment record read, if any.
    """

    order_id: OrderId
    phase: PollingPhase = PollingPhase.IDLE
    attempt_count: int = 0
    consecutive_failure_count: int = 0
    last_error: str | None = None
    payment: Payment | None = None

    @property
    def is_polling(self) -> bool:
        return self.phase is PollingPhase.POLLING


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup Failure
# ═══════════════════════════════════════════════════════════════════════════════


class LookupFailureKind(Enum):
    TRANSPORT = auto()  # retried on the next tick
    NOT_FOUND = auto()  # fails the session at once


@dataclass(frozen=True, slots=True)
class LookupFailure:
    kind: LookupFailureKind
    message: str

    @property
    def retryable(self) -> bool:
        return self.kind is LookupFailureKind.TRANSPORT


# ═══════════════════════════════════════════════════════════════════════════════
# Listener — Terminal Callbacks
# ═══════════════════════════════════════════════════════════════════════════════


class PollingListener(Protocol):
    """
    Receives the single terminal outcome of a session.

    Callbacks run inside the polling task after the session has been
    detached, so they may call `engine.stop()` or `engine.start()`.
    """

    async def on_succeeded(self, payment: Payment) -> None: ...

    async def on_timed_out(self, session: PollingSession) -> None: ...

    async def on_failed(self, session: PollingSession, message: str) -> None: ...


__all__ = (
    "TIMEOUT_MESSAGE",
    "PollingPhase",
    "TickAction",
    "PollingSession",
    "LookupFailureKind",
    "LookupFailure",
    "PollingListener",
)
