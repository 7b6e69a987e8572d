"""
Polling — bounded, cancellable wait for a bank-transfer confirmation.

    from storefront import polling as P

    engine = P.PaymentPollingEngine(payments, listener, policy=P.PollingPolicy())
    engine.start(order.id)
    dialog = P.DialogStateSync(engine)
    dialog.state.attempts_label        # "12/180"

State machine (pure, in `P.machine`):

    IDLE ──start──▶ POLLING ──PAID──────────────▶ SUCCEEDED
                       │   ──budget spent───────▶ TIMED_OUT
                       │   ──not found / >3 err─▶ FAILED
                       └── UNPAID / transport error: stay, next tick
"""

from storefront.config import PollingPolicy
from storefront.polling import _machine as machine
from storefront.polling._types import (
    TIMEOUT_MESSAGE,
    PollingPhase,
    TickAction,
    PollingSession,
    LookupFailureKind,
    LookupFailure,
    PollingListener,
)
from storefront.polling._clock import Clock, SystemClock, VirtualClock
from storefront.polling._engine import PaymentPollingEngine
from storefront.polling._dialog import DialogState, DialogStateSync, project

__all__ = (
    # Config
    "PollingPolicy",
    # Types
    "TIMEOUT_MESSAGE",
    "PollingPhase",
    "TickAction",
    "PollingSession",
    "LookupFailureKind",
    "LookupFailure",
    "PollingListener",
    # Pure transitions
    "machine",
    # Clocks
    "Clock",
    "SystemClock",
    "VirtualClock",
    # Engine
    "PaymentPollingEngine",
    # Dialog
    "DialogState",
    "DialogStateSync",
    "project",
)
