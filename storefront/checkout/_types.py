"""
Checkout types — state, outcomes, failures and the collaborators checkout
talks to (cart store, presentation surface).
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol

from storefront._types import AddressId, OrderId, PaymentId
from storefront.domain import Cart, PaymentMethod


# ═══════════════════════════════════════════════════════════════════════════════
# State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutState:
    """Owned by CheckoutOrchestrator; replaced, never mutated in place."""

    selected_address_id: AddressId = ""
    selected_method: PaymentMethod = PaymentMethod.COD
    is_submitting: bool = False


class CheckoutPhase(Enum):
    """
    Lifecycle:
        EDITING → SUBMITTING → COMPLETED          (COD)
                             → AWAITING_PAYMENT   (bank transfer)
                             → EDITING            (rejected / gateway error)
        AWAITING_PAYMENT → COMPLETED | PAYMENT_TIMED_OUT | PAYMENT_FAILED
                         → EDITING                (buyer closed the dialog)
    """

    EDITING = auto()
    SUBMITTING = auto()
    AWAITING_PAYMENT = auto()
    COMPLETED = auto()
    PAYMENT_TIMED_OUT = auto()
    PAYMENT_FAILED = auto()


class CheckoutStage(Enum):
    ORDER = "order"
    PAYMENT = "payment"


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutCompletion:
    """Where the success page goes: /cart/success?orderId=..&paymentMethod=.."""

    order_id: OrderId
    payment_method: PaymentMethod


@dataclass(frozen=True, slots=True)
class PaymentDialog:
    """Everything the bank-transfer dialog displays."""

    order_id: OrderId
    payment_id: PaymentId
    reference: str
    qr_payload: str | None
    amount_int: int


@dataclass(frozen=True, slots=True)
class AwaitingPayment:
    dialog: PaymentDialog


# ═══════════════════════════════════════════════════════════════════════════════
# Failures
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ValidationFailed:
    messages: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class GatewayFailure:
    """
    Order or payment creation failed.

    order_id is set when the order was created before the payment step
    failed; that order is left as is.
    """

    stage: CheckoutStage
    message: str
    order_id: OrderId | None = None


@dataclass(frozen=True, slots=True)
class CheckoutBusy:
    message: str = "Checkout is already in progress"


@dataclass(frozen=True, slots=True)
class CheckoutClosed:
    """The checkout was torn down while a submission was in flight."""

    order_id: OrderId | None = None


type CheckoutFailure = ValidationFailed | GatewayFailure | CheckoutBusy | CheckoutClosed
type CheckoutOutcome = CheckoutCompletion | AwaitingPayment


# ═══════════════════════════════════════════════════════════════════════════════
# Collaborators
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    def snapshot(self) -> Cart | None:
        """Cart as currently displayed."""
        ...

    async def clear(self) -> None: ...


class CheckoutSurface(Protocol):
    """Presentation layer: toasts, dialog, navigation."""

    def show_errors(self, messages: Sequence[str]) -> None: ...

    def show_success(self, message: str) -> None: ...

    def open_payment_dialog(self, dialog: PaymentDialog) -> None: ...

    def close_payment_dialog(self) -> None: ...

    def complete(self, completion: CheckoutCompletion) -> None: ...


__all__ = (
    "CheckoutState",
    "CheckoutPhase",
    "CheckoutStage",
    "CheckoutCompletion",
    "PaymentDialog",
    "AwaitingPayment",
    "ValidationFailed",
    "GatewayFailure",
    "CheckoutBusy",
    "CheckoutFailure",
    "CheckoutOutcome",
    "CartStore",
    "CheckoutSurface",
)
