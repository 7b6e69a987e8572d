"""
Checkout — validation and orchestration of the two settlement flows.

    from storefront import checkout as CO

    CO.validate(cart, address_id).errors     # every violated rule

    checkout = CO.CheckoutOrchestrator(orders, payments, cart_store, surface)
    checkout.select_address(address_id)
    checkout.select_method(PaymentMethod.BANK_TRANSFER)
    result = await checkout.submit()
"""

from storefront.checkout._validate import (
    MISSING_ADDRESS,
    EMPTY_CART,
    INVALID_PRICE,
    INVALID_QUANTITY,
    INVALID_TOTAL,
    TOTAL_MISMATCH,
    Validation,
    validate,
)
from storefront.checkout._types import (
    CheckoutState,
    CheckoutPhase,
    CheckoutStage,
    CheckoutCompletion,
    PaymentDialog,
    AwaitingPayment,
    ValidationFailed,
    GatewayFailure,
    CheckoutBusy,
    CheckoutClosed,
    CheckoutFailure,
    CheckoutOutcome,
    CartStore,
    CheckoutSurface,
)
from storefront.checkout._steps import CheckoutStep, step, run_step
from storefront.checkout._orchestrator import (
    ORDER_PLACED,
    PAYMENT_RECEIVED,
    PAYMENT_UNCONFIRMED,
    CheckoutOrchestrator,
    EngineFactory,
)

__all__ = (
    # Validation
    "MISSING_ADDRESS",
    "EMPTY_CART",
    "INVALID_PRICE",
    "INVALID_QUANTITY",
    "INVALID_TOTAL",
    "TOTAL_MISMATCH",
    "Validation",
    "validate",
    # Types
    "CheckoutState",
    "CheckoutPhase",
    "CheckoutStage",
    "CheckoutCompletion",
    "PaymentDialog",
    "AwaitingPayment",
    "ValidationFailed",
    "GatewayFailure",
    "CheckoutBusy",
    "CheckoutClosed",
    "CheckoutFailure",
    "CheckoutOutcome",
    "CartStore",
    "CheckoutSurface",
    # Steps
    "CheckoutStep",
    "step",
    "run_step",
    # Orchestrator
    "ORDER_PLACED",
    "PAYMENT_RECEIVED",
    "PAYMENT_UNCONFIRMED",
    "CheckoutOrchestrator",
    "EngineFactory",
)
