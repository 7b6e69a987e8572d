"""
Error taxonomy.

Collaborators (gateways, HTTP client) raise the exceptions below. The checkout
and polling cores never let them escape: they are lifted into failure values
(see storefront.checkout / storefront.polling) and reported exactly once.

    StorefrontError
    ├── GatewayError
    │   ├── OrderCreationError
    │   └── PaymentInitiationError
    ├── TransportError        # retryable while polling
    ├── NotFoundError         # hard failure while polling
    └── InvalidTransition     # programming error in the polling state machine
"""

from __future__ import annotations

from typing import ClassVar


class StorefrontError(Exception):
    """Base error. `code` is stable, `message` is user-facing."""

    code: ClassVar[str] = "STOREFRONT_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# Gateway — creation calls, surfaced once, never retried
# ═══════════════════════════════════════════════════════════════════════════════


class GatewayError(StorefrontError):
    code = "GATEWAY_ERROR"


class OrderCreationError(GatewayError):
    code = "ORDER_CREATION_FAILED"


class PaymentInitiationError(GatewayError):
    code = "PAYMENT_INITIATION_FAILED"


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup — payment status reads
# ═══════════════════════════════════════════════════════════════════════════════


class TransportError(StorefrontError):
    """Network failure, timeout or unexpected status while reading."""

    code = "TRANSPORT_ERROR"


class NotFoundError(StorefrontError):
    code = "NOT_FOUND"


# ═══════════════════════════════════════════════════════════════════════════════
# State machine misuse
# ═══════════════════════════════════════════════════════════════════════════════


class InvalidTransition(StorefrontError):
    code = "INVALID_TRANSITION"


__all__ = (
    "StorefrontError",
    "GatewayError",
    "OrderCreationError",
    "PaymentInitiationError",
    "TransportError",
    "NotFoundError",
    "InvalidTransition",
)
