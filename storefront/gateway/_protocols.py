"""
Gateway protocols — what checkout needs from the backend.

Implementations raise from storefront.errors:

    OrderGateway.create           OrderCreationError
    PaymentGateway.initiate       PaymentInitiationError
    PaymentGateway.get_by_order   TransportError (retryable) | NotFoundError

Example — a gateway over some other SDK:

    class SdkPayments(PaymentGateway):
        async def get_by_order(self, order_id: OrderId) -> Payment:
            try:
                raw = await sdk.payments.for_order(order_id)
            except sdk.Missing as e:
                raise NotFoundError(str(e)) from e
            except sdk.NetworkError as e:
                raise TransportError(str(e)) from e
            return to_payment(raw)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from storefront._types import AddressId, OrderId
from storefront.domain import (
    Order,
    OrderItem,
    Payment,
    PaymentInitiation,
    PaymentMethod,
)


class OrderGateway(Protocol):
    async def create(
        self,
        address_id: AddressId,
        items: Sequence[OrderItem],
    ) -> Order:
        """Place an order for the given lines."""
        ...


class PaymentGateway(Protocol):
    async def initiate(
        self,
        order_id: OrderId,
        method: PaymentMethod,
        amount_int: int,
    ) -> PaymentInitiation:
        """Open a payment for the order (QR + reference for bank transfer)."""
        ...

    async def get_by_order(self, order_id: OrderId) -> Payment:
        """Current payment record of the order."""
        ...


__all__ = ("OrderGateway", "PaymentGateway")
