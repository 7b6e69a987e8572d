"""
In-memory gateways.

Note: For tests and demos only. No backend, nothing survives the process.
`mark_paid()` stands in for the bank webhook; `fail_next()` injects errors.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from collections.abc import Sequence
from dataclasses import replace

from storefront._types import AddressId, OrderId, UserId
from storefront.domain import (
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentInitiation,
    PaymentMethod,
    PaymentStatus,
    transfer_reference,
)
from storefront.errors import NotFoundError, OrderCreationError, StorefrontError


class _Faults:
    """Queue of exceptions raised by the next calls, oldest first."""

    def __init__(self) -> None:
        self._pending: deque[StorefrontError] = deque()

    def push(self, exc: StorefrontError, times: int) -> None:
        self._pending.extend(exc for _ in range(times))

    def raise_next(self) -> None:
        if self._pending:
            raise self._pending.popleft()


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryOrderGateway:
    def __init__(self, user_id: UserId = "user_demo") -> None:
        self.user_id = user_id
        self.orders: dict[OrderId, Order] = {}
        self._faults = _Faults()
        self._lock = asyncio.Lock()

    def fail_next(self, exc: StorefrontError, times: int = 1) -> None:
        self._faults.push(exc, times)

    async def create(self, address_id: AddressId, items: Sequence[OrderItem]) -> Order:
        async with self._lock:
            self._faults.raise_next()
            if not address_id:
                raise OrderCreationError("Address is required")
            if not items:
                raise OrderCreationError("Order must contain at least one item")

            order = Order(
                id=f"ord_{uuid.uuid4().hex[:12]}",
                user_id=self.user_id,
                address_id=address_id,
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.UNPAID,
                total_int=sum(item.line_total_int for item in items),
                items=tuple(items),
            )
            self.orders[order.id] = order
            return order


# ═══════════════════════════════════════════════════════════════════════════════
# Payments
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryPaymentGateway:
    def __init__(
        self,
        *,
        bank: str = "Vietcombank",
        account: str = "0011000000000",
        orders: MemoryOrderGateway | None = None,
    ) -> None:
        self.bank = bank
        self.account = account
        self.payments: dict[OrderId, Payment] = {}
        self.lookups = 0
        self._orders = orders
        self._faults = _Faults()
        self._lock = asyncio.Lock()

    def fail_next(self, exc: StorefrontError, times: int = 1) -> None:
        """Make the next `times` status lookups raise `exc`."""
        self._faults.push(exc, times)

    async def initiate(
        self,
        order_id: OrderId,
        method: PaymentMethod,
        amount_int: int,
    ) -> PaymentInitiation:
        reference = transfer_reference(order_id)
        qr = None
        if method is PaymentMethod.BANK_TRANSFER:
            qr = (
                f"https://qr.sepay.vn/img?acc={self.account}&bank={self.bank}"
                f"&amount={amount_int}&des={reference}"
            )
        payment = Payment(
            id=f"pay_{uuid.uuid4().hex[:12]}",
            order_id=order_id,
            method=method,
            status=PaymentStatus.UNPAID,
            amount_int=amount_int,
            payload={"reference": reference, "qrCode": qr},
        )
        async with self._lock:
            self.payments[order_id] = payment
        return PaymentInitiation(
            payment_id=payment.id,
            status=payment.status,
            reference=reference,
            qr_payload=qr,
        )

    async def get_by_order(self, order_id: OrderId) -> Payment:
        async with self._lock:
            self.lookups += 1
            self._faults.raise_next()
            payment = self.payments.get(order_id)
            if payment is None:
                raise NotFoundError(f"No payment found for order {order_id}")
            return payment

    def mark_paid(self, order_id: OrderId) -> Payment:
        """Simulate the bank webhook confirming the transfer."""
        payment = self.payments.get(order_id)
        if payment is None:
            raise NotFoundError(f"No payment found for order {order_id}")
        paid = replace(payment, status=PaymentStatus.PAID)
        self.payments[order_id] = paid
        if self._orders is not None and order_id in self._orders.orders:
            self._orders.orders[order_id] = replace(
                self._orders.orders[order_id],
                payment_status=PaymentStatus.PAID,
                status=OrderStatus.PROCESSING,
            )
        return paid


__all__ = ("MemoryOrderGateway", "MemoryPaymentGateway")
