"""
Domain — cart, order and payment records seen by checkout.

Amounts are integers in the minor currency unit (VND has no subunit, so
`total_int=1_250_000` is 1,250,000 ₫). Enum values are the backend's wire
values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from storefront._types import AddressId, OrderId, PaymentId, ProductId, UserId


# ═══════════════════════════════════════════════════════════════════════════════
# Enums
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(Enum):
    COD = "COD"
    BANK_TRANSFER = "SEPAY"


class PaymentStatus(Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartProduct:
    id: ProductId
    name: str
    price_int: int | None


@dataclass(frozen=True, slots=True)
class CartItem:
    product_id: ProductId
    quantity: int
    product: CartProduct | None = None

    @property
    def unit_price_int(self) -> int | None:
        """Price as currently listed; None when the product is gone or unpriced."""
        if self.product is None:
            return None
        return self.product.price_int


@dataclass(frozen=True, slots=True)
class Cart:
    id: str
    items: tuple[CartItem, ...] = ()
    total_int: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.items


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderItem:
    product_id: ProductId
    quantity: int
    unit_price_int: int

    @property
    def line_total_int(self) -> int:
        return self.unit_price_int * self.quantity


@dataclass(frozen=True, slots=True)
class OrderRequest:
    """Cart snapshot turned into what OrderGateway.create receives."""

    address_id: AddressId
    items: tuple[OrderItem, ...]

    @property
    def total_int(self) -> int:
        return sum(item.line_total_int for item in self.items)

    @classmethod
    def from_cart(cls, cart: Cart, address_id: AddressId) -> OrderRequest:
        """
        Snapshot a validated cart.

        Items without a price are expected to be rejected by validation first;
        they map to a zero unit price here so the totals check still trips.
        """
        return cls(
            address_id=address_id,
            items=tuple(
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price_int=item.unit_price_int or 0,
                )
                for item in cart.items
            ),
        )


@dataclass(frozen=True, slots=True)
class Order:
    id: OrderId
    user_id: UserId
    address_id: AddressId
    status: OrderStatus
    payment_status: PaymentStatus
    total_int: int
    items: tuple[OrderItem, ...] = ()


# ═══════════════════════════════════════════════════════════════════════════════
# Payment
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Payment:
    id: PaymentId
    order_id: OrderId
    method: PaymentMethod
    status: PaymentStatus
    amount_int: int
    payload: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.status is PaymentStatus.PAID


@dataclass(frozen=True, slots=True)
class PaymentInitiation:
    """What the payment provider hands back when a transfer is opened."""

    payment_id: PaymentId
    status: PaymentStatus
    reference: str
    qr_payload: str | None = None
    payment_url: str | None = None
    message: str | None = None


def transfer_reference(order_id: OrderId) -> str:
    """Memo the buyer types into the bank transfer; matched by the webhook."""
    return f"DH{order_id}"


__all__ = (
    "PaymentMethod",
    "PaymentStatus",
    "OrderStatus",
    "CartProduct",
    "CartItem",
    "Cart",
    "OrderItem",
    "OrderRequest",
    "Order",
    "Payment",
    "PaymentInitiation",
    "transfer_reference",
)
