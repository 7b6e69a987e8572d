"""
Checkout validation — every rule runs, every message is returned.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain import Cart

MISSING_ADDRESS = "Please select a shipping address"
EMPTY_CART = "Your cart is empty"
INVALID_PRICE = "Your cart contains invalid products. Please refresh the page."
INVALID_QUANTITY = "Your cart contains an invalid quantity"
INVALID_TOTAL = "Order total is invalid"
TOTAL_MISMATCH = "Cart total does not match item prices"


@dataclass(frozen=True, slots=True)
class Validation:
    errors: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(cart: Cart | None, address_id: str | None) -> Validation:
    """
    Check a cart and address before anything is submitted.

    Example:
        validate(None, "")
        # Validation(errors=("Please select a shipping address", "Your cart is empty"))
    """
    errors: list[str] = []

    if not address_id:
        errors.append(MISSING_ADDRESS)

    if cart is None or cart.is_empty:
        errors.append(EMPTY_CART)
    else:
        if any(item.unit_price_int is None or item.unit_price_int <= 0 for item in cart.items):
            errors.append(INVALID_PRICE)
        if any(item.quantity <= 0 for item in cart.items):
            errors.append(INVALID_QUANTITY)

    if cart is not None and cart.total_int <= 0:
        errors.append(INVALID_TOTAL)

    return Validation(tuple(errors))


__all__ = (
    "MISSING_ADDRESS",
    "EMPTY_CART",
    "INVALID_PRICE",
    "INVALID_QUANTITY",
    "INVALID_TOTAL",
    "TOTAL_MISMATCH",
    "Validation",
    "validate",
)
