"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass, field

from storefront.checkout import CheckoutCompletion, PaymentDialog
from storefront.domain import Cart, CartItem, CartProduct


# Cart
def sample_cart() -> Cart:
    items = (
        CartItem("p_aviator", 2, CartProduct("p_aviator", "Aviator Classic", 199_900)),
        CartItem("p_round", 1, CartProduct("p_round", "Round Metal", 350_000)),
    )
    return Cart(id="cart_demo", items=items, total_int=2 * 199_900 + 350_000)


@dataclass(slots=True)
class DemoCart:
    cart: Cart | None = field(default_factory=sample_cart)

    def snapshot(self) -> Cart | None:
        return self.cart

    async def clear(self) -> None:
        print("  · cart cleared")
        self.cart = Cart(id="cart_demo")


# Surface
class PrintSurface:
    def show_errors(self, messages: Sequence[str]) -> None:
        for message in messages:
            print(f"  ✗ {message}")

    def show_success(self, message: str) -> None:
        print(f"  ✓ {message}")

    def open_payment_dialog(self, dialog: PaymentDialog) -> None:
        print(f"  ▢ transfer {format_price(dialog.amount_int)} with memo {dialog.reference}")
        print(f"    QR: {dialog.qr_payload}")

    def close_payment_dialog(self) -> None:
        print("  ▢ dialog closed")

    def complete(self, completion: CheckoutCompletion) -> None:
        print(
            f"  → /cart/success?orderId={completion.order_id}"
            f"&paymentMethod={completion.payment_method.value}"
        )


# Helpers
def format_price(amount_int: int) -> str:
    return f"{amount_int:,} ₫".replace(",", ".")


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
