"""
Checkout — COD and bank transfer against in-memory gateways.

Level 4: storefront.checkout (orchestration)
Level 3: storefront.polling (confirmation wait)
Level 2: kungfu.Result

    uv run python -m examples.checkout_example
"""

import asyncio

from kungfu import Ok, Error

from storefront import checkout as CO
from storefront import gateway as GW
from storefront.config import PollingPolicy
from storefront.domain import PaymentMethod
from storefront.log import configure_logging
from examples._infra import DemoCart, PrintSurface, banner, run

# Shortened so the demo finishes in a few seconds.
POLICY = PollingPolicy().with_interval(seconds=0.5).with_max_attempts(6)


async def cash_on_delivery() -> None:
    banner("Checkout: cash on delivery")

    orders = GW.MemoryOrderGateway()
    checkout = CO.CheckoutOrchestrator(
        orders, GW.MemoryPaymentGateway(orders=orders), DemoCart(), PrintSurface(), policy=POLICY,
    )
    checkout.select_address("addr_home")

    match await checkout.submit():
        case Ok(done):
            print(f"\n✓ Completed: {done}")
        case Error(failure):
            print(f"\n✗ Failed: {failure}")


async def bank_transfer(pay_after: float | None) -> None:
    banner(f"Checkout: bank transfer (buyer pays after {pay_after}s)")

    orders = GW.MemoryOrderGateway()
    payments = GW.MemoryPaymentGateway(orders=orders)
    checkout = CO.CheckoutOrchestrator(orders, payments, DemoCart(), PrintSurface(), policy=POLICY)
    checkout.select_address("addr_home")
    checkout.select_method(PaymentMethod.BANK_TRANSFER)

    match await checkout.submit():
        case Ok(CO.AwaitingPayment(dialog)):
            if pay_after is not None:
                asyncio.get_running_loop().call_later(pay_after, payments.mark_paid, dialog.order_id)
        case Error(failure):
            print(f"\n✗ Failed: {failure}")
            return

    while checkout.phase is CO.CheckoutPhase.AWAITING_PAYMENT:
        state = checkout.dialog_state
        print(f"    waiting… {state.attempts_label} ({state.remaining_seconds}s left)")
        await asyncio.sleep(POLICY.interval_seconds)

    print(f"\n  phase: {checkout.phase.name}")
    checkout.close()


async def main() -> None:
    configure_logging("warning")
    await cash_on_delivery()
    await bank_transfer(pay_after=1.2)
    await bank_transfer(pay_after=None)


if __name__ == "__main__":
    run(main)
