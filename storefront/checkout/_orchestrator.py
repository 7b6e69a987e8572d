"""
Checkout orchestrator — validation, order placement and settlement.

    checkout = CheckoutOrchestrator(orders, payments, cart, surface)
    checkout.select_address(address.id)
    checkout.select_method(PaymentMethod.BANK_TRANSFER)

    match await checkout.submit():
        case Ok(CheckoutCompletion() as done):   # COD, finished
            ...
        case Ok(AwaitingPayment(dialog)):        # bank transfer, polling
            ...
        case Error(failure):                     # already shown on the surface
            ...

Flows:

    submit ─▶ validate ─▶ create order ─┬─ COD ──────▶ clear cart ─▶ complete
                                        └─ transfer ─▶ initiate ─▶ dialog + polling
                                                                      │
              on_succeeded ◀─ PAID ───────────────────────────────────┤
              on_timed_out ◀─ budget spent ───────────────────────────┤
              on_failed    ◀─ not found / retries exhausted ──────────┘
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace

import structlog
from kungfu import Error, Ok, Result

from storefront.checkout._steps import run_step, step
from storefront.checkout._types import (
    AwaitingPayment,
    CartStore,
    CheckoutBusy,
    CheckoutClosed,
    CheckoutCompletion,
    CheckoutFailure,
    CheckoutOutcome,
    CheckoutPhase,
    CheckoutStage,
    CheckoutState,
    CheckoutSurface,
    GatewayFailure,
    PaymentDialog,
    ValidationFailed,
)
from storefront.checkout._validate import TOTAL_MISMATCH, validate
from storefront.config import PollingPolicy
from storefront.domain import Order, OrderRequest, Payment, PaymentMethod
from storefront.gateway import OrderGateway, PaymentGateway
from storefront.lift import message_of
from storefront.log import get_logger
from storefront.polling import (
    TIMEOUT_MESSAGE,
    Clock,
    DialogState,
    PaymentPollingEngine,
    PollingListener,
    PollingSession,
    project,
)

type EngineFactory = Callable[[PollingListener], PaymentPollingEngine]

ORDER_PLACED = "Order placed successfully"
PAYMENT_RECEIVED = "Payment received. Thank you for your order!"
PAYMENT_UNCONFIRMED = "Could not confirm the payment"


class CheckoutOrchestrator:
    """
    Owns CheckoutState and the polling engine of the current checkout.

    The engine is built on the first bank-transfer submission only; a COD
    checkout never creates one. The orchestrator listens to the engine's
    terminal callbacks and never touches polling counters.
    """

    def __init__(
        self,
        orders: OrderGateway,
        payments: PaymentGateway,
        cart: CartStore,
        surface: CheckoutSurface,
        *,
        policy: PollingPolicy | None = None,
        clock: Clock | None = None,
        engine_factory: EngineFactory | None = None,
    ) -> None:
        self._orders = orders
        self._payments = payments
        self._cart = cart
        self._surface = surface
        self._policy = policy or PollingPolicy()
        self._engine_factory = engine_factory or (
            lambda listener: PaymentPollingEngine(
                payments, listener, policy=self._policy, clock=clock,
            )
        )
        self._engine: PaymentPollingEngine | None = None
        self._state = CheckoutState()
        self.phase = CheckoutPhase.EDITING
        self.dialog: PaymentDialog | None = None
        self.completion: CheckoutCompletion | None = None
        self._closed = False

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def engine(self) -> PaymentPollingEngine | None:
        return self._engine

    @property
    def dialog_state(self) -> DialogState:
        session = self._engine.session if self._engine is not None else None
        return project(session, self._policy)

    # ═══════════════════════════════════════════════════════════════════════════
    # Selection
    # ═══════════════════════════════════════════════════════════════════════════

    def select_address(self, address_id: str) -> None:
        self._state = replace(self._state, selected_address_id=address_id)

    def select_method(self, method: PaymentMethod) -> None:
        self._state = replace(self._state, selected_method=method)

    # ═══════════════════════════════════════════════════════════════════════════
    # Submit
    # ═══════════════════════════════════════════════════════════════════════════

    async def submit(self) -> Result[CheckoutOutcome, CheckoutFailure]:
        """
        Validate, place the order, then settle by the selected method.

        Rejections and gateway errors are shown on the surface once and
        returned. Nothing is retried.
        """
        if self._closed:
            return Error(CheckoutClosed())
        if self._state.is_submitting or self.phase is CheckoutPhase.AWAITING_PAYMENT:
            return Error(CheckoutBusy())

        address_id = self._state.selected_address_id
        method = self._state.selected_method
        log = get_logger(component="checkout", method=method.name)

        cart = self._cart.snapshot()
        validation = validate(cart, address_id)
        if not validation.ok or cart is None:
            return self._reject(validation.errors, log)

        request = OrderRequest.from_cart(cart, address_id)
        if request.total_int != cart.total_int:
            return self._reject((TOTAL_MISMATCH,), log)

        self._state = replace(self._state, is_submitting=True)
        self.phase = CheckoutPhase.SUBMITTING
        try:
            place = step(
                CheckoutStage.ORDER,
                lambda: self._orders.create(request.address_id, request.items),
            )
            match await run_step(place, log=log):
                case Ok(order):
                    log = log.bind(order_id=order.id)
                    if self._closed:
                        return self._discard(order, log)
                    if method is PaymentMethod.COD:
                        return await self._complete_cod(order, log)
                    return await self._open_transfer(order, method, cart.total_int, log)
                case Error(failure):
                    return self._abort(failure, log)
        finally:
            self._state = replace(self._state, is_submitting=False)
            if self.phase is CheckoutPhase.SUBMITTING:
                self.phase = CheckoutPhase.EDITING

    async def _complete_cod(
        self,
        order: Order,
        log: structlog.typing.FilteringBoundLogger,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        await self._clear_cart(log)
        completion = CheckoutCompletion(order.id, PaymentMethod.COD)
        self._finish(completion, ORDER_PLACED, log)
        return Ok(completion)

    async def _open_transfer(
        self,
        order: Order,
        method: PaymentMethod,
        amount_int: int,
        log: structlog.typing.FilteringBoundLogger,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        initiate = step(
            CheckoutStage.PAYMENT,
            lambda: self._payments.initiate(order.id, method, amount_int),
        )
        match await run_step(initiate, log=log):
            case Ok(initiation):
                if self._closed:
                    return self._discard(order, log)
                dialog = PaymentDialog(
                    order_id=order.id,
                    payment_id=initiation.payment_id,
                    reference=initiation.reference,
                    qr_payload=initiation.qr_payload,
                    amount_int=amount_int,
                )
                self.dialog = dialog
                self.phase = CheckoutPhase.AWAITING_PAYMENT
                self._surface.open_payment_dialog(dialog)
                if self._engine is None:
                    self._engine = self._engine_factory(self)
                self._engine.start(order.id)
                log.info("awaiting_payment", reference=dialog.reference)
                return Ok(AwaitingPayment(dialog))
            case Error(failure):
                return self._abort(replace(failure, order_id=order.id), log)

    def _reject(
        self,
        messages: tuple[str, ...],
        log: structlog.typing.FilteringBoundLogger,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        log.info("checkout_rejected", errors=list(messages))
        self._surface.show_errors(messages)
        return Error(ValidationFailed(messages))

    def _discard(
        self,
        order: Order,
        log: structlog.typing.FilteringBoundLogger,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        log.info("checkout_closed_mid_submit")
        return Error(CheckoutClosed(order.id))

    def _abort(
        self,
        failure: GatewayFailure,
        log: structlog.typing.FilteringBoundLogger,
    ) -> Result[CheckoutOutcome, CheckoutFailure]:
        log.warning(
            "checkout_aborted",
            stage=failure.stage.value,
            error=failure.message,
            order_id=failure.order_id,
        )
        self.phase = CheckoutPhase.EDITING
        self._surface.show_errors((failure.message,))
        return Error(failure)

    # ═══════════════════════════════════════════════════════════════════════════
    # Polling outcomes
    # ═══════════════════════════════════════════════════════════════════════════

    async def on_succeeded(self, payment: Payment) -> None:
        log = get_logger(component="checkout", order_id=payment.order_id)
        self._close_dialog()
        await self._clear_cart(log)
        self._finish(
            CheckoutCompletion(payment.order_id, PaymentMethod.BANK_TRANSFER),
            PAYMENT_RECEIVED,
            log,
        )
        self._release()

    async def on_timed_out(self, session: PollingSession) -> None:
        self._close_dialog()
        self.phase = CheckoutPhase.PAYMENT_TIMED_OUT
        self._surface.show_errors((TIMEOUT_MESSAGE,))
        self._release()

    async def on_failed(self, session: PollingSession, message: str) -> None:
        self._close_dialog()
        self.phase = CheckoutPhase.PAYMENT_FAILED
        self._surface.show_errors((message or PAYMENT_UNCONFIRMED,))
        self._release()

    # ═══════════════════════════════════════════════════════════════════════════
    # Cancellation
    # ═══════════════════════════════════════════════════════════════════════════

    def cancel_payment(self) -> bool:
        """
        Buyer closed the waiting dialog.

        Polling stops without any outcome; the order stays on the backend.
        """
        if self.phase is not CheckoutPhase.AWAITING_PAYMENT:
            return False
        get_logger(component="checkout").info(
            "payment_wait_cancelled",
            order_id=self.dialog.order_id if self.dialog else None,
        )
        self._release()
        self._close_dialog()
        self.phase = CheckoutPhase.EDITING
        return True

    def close(self) -> None:
        """
        Tear down (navigation away). Stops any polling in progress.

        A submission still waiting on a gateway finishes without opening
        the dialog or starting polling.
        """
        self._closed = True
        self._release()
        if self.phase is CheckoutPhase.AWAITING_PAYMENT:
            self.dialog = None
            self.phase = CheckoutPhase.EDITING

    # ═══════════════════════════════════════════════════════════════════════════
    # Helpers
    # ═══════════════════════════════════════════════════════════════════════════

    async def _clear_cart(self, log: structlog.typing.FilteringBoundLogger) -> None:
        # The order exists at this point; a stale cart must not undo it.
        try:
            await self._cart.clear()
        except Exception as e:
            log.warning("cart_clear_failed", error=message_of(e), error_type=type(e).__name__)

    def _finish(
        self,
        completion: CheckoutCompletion,
        message: str,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        self.phase = CheckoutPhase.COMPLETED
        self.completion = completion
        self._surface.show_success(message)
        self._surface.complete(completion)
        log.info("checkout_completed", payment_method=completion.payment_method.name)

    def _close_dialog(self) -> None:
        self.dialog = None
        self._surface.close_payment_dialog()

    def _release(self) -> None:
        if self._engine is not None:
            self._engine.stop()


__all__ = ("CheckoutOrchestrator", "EngineFactory")
