"""
Checkout steps — one gateway call each, logged and timed.

A step never compensates: a created order survives a later payment
failure and reconciliation happens on the backend.

    place = step(CheckoutStage.ORDER, lambda: orders.create(address_id, items))
    match await run_step(place, log=log):
        case Ok(order): ...
        case Error(failure): failure.stage   # CheckoutStage.ORDER
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog
from kungfu import Error, Ok, Result

from storefront._types import Call, Lazy
from storefront.checkout._types import CheckoutStage, GatewayFailure
from storefront.lift import attempt, message_of


@dataclass(frozen=True, slots=True)
class CheckoutStep[T]:
    stage: CheckoutStage
    action: Lazy[T, GatewayFailure]


def step[T](stage: CheckoutStage, call: Call[T]) -> CheckoutStep[T]:
    """Lift a raising gateway call into a step failing with GatewayFailure."""
    return CheckoutStep(
        stage=stage,
        action=attempt(call, on_error=lambda e: GatewayFailure(stage, message_of(e))),
    )


async def run_step[T](
    step: CheckoutStep[T],
    *,
    log: structlog.typing.FilteringBoundLogger,
) -> Result[T, GatewayFailure]:
    log = log.bind(stage=step.stage.value)
    log.debug("step_started")
    started = time.perf_counter()

    result = await step.action
    elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

    match result:
        case Ok(_):
            log.info("step_finished", elapsed_ms=elapsed_ms)
        case Error(failure):
            log.warning("step_failed", error=failure.message, elapsed_ms=elapsed_ms)
    return result


__all__ = ("CheckoutStep", "step", "run_step")
