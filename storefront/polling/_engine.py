"""
Payment polling engine — drives the state machine on a fixed cadence.

    engine = PaymentPollingEngine(payments, listener)
    engine.start(order_id)      # immediate check, then every interval
    ...
    engine.stop()               # cancel, no callback

One asyncio task per session. Ticks are strictly sequential: the next
deadline is only awaited once the current lookup has returned, so lookups
never overlap. Deadlines advance by one interval per tick.
"""

from __future__ import annotations

import asyncio

import structlog
from kungfu import Error, Ok

from storefront._types import OrderId
from storefront.config import PollingPolicy
from storefront.gateway import PaymentGateway
from storefront.lift import attempt
from storefront.log import get_logger
from storefront.polling import _machine as M
from storefront.polling._clock import Clock, SystemClock
from storefront.polling._types import (
    PollingListener,
    PollingPhase,
    PollingSession,
    TickAction,
)


class _Liveness:
    """Per-session flag; a revoked session must not touch engine state."""

    __slots__ = ("alive",)

    def __init__(self) -> None:
        self.alive = True

    def revoke(self) -> None:
        self.alive = False


class PaymentPollingEngine:
    def __init__(
        self,
        payments: PaymentGateway,
        listener: PollingListener,
        *,
        policy: PollingPolicy | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._payments = payments
        self._listener = listener
        self.policy = policy or PollingPolicy()
        self._clock = clock or SystemClock()
        self._session: PollingSession | None = None
        self._token: _Liveness | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def session(self) -> PollingSession | None:
        """Live session, or the terminal one until released by stop()."""
        return self._session

    @property
    def is_running(self) -> bool:
        return self._token is not None

    # ═══════════════════════════════════════════════════════════════════════════
    # Control
    # ═══════════════════════════════════════════════════════════════════════════

    def start(self, order_id: OrderId) -> PollingSession:
        """
        Begin polling for the order's payment.

        Must be called from a running event loop. A session already in
        progress is stopped first, without callback.
        """
        self.stop()
        session = M.start(M.idle(order_id))
        token = _Liveness()
        self._session, self._token = session, token
        self._task = asyncio.get_running_loop().create_task(
            self._run(session, token),
            name=f"payment-poll:{order_id}",
        )
        get_logger().info(
            "polling_started",
            order_id=order_id,
            interval_s=self.policy.interval_seconds,
            max_attempts=self.policy.max_attempts,
        )
        return session

    def stop(self) -> None:
        """
        Cancel the session and discard it. Idempotent.

        Safe mid-lookup and from inside a listener callback. A lookup that
        completes afterwards is ignored.
        """
        token, task, session = self._token, self._task, self._session
        self._token = self._task = self._session = None
        if token is None:
            return
        token.revoke()
        if task is not None and not task.done():
            task.cancel()
        get_logger().debug(
            "polling_stopped",
            order_id=session.order_id if session else None,
            attempt=session.attempt_count if session else 0,
        )

    async def wait(self) -> PollingSession | None:
        """Wait for the current task to end; re-raises a listener error."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})
            if not task.cancelled():
                task.result()
        return self._session

    # ═══════════════════════════════════════════════════════════════════════════
    # Loop
    # ═══════════════════════════════════════════════════════════════════════════

    async def _run(self, session: PollingSession, token: _Liveness) -> None:
        order_id = session.order_id
        log = get_logger(order_id=order_id)
        next_tick = self._clock.now()

        while True:
            session, action = M.begin_tick(session, self.policy)
            self._session = session

            if action is TickAction.LOOKUP:
                result = await attempt(
                    lambda: self._payments.get_by_order(order_id),
                    on_error=M.classify_lookup_error,
                    log=log.bind(attempt=session.attempt_count),
                    event="payment_lookup_failed",
                )
                if not token.alive:
                    return
                match result:
                    case Ok(payment):
                        session = M.lookup_succeeded(session, payment)
                    case Error(failure):
                        session = M.lookup_failed(session, failure, self.policy)
                self._session = session

            if session.phase.terminal:
                await self._report(session, token, log)
                return

            # An overrunning lookup delays the next tick; missed slots are not replayed.
            next_tick = max(next_tick + self.policy.interval_seconds, self._clock.now())
            await self._clock.sleep_until(next_tick)
            if not token.alive:
                return

    async def _report(
        self,
        session: PollingSession,
        token: _Liveness,
        log: structlog.typing.FilteringBoundLogger,
    ) -> None:
        # Detach before calling out: the listener may stop() or start() again.
        token.revoke()
        self._token = None
        log = log.bind(attempt=session.attempt_count, phase=session.phase.value)

        try:
            match session.phase:
                case PollingPhase.SUCCEEDED if session.payment is not None:
                    log.info("payment_confirmed")
                    await self._listener.on_succeeded(session.payment)
                case PollingPhase.TIMED_OUT:
                    log.info("polling_timed_out")
                    await self._listener.on_timed_out(session)
                case PollingPhase.FAILED:
                    log.warning("polling_failed", error=session.last_error)
                    await self._listener.on_failed(session, session.last_error or "")
        except Exception:
            # Nobody awaits the task in production; wait() still re-raises.
            log.exception("polling_listener_failed")
            raise


__all__ = ("PaymentPollingEngine",)
