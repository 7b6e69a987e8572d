"""Tests for PaymentPollingEngine under virtual time."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from storefront.config import PollingPolicy
from storefront.domain import Payment, PaymentStatus
from storefront.errors import NotFoundError, TransportError
from storefront.polling import (
    PaymentPollingEngine,
    PollingPhase,
    PollingSession,
    VirtualClock,
)
from tests.fakes import RecordingListener, ScriptedPayments

UNPAID, PAID = PaymentStatus.UNPAID, PaymentStatus.PAID


@pytest.fixture
def make_engine(clock: VirtualClock, listener: RecordingListener, engines: list[PaymentPollingEngine]):
    def build(payments: ScriptedPayments, *, listener: RecordingListener = listener, policy: PollingPolicy | None = None) -> PaymentPollingEngine:
        engine = PaymentPollingEngine(payments, listener, policy=policy, clock=clock)
        engines.append(engine)
        return engine
    return build


class TestSuccess:
    async def test_paid_on_third_attempt(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """UNPAID, UNPAID, PAID: succeeds on tick 3 with a single callback."""
        payments = ScriptedPayments(UNPAID, UNPAID, PAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(0)
        assert payments.calls == 1
        assert engine.session is not None and engine.session.phase is PollingPhase.POLLING

        await clock.advance(5)
        assert payments.calls == 2
        assert listener.total == 0

        await clock.advance(5)
        assert payments.calls == 3
        assert engine.session.phase is PollingPhase.SUCCEEDED
        assert engine.session.attempt_count == 3
        assert len(listener.succeeded) == 1
        assert listener.succeeded[0].status is PAID

        await clock.advance(60)
        assert payments.calls == 3
        assert listener.total == 1
        assert clock.pending == 0

    async def test_first_check_is_immediate(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """Already paid at start: confirmed at t=0, attempt 1."""
        engine = make_engine(ScriptedPayments(PAID))

        engine.start("ord_1")
        await clock.advance(0)

        assert len(listener.succeeded) == 1
        assert engine.session.attempt_count == 1
        assert clock.now() == 0

    async def test_nothing_happens_between_ticks(self, make_engine, clock: VirtualClock) -> None:
        payments = ScriptedPayments(UNPAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(4)
        assert payments.calls == 1

        await clock.advance(1)
        assert payments.calls == 2
        assert engine.session.attempt_count == 2


class TestTimeout:
    async def test_always_unpaid_times_out_once(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """180 ticks within 900s, the last one without a lookup, then silence."""
        payments = ScriptedPayments(UNPAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(900)

        assert len(listener.timed_out) == 1
        assert listener.total == 1
        session = listener.timed_out[0]
        assert session.phase is PollingPhase.TIMED_OUT
        assert session.attempt_count == 180
        assert payments.calls == 179

        await clock.advance(300)
        assert payments.calls == 179
        assert listener.total == 1
        assert clock.pending == 0

    async def test_still_polling_just_before_budget(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """Tick 180 falls at t=895; until then the session keeps polling."""
        engine = make_engine(ScriptedPayments(UNPAID))

        engine.start("ord_1")
        await clock.advance(894)
        assert engine.session.attempt_count == 179
        assert listener.total == 0

        await clock.advance(1)
        assert len(listener.timed_out) == 1

    async def test_custom_budget(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        policy = PollingPolicy().with_interval(seconds=2).with_max_attempts(3)
        payments = ScriptedPayments(UNPAID)
        engine = make_engine(payments, policy=policy)

        engine.start("ord_1")
        await clock.advance(4)

        assert len(listener.timed_out) == 1
        assert listener.timed_out[0].attempt_count == 3
        assert payments.calls == 2


class TestFailures:
    async def test_four_transport_errors_fail(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """Three retries are tolerated; the fourth consecutive error fails."""
        payments = ScriptedPayments(TransportError("gateway unreachable"))
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(10)
        assert payments.calls == 3
        assert engine.session.phase is PollingPhase.POLLING
        assert engine.session.consecutive_failure_count == 3

        await clock.advance(5)
        assert payments.calls == 4
        assert len(listener.failed) == 1
        session, message = listener.failed[0]
        assert session.phase is PollingPhase.FAILED
        assert message == "gateway unreachable"

        await clock.advance(60)
        assert payments.calls == 4
        assert listener.total == 1

    async def test_successful_read_resets_retry_budget(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """Errors separated by a good read never add up to a failure."""
        err = TransportError("flaky")
        payments = ScriptedPayments(err, err, err, UNPAID, err, err, err, PAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(35)

        assert listener.failed == []
        assert len(listener.succeeded) == 1
        assert engine.session.attempt_count == 8

    async def test_unexpected_exception_is_retried(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        payments = ScriptedPayments(RuntimeError("decode error"), PAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(5)

        assert len(listener.succeeded) == 1

    async def test_not_found_fails_on_first_tick(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        payments = ScriptedPayments(NotFoundError("No payment found for order ord_1"))
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(30)

        assert payments.calls == 1
        assert [m for _, m in listener.failed] == ["No payment found for order ord_1"]


class TestStop:
    async def test_stop_between_ticks_silences_session(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        """stop() then advancing past the next tick: no lookup, no callback."""
        payments = ScriptedPayments(UNPAID, PAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(0)
        engine.stop()
        await clock.advance(60)

        assert payments.calls == 1
        assert listener.total == 0
        assert engine.session is None
        assert not engine.is_running
        assert clock.pending == 0

    async def test_stop_mid_lookup_discards_result(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        payments = ScriptedPayments(PAID)
        payments.gate = asyncio.Event()
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(0)
        assert payments.in_flight == 1

        engine.stop()
        payments.gate.set()
        await clock.advance(60)

        assert listener.total == 0
        assert payments.calls == 1
        assert payments.in_flight == 0

    async def test_stop_is_idempotent(self, make_engine, clock: VirtualClock) -> None:
        engine = make_engine(ScriptedPayments(UNPAID))

        engine.stop()
        engine.start("ord_1")
        engine.stop()
        engine.stop()
        await clock.advance(10)

        assert engine.session is None

    async def test_restart_replaces_session_silently(self, make_engine, clock: VirtualClock, listener: RecordingListener) -> None:
        payments = ScriptedPayments(UNPAID)
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(5)
        engine.start("ord_2")
        await clock.advance(0)

        assert engine.session.order_id == "ord_2"
        assert engine.session.attempt_count == 1
        assert listener.total == 0

    async def test_listener_may_stop_engine(self, clock: VirtualClock, engines: list[PaymentPollingEngine]) -> None:
        """Releasing the session from inside the success callback is safe."""

        class Releasing(RecordingListener):
            engine: PaymentPollingEngine

            async def on_succeeded(self, payment: Payment) -> None:
                await super().on_succeeded(payment)
                self.engine.stop()

        listener = Releasing()
        engine = PaymentPollingEngine(ScriptedPayments(PAID), listener, clock=clock)
        listener.engine = engine
        engines.append(engine)

        engine.start("ord_1")
        await clock.advance(0)

        assert len(listener.succeeded) == 1
        assert engine.session is None
        assert await engine.wait() is None


class TestConcurrency:
    async def test_lookups_never_overlap(self, make_engine, clock: VirtualClock) -> None:
        """A slow lookup holds the next tick back instead of running beside it."""
        payments = ScriptedPayments(UNPAID)
        payments.gate = asyncio.Event()
        engine = make_engine(payments)

        engine.start("ord_1")
        await clock.advance(20)
        assert payments.calls == 1

        payments.gate.set()
        await clock.advance(0)
        assert payments.calls == 2
        await clock.advance(5)

        assert payments.calls == 3
        assert payments.max_in_flight == 1
        assert engine.session.attempt_count == 3

    async def test_wait_returns_terminal_session(self, make_engine, clock: VirtualClock) -> None:
        engine = make_engine(ScriptedPayments(UNPAID, PAID))

        engine.start("ord_1")
        await clock.advance(5)
        session = await engine.wait()

        assert isinstance(session, PollingSession)
        assert session.phase is PollingPhase.SUCCEEDED

    async def test_wait_reraises_listener_error(self, clock: VirtualClock, engines: list[PaymentPollingEngine]) -> None:
        class Broken(RecordingListener):
            async def on_succeeded(self, payment: Payment) -> None:
                raise RuntimeError("surface gone")

        engine = PaymentPollingEngine(ScriptedPayments(PAID), Broken(), clock=clock)
        engines.append(engine)

        engine.start("ord_1")
        await clock.advance(0)

        with pytest.raises(RuntimeError, match="surface gone"):
            await engine.wait()


class TestLogging:
    async def test_outcomes_are_logged(self, make_engine, clock: VirtualClock) -> None:
        with capture_logs() as logs:
            engine = make_engine(ScriptedPayments(TransportError("down"), PAID))
            engine.start("ord_1")
            await clock.advance(5)

        events = [entry["event"] for entry in logs]
        assert events[0] == "polling_started"
        assert "payment_lookup_failed" in events
        assert events[-1] == "payment_confirmed"
        confirmed = logs[-1]
        assert confirmed["order_id"] == "ord_1"
        assert confirmed["attempt"] == 2

    async def test_listener_error_is_logged_without_wait(self, clock: VirtualClock, engines: list[PaymentPollingEngine]) -> None:
        """A raising callback is reported even when nobody awaits the task."""

        class Broken(RecordingListener):
            async def on_succeeded(self, payment: Payment) -> None:
                raise RuntimeError("surface gone")

        engine = PaymentPollingEngine(ScriptedPayments(PAID), Broken(), clock=clock)
        engines.append(engine)

        with capture_logs() as logs:
            engine.start("ord_1")
            await clock.advance(0)

        failed = [entry for entry in logs if entry["event"] == "polling_listener_failed"]
        assert len(failed) == 1
        assert failed[0]["log_level"] == "error"
        assert failed[0]["order_id"] == "ord_1"
        assert failed[0]["phase"] == "succeeded"

        with pytest.raises(RuntimeError, match="surface gone"):
            await engine.wait()
