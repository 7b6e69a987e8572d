"""Tests for logging setup."""

from __future__ import annotations

import json
from collections.abc import Iterator

import pytest
import structlog

from storefront import checkout as CO
from storefront import gateway as GW
from storefront.log import configure_logging, get_logger
from tests.fakes import MemoryCart, RecordingSurface


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_renders_json_with_level_and_timestamp(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("info")

        get_logger(component="checkout").info("order_created", order_id="ord_1")

        line = json.loads(capsys.readouterr().out.strip())
        assert line["event"] == "order_created"
        assert line["level"] == "info"
        assert line["component"] == "checkout"
        assert line["order_id"] == "ord_1"
        assert "timestamp" in line

    def test_filters_below_level(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("warning")

        log = get_logger()
        log.info("hidden")
        log.warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "shown" in out


class TestModuleLoggers:
    async def test_checkout_events_use_configured_pipeline(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Checkout acquires its logger through get_logger at call time."""
        configure_logging("info")
        orders = GW.MemoryOrderGateway()
        checkout = CO.CheckoutOrchestrator(
            orders, GW.MemoryPaymentGateway(orders=orders), MemoryCart(None), RecordingSurface(),
        )

        await checkout.submit()

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        rejected = [line for line in lines if line["event"] == "checkout_rejected"]
        assert len(rejected) == 1
        assert rejected[0]["component"] == "checkout"
        assert rejected[0]["level"] == "info"
