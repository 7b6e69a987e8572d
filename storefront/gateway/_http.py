"""
HTTP gateways — the storefront REST backend over httpx.

    from storefront import gateway as GW
    from storefront.config import ApiConfig

    async with GW.ApiClient.from_config(ApiConfig.from_env()) as api:
        orders = GW.HttpOrderGateway(api, user_id=session.user_id)
        payments = GW.HttpPaymentGateway(api)

Endpoints:

    POST  /orders                         create order
    POST  /payments/process               open payment (QR for bank transfer)
    GET   /payments/order/{orderId}       payment of an order (polled)
    GET   /payments/{paymentId}           payment by id
    POST  /payments/confirm-cod/{orderId} cash collected (admin/shipper)
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass
from types import TracebackType
from typing import Any

import httpx

from storefront._types import AddressId, OrderId, PaymentId, UserId
from storefront.config import ApiConfig
from storefront.domain import (
    Order,
    OrderItem,
    Payment,
    PaymentInitiation,
    PaymentMethod,
)
from storefront.errors import (
    GatewayError,
    NotFoundError,
    OrderCreationError,
    PaymentInitiationError,
    StorefrontError,
    TransportError,
)
from storefront.gateway._codec import (
    MALFORMED,
    Json,
    decode_initiation,
    decode_order,
    decode_payment,
    encode_items,
    error_message,
)
from storefront.lift import message_of
from storefront.log import get_logger


# ═══════════════════════════════════════════════════════════════════════════════
# ApiClient — shared httpx client
# ═══════════════════════════════════════════════════════════════════════════════


class ApiClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Every failure surfaces as the StorefrontError subclass the caller names:
    network errors and timeouts, non-2xx answers and non-JSON bodies alike.
    A 404 raises `not_found` instead when given.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client
        self._log = get_logger(component="api")

    @classmethod
    def from_config(
        cls,
        config: ApiConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ApiClient:
        return cls(httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=config.headers,
            transport=transport,
        ))

    async def call(
        self,
        method: str,
        path: str,
        *,
        error: type[StorefrontError],
        not_found: type[StorefrontError] | None = None,
        json: Any = None,
    ) -> Json:
        start = time.perf_counter()
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.HTTPError as e:
            self._log.warning("api_unreachable", method=method, path=path, error=message_of(e))
            raise error(f"Could not reach the server: {message_of(e)}") from e

        self._log.debug(
            "api_response",
            method=method,
            path=path,
            status=response.status_code,
            elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
        )

        if response.is_error:
            if response.status_code == 404 and not_found is not None:
                raise not_found(error_message(response))
            raise error(error_message(response))

        try:
            body = response.json()
        except ValueError as e:
            raise error(f"Unexpected response from {method} {path}") from e
        if not isinstance(body, dict):
            raise error(f"Unexpected response from {method} {path}")
        return body

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


# ═══════════════════════════════════════════════════════════════════════════════
# Orders
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class HttpOrderGateway:
    api: ApiClient
    user_id: UserId | None = None

    async def create(self, address_id: AddressId, items: Sequence[OrderItem]) -> Order:
        body: dict[str, Any] = {"addressId": address_id, "items": encode_items(items)}
        if self.user_id:
            body["userId"] = self.user_id
        data = await self.api.call("POST", "/orders", error=OrderCreationError, json=body)
        try:
            return decode_order(data)
        except MALFORMED as e:
            raise OrderCreationError("Unexpected order payload") from e


# ═══════════════════════════════════════════════════════════════════════════════
# Payments
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class HttpPaymentGateway:
    api: ApiClient

    async def initiate(
        self,
        order_id: OrderId,
        method: PaymentMethod,
        amount_int: int,
    ) -> PaymentInitiation:
        data = await self.api.call(
            "POST",
            "/payments/process",
            error=PaymentInitiationError,
            json={"orderId": order_id, "method": method.value, "amountInt": amount_int},
        )
        try:
            return decode_initiation(data, order_id)
        except MALFORMED as e:
            raise PaymentInitiationError("Unexpected payment payload") from e

    async def get_by_order(self, order_id: OrderId) -> Payment:
        data = await self.api.call(
            "GET",
            f"/payments/order/{order_id}",
            error=TransportError,
            not_found=NotFoundError,
        )
        return self._payment(data, TransportError)

    async def get_by_id(self, payment_id: PaymentId) -> Payment:
        data = await self.api.call(
            "GET",
            f"/payments/{payment_id}",
            error=TransportError,
            not_found=NotFoundError,
        )
        return self._payment(data, TransportError)

    async def confirm_cod(self, order_id: OrderId) -> Payment:
        """Mark a COD payment PAID once the cash is collected."""
        data = await self.api.call(
            "POST",
            f"/payments/confirm-cod/{order_id}",
            error=GatewayError,
            not_found=NotFoundError,
        )
        return self._payment(data, GatewayError)

    @staticmethod
    def _payment(data: Json, error: type[StorefrontError]) -> Payment:
        try:
            return decode_payment(data)
        except MALFORMED as e:
            raise error("Unexpected payment payload") from e


__all__ = ("ApiClient", "HttpOrderGateway", "HttpPaymentGateway")
