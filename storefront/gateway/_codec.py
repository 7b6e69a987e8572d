"""
Wire codec — backend JSON (camelCase) to domain records.

Decoders raise KeyError/ValueError/TypeError on malformed payloads; the HTTP
gateways translate those into the error their caller expects.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from storefront._types import OrderId
from storefront.domain import (
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentInitiation,
    PaymentMethod,
    PaymentStatus,
    transfer_reference,
)

type Json = Mapping[str, Any]

MALFORMED = (KeyError, ValueError, TypeError)


# ═══════════════════════════════════════════════════════════════════════════════
# Encode
# ═══════════════════════════════════════════════════════════════════════════════


def encode_items(items: Sequence[OrderItem]) -> list[dict[str, Any]]:
    return [
        {
            "productId": item.product_id,
            "quantity": item.quantity,
            "priceInt": item.unit_price_int,
        }
        for item in items
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# Decode
# ═══════════════════════════════════════════════════════════════════════════════


def decode_order(data: Json) -> Order:
    return Order(
        id=str(data["id"]),
        user_id=str(data.get("userId") or ""),
        address_id=str(data.get("addressId") or ""),
        status=OrderStatus(data.get("status", OrderStatus.PENDING.value)),
        payment_status=PaymentStatus(
            data.get("paymentStatus", PaymentStatus.UNPAID.value)
        ),
        total_int=int(data.get("totalInt", 0)),
        items=tuple(
            OrderItem(
                product_id=str(item["productId"]),
                quantity=int(item["quantity"]),
                unit_price_int=int(item.get("priceInt", item.get("unitPriceInt", 0))),
            )
            for item in data.get("items") or ()
        ),
    )


def decode_payment(data: Json) -> Payment:
    return Payment(
        id=str(data["id"]),
        order_id=str(data["orderId"]),
        method=PaymentMethod(data["method"]),
        status=PaymentStatus(data["status"]),
        amount_int=int(data.get("amountInt", 0)),
        payload=dict(data.get("payload") or {}),
    )


def decode_initiation(data: Json, order_id: OrderId) -> PaymentInitiation:
    return PaymentInitiation(
        payment_id=str(data["paymentId"]),
        status=PaymentStatus(data.get("status", PaymentStatus.UNPAID.value)),
        reference=data.get("reference") or transfer_reference(order_id),
        qr_payload=data.get("qrCode"),
        payment_url=data.get("paymentUrl"),
        message=data.get("message"),
    )


def error_message(response: httpx.Response) -> str:
    """
    Human message of a failed response.

    The backend answers `{"message": "..."}`, or a list of messages for
    validation errors, which are joined with ", ".
    """
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, Mapping):
        message = body.get("message")
        if isinstance(message, list) and message:
            return ", ".join(str(m) for m in message)
        if isinstance(message, str) and message:
            return message
    return response.reason_phrase or f"HTTP {response.status_code}"


__all__ = (
    "Json",
    "MALFORMED",
    "encode_items",
    "decode_order",
    "decode_payment",
    "decode_initiation",
    "error_message",
)
