"""
storefront — checkout-to-payment-confirmation engine.

    from storefront import checkout as CO   # Validation + orchestration
    from storefront import polling as P     # Bank-transfer confirmation polling
    from storefront import gateway as GW    # Order / payment backends
"""

from storefront import checkout
from storefront import polling
from storefront import gateway
from storefront import lift
from storefront._types import (
    Lazy,
    Call,
    OrderId,
    PaymentId,
    AddressId,
    ProductId,
    UserId,
)
from storefront.config import PollingPolicy, ApiConfig
from storefront.log import configure_logging

__version__ = "0.1.0"

__all__ = (
    "checkout",
    "polling",
    "gateway",
    "lift",
    "Lazy",
    "Call",
    "OrderId",
    "PaymentId",
    "AddressId",
    "ProductId",
    "UserId",
    "PollingPolicy",
    "ApiConfig",
    "configure_logging",
)
