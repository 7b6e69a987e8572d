"""
Gateway — order and payment backends behind protocols.

    from storefront import gateway as GW

    # HTTP (production)
    api = GW.ApiClient.from_config(ApiConfig.from_env())
    orders, payments = GW.HttpOrderGateway(api), GW.HttpPaymentGateway(api)

    # Memory (tests, demos)
    orders = GW.MemoryOrderGateway()
    payments = GW.MemoryPaymentGateway(orders=orders)
    payments.mark_paid(order_id)
"""

from storefront.gateway._protocols import OrderGateway, PaymentGateway
from storefront.gateway._http import ApiClient, HttpOrderGateway, HttpPaymentGateway
from storefront.gateway._memory import MemoryOrderGateway, MemoryPaymentGateway
from storefront.gateway._codec import error_message

__all__ = (
    # Protocols
    "OrderGateway",
    "PaymentGateway",
    # HTTP
    "ApiClient",
    "HttpOrderGateway",
    "HttpPaymentGateway",
    "error_message",
    # Memory
    "MemoryOrderGateway",
    "MemoryPaymentGateway",
)
