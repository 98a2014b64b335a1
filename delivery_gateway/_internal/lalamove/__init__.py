"""Lalamove delivery provider adapter."""

from delivery_gateway._internal.lalamove.client import (
    ORDERS_PATH,
    QUOTATIONS_PATH,
    LalamoveClient,
)
from delivery_gateway._internal.lalamove.models import (
    DeliveryRequestWrapper,
    OrderRequestWrapper,
    OrderResponse,
    QuotationResponse,
)

__all__ = [
    "LalamoveClient",
    "QUOTATIONS_PATH",
    "ORDERS_PATH",
    "DeliveryRequestWrapper",
    "OrderRequestWrapper",
    "OrderResponse",
    "QuotationResponse",
]
