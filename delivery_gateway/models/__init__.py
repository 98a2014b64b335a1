"""Public wire models for delivery operations.

    from delivery_gateway.models import DeliveryRequestWrapper, QuotationResponse
"""

from delivery_gateway._internal.lalamove.models import (
    Coordinates,
    DeliveryCode,
    DeliveryRequest,
    DeliveryRequestWrapper,
    Distance,
    Metadata,
    OrderData,
    OrderRequest,
    OrderRequestWrapper,
    OrderResponse,
    OrderStop,
    PriceBreakdown,
    ProofOfDelivery,
    QuotationData,
    QuotationResponse,
    QuotedStop,
    Recipient,
    Sender,
    Stop,
)

__all__ = [
    "Coordinates",
    "DeliveryCode",
    "DeliveryRequest",
    "DeliveryRequestWrapper",
    "Distance",
    "Metadata",
    "OrderData",
    "OrderRequest",
    "OrderRequestWrapper",
    "OrderResponse",
    "OrderStop",
    "PriceBreakdown",
    "ProofOfDelivery",
    "QuotationData",
    "QuotationResponse",
    "QuotedStop",
    "Recipient",
    "Sender",
    "Stop",
]
