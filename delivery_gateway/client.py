"""User-facing gateway for delivery operations.

Example usage:
    from delivery_gateway import DeliveryGateway

    with DeliveryGateway.from_env() as gateway:
        quotation = gateway.get_quotations({
            "data": {
                "serviceType": "MOTORCYCLE",
                "stops": [
                    {"coordinates": {"lat": "22.33", "lng": "114.14"}, "address": "A"},
                    {"coordinates": {"lat": "22.29", "lng": "114.17"}, "address": "B"},
                ],
            }
        })
"""

from collections.abc import Mapping
from types import TracebackType
from typing import Any

from delivery_gateway._internal.lalamove.client import LalamoveClient
from delivery_gateway._internal.lalamove.models import (
    DeliveryRequestWrapper,
    OrderRequestWrapper,
    OrderResponse,
    QuotationResponse,
)
from delivery_gateway.envelope import ResponseEnvelope


class DeliveryGateway:
    """Inbound delivery operations, forwarded to the provider adapter."""

    def __init__(self, lalamove: LalamoveClient) -> None:
        self._lalamove = lalamove

    @classmethod
    def from_env(cls) -> "DeliveryGateway":
        """Create a gateway whose adapter and dispatcher come from the environment."""
        return cls(LalamoveClient.from_env())

    def close(self) -> None:
        self._lalamove.close()

    def __enter__(self) -> "DeliveryGateway":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def get_quotations(
        self, request: DeliveryRequestWrapper | Mapping[str, Any]
    ) -> QuotationResponse | None:
        return self._lalamove.get_quotations(request)

    def place_orders(
        self, request: OrderRequestWrapper | Mapping[str, Any]
    ) -> OrderResponse | None:
        return self._lalamove.place_order(request)

    @staticmethod
    def render_error(
        exc: Exception, path: str | None = None
    ) -> ResponseEnvelope[dict[str, Any]]:
        """Render a failure of either operation as an error envelope."""
        return ResponseEnvelope.from_exception(exc, path=path)
