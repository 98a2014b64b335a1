"""Delivery gateway for Python.

Forwards internal delivery requests to third-party logistics APIs and
normalizes their responses and errors.

Public API:
    DeliveryGateway - Quotation and order operations
    ResponseEnvelope - Uniform success/error envelope

Internal (system-level, not for direct use):
    _internal.dispatch - Outbound dispatch engine
    _internal.lalamove - Signed Lalamove adapter
"""

from delivery_gateway._version import __version__
from delivery_gateway.client import DeliveryGateway
from delivery_gateway.envelope import ResponseEnvelope
from delivery_gateway.exceptions import (
    ErrorCategory,
    GatewayAPIError,
    GatewayConfigError,
    GatewayError,
    GatewaySigningError,
    GatewayValidationError,
)

__all__ = [
    "__version__",
    "DeliveryGateway",
    "ResponseEnvelope",
    "ErrorCategory",
    "GatewayError",
    "GatewayAPIError",
    "GatewayConfigError",
    "GatewaySigningError",
    "GatewayValidationError",
]
