"""Outbound dispatch engine.

WARNING: This is a system-level module used by the gateway adapters.
Do not call directly from user code.
"""

from delivery_gateway._internal.dispatch.classifier import classify, host_of
from delivery_gateway._internal.dispatch.client import Dispatcher, get_dispatcher
from delivery_gateway._internal.dispatch.models import (
    MAX_ATTEMPTS,
    ErrorOutcome,
    HttpMethod,
    RequestDescriptor,
    build_headers,
    serialize_body,
)

__all__ = [
    "Dispatcher",
    "get_dispatcher",
    "classify",
    "host_of",
    "MAX_ATTEMPTS",
    "ErrorOutcome",
    "HttpMethod",
    "RequestDescriptor",
    "build_headers",
    "serialize_body",
]
