"""Public exceptions for the delivery gateway."""

from enum import StrEnum


class ErrorCategory(StrEnum):
    """Fixed taxonomy of classified dispatch failures."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    EXCHANGE_ERROR = "EXCHANGE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class GatewayError(Exception):
    """Base exception for all delivery gateway errors."""


class GatewayAPIError(GatewayError):
    """Classified failure of an outbound API call.

    Attributes:
        status_code: HTTP status returned upstream, None for transport failures.
        code: Numeric application error code of the category.
        category: The ErrorCategory of the failure.
        host: Host of the failing URL, when resolvable.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        code: int | None = None,
        category: ErrorCategory | None = None,
        host: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.category = category
        self.host = host


class GatewayConfigError(GatewayError):
    """Configuration error (missing env vars, invalid config)."""


class GatewayValidationError(GatewayError):
    """Validation error for request/response data."""


class GatewaySigningError(GatewayError):
    """Request signature could not be computed from the given input."""
