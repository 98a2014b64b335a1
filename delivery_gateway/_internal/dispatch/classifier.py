"""Classification of failed outbound calls into the gateway error taxonomy."""

from typing import NamedTuple
from urllib.parse import urlsplit

from delivery_gateway._internal.dispatch.models import ErrorOutcome
from delivery_gateway.exceptions import ErrorCategory


class CategorySpec(NamedTuple):
    category: ErrorCategory
    code: int
    default_message: str


BAD_REQUEST = CategorySpec(ErrorCategory.BAD_REQUEST, 400, "Bad Request")
UNAUTHORIZED = CategorySpec(
    ErrorCategory.UNAUTHORIZED, 401, "Microservice Authorization Error"
)
NOT_FOUND = CategorySpec(ErrorCategory.NOT_FOUND, 404, "Microservice Resource Not Found")
RATE_LIMITED = CategorySpec(ErrorCategory.RATE_LIMITED, 429, "Rate Limit Exceeded")
EXCHANGE_ERROR = CategorySpec(
    ErrorCategory.EXCHANGE_ERROR, 502, "Microservice Exchange Error"
)
INTERNAL_ERROR = CategorySpec(
    ErrorCategory.INTERNAL_ERROR, 500, "Microservice Internal Error"
)

STATUS_CATEGORIES: dict[int, CategorySpec] = {
    400: BAD_REQUEST,
    401: UNAUTHORIZED,
    404: NOT_FOUND,
    429: RATE_LIMITED,
}


def host_of(url: str | None) -> str | None:
    """Return the host of a URL, or None when it cannot be resolved."""
    if not url:
        return None
    try:
        return urlsplit(url).hostname or None
    except ValueError:
        return None


def classify(
    status_code: int | None,
    server_message: str | None = None,
    host: str | None = None,
) -> ErrorOutcome:
    """Map a failed call to exactly one error category.

    Args:
        status_code: HTTP status of the response, None for transport failures.
        server_message: Raw response text; replaces the category default when
            non-empty.
        host: Host of the failing URL, appended as " HOST: <host>".

    Returns:
        The classified ErrorOutcome.
    """
    if status_code is None:
        spec = INTERNAL_ERROR
    else:
        spec = STATUS_CATEGORIES.get(status_code, EXCHANGE_ERROR)

    message = server_message if server_message else spec.default_message
    if host:
        message = f"{message} HOST: {host}"

    return ErrorOutcome(
        http_status=status_code,
        category=spec.category,
        code=spec.code,
        message=message,
        host=host,
    )
