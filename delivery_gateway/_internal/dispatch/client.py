"""Resilient outbound HTTP dispatcher."""

import logging
import os
import time
from collections.abc import Mapping
from functools import lru_cache
from types import TracebackType
from typing import Any, NamedTuple

import httpx
from pydantic import TypeAdapter, ValidationError

from delivery_gateway._internal.dispatch.classifier import classify, host_of
from delivery_gateway._internal.dispatch.models import (
    MAX_ATTEMPTS,
    UNAUTHORIZED_PHRASE,
    HttpMethod,
    RequestDescriptor,
    serialize_body,
)
from delivery_gateway._internal.dispatch.redaction import redact_payload
from delivery_gateway._internal.http import (
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
    DEFAULT_TIMEOUT_MS,
    create_http_client,
)
from delivery_gateway.exceptions import GatewayValidationError

logger = logging.getLogger(__name__)


class _Failure(NamedTuple):
    status_code: int | None
    detail: str


@lru_cache(maxsize=None)
def _cached_type_adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def _type_adapter(shape: Any) -> TypeAdapter[Any]:
    try:
        hash(shape)
    except TypeError:
        return TypeAdapter(shape)
    return _cached_type_adapter(shape)


class Dispatcher:
    """Executes outbound HTTP calls with classification and a bounded retry.

    Each call is attempted once. A call rejected with an authorization
    failure is re-attempted exactly once when retries are allowed. Failures
    left after that are either raised as GatewayAPIError (fail_fast=True) or
    reported as None (fail_fast=False).

    Use `Dispatcher.from_env()` to build one from environment variables, or
    pass an existing httpx.Client to share a connection pool.
    """

    def __init__(
        self,
        *,
        http_client: httpx.Client | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        max_keepalive_connections: int = DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
        log_responses: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            http_client: Transport to use. When omitted a pooled client is
                created from the settings below and closed by `close()`.
            timeout_ms: Connect/read timeout in milliseconds.
            max_connections: Connection pool size.
            max_keepalive_connections: Idle connections kept for reuse.
            log_responses: Log response bodies at INFO instead of DEBUG.
        """
        self._owns_client = http_client is None
        self._client = http_client or create_http_client(
            timeout_ms=timeout_ms,
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive_connections,
        )
        self._timeout_ms = timeout_ms
        self._log_responses = log_responses

    @classmethod
    def from_env(cls) -> "Dispatcher":
        """Create a dispatcher from environment variables.

        Optional environment variables:
            DELIVERY_GATEWAY_TIMEOUT_MS: Request timeout in milliseconds.
            DELIVERY_GATEWAY_MAX_CONNECTIONS: Connection pool size.
            DELIVERY_GATEWAY_MAX_KEEPALIVE: Idle connections kept for reuse.
            DELIVERY_GATEWAY_LOG_RESPONSES: Set to "1" to log bodies at INFO.

        Raises:
            ValueError: If a numeric variable is not a valid integer.
        """
        timeout_ms = int(os.environ.get("DELIVERY_GATEWAY_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS)))
        max_connections = int(
            os.environ.get("DELIVERY_GATEWAY_MAX_CONNECTIONS", str(DEFAULT_MAX_CONNECTIONS))
        )
        max_keepalive = int(
            os.environ.get("DELIVERY_GATEWAY_MAX_KEEPALIVE", str(DEFAULT_MAX_KEEPALIVE_CONNECTIONS))
        )
        log_responses = os.environ.get("DELIVERY_GATEWAY_LOG_RESPONSES", "") == "1"

        return cls(
            timeout_ms=timeout_ms,
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
            log_responses=log_responses,
        )

    def close(self) -> None:
        """Close the transport if this dispatcher created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # =========================================================================
    # Core
    # =========================================================================

    def execute(
        self,
        descriptor: RequestDescriptor,
        *,
        fail_fast: bool = True,
        allow_retry: bool = True,
        operation: str | None = None,
    ) -> Any | None:
        """Execute one outbound call.

        Args:
            descriptor: The request to send.
            fail_fast: Raise classified failures instead of returning None.
            allow_retry: Permit one re-attempt after an authorization failure.
            operation: Caller-supplied name used in log records.

        Returns:
            The body decoded into `descriptor.expected_shape`, or None for an
            empty body or a suppressed failure.

        Raises:
            GatewayAPIError: On a classified failure when fail_fast is True.
            GatewayValidationError: If a successful body cannot be decoded.
        """
        operation = operation or f"{descriptor.method} {descriptor.url}"
        content = serialize_body(descriptor.body)
        attempts = MAX_ATTEMPTS if allow_retry else 1

        attempt = 1
        while True:
            result = self._attempt(descriptor, content, operation, attempt)
            if isinstance(result, httpx.Response):
                return self._decode(result, descriptor.expected_shape, operation)

            if attempt < attempts and self._is_authorization_failure(result, operation):
                attempt += 1
                continue
            return self._handle_failure(result, descriptor.url, fail_fast, operation)

    def _attempt(
        self,
        descriptor: RequestDescriptor,
        content: str | None,
        operation: str,
        attempt: int,
    ) -> httpx.Response | _Failure:
        """Send the request once, returning the response or a failure."""
        logger.debug(
            "Dispatching %s: %s %s (attempt %d)",
            operation,
            descriptor.method,
            descriptor.url,
            attempt,
            extra={
                "operation": operation,
                "http_method": str(descriptor.method),
                "url": descriptor.url,
                "attempt": attempt,
                "headers": redact_payload(descriptor.headers),
                "payload": self._loggable_payload(descriptor.body, content),
            },
        )

        started = time.perf_counter()
        try:
            response = self._client.request(
                str(descriptor.method),
                descriptor.url,
                headers=descriptor.headers,
                content=content.encode("utf-8") if content is not None else None,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(
                "Transport failure for %s after %.0fms: %s",
                operation,
                elapsed_ms,
                e,
                extra={"operation": operation, "url": descriptor.url, "elapsed_ms": elapsed_ms},
            )
            return _Failure(None, str(e))

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("Time elapsed for %s: %.0fms", operation, elapsed_ms)
        logger.log(
            logging.INFO if self._log_responses else logging.DEBUG,
            "Response received for %s: %s %s",
            operation,
            response.status_code,
            response.text,
            extra={
                "operation": operation,
                "status_code": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )

        if response.is_error:
            logger.error(
                "HTTP error for %s. Status: %s, Message: %s",
                operation,
                response.status_code,
                response.text,
            )
            return _Failure(response.status_code, response.text)
        return response

    def _is_authorization_failure(self, failure: _Failure, operation: str) -> bool:
        """Decide whether a failure earns the single re-attempt.

        A received status is authoritative: only 401 qualifies. Transport
        failures without a status fall back to matching "unauthorized" in
        the error text.
        """
        if failure.status_code is not None:
            if failure.status_code == 401:
                logger.info("Retrying %s after 401 Unauthorized", operation)
                return True
            return False

        if UNAUTHORIZED_PHRASE in failure.detail.lower():
            logger.warning(
                "Retrying %s on transport error mentioning '%s': %s",
                operation,
                UNAUTHORIZED_PHRASE,
                failure.detail,
            )
            return True
        return False

    def _handle_failure(
        self,
        failure: _Failure,
        url: str,
        fail_fast: bool,
        operation: str,
    ) -> None:
        if not fail_fast:
            logger.debug("Suppressing failure for %s (fail_fast disabled)", operation)
            return None

        server_message = failure.detail if failure.status_code is not None else None
        outcome = classify(failure.status_code, server_message, host_of(url))
        raise outcome.to_exception()

    def _decode(self, response: httpx.Response, shape: Any, operation: str) -> Any | None:
        if not response.content.strip():
            return None
        try:
            data = response.json()
        except ValueError as e:
            raise GatewayValidationError(f"{operation}: response body is not valid JSON") from e

        if data is None or shape is None:
            return data
        try:
            return _type_adapter(shape).validate_python(data)
        except ValidationError as e:
            raise GatewayValidationError(
                f"{operation}: response does not match {getattr(shape, '__name__', shape)}: {e}"
            ) from e

    @staticmethod
    def _loggable_payload(body: Any, content: str | None) -> Any:
        if isinstance(body, Mapping):
            return redact_payload(body)
        return content

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def get(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        expected_shape: Any = None,
        fail_fast: bool = True,
        allow_retry: bool = True,
        operation: str | None = None,
    ) -> Any | None:
        """Send a GET request. See `execute` for the result contract."""
        descriptor = RequestDescriptor(
            url=url, method=HttpMethod.GET, headers=headers, expected_shape=expected_shape
        )
        return self.execute(
            descriptor, fail_fast=fail_fast, allow_retry=allow_retry, operation=operation
        )

    def post(
        self,
        url: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        expected_shape: Any = None,
        fail_fast: bool = True,
        allow_retry: bool = True,
        operation: str | None = None,
    ) -> Any | None:
        """Send a POST request. See `execute` for the result contract."""
        descriptor = RequestDescriptor(
            url=url,
            method=HttpMethod.POST,
            headers=headers,
            body=body,
            expected_shape=expected_shape,
        )
        return self.execute(
            descriptor, fail_fast=fail_fast, allow_retry=allow_retry, operation=operation
        )

    def put(
        self,
        url: str,
        body: Any = None,
        *,
        headers: Mapping[str, str] | None = None,
        expected_shape: Any = None,
        fail_fast: bool = True,
        allow_retry: bool = True,
        operation: str | None = None,
    ) -> Any | None:
        """Send a PUT request. See `execute` for the result contract."""
        descriptor = RequestDescriptor(
            url=url,
            method=HttpMethod.PUT,
            headers=headers,
            body=body,
            expected_shape=expected_shape,
        )
        return self.execute(
            descriptor, fail_fast=fail_fast, allow_retry=allow_retry, operation=operation
        )

    def delete(
        self,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        expected_shape: Any = None,
        fail_fast: bool = True,
        allow_retry: bool = True,
        operation: str | None = None,
    ) -> Any | None:
        """Send a DELETE request. See `execute` for the result contract."""
        descriptor = RequestDescriptor(
            url=url, method=HttpMethod.DELETE, headers=headers, expected_shape=expected_shape
        )
        return self.execute(
            descriptor, fail_fast=fail_fast, allow_retry=allow_retry, operation=operation
        )


def get_dispatcher() -> Dispatcher:
    """Get a dispatcher configured from environment variables.

    Returns:
        A configured Dispatcher instance.
    """
    return Dispatcher.from_env()
