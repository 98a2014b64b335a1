"""Signed client for the Lalamove v3 delivery API."""

import logging
import os
from collections.abc import Callable, Mapping
from types import TracebackType
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from delivery_gateway._internal.dispatch.client import Dispatcher
from delivery_gateway._internal.dispatch.models import (
    JSON_MEDIA_TYPE,
    HttpMethod,
    RequestDescriptor,
    serialize_body,
)
from delivery_gateway._internal.lalamove.models import (
    DeliveryRequestWrapper,
    OrderRequestWrapper,
    OrderResponse,
    QuotationResponse,
)
from delivery_gateway._internal.signing import (
    authorization_header,
    current_millis,
    sign,
)
from delivery_gateway.exceptions import GatewayConfigError, GatewayValidationError

logger = logging.getLogger(__name__)

QUOTATIONS_PATH = "/v3/quotations"
ORDERS_PATH = "/v3/orders"

REQUIRED_ENV_VARS = (
    "LALAMOVE_HOSTNAME",
    "LALAMOVE_APP_KEY",
    "LALAMOVE_APP_SECRET",
    "LALAMOVE_MARKET",
)

RequestT = TypeVar("RequestT", bound=BaseModel)


class LalamoveClient:
    """Client for the Lalamove quotation and order endpoints.

    Every call serializes its body once, signs exactly that text and sends it
    unchanged; the provider rejects any request whose body differs from the
    signed one. Calls are stateless: the signature and its timestamp are
    computed fresh each time.
    """

    def __init__(
        self,
        *,
        hostname: str,
        app_key: str,
        app_secret: str,
        market: str,
        dispatcher: Dispatcher | None = None,
        clock: Callable[[], int] = current_millis,
    ) -> None:
        """Initialize the client.

        Args:
            hostname: API host, e.g. "rest.sandbox.lalamove.com".
            app_key: Public API key sent in the Authorization header.
            app_secret: Secret used to sign requests.
            market: Market code sent in the `market` header (e.g. "HK").
            dispatcher: Dispatcher to send requests with. When omitted one is
                created and closed by `close()`.
            clock: Source of millisecond timestamps.
        """
        self._hostname = hostname
        self._app_key = app_key
        self._app_secret = app_secret
        self._market = market
        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher or Dispatcher()
        self._clock = clock

    @classmethod
    def from_env(cls, dispatcher: Dispatcher | None = None) -> "LalamoveClient":
        """Create a client from environment variables.

        Required environment variables:
            LALAMOVE_HOSTNAME: API host name.
            LALAMOVE_APP_KEY: API key.
            LALAMOVE_APP_SECRET: API secret.
            LALAMOVE_MARKET: Market code.

        Raises:
            GatewayConfigError: If any required variable is missing.
        """
        missing = [name for name in REQUIRED_ENV_VARS if not os.environ.get(name)]
        if missing:
            raise GatewayConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        client = cls(
            hostname=os.environ["LALAMOVE_HOSTNAME"],
            app_key=os.environ["LALAMOVE_APP_KEY"],
            app_secret=os.environ["LALAMOVE_APP_SECRET"],
            market=os.environ["LALAMOVE_MARKET"],
            dispatcher=dispatcher or Dispatcher.from_env(),
        )
        client._owns_dispatcher = dispatcher is None
        return client

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def close(self) -> None:
        """Close the dispatcher if this client created it."""
        if self._owns_dispatcher:
            self._dispatcher.close()

    def __enter__(self) -> "LalamoveClient":
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
        """Request a delivery quotation.

        Args:
            request: Delivery request wrapper, as a model or its wire mapping.

        Returns:
            The provider's quotation, or None for an empty response body.
        """
        wrapper = self._validate(DeliveryRequestWrapper, request)
        return self._post_signed(
            QUOTATIONS_PATH, wrapper, QuotationResponse, operation="get_quotations"
        )

    def place_order(
        self, request: OrderRequestWrapper | Mapping[str, Any]
    ) -> OrderResponse | None:
        """Place an order against a previously issued quotation.

        Args:
            request: Order request wrapper, as a model or its wire mapping.

        Returns:
            The provider's order confirmation, or None for an empty body.
        """
        wrapper = self._validate(OrderRequestWrapper, request)
        return self._post_signed(ORDERS_PATH, wrapper, OrderResponse, operation="place_order")

    def url_for(self, path: str) -> str:
        return f"https://{self._hostname}{path}"

    def signed_headers(self, method: str, path: str, body_json: str) -> dict[str, str]:
        """Build the provider headers for one call, signing `body_json`."""
        timestamp = self._clock()
        digest = sign(self._app_secret, method, path, body_json, timestamp)
        return {
            "Content-Type": JSON_MEDIA_TYPE,
            "Authorization": authorization_header(self._app_key, timestamp, digest),
            "market": self._market,
        }

    def _post_signed(
        self,
        path: str,
        body: BaseModel,
        response_shape: type[Any],
        *,
        operation: str,
    ) -> Any | None:
        body_json = serialize_body(body) or ""
        descriptor = RequestDescriptor(
            url=self.url_for(path),
            method=HttpMethod.POST,
            headers=self.signed_headers(HttpMethod.POST.value, path, body_json),
            body=body_json,
            expected_shape=response_shape,
        )
        logger.info("Calling %s at %s", operation, descriptor.url)
        return self._dispatcher.execute(descriptor, fail_fast=True, operation=operation)

    @staticmethod
    def _validate(model: type[RequestT], request: RequestT | Mapping[str, Any]) -> RequestT:
        if isinstance(request, model):
            return request
        try:
            return model.model_validate(request)
        except ValidationError as e:
            raise GatewayValidationError(f"Invalid {model.__name__}: {e}") from e
