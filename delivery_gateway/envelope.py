"""Uniform response envelope returned by the gateway's inbound operations."""

import logging
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from delivery_gateway.exceptions import GatewayAPIError, GatewayValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_SUCCESS = "SUCCESS"
STATUS_ERROR = "ERROR"


class ResponseEnvelope(BaseModel, Generic[T]):
    """Envelope with camelCase wire names (statusCode, errorCode, ...)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    status_code: int
    error_code: int | None = None
    message: str
    response: T | None = None
    response_data: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        response: T,
        message: str = "Operation completed successfully",
        response_data: dict[str, Any] | None = None,
    ) -> "ResponseEnvelope[T]":
        return cls(
            status=STATUS_SUCCESS,
            status_code=200,
            message=message,
            response=response,
            response_data=response_data,
        )

    @classmethod
    def error(
        cls,
        status_code: int,
        error_code: int,
        message: str,
        response: T | None = None,
    ) -> "ResponseEnvelope[T]":
        return cls(
            status=STATUS_ERROR,
            status_code=status_code,
            error_code=error_code,
            message=message,
            response=response,
        )

    @classmethod
    def from_exception(
        cls, exc: Exception, path: str | None = None
    ) -> "ResponseEnvelope[dict[str, Any]]":
        """Render an exception as an error envelope.

        Classified API errors keep their code and message and map to the
        category's transport status; validation problems become 400; anything
        else is an uncategorized 500.
        """
        # Error details travel in the response slot; responseData stays null.
        error_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "path": path,
        }

        if isinstance(exc, GatewayAPIError):
            logger.error("Gateway API error: %s", exc.message, exc_info=exc)
            code = exc.code or 500
            error_data["category"] = str(exc.category) if exc.category else None
            error_data["host"] = exc.host
            return ResponseEnvelope[dict[str, Any]].error(
                code, code, exc.message, response=error_data
            )

        if isinstance(exc, (GatewayValidationError, ValueError)):
            logger.error("Invalid request: %s", exc, exc_info=exc)
            return ResponseEnvelope[dict[str, Any]].error(400, 400, str(exc), response=error_data)

        logger.error("Unexpected error occurred: %s", exc, exc_info=exc)
        return ResponseEnvelope[dict[str, Any]].error(
            500, 500, "Internal Server Error", response=error_data
        )

    def to_wire(self) -> dict[str, Any]:
        """Dump with provider-style camelCase names, omitting an empty response."""
        data = self.model_dump(mode="json", by_alias=True)
        if data.get("response") is None:
            data.pop("response", None)
        return data
