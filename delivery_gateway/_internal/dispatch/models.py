"""Value objects for outbound dispatch.

A RequestDescriptor is built fresh for every call and never mutated; its
headers are normalized once at construction time.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from delivery_gateway.exceptions import ErrorCategory, GatewayAPIError

# =============================================================================
# Constants
# =============================================================================

JSON_MEDIA_TYPE = "application/json"
MAX_ATTEMPTS = 2  # initial call plus one re-attempt on authorization failure
UNAUTHORIZED_PHRASE = "unauthorized"

_JSON_BODY = TypeAdapter(Any)


class HttpMethod(StrEnum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


# =============================================================================
# Helpers
# =============================================================================


def build_headers(*sources: Mapping[str, str] | None) -> dict[str, str]:
    """Merge header mappings into a fresh header set.

    Names compare case-insensitively and the last write wins, keeping the
    spelling of the last writer. Content-Type and Accept default to JSON.
    """
    merged: dict[str, tuple[str, str]] = {}
    for source in sources:
        if not source:
            continue
        for name, value in source.items():
            merged[name.lower()] = (name, str(value))
    merged.setdefault("content-type", ("Content-Type", JSON_MEDIA_TYPE))
    merged.setdefault("accept", ("Accept", JSON_MEDIA_TYPE))
    return dict(merged.values())


def serialize_body(body: Any) -> str | None:
    """Serialize an outgoing body into its canonical JSON text.

    Strings are treated as already-serialized JSON and returned untouched, so
    a body that was signed is transmitted byte for byte. Values JSON has no
    type for (datetimes, UUIDs, decimals) use pydantic's JSON encoding, and
    anything it cannot encode raises PydanticSerializationError.
    """
    if body is None:
        return None
    if isinstance(body, str):
        return body
    if isinstance(body, bytes):
        return body.decode("utf-8")
    if isinstance(body, BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True)
    return _JSON_BODY.dump_json(body, by_alias=True).decode("utf-8")


# =============================================================================
# Models
# =============================================================================


class RequestDescriptor(BaseModel):
    """A single outbound HTTP call.

    Fields:
        url: Absolute request URL.
        method: HTTP verb.
        headers: Normalized header set (see build_headers).
        body: Payload; strings are sent verbatim, anything else is serialized.
        expected_shape: Type the response body is decoded into. None returns
            the decoded JSON as-is.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    url: str
    method: HttpMethod = HttpMethod.GET
    headers: dict[str, str] = Field(default_factory=dict, validate_default=True)
    body: Any = None
    expected_shape: Any = None

    @field_validator("url")
    @classmethod
    def url_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("url must not be empty")
        return v

    @field_validator("method", mode="before")
    @classmethod
    def method_upper(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("headers", mode="before")
    @classmethod
    def normalize_headers(cls, v: Mapping[str, str] | None) -> dict[str, str]:
        return build_headers(v)


class ErrorOutcome(BaseModel):
    """A classified dispatch failure."""

    model_config = ConfigDict(frozen=True)

    http_status: int | None = None
    category: ErrorCategory
    code: int
    message: str
    host: str | None = None

    def to_exception(self) -> GatewayAPIError:
        return GatewayAPIError(
            self.message,
            status_code=self.http_status,
            code=self.code,
            category=self.category,
            host=self.host,
        )
