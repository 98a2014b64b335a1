"""Tests for dispatch value objects."""

from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from delivery_gateway._internal.dispatch.models import (
    JSON_MEDIA_TYPE,
    ErrorOutcome,
    HttpMethod,
    RequestDescriptor,
    build_headers,
    serialize_body,
)
from delivery_gateway.exceptions import ErrorCategory, GatewayAPIError


class TestBuildHeaders:
    """Tests for build_headers."""

    def test_defaults_content_type_and_accept(self):
        """Should add JSON Content-Type and Accept when unset."""
        headers = build_headers(None)
        assert headers == {"Content-Type": JSON_MEDIA_TYPE, "Accept": JSON_MEDIA_TYPE}

    def test_keeps_caller_content_type(self):
        """Should not override a Content-Type set by the caller."""
        headers = build_headers({"content-type": "text/plain"})
        assert headers["content-type"] == "text/plain"
        assert "Content-Type" not in headers
        assert headers["Accept"] == JSON_MEDIA_TYPE

    def test_last_write_wins_case_insensitively(self):
        """Should keep only the last value for names differing in case."""
        headers = build_headers({"Market": "HK"}, {"market": "SG"})
        assert headers["market"] == "SG"
        assert "Market" not in headers

    def test_returns_fresh_dict(self):
        """Should never return the caller's mapping."""
        source = {"market": "HK"}
        headers = build_headers(source)
        headers["market"] = "SG"
        assert source == {"market": "HK"}


class TestSerializeBody:
    """Tests for serialize_body."""

    def test_none(self):
        assert serialize_body(None) is None

    def test_string_passes_through(self):
        """Should send pre-serialized JSON untouched."""
        text = '{"b": 1,  "a": 2}'
        assert serialize_body(text) == text

    def test_bytes_decoded(self):
        assert serialize_body(b'{"a":1}') == '{"a":1}'

    def test_dict_is_compact(self):
        """Should serialize mappings without whitespace."""
        assert serialize_body({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'

    def test_non_ascii_kept(self):
        assert serialize_body({"address": "九龍"}) == '{"address":"九龍"}'

    def test_datetime_is_iso_8601(self):
        """Should encode datetimes as ISO-8601 text, not their str() form."""
        body = {"scheduleAt": datetime(2024, 1, 1)}
        assert serialize_body(body) == '{"scheduleAt":"2024-01-01T00:00:00"}'

    def test_decimal_is_json_text(self):
        assert serialize_body({"amount": Decimal("12.50")}) == '{"amount":"12.50"}'

    def test_unencodable_value_raises(self):
        """Should refuse values with no JSON encoding instead of stringifying them."""
        with pytest.raises(PydanticSerializationError):
            serialize_body({"handle": object()})

    def test_model_uses_aliases_and_skips_none(self):
        """Should dump models by alias and omit None fields."""

        class Body(BaseModel):
            quotation_id: str = Field(alias="quotationId")
            remarks: str | None = None

        assert serialize_body(Body(quotationId="Q1")) == '{"quotationId":"Q1"}'

    def test_deterministic(self):
        """Should produce identical text for identical input."""
        body = {"stops": [{"lat": "1"}, {"lat": "2"}], "serviceType": "VAN"}
        assert serialize_body(body) == serialize_body(dict(body))


class TestRequestDescriptor:
    """Tests for RequestDescriptor."""

    def test_minimal(self):
        """Should default to GET with JSON headers."""
        descriptor = RequestDescriptor(url="https://example.com/x")
        assert descriptor.method == HttpMethod.GET
        assert descriptor.headers["Content-Type"] == JSON_MEDIA_TYPE
        assert descriptor.headers["Accept"] == JSON_MEDIA_TYPE
        assert descriptor.body is None
        assert descriptor.expected_shape is None

    def test_method_case_insensitive(self):
        descriptor = RequestDescriptor(url="https://example.com", method="post")
        assert descriptor.method == HttpMethod.POST

    def test_rejects_unknown_method(self):
        with pytest.raises(ValidationError):
            RequestDescriptor(url="https://example.com", method="PATCH")

    def test_rejects_empty_url(self):
        with pytest.raises(ValidationError):
            RequestDescriptor(url="")

    def test_normalizes_caller_headers(self):
        descriptor = RequestDescriptor(
            url="https://example.com",
            headers={"Authorization": "a", "authorization": "b", "market": "HK"},
        )
        assert descriptor.headers["authorization"] == "b"
        assert "Authorization" not in descriptor.headers
        assert descriptor.headers["market"] == "HK"

    def test_is_frozen(self):
        descriptor = RequestDescriptor(url="https://example.com")
        with pytest.raises(ValidationError):
            descriptor.url = "https://other.com"  # type: ignore[misc]

    def test_accepts_type_as_shape(self):
        class Shape(BaseModel):
            id: str

        descriptor = RequestDescriptor(url="https://example.com", expected_shape=Shape)
        assert descriptor.expected_shape is Shape


class TestErrorOutcome:
    """Tests for ErrorOutcome."""

    def test_to_exception(self):
        """Should carry every field onto the raised exception."""
        outcome = ErrorOutcome(
            http_status=429,
            category=ErrorCategory.RATE_LIMITED,
            code=429,
            message="Rate Limit Exceeded HOST: api.example.com",
            host="api.example.com",
        )
        error = outcome.to_exception()
        assert isinstance(error, GatewayAPIError)
        assert str(error) == "Rate Limit Exceeded HOST: api.example.com"
        assert error.status_code == 429
        assert error.code == 429
        assert error.category is ErrorCategory.RATE_LIMITED
        assert error.host == "api.example.com"
