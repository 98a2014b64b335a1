"""Tests for ResponseEnvelope."""

from typing import Any

from delivery_gateway.envelope import ResponseEnvelope
from delivery_gateway.exceptions import ErrorCategory, GatewayAPIError, GatewayValidationError


class TestSuccess:
    """Tests for success envelopes."""

    def test_success_defaults(self):
        envelope = ResponseEnvelope.success({"quotationId": "Q1"})
        assert envelope.status == "SUCCESS"
        assert envelope.status_code == 200
        assert envelope.error_code is None
        assert envelope.message == "Operation completed successfully"
        assert envelope.response == {"quotationId": "Q1"}

    def test_to_wire_uses_camel_case(self):
        wire = ResponseEnvelope.success({"a": 1}, message="done").to_wire()
        assert wire["statusCode"] == 200
        assert wire["errorCode"] is None
        assert wire["message"] == "done"
        assert wire["response"] == {"a": 1}
        assert "responseData" in wire


class TestError:
    """Tests for error envelopes."""

    def test_error(self):
        envelope = ResponseEnvelope.error(502, 502, "Microservice Exchange Error")
        assert envelope.status == "ERROR"
        assert envelope.status_code == 502
        assert envelope.error_code == 502

    def test_to_wire_omits_missing_response(self):
        wire = ResponseEnvelope.error(400, 400, "Bad Request").to_wire()
        assert "response" not in wire


class TestFromException:
    """Tests for rendering exceptions."""

    def test_api_error(self):
        """Should keep the classified code, message and host."""
        error = GatewayAPIError(
            "Rate Limit Exceeded HOST: rest.lalamove.com",
            status_code=429,
            code=429,
            category=ErrorCategory.RATE_LIMITED,
            host="rest.lalamove.com",
        )

        envelope = ResponseEnvelope.from_exception(error, path="/api/lalamove/quotations")

        assert envelope.status == "ERROR"
        assert envelope.status_code == 429
        assert envelope.error_code == 429
        assert envelope.message == "Rate Limit Exceeded HOST: rest.lalamove.com"
        data: dict[str, Any] = envelope.response
        assert data["category"] == "RATE_LIMITED"
        assert data["host"] == "rest.lalamove.com"
        assert data["path"] == "/api/lalamove/quotations"
        assert "timestamp" in data
        assert envelope.response_data is None

    def test_api_error_wire_shape(self):
        """Should carry error details under response with a null responseData."""
        error = GatewayAPIError(
            "Microservice Resource Not Found", code=404, category=ErrorCategory.NOT_FOUND
        )
        wire = ResponseEnvelope.from_exception(error, path="/api/lalamove/orders").to_wire()
        assert wire["responseData"] is None
        assert wire["response"]["category"] == "NOT_FOUND"
        assert wire["response"]["path"] == "/api/lalamove/orders"

    def test_transport_error_maps_to_500(self):
        error = GatewayAPIError(
            "Microservice Internal Error", code=500, category=ErrorCategory.INTERNAL_ERROR
        )
        envelope = ResponseEnvelope.from_exception(error)
        assert envelope.status_code == 500
        assert envelope.error_code == 500

    def test_validation_error_is_400(self):
        envelope = ResponseEnvelope.from_exception(GatewayValidationError("bad stops"))
        assert envelope.status_code == 400
        assert envelope.message == "bad stops"

    def test_value_error_is_400(self):
        envelope = ResponseEnvelope.from_exception(ValueError("bad input"))
        assert envelope.status_code == 400

    def test_unexpected_error_is_generic_500(self):
        """Should hide details of uncategorized failures."""
        envelope = ResponseEnvelope.from_exception(RuntimeError("secret detail"))
        assert envelope.status_code == 500
        assert envelope.error_code == 500
        assert envelope.message == "Internal Server Error"
        assert "secret detail" not in str(envelope.to_wire())
