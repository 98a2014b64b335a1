"""Pydantic models for the Lalamove v3 wire format.

Attributes are snake_case; the provider's field names (including its
spelling quirks such as `isPODEnabled`, `MerchantId` and `restaurntName`)
are kept as aliases so payloads round-trip unchanged.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LalamoveModel(BaseModel):
    """Base model serializing to the provider's field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Shared
# =============================================================================


class Coordinates(LalamoveModel):
    lat: str
    lng: str


class PriceBreakdown(LalamoveModel):
    base: str | None = None
    extra_mileage: str | None = None
    surcharge: str | None = None
    total_before_optimization: str | None = None
    total_exclude_priority_fee: str | None = None
    total: str | None = None
    currency: str | None = None


class Distance(LalamoveModel):
    value: str | None = None
    unit: str | None = None


class Metadata(LalamoveModel):
    merchant_id: str | None = Field(default=None, alias="MerchantId")
    restaurnt_name: str | None = None


# =============================================================================
# Quotations
# =============================================================================


class Stop(LalamoveModel):
    coordinates: Coordinates
    address: str


class DeliveryRequest(LalamoveModel):
    """Quotation request body (`data` of POST /v3/quotations)."""

    schedule_at: str | None = None
    service_type: str
    special_requests: list[str] | None = None
    language: str | None = None
    stops: list[Stop] = Field(min_length=2)
    is_route_optimized: bool = False


class DeliveryRequestWrapper(LalamoveModel):
    data: DeliveryRequest


class QuotedStop(LalamoveModel):
    stop_id: str | None = None
    coordinates: Coordinates | None = None
    address: str | None = None


class QuotationData(LalamoveModel):
    quotation_id: str | None = None
    schedule_at: str | None = None
    expires_at: str | None = None
    service_type: str | None = None
    language: str | None = None
    stops: list[QuotedStop] | None = None
    is_route_optimized: bool | None = None
    price_breakdown: PriceBreakdown | None = None
    distance: Distance | None = None


class QuotationResponse(LalamoveModel):
    data: QuotationData | None = None


# =============================================================================
# Orders
# =============================================================================


class Sender(LalamoveModel):
    stop_id: str
    name: str
    phone: str


class Recipient(LalamoveModel):
    stop_id: str
    name: str
    phone: str
    remarks: str | None = None


class OrderRequest(LalamoveModel):
    """Order placement body (`data` of POST /v3/orders)."""

    quotation_id: str
    sender: Sender
    recipients: list[Recipient] = Field(min_length=1)
    is_pod_enabled: bool = Field(default=False, alias="isPODEnabled")
    is_recipient_sms_enabled: bool = Field(default=False, alias="isRecipientSMSEnabled")
    partner: str | None = None
    metadata: Metadata | None = None


class OrderRequestWrapper(LalamoveModel):
    data: OrderRequest


class DeliveryCode(LalamoveModel):
    value: str | None = None
    status: str | None = None


class ProofOfDelivery(LalamoveModel):
    status: str | None = None


class OrderStop(LalamoveModel):
    coordinates: Coordinates | None = None
    address: str | None = None
    name: str | None = None
    phone: str | None = None
    delivery_code: DeliveryCode | None = Field(default=None, alias="delivery_code")
    pod: ProofOfDelivery | None = Field(default=None, alias="POD")


class OrderData(LalamoveModel):
    order_id: str | None = None
    quotation_id: str | None = None
    price_breakdown: PriceBreakdown | None = None
    driver_id: str | None = None
    share_link: str | None = None
    status: str | None = None
    distance: Distance | None = None
    stops: list[OrderStop] | None = None
    metadata: Metadata | None = None
    partner: str | None = None


class OrderResponse(LalamoveModel):
    data: OrderData | None = None
