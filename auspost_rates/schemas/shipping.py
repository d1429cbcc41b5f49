"""
Shipping Schemas for Australia Post rating v1.0.0

Pydantic models for shipping API requests and responses.
"""
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field, field_validator

from auspost_rates.modules.shipping.carriers.base import Location, Package, RateEstimate, RateResponse


# ==================== Location Schemas ====================


class LocationSchema(BaseModel):
    """Origin or destination of a shipment."""
    country: Optional[str] = Field(None, min_length=2, max_length=3)
    state: Optional[str] = Field(None, max_length=50)
    postal_code: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)
    address1: Optional[str] = Field(None, max_length=100)
    address2: Optional[str] = Field(None, max_length=100)

    @field_validator("country")
    @classmethod
    def validate_country(cls, v):
        return v.upper() if v else v

    def to_location(self) -> Location:
        return Location(**self.model_dump())


# ==================== Package Schemas ====================


class PackageSchema(BaseModel):
    """Package dimensions in kg/cm; value in minor currency units."""
    weight: float = Field(..., ge=0)
    length: float = Field(0.0, ge=0)
    width: float = Field(0.0, ge=0)
    height: float = Field(0.0, ge=0)
    value: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v):
        return v.upper() if v else v

    def to_package(self) -> Package:
        return Package(**self.model_dump())


# ==================== Rate Schemas ====================


class RateQuoteRequest(BaseModel):
    """Request rates for a shipment."""
    origin: LocationSchema
    destination: LocationSchema
    packages: List[PackageSchema] = Field(..., max_length=50)


class RateQuote(BaseModel):
    """A service priced for the whole shipment."""
    carrier: str
    service_name: str
    service_code: Optional[str] = None
    total_price: Decimal
    currency: str

    @classmethod
    def from_estimate(cls, estimate: RateEstimate) -> "RateQuote":
        return cls(
            carrier=estimate.carrier,
            service_name=estimate.service_name,
            service_code=estimate.service_code,
            total_price=estimate.total_price,
            currency=estimate.currency,
        )


class RateQuoteResponse(BaseModel):
    """Rate lookup result."""
    success: bool
    message: str
    rates: List[RateQuote] = []
    requests: List[str] = []
    error_code: Optional[str] = None

    @classmethod
    def from_rate_response(cls, response: RateResponse) -> "RateQuoteResponse":
        return cls(
            success=response.success,
            message=response.message,
            rates=[RateQuote.from_estimate(rate) for rate in response.rates],
            requests=response.request,
            error_code=response.error.code if response.error else None,
        )
