"""
Base Carrier Interface v1.0.0

- All carriers implement this interface
- Carrier-agnostic value types shared by every adapter:
  - Location
  - Package
  - RateEstimate
  - RateResponse
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence

from auspost_rates.core.exceptions import (
    RatesBaseError,
    ShippingConfigurationError,
    ShippingQuoteError,
)
from auspost_rates.core.utils import normalize_country_code
from auspost_rates.models.carrier import CarrierCode


# =============================================================================
# Carrier-Agnostic Data Classes
# =============================================================================

@dataclass(frozen=True)
class Location:
    """Origin or destination of a shipment."""
    country: Optional[str] = None  # alpha-2 or alpha-3, None when unknown
    state: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None

    @property
    def country_code(self) -> Optional[str]:
        """ISO alpha-2 code, whichever form the country was given in."""
        return normalize_country_code(self.country)


@dataclass(frozen=True)
class Package:
    """Package dimensions and weight."""
    weight: float  # kg
    length: float = 0.0  # cm
    width: float = 0.0  # cm
    height: float = 0.0  # cm
    value: Optional[int] = None  # declared value, minor currency units
    currency: Optional[str] = None


@dataclass(frozen=True)
class RateEstimate:
    """One shipping service priced for a whole shipment."""
    origin: Location
    destination: Location
    carrier: str
    service_name: str
    total_price: Decimal
    currency: str
    service_code: Optional[str] = None

    @property
    def price(self) -> int:
        """Total price in cents."""
        return int((self.total_price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "carrier": self.carrier,
            "service_name": self.service_name,
            "service_code": self.service_code,
            "total_price": str(self.total_price),
            "currency": self.currency,
        }


@dataclass
class RateResponse:
    """
    Result of a rate request.

    Failed responses carry the message of the error that stopped the
    request; the diagnostic fields are populated either way.
    """
    success: bool
    message: str
    rates: List[RateEstimate] = field(default_factory=list)
    raw_responses: List[str] = field(default_factory=list)
    queries: List[Any] = field(default_factory=list)
    request: List[str] = field(default_factory=list)
    params: Dict[str, Any] = field(default_factory=dict)
    test: bool = False
    error: Optional[RatesBaseError] = None

    def raise_for_error(self) -> "RateResponse":
        """Raise ShippingQuoteError when the request failed."""
        if not self.success:
            details = self.error.to_dict() if self.error else {}
            raise ShippingQuoteError(self.message, details=details)
        return self


# =============================================================================
# Base Carrier Interface
# =============================================================================

class BaseCarrier(ABC):
    """
    Abstract base class for all shipping carriers.

    Subclasses declare the option keys they need via requirements();
    construction fails when any of them is missing.
    """

    def __init__(self, **options: Any):
        self._options = options
        self._check_requirements()

    @property
    @abstractmethod
    def carrier_code(self) -> CarrierCode:
        """Return the carrier code enum value."""
        pass

    @property
    @abstractmethod
    def carrier_name(self) -> str:
        """Return the human-readable carrier name."""
        pass

    @abstractmethod
    def requirements(self) -> List[str]:
        """Option keys that must be supplied to use this carrier."""
        pass

    @abstractmethod
    async def find_rates(
        self,
        origin: Location,
        destination: Location,
        packages: Sequence[Package],
    ) -> RateResponse:
        """
        Get shipping rates from the carrier.

        Args:
            origin: Origin location
            destination: Destination location
            packages: Packages making up the shipment

        Returns:
            RateResponse with the rates valid for the whole shipment
        """
        pass

    @classmethod
    @abstractmethod
    def default_location(cls) -> Location:
        """A location the carrier can always quote from."""
        pass

    async def valid_credentials(self) -> bool:
        """
        Check the configured credentials with a small test quote.

        Returns:
            True when the carrier returned a successful rate response
        """
        location = self.default_location()
        package = Package(weight=0.1, length=5, width=15, height=30)
        response = await self.find_rates(location, location, [package])
        return response.success

    async def close(self) -> None:
        """Release any network resources held by the carrier."""
        pass

    def get_option(self, key: str, default: Any = None) -> Any:
        return self._options.get(key, default)

    def _check_requirements(self) -> None:
        missing = [key for key in self.requirements() if not self._options.get(key)]
        if missing:
            raise ShippingConfigurationError(
                f"{self.carrier_name} is missing required options: {', '.join(missing)}",
                details={"missing": missing},
            )
