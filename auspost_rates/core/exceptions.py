"""
AusPost Rates Exception Hierarchy

Structured exception classes for the rating pipeline. All exceptions include
code, message, and details for logging and API responses.

Exception Hierarchy:
    RatesBaseError
    └── ShippingError
        ├── ShippingQuoteError
        ├── ShippingConfigurationError
        └── CarrierError
            ├── CarrierResponseError
            ├── MalformedResponseError
            ├── CarrierTransportError
            └── ShippingOriginError
"""
import logging
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)


class RatesBaseError(Exception):
    """
    Base exception for all AusPost Rates custom errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context for debugging
        severity: P0-P3 severity level
    """

    default_code: str = "RATES_ERROR"
    default_severity: str = "P2"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[str] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        self.severity = severity or self.default_severity
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "severity": self.severity,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


# =============================================================================
# SHIPPING ERRORS
# =============================================================================

class ShippingError(RatesBaseError):
    """Base exception for shipping errors."""
    default_code = "SHIPPING_ERROR"
    default_severity = "P1"


class ShippingQuoteError(ShippingError):
    """Rate quote could not be produced for the shipment."""
    default_code = "SHIPPING_QUOTE_FAILED"


class ShippingConfigurationError(ShippingError):
    """Carrier is missing credentials or has invalid settings."""
    default_code = "SHIPPING_NOT_CONFIGURED"
    default_severity = "P0"


# =============================================================================
# CARRIER ERRORS
# =============================================================================

class CarrierError(ShippingError):
    """Base exception for errors reported by, or talking to, a carrier."""
    default_code = "CARRIER_ERROR"


class CarrierResponseError(CarrierError):
    """
    The carrier answered but reported an error instead of services.

    The message is the carrier-supplied text, unchanged
    (e.g. "The maximum weight of a parcel is 20 kg.").
    """
    default_code = "CARRIER_RESPONSE_ERROR"
    default_severity = "P2"


class MalformedResponseError(CarrierError):
    """Carrier payload could not be decoded."""
    default_code = "CARRIER_MALFORMED_RESPONSE"


class CarrierTransportError(CarrierError):
    """No HTTP response was received from the carrier."""
    default_code = "CARRIER_TRANSPORT_ERROR"

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"url": url})
        super().__init__(message, details=details, **kwargs)


class ShippingOriginError(CarrierError):
    """Carrier cannot quote a shipment from this origin."""
    default_code = "SHIPPING_ORIGIN_UNSUPPORTED"
    default_severity = "P3"


# =============================================================================
# EXCEPTION CATALOG
# =============================================================================

EXCEPTION_CATALOG = {
    "SHIPPING_QUOTE_FAILED": {"class": ShippingQuoteError, "severity": "P1", "http_status": 502},
    "SHIPPING_NOT_CONFIGURED": {"class": ShippingConfigurationError, "severity": "P0", "http_status": 503},
    "CARRIER_RESPONSE_ERROR": {"class": CarrierResponseError, "severity": "P2", "http_status": 422},
    "CARRIER_MALFORMED_RESPONSE": {"class": MalformedResponseError, "severity": "P1", "http_status": 502},
    "CARRIER_TRANSPORT_ERROR": {"class": CarrierTransportError, "severity": "P1", "http_status": 504},
    "SHIPPING_ORIGIN_UNSUPPORTED": {"class": ShippingOriginError, "severity": "P3", "http_status": 422},
}

DEFAULT_HTTP_STATUS = 500


def http_status_for(error: RatesBaseError) -> int:
    """HTTP status an API should answer with when this error escapes."""
    entry = EXCEPTION_CATALOG.get(error.code)
    if entry is None:
        return DEFAULT_HTTP_STATUS
    return entry["http_status"]
