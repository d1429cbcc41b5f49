"""
Carrier Registry and Factory v1.0.0

- CarrierFactory creates carrier instances based on CarrierCode
- Carriers register themselves with @register_carrier
"""
from typing import Any, Dict, List, Optional, Type
import logging

from auspost_rates.models.carrier import CarrierCode
from auspost_rates.modules.shipping.carriers.base import BaseCarrier

logger = logging.getLogger(__name__)

# Registry of carrier implementations
_CARRIER_REGISTRY: Dict[CarrierCode, Type[BaseCarrier]] = {}


def register_carrier(carrier_code: CarrierCode):
    """
    Decorator to register a carrier implementation.

    Usage:
        @register_carrier(CarrierCode.AUSTRALIA_POST)
        class AustraliaPostCarrier(BaseCarrier):
            ...
    """
    def decorator(cls: Type[BaseCarrier]):
        _CARRIER_REGISTRY[carrier_code] = cls
        logger.info(f"Registered carrier: {carrier_code.value} -> {cls.__name__}")
        return cls
    return decorator


class CarrierFactory:
    """Factory for creating carrier instances."""

    @classmethod
    def get_carrier(cls, carrier_code: CarrierCode, **options: Any) -> Optional[BaseCarrier]:
        """
        Get a carrier instance.

        Args:
            carrier_code: The carrier to get
            options: Carrier options (credentials, test mode, ...)

        Returns:
            BaseCarrier instance or None if no implementation is registered
        """
        _load_carriers()
        carrier_cls = _CARRIER_REGISTRY.get(carrier_code)
        if not carrier_cls:
            logger.warning(f"No implementation registered for carrier: {carrier_code.value}")
            return None

        return carrier_cls(**options)

    @classmethod
    def get_registered_carriers(cls) -> List[CarrierCode]:
        """Get list of all registered carrier codes."""
        _load_carriers()
        return list(_CARRIER_REGISTRY.keys())


def get_carrier(carrier_code: CarrierCode, **options: Any) -> Optional[BaseCarrier]:
    """
    Convenience function to get a carrier.

    Equivalent to CarrierFactory.get_carrier().
    """
    return CarrierFactory.get_carrier(carrier_code, **options)


def _load_carriers() -> None:
    """Import carrier modules so their @register_carrier decorators run."""
    # Deferred: carrier modules import this package
    from auspost_rates.modules.shipping.carriers import australia_post  # noqa: F401
