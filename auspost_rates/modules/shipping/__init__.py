"""
Shipping Module v1.0.0

- BaseCarrier interface for all carrier implementations
- CarrierFactory for dependency injection
"""
from auspost_rates.modules.shipping.carriers import CarrierFactory, get_carrier
from auspost_rates.modules.shipping.carriers.base import BaseCarrier

__all__ = [
    "CarrierFactory",
    "get_carrier",
    "BaseCarrier",
]
