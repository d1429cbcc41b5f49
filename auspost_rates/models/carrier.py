"""
Carrier model for Australia Post rating v1.0.0

Carrier identity and the immutable carrier constants (home country,
home currency, API base URL) that the request builder and rate aggregator
receive explicitly.
"""
import enum
from dataclasses import dataclass, replace
from typing import Optional

from auspost_rates.core.config import Settings, DEFAULT_AUSPOST_API_BASE
from auspost_rates.core.utils import country_name, normalize_country_code


class CarrierCode(str, enum.Enum):
    """Supported shipping carriers."""
    AUSTRALIA_POST = "AUSTRALIA_POST"


@dataclass(frozen=True)
class CarrierProfile:
    """Fixed per-carrier constants used while building and pricing requests."""
    name: str
    base_url: str
    home_country: str  # alpha-2
    home_currency: str = "AUD"
    # Declared values are only forwarded when packaged in this currency
    declared_value_currency: str = "NZD"

    @property
    def home_country_name(self) -> str:
        return country_name(self.home_country)

    def is_home_country(self, country: Optional[str]) -> bool:
        """Unset country counts as the home country; alpha-3 codes are accepted."""
        code = normalize_country_code(country)
        return code is None or code == self.home_country


AUSTRALIA_POST_PROFILE = CarrierProfile(
    name="Australia Post",
    base_url=DEFAULT_AUSPOST_API_BASE,
    home_country="AU",
    home_currency="AUD",
    declared_value_currency="NZD",
)


def australia_post_profile(settings: Optional[Settings] = None) -> CarrierProfile:
    """Build the Australia Post profile, honouring a configured API base URL."""
    if settings is None:
        return AUSTRALIA_POST_PROFILE
    return replace(AUSTRALIA_POST_PROFILE, base_url=settings.AUSPOST_API_BASE)
