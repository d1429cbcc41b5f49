"""
Pytest configuration and fixtures for AusPost Rates tests.

FakePAC stands in for the Australia Post Postage Assessment Calculator
behind an httpx.MockTransport.
"""
import json
import os
from decimal import Decimal
from typing import Dict, List

import httpx
import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["AUSPOST_API_KEY"] = "test-auth-key"

from auspost_rates.models.carrier import AUSTRALIA_POST_PROFILE  # noqa: E402
from auspost_rates.modules.shipping.carriers.australia_post import AustraliaPostCarrier  # noqa: E402
from auspost_rates.modules.shipping.carriers.base import Location, Package  # noqa: E402
from auspost_rates.services.auspost_client import AusPostClient, AusPostCredentials  # noqa: E402

MAX_WEIGHT_KG = 20
MAX_LENGTH_CM = 105

# (code, name, base price, minimum weight in kg)
DOMESTIC_SERVICES = [
    ("AUS_PARCEL_REGULAR", "Parcel Post", Decimal("10.00"), 0),
    ("AUS_PARCEL_EXPRESS", "Express Post", Decimal("14.50"), 0),
    ("AUS_PARCEL_COURIER", "Courier Post", Decimal("20.00"), 1),
]

INTERNATIONAL_SERVICES = [
    ("INT_PARCEL_AIR_OWN_PACKAGING", "Economy Air", Decimal("25.00"), 0),
    ("INT_PARCEL_STD_OWN_PACKAGING", "Standard", Decimal("30.00"), 0),
    ("INT_PARCEL_SEA_OWN_PACKAGING", "Economy Sea", Decimal("20.00"), 2),
]


def service_price(base: Decimal, weight: float) -> Decimal:
    return base + Decimal("2") * Decimal(str(weight))


class FakePAC:
    """Answers PAC queries from the weight and dimensions in the URL."""

    def __init__(self):
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        params = request.url.params
        weight = float(params.get("weight") or 0)
        longest = max(float(params.get(key) or 0) for key in ("length", "width", "height"))

        if weight > MAX_WEIGHT_KG:
            return self.error(f"The maximum weight of a parcel is {MAX_WEIGHT_KG} kg.")
        if longest > MAX_LENGTH_CM:
            return self.error(f"The Length cannot exceed {MAX_LENGTH_CM}cm.")
        if weight == 0:
            return httpx.Response(200, json={"services": {"service": []}})

        if request.url.path.endswith("/parcel/domestic/service.json"):
            services = DOMESTIC_SERVICES
        else:
            services = INTERNATIONAL_SERVICES

        entries = [
            {"code": code, "name": name, "price": str(service_price(base, weight))}
            for code, name, base, minimum in services
            if weight >= minimum
        ]
        return httpx.Response(200, json={"services": {"service": entries}})

    @staticmethod
    def error(message: str) -> httpx.Response:
        return httpx.Response(404, json={"error": {"errorMessage": message}})


def service_body(*services: Dict) -> str:
    """Raw PAC body offering the given services."""
    return json.dumps({"services": {"service": list(services)}})


def error_body(message: str) -> str:
    return json.dumps({"error": {"errorMessage": message}})


@pytest.fixture
def profile():
    return AUSTRALIA_POST_PROFILE


@pytest.fixture
def locations() -> Dict[str, Location]:
    return {
        "melbourne": Location(
            country="AU", state="VIC", city="Melbourne",
            address1="192 George Street", postal_code="3108",
        ),
        "sydney": Location(
            country="AU", state="NSW", city="Sydney",
            address1="163 Clarence Street", postal_code="2000",
        ),
        "ottawa": Location(
            country="CA", state="ON", city="Ottawa",
            address1="110 Laurier Avenue West", postal_code="K1P 1J1",
        ),
        "beverly_hills": Location(
            country="US", state="CA", city="Beverly Hills",
            address1="455 N. Rexford Dr.", postal_code="90210",
        ),
    }


@pytest.fixture
def packages() -> Dict[str, Package]:
    return {
        "book": Package(weight=0.25, length=19, width=14, height=2),
        "wii": Package(weight=3.4, length=38.1, width=25.4, height=11.43, value=26999, currency="GBP"),
        "american_wii": Package(weight=3.4, length=38.1, width=25.4, height=11.43, value=26999, currency="USD"),
        "poster": Package(weight=0.1, length=93, width=10, height=10),
        "kiwi_gift": Package(weight=1.2, length=30, width=20, height=10, value=500, currency="NZD"),
        "just_zero_weight": Package(weight=0),
        "shipping_container": Package(weight=15, length=2591, width=2438, height=610),
        "largest_gold_bar": Package(weight=250, length=45.5, width=22.5, height=21),
    }


@pytest.fixture
def pac() -> FakePAC:
    return FakePAC()


@pytest.fixture
def pac_client(pac) -> AusPostClient:
    """AusPostClient wired to the fake PAC."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(pac.handler))
    return AusPostClient(AusPostCredentials(api_key="test-auth-key"), http_client=http_client)


@pytest.fixture
def carrier(pac_client) -> AustraliaPostCarrier:
    return AustraliaPostCarrier(key="test-auth-key", client=pac_client)
