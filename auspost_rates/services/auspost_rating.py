"""
Australia Post Rating v1.0.0

Pure request-building and response-aggregation logic for the Australia Post
Postage Assessment Calculator (PAC):
- Package parameters (weight, dimensions, declared value)
- Domestic / international classification and per-package queries
- Response parsing into service offers or a carrier error
- Multi-package aggregation: a service is quoted only when every package
  was offered it, priced at the sum of the package prices

No I/O happens here; AusPostClient fetches and AustraliaPostCarrier
coordinates.
"""
import enum
import json
import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import urlencode

from auspost_rates.core.exceptions import (
    CarrierError,
    CarrierResponseError,
    MalformedResponseError,
)
from auspost_rates.models.carrier import CarrierProfile
from auspost_rates.modules.shipping.carriers.base import Location, Package

logger = logging.getLogger(__name__)

UNKNOWN_CARRIER_ERROR = "Unknown error returned by Australia Post"


class QueryMode(str, enum.Enum):
    """Shape of a rate query, fixed for the whole request."""
    DOMESTIC = "domestic"
    INTERNATIONAL = "international"

    @property
    def endpoint(self) -> str:
        return f"parcel/{self.value}/service"


@dataclass(frozen=True)
class QueryDescriptor:
    """One PAC query: endpoint path plus query parameters."""
    endpoint: str
    params: Mapping[str, Any]

    def query_string(self) -> str:
        return urlencode(sorted((key, _format_param(value)) for key, value in self.params.items()))

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}/{self.endpoint}.json?{self.query_string()}"


@dataclass(frozen=True)
class RateRequest:
    """Classified shipment with one query per package, in package order."""
    origin: Location
    destination: Location
    packages: Sequence[Package]
    mode: QueryMode
    queries: Sequence[QueryDescriptor]
    origin_is_home: bool

    def urls(self, base_url: str) -> List[str]:
        return [query.url(base_url) for query in self.queries]


@dataclass(frozen=True)
class ServiceOffer:
    """A service offered for a single package."""
    name: str
    price: Decimal
    code: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class AggregatedQuote:
    """A service priced across every package of a shipment."""
    service_name: str
    total_price: Decimal
    currency: str
    service_code: Optional[str] = None


@dataclass
class ParsedResponse:
    """Outcome of parsing one raw PAC response: offers or an error."""
    offers: List[ServiceOffer] = field(default_factory=list)
    error: Optional[CarrierError] = None
    payload: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _format_param(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ==================== Package Parameters ====================


def declared_value(package: Package, profile: CarrierProfile) -> int:
    """
    Whole-unit declared value for international queries.

    Only forwarded when the package currency is the profile's declared value
    currency; a package without a currency is treated as being in it.
    Any other currency declares 0.
    """
    currency = package.currency or profile.declared_value_currency
    if not package.value or currency != profile.declared_value_currency:
        return 0
    return int(package.value) // 100


def package_params(package: Package, mode: QueryMode, profile: CarrierProfile) -> Dict[str, Any]:
    """Carrier parameters for a single package."""
    params: Dict[str, Any] = {
        "weight": package.weight,
        "length": package.length,
        "width": package.width,
        "height": package.height,
    }
    if mode is QueryMode.INTERNATIONAL:
        params["value"] = declared_value(package, profile)
    return params


# ==================== Request Building ====================


def is_home(location: Location, profile: CarrierProfile) -> bool:
    return profile.is_home_country(location.country)


def classify_shipment(origin: Location, destination: Location, profile: CarrierProfile) -> QueryMode:
    """Domestic only when both ends are in the home country."""
    if is_home(origin, profile) and is_home(destination, profile):
        return QueryMode.DOMESTIC
    return QueryMode.INTERNATIONAL


def mode_params(mode: QueryMode, origin: Location, destination: Location) -> Dict[str, Any]:
    if mode is QueryMode.DOMESTIC:
        return {
            "from_postcode": origin.postal_code,
            "to_postcode": destination.postal_code,
        }
    return {"country_code": destination.country_code}


def build_rate_request(
    origin: Location,
    destination: Location,
    packages: Sequence[Package],
    profile: CarrierProfile,
) -> RateRequest:
    """
    Classify the shipment and build one query per package.

    Args:
        origin: Where the shipment leaves from
        destination: Where the shipment goes
        packages: Packages in the shipment; query order follows this order
        profile: Carrier constants

    Returns:
        RateRequest holding the mode and the per-package queries
    """
    packages = list(packages)
    mode = classify_shipment(origin, destination, profile)
    base_params = mode_params(mode, origin, destination)

    queries = []
    for package in packages:
        params = dict(base_params)
        params.update(package_params(package, mode, profile))
        queries.append(QueryDescriptor(endpoint=mode.endpoint, params=params))

    return RateRequest(
        origin=origin,
        destination=destination,
        packages=tuple(packages),
        mode=mode,
        queries=tuple(queries),
        origin_is_home=is_home(origin, profile),
    )


# ==================== Response Parsing ====================


def _error_message(payload: Mapping[str, Any]) -> str:
    error = payload.get("error")
    if isinstance(error, Mapping):
        message = error.get("errorMessage")
        if message:
            return str(message)
    return UNKNOWN_CARRIER_ERROR


def _to_offer(entry: Any) -> ServiceOffer:
    if not isinstance(entry, Mapping):
        raise MalformedResponseError(f"Unexpected service entry: {entry!r}")
    if not entry.get("name"):
        raise MalformedResponseError(
            "Service entry has no name",
            details={"entry": dict(entry)},
        )
    try:
        price = Decimal(str(entry["price"]))
    except (KeyError, InvalidOperation) as e:
        raise MalformedResponseError(
            f"Service {entry.get('name')!r} has no usable price",
            details={"entry": dict(entry)},
        ) from e
    if not price.is_finite():
        raise MalformedResponseError(f"Service {entry.get('name')!r} has no usable price")
    return ServiceOffer(name=str(entry["name"]), price=price, code=entry.get("code"), raw=entry)


def parse_response(raw: str) -> ParsedResponse:
    """
    Parse one raw PAC response body.

    A body without a services collection is a carrier error carrying the
    carrier's message. An empty services collection is zero offers.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning(f"Australia Post returned a non-JSON body: {str(raw)[:200]!r}")
        return ParsedResponse(
            error=MalformedResponseError(f"Malformed response from Australia Post: {e}")
        )

    if not isinstance(payload, Mapping):
        return ParsedResponse(
            error=MalformedResponseError("Malformed response from Australia Post: expected an object"),
            payload=payload,
        )

    services = payload.get("services")
    entries = services.get("service") if isinstance(services, Mapping) else None
    if entries is None:
        message = _error_message(payload)
        logger.warning(f"Australia Post reported an error: {message}")
        return ParsedResponse(
            error=CarrierResponseError(message, details={"response": payload}),
            payload=payload,
        )

    # A lone service comes back as an object rather than a list
    if isinstance(entries, Mapping):
        entries = [entries]

    try:
        offers = [_to_offer(entry) for entry in entries]
    except MalformedResponseError as e:
        return ParsedResponse(error=e, payload=payload)

    return ParsedResponse(offers=offers, payload=payload)


# ==================== Aggregation ====================


def aggregate_rates(
    offers_per_package: Sequence[Sequence[ServiceOffer]],
    profile: CarrierProfile,
) -> List[AggregatedQuote]:
    """
    Combine per-package offers into quotes for the whole shipment.

    A service survives only when it was offered once for every package.
    Output follows the order in which each service name was first seen.
    """
    package_count = len(offers_per_package)

    grouped: "OrderedDict[str, List[ServiceOffer]]" = OrderedDict()
    for offers in offers_per_package:
        for offer in offers:
            grouped.setdefault(offer.name, []).append(offer)

    quotes = []
    for name, offers in grouped.items():
        if len(offers) != package_count:
            logger.debug(f"Dropping {name}: offered for {len(offers)} of {package_count} packages")
            continue
        quotes.append(AggregatedQuote(
            service_name=name,
            total_price=sum((offer.price for offer in offers), Decimal("0")),
            currency=profile.home_currency,
            service_code=offers[0].code,
        ))

    return quotes
