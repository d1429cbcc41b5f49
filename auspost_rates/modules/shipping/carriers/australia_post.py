"""
Australia Post Carrier Implementation v1.0.0

- Implements BaseCarrier interface
- Issues one PAC query per package (concurrently) through AusPostClient
- Combines the per-package answers into whole-shipment rates
- Registered via @register_carrier decorator

International quotes are only available for shipments leaving Australia.
"""
import asyncio
import logging
from typing import Any, List, Optional, Sequence, Union

from auspost_rates.core.config import Settings, settings as app_settings
from auspost_rates.core.exceptions import (
    CarrierError,
    CarrierTransportError,
    ShippingOriginError,
)
from auspost_rates.models.carrier import CarrierCode, CarrierProfile, australia_post_profile
from auspost_rates.modules.shipping.carriers import register_carrier
from auspost_rates.modules.shipping.carriers.base import (
    BaseCarrier,
    Location,
    Package,
    RateEstimate,
    RateResponse,
)
from auspost_rates.services.auspost_client import AusPostClient, AusPostCredentials
from auspost_rates.services.auspost_rating import (
    QueryMode,
    RateRequest,
    aggregate_rates,
    build_rate_request,
    parse_response,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "success"

FetchResult = Union[str, CarrierTransportError]


def _failure(
    request: RateRequest,
    error: CarrierError,
    profile: CarrierProfile,
    raw_responses: Sequence[str] = (),
    payloads: Sequence = (),
    issued: bool = True,
    test: bool = False,
) -> RateResponse:
    logger.warning(f"{profile.name} rate request failed: {error.message}")
    return RateResponse(
        success=False,
        message=error.message,
        raw_responses=list(raw_responses),
        queries=list(request.queries) if issued else [],
        request=request.urls(profile.base_url) if issued else [],
        params={"responses": list(payloads)},
        test=test,
        error=error,
    )


def resolve_rate_request(
    request: RateRequest,
    raw_responses: Sequence[FetchResult],
    profile: CarrierProfile,
    test: bool = False,
) -> RateResponse:
    """
    Turn fetched PAC bodies into a RateResponse.

    Args:
        request: The built request
        raw_responses: One body (or transport error) per query, in query order
        profile: Carrier constants
        test: Carried onto the response

    Returns:
        RateResponse; never partially successful
    """
    if request.mode is QueryMode.INTERNATIONAL and not request.origin_is_home:
        error = ShippingOriginError(
            f"{profile.name} packages must originate in {profile.home_country_name}",
            details={"origin_country": request.origin.country_code},
        )
        return _failure(request, error, profile, issued=False, test=test)

    if len(raw_responses) != len(request.queries):
        raise ValueError(
            f"Expected {len(request.queries)} responses, got {len(raw_responses)}"
        )

    # One slot per package in every list; a package with no body gets ""
    bodies: List[str] = []
    payloads: List[Any] = []
    offers_per_package = []
    first_error: Optional[CarrierError] = None

    for result in raw_responses:
        if isinstance(result, CarrierTransportError):
            bodies.append("")
            payloads.append(None)
            first_error = first_error or result
            continue

        parsed = parse_response(result)
        bodies.append(result)
        payloads.append(parsed.payload)
        if not parsed.ok:
            first_error = first_error or parsed.error
        offers_per_package.append(parsed.offers)

    if first_error is not None:
        return _failure(request, first_error, profile, raw_responses=bodies, payloads=payloads, test=test)

    quotes = aggregate_rates(offers_per_package, profile)
    rates = [
        RateEstimate(
            origin=request.origin,
            destination=request.destination,
            carrier=profile.name,
            service_name=quote.service_name,
            total_price=quote.total_price,
            currency=quote.currency,
            service_code=quote.service_code,
        )
        for quote in quotes
    ]

    logger.info(
        f"{profile.name} {request.mode.value} rates: {len(rates)} service(s) "
        f"for {len(request.packages)} package(s)"
    )

    return RateResponse(
        success=True,
        message=SUCCESS_MESSAGE,
        rates=rates,
        raw_responses=bodies,
        queries=list(request.queries),
        request=request.urls(profile.base_url),
        params={"responses": payloads},
        test=test,
    )


@register_carrier(CarrierCode.AUSTRALIA_POST)
class AustraliaPostCarrier(BaseCarrier):
    """
    Australia Post shipping carrier.

    Options:
        key: PAC API key (falls back to AUSPOST_API_KEY)
        test: marks responses as test responses (falls back to AUSPOST_TEST_MODE)
    """

    def __init__(
        self,
        key: Optional[str] = None,
        test: Optional[bool] = None,
        profile: Optional[CarrierProfile] = None,
        client: Optional[AusPostClient] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or app_settings
        super().__init__(
            key=key or self._settings.AUSPOST_API_KEY,
            test=self._settings.AUSPOST_TEST_MODE if test is None else test,
        )
        self.profile = profile or australia_post_profile(self._settings)
        self._client = client

    @property
    def carrier_code(self) -> CarrierCode:
        return CarrierCode.AUSTRALIA_POST

    @property
    def carrier_name(self) -> str:
        return "Australia Post"

    @property
    def test(self) -> bool:
        return bool(self.get_option("test"))

    def requirements(self) -> List[str]:
        return ["key"]

    @classmethod
    def default_location(cls) -> Location:
        return Location(
            country="AU",
            city="Melbourne",
            address1="321 Exhibition St",
            state="VIC",
            postal_code="3000",
        )

    def _get_client(self) -> AusPostClient:
        """Get or create the PAC client."""
        if self._client is None:
            self._client = AusPostClient(AusPostCredentials(
                api_key=self.get_option("key"),
                timeout=self._settings.AUSPOST_HTTP_TIMEOUT,
            ))
        return self._client

    async def close(self):
        if self._client:
            await self._client.close()
            self._client = None

    async def find_rates(
        self,
        origin: Location,
        destination: Location,
        packages: Sequence[Package],
    ) -> RateResponse:
        """Get whole-shipment rates from Australia Post."""
        request = build_rate_request(origin, destination, packages, self.profile)

        raw_responses: List[FetchResult] = []
        if request.origin_is_home and request.queries:
            raw_responses = await self._commit(request.urls(self.profile.base_url))

        return resolve_rate_request(request, raw_responses, self.profile, test=self.test)

    async def _commit(self, urls: Sequence[str]) -> List[FetchResult]:
        """Fetch every URL concurrently; results keep URL order."""
        client = self._get_client()
        logger.info(f"Requesting {len(urls)} {self.carrier_name} quote(s)")

        results = await asyncio.gather(*(client.fetch(url) for url in urls), return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, CarrierTransportError):
                raise result
        return list(results)
