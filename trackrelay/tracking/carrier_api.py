"""
Carrier API integrations for tracking information.
Talks to the FedEx web-tracking endpoint used by the public tracking page.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional
import aiohttp
from loguru import logger

from trackrelay.config import DEFAULT_CARRIER_URL
from trackrelay.models import CarrierPackage, TrackingSuccess
from trackrelay.tracking.exceptions import NoDataError, TransportError
from trackrelay.tracking.extraction import normalize_package


class CarrierAPI(ABC):
    """Base class for carrier API integrations."""

    @abstractmethod
    async def get_tracking(self, tracking_number: str) -> TrackingSuccess:
        """
        Get tracking information for a shipment.

        Raises on any failure; callers turn exceptions into failure records.
        """
        pass

    @abstractmethod
    def get_carrier_name(self) -> str:
        """Get the carrier name."""
        pass


class FedExAPI(CarrierAPI):
    """
    FedEx web-tracking integration.

    Uses the same endpoint the public FedEx tracking page calls, so no
    developer credentials are needed. The endpoint is internal to FedEx:
    the request has to look like it came from the tracking page (form body,
    browser headers) or it may be rejected.
    """

    TRACK_URL = DEFAULT_CARRIER_URL

    HEADERS = {
        "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
        "Accept": "application/json, text/javascript, */*; q=0.01",
        "Origin": "https://www.fedex.com",
        "Referer": "https://www.fedex.com/fedextrack/",
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/119 Safari/537.36"
        ),
    }

    def __init__(
        self,
        track_url: Optional[str] = None,
        locale: str = "es_MX",
        timeout: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.track_url = track_url or self.TRACK_URL
        self.locale = locale
        self.timeout = timeout
        self._session = session

    def get_carrier_name(self) -> str:
        return "fedex"

    def build_payload(self, tracking_number: str) -> dict[str, Any]:
        """Build the TrackPackagesRequest structure for one number."""
        return {
            "TrackPackagesRequest": {
                "appType": "wtrk",
                "uniqueKey": "",
                "processingParameters": {
                    "anonymousTransaction": True,
                    "clientId": "WTRK",
                    "returnDetailedErrors": True,
                    "returnLocalizedDateTime": True,
                },
                "trackingInfoList": [
                    {
                        "trackNumberInfo": {
                            "trackingNumber": tracking_number,
                            "trackingQualifier": "",
                            "trackingCarrier": "",
                        }
                    }
                ],
            }
        }

    def build_form(self, tracking_number: str) -> dict[str, str]:
        """Form fields posted to the tracking endpoint."""
        return {
            "data": json.dumps(self.build_payload(tracking_number)),
            "action": "trackpackages",
            "locale": self.locale,
            "format": "json",
            "version": "1",
        }

    async def get_tracking(self, tracking_number: str) -> TrackingSuccess:
        """Get tracking information from FedEx."""
        if self._session is not None:
            data = await self._post(self._session, tracking_number)
        else:
            timeout = aiohttp.ClientTimeout(total=self.timeout) if self.timeout else None
            async with aiohttp.ClientSession(timeout=timeout) as session:
                data = await self._post(session, tracking_number)

        return self.parse_response(tracking_number, data)

    async def _post(self, session: aiohttp.ClientSession, tracking_number: str) -> Any:
        logger.debug(f"FedEx lookup: {tracking_number}")

        async with session.post(
            self.track_url,
            data=self.build_form(tracking_number),
            headers=self.HEADERS,
        ) as resp:
            if not 200 <= resp.status < 300:
                logger.warning(f"FedEx tracking failed for {tracking_number}: HTTP {resp.status}")
                raise TransportError(resp.status, tracking_number)

            # The endpoint does not always label its JSON as such
            return await resp.json(content_type=None)

    def parse_response(self, tracking_number: str, data: Any) -> TrackingSuccess:
        """Parse a FedEx TrackPackagesResponse into a tracking record."""
        package = None

        if isinstance(data, dict):
            response = data.get("TrackPackagesResponse")
            if isinstance(response, dict):
                packages = response.get("packageList")
                if isinstance(packages, list) and packages:
                    package = packages[0]

        if not isinstance(package, dict):
            raise NoDataError(tracking_number)

        return normalize_package(tracking_number, CarrierPackage.model_validate(package))
