"""Shared fixtures for relay tests."""

import pytest

from trackrelay.models import TrackingSuccess
from trackrelay.tracking.carrier_api import CarrierAPI
from trackrelay.tracking.exceptions import TransportError


class FakeCarrier(CarrierAPI):
    """Carrier stand-in: numbers listed in `failures` raise, others succeed."""

    def __init__(self, failures: dict[str, Exception] = None):
        self.failures = failures or {}
        self.calls: list[str] = []

    def get_carrier_name(self) -> str:
        return "fake"

    async def get_tracking(self, tracking_number: str) -> TrackingSuccess:
        self.calls.append(tracking_number)
        if tracking_number in self.failures:
            raise self.failures[tracking_number]
        return TrackingSuccess(
            tracking_number=tracking_number,
            last_status="In transit",
            last_update_local="2024-01-01 10:00",
            location="Memphis, TN, US",
            delivered=False,
            service="FedEx Ground",
        )


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


@pytest.fixture
def fake_carrier():
    return FakeCarrier(failures={"999": TransportError(503, "999")})


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def delivered_payload() -> dict:
    """Carrier response for a package delivered in Memphis."""
    return {
        "TrackPackagesResponse": {
            "successful": True,
            "packageList": [
                {
                    "trackingNbr": "000000000000",
                    "isDelivered": True,
                    "scanEventList": [
                        {
                            "status": "Delivered",
                            "date": "2024-01-01",
                            "time": "10:00",
                            "scanLocation": "Memphis, TN, US",
                        },
                        {
                            "status": "On FedEx vehicle for delivery",
                            "date": "2024-01-01",
                            "time": "07:12",
                            "scanLocation": "Memphis, TN, US",
                        },
                    ],
                }
            ],
        }
    }


@pytest.fixture
def make_carrier():
    """Build a FakeCarrier with specific failures."""
    return FakeCarrier
