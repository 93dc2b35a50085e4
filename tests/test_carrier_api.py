"""Tests for the FedEx carrier client against a local stand-in server."""

import json

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from trackrelay.tracking.carrier_api import FedExAPI
from trackrelay.tracking.exceptions import NoDataError, TransportError


class FedExStub:
    """Local HTTP server standing in for the FedEx tracking endpoint."""

    def __init__(self):
        self.status = 200
        self.body = "{}"
        self.requests: list[dict] = []
        self.server = None

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.requests.append({"form": dict(form), "headers": dict(request.headers)})
        return web.Response(status=self.status, text=self.body, content_type="application/json")

    def respond(self, payload, status: int = 200):
        self.status = status
        self.body = payload if isinstance(payload, str) else json.dumps(payload)

    @property
    def url(self) -> str:
        return str(self.server.make_url("/trackingCal/track"))


@pytest_asyncio.fixture
async def fedex_stub():
    stub = FedExStub()
    app = web.Application()
    app.router.add_post("/trackingCal/track", stub.handle)

    stub.server = test_utils.TestServer(app)
    await stub.server.start_server()
    yield stub
    await stub.server.close()


@pytest.fixture
def fedex(fedex_stub):
    return FedExAPI(track_url=fedex_stub.url)


class TestRequest:
    """Tests for the outgoing request shape."""

    def test_payload(self):
        payload = FedExAPI().build_payload("123456789012")
        request = payload["TrackPackagesRequest"]

        assert request["appType"] == "wtrk"
        assert request["processingParameters"]["anonymousTransaction"] is True
        assert request["processingParameters"]["clientId"] == "WTRK"
        assert request["trackingInfoList"] == [
            {
                "trackNumberInfo": {
                    "trackingNumber": "123456789012",
                    "trackingQualifier": "",
                    "trackingCarrier": "",
                }
            }
        ]

    def test_default_url(self):
        assert FedExAPI().track_url == "https://www.fedex.com/trackingCal/track"

    @pytest.mark.asyncio
    async def test_form_and_headers(self, fedex, fedex_stub, delivered_payload):
        """Test the request mimics the public tracking page."""
        fedex_stub.respond(delivered_payload)

        await fedex.get_tracking("000000000000")

        sent = fedex_stub.requests[0]
        assert sent["form"]["action"] == "trackpackages"
        assert sent["form"]["locale"] == "es_MX"
        assert sent["form"]["format"] == "json"
        assert sent["form"]["version"] == "1"
        assert json.loads(sent["form"]["data"]) == fedex.build_payload("000000000000")

        assert sent["headers"]["Origin"] == "https://www.fedex.com"
        assert sent["headers"]["Referer"] == "https://www.fedex.com/fedextrack/"
        assert sent["headers"]["Content-Type"].startswith("application/x-www-form-urlencoded")
        assert "Mozilla/5.0" in sent["headers"]["User-Agent"]


class TestResponses:
    """Tests for response handling."""

    @pytest.mark.asyncio
    async def test_delivered(self, fedex, fedex_stub, delivered_payload):
        fedex_stub.respond(delivered_payload)

        record = await fedex.get_tracking("000000000000")

        assert record.model_dump(by_alias=True) == {
            "ok": True,
            "trackingNumber": "000000000000",
            "lastStatus": "Delivered",
            "lastUpdateLocal": "2024-01-01 10:00",
            "location": "Memphis, TN, US",
            "delivered": True,
            "service": "",
        }

    @pytest.mark.asyncio
    async def test_identical_responses_identical_records(self, fedex, fedex_stub, delivered_payload):
        fedex_stub.respond(delivered_payload)

        first = await fedex.get_tracking("000000000000")
        second = await fedex.get_tracking("000000000000")

        assert first == second

    @pytest.mark.asyncio
    async def test_non_2xx_raises_transport_error(self, fedex, fedex_stub):
        fedex_stub.respond({"error": "blocked"}, status=403)

        with pytest.raises(TransportError) as exc_info:
            await fedex.get_tracking("123")

        assert exc_info.value.status == 403
        assert str(exc_info.value) == "HTTP 403"

    @pytest.mark.asyncio
    async def test_empty_package_list(self, fedex, fedex_stub):
        fedex_stub.respond({"TrackPackagesResponse": {"packageList": []}})

        with pytest.raises(NoDataError, match="No data"):
            await fedex.get_tracking("123")

    @pytest.mark.asyncio
    async def test_malformed_json(self, fedex, fedex_stub):
        fedex_stub.respond("<html>Access Denied</html>")

        with pytest.raises(ValueError):
            await fedex.get_tracking("123")

    @pytest.mark.asyncio
    async def test_shared_session(self, fedex_stub, delivered_payload):
        import aiohttp

        fedex_stub.respond(delivered_payload)

        async with aiohttp.ClientSession() as session:
            fedex = FedExAPI(track_url=fedex_stub.url, session=session)
            record = await fedex.get_tracking("000000000000")

        assert record.delivered is True


class TestParseResponse:
    """Tests for parsing without the network."""

    @pytest.mark.parametrize("data", [
        None,
        [],
        {},
        {"TrackPackagesResponse": None},
        {"TrackPackagesResponse": {"packageList": None}},
        {"TrackPackagesResponse": {"packageList": [None]}},
    ])
    def test_missing_package(self, data):
        with pytest.raises(NoDataError):
            FedExAPI().parse_response("123", data)

    def test_empty_package_gives_sentinel_record(self):
        record = FedExAPI().parse_response("123", {"TrackPackagesResponse": {"packageList": [{}]}})

        assert record.last_status == "Sin información"
        assert record.delivered is False
