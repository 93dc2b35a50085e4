"""
Data models for the track relay.
Defines the request/response envelopes, the normalized tracking records
and a lenient view of the carrier's tracking payload.

Relay flow:
1. Client posts a batch of tracking numbers
2. Numbers are trimmed and deduplicated
3. Each number is looked up on the carrier, one at a time
4. Carrier packages are normalized into flat records
5. Records are returned in input order with per-item ok flags
"""

from datetime import datetime
from typing import Any, Literal, Optional, Union
from pydantic import BaseModel, Field, ValidationError, field_validator


# ===== Relay records =====

class TrackingSuccess(BaseModel):
    """Normalized tracking record for a package found on the carrier."""

    ok: Literal[True] = True
    tracking_number: str = Field(alias="trackingNumber")
    last_status: str = Field(alias="lastStatus")
    last_update_local: str = Field(default="", alias="lastUpdateLocal")  # carrier formatted, opaque
    location: str = ""
    delivered: bool = False
    service: str = ""

    class Config:
        populate_by_name = True


class TrackingFailure(BaseModel):
    """Per-item lookup failure."""

    ok: Literal[False] = False
    tracking_number: str = Field(alias="trackingNumber")
    error: str

    class Config:
        populate_by_name = True


TrackingResult = Union[TrackingSuccess, TrackingFailure]


class TrackRequest(BaseModel):
    """Body of POST /api/track. `numbers` is deliberately untyped."""

    numbers: Any = None


class TrackResponse(BaseModel):
    """Envelope returned for a batch."""

    count: int
    results: list[TrackingResult] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[TrackingResult]) -> "TrackResponse":
        return cls(count=len(results), results=results)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


class ErrorResponse(BaseModel):
    error: str


class HealthStatus(BaseModel):
    status: str = "healthy"
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    version: str


# ===== Carrier payload =====

class _LenientModel(BaseModel):
    """
    Base for carrier payload models.

    The carrier's JSON contract is undocumented, so every field is optional,
    unknown keys are ignored and a value of the wrong shape reads as missing
    instead of failing the whole package.
    """

    @field_validator("*", mode="wrap")
    @classmethod
    def _drop_invalid(cls, value, handler):
        try:
            return handler(value)
        except ValidationError:
            return None

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


class Localization(_LenientModel):
    message: Optional[str] = None


class ScanEvent(_LenientModel):
    """A carrier checkpoint in a package's history."""

    status: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    scan_location: Optional[str] = Field(default=None, alias="scanLocation")


class CarrierPackage(_LenientModel):
    """One entry of TrackPackagesResponse.packageList."""

    # Entries are checked one at a time, see last_event
    scan_event_list: Optional[list[Any]] = Field(default=None, alias="scanEventList")
    key_status: Optional[str] = Field(default=None, alias="keyStatus")
    localization: Optional[Localization] = None

    display_act_delivery_dt: Optional[str] = Field(default=None, alias="displayActDeliveryDt")
    display_est_delivery_dt: Optional[str] = Field(default=None, alias="displayEstDeliveryDt")

    scan_location_city: Optional[str] = Field(default=None, alias="scanLocationCity")
    scan_location_state: Optional[str] = Field(default=None, alias="scanLocationStateOrProvinceCode")
    scan_location_country: Optional[str] = Field(default=None, alias="scanLocationCountryCode")

    is_delivered: Any = Field(default=None, alias="isDelivered")

    service_type_desc: Optional[str] = Field(default=None, alias="serviceTypeDesc")
    service_commit_message: Optional[str] = Field(default=None, alias="serviceCommitMessage")

    @property
    def last_event(self) -> Optional[ScanEvent]:
        """Most recent scan event; the carrier lists newest first."""
        if self.scan_event_list and isinstance(self.scan_event_list[0], dict):
            return ScanEvent.model_validate(self.scan_event_list[0])
        return None
