"""
Tracking Manager.
Runs a batch of tracking lookups against a carrier, one at a time.
"""

import asyncio
import uuid
from typing import Any, Awaitable, Callable, Optional

from trackrelay.logging_config import BatchLogger
from trackrelay.models import TrackingFailure, TrackingResult, TrackResponse
from trackrelay.tracking.carrier_api import CarrierAPI


def _as_text(value: Any) -> str:
    """String form of a JSON value as the browser client would write it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def sanitize_numbers(raw: Any) -> list[str]:
    """
    Clean a client supplied list of tracking numbers.

    Anything that is not a list counts as empty. Each entry is converted to
    a string and trimmed, blanks are dropped and duplicates removed keeping
    the first occurrence.
    """
    if not isinstance(raw, (list, tuple)):
        return []

    cleaned = (_as_text(item).strip() for item in raw)
    return list(dict.fromkeys(n for n in cleaned if n))


class TrackingManager:
    """
    Manages batch tracking lookups for one carrier.

    Lookups are strictly sequential with a fixed pause after each one to
    stay under the carrier's unannounced rate limits. A failing lookup is
    recorded as a failure entry and never stops the rest of the batch.
    """

    def __init__(
        self,
        carrier: CarrierAPI,
        delay_seconds: float = 0.8,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        pause_after_last: bool = True,
    ):
        self.carrier = carrier
        self.delay_seconds = delay_seconds
        self.pause_after_last = pause_after_last
        self._sleep = sleep

    async def track_one(self, tracking_number: str, log: Optional[BatchLogger] = None) -> TrackingResult:
        """
        Look up a single tracking number.

        Returns:
            TrackingSuccess, or TrackingFailure carrying the error message
        """
        log = log or BatchLogger(str(uuid.uuid4()))

        try:
            result = await self.carrier.get_tracking(tracking_number)
            log.info(f"Tracking {tracking_number}: {result.last_status}")
            return result

        except Exception as e:
            message = str(e) or type(e).__name__
            log.warning(f"Tracking lookup failed for {tracking_number}: {message}")
            return TrackingFailure(tracking_number=tracking_number, error=message)

    async def track_batch(self, raw_numbers: Any) -> TrackResponse:
        """
        Look up every distinct tracking number in a client batch.

        Args:
            raw_numbers: The client's `numbers` value, unvalidated

        Returns:
            TrackResponse with one result per sanitized number, in order
        """
        numbers = sanitize_numbers(raw_numbers)
        log = BatchLogger(str(uuid.uuid4()))
        log.info(f"Tracking batch of {len(numbers)} number(s) via {self.carrier.get_carrier_name()}")

        results: list[TrackingResult] = []

        for index, number in enumerate(numbers):
            results.append(await self.track_one(number, log))

            is_last = index == len(numbers) - 1
            if self.delay_seconds > 0 and (self.pause_after_last or not is_last):
                await self._sleep(self.delay_seconds)

        response = TrackResponse.from_results(results)
        log.info(f"Batch finished: {response.count - response.failed} ok, {response.failed} failed")
        return response
