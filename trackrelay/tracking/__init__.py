"""
Tracking integration module.
Pulls tracking information from FedEx and runs paced batch lookups.
"""

from trackrelay.tracking.carrier_api import CarrierAPI, FedExAPI
from trackrelay.tracking.exceptions import NoDataError, TrackingError, TransportError
from trackrelay.tracking.tracking_manager import TrackingManager, sanitize_numbers

__all__ = [
    "CarrierAPI",
    "FedExAPI",
    "TrackingManager",
    "sanitize_numbers",
    "TrackingError",
    "TransportError",
    "NoDataError",
]
