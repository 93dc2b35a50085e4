"""Errors raised while looking up a single tracking number."""

from typing import Optional


class TrackingError(Exception):
    """Base class for carrier lookup failures."""

    def __init__(self, message: str, tracking_number: Optional[str] = None):
        super().__init__(message)
        self.tracking_number = tracking_number


class TransportError(TrackingError):
    """The carrier answered with a non-2xx HTTP status."""

    def __init__(self, status: int, tracking_number: Optional[str] = None):
        super().__init__(f"HTTP {status}", tracking_number)
        self.status = status


class NoDataError(TrackingError):
    """The carrier response carried no package entry."""

    def __init__(self, tracking_number: Optional[str] = None):
        super().__init__("No data for package (sin datos del paquete)", tracking_number)
