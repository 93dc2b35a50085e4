"""
Field extraction for carrier packages.

Each normalized field is resolved by an ordered tuple of strategies. A
strategy takes the package and its most recent scan event (or None) and
returns a string or None; the first non-empty result wins.
"""

from typing import Callable, Optional, Sequence

from trackrelay.models import CarrierPackage, ScanEvent, TrackingSuccess


Strategy = Callable[[CarrierPackage, Optional[ScanEvent]], Optional[str]]

# Status shown when the carrier gives nothing usable
NO_INFORMATION = "Sin información"


def first_present(
    strategies: Sequence[Strategy],
    package: CarrierPackage,
    event: Optional[ScanEvent],
    default: str = "",
) -> str:
    """Evaluate strategies in order and return the first non-empty string."""
    for strategy in strategies:
        value = strategy(package, event)
        if value:
            return value
    return default


# ===== Status =====

def _event_status(package, event):
    return event.status if event else None


def _key_status(package, event):
    return package.key_status


def _localized_message(package, event):
    return package.localization.message if package.localization else None


STATUS_STRATEGIES: tuple[Strategy, ...] = (
    _event_status,
    _key_status,
    _localized_message,
)


# ===== Last update =====

def _event_timestamp(package, event):
    if not event:
        return None
    return " ".join(part for part in (event.date, event.time) if part)


def _actual_delivery(package, event):
    return package.display_act_delivery_dt


def _estimated_delivery(package, event):
    return package.display_est_delivery_dt


LAST_UPDATE_STRATEGIES: tuple[Strategy, ...] = (
    _event_timestamp,
    _actual_delivery,
    _estimated_delivery,
)


# ===== Location =====

def _event_location(package, event):
    return event.scan_location if event else None


def _package_location(package, event):
    parts = (
        package.scan_location_city,
        package.scan_location_state,
        package.scan_location_country,
    )
    return ", ".join(part for part in parts if part)


LOCATION_STRATEGIES: tuple[Strategy, ...] = (
    _event_location,
    _package_location,
)


# ===== Service =====

def _service_type(package, event):
    return package.service_type_desc


def _service_commit(package, event):
    return package.service_commit_message


SERVICE_STRATEGIES: tuple[Strategy, ...] = (
    _service_type,
    _service_commit,
)


def normalize_package(tracking_number: str, package: CarrierPackage) -> TrackingSuccess:
    """Flatten a carrier package into a tracking record."""
    event = package.last_event

    return TrackingSuccess(
        tracking_number=tracking_number,
        last_status=first_present(STATUS_STRATEGIES, package, event, NO_INFORMATION),
        last_update_local=first_present(LAST_UPDATE_STRATEGIES, package, event),
        location=first_present(LOCATION_STRATEGIES, package, event),
        delivered=bool(package.is_delivered),
        service=first_present(SERVICE_STRATEGIES, package, event),
    )
