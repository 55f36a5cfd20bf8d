"""Maintenance evaluation: due mileage, status bands and health score."""

from typing import TYPE_CHECKING

from .maintenance_due import MaintenanceDue
from .simple_date import SimpleDate, UNSET
from .status import Status

if TYPE_CHECKING:
    from .vehicle import VehicleRecord

DUE_SOON_KM = 500.0
MAX_USAGE_RATIO = 1.5
NO_INTERVAL_HEALTH = 50


def calc_due_mileage(last_service_mileage: float, interval_km: float) -> float:
    """Mileage at which the next service falls due."""
    return last_service_mileage + interval_km


def check_mileage_status(
    current: float, due: float, soon_threshold: float = DUE_SOON_KM
) -> Status:
    """Band a vehicle by mileage alone."""
    if current >= due:
        return Status.OVERDUE
    if due - current <= soon_threshold:
        return Status.DUE_SOON
    return Status.OK


def calc_days_since(last_service: SimpleDate, reference: SimpleDate) -> int:
    """Days between two dates on the coarse calendar."""
    return reference.to_days() - last_service.to_days()


def calc_health_score(
    current_mileage: float, last_service_mileage: float, interval_km: float
) -> int:
    """
    Remaining service life as 0-100.

    Usage is the share of the km interval consumed, capped at 150%; a
    vehicle with no km interval gets a neutral 50. The result is truncated,
    not rounded.
    """
    if interval_km <= 0:
        return NO_INTERVAL_HEALTH
    ratio = (current_mileage - last_service_mileage) / interval_km
    ratio = min(max(ratio, 0.0), MAX_USAGE_RATIO)
    # Round away float noise (e.g. 95.99999999) before truncating
    score = int(round((MAX_USAGE_RATIO - ratio) / MAX_USAGE_RATIO * 100, 9))
    return min(max(score, 0), 100)


def evaluate(
    record: "VehicleRecord",
    reference_date: SimpleDate,
    due_soon_km: float = DUE_SOON_KM,
) -> MaintenanceDue:
    """
    Calculate maintenance status for a vehicle as of reference_date.

    Logic:
    - Due at last_service_mileage + service_interval_km
    - OVERDUE when current mileage reaches the due mileage, or when a day
      interval is configured and at least that many days have passed
    - DUE_SOON when within due_soon_km of the due mileage
    - Next due date only exists when a day interval is configured

    Does not modify the record; see VehicleRecord.apply().
    """
    due_mileage = calc_due_mileage(
        record.last_service_mileage, record.service_interval_km
    )
    km_left = due_mileage - record.current_mileage
    status = check_mileage_status(record.current_mileage, due_mileage, due_soon_km)

    next_due_date = UNSET
    if (
        record.service_interval_days > 0
        and record.last_service_date.is_valid
        and reference_date.is_valid
    ):
        days_since = calc_days_since(record.last_service_date, reference_date)
        if days_since >= record.service_interval_days:
            status = Status.OVERDUE
        next_due_date = record.last_service_date.add_days(
            record.service_interval_days
        )

    return MaintenanceDue(
        status=status,
        km_left=km_left,
        health_score=calc_health_score(
            record.current_mileage,
            record.last_service_mileage,
            record.service_interval_km,
        ),
        next_due_date=next_due_date,
    )
