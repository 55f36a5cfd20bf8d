"""
Bus fleet maintenance tracking models.

This package provides the pieces of the maintenance tracker:
- Status: Maintenance bands (OK, DUE_SOON, OVERDUE)
- SimpleDate: Day/month/year with the coarse 30-day-month calendar
- VehicleRecord: One bus with service data and cached evaluation
- MaintenanceDue: Calculated maintenance status
- FleetStore: Ordered fleet with uniqueness rules
- loader: Text-file persistence and CSV report export
"""

from .status import Status
from .errors import (
    FleetError,
    DuplicateCodeError,
    DuplicateNumberError,
    NotFoundError,
    PositionOutOfRangeError,
    InvalidDateError,
    InvalidFieldError,
    InvalidRecordLineError,
    StorageUnavailableError,
)
from .simple_date import SimpleDate, UNSET
from .maintenance_due import MaintenanceDue
from .calculations import (
    DUE_SOON_KM,
    calc_due_mileage,
    calc_days_since,
    calc_health_score,
    check_mileage_status,
    evaluate,
)
from .vehicle import VehicleRecord
from .store import FleetStore, FleetSummary
from .loader import (
    REPORT_HEADER,
    deserialize_fleet,
    export_report,
    format_record_line,
    load_fleet,
    parse_record_line,
    render_report_rows,
    save_fleet,
    serialize_fleet,
)

__all__ = [
    "Status",
    "FleetError",
    "DuplicateCodeError",
    "DuplicateNumberError",
    "NotFoundError",
    "PositionOutOfRangeError",
    "InvalidDateError",
    "InvalidFieldError",
    "InvalidRecordLineError",
    "StorageUnavailableError",
    "SimpleDate",
    "UNSET",
    "MaintenanceDue",
    "DUE_SOON_KM",
    "calc_due_mileage",
    "calc_days_since",
    "calc_health_score",
    "check_mileage_status",
    "evaluate",
    "VehicleRecord",
    "FleetStore",
    "FleetSummary",
    "REPORT_HEADER",
    "deserialize_fleet",
    "export_report",
    "format_record_line",
    "load_fleet",
    "parse_record_line",
    "render_report_rows",
    "save_fleet",
    "serialize_fleet",
]
