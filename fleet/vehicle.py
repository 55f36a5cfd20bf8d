"""VehicleRecord - one tracked bus with its service data and derived status."""

import math
from dataclasses import dataclass, field
from typing import Optional

from .calculations import DUE_SOON_KM, evaluate
from .errors import InvalidDateError, InvalidFieldError
from .maintenance_due import MaintenanceDue, NEUTRAL
from .simple_date import SimpleDate, UNSET
from .status import Status

MAX_CODE_LENGTH = 19
MAX_DRIVER_NAME_LENGTH = 49

_FORBIDDEN_TEXT = ("|", "\n", "\r")


def _check_text(name: str, value: str, max_len: int) -> None:
    if not value or not value.strip():
        raise InvalidFieldError(f"{name} cannot be empty")
    if len(value) > max_len:
        raise InvalidFieldError(f"{name} is longer than {max_len} characters")
    if any(ch in value for ch in _FORBIDDEN_TEXT):
        raise InvalidFieldError(f"{name} cannot contain '|' or line breaks")


def is_valid_driver_name(name: str) -> bool:
    """A driver name needs at least one character that is not a digit or space."""
    return any(not (ch.isdigit() or ch.isspace()) for ch in name or "")


@dataclass
class VehicleRecord:
    """Complete bus record: identity, service inputs and cached evaluation."""

    code: str
    number: int
    driver_name: str
    last_service_date: SimpleDate
    current_mileage: float
    last_service_mileage: float
    service_interval_km: float
    service_interval_days: int = 0
    service_history_count: int = 0
    avg_daily_km: float = 0.0
    fuel_efficiency: float = 0.0
    # Derived fields, refreshed by apply()
    status: Status = Status.OK
    km_left: float = 0.0
    health_score: int = 100
    next_due_date: SimpleDate = field(default=UNSET)

    def __post_init__(self):
        self.check()

    def check(self) -> None:
        """Normalize the code to uppercase and enforce the field rules."""
        _check_text("Bus code", self.code, MAX_CODE_LENGTH)
        self.code = self.code.strip().upper()
        _check_text("Driver name", self.driver_name, MAX_DRIVER_NAME_LENGTH)
        if not is_valid_driver_name(self.driver_name):
            raise InvalidFieldError("Driver name cannot be only numbers")
        if self.number <= 0:
            raise InvalidFieldError("Bus number must be positive")
        if not self.last_service_date.is_valid:
            raise InvalidDateError(
                f"Invalid last service date {self.last_service_date.day}/"
                f"{self.last_service_date.month}/{self.last_service_date.year}"
            )
        for name in (
            "current_mileage",
            "last_service_mileage",
            "service_interval_km",
            "service_interval_days",
            "service_history_count",
            "avg_daily_km",
            "fuel_efficiency",
        ):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidFieldError(f"{name} must be a finite number")
            if value < 0:
                raise InvalidFieldError(f"{name} cannot be negative")
        if not math.isfinite(self.km_left):
            raise InvalidFieldError("km_left must be a finite number")

    @property
    def due_mileage(self) -> float:
        return self.last_service_mileage + self.service_interval_km

    @property
    def maintenance(self) -> MaintenanceDue:
        """Derived fields as of the last evaluation."""
        return MaintenanceDue(
            status=self.status,
            km_left=self.km_left,
            health_score=self.health_score,
            next_due_date=self.next_due_date,
        )

    def apply(self, due: MaintenanceDue) -> None:
        """Store an evaluation result on the record."""
        self.status = due.status
        self.km_left = due.km_left
        self.health_score = due.health_score
        self.next_due_date = due.next_due_date

    def reset_derived(self) -> None:
        self.apply(NEUTRAL)

    def refresh(
        self,
        reference_date: SimpleDate,
        due_soon_km: Optional[float] = None,
    ) -> MaintenanceDue:
        """Re-evaluate against reference_date and store the result."""
        due = evaluate(
            self,
            reference_date,
            DUE_SOON_KM if due_soon_km is None else due_soon_km,
        )
        self.apply(due)
        return due
