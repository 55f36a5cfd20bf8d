"""MaintenanceDue dataclass for calculated maintenance status."""

from dataclasses import dataclass, field

from .simple_date import SimpleDate, UNSET
from .status import Status


@dataclass(frozen=True)
class MaintenanceDue:
    """Derived maintenance fields for one vehicle as of a reference date."""

    status: Status = Status.OK
    km_left: float = 0.0
    health_score: int = 100
    next_due_date: SimpleDate = field(default=UNSET)

    @property
    def is_due(self) -> bool:
        return self.status.is_due


# Derived values a freshly added record starts with
NEUTRAL = MaintenanceDue()
