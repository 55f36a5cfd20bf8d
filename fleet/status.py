"""Status enum for maintenance urgency bands."""

from enum import Enum


class Status(Enum):
    """Maintenance status bands. Values are the persisted integer codes."""

    OK = 0
    DUE_SOON = 1
    OVERDUE = 2

    @property
    def label(self) -> str:
        """Display label used in tables and reports."""
        return self.name.replace("_", " ")

    @property
    def is_due(self) -> bool:
        return self in (Status.DUE_SOON, Status.OVERDUE)

    @classmethod
    def from_int(cls, value: int) -> "Status":
        """Decode a persisted status code, rejecting unknown values."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown status code: {value}") from None
