"""Exceptions raised by the fleet store, evaluator and codec."""

from typing import Any, Optional


class FleetError(Exception):
    """Base fleet exception."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class DuplicateCodeError(FleetError):
    """Raised when a vehicle code is already used (case-insensitive)."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Bus code '{code}' already exists")


class DuplicateNumberError(FleetError):
    """Raised when a vehicle number is already used."""

    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Bus number {number} already exists")


class NotFoundError(FleetError):
    """Raised when a vehicle number is unknown."""

    def __init__(self, number: Any = None, message: Optional[str] = None):
        self.number = number
        super().__init__(message or f"Bus {number} not found")


class PositionOutOfRangeError(NotFoundError):
    """Raised when a 1-based position is outside the fleet."""

    def __init__(self, position: int, count: int):
        self.position = position
        self.count = count
        if count:
            message = f"Position {position} out of range (1..{count})"
        else:
            message = f"Position {position} out of range (fleet is empty)"
        super().__init__(message=message)


class InvalidDateError(FleetError, ValueError):
    """Raised for a structurally invalid day/month/year."""


class InvalidFieldError(FleetError, ValueError):
    """Raised when a vehicle field value breaks a record rule."""


class InvalidRecordLineError(FleetError):
    """Raised when a persisted line cannot be parsed into a record."""

    def __init__(self, reason: str, line_no: Optional[int] = None):
        self.reason = reason
        self.line_no = line_no
        if line_no is not None:
            super().__init__(f"Line {line_no}: {reason}")
        else:
            super().__init__(reason)


class StorageUnavailableError(FleetError):
    """Raised when a data or report file cannot be read or written."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot access {path}: {reason}")
