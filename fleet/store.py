"""FleetStore - the ordered collection of vehicle records."""

import copy
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from .calculations import DUE_SOON_KM
from .errors import (
    DuplicateCodeError,
    DuplicateNumberError,
    InvalidDateError,
    NotFoundError,
    PositionOutOfRangeError,
)
from .logger import get_logger
from .simple_date import SimpleDate
from .status import Status
from .vehicle import VehicleRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class FleetSummary:
    """Vehicle counts per status band."""

    total: int
    ok: int
    due_soon: int
    overdue: int

    @property
    def needs_attention(self) -> bool:
        return bool(self.due_soon or self.overdue)


class FleetStore:
    """
    Ordered fleet with unique codes (case-insensitive) and unique numbers.

    Positions are 1-based in every public method. Each mutation checks
    uniqueness and applies the change in one step; the store assumes a single
    caller. Sharing it between threads or processes would need one lock (or
    transaction) spanning each check-and-mutate.
    """

    def __init__(
        self,
        records: Optional[List[VehicleRecord]] = None,
        reference_date: Optional[SimpleDate] = None,
        due_soon_km: float = DUE_SOON_KM,
    ):
        self._records: List[VehicleRecord] = []
        self.due_soon_km = due_soon_km
        self._reference_date: Optional[SimpleDate] = None
        for record in records or []:
            self.insert(record, reset_derived=False)
        if reference_date is not None:
            self.set_reference_date(reference_date)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[VehicleRecord]:
        return iter(self._records)

    def count(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[VehicleRecord]:
        """Snapshot of the records in fleet order."""
        return list(self._records)

    @property
    def reference_date(self) -> Optional[SimpleDate]:
        return self._reference_date

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def find_by_number(self, number: int) -> Optional[int]:
        """0-based index of the first record with this number, or None."""
        for i, record in enumerate(self._records):
            if record.number == number:
                return i
        return None

    def get_by_number(self, number: int) -> VehicleRecord:
        index = self.find_by_number(number)
        if index is None:
            raise NotFoundError(number)
        return self._records[index]

    def get_at_position(self, position: int) -> VehicleRecord:
        return self._records[self._index_for(position)]

    def code_exists(self, code: str, exclude_index: Optional[int] = None) -> bool:
        """Case-insensitive code check, skipping the 0-based exclude_index."""
        wanted = code.strip().upper()
        for i, record in enumerate(self._records):
            if i == exclude_index:
                continue
            if record.code.upper() == wanted:
                return True
        return False

    def number_exists(self, number: int, exclude_index: Optional[int] = None) -> bool:
        for i, record in enumerate(self._records):
            if i == exclude_index:
                continue
            if record.number == number:
                return True
        return False

    def _check_unique(
        self, record: VehicleRecord, exclude_index: Optional[int] = None
    ) -> None:
        if self.code_exists(record.code, exclude_index):
            raise DuplicateCodeError(record.code)
        if self.number_exists(record.number, exclude_index):
            raise DuplicateNumberError(record.number)

    def _index_for(self, position: int) -> int:
        if position < 1 or position > len(self._records):
            raise PositionOutOfRangeError(position, len(self._records))
        return position - 1

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert(self, record: VehicleRecord, reset_derived: bool = True) -> None:
        """
        Append a record after re-checking code and number uniqueness.

        New records start from neutral derived values (OK, health 100) and are
        evaluated straight away when a reference date is set. Loading passes
        reset_derived=False to keep the persisted evaluation.
        """
        record.check()
        self._check_unique(record)
        if reset_derived:
            record.reset_derived()
        self._records.append(record)
        if reset_derived:
            self._refresh(record)

    def update_at_position(
        self, position: int, mutator: Callable[[VehicleRecord], None]
    ) -> VehicleRecord:
        """
        Apply mutator to the record at a 1-based position.

        The mutator works on a copy. The copy must pass the field rules and
        uniqueness checks (ignoring its own position) before it replaces the
        stored record, so a rejected edit leaves the fleet unchanged.
        """
        index = self._index_for(position)
        candidate = copy.copy(self._records[index])
        mutator(candidate)
        candidate.check()
        self._check_unique(candidate, exclude_index=index)
        self._records[index] = candidate
        self._refresh(candidate)
        return candidate

    def update_mileage(self, number: int, mileage: float) -> VehicleRecord:
        """Set current mileage for the bus with this number."""
        index = self.find_by_number(number)
        if index is None:
            raise NotFoundError(number)

        def set_mileage(record: VehicleRecord) -> None:
            record.current_mileage = mileage

        return self.update_at_position(index + 1, set_mileage)

    def delete_by_number(self, number: int) -> VehicleRecord:
        """Remove the bus with this number, keeping the order of the rest."""
        index = self.find_by_number(number)
        if index is None:
            raise NotFoundError(number)
        return self._records.pop(index)

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def set_reference_date(self, reference_date: SimpleDate) -> None:
        """Change the as-of date and re-evaluate every record."""
        if not reference_date.is_valid:
            raise InvalidDateError(f"Invalid reference date {reference_date}")
        self._reference_date = reference_date
        self.evaluate_all()

    def evaluate_all(self) -> None:
        """Re-run the evaluator for every record against the reference date."""
        if self._reference_date is None:
            return
        for record in self._records:
            self._refresh(record)

    def _refresh(self, record: VehicleRecord) -> None:
        if self._reference_date is None:
            return
        due = record.refresh(self._reference_date, self.due_soon_km)
        if due.status == Status.OVERDUE:
            logger.info(
                "Bus %d [%s] overdue: current=%.1f km, km left=%.1f",
                record.number,
                record.code,
                record.current_mileage,
                due.km_left,
            )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def due_records(self) -> List[VehicleRecord]:
        """Records that are DUE_SOON or OVERDUE, in fleet order."""
        return [r for r in self._records if r.status.is_due]

    def records_with_status(self, status: Status) -> List[VehicleRecord]:
        return [r for r in self._records if r.status == status]

    def sorted_by_km_left(self) -> List[VehicleRecord]:
        """Records ordered by remaining km, most urgent first (stable)."""
        return sorted(self._records, key=lambda r: r.km_left)

    def summary(self) -> FleetSummary:
        return FleetSummary(
            total=len(self._records),
            ok=len(self.records_with_status(Status.OK)),
            due_soon=len(self.records_with_status(Status.DUE_SOON)),
            overdue=len(self.records_with_status(Status.OVERDUE)),
        )
