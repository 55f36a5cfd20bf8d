"""Text-file persistence and CSV report export for the fleet."""

import csv
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from .errors import (
    DuplicateCodeError,
    DuplicateNumberError,
    InvalidRecordLineError,
    StorageUnavailableError,
)
from .logger import get_logger
from .simple_date import SimpleDate
from .status import Status
from .store import FleetStore
from .vehicle import VehicleRecord

logger = get_logger(__name__)

FIELD_SEPARATOR = "|"
FIELD_COUNT = 19
MIN_HEALTH_SCORE = 0
MAX_HEALTH_SCORE = 100

REPORT_HEADER = [
    "BusNo",
    "BusCode",
    "DriverName",
    "LastServiceDate",
    "NextDueDate",
    "CurrentKm",
    "KmLeft",
    "HealthScore",
    "Status",
    "ServiceHistoryCount",
]


# =============================================================================
# Record lines
# =============================================================================


def format_record_line(record: VehicleRecord) -> str:
    """Serialize one record as a pipe-separated line (no newline)."""
    fields = [
        record.code,
        record.driver_name,
        str(record.number),
        str(record.last_service_date.day),
        str(record.last_service_date.month),
        str(record.last_service_date.year),
        str(record.next_due_date.day),
        str(record.next_due_date.month),
        str(record.next_due_date.year),
        f"{record.current_mileage:.2f}",
        f"{record.last_service_mileage:.2f}",
        f"{record.service_interval_km:.2f}",
        str(record.service_interval_days),
        str(record.service_history_count),
        str(record.status.value),
        f"{record.km_left:.2f}",
        str(record.health_score),
        f"{record.avg_daily_km:.2f}",
        f"{record.fuel_efficiency:.2f}",
    ]
    return FIELD_SEPARATOR.join(fields)


def _parse_health_score(text: str) -> int:
    score = int(text)
    if not MIN_HEALTH_SCORE <= score <= MAX_HEALTH_SCORE:
        raise ValueError(
            f"Health score {score} out of range "
            f"({MIN_HEALTH_SCORE}..{MAX_HEALTH_SCORE})"
        )
    return score


def parse_record_line(line: str) -> VehicleRecord:
    """Parse a pipe-separated line, raising InvalidRecordLineError on failure."""
    fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise InvalidRecordLineError(
            f"expected {FIELD_COUNT} fields, found {len(fields)}"
        )

    (
        code,
        driver_name,
        number,
        last_day,
        last_month,
        last_year,
        due_day,
        due_month,
        due_year,
        current_mileage,
        last_service_mileage,
        interval_km,
        interval_days,
        history_count,
        status_int,
        km_left,
        health_score,
        avg_daily_km,
        fuel_efficiency,
    ) = fields

    try:
        return VehicleRecord(
            code=code,
            number=int(number),
            driver_name=driver_name,
            last_service_date=SimpleDate(
                int(last_day), int(last_month), int(last_year)
            ),
            current_mileage=float(current_mileage),
            last_service_mileage=float(last_service_mileage),
            service_interval_km=float(interval_km),
            service_interval_days=int(interval_days),
            service_history_count=int(history_count),
            avg_daily_km=float(avg_daily_km),
            fuel_efficiency=float(fuel_efficiency),
            status=Status.from_int(int(status_int)),
            km_left=float(km_left),
            health_score=_parse_health_score(health_score),
            next_due_date=SimpleDate(int(due_day), int(due_month), int(due_year)),
        )
    except ValueError as e:
        # Also covers InvalidFieldError / InvalidDateError
        raise InvalidRecordLineError(str(e)) from e


# =============================================================================
# Whole-fleet text
# =============================================================================


def serialize_fleet(records: Iterable[VehicleRecord]) -> str:
    """Count line followed by one line per record."""
    lines = [format_record_line(r) for r in records]
    return "\n".join([str(len(lines))] + lines) + "\n"


def deserialize_fleet(text: str) -> Tuple[FleetStore, List[str]]:
    """
    Parse fleet text into a store.

    Returns the store and a list of warnings. A bad count line gives an empty
    fleet; bad or duplicate record lines are skipped and loading continues.
    """
    warnings: List[str] = []
    store = FleetStore()
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        return store, warnings

    try:
        expected = int(lines[0].strip())
    except ValueError:
        warnings.append("Data file empty or invalid: bad record count")
        return store, warnings
    if expected < 0:
        warnings.append("Data file empty or invalid: negative record count")
        return store, warnings

    record_lines = [(n, line) for n, line in enumerate(lines[1:], 2) if line.strip()]
    for line_no, line in record_lines:
        try:
            record = parse_record_line(line)
            store.insert(record, reset_derived=False)
        except InvalidRecordLineError as e:
            warnings.append(f"Skipped corrupted line {line_no}: {e.reason}")
        except (DuplicateCodeError, DuplicateNumberError) as e:
            warnings.append(f"Skipped line {line_no}: {e.message}")

    if len(record_lines) != expected:
        warnings.append(
            f"Record count mismatch: header says {expected}, "
            f"found {len(record_lines)} lines"
        )
    return store, warnings


# =============================================================================
# Files
# =============================================================================


def load_fleet(filename: Union[str, Path]) -> Tuple[FleetStore, List[str]]:
    """
    Load a fleet from a data file.

    A missing file is an empty fleet. Unreadable files raise
    StorageUnavailableError.
    """
    path = Path(filename)
    if not path.exists():
        logger.info("No data file at %s, starting with an empty fleet", path)
        return FleetStore(), []
    try:
        with open(path, "r", encoding="utf-8") as fp:
            text = fp.read()
    except (OSError, UnicodeDecodeError) as e:
        raise StorageUnavailableError(path, str(e)) from e

    store, warnings = deserialize_fleet(text)
    logger.info(
        "Loaded %d buses from %s (%d warnings)", len(store), path, len(warnings)
    )
    return store, warnings


def save_fleet(filename: Union[str, Path], records: Iterable[VehicleRecord]) -> None:
    """Write the fleet to a data file, raising StorageUnavailableError on failure."""
    text = serialize_fleet(records)
    try:
        with open(filename, "w", encoding="utf-8") as fp:
            fp.write(text)
    except OSError as e:
        raise StorageUnavailableError(filename, str(e)) from e
    logger.info("Fleet saved to %s", filename)


# =============================================================================
# Report
# =============================================================================


def render_report_rows(records: Iterable[VehicleRecord]) -> List[list]:
    """One report row per record; km values to one decimal place."""
    rows = []
    for r in records:
        rows.append(
            [
                r.number,
                r.code,
                r.driver_name,
                r.last_service_date.format(),
                r.next_due_date.format() if r.next_due_date.is_set else "",
                round(r.current_mileage, 1),
                round(r.km_left, 1),
                r.health_score,
                r.status.label,
                r.service_history_count,
            ]
        )
    return rows


def write_report(fp, rows: Sequence[list]) -> None:
    """Write a header plus rows; text fields are double-quoted."""
    csv.writer(fp, lineterminator="\n").writerow(REPORT_HEADER)
    writer = csv.writer(fp, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(rows)


def export_report(filename: Union[str, Path], records: Iterable[VehicleRecord]) -> int:
    """Export the maintenance report CSV. Returns the number of rows written."""
    rows = render_report_rows(records)
    try:
        with open(filename, "w", newline="", encoding="utf-8") as fp:
            write_report(fp, rows)
    except OSError as e:
        raise StorageUnavailableError(filename, str(e)) from e
    logger.info("Report with %d rows exported to %s", len(rows), filename)
    return len(rows)
