#!/usr/bin/env python3
"""
Unified CLI for bus fleet maintenance tracking.

Commands:
  summary      - Count buses per status band and list those needing service
  list         - Show all buses (or only due/overdue ones)
  search       - Show one bus by number
  add          - Add a new bus
  edit         - Edit the bus at a list position
  update-miles - Update the current mileage of a bus
  delete       - Delete a bus by number
  export       - Export the maintenance report (CSV)

Every command evaluates the fleet against the reference date (--as-of,
default today). Commands that change the fleet save it before exiting.
"""

import argparse
import math
import sys
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional

from fleet import (
    FleetError,
    FleetStore,
    SimpleDate,
    Status,
    StorageUnavailableError,
    VehicleRecord,
    export_report,
    load_fleet,
    save_fleet,
)
from fleet.config import ConfigError, load_config
from fleet.errors import InvalidDateError
from fleet.logger import configure_logging, get_logger
from fleet.vehicle import is_valid_driver_name

logger = get_logger("tracker")

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.1f}" if km is not None else "-"


def format_date(d: Optional[SimpleDate]) -> str:
    """Format a date for display; unset dates show as a dash."""
    if d is None or not d.is_set:
        return "-"
    return d.format()


def truncate(text: Optional[str], max_len: int = 20) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


FLEET_HEADERS = [
    "Pos",
    "Bus",
    "Code",
    "Driver",
    "Last Service",
    "Next Due",
    "Current (km)",
    "Left (km)",
    "Health",
    "Status",
]


def make_fleet_table(
    records: List[VehicleRecord], positions: Optional[List[int]] = None
) -> List[List[str]]:
    """Convert records to table rows. positions are the 1-based list positions."""
    if positions is None:
        positions = list(range(1, len(records) + 1))
    rows = []
    for pos, r in zip(positions, records):
        rows.append(
            [
                str(pos),
                str(r.number),
                r.code,
                truncate(r.driver_name),
                format_date(r.last_service_date),
                format_date(r.next_due_date),
                format_km(r.current_mileage),
                format_km(r.km_left),
                f"{r.health_score}/100",
                r.status.label,
            ]
        )
    return rows


def make_detail_table(r: VehicleRecord) -> List[List[str]]:
    """Label/value rows describing one bus."""
    rows = [
        ["Driver name", r.driver_name],
        ["Last service date", format_date(r.last_service_date)],
    ]
    if r.next_due_date.is_set:
        rows.append(["Next due date", format_date(r.next_due_date)])
    rows.extend(
        [
            ["Last service km", format_km(r.last_service_mileage)],
            ["Current km", format_km(r.current_mileage)],
            [
                "Interval",
                f"{format_km(r.service_interval_km)} km, "
                f"{r.service_interval_days} days",
            ],
            ["Km left", format_km(r.km_left)],
            ["Avg daily km", format_km(r.avg_daily_km)],
            ["Fuel efficiency", f"{r.fuel_efficiency:.1f} km/l"],
            ["Health score", f"{r.health_score}/100"],
            ["Service history", str(r.service_history_count)],
        ]
    )
    return rows


def print_bus(r: VehicleRecord) -> None:
    print(f"Bus {r.number} [{r.code}] ({r.status.label})")
    print(tabulate(make_detail_table(r), tablefmt="plain"))


# =============================================================================
# Argument types
# =============================================================================


def date_arg(text: str) -> SimpleDate:
    try:
        return SimpleDate.parse(text)
    except InvalidDateError as e:
        raise argparse.ArgumentTypeError(e.message)


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{text}'")
    if value < 1:
        raise argparse.ArgumentTypeError("must be 1 or more")
    return value


def non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError("cannot be negative")
    return value


def non_negative_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: '{text}'")
    if not math.isfinite(value):
        raise argparse.ArgumentTypeError(f"not a finite number: '{text}'")
    if value < 0:
        raise argparse.ArgumentTypeError("cannot be negative")
    return value


def driver_name_arg(text: str) -> str:
    if not text.strip():
        raise argparse.ArgumentTypeError("name cannot be empty")
    if not is_valid_driver_name(text):
        raise argparse.ArgumentTypeError("name cannot be only numbers")
    return text


# =============================================================================
# Persistence
# =============================================================================


def persist(args, store: FleetStore) -> int:
    """Save unless --dry-run. Returns the exit code."""
    if getattr(args, "dry_run", False):
        print("(dry run - no changes made)")
        return 0
    try:
        save_fleet(args.data_file, store)
    except StorageUnavailableError as e:
        print(f"Error: {e.message}")
        print("Changes were not saved.")
        return 1
    print(f"Fleet saved to {args.data_file}")
    return 0


# =============================================================================
# Read-only commands
# =============================================================================


def cmd_summary(args, store: FleetStore) -> int:
    """Count buses per status band and list those needing service."""
    summary = store.summary()
    print(f"Reference date: {format_date(store.reference_date)}")
    print(
        f"Buses: {summary.total}  OK: {summary.ok}  "
        f"Due soon: {summary.due_soon}  Overdue: {summary.overdue}"
    )
    print()

    if summary.total == 0:
        print("No buses in fleet yet. Add bus data to check maintenance.")
        return 0
    if not summary.needs_attention:
        print("No maintenance due right now, or upcoming in the next few days.")
        return 0

    overdue = store.records_with_status(Status.OVERDUE)
    if overdue:
        print("These buses NEED maintenance on or before the reference date:")
        for r in overdue:
            print(f"  - Bus {r.number} [{r.code}] (driver: {r.driver_name})")
        print()

    due_soon = store.records_with_status(Status.DUE_SOON)
    if due_soon:
        print(
            f"These buses will need maintenance SOON "
            f"(within {store.due_soon_km:,.0f} km):"
        )
        for r in due_soon:
            print(
                f"  - Bus {r.number} [{r.code}] (driver: {r.driver_name}), "
                f"km left: {format_km(r.km_left)}"
            )
        print()
    return 0


def cmd_list(args, store: FleetStore) -> int:
    """Show all buses, or only due/overdue ones."""
    position_of = {id(r): i for i, r in enumerate(store, 1)}
    records = store.sorted_by_km_left() if args.sort == "km-left" else store.records
    if args.due:
        records = [r for r in records if r.status.is_due]

    print(f"Reference date: {format_date(store.reference_date)}")
    print(f"Total buses: {len(store)}")
    if args.due:
        print(f"Showing: {len(records)} due soon / overdue")
    print()

    if not records:
        if args.due:
            print("No maintenance due right now or in the next few days.")
        else:
            print("No buses in fleet.")
        return 0

    positions = [position_of[id(r)] for r in records]
    print(
        tabulate(
            make_fleet_table(records, positions),
            headers=FLEET_HEADERS,
            tablefmt="simple",
        )
    )
    return 0


def cmd_search(args, store: FleetStore) -> int:
    """Show one bus by number."""
    print_bus(store.get_by_number(args.number))
    return 0


def cmd_export(args, store: FleetStore) -> int:
    """Export the maintenance report."""
    try:
        count = export_report(args.output, store)
    except StorageUnavailableError as e:
        print(f"Error: {e.message}")
        return 1
    print(f"CSV report with {count} buses exported to {args.output}")
    return 0


# =============================================================================
# Mutating commands
# =============================================================================


def cmd_add(args, store: FleetStore) -> int:
    """Add a new bus."""
    record = VehicleRecord(
        code=args.code,
        number=args.number,
        driver_name=args.driver,
        last_service_date=args.last_service,
        current_mileage=args.current_km,
        last_service_mileage=args.last_service_km,
        service_interval_km=args.interval_km,
        service_interval_days=args.interval_days,
        service_history_count=args.history_count,
        avg_daily_km=args.avg_daily_km,
        fuel_efficiency=args.fuel_efficiency,
    )
    store.insert(record)
    print(f"Bus added. Total buses: {len(store)}")
    print_bus(record)
    print()
    return persist(args, store)


# argparse dest -> VehicleRecord attribute
EDIT_FIELDS = {
    "code": "code",
    "number": "number",
    "driver": "driver_name",
    "last_service": "last_service_date",
    "last_service_km": "last_service_mileage",
    "current_km": "current_mileage",
    "interval_km": "service_interval_km",
    "interval_days": "service_interval_days",
    "avg_daily_km": "avg_daily_km",
    "fuel_efficiency": "fuel_efficiency",
    "history_count": "service_history_count",
}


def cmd_edit(args, store: FleetStore) -> int:
    """Edit the bus at a 1-based list position."""
    changes = {
        attr: getattr(args, dest)
        for dest, attr in EDIT_FIELDS.items()
        if getattr(args, dest) is not None
    }
    if not changes:
        print("Error: nothing to change (pass at least one field option)")
        return 1

    before = store.get_at_position(args.position)
    print(f"Editing position {args.position} (Bus {before.number}, {before.code})")

    def apply_changes(record: VehicleRecord) -> None:
        for attr, value in changes.items():
            setattr(record, attr, value)

    record = store.update_at_position(args.position, apply_changes)
    print(f"Bus at position {args.position} updated.")
    print_bus(record)
    print()
    return persist(args, store)


def cmd_update_miles(args, store: FleetStore) -> int:
    """Update the current mileage of a bus."""
    old_km = store.get_by_number(args.number).current_mileage
    record = store.update_mileage(args.number, args.mileage)
    print(f"Bus {record.number} [{record.code}]")
    print(f"Current mileage: {format_km(old_km)}")
    print(f"New mileage:     {format_km(record.current_mileage)}")
    print(f"Status:          {record.status.label} (km left: {format_km(record.km_left)})")
    print()
    return persist(args, store)


def cmd_delete(args, store: FleetStore) -> int:
    """Delete a bus by number."""
    record = store.delete_by_number(args.number)
    print(f"Bus {record.number} [{record.code}] deleted. Remaining: {len(store)}")
    print()
    return persist(args, store)


COMMANDS = {
    "summary": cmd_summary,
    "list": cmd_list,
    "search": cmd_search,
    "export": cmd_export,
    "add": cmd_add,
    "edit": cmd_edit,
    "update-miles": cmd_update_miles,
    "delete": cmd_delete,
}

# =============================================================================
# Main
# =============================================================================


def add_record_options(parser: argparse.ArgumentParser, required: bool) -> None:
    """Field options shared by add (mostly required) and edit (all optional)."""
    parser.add_argument("--code", required=required, help="Bus code, e.g. CHD-101A")
    parser.add_argument(
        "--number", type=positive_int, required=required, help="Numeric bus number"
    )
    parser.add_argument(
        "--driver", type=driver_name_arg, required=required, help="Driver full name"
    )
    parser.add_argument(
        "--last-service",
        type=date_arg,
        required=required,
        help="Last service date (dd/mm/yyyy)",
    )
    parser.add_argument(
        "--last-service-km",
        type=non_negative_float,
        required=required,
        help="Mileage at last service (km)",
    )
    parser.add_argument(
        "--current-km",
        type=non_negative_float,
        required=required,
        help="Current mileage (km)",
    )
    parser.add_argument(
        "--interval-km",
        type=non_negative_float,
        required=required,
        help="Service interval (km), e.g. 10000",
    )
    parser.add_argument(
        "--interval-days",
        type=non_negative_int,
        default=0 if required else None,
        help="Service interval in days (0 if not used)",
    )
    parser.add_argument(
        "--avg-daily-km",
        type=non_negative_float,
        default=0.0 if required else None,
        help="Average daily km",
    )
    parser.add_argument(
        "--fuel-efficiency",
        type=non_negative_float,
        default=0.0 if required else None,
        help="Fuel efficiency (km/l)",
    )
    parser.add_argument(
        "--history-count",
        type=non_negative_int,
        default=0 if required else None,
        help="Number of past services",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the result without saving",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Bus fleet maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s summary --as-of 15/03/2025
  %(prog)s list --due
  %(prog)s list --sort km-left
  %(prog)s add --code chd-101a --number 7 --driver "Asha Rao" \\
      --last-service 01/01/2025 --last-service-km 9000 --current-km 9600 \\
      --interval-km 10000 --interval-days 180
  %(prog)s edit 1 --driver "Ravi Kumar"
  %(prog)s update-miles 7 9800
  %(prog)s delete 7
  %(prog)s export --output fleet_report.csv
""",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML config (default: fleet.yaml if present)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        help="Path to fleet data file (overrides config)",
    )
    parser.add_argument(
        "--as-of",
        type=date_arg,
        help="Reference date for maintenance checks (dd/mm/yyyy, default today)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "summary", help="Count buses per status band and list those needing service"
    )

    list_parser = subparsers.add_parser("list", help="Show all buses")
    list_parser.add_argument(
        "--due",
        action="store_true",
        help="Only show buses that are due soon or overdue",
    )
    list_parser.add_argument(
        "--sort",
        choices=["position", "km-left"],
        default="position",
        help="Sort order (default: position)",
    )

    search_parser = subparsers.add_parser("search", help="Show one bus by number")
    search_parser.add_argument("number", type=positive_int, help="Bus number")

    export_parser = subparsers.add_parser(
        "export", help="Export the maintenance report (CSV)"
    )
    export_parser.add_argument(
        "--output",
        type=Path,
        help="Report file (overrides config)",
    )

    add_parser = subparsers.add_parser("add", help="Add a new bus")
    add_record_options(add_parser, required=True)

    edit_parser = subparsers.add_parser(
        "edit", help="Edit the bus at a list position (see 'list')"
    )
    edit_parser.add_argument("position", type=positive_int, help="1-based position")
    add_record_options(edit_parser, required=False)

    update_miles_parser = subparsers.add_parser(
        "update-miles", help="Update the current mileage of a bus"
    )
    update_miles_parser.add_argument("number", type=positive_int, help="Bus number")
    update_miles_parser.add_argument(
        "mileage", type=non_negative_float, help="Current mileage (km)"
    )
    update_miles_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the result without saving",
    )

    delete_parser = subparsers.add_parser("delete", help="Delete a bus by number")
    delete_parser.add_argument("number", type=positive_int, help="Bus number")
    delete_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the result without saving",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    configure_logging(config.log_level, config.log_file)

    args.data_file = args.data or Path(config.data_file)
    if args.command == "export" and args.output is None:
        args.output = Path(config.report_file)

    try:
        store, warnings = load_fleet(args.data_file)
    except StorageUnavailableError as e:
        print(f"Error: {e.message}")
        return 1
    for warning in warnings:
        print(f"Warning: {warning}")

    store.due_soon_km = config.due_soon_km
    store.set_reference_date(args.as_of or SimpleDate.today())

    # Dispatch to command handler
    try:
        return COMMANDS[args.command](args, store)
    except FleetError as e:
        logger.debug("Command %s failed: %s", args.command, e.message)
        print(f"Error: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
