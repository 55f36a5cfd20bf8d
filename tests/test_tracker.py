#!/usr/bin/env python3
"""Tests for tracker CLI formatting helpers and commands."""

import pytest

import tracker
from fleet import SimpleDate, Status, UNSET, VehicleRecord, load_fleet
from tracker import (
    format_date,
    format_km,
    main,
    make_detail_table,
    make_fleet_table,
    truncate,
)

ADD_ARGS = [
    "add",
    "--code", "chd-101a",
    "--number", "7",
    "--driver", "Asha Rao",
    "--last-service", "01/01/2025",
    "--last-service-km", "9000",
    "--current-km", "9600",
    "--interval-km", "10000",
]


def make_record(**overrides) -> VehicleRecord:
    fields = dict(
        code="CHD-101A",
        number=7,
        driver_name="Asha Rao",
        last_service_date=SimpleDate(1, 1, 2025),
        current_mileage=9600,
        last_service_mileage=9000,
        service_interval_km=10000,
    )
    fields.update(overrides)
    return VehicleRecord(**fields)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run commands in an empty directory with logging left alone."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(tracker, "configure_logging", lambda *a, **kw: None)
    return tmp_path


def run(*argv):
    return main(["--as-of", "15/03/2025", *argv])


class TestFormatHelpers:
    """Tests for display formatting."""

    def test_format_km(self):
        assert format_km(12345.67) == "12,345.7"
        assert format_km(-400) == "-400.0"
        assert format_km(None) == "-"

    def test_format_date(self):
        assert format_date(SimpleDate(5, 3, 2025)) == "05-03-2025"
        assert format_date(UNSET) == "-"
        assert format_date(None) == "-"

    def test_truncate(self):
        assert truncate(None) == "-"
        assert truncate("short") == "short"
        assert truncate("a very long driver name", max_len=10) == "a very ..."


class TestTables:
    """Tests for table row builders."""

    def test_fleet_table_row(self):
        record = make_record(status=Status.DUE_SOON, km_left=400, health_score=96)
        rows = make_fleet_table([record])
        assert rows == [
            [
                "1",
                "7",
                "CHD-101A",
                "Asha Rao",
                "01-01-2025",
                "-",
                "9,600.0",
                "400.0",
                "96/100",
                "DUE SOON",
            ]
        ]

    def test_fleet_table_custom_positions(self):
        rows = make_fleet_table([make_record()], positions=[3])
        assert rows[0][0] == "3"

    def test_detail_table_shows_next_due_only_when_set(self):
        labels = [row[0] for row in make_detail_table(make_record())]
        assert "Next due date" not in labels
        record = make_record(next_due_date=SimpleDate(1, 7, 2025))
        labels = [row[0] for row in make_detail_table(record)]
        assert "Next due date" in labels


class TestCommands:
    """End-to-end command runs against a data file."""

    def test_add_saves_and_evaluates(self, workdir, capsys):
        assert run(*ADD_ARGS) == 0
        store, warnings = load_fleet(workdir / "bus_data.txt")
        assert warnings == []
        record = store.records[0]
        assert record.code == "CHD-101A"
        assert record.status == Status.DUE_SOON
        assert record.km_left == 400
        assert "Bus added. Total buses: 1" in capsys.readouterr().out

    def test_duplicate_number_rejected(self, workdir, capsys):
        run(*ADD_ARGS)
        argv = list(ADD_ARGS)
        argv[argv.index("chd-101a")] = "CHD-999"
        assert run(*argv) == 1
        assert "already exists" in capsys.readouterr().out
        store, _ = load_fleet(workdir / "bus_data.txt")
        assert len(store) == 1

    def test_duplicate_code_rejected_case_insensitive(self, workdir):
        run(*ADD_ARGS)
        argv = list(ADD_ARGS)
        argv[argv.index("7")] = "8"
        argv[argv.index("chd-101a")] = "CHD-101a"
        assert run(*argv) == 1

    def test_dry_run_does_not_save(self, workdir, capsys):
        assert run(*ADD_ARGS, "--dry-run") == 0
        assert not (workdir / "bus_data.txt").exists()
        assert "dry run" in capsys.readouterr().out

    def test_update_miles(self, workdir):
        run(*ADD_ARGS)
        assert run("update-miles", "7", "19500") == 0
        store, _ = load_fleet(workdir / "bus_data.txt")
        assert store.records[0].current_mileage == 19500
        assert store.records[0].status == Status.OVERDUE

    def test_update_miles_unknown_bus(self, workdir, capsys):
        assert run("update-miles", "42", "100") == 1
        assert "Bus 42 not found" in capsys.readouterr().out

    def test_edit_by_position(self, workdir):
        run(*ADD_ARGS)
        assert run("edit", "1", "--driver", "Ravi Kumar", "--interval-days", "30") == 0
        store, _ = load_fleet(workdir / "bus_data.txt")
        record = store.records[0]
        assert record.driver_name == "Ravi Kumar"
        assert record.status == Status.OVERDUE
        assert record.next_due_date == SimpleDate(1, 2, 2025)

    def test_edit_shows_record_being_edited(self, workdir, capsys):
        run(*ADD_ARGS)
        capsys.readouterr()
        assert run("edit", "1", "--driver", "Ravi Kumar") == 0
        assert "Editing position 1 (Bus 7, CHD-101A)" in capsys.readouterr().out

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
    def test_non_finite_mileage_rejected_by_parser(self, workdir, value):
        argv = list(ADD_ARGS)
        argv[argv.index("9600")] = value
        with pytest.raises(SystemExit):
            run(*argv)
        with pytest.raises(SystemExit):
            run("update-miles", "7", value)

    def test_edit_position_out_of_range(self, workdir, capsys):
        run(*ADD_ARGS)
        assert run("edit", "2", "--driver", "Ravi Kumar") == 1
        assert "out of range" in capsys.readouterr().out

    def test_edit_without_changes(self, workdir):
        run(*ADD_ARGS)
        assert run("edit", "1") == 1

    def test_delete(self, workdir):
        run(*ADD_ARGS)
        assert run("delete", "7") == 0
        store, _ = load_fleet(workdir / "bus_data.txt")
        assert len(store) == 0

    def test_search_and_list(self, workdir, capsys):
        run(*ADD_ARGS)
        capsys.readouterr()
        assert run("search", "7") == 0
        assert "Bus 7 [CHD-101A] (DUE SOON)" in capsys.readouterr().out
        assert run("list", "--due", "--sort", "km-left") == 0
        assert "CHD-101A" in capsys.readouterr().out

    def test_summary(self, workdir, capsys):
        run(*ADD_ARGS)
        capsys.readouterr()
        assert run("summary") == 0
        out = capsys.readouterr().out
        assert "Due soon: 1" in out
        assert "km left: 400.0" in out

    def test_export(self, workdir):
        run(*ADD_ARGS)
        assert run("export") == 0
        lines = (workdir / "fleet_report.csv").read_text().splitlines()
        assert lines[0].startswith("BusNo,BusCode")
        assert lines[1].startswith('7,"CHD-101A"')

    def test_reference_date_change_re_evaluates(self, workdir, capsys):
        run(*ADD_ARGS[:-2], "--interval-km", "10000", "--interval-days", "180")
        capsys.readouterr()
        main(["--as-of", "30/06/2025", "search", "7"])
        assert "(DUE SOON)" in capsys.readouterr().out
        main(["--as-of", "01/07/2025", "search", "7"])
        assert "(OVERDUE)" in capsys.readouterr().out

    def test_invalid_date_rejected_by_parser(self, workdir):
        with pytest.raises(SystemExit):
            main(["--as-of", "31/13/2025", "list"])

    def test_all_digit_driver_rejected_by_parser(self, workdir):
        argv = list(ADD_ARGS)
        argv[argv.index("Asha Rao")] = "12345"
        with pytest.raises(SystemExit):
            run(*argv)

    def test_config_file_sets_data_file(self, workdir):
        (workdir / "fleet.yaml").write_text("dataFile: depot.txt\n")
        assert run(*ADD_ARGS) == 0
        assert (workdir / "depot.txt").exists()

    def test_bad_config_file(self, workdir, capsys):
        (workdir / "fleet.yaml").write_text("unknown: 1\n")
        assert run("list") == 1
        assert "Error" in capsys.readouterr().out

    def test_corrupted_data_file_warns(self, workdir, capsys):
        (workdir / "bus_data.txt").write_text("1\nbroken line\n")
        assert run("list") == 0
        assert "Warning:" in capsys.readouterr().out

    def test_nan_in_data_file_is_skipped(self, workdir, capsys):
        line = "CHD-101A|Asha Rao|7|1|1|2025|0|0|0|nan|9000.00|10000.00|0|3|1|400.00|96|0.00|0.00"
        (workdir / "bus_data.txt").write_text("1\n" + line + "\n")
        assert run("list") == 0
        out = capsys.readouterr().out
        assert out.count("Warning:") == 1
        assert "corrupted line 2" in out
