"""Tests for the command line interface."""

import json

import pytest

from run_analytics.cli import build_parser, main, parse_date_arg
from run_analytics.config import get_settings


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ("RUN_ANALYTICS_MAX_HR", "RUN_ANALYTICS_REST_HR", "RUN_ANALYTICS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def activity_file(tmp_path):
    """An export with a few weeks of runs and one ride."""
    records = []
    for i, day in enumerate(range(1, 29)):
        records.append({
            "id": i,
            "name": "Run",
            "type": "Run",
            "sport_type": "Run",
            "start_date_local": f"2024-06-{day:02d}T07:00:00Z",
            "distance": 8000 if day % 7 else 16000,
            "moving_time": 2640 if day % 7 else 5600,
            "average_heartrate": 148,
        })
    records.append({
        "id": 99,
        "type": "Ride",
        "start_date_local": "2024-06-29T07:00:00Z",
        "distance": 40000,
        "moving_time": 5400,
    })
    path = tmp_path / "activities.json"
    path.write_text(json.dumps(records))
    return path


class TestCommands:
    """Tests for each subcommand's happy path."""

    def test_fitness(self, activity_file, capsys):
        assert main(["fitness", str(activity_file), "--days", "7", "--as-of", "2024-06-30"]) == 0
        out = capsys.readouterr().out
        assert "Training Load" in out
        assert "2024-06-30" in out

    def test_health(self, activity_file, capsys):
        assert main(["health", str(activity_file), "--as-of", "2024-06-30"]) == 0
        out = capsys.readouterr().out
        assert "ACWR" in out
        assert "Consistency" in out

    def test_predict(self, activity_file, capsys):
        assert main(["predict", str(activity_file), "--today", "2024-06-30"]) == 0
        out = capsys.readouterr().out
        assert "Half Marathon" in out
        assert "Readiness" in out

    def test_predict_without_data(self, activity_file, capsys):
        args = ["predict", str(activity_file), "--mode", "year", "--year", "2020", "--today", "2024-06-30"]
        assert main(args) == 0
        assert "Not enough running data" in capsys.readouterr().out

    def test_summary(self, activity_file, capsys):
        args = [
            "summary", str(activity_file), "--mode", "month", "--year", "2024", "--month", "6",
            "--trend", "month", "--as-of", "2024-06-30",
        ]
        assert main(args) == 0
        out = capsys.readouterr().out
        assert "Period Summary" in out
        assert "Trailing distance" in out

    def test_zones_from_age(self, capsys):
        assert main(["zones", "--age", "30"]) == 0
        assert "187" in capsys.readouterr().out

    def test_heart_rate_override(self, activity_file, capsys):
        assert main(["--max-hr", "200", "zones", str(activity_file)]) == 0
        assert "max HR 200" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()


class TestErrors:
    """Tests for error reporting."""

    def test_missing_file(self, tmp_path, capsys):
        assert main(["health", str(tmp_path / "missing.json")]) == 1
        assert "Error" in capsys.readouterr().out

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        assert main(["health", str(path)]) == 1
        assert "not valid JSON" in capsys.readouterr().out

    def test_invalid_record(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"activities": [{"id": 1, "type": "Run"}]}))
        assert main(["health", str(path)]) == 1
        assert "start_date_local" in capsys.readouterr().out

    def test_invalid_heart_rates(self, activity_file, capsys):
        assert main(["--max-hr", "50", "--rest-hr", "60", "zones"]) == 1
        assert "Invalid heart rate settings" in capsys.readouterr().out

    def test_year_required(self, activity_file, capsys):
        assert main(["summary", str(activity_file), "--mode", "year"]) == 1
        assert "--year" in capsys.readouterr().out


class TestParser:
    """Tests for argument parsing helpers."""

    def test_parse_date_arg(self):
        assert parse_date_arg("2024-06-30").isoformat() == "2024-06-30"

    def test_bad_date_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["health", "file.json", "--as-of", "30/06/2024"])
