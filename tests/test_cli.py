"""
Tests for the Typer command line interface.
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from bookable import __version__
from bookable.cli.app import app

runner = CliRunner()


def _setup(tmp_path: Path) -> Path:
    snapshot = {
        "availability": [
            {"id": "w1", "start": "2024-11-25T09:00:00", "end": "2024-11-25T12:00:00"},
            {"id": "w2", "start": "2024-11-27T09:00:00", "end": "2024-11-27T10:00:00"},
        ],
        "bookings": [
            {"id": "b1", "start": "2024-11-25T10:00:00", "end": "2024-11-25T10:30:00", "guestName": "Alice"},
        ],
        "busy": [
            {"start": "2024-11-27T09:00:00", "end": "2024-11-27T10:00:00", "title": "Offsite"},
        ],
    }
    (tmp_path / "snapshot.json").write_text(json.dumps(snapshot), encoding="utf-8")

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "timezone: Europe/Berlin\n"
        "snapshot_path: snapshot.json\n",
        encoding="utf-8",
    )
    return config_path


def test_slots_command(tmp_path: Path):
    config_path = _setup(tmp_path)

    result = runner.invoke(
        app,
        ["slots", "2024-11-25", "--config", str(config_path), "--now", "2024-11-25T08:00:00"],
    )

    assert result.exit_code == 0, result.output
    assert "5 free slot(s)" in result.output
    assert "09:00 – 09:30" in result.output
    assert "10:00 – 10:30" not in result.output


def test_dates_command(tmp_path: Path):
    config_path = _setup(tmp_path)

    result = runner.invoke(
        app,
        [
            "dates",
            "--config", str(config_path),
            "--start", "2024-11-25",
            "--end", "2024-11-28",
            "--now", "2024-11-25T08:00:00",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "2024-11-25" in result.output
    assert "2024-11-27" not in result.output


def test_events_command(tmp_path: Path):
    config_path = _setup(tmp_path)

    result = runner.invoke(app, ["events", "2024-11-25", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert "availability" in result.output
    assert "booked" in result.output
    assert "Alice" in result.output


def test_missing_snapshot_exits_with_error(tmp_path: Path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("snapshot_path: missing.json\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["slots", "2024-11-25", "--config", str(config_path), "--now", "2024-11-25T08:00:00"],
    )

    assert result.exit_code == 1
    assert "Snapshot file not found" in result.output


def test_invalid_duration_exits_with_error(tmp_path: Path):
    config_path = _setup(tmp_path)

    result = runner.invoke(
        app,
        ["slots", "2024-11-25", "--config", str(config_path), "--duration", "0"],
    )

    assert result.exit_code == 1
    assert "greater than zero" in result.output


def test_missing_explicit_config_exits_with_error(tmp_path: Path):
    result = runner.invoke(app, ["show-config", "--config", str(tmp_path / "nope.yaml")])

    assert result.exit_code == 1
    assert "Config file not found" in result.output


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
