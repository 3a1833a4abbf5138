"""
Tests for the Typer command line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from clinicslots import __version__
from clinicslots.cli.app import app

runner = CliRunner()

DATA = {
    "clinics": [
        {
            "id": "1",
            "name": "Your Dentist",
            "openinghours": {
                "monday": "09:00-17:00",
                "tuesday": "09:00-17:00",
                "wednesday": "09:00-17:00",
                "thursday": "09:00-17:00",
                "friday": "09:00-17:00",
            },
        }
    ],
    "dentists": [
        {"id": "101", "clinic": "1", "lunchBreak": "12:00-12:30", "fikaBreak": "15:00-15:15"},
    ],
}


@pytest.fixture
def config_file(tmp_path):
    (tmp_path / "clinics.json").write_text(json.dumps(DATA), encoding="utf-8")
    path = tmp_path / "config.yaml"
    path.write_text("timezone: Europe/Stockholm\ndata_file: clinics.json\n", encoding="utf-8")
    return path


def test_find_json(config_file):
    result = runner.invoke(
        app,
        ["find", "1", "--config", str(config_file), "--start", "2024-11-25", "--end", "2024-11-26", "--json"],
    )

    assert result.exit_code == 0, result.output
    slots = json.loads(result.output)
    assert len(slots) == 24
    assert slots[0]["dentist"] == "101"
    assert slots[0]["end"] - slots[0]["start"] == 30 * 60 * 1000


def test_find_table(config_file):
    result = runner.invoke(
        app,
        ["find", "1", "--config", str(config_file), "--start", "2024-11-25", "--end", "2024-11-26"],
    )

    assert result.exit_code == 0, result.output
    assert "Monday, 25.11.2024 | 09:00 - 09:30" in result.output
    assert "24 slot(s) found" in result.output


def test_find_unknown_clinic_prints_envelope(config_file):
    result = runner.invoke(
        app,
        ["find", "99", "--config", str(config_file), "--start", "2024-11-25", "--end", "2024-11-26", "--json"],
    )

    assert result.exit_code == 1
    assert json.loads(result.output) == {"error": {"code": 400, "message": "Clinic does not exist"}}


def test_find_weekend_is_empty(config_file):
    result = runner.invoke(
        app,
        ["find", "1", "--config", str(config_file), "--start", "2024-11-23", "--end", "2024-11-24"],
    )

    assert result.exit_code == 0, result.output
    assert "No bookable slots" in result.output


def test_find_bad_date(config_file):
    result = runner.invoke(app, ["find", "1", "--config", str(config_file), "--start", "25.11.2024"])

    assert result.exit_code == 1
    assert "Could not parse date" in result.output


def test_list_clinics(config_file):
    result = runner.invoke(app, ["list-clinics", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "Your Dentist" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
