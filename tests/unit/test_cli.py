"""Tests for the phototaker CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from phototaker import __version__
from phototaker.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_config_json_masks_api_key(monkeypatch):
    monkeypatch.setenv("PACKAGE_NAME", "com.example.cli")
    monkeypatch.setenv("MENTRAOS_API_KEY", "super-secret")

    result = runner.invoke(app, ["config", "--json-output"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["package_name"] == "com.example.cli"
    assert data["api_key"] == "***"
    assert "super-secret" not in result.stdout


def test_config_invalid_port(monkeypatch):
    monkeypatch.setenv("PORT", "abc")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 1
    assert "PORT" in result.stdout


def test_serve_requires_credentials():
    result = runner.invoke(app, ["serve"])

    assert result.exit_code == 1
    assert "PACKAGE_NAME is not set" in result.stdout


def test_snapshots_empty(tmp_path: Path):
    result = runner.invoke(app, ["snapshots"])

    assert result.exit_code == 0
    assert "No snapshots" in result.stdout


def test_snapshots_lists_files(tmp_path: Path):
    snapshots = tmp_path / "snapshots"
    snapshots.mkdir()
    (snapshots / "photo_x_abc.jpg").write_bytes(b"x" * 2048)

    result = runner.invoke(app, ["snapshots"])

    assert result.exit_code == 0
    assert "abc.jpg" in result.stdout
