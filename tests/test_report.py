"""
Tests for the CSV report (dotnet_audit/report.py).
"""

from pathlib import Path

import pytest

from dotnet_audit.detection import VersionRecord
from dotnet_audit.report import get_report_path, write_csv


class TestGetReportPath:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("DOTNET_AUDIT_CSV", raising=False)
        assert get_report_path() == Path.cwd() / "dotnet_versions.csv"

    def test_configured_default(self, monkeypatch):
        monkeypatch.delenv("DOTNET_AUDIT_CSV", raising=False)
        assert get_report_path("reports/out.csv") == Path.cwd() / "reports/out.csv"

    def test_env_relative(self, monkeypatch):
        monkeypatch.setenv("DOTNET_AUDIT_CSV", "custom.csv")
        assert get_report_path() == Path.cwd() / "custom.csv"

    def test_env_absolute(self, monkeypatch, tmp_path):
        target = tmp_path / "abs.csv"
        monkeypatch.setenv("DOTNET_AUDIT_CSV", str(target))
        assert get_report_path() == target


class TestWriteCsv:
    """Tests for write_csv."""

    def test_empty_writes_nothing(self, tmp_path):
        target = tmp_path / "out.csv"
        assert write_csv([], target) == 0
        assert not target.exists()

    def test_empty_keeps_existing_file(self, tmp_path):
        target = tmp_path / "out.csv"
        target.write_text("previous")
        write_csv([], target)
        assert target.read_text() == "previous"

    def test_single_record(self, tmp_path):
        target = tmp_path / "out.csv"
        assert write_csv([VersionRecord("A", "1.0")], target) == 1
        lines = target.read_text(encoding="utf-8").splitlines()
        assert lines == ["Name,Version", "A,1.0"]

    def test_multiple_records_and_overwrite(self, tmp_path):
        target = tmp_path / "out.csv"
        target.write_text("stale content\n")
        records = [
            VersionRecord("Framework: v4", "4.8.09032"),
            VersionRecord("Core: Microsoft.NETCore.App", "6.0.28"),
            VersionRecord("Core: Microsoft.NETCore.App", "6.0.28"),
        ]
        assert write_csv(records, str(target)) == 3
        lines = target.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "Name,Version"
        assert lines[1:] == [
            "Framework: v4,4.8.09032",
            "Core: Microsoft.NETCore.App,6.0.28",
            "Core: Microsoft.NETCore.App,6.0.28",
        ]

    def test_default_path(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DOTNET_AUDIT_CSV", raising=False)
        write_csv([VersionRecord("A", "1.0")])
        assert (tmp_path / "dotnet_versions.csv").exists()

    def test_write_failure_propagates(self, tmp_path):
        with pytest.raises(OSError):
            write_csv([VersionRecord("A", "1.0")], tmp_path / "missing" / "out.csv")
