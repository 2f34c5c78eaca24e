"""
Tests for end-of-support classification (dotnet_audit/eol.py).
"""

import datetime

import pytest

from dotnet_audit.detection import VersionRecord
from dotnet_audit.eol import (
    EOL_TABLE,
    EolClassifier,
    EosEntry,
    build_reference_table,
    filter_eol,
    index_entries,
    is_eol,
)


NOW = datetime.date(2025, 1, 1)


def framework(version, key="v4"):
    return VersionRecord(f"Framework: {key}", version)


def core(version):
    return VersionRecord("Core: Microsoft.NETCore.App", version)


class TestReferenceTable:
    """Tests for the built-in table."""

    def test_builtin_entries(self):
        """Test known cutoffs are present."""
        assert EOL_TABLE["6.0"].end_of_support == datetime.date(2024, 11, 12)
        assert EOL_TABLE["7.0"].end_of_support == datetime.date(2024, 5, 14)
        assert EOL_TABLE["1.0"].end_of_support == datetime.date(2019, 6, 27)
        assert len(EOL_TABLE) == 10

    def test_table_read_only(self):
        """Test the table cannot be modified."""
        with pytest.raises(TypeError):
            EOL_TABLE["8.0"] = EosEntry("8.0", datetime.date(2026, 11, 10))

    def test_entry_rejects_bad_identifier(self):
        """Test EosEntry requires X.Y identifiers."""
        with pytest.raises(ValueError):
            EosEntry("8", datetime.date(2026, 11, 10))

    def test_index_rejects_duplicates(self):
        """Test at most one entry per release."""
        entries = [
            EosEntry("6.0", datetime.date(2024, 11, 12)),
            EosEntry("6.0", datetime.date(2024, 11, 13)),
        ]
        with pytest.raises(ValueError, match="Duplicate"):
            index_entries(entries)

    def test_build_without_extra_returns_builtin(self):
        """Test no overrides gives the built-in table."""
        assert build_reference_table() is EOL_TABLE
        assert build_reference_table({}) is EOL_TABLE

    def test_build_with_extra(self):
        """Test extra entries extend the table without mutating the built-ins."""
        table = build_reference_table({"8.0": "2026-11-10"})
        assert table["8.0"].end_of_support == datetime.date(2026, 11, 10)
        assert "6.0" in table
        assert "8.0" not in EOL_TABLE

    def test_build_with_override(self):
        """Test extra entries replace built-in cutoffs."""
        table = build_reference_table({"6.0": "2030-01-01"})
        assert table["6.0"].end_of_support == datetime.date(2030, 1, 1)

    def test_build_rejects_bad_date(self):
        """Test malformed dates fail."""
        with pytest.raises(ValueError, match="Invalid end-of-support date"):
            build_reference_table({"8.0": "next year"})

    def test_build_rejects_bad_key(self):
        """Test malformed release identifiers fail."""
        with pytest.raises(ValueError):
            build_reference_table({"eight": "2026-11-10"})


class TestFrameworkClassification:
    """Tests for Framework records."""

    def test_framework_48_supported(self):
        assert is_eol(framework("4.8.1"), NOW) is False
        assert is_eol(framework("4.8.09032"), NOW) is False

    def test_framework_older_eol(self):
        assert is_eol(framework("4.0", key="v4.0"), NOW) is True
        assert is_eol(framework("4.7.2"), NOW) is True
        assert is_eol(framework("3.5.30729.4926", key="v3.5"), NOW) is True

    def test_framework_unknown_newer_eol(self):
        """Test anything not on the 4.8 line counts as end-of-support."""
        assert is_eol(framework("4.9"), NOW) is True

    def test_framework_ignores_date(self):
        assert is_eol(framework("4.8"), datetime.date(2100, 1, 1)) is False


class TestCoreClassification:
    """Tests for Core records."""

    def test_core_past_cutoff(self):
        assert is_eol(core("6.0.28"), NOW) is True

    def test_core_before_cutoff(self):
        assert is_eol(core("6.0.28"), datetime.date(2024, 1, 1)) is False

    def test_core_on_cutoff_day_supported(self):
        """Test the cutoff day itself is still supported."""
        assert is_eol(core("6.0.28"), datetime.date(2024, 11, 12)) is False
        assert is_eol(core("6.0.28"), datetime.date(2024, 11, 13)) is True

    def test_core_unknown_release_supported(self):
        assert is_eol(core("8.0.1"), NOW) is False

    def test_core_single_component_supported(self):
        assert is_eol(core("6"), NOW) is False

    def test_core_accepts_datetime(self):
        assert is_eol(core("7.0.1"), datetime.datetime(2024, 5, 14, 23, 59)) is False
        assert is_eol(core("7.0.1"), datetime.datetime(2024, 5, 15, 0, 1)) is True

    def test_core_exact_prefix_match(self):
        """Test lookup uses the exact major.minor prefix."""
        assert is_eol(core("3.1.32"), NOW) is True
        assert is_eol(core("31.0.0"), NOW) is False


class TestOtherNames:
    def test_other_prefix_supported(self):
        assert is_eol(VersionRecord("Mono", "1.0"), NOW) is False


class TestClassifierInjection:
    """Tests for classifiers built on custom tables."""

    def test_custom_table(self):
        classifier = EolClassifier(build_reference_table({"8.0": "2024-06-01"}))
        assert classifier.is_eol(core("8.0.1"), NOW) is True

    def test_empty_table(self):
        classifier = EolClassifier({})
        assert classifier.is_eol(core("6.0.28"), NOW) is False

    def test_lookup(self):
        classifier = EolClassifier()
        assert classifier.lookup("5.0.17").major_minor == "5.0"
        assert classifier.lookup("9") is None


class TestFilterEol:
    """Tests for filter_eol."""

    def test_preserves_order(self):
        records = [
            core("7.0.1"),
            framework("4.8.1"),
            core("8.0.1"),
            framework("2.0.50727", key="v2.0.50727"),
            core("6.0.28"),
        ]
        result = filter_eol(records, NOW)
        assert result == [records[0], records[3], records[4]]

    def test_empty(self):
        assert filter_eol([], NOW) == []

    def test_subset(self):
        records = [core("8.0.1"), framework("4.8")]
        result = filter_eol(records, NOW)
        assert result == []
        assert all(r in records for r in result)

    def test_duplicates_kept(self):
        records = [core("6.0.28"), core("6.0.28")]
        assert filter_eol(records, NOW) == records
