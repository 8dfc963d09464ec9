"""Tests for the signature tables (lib/timezone_signatures.py)."""

from __future__ import annotations

from datetime import datetime

import pytest

from detect_config import CONFIG
from timezone_signatures import (
    SignatureTableError,
    TimeZoneRecord,
    TimezoneDetectError,
    get_signature_tables,
    make_signature_tables,
    validate_tables,
)


# =========================================================================
# TestShippedTables
# =========================================================================

class TestShippedTables:
    """Invariants of the data shipped with the library."""

    def test_validates(self):
        validate_tables(get_signature_tables())

    def test_same_instance_every_call(self):
        assert get_signature_tables() is get_signature_tables()

    def test_key_format(self):
        for key in get_signature_tables().timezones:
            parts = key.split(",")
            int(parts[0])
            assert parts[1] in ("0", "1")
            assert len(parts) == 2 or (len(parts) == 3 and parts[2] == "s")

    def test_dst_flag_matches_record(self):
        for key, record in get_signature_tables().timezones.items():
            assert record.uses_dst == (key.split(",")[1] == "1"), key

    def test_southern_suffix_only_with_dst(self):
        for key in get_signature_tables().timezones:
            if key.endswith(",s"):
                assert key.split(",")[1] == "1"

    def test_ambiguity_primaries_are_table_identifiers(self):
        tables = get_signature_tables()
        identifiers = {record.identifier for record in tables.timezones.values()}
        assert set(tables.ambiguities) <= identifiers

    def test_dst_start_dates_in_reference_year(self):
        for identifier, start in get_signature_tables().dst_start_dates.items():
            assert start.year == CONFIG["REFERENCE_YEAR"], identifier

    def test_examples(self):
        timezones = get_signature_tables().timezones
        assert timezones["480,0"] == TimeZoneRecord("+08:00", "Beijing", False)
        assert timezones["-300,1"].identifier == "Eastern Time (US & Canada)"
        assert timezones["600,1,s"].identifier == "Sydney"
        assert "999,0" not in timezones


# =========================================================================
# TestImmutability
# =========================================================================

class TestImmutability:
    """Records and tables cannot be changed after construction."""

    def test_record_fields_read_only(self):
        record = get_signature_tables().timezones["0,0"]
        with pytest.raises(AttributeError):
            record.identifier = "Elsewhere"

    def test_tables_read_only(self):
        tables = get_signature_tables()
        with pytest.raises(TypeError):
            tables.timezones["999,0"] = TimeZoneRecord("+16:39", "Nowhere", False)
        with pytest.raises(TypeError):
            tables.dst_start_dates["Nowhere"] = datetime(2011, 1, 1)

    def test_candidate_lists_are_tuples(self):
        for candidates in get_signature_tables().ambiguities.values():
            assert isinstance(candidates, tuple)

    def test_built_tables_copy_input(self):
        source = {"0,0": TimeZoneRecord("00:00", "UTC", False)}
        tables = make_signature_tables(source)
        source["60,0"] = TimeZoneRecord("+01:00", "Later", False)
        assert "60,0" not in tables.timezones


# =========================================================================
# TestValidation
# =========================================================================

class TestValidation:
    """validate_tables / make_signature_tables error reporting."""

    RECORD = TimeZoneRecord("+02:00", "Primary", True)

    def test_missing_start_date(self):
        with pytest.raises(SignatureTableError, match="no DST start date"):
            make_signature_tables(
                {"120,1": self.RECORD},
                {"Primary": ["Primary", "Sibling"]},
                {"Primary": datetime(2011, 3, 27, 4)},
            )

    def test_out_of_order(self):
        with pytest.raises(SignatureTableError, match="not in DST start order"):
            make_signature_tables(
                {"120,1": self.RECORD},
                {"Primary": ["Primary", "Sibling"]},
                {"Primary": datetime(2011, 4, 1, 2), "Sibling": datetime(2011, 3, 27, 4)},
            )

    def test_equal_start_dates_allowed(self):
        tables = make_signature_tables(
            {"120,1": self.RECORD},
            {"Primary": ["Primary", "Sibling"]},
            {"Primary": datetime(2011, 3, 27, 4), "Sibling": datetime(2011, 3, 27, 4)},
        )
        assert tables.ambiguities["Primary"] == ("Primary", "Sibling")

    def test_error_hierarchy(self):
        assert issubclass(SignatureTableError, TimezoneDetectError)
        assert issubclass(SignatureTableError, ValueError)
