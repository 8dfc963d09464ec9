"""
Timezone Signature Tables

Static lookup data for local timezone detection. A signature is the
(UTC offset, DST flag, hemisphere) triple a local clock exhibits; this module
maps every known signature to a canonical zone record and lists the zones that
share a signature together with the instant each one starts daylight saving.

Usage:
    from timezone_signatures import get_signature_tables

    tables = get_signature_tables()
    tables.timezones["-300,1"]
    # TimeZoneRecord(utc_offset='-05:00', identifier='Eastern Time (US & Canada)', uses_dst=True)

Key format:
    "<offset minutes east of UTC>,<1 if DST is observed else 0>[,s]"
    The trailing ",s" marks southern hemisphere zones and only appears where a
    southern zone would otherwise collide with a northern one.

Author: Dan Parker
License: GPL v3
Version: 1.0.0
"""

from datetime import datetime
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional, Sequence, Tuple

from detect_config import CONFIG

__version__ = "1.0.0"


class TimezoneDetectError(Exception):
    """Base class for timezone detection errors."""


class SignatureTableError(TimezoneDetectError, ValueError):
    """Raised when signature tables violate their ordering or coverage rules."""


class TimeZoneRecord(NamedTuple):
    """A canonical zone for one signature.

    Attributes:
        utc_offset: Standard offset as a signed "HH:MM" string, e.g. "-07:00"
        identifier: Canonical zone name
        uses_dst: Whether the zone observes daylight saving
    """
    utc_offset: str
    identifier: str
    uses_dst: bool


class SignatureTables(NamedTuple):
    """The lookup tables consulted by a detection run."""
    timezones: Mapping[str, TimeZoneRecord]
    ambiguities: Mapping[str, Tuple[str, ...]]
    dst_start_dates: Mapping[str, datetime]


# === SIGNATURE TABLE ===
_TIMEZONES: Dict[str, TimeZoneRecord] = {
    "-720,0": TimeZoneRecord("-12:00", "Etc/GMT+12", False),

    "-660,0": TimeZoneRecord("-11:00", "American Samoa", False),
    "-600,1": TimeZoneRecord("-11:00", "International Date Line West", True),
    "-660,1,s": TimeZoneRecord("-11:00", "Midway Island", True),

    "-600,0": TimeZoneRecord("-10:00", "Hawaii", False),

    "-570,0": TimeZoneRecord("-10:30", "Pacific/Marquesas", False),

    "-540,0": TimeZoneRecord("-09:00", "Alaska", False),
    "-540,1": TimeZoneRecord("-09:00", "Alaska", True),

    "-480,1": TimeZoneRecord("-08:00", "Pacific Time (US & Canada)", True),
    "-480,0": TimeZoneRecord("-08:00", "Tijuana", False),

    "-420,0": TimeZoneRecord("-07:00", "Arizona", False),
    "-420,1": TimeZoneRecord("-07:00", "Mountain Time (US & Canada)", True),

    "-360,0": TimeZoneRecord("-06:00", "Central Time (US & Canada)", False),
    "-360,1": TimeZoneRecord("-06:00", "Central America", True),
    "-360,1,s": TimeZoneRecord("-06:00", "Mexico City", True),

    "-300,0": TimeZoneRecord("-05:00", "Bogota", False),
    "-300,1": TimeZoneRecord("-05:00", "Eastern Time (US & Canada)", True),

    "-270,0": TimeZoneRecord("-04:30", "Caracas", False),

    "-240,1": TimeZoneRecord("-04:00", "Atlantic Time (Canada)", True),
    "-240,0": TimeZoneRecord("-04:00", "Georgetown", False),
    "-240,1,s": TimeZoneRecord("-04:00", "Santiago", True),

    "-210,1": TimeZoneRecord("-03:30", "Newfoundland", True),

    "-180,1": TimeZoneRecord("-03:00", "Brasilia", True),
    "-180,0": TimeZoneRecord("-03:00", "Buenos_Aires", False),
    "-180,1,s": TimeZoneRecord("-03:00", "Montevideo", True),

    "-120,0": TimeZoneRecord("-02:00", "Mid-Atlantic", False),
    "-120,1": TimeZoneRecord("-02:00", "Etc/GMT+2", True),

    "-60,1": TimeZoneRecord("-01:00", "Azores", True),
    "-60,0": TimeZoneRecord("-01:00", "Cape Verde Is.", False),

    "0,0": TimeZoneRecord("00:00", "UTC", False),
    "0,1": TimeZoneRecord("00:00", "London", True),

    "60,1": TimeZoneRecord("+01:00", "Berlin", True),
    "60,0": TimeZoneRecord("+01:00", "West Central Africa", False),
    "60,1,s": TimeZoneRecord("+01:00", "Warsaw", True),

    "120,1": TimeZoneRecord("+02:00", "Athens", True),
    "120,0": TimeZoneRecord("+02:00", "Cairo", False),

    "180,1": TimeZoneRecord("+03:00", "Minsk", True),
    "180,0": TimeZoneRecord("+03:00", "Baghdad", False),

    "210,1": TimeZoneRecord("+03:30", "Tehran", True),

    "240,0": TimeZoneRecord("+04:00", "Abu Dhabi", False),
    "240,1": TimeZoneRecord("+04:00", "Yerevan", True),

    "270,0": TimeZoneRecord("+04:30", "Kabul", False),

    "300,1": TimeZoneRecord("+05:00", "Islamabad", True),
    "300,0": TimeZoneRecord("+05:00", "Karachi", False),

    "330,0": TimeZoneRecord("+05:30", "Kolkata", False),

    "345,0": TimeZoneRecord("+05:45", "Kathmandu", False),

    "360,0": TimeZoneRecord("+06:00", "Dhaka", False),
    "360,1": TimeZoneRecord("+06:00", "Ekaterinburg", True),

    "390,0": TimeZoneRecord("+06:30", "Rangoon", False),

    "420,1": TimeZoneRecord("+07:00", "Novosibirsk", True),
    "420,0": TimeZoneRecord("+07:00", "Jakarta", False),

    "480,0": TimeZoneRecord("+08:00", "Beijing", False),
    "480,1": TimeZoneRecord("+08:00", "Kuala Lumpur", True),

    "540,1": TimeZoneRecord("+09:00", "Yakutsk", True),
    "540,0": TimeZoneRecord("+09:00", "Tokyo", False),

    "570,0": TimeZoneRecord("+09:30", "Darwin", False),
    "570,1,s": TimeZoneRecord("+09:30", "Adelaide", True),

    "600,0": TimeZoneRecord("+10:00", "Brisbane", False),
    "600,1": TimeZoneRecord("+10:00", "Canberra", True),
    "600,1,s": TimeZoneRecord("+10:00", "Sydney", True),

    "660,1": TimeZoneRecord("+11:00", "New Caledonia", True),
    "660,0": TimeZoneRecord("+11:00", "Solomon Is.", False),

    "720,1,s": TimeZoneRecord("+12:00", "Auckland", True),
    "720,0": TimeZoneRecord("+12:00", "Fiji", False),

    "765,1,s": TimeZoneRecord("+12:45", "Chatham Is.", True),

    "780,0": TimeZoneRecord("+13:00", "Samoa", False),
}

# === DST START DATES ===
# Local wall-clock instants in the reference year. Each falls after the zone
# has moved its clocks forward, before the next sibling's start, and outside
# every sibling's skipped hour.
_YEAR = CONFIG["REFERENCE_YEAR"]

_DST_START_DATES: Dict[str, datetime] = {
    # North America: US rules vs. Cuba, Goose Bay and the Mexican April rule
    "Goose Bay": datetime(_YEAR, 3, 13, 1, 30, 0),  # 00:01 transition until late 2011
    "Atlantic Time (Canada)": datetime(_YEAR, 3, 13, 3, 0, 0),
    "Eastern Time (US & Canada)": datetime(_YEAR, 3, 13, 3, 0, 0),
    "Havana": datetime(_YEAR, 3, 20, 2, 0, 0),
    "Mountain Time (US & Canada)": datetime(_YEAR, 3, 13, 3, 0, 0),
    "Mazatlan": datetime(_YEAR, 4, 3, 3, 0, 0),
    "Central America": datetime(_YEAR, 3, 13, 3, 0, 0),
    "Mexico City": datetime(_YEAR, 4, 3, 3, 0, 0),
    "Miquelon": datetime(_YEAR, 3, 13, 3, 0, 0),
    "Godthab": datetime(_YEAR, 3, 26, 23, 30, 0),

    # South America
    "Santiago": datetime(_YEAR, 8, 21, 2, 0, 0),
    "Asuncion": datetime(_YEAR, 10, 2, 3, 0, 0),
    "Campo Grande": datetime(_YEAR, 10, 16, 5, 0, 0),
    "Montevideo": datetime(_YEAR, 10, 2, 3, 0, 0),
    "Brasilia": datetime(_YEAR, 10, 16, 5, 0, 0),

    # Eastern Mediterranean
    "Beirut": datetime(_YEAR, 3, 27, 1, 0, 0),
    "Athens": datetime(_YEAR, 3, 27, 4, 0, 0),
    "Istanbul": datetime(_YEAR, 3, 28, 4, 0, 0),
    "Damascus": datetime(_YEAR, 4, 1, 1, 30, 0),  # Gaza moved the same night
    "Jerusalem": datetime(_YEAR, 4, 1, 6, 0, 0),
    "Cairo": datetime(_YEAR, 4, 29, 4, 0, 0),

    # Caucasus
    "Yerevan": datetime(_YEAR, 3, 27, 3, 30, 0),
    "Baku": datetime(_YEAR, 3, 27, 8, 0, 0),

    # South Pacific
    "Auckland": datetime(_YEAR, 9, 25, 3, 0, 0),
    "Fiji": datetime(_YEAR, 11, 27, 3, 0, 0),
}

# === AMBIGUITY LIST ===
# Candidates are scanned in order and the first one found in DST wins, so each
# tuple must stay sorted by DST start.
_AMBIGUITIES: Dict[str, Tuple[str, ...]] = {
    "Atlantic Time (Canada)": ("Goose Bay", "Atlantic Time (Canada)"),
    "Eastern Time (US & Canada)": ("Eastern Time (US & Canada)", "Havana"),
    "Mountain Time (US & Canada)": ("Mountain Time (US & Canada)", "Mazatlan"),
    "Central America": ("Central America", "Mexico City"),
    "Brasilia": ("Miquelon", "Godthab"),
    "Santiago": ("Santiago", "Asuncion", "Campo Grande"),
    "Montevideo": ("Montevideo", "Brasilia"),
    "Athens": ("Beirut", "Athens", "Istanbul", "Damascus", "Jerusalem", "Cairo"),
    "Yerevan": ("Yerevan", "Baku"),
    "Auckland": ("Auckland", "Fiji"),
}


def validate_tables(tables: SignatureTables) -> None:
    """
    Check the ambiguity rules of a set of signature tables.

    Args:
        tables: Tables to check

    Raises:
        SignatureTableError: If a candidate has no DST start date, or a
            candidate list is not in chronological order of DST start.
    """
    for primary, candidates in tables.ambiguities.items():
        previous: Optional[datetime] = None
        for candidate in candidates:
            start = tables.dst_start_dates.get(candidate)
            if start is None:
                raise SignatureTableError(
                    f"Ambiguity candidate {candidate!r} for {primary!r} has no DST start date"
                )
            if previous is not None and start < previous:
                raise SignatureTableError(
                    f"Ambiguity candidates for {primary!r} are not in DST start order at {candidate!r}"
                )
            previous = start


def make_signature_tables(
    timezones: Mapping[str, TimeZoneRecord],
    ambiguities: Optional[Mapping[str, Sequence[str]]] = None,
    dst_start_dates: Optional[Mapping[str, datetime]] = None,
) -> SignatureTables:
    """
    Build a validated, read-only set of signature tables.

    Args:
        timezones: Signature key to record mapping
        ambiguities: Primary identifier to ordered candidate identifiers
        dst_start_dates: Identifier to local DST start instant

    Returns:
        SignatureTables: Frozen copies of the supplied mappings
    """
    tables = SignatureTables(
        timezones=MappingProxyType(dict(timezones)),
        ambiguities=MappingProxyType(
            {key: tuple(value) for key, value in (ambiguities or {}).items()}
        ),
        dst_start_dates=MappingProxyType(dict(dst_start_dates or {})),
    )
    validate_tables(tables)
    return tables


_DEFAULT_TABLES = make_signature_tables(_TIMEZONES, _AMBIGUITIES, _DST_START_DATES)


def get_signature_tables() -> SignatureTables:
    """Return the shipped signature tables."""
    return _DEFAULT_TABLES
