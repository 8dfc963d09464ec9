"""
Local Timezone Detection

Guesses the timezone of the machine it runs on from nothing but the local
clock: the UTC offset on two fixed dates of a reference year tells whether
daylight saving is observed and in which hemisphere, and that signature is
looked up in a static table. Zones that share a signature are told apart by
checking the clock at the instants each of them starts daylight saving.

Usage:
    from timezone_detect import determine_timezone, format_timezone

    result = determine_timezone()
    if result.timezone is not None:
        print(format_timezone(result.timezone))

    #Simulate another observer (minutes east of UTC for a naive local datetime)
    determine_timezone(get_offset=lambda date: 330)

    #Signature key and record without ambiguity checks
    resolve_candidate(describe_local_timezone())

Author: Dan Parker
License: GPL v3
Version: 1.0.0
"""

import logging
from datetime import datetime
from typing import Callable, NamedTuple, Optional, Tuple

from detect_config import CONFIG
from timezone_signatures import (
    SignatureTables,
    TimeZoneRecord,
    TimezoneDetectError,
    get_signature_tables,
)

__version__ = "1.0.0"
__author__ = "Dan Parker"
__license__ = "GPLv3"

logger = logging.getLogger(__name__)

# === MODULE CONSTANTS ===
HEMISPHERE_SOUTH = "SOUTH"
HEMISPHERE_NORTH = "NORTH"
HEMISPHERE_UNKNOWN = "N/A"

_SECONDS_PER_MINUTE = 60
_LAST_NORTHERN_WINTER_MONTH = 6

OffsetProbe = Callable[[datetime], int]


class OffsetUnavailableError(TimezoneDetectError):
    """Raised when the host cannot report a local UTC offset."""


class LocalTimezoneInfo(NamedTuple):
    """Offset behaviour observed on the probe dates."""
    utc_offset: int
    dst: int
    hemisphere: str


class DetectionResult(NamedTuple):
    """Detected zone record (None when undetermined) and the key used to find it."""
    timezone: Optional[TimeZoneRecord]
    key: str


def get_date_offset(date: datetime) -> int:
    """
    Get the local clock's offset from UTC at a given instant.

    Args:
        date (datetime): Naive local wall-clock time

    Returns:
        int: Minutes ahead of UTC (positive east of UTC, negative west)

    Raises:
        OffsetUnavailableError: If the host cannot resolve the local offset
    """
    try:
        offset = date.astimezone().utcoffset()
    except (OverflowError, OSError, ValueError) as e:
        raise OffsetUnavailableError(f"Local UTC offset unavailable for {date}: {e}") from e

    if offset is None:
        raise OffsetUnavailableError(f"Local UTC offset unavailable for {date}")

    return int(offset.total_seconds()) // _SECONDS_PER_MINUTE


def _probe(get_offset: Optional[OffsetProbe]) -> OffsetProbe:
    return get_offset if get_offset is not None else get_date_offset


def _reference_date(month_day: Tuple[int, int]) -> datetime:
    month, day = month_day
    return datetime(CONFIG["REFERENCE_YEAR"], month, day, 0, 0, 0)


def get_january_offset(get_offset: Optional[OffsetProbe] = None) -> int:
    """Offset in minutes at local midnight on 1 January of the reference year."""
    return _probe(get_offset)(_reference_date(CONFIG["JANUARY_PROBE"]))


def get_june_offset(get_offset: Optional[OffsetProbe] = None) -> int:
    """Offset in minutes at local midnight on 1 June of the reference year."""
    return _probe(get_offset)(_reference_date(CONFIG["JUNE_PROBE"]))


def describe_local_timezone(get_offset: Optional[OffsetProbe] = None) -> LocalTimezoneInfo:
    """
    Characterize the local clock by its January and June offsets.

    The two probes are six months apart, so an observer who uses daylight
    saving is in it for at least one of them. The standard-time probe gives
    the canonical offset.

    Args:
        get_offset (callable): Offset source, defaults to the host clock

    Returns:
        LocalTimezoneInfo: Standard offset, DST flag (0 or 1) and hemisphere
    """
    january_offset = get_january_offset(get_offset)
    june_offset = get_june_offset(get_offset)
    diff = january_offset - june_offset

    if diff < 0:
        info = LocalTimezoneInfo(january_offset, 1, HEMISPHERE_NORTH)
    elif diff > 0:
        info = LocalTimezoneInfo(june_offset, 1, HEMISPHERE_SOUTH)
    else:
        info = LocalTimezoneInfo(january_offset, 0, HEMISPHERE_UNKNOWN)

    logger.debug(
        "Probed offsets january=%d june=%d -> %s", january_offset, june_offset, info
    )
    return info


def build_signature_key(utc_offset: int, dst: int, hemisphere: str) -> str:
    """Compose the table key, e.g. "-300,1" or "600,1,s"."""
    key = f"{utc_offset},{int(dst)}"
    if hemisphere == HEMISPHERE_SOUTH:
        key += CONFIG["SOUTHERN_SUFFIX"]
    return key


def resolve_candidate(
    info: LocalTimezoneInfo,
    tables: Optional[SignatureTables] = None,
) -> Tuple[Optional[TimeZoneRecord], str]:
    """
    Look up the zone record for a probed signature.

    Args:
        info (LocalTimezoneInfo): Result of describe_local_timezone()
        tables (SignatureTables): Lookup tables, defaults to the shipped ones

    Returns:
        tuple: (record or None, signature key). None means no known zone has
        this signature.
    """
    tables = tables or get_signature_tables()
    key = build_signature_key(info.utc_offset, info.dst, info.hemisphere)
    record = tables.timezones.get(key)

    if record is None:
        logger.debug("No timezone known for signature %s", key)
    return record, key


def date_is_dst(date: datetime, get_offset: Optional[OffsetProbe] = None) -> bool:
    """
    Check whether the local clock is in daylight saving at a given instant.

    Dates after June are compared against the June offset, on the assumption
    that a DST start late in the year belongs to the southern hemisphere.

    Args:
        date (datetime): Naive local wall-clock time
        get_offset (callable): Offset source, defaults to the host clock

    Returns:
        bool: True if the offset at date differs from the standard offset
    """
    if date.month > _LAST_NORTHERN_WINTER_MONTH:
        base_offset = get_june_offset(get_offset)
    else:
        base_offset = get_january_offset(get_offset)

    date_offset = _probe(get_offset)(date)
    return (base_offset - date_offset) != 0


def resolve_ambiguity(
    record: Optional[TimeZoneRecord],
    get_offset: Optional[OffsetProbe] = None,
    tables: Optional[SignatureTables] = None,
) -> Optional[TimeZoneRecord]:
    """
    Pick the right sibling for zones that share a signature.

    Candidates are checked in DST start order; the first one whose start
    instant already finds the local clock in daylight saving wins.

    Args:
        record (TimeZoneRecord): Candidate from resolve_candidate()
        get_offset (callable): Offset source, defaults to the host clock
        tables (SignatureTables): Lookup tables, defaults to the shipped ones

    Returns:
        TimeZoneRecord: The input record when nothing better matches,
        otherwise a new record carrying the matching identifier.
    """
    if record is None:
        return None

    tables = tables or get_signature_tables()
    candidates = tables.ambiguities.get(record.identifier)
    if not candidates:
        return record

    for candidate in candidates:
        if date_is_dst(tables.dst_start_dates[candidate], get_offset):
            logger.debug("Resolved ambiguous %s to %s", record.identifier, candidate)
            if candidate == record.identifier:
                return record
            return record._replace(identifier=candidate)

    logger.debug("No ambiguity candidate matched, keeping %s", record.identifier)
    return record


def determine_timezone(
    get_offset: Optional[OffsetProbe] = None,
    tables: Optional[SignatureTables] = None,
) -> DetectionResult:
    """
    Detect the local timezone.

    Args:
        get_offset (callable): Offset source, defaults to the host clock
        tables (SignatureTables): Lookup tables, defaults to the shipped ones

    Returns:
        DetectionResult: Best-guess record (None if undetermined) and the
        signature key that was looked up

    Raises:
        OffsetUnavailableError: If the host clock cannot be read
    """
    info = describe_local_timezone(get_offset)
    record, key = resolve_candidate(info, tables)
    return DetectionResult(resolve_ambiguity(record, get_offset, tables), key)


def format_utc_offset(minutes: int) -> str:
    """Render an offset in minutes as "+HH:MM" / "-HH:MM" ("00:00" for UTC)."""
    if minutes == 0:
        return "00:00"
    sign = "-" if minutes < 0 else "+"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def format_timezone(record: TimeZoneRecord) -> str:
    """Human readable summary of a zone record."""
    return (
        f"UTC-offset: {record.utc_offset}\n"
        f"Zoneinfo key: {record.identifier}\n"
        f"Zone uses DST: {'yes' if record.uses_dst else 'no'}"
    )


def get_library_info(tables: Optional[SignatureTables] = None):
    """
    Get information about the library and its lookup tables.

    Returns:
        dict: Dictionary containing library statistics
    """
    tables = tables or get_signature_tables()
    return {
        'version': __version__,
        'reference_year': CONFIG["REFERENCE_YEAR"],
        'signatures': len(tables.timezones),
        'ambiguous_identifiers': len(tables.ambiguities),
        'dst_start_dates': len(tables.dst_start_dates),
    }
