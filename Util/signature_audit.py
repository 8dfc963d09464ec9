#!/usr/bin/env python3
"""
Timezone Signature Audit

A maintenance utility that checks the detector's signature tables against the
IANA timezone database shipped with Python.

This script:
1. Builds a simulated local clock for every IANA zone using zoneinfo
2. Runs the detector against each simulated clock
3. Writes a CSV with the signature key and detected zone per IANA zone
4. Optionally reports signatures that have no table entry

Usage:
    # Generate the audit CSV
    python signature_audit.py

    # Generate with custom output filename
    python signature_audit.py --output my_audit.csv

    # Log signatures the tables do not cover
    python signature_audit.py --missing

Maintenance:
    Run with --missing after a tzdata update to find offset/DST combinations
    that have appeared since the tables were last revised.

Author: Dan Parker
License: GPL v3
Version: 1.0.0
"""

import csv
import logging
import zoneinfo
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from timezone_detect import describe_local_timezone, determine_timezone, format_utc_offset
from timezone_signatures import SignatureTables, get_signature_tables

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

FIELDNAMES = [
    "iana_timezone", "signature_key", "probed_offset",
    "identifier", "utc_offset", "uses_dst",
]


def zone_clock(iana_zone: str) -> Callable[[datetime], int]:
    """Build an offset probe that behaves like a host set to iana_zone.

    Args:
        iana_zone: IANA timezone identifier

    Returns:
        Callable mapping a naive local datetime to minutes east of UTC
    """
    tz = zoneinfo.ZoneInfo(iana_zone)

    def get_offset(date: datetime) -> int:
        return int(date.replace(tzinfo=tz).utcoffset().total_seconds()) // 60

    return get_offset


class SignatureAuditor:
    """Runs the detector against IANA zones and reports the outcome."""

    def __init__(self, output_file: str = "signature_audit.csv",
                 tables: Optional[SignatureTables] = None):
        """Initialize the auditor.

        Args:
            output_file: Name of the output CSV file
            tables: Signature tables to audit, defaults to the shipped ones
        """
        self.output_file = Path(output_file)
        self.tables = tables or get_signature_tables()

    def audit_zone(self, iana_zone: str) -> Dict[str, str]:
        """Detect the zone a host set to iana_zone would report.

        Args:
            iana_zone: IANA timezone identifier

        Returns:
            Dictionary representing a CSV row
        """
        clock = zone_clock(iana_zone)
        info = describe_local_timezone(clock)
        result = determine_timezone(get_offset=clock, tables=self.tables)
        record = result.timezone

        return {
            "iana_timezone": iana_zone,
            "signature_key": result.key,
            "probed_offset": format_utc_offset(info.utc_offset),
            "identifier": record.identifier if record else "",
            "utc_offset": record.utc_offset if record else "",
            "uses_dst": ("yes" if record.uses_dst else "no") if record else "",
        }

    def audit_zones(self, iana_zones: Iterable[str]) -> List[Dict[str, str]]:
        """Audit each zone, skipping any that zoneinfo cannot load."""
        rows = []
        for iana_zone in iana_zones:
            try:
                rows.append(self.audit_zone(iana_zone))
            except (zoneinfo.ZoneInfoNotFoundError, ValueError) as e:
                logger.warning(f"Failed to audit timezone {iana_zone}: {e}")
        return rows

    def write_csv(self, rows: List[Dict[str, str]]) -> None:
        """Write audit rows to the CSV file.

        Args:
            rows: List of dictionaries representing CSV rows
        """
        try:
            with open(self.output_file, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
                writer.writeheader()
                writer.writerows(rows)

            logger.info(f"Successfully wrote {len(rows)} entries to {self.output_file}")

        except OSError as e:
            logger.error(f"Failed to write CSV file: {e}")
            raise

    @staticmethod
    def missing_signatures(rows: List[Dict[str, str]]) -> Dict[str, List[str]]:
        """Group IANA zones whose signature has no table entry by signature key."""
        missing: Dict[str, List[str]] = {}
        for row in rows:
            if not row["identifier"]:
                missing.setdefault(row["signature_key"], []).append(row["iana_timezone"])
        return missing

    @staticmethod
    def offset_mismatches(rows: List[Dict[str, str]]) -> List[Dict[str, str]]:
        """Rows whose detected record states a different offset than the clock showed."""
        return [
            row for row in rows
            if row["identifier"] and row["utc_offset"] != row["probed_offset"]
        ]

    def run(self, report_missing: bool = False) -> List[Dict[str, str]]:
        """Audit every available IANA zone and write the CSV report."""
        logger.info("Starting signature audit...")

        all_iana_zones = sorted(zoneinfo.available_timezones())
        if not all_iana_zones:
            logger.warning("No IANA timezones available - install the tzdata package")

        rows = self.audit_zones(all_iana_zones)
        self.write_csv(rows)

        missing = self.missing_signatures(rows)
        if report_missing and missing:
            logger.warning(f"Found {len(missing)} signatures without a table entry:")
            for key, zones in sorted(missing.items()):
                shown = ", ".join(zones[:5])
                logger.warning(f"  - {key}: {shown}{'...' if len(zones) > 5 else ''}")

        for row in self.offset_mismatches(rows):
            logger.warning(
                f"Offset mismatch for {row['iana_timezone']}: probed {row['probed_offset']}, "
                f"table says {row['utc_offset']} ({row['signature_key']})"
            )

        logger.info(f"Audit complete!")
        logger.info(f"Total zones: {len(rows)}")
        logger.info(f"Undetermined zones: {sum(len(zones) for zones in missing.values())}")
        return rows


def main(argv=None):
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Audit timezone signature tables against the IANA database"
    )
    parser.add_argument(
        "--output", "-o",
        default="signature_audit.csv",
        help="Output CSV filename (default: signature_audit.csv)"
    )
    parser.add_argument(
        "--missing",
        action="store_true",
        help="Log signatures that have no table entry"
    )

    args = parser.parse_args(argv)

    try:
        SignatureAuditor(args.output).run(report_missing=args.missing)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise


if __name__ == "__main__":
    main()
