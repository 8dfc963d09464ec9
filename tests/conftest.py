"""Shared fixtures for the timezone detection tests."""

from __future__ import annotations

import time
from datetime import datetime

import pytest


def seasonal_clock(standard: int, daylight: int | None = None,
                   start: datetime | None = None, end: datetime | None = None):
    """Offset probe for an observer with one DST period per year.

    A start later in the year than the end means the DST period wraps around
    new year, as in the southern hemisphere.
    """
    def get_offset(date: datetime) -> int:
        if daylight is None:
            return standard
        if start < end:
            in_dst = start <= date < end
        else:
            in_dst = date >= start or date < end
        return daylight if in_dst else standard

    return get_offset


@pytest.fixture
def host_tz(monkeypatch):
    """Switch the process timezone through the TZ variable."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def _set(value: str) -> None:
        monkeypatch.setenv("TZ", value)
        time.tzset()

    yield _set
    monkeypatch.undo()
    time.tzset()
