"""
GPS Time Conversion

LoRaWAN expresses network time (DeviceTimeAns, beacons) as the time
elapsed since the GPS epoch, 1980-01-06T00:00:00Z. GPS time does not
observe leap seconds, so it runs ahead of UTC by the number of leap
seconds inserted since the epoch.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

__all__ = [
    "GPS_EPOCH",
    "LEAP_SECONDS",
    "leap_seconds_at",
    "to_gps",
    "from_gps",
]

GPS_EPOCH = datetime(1980, 1, 6, tzinfo=timezone.utc)

# UTC instants right after each leap second inserted since the GPS epoch
LEAP_SECONDS = tuple(
    datetime(year, month, 1, tzinfo=timezone.utc)
    for year, month in (
        (1981, 7),
        (1982, 7),
        (1983, 7),
        (1985, 7),
        (1988, 1),
        (1990, 1),
        (1991, 1),
        (1992, 7),
        (1993, 7),
        (1994, 7),
        (1996, 1),
        (1997, 7),
        (1999, 1),
        (2006, 1),
        (2009, 1),
        (2012, 7),
        (2015, 7),
        (2017, 1),
    )
)


def _as_utc(t: datetime) -> datetime:
    if t.tzinfo is None:
        return t.replace(tzinfo=timezone.utc)
    return t.astimezone(timezone.utc)


def leap_seconds_at(t: datetime) -> int:
    """Number of leap seconds between the GPS epoch and the UTC instant ``t``."""
    t = _as_utc(t)
    return sum(1 for leap in LEAP_SECONDS if t >= leap)


def to_gps(t: datetime) -> timedelta:
    """
    Convert a UTC instant to GPS time.

    Naive datetimes are taken to be UTC.

    Args:
        t: Instant to convert.

    Returns:
        Time elapsed since the GPS epoch on the GPS time scale.

    Examples:
        >>> to_gps(datetime(1980, 1, 6, tzinfo=timezone.utc))
        datetime.timedelta(0)
        >>> to_gps(datetime(2017, 1, 1, tzinfo=timezone.utc)).total_seconds()
        1167264018.0
    """
    t = _as_utc(t)
    return (t - GPS_EPOCH) + timedelta(seconds=leap_seconds_at(t))


def from_gps(gps: timedelta) -> datetime:
    """
    Convert GPS time to a UTC instant.

    Args:
        gps: Time elapsed since the GPS epoch on the GPS time scale.

    Returns:
        Timezone-aware UTC datetime.
    """
    t = GPS_EPOCH + gps
    leaps = 0
    for i, leap in enumerate(LEAP_SECONDS):
        # The i-th leap second occurred at this GPS offset
        if t >= leap + timedelta(seconds=i + 1):
            leaps = i + 1
    return t - timedelta(seconds=leaps)
