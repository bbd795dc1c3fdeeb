"""
Shared Regional Parameters

Defaults common to most bands, and the helper that expands a band's
latest record into its full version history.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
from typing import Dict, Optional, Sequence, Tuple

from lorawan.band.band import Band, BandTransform
from lorawan.core.types import PHYVersion

__all__ = [
    "RECEIVE_DELAY_1",
    "RECEIVE_DELAY_2",
    "JOIN_ACCEPT_DELAY_1",
    "JOIN_ACCEPT_DELAY_2",
    "MAX_FCNT_GAP",
    "MIN_RETRANSMIT_TIMEOUT",
    "MAX_RETRANSMIT_TIMEOUT",
    "RELAY_FORWARD_DELAY",
    "RELAY_RECEIVE_DELAY",
    "BEACON_CODING_RATE",
    "tx_offsets",
    "channel_frequencies",
    "build_versions",
]

RECEIVE_DELAY_1 = timedelta(seconds=1)
RECEIVE_DELAY_2 = timedelta(seconds=2)
JOIN_ACCEPT_DELAY_1 = timedelta(seconds=5)
JOIN_ACCEPT_DELAY_2 = timedelta(seconds=6)
MAX_FCNT_GAP = 16384
MIN_RETRANSMIT_TIMEOUT = timedelta(seconds=1)
MAX_RETRANSMIT_TIMEOUT = timedelta(seconds=3)
RELAY_FORWARD_DELAY = timedelta(milliseconds=50)
RELAY_RECEIVE_DELAY = timedelta(seconds=18)
BEACON_CODING_RATE = "4/5"


def tx_offsets(n: int, step: float = 2.0) -> Tuple[float, ...]:
    """TxPower offsets 0, -step, -2*step, ... (``n`` entries)."""
    return tuple(-step * i for i in range(n))


def channel_frequencies(first: int, step: int, count: int) -> Tuple[int, ...]:
    """Evenly spaced channel frequencies in Hz."""
    return tuple(first + step * i for i in range(count))


def build_versions(
    latest: Band,
    downgrades: Sequence[Tuple[PHYVersion, Optional[BandTransform]]],
) -> Dict[PHYVersion, Band]:
    """
    Expand the latest band record into every supported version.

    Each step derives the next older version from the previous record, so
    a transform only describes what changed between two releases.

    Args:
        latest: Record of the newest supported version.
        downgrades: ``(version, transform)`` pairs, newest first. A ``None``
            transform means the version is identical to the previous one.

    Returns:
        Mapping of version to band record.
    """
    versions = {latest.phy_version: latest}
    band = latest
    for version, transform in downgrades:
        if transform is not None:
            band = transform(band)
        band = replace(band, phy_version=version)
        versions[version] = band
    return versions
