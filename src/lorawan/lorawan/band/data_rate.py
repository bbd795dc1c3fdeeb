"""
LoRaWAN Data Rates

A data rate index (0-15) selects one modulation record in a band:
- LoRa: spreading factor, bandwidth and coding rate
- FSK: bit rate
- LR-FHSS: modulation type, operating channel width and coding rate

Each band entry pairs the modulation record with its maximum MAC payload
size, which may depend on whether dwell time limitations are in force.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Optional, Union

from lorawan.core.errors import DataRateNotFound

if TYPE_CHECKING:
    from lorawan.band.band import Band

__all__ = [
    "LoRaDataRate",
    "FSKDataRate",
    "LRFHSSDataRate",
    "Modulation",
    "MaxMACPayloadSize",
    "DataRate",
    "const_max_mac_payload_size",
    "dwell_time_max_mac_payload_size",
    "lora",
    "fsk",
    "lrfhss",
    "map_data_rate_index",
    "MAX_DATA_RATE_INDEX",
]

MAX_DATA_RATE_INDEX = 15

# Default LoRa coding rate
CR_4_5 = "4/5"


@dataclass(frozen=True)
class LoRaDataRate:
    """LoRa modulation parameters."""

    spreading_factor: int
    bandwidth: int  # Hz
    coding_rate: str = CR_4_5

    def __str__(self) -> str:
        return f"SF{self.spreading_factor}BW{self.bandwidth // 1000}"


@dataclass(frozen=True)
class FSKDataRate:
    """FSK modulation parameters."""

    bit_rate: int  # bit/s

    def __str__(self) -> str:
        return f"FSK{self.bit_rate // 1000}"


@dataclass(frozen=True)
class LRFHSSDataRate:
    """LR-FHSS modulation parameters."""

    modulation_type: int
    operating_channel_width: int  # Hz
    coding_rate: str

    def __str__(self) -> str:
        return f"LRFHSS-OCW{self.operating_channel_width // 1000}-CR{self.coding_rate}"


Modulation = Union[LoRaDataRate, FSKDataRate, LRFHSSDataRate]


@dataclass(frozen=True)
class MaxMACPayloadSize:
    """Maximum MAC payload size (M) as a function of dwell time.

    Calling the instance returns the size that applies::

        >>> size = MaxMACPayloadSize(no_dwell_time=59, dwell_time=19)
        >>> size(True)
        19
    """

    no_dwell_time: int
    dwell_time: int

    def __call__(self, dwell_time: bool) -> int:
        return self.dwell_time if dwell_time else self.no_dwell_time


def const_max_mac_payload_size(size: int) -> MaxMACPayloadSize:
    """Payload size that does not depend on dwell time."""
    return MaxMACPayloadSize(size, size)


def dwell_time_max_mac_payload_size(no_dwell_time: int, dwell_time: int) -> MaxMACPayloadSize:
    """Payload size that shrinks under a 400 ms dwell time limit."""
    return MaxMACPayloadSize(no_dwell_time, dwell_time)


@dataclass(frozen=True)
class DataRate:
    """Band data rate entry: modulation plus payload size limits."""

    rate: Modulation
    max_mac_payload_size: MaxMACPayloadSize

    def describe(self) -> dict:
        """JSON-serialisable description of the entry."""
        rate = self.rate
        if isinstance(rate, LoRaDataRate):
            modulation = {
                "lora": {
                    "spreading_factor": rate.spreading_factor,
                    "bandwidth": rate.bandwidth,
                    "coding_rate": rate.coding_rate,
                }
            }
        elif isinstance(rate, FSKDataRate):
            modulation = {"fsk": {"bit_rate": rate.bit_rate}}
        else:
            modulation = {
                "lrfhss": {
                    "modulation_type": rate.modulation_type,
                    "operating_channel_width": rate.operating_channel_width,
                    "coding_rate": rate.coding_rate,
                }
            }
        return {
            "rate": modulation,
            "max_mac_payload_size": {
                "no_dwell_time": self.max_mac_payload_size.no_dwell_time,
                "dwell_time": self.max_mac_payload_size.dwell_time,
            },
        }


# =============================================================================
# Factories
# =============================================================================


def lora(
    spreading_factor: int,
    bandwidth: int,
    size: Union[int, MaxMACPayloadSize],
    coding_rate: str = CR_4_5,
) -> DataRate:
    """
    Build a LoRa data rate entry.

    Args:
        spreading_factor: 5-12.
        bandwidth: Channel bandwidth in Hz.
        size: Constant maximum MAC payload size, or a dwell-time dependent one.
        coding_rate: LoRa coding rate, "4/5" unless the band says otherwise.

    Returns:
        DataRate entry.
    """
    if isinstance(size, int):
        size = const_max_mac_payload_size(size)
    return DataRate(LoRaDataRate(spreading_factor, bandwidth, coding_rate), size)


def fsk(bit_rate: int, size: Union[int, MaxMACPayloadSize]) -> DataRate:
    """Build an FSK data rate entry."""
    if isinstance(size, int):
        size = const_max_mac_payload_size(size)
    return DataRate(FSKDataRate(bit_rate), size)


def lrfhss(
    modulation_type: int,
    operating_channel_width: int,
    coding_rate: str,
    size: Union[int, MaxMACPayloadSize],
) -> DataRate:
    """Build an LR-FHSS data rate entry."""
    if isinstance(size, int):
        size = const_max_mac_payload_size(size)
    return DataRate(LRFHSSDataRate(modulation_type, operating_channel_width, coding_rate), size)


# =============================================================================
# Cross-band Mapping
# =============================================================================


def _find_index(data_rates: Mapping[int, DataRate], rate: Modulation) -> Optional[int]:
    for index in range(MAX_DATA_RATE_INDEX + 1):
        entry = data_rates.get(index)
        if entry is not None and entry.rate == rate:
            return index
    return None


def map_data_rate_index(src: "Band", index: int, dst: "Band") -> int:
    """
    Map a data rate index of one band to the equivalent index of another.

    The same index is kept when both bands define it with identical
    modulation. Otherwise the smallest index of ``dst`` with the same
    modulation is returned.

    Args:
        src: Band the index belongs to.
        index: Data rate index in ``src``.
        dst: Band to map into.

    Returns:
        Data rate index in ``dst``.

    Raises:
        DataRateNotFound: If ``src`` does not define ``index`` or ``dst`` has
            no matching modulation.
    """
    entry = src.data_rates.get(index)
    if entry is None:
        raise DataRateNotFound(index)
    dst_entry = dst.data_rates.get(index)
    if dst_entry is not None and dst_entry.rate == entry.rate:
        return index
    found = _find_index(dst.data_rates, entry.rate)
    if found is None:
        raise DataRateNotFound(index)
    return found
