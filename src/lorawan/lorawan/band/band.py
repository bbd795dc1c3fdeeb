"""
LoRaWAN Band Record

A :class:`Band` holds the regional parameters of one frequency plan family
at one PHY version: channel plan, sub-band limits, data rate table, MAC
timing defaults and the region-specific derivation functions (Rx1 channel
and data rate, ChMask generation and parsing).

Band records are immutable. Older PHY versions are derived from newer ones
with the downgrade transforms at the bottom of this module, each returning
a new record.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import timedelta
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Sequence, Tuple

from lorawan.band.channel_mask import (
    GenerateChMasksFunc,
    ParseChMaskFunc,
    make_generate_ch_mask72,
    parse_ch_mask72,
)
from lorawan.band.data_rate import MAX_DATA_RATE_INDEX, DataRate, Modulation
from lorawan.core.errors import DataRateIndexTooHigh, DataRateOffsetTooHigh
from lorawan.core.types import (
    ADRAckDelayExponent,
    ADRAckLimitExponent,
    CFListType,
    PHYVersion,
)

__all__ = [
    # Records
    "Channel",
    "SubBandParameters",
    "Beacon",
    "Rx2Parameters",
    "DwellTime",
    "Band",
    # Rx1 derivation
    "Rx1ChannelFunc",
    "Rx1DataRateFunc",
    "rx1_channel_identity",
    "Rx1ChannelModulo",
    "Rx1DataRateTable",
    "offset_rx1_data_rate_table",
    # Downgrades
    "BandTransform",
    "disable_cf_list",
    "disable_ch_mask_cntl5",
    "disable_atomic_link_adr",
    "disable_tx_param_setup_req",
    "disable_relay",
    "clip_tx_offsets",
    "set_beacon_data_rate_index",
    "set_boot_dwell_time",
    "remove_data_rates",
    "update_data_rates",
    "set_rx1_data_rate",
    "compose",
]


@dataclass(frozen=True)
class Channel:
    """Default channel of a band."""

    frequency: int  # Hz
    min_data_rate: int
    max_data_rate: int


@dataclass(frozen=True)
class SubBandParameters:
    """Regulatory sub-band with its duty cycle and EIRP limits."""

    min_frequency: int  # Hz, inclusive
    max_frequency: int  # Hz, inclusive
    duty_cycle: float  # 0 < duty_cycle <= 1
    max_eirp: float  # dBm

    def contains(self, frequency: int) -> bool:
        return self.min_frequency <= frequency <= self.max_frequency


@dataclass(frozen=True)
class Beacon:
    """Class B beacon parameters."""

    data_rate_index: int
    coding_rate: str
    frequencies: Tuple[int, ...] = ()


@dataclass(frozen=True)
class Rx2Parameters:
    """Default second receive window."""

    data_rate_index: int
    frequency: int  # Hz


@dataclass(frozen=True)
class DwellTime:
    """Dwell time state; ``None`` means the band leaves it unspecified."""

    uplinks: Optional[bool] = None
    downlinks: Optional[bool] = None


# =============================================================================
# Rx1 Derivation
# =============================================================================

Rx1ChannelFunc = Callable[[int], int]
Rx1DataRateFunc = Callable[[int, int, bool], int]


def rx1_channel_identity(index: int) -> int:
    """Rx1 downlink channel equals the uplink channel."""
    return index


@dataclass(frozen=True)
class Rx1ChannelModulo:
    """Rx1 downlink channel is the uplink channel modulo ``n``."""

    n: int

    def __call__(self, index: int) -> int:
        return index % self.n


@dataclass(frozen=True)
class Rx1DataRateTable:
    """Rx1 data rate lookup: ``rows[uplink_dr][rx1_dr_offset]``.

    ``dwell_rows`` replaces ``rows`` while downlink dwell time applies. A
    ``None`` row marks an uplink data rate without Rx1 mapping.
    """

    rows: Tuple[Optional[Tuple[int, ...]], ...]
    dwell_rows: Optional[Tuple[Optional[Tuple[int, ...]], ...]] = None

    def __call__(self, index: int, offset: int, dwell_time: bool) -> int:
        rows = self.dwell_rows if dwell_time and self.dwell_rows is not None else self.rows
        if not 0 <= index < len(rows) or rows[index] is None:
            raise DataRateIndexTooHigh(index, len(rows) - 1)
        row = rows[index]
        if not 0 <= offset < len(row):
            raise DataRateOffsetTooHigh(offset, len(row) - 1)
        return row[offset]

    def truncate(self, max_index: int) -> "Rx1DataRateTable":
        """Table restricted to uplink data rates up to ``max_index``."""
        dwell_rows = None if self.dwell_rows is None else self.dwell_rows[: max_index + 1]
        return Rx1DataRateTable(self.rows[: max_index + 1], dwell_rows)


def offset_rx1_data_rate_table(
    max_index: int,
    offsets: Sequence[int],
    min_data_rate: int,
    max_data_rate: int,
) -> Tuple[Tuple[int, ...], ...]:
    """
    Build Rx1 rows where the downlink data rate is the uplink one shifted.

    Args:
        max_index: Highest uplink data rate index with a mapping.
        offsets: Data rate shift per Rx1DROffset (negative lowers the rate).
        min_data_rate: Lowest downlink data rate.
        max_data_rate: Highest downlink data rate.

    Returns:
        Rows for :class:`Rx1DataRateTable`.

    Examples:
        >>> offset_rx1_data_rate_table(2, (0, -1), 0, 5)
        ((0, 0), (1, 0), (2, 1))
    """
    return tuple(
        tuple(min(max(index + delta, min_data_rate), max_data_rate) for delta in offsets)
        for index in range(max_index + 1)
    )


# =============================================================================
# Band
# =============================================================================


@dataclass(frozen=True)
class Band:
    """Regional parameters of a band at one PHY version.

    Examples
    --------
        >>> from lorawan.band import get_latest, EU_863_870
        >>> eu = get_latest(EU_863_870)
        >>> eu.find_sub_band(868_100_000).duty_cycle
        0.01
    """

    id: str
    phy_version: PHYVersion

    beacon: Beacon
    ping_slot_frequencies: Tuple[int, ...]

    max_uplink_channels: int
    uplink_channels: Tuple[Channel, ...]
    max_downlink_channels: int
    downlink_channels: Tuple[Channel, ...]

    sub_bands: Tuple[SubBandParameters, ...]
    data_rates: Mapping[int, DataRate]

    freq_multiplier: int
    implements_cf_list: bool
    cf_list_type: CFListType

    receive_delay_1: timedelta
    receive_delay_2: timedelta
    join_accept_delay_1: timedelta
    join_accept_delay_2: timedelta
    max_fcnt_gap: int

    supports_dynamic_adr: bool
    adr_ack_limit: ADRAckLimitExponent
    adr_ack_delay: ADRAckDelayExponent
    min_retransmit_timeout: timedelta
    max_retransmit_timeout: timedelta

    tx_offset: Tuple[float, ...]
    max_adr_data_rate_index: int

    tx_param_setup_req_support: bool
    default_max_eirp: float
    default_rx2_parameters: Rx2Parameters

    rx1_channel: Rx1ChannelFunc = field(compare=False)
    rx1_data_rate: Rx1DataRateFunc = field(compare=False)
    generate_ch_masks: GenerateChMasksFunc = field(compare=False)
    parse_ch_mask: ParseChMaskFunc = field(compare=False)

    boot_dwell_time: DwellTime = DwellTime()
    strict_coding_rate: bool = False
    lora_coding_rate: str = "4/5"
    relay_forward_delay: timedelta = timedelta(0)
    relay_receive_delay: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if not isinstance(self.data_rates, MappingProxyType):
            object.__setattr__(self, "data_rates", MappingProxyType(dict(self.data_rates)))

    @property
    def enable_adr(self) -> bool:
        """ADR is available in every supported band."""
        return True

    def find_sub_band(self, frequency: int) -> Optional[SubBandParameters]:
        """Return the first sub-band, in declared order, containing ``frequency``."""
        for sub_band in self.sub_bands:
            if sub_band.contains(frequency):
                return sub_band
        return None

    def find_uplink_data_rate(self, rate: Modulation) -> Optional[Tuple[int, DataRate]]:
        """Return the lowest index whose modulation equals ``rate``."""
        for index in range(MAX_DATA_RATE_INDEX + 1):
            entry = self.data_rates.get(index)
            if entry is not None and entry.rate == rate:
                return index, entry
        return None

    def find_downlink_data_rate(self, rate: Modulation) -> Optional[Tuple[int, DataRate]]:
        """Return the highest index whose modulation equals ``rate``."""
        for index in range(MAX_DATA_RATE_INDEX, -1, -1):
            entry = self.data_rates.get(index)
            if entry is not None and entry.rate == rate:
                return index, entry
        return None

    def versions(self) -> Tuple[PHYVersion, ...]:
        """PHY versions available for this band id, newest first."""
        from lorawan.band.catalog import get_phy_versions

        return get_phy_versions(self.id)[self.id]

    def describe(self) -> dict:
        """JSON-serialisable description of every public parameter."""

        def channels(chs: Iterable[Channel]) -> list:
            return [
                {"frequency": ch.frequency, "min_data_rate": ch.min_data_rate, "max_data_rate": ch.max_data_rate}
                for ch in chs
            ]

        def seconds(d: timedelta) -> float:
            return d.total_seconds()

        return {
            "id": self.id,
            "phy_version": self.phy_version.name,
            "beacon": {
                "data_rate_index": self.beacon.data_rate_index,
                "coding_rate": self.beacon.coding_rate,
                "frequencies": list(self.beacon.frequencies),
            },
            "ping_slot_frequencies": list(self.ping_slot_frequencies),
            "max_uplink_channels": self.max_uplink_channels,
            "uplink_channels": channels(self.uplink_channels),
            "max_downlink_channels": self.max_downlink_channels,
            "downlink_channels": channels(self.downlink_channels),
            "sub_bands": [
                {
                    "min_frequency": sb.min_frequency,
                    "max_frequency": sb.max_frequency,
                    "duty_cycle": sb.duty_cycle,
                    "max_eirp": sb.max_eirp,
                }
                for sb in self.sub_bands
            ],
            "data_rates": {index: dr.describe() for index, dr in sorted(self.data_rates.items())},
            "freq_multiplier": self.freq_multiplier,
            "implements_cf_list": self.implements_cf_list,
            "cf_list_type": self.cf_list_type.name,
            "receive_delay_1": seconds(self.receive_delay_1),
            "receive_delay_2": seconds(self.receive_delay_2),
            "join_accept_delay_1": seconds(self.join_accept_delay_1),
            "join_accept_delay_2": seconds(self.join_accept_delay_2),
            "max_fcnt_gap": self.max_fcnt_gap,
            "supports_dynamic_adr": self.supports_dynamic_adr,
            "adr_ack_limit": self.adr_ack_limit.value_count,
            "adr_ack_delay": self.adr_ack_delay.value_count,
            "min_retransmit_timeout": seconds(self.min_retransmit_timeout),
            "max_retransmit_timeout": seconds(self.max_retransmit_timeout),
            "tx_offset": list(self.tx_offset),
            "max_adr_data_rate_index": self.max_adr_data_rate_index,
            "relay_forward_delay": seconds(self.relay_forward_delay),
            "relay_receive_delay": seconds(self.relay_receive_delay),
            "strict_coding_rate": self.strict_coding_rate,
            "tx_param_setup_req_support": self.tx_param_setup_req_support,
            "default_max_eirp": self.default_max_eirp,
            "lora_coding_rate": self.lora_coding_rate,
            "default_rx2_parameters": {
                "data_rate_index": self.default_rx2_parameters.data_rate_index,
                "frequency": self.default_rx2_parameters.frequency,
            },
            "boot_dwell_time": {
                "uplinks": self.boot_dwell_time.uplinks,
                "downlinks": self.boot_dwell_time.downlinks,
            },
        }


# =============================================================================
# Downgrades
# =============================================================================

BandTransform = Callable[[Band], Band]


def disable_cf_list(b: Band) -> Band:
    """Band version without CFList support in JoinAccept."""
    return replace(b, implements_cf_list=False)


def disable_ch_mask_cntl5(b: Band) -> Band:
    """72-channel band version without FSB selection (ChMaskCntl 5)."""
    atomic = getattr(b.generate_ch_masks, "keywords", {}).get("atomic", False)

    def parse(mask, cntl):
        return parse_ch_mask72(mask, cntl, support_cntl5=False)

    return replace(
        b,
        generate_ch_masks=make_generate_ch_mask72(support_cntl5=False, atomic=atomic),
        parse_ch_mask=parse,
    )


def disable_atomic_link_adr(b: Band) -> Band:
    """72-channel band version whose devices may apply LinkADRReq blocks one by one."""
    support_cntl5 = getattr(b.generate_ch_masks, "keywords", {}).get("support_cntl5", True)
    return replace(b, generate_ch_masks=make_generate_ch_mask72(support_cntl5=support_cntl5, atomic=False))


def disable_tx_param_setup_req(b: Band) -> Band:
    """Band version without TxParamSetupReq and boot dwell time."""
    return replace(b, tx_param_setup_req_support=False, boot_dwell_time=DwellTime())


def disable_relay(b: Band) -> Band:
    """Band version predating relay (TS011) timing parameters."""
    return replace(b, relay_forward_delay=timedelta(0), relay_receive_delay=timedelta(0))


def clip_tx_offsets(n: int) -> BandTransform:
    """Keep only the first ``n`` TxPower offsets."""

    def transform(b: Band) -> Band:
        return replace(b, tx_offset=b.tx_offset[:n])

    return transform


def set_beacon_data_rate_index(index: int) -> BandTransform:
    """Change the beacon data rate."""

    def transform(b: Band) -> Band:
        return replace(b, beacon=replace(b.beacon, data_rate_index=index))

    return transform


def set_boot_dwell_time(uplinks: Optional[bool], downlinks: Optional[bool]) -> BandTransform:
    """Change the dwell time assumed at boot."""

    def transform(b: Band) -> Band:
        return replace(b, boot_dwell_time=DwellTime(uplinks=uplinks, downlinks=downlinks))

    return transform


def remove_data_rates(*indices: int) -> BandTransform:
    """Drop data rate entries that the older version does not define."""

    def transform(b: Band) -> Band:
        return replace(b, data_rates={i: dr for i, dr in b.data_rates.items() if i not in indices})

    return transform


def update_data_rates(data_rates: Mapping[int, DataRate]) -> BandTransform:
    """Replace or add data rate entries."""

    def transform(b: Band) -> Band:
        merged: Dict[int, DataRate] = dict(b.data_rates)
        merged.update(data_rates)
        return replace(b, data_rates=merged)

    return transform


def set_rx1_data_rate(rx1_data_rate: Rx1DataRateFunc) -> BandTransform:
    """Change the Rx1 data rate derivation."""

    def transform(b: Band) -> Band:
        return replace(b, rx1_data_rate=rx1_data_rate)

    return transform


def compose(*transforms: BandTransform) -> BandTransform:
    """Apply ``transforms`` left to right."""

    def transform(b: Band) -> Band:
        for t in transforms:
            b = t(b)
        return b

    return transform
