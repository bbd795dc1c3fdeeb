"""
AS 923 MHz

Four frequency plans sharing one parameter set and differing only in their
default channels: AS923-1 (923.2/923.4 MHz), AS923-2 (921.4/921.6 MHz),
AS923-3 (916.6/916.8 MHz) and AS923-4 (917.3/917.5 MHz).

Uplink and downlink dwell time limits apply at boot, so DR0 and DR1 carry no
payload and Rx1 never goes below DR2 until TxParamSetupReq lifts the limit.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional, Tuple

from lorawan.band.band import (
    Band,
    Beacon,
    Channel,
    DwellTime,
    Rx1DataRateTable,
    Rx2Parameters,
    SubBandParameters,
    disable_relay,
    offset_rx1_data_rate_table,
    rx1_channel_identity,
    set_rx1_data_rate,
)
from lorawan.band.channel_mask import generate_ch_mask16, parse_ch_mask16
from lorawan.band.common import (
    BEACON_CODING_RATE,
    JOIN_ACCEPT_DELAY_1,
    JOIN_ACCEPT_DELAY_2,
    MAX_FCNT_GAP,
    MAX_RETRANSMIT_TIMEOUT,
    MIN_RETRANSMIT_TIMEOUT,
    RECEIVE_DELAY_1,
    RECEIVE_DELAY_2,
    RELAY_FORWARD_DELAY,
    RELAY_RECEIVE_DELAY,
    build_versions,
    tx_offsets,
)
from lorawan.band.data_rate import dwell_time_max_mac_payload_size, fsk, lora
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = [
    "AS_923",
    "AS_923_2",
    "AS_923_3",
    "AS_923_4",
    "AS_923_VERSIONS",
    "AS_923_2_VERSIONS",
    "AS_923_3_VERSIONS",
    "AS_923_4_VERSIONS",
]

AS_923 = "AS_923"
AS_923_2 = "AS_923_2"
AS_923_3 = "AS_923_3"
AS_923_4 = "AS_923_4"

_RX1_OFFSETS = (0, -1, -2, -3, -4, -5, 1, 2)

_AS_RX1_DATA_RATE = Rx1DataRateTable(
    offset_rx1_data_rate_table(7, _RX1_OFFSETS, 0, 5),
    offset_rx1_data_rate_table(7, _RX1_OFFSETS, 2, 5),
)

# RP001-1.0.2 only defined Rx1DROffset 0-5.
_AS_LEGACY_RX1_DATA_RATE = Rx1DataRateTable(
    offset_rx1_data_rate_table(7, _RX1_OFFSETS[:6], 0, 5),
    offset_rx1_data_rate_table(7, _RX1_OFFSETS[:6], 2, 5),
)


def _default_channels(first: int) -> Tuple[Channel, ...]:
    return (
        Channel(first, 0, 5),
        Channel(first + 200_000, 0, 5),
    )


_as_923_rp2_v1_0_3 = Band(
    id=AS_923,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=3, coding_rate=BEACON_CODING_RATE, frequencies=(923_400_000,)),
    ping_slot_frequencies=(923_400_000,),
    max_uplink_channels=16,
    uplink_channels=_default_channels(923_200_000),
    max_downlink_channels=16,
    downlink_channels=_default_channels(923_200_000),
    sub_bands=(SubBandParameters(915_000_000, 928_000_000, 0.01, 16.15),),
    data_rates={
        0: lora(12, 125_000, dwell_time_max_mac_payload_size(59, 0)),
        1: lora(11, 125_000, dwell_time_max_mac_payload_size(59, 0)),
        2: lora(10, 125_000, dwell_time_max_mac_payload_size(59, 19)),
        3: lora(9, 125_000, dwell_time_max_mac_payload_size(123, 61)),
        4: lora(8, 125_000, dwell_time_max_mac_payload_size(250, 133)),
        5: lora(7, 125_000, dwell_time_max_mac_payload_size(250, 250)),
        6: lora(7, 250_000, dwell_time_max_mac_payload_size(250, 250)),
        7: fsk(50_000, dwell_time_max_mac_payload_size(250, 250)),
    },
    freq_multiplier=100,
    implements_cf_list=True,
    cf_list_type=CFListType.FREQUENCIES,
    receive_delay_1=RECEIVE_DELAY_1,
    receive_delay_2=RECEIVE_DELAY_2,
    join_accept_delay_1=JOIN_ACCEPT_DELAY_1,
    join_accept_delay_2=JOIN_ACCEPT_DELAY_2,
    max_fcnt_gap=MAX_FCNT_GAP,
    supports_dynamic_adr=True,
    adr_ack_limit=ADRAckLimitExponent.ADR_ACK_LIMIT_64,
    adr_ack_delay=ADRAckDelayExponent.ADR_ACK_DELAY_32,
    min_retransmit_timeout=MIN_RETRANSMIT_TIMEOUT,
    max_retransmit_timeout=MAX_RETRANSMIT_TIMEOUT,
    tx_offset=tx_offsets(8),
    max_adr_data_rate_index=5,
    tx_param_setup_req_support=True,
    default_max_eirp=16,
    default_rx2_parameters=Rx2Parameters(data_rate_index=2, frequency=923_200_000),
    rx1_channel=rx1_channel_identity,
    rx1_data_rate=_AS_RX1_DATA_RATE,
    generate_ch_masks=generate_ch_mask16,
    parse_ch_mask=parse_ch_mask16,
    boot_dwell_time=DwellTime(uplinks=True, downlinks=True),
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)


def _variant(band_id: str, first: int, sub_band: Optional[SubBandParameters] = None) -> Band:
    """AS923 plan with a different pair of default channels."""
    channels = _default_channels(first)
    return replace(
        _as_923_rp2_v1_0_3,
        id=band_id,
        beacon=replace(_as_923_rp2_v1_0_3.beacon, frequencies=(first + 200_000,)),
        ping_slot_frequencies=(first + 200_000,),
        uplink_channels=channels,
        downlink_channels=channels,
        sub_bands=_as_923_rp2_v1_0_3.sub_bands if sub_band is None else (sub_band,),
        default_rx2_parameters=Rx2Parameters(data_rate_index=2, frequency=first),
    )


AS_923_VERSIONS = build_versions(
    _as_923_rp2_v1_0_3,
    (
        (PHYVersion.RP002_V1_0_2, None),
        (PHYVersion.RP002_V1_0_1, None),
        (PHYVersion.RP002_V1_0_0, None),
        (PHYVersion.RP001_V1_0_3_REV_A, disable_relay),
        (PHYVersion.RP001_V1_1_REV_B, None),
        (PHYVersion.RP001_V1_1_REV_A, None),
        (PHYVersion.RP001_V1_0_2_REV_B, None),
        (PHYVersion.RP001_V1_0_2, set_rx1_data_rate(_AS_LEGACY_RX1_DATA_RATE)),
    ),
)

AS_923_2_VERSIONS = build_versions(
    _variant(AS_923_2, 921_400_000),
    (
        (PHYVersion.RP002_V1_0_2, None),
        (PHYVersion.RP002_V1_0_1, None),
    ),
)

AS_923_3_VERSIONS = build_versions(
    _variant(AS_923_3, 916_600_000),
    (
        (PHYVersion.RP002_V1_0_2, None),
        (PHYVersion.RP002_V1_0_1, None),
    ),
)

AS_923_4_VERSIONS = build_versions(
    _variant(AS_923_4, 917_300_000, SubBandParameters(917_000_000, 920_000_000, 0.01, 16.15)),
    (),
)
