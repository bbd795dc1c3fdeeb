"""
CN 470-510 MHz

RP001 defines a single 96-channel plan. RP002 replaces it with four plans
selected by the antenna type (20 MHz or 26 MHz) and channel group (A or B).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Tuple

from lorawan.band.band import (
    Band,
    Beacon,
    Channel,
    DwellTime,
    Rx1ChannelModulo,
    Rx1DataRateTable,
    Rx2Parameters,
    SubBandParameters,
    disable_cf_list,
    offset_rx1_data_rate_table,
    rx1_channel_identity,
)
from lorawan.band.channel_mask import (
    generate_ch_mask48,
    generate_ch_mask64,
    generate_ch_mask96,
    parse_ch_mask48,
    parse_ch_mask64,
    parse_ch_mask96,
)
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
    channel_frequencies,
    tx_offsets,
)
from lorawan.band.data_rate import fsk, lora
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = [
    "CN_470_510",
    "CN_470_510_20_A",
    "CN_470_510_20_B",
    "CN_470_510_26_A",
    "CN_470_510_26_B",
    "CN_470_510_VERSIONS",
    "CN_470_510_20_A_VERSIONS",
    "CN_470_510_20_B_VERSIONS",
    "CN_470_510_26_A_VERSIONS",
    "CN_470_510_26_B_VERSIONS",
]

CN_470_510 = "CN_470_510"
CN_470_510_20_A = "CN_470_510_20_A"
CN_470_510_20_B = "CN_470_510_20_B"
CN_470_510_26_A = "CN_470_510_26_A"
CN_470_510_26_B = "CN_470_510_26_B"

_SUB_BANDS = (SubBandParameters(470_000_000, 510_000_000, 1, 19.15),)


def _channels(first: int, count: int, max_data_rate: int) -> Tuple[Channel, ...]:
    return tuple(Channel(f, 0, max_data_rate) for f in channel_frequencies(first, 200_000, count))


# =============================================================================
# RP001 96-channel plan
# =============================================================================

_BEACON_FREQUENCIES = channel_frequencies(508_300_000, 200_000, 8)

_cn_470_510_rp1_v1_0_3_rev_a = Band(
    id=CN_470_510,
    phy_version=PHYVersion.RP001_V1_0_3_REV_A,
    beacon=Beacon(data_rate_index=2, coding_rate=BEACON_CODING_RATE, frequencies=_BEACON_FREQUENCIES),
    ping_slot_frequencies=_BEACON_FREQUENCIES,
    max_uplink_channels=96,
    uplink_channels=_channels(470_300_000, 96, 5),
    max_downlink_channels=48,
    downlink_channels=_channels(500_300_000, 48, 5),
    sub_bands=_SUB_BANDS,
    data_rates={
        0: lora(12, 125_000, 59),
        1: lora(11, 125_000, 59),
        2: lora(10, 125_000, 59),
        3: lora(9, 125_000, 123),
        4: lora(8, 125_000, 230),
        5: lora(7, 125_000, 230),
    },
    freq_multiplier=100,
    implements_cf_list=True,
    cf_list_type=CFListType.CHANNEL_MASKS,
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
    tx_param_setup_req_support=False,
    default_max_eirp=19.15,
    default_rx2_parameters=Rx2Parameters(data_rate_index=0, frequency=505_300_000),
    rx1_channel=Rx1ChannelModulo(48),
    rx1_data_rate=Rx1DataRateTable(offset_rx1_data_rate_table(5, (0, -1, -2, -3, -4, -5), 0, 5)),
    generate_ch_masks=generate_ch_mask96,
    parse_ch_mask=parse_ch_mask96,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
)

CN_470_510_VERSIONS = build_versions(
    _cn_470_510_rp1_v1_0_3_rev_a,
    (
        (PHYVersion.RP001_V1_1_REV_B, None),
        (PHYVersion.RP001_V1_1_REV_A, None),
        (PHYVersion.RP001_V1_0_2_REV_B, disable_cf_list),
        (PHYVersion.RP001_V1_0_2, None),
        (PHYVersion.TS001_V1_0_1, None),
    ),
)


# =============================================================================
# RP002 plans
# =============================================================================

_cn_470_510_20_a_rp2_v1_0_3 = Band(
    id=CN_470_510_20_A,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=2, coding_rate=BEACON_CODING_RATE, frequencies=(485_300_000,)),
    ping_slot_frequencies=(485_300_000,),
    max_uplink_channels=64,
    uplink_channels=_channels(470_300_000, 32, 5) + _channels(503_500_000, 32, 5),
    max_downlink_channels=64,
    downlink_channels=_channels(483_900_000, 32, 5) + _channels(490_300_000, 32, 5),
    sub_bands=_SUB_BANDS,
    data_rates={
        0: lora(12, 125_000, 59),
        1: lora(11, 125_000, 31),
        2: lora(10, 125_000, 94),
        3: lora(9, 125_000, 192),
        4: lora(8, 125_000, 250),
        5: lora(7, 125_000, 250),
        6: lora(7, 500_000, 250),
        7: fsk(50_000, 250),
    },
    freq_multiplier=100,
    implements_cf_list=True,
    cf_list_type=CFListType.CHANNEL_MASKS,
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
    tx_param_setup_req_support=False,
    default_max_eirp=19.15,
    default_rx2_parameters=Rx2Parameters(data_rate_index=1, frequency=485_300_000),
    rx1_channel=rx1_channel_identity,
    rx1_data_rate=Rx1DataRateTable(offset_rx1_data_rate_table(7, (0, -1, -2, -3, -4, -5), 1, 7)),
    generate_ch_masks=generate_ch_mask64,
    parse_ch_mask=parse_ch_mask64,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)

_cn_470_510_20_b_rp2_v1_0_3 = replace(
    _cn_470_510_20_a_rp2_v1_0_3,
    id=CN_470_510_20_B,
    beacon=replace(_cn_470_510_20_a_rp2_v1_0_3.beacon, frequencies=(496_500_000,)),
    ping_slot_frequencies=(496_500_000,),
    uplink_channels=_channels(476_900_000, 32, 5) + _channels(496_900_000, 32, 5),
    downlink_channels=_channels(476_900_000, 32, 5) + _channels(496_900_000, 32, 5),
    default_rx2_parameters=Rx2Parameters(data_rate_index=1, frequency=496_500_000),
)

_cn_470_510_26_a_rp2_v1_0_3 = replace(
    _cn_470_510_20_a_rp2_v1_0_3,
    id=CN_470_510_26_A,
    beacon=replace(_cn_470_510_20_a_rp2_v1_0_3.beacon, frequencies=(494_900_000,)),
    ping_slot_frequencies=(494_900_000,),
    max_uplink_channels=48,
    uplink_channels=_channels(470_300_000, 48, 5),
    max_downlink_channels=24,
    downlink_channels=_channels(490_100_000, 24, 5),
    default_rx2_parameters=Rx2Parameters(data_rate_index=1, frequency=492_500_000),
    rx1_channel=Rx1ChannelModulo(24),
    generate_ch_masks=generate_ch_mask48,
    parse_ch_mask=parse_ch_mask48,
)

_cn_470_510_26_b_rp2_v1_0_3 = replace(
    _cn_470_510_26_a_rp2_v1_0_3,
    id=CN_470_510_26_B,
    beacon=replace(_cn_470_510_26_a_rp2_v1_0_3.beacon, frequencies=(504_900_000,)),
    ping_slot_frequencies=(504_900_000,),
    uplink_channels=_channels(480_300_000, 48, 5),
    downlink_channels=_channels(500_100_000, 24, 5),
    default_rx2_parameters=Rx2Parameters(data_rate_index=1, frequency=502_500_000),
)

_RP002_DOWNGRADES = (
    (PHYVersion.RP002_V1_0_2, None),
    (PHYVersion.RP002_V1_0_1, None),
    (PHYVersion.RP002_V1_0_0, None),
)

CN_470_510_20_A_VERSIONS = build_versions(_cn_470_510_20_a_rp2_v1_0_3, _RP002_DOWNGRADES)
CN_470_510_20_B_VERSIONS = build_versions(_cn_470_510_20_b_rp2_v1_0_3, _RP002_DOWNGRADES)
CN_470_510_26_A_VERSIONS = build_versions(_cn_470_510_26_a_rp2_v1_0_3, _RP002_DOWNGRADES)
CN_470_510_26_B_VERSIONS = build_versions(_cn_470_510_26_b_rp2_v1_0_3, _RP002_DOWNGRADES)
