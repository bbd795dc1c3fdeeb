"""
US 902-928 MHz

72 uplink channels: 64 at 125 kHz from 902.3 MHz in 200 kHz steps, and 8 at
500 kHz from 903.0 MHz in 1.6 MHz steps. Eight 500 kHz downlink channels
from 923.3 MHz in 600 kHz steps; Rx1 uses the uplink channel modulo 8.
"""

from __future__ import annotations

from lorawan.band.band import (
    Band,
    Beacon,
    Channel,
    DwellTime,
    Rx1ChannelModulo,
    Rx1DataRateTable,
    Rx2Parameters,
    SubBandParameters,
    clip_tx_offsets,
    compose,
    disable_atomic_link_adr,
    disable_cf_list,
    disable_ch_mask_cntl5,
    disable_relay,
    remove_data_rates,
    set_rx1_data_rate,
    update_data_rates,
)
from lorawan.band.channel_mask import make_generate_ch_mask72, parse_ch_mask72
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
from lorawan.band.data_rate import lora, lrfhss
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = [
    "US_902_928",
    "US_902_928_VERSIONS",
    "US_DATA_RATES",
    "US_LEGACY_DOWNLINK_DATA_RATES",
    "US_RX1_DATA_RATE",
    "US_DOWNLINK_FREQUENCIES",
]

US_902_928 = "US_902_928"

US_DATA_RATES = {
    0: lora(10, 125_000, 19),
    1: lora(9, 125_000, 61),
    2: lora(8, 125_000, 133),
    3: lora(7, 125_000, 250),
    4: lora(8, 500_000, 250),
    5: lrfhss(0, 1_523_000, "1/3", 58),
    6: lrfhss(0, 1_523_000, "2/3", 133),
    8: lora(12, 500_000, 61),
    9: lora(11, 500_000, 137),
    10: lora(10, 500_000, 250),
    11: lora(9, 500_000, 250),
    12: lora(8, 500_000, 250),
    13: lora(7, 500_000, 250),
}

# Downlink payload sizes before RP002-1.0.0.
US_LEGACY_DOWNLINK_DATA_RATES = {
    8: lora(12, 500_000, 41),
    9: lora(11, 500_000, 117),
    10: lora(10, 500_000, 230),
    11: lora(9, 500_000, 230),
    12: lora(8, 500_000, 230),
    13: lora(7, 500_000, 230),
}

US_RX1_DATA_RATE = Rx1DataRateTable(
    (
        (10, 9, 8, 8),
        (11, 10, 9, 8),
        (12, 11, 10, 9),
        (13, 12, 11, 10),
        (13, 13, 12, 11),
        (10, 9, 8, 8),
        (11, 10, 9, 8),
    )
)

US_DOWNLINK_FREQUENCIES = channel_frequencies(923_300_000, 600_000, 8)

_us_902_928_rp2_v1_0_3 = Band(
    id=US_902_928,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=8, coding_rate=BEACON_CODING_RATE, frequencies=US_DOWNLINK_FREQUENCIES),
    ping_slot_frequencies=US_DOWNLINK_FREQUENCIES,
    max_uplink_channels=72,
    uplink_channels=(
        tuple(Channel(f, 0, 3) for f in channel_frequencies(902_300_000, 200_000, 64))
        + tuple(Channel(f, 4, 4) for f in channel_frequencies(903_000_000, 1_600_000, 8))
    ),
    max_downlink_channels=8,
    downlink_channels=tuple(Channel(f, 8, 13) for f in US_DOWNLINK_FREQUENCIES),
    sub_bands=(SubBandParameters(902_000_000, 928_000_000, 1, 30),),
    data_rates=US_DATA_RATES,
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
    tx_offset=tx_offsets(15),
    max_adr_data_rate_index=3,
    tx_param_setup_req_support=False,
    default_max_eirp=30,
    default_rx2_parameters=Rx2Parameters(data_rate_index=8, frequency=923_300_000),
    rx1_channel=Rx1ChannelModulo(8),
    rx1_data_rate=US_RX1_DATA_RATE,
    generate_ch_masks=make_generate_ch_mask72(support_cntl5=True, atomic=True),
    parse_ch_mask=parse_ch_mask72,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)

US_902_928_VERSIONS = build_versions(
    _us_902_928_rp2_v1_0_3,
    (
        (PHYVersion.RP002_V1_0_2, None),
        (
            PHYVersion.RP002_V1_0_1,
            compose(
                remove_data_rates(5, 6),
                set_rx1_data_rate(US_RX1_DATA_RATE.truncate(4)),
            ),
        ),
        (PHYVersion.RP002_V1_0_0, None),
        (
            PHYVersion.RP001_V1_0_3_REV_A,
            compose(
                disable_relay,
                disable_atomic_link_adr,
                update_data_rates(US_LEGACY_DOWNLINK_DATA_RATES),
            ),
        ),
        (PHYVersion.RP001_V1_1_REV_B, None),
        (PHYVersion.RP001_V1_1_REV_A, None),
        (PHYVersion.RP001_V1_0_2_REV_B, compose(disable_ch_mask_cntl5, disable_cf_list)),
        (PHYVersion.RP001_V1_0_2, None),
        (PHYVersion.TS001_V1_0_1, None),
        (PHYVersion.TS001_V1_0, clip_tx_offsets(11)),
    ),
)
