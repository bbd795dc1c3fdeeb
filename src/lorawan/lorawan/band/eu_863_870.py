"""
EU 863-870 MHz

Sixteen channel band with three mandatory 125 kHz join channels at
868.1, 868.3 and 868.5 MHz, and LR-FHSS data rates since RP002-1.0.2.
"""

from __future__ import annotations

from lorawan.band.band import (
    Band,
    Beacon,
    Channel,
    DwellTime,
    Rx1DataRateTable,
    Rx2Parameters,
    SubBandParameters,
    clip_tx_offsets,
    compose,
    disable_relay,
    offset_rx1_data_rate_table,
    remove_data_rates,
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
from lorawan.band.data_rate import fsk, lora, lrfhss
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = ["EU_863_870", "EU_863_870_VERSIONS", "EU_DATA_RATES", "EU_RX1_DATA_RATE"]

EU_863_870 = "EU_863_870"

EU_DATA_RATES = {
    0: lora(12, 125_000, 59),
    1: lora(11, 125_000, 59),
    2: lora(10, 125_000, 59),
    3: lora(9, 125_000, 123),
    4: lora(8, 125_000, 230),
    5: lora(7, 125_000, 230),
    6: lora(7, 250_000, 230),
    7: fsk(50_000, 230),
    8: lrfhss(0, 137_000, "1/3", 58),
    9: lrfhss(0, 137_000, "2/3", 123),
    10: lrfhss(0, 336_000, "1/3", 58),
    11: lrfhss(0, 336_000, "2/3", 123),
}

EU_RX1_DATA_RATE = Rx1DataRateTable(
    offset_rx1_data_rate_table(7, (0, -1, -2, -3, -4, -5), 0, 7)
    + (
        (1, 0, 0, 0, 0, 0),
        (2, 1, 0, 0, 0, 0),
        (1, 0, 0, 0, 0, 0),
        (2, 1, 0, 0, 0, 0),
    )
)

_eu_863_870_rp2_v1_0_3 = Band(
    id=EU_863_870,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=3, coding_rate=BEACON_CODING_RATE, frequencies=(869_525_000,)),
    ping_slot_frequencies=(869_525_000,),
    max_uplink_channels=16,
    uplink_channels=(
        Channel(868_100_000, 0, 5),
        Channel(868_300_000, 0, 5),
        Channel(868_500_000, 0, 5),
    ),
    max_downlink_channels=16,
    downlink_channels=(
        Channel(868_100_000, 0, 5),
        Channel(868_300_000, 0, 5),
        Channel(868_500_000, 0, 5),
    ),
    sub_bands=(
        SubBandParameters(863_000_000, 865_000_000, 0.001, 16.15),
        SubBandParameters(865_000_000, 868_000_000, 0.01, 16.15),
        SubBandParameters(868_000_000, 868_600_000, 0.01, 16.15),
        SubBandParameters(868_700_000, 869_200_000, 0.001, 16.15),
        SubBandParameters(869_400_000, 869_650_000, 0.1, 29.15),
        SubBandParameters(869_700_000, 870_000_000, 0.01, 16.15),
    ),
    data_rates=EU_DATA_RATES,
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
    tx_param_setup_req_support=False,
    default_max_eirp=16,
    default_rx2_parameters=Rx2Parameters(data_rate_index=0, frequency=869_525_000),
    rx1_channel=rx1_channel_identity,
    rx1_data_rate=EU_RX1_DATA_RATE,
    generate_ch_masks=generate_ch_mask16,
    parse_ch_mask=parse_ch_mask16,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)

EU_863_870_VERSIONS = build_versions(
    _eu_863_870_rp2_v1_0_3,
    (
        (PHYVersion.RP002_V1_0_2, None),
        (
            PHYVersion.RP002_V1_0_1,
            compose(
                remove_data_rates(8, 9, 10, 11),
                set_rx1_data_rate(EU_RX1_DATA_RATE.truncate(7)),
            ),
        ),
        (PHYVersion.RP002_V1_0_0, None),
        (PHYVersion.RP001_V1_0_3_REV_A, disable_relay),
        (PHYVersion.RP001_V1_1_REV_B, None),
        (PHYVersion.RP001_V1_1_REV_A, None),
        (PHYVersion.RP001_V1_0_2_REV_B, None),
        (PHYVersion.RP001_V1_0_2, None),
        (PHYVersion.TS001_V1_0_1, None),
        (PHYVersion.TS001_V1_0, clip_tx_offsets(6)),
    ),
)
