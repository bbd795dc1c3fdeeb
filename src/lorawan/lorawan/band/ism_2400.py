"""
ISM 2400 MHz

Worldwide 2.4 GHz band. LoRa at 812 kHz bandwidth with the 4/8 long
interleaver coding rate; frequencies are sent in 200 Hz steps.
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
    disable_relay,
    offset_rx1_data_rate_table,
    rx1_channel_identity,
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
from lorawan.band.data_rate import lora
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = ["ISM_2400", "ISM_2400_VERSIONS"]

ISM_2400 = "ISM_2400"

CR_4_8_LI = "4/8LI"

_DEFAULT_CHANNELS = (
    Channel(2_403_000_000, 0, 7),
    Channel(2_425_000_000, 0, 7),
    Channel(2_479_000_000, 0, 7),
)

_ism_2400_rp2_v1_0_3 = Band(
    id=ISM_2400,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=0, coding_rate=BEACON_CODING_RATE, frequencies=(2_424_000_000,)),
    ping_slot_frequencies=(2_424_000_000,),
    max_uplink_channels=16,
    uplink_channels=_DEFAULT_CHANNELS,
    max_downlink_channels=16,
    downlink_channels=_DEFAULT_CHANNELS,
    sub_bands=(SubBandParameters(2_400_000_000, 2_500_000_000, 1, 10),),
    data_rates={
        0: lora(12, 812_000, 59, CR_4_8_LI),
        1: lora(11, 812_000, 123, CR_4_8_LI),
        2: lora(10, 812_000, 248, CR_4_8_LI),
        3: lora(9, 812_000, 248, CR_4_8_LI),
        4: lora(8, 812_000, 248, CR_4_8_LI),
        5: lora(7, 812_000, 248, CR_4_8_LI),
        6: lora(6, 812_000, 248, CR_4_8_LI),
        7: lora(5, 812_000, 248, CR_4_8_LI),
    },
    freq_multiplier=200,
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
    max_adr_data_rate_index=7,
    tx_param_setup_req_support=False,
    default_max_eirp=10,
    default_rx2_parameters=Rx2Parameters(data_rate_index=0, frequency=2_423_000_000),
    rx1_channel=rx1_channel_identity,
    rx1_data_rate=Rx1DataRateTable(offset_rx1_data_rate_table(7, (0, -1, -2, -3, -4, -5), 0, 7)),
    generate_ch_masks=generate_ch_mask16,
    parse_ch_mask=parse_ch_mask16,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
    strict_coding_rate=True,
    lora_coding_rate=CR_4_8_LI,
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)

ISM_2400_VERSIONS = build_versions(
    _ism_2400_rp2_v1_0_3,
    (
        (PHYVersion.RP002_V1_0_2, None),
        (PHYVersion.RP002_V1_0_1, None),
        (PHYVersion.RP002_V1_0_0, None),
        (PHYVersion.RP001_V1_0_3_REV_A, disable_relay),
        (PHYVersion.RP001_V1_1_REV_B, None),
        (PHYVersion.RP001_V1_1_REV_A, None),
        (PHYVersion.RP001_V1_0_2_REV_B, None),
        (PHYVersion.RP001_V1_0_2, None),
        (PHYVersion.TS001_V1_0_1, None),
        (PHYVersion.TS001_V1_0, None),
    ),
)
