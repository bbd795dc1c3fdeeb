"""EU 433 MHz"""

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
from lorawan.band.data_rate import fsk, lora
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, CFListType, PHYVersion

__all__ = ["EU_433", "EU_433_VERSIONS"]

EU_433 = "EU_433"

_DEFAULT_CHANNELS = (
    Channel(433_175_000, 0, 5),
    Channel(433_375_000, 0, 5),
    Channel(433_575_000, 0, 5),
)

_eu_433_rp2_v1_0_3 = Band(
    id=EU_433,
    phy_version=PHYVersion.RP002_V1_0_3,
    beacon=Beacon(data_rate_index=3, coding_rate=BEACON_CODING_RATE, frequencies=(434_665_000,)),
    ping_slot_frequencies=(434_665_000,),
    max_uplink_channels=16,
    uplink_channels=_DEFAULT_CHANNELS,
    max_downlink_channels=16,
    downlink_channels=_DEFAULT_CHANNELS,
    sub_bands=(SubBandParameters(433_175_000, 434_665_000, 0.01, 12.15),),
    data_rates={
        0: lora(12, 125_000, 59),
        1: lora(11, 125_000, 59),
        2: lora(10, 125_000, 59),
        3: lora(9, 125_000, 123),
        4: lora(8, 125_000, 230),
        5: lora(7, 125_000, 230),
        6: lora(7, 250_000, 230),
        7: fsk(50_000, 230),
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
    tx_offset=tx_offsets(6),
    max_adr_data_rate_index=5,
    tx_param_setup_req_support=False,
    default_max_eirp=12.15,
    default_rx2_parameters=Rx2Parameters(data_rate_index=0, frequency=434_665_000),
    rx1_channel=rx1_channel_identity,
    rx1_data_rate=Rx1DataRateTable(offset_rx1_data_rate_table(7, (0, -1, -2, -3, -4, -5), 0, 7)),
    generate_ch_masks=generate_ch_mask16,
    parse_ch_mask=parse_ch_mask16,
    boot_dwell_time=DwellTime(uplinks=False, downlinks=False),
    relay_forward_delay=RELAY_FORWARD_DELAY,
    relay_receive_delay=RELAY_RECEIVE_DELAY,
)

EU_433_VERSIONS = build_versions(
    _eu_433_rp2_v1_0_3,
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
