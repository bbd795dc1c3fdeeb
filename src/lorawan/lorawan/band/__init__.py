"""LoRaWAN Regional Parameters

This module contains the band definitions and the engines that derive
region-specific behavior from them:
- Data rate records and cross-band mapping
- ChMask generation and parsing per channel plan family
- Band records, Rx1 derivation and version downgrades
- The catalog of every band at every supported PHY version
"""

from lorawan.band.as_923 import AS_923, AS_923_2, AS_923_3, AS_923_4
from lorawan.band.au_915_928 import AU_915_928
from lorawan.band.band import (
    Band,
    Beacon,
    Channel,
    DwellTime,
    Rx1ChannelModulo,
    Rx1DataRateTable,
    Rx2Parameters,
    SubBandParameters,
    rx1_channel_identity,
)
from lorawan.band.catalog import (
    ALL,
    get,
    get_latest,
    get_phy_versions,
    list_bands,
    parse_phy_version,
)
from lorawan.band.channel_mask import (
    ChMaskCntlPair,
    apply_ch_mask_pairs,
    ch_mask_from_bytes,
    ch_mask_to_bytes,
    generate_ch_mask16,
    generate_ch_mask48,
    generate_ch_mask64,
    generate_ch_mask72,
    generate_ch_mask96,
    parse_ch_mask16,
    parse_ch_mask48,
    parse_ch_mask64,
    parse_ch_mask72,
    parse_ch_mask96,
)
from lorawan.band.cn_470_510 import (
    CN_470_510,
    CN_470_510_20_A,
    CN_470_510_20_B,
    CN_470_510_26_A,
    CN_470_510_26_B,
)
from lorawan.band.cn_779_787 import CN_779_787
from lorawan.band.data_rate import (
    DataRate,
    FSKDataRate,
    LoRaDataRate,
    LRFHSSDataRate,
    MaxMACPayloadSize,
    map_data_rate_index,
)
from lorawan.band.eu_433 import EU_433
from lorawan.band.eu_863_870 import EU_863_870
from lorawan.band.in_865_867 import IN_865_867
from lorawan.band.ism_2400 import ISM_2400
from lorawan.band.kr_920_923 import KR_920_923
from lorawan.band.ma_869_870 import MA_869_870_DRAFT
from lorawan.band.ru_864_870 import RU_864_870
from lorawan.band.us_902_928 import US_902_928

__all__ = [
    # Band ids
    "AS_923",
    "AS_923_2",
    "AS_923_3",
    "AS_923_4",
    "AU_915_928",
    "CN_470_510",
    "CN_470_510_20_A",
    "CN_470_510_20_B",
    "CN_470_510_26_A",
    "CN_470_510_26_B",
    "CN_779_787",
    "EU_433",
    "EU_863_870",
    "IN_865_867",
    "ISM_2400",
    "KR_920_923",
    "MA_869_870_DRAFT",
    "RU_864_870",
    "US_902_928",
    # Records
    "Band",
    "Beacon",
    "Channel",
    "DwellTime",
    "Rx2Parameters",
    "SubBandParameters",
    "Rx1ChannelModulo",
    "Rx1DataRateTable",
    "rx1_channel_identity",
    # Catalog
    "ALL",
    "get",
    "get_latest",
    "get_phy_versions",
    "list_bands",
    "parse_phy_version",
    # Data rates
    "DataRate",
    "LoRaDataRate",
    "FSKDataRate",
    "LRFHSSDataRate",
    "MaxMACPayloadSize",
    "map_data_rate_index",
    # Channel masks
    "ChMaskCntlPair",
    "apply_ch_mask_pairs",
    "ch_mask_to_bytes",
    "ch_mask_from_bytes",
    "generate_ch_mask16",
    "generate_ch_mask48",
    "generate_ch_mask64",
    "generate_ch_mask72",
    "generate_ch_mask96",
    "parse_ch_mask16",
    "parse_ch_mask48",
    "parse_ch_mask64",
    "parse_ch_mask72",
    "parse_ch_mask96",
]
