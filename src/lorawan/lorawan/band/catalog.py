"""
Band Catalog

Process-wide, read-only registry of every band at every supported PHY
version. The catalog is built once when this module is imported; records
are immutable so readers need no locking.

Usage:
    from lorawan.band import get, get_latest, EU_863_870
    from lorawan.core.types import PHYVersion

    eu = get(EU_863_870, PHYVersion.RP002_V1_0_3)
    latest = get_latest(EU_863_870)
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from lorawan.band.as_923 import (
    AS_923,
    AS_923_2,
    AS_923_2_VERSIONS,
    AS_923_3,
    AS_923_3_VERSIONS,
    AS_923_4,
    AS_923_4_VERSIONS,
    AS_923_VERSIONS,
)
from lorawan.band.au_915_928 import AU_915_928, AU_915_928_VERSIONS
from lorawan.band.band import Band
from lorawan.band.cn_470_510 import (
    CN_470_510,
    CN_470_510_20_A,
    CN_470_510_20_A_VERSIONS,
    CN_470_510_20_B,
    CN_470_510_20_B_VERSIONS,
    CN_470_510_26_A,
    CN_470_510_26_A_VERSIONS,
    CN_470_510_26_B,
    CN_470_510_26_B_VERSIONS,
    CN_470_510_VERSIONS,
)
from lorawan.band.cn_779_787 import CN_779_787, CN_779_787_VERSIONS
from lorawan.band.eu_433 import EU_433, EU_433_VERSIONS
from lorawan.band.eu_863_870 import EU_863_870, EU_863_870_VERSIONS
from lorawan.band.in_865_867 import IN_865_867, IN_865_867_VERSIONS
from lorawan.band.ism_2400 import ISM_2400, ISM_2400_VERSIONS
from lorawan.band.kr_920_923 import KR_920_923, KR_920_923_VERSIONS
from lorawan.band.ma_869_870 import MA_869_870_DRAFT, MA_869_870_DRAFT_VERSIONS
from lorawan.band.ru_864_870 import RU_864_870, RU_864_870_VERSIONS
from lorawan.band.us_902_928 import US_902_928, US_902_928_VERSIONS
from lorawan.core.errors import BandNotFound, UnknownPHYVersion
from lorawan.core.types import PHYVersion

__all__ = [
    "ALL",
    "get",
    "get_latest",
    "get_phy_versions",
    "list_bands",
    "parse_phy_version",
]

logger = logging.getLogger(__name__)


def _build() -> Mapping[str, Mapping[PHYVersion, Band]]:
    catalog = {
        band_id: MappingProxyType(dict(versions))
        for band_id, versions in (
            (AS_923, AS_923_VERSIONS),
            (AS_923_2, AS_923_2_VERSIONS),
            (AS_923_3, AS_923_3_VERSIONS),
            (AS_923_4, AS_923_4_VERSIONS),
            (AU_915_928, AU_915_928_VERSIONS),
            (CN_470_510, CN_470_510_VERSIONS),
            (CN_470_510_20_A, CN_470_510_20_A_VERSIONS),
            (CN_470_510_20_B, CN_470_510_20_B_VERSIONS),
            (CN_470_510_26_A, CN_470_510_26_A_VERSIONS),
            (CN_470_510_26_B, CN_470_510_26_B_VERSIONS),
            (CN_779_787, CN_779_787_VERSIONS),
            (EU_433, EU_433_VERSIONS),
            (EU_863_870, EU_863_870_VERSIONS),
            (IN_865_867, IN_865_867_VERSIONS),
            (ISM_2400, ISM_2400_VERSIONS),
            (KR_920_923, KR_920_923_VERSIONS),
            (MA_869_870_DRAFT, MA_869_870_DRAFT_VERSIONS),
            (RU_864_870, RU_864_870_VERSIONS),
            (US_902_928, US_902_928_VERSIONS),
        )
    }
    records = sum(len(versions) for versions in catalog.values())
    logger.debug(f"Built band catalog: {len(catalog)} bands, {records} records")
    return MappingProxyType(catalog)


ALL: Mapping[str, Mapping[PHYVersion, Band]] = _build()

# Newest version first per band
_LATEST: Mapping[str, PHYVersion] = MappingProxyType({band_id: max(versions) for band_id, versions in ALL.items()})


def parse_phy_version(value: Union[PHYVersion, int, str]) -> PHYVersion:
    """
    Resolve a PHY version from its enum member, number or name.

    Examples:
        >>> parse_phy_version("RP002_V1_0_3")
        <PHYVersion.RP002_V1_0_3: 11>
        >>> parse_phy_version(1)
        <PHYVersion.TS001_V1_0: 1>
    """
    if isinstance(value, PHYVersion):
        return value
    if isinstance(value, str):
        try:
            return PHYVersion[value.upper()]
        except KeyError:
            raise UnknownPHYVersion(value) from None
    try:
        return PHYVersion(value)
    except ValueError:
        raise UnknownPHYVersion(value) from None


def get(band_id: str, version: Union[PHYVersion, int, str]) -> Band:
    """
    Return the band record for ``band_id`` at ``version``.

    Raises:
        BandNotFound: If the band is unknown or does not define ``version``.
        UnknownPHYVersion: If ``version`` names no PHY version.
    """
    versions = ALL.get(band_id)
    if versions is None:
        raise BandNotFound(band_id)
    version = parse_phy_version(version)
    band = versions.get(version)
    if band is None:
        raise BandNotFound(band_id, version)
    return band


def get_latest(band_id: str) -> Band:
    """Return the band record for ``band_id`` at its newest PHY version."""
    version = _LATEST.get(band_id)
    if version is None:
        raise BandNotFound(band_id)
    return ALL[band_id][version]


def get_phy_versions(band_id: Optional[str] = None) -> Dict[str, Tuple[PHYVersion, ...]]:
    """
    Return the PHY versions supported by each band, newest first.

    Args:
        band_id: Restrict the result to one band.

    Returns:
        Mapping of band id to its versions in descending order.

    Raises:
        BandNotFound: If ``band_id`` is given and unknown.
    """
    if band_id is not None:
        if band_id not in ALL:
            raise BandNotFound(band_id)
        band_ids = [band_id]
    else:
        band_ids = sorted(ALL)
    return {b: tuple(sorted(ALL[b], reverse=True)) for b in band_ids}


def list_bands(
    band_id: Optional[str] = None,
    phy_version: Optional[Union[PHYVersion, int, str]] = None,
) -> List[dict]:
    """
    Describe the bands in the catalog.

    Without arguments every record is described. ``band_id`` limits the
    result to one band, ``phy_version`` to one version across bands (bands
    that lack the version are skipped unless ``band_id`` names them).

    Returns:
        List of :meth:`Band.describe` dicts, sorted by band id then version
        newest first.

    Raises:
        BandNotFound: If ``band_id`` is unknown, or lacks ``phy_version``.
    """
    if band_id is not None and phy_version is not None:
        return [get(band_id, phy_version).describe()]

    version = None if phy_version is None else parse_phy_version(phy_version)
    result = []
    for b, versions in get_phy_versions(band_id).items():
        for v in versions:
            if version is None or v == version:
                result.append(ALL[b][v].describe())
    return result
