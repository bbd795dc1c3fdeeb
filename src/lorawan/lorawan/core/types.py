"""
LoRaWAN Enumerations

Enumerated field values shared by the frame codec, the MAC command codec
and the band catalog.

MHDR (8 bits):
    - Bits 7-5: MType (message type)
    - Bits 4-2: RFU, ignored on decode
    - Bits 1-0: Major (data message format version)

PHY versions are ordered by publication, so comparisons such as
``version >= PHYVersion.RP002_V1_0_0`` behave as expected.
"""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

__all__ = [
    # Frame level
    "MType",
    "Major",
    "CFListType",
    "RejoinRequestType",
    "DeviceClass",
    # Versions
    "MACVersion",
    "PHYVersion",
    # MAC level
    "MACCommandIdentifier",
    "ADRAckLimitExponent",
    "ADRAckDelayExponent",
    "Cipher",
    # Relay
    "RelayCADPeriodicity",
    "RelaySecondChAckOffset",
    "RelaySmartEnableLevel",
    "RelayEndDeviceMode",
    "RelayCtrlUplinkListAction",
    "RelayResetLimitCounter",
    "RelayLimitBucketSize",
    "RelayWORChannel",
    # MHDR helpers
    "MHDRField",
    "parse_mhdr",
    "build_mhdr",
    "is_uplink",
]


# =============================================================================
# Frame Level
# =============================================================================


class MType(IntEnum):
    """MHDR message type (bits 7-5)."""

    JOIN_REQUEST = 0
    JOIN_ACCEPT = 1
    UNCONFIRMED_UP = 2
    UNCONFIRMED_DOWN = 3
    CONFIRMED_UP = 4
    CONFIRMED_DOWN = 5
    REJOIN_REQUEST = 6
    PROPRIETARY = 7


class Major(IntEnum):
    """MHDR major version (bits 1-0)."""

    LORAWAN_R1 = 0


class CFListType(IntEnum):
    """JoinAccept CFList layout, carried in the trailing CFList octet."""

    FREQUENCIES = 0
    CHANNEL_MASKS = 1


class RejoinRequestType(IntEnum):
    """RejoinRequest type octet."""

    CONTEXT = 0  # NetID + DevEUI
    SESSION = 1  # JoinEUI + DevEUI
    KEYS = 2  # NetID + DevEUI


class DeviceClass(IntEnum):
    """LoRaWAN device class, as carried by DeviceModeInd/Conf."""

    CLASS_A = 0
    CLASS_B = 1
    CLASS_C = 2


# =============================================================================
# Versions
# =============================================================================


class MACVersion(IntEnum):
    """LoRaWAN link layer (L2) version."""

    MAC_V1_0 = 1
    MAC_V1_0_1 = 2
    MAC_V1_0_2 = 3
    MAC_V1_1 = 4
    MAC_V1_0_3 = 5
    MAC_V1_0_4 = 6

    @property
    def encrypts_f_opts(self) -> bool:
        """LoRaWAN 1.1 encrypts FOpts with NwkSEncKey."""
        return self is MACVersion.MAC_V1_1

    @property
    def minor(self) -> int:
        """Minor version as sent in ResetInd/RekeyInd."""
        return 1 if self is MACVersion.MAC_V1_1 else 0


class PHYVersion(IntEnum):
    """LoRaWAN Regional Parameters version, in publication order."""

    TS001_V1_0 = 1
    TS001_V1_0_1 = 2
    RP001_V1_0_2 = 3
    RP001_V1_0_2_REV_B = 4
    RP001_V1_1_REV_A = 5
    RP001_V1_1_REV_B = 6
    RP001_V1_0_3_REV_A = 7
    RP002_V1_0_0 = 8
    RP002_V1_0_1 = 9
    RP002_V1_0_2 = 10
    RP002_V1_0_3 = 11


# =============================================================================
# MAC Level
# =============================================================================


class MACCommandIdentifier(IntEnum):
    """MAC command identifier (CID), the first octet of every command."""

    RESET = 0x01
    LINK_CHECK = 0x02
    LINK_ADR = 0x03
    DUTY_CYCLE = 0x04
    RX_PARAM_SETUP = 0x05
    DEV_STATUS = 0x06
    NEW_CHANNEL = 0x07
    RX_TIMING_SETUP = 0x08
    TX_PARAM_SETUP = 0x09
    DL_CHANNEL = 0x0A
    REKEY = 0x0B
    ADR_PARAM_SETUP = 0x0C
    DEVICE_TIME = 0x0D
    FORCE_REJOIN = 0x0E
    REJOIN_PARAM_SETUP = 0x0F
    PING_SLOT_INFO = 0x10
    PING_SLOT_CHANNEL = 0x11
    BEACON_TIMING = 0x12  # Deprecated in 1.0.3
    BEACON_FREQ = 0x13
    DEVICE_MODE = 0x20
    RELAY_CONF = 0x40
    RELAY_END_DEVICE_CONF = 0x41
    RELAY_FILTER_LIST = 0x42
    RELAY_UPDATE_UPLINK_LIST = 0x43
    RELAY_CTRL_UPLINK_LIST = 0x44
    RELAY_CONFIGURE_FWD_LIMIT = 0x45
    RELAY_NOTIFY_NEW_END_DEVICE = 0x46


class ADRAckLimitExponent(IntEnum):
    """ADR_ACK_LIMIT as a power of two."""

    ADR_ACK_LIMIT_1 = 0
    ADR_ACK_LIMIT_2 = 1
    ADR_ACK_LIMIT_4 = 2
    ADR_ACK_LIMIT_8 = 3
    ADR_ACK_LIMIT_16 = 4
    ADR_ACK_LIMIT_32 = 5
    ADR_ACK_LIMIT_64 = 6
    ADR_ACK_LIMIT_128 = 7
    ADR_ACK_LIMIT_256 = 8
    ADR_ACK_LIMIT_512 = 9
    ADR_ACK_LIMIT_1024 = 10
    ADR_ACK_LIMIT_2048 = 11
    ADR_ACK_LIMIT_4096 = 12
    ADR_ACK_LIMIT_8192 = 13
    ADR_ACK_LIMIT_16384 = 14
    ADR_ACK_LIMIT_32768 = 15

    @property
    def value_count(self) -> int:
        """Number of uplinks this exponent stands for."""
        return 1 << self.value


class ADRAckDelayExponent(IntEnum):
    """ADR_ACK_DELAY as a power of two."""

    ADR_ACK_DELAY_1 = 0
    ADR_ACK_DELAY_2 = 1
    ADR_ACK_DELAY_4 = 2
    ADR_ACK_DELAY_8 = 3
    ADR_ACK_DELAY_16 = 4
    ADR_ACK_DELAY_32 = 5
    ADR_ACK_DELAY_64 = 6
    ADR_ACK_DELAY_128 = 7
    ADR_ACK_DELAY_256 = 8
    ADR_ACK_DELAY_512 = 9
    ADR_ACK_DELAY_1024 = 10
    ADR_ACK_DELAY_2048 = 11
    ADR_ACK_DELAY_4096 = 12
    ADR_ACK_DELAY_8192 = 13
    ADR_ACK_DELAY_16384 = 14
    ADR_ACK_DELAY_32768 = 15

    @property
    def value_count(self) -> int:
        """Number of uplinks this exponent stands for."""
        return 1 << self.value


class Cipher(IntEnum):
    """Cipher suite announced in the high nibble of ResetInd/RekeyInd."""

    DEFAULT = 0
    CIPHER_1 = 1
    CIPHER_2 = 2
    CIPHER_3 = 3


# =============================================================================
# Relay (TS011)
# =============================================================================


class RelayCADPeriodicity(IntEnum):
    """Channel activity detection period of a relay."""

    PERIOD_1_SECOND = 0
    PERIOD_500_MILLISECONDS = 1
    PERIOD_250_MILLISECONDS = 2
    PERIOD_100_MILLISECONDS = 3
    PERIOD_50_MILLISECONDS = 4
    PERIOD_20_MILLISECONDS = 5


class RelaySecondChAckOffset(IntEnum):
    """Frequency offset of the WOR ACK on the second channel."""

    KHZ_0 = 0
    KHZ_200 = 1
    KHZ_400 = 2
    KHZ_800 = 3
    KHZ_1600 = 4
    KHZ_3200 = 5


class RelaySmartEnableLevel(IntEnum):
    """Number of consecutive missed downlinks before dynamic relay mode kicks in."""

    LEVEL_8 = 0
    LEVEL_16 = 1
    LEVEL_32 = 2
    LEVEL_64 = 3


class RelayEndDeviceMode(IntEnum):
    """Relay activation mode of an end device."""

    DISABLED = 0
    ALWAYS = 1
    DYNAMIC = 2
    END_DEVICE_CONTROLLED = 3


class RelayCtrlUplinkListAction(IntEnum):
    """Action requested by RelayCtrlUplinkListReq."""

    READ_W_F_CNT = 0
    REMOVE_TRUSTED_END_DEVICE = 1


class RelayResetLimitCounter(IntEnum):
    """What happens to the forward limit counters on reconfiguration."""

    ZERO = 0
    RELOAD_RATE = 1
    MAX_VALUE = 2
    NO_RESET = 3


class RelayLimitBucketSize(IntEnum):
    """Token bucket size multiplier of a relay forwarding limit."""

    SIZE_1 = 0
    SIZE_2 = 1
    SIZE_4 = 2
    SIZE_12 = 3


class RelayWORChannel(IntEnum):
    """Wake On Radio channel an uplink was relayed on."""

    DEFAULT = 0
    SECONDARY = 1


# =============================================================================
# MHDR Helpers
# =============================================================================


class MHDRField(NamedTuple):
    """Parsed MHDR octet."""

    m_type: MType
    major: Major


def parse_mhdr(value: int) -> MHDRField:
    """
    Parse an MHDR octet.

    The reserved bits 4-2 are ignored.

    Args:
        value: MHDR octet (0-255).

    Returns:
        Parsed MType and Major.

    Raises:
        ValueError: If the major version is not known.

    Examples:
        >>> parse_mhdr(0x40).m_type
        <MType.UNCONFIRMED_UP: 2>
    """
    return MHDRField(m_type=MType(value >> 5), major=Major(value & 0x03))


def build_mhdr(m_type: MType, major: Major = Major.LORAWAN_R1) -> int:
    """Build an MHDR octet from its fields."""
    return (int(m_type) << 5) | int(major)


def is_uplink(m_type: MType) -> bool:
    """Return True for message types sent by the end device."""
    return m_type in (
        MType.JOIN_REQUEST,
        MType.UNCONFIRMED_UP,
        MType.CONFIRMED_UP,
        MType.REJOIN_REQUEST,
    )
