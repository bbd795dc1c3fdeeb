"""
LoRaWAN MAC Command Payloads

Payload records for the LoRaWAN 1.0.4 / 1.1 MAC commands (CID 0x01-0x20).
Each record encodes and decodes only its payload; the CID octet and the
per-direction dispatch live in :mod:`lorawan.mac.spec`.

Commands that carry a frequency pack it into 24 bits in units of the
band's frequency multiplier (100 Hz unless the band says otherwise).

All multi-byte fields are little-endian.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, ClassVar, List, Optional

from lorawan.band.channel_mask import ch_mask_from_bytes, ch_mask_to_bytes
from lorawan.core.constants import (
    CH_MASK_SIZE,
    DEFAULT_FREQ_MULTIPLIER,
    DEVICE_TIME_FRACTION_STEPS,
    MAX_UINT8,
    MAX_UINT16,
    MAX_UINT24,
    MAX_UINT32,
    MIN_FREQUENCY,
)
from lorawan.core.errors import FieldLengthMismatch, FieldOutOfRange, UnknownField
from lorawan.core.gpstime import from_gps, to_gps
from lorawan.core.types import (
    ADRAckDelayExponent,
    ADRAckLimitExponent,
    DeviceClass,
    MACCommandIdentifier,
)

if TYPE_CHECKING:
    from lorawan.band.band import Band

__all__ = [
    # Frequencies
    "freq_multiplier",
    "encode_frequency",
    "decode_frequency",
    # 0x01
    "ResetInd",
    "ResetConf",
    # 0x02
    "LinkCheckReq",
    "LinkCheckAns",
    # 0x03
    "LinkADRReq",
    "LinkADRAns",
    # 0x04
    "DutyCycleReq",
    "DutyCycleAns",
    # 0x05
    "RxParamSetupReq",
    "RxParamSetupAns",
    # 0x06
    "DevStatusReq",
    "DevStatusAns",
    # 0x07
    "NewChannelReq",
    "NewChannelAns",
    # 0x08
    "RxTimingSetupReq",
    "RxTimingSetupAns",
    # 0x09
    "TxParamSetupReq",
    "TxParamSetupAns",
    # 0x0A
    "DLChannelReq",
    "DLChannelAns",
    # 0x0B
    "RekeyInd",
    "RekeyConf",
    # 0x0C
    "ADRParamSetupReq",
    "ADRParamSetupAns",
    # 0x0D
    "DeviceTimeReq",
    "DeviceTimeAns",
    # 0x0E
    "ForceRejoinReq",
    # 0x0F
    "RejoinParamSetupReq",
    "RejoinParamSetupAns",
    # 0x10
    "PingSlotInfoReq",
    "PingSlotInfoAns",
    # 0x11
    "PingSlotChannelReq",
    "PingSlotChannelAns",
    # 0x12
    "BeaconTimingReq",
    "BeaconTimingAns",
    # 0x13
    "BeaconFreqReq",
    "BeaconFreqAns",
    # 0x20
    "DeviceModeInd",
    "DeviceModeConf",
]


# =============================================================================
# Helpers
# =============================================================================


def _check_size(name: str, data: bytes, size: int) -> None:
    if len(data) != size:
        raise FieldLengthMismatch(name, size, len(data))


def _check_max(name: str, value: int, max_value: int) -> None:
    if not 0 <= value <= max_value:
        raise FieldOutOfRange(name, max_value, value)


def _flags(*bits: bool) -> int:
    value = 0
    for i, bit in enumerate(bits):
        if bit:
            value |= 1 << i
    return value


def _bit(value: int, i: int) -> bool:
    return bool((value >> i) & 1)


def freq_multiplier(phy: Optional[Band]) -> int:
    """Frequency unit in Hz for ``phy``, or the default when no band is given."""
    if phy is None:
        return DEFAULT_FREQ_MULTIPLIER
    return phy.freq_multiplier


def encode_frequency(name: str, frequency: int, phy: Optional[Band], allow_zero: bool = False) -> bytes:
    """
    Pack a frequency into its 3-byte wire form.

    Args:
        name: Field name used in errors.
        frequency: Frequency in Hz.
        phy: Band supplying the frequency multiplier.
        allow_zero: Accept 0, which disables a channel or selects the default.

    Returns:
        ``frequency / multiplier`` as 24-bit little-endian.

    Raises:
        FieldOutOfRange: If the frequency is below 100 kHz or does not fit
            24 bits in multiplier units.

    Examples:
        >>> encode_frequency("Frequency", 868_100_000, None).hex()
        '287684'
    """
    multiplier = freq_multiplier(phy)
    if frequency == 0 and allow_zero:
        return bytes(3)
    max_frequency = MAX_UINT24 * multiplier
    if not MIN_FREQUENCY <= frequency <= max_frequency:
        raise FieldOutOfRange(name, max_frequency, frequency, min=MIN_FREQUENCY)
    return (frequency // multiplier).to_bytes(3, "little")


def decode_frequency(data: bytes, phy: Optional[Band]) -> int:
    """Unpack a 3-byte frequency to Hz."""
    return int.from_bytes(data[:3], "little") * freq_multiplier(phy)


class _Empty:
    """Command direction without payload."""

    SIZE: ClassVar[int] = 0

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return b""

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None):
        _check_size(cls.__name__, data, cls.SIZE)
        return cls()


# =============================================================================
# Reset / Rekey (LoRaWAN 1.1)
# =============================================================================


@dataclass
class _VersionPayload:
    minor_version: int = 1
    cipher: int = 0  # High nibble, 0 for the default cipher suite

    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("MinorVersion", self.minor_version, 15)
        _check_max("Cipher", self.cipher, 15)
        return bytes([(self.cipher << 4) | self.minor_version])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None):
        _check_size(cls.__name__, data, cls.SIZE)
        return cls(minor_version=data[0] & 0x0F, cipher=data[0] >> 4)


@dataclass
class ResetInd(_VersionPayload):
    """Device reset indication (ABP, LoRaWAN 1.1)."""

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RESET


@dataclass
class ResetConf(_VersionPayload):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RESET


@dataclass
class RekeyInd(_VersionPayload):
    """Session key update indication (OTAA, LoRaWAN 1.1)."""

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.REKEY


@dataclass
class RekeyConf(_VersionPayload):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.REKEY


# =============================================================================
# Link check
# =============================================================================


@dataclass
class LinkCheckReq(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.LINK_CHECK


@dataclass
class LinkCheckAns:
    """Demodulation margin of the last LinkCheckReq and number of gateways."""

    margin: int = 0  # dB above the demodulation floor, 0-254
    gateway_count: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.LINK_CHECK
    SIZE: ClassVar[int] = 2

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Margin", self.margin, 254)
        _check_max("GatewayCount", self.gateway_count, MAX_UINT8)
        return bytes([self.margin, self.gateway_count])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> LinkCheckAns:
        _check_size("LinkCheckAns", data, cls.SIZE)
        return cls(margin=data[0], gateway_count=data[1])


# =============================================================================
# Link ADR
# =============================================================================


@dataclass
class LinkADRReq:
    """Data rate, TX power, channel mask and repetition request.

    Examples
    --------
        >>> mask = [i in (2, 9) for i in range(16)]
        >>> LinkADRReq(5, 2, mask, ch_mask_cntl=1, nb_trans=1).to_bytes().hex()
        '52040211'
    """

    data_rate_index: int = 0
    tx_power_index: int = 0
    ch_mask: List[bool] = field(default_factory=lambda: [False] * CH_MASK_SIZE)
    ch_mask_cntl: int = 0
    nb_trans: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.LINK_ADR
    SIZE: ClassVar[int] = 4

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("DataRateIndex", self.data_rate_index, 15)
        _check_max("TxPowerIndex", self.tx_power_index, 15)
        if len(self.ch_mask) > CH_MASK_SIZE:
            raise FieldLengthMismatch("ChMask", f"<= {CH_MASK_SIZE}", len(self.ch_mask))
        _check_max("ChMaskCntl", self.ch_mask_cntl, 7)
        _check_max("NbTrans", self.nb_trans, 15)
        mask = list(self.ch_mask) + [False] * (CH_MASK_SIZE - len(self.ch_mask))
        return (
            bytes([(self.data_rate_index << 4) | self.tx_power_index])
            + ch_mask_to_bytes(mask)
            + bytes([(self.ch_mask_cntl << 4) | self.nb_trans])
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> LinkADRReq:
        _check_size("LinkADRReq", data, cls.SIZE)
        return cls(
            data_rate_index=data[0] >> 4,
            tx_power_index=data[0] & 0x0F,
            ch_mask=list(ch_mask_from_bytes(data[1:3])),
            ch_mask_cntl=(data[3] >> 4) & 0x07,
            nb_trans=data[3] & 0x0F,
        )


@dataclass
class LinkADRAns:
    channel_mask_ack: bool = False
    data_rate_index_ack: bool = False
    tx_power_index_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.LINK_ADR
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.channel_mask_ack, self.data_rate_index_ack, self.tx_power_index_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> LinkADRAns:
        _check_size("LinkADRAns", data, cls.SIZE)
        return cls(_bit(data[0], 0), _bit(data[0], 1), _bit(data[0], 2))


# =============================================================================
# Duty cycle
# =============================================================================


@dataclass
class DutyCycleReq:
    """Aggregated duty cycle limit, 1 / 2^max_duty_cycle."""

    max_duty_cycle: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DUTY_CYCLE
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("MaxDutyCycle", self.max_duty_cycle, 15)
        return bytes([self.max_duty_cycle])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> DutyCycleReq:
        _check_size("DutyCycleReq", data, cls.SIZE)
        return cls(max_duty_cycle=data[0] & 0x0F)


@dataclass
class DutyCycleAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DUTY_CYCLE


# =============================================================================
# Rx parameters
# =============================================================================


@dataclass
class RxParamSetupReq:
    """Rx1 data rate offset and Rx2 window parameters."""

    rx1_data_rate_offset: int = 0
    rx2_data_rate_index: int = 0
    rx2_frequency: int = 0  # Hz

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RX_PARAM_SETUP
    SIZE: ClassVar[int] = 4

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Rx1DROffset", self.rx1_data_rate_offset, 7)
        _check_max("Rx2DR", self.rx2_data_rate_index, 15)
        frequency = encode_frequency("Rx2Frequency", self.rx2_frequency, phy)
        return bytes([(self.rx1_data_rate_offset << 4) | self.rx2_data_rate_index]) + frequency

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RxParamSetupReq:
        _check_size("RxParamSetupReq", data, cls.SIZE)
        return cls(
            rx1_data_rate_offset=(data[0] >> 4) & 0x07,
            rx2_data_rate_index=data[0] & 0x0F,
            rx2_frequency=decode_frequency(data[1:4], phy),
        )


@dataclass
class RxParamSetupAns:
    rx2_frequency_ack: bool = False
    rx2_data_rate_index_ack: bool = False
    rx1_data_rate_offset_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RX_PARAM_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.rx2_frequency_ack, self.rx2_data_rate_index_ack, self.rx1_data_rate_offset_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RxParamSetupAns:
        _check_size("RxParamSetupAns", data, cls.SIZE)
        return cls(_bit(data[0], 0), _bit(data[0], 1), _bit(data[0], 2))


@dataclass
class RxTimingSetupReq:
    delay: int = 0  # Seconds, 0 means 1

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RX_TIMING_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Delay", self.delay, 15)
        return bytes([self.delay])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RxTimingSetupReq:
        _check_size("RxTimingSetupReq", data, cls.SIZE)
        return cls(delay=data[0] & 0x0F)


@dataclass
class RxTimingSetupAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RX_TIMING_SETUP


# =============================================================================
# Device status
# =============================================================================


@dataclass
class DevStatusReq(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEV_STATUS


@dataclass
class DevStatusAns:
    """Battery level and demodulation margin of the last DevStatusReq.

    ``margin`` is a signed 6-bit value in dB.

    Examples
    --------
        >>> DevStatusAns(battery=255, margin=-1).to_bytes().hex()
        'ff3f'
        >>> DevStatusAns.from_bytes(bytes([0, 0x20])).margin
        -32
    """

    battery: int = 0  # 0 external power, 1-254 level, 255 unknown
    margin: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEV_STATUS
    SIZE: ClassVar[int] = 2

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Battery", self.battery, MAX_UINT8)
        if not -32 <= self.margin <= 31:
            raise FieldOutOfRange("Margin", 31, self.margin, min=-32)
        return bytes([self.battery, self.margin & 0x3F])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> DevStatusAns:
        _check_size("DevStatusAns", data, cls.SIZE)
        margin = data[1] & 0x3F
        if margin & 0x20:
            margin -= 0x40
        return cls(battery=data[0], margin=margin)


# =============================================================================
# Channels
# =============================================================================


@dataclass
class NewChannelReq:
    """Create, modify or (frequency 0) disable an uplink channel."""

    channel_index: int = 0
    frequency: int = 0  # Hz, 0 disables the channel
    min_data_rate_index: int = 0
    max_data_rate_index: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.NEW_CHANNEL
    SIZE: ClassVar[int] = 5

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("ChannelIndex", self.channel_index, MAX_UINT8)
        frequency = encode_frequency("Frequency", self.frequency, phy, allow_zero=True)
        _check_max("MinDataRateIndex", self.min_data_rate_index, 15)
        _check_max("MaxDataRateIndex", self.max_data_rate_index, 15)
        return (
            bytes([self.channel_index])
            + frequency
            + bytes([(self.max_data_rate_index << 4) | self.min_data_rate_index])
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> NewChannelReq:
        _check_size("NewChannelReq", data, cls.SIZE)
        return cls(
            channel_index=data[0],
            frequency=decode_frequency(data[1:4], phy),
            min_data_rate_index=data[4] & 0x0F,
            max_data_rate_index=data[4] >> 4,
        )


@dataclass
class NewChannelAns:
    frequency_ack: bool = False
    data_rate_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.NEW_CHANNEL
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.frequency_ack, self.data_rate_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> NewChannelAns:
        _check_size("NewChannelAns", data, cls.SIZE)
        return cls(_bit(data[0], 0), _bit(data[0], 1))


@dataclass
class DLChannelReq:
    """Move the Rx1 downlink frequency of an uplink channel."""

    channel_index: int = 0
    frequency: int = 0  # Hz

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DL_CHANNEL
    SIZE: ClassVar[int] = 4

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("ChannelIndex", self.channel_index, MAX_UINT8)
        return bytes([self.channel_index]) + encode_frequency("Frequency", self.frequency, phy)

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> DLChannelReq:
        _check_size("DLChannelReq", data, cls.SIZE)
        return cls(channel_index=data[0], frequency=decode_frequency(data[1:4], phy))


@dataclass
class DLChannelAns:
    channel_index_ack: bool = False
    frequency_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DL_CHANNEL
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.channel_index_ack, self.frequency_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> DLChannelAns:
        _check_size("DLChannelAns", data, cls.SIZE)
        return cls(_bit(data[0], 0), _bit(data[0], 1))


@dataclass
class TxParamSetupReq:
    """Dwell time limits and maximum EIRP index (AS923, AU915)."""

    max_eirp_index: int = 0
    uplink_dwell_time: bool = False
    downlink_dwell_time: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.TX_PARAM_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("MaxEIRPIndex", self.max_eirp_index, 15)
        return bytes([(int(self.downlink_dwell_time) << 5) | (int(self.uplink_dwell_time) << 4) | self.max_eirp_index])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> TxParamSetupReq:
        _check_size("TxParamSetupReq", data, cls.SIZE)
        return cls(
            max_eirp_index=data[0] & 0x0F,
            uplink_dwell_time=_bit(data[0], 4),
            downlink_dwell_time=_bit(data[0], 5),
        )


@dataclass
class TxParamSetupAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.TX_PARAM_SETUP


# =============================================================================
# ADR parameters
# =============================================================================


@dataclass
class ADRParamSetupReq:
    adr_ack_limit_exponent: ADRAckLimitExponent = ADRAckLimitExponent.ADR_ACK_LIMIT_64
    adr_ack_delay_exponent: ADRAckDelayExponent = ADRAckDelayExponent.ADR_ACK_DELAY_32

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.ADR_PARAM_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("ADRAckLimitExponent", self.adr_ack_limit_exponent, 15)
        _check_max("ADRAckDelayExponent", self.adr_ack_delay_exponent, 15)
        return bytes([(int(self.adr_ack_limit_exponent) << 4) | int(self.adr_ack_delay_exponent)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> ADRParamSetupReq:
        _check_size("ADRParamSetupReq", data, cls.SIZE)
        return cls(
            adr_ack_limit_exponent=ADRAckLimitExponent(data[0] >> 4),
            adr_ack_delay_exponent=ADRAckDelayExponent(data[0] & 0x0F),
        )


@dataclass
class ADRParamSetupAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.ADR_PARAM_SETUP


# =============================================================================
# Device time
# =============================================================================


@dataclass
class DeviceTimeReq(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEVICE_TIME


@dataclass
class DeviceTimeAns:
    """Network time as GPS seconds plus 2^-8 second steps.

    ``time`` is rounded to the nearest step on encode, carrying into the
    seconds field.

    Examples
    --------
        >>> from datetime import timezone
        >>> DeviceTimeAns(datetime(1980, 1, 6, 0, 0, 1, 500_000, tzinfo=timezone.utc)).to_bytes().hex()
        '0100000080'
    """

    time: datetime = field(default_factory=lambda: from_gps(timedelta(0)))

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEVICE_TIME
    SIZE: ClassVar[int] = 5

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        gps = to_gps(self.time)
        micros = (gps.days * 86_400 + gps.seconds) * 1_000_000 + gps.microseconds
        steps = (micros * DEVICE_TIME_FRACTION_STEPS + 500_000) // 1_000_000
        seconds, fraction = divmod(steps, DEVICE_TIME_FRACTION_STEPS)
        if not 0 <= seconds <= MAX_UINT32:
            raise FieldOutOfRange("Time", MAX_UINT32, seconds)
        return seconds.to_bytes(4, "little") + bytes([fraction])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> DeviceTimeAns:
        _check_size("DeviceTimeAns", data, cls.SIZE)
        gps = timedelta(
            seconds=int.from_bytes(data[0:4], "little"),
            microseconds=data[4] * 1_000_000 / DEVICE_TIME_FRACTION_STEPS,
        )
        return cls(time=from_gps(gps))


# =============================================================================
# Rejoin (LoRaWAN 1.1)
# =============================================================================


@dataclass
class ForceRejoinReq:
    period_exponent: int = 0  # Delay 32 s * 2^period before the first retry
    max_retries: int = 0
    rejoin_type: int = 0
    data_rate_index: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.FORCE_REJOIN
    SIZE: ClassVar[int] = 2

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("PeriodExponent", self.period_exponent, 7)
        _check_max("MaxRetries", self.max_retries, 7)
        _check_max("RejoinType", self.rejoin_type, 2)
        _check_max("DataRateIndex", self.data_rate_index, 15)
        return bytes(
            [
                (self.period_exponent << 3) | self.max_retries,
                (self.rejoin_type << 4) | self.data_rate_index,
            ]
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> ForceRejoinReq:
        _check_size("ForceRejoinReq", data, cls.SIZE)
        return cls(
            period_exponent=(data[0] >> 3) & 0x07,
            max_retries=data[0] & 0x07,
            rejoin_type=(data[1] >> 4) & 0x07,
            data_rate_index=data[1] & 0x0F,
        )


@dataclass
class RejoinParamSetupReq:
    max_time_exponent: int = 0
    max_count_exponent: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.REJOIN_PARAM_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("MaxTimeExponent", self.max_time_exponent, 15)
        _check_max("MaxCountExponent", self.max_count_exponent, 15)
        return bytes([(self.max_time_exponent << 4) | self.max_count_exponent])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RejoinParamSetupReq:
        _check_size("RejoinParamSetupReq", data, cls.SIZE)
        return cls(max_time_exponent=data[0] >> 4, max_count_exponent=data[0] & 0x0F)


@dataclass
class RejoinParamSetupAns:
    max_time_exponent_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.REJOIN_PARAM_SETUP
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.max_time_exponent_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RejoinParamSetupAns:
        _check_size("RejoinParamSetupAns", data, cls.SIZE)
        return cls(_bit(data[0], 0))


# =============================================================================
# Class B
# =============================================================================


@dataclass
class PingSlotInfoReq:
    period: int = 0  # Ping every 2^period seconds

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.PING_SLOT_INFO
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Period", self.period, 7)
        return bytes([self.period])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> PingSlotInfoReq:
        _check_size("PingSlotInfoReq", data, cls.SIZE)
        return cls(period=data[0] & 0x07)


@dataclass
class PingSlotInfoAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.PING_SLOT_INFO


@dataclass
class PingSlotChannelReq:
    frequency: int = 0  # Hz, 0 restores the default
    data_rate_index: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.PING_SLOT_CHANNEL
    SIZE: ClassVar[int] = 4

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        frequency = encode_frequency("Frequency", self.frequency, phy, allow_zero=True)
        _check_max("DataRateIndex", self.data_rate_index, 15)
        return frequency + bytes([self.data_rate_index])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> PingSlotChannelReq:
        _check_size("PingSlotChannelReq", data, cls.SIZE)
        return cls(frequency=decode_frequency(data[0:3], phy), data_rate_index=data[3] & 0x0F)


@dataclass
class PingSlotChannelAns:
    frequency_ack: bool = False
    data_rate_index_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.PING_SLOT_CHANNEL
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.frequency_ack, self.data_rate_index_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> PingSlotChannelAns:
        _check_size("PingSlotChannelAns", data, cls.SIZE)
        return cls(_bit(data[0], 0), _bit(data[0], 1))


@dataclass
class BeaconTimingReq(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.BEACON_TIMING


@dataclass
class BeaconTimingAns:
    """Time to the next beacon in 30 ms units, and its channel."""

    delay: int = 0
    channel_index: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.BEACON_TIMING
    SIZE: ClassVar[int] = 3

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("Delay", self.delay, MAX_UINT16)
        _check_max("ChannelIndex", self.channel_index, MAX_UINT8)
        return self.delay.to_bytes(2, "little") + bytes([self.channel_index])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> BeaconTimingAns:
        _check_size("BeaconTimingAns", data, cls.SIZE)
        return cls(delay=int.from_bytes(data[0:2], "little"), channel_index=data[2])


@dataclass
class BeaconFreqReq:
    frequency: int = 0  # Hz, 0 restores the default

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.BEACON_FREQ
    SIZE: ClassVar[int] = 3

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return encode_frequency("Frequency", self.frequency, phy, allow_zero=True)

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> BeaconFreqReq:
        _check_size("BeaconFreqReq", data, cls.SIZE)
        return cls(frequency=decode_frequency(data, phy))


@dataclass
class BeaconFreqAns:
    frequency_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.BEACON_FREQ
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes([_flags(self.frequency_ack)])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> BeaconFreqAns:
        _check_size("BeaconFreqAns", data, cls.SIZE)
        return cls(_bit(data[0], 0))


# =============================================================================
# Device mode (LoRaWAN 1.1)
# =============================================================================


@dataclass
class _ClassPayload:
    device_class: DeviceClass = DeviceClass.CLASS_A

    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        if self.device_class not in (DeviceClass.CLASS_A, DeviceClass.CLASS_C):
            raise UnknownField("Class", self.device_class)
        return bytes([self.device_class])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None):
        _check_size(cls.__name__, data, cls.SIZE)
        if data[0] not in (DeviceClass.CLASS_A, DeviceClass.CLASS_C):
            raise UnknownField("Class", data[0])
        return cls(device_class=DeviceClass(data[0]))


@dataclass
class DeviceModeInd(_ClassPayload):
    """Switch between class A and class C."""

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEVICE_MODE


@dataclass
class DeviceModeConf(_ClassPayload):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.DEVICE_MODE
