"""
LoRaWAN Relay MAC Command Payloads (TS011)

Payload records for the relay configuration commands (CID 0x40-0x46).

Second channel settings shared by RelayConfReq and RelayEndDeviceConfReq
(16 bits, LE):
- Bits 2-0: WOR ACK frequency offset
- Bits 6-3: second channel data rate index
- Bit 7: second channel enabled

RelayConfReq adds DefaultChIdx (bits 9-8), CADPeriodicity (bits 12-10) and
Start/Stop (bit 13); RelayEndDeviceConfReq adds Backoff (bits 13-8).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Optional

from lorawan.core.constants import MAX_UINT32
from lorawan.core.errors import FieldLengthMismatch, FieldOutOfRange, UnknownField
from lorawan.core.identifiers import DevAddr
from lorawan.core.types import (
    MACCommandIdentifier,
    RelayCADPeriodicity,
    RelayCtrlUplinkListAction,
    RelayEndDeviceMode,
    RelayLimitBucketSize,
    RelayResetLimitCounter,
    RelaySecondChAckOffset,
    RelaySmartEnableLevel,
)
from lorawan.mac.commands import _bit, _check_max, _check_size, _Empty, _flags, decode_frequency, encode_frequency

if TYPE_CHECKING:
    from lorawan.band.band import Band

__all__ = [
    # Records
    "RelaySecondChannel",
    "RelayConfiguration",
    "RelayEndDeviceConfiguration",
    "RelayForwardLimits",
    # 0x40
    "RelayConfReq",
    "RelayConfAns",
    # 0x41
    "RelayEndDeviceConfReq",
    "RelayEndDeviceConfAns",
    # 0x43
    "RelayUpdateUplinkListReq",
    "RelayUpdateUplinkListAns",
    # 0x44
    "RelayCtrlUplinkListReq",
    "RelayCtrlUplinkListAns",
    # 0x45
    "RelayConfigureFwdLimitReq",
    "RelayConfigureFwdLimitAns",
    # 0x46
    "RelayNotifyNewEndDeviceReq",
]

# Reload rate of a limit left unchanged
UNCHANGED_RELOAD_RATE = 0x7F

RSSI_MIN, RSSI_MAX = -142, -15
SNR_MIN, SNR_MAX = -20, 11


def _enum(enum_type, name: str, value: int):
    try:
        return enum_type(value)
    except ValueError:
        raise UnknownField(name, value) from None


# =============================================================================
# Shared records
# =============================================================================


@dataclass
class RelaySecondChannel:
    """Optional second Wake On Radio channel."""

    ack_offset: RelaySecondChAckOffset = RelaySecondChAckOffset.KHZ_0
    data_rate_index: int = 0
    frequency: int = 0  # Hz


def _second_channel_bits(second_channel: Optional[RelaySecondChannel], phy: Optional[Band]):
    if second_channel is None:
        return 0, bytes(3)
    _check_max("SecondChAckOffset", second_channel.ack_offset, 7)
    _check_max("SecondChDataRateIndex", second_channel.data_rate_index, 15)
    frequency = encode_frequency("SecondChFrequency", second_channel.frequency, phy)
    bits = int(second_channel.ack_offset) | (second_channel.data_rate_index << 3) | (1 << 7)
    return bits, frequency


def _parse_second_channel(settings: int, frequency: bytes, phy: Optional[Band]) -> Optional[RelaySecondChannel]:
    if not _bit(settings, 7):
        return None
    return RelaySecondChannel(
        ack_offset=_enum(RelaySecondChAckOffset, "SecondChAckOffset", settings & 0x07),
        data_rate_index=(settings >> 3) & 0x0F,
        frequency=decode_frequency(frequency, phy),
    )


# =============================================================================
# RelayConfReq / Ans (0x40)
# =============================================================================


@dataclass
class RelayConfiguration:
    """Relay side configuration; the relay is stopped when absent."""

    second_channel: Optional[RelaySecondChannel] = None
    default_channel_index: int = 0
    cad_periodicity: RelayCADPeriodicity = RelayCADPeriodicity.PERIOD_1_SECOND


@dataclass
class RelayConfReq:
    """Start, reconfigure or stop a relay.

    Examples
    --------
        >>> RelayConfReq().to_bytes().hex()
        '0000000000'
        >>> RelayConfReq(RelayConfiguration()).to_bytes().hex()
        '0020000000'
    """

    configuration: Optional[RelayConfiguration] = None

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CONF
    SIZE: ClassVar[int] = 5

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        conf = self.configuration
        if conf is None:
            return bytes(self.SIZE)
        settings, frequency = _second_channel_bits(conf.second_channel, phy)
        _check_max("DefaultChIdx", conf.default_channel_index, 3)
        _check_max("CADPeriodicity", conf.cad_periodicity, 7)
        settings |= (conf.default_channel_index << 8) | (int(conf.cad_periodicity) << 10) | (1 << 13)
        return settings.to_bytes(2, "little") + frequency

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayConfReq:
        _check_size("RelayConfReq", data, cls.SIZE)
        settings = int.from_bytes(data[0:2], "little")
        if not _bit(settings, 13):
            return cls()
        return cls(
            RelayConfiguration(
                second_channel=_parse_second_channel(settings, data[2:5], phy),
                default_channel_index=(settings >> 8) & 0x03,
                cad_periodicity=_enum(RelayCADPeriodicity, "CADPeriodicity", (settings >> 10) & 0x07),
            )
        )


@dataclass
class RelayConfAns:
    second_channel_frequency_ack: bool = False
    second_channel_ack_offset_ack: bool = False
    second_channel_data_rate_index_ack: bool = False
    second_channel_index_ack: bool = False
    default_channel_index_ack: bool = False
    cad_periodicity_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CONF
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes(
            [
                _flags(
                    self.second_channel_frequency_ack,
                    self.second_channel_ack_offset_ack,
                    self.second_channel_data_rate_index_ack,
                    self.second_channel_index_ack,
                    self.default_channel_index_ack,
                    self.cad_periodicity_ack,
                )
            ]
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayConfAns:
        _check_size("RelayConfAns", data, cls.SIZE)
        return cls(*(_bit(data[0], i) for i in range(6)))


# =============================================================================
# RelayEndDeviceConfReq / Ans (0x41)
# =============================================================================


@dataclass
class RelayEndDeviceConfiguration:
    """End device side relay configuration; relaying is disabled when absent."""

    mode: RelayEndDeviceMode = RelayEndDeviceMode.ALWAYS
    smart_enable_level: RelaySmartEnableLevel = RelaySmartEnableLevel.LEVEL_8  # DYNAMIC mode only
    backoff: int = 0  # Uplinks sent without WOR after a missed ACK, 0-63
    second_channel: Optional[RelaySecondChannel] = None


@dataclass
class RelayEndDeviceConfReq:
    configuration: Optional[RelayEndDeviceConfiguration] = None

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_END_DEVICE_CONF
    SIZE: ClassVar[int] = 6

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        conf = self.configuration
        if conf is None:
            return bytes(self.SIZE)
        if conf.mode == RelayEndDeviceMode.DISABLED:
            raise FieldOutOfRange("Mode", RelayEndDeviceMode.END_DEVICE_CONTROLLED, conf.mode, min=1)
        _check_max("Mode", conf.mode, 3)
        _check_max("SmartEnableLevel", conf.smart_enable_level, 3)
        _check_max("Backoff", conf.backoff, 63)
        settings, frequency = _second_channel_bits(conf.second_channel, phy)
        settings |= conf.backoff << 8
        mode = (int(conf.mode) << 2) | int(conf.smart_enable_level)
        return bytes([mode]) + settings.to_bytes(2, "little") + frequency

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayEndDeviceConfReq:
        _check_size("RelayEndDeviceConfReq", data, cls.SIZE)
        mode = RelayEndDeviceMode((data[0] >> 2) & 0x03)
        if mode == RelayEndDeviceMode.DISABLED:
            return cls()
        settings = int.from_bytes(data[1:3], "little")
        return cls(
            RelayEndDeviceConfiguration(
                mode=mode,
                smart_enable_level=RelaySmartEnableLevel(data[0] & 0x03),
                backoff=(settings >> 8) & 0x3F,
                second_channel=_parse_second_channel(settings, data[3:6], phy),
            )
        )


@dataclass
class RelayEndDeviceConfAns:
    second_channel_frequency_ack: bool = False
    second_channel_data_rate_index_ack: bool = False
    second_channel_index_ack: bool = False
    backoff_ack: bool = False

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_END_DEVICE_CONF
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes(
            [
                _flags(
                    self.second_channel_frequency_ack,
                    self.second_channel_data_rate_index_ack,
                    self.second_channel_index_ack,
                    self.backoff_ack,
                )
            ]
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayEndDeviceConfAns:
        _check_size("RelayEndDeviceConfAns", data, cls.SIZE)
        return cls(*(_bit(data[0], i) for i in range(4)))


# =============================================================================
# Uplink forwarding list (0x43, 0x44)
# =============================================================================


@dataclass
class RelayForwardLimits:
    """Token bucket of a forwarding limit."""

    bucket_size: RelayLimitBucketSize = RelayLimitBucketSize.SIZE_1
    reload_rate: int = 0  # Tokens per hour


@dataclass
class RelayUpdateUplinkListReq:
    """Add or replace a trusted end device in the relay's forwarding list."""

    rule_index: int = 0
    forward_limits: RelayForwardLimits = field(default_factory=RelayForwardLimits)
    dev_addr: DevAddr = field(default_factory=DevAddr)
    w_f_cnt: int = 0
    root_wor_s_key: bytes = bytes(16)

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_UPDATE_UPLINK_LIST
    SIZE: ClassVar[int] = 26

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("RuleIndex", self.rule_index, 15)
        _check_max("BucketSize", self.forward_limits.bucket_size, 3)
        _check_max("ReloadRate", self.forward_limits.reload_rate, 63)
        _check_max("WFCnt", self.w_f_cnt, MAX_UINT32)
        if len(self.root_wor_s_key) != 16:
            raise FieldLengthMismatch("RootWorSKey", 16, len(self.root_wor_s_key))
        limit = (int(self.forward_limits.bucket_size) << 6) | self.forward_limits.reload_rate
        return (
            bytes([self.rule_index, limit])
            + self.dev_addr.to_wire()
            + self.w_f_cnt.to_bytes(4, "little")
            + bytes(self.root_wor_s_key)
        )

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayUpdateUplinkListReq:
        _check_size("RelayUpdateUplinkListReq", data, cls.SIZE)
        return cls(
            rule_index=data[0] & 0x0F,
            forward_limits=RelayForwardLimits(
                bucket_size=RelayLimitBucketSize(data[1] >> 6),
                reload_rate=data[1] & 0x3F,
            ),
            dev_addr=DevAddr.from_wire(data[2:6]),
            w_f_cnt=int.from_bytes(data[6:10], "little"),
            root_wor_s_key=bytes(data[10:26]),
        )


@dataclass
class RelayUpdateUplinkListAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_UPDATE_UPLINK_LIST


@dataclass
class RelayCtrlUplinkListReq:
    rule_index: int = 0
    action: RelayCtrlUplinkListAction = RelayCtrlUplinkListAction.READ_W_F_CNT

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CTRL_UPLINK_LIST
    SIZE: ClassVar[int] = 1

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("RuleIndex", self.rule_index, 15)
        _check_max("Action", self.action, 15)
        return bytes([(int(self.action) << 4) | self.rule_index])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayCtrlUplinkListReq:
        _check_size("RelayCtrlUplinkListReq", data, cls.SIZE)
        return cls(
            rule_index=data[0] & 0x0F,
            action=_enum(RelayCtrlUplinkListAction, "Action", data[0] >> 4),
        )


@dataclass
class RelayCtrlUplinkListAns:
    rule_index_ack: bool = False
    w_f_cnt: int = 0

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CTRL_UPLINK_LIST
    SIZE: ClassVar[int] = 5

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("WFCnt", self.w_f_cnt, MAX_UINT32)
        return bytes([_flags(self.rule_index_ack)]) + self.w_f_cnt.to_bytes(4, "little")

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayCtrlUplinkListAns:
        _check_size("RelayCtrlUplinkListAns", data, cls.SIZE)
        return cls(rule_index_ack=_bit(data[0], 0), w_f_cnt=int.from_bytes(data[1:5], "little"))


# =============================================================================
# RelayConfigureFwdLimitReq / Ans (0x45)
# =============================================================================


@dataclass
class RelayConfigureFwdLimitReq:
    """Forwarding limits of a relay.

    Reload rates (32 bits, LE): overall (6-0), global uplink (13-7),
    notify (20-14), join request (27-21), reset action (29-28).
    Bucket sizes (8 bits): overall (1-0), global uplink (3-2), notify (5-4),
    join request (7-6). A limit left as ``None`` is sent with reload rate
    0x7F, leaving that limit unchanged.

    Examples
    --------
        >>> RelayConfigureFwdLimitReq().to_bytes().hex()
        'ffffff0f00'
    """

    reset_limit_counter: RelayResetLimitCounter = RelayResetLimitCounter.ZERO
    join_request_limits: Optional[RelayForwardLimits] = None
    notify_limits: Optional[RelayForwardLimits] = None
    global_uplink_limits: Optional[RelayForwardLimits] = None
    overall_limits: Optional[RelayForwardLimits] = None

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CONFIGURE_FWD_LIMIT
    SIZE: ClassVar[int] = 5

    def _limits(self):
        return (
            ("Overall", self.overall_limits),
            ("GlobalUplink", self.global_uplink_limits),
            ("Notify", self.notify_limits),
            ("JoinRequest", self.join_request_limits),
        )

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        _check_max("ResetLimitCounter", self.reset_limit_counter, 3)
        reload_rates = int(self.reset_limit_counter) << 28
        bucket_sizes = 0
        for i, (name, limits) in enumerate(self._limits()):
            if limits is None:
                reload_rates |= UNCHANGED_RELOAD_RATE << (7 * i)
                continue
            _check_max(f"{name}ReloadRate", limits.reload_rate, UNCHANGED_RELOAD_RATE - 1)
            _check_max(f"{name}BucketSize", limits.bucket_size, 3)
            reload_rates |= limits.reload_rate << (7 * i)
            bucket_sizes |= int(limits.bucket_size) << (2 * i)
        return reload_rates.to_bytes(4, "little") + bytes([bucket_sizes])

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayConfigureFwdLimitReq:
        _check_size("RelayConfigureFwdLimitReq", data, cls.SIZE)
        reload_rates = int.from_bytes(data[0:4], "little")
        bucket_sizes = data[4]
        limits = []
        for i in range(4):
            reload_rate = (reload_rates >> (7 * i)) & 0x7F
            if reload_rate == UNCHANGED_RELOAD_RATE:
                limits.append(None)
                continue
            limits.append(
                RelayForwardLimits(
                    bucket_size=RelayLimitBucketSize((bucket_sizes >> (2 * i)) & 0x03),
                    reload_rate=reload_rate,
                )
            )
        overall, global_uplink, notify, join_request = limits
        return cls(
            reset_limit_counter=RelayResetLimitCounter((reload_rates >> 28) & 0x03),
            join_request_limits=join_request,
            notify_limits=notify,
            global_uplink_limits=global_uplink,
            overall_limits=overall,
        )


@dataclass
class RelayConfigureFwdLimitAns(_Empty):
    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_CONFIGURE_FWD_LIMIT


# =============================================================================
# RelayNotifyNewEndDeviceReq (0x46)
# =============================================================================


@dataclass
class RelayNotifyNewEndDeviceReq:
    """Relay notification of an end device not in its forwarding list.

    Power level (16 bits, LE): SNR + 20 (bits 4-0), -(RSSI + 15)
    (bits 11-5).

    Examples
    --------
        >>> RelayNotifyNewEndDeviceReq(DevAddr("42FFFFFF"), snr=-20, rssi=-15).to_bytes().hex()
        '0000ffffff42'
    """

    dev_addr: DevAddr = field(default_factory=DevAddr)
    snr: int = 0  # dB
    rssi: int = RSSI_MAX  # dBm

    CID: ClassVar[MACCommandIdentifier] = MACCommandIdentifier.RELAY_NOTIFY_NEW_END_DEVICE
    SIZE: ClassVar[int] = 6

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        if not SNR_MIN <= self.snr <= SNR_MAX:
            raise FieldOutOfRange("SNR", SNR_MAX, self.snr, min=SNR_MIN)
        if not RSSI_MIN <= self.rssi <= RSSI_MAX:
            raise FieldOutOfRange("RSSI", RSSI_MAX, self.rssi, min=RSSI_MIN)
        power_level = (self.snr - SNR_MIN) | ((-(self.rssi - RSSI_MAX)) << 5)
        return power_level.to_bytes(2, "little") + self.dev_addr.to_wire()

    @classmethod
    def from_bytes(cls, data: bytes, phy: Optional[Band] = None) -> RelayNotifyNewEndDeviceReq:
        _check_size("RelayNotifyNewEndDeviceReq", data, cls.SIZE)
        power_level = int.from_bytes(data[0:2], "little")
        return cls(
            dev_addr=DevAddr.from_wire(data[2:6]),
            snr=(power_level & 0x1F) + SNR_MIN,
            rssi=RSSI_MAX - ((power_level >> 5) & 0x7F),
        )
