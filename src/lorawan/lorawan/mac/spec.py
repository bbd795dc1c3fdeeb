"""
LoRaWAN MAC Command Dispatch

A MAC command on the wire is one CID octet followed by a payload whose
length is fixed per CID and direction; nothing is length-prefixed.
:class:`MACCommandSpec` maps CIDs to :class:`MACCommandDescriptor` records
and drives the payload records of :mod:`lorawan.mac.commands` and
:mod:`lorawan.mac.relay`.

Unknown CIDs cannot be skipped since their length is unknown, so reading
one consumes the rest of the stream as a :class:`RawPayload`. This
includes relay CIDs without a descriptor, such as RelayFilterList (0x42).
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Type, Union

from lorawan.core.errors import (
    DecodingError,
    EncodingError,
    InvalidMACCommandDirection,
    LoRaWANError,
    UnknownMACCommand,
)
from lorawan.core.types import MACCommandIdentifier
from lorawan.mac import commands, relay

if TYPE_CHECKING:
    from lorawan.band.band import Band

__all__ = [
    "RawPayload",
    "MACCommand",
    "MACCommandDescriptor",
    "MACCommandSpec",
    "DEFAULT_MAC_COMMANDS",
    "read_mac_commands",
]

logger = logging.getLogger(__name__)


@dataclass
class RawPayload:
    """Undecoded payload of a command with an unknown CID."""

    data: bytes = b""

    def to_bytes(self, phy: Optional[Band] = None) -> bytes:
        return bytes(self.data)


@dataclass
class MACCommand:
    """
    A MAC command: CID and payload record.

    Examples
    --------
        >>> MACCommand.from_payload(commands.LinkCheckReq()).cid
        <MACCommandIdentifier.LINK_CHECK: 2>
    """

    cid: Union[MACCommandIdentifier, int]
    payload: Any = None

    @classmethod
    def from_payload(cls, payload: Any) -> MACCommand:
        """Wrap a payload record, taking the CID from its class."""
        return cls(cid=payload.CID, payload=payload)


@dataclass(frozen=True)
class MACCommandDescriptor:
    """
    Static description of one CID.

    Attributes:
        cid: Command identifier.
        name: Command name, without the Req/Ans suffix.
        initiated_by_device: The end device sends the first message.
        expect_answer: The first message asks for an answer.
        uplink: Payload record sent by the end device, if any.
        downlink: Payload record sent by the network, if any.
    """

    cid: MACCommandIdentifier
    name: str
    initiated_by_device: bool
    expect_answer: bool
    uplink: Optional[Type[Any]] = None
    downlink: Optional[Type[Any]] = None

    @property
    def uplink_length(self) -> Optional[int]:
        """Payload length in the uplink direction, ``None`` if invalid."""
        return None if self.uplink is None else self.uplink.SIZE

    @property
    def downlink_length(self) -> Optional[int]:
        """Payload length in the downlink direction, ``None`` if invalid."""
        return None if self.downlink is None else self.downlink.SIZE


class MACCommandSpec:
    """
    Registry of MAC command descriptors keyed by CID.

    Args:
    ----
        descriptors: Descriptors to register.

    Examples
    --------
        >>> buf = DEFAULT_MAC_COMMANDS.append_downlink(
        ...     None, bytearray(), MACCommand.from_payload(commands.DutyCycleReq(3)))
        >>> buf.hex()
        '0403'
    """

    def __init__(self, descriptors: Iterable[MACCommandDescriptor]) -> None:
        table: Dict[int, MACCommandDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.cid in table:
                raise ValueError(f"Duplicate MAC command descriptor for CID 0x{descriptor.cid:02X}")
            table[int(descriptor.cid)] = descriptor
        self._descriptors: Mapping[int, MACCommandDescriptor] = MappingProxyType(table)

    @property
    def descriptors(self) -> Mapping[int, MACCommandDescriptor]:
        """Read-only CID to descriptor mapping."""
        return self._descriptors

    def __contains__(self, cid: int) -> bool:
        return int(cid) in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def get(self, cid: int) -> Optional[MACCommandDescriptor]:
        """Descriptor for ``cid``, or ``None`` if unknown."""
        return self._descriptors.get(int(cid))

    # =========================================================================
    # Encoding
    # =========================================================================

    def _append(self, phy: Optional[Band], buf: bytearray, cmd: MACCommand, uplink: bool) -> bytearray:
        descriptor = self.get(cmd.cid)
        if descriptor is None:
            raise UnknownMACCommand(cmd.cid)
        payload_type = descriptor.uplink if uplink else descriptor.downlink
        if payload_type is None:
            raise InvalidMACCommandDirection(cmd.cid, uplink)
        if not isinstance(cmd.payload, payload_type):
            raise EncodingError(payload_type.__name__, f"expected {payload_type.__name__} payload")
        try:
            payload = cmd.payload.to_bytes(phy)
        except LoRaWANError as err:
            raise EncodingError(payload_type.__name__) from err
        # Only grow the buffer once the payload is complete
        buf.append(int(cmd.cid))
        buf.extend(payload)
        return buf

    def append_uplink(self, phy: Optional[Band], buf: bytearray, cmd: MACCommand) -> bytearray:
        """
        Append an uplink MAC command to ``buf``.

        Args:
            phy: Band used for frequency units; ``None`` means 100 Hz.
            buf: Buffer to extend.
            cmd: Command to encode.

        Returns:
            The same buffer, extended.

        Raises:
            UnknownMACCommand: If the CID is not registered.
            InvalidMACCommandDirection: If the CID has no uplink payload.
            EncodingError: If the payload does not encode.
        """
        return self._append(phy, buf, cmd, uplink=True)

    def append_downlink(self, phy: Optional[Band], buf: bytearray, cmd: MACCommand) -> bytearray:
        """Append a downlink MAC command to ``buf``; see :meth:`append_uplink`."""
        return self._append(phy, buf, cmd, uplink=False)

    # =========================================================================
    # Decoding
    # =========================================================================

    def _read(self, phy: Optional[Band], reader: BinaryIO, uplink: bool) -> MACCommand:
        head = reader.read(1)
        if len(head) != 1:
            raise DecodingError("CID", "no data")
        cid = head[0]
        descriptor = self.get(cid)
        if descriptor is None:
            rest = reader.read()
            logger.debug(f"Unknown MAC command CID 0x{cid:02X}, keeping {len(rest)} bytes as raw payload")
            return MACCommand(cid=cid, payload=RawPayload(rest))

        payload_type = descriptor.uplink if uplink else descriptor.downlink
        if payload_type is None:
            raise InvalidMACCommandDirection(cid, uplink)
        data = reader.read(payload_type.SIZE) if payload_type.SIZE else b""
        if len(data) != payload_type.SIZE:
            raise DecodingError(
                payload_type.__name__,
                f"expected {payload_type.SIZE} bytes, got {len(data)}",
            )
        try:
            payload = payload_type.from_bytes(data, phy)
        except LoRaWANError as err:
            raise DecodingError(payload_type.__name__) from err
        return MACCommand(cid=descriptor.cid, payload=payload)

    def read_uplink(self, phy: Optional[Band], reader: BinaryIO) -> MACCommand:
        """
        Read one uplink MAC command from ``reader``.

        Raises:
            DecodingError: If the stream ends early or the payload is invalid.
            InvalidMACCommandDirection: If the CID has no uplink payload.
        """
        return self._read(phy, reader, uplink=True)

    def read_downlink(self, phy: Optional[Band], reader: BinaryIO) -> MACCommand:
        """Read one downlink MAC command from ``reader``; see :meth:`read_uplink`."""
        return self._read(phy, reader, uplink=False)


# =============================================================================
# Descriptor table
# =============================================================================

_ID = MACCommandIdentifier

DEFAULT_MAC_COMMANDS = MACCommandSpec(
    [
        MACCommandDescriptor(_ID.RESET, "Reset", True, True, commands.ResetInd, commands.ResetConf),
        MACCommandDescriptor(_ID.LINK_CHECK, "LinkCheck", True, True, commands.LinkCheckReq, commands.LinkCheckAns),
        MACCommandDescriptor(_ID.LINK_ADR, "LinkADR", False, True, commands.LinkADRAns, commands.LinkADRReq),
        MACCommandDescriptor(_ID.DUTY_CYCLE, "DutyCycle", False, True, commands.DutyCycleAns, commands.DutyCycleReq),
        MACCommandDescriptor(
            _ID.RX_PARAM_SETUP, "RxParamSetup", False, True, commands.RxParamSetupAns, commands.RxParamSetupReq
        ),
        MACCommandDescriptor(_ID.DEV_STATUS, "DevStatus", False, True, commands.DevStatusAns, commands.DevStatusReq),
        MACCommandDescriptor(
            _ID.NEW_CHANNEL, "NewChannel", False, True, commands.NewChannelAns, commands.NewChannelReq
        ),
        MACCommandDescriptor(
            _ID.RX_TIMING_SETUP, "RxTimingSetup", False, True, commands.RxTimingSetupAns, commands.RxTimingSetupReq
        ),
        MACCommandDescriptor(
            _ID.TX_PARAM_SETUP, "TxParamSetup", False, True, commands.TxParamSetupAns, commands.TxParamSetupReq
        ),
        MACCommandDescriptor(_ID.DL_CHANNEL, "DLChannel", False, True, commands.DLChannelAns, commands.DLChannelReq),
        MACCommandDescriptor(_ID.REKEY, "Rekey", True, True, commands.RekeyInd, commands.RekeyConf),
        MACCommandDescriptor(
            _ID.ADR_PARAM_SETUP, "ADRParamSetup", False, True, commands.ADRParamSetupAns, commands.ADRParamSetupReq
        ),
        MACCommandDescriptor(
            _ID.DEVICE_TIME, "DeviceTime", True, True, commands.DeviceTimeReq, commands.DeviceTimeAns
        ),
        MACCommandDescriptor(_ID.FORCE_REJOIN, "ForceRejoin", False, False, None, commands.ForceRejoinReq),
        MACCommandDescriptor(
            _ID.REJOIN_PARAM_SETUP,
            "RejoinParamSetup",
            False,
            True,
            commands.RejoinParamSetupAns,
            commands.RejoinParamSetupReq,
        ),
        MACCommandDescriptor(
            _ID.PING_SLOT_INFO, "PingSlotInfo", True, True, commands.PingSlotInfoReq, commands.PingSlotInfoAns
        ),
        MACCommandDescriptor(
            _ID.PING_SLOT_CHANNEL,
            "PingSlotChannel",
            False,
            True,
            commands.PingSlotChannelAns,
            commands.PingSlotChannelReq,
        ),
        MACCommandDescriptor(
            _ID.BEACON_TIMING, "BeaconTiming", True, True, commands.BeaconTimingReq, commands.BeaconTimingAns
        ),
        MACCommandDescriptor(_ID.BEACON_FREQ, "BeaconFreq", False, True, commands.BeaconFreqAns, commands.BeaconFreqReq),
        MACCommandDescriptor(
            _ID.DEVICE_MODE, "DeviceMode", True, True, commands.DeviceModeInd, commands.DeviceModeConf
        ),
        # Relay (TS011)
        MACCommandDescriptor(_ID.RELAY_CONF, "RelayConf", False, True, relay.RelayConfAns, relay.RelayConfReq),
        MACCommandDescriptor(
            _ID.RELAY_END_DEVICE_CONF,
            "RelayEndDeviceConf",
            False,
            True,
            relay.RelayEndDeviceConfAns,
            relay.RelayEndDeviceConfReq,
        ),
        MACCommandDescriptor(
            _ID.RELAY_UPDATE_UPLINK_LIST,
            "RelayUpdateUplinkList",
            False,
            True,
            relay.RelayUpdateUplinkListAns,
            relay.RelayUpdateUplinkListReq,
        ),
        MACCommandDescriptor(
            _ID.RELAY_CTRL_UPLINK_LIST,
            "RelayCtrlUplinkList",
            False,
            True,
            relay.RelayCtrlUplinkListAns,
            relay.RelayCtrlUplinkListReq,
        ),
        MACCommandDescriptor(
            _ID.RELAY_CONFIGURE_FWD_LIMIT,
            "RelayConfigureFwdLimit",
            False,
            True,
            relay.RelayConfigureFwdLimitAns,
            relay.RelayConfigureFwdLimitReq,
        ),
        MACCommandDescriptor(
            _ID.RELAY_NOTIFY_NEW_END_DEVICE,
            "RelayNotifyNewEndDevice",
            True,
            False,
            relay.RelayNotifyNewEndDeviceReq,
            None,
        ),
    ]
)


def read_mac_commands(
    phy: Optional[Band],
    data: bytes,
    uplink: bool,
    spec: MACCommandSpec = DEFAULT_MAC_COMMANDS,
) -> List[MACCommand]:
    """
    Decode a whole FOpts or port 0 FRMPayload into MAC commands.

    Args:
        phy: Band used for frequency units; ``None`` means 100 Hz.
        data: Cleartext MAC command stream.
        uplink: Direction of the frame the stream came from.
        spec: Descriptor registry to use.

    Returns:
        Commands in stream order. An unknown CID ends the stream with a
        :class:`RawPayload` holding the remaining bytes.

    Examples:
        >>> cmds = read_mac_commands(None, bytes.fromhex("020307"), uplink=True)
        >>> [c.cid.name for c in cmds]
        ['LINK_CHECK', 'LINK_ADR']
    """
    reader = io.BytesIO(data)
    read = spec.read_uplink if uplink else spec.read_downlink
    result = []
    while reader.tell() < len(data):
        result.append(read(phy, reader))
    return result
