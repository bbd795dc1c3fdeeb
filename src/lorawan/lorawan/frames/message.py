"""
LoRaWAN PHYPayload

A PHYPayload is MHDR | payload | MIC, where the payload depends on MType:
- Data messages: MACPayload = FHDR | FPort (optional) | FRMPayload
- JoinRequest: JoinEUI (8) | DevEUI (8) | DevNonce (2)
- RejoinRequest: type (1) | NetID (3) or JoinEUI (8) | DevEUI (8) | RJcount (2)
- JoinAccept: 16 or 32 encrypted bytes, MIC included, no cleartext MIC

FHDR layout (7-22 bytes):
- DevAddr (4 bytes, LE)
- FCtrl (1 byte): ADR | ADRAckReq/RFU | ACK | ClassB/FPending | FOptsLen (4 bits)
- FCnt (2 bytes, LE): low 16 bits of the frame counter
- FOpts (0-15 bytes)

All multi-byte fields are little-endian. The MIC is carried opaquely;
computing or checking it is out of scope.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from lorawan.core.constants import (
    DATA_MESSAGE_MIN_SIZE,
    FHDR_MIN_SIZE,
    FOPTS_MAX_SIZE,
    JOIN_ACCEPT_ENCRYPTED_SIZES,
    JOIN_ACCEPT_SIZES,
    JOIN_REQUEST_SIZE,
    MAX_UINT8,
    MAX_UINT16,
    MAX_UINT32,
    MIC_SIZE,
    REJOIN_REQUEST_SIZES,
)
from lorawan.core.errors import (
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    LoRaWANError,
    UnknownField,
)
from lorawan.core.identifiers import EUI64, DevAddr, NetID
from lorawan.core.types import Major, MType, RejoinRequestType, build_mhdr, is_uplink, parse_mhdr
from lorawan.frames.join import JoinAcceptPayload

__all__ = [
    "MHDR",
    "FCtrl",
    "FHDR",
    "MACPayload",
    "JoinRequestPayload",
    "RejoinRequestPayload",
    "Payload",
    "Message",
    "append_message",
    "marshal_message",
    "unmarshal_message",
]


# =============================================================================
# Header
# =============================================================================


@dataclass
class MHDR:
    """Message header octet."""

    m_type: MType = MType.UNCONFIRMED_UP
    major: Major = Major.LORAWAN_R1

    def to_byte(self) -> int:
        if not 0 <= self.m_type <= 7:
            raise FieldOutOfRange("MType", 7, self.m_type)
        if not 0 <= self.major <= 3:
            raise FieldOutOfRange("Major", 3, self.major)
        return build_mhdr(self.m_type, self.major)

    @classmethod
    def from_byte(cls, value: int) -> MHDR:
        """Decode an MHDR octet; the RFU bits 4-2 are ignored."""
        try:
            parsed = parse_mhdr(value)
        except ValueError:
            raise UnknownField("Major", value & 0x03) from None
        return cls(m_type=parsed.m_type, major=parsed.major)


@dataclass
class FCtrl:
    """Frame control flags.

    ``class_b`` is only sent on uplinks and ``f_pending`` only on
    downlinks; both share bit 4. ``adr_ack_req`` is uplink only.
    """

    adr: bool = False
    adr_ack_req: bool = False
    ack: bool = False
    class_b: bool = False
    f_pending: bool = False

    def to_byte(self, uplink: bool, f_opts_len: int) -> int:
        if not 0 <= f_opts_len <= FOPTS_MAX_SIZE:
            raise FieldOutOfRange("FOptsLen", FOPTS_MAX_SIZE, f_opts_len)
        value = f_opts_len
        if self.adr:
            value |= 1 << 7
        if self.ack:
            value |= 1 << 5
        if uplink:
            if self.adr_ack_req:
                value |= 1 << 6
            if self.class_b:
                value |= 1 << 4
        elif self.f_pending:
            value |= 1 << 4
        return value

    @classmethod
    def from_byte(cls, value: int, uplink: bool) -> FCtrl:
        f_ctrl = cls(adr=bool(value & 0x80), ack=bool(value & 0x20))
        if uplink:
            f_ctrl.adr_ack_req = bool(value & 0x40)
            f_ctrl.class_b = bool(value & 0x10)
        else:
            f_ctrl.f_pending = bool(value & 0x10)
        return f_ctrl


@dataclass
class FHDR:
    """Frame header.

    ``f_cnt`` holds the full 32-bit frame counter; only its low 16 bits
    are transmitted, so a decoded FHDR carries just those.
    """

    dev_addr: DevAddr = field(default_factory=DevAddr)
    f_ctrl: FCtrl = field(default_factory=FCtrl)
    f_cnt: int = 0
    f_opts: bytes = b""

    def to_bytes(self, uplink: bool) -> bytes:
        if len(self.f_opts) > FOPTS_MAX_SIZE:
            raise FieldOutOfRange("FOptsLen", FOPTS_MAX_SIZE, len(self.f_opts))
        if not 0 <= self.f_cnt <= MAX_UINT32:
            raise FieldOutOfRange("FCnt", MAX_UINT32, self.f_cnt)
        try:
            f_ctrl = self.f_ctrl.to_byte(uplink, len(self.f_opts))
        except LoRaWANError as err:
            raise EncodingError("FCtrl") from err
        return (
            self.dev_addr.to_wire()
            + bytes([f_ctrl])
            + (self.f_cnt & MAX_UINT16).to_bytes(2, "little")
            + bytes(self.f_opts)
        )

    @classmethod
    def from_bytes(cls, data: bytes, uplink: bool) -> FHDR:
        n = len(data)
        if not FHDR_MIN_SIZE <= n <= FHDR_MIN_SIZE + FOPTS_MAX_SIZE:
            raise FieldLengthMismatch("FHDR", f"{FHDR_MIN_SIZE}-{FHDR_MIN_SIZE + FOPTS_MAX_SIZE}", n)
        return cls(
            dev_addr=DevAddr.from_wire(data[0:4]),
            f_ctrl=FCtrl.from_byte(data[4], uplink),
            f_cnt=int.from_bytes(data[5:7], "little"),
            f_opts=bytes(data[7:]),
        )


# =============================================================================
# Payloads
# =============================================================================


@dataclass
class MACPayload:
    """Data message payload.

    ``f_port`` is ``None`` when the frame carries no FPort octet. An FPort
    of 0 means ``frm_payload`` holds MAC commands.
    """

    fhdr: FHDR = field(default_factory=FHDR)
    f_port: Optional[int] = None
    frm_payload: bytes = b""

    def to_bytes(self, uplink: bool) -> bytes:
        if self.f_port is not None and not 0 <= self.f_port <= MAX_UINT8:
            raise FieldOutOfRange("FPort", MAX_UINT8, self.f_port)
        try:
            out = self.fhdr.to_bytes(uplink)
        except LoRaWANError as err:
            raise EncodingError("FHDR") from err
        if self.f_port is not None or self.frm_payload:
            out += bytes([self.f_port or 0])
        return out + bytes(self.frm_payload)

    @classmethod
    def from_bytes(cls, data: bytes, uplink: bool) -> MACPayload:
        n = len(data)
        if n < FHDR_MIN_SIZE:
            raise FieldLengthMismatch("FHDR", f">= {FHDR_MIN_SIZE}", n)
        fhdr_len = FHDR_MIN_SIZE + (data[4] & 0x0F)
        if n < fhdr_len:
            raise FieldLengthMismatch("MACPayload", f">= {fhdr_len}", n)
        try:
            fhdr = FHDR.from_bytes(data[:fhdr_len], uplink)
        except LoRaWANError as err:
            raise DecodingError("FHDR") from err
        if n == fhdr_len:
            return cls(fhdr=fhdr)
        return cls(fhdr=fhdr, f_port=data[fhdr_len], frm_payload=bytes(data[fhdr_len + 1 :]))


@dataclass
class JoinRequestPayload:
    """JoinRequest payload."""

    join_eui: EUI64 = field(default_factory=EUI64)
    dev_eui: EUI64 = field(default_factory=EUI64)
    dev_nonce: int = 0  # 16-bit

    SIZE = 18

    def to_bytes(self) -> bytes:
        if not 0 <= self.dev_nonce <= MAX_UINT16:
            raise FieldOutOfRange("DevNonce", MAX_UINT16, self.dev_nonce)
        return self.join_eui.to_wire() + self.dev_eui.to_wire() + self.dev_nonce.to_bytes(2, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> JoinRequestPayload:
        if len(data) != cls.SIZE:
            raise FieldLengthMismatch("JoinRequestPayload", cls.SIZE, len(data))
        return cls(
            join_eui=EUI64.from_wire(data[0:8]),
            dev_eui=EUI64.from_wire(data[8:16]),
            dev_nonce=int.from_bytes(data[16:18], "little"),
        )


@dataclass
class RejoinRequestPayload:
    """RejoinRequest payload.

    Types 0 and 2 carry ``net_id``; type 1 carries ``join_eui``. The field
    not sent for the type is ignored on encode and left zero on decode.
    """

    rejoin_type: RejoinRequestType = RejoinRequestType.CONTEXT
    net_id: NetID = field(default_factory=NetID)
    join_eui: EUI64 = field(default_factory=EUI64)
    dev_eui: EUI64 = field(default_factory=EUI64)
    rejoin_cnt: int = 0  # 16-bit

    def to_bytes(self) -> bytes:
        if not 0 <= self.rejoin_cnt <= MAX_UINT16:
            raise FieldOutOfRange("RJcount", MAX_UINT16, self.rejoin_cnt)
        if self.rejoin_type in (RejoinRequestType.CONTEXT, RejoinRequestType.KEYS):
            ids = self.net_id.to_wire() + self.dev_eui.to_wire()
        elif self.rejoin_type == RejoinRequestType.SESSION:
            ids = self.join_eui.to_wire() + self.dev_eui.to_wire()
        else:
            raise UnknownField("RejoinType", self.rejoin_type)
        return bytes([self.rejoin_type]) + ids + self.rejoin_cnt.to_bytes(2, "little")

    @classmethod
    def from_bytes(cls, data: bytes) -> RejoinRequestPayload:
        if not data:
            raise FieldLengthMismatch("RejoinRequestPayload", "14 or 19", 0)
        try:
            rejoin_type = RejoinRequestType(data[0])
        except ValueError:
            raise UnknownField("RejoinType", data[0]) from None

        if rejoin_type == RejoinRequestType.SESSION:
            if len(data) != 19:
                raise FieldLengthMismatch("RejoinRequestPayload", 19, len(data))
            return cls(
                rejoin_type=rejoin_type,
                join_eui=EUI64.from_wire(data[1:9]),
                dev_eui=EUI64.from_wire(data[9:17]),
                rejoin_cnt=int.from_bytes(data[17:19], "little"),
            )
        if len(data) != 14:
            raise FieldLengthMismatch("RejoinRequestPayload", 14, len(data))
        return cls(
            rejoin_type=rejoin_type,
            net_id=NetID.from_wire(data[1:4]),
            dev_eui=EUI64.from_wire(data[4:12]),
            rejoin_cnt=int.from_bytes(data[12:14], "little"),
        )


Payload = Union[MACPayload, JoinRequestPayload, RejoinRequestPayload, JoinAcceptPayload]


# =============================================================================
# Message
# =============================================================================


_DATA_UP = (MType.UNCONFIRMED_UP, MType.CONFIRMED_UP)
_DATA_DOWN = (MType.UNCONFIRMED_DOWN, MType.CONFIRMED_DOWN)

_PAYLOAD_TYPES = {
    MType.UNCONFIRMED_UP: MACPayload,
    MType.CONFIRMED_UP: MACPayload,
    MType.UNCONFIRMED_DOWN: MACPayload,
    MType.CONFIRMED_DOWN: MACPayload,
    MType.JOIN_REQUEST: JoinRequestPayload,
    MType.REJOIN_REQUEST: RejoinRequestPayload,
    MType.JOIN_ACCEPT: JoinAcceptPayload,
}

_PAYLOAD_NAMES = {
    MACPayload: "MACPayload",
    JoinRequestPayload: "JoinRequestPayload",
    RejoinRequestPayload: "RejoinRequestPayload",
    JoinAcceptPayload: "JoinAcceptPayload",
}


@dataclass
class Message:
    """LoRaWAN PHYPayload.

    Examples
    --------
        >>> msg = unmarshal_message(bytes.fromhex("40ffffff42b242fffeff42feff42ffffff"))
        >>> msg.mhdr.m_type.name, str(msg.payload.fhdr.dev_addr), hex(msg.payload.fhdr.f_cnt)
        ('UNCONFIRMED_UP', '42FFFFFF', '0xff42')
        >>> marshal_message(msg).hex()
        '40ffffff42b242fffeff42feff42ffffff'
    """

    mhdr: MHDR = field(default_factory=MHDR)
    payload: Optional[Payload] = None
    mic: bytes = b""

    @property
    def is_uplink(self) -> bool:
        return is_uplink(self.mhdr.m_type)


def append_message(buf: bytearray, msg: Message) -> bytearray:
    """
    Append the encoded PHYPayload to ``buf``.

    ``buf`` is left untouched when encoding fails.

    Args:
        buf: Buffer to extend.
        msg: Message to encode.

    Returns:
        ``buf``, extended.

    Raises:
        UnknownField: If the MType has no payload codec (Proprietary).
        FieldLengthMismatch: If the MIC or encrypted JoinAccept body has the
            wrong length.
        EncodingError: If the MHDR or payload cannot be encoded.
    """
    try:
        mhdr = msg.mhdr.to_byte()
    except LoRaWANError as err:
        raise EncodingError("MHDR") from err

    m_type = msg.mhdr.m_type
    expected = _PAYLOAD_TYPES.get(m_type)
    if expected is None:
        raise UnknownField("MType", m_type)
    name = _PAYLOAD_NAMES[expected]
    if not isinstance(msg.payload, expected):
        raise EncodingError(name, "missing payload")

    if m_type == MType.JOIN_ACCEPT:
        encrypted = msg.payload.encrypted
        if len(encrypted) not in JOIN_ACCEPT_ENCRYPTED_SIZES:
            raise FieldLengthMismatch("EncryptedJoinAcceptPayload", "16 or 32", len(encrypted))
        buf.append(mhdr)
        buf += encrypted
        return buf

    if len(msg.mic) != MIC_SIZE:
        raise FieldLengthMismatch("MIC", MIC_SIZE, len(msg.mic))
    try:
        if m_type in _DATA_UP:
            body = msg.payload.to_bytes(uplink=True)
        elif m_type in _DATA_DOWN:
            body = msg.payload.to_bytes(uplink=False)
        else:
            body = msg.payload.to_bytes()
    except LoRaWANError as err:
        raise EncodingError(name) from err

    buf.append(mhdr)
    buf += body
    buf += msg.mic
    return buf


def marshal_message(msg: Message) -> bytes:
    """Encode a PHYPayload."""
    return bytes(append_message(bytearray(), msg))


def unmarshal_message(data: bytes) -> Message:
    """
    Decode a PHYPayload.

    Args:
        data: Raw PHYPayload.

    Returns:
        Decoded message. JoinAccept payloads only carry ``encrypted``.

    Raises:
        FieldLengthMismatch: If the frame length does not match its MType.
        UnknownField: For Proprietary frames, unknown Major or RejoinType.
        DecodingError: If the payload is malformed.
    """
    n = len(data)
    if n == 0:
        raise FieldLengthMismatch("PHYPayload", ">= 1", 0)
    mhdr = MHDR.from_byte(data[0])
    m_type = mhdr.m_type

    if m_type in _DATA_UP or m_type in _DATA_DOWN:
        if n < DATA_MESSAGE_MIN_SIZE:
            raise FieldLengthMismatch("PHYPayload", f">= {DATA_MESSAGE_MIN_SIZE}", n)
        try:
            payload = MACPayload.from_bytes(data[1 : n - MIC_SIZE], uplink=m_type in _DATA_UP)
        except LoRaWANError as err:
            raise DecodingError("MACPayload") from err
        return Message(mhdr=mhdr, payload=payload, mic=bytes(data[n - MIC_SIZE :]))

    if m_type == MType.JOIN_REQUEST:
        if n != JOIN_REQUEST_SIZE:
            raise FieldLengthMismatch("JoinRequestPHYPayload", JOIN_REQUEST_SIZE, n)
        payload = JoinRequestPayload.from_bytes(data[1 : n - MIC_SIZE])
        return Message(mhdr=mhdr, payload=payload, mic=bytes(data[n - MIC_SIZE :]))

    if m_type == MType.REJOIN_REQUEST:
        if n < 2:
            raise FieldLengthMismatch("RejoinRequestPHYPayload", "19 or 24", n)
        expected_size = REJOIN_REQUEST_SIZES.get(data[1])
        if expected_size is None:
            raise UnknownField("RejoinType", data[1])
        if n != expected_size:
            raise FieldLengthMismatch("RejoinRequestPHYPayload", expected_size, n)
        try:
            payload = RejoinRequestPayload.from_bytes(data[1 : n - MIC_SIZE])
        except LoRaWANError as err:
            raise DecodingError("RejoinRequestPayload") from err
        return Message(mhdr=mhdr, payload=payload, mic=bytes(data[n - MIC_SIZE :]))

    if m_type == MType.JOIN_ACCEPT:
        if n not in JOIN_ACCEPT_SIZES:
            raise FieldLengthMismatch("JoinAcceptPHYPayload", "17 or 33", n)
        return Message(mhdr=mhdr, payload=JoinAcceptPayload(encrypted=bytes(data[1:])))

    raise UnknownField("MType", m_type)
