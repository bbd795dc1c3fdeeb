"""
LoRaWAN JoinAccept Payload

The cleartext JoinAccept body, as produced by the Join Server before
encryption (or recovered by the device after decryption):
- JoinNonce (3 bytes, LE)
- NetID (3 bytes, LE)
- DevAddr (4 bytes, LE)
- DLSettings (1 byte): OptNeg (bit 7) | RX1DROffset (bits 6-4) | RX2DR (bits 3-0)
- RxDelay (1 byte)
- CFList (16 bytes, optional)

Total: 12 bytes, or 28 bytes with CFList. The MIC is computed over this
body and encrypted with it; neither is handled here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from lorawan.core.constants import (
    CFLIST_MAX_CHANNEL_MASKS,
    CFLIST_MAX_FREQUENCIES,
    CFLIST_SIZE,
    JOIN_ACCEPT_PAYLOAD_SIZES,
    MAX_UINT24,
)
from lorawan.core.errors import (
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    LoRaWANError,
    UnknownField,
)
from lorawan.core.identifiers import DevAddr, NetID
from lorawan.core.types import CFListType

__all__ = [
    "DLSettings",
    "CFList",
    "JoinAcceptPayload",
    "append_join_accept_payload",
    "marshal_join_accept_payload",
    "unmarshal_join_accept_payload",
]


@dataclass
class DLSettings:
    """JoinAccept downlink settings octet."""

    rx1_dr_offset: int = 0  # 0-7
    rx2_dr: int = 0  # 0-15
    opt_neg: bool = False  # LoRaWAN 1.1 key derivation

    def to_byte(self) -> int:
        if not 0 <= self.rx1_dr_offset <= 7:
            raise FieldOutOfRange("Rx1DROffset", 7, self.rx1_dr_offset)
        if not 0 <= self.rx2_dr <= 15:
            raise FieldOutOfRange("Rx2DR", 15, self.rx2_dr)
        return (int(self.opt_neg) << 7) | (self.rx1_dr_offset << 4) | self.rx2_dr

    @classmethod
    def from_byte(cls, value: int) -> DLSettings:
        return cls(
            rx1_dr_offset=(value >> 4) & 0x07,
            rx2_dr=value & 0x0F,
            opt_neg=bool(value & 0x80),
        )


@dataclass
class CFList:
    """JoinAccept channel frequency list.

    ``frequencies`` are raw 24-bit values in units of 100 Hz, as carried on
    the wire. Unused frequency slots are zero and are dropped on decode.
    ``ch_masks`` holds up to 96 channel enable flags, channel 0 first.

    Examples
    --------
        >>> CFList(CFListType.FREQUENCIES, frequencies=[8671000]).to_bytes().hex()
        '184f8400000000000000000000000000'
        >>> CFList.from_bytes(bytes(15) + b"\\x01").ch_masks[:4]
        [False, False, False, False]
    """

    type: CFListType = CFListType.FREQUENCIES
    frequencies: List[int] = field(default_factory=list)
    ch_masks: List[bool] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        """Encode to the 16-byte CFList trailer."""
        if self.type == CFListType.FREQUENCIES:
            if len(self.frequencies) > CFLIST_MAX_FREQUENCIES:
                raise FieldLengthMismatch("CFListFreq", f"<= {CFLIST_MAX_FREQUENCIES}", len(self.frequencies))
            body = bytearray()
            for freq in self.frequencies:
                if not 0 <= freq <= MAX_UINT24:
                    raise FieldOutOfRange("CFListFreq", MAX_UINT24, freq)
                body += freq.to_bytes(3, "little")
        elif self.type == CFListType.CHANNEL_MASKS:
            if len(self.ch_masks) > CFLIST_MAX_CHANNEL_MASKS:
                raise FieldLengthMismatch("CFListChMasks", f"<= {CFLIST_MAX_CHANNEL_MASKS}", len(self.ch_masks))
            body = bytearray(np.packbits(np.asarray(self.ch_masks, dtype=bool), bitorder="little").tobytes())
        else:
            raise UnknownField("CFListType", self.type)
        body += bytes(CFLIST_SIZE - 1 - len(body))
        body.append(int(self.type))
        return bytes(body)

    @classmethod
    def from_bytes(cls, data: bytes) -> CFList:
        """Decode the 16-byte CFList trailer."""
        if len(data) != CFLIST_SIZE:
            raise FieldLengthMismatch("CFList", CFLIST_SIZE, len(data))
        try:
            cf_list_type = CFListType(data[15])
        except ValueError:
            raise UnknownField("CFListType", data[15]) from None

        if cf_list_type == CFListType.FREQUENCIES:
            frequencies = []
            for i in range(0, 15, 3):
                freq = int.from_bytes(data[i : i + 3], "little")
                if freq != 0:
                    frequencies.append(freq)
            return cls(type=cf_list_type, frequencies=frequencies)

        bits = np.unpackbits(np.frombuffer(data[:12], dtype=np.uint8), bitorder="little")
        return cls(type=cf_list_type, ch_masks=[bool(b) for b in bits])


@dataclass
class JoinAcceptPayload:
    """JoinAccept message payload.

    On the air the body is encrypted: a :class:`Message` of type
    JoinAccept carries only ``encrypted`` (16 or 32 bytes, MIC included).
    The other fields describe the cleartext body handled by
    :func:`marshal_join_accept_payload`.
    """

    join_nonce: int = 0  # 24-bit
    net_id: NetID = field(default_factory=NetID)
    dev_addr: DevAddr = field(default_factory=DevAddr)
    dl_settings: DLSettings = field(default_factory=DLSettings)
    rx_delay: int = 0  # 0-15 seconds, 0 means 1
    cf_list: Optional[CFList] = None
    encrypted: bytes = b""


def append_join_accept_payload(buf: bytearray, msg: JoinAcceptPayload) -> bytearray:
    """
    Append the cleartext JoinAccept body to ``buf``.

    Nothing is written when a field fails validation.

    Args:
        buf: Buffer to extend.
        msg: Payload to encode.

    Returns:
        ``buf``, extended.

    Raises:
        FieldOutOfRange: If a numeric field does not fit.
        EncodingError: If DLSettings or CFList cannot be encoded.
    """
    if not 0 <= msg.join_nonce <= MAX_UINT24:
        raise FieldOutOfRange("JoinNonce", MAX_UINT24, msg.join_nonce)
    if not 0 <= msg.rx_delay <= 15:
        raise FieldOutOfRange("RxDelay", 15, msg.rx_delay)
    try:
        dl_settings = msg.dl_settings.to_byte()
    except LoRaWANError as err:
        raise EncodingError("DLSettings") from err
    cf_list = b""
    if msg.cf_list is not None:
        try:
            cf_list = msg.cf_list.to_bytes()
        except LoRaWANError as err:
            raise EncodingError("CFList") from err

    buf += msg.join_nonce.to_bytes(3, "little")
    buf += msg.net_id.to_wire()
    buf += msg.dev_addr.to_wire()
    buf.append(dl_settings)
    buf.append(msg.rx_delay)
    buf += cf_list
    return buf


def marshal_join_accept_payload(msg: JoinAcceptPayload) -> bytes:
    """Encode the cleartext JoinAccept body (12 or 28 bytes)."""
    return bytes(append_join_accept_payload(bytearray(), msg))


def unmarshal_join_accept_payload(data: bytes) -> JoinAcceptPayload:
    """
    Decode a cleartext JoinAccept body.

    Args:
        data: 12 or 28 bytes, MIC excluded.

    Returns:
        Decoded payload; ``encrypted`` is left empty.

    Raises:
        FieldLengthMismatch: If ``data`` is neither 12 nor 28 bytes.
        DecodingError: If the CFList is malformed.
    """
    n = len(data)
    if n not in JOIN_ACCEPT_PAYLOAD_SIZES:
        raise FieldLengthMismatch("JoinAcceptPayload", " or ".join(map(str, JOIN_ACCEPT_PAYLOAD_SIZES)), n)

    cf_list = None
    if n == JOIN_ACCEPT_PAYLOAD_SIZES[1]:
        try:
            cf_list = CFList.from_bytes(data[12:])
        except LoRaWANError as err:
            raise DecodingError("CFList") from err

    return JoinAcceptPayload(
        join_nonce=int.from_bytes(data[0:3], "little"),
        net_id=NetID.from_wire(data[3:6]),
        dev_addr=DevAddr.from_wire(data[6:10]),
        dl_settings=DLSettings.from_byte(data[10]),
        rx_delay=data[11] & 0x0F,
        cf_list=cf_list,
    )
