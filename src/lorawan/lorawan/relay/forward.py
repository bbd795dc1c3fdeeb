"""
Relay Forwarding Payloads (TS011)

FRMPayloads exchanged between a relay and the Network Server on the relay
FPort:
- RelayForwardUplinkReq: reception metadata followed by the end device
  PHYPayload
- RelayForwardDownlinkReq: the PHYPayload to send to the end device

Uplink metadata (24 bits, LE):
- Bits 3-0: data rate index
- Bits 8-4: SNR + 20, clipped to -20..11 dB
- Bits 15-9: -(RSSI + 15), clipped to -142..-15 dBm
- Bits 17-16: WOR channel
followed by the frequency (24 bits, LE, band frequency units).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from lorawan.band.data_rate import LoRaDataRate, Modulation
from lorawan.core.errors import DataRateNotFound, EncodingError, FieldLengthMismatch, FieldOutOfRange, UnknownField
from lorawan.core.types import RelayWORChannel
from lorawan.mac.commands import decode_frequency, encode_frequency
from lorawan.mac.relay import RSSI_MAX, RSSI_MIN, SNR_MAX, SNR_MIN

if TYPE_CHECKING:
    from lorawan.band.band import Band

__all__ = [
    "RelayForwardUplinkReq",
    "RelayForwardDownlinkReq",
    "append_relay_forward_uplink_req",
    "marshal_relay_forward_uplink_req",
    "unmarshal_relay_forward_uplink_req",
    "append_relay_forward_downlink_req",
    "marshal_relay_forward_downlink_req",
    "unmarshal_relay_forward_downlink_req",
]

# Metadata plus frequency
FORWARD_UPLINK_HEADER_SIZE = 6


@dataclass
class RelayForwardUplinkReq:
    """
    An uplink received by a relay.

    Attributes:
        data_rate: Modulation the uplink was received with.
        snr: Signal to noise ratio in dB.
        rssi: Received signal strength in dBm.
        wor_channel: Wake On Radio channel used.
        frequency: Frequency in Hz.
        raw_payload: End device PHYPayload.
    """

    data_rate: Modulation = LoRaDataRate(12, 125_000)
    snr: int = 0
    rssi: int = RSSI_MAX
    wor_channel: RelayWORChannel = RelayWORChannel.DEFAULT
    frequency: int = 0
    raw_payload: bytes = b""


@dataclass
class RelayForwardDownlinkReq:
    """A downlink for a relay to transmit."""

    raw_payload: bytes = b""


def append_relay_forward_uplink_req(phy: Band, buf: bytearray, req: RelayForwardUplinkReq) -> bytearray:
    """
    Append a RelayForwardUplinkReq to ``buf``.

    The data rate is looked up in ``phy`` by modulation; SNR and RSSI are
    clipped to their wire ranges.

    Args:
        phy: Band the relay operates in.
        buf: Buffer to extend.
        req: Request to encode.

    Returns:
        ``buf``, extended.

    Raises:
        EncodingError: If the band has no matching data rate.
        FieldOutOfRange: If the WOR channel, the data rate index or the
            frequency does not fit.

    Examples:
        >>> from lorawan.band import get_latest
        >>> req = RelayForwardUplinkReq(
        ...     data_rate=LoRaDataRate(7, 125_000), snr=0, rssi=-50,
        ...     frequency=868_100_000, raw_payload=b"\\x40")
        >>> marshal_relay_forward_uplink_req(get_latest("EU_863_870"), req).hex()
        '45470028768440'
    """
    found = phy.find_uplink_data_rate(req.data_rate)
    if found is None:
        raise EncodingError("DataRate", f"{req.data_rate} is not defined in {phy.id}")
    data_rate_index, _ = found
    if data_rate_index > 15:
        raise FieldOutOfRange("DataRateIndex", 15, data_rate_index)
    if not 0 <= req.wor_channel <= 1:
        raise FieldOutOfRange("WORChannel", 1, req.wor_channel)
    frequency = encode_frequency("Frequency", req.frequency, phy)

    snr = min(max(req.snr, SNR_MIN), SNR_MAX)
    rssi = min(max(req.rssi, RSSI_MIN), RSSI_MAX)
    metadata = (
        data_rate_index
        | ((snr - SNR_MIN) << 4)
        | ((RSSI_MAX - rssi) << 9)
        | (int(req.wor_channel) << 16)
    )
    buf.extend(metadata.to_bytes(3, "little"))
    buf.extend(frequency)
    buf.extend(req.raw_payload)
    return buf


def marshal_relay_forward_uplink_req(phy: Band, req: RelayForwardUplinkReq) -> bytes:
    """Encode a RelayForwardUplinkReq."""
    return bytes(append_relay_forward_uplink_req(phy, bytearray(), req))


def unmarshal_relay_forward_uplink_req(phy: Band, data: bytes) -> RelayForwardUplinkReq:
    """
    Decode a RelayForwardUplinkReq.

    Raises:
        FieldLengthMismatch: If ``data`` is shorter than the 6 byte header.
        DataRateNotFound: If the band does not define the data rate index.
        UnknownField: If the WOR channel is unknown.
    """
    if len(data) < FORWARD_UPLINK_HEADER_SIZE:
        raise FieldLengthMismatch("RelayForwardUplinkReq", f">= {FORWARD_UPLINK_HEADER_SIZE}", len(data))
    metadata = int.from_bytes(data[0:3], "little")

    data_rate_index = metadata & 0x0F
    entry = phy.data_rates.get(data_rate_index)
    if entry is None:
        raise DataRateNotFound(data_rate_index)
    try:
        wor_channel = RelayWORChannel((metadata >> 16) & 0x03)
    except ValueError:
        raise UnknownField("WORChannel", (metadata >> 16) & 0x03) from None

    return RelayForwardUplinkReq(
        data_rate=entry.rate,
        snr=((metadata >> 4) & 0x1F) + SNR_MIN,
        rssi=RSSI_MAX - ((metadata >> 9) & 0x7F),
        wor_channel=wor_channel,
        frequency=decode_frequency(data[3:6], phy),
        raw_payload=bytes(data[FORWARD_UPLINK_HEADER_SIZE:]),
    )


def append_relay_forward_downlink_req(buf: bytearray, req: RelayForwardDownlinkReq) -> bytearray:
    """Append a RelayForwardDownlinkReq; the PHYPayload is copied verbatim."""
    if not req.raw_payload:
        raise FieldLengthMismatch("RawPayload", ">= 1", 0)
    buf.extend(req.raw_payload)
    return buf


def marshal_relay_forward_downlink_req(req: RelayForwardDownlinkReq) -> bytes:
    """Encode a RelayForwardDownlinkReq."""
    return bytes(append_relay_forward_downlink_req(bytearray(), req))


def unmarshal_relay_forward_downlink_req(data: bytes) -> RelayForwardDownlinkReq:
    """Decode a RelayForwardDownlinkReq."""
    if not data:
        raise FieldLengthMismatch("RawPayload", ">= 1", 0)
    return RelayForwardDownlinkReq(raw_payload=bytes(data))
