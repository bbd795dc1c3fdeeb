"""
Uplink Identifier Extraction

Peeks at just enough of an uplink PHYPayload to find the identifiers a
Network Server routes on, without decoding the whole frame:
- Data uplinks: DevAddr
- JoinRequest: JoinEUI, DevEUI
- RejoinRequest type 0/2: DevEUI
- RejoinRequest type 1: JoinEUI, DevEUI
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from lorawan.core.constants import DATA_MESSAGE_MIN_SIZE, JOIN_REQUEST_SIZE, REJOIN_REQUEST_SIZES
from lorawan.core.errors import FieldLengthMismatch, UnknownField
from lorawan.core.identifiers import EUI64, DevAddr
from lorawan.core.types import MType, RejoinRequestType

__all__ = ["EndDeviceIdentifiers", "get_uplink_message_identifiers"]


@dataclass
class EndDeviceIdentifiers:
    """Identifiers found in an uplink; absent ones are ``None``."""

    join_eui: Optional[EUI64] = None
    dev_eui: Optional[EUI64] = None
    dev_addr: Optional[DevAddr] = None


def get_uplink_message_identifiers(data: bytes) -> EndDeviceIdentifiers:
    """
    Extract the end device identifiers from an uplink PHYPayload.

    Only the lengths needed for the extraction are checked; the MIC and the
    rest of the frame are not looked at.

    Args:
        data: Raw uplink PHYPayload.

    Returns:
        Identifiers carried by the frame.

    Raises:
        FieldLengthMismatch: If the frame is too short or has the wrong
            size for its type.
        UnknownField: If the MType is not an uplink or the RejoinType is
            unknown.

    Examples:
        >>> ids = get_uplink_message_identifiers(bytes.fromhex("40ffffff42b242fffeff42feff42ffffff"))
        >>> ids.dev_addr
        DevAddr('42FFFFFF')
    """
    n = len(data)
    if n == 0:
        raise FieldLengthMismatch("PHYPayload", ">= 1", 0)
    m_type = data[0] >> 5

    if m_type in (MType.UNCONFIRMED_UP, MType.CONFIRMED_UP):
        if n < DATA_MESSAGE_MIN_SIZE:
            raise FieldLengthMismatch("PHYPayload", f">= {DATA_MESSAGE_MIN_SIZE}", n)
        return EndDeviceIdentifiers(dev_addr=DevAddr.from_wire(data[1:5]))

    if m_type == MType.JOIN_REQUEST:
        if n != JOIN_REQUEST_SIZE:
            raise FieldLengthMismatch("JoinRequestPHYPayload", JOIN_REQUEST_SIZE, n)
        return EndDeviceIdentifiers(
            join_eui=EUI64.from_wire(data[1:9]),
            dev_eui=EUI64.from_wire(data[9:17]),
        )

    if m_type == MType.REJOIN_REQUEST:
        if n not in set(REJOIN_REQUEST_SIZES.values()):
            raise FieldLengthMismatch("RejoinRequestPHYPayload", "19 or 24", n)
        rejoin_type = data[1]
        if rejoin_type not in REJOIN_REQUEST_SIZES:
            raise UnknownField("RejoinType", rejoin_type)
        if n != REJOIN_REQUEST_SIZES[rejoin_type]:
            raise FieldLengthMismatch("RejoinRequestPHYPayload", REJOIN_REQUEST_SIZES[rejoin_type], n)
        if rejoin_type == RejoinRequestType.SESSION:
            return EndDeviceIdentifiers(
                join_eui=EUI64.from_wire(data[2:10]),
                dev_eui=EUI64.from_wire(data[10:18]),
            )
        return EndDeviceIdentifiers(dev_eui=EUI64.from_wire(data[5:13]))

    raise UnknownField("MType", m_type)
