"""LoRaWAN PHY Frames

This module contains the PHYPayload codec:
- MHDR, FHDR/FCtrl and MACPayload
- JoinRequest, RejoinRequest and JoinAccept payloads, CFList
- Identifier extraction for uplink routing
"""

from lorawan.frames.identifiers import EndDeviceIdentifiers, get_uplink_message_identifiers
from lorawan.frames.join import (
    CFList,
    DLSettings,
    JoinAcceptPayload,
    append_join_accept_payload,
    marshal_join_accept_payload,
    unmarshal_join_accept_payload,
)
from lorawan.frames.message import (
    FHDR,
    MHDR,
    FCtrl,
    JoinRequestPayload,
    MACPayload,
    Message,
    RejoinRequestPayload,
    append_message,
    marshal_message,
    unmarshal_message,
)

__all__ = [
    # Message
    "MHDR",
    "FCtrl",
    "FHDR",
    "MACPayload",
    "JoinRequestPayload",
    "RejoinRequestPayload",
    "Message",
    "append_message",
    "marshal_message",
    "unmarshal_message",
    # JoinAccept
    "DLSettings",
    "CFList",
    "JoinAcceptPayload",
    "append_join_accept_payload",
    "marshal_join_accept_payload",
    "unmarshal_join_accept_payload",
    # Identifiers
    "EndDeviceIdentifiers",
    "get_uplink_message_identifiers",
]
