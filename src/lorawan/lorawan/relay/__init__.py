"""LoRaWAN Relay Forwarding

This module contains the FRMPayload codec used between a relay and the
Network Server:
- RelayForwardUplinkReq
- RelayForwardDownlinkReq
"""

from lorawan.relay.forward import (
    RelayForwardDownlinkReq,
    RelayForwardUplinkReq,
    append_relay_forward_downlink_req,
    append_relay_forward_uplink_req,
    marshal_relay_forward_downlink_req,
    marshal_relay_forward_uplink_req,
    unmarshal_relay_forward_downlink_req,
    unmarshal_relay_forward_uplink_req,
)

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
