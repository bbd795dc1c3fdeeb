from lorawan.core.errors import LoRaWANError
from lorawan.core.identifiers import EUI64, DevAddr, NetID
from lorawan.core.types import MACVersion, MType, PHYVersion
from lorawan.band import Band, get, get_latest
from lorawan.frames import (
    Message,
    get_uplink_message_identifiers,
    marshal_message,
    unmarshal_message,
)
from lorawan.mac import DEFAULT_MAC_COMMANDS, MACCommand, read_mac_commands

__version__ = "0.1.0"

__all__ = [
    'LoRaWANError',
    'EUI64',
    'DevAddr',
    'NetID',
    'MType',
    'MACVersion',
    'PHYVersion',
    'Band',
    'get',
    'get_latest',
    'Message',
    'marshal_message',
    'unmarshal_message',
    'get_uplink_message_identifiers',
    'MACCommand',
    'DEFAULT_MAC_COMMANDS',
    'read_mac_commands',
]
