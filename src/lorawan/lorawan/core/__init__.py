"""LoRaWAN Core Components

This module contains the building blocks shared by the codecs and the
band catalog:
- Enumerations (MType, PHY/MAC versions, CIDs, relay enums)
- Fixed-width identifiers (EUI64, DevAddr, NetID)
- Error taxonomy
- GPS time conversion
- Protocol constants
"""

from lorawan.core.constants import (
    CFLIST_SIZE,
    DATA_MESSAGE_MIN_SIZE,
    FHDR_MIN_SIZE,
    FOPTS_MAX_SIZE,
    JOIN_REQUEST_SIZE,
    MAX_UINT24,
    MHDR_SIZE,
    MIC_SIZE,
    MIN_FREQUENCY,
)
from lorawan.core.errors import (
    BandNotFound,
    DataRateIndexTooHigh,
    DataRateNotFound,
    DataRateOffsetTooHigh,
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    InvalidChannelCount,
    InvalidMACCommandDirection,
    LoRaWANError,
    UnknownField,
    UnknownMACCommand,
    UnknownPHYVersion,
    UnsupportedChMaskCntl,
)
from lorawan.core.gpstime import GPS_EPOCH, from_gps, to_gps
from lorawan.core.identifiers import EUI64, DevAddr, NetID
from lorawan.core.types import (
    CFListType,
    DeviceClass,
    MACCommandIdentifier,
    MACVersion,
    Major,
    MType,
    PHYVersion,
    RejoinRequestType,
)

__all__ = [
    # Types
    "MType",
    "Major",
    "CFListType",
    "RejoinRequestType",
    "DeviceClass",
    "MACVersion",
    "PHYVersion",
    "MACCommandIdentifier",
    # Identifiers
    "EUI64",
    "DevAddr",
    "NetID",
    # Errors
    "LoRaWANError",
    "BandNotFound",
    "DataRateNotFound",
    "UnknownPHYVersion",
    "InvalidChannelCount",
    "UnsupportedChMaskCntl",
    "DataRateIndexTooHigh",
    "DataRateOffsetTooHigh",
    "FieldOutOfRange",
    "FieldLengthMismatch",
    "UnknownField",
    "EncodingError",
    "DecodingError",
    "InvalidMACCommandDirection",
    "UnknownMACCommand",
    # GPS time
    "GPS_EPOCH",
    "to_gps",
    "from_gps",
    # Constants
    "MHDR_SIZE",
    "MIC_SIZE",
    "FHDR_MIN_SIZE",
    "FOPTS_MAX_SIZE",
    "DATA_MESSAGE_MIN_SIZE",
    "JOIN_REQUEST_SIZE",
    "CFLIST_SIZE",
    "MAX_UINT24",
    "MIN_FREQUENCY",
]
