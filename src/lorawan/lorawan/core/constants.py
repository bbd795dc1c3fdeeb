"""
LoRaWAN Protocol Constants

Frame sizes, field bounds and frequency packing limits used by the
codecs and the band catalog.
"""

from __future__ import annotations

__all__ = [
    # Frame sizes
    "MHDR_SIZE",
    "MIC_SIZE",
    "FHDR_MIN_SIZE",
    "FOPTS_MAX_SIZE",
    "DATA_MESSAGE_MIN_SIZE",
    "JOIN_REQUEST_SIZE",
    "REJOIN_REQUEST_SIZES",
    "JOIN_ACCEPT_SIZES",
    "JOIN_ACCEPT_ENCRYPTED_SIZES",
    "JOIN_ACCEPT_PAYLOAD_SIZES",
    "CFLIST_SIZE",
    "CFLIST_MAX_FREQUENCIES",
    "CFLIST_MAX_CHANNEL_MASKS",
    "MAX_PHY_PAYLOAD_SIZE",
    # Field bounds
    "MAX_UINT8",
    "MAX_UINT16",
    "MAX_UINT24",
    "MAX_UINT32",
    # Frequencies
    "MIN_FREQUENCY",
    "DEFAULT_FREQ_MULTIPLIER",
    # Channel masks
    "CH_MASK_SIZE",
    # Time
    "DEVICE_TIME_FRACTION_STEPS",
]

# Frame sizes (bytes)
MHDR_SIZE = 1
MIC_SIZE = 4
FHDR_MIN_SIZE = 7  # DevAddr(4) + FCtrl(1) + FCnt(2)
FOPTS_MAX_SIZE = 15
DATA_MESSAGE_MIN_SIZE = MHDR_SIZE + FHDR_MIN_SIZE + MIC_SIZE  # 12
JOIN_REQUEST_SIZE = 23  # MHDR + JoinEUI + DevEUI + DevNonce + MIC

# RejoinRequest PHYPayload size per type
REJOIN_REQUEST_SIZES = {
    0: 19,  # MHDR + type + NetID + DevEUI + RJcount0 + MIC
    1: 24,  # MHDR + type + JoinEUI + DevEUI + RJcount1 + MIC
    2: 19,
}

JOIN_ACCEPT_SIZES = (17, 33)  # MHDR + encrypted body
JOIN_ACCEPT_ENCRYPTED_SIZES = (16, 32)
JOIN_ACCEPT_PAYLOAD_SIZES = (12, 28)  # Without/with CFList, MIC excluded
CFLIST_SIZE = 16
CFLIST_MAX_FREQUENCIES = 5
CFLIST_MAX_CHANNEL_MASKS = 96
MAX_PHY_PAYLOAD_SIZE = 256

MAX_UINT8 = 0xFF
MAX_UINT16 = 0xFFFF
MAX_UINT24 = 0xFFFFFF
MAX_UINT32 = 0xFFFFFFFF

# Lowest frequency accepted in MAC commands (Hz); 0 disables a channel
MIN_FREQUENCY = 100_000
# Frequency unit (Hz) when no band is supplied to a MAC command coder
DEFAULT_FREQ_MULTIPLIER = 100

# LinkADRReq ChMask width (bits)
CH_MASK_SIZE = 16

# DeviceTimeAns fractional second resolution (2^-8 s)
DEVICE_TIME_FRACTION_STEPS = 256
