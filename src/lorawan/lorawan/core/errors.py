"""
LoRaWAN Error Taxonomy

Every failure raised by the codecs and the band catalog derives from
:class:`LoRaWANError`, itself a :class:`ValueError`, and carries the
offending values as attributes so callers can inspect them without
parsing messages.

Composite failures (:class:`EncodingError`, :class:`DecodingError`) are
raised ``from`` the inner error, which stays reachable as ``__cause__``.
"""

from __future__ import annotations

from typing import Any, Optional

__all__ = [
    "LoRaWANError",
    # Lookup
    "BandNotFound",
    "DataRateNotFound",
    "UnknownPHYVersion",
    # Channel masks
    "InvalidChannelCount",
    "UnsupportedChMaskCntl",
    # Rx1
    "DataRateIndexTooHigh",
    "DataRateOffsetTooHigh",
    # Codec
    "FieldOutOfRange",
    "FieldLengthMismatch",
    "UnknownField",
    "EncodingError",
    "DecodingError",
    # MAC commands
    "InvalidMACCommandDirection",
    "UnknownMACCommand",
]


class LoRaWANError(ValueError):
    """Base class of all LoRaWAN codec and band errors."""


# =============================================================================
# Lookup
# =============================================================================


class BandNotFound(LoRaWANError):
    """No band is registered under the given id, or not at the given version."""

    def __init__(self, band_id: str, version: Any = None) -> None:
        self.band_id = band_id
        self.version = version
        if version is None:
            message = f"band `{band_id}` not found"
        else:
            message = f"band `{band_id}` not found for PHY version `{getattr(version, 'name', version)}`"
        super().__init__(message)


class DataRateNotFound(LoRaWANError):
    """Data rate index is not defined in the band."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"data rate index `{index}` not found")


class UnknownPHYVersion(LoRaWANError):
    """PHY version is not one of the known Regional Parameters releases."""

    def __init__(self, version: Any) -> None:
        self.version = version
        super().__init__(f"unknown PHY version `{version}`")


# =============================================================================
# Channel Masks
# =============================================================================


class InvalidChannelCount(LoRaWANError):
    """Channel vector length does not match the band's channel plan."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"invalid channel count: expected {expected}, got {got}")


class UnsupportedChMaskCntl(LoRaWANError):
    """ChMaskCntl value is not defined for the channel plan."""

    def __init__(self, cntl: int) -> None:
        self.cntl = cntl
        super().__init__(f"unsupported ChMaskCntl `{cntl}`")


# =============================================================================
# Rx1
# =============================================================================


class DataRateIndexTooHigh(LoRaWANError):
    """Uplink data rate index has no Rx1 mapping."""

    def __init__(self, index: int, max: int) -> None:
        self.index = index
        self.max = max
        super().__init__(f"data rate index must be lower or equal to {max}, got {index}")


class DataRateOffsetTooHigh(LoRaWANError):
    """Rx1 data rate offset is not defined for the band."""

    def __init__(self, offset: int, max: int) -> None:
        self.offset = offset
        self.max = max
        super().__init__(f"data rate offset must be lower or equal to {max}, got {offset}")


# =============================================================================
# Codec
# =============================================================================


class FieldOutOfRange(LoRaWANError):
    """Numeric field value does not fit its wire width or allowed range."""

    def __init__(self, field: str, max: int, value: Any, min: int = 0) -> None:
        self.field = field
        self.max = max
        self.min = min
        self.value = value
        super().__init__(f"`{field}` must be {min}-{max}, got {value}")


class FieldLengthMismatch(LoRaWANError):
    """Byte field or frame has the wrong length."""

    def __init__(self, field: str, expected: Any, got: int) -> None:
        self.field = field
        self.expected = expected
        self.got = got
        super().__init__(f"`{field}` length must be {expected}, got {got}")


class UnknownField(LoRaWANError):
    """Enumerated field holds a value the codec does not know."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"unknown `{field}` value `{value}`")


class EncodingError(LoRaWANError):
    """Encoding of a named LoRaWAN field failed."""

    def __init__(self, field: str, detail: Optional[str] = None) -> None:
        self.field = field
        self.detail = detail
        message = f"failed to encode `{field}`"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DecodingError(LoRaWANError):
    """Decoding of a named LoRaWAN field failed."""

    def __init__(self, field: str, detail: Optional[str] = None) -> None:
        self.field = field
        self.detail = detail
        message = f"failed to decode `{field}`"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# =============================================================================
# MAC Commands
# =============================================================================


class InvalidMACCommandDirection(LoRaWANError):
    """MAC command is not defined in the requested direction."""

    def __init__(self, cid: int, uplink: bool) -> None:
        self.cid = cid
        self.uplink = uplink
        direction = "uplink" if uplink else "downlink"
        super().__init__(f"MAC command with CID 0x{cid:02X} is not a valid {direction} command")


class UnknownMACCommand(LoRaWANError):
    """No descriptor is registered for the CID."""

    def __init__(self, cid: int) -> None:
        self.cid = cid
        super().__init__(f"unknown MAC command CID 0x{cid:02X}")
