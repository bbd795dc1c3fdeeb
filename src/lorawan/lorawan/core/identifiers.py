"""LoRaWAN Identifiers

Fixed-width identifiers carried in LoRaWAN frames:
- EUI64: JoinEUI and DevEUI (8 bytes)
- DevAddr: session device address (4 bytes)
- NetID: network identifier (3 bytes)

Identifiers are written big-endian in text and in ``bytes(identifier)``;
on the wire LoRaWAN transmits them least significant byte first, see
:meth:`to_wire` and :meth:`from_wire`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

__all__ = ["EUI64", "DevAddr", "NetID"]


@dataclass(frozen=True, slots=True)
class _Identifier:
    """Fixed-width unsigned identifier.

    Examples
    --------
        >>> addr = DevAddr("42FFFFFF")
        >>> addr.to_wire()
        b'\\xff\\xff\\xffB'
        >>> DevAddr.from_wire(b"\\xff\\xff\\xff\\x42") == addr
        True
    """

    SIZE: ClassVar[int] = 0

    _value: int

    def __init__(self, value: Union[int, bytes, bytearray, str, None] = None) -> None:
        """Create an identifier from an int, big-endian bytes or a hex string.

        Args:
        ----
            value: Identifier value. ``None`` gives the zero identifier.

        Raises:
        ------
            ValueError: If the value does not fit the identifier width.
        """
        size = type(self).SIZE
        if value is None:
            numeric = 0
        elif isinstance(value, (bytes, bytearray)):
            if len(value) != size:
                raise ValueError(f"{type(self).__name__} must be {size} bytes, got {len(value)}")
            numeric = int.from_bytes(value, "big")
        elif isinstance(value, str):
            text = value.replace("-", "").replace(":", "")
            if len(text) != size * 2:
                raise ValueError(f"{type(self).__name__} must be {size * 2} hex digits, got {value!r}")
            numeric = int(text, 16)
        elif isinstance(value, int):
            if not 0 <= value < 1 << (8 * size):
                raise ValueError(f"{type(self).__name__} must be 0-0x{(1 << (8 * size)) - 1:X}, got {value:#x}")
            numeric = value
        else:
            raise TypeError(f"Invalid {type(self).__name__} type: {type(value)}")
        object.__setattr__(self, "_value", numeric)

    @classmethod
    def from_wire(cls, data: bytes) -> "_Identifier":
        """Decode from the little-endian wire representation."""
        if len(data) != cls.SIZE:
            raise ValueError(f"{cls.__name__} must be {cls.SIZE} bytes, got {len(data)}")
        return cls(int.from_bytes(data, "little"))

    def to_wire(self) -> bytes:
        """Encode to the little-endian wire representation."""
        return self._value.to_bytes(self.SIZE, "little")

    @property
    def is_zero(self) -> bool:
        return self._value == 0

    def __bytes__(self) -> bytes:
        """Return big-endian representation."""
        return self._value.to_bytes(self.SIZE, "big")

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __str__(self) -> str:
        return f"{self._value:0{self.SIZE * 2}X}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}('{self}')"


@dataclass(frozen=True, slots=True, init=False, repr=False)
class EUI64(_Identifier):
    """64-bit extended unique identifier (DevEUI, JoinEUI)."""

    SIZE: ClassVar[int] = 8


@dataclass(frozen=True, slots=True, init=False, repr=False)
class DevAddr(_Identifier):
    """32-bit device address."""

    SIZE: ClassVar[int] = 4

    @property
    def nwk_id_type(self) -> int:
        """NetID type encoded in the DevAddr prefix (0-7)."""
        for type_ in range(8):
            if not self._value & (1 << (31 - type_)):
                return type_
        return 7


@dataclass(frozen=True, slots=True, init=False, repr=False)
class NetID(_Identifier):
    """24-bit LoRa Alliance network identifier."""

    SIZE: ClassVar[int] = 3

    @property
    def type(self) -> int:
        """NetID type from the three most significant bits."""
        return self._value >> 21
