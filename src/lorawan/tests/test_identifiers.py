"""Tests for EUI64, DevAddr and NetID."""

import pytest

from lorawan.core.identifiers import EUI64, DevAddr, NetID


class TestDevAddr:
    """Test DevAddr class."""

    def test_from_string(self):
        """Test creating from a hex string."""
        addr = DevAddr("42FFFFFF")
        assert int(addr) == 0x42FFFFFF
        assert str(addr) == "42FFFFFF"
        assert repr(addr) == "DevAddr('42FFFFFF')"

    def test_from_int_and_bytes(self):
        """Test creating from int and big-endian bytes."""
        assert DevAddr(0x01020304) == DevAddr(b"\x01\x02\x03\x04")

    def test_wire_is_little_endian(self):
        """Test the wire representation is reversed."""
        addr = DevAddr("01020304")
        assert addr.to_wire() == b"\x04\x03\x02\x01"
        assert bytes(addr) == b"\x01\x02\x03\x04"
        assert DevAddr.from_wire(b"\x04\x03\x02\x01") == addr

    def test_default_is_zero(self):
        """Test the default identifier."""
        assert DevAddr().is_zero
        assert str(DevAddr()) == "00000000"

    def test_hashable(self):
        """Test identifiers can be used as dict keys."""
        table = {DevAddr("26011234"): "a"}
        assert table[DevAddr(0x26011234)] == "a"

    def test_nwk_id_type(self):
        """Test NetID type from the DevAddr prefix."""
        assert DevAddr("26011234").nwk_id_type == 0
        assert DevAddr("E0000001").nwk_id_type == 3
        assert DevAddr("FE000001").nwk_id_type == 7

    @pytest.mark.parametrize(
        "value",
        [
            "42FFFF",
            b"\x00\x00\x00",
            1 << 32,
            -1,
        ],
    )
    def test_invalid(self, value):
        """Test values that do not fit."""
        with pytest.raises(ValueError):
            DevAddr(value)

    def test_from_wire_wrong_length(self):
        """Test wire decoding with the wrong length."""
        with pytest.raises(ValueError, match="4 bytes"):
            DevAddr.from_wire(b"\x00\x00")

    def test_invalid_type(self):
        """Test unsupported value types."""
        with pytest.raises(TypeError):
            DevAddr(1.5)


class TestEUI64:
    """Test EUI64 class."""

    def test_separators(self):
        """Test dashes and colons are accepted."""
        assert EUI64("70-B3-D5-7E-D0-00-00-01") == EUI64("70B3D57ED0000001")
        assert EUI64("70:b3:d5:7e:d0:00:00:01") == EUI64("70B3D57ED0000001")

    def test_wire(self):
        """Test EUI wire encoding."""
        eui = EUI64("42FFFFFFFFFFFFFF")
        assert eui.to_wire() == b"\xff" * 7 + b"\x42"
        assert EUI64.from_wire(eui.to_wire()) == eui

    def test_frozen(self):
        """Test identifiers are immutable."""
        eui = EUI64()
        with pytest.raises(AttributeError):
            eui._value = 1


class TestNetID:
    """Test NetID class."""

    def test_type(self):
        """Test NetID type bits."""
        assert NetID("000013").type == 0
        assert NetID("600013").type == 3

    def test_wire(self):
        """Test NetID is 3 bytes on the wire."""
        assert NetID("42FFFF").to_wire() == b"\xff\xff\x42"
