"""Tests for LoRaWAN enumerations, MHDR helpers and the error taxonomy."""

import pytest

from lorawan.core.errors import (
    BandNotFound,
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    InvalidMACCommandDirection,
    LoRaWANError,
    UnknownField,
    UnknownMACCommand,
)
from lorawan.core.types import (
    MACCommandIdentifier,
    MACVersion,
    Major,
    MType,
    PHYVersion,
    build_mhdr,
    is_uplink,
    parse_mhdr,
)


class TestMType:
    """Test MType values."""

    def test_values(self):
        """Test the MHDR message type values."""
        assert MType.JOIN_REQUEST == 0
        assert MType.JOIN_ACCEPT == 1
        assert MType.UNCONFIRMED_UP == 2
        assert MType.CONFIRMED_DOWN == 5
        assert MType.PROPRIETARY == 7

    def test_uplink_types(self):
        """Test uplink classification."""
        uplinks = {m for m in MType if is_uplink(m)}
        assert uplinks == {
            MType.JOIN_REQUEST,
            MType.UNCONFIRMED_UP,
            MType.CONFIRMED_UP,
            MType.REJOIN_REQUEST,
        }


class TestMHDR:
    """Test MHDR octet helpers."""

    def test_build(self):
        """Test building MHDR octets."""
        assert build_mhdr(MType.UNCONFIRMED_UP) == 0x40
        assert build_mhdr(MType.CONFIRMED_DOWN, Major.LORAWAN_R1) == 0xA0

    def test_parse(self):
        """Test parsing MHDR octets."""
        field = parse_mhdr(0x80)
        assert field.m_type == MType.CONFIRMED_UP
        assert field.major == Major.LORAWAN_R1

    def test_parse_ignores_rfu(self):
        """Test that the RFU bits are ignored."""
        assert parse_mhdr(0x5C).m_type == MType.UNCONFIRMED_UP

    def test_parse_unknown_major(self):
        """Test that an unknown major raises."""
        with pytest.raises(ValueError):
            parse_mhdr(0x41)


class TestVersions:
    """Test PHY and MAC versions."""

    def test_phy_version_order(self):
        """Test PHY versions compare in publication order."""
        assert len(PHYVersion) == 11
        assert PHYVersion.TS001_V1_0 < PHYVersion.RP001_V1_0_2 < PHYVersion.RP002_V1_0_3
        assert max(PHYVersion) == PHYVersion.RP002_V1_0_3

    def test_mac_version_f_opts(self):
        """Test that only LoRaWAN 1.1 encrypts FOpts."""
        assert MACVersion.MAC_V1_1.encrypts_f_opts
        assert not MACVersion.MAC_V1_0_4.encrypts_f_opts
        assert MACVersion.MAC_V1_1.minor == 1
        assert MACVersion.MAC_V1_0_3.minor == 0

    def test_cids(self):
        """Test selected CIDs."""
        assert MACCommandIdentifier.LINK_ADR == 0x03
        assert MACCommandIdentifier.DEVICE_MODE == 0x20
        assert MACCommandIdentifier.RELAY_NOTIFY_NEW_END_DEVICE == 0x46


class TestErrors:
    """Test error attributes and messages."""

    def test_base_is_value_error(self):
        """Test that every error is a ValueError."""
        assert issubclass(LoRaWANError, ValueError)
        assert isinstance(UnknownField("MType", 7), ValueError)

    def test_field_out_of_range(self):
        """Test FieldOutOfRange attributes."""
        err = FieldOutOfRange("NbTrans", 15, 16)
        assert (err.field, err.max, err.value, err.min) == ("NbTrans", 15, 16, 0)
        assert "NbTrans" in str(err)

    def test_field_length_mismatch(self):
        """Test FieldLengthMismatch attributes."""
        err = FieldLengthMismatch("PHYPayload", 23, 22)
        assert err.expected == 23
        assert err.got == 22

    def test_band_not_found_message(self):
        """Test BandNotFound with and without version."""
        assert "XX_000" in str(BandNotFound("XX_000"))
        err = BandNotFound("AS_923_4", PHYVersion.TS001_V1_0)
        assert "TS001_V1_0" in str(err)
        assert err.version == PHYVersion.TS001_V1_0

    def test_wrapped_errors(self):
        """Test composite errors keep the inner error as cause."""
        inner = FieldOutOfRange("FCnt", 0xFFFFFFFF, 1 << 32)
        try:
            raise EncodingError("FHDR") from inner
        except EncodingError as err:
            assert err.field == "FHDR"
            assert err.__cause__ is inner
        assert "not enough" in str(DecodingError("FOpts", "not enough bytes"))

    def test_mac_command_errors(self):
        """Test MAC command dispatch errors."""
        err = InvalidMACCommandDirection(0x0E, True)
        assert err.cid == 0x0E
        assert "uplink" in str(err)
        assert "0x7F" in str(UnknownMACCommand(0x7F))
