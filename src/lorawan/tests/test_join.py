"""Tests for the cleartext JoinAccept payload and CFList."""

import pytest

from conftest import h
from lorawan.core.errors import DecodingError, EncodingError, FieldLengthMismatch, FieldOutOfRange, UnknownField
from lorawan.core.identifiers import DevAddr, NetID
from lorawan.core.types import CFListType
from lorawan.frames import (
    CFList,
    DLSettings,
    JoinAcceptPayload,
    append_join_accept_payload,
    marshal_join_accept_payload,
    unmarshal_join_accept_payload,
)


class TestDLSettings:
    """Test the DLSettings octet."""

    def test_pack(self):
        """Test field positions."""
        assert DLSettings(rx1_dr_offset=2, rx2_dr=3, opt_neg=True).to_byte() == 0xA3
        assert DLSettings.from_byte(0xA3) == DLSettings(rx1_dr_offset=2, rx2_dr=3, opt_neg=True)

    @pytest.mark.parametrize("kwargs", [{"rx1_dr_offset": 8}, {"rx2_dr": 16}, {"rx1_dr_offset": -1}])
    def test_out_of_range(self, kwargs):
        """Test values that do not fit their bits."""
        with pytest.raises(FieldOutOfRange):
            DLSettings(**kwargs).to_byte()


class TestCFList:
    """Test CFList encoding."""

    def test_frequencies(self):
        """Test frequency lists, zero slots dropped on decode."""
        cf_list = CFList(CFListType.FREQUENCIES, frequencies=[8671000, 8673000])
        data = cf_list.to_bytes()
        assert len(data) == 16
        assert data[15] == 0
        assert data[:6] == h("18 4F 84 E8 56 84")
        assert CFList.from_bytes(data) == cf_list

    def test_too_many_frequencies(self):
        """Test at most 5 frequencies fit."""
        with pytest.raises(FieldLengthMismatch):
            CFList(frequencies=[8671000] * 6).to_bytes()
        with pytest.raises(FieldOutOfRange):
            CFList(frequencies=[1 << 24]).to_bytes()

    def test_channel_masks(self):
        """Test channel mask lists."""
        ch_masks = [False] * 96
        ch_masks[0] = ch_masks[9] = ch_masks[95] = True
        data = CFList(CFListType.CHANNEL_MASKS, ch_masks=ch_masks).to_bytes()
        assert data[:2] == h("01 02")
        assert data[11] == 0x80
        assert data[15] == 1
        assert CFList.from_bytes(data).ch_masks == ch_masks

    def test_short_channel_masks_padded(self):
        """Test fewer than 96 masks decode as 96, padded with False."""
        decoded = CFList.from_bytes(CFList(CFListType.CHANNEL_MASKS, ch_masks=[True] * 8).to_bytes())
        assert decoded.ch_masks == [True] * 8 + [False] * 88

    def test_unknown_type(self):
        """Test an unknown CFListType octet."""
        with pytest.raises(UnknownField):
            CFList.from_bytes(bytes(15) + b"\x02")

    def test_wrong_size(self):
        """Test a CFList that is not 16 bytes."""
        with pytest.raises(FieldLengthMismatch):
            CFList.from_bytes(bytes(15))


class TestJoinAcceptPayload:
    """Test the cleartext JoinAccept body."""

    PAYLOAD = JoinAcceptPayload(
        join_nonce=0x42FFFF,
        net_id=NetID("42FFFF"),
        dev_addr=DevAddr("42FFFFFF"),
        dl_settings=DLSettings(rx1_dr_offset=1, rx2_dr=2),
        rx_delay=5,
    )

    def test_without_cf_list(self):
        """Test the 12-byte body."""
        data = marshal_join_accept_payload(self.PAYLOAD)
        assert data == h("FF FF 42 FF FF 42 FF FF FF 42 12 05")
        assert unmarshal_join_accept_payload(data) == self.PAYLOAD

    def test_with_cf_list(self):
        """Test the 28-byte body."""
        cf_list = CFList(CFListType.FREQUENCIES, frequencies=[8671000])
        payload = JoinAcceptPayload(dev_addr=DevAddr("26011234"), cf_list=cf_list)
        data = marshal_join_accept_payload(payload)
        assert len(data) == 28
        assert unmarshal_join_accept_payload(data).cf_list == cf_list

    def test_rx_delay_low_nibble(self):
        """Test only the low RxDelay nibble is decoded."""
        data = bytearray(marshal_join_accept_payload(self.PAYLOAD))
        data[11] = 0xF3
        assert unmarshal_join_accept_payload(bytes(data)).rx_delay == 3

    @pytest.mark.parametrize("n", [0, 11, 13, 27, 29])
    def test_wrong_size(self, n):
        """Test bodies that are neither 12 nor 28 bytes."""
        with pytest.raises(FieldLengthMismatch):
            unmarshal_join_accept_payload(bytes(n))

    def test_bad_cf_list(self):
        """Test a malformed CFList is reported as such."""
        with pytest.raises(DecodingError, match="CFList"):
            unmarshal_join_accept_payload(bytes(27) + b"\x07")

    def test_encode_errors(self):
        """Test invalid fields leave the buffer untouched."""
        buf = bytearray()
        with pytest.raises(FieldOutOfRange):
            append_join_accept_payload(buf, JoinAcceptPayload(join_nonce=1 << 24))
        with pytest.raises(FieldOutOfRange):
            append_join_accept_payload(buf, JoinAcceptPayload(rx_delay=16))
        with pytest.raises(EncodingError):
            append_join_accept_payload(buf, JoinAcceptPayload(dl_settings=DLSettings(rx2_dr=16)))
        with pytest.raises(EncodingError):
            append_join_accept_payload(buf, JoinAcceptPayload(cf_list=CFList(frequencies=[0] * 6)))
        assert buf == bytearray()
