"""Tests for PHYPayload encoding and decoding."""

import pytest

from conftest import h, random_bytes
from lorawan.core.errors import DecodingError, EncodingError, FieldLengthMismatch, FieldOutOfRange, UnknownField
from lorawan.core.identifiers import EUI64, DevAddr, NetID
from lorawan.core.types import MType, RejoinRequestType
from lorawan.frames import (
    FCtrl,
    FHDR,
    MACPayload,
    MHDR,
    JoinAcceptPayload,
    JoinRequestPayload,
    Message,
    RejoinRequestPayload,
    append_message,
    marshal_message,
    unmarshal_message,
)

EUI = EUI64("42FFFFFFFFFFFFFF")
MIC = h("42 FF FF FF")


def data_message(m_type=MType.UNCONFIRMED_UP, **fhdr):
    return Message(
        mhdr=MHDR(m_type=m_type),
        payload=MACPayload(fhdr=FHDR(dev_addr=DevAddr("42FFFFFF"), **fhdr), f_port=1, frm_payload=b"\x01"),
        mic=MIC,
    )


class TestDataMessages:
    """Test data uplinks and downlinks."""

    UPLINK = h("40 FF FF FF 42 B2 42 FF FE FF 42 FE FF 42 FF FF FF")

    def test_decode_uplink(self):
        """Test decoding an unconfirmed uplink with FOpts and FRMPayload."""
        msg = unmarshal_message(self.UPLINK)
        assert msg.mhdr.m_type == MType.UNCONFIRMED_UP
        assert msg.is_uplink
        fhdr = msg.payload.fhdr
        assert fhdr.dev_addr == DevAddr("42FFFFFF")
        assert fhdr.f_ctrl == FCtrl(adr=True, ack=True, class_b=True)
        assert fhdr.f_cnt == 0xFF42
        assert fhdr.f_opts == h("FE FF")
        assert msg.payload.f_port == 0x42
        assert msg.payload.frm_payload == h("FE FF")
        assert msg.mic == MIC

    def test_encode_uplink(self):
        """Test re-encoding gives the original bytes."""
        assert marshal_message(unmarshal_message(self.UPLINK)) == self.UPLINK

    def test_downlink_f_pending(self):
        """Test bit 4 is FPending on downlinks."""
        msg = data_message(MType.UNCONFIRMED_DOWN, f_ctrl=FCtrl(f_pending=True, class_b=True))
        data = marshal_message(msg)
        assert data[5] == 0x10
        decoded = unmarshal_message(data)
        assert decoded.payload.fhdr.f_ctrl == FCtrl(f_pending=True)
        assert not decoded.is_uplink

    def test_uplink_adr_ack_req(self):
        """Test ADRAckReq is only sent on uplinks."""
        assert marshal_message(data_message(f_ctrl=FCtrl(adr_ack_req=True)))[5] == 0x40
        assert marshal_message(data_message(MType.CONFIRMED_DOWN, f_ctrl=FCtrl(adr_ack_req=True)))[5] == 0x00

    @pytest.mark.parametrize("f_cnt", [0, 1, 0xFFFE, 0xFFFF, 0x10000, 0x10001, 0xFFFFFFFF])
    def test_f_cnt_low_bits(self, f_cnt):
        """Test only the low 16 bits of FCnt are carried."""
        decoded = unmarshal_message(marshal_message(data_message(f_cnt=f_cnt)))
        assert decoded.payload.fhdr.f_cnt == f_cnt & 0xFFFF

    def test_f_cnt_too_large(self):
        """Test FCnt values above 32 bits are rejected."""
        with pytest.raises(EncodingError) as excinfo:
            marshal_message(data_message(f_cnt=1 << 32))
        assert excinfo.value.field == "MACPayload"
        assert isinstance(excinfo.value.__cause__.__cause__, FieldOutOfRange)

    def test_f_opts_too_long(self):
        """Test FOpts longer than 15 bytes."""
        with pytest.raises(EncodingError):
            marshal_message(data_message(f_opts=bytes(16)))

    def test_f_port_absent(self):
        """Test frames without FPort."""
        msg = Message(mhdr=MHDR(m_type=MType.UNCONFIRMED_UP), payload=MACPayload(), mic=MIC)
        data = marshal_message(msg)
        assert len(data) == 12
        assert unmarshal_message(data).payload.f_port is None

    def test_f_port_zero(self):
        """Test FPort 0 is written even without FRMPayload."""
        msg = Message(mhdr=MHDR(m_type=MType.UNCONFIRMED_UP), payload=MACPayload(f_port=0), mic=MIC)
        data = marshal_message(msg)
        assert len(data) == 13
        assert unmarshal_message(data).payload.f_port == 0

    def test_f_port_out_of_range(self):
        """Test FPort must fit in one byte."""
        msg = Message(mhdr=MHDR(m_type=MType.UNCONFIRMED_UP), payload=MACPayload(f_port=256), mic=MIC)
        with pytest.raises(EncodingError):
            marshal_message(msg)

    def test_random_frm_payload(self):
        """Test arbitrary FRMPayload bytes survive."""
        payload = random_bytes(200)
        msg = Message(
            mhdr=MHDR(m_type=MType.CONFIRMED_UP),
            payload=MACPayload(fhdr=FHDR(f_cnt=7), f_port=10, frm_payload=payload),
            mic=MIC,
        )
        assert unmarshal_message(marshal_message(msg)).payload.frm_payload == payload


class TestJoinMessages:
    """Test JoinRequest, RejoinRequest and JoinAccept frames."""

    def test_join_request(self):
        """Test JoinRequest encoding."""
        msg = Message(
            mhdr=MHDR(m_type=MType.JOIN_REQUEST),
            payload=JoinRequestPayload(join_eui=EUI, dev_eui=EUI, dev_nonce=0x42FF),
            mic=MIC,
        )
        data = marshal_message(msg)
        assert data == h("00") + h("FF" * 7 + "42") * 2 + h("FF 42") + MIC
        assert unmarshal_message(data) == msg

    def test_rejoin_request_type_1(self):
        """Test RejoinRequest type 1 carries JoinEUI."""
        msg = Message(
            mhdr=MHDR(m_type=MType.REJOIN_REQUEST),
            payload=RejoinRequestPayload(
                rejoin_type=RejoinRequestType.SESSION, join_eui=EUI, dev_eui=EUI, rejoin_cnt=0xFF42
            ),
            mic=MIC,
        )
        data = marshal_message(msg)
        assert data[:2] == h("C0 01")
        assert data[2:10] == EUI.to_wire()
        assert data[18:20] == h("42 FF")
        assert len(data) == 24
        assert unmarshal_message(data) == msg

    def test_rejoin_request_type_0(self):
        """Test RejoinRequest type 0 carries NetID."""
        msg = Message(
            mhdr=MHDR(m_type=MType.REJOIN_REQUEST),
            payload=RejoinRequestPayload(net_id=NetID("000013"), dev_eui=EUI, rejoin_cnt=1),
            mic=MIC,
        )
        data = marshal_message(msg)
        assert len(data) == 19
        assert data[2:5] == h("13 00 00")
        assert unmarshal_message(data) == msg

    def test_rejoin_request_unknown_type(self):
        """Test unknown RejoinType values."""
        with pytest.raises(UnknownField):
            unmarshal_message(h("C0 03") + bytes(17))
        msg = Message(
            mhdr=MHDR(m_type=MType.REJOIN_REQUEST),
            payload=RejoinRequestPayload(rejoin_type=3),
            mic=MIC,
        )
        with pytest.raises(EncodingError):
            marshal_message(msg)

    def test_join_accept_opaque(self):
        """Test the encrypted JoinAccept body is carried as is."""
        encrypted = random_bytes(16)
        data = h("20") + encrypted
        msg = unmarshal_message(data)
        assert msg.mhdr.m_type == MType.JOIN_ACCEPT
        assert msg.payload.encrypted == encrypted
        assert msg.mic == b""
        assert marshal_message(msg) == data

    def test_join_accept_wrong_size(self):
        """Test encrypted JoinAccept bodies of the wrong size."""
        with pytest.raises(FieldLengthMismatch):
            unmarshal_message(h("20") + bytes(20))
        msg = Message(mhdr=MHDR(m_type=MType.JOIN_ACCEPT), payload=JoinAcceptPayload(encrypted=bytes(20)))
        with pytest.raises(FieldLengthMismatch):
            marshal_message(msg)


class TestLengthGates:
    """Test frames rejected for their length or type."""

    @pytest.mark.parametrize(
        "data",
        [
            b"",
            h("40") + bytes(10),
            h("00") + bytes(21),
            h("00") + bytes(23),
            h("C0 00") + bytes(18),
            h("C0 01") + bytes(17),
        ],
    )
    def test_wrong_length(self, data):
        """Test frames whose length does not match their MType."""
        with pytest.raises(FieldLengthMismatch):
            unmarshal_message(data)

    def test_f_opts_len_beyond_frame(self):
        """Test an FOptsLen that runs past the end of the frame."""
        with pytest.raises(DecodingError):
            unmarshal_message(h("40 01020304 05 0000") + MIC)

    def test_proprietary(self):
        """Test Proprietary frames have no payload codec."""
        with pytest.raises(UnknownField):
            unmarshal_message(h("E0") + bytes(12))
        with pytest.raises(UnknownField):
            marshal_message(Message(mhdr=MHDR(m_type=MType.PROPRIETARY), payload=MACPayload(), mic=MIC))

    def test_unknown_major(self):
        """Test frames with an unknown Major."""
        with pytest.raises(UnknownField):
            unmarshal_message(h("41") + bytes(11))

    def test_wrong_mic_size(self):
        """Test a MIC that is not 4 bytes."""
        msg = data_message()
        msg.mic = b"\x00"
        with pytest.raises(FieldLengthMismatch):
            marshal_message(msg)

    def test_missing_payload(self):
        """Test a payload that does not match the MType."""
        msg = Message(mhdr=MHDR(m_type=MType.JOIN_REQUEST), payload=MACPayload(), mic=MIC)
        with pytest.raises(EncodingError, match="JoinRequestPayload"):
            marshal_message(msg)

    def test_buffer_untouched_on_error(self):
        """Test nothing is appended when encoding fails."""
        buf = bytearray(b"\xaa")
        with pytest.raises(EncodingError):
            append_message(buf, data_message(f_cnt=-1))
        assert buf == bytearray(b"\xaa")
        append_message(buf, data_message())
        assert buf[0] == 0xAA
        assert buf[1] == 0x40
