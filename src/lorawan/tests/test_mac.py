"""Tests for MAC command payloads and the descriptor registry."""

import io
from datetime import datetime, timedelta, timezone

import pytest

from conftest import h
from lorawan.core.errors import (
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    InvalidMACCommandDirection,
    UnknownField,
    UnknownMACCommand,
)
from lorawan.core.types import ADRAckDelayExponent, ADRAckLimitExponent, DeviceClass, MACCommandIdentifier
from lorawan.mac import (
    DEFAULT_MAC_COMMANDS,
    ADRParamSetupReq,
    BeaconFreqReq,
    BeaconTimingAns,
    DevStatusAns,
    DeviceModeInd,
    DeviceTimeAns,
    DeviceTimeReq,
    DLChannelReq,
    DutyCycleAns,
    DutyCycleReq,
    ForceRejoinReq,
    LinkADRAns,
    LinkADRReq,
    LinkCheckAns,
    LinkCheckReq,
    MACCommand,
    MACCommandDescriptor,
    MACCommandSpec,
    NewChannelReq,
    PingSlotChannelReq,
    RawPayload,
    RejoinParamSetupReq,
    ResetInd,
    RxParamSetupAns,
    RxParamSetupReq,
    RxTimingSetupReq,
    TxParamSetupReq,
    read_mac_commands,
)


def encode(cmd, uplink, phy=None):
    append = DEFAULT_MAC_COMMANDS.append_uplink if uplink else DEFAULT_MAC_COMMANDS.append_downlink
    return bytes(append(phy, bytearray(), MACCommand.from_payload(cmd)))


def decode(data, uplink, phy=None):
    cmds = read_mac_commands(phy, data, uplink)
    assert len(cmds) == 1
    return cmds[0].payload


class TestLinkADR:
    """Test LinkADRReq / LinkADRAns."""

    MASK = [i in (2, 9) for i in range(16)]

    def test_req(self):
        """Test the LinkADRReq wire layout."""
        req = LinkADRReq(data_rate_index=5, tx_power_index=2, ch_mask=self.MASK, ch_mask_cntl=1, nb_trans=1)
        data = encode(req, uplink=False)
        assert data == h("03 52 04 02 11")
        assert decode(data, uplink=False) == req

    def test_short_mask_padded(self):
        """Test ChMasks shorter than 16 bits are padded with False."""
        assert LinkADRReq(ch_mask=[True]).to_bytes() == h("00 01 00 00")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"data_rate_index": 16},
            {"tx_power_index": 16},
            {"ch_mask_cntl": 8},
            {"nb_trans": 16},
        ],
    )
    def test_req_out_of_range(self, kwargs):
        """Test fields that do not fit their bits."""
        with pytest.raises(FieldOutOfRange):
            LinkADRReq(**kwargs).to_bytes()

    def test_mask_too_long(self):
        """Test ChMasks longer than 16 bits."""
        with pytest.raises(FieldLengthMismatch):
            LinkADRReq(ch_mask=[True] * 17).to_bytes()

    def test_ans(self):
        """Test LinkADRAns flags."""
        assert LinkADRAns(channel_mask_ack=True, tx_power_index_ack=True).to_bytes() == h("05")
        assert LinkADRAns.from_bytes(h("07")) == LinkADRAns(True, True, True)


class TestFrequencies:
    """Test frequency fields and band frequency units."""

    def test_rx_param_setup_2_4_ghz(self, ism2400):
        """Test 200 Hz frequency steps."""
        req = RxParamSetupReq(rx1_data_rate_offset=1, rx2_data_rate_index=2, rx2_frequency=2_423_000_000)
        data = req.to_bytes(ism2400)
        assert int.from_bytes(data[1:4], "little") == 12_115_000
        assert RxParamSetupReq.from_bytes(data, ism2400) == req

    def test_default_multiplier(self, eu868):
        """Test 100 Hz steps without a band and in EU868."""
        req = RxParamSetupReq(rx2_frequency=869_525_000)
        assert req.to_bytes() == req.to_bytes(eu868) == h("00 D2 AD 84")

    def test_frequency_too_high(self, eu868):
        """Test frequencies that do not fit 24 bits."""
        with pytest.raises(FieldOutOfRange):
            RxParamSetupReq(rx2_frequency=0x1000000 * 100).to_bytes(eu868)

    def test_rx_param_setup_zero_rejected(self):
        """Test Rx2 frequency 0 is not allowed."""
        with pytest.raises(FieldOutOfRange):
            RxParamSetupReq(rx2_frequency=0).to_bytes()
        with pytest.raises(FieldOutOfRange):
            DLChannelReq(frequency=0).to_bytes()

    def test_new_channel_disable(self):
        """Test NewChannelReq with frequency 0 disables the channel."""
        req = NewChannelReq(channel_index=3, frequency=0)
        data = encode(req, uplink=False)
        assert data == h("07 03 000000 00")
        assert decode(data, uplink=False) == req

    def test_new_channel_below_minimum(self):
        """Test frequencies just under 100 kHz."""
        with pytest.raises(FieldOutOfRange) as excinfo:
            NewChannelReq(frequency=100_000 - 1).to_bytes()
        assert excinfo.value.min == 100_000

    def test_new_channel(self, eu868):
        """Test NewChannelReq data rate range."""
        req = NewChannelReq(channel_index=3, frequency=867_100_000, min_data_rate_index=0, max_data_rate_index=5)
        data = req.to_bytes(eu868)
        assert data == h("03 18 4F 84 50")
        assert NewChannelReq.from_bytes(data, eu868) == req

    @pytest.mark.parametrize("cls", [PingSlotChannelReq, BeaconFreqReq])
    def test_class_b_default_frequency(self, cls):
        """Test frequency 0 selects the default for class B commands."""
        req = cls(frequency=0)
        assert cls.from_bytes(req.to_bytes()) == req


class TestDevStatus:
    """Test DevStatusAns margin encoding."""

    @pytest.mark.parametrize("margin", [-32, -16, 0, 31])
    def test_margin(self, margin):
        """Test valid margins survive."""
        ans = DevStatusAns(battery=200, margin=margin)
        assert decode(encode(ans, uplink=True), uplink=True) == ans

    @pytest.mark.parametrize("margin", [-33, 32])
    def test_margin_out_of_range(self, margin):
        """Test margins outside -32..31."""
        with pytest.raises(FieldOutOfRange):
            DevStatusAns(margin=margin).to_bytes()

    def test_upper_bits_ignored(self):
        """Test the RFU bits of the margin octet."""
        assert DevStatusAns.from_bytes(h("00 C1")).margin == 1


class TestOtherCommands:
    """Test the remaining fixed-layout commands."""

    @pytest.mark.parametrize(
        "cmd, uplink, data",
        [
            (ResetInd(minor_version=1), True, "01 01"),
            (LinkCheckReq(), True, "02"),
            (LinkCheckAns(margin=20, gateway_count=3), False, "02 14 03"),
            (DutyCycleReq(max_duty_cycle=7), False, "04 07"),
            (DutyCycleAns(), True, "04"),
            (RxParamSetupAns(True, True, False), True, "05 03"),
            (RxTimingSetupReq(delay=5), False, "08 05"),
            (TxParamSetupReq(max_eirp_index=5, uplink_dwell_time=True), False, "09 15"),
            (
                ADRParamSetupReq(ADRAckLimitExponent.ADR_ACK_LIMIT_64, ADRAckDelayExponent.ADR_ACK_DELAY_32),
                False,
                "0C 65",
            ),
            (DeviceTimeReq(), True, "0D"),
            (ForceRejoinReq(period_exponent=2, max_retries=3, rejoin_type=2, data_rate_index=1), False, "0E 13 21"),
            (RejoinParamSetupReq(max_time_exponent=10, max_count_exponent=4), False, "0F A4"),
            (BeaconTimingAns(delay=0x1234, channel_index=2), False, "12 34 12 02"),
            (DeviceModeInd(DeviceClass.CLASS_C), True, "20 02"),
        ],
    )
    def test_wire(self, cmd, uplink, data):
        """Test encoding and decoding against known bytes."""
        assert encode(cmd, uplink) == h(data)
        assert decode(h(data), uplink) == cmd

    def test_device_mode_class_b_rejected(self):
        """Test DeviceMode only switches between class A and C."""
        with pytest.raises(UnknownField):
            DeviceModeInd(DeviceClass.CLASS_B).to_bytes()
        with pytest.raises(DecodingError):
            read_mac_commands(None, h("20 01"), uplink=True)

    def test_rx_timing_low_nibble(self):
        """Test only the low nibble of the delay is read."""
        assert RxTimingSetupReq.from_bytes(h("F3")).delay == 3

    def test_device_time_fraction(self):
        """Test the fractional second octet."""
        ans = DeviceTimeAns.from_bytes(h("00 00 00 00 40"))
        assert ans.time == datetime(1980, 1, 6, 0, 0, 0, 250_000, tzinfo=timezone.utc)

    def test_device_time_rounding(self):
        """Test rounding to the nearest 1/256 s carries into the seconds."""
        t = datetime(1980, 1, 6, 0, 0, 0, 999_999, tzinfo=timezone.utc)
        assert DeviceTimeAns(t).to_bytes() == h("01 00 00 00 00")

    def test_device_time_recent(self):
        """Test a current instant keeps sub-step precision."""
        t = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        decoded = DeviceTimeAns.from_bytes(DeviceTimeAns(t).to_bytes()).time
        assert abs(decoded - t) < timedelta(milliseconds=4)


class TestMACCommandSpec:
    """Test the descriptor registry."""

    def test_default_table(self):
        """Test registered CIDs and descriptor attributes."""
        assert MACCommandIdentifier.LINK_ADR in DEFAULT_MAC_COMMANDS
        assert 0x42 not in DEFAULT_MAC_COMMANDS
        link_adr = DEFAULT_MAC_COMMANDS.get(MACCommandIdentifier.LINK_ADR)
        assert link_adr.name == "LinkADR"
        assert not link_adr.initiated_by_device
        assert link_adr.expect_answer
        assert link_adr.uplink_length == 1
        assert link_adr.downlink_length == 4
        device_time = DEFAULT_MAC_COMMANDS.get(MACCommandIdentifier.DEVICE_TIME)
        assert device_time.initiated_by_device
        assert device_time.uplink_length == 0
        assert device_time.downlink_length == 5

    def test_one_way_commands(self):
        """Test commands valid in a single direction."""
        force_rejoin = DEFAULT_MAC_COMMANDS.get(MACCommandIdentifier.FORCE_REJOIN)
        assert force_rejoin.uplink_length is None
        assert not force_rejoin.expect_answer
        notify = DEFAULT_MAC_COMMANDS.get(MACCommandIdentifier.RELAY_NOTIFY_NEW_END_DEVICE)
        assert notify.downlink is None
        assert notify.uplink_length == 6

    def test_descriptors_read_only(self):
        """Test the registry cannot be modified."""
        with pytest.raises(TypeError):
            DEFAULT_MAC_COMMANDS.descriptors[0x80] = None

    def test_duplicate_cid(self):
        """Test registering a CID twice."""
        descriptor = MACCommandDescriptor(MACCommandIdentifier.LINK_CHECK, "LinkCheck", True, True)
        with pytest.raises(ValueError, match="0x02"):
            MACCommandSpec([descriptor, descriptor])

    def test_custom_spec(self):
        """Test a registry with a subset of commands."""
        spec = MACCommandSpec(
            [
                MACCommandDescriptor(
                    MACCommandIdentifier.DUTY_CYCLE, "DutyCycle", False, True, DutyCycleAns, DutyCycleReq
                )
            ]
        )
        assert len(spec) == 1
        cmds = read_mac_commands(None, h("04 02 02"), uplink=False, spec=spec)
        assert cmds[0].payload == DutyCycleReq(2)
        assert cmds[1].payload == RawPayload(b"")

    def test_wrong_direction(self):
        """Test encoding or decoding in the wrong direction."""
        with pytest.raises(InvalidMACCommandDirection) as excinfo:
            encode(ForceRejoinReq(), uplink=True)
        assert excinfo.value.cid == MACCommandIdentifier.FORCE_REJOIN
        assert excinfo.value.uplink
        with pytest.raises(InvalidMACCommandDirection, match="downlink"):
            read_mac_commands(None, h("46 000000000000"), uplink=False)

    def test_wrong_payload_type(self):
        """Test a payload that does not belong to the CID and direction."""
        with pytest.raises(EncodingError, match="LinkADRAns"):
            DEFAULT_MAC_COMMANDS.append_uplink(None, bytearray(), MACCommand(MACCommandIdentifier.LINK_ADR, LinkADRReq()))

    def test_unknown_cid_encode(self):
        """Test encoding a CID without descriptor."""
        with pytest.raises(UnknownMACCommand):
            DEFAULT_MAC_COMMANDS.append_downlink(None, bytearray(), MACCommand(0x80, RawPayload(b"\x01")))

    def test_buffer_untouched_on_error(self):
        """Test nothing is appended when the payload fails to encode."""
        buf = bytearray(h("02"))
        with pytest.raises(EncodingError) as excinfo:
            DEFAULT_MAC_COMMANDS.append_downlink(None, buf, MACCommand.from_payload(DutyCycleReq(16)))
        assert isinstance(excinfo.value.__cause__, FieldOutOfRange)
        assert buf == bytearray(h("02"))


class TestReadMACCommands:
    """Test reading command streams."""

    def test_sequence(self, eu868):
        """Test several commands in one FOpts field."""
        data = h("03 52 04 02 11") + h("06") + h("07 03 18 4F 84 50")
        cmds = read_mac_commands(eu868, data, uplink=False)
        assert [c.cid for c in cmds] == [
            MACCommandIdentifier.LINK_ADR,
            MACCommandIdentifier.DEV_STATUS,
            MACCommandIdentifier.NEW_CHANNEL,
        ]
        assert cmds[2].payload.frequency == 867_100_000

    def test_unknown_cid_consumes_rest(self):
        """Test an unknown CID keeps the remaining bytes."""
        cmds = read_mac_commands(None, h("02 80 01 02 03"), uplink=True)
        assert cmds[0].payload == LinkCheckReq()
        assert cmds[1] == MACCommand(0x80, RawPayload(h("01 02 03")))

    def test_relay_filter_list_raw(self):
        """Test the relay filter list command is kept undecoded."""
        cmds = read_mac_commands(None, h("42 01 02"), uplink=False)
        assert cmds == [MACCommand(0x42, RawPayload(h("01 02")))]

    def test_short_payload(self):
        """Test a stream that ends inside a payload."""
        with pytest.raises(DecodingError, match="expected 4 bytes, got 2"):
            read_mac_commands(None, h("03 52 04"), uplink=False)

    def test_empty_stream(self):
        """Test reading from an exhausted stream."""
        assert read_mac_commands(None, b"", uplink=True) == []
        with pytest.raises(DecodingError, match="CID"):
            DEFAULT_MAC_COMMANDS.read_uplink(None, io.BytesIO(b""))

    def test_invalid_payload(self):
        """Test payload errors are wrapped with the record name."""
        with pytest.raises(DecodingError, match="DeviceModeInd") as excinfo:
            read_mac_commands(None, h("20 07"), uplink=True)
        assert isinstance(excinfo.value.__cause__, UnknownField)

    def test_reader_position(self):
        """Test one read consumes exactly one command."""
        reader = io.BytesIO(h("02 14 03 04 07"))
        assert DEFAULT_MAC_COMMANDS.read_downlink(None, reader).payload == LinkCheckAns(20, 3)
        assert reader.tell() == 3
        assert DEFAULT_MAC_COMMANDS.read_downlink(None, reader).payload == DutyCycleReq(7)
