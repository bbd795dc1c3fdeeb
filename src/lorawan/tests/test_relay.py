"""Tests for relay MAC commands and the relay forwarding payloads."""

import pytest

from conftest import h, random_bytes
from lorawan.band.data_rate import LoRaDataRate
from lorawan.core.errors import (
    DataRateNotFound,
    DecodingError,
    EncodingError,
    FieldLengthMismatch,
    FieldOutOfRange,
    UnknownField,
)
from lorawan.core.identifiers import DevAddr
from lorawan.core.types import (
    MACCommandIdentifier,
    RelayCADPeriodicity,
    RelayCtrlUplinkListAction,
    RelayEndDeviceMode,
    RelayLimitBucketSize,
    RelayResetLimitCounter,
    RelaySecondChAckOffset,
    RelaySmartEnableLevel,
    RelayWORChannel,
)
from lorawan.mac import (
    DEFAULT_MAC_COMMANDS,
    MACCommand,
    RelayConfAns,
    RelayConfigureFwdLimitReq,
    RelayConfiguration,
    RelayConfReq,
    RelayCtrlUplinkListAns,
    RelayCtrlUplinkListReq,
    RelayEndDeviceConfiguration,
    RelayEndDeviceConfReq,
    RelayForwardLimits,
    RelayNotifyNewEndDeviceReq,
    RelaySecondChannel,
    RelayUpdateUplinkListReq,
    read_mac_commands,
)
from lorawan.relay import (
    RelayForwardDownlinkReq,
    RelayForwardUplinkReq,
    marshal_relay_forward_downlink_req,
    marshal_relay_forward_uplink_req,
    unmarshal_relay_forward_downlink_req,
    unmarshal_relay_forward_uplink_req,
)

SECOND_CHANNEL = RelaySecondChannel(
    ack_offset=RelaySecondChAckOffset.KHZ_400,
    data_rate_index=3,
    frequency=868_300_000,
)


class TestRelayConf:
    """Test RelayConfReq / RelayConfAns."""

    def test_start(self, eu868):
        """Test starting a relay with a second channel."""
        req = RelayConfReq(
            RelayConfiguration(
                second_channel=SECOND_CHANNEL,
                default_channel_index=1,
                cad_periodicity=RelayCADPeriodicity.PERIOD_100_MILLISECONDS,
            )
        )
        data = req.to_bytes(eu868)
        assert data == h("9A 2D F8 7D 84")
        assert RelayConfReq.from_bytes(data, eu868) == req

    def test_stop(self):
        """Test stopping a relay clears every field."""
        assert RelayConfReq().to_bytes() == bytes(5)
        assert RelayConfReq.from_bytes(h("FF 1F FF FF FF")) == RelayConfReq()

    def test_unknown_cad_periodicity(self):
        """Test CAD periodicity values 6 and 7."""
        with pytest.raises(UnknownField):
            RelayConfReq.from_bytes(h("00 38 00 00 00"))

    def test_default_channel_index_out_of_range(self):
        """Test DefaultChIdx only has two bits."""
        with pytest.raises(FieldOutOfRange):
            RelayConfReq(RelayConfiguration(default_channel_index=4)).to_bytes()

    def test_ans(self):
        """Test RelayConfAns flags."""
        ans = RelayConfAns(second_channel_frequency_ack=True, cad_periodicity_ack=True)
        assert ans.to_bytes() == h("21")
        assert RelayConfAns.from_bytes(h("21")) == ans


class TestRelayEndDeviceConf:
    """Test RelayEndDeviceConfReq."""

    def test_dynamic(self):
        """Test dynamic mode with smart enable level and backoff."""
        req = RelayEndDeviceConfReq(
            RelayEndDeviceConfiguration(
                mode=RelayEndDeviceMode.DYNAMIC,
                smart_enable_level=RelaySmartEnableLevel.LEVEL_32,
                backoff=10,
            )
        )
        data = req.to_bytes()
        assert data == h("0A 00 0A 00 00 00")
        assert RelayEndDeviceConfReq.from_bytes(data) == req

    def test_second_channel(self, eu868):
        """Test the second channel settings."""
        req = RelayEndDeviceConfReq(RelayEndDeviceConfiguration(second_channel=SECOND_CHANNEL))
        assert RelayEndDeviceConfReq.from_bytes(req.to_bytes(eu868), eu868) == req

    def test_disabled(self):
        """Test relaying disabled is sent without configuration."""
        assert RelayEndDeviceConfReq().to_bytes() == bytes(6)
        assert RelayEndDeviceConfReq.from_bytes(h("03 FF 3F 00 00 00")).configuration is None
        with pytest.raises(FieldOutOfRange):
            RelayEndDeviceConfReq(RelayEndDeviceConfiguration(mode=RelayEndDeviceMode.DISABLED)).to_bytes()

    def test_backoff_out_of_range(self):
        """Test the backoff limit."""
        with pytest.raises(FieldOutOfRange):
            RelayEndDeviceConfReq(RelayEndDeviceConfiguration(backoff=64)).to_bytes()


class TestRelayUplinkList:
    """Test the trusted end device list commands."""

    KEY = bytes(range(16))

    def test_update(self):
        """Test RelayUpdateUplinkListReq layout."""
        req = RelayUpdateUplinkListReq(
            rule_index=1,
            forward_limits=RelayForwardLimits(RelayLimitBucketSize.SIZE_4, 10),
            dev_addr=DevAddr("26011234"),
            w_f_cnt=1,
            root_wor_s_key=self.KEY,
        )
        data = req.to_bytes()
        assert data == h("01 8A 34 12 01 26 01 00 00 00") + self.KEY
        assert RelayUpdateUplinkListReq.from_bytes(data) == req

    def test_update_errors(self):
        """Test key length and reload rate limits."""
        with pytest.raises(FieldLengthMismatch):
            RelayUpdateUplinkListReq(root_wor_s_key=bytes(15)).to_bytes()
        with pytest.raises(FieldOutOfRange):
            RelayUpdateUplinkListReq(forward_limits=RelayForwardLimits(reload_rate=64)).to_bytes()

    def test_ctrl(self):
        """Test RelayCtrlUplinkListReq / Ans."""
        req = RelayCtrlUplinkListReq(rule_index=3, action=RelayCtrlUplinkListAction.REMOVE_TRUSTED_END_DEVICE)
        assert req.to_bytes() == h("13")
        assert RelayCtrlUplinkListReq.from_bytes(h("13")) == req
        with pytest.raises(UnknownField):
            RelayCtrlUplinkListReq.from_bytes(h("23"))
        ans = RelayCtrlUplinkListAns(rule_index_ack=True, w_f_cnt=0x01020304)
        assert ans.to_bytes() == h("01 04 03 02 01")
        assert RelayCtrlUplinkListAns.from_bytes(ans.to_bytes()) == ans


class TestRelayConfigureFwdLimit:
    """Test RelayConfigureFwdLimitReq."""

    def test_layout(self):
        """Test reload rates, bucket sizes and the reset action."""
        req = RelayConfigureFwdLimitReq(
            reset_limit_counter=RelayResetLimitCounter.RELOAD_RATE,
            join_request_limits=RelayForwardLimits(RelayLimitBucketSize.SIZE_2, 5),
            overall_limits=RelayForwardLimits(RelayLimitBucketSize.SIZE_12, 0),
        )
        data = req.to_bytes()
        assert data == h("80 FF BF 10 43")
        assert RelayConfigureFwdLimitReq.from_bytes(data) == req

    def test_unchanged_limits(self):
        """Test limits left unchanged decode as None."""
        decoded = RelayConfigureFwdLimitReq.from_bytes(h("FF FF FF 3F FF"))
        assert decoded.reset_limit_counter == RelayResetLimitCounter.NO_RESET
        assert decoded.overall_limits is None
        assert decoded.join_request_limits is None

    def test_reload_rate_reserved(self):
        """Test 0x7F cannot be sent as an actual reload rate."""
        with pytest.raises(FieldOutOfRange):
            RelayConfigureFwdLimitReq(notify_limits=RelayForwardLimits(reload_rate=0x7F)).to_bytes()


class TestRelayNotifyNewEndDevice:
    """Test RelayNotifyNewEndDeviceReq."""

    def test_power_level(self):
        """Test SNR and RSSI packing."""
        req = RelayNotifyNewEndDeviceReq(dev_addr=DevAddr("26011234"), snr=5, rssi=-100)
        data = req.to_bytes()
        assert data == h("B9 0A 34 12 01 26")
        assert RelayNotifyNewEndDeviceReq.from_bytes(data) == req

    @pytest.mark.parametrize("kwargs", [{"snr": 12}, {"snr": -21}, {"rssi": -14}, {"rssi": -143}])
    def test_out_of_range(self, kwargs):
        """Test SNR and RSSI limits."""
        with pytest.raises(FieldOutOfRange):
            RelayNotifyNewEndDeviceReq(**kwargs).to_bytes()

    def test_uplink_only(self):
        """Test the command is read from uplinks."""
        cmds = read_mac_commands(None, h("46 B9 0A 34 12 01 26"), uplink=True)
        assert cmds[0].payload.rssi == -100


class TestRelayDispatch:
    """Test relay commands through the descriptor registry."""

    def test_conf_req_downlink(self):
        """Test RelayConfReq is a downlink command."""
        buf = DEFAULT_MAC_COMMANDS.append_downlink(None, bytearray(), MACCommand.from_payload(RelayConfReq()))
        assert bytes(buf) == h("40 0000000000")
        cmds = read_mac_commands(None, bytes(buf), uplink=False)
        assert cmds == [MACCommand(MACCommandIdentifier.RELAY_CONF, RelayConfReq())]

    def test_invalid_payload(self):
        """Test decoding errors name the record."""
        with pytest.raises(DecodingError, match="RelayConfReq"):
            read_mac_commands(None, h("40 00 3C 00 00 00"), uplink=False)


class TestRelayForwardUplink:
    """Test RelayForwardUplinkReq."""

    def test_encode(self, eu868):
        """Test metadata, frequency and payload layout."""
        req = RelayForwardUplinkReq(
            data_rate=LoRaDataRate(7, 125_000),
            snr=0,
            rssi=-50,
            frequency=868_100_000,
            raw_payload=h("40"),
        )
        data = marshal_relay_forward_uplink_req(eu868, req)
        assert data == h("45 47 00 28 76 84 40")
        assert unmarshal_relay_forward_uplink_req(eu868, data) == req

    def test_clipping(self, eu868):
        """Test SNR and RSSI are clipped to the wire range."""
        req = RelayForwardUplinkReq(snr=30, rssi=-200, frequency=868_100_000)
        decoded = unmarshal_relay_forward_uplink_req(eu868, marshal_relay_forward_uplink_req(eu868, req))
        assert decoded.snr == 11
        assert decoded.rssi == -142

    def test_secondary_channel(self, us915):
        """Test the WOR channel and US915 data rates."""
        payload = random_bytes(23)
        req = RelayForwardUplinkReq(
            data_rate=LoRaDataRate(8, 500_000),
            wor_channel=RelayWORChannel.SECONDARY,
            frequency=903_000_000,
            raw_payload=payload,
        )
        data = marshal_relay_forward_uplink_req(us915, req)
        assert data[0] & 0x0F == 4
        assert data[2] & 0x03 == 1
        decoded = unmarshal_relay_forward_uplink_req(us915, data)
        assert decoded.wor_channel == RelayWORChannel.SECONDARY
        assert decoded.raw_payload == payload

    def test_unknown_data_rate(self, eu868):
        """Test modulations the band lacks."""
        with pytest.raises(EncodingError, match="DataRate"):
            marshal_relay_forward_uplink_req(eu868, RelayForwardUplinkReq(data_rate=LoRaDataRate(8, 500_000)))

    def test_zero_frequency(self, eu868):
        """Test the frequency is required."""
        with pytest.raises(FieldOutOfRange):
            marshal_relay_forward_uplink_req(eu868, RelayForwardUplinkReq(frequency=0))

    def test_decode_errors(self, eu868):
        """Test short frames, undefined data rates and WOR channels."""
        with pytest.raises(FieldLengthMismatch):
            unmarshal_relay_forward_uplink_req(eu868, h("45 47 00 28 76"))
        with pytest.raises(DataRateNotFound):
            unmarshal_relay_forward_uplink_req(eu868, h("0E 00 00 28 76 84"))
        with pytest.raises(UnknownField):
            unmarshal_relay_forward_uplink_req(eu868, h("05 00 02 28 76 84"))

    def test_header_only(self, eu868):
        """Test a frame with no end device payload."""
        assert unmarshal_relay_forward_uplink_req(eu868, h("05 00 00 28 76 84")).raw_payload == b""


class TestRelayForwardDownlink:
    """Test RelayForwardDownlinkReq."""

    def test_verbatim(self):
        """Test the PHYPayload is carried unchanged."""
        payload = random_bytes(17)
        req = RelayForwardDownlinkReq(raw_payload=payload)
        assert marshal_relay_forward_downlink_req(req) == payload
        assert unmarshal_relay_forward_downlink_req(payload) == req

    def test_empty(self):
        """Test an empty payload is rejected both ways."""
        with pytest.raises(FieldLengthMismatch):
            marshal_relay_forward_downlink_req(RelayForwardDownlinkReq())
        with pytest.raises(FieldLengthMismatch):
            unmarshal_relay_forward_downlink_req(b"")
