"""LoRaWAN MAC Commands

This module contains the MAC command codec:
- Payload records for CIDs 0x01-0x20
- Relay (TS011) payload records for CIDs 0x40-0x46
- The CID descriptor table and command stream reader
"""

from lorawan.mac.commands import (
    ADRParamSetupAns,
    ADRParamSetupReq,
    BeaconFreqAns,
    BeaconFreqReq,
    BeaconTimingAns,
    BeaconTimingReq,
    DeviceModeConf,
    DeviceModeInd,
    DeviceTimeAns,
    DeviceTimeReq,
    DevStatusAns,
    DevStatusReq,
    DLChannelAns,
    DLChannelReq,
    DutyCycleAns,
    DutyCycleReq,
    ForceRejoinReq,
    LinkADRAns,
    LinkADRReq,
    LinkCheckAns,
    LinkCheckReq,
    NewChannelAns,
    NewChannelReq,
    PingSlotChannelAns,
    PingSlotChannelReq,
    PingSlotInfoAns,
    PingSlotInfoReq,
    RejoinParamSetupAns,
    RejoinParamSetupReq,
    RekeyConf,
    RekeyInd,
    ResetConf,
    ResetInd,
    RxParamSetupAns,
    RxParamSetupReq,
    RxTimingSetupAns,
    RxTimingSetupReq,
    TxParamSetupAns,
    TxParamSetupReq,
    decode_frequency,
    encode_frequency,
    freq_multiplier,
)
from lorawan.mac.relay import (
    RelayConfAns,
    RelayConfigureFwdLimitAns,
    RelayConfigureFwdLimitReq,
    RelayConfiguration,
    RelayConfReq,
    RelayCtrlUplinkListAns,
    RelayCtrlUplinkListReq,
    RelayEndDeviceConfAns,
    RelayEndDeviceConfiguration,
    RelayEndDeviceConfReq,
    RelayForwardLimits,
    RelayNotifyNewEndDeviceReq,
    RelaySecondChannel,
    RelayUpdateUplinkListAns,
    RelayUpdateUplinkListReq,
)
from lorawan.mac.spec import (
    DEFAULT_MAC_COMMANDS,
    MACCommand,
    MACCommandDescriptor,
    MACCommandSpec,
    RawPayload,
    read_mac_commands,
)

__all__ = [
    # Dispatch
    "RawPayload",
    "MACCommand",
    "MACCommandDescriptor",
    "MACCommandSpec",
    "DEFAULT_MAC_COMMANDS",
    "read_mac_commands",
    # Frequencies
    "freq_multiplier",
    "encode_frequency",
    "decode_frequency",
    # LoRaWAN 1.0.4 / 1.1
    "ResetInd",
    "ResetConf",
    "LinkCheckReq",
    "LinkCheckAns",
    "LinkADRReq",
    "LinkADRAns",
    "DutyCycleReq",
    "DutyCycleAns",
    "RxParamSetupReq",
    "RxParamSetupAns",
    "DevStatusReq",
    "DevStatusAns",
    "NewChannelReq",
    "NewChannelAns",
    "RxTimingSetupReq",
    "RxTimingSetupAns",
    "TxParamSetupReq",
    "TxParamSetupAns",
    "DLChannelReq",
    "DLChannelAns",
    "RekeyInd",
    "RekeyConf",
    "ADRParamSetupReq",
    "ADRParamSetupAns",
    "DeviceTimeReq",
    "DeviceTimeAns",
    "ForceRejoinReq",
    "RejoinParamSetupReq",
    "RejoinParamSetupAns",
    "PingSlotInfoReq",
    "PingSlotInfoAns",
    "PingSlotChannelReq",
    "PingSlotChannelAns",
    "BeaconTimingReq",
    "BeaconTimingAns",
    "BeaconFreqReq",
    "BeaconFreqAns",
    "DeviceModeInd",
    "DeviceModeConf",
    # Relay
    "RelaySecondChannel",
    "RelayConfiguration",
    "RelayEndDeviceConfiguration",
    "RelayForwardLimits",
    "RelayConfReq",
    "RelayConfAns",
    "RelayEndDeviceConfReq",
    "RelayEndDeviceConfAns",
    "RelayUpdateUplinkListReq",
    "RelayUpdateUplinkListAns",
    "RelayCtrlUplinkListReq",
    "RelayCtrlUplinkListAns",
    "RelayConfigureFwdLimitReq",
    "RelayConfigureFwdLimitAns",
    "RelayNotifyNewEndDeviceReq",
]
