"""
Command line front end.

    python -m lorawan decode <hex> [--cleartext] [--band ID] [--phy-version V] [--mac-version V]
    python -m lorawan bands [BAND_ID]
    python -m lorawan describe BAND_ID [PHY_VERSION]

Output is JSON on stdout. ``-v`` or ``LORAWAN_LOG_LEVEL`` set the log level.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from lorawan.band import EU_863_870, get, get_latest, get_phy_versions
from lorawan.core.identifiers import EUI64, DevAddr, NetID
from lorawan.core.types import MACVersion, MType
from lorawan.frames import MACPayload, unmarshal_join_accept_payload, unmarshal_message
from lorawan.mac import MACCommand, read_mac_commands

__all__ = ["to_jsonable", "decode", "bands", "describe", "main"]

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "LORAWAN_LOG_LEVEL"

USAGE = """Usage:
    python -m lorawan [-v] decode <hex> [--cleartext] [--band ID] [--phy-version V] [--mac-version V]
    python -m lorawan [-v] bands [BAND_ID]
    python -m lorawan [-v] describe BAND_ID [PHY_VERSION]"""


def to_jsonable(value: Any) -> Any:
    """Convert codec records to JSON-serialisable values."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (EUI64, DevAddr, NetID)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, datetime):
        return value.isoformat()
    if is_dataclass(value):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def _mac_command(cmd: MACCommand) -> dict:
    cid = cmd.cid.name if isinstance(cmd.cid, Enum) else f"0x{cmd.cid:02X}"
    return {"cid": cid, "type": type(cmd.payload).__name__, "payload": to_jsonable(cmd.payload)}


def _parse_options(args: List[str], flags: List[str], options: List[str]) -> tuple:
    positional = []
    parsed: Dict[str, Any] = {}
    it = iter(args)
    for arg in it:
        if arg in flags:
            parsed[arg] = True
        elif arg in options:
            value = next(it, None)
            if value is None:
                raise ValueError(f"{arg} needs a value")
            parsed[arg] = value
        elif arg.startswith("--"):
            raise ValueError(f"Unknown option {arg}")
        else:
            positional.append(arg)
    return positional, parsed


def decode(*args: str) -> dict:
    """
    Decode a hex PHYPayload.

    MAC commands in FOpts are decoded unless the MAC version encrypts them;
    a port 0 FRMPayload and a JoinAccept body are decoded only with
    ``--cleartext``.
    """
    positional, opts = _parse_options(
        list(args), ["--cleartext"], ["--band", "--phy-version", "--mac-version"]
    )
    if len(positional) != 1:
        raise ValueError("decode takes exactly one hex PHYPayload")
    data = bytes.fromhex(positional[0])
    cleartext = opts.get("--cleartext", False)
    band_id = opts.get("--band", EU_863_870)
    phy = get(band_id, opts["--phy-version"]) if "--phy-version" in opts else get_latest(band_id)
    mac_version = MACVersion[opts.get("--mac-version", MACVersion.MAC_V1_0_4.name).upper()]
    logger.debug(f"Decoding {len(data)} bytes with {phy.id} {phy.phy_version.name}, {mac_version.name}")

    msg = unmarshal_message(data)
    result: Dict[str, Any] = {
        "mhdr": to_jsonable(msg.mhdr),
        "type": type(msg.payload).__name__,
        "mic": msg.mic.hex(),
    }

    if msg.mhdr.m_type == MType.JOIN_ACCEPT:
        if cleartext:
            body = unmarshal_join_accept_payload(msg.payload.encrypted[:-4])
            result["payload"] = to_jsonable(body)
            result["mic"] = msg.payload.encrypted[-4:].hex()
        else:
            logger.warning("JoinAccept body is encrypted, pass --cleartext if it is not")
            result["payload"] = {"encrypted": msg.payload.encrypted.hex()}
        return result

    result["payload"] = to_jsonable(msg.payload)
    if not isinstance(msg.payload, MACPayload):
        return result

    uplink = msg.is_uplink
    commands: List[MACCommand] = []
    f_opts = msg.payload.fhdr.f_opts
    if f_opts:
        if mac_version.encrypts_f_opts and not cleartext:
            logger.warning(f"Skipping {len(f_opts)} bytes of FOpts encrypted under {mac_version.name}")
        else:
            commands.extend(read_mac_commands(phy, f_opts, uplink))
    if msg.payload.f_port == 0 and msg.payload.frm_payload:
        if cleartext:
            commands.extend(read_mac_commands(phy, msg.payload.frm_payload, uplink))
        else:
            logger.warning("Skipping encrypted FPort 0 FRMPayload, pass --cleartext if it is not")
    if commands:
        result["mac_commands"] = [_mac_command(cmd) for cmd in commands]
    return result


def bands(*args: str) -> dict:
    """List band ids with their PHY versions, newest first."""
    if len(args) > 1:
        raise ValueError("bands takes at most one band id")
    band_id = args[0] if args else None
    return {b: [v.name for v in versions] for b, versions in get_phy_versions(band_id).items()}


def describe(*args: str) -> dict:
    """Describe a band at a PHY version, the latest by default."""
    if not 1 <= len(args) <= 2:
        raise ValueError("describe takes a band id and an optional PHY version")
    if len(args) == 2:
        return get(args[0], args[1]).describe()
    return get_latest(args[0]).describe()


_CLI_COMMANDS: Dict[str, Callable[..., dict]] = {
    "decode": decode,
    "bands": bands,
    "describe": describe,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI, returning the process exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)
    verbose = "-v" in argv
    argv = [arg for arg in argv if arg != "-v"]

    level = "DEBUG" if verbose else os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if not argv or argv[0] not in _CLI_COMMANDS:
        print(USAGE, file=sys.stderr)
        return 1
    try:
        result = _CLI_COMMANDS[argv[0]](*argv[1:])
    except (ValueError, KeyError) as err:
        logger.error(f"{argv[0]} failed: {err}")
        return 1
    print(json.dumps(result, indent=2))
    return 0
