"""py-btcscript — Bitcoin script codec, template classifier and address deriver."""

from __future__ import annotations

from btcscript.bitcoin.opcodes import OPCODES, OpCode
from btcscript.bitcoin.script import (
    Script,
    ScriptType,
    from_string,
    parse_from_payload,
    to_multisig_script,
    to_p2pkh,
    to_p2sh_multisig_script,
    to_p2wpkh,
    to_p2wsh,
)

__version__ = "0.1.0"

__all__ = [
    "OPCODES",
    "OpCode",
    "Script",
    "ScriptType",
    "from_string",
    "parse_from_payload",
    "to_multisig_script",
    "to_p2pkh",
    "to_p2sh_multisig_script",
    "to_p2wpkh",
    "to_p2wsh",
]
