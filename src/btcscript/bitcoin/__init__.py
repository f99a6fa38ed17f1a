"""Bitcoin primitives — opcodes, push data, scripts, addresses, block headers."""

from __future__ import annotations

from btcscript.bitcoin.block_header import BlockHeader
from btcscript.bitcoin.opcodes import OPCODES, OpCode, OpcodeTable
from btcscript.bitcoin.script import Script, ScriptType

__all__ = ["OPCODES", "BlockHeader", "OpCode", "OpcodeTable", "Script", "ScriptType"]
