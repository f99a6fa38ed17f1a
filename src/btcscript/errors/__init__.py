"""Errors — the script codec exception hierarchy."""

from __future__ import annotations

from btcscript.errors.script_errors import (
    AddressError,
    FrozenScriptError,
    InvalidOpcodeError,
    ScriptError,
    ScriptParseError,
    SizeError,
    TruncatedInputError,
)

__all__ = [
    "AddressError",
    "FrozenScriptError",
    "InvalidOpcodeError",
    "ScriptError",
    "ScriptParseError",
    "SizeError",
    "TruncatedInputError",
]
