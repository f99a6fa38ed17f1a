"""ScriptError — base exception class and the script codec error taxonomy."""

from __future__ import annotations


class ScriptError(Exception):
    """Base error for all script codec operations.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code string.
    """

    def __init__(self, message: str, *, code: str = "script-error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class InvalidOpcodeError(ScriptError):
    """An integer does not resolve to any defined opcode."""

    def __init__(self, opcode: int) -> None:
        super().__init__(f"specified invalid opcode {opcode}", code="invalid-opcode")
        self.opcode = opcode


class SizeError(ScriptError):
    """Data is too large for any push-data length prefix."""

    def __init__(self, size: int) -> None:
        super().__init__(f"data size is too big: {size} bytes", code="size-error")
        self.size = size


class TruncatedInputError(ScriptError):
    """A declared length runs past the end of the input buffer."""

    def __init__(self, message: str, *, offset: int = 0) -> None:
        super().__init__(message, code="truncated-input")
        self.offset = offset


class ScriptParseError(ScriptError):
    """Human-readable script text contains a token that cannot be resolved."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="script-parse-error")


class FrozenScriptError(ScriptError):
    """Attempt to append to a script that has been frozen."""

    def __init__(self) -> None:
        super().__init__("cannot modify a frozen script", code="frozen-script")


class AddressError(ScriptError):
    """Address text is malformed or belongs to another network."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="invalid-address")
