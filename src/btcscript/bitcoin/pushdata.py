"""Push-data codec — the length-prefixed encoding of a single data push.

Four header tiers, selected by payload size:

- ``<len> <data>`` for payloads shorter than ``OP_PUSHDATA1`` (0x4c)
- ``OP_PUSHDATA1 <len:1> <data>``
- ``OP_PUSHDATA2 <len:2 LE> <data>``
- ``OP_PUSHDATA4 <len:4 LE> <data>``
"""

from __future__ import annotations

import struct

from btcscript.bitcoin.opcodes import OpCode
from btcscript.errors.script_errors import SizeError, TruncatedInputError

_LENGTH_FORMATS = {
    OpCode.OP_PUSHDATA1: "<B",
    OpCode.OP_PUSHDATA2: "<H",
    OpCode.OP_PUSHDATA4: "<I",
}


def is_push_opcode(opcode: int) -> bool:
    """Whether *opcode* introduces a data push (0x01..0x4e).

    ``OP_0`` pushes an empty vector but has no data bytes, so it is treated
    as a plain opcode.
    """
    return OpCode.OP_0 < opcode <= OpCode.OP_PUSHDATA4


def header_size(opcode: int) -> int:
    """Byte length of the push header that starts with *opcode*."""
    fmt = _LENGTH_FORMATS.get(opcode)
    return 1 if fmt is None else 1 + struct.calcsize(fmt)


def encode(data: bytes) -> bytes:
    """Encode *data* as one push unit (header + data) using the minimal tier.

    Raises:
        SizeError: If the length does not fit a 4-byte length field.
    """
    size = data.nbytes if isinstance(data, memoryview) else len(data)
    if size < OpCode.OP_PUSHDATA1:
        header = struct.pack("<B", size)
    elif size < 0xFF:
        header = struct.pack("<BB", OpCode.OP_PUSHDATA1, size)
    elif size <= 0xFFFF:
        header = struct.pack("<BH", OpCode.OP_PUSHDATA2, size)
    elif size <= 0xFFFFFFFF:
        header = struct.pack("<BI", OpCode.OP_PUSHDATA4, size)
    else:
        raise SizeError(size)
    return header + bytes(data)


def unit_size(buf: bytes, offset: int = 0) -> int:
    """Byte length (header + data) of the push unit starting at *offset*.

    Returns 0 if the byte at *offset* is a plain opcode. Nothing is copied.

    Raises:
        TruncatedInputError: If *offset* is past the end, or the length field
            or the declared data extend beyond the buffer.
    """
    end = len(buf)
    if offset >= end:
        msg = f"no opcode at offset {offset}, buffer is {end} bytes"
        raise TruncatedInputError(msg, offset=offset)
    opcode = buf[offset]
    if not is_push_opcode(opcode):
        return 0

    cursor = offset + 1
    fmt = _LENGTH_FORMATS.get(opcode)
    if fmt is None:
        length = opcode
    else:
        width = struct.calcsize(fmt)
        if cursor + width > end:
            msg = f"push length field at offset {cursor} needs {width} bytes, {end - cursor} left"
            raise TruncatedInputError(msg, offset=offset)
        (length,) = struct.unpack_from(fmt, buf, cursor)
        cursor += width

    if length > end - cursor:
        msg = f"push at offset {offset} declares {length} bytes, {end - cursor} left"
        raise TruncatedInputError(msg, offset=offset)
    return cursor + length - offset


def decode(buf: bytes, offset: int = 0) -> tuple[bytes | None, int]:
    """Decode the push unit starting at *offset* in *buf*.

    Returns:
        ``(data, consumed)`` where *consumed* counts header and data bytes.
        If the byte at *offset* is a plain opcode, returns ``(None, 0)``.

    Raises:
        TruncatedInputError: As :func:`unit_size`.
    """
    consumed = unit_size(buf, offset)
    if consumed == 0:
        return None, 0
    start = offset + header_size(buf[offset])
    return bytes(buf[start : offset + consumed]), consumed


def pushed_data(chunk: bytes) -> bytes:
    """Strip the push header from a push chunk and return its data."""
    return bytes(chunk[header_size(chunk[0]) :])
