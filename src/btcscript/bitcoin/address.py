"""Address encoding — Base58Check and Bech32 segwit addresses.

- Base58Check for legacy P2PKH and P2SH addresses (version byte + hash160)
- Bech32 (BIP173) for witness version 0 programs (P2WPKH, P2WSH)
"""

from __future__ import annotations

import bech32

from btcscript.errors.script_errors import AddressError
from btcscript.utils.crypto import sha256d

# ---------------------------------------------------------------------------
# Base58Check encoding / decoding
# ---------------------------------------------------------------------------

_B58_ALPHABET = b"123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def base58_encode(payload: bytes) -> str:
    """Encode raw bytes to Base58 (no checksum)."""
    n = int.from_bytes(payload, "big")
    result: list[int] = []
    while n > 0:
        n, remainder = divmod(n, 58)
        result.append(_B58_ALPHABET[remainder])
    # Preserve leading zero bytes
    for byte in payload:
        if byte == 0:
            result.append(_B58_ALPHABET[0])
        else:
            break
    return bytes(reversed(result)).decode("ascii")


def base58_decode(s: str) -> bytes:
    """Decode Base58 string to raw bytes (no checksum).

    Raises:
        AddressError: If *s* contains a character outside the alphabet.
    """
    n = 0
    for char in s:
        index = _B58_ALPHABET.find(char.encode("utf-8"))
        if index < 0:
            msg = f"Invalid Base58 character: {char!r}"
            raise AddressError(msg)
        n = n * 58 + index
    result = n.to_bytes((n.bit_length() + 7) // 8, "big") if n > 0 else b""
    # Preserve leading '1' chars as 0x00 bytes
    pad_count = len(s) - len(s.lstrip("1"))
    return b"\x00" * pad_count + result


def base58check_encode(payload: bytes) -> str:
    """Encode bytes with a 4-byte SHA256d checksum (Base58Check)."""
    checksum = sha256d(payload)[:4]
    return base58_encode(payload + checksum)


def base58check_decode(s: str) -> bytes:
    """Decode a Base58Check string, verifying the checksum.

    Raises:
        AddressError: If the string is malformed or the checksum is invalid.
    """
    raw = base58_decode(s)
    if len(raw) < 4:
        msg = "Base58Check string too short"
        raise AddressError(msg)
    payload, checksum = raw[:-4], raw[-4:]
    if checksum != sha256d(payload)[:4]:
        msg = "Base58Check checksum mismatch"
        raise AddressError(msg)
    return payload


def encode_base58_address(version: int, hash160: bytes) -> str:
    """Encode a legacy address: ``version byte || hash160`` in Base58Check."""
    return base58check_encode(bytes([version]) + hash160)


def decode_base58_address(address: str) -> tuple[int, bytes]:
    """Split a legacy address into its version byte and 20-byte hash.

    Raises:
        AddressError: If the address is malformed or its payload is not 21 bytes.
    """
    payload = base58check_decode(address)
    if len(payload) != 21:
        msg = f"Invalid address payload length: {len(payload)}"
        raise AddressError(msg)
    return payload[0], payload[1:]


# ---------------------------------------------------------------------------
# Bech32 segwit addresses
# ---------------------------------------------------------------------------


def encode_segwit_address(hrp: str, witness_version: int, program: bytes) -> str:
    """Encode a witness program as a Bech32 address.

    Raises:
        AddressError: If the version/program pair is not a valid witness program.
    """
    address = bech32.encode(hrp, witness_version, program)
    if address is None:
        msg = f"Invalid witness program: version {witness_version}, {len(program)} bytes"
        raise AddressError(msg)
    return address


def decode_segwit_address(hrp: str, address: str) -> tuple[int, bytes]:
    """Decode a Bech32 address for network *hrp* into ``(version, program)``.

    Raises:
        AddressError: If the checksum, hrp or program is invalid.
    """
    witness_version, program = bech32.decode(hrp, address)
    if witness_version is None:
        msg = f"Invalid bech32 address for hrp {hrp!r}: {address}"
        raise AddressError(msg)
    return witness_version, bytes(program)


def is_segwit_address(hrp: str, address: str) -> bool:
    """Check if *address* is a valid Bech32 segwit address for *hrp*."""
    try:
        decode_segwit_address(hrp, address)
    except AddressError:
        return False
    return True
