"""Hash functions behind script commitments and address payloads.

- ``hash160`` of a public key is the P2PKH / P2WPKH program; of a redeem
  script payload it is the P2SH commitment
- ``sha256`` of a witness script payload is the P2WSH program
- ``sha256d`` supplies Base58Check checksums and block header hashes
"""

from __future__ import annotations

import hashlib

from Crypto.Hash import RIPEMD160


def sha256(data: bytes) -> bytes:
    """Single SHA-256 hash."""
    return hashlib.sha256(data).digest()


def sha256d(data: bytes) -> bytes:
    """Double SHA-256 hash (SHA256(SHA256(data)))."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def ripemd160(data: bytes) -> bytes:
    """RIPEMD-160 hash.

    OpenSSL 3 builds may not ship RIPEMD-160 in the default provider, in
    which case pycryptodome's implementation is used.
    """
    try:
        h = hashlib.new("ripemd160")
    except ValueError:
        return RIPEMD160.new(data).digest()
    h.update(data)
    return h.digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160(SHA-256(data)) — standard Bitcoin Hash160."""
    return ripemd160(sha256(data))
