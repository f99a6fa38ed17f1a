"""Block header serialisation — the fixed 80-byte header record."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from btcscript.errors.script_errors import TruncatedInputError
from btcscript.utils.crypto import sha256d

# version, prev_hash, merkle_root, time, bits, nonce
_HEADER_FORMAT = "<I32s32sIII"
HEADER_SIZE = struct.calcsize(_HEADER_FORMAT)


@dataclass
class BlockHeader:
    """A block header.

    Attributes:
        version: Block version.
        prev_hash: Previous block hash in display (reversed) hex.
        merkle_root: Merkle root in display (reversed) hex.
        time: Block timestamp (UNIX seconds).
        bits: Compact difficulty target.
        nonce: Proof-of-work nonce.
    """

    version: int
    prev_hash: str
    merkle_root: str
    time: int
    bits: int
    nonce: int

    @classmethod
    def parse_from_payload(cls, payload: bytes) -> BlockHeader:
        """Deserialize a header from the first 80 bytes of *payload*.

        Raises:
            TruncatedInputError: If fewer than 80 bytes are given.
        """
        if len(payload) < HEADER_SIZE:
            msg = f"block header needs {HEADER_SIZE} bytes, got {len(payload)}"
            raise TruncatedInputError(msg)
        version, prev_hash, merkle_root, time, bits, nonce = struct.unpack_from(
            _HEADER_FORMAT, payload
        )
        return cls(
            version=version,
            prev_hash=prev_hash[::-1].hex(),
            merkle_root=merkle_root[::-1].hex(),
            time=time,
            bits=bits,
            nonce=nonce,
        )

    def to_payload(self) -> bytes:
        """Serialize the header to its 80-byte wire format."""
        return struct.pack(
            _HEADER_FORMAT,
            self.version,
            bytes.fromhex(self.prev_hash)[::-1],
            bytes.fromhex(self.merkle_root)[::-1],
            self.time,
            self.bits,
            self.nonce,
        )

    @property
    def block_hash(self) -> str:
        """Double SHA-256 of the header, in display (reversed) hex."""
        return sha256d(self.to_payload())[::-1].hex()
