"""Bitcoin script — chunked script value, builders, parsing, classification.

Provides construction and parsing of standard locking scripts:
- P2PKH, P2WPKH, P2SH multisig and P2WSH builders
- Payload (wire format) serialization and parsing
- Human-readable script text (``from_string`` / ``to_s``)
- Standard template detection and address derivation

A :class:`Script` is an ordered list of chunks. Each chunk is ``bytes``:
either a single opcode byte, or one push unit (push header + data). A script
is mutable while it is being built; :meth:`Script.freeze` turns it into a
read-only value that can be shared freely.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import TYPE_CHECKING, Any

from btcscript.bitcoin import pushdata
from btcscript.bitcoin.address import (
    decode_base58_address,
    decode_segwit_address,
    encode_base58_address,
    encode_segwit_address,
    is_segwit_address,
)
from btcscript.bitcoin.opcodes import OPCODES, OpCode, OpcodeTable
from btcscript.config.settings import get_chain_params
from btcscript.errors.script_errors import (
    AddressError,
    FrozenScriptError,
    InvalidOpcodeError,
    ScriptParseError,
)
from btcscript.utils.crypto import hash160, sha256

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from btcscript.config.settings import ChainParams

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Limits
# ---------------------------------------------------------------------------

# witness version
WITNESS_VERSION = 0x00

# Maximum script length in bytes
MAX_SCRIPT_SIZE = 10000

# Maximum number of public keys per multisig
MAX_PUBKEYS_PER_MULTISIG = 20

# Maximum number of non-push operations per script
MAX_OPS_PER_SCRIPT = 201

# Maximum number of bytes pushable to the stack
MAX_SCRIPT_ELEMENT_SIZE = 520

# Threshold for nLockTime: below this value it is a block height, otherwise a UNIX timestamp
LOCKTIME_THRESHOLD = 500000000

# Push chunk sizes (header + data) of the standard templates
_HASH160_PUSH_SIZE = 21
_SHA256_PUSH_SIZE = 33

_INT_TOKEN = re.compile(r"-?\d+")


# ---------------------------------------------------------------------------
# Script Type
# ---------------------------------------------------------------------------


class ScriptType(enum.StrEnum):
    """Known script templates."""

    P2PKH = "pubkeyhash"
    P2WPKH = "witness_v0_keyhash"
    P2WSH = "witness_v0_scripthash"
    P2SH = "scripthash"
    NONSTANDARD = "nonstandard"


# ---------------------------------------------------------------------------
# Script
# ---------------------------------------------------------------------------


class Script:
    """An ordered sequence of opcode and push-data chunks.

    Append operations return ``self`` so scripts can be built by chaining::

        Script().append_opcode(OpCode.OP_DUP).append_data(pubkey_hash)

    Scripts compare equal when their chunk sequences are equal. Only frozen
    scripts are hashable.
    """

    def __init__(self, opcodes: OpcodeTable = OPCODES) -> None:
        self._chunks: list[bytes] = []
        self._opcodes = opcodes
        self._frozen = False

    # -- state -------------------------------------------------------------

    @property
    def chunks(self) -> tuple[bytes, ...]:
        """The chunk sequence as a read-only tuple."""
        return tuple(self._chunks)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> Script:
        """Make this script read-only and return it."""
        self._frozen = True
        return self

    def copy(self) -> Script:
        """Return a mutable copy of this script."""
        clone = Script(self._opcodes)
        clone._chunks = list(self._chunks)
        return clone

    def _check_mutable(self) -> None:
        if self._frozen:
            raise FrozenScriptError

    # -- building ----------------------------------------------------------

    def append(self, obj: Any) -> Script:
        """Append an opcode (``int``), data (bytes-like) or a list/tuple of those.

        The script is only modified if every element can be appended.

        Raises:
            InvalidOpcodeError: An integer is not a defined opcode.
            SizeError: A data element is too large to push.
            TypeError: An element is of any other type.
        """
        self._check_mutable()
        staged: list[bytes] = []
        self._stage(obj, staged)
        self._chunks.extend(staged)
        return self

    def append_opcode(self, opcode: int) -> Script:
        """Append a single opcode.

        Integers in -1..16 are converted to the matching small integer opcode
        (``OP_1NEGATE``, ``OP_0``, ``OP_1`` .. ``OP_16``).

        Raises:
            InvalidOpcodeError: If the opcode is not defined.
        """
        self._check_mutable()
        self._chunks.append(self._opcode_chunk(opcode))
        return self

    def append_data(self, data: bytes) -> Script:
        """Append *data* with the minimal push-data header.

        Raises:
            SizeError: If *data* is too large for any push header.
        """
        self._check_mutable()
        if not isinstance(data, (bytes, bytearray, memoryview)):
            msg = f"data must be bytes-like, got {type(data).__name__}"
            raise TypeError(msg)
        self._chunks.append(pushdata.encode(data))
        return self

    def _stage(self, obj: Any, staged: list[bytes]) -> None:
        if isinstance(obj, bool):
            msg = "cannot append bool to a script"
            raise TypeError(msg)
        if isinstance(obj, int):
            staged.append(self._opcode_chunk(obj))
        elif isinstance(obj, (bytes, bytearray, memoryview)):
            staged.append(pushdata.encode(obj))
        elif isinstance(obj, (list, tuple)):
            for item in obj:
                self._stage(item, staged)
        else:
            msg = f"cannot append {type(obj).__name__} to a script"
            raise TypeError(msg)

    def _opcode_chunk(self, opcode: int) -> bytes:
        value = int(opcode)
        if -1 <= value <= 16:
            value = self._opcodes.small_int_to_opcode(value)
        if not self._opcodes.is_defined(value):
            raise InvalidOpcodeError(int(opcode))
        return bytes([value])

    # -- factories ---------------------------------------------------------

    @classmethod
    def to_p2pkh(cls, pubkey_hash: bytes) -> Script:
        """P2PKH: ``OP_DUP OP_HASH160 <pubkey_hash> OP_EQUALVERIFY OP_CHECKSIG``."""
        return (
            cls()
            .append_opcode(OpCode.OP_DUP)
            .append_opcode(OpCode.OP_HASH160)
            .append_data(pubkey_hash)
            .append_opcode(OpCode.OP_EQUALVERIFY)
            .append_opcode(OpCode.OP_CHECKSIG)
            .freeze()
        )

    @classmethod
    def to_p2wpkh(cls, pubkey_hash: bytes) -> Script:
        """P2WPKH: ``0 <pubkey_hash>``."""
        return cls().append_opcode(WITNESS_VERSION).append_data(pubkey_hash).freeze()

    @classmethod
    def to_multisig_script(cls, m: int, pubkeys: Iterable[bytes]) -> Script:
        """Bare m-of-n multisig: ``<m> <pubkey>... <n> OP_CHECKMULTISIG``.

        Args:
            m: Number of signatures required.
            pubkeys: Public keys, in script order.

        The number of keys is not checked against ``MAX_PUBKEYS_PER_MULTISIG``.
        """
        keys = list(pubkeys)
        return (
            cls()
            .append(m)
            .append(keys)
            .append(len(keys))
            .append_opcode(OpCode.OP_CHECKMULTISIG)
            .freeze()
        )

    @classmethod
    def to_p2sh_multisig_script(cls, m: int, pubkeys: Iterable[bytes]) -> tuple[Script, Script]:
        """Build an m-of-n multisig redeem script and its P2SH wrapper.

        Returns:
            ``(p2sh_script, redeem_script)``. The redeem script is needed later
            to spend the output.
        """
        redeem_script = cls.to_multisig_script(m, pubkeys)
        p2sh_script = (
            cls()
            .append_opcode(OpCode.OP_HASH160)
            .append_data(redeem_script.to_hash160())
            .append_opcode(OpCode.OP_EQUAL)
            .freeze()
        )
        return p2sh_script, redeem_script

    @classmethod
    def to_p2wsh(cls, redeem_script: Script) -> Script:
        """P2WSH: ``0 <sha256(redeem_script)>``."""
        return cls().append_opcode(WITNESS_VERSION).append_data(redeem_script.to_sha256()).freeze()

    @classmethod
    def from_string(cls, text: str, *, opcodes: OpcodeTable = OPCODES) -> Script:
        """Build a script from whitespace-separated tokens.

        Each token is an opcode mnemonic (``OP_DUP``), a small integer
        (``-1`` .. ``16``) or hex data to push.

        Raises:
            ScriptParseError: If a token is none of these.
        """
        script = cls(opcodes)
        for token in text.split():
            opcode = opcodes.name_to_opcode(token)
            if opcode is None and _INT_TOKEN.fullmatch(token):
                opcode = opcodes.small_int_to_opcode(int(token))
            if opcode is not None:
                script.append_opcode(opcode)
                continue
            try:
                data = bytes.fromhex(token)
            except ValueError as exc:
                msg = f"Invalid script token: {token!r}"
                raise ScriptParseError(msg) from exc
            script.append_data(data)
        return script.freeze()

    @classmethod
    def from_address(cls, address: str, params: ChainParams | None = None) -> Script:
        """Build the locking script paying to *address*.

        Raises:
            AddressError: If the address is malformed or not for this network.
        """
        if params is None:
            params = get_chain_params()
        if is_segwit_address(params.bech32_hrp, address):
            version, program = decode_segwit_address(params.bech32_hrp, address)
            if version != WITNESS_VERSION:
                msg = f"Unsupported witness version: {version}"
                raise AddressError(msg)
            return cls().append_opcode(WITNESS_VERSION).append_data(program).freeze()

        version, hash160_ = decode_base58_address(address)
        if version == params.address_version:
            return cls.to_p2pkh(hash160_)
        if version == params.p2sh_version:
            return (
                cls()
                .append_opcode(OpCode.OP_HASH160)
                .append_data(hash160_)
                .append_opcode(OpCode.OP_EQUAL)
                .freeze()
            )
        msg = f"Unknown address version byte: 0x{version:02x}"
        raise AddressError(msg)

    # -- wire format -------------------------------------------------------

    @classmethod
    def parse_from_payload(cls, payload: bytes, *, opcodes: OpcodeTable = OPCODES) -> Script:
        """Parse a script from its wire format.

        Push chunks keep the header they were encoded with, so the result
        serializes back to exactly *payload*.

        Raises:
            TruncatedInputError: If a push runs past the end of *payload*.
        """
        buf = bytes(payload)
        script = cls(opcodes)
        offset = 0
        while offset < len(buf):
            consumed = pushdata.unit_size(buf, offset) or 1
            script._chunks.append(buf[offset : offset + consumed])
            offset += consumed
        logger.debug("parsed script: %d bytes, %d chunks", len(buf), len(script._chunks))
        return script.freeze()

    @classmethod
    def from_hex(cls, hex_str: str, *, opcodes: OpcodeTable = OPCODES) -> Script:
        """Parse a script from hex-encoded wire format."""
        try:
            payload = bytes.fromhex(hex_str)
        except ValueError as exc:
            msg = f"Invalid script hex: {hex_str!r}"
            raise ScriptParseError(msg) from exc
        return cls.parse_from_payload(payload, opcodes=opcodes)

    def to_payload(self) -> bytes:
        """Serialize to wire format."""
        return b"".join(self._chunks)

    def to_hex(self) -> str:
        return self.to_payload().hex()

    def size(self) -> int:
        """Script size in bytes."""
        return sum(len(chunk) for chunk in self._chunks)

    def to_sha256(self) -> bytes:
        """SHA-256 of the payload (the P2WSH commitment)."""
        return sha256(self.to_payload())

    def to_hash160(self) -> bytes:
        """Hash160 of the payload (the P2SH commitment)."""
        return hash160(self.to_payload())

    def to_s(self) -> str:
        """Human-readable script text, the inverse of :meth:`from_string`."""
        tokens = []
        for chunk in self._chunks:
            if pushdata.is_push_opcode(chunk[0]):
                tokens.append(pushdata.pushed_data(chunk).hex())
                continue
            small = self._opcodes.opcode_to_small_int(chunk[0])
            if small is not None:
                tokens.append(str(small))
            else:
                name = self._opcodes.opcode_to_name(chunk[0])
                tokens.append(name if name is not None else f"OP_UNKNOWN[0x{chunk[0]:02x}]")
        return " ".join(tokens)

    # -- classification ----------------------------------------------------

    def is_p2pkh(self) -> bool:
        """Whether this script is ``OP_DUP OP_HASH160 <20> OP_EQUALVERIFY OP_CHECKSIG``."""
        c = self._chunks
        if len(c) != 5:
            return False
        return (
            [c[0][0], c[1][0], c[3][0], c[4][0]]
            == [OpCode.OP_DUP, OpCode.OP_HASH160, OpCode.OP_EQUALVERIFY, OpCode.OP_CHECKSIG]
            and len(c[2]) == _HASH160_PUSH_SIZE
        )

    def is_p2wpkh(self) -> bool:
        c = self._chunks
        if len(c) != 2:
            return False
        return c[0][0] == WITNESS_VERSION and len(c[1]) == _HASH160_PUSH_SIZE

    def is_p2wsh(self) -> bool:
        c = self._chunks
        if len(c) != 2:
            return False
        return c[0][0] == WITNESS_VERSION and len(c[1]) == _SHA256_PUSH_SIZE

    def is_p2sh(self) -> bool:
        c = self._chunks
        if len(c) != 3:
            return False
        return (
            c[0][0] == OpCode.OP_HASH160
            and c[2][0] == OpCode.OP_EQUAL
            and len(c[1]) == _HASH160_PUSH_SIZE
        )

    def is_push_only(self) -> bool:
        """Whether every chunk is a data push (no plain opcodes)."""
        return all(pushdata.is_push_opcode(chunk[0]) for chunk in self._chunks)

    def is_witness_program(self) -> bool:
        return self.is_p2wpkh() or self.is_p2wsh()

    def script_type(self) -> ScriptType:
        """Classify the script as one of the standard templates."""
        if self.is_p2pkh():
            return ScriptType.P2PKH
        if self.is_p2wpkh():
            return ScriptType.P2WPKH
        if self.is_p2wsh():
            return ScriptType.P2WSH
        if self.is_p2sh():
            return ScriptType.P2SH
        return ScriptType.NONSTANDARD

    # -- policy limits -----------------------------------------------------

    def count_non_push_ops(self) -> int:
        """Number of plain opcode chunks (compared against ``MAX_OPS_PER_SCRIPT``)."""
        return sum(1 for chunk in self._chunks if not pushdata.is_push_opcode(chunk[0]))

    def within_policy_limits(self) -> bool:
        """Whether size, opcode count and push sizes are within the standard limits."""
        if self.size() > MAX_SCRIPT_SIZE:
            return False
        if self.count_non_push_ops() > MAX_OPS_PER_SCRIPT:
            return False
        return all(
            len(pushdata.pushed_data(chunk)) <= MAX_SCRIPT_ELEMENT_SIZE
            for chunk in self._chunks
            if pushdata.is_push_opcode(chunk[0])
        )

    # -- addresses ---------------------------------------------------------

    def to_address(self, params: ChainParams | None = None) -> str | None:
        """Derive the address of a standard script.

        Args:
            params: Network parameters; defaults to :func:`get_chain_params`.

        Returns:
            Base58Check text for P2PKH / P2SH, Bech32 text for P2WPKH / P2WSH,
            or None if the script matches no template.
        """
        if params is None:
            params = get_chain_params()
        if self.is_p2pkh():
            return self._base58_address(self._chunks[2], params.address_version)
        if self.is_p2wpkh():
            return self._bech32_address(params.bech32_hrp, 20)
        if self.is_p2wsh():
            return self._bech32_address(params.bech32_hrp, 32)
        if self.is_p2sh():
            return self._base58_address(self._chunks[1], params.p2sh_version)
        logger.debug("no address for nonstandard script %s", self.to_hex())
        return None

    def _base58_address(self, chunk: bytes, version: int) -> str | None:
        hash160_ = pushdata.pushed_data(chunk)
        if len(hash160_) != 20:
            logger.debug("embedded hash is %d bytes, expected 20", len(hash160_))
            return None
        return encode_base58_address(version, hash160_)

    def _bech32_address(self, hrp: str, program_size: int) -> str | None:
        program = pushdata.pushed_data(self._chunks[1])
        if len(program) != program_size:
            logger.debug("witness program is %d bytes, expected %d", len(program), program_size)
            return None
        return encode_segwit_address(hrp, WITNESS_VERSION, program)

    # -- dunder ------------------------------------------------------------

    def __iter__(self) -> Iterator[bytes]:
        return iter(tuple(self._chunks))

    def __len__(self) -> int:
        return len(self._chunks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Script):
            return NotImplemented
        return self._chunks == other._chunks

    def __hash__(self) -> int:
        if not self._frozen:
            msg = "unhashable type: mutable Script (call freeze() first)"
            raise TypeError(msg)
        return hash(tuple(self._chunks))

    def __str__(self) -> str:
        return self.to_s()

    def __repr__(self) -> str:
        return f"Script({self.to_s()!r})"


# ---------------------------------------------------------------------------
# Builder functions
# ---------------------------------------------------------------------------

to_p2pkh = Script.to_p2pkh
to_p2wpkh = Script.to_p2wpkh
to_multisig_script = Script.to_multisig_script
to_p2sh_multisig_script = Script.to_p2sh_multisig_script
to_p2wsh = Script.to_p2wsh
from_string = Script.from_string
parse_from_payload = Script.parse_from_payload
