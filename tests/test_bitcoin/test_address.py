"""Tests for address encoding and script address derivation — bitcoin/address.py."""

from __future__ import annotations

import pytest

from btcscript.bitcoin.address import (
    base58_decode,
    base58_encode,
    base58check_decode,
    base58check_encode,
    decode_base58_address,
    decode_segwit_address,
    encode_base58_address,
    encode_segwit_address,
    is_segwit_address,
)
from btcscript.bitcoin.opcodes import OpCode
from btcscript.bitcoin.script import (
    Script,
    to_multisig_script,
    to_p2pkh,
    to_p2sh_multisig_script,
    to_p2wpkh,
    to_p2wsh,
)
from btcscript.config.settings import ChainParams, Network, select_network
from btcscript.errors.script_errors import AddressError

# secp256k1 generator point, compressed (BIP173 test vectors use this key)
GENERATOR_PUBKEY = bytes.fromhex(
    "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
)
GENERATOR_PUBKEY_HASH = bytes.fromhex("751e76e8199196d454941c45d1b3a323f1433bd6")
GENESIS_HASH160 = bytes.fromhex("62e907b15cbf27d5425399ebf6f0fb50ebb88f18")
GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
P2WPKH_MAINNET = "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4"
P2WSH_MAINNET = "bc1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3qccfmv3"
P2WSH_TESTNET = "tb1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3q0sl5k7"


def _p2pk_script() -> Script:
    return Script().append([GENERATOR_PUBKEY, OpCode.OP_CHECKSIG]).freeze()


# ---------------------------------------------------------------------------
# Base58Check
# ---------------------------------------------------------------------------


class TestBase58:
    def test_encode_decode(self) -> None:
        data = b"\x00\x00hello"
        encoded = base58_encode(data)
        assert encoded.startswith("11")
        assert base58_decode(encoded) == data

    def test_empty(self) -> None:
        assert base58_encode(b"") == ""
        assert base58_decode("") == b""

    def test_invalid_character(self) -> None:
        with pytest.raises(AddressError) as exc_info:
            base58_decode("1O0l")
        assert exc_info.value.code == "invalid-address"

    def test_check_round_trip(self) -> None:
        payload = b"\x05" + b"\x11" * 20
        assert base58check_decode(base58check_encode(payload)) == payload

    def test_check_bad_checksum(self) -> None:
        encoded = base58check_encode(b"\x00" + b"\x22" * 20)
        tampered = encoded[:-1] + ("2" if encoded[-1] != "2" else "3")
        with pytest.raises(AddressError, match="checksum"):
            base58check_decode(tampered)

    def test_check_too_short(self) -> None:
        with pytest.raises(AddressError, match="too short"):
            base58check_decode("1")


class TestLegacyAddress:
    def test_genesis_address(self) -> None:
        assert encode_base58_address(0x00, GENESIS_HASH160) == GENESIS_ADDRESS

    def test_zero_hash(self) -> None:
        assert encode_base58_address(0x00, b"\x00" * 20) == "1111111111111111111114oLvT2"

    def test_decode(self) -> None:
        assert decode_base58_address(GENESIS_ADDRESS) == (0x00, GENESIS_HASH160)

    def test_decode_wrong_payload_length(self) -> None:
        with pytest.raises(AddressError, match="payload length"):
            decode_base58_address(base58check_encode(b"\x00" + b"\x01" * 19))


# ---------------------------------------------------------------------------
# Bech32
# ---------------------------------------------------------------------------


class TestSegwitAddress:
    def test_encode_p2wpkh(self) -> None:
        assert encode_segwit_address("bc", 0, GENERATOR_PUBKEY_HASH) == P2WPKH_MAINNET

    def test_decode_p2wpkh(self) -> None:
        assert decode_segwit_address("bc", P2WPKH_MAINNET) == (0, GENERATOR_PUBKEY_HASH)

    def test_uppercase_accepted(self) -> None:
        assert is_segwit_address("bc", P2WPKH_MAINNET.upper())

    def test_wrong_hrp(self) -> None:
        assert not is_segwit_address("tb", P2WPKH_MAINNET)
        with pytest.raises(AddressError):
            decode_segwit_address("tb", P2WPKH_MAINNET)

    def test_bad_checksum(self) -> None:
        tampered = P2WPKH_MAINNET[:-1] + ("q" if P2WPKH_MAINNET[-1] != "q" else "p")
        assert not is_segwit_address("bc", tampered)

    def test_legacy_address_is_not_segwit(self) -> None:
        assert not is_segwit_address("bc", GENESIS_ADDRESS)

    def test_invalid_v0_program_length(self) -> None:
        with pytest.raises(AddressError, match="Invalid witness program"):
            encode_segwit_address("bc", 0, b"\x00" * 10)


# ---------------------------------------------------------------------------
# Script.to_address
# ---------------------------------------------------------------------------


class TestScriptToAddress:
    def test_p2pkh(self, mainnet: ChainParams) -> None:
        assert to_p2pkh(GENESIS_HASH160).to_address(mainnet) == GENESIS_ADDRESS

    def test_p2pkh_testnet_prefix(self, testnet: ChainParams) -> None:
        address = to_p2pkh(GENESIS_HASH160).to_address(testnet)
        assert address is not None
        assert address[0] in "mn"

    def test_p2wpkh(self, placeholder_params: ChainParams) -> None:
        assert to_p2wpkh(GENERATOR_PUBKEY_HASH).to_address(placeholder_params) == P2WPKH_MAINNET

    def test_p2wsh(self, mainnet: ChainParams, testnet: ChainParams) -> None:
        script = to_p2wsh(_p2pk_script())
        assert script.to_address(mainnet) == P2WSH_MAINNET
        assert script.to_address(testnet) == P2WSH_TESTNET

    def test_p2sh(self, mainnet: ChainParams, pubkeys: list[bytes]) -> None:
        p2sh, redeem = to_p2sh_multisig_script(2, pubkeys)
        address = p2sh.to_address(mainnet)
        assert address is not None
        assert address.startswith("3")
        assert decode_base58_address(address) == (0x05, redeem.to_hash160())

    def test_default_params_follow_selected_network(self) -> None:
        script = to_p2wsh(_p2pk_script())
        assert script.to_address() == P2WSH_MAINNET
        select_network(Network.TESTNET)
        assert script.to_address() == P2WSH_TESTNET

    def test_nonstandard_returns_none(self, mainnet: ChainParams) -> None:
        script = Script().append([OpCode.OP_RETURN, b"hello"]).freeze()
        assert script.to_address(mainnet) is None

    def test_bare_multisig_returns_none(self, mainnet: ChainParams, pubkeys: list[bytes]) -> None:
        assert to_multisig_script(1, pubkeys).to_address(mainnet) is None

    def test_non_minimal_hash_push_returns_none(self, mainnet: ChainParams) -> None:
        # PUSHDATA1 header + 19 bytes is a 21-byte chunk holding the wrong hash size
        chunk = bytes([OpCode.OP_PUSHDATA1, 19]) + b"\x01" * 19
        payload = bytes([OpCode.OP_HASH160]) + chunk + bytes([OpCode.OP_EQUAL])
        script = Script.parse_from_payload(payload)
        assert script.is_p2sh()
        assert script.to_address(mainnet) is None


class TestScriptFromAddress:
    def test_p2pkh(self, mainnet: ChainParams) -> None:
        assert Script.from_address(GENESIS_ADDRESS, mainnet) == to_p2pkh(GENESIS_HASH160)

    def test_p2wpkh(self, mainnet: ChainParams) -> None:
        assert Script.from_address(P2WPKH_MAINNET, mainnet) == to_p2wpkh(GENERATOR_PUBKEY_HASH)

    def test_p2wsh(self, testnet: ChainParams) -> None:
        assert Script.from_address(P2WSH_TESTNET, testnet) == to_p2wsh(_p2pk_script())

    def test_p2sh_round_trip(self, mainnet: ChainParams, pubkeys: list[bytes]) -> None:
        p2sh, _ = to_p2sh_multisig_script(2, pubkeys)
        address = p2sh.to_address(mainnet)
        assert address is not None
        assert Script.from_address(address, mainnet) == p2sh

    def test_other_network(self, mainnet: ChainParams) -> None:
        with pytest.raises(AddressError):
            Script.from_address(P2WSH_TESTNET, mainnet)

    def test_unknown_version_byte(self, mainnet: ChainParams) -> None:
        address = encode_base58_address(0x30, GENESIS_HASH160)
        with pytest.raises(AddressError, match="version byte"):
            Script.from_address(address, mainnet)

    def test_unsupported_witness_version(self, mainnet: ChainParams) -> None:
        address = encode_segwit_address("bc", 1, b"\x00" * 32)
        with pytest.raises(AddressError, match="witness version"):
            Script.from_address(address, mainnet)

    def test_result_is_frozen(self, mainnet: ChainParams) -> None:
        assert Script.from_address(P2WPKH_MAINNET, mainnet).frozen
