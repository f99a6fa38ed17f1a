"""Tests for the block header codec — bitcoin/block_header.py."""

from __future__ import annotations

import pytest

from btcscript.bitcoin.block_header import HEADER_SIZE, BlockHeader
from btcscript.errors.script_errors import TruncatedInputError

GENESIS_HEADER = bytes.fromhex(
    "0100000000000000000000000000000000000000000000000000000000000000"
    "000000003ba3edfd7a7b12b27ac72c3e67768f617fc81bc3888a51323a9fb8aa"
    "4b1e5e4a29ab5f49ffff001d1dac2b7c"
)


class TestGenesis:
    def test_fields(self) -> None:
        header = BlockHeader.parse_from_payload(GENESIS_HEADER)
        assert header.version == 1
        assert header.prev_hash == "00" * 32
        assert header.merkle_root == (
            "4a5e1e4baab89f3a32518a88c31bc87f618f76673e2cc77ab2127b7afdeda33b"
        )
        assert header.time == 1231006505
        assert header.bits == 0x1D00FFFF
        assert header.nonce == 2083236893

    def test_block_hash(self) -> None:
        header = BlockHeader.parse_from_payload(GENESIS_HEADER)
        assert header.block_hash == (
            "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"
        )

    def test_round_trip(self) -> None:
        assert BlockHeader.parse_from_payload(GENESIS_HEADER).to_payload() == GENESIS_HEADER


class TestParse:
    def test_header_size(self) -> None:
        assert HEADER_SIZE == 80

    def test_trailing_bytes_ignored(self) -> None:
        header = BlockHeader.parse_from_payload(GENESIS_HEADER + b"\x01\x00")
        assert header.nonce == 2083236893

    def test_truncated(self) -> None:
        with pytest.raises(TruncatedInputError, match="80 bytes"):
            BlockHeader.parse_from_payload(GENESIS_HEADER[:79])
