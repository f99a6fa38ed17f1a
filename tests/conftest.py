"""Shared test fixtures for py-btcscript test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from btcscript.config.settings import ChainParams, Network, get_chain_params, set_chain_params

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _restore_chain_params() -> Iterator[None]:
    """Undo process-wide network selection made by a test."""
    saved = get_chain_params()
    yield
    set_chain_params(saved)


@pytest.fixture
def mainnet() -> ChainParams:
    return ChainParams.for_network(Network.MAINNET)


@pytest.fixture
def testnet() -> ChainParams:
    return ChainParams.for_network(Network.TESTNET)


@pytest.fixture
def placeholder_params() -> ChainParams:
    """Network parameters ``0x00 / 0x05 / "bc"``."""
    return ChainParams(address_version=0x00, p2sh_version=0x05, bech32_hrp="bc")


@pytest.fixture
def pubkeys() -> list[bytes]:
    """Three distinct fake compressed public keys."""
    return [bytes([0x02]) + bytes([i]) * 32 for i in (1, 2, 3)]
