"""Configuration — chain parameters and application settings."""

from __future__ import annotations

from btcscript.config.settings import (
    AppConfig,
    ChainParams,
    Network,
    get_chain_params,
    select_network,
    set_chain_params,
)

__all__ = [
    "AppConfig",
    "ChainParams",
    "Network",
    "get_chain_params",
    "select_network",
    "set_chain_params",
]
