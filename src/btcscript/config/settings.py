"""Chain parameters and application settings.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``BTCSCRIPT_``, nested via ``__``)
2. YAML config file (``config_path`` or ``BTCSCRIPT_CONFIG_PATH`` env var)
3. Defaults defined here

Script address derivation reads the process-wide chain parameters through
:func:`get_chain_params`; they default to mainnet.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enums for validated choices
# ---------------------------------------------------------------------------


class Network(enum.StrEnum):
    """Supported networks."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    REGTEST = "regtest"


class LogLevel(enum.StrEnum):
    """Logging levels accepted by the CLI."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Chain parameters
# ---------------------------------------------------------------------------


class ChainParams(BaseSettings):
    """Address encoding parameters of one network."""

    model_config = SettingsConfigDict(
        env_prefix="BTCSCRIPT_CHAIN__",
        case_sensitive=False,
        frozen=True,
    )

    address_version: int = Field(default=0x00, description="P2PKH base58 version byte")
    p2sh_version: int = Field(default=0x05, description="P2SH base58 version byte")
    bech32_hrp: str = Field(default="bc", description="Segwit human-readable part")

    @field_validator("address_version", "p2sh_version")
    @classmethod
    def _single_byte(cls, value: int) -> int:
        if not 0 <= value <= 0xFF:
            msg = f"version byte out of range: {value}"
            raise ValueError(msg)
        return value

    @field_validator("bech32_hrp")
    @classmethod
    def _ascii_hrp(cls, value: str) -> str:
        if not value or not value.isascii() or any(ord(c) < 33 or ord(c) > 126 for c in value):
            msg = f"invalid bech32 hrp: {value!r}"
            raise ValueError(msg)
        return value.lower()

    @classmethod
    def for_network(cls, network: Network | str) -> ChainParams:
        """Return the built-in parameters for *network*."""
        return _NETWORK_PARAMS[Network(network)]


_NETWORK_PARAMS: dict[Network, ChainParams] = {
    Network.MAINNET: ChainParams(address_version=0x00, p2sh_version=0x05, bech32_hrp="bc"),
    Network.TESTNET: ChainParams(address_version=0x6F, p2sh_version=0xC4, bech32_hrp="tb"),
    Network.REGTEST: ChainParams(address_version=0x6F, p2sh_version=0xC4, bech32_hrp="bcrt"),
}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration.

    Loads settings from environment variables (``BTCSCRIPT_`` prefix),
    an optional YAML file, and built-in defaults. ``chain`` overrides the
    built-in parameters of ``network`` when set.
    """

    model_config = SettingsConfigDict(
        env_prefix="BTCSCRIPT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: LogLevel = LogLevel.WARNING
    network: Network = Network.MAINNET
    config_path: str = ""

    chain: ChainParams | None = None

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        # YAML values serve as defaults; env vars (already in *values*) win.
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                merged = {**val, **values[key]}
                values[key] = merged
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))

    def chain_params(self) -> ChainParams:
        """The effective chain parameters for this configuration."""
        if self.chain is not None:
            return self.chain
        return ChainParams.for_network(self.network)


# ---------------------------------------------------------------------------
# Process-wide selection
# ---------------------------------------------------------------------------

_current: ChainParams = _NETWORK_PARAMS[Network.MAINNET]


def get_chain_params() -> ChainParams:
    """Return the chain parameters used when none are passed explicitly."""
    return _current


def set_chain_params(params: ChainParams) -> None:
    """Replace the process-wide chain parameters."""
    global _current  # noqa: PLW0603
    _current = params
    logger.debug(
        "chain params set: address_version=0x%02x p2sh_version=0x%02x hrp=%s",
        params.address_version,
        params.p2sh_version,
        params.bech32_hrp,
    )


def select_network(network: Network | str) -> ChainParams:
    """Switch the process-wide chain parameters to a built-in network."""
    params = ChainParams.for_network(network)
    set_chain_params(params)
    return params
