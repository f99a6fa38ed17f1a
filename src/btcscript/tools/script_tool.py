#!/usr/bin/env python3
"""Script Tool — inspect and assemble Bitcoin scripts from the command line.

    # Decode a hex script: text form, template and address
    python -m btcscript.tools.script_tool decode 76a914...88ac

    # Assemble script text into hex
    python -m btcscript.tools.script_tool asm "OP_DUP OP_HASH160 <hex> OP_EQUALVERIFY OP_CHECKSIG"

    # Print the address of a hex script
    python -m btcscript.tools.script_tool address 0014...

    # Decode an 80-byte block header
    python -m btcscript.tools.script_tool header 0100000000...

The network defaults to ``BTCSCRIPT_NETWORK`` (mainnet); override it with
``--network testnet`` anywhere on the command line.
"""

from __future__ import annotations

import logging
import sys

from btcscript.bitcoin.block_header import BlockHeader
from btcscript.bitcoin.script import Script
from btcscript.config.settings import AppConfig, ChainParams, Network
from btcscript.errors.script_errors import ScriptError

logger = logging.getLogger(__name__)


def _cmd_decode(hex_str: str, params: ChainParams) -> None:
    """Print the text form, template and address of a hex script."""
    script = Script.from_hex(hex_str)
    address = script.to_address(params)
    print(f"asm:     {script.to_s()}")
    print(f"type:    {script.script_type()}")
    print(f"size:    {script.size()} bytes")
    print(f"address: {address if address is not None else '-'}")


def _cmd_asm(text: str) -> None:
    """Assemble script text and print the payload hex."""
    print(Script.from_string(text).to_hex())


def _cmd_address(hex_str: str, params: ChainParams) -> None:
    """Print the address of a hex script, exiting 1 if it has none."""
    address = Script.from_hex(hex_str).to_address(params)
    if address is None:
        print("Script matches no standard template")
        sys.exit(1)
    print(address)


def _cmd_header(hex_str: str) -> None:
    """Decode an 80-byte block header."""
    header = BlockHeader.parse_from_payload(bytes.fromhex(hex_str))
    print(f"hash:        {header.block_hash}")
    print(f"version:     {header.version}")
    print(f"prev_hash:   {header.prev_hash}")
    print(f"merkle_root: {header.merkle_root}")
    print(f"time:        {header.time}")
    print(f"bits:        0x{header.bits:08x}")
    print(f"nonce:       {header.nonce}")


def _split_network(args: list[str]) -> tuple[list[str], str | None]:
    """Remove a ``--network <name>`` pair from *args*."""
    if "--network" not in args:
        return args, None
    i = args.index("--network")
    if i + 1 >= len(args):
        print("Usage: --network <mainnet|testnet|regtest>")
        sys.exit(1)
    return args[:i] + args[i + 2 :], args[i + 1]


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args, network = _split_network(list(sys.argv[1:] if argv is None else argv))

    try:
        config = AppConfig() if network is None else AppConfig(network=Network(network))
    except ValueError:
        print(f"Unknown network: {network}")
        sys.exit(1)
    logging.basicConfig(level=logging.DEBUG if config.debug else config.log_level.value)
    params = config.chain_params()

    if not args:
        print(__doc__)
        sys.exit(1)

    cmd = args[0].lower()
    try:
        if cmd == "decode" and len(args) == 2:
            _cmd_decode(args[1], params)
        elif cmd == "asm" and len(args) >= 2:
            _cmd_asm(" ".join(args[1:]))
        elif cmd == "address" and len(args) == 2:
            _cmd_address(args[1], params)
        elif cmd == "header" and len(args) == 2:
            _cmd_header(args[1])
        elif cmd in ("decode", "asm", "address", "header"):
            print(f"Usage: script_tool {cmd} <argument>")
            sys.exit(1)
        else:
            print(f"Unknown command: {cmd}")
            print(__doc__)
            sys.exit(1)
    except (ScriptError, ValueError) as exc:
        logger.debug("command %s failed", cmd, exc_info=True)
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
