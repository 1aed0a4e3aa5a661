from __future__ import annotations

"""
Resolve the tip hash for a block notation without building or running the node.

Run:
    python -m scripts.resolve_tip -n 0.5M -c bsc-testnet
"""

import argparse
import sys

from adapters.hashsource_rpc import RpcBlockHashSource
from bsc_rpc import ResolutionFailed, block_hex
from config import DEFAULT_BLOCK_NOTATION, DEFAULT_CHAIN, SUPPORTED_CHAINS
from core.types import Network
from notation import InvalidNotation, parse_block_number


def main() -> int:
    parser = argparse.ArgumentParser(description="Print the BSC block hash for a block notation.")
    parser.add_argument("-n", dest="block_number", default=DEFAULT_BLOCK_NOTATION)
    parser.add_argument("-c", dest="chain", choices=SUPPORTED_CHAINS, default=DEFAULT_CHAIN)
    args = parser.parse_args()

    try:
        number = parse_block_number(args.block_number)
    except InvalidNotation as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        block_hash = RpcBlockHashSource().block_hash(number, Network.from_chain(args.chain))
    except ResolutionFailed as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{args.chain} block #{number} ({block_hex(number)}): {block_hash}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
